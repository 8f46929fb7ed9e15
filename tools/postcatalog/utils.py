from __future__ import annotations

import math
import pathlib
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional, Tuple

import pydantic
import yaml

from .config import (
    FENCE_LINE,
    HTML_TAG,
    SLUG_RE,
    WORD,
    WORDS_PER_MINUTE,
    SiteConfig,
)
from .errors import ConfigError


def slugify(s: str) -> str:
    return re.sub(r"-{2,}", "-", SLUG_RE.sub("-", s.lower()).strip("-"))


def slug_from_path(rel: pathlib.PurePath | str) -> str:
    """
    Turn a content path relative to the content root into a slug.

    `Notes/Hello World.md` -> `notes/hello-world`; a trailing `index`
    segment is dropped, so `hello/index.md` -> `hello`.
    """
    rel = pathlib.PurePosixPath(pathlib.PurePath(rel).as_posix())
    parts = list(rel.with_suffix("").parts)
    if len(parts) > 1 and parts[-1].lower() == "index":
        parts.pop()
    return "/".join(s for s in (slugify(p) for p in parts) if s)


def natural_key(s: str):
    return [int(t) if t.isdigit() else t for t in re.split(r'(\d+)', s.lower())]


def read_yaml(path: pathlib.Path) -> Dict[str, Any]:
    if path.exists():
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return {}


def _norm_text(s: str) -> str:
    return s.replace('\r\n', '\n').replace('\r', '\n').lstrip('\ufeff')


def coerce_instant(v: Any) -> datetime:
    """
    Normalize a front-matter date to an aware UTC datetime.

    Content files hand over ISO strings (front matter keeps timestamps as
    text); callers building entries by hand may pass `date`/`datetime`.
    Date-only values become midnight UTC; naive values are UTC.
    Raises ValueError for anything that does not parse.
    """
    if isinstance(v, bool):
        raise ValueError(f"not a date: {v!r}")
    if isinstance(v, datetime):
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
    if isinstance(v, date):
        return datetime(v.year, v.month, v.day, tzinfo=timezone.utc)
    if isinstance(v, str):
        s = v.strip().strip('"').strip("'")
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(s)
        except ValueError:
            raise ValueError(f"not an ISO 8601 date: {v!r}") from None
        return coerce_instant(parsed)
    raise ValueError(f"not a date: {v!r}")


def reading_time(body: str) -> int:
    """Minutes to read `body` at WORDS_PER_MINUTE, never less than 1."""
    text = FENCE_LINE.sub(" ", body)
    text = HTML_TAG.sub(" ", text)
    words = len(WORD.findall(text))
    return max(1, math.ceil(words / WORDS_PER_MINUTE))


class FrontMatterLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as strings for coerce_instant."""


FrontMatterLoader.add_constructor(
    "tag:yaml.org,2002:timestamp", FrontMatterLoader.construct_yaml_str
)


def parse_frontmatter(text: str) -> Tuple[Optional[Any], str]:
    s = text.lstrip()
    if not s.startswith("---\n") and not s.startswith("---\r\n"):
        return None, text

    lines = s.splitlines(keepends=True)
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            fm_text = "".join(lines[1:i])
            body = "".join(lines[i + 1 :])
            fm = yaml.load(fm_text, Loader=FrontMatterLoader)
            return ({} if fm is None else fm), body
    return None, text


def load_site_config(path: pathlib.Path) -> SiteConfig:
    """Read `site.yml`; a missing file means all defaults."""
    try:
        data = read_yaml(path)
    except yaml.YAMLError as exc:
        raise ConfigError(f"{path}: malformed YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    try:
        return SiteConfig.model_validate(data)
    except pydantic.ValidationError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
