"""
Filesystem content source.

Walks a content directory and yields one RawEntry per post file:

- `.md` / `.mdx`: YAML front matter between `---` lines, the rest is body
- `.ipynb`: front matter from a leading raw `---` cell or the notebook
  metadata; hidden cells are dropped and the rest exported to markdown

Paths in the entries are relative to the content directory, since that is
what slugs are derived from.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Any, Dict, Iterator, Tuple

import nbformat
import yaml
from nbconvert import MarkdownExporter
from nbformat.reader import NotJSONError
from nbformat.validator import validate

from .config import CONTENT_SUFFIXES
from .errors import ValidationError
from .loader import FRONTMATTER_FIELDS
from .records import RawEntry
from .utils import _norm_text, natural_key, parse_frontmatter, slug_from_path
from .visibility import strip_hidden_cells

logger = logging.getLogger(__name__)


def _frontmatter_or_fail(text: str, rel: str) -> Tuple[Any, str]:
    try:
        return parse_frontmatter(text)
    except yaml.YAMLError as exc:
        raise ValidationError(
            slug_from_path(rel) or rel, "front_matter", f"malformed YAML: {exc}"
        ) from exc


def read_markdown(path: pathlib.Path, rel: str) -> RawEntry:
    try:
        text = _norm_text(path.read_text(encoding="utf-8"))
    except UnicodeDecodeError as exc:
        raise ValidationError(
            slug_from_path(rel) or rel, "encoding", f"not valid UTF-8: {exc}"
        ) from exc
    fm, body = _frontmatter_or_fail(text, rel)
    if fm is None:
        logger.warning("%s has no front matter", rel)
        fm = {}
    return RawEntry(path=rel, front_matter=fm, body=body)


def _notebook_frontmatter(nb, rel: str) -> Dict[str, Any]:
    if nb.cells and nb.cells[0].get("cell_type") == "raw":
        fm, _ = _frontmatter_or_fail(_norm_text(nb.cells[0].get("source", "")), rel)
        if fm is not None:
            nb.cells = nb.cells[1:]
            return fm
    meta = nb.metadata or {}
    return {k: meta[k] for k in FRONTMATTER_FIELDS if k in meta}


def read_notebook(path: pathlib.Path, rel: str) -> RawEntry:
    try:
        nb = nbformat.read(str(path), as_version=4)
        validate(nb)
    except (NotJSONError, nbformat.ValidationError) as exc:
        raise ValidationError(
            slug_from_path(rel) or rel, "notebook", str(exc).split("\n", 1)[0]
        ) from exc

    fm = _notebook_frontmatter(nb, rel)
    strip_hidden_cells(nb)

    body, _ = MarkdownExporter().from_notebook_node(nb)
    return RawEntry(path=rel, front_matter=fm, body=_norm_text(body))


def iter_content(content_dir: pathlib.Path) -> Iterator[RawEntry]:
    """Yield entries for every post file under `content_dir`, in path order."""
    if not content_dir.exists():
        logger.warning("content directory %s does not exist", content_dir)
        return

    # `_drafts/`, `.ipynb_checkpoints/` and the like are not content.
    files = [
        p
        for p in content_dir.rglob("*")
        if p.is_file()
        and p.suffix.lower() in CONTENT_SUFFIXES
        and not any(
            part.startswith((".", "_"))
            for part in p.relative_to(content_dir).parts
        )
    ]
    files.sort(key=lambda p: natural_key(p.relative_to(content_dir).as_posix()))

    for p in files:
        rel = p.relative_to(content_dir).as_posix()
        if p.suffix.lower() == ".ipynb":
            yield read_notebook(p, rel)
        else:
            yield read_markdown(p, rel)
