from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, Union

import pydantic

from .errors import DuplicateSlugError, ValidationError
from .records import Catalog, PostRecord, RawEntry
from .utils import reading_time, slug_from_path

logger = logging.getLogger(__name__)

# Front-matter keys the record schema knows about; anything else is the
# renderer's business and is ignored here.
FRONTMATTER_FIELDS = ("title", "description", "date", "tags", "draft")


def _unpack(item: Union[RawEntry, Mapping[str, Any]]) -> RawEntry:
    if isinstance(item, RawEntry):
        return item
    if isinstance(item, Mapping):
        return RawEntry(
            path=item["path"],
            front_matter=item.get("front_matter"),
            body=item.get("body") or "",
        )
    return RawEntry(*item)


def build_record(entry: RawEntry) -> PostRecord:
    """Validate one raw entry into a PostRecord or raise ValidationError."""
    path = str(entry.path)
    slug = slug_from_path(path)
    if not slug:
        raise ValidationError(path, "slug", "path does not yield a slug")

    fm = entry.front_matter
    if fm is None:
        fm = {}
    if not isinstance(fm, Mapping):
        raise ValidationError(
            slug, "front_matter", f"expected a mapping, got {type(fm).__name__}"
        )

    body = entry.body or ""
    fields = {k: fm[k] for k in FRONTMATTER_FIELDS if k in fm}
    try:
        return PostRecord(
            slug=slug,
            source=path,
            body=body,
            reading_time=reading_time(body),
            **fields,
        )
    except pydantic.ValidationError as exc:
        err = exc.errors()[0]
        field = str(err["loc"][0]) if err.get("loc") else "front_matter"
        raise ValidationError(slug, field, err["msg"]) from exc


def load(raw_entries: Iterable[Union[RawEntry, Mapping[str, Any]]]) -> Catalog:
    """
    Build the catalog for one run.

    Fails on the first malformed entry or slug collision rather than
    returning a partial catalog.
    """
    posts: Dict[str, PostRecord] = {}
    for item in raw_entries:
        entry = _unpack(item)
        slug = slug_from_path(str(entry.path))
        if slug in posts:
            raise DuplicateSlugError(slug, posts[slug].source, str(entry.path))
        record = build_record(entry)
        logger.debug(
            "loaded %s (%s%s)",
            record.slug,
            record.date.date().isoformat(),
            ", draft" if record.draft else "",
        )
        posts[record.slug] = record

    catalog = Catalog(posts)
    logger.info(
        "catalog loaded: %d posts, %d tags", len(catalog), len(catalog.tags)
    )
    return catalog
