"""Validated post records and the read-only views built from them."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, FrozenSet, Mapping, NamedTuple, Optional, Tuple

from pydantic import BaseModel, field_validator

from .utils import coerce_instant


class RawEntry(NamedTuple):
    """One content item as handed over by a content source."""

    path: str
    front_matter: Any
    body: str = ""


class PostRecord(BaseModel):
    """One authored post after front-matter validation."""

    model_config = {"frozen": True}

    slug: str
    source: str
    title: str
    description: Optional[str] = None
    date: datetime
    tags: FrozenSet[str] = frozenset()
    draft: bool = False
    body: str = ""
    reading_time: int = 1

    @field_validator("title")
    @classmethod
    def _title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("description", mode="before")
    @classmethod
    def _blank_description_is_absent(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("date", mode="before")
    @classmethod
    def _parse_date(cls, v):
        if v is None:
            raise ValueError("date is required")
        return coerce_instant(v)

    @field_validator("tags", mode="before")
    @classmethod
    def _collect_tags(cls, v):
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = v.split(",")
        if not isinstance(v, (list, tuple, set, frozenset)):
            raise ValueError("tags must be a list of strings")
        tags = set()
        for t in v:
            if not isinstance(t, str):
                raise ValueError(f"tag {t!r} is not a string")
            if t.strip():
                tags.add(t.strip())
        return frozenset(tags)

    @field_validator("draft", mode="before")
    @classmethod
    def _draft_defaults_off(cls, v):
        return False if v is None else v

    def summary(self) -> Dict[str, Any]:
        """Body-less, JSON-friendly view for listing pages."""
        return {
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "date": self.date.isoformat(),
            "tags": sorted(self.tags),
            "readingTime": self.reading_time,
        }


class ListingPage(BaseModel):
    model_config = {"frozen": True}

    items: Tuple[PostRecord, ...]
    page_number: int
    page_size: int
    total_pages: int
    total_items: int

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages

    def summary(self) -> Dict[str, Any]:
        return {
            "pageNumber": self.page_number,
            "pageSize": self.page_size,
            "totalPages": self.total_pages,
            "totalItems": self.total_items,
            "posts": [p.summary() for p in self.items],
        }


class TagCount(NamedTuple):
    tag: str
    count: int


class Catalog(Mapping[str, PostRecord]):
    """
    Immutable slug -> PostRecord mapping for one build.

    `tags` holds every distinct tag seen at load time, drafts included.
    """

    __slots__ = ("_posts", "_tags")

    def __init__(self, posts: Mapping[str, PostRecord]):
        self._posts: Dict[str, PostRecord] = dict(posts)
        self._tags: FrozenSet[str] = frozenset(
            t for p in self._posts.values() for t in p.tags
        )

    @property
    def tags(self) -> FrozenSet[str]:
        return self._tags

    def __getitem__(self, slug: str) -> PostRecord:
        return self._posts[slug]

    def __iter__(self):
        return iter(self._posts)

    def __len__(self) -> int:
        return len(self._posts)

    def __repr__(self) -> str:
        return f"Catalog({len(self._posts)} posts)"
