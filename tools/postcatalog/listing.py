"""
Read-only views over a loaded Catalog.

Every view is derived from `published()`: drafts never show up, and the
order is date descending with slug ascending on ties, so two published posts
never compare equal and pagination is stable between runs.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import List, Optional, Tuple

from .errors import InvalidArgument
from .records import Catalog, ListingPage, PostRecord, TagCount


def _check_positive(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidArgument(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidArgument(f"{name} must be positive, got {value}")


class ListingEngine:
    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        posts = sorted(
            (p for p in catalog.values() if not p.draft), key=lambda p: p.slug
        )
        # Stable sort: equal dates keep the slug order from above.
        posts.sort(key=lambda p: p.date, reverse=True)
        self._published: Tuple[PostRecord, ...] = tuple(posts)

    def published(self) -> List[PostRecord]:
        return list(self._published)

    def recent(self, n: int) -> List[PostRecord]:
        if isinstance(n, bool) or not isinstance(n, int):
            raise InvalidArgument(f"n must be an integer, got {n!r}")
        if n < 0:
            raise InvalidArgument(f"n must not be negative, got {n}")
        return list(self._published[:n])

    def page(self, page_number: int, page_size: int) -> ListingPage:
        """
        One page of the archive. Pages past the end come back empty with
        the real totals so the renderer can show an empty state.
        """
        _check_positive("page_number", page_number)
        _check_positive("page_size", page_size)
        total = len(self._published)
        start = (page_number - 1) * page_size
        return ListingPage(
            items=self._published[start : start + page_size],
            page_number=page_number,
            page_size=page_size,
            total_pages=math.ceil(total / page_size),
            total_items=total,
        )

    def pages(self, page_size: int) -> List[ListingPage]:
        """All archive pages; an empty catalog still gets an empty page 1."""
        first = self.page(1, page_size)
        rest = [self.page(n, page_size) for n in range(2, first.total_pages + 1)]
        return [first] + rest

    def by_tag(self, tag: str) -> List[PostRecord]:
        return [p for p in self._published if tag in p.tags]

    def all_tags(self) -> List[TagCount]:
        counts = Counter(t for p in self._published for t in p.tags)
        return [
            TagCount(tag, count)
            for tag, count in sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))
        ]

    def feed(self, limit: Optional[int] = None) -> List[PostRecord]:
        """Posts for syndication, in true reverse-chronological order."""
        if limit is None:
            return self.published()
        return self.recent(limit)

    def neighbours(
        self, slug: str
    ) -> Tuple[Optional[PostRecord], Optional[PostRecord]]:
        """(newer, older) published posts around `slug`."""
        for i, p in enumerate(self._published):
            if p.slug != slug:
                continue
            newer = self._published[i - 1] if i > 0 else None
            older = (
                self._published[i + 1] if i + 1 < len(self._published) else None
            )
            return newer, older
        return None, None
