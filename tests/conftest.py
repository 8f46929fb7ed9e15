"""Shared fixtures for postcatalog tests."""

from datetime import date

import pytest

from postcatalog.records import RawEntry


def make_entry(path, title="A post", day=None, body="Some words.", **fm):
    """Build a RawEntry with sensible front matter; `None` values are omitted."""
    front = {"title": title, "date": day}
    front.update(fm)
    front = {k: v for k, v in front.items() if v is not None}
    return RawEntry(path=path, front_matter=front, body=body)


@pytest.fixture
def january_entries():
    """Five published posts dated Jan 1-5 plus a draft on Jan 6."""
    entries = [
        make_entry(f"post-{d}.md", title=f"Jan {d}", day=date(2024, 1, d))
        for d in range(1, 6)
    ]
    entries.append(
        make_entry("draft.md", title="Jan 6", day=date(2024, 1, 6), draft=True)
    )
    return entries
