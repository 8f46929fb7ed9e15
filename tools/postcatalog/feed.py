"""RSS 2.0 rendering for the published post list."""

from __future__ import annotations

import html
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Iterable, Optional

from .config import BLOG_PREFIX, SiteConfig
from .records import PostRecord


def post_path(post: PostRecord) -> str:
    return f"{BLOG_PREFIX}/{post.slug}"


def post_url(site: SiteConfig, post: PostRecord) -> str:
    return site.absolute_url(post_path(post))


def _item_xml(site: SiteConfig, post: PostRecord) -> str:
    link = html.escape(post_url(site, post))
    lines = [
        "  <item>",
        f"    <title>{html.escape(post.title)}</title>",
        f"    <link>{link}</link>",
        f'    <guid isPermaLink="true">{link}</guid>',
        f"    <pubDate>{format_datetime(post.date)}</pubDate>",
    ]
    if post.description:
        lines.append(
            f"    <description>{html.escape(post.description)}</description>"
        )
    for tag in sorted(post.tags):
        lines.append(f"    <category>{html.escape(tag)}</category>")
    lines.append("  </item>")
    return "\n".join(lines)


def render_rss(
    site: SiteConfig,
    posts: Iterable[PostRecord],
    build_date: Optional[datetime] = None,
) -> str:
    """
    Render an RSS document with one item per post, in the order given.

    Pass `ListingEngine.feed()` so the items are reverse-chronological.
    """
    build_date = build_date or datetime.now(timezone.utc)
    items = "\n".join(_item_xml(site, p) for p in posts)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
<channel>
  <title>{html.escape(site.title)}</title>
  <link>{html.escape(site.absolute_url("/"))}</link>
  <description>{html.escape(site.description)}</description>
  <lastBuildDate>{format_datetime(build_date)}</lastBuildDate>
{items}
</channel>
</rss>
"""
