#!/usr/bin/env python3
"""
Build-time listing generator for the blog.

Reads `site.yml` and the post collection, then writes what the page
templates need into the output directory:

- home.json           latest posts for the landing page
- blog/<n>.json       paginated archive, page 1 always present
- posts.json          every published post with prev/next links
- tags.json           tag -> published post count
- tags/<tag>.json     posts per tag
- rss.xml             feed of all published posts

Any malformed post or duplicate slug stops the build before anything
is written.
"""

from __future__ import annotations

import argparse
import json
import logging
import pathlib
import sys
from typing import Any, Dict, Iterable, List, Optional, Set

from .config import CONTENT_DIR, LISTING_OUT, SITE_FILE, SiteConfig
from .errors import CatalogError
from .feed import post_path, render_rss
from .listing import ListingEngine
from .loader import load
from .sources import iter_content
from .utils import load_site_config, slugify


def _link(post) -> Optional[Dict[str, str]]:
    if post is None:
        return None
    return {"title": post.title, "url": post_path(post)}


def tag_slugs(tags: Iterable[str]) -> Dict[str, str]:
    """
    Map each tag to a file-safe slug, unique across `tags`.

    Tags are case-sensitive, so `C` and `c` both slugify to `c`; later ones
    in sorted order get `-2`, `-3`, ...
    """
    taken: Set[str] = set()
    out: Dict[str, str] = {}
    for tag in sorted(tags):
        base = slugify(tag) or "tag"
        slug, n = base, 1
        while slug in taken:
            n += 1
            slug = f"{base}-{n}"
        taken.add(slug)
        out[tag] = slug
    return out


def _write_json(path: pathlib.Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8"
    )


def post_index(engine: ListingEngine) -> List[Dict[str, Any]]:
    out = []
    for post in engine.published():
        newer, older = engine.neighbours(post.slug)
        entry = post.summary()
        entry["prev"] = _link(newer)
        entry["next"] = _link(older)
        out.append(entry)
    return out


def write_listings(
    engine: ListingEngine, site: SiteConfig, out_dir: pathlib.Path
) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)

    recent = engine.recent(site.num_posts_on_homepage)
    _write_json(out_dir / "home.json", [p.summary() for p in recent])
    print(f"✓ home with {len(recent)} posts")

    pages = engine.pages(site.posts_per_page)
    for page in pages:
        _write_json(out_dir / "blog" / f"{page.page_number}.json", page.summary())
    print(f"✓ blog archive, {len(pages)} pages")

    _write_json(out_dir / "posts.json", post_index(engine))

    tags = engine.all_tags()
    slugs = tag_slugs(t.tag for t in tags)
    _write_json(
        out_dir / "tags.json",
        [{"tag": t.tag, "slug": slugs[t.tag], "count": t.count} for t in tags],
    )
    for t in tags:
        _write_json(
            out_dir / "tags" / f"{slugs[t.tag]}.json",
            {"tag": t.tag, "posts": [p.summary() for p in engine.by_tag(t.tag)]},
        )
    print(f"✓ {len(tags)} tag pages")

    (out_dir / "rss.xml").write_text(
        render_rss(site, engine.feed()), encoding="utf-8"
    )
    print(f"✓ rss.xml with {len(engine.published())} items")


def build(
    content_dir: pathlib.Path, out_dir: pathlib.Path, site: SiteConfig
) -> ListingEngine:
    catalog = load(iter_content(content_dir))
    engine = ListingEngine(catalog)
    write_listings(engine, site, out_dir)
    return engine


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.split("\n\n")[0].strip())
    parser.add_argument("--content", type=pathlib.Path, default=CONTENT_DIR)
    parser.add_argument("--out", type=pathlib.Path, default=LISTING_OUT)
    parser.add_argument("--site", type=pathlib.Path, default=SITE_FILE)
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        site = load_site_config(args.site)
        engine = build(args.content, args.out, site)
    except CatalogError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    print(f"✓ {len(engine.catalog)} posts in catalog -> {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
