#!/usr/bin/env python3
from __future__ import annotations

import pathlib
import re
from typing import List

from pydantic import BaseModel, Field

# ---------- Paths

# This assumes config.py sits in tools/postcatalog/ under the repo root.
ROOT = pathlib.Path(__file__).resolve().parents[2]
CONTENT_DIR = ROOT / "src" / "content" / "blog"
LISTING_OUT = ROOT / "src" / "generated"
SITE_FILE = ROOT / "site.yml"

# ---------- Config

CONTENT_SUFFIXES = (".md", ".mdx", ".ipynb")
WORDS_PER_MINUTE = 200
BLOG_PREFIX = "/blog"

# Some shared regexes

SLUG_RE = re.compile(r"[^a-z0-9-]+")
FENCE_LINE = re.compile(r"^\s*(```|~~~).*$", re.MULTILINE)
HTML_TAG = re.compile(r"<[^>]+>")
WORD = re.compile(r"\S+")


# ---------- Site settings


class Link(BaseModel):
    """One navigation or social entry."""

    model_config = {"frozen": True}

    href: str
    label: str


class SiteConfig(BaseModel):
    """Static site settings, built once per run and passed explicitly."""

    model_config = {"frozen": True, "extra": "forbid"}

    title: str = "Matheus-Dambrowski"
    description: str = "Fullstack software engineer"
    email: str = "matheusbd15@gmail.com"
    num_posts_on_homepage: int = Field(default=2, ge=0)
    posts_per_page: int = Field(default=3, ge=1)
    site_url: str = "https://matheus-dambrowski.dev"
    nav_links: List[Link] = Field(
        default_factory=lambda: [
            Link(href="/blog", label="blog"),
            Link(href="/about", label="about"),
            Link(href="/tags", label="tags"),
        ]
    )
    social_links: List[Link] = Field(
        default_factory=lambda: [
            Link(href="https://github.com/MatheusBD15", label="GitHub"),
            Link(
                href="https://www.linkedin.com/in/matheus-b-dambrowski-b1a9b9203/",
                label="LinkedIn",
            ),
            Link(href="matheusbd15@gmail.com", label="Email"),
            Link(href="/rss.xml", label="RSS"),
        ]
    )

    def absolute_url(self, path: str) -> str:
        return f"{self.site_url.rstrip('/')}/{path.lstrip('/')}"
