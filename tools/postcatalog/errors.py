"""Errors raised while loading content or querying the catalog."""

from __future__ import annotations


class CatalogError(Exception):
    """Base class for everything the build should halt on."""


class ValidationError(CatalogError):
    """A content item is missing a required field or has an invalid one."""

    def __init__(self, slug: str, field: str, message: str):
        self.slug = slug
        self.field = field
        super().__init__(f"{slug}: invalid {field!r}: {message}")


class DuplicateSlugError(CatalogError):
    def __init__(self, slug: str, first: str, second: str):
        self.slug = slug
        self.first = first
        self.second = second
        super().__init__(
            f"slug {slug!r} is produced by both {first} and {second}"
        )


class InvalidArgument(CatalogError, ValueError):
    pass


class ConfigError(CatalogError):
    pass
