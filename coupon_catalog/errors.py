"""Exception types raised at the I/O boundaries of the catalog pipeline.

The extraction engine itself never raises on bad input; only fetching,
configuration loading and writing the artifact surface errors.
"""

from __future__ import annotations


class CouponCatalogError(Exception):
    """Base class for every error raised by this package."""


class FetchError(CouponCatalogError):
    """A merchant page could not be fetched (network failure or non-2xx)."""

    def __init__(self, slug: str, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.slug = slug
        self.url = url
        self.reason = reason


class ConfigError(CouponCatalogError):
    """Configuration is unreadable or malformed.  Aborts the run."""


class CatalogWriteError(CouponCatalogError):
    """The output artifact could not be written.  Aborts the run."""
