"""Catalog package — batch orchestration and the JSON artifact."""

from coupon_catalog.catalog.artifact import catalog_to_json, load_catalog, write_catalog
from coupon_catalog.catalog.builder import (
    Catalog,
    SlugOutcome,
    build_catalog,
    host_for_slug,
    parse_slugs,
    process_slug,
    scrape_catalog,
)

__all__ = [
    "catalog_to_json",
    "load_catalog",
    "write_catalog",
    "Catalog",
    "SlugOutcome",
    "build_catalog",
    "host_for_slug",
    "parse_slugs",
    "process_slug",
    "scrape_catalog",
]
