"""Scraper package — merchant page fetching."""

from coupon_catalog.scraper.fetcher import fetch_merchant, merchant_url, open_client
from coupon_catalog.scraper.models import RawPage

__all__ = ["fetch_merchant", "merchant_url", "open_client", "RawPage"]
