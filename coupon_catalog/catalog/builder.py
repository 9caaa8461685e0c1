"""Batch orchestration: merchant slugs in, host-keyed catalog out.

Each slug is processed independently into a :class:`SlugOutcome`.  Only
successful outcomes reach the catalog; a failed slug is reported and
contributes nothing.  Slugs run one at a time with a politeness delay between
consecutive fetches.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping

import typer

from coupon_catalog.config import DEFAULT_HOST_MAP, get_settings
from coupon_catalog.errors import FetchError
from coupon_catalog.extract import Coupon, parse_coupons, rank
from coupon_catalog.scraper import RawPage, fetch_merchant, merchant_url, open_client

Catalog = dict[str, list[Coupon]]
Fetcher = Callable[[str], RawPage]
UrlBuilder = Callable[[str], str]
Echo = Callable[..., None]


@dataclass(frozen=True)
class SlugOutcome:
    """Result of processing one merchant slug: coupons or a failure reason."""

    slug: str
    host: str
    url: str
    coupons: tuple[Coupon, ...] = ()
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_slugs(raw: str | Iterable[str]) -> list[str]:
    """Split a comma-separated slug list, dropping blanks."""
    parts = raw.split(",") if isinstance(raw, str) else raw
    return [s.strip() for s in parts if s and s.strip()]


def host_for_slug(slug: str, host_map: Mapping[str, str] = DEFAULT_HOST_MAP) -> str:
    return host_map.get(slug) or f"{slug}.com"


def process_slug(
    slug: str,
    fetch: Fetcher,
    *,
    host_map: Mapping[str, str] = DEFAULT_HOST_MAP,
    limit: int | None = None,
    url_for: UrlBuilder = merchant_url,
) -> SlugOutcome:
    """Fetch and extract one merchant.  Never raises.

    *url_for* names the page in the outcome when *fetch* fails before
    returning one; it must build URLs the same way *fetch* does.
    """
    limit = get_settings().max_per_merchant if limit is None else limit
    host = host_for_slug(slug, host_map)
    url = url_for(slug)

    try:
        page = fetch(slug)
        url = page.url
        coupons = parse_coupons(page.html)
    except FetchError as exc:
        return SlugOutcome(slug=slug, host=host, url=exc.url, error=exc.reason)
    except Exception as exc:
        return SlugOutcome(slug=slug, host=host, url=url, error=f"{type(exc).__name__}: {exc}")

    return SlugOutcome(slug=slug, host=host, url=url, coupons=tuple(coupons[:limit]))


def build_catalog(
    slugs: Iterable[str],
    *,
    fetch: Fetcher,
    host_map: Mapping[str, str] = DEFAULT_HOST_MAP,
    delay_ms: int | None = None,
    limit: int | None = None,
    url_for: UrlBuilder = merchant_url,
    sleep: Callable[[float], None] = time.sleep,
    echo: Echo = typer.echo,
) -> tuple[Catalog, list[SlugOutcome]]:
    """Process *slugs* in order and merge their coupons by merchant host.

    Several slugs may share a host; their capped lists are concatenated and
    the bucket re-ranked.  Codes are deduplicated per slug only, so the same
    code can appear twice in a shared bucket.

    Returns:
        The catalog and one outcome per slug, in input order.
    """
    delay_ms = get_settings().delay_ms if delay_ms is None else delay_ms
    catalog: Catalog = {}
    outcomes: list[SlugOutcome] = []

    for index, slug in enumerate(slugs):
        if index > 0 and delay_ms > 0:
            sleep(delay_ms / 1000)

        outcome = process_slug(slug, fetch, host_map=host_map, limit=limit, url_for=url_for)
        outcomes.append(outcome)

        if not outcome.ok:
            echo(f"[fail] {slug}: {outcome.error}", err=True)
            continue

        catalog.setdefault(outcome.host, []).extend(outcome.coupons)
        echo(f"[ok] {slug}: {len(outcome.coupons)} codes ({outcome.url})")

    for host, coupons in catalog.items():
        catalog[host] = rank(coupons)

    return catalog, outcomes


def scrape_catalog(
    slugs: Iterable[str],
    *,
    country: str | None = None,
    lang: str | None = None,
    host_map: Mapping[str, str] = DEFAULT_HOST_MAP,
    delay_ms: int | None = None,
    echo: Echo = typer.echo,
) -> tuple[Catalog, list[SlugOutcome]]:
    """Fetch every slug over one shared HTTP client and build the catalog."""
    with open_client() as client:

        def fetch(slug: str) -> RawPage:
            return fetch_merchant(slug, country=country, lang=lang, client=client)

        def url_for(slug: str) -> str:
            return merchant_url(slug, country=country, lang=lang)

        return build_catalog(
            slugs,
            fetch=fetch,
            host_map=host_map,
            delay_ms=delay_ms,
            url_for=url_for,
            echo=echo,
        )
