"""HTTP fetcher for merchant discount-code pages.

Pages are plain server-rendered HTML; nothing here executes JavaScript.
There are no retries: a failed fetch is reported once and the caller moves
on to the next merchant.
"""

from __future__ import annotations

import httpx

from coupon_catalog.config import get_settings
from coupon_catalog.errors import FetchError
from coupon_catalog.scraper.models import RawPage


def merchant_url(
    slug: str,
    *,
    country: str | None = None,
    lang: str | None = None,
    domain: str | None = None,
) -> str:
    """Return the discount-code page URL for *slug*.

    Missing parts default to the configured settings.
    """
    settings = get_settings()
    country = country or settings.country
    lang = lang or settings.lang
    domain = domain or settings.scraper_domain
    return f"https://{country}.{domain}/{lang}/discount-codes/{slug}"


def _default_headers() -> dict[str, str]:
    return {"User-Agent": get_settings().user_agent}


def open_client() -> httpx.Client:
    """Return a client configured with the scraper's user agent and timeout."""
    return httpx.Client(
        headers=_default_headers(),
        timeout=get_settings().request_timeout,
        follow_redirects=True,
    )


def fetch_merchant(
    slug: str,
    *,
    country: str | None = None,
    lang: str | None = None,
    client: httpx.Client | None = None,
) -> RawPage:
    """Fetch the discount-code page for *slug* and return a :class:`RawPage`.

    Pass *client* to reuse one connection pool across several merchants;
    otherwise a short-lived client is opened for this request.

    Raises:
        FetchError: On any transport failure or a 4xx/5xx status code.
    """
    url = merchant_url(slug, country=country, lang=lang)

    try:
        if client is None:
            with open_client() as own_client:
                response = own_client.get(url)
        else:
            response = client.get(url, headers=_default_headers())
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(slug, url, f"HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise FetchError(slug, url, str(exc) or type(exc).__name__) from exc

    return RawPage(url=url, html=response.text, status_code=response.status_code)
