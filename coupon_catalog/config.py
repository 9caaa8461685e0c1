"""Centralised settings for the coupon catalog.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).  The settings object is
built on first use, so a malformed value raises :class:`ConfigError` there.

Static lookup data (the merchant-to-host table) lives here too and is exposed
read-only; callers receive it by reference and never mutate it.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping

from dotenv import load_dotenv

from coupon_catalog.errors import ConfigError

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


DEFAULT_HOST_MAP: Mapping[str, str] = MappingProxyType(
    {
        "shein": "shein.com",
        "adidas": "adidas.com",
        "storeus": "storeus.com",
        "babystore": "babystore.ae",
        "noon": "noon.com",
        "trendyol": "trendyol.com",
        "groupon": "groupon.ae",
        "eoutlet": "eoutlet.com",
    }
)

_DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120 Safari/537.36 (alcoupon-scraper)"
)


def _env_int(name: str, default: str) -> int:
    raw = os.environ.get(name, default)
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, default: str) -> float:
    raw = os.environ.get(name, default)
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Source pages
    # ------------------------------------------------------------------
    country: str = field(
        default_factory=lambda: os.environ.get("COUPONS_COUNTRY", "uae")
    )
    lang: str = field(
        default_factory=lambda: os.environ.get("COUPONS_LANG", "en")
    )
    slugs: str = field(
        default_factory=lambda: os.environ.get("COUPONS_SLUGS", "shein,adidas,storeus")
    )
    scraper_domain: str = field(
        default_factory=lambda: os.environ.get("COUPONS_SCRAPER_DOMAIN", "alcoupon.com")
    )

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get("COUPONS_USER_AGENT", _DEFAULT_USER_AGENT)
    )
    delay_ms: int = field(
        default_factory=lambda: _env_int("COUPONS_DELAY_MS", "1200")
    )
    request_timeout: float = field(
        default_factory=lambda: _env_float("REQUEST_TIMEOUT", "30.0")
    )

    # ------------------------------------------------------------------
    # Catalog output
    # ------------------------------------------------------------------
    out_path: Path = field(
        default_factory=lambda: Path(os.environ.get("COUPONS_OUT", "./coupons.json"))
    )
    max_per_merchant: int = field(
        default_factory=lambda: _env_int("COUPONS_MAX_PER_MERCHANT", "8")
    )
    host_map_path: Path | None = field(
        default_factory=lambda: (
            Path(os.environ["COUPONS_HOST_MAP"]) if os.environ.get("COUPONS_HOST_MAP") else None
        )
    )


def load_host_map(path: Path | str | None = None) -> Mapping[str, str]:
    """Return the merchant-to-host table, optionally extended from a JSON file.

    The file must hold a single JSON object mapping slug to host.  Its entries
    override the built-in ones.  The returned mapping is read-only.

    Raises:
        ConfigError: If *path* cannot be read or does not hold an object of
            strings.
    """
    if path is None:
        return DEFAULT_HOST_MAP

    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot read host map {str(path)!r}: {exc}") from exc

    if not isinstance(raw, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in raw.items()
    ):
        raise ConfigError(f"Host map {str(path)!r} must be a JSON object of strings")

    merged = dict(DEFAULT_HOST_MAP)
    merged.update(raw)
    return MappingProxyType(merged)


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process-wide :class:`Settings`, building it on first use.

    Raises:
        ConfigError: If an environment value is malformed.
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def __getattr__(name: str):
    # Lazy singleton, so a bad environment surfaces as ConfigError at the
    # first read rather than at import:
    #   from coupon_catalog.config import settings
    if name == "settings":
        return get_settings()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
