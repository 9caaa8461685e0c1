"""Tests for catalog building, the JSON artifact and configuration.

The builder receives a fake ``fetch`` callable, a recording ``sleep`` and a
list-backed ``echo``, so nothing touches the network, the clock or stdout.
"""

from __future__ import annotations

import json
from types import MappingProxyType

import pytest

from coupon_catalog.catalog import (
    build_catalog,
    catalog_to_json,
    host_for_slug,
    load_catalog,
    parse_slugs,
    process_slug,
    write_catalog,
)
from coupon_catalog.config import DEFAULT_HOST_MAP, Settings, load_host_map
from coupon_catalog.errors import CatalogWriteError, ConfigError, FetchError
from coupon_catalog.extract import Coupon
from coupon_catalog.scraper import RawPage


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _page(*blocks: str) -> str:
    body = "".join(f"<div>{b}</div>" for b in blocks)
    return f"<html><body>{body}</body></html>"


def _fake_fetch(pages: dict[str, str]):
    """Return a fetch callable serving *pages*; unknown slugs fail with 404."""

    def fetch(slug: str) -> RawPage:
        url = f"https://uae.alcoupon.com/en/discount-codes/{slug}"
        if slug not in pages:
            raise FetchError(slug, url, "HTTP 404")
        return RawPage(url=url, html=pages[slug], status_code=200)

    return fetch


class _Recorder:
    def __init__(self) -> None:
        self.sleeps: list[float] = []
        self.messages: list[tuple[str, bool]] = []

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)

    def echo(self, message: str, err: bool = False) -> None:
        self.messages.append((message, err))


@pytest.fixture()
def rec() -> _Recorder:
    return _Recorder()


# ---------------------------------------------------------------------------
# Slugs and hosts
# ---------------------------------------------------------------------------

class TestSlugsAndHosts:
    def test_parse_slugs_strips_and_drops_blanks(self) -> None:
        assert parse_slugs(" shein, adidas ,,storeus, ") == ["shein", "adidas", "storeus"]

    def test_parse_slugs_accepts_list(self) -> None:
        assert parse_slugs(["noon", " ", "groupon"]) == ["noon", "groupon"]

    def test_known_host(self) -> None:
        assert host_for_slug("babystore") == "babystore.ae"

    def test_unknown_slug_falls_back_to_dot_com(self) -> None:
        assert host_for_slug("zara") == "zara.com"


# ---------------------------------------------------------------------------
# process_slug
# ---------------------------------------------------------------------------

class TestProcessSlug:
    def test_success_outcome(self) -> None:
        fetch = _fake_fetch({"shein": _page("Use code SAVE15 for 50% off")})
        outcome = process_slug("shein", fetch)
        assert outcome.ok
        assert outcome.host == "shein.com"
        assert [c.code for c in outcome.coupons] == ["SAVE15"]
        assert outcome.coupons[0].success_rate == 0.5

    def test_fetch_failure_outcome(self) -> None:
        outcome = process_slug("missing", _fake_fetch({}))
        assert not outcome.ok
        assert outcome.error == "HTTP 404"
        assert outcome.coupons == ()

    def test_unexpected_error_is_captured(self) -> None:
        def fetch(slug: str) -> RawPage:
            raise RuntimeError("parser exploded")

        outcome = process_slug("shein", fetch)
        assert not outcome.ok
        assert outcome.error == "RuntimeError: parser exploded"

    def test_failure_reports_url_from_url_builder(self) -> None:
        def fetch(slug: str) -> RawPage:
            raise RuntimeError("bad url")

        outcome = process_slug(
            "shein", fetch, url_for=lambda s: f"https://saudi.alcoupon.com/ar/discount-codes/{s}"
        )
        assert outcome.url == "https://saudi.alcoupon.com/ar/discount-codes/shein"
        assert outcome.error == "RuntimeError: bad url"

    def test_caps_to_limit_by_rank(self) -> None:
        blocks = [f"Promo code CODE{i:02d}X for {10 + i * 5}% off" for i in range(10)]
        outcome = process_slug("shein", _fake_fetch({"shein": _page(*blocks)}), limit=8)
        assert len(outcome.coupons) == 8
        rates = [c.success_rate for c in outcome.coupons]
        assert rates == sorted(rates, reverse=True)
        assert outcome.coupons[0].success_rate == 0.55


# ---------------------------------------------------------------------------
# build_catalog
# ---------------------------------------------------------------------------

class TestBuildCatalog:
    def test_groups_by_host(self, rec) -> None:
        fetch = _fake_fetch({
            "shein": _page("Code SHEIN10 for 10% off"),
            "noon": _page("Coupon NOON30 saves 30%"),
        })
        catalog, outcomes = build_catalog(
            ["shein", "noon"], fetch=fetch, delay_ms=0, sleep=rec.sleep, echo=rec.echo
        )
        assert list(catalog) == ["shein.com", "noon.com"]
        assert [c.code for c in catalog["noon.com"]] == ["NOON30"]
        assert all(o.ok for o in outcomes)

    def test_failures_are_reported_and_skipped(self, rec) -> None:
        fetch = _fake_fetch({"shein": _page("Code SHEIN10"), "noon": _page("Code NOON30")})
        catalog, outcomes = build_catalog(
            ["shein", "broken", "noon"], fetch=fetch, delay_ms=0, sleep=rec.sleep, echo=rec.echo
        )
        assert set(catalog) == {"shein.com", "noon.com"}
        assert [o.ok for o in outcomes] == [True, False, True]
        assert ("[fail] broken: HTTP 404", True) in rec.messages
        assert any(m.startswith("[ok] noon: 1 codes") for m, _ in rec.messages)

    def test_delay_between_consecutive_fetches_only(self, rec) -> None:
        fetch = _fake_fetch({"a": _page("Code AAA1"), "c": _page("Code CCC1")})
        build_catalog(
            ["a", "b", "c"], fetch=fetch, delay_ms=1200, sleep=rec.sleep, echo=rec.echo
        )
        assert rec.sleeps == [1.2, 1.2]

    def test_zero_delay_never_sleeps(self, rec) -> None:
        fetch = _fake_fetch({"a": _page("Code AAA1")})
        build_catalog(["a", "a"], fetch=fetch, delay_ms=0, sleep=rec.sleep, echo=rec.echo)
        assert rec.sleeps == []

    def test_shared_host_merges_and_reranks(self, rec) -> None:
        host_map = MappingProxyType({"first": "shared.com", "second": "shared.com"})
        fetch = _fake_fetch({
            "first": _page("Code LOW1", "Code MID1 for 50% off"),
            "second": _page("Code TOP1 for 80% off"),
        })
        catalog, _ = build_catalog(
            ["first", "second"],
            fetch=fetch,
            host_map=host_map,
            delay_ms=0,
            sleep=rec.sleep,
            echo=rec.echo,
        )
        assert list(catalog) == ["shared.com"]
        assert [c.code for c in catalog["shared.com"]] == ["TOP1", "MID1", "LOW1"]

    def test_same_code_from_two_slugs_on_one_host_is_kept_twice(self, rec) -> None:
        # Deduplication runs per slug; merging into a shared host does not
        # deduplicate again.
        host_map = MappingProxyType({"first": "shared.com", "second": "shared.com"})
        fetch = _fake_fetch({
            "first": _page("Code DUPE1 for 30% off"),
            "second": _page("Code DUPE1 for 60% off"),
        })
        catalog, _ = build_catalog(
            ["first", "second"],
            fetch=fetch,
            host_map=host_map,
            delay_ms=0,
            sleep=rec.sleep,
            echo=rec.echo,
        )
        bucket = catalog["shared.com"]
        assert [c.code for c in bucket] == ["DUPE1", "DUPE1"]
        assert [c.success_rate for c in bucket] == [0.6, 0.3]

    def test_each_slug_capped_before_merge(self, rec) -> None:
        host_map = MappingProxyType({"first": "shared.com", "second": "shared.com"})
        many = [f"Promo code FIRST{i}X" for i in range(10)]
        more = [f"Promo code SECOND{i}X" for i in range(10)]
        fetch = _fake_fetch({"first": _page(*many), "second": _page(*more)})
        catalog, _ = build_catalog(
            ["first", "second"],
            fetch=fetch,
            host_map=host_map,
            delay_ms=0,
            limit=8,
            sleep=rec.sleep,
            echo=rec.echo,
        )
        assert len(catalog["shared.com"]) == 16

    def test_ok_line_counts_coupons_after_cap(self, rec) -> None:
        blocks = [f"Promo code CAP{i}X" for i in range(10)]
        fetch = _fake_fetch({"shein": _page(*blocks)})
        build_catalog(
            ["shein"], fetch=fetch, delay_ms=0, limit=8, sleep=rec.sleep, echo=rec.echo
        )
        assert any(m.startswith("[ok] shein: 8 codes") for m, _ in rec.messages)

    def test_all_failures_yield_empty_catalog(self, rec) -> None:
        catalog, outcomes = build_catalog(
            ["x", "y"], fetch=_fake_fetch({}), delay_ms=0, sleep=rec.sleep, echo=rec.echo
        )
        assert catalog == {}
        assert not any(o.ok for o in outcomes)


# ---------------------------------------------------------------------------
# Artifact
# ---------------------------------------------------------------------------

_CATALOG = {
    "shein.com": [
        Coupon(code="SAVE15", description="خصم إضافي", success_rate=0.5),
        Coupon(code="FREESHIP", description="Coupon code", success_rate=0.33),
    ]
}


class TestArtifact:
    def test_json_shape(self) -> None:
        data = json.loads(catalog_to_json(_CATALOG))
        assert data == {
            "shein.com": [
                {"code": "SAVE15", "description": "خصم إضافي", "successRate": 0.5},
                {"code": "FREESHIP", "description": "Coupon code", "successRate": 0.33},
            ]
        }

    def test_write_is_pretty_utf8(self, tmp_path) -> None:
        path = write_catalog(_CATALOG, tmp_path / "out" / "coupons.json")
        text = path.read_text(encoding="utf-8")
        assert "خصم إضافي" in text
        assert '\n  "shein.com": [' in text

    def test_unwritable_path_raises(self, tmp_path) -> None:
        blocker = tmp_path / "file.txt"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(CatalogWriteError):
            write_catalog(_CATALOG, blocker / "coupons.json")

    def test_load_round_trips_written_catalog(self, tmp_path) -> None:
        path = write_catalog(_CATALOG, tmp_path / "coupons.json")
        assert load_catalog(path) == _CATALOG

    def test_load_tolerates_foreign_entries(self, tmp_path) -> None:
        path = tmp_path / "coupons.json"
        path.write_text(
            json.dumps({
                "a.com": [
                    {"code": "OK1", "successRate": "high"},
                    {"description": "no code"},
                    "junk",
                ],
                "b.com": "not a list",
            }),
            encoding="utf-8",
        )
        assert load_catalog(path) == {
            "a.com": [Coupon(code="OK1", description="", success_rate=None)]
        }


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class TestConfig:
    def test_default_host_map_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            DEFAULT_HOST_MAP["evil"] = "evil.com"  # type: ignore[index]

    def test_no_path_returns_defaults(self) -> None:
        assert load_host_map(None) is DEFAULT_HOST_MAP

    def test_file_extends_and_overrides(self, tmp_path) -> None:
        path = tmp_path / "hosts.json"
        path.write_text(json.dumps({"zara": "zara.ae", "noon": "noon.ae"}), encoding="utf-8")
        host_map = load_host_map(path)
        assert host_map["zara"] == "zara.ae"
        assert host_map["noon"] == "noon.ae"
        assert host_map["shein"] == "shein.com"
        assert DEFAULT_HOST_MAP["noon"] == "noon.com"

    def test_missing_file_is_config_error(self, tmp_path) -> None:
        with pytest.raises(ConfigError):
            load_host_map(tmp_path / "nope.json")

    def test_non_object_is_config_error(self, tmp_path) -> None:
        path = tmp_path / "hosts.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_host_map(path)

    def test_settings_read_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("COUPONS_COUNTRY", "saudi")
        monkeypatch.setenv("COUPONS_DELAY_MS", "250")
        s = Settings()
        assert s.country == "saudi"
        assert s.delay_ms == 250

    def test_bad_integer_is_config_error(self, monkeypatch) -> None:
        monkeypatch.setenv("COUPONS_DELAY_MS", "soon")
        with pytest.raises(ConfigError):
            Settings()

    def test_settings_are_built_on_first_use(self, monkeypatch) -> None:
        from coupon_catalog import config

        monkeypatch.setenv("COUPONS_DELAY_MS", "soon")
        monkeypatch.setattr(config, "_settings", None)
        with pytest.raises(ConfigError):
            config.get_settings()

    def test_settings_singleton_is_cached(self) -> None:
        from coupon_catalog import config

        assert config.get_settings() is config.get_settings()
        assert config.settings is config.get_settings()


# ---------------------------------------------------------------------------
# scrape_catalog (HTTP mocked with respx)
# ---------------------------------------------------------------------------

class TestScrapeCatalog:
    def test_fetches_over_http_and_skips_failures(self, rec, monkeypatch) -> None:
        import httpx
        import respx

        from coupon_catalog.catalog import scrape_catalog
        from coupon_catalog.config import settings

        monkeypatch.setattr(settings, "scraper_domain", "alcoupon.com")
        base = "https://uae.alcoupon.com/en/discount-codes"
        with respx.mock:
            respx.get(f"{base}/shein").mock(
                return_value=httpx.Response(200, text=_page("Code SHEIN10 for 10% off"))
            )
            respx.get(f"{base}/adidas").mock(return_value=httpx.Response(500))
            catalog, outcomes = scrape_catalog(
                ["shein", "adidas"], country="uae", lang="en", delay_ms=0, echo=rec.echo
            )

        assert catalog == {
            "shein.com": [Coupon(code="SHEIN10", description="Code SHEIN10 for 10% off", success_rate=0.2)]
        }
        assert [o.ok for o in outcomes] == [True, False]
        assert ("[fail] adidas: HTTP 500", True) in rec.messages

    def test_failure_url_uses_requested_country(self, rec, monkeypatch) -> None:
        from coupon_catalog.catalog import scrape_catalog
        from coupon_catalog.config import settings

        def fetch_merchant(slug, **kwargs):
            raise RuntimeError("unsupported scheme")

        monkeypatch.setattr(settings, "scraper_domain", "alcoupon.com")
        monkeypatch.setattr("coupon_catalog.catalog.builder.fetch_merchant", fetch_merchant)
        _, outcomes = scrape_catalog(
            ["noon"], country="saudi", lang="ar", delay_ms=0, echo=rec.echo
        )

        assert outcomes[0].url == "https://saudi.alcoupon.com/ar/discount-codes/noon"
        assert ("[fail] noon: RuntimeError: unsupported scheme", True) in rec.messages
