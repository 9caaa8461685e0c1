"""Coupon catalog CLI — entry-point for scraping, extraction and viewing.

Usage:
    python cli/main.py --help

Commands:
    scrape   → fetch merchant pages and write coupons.json
    extract  → run the extractor on a local HTML file
    show     → search and print an existing coupons.json
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from coupon_catalog.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import json
from typing import NoReturn, Optional

import typer

from coupon_catalog.catalog import load_catalog, parse_slugs, scrape_catalog, write_catalog
from coupon_catalog.config import Settings, get_settings, load_host_map
from coupon_catalog.errors import CatalogWriteError, ConfigError
from coupon_catalog.extract import parse_coupons
from coupon_catalog.viewer import filter_catalog, summary

from cli.rendering import render_coupons, render_groups

app = typer.Typer(
    name="coupons",
    help="Coupon catalog CLI.",
    no_args_is_help=True,
)


def _fail(message: str) -> NoReturn:
    typer.echo(f"[error] {message}", err=True)
    raise typer.Exit(1)


def _settings() -> Settings:
    try:
        return get_settings()
    except ConfigError as exc:
        _fail(str(exc))


# ---------------------------------------------------------------------------
# Scrape
# ---------------------------------------------------------------------------
@app.command("scrape")
def scrape(
    country: Optional[str] = typer.Option(None, help="Country subdomain (uae, saudi, …)."),
    lang: Optional[str] = typer.Option(None, help="Language path segment (en or ar)."),
    slugs: Optional[str] = typer.Option(None, help="Comma-separated merchant slugs."),
    out: Optional[Path] = typer.Option(None, help="Output path for coupons.json."),
    delay: Optional[int] = typer.Option(None, help="Politeness delay (ms) between requests."),
    hosts: Optional[Path] = typer.Option(None, help="JSON file of extra slug → host mappings."),
) -> None:
    """Scrape every merchant slug and write the host-keyed coupons.json."""
    settings = _settings()
    try:
        host_map = load_host_map(hosts or settings.host_map_path)
    except ConfigError as exc:
        _fail(str(exc))

    slug_list = parse_slugs(slugs if slugs is not None else settings.slugs)
    if not slug_list:
        _fail("No merchant slugs given.")
    if delay is not None and delay < 0:
        _fail("--delay must not be negative.")

    catalog, outcomes = scrape_catalog(
        slug_list,
        country=country,
        lang=lang,
        host_map=host_map,
        delay_ms=delay,
    )

    try:
        path = write_catalog(catalog, out or settings.out_path)
    except CatalogWriteError as exc:
        _fail(str(exc))

    total = sum(len(c) for c in catalog.values())
    failed = sum(1 for o in outcomes if not o.ok)
    typer.echo(f"\n[scrape] Wrote {path} ({len(catalog)} hosts, {total} coupons)")
    if failed:
        typer.echo(f"[scrape] {failed} of {len(outcomes)} merchant(s) failed.")


# ---------------------------------------------------------------------------
# Extract
# ---------------------------------------------------------------------------
@app.command("extract")
def extract(
    path: Path = typer.Argument(..., help="Local HTML file to scan."),
    limit: int = typer.Option(0, help="Show at most this many coupons (0 = all)."),
) -> None:
    """Run the coupon extractor on a saved HTML page and print the ranking."""
    try:
        html = path.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        _fail(f"Cannot read {str(path)!r}: {exc}")

    coupons = parse_coupons(html)
    if limit > 0:
        coupons = coupons[:limit]
    if not coupons:
        typer.echo("[extract] No coupons found.")
        return
    typer.echo(render_coupons(coupons))


# ---------------------------------------------------------------------------
# Show
# ---------------------------------------------------------------------------
@app.command("show")
def show(
    source: Optional[Path] = typer.Option(None, "--in", help="coupons.json to read."),
    query: str = typer.Option("", help="Case-insensitive filter on host, code or description."),
) -> None:
    """Print an existing catalog grouped by host, optionally filtered."""
    source = source or _settings().out_path
    try:
        catalog = load_catalog(source)
    except (OSError, json.JSONDecodeError) as exc:
        _fail(f"Cannot read {str(source)!r}: {exc}")

    groups = filter_catalog(catalog, query)
    if groups:
        typer.echo(render_groups(groups))
        typer.echo("")
    typer.echo(summary(groups))


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
