"""Utilities for rendering coupons in the CLI."""

from __future__ import annotations

from typing import Sequence

from coupon_catalog.extract import Coupon
from coupon_catalog.viewer import ViewerRow, render_rows
from coupon_catalog.viewer.render import Group


def format_row(row: ViewerRow, code_width: int = 12) -> str:
    """Return one ``code  rate  description`` line."""
    rate = f"{row.rate}%" if row.rate is not None else "-"
    line = f"  {row.code:<{code_width}}  {rate:>4}"
    if row.description:
        line += f"  {row.description}"
    return line


def render_coupons(coupons: Sequence[Coupon]) -> str:
    rows = render_rows(coupons)
    width = max((len(r.code) for r in rows), default=0)
    return "\n".join(format_row(r, width) for r in rows)


def render_groups(groups: Sequence[Group]) -> str:
    """Render viewer groups as an indented text block, one header per host.

    Args:
        groups: ``(host, coupons)`` pairs, already sorted and filtered.

    Returns:
        String representation, empty when there are no groups.
    """
    blocks = []
    for host, coupons in groups:
        blocks.append(f"{host} ({len(coupons)})\n{render_coupons(coupons)}")
    return "\n\n".join(blocks)
