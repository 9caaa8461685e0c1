"""Search and display logic for the coupon viewer.

Mirrors what the browser viewer does with ``coupons.json``: one group per
host in alphabetical order, a live case-insensitive substring filter over
host, code and description, codes cut to 40 characters and the success rate
shown as a whole percentage.  Nothing here mutates the catalog it is given.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Sequence

from coupon_catalog.extract import Coupon

CODE_DISPLAY_LIMIT = 40

Group = tuple[str, list[Coupon]]


@dataclass(frozen=True)
class ViewerRow:
    code: str
    description: str
    rate: int | None

    def to_dict(self) -> dict[str, object]:
        return {"code": self.code, "description": self.description, "rate": self.rate}


def _matches(host: str, coupon: Coupon, query: str) -> bool:
    return (
        query in host.lower()
        or query in (coupon.code or "").lower()
        or query in (coupon.description or "").lower()
    )


def filter_catalog(catalog: Mapping[str, Sequence[Coupon]], query: str = "") -> list[Group]:
    """Return ``(host, coupons)`` groups sorted by host, filtered by *query*.

    Hosts left with no coupons are omitted.
    """
    q = query.strip().lower()
    groups: list[Group] = []
    for host in sorted(catalog):
        coupons = list(catalog[host] or [])
        if q:
            coupons = [c for c in coupons if _matches(host, c, q)]
        if coupons:
            groups.append((host, coupons))
    return groups


def render_row(coupon: Coupon) -> ViewerRow:
    rate = None
    if coupon.success_rate is not None:
        # Halves round up, as in the browser.
        rate = math.floor(coupon.success_rate * 100 + 0.5)
    return ViewerRow(
        code=(coupon.code or "")[:CODE_DISPLAY_LIMIT],
        description=coupon.description or "",
        rate=rate,
    )


def render_rows(coupons: Sequence[Coupon]) -> list[ViewerRow]:
    return [render_row(c) for c in coupons]


def summary(groups: Sequence[Group]) -> str:
    total = sum(len(coupons) for _, coupons in groups)
    return f"{total} coupons shown" if total else "No results"
