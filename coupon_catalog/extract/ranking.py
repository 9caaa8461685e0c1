"""Deduplication and ranking of extracted coupons."""

from __future__ import annotations

from typing import Iterable

from coupon_catalog.extract.models import Coupon


def rank(coupons: Iterable[Coupon]) -> list[Coupon]:
    """Sort by ``success_rate`` descending.  Equal rates keep input order."""
    # sorted() stays stable with reverse=True.
    return sorted(coupons, key=lambda c: c.success_rate or 0.0, reverse=True)


def finalize(coupons: Iterable[Coupon]) -> list[Coupon]:
    """Drop repeated codes (first occurrence wins), then rank.

    Earlier blocks are the more prominent ones on the page, so a later
    duplicate never replaces an earlier coupon even if it scores higher.
    Idempotent: ``finalize(finalize(x)) == finalize(x)``.
    """
    seen: set[str] = set()
    unique: list[Coupon] = []
    for coupon in coupons:
        if coupon.code in seen:
            continue
        seen.add(coupon.code)
        unique.append(coupon)
    return rank(unique)
