"""Discount percentage detection and the confidence score derived from it."""

from __future__ import annotations

import re

from coupon_catalog.extract.models import DEFAULT_SUCCESS_RATE

MIN_CONFIDENCE = 0.2
MAX_CONFIDENCE = 0.9

_PERCENT_RE = re.compile(r"([1-9]\d?)\s?%", re.ASCII)


def extract_percent(text: str) -> int | None:
    """Return the first ``NN%`` value (1-99) in *text*, or ``None``."""
    match = _PERCENT_RE.search(text or "")
    return int(match.group(1)) if match else None


def confidence_from_percent(percent: int | None) -> float:
    """Map a discount percentage onto a bounded success-rate estimate."""
    if not percent:
        return DEFAULT_SUCCESS_RATE
    return min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, percent / 100))
