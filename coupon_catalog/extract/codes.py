"""Candidate coupon-code matching over flattened text."""

from __future__ import annotations

import re

# Words that look like codes on coupon pages but never are.
STOPLIST: frozenset[str] = frozenset(
    {"OFF", "SALE", "VALID", "COUPON", "CODE", "ALCOUPON", "ALCOUPONCOM", "COPY"}
)

# ASCII word boundaries: text in non-Latin scripts still delimits a code.
_CODE_RE = re.compile(r"\b([A-Z0-9]{3,12})\b", re.ASCII)
_PRICE_RE = re.compile(r"\d{4,}", re.ASCII)


def _is_code(token: str) -> bool:
    if token in STOPLIST:
        return False
    # Long all-digit runs are prices, not codes.
    if _PRICE_RE.fullmatch(token):
        return False
    return True


def find_codes(text: str) -> list[str]:
    """Return distinct candidate codes in *text*, in order of first appearance.

    Matching is case-sensitive; do not lower-case *text* beforehand.
    """
    found: dict[str, None] = {}
    for match in _CODE_RE.finditer(text or ""):
        token = match.group(1)
        if _is_code(token):
            found.setdefault(token, None)
    return list(found)


def extract_candidates(text: str) -> set[str]:
    """Return the set of candidate codes in *text* (empty when none match)."""
    return set(find_codes(text))
