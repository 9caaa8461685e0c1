"""Turns a parsed page into coupon records.

Per candidate block: the codes found in its text, a description taken from
the block's first ``h1``-``h3`` (or its leading text), and a confidence from
the first percentage it mentions.  When no block yields a code, the whole
``<body>`` is scanned instead so pages whose markup defeats the block
heuristic still produce something.
"""

from __future__ import annotations

from coupon_catalog.extract.blocks import select_candidate_blocks
from coupon_catalog.extract.codes import find_codes
from coupon_catalog.extract.models import (
    DEFAULT_DESCRIPTION,
    DEFAULT_SUCCESS_RATE,
    Coupon,
    TextBlock,
)
from coupon_catalog.extract.percent import confidence_from_percent, extract_percent
from coupon_catalog.extract.ranking import finalize
from coupon_catalog.extract.tree import (
    DocumentNode,
    find_first,
    flatten_text,
    normalize_whitespace,
    parse_document,
)

HEADING_TAGS = ("h1", "h2", "h3")
SNIPPET_LENGTH = 140

# Elements that belong to <head> even when the markup omits the <head> tag.
HEAD_ONLY_TAGS = frozenset({"head", "title", "meta", "link", "base"})


def _describe(block: TextBlock) -> str:
    heading = find_first(block.node, HEADING_TAGS)
    heading_text = flatten_text(heading) if heading is not None else ""
    return heading_text or block.text[:SNIPPET_LENGTH] or DEFAULT_DESCRIPTION


def _body_text(doc: DocumentNode) -> str:
    body = find_first(doc, ("body",))
    if body is not None:
        return flatten_text(body)
    # Fragments and body-less pages: everything outside the head elements.
    return normalize_whitespace(doc.text(exclude=HEAD_ONLY_TAGS))


def _scan_body(doc: DocumentNode) -> list[Coupon]:
    return [
        Coupon(code=code, description=DEFAULT_DESCRIPTION, success_rate=DEFAULT_SUCCESS_RATE)
        for code in find_codes(_body_text(doc))
    ]


def assemble(doc: DocumentNode) -> list[Coupon]:
    """Return every coupon found in *doc* in discovery order.

    The result is neither deduplicated nor ranked; see :func:`finalize`.
    """
    coupons: list[Coupon] = []
    for block in select_candidate_blocks(doc):
        codes = find_codes(block.text)
        if not codes:
            continue
        description = _describe(block)
        rate = confidence_from_percent(extract_percent(block.text))
        coupons.extend(
            Coupon(code=code, description=description, success_rate=rate) for code in codes
        )

    if not coupons:
        coupons = _scan_body(doc)
    return coupons


def parse_coupons(html: str) -> list[Coupon]:
    """Parse *html* and return its deduplicated, ranked coupons."""
    return finalize(assemble(parse_document(html)))
