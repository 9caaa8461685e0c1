"""Heuristic coupon extraction — HTML in, ranked coupons out."""

from coupon_catalog.extract.assembler import assemble, parse_coupons
from coupon_catalog.extract.blocks import select_candidate_blocks
from coupon_catalog.extract.codes import extract_candidates, find_codes
from coupon_catalog.extract.models import Coupon, TextBlock
from coupon_catalog.extract.percent import confidence_from_percent, extract_percent
from coupon_catalog.extract.ranking import finalize, rank
from coupon_catalog.extract.tree import parse_document

__all__ = [
    "assemble",
    "parse_coupons",
    "select_candidate_blocks",
    "extract_candidates",
    "find_codes",
    "Coupon",
    "TextBlock",
    "confidence_from_percent",
    "extract_percent",
    "finalize",
    "rank",
    "parse_document",
]
