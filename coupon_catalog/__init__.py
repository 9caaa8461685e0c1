"""Coupon catalog — heuristic discount-code extraction and per-merchant catalogs."""
