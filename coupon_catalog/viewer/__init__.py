"""Viewer package — filtering/rendering and the read-only HTTP viewer."""

from coupon_catalog.viewer.render import (
    ViewerRow,
    filter_catalog,
    render_row,
    render_rows,
    summary,
)

__all__ = ["ViewerRow", "filter_catalog", "render_row", "render_rows", "summary"]
