"""Viewer endpoints.

Routes
------
GET /coupons.json     — the raw artifact, never cached by the browser
GET /coupons?q=<text> — grouped, filtered rows ready for display

Both re-read the artifact on every request so a refresh always reflects the
latest scrape.  The file is never written.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import Response

from coupon_catalog.catalog import load_catalog
from coupon_catalog.viewer.render import filter_catalog, render_rows, summary

router = APIRouter()

_NO_STORE = {"Cache-Control": "no-store"}


def _catalog_path(request: Request) -> Path:
    path: Path = request.app.state.catalog_path
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"{path.name} not found")
    return path


@router.get("/coupons.json")
def raw_catalog(request: Request) -> Response:
    """Serve the artifact byte-for-byte."""
    path = _catalog_path(request)
    return Response(
        content=path.read_bytes(),
        media_type="application/json",
        headers=_NO_STORE,
    )


@router.get("/coupons")
def search_coupons(request: Request, q: str = "") -> dict[str, Any]:
    """Return coupon groups whose host, code or description contains *q*."""
    path = _catalog_path(request)
    try:
        catalog = load_catalog(path)
    except (OSError, json.JSONDecodeError) as exc:
        raise HTTPException(status_code=500, detail=f"Unreadable catalog: {exc}") from exc

    groups = filter_catalog(catalog, q)
    return {
        "summary": summary(groups),
        "groups": [
            {
                "host": host,
                "count": len(coupons),
                "coupons": [row.to_dict() for row in render_rows(coupons)],
            }
            for host, coupons in groups
        ],
    }
