"""FastAPI application factory for the read-only coupon viewer.

Serve it with::

    uvicorn coupon_catalog.viewer.app:app --reload
"""

from __future__ import annotations

from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coupon_catalog.config import get_settings
from coupon_catalog.viewer import routes


def create_app(catalog_path: Path | str | None = None) -> FastAPI:
    """Return a viewer app reading the artifact at *catalog_path*.

    Defaults to ``settings.out_path``, the file the scraper writes.
    """
    app = FastAPI(
        title="Coupon Catalog Viewer",
        description="Read-only search over the scraped coupons.json artifact.",
        version="0.1.0",
    )
    app.state.catalog_path = Path(catalog_path or get_settings().out_path).resolve()

    # The browser viewer may be served from a different origin.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(routes.router, tags=["coupons"])
    return app


# Module-level instance used by uvicorn.
app = create_app()
