"""Reading and writing the ``coupons.json`` artifact.

The artifact maps merchant host to a list of
``{"code", "description", "successRate"}`` objects.  It is the only contract
with the browser-side viewer.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Sequence

from coupon_catalog.errors import CatalogWriteError
from coupon_catalog.extract import Coupon


def catalog_to_json(catalog: Mapping[str, Sequence[Coupon]]) -> str:
    """Serialise *catalog* as pretty-printed JSON (non-ASCII kept as-is)."""
    payload = {host: [c.to_dict() for c in coupons] for host, coupons in catalog.items()}
    return json.dumps(payload, indent=2, ensure_ascii=False)


def write_catalog(catalog: Mapping[str, Sequence[Coupon]], path: Path | str) -> Path:
    """Write *catalog* to *path* as UTF-8 and return the resolved path.

    Raises:
        CatalogWriteError: If the directory or file cannot be written.
    """
    out = Path(path).resolve()
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(catalog_to_json(catalog), encoding="utf-8")
    except OSError as exc:
        raise CatalogWriteError(f"Cannot write {str(out)!r}: {exc}") from exc
    return out


def load_catalog(path: Path | str) -> dict[str, list[Coupon]]:
    """Read an artifact back into coupons.

    Entries without a code are skipped.  Raises ``OSError`` or
    ``json.JSONDecodeError`` unchanged for the caller to report.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, dict):
        return {}

    catalog: dict[str, list[Coupon]] = {}
    for host, entries in raw.items():
        if not isinstance(entries, list):
            continue
        coupons = [Coupon.from_dict(e) for e in entries if isinstance(e, dict)]
        catalog[str(host)] = [c for c in coupons if c.code]
    return catalog
