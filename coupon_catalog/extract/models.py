"""Value types produced by the extraction engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from coupon_catalog.extract.tree import DocumentNode

DEFAULT_DESCRIPTION = "Coupon code"
DEFAULT_SUCCESS_RATE = 0.33


@dataclass(frozen=True, eq=False)
class TextBlock:
    """A candidate region: the tree node plus its whitespace-collapsed text."""

    node: DocumentNode
    text: str


@dataclass(frozen=True)
class Coupon:
    """One extracted discount code.

    ``success_rate`` is serialised as ``successRate``, the key the viewer
    reads.  It may only be ``None`` on coupons loaded from a foreign artifact.
    """

    code: str
    description: str = DEFAULT_DESCRIPTION
    success_rate: float | None = DEFAULT_SUCCESS_RATE

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "description": self.description,
            "successRate": self.success_rate,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Coupon:
        rate = data.get("successRate")
        if isinstance(rate, bool) or not isinstance(rate, (int, float)):
            rate = None
        return cls(
            code=str(data.get("code") or ""),
            description=str(data.get("description") or ""),
            success_rate=float(rate) if rate is not None else None,
        )
