"""Data models for the fetch step."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class RawPage:
    """The raw HTTP response for a single merchant page fetch."""

    url: str
    html: str
    status_code: int
