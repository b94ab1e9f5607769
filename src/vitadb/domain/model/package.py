"""Package artifacts referenced by catalog records."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False, kw_only=True)
class Package:
    """A downloadable package file; ``id`` is assigned by the store."""

    url: str
    content_id: str
    id: int | None = None
