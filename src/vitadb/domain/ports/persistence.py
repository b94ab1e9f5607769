"""Ports for persisting catalog records and packages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from vitadb.domain.model import Package, Record


@runtime_checkable
class RecordRepository(Protocol):
    """Persistence contract for catalog records keyed by canonical id."""

    def find(self, canonical_id: str) -> Record | None: ...

    def add(self, record: Record) -> None: ...

    def update(self, record: Record) -> None: ...

    def delete(self, canonical_id: str) -> None: ...

    def all(self) -> Iterator[Record]:
        """Iterate every record; each call starts a fresh scan."""
        ...

    def find_by_short_id(self, short_id: str) -> Sequence[Record]:
        """Records sharing ``short_id``, most recently updated first."""
        ...


@runtime_checkable
class PackageRepository(Protocol):
    """Persistence contract for package artifacts."""

    def find_by_url(self, url: str) -> Package | None: ...

    def add(self, package: Package) -> None:
        """Store ``package`` and assign its ``id``."""
        ...
