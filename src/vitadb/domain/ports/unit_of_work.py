"""Unit-of-work abstractions for coordinating repositories."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from vitadb.domain.ports.persistence import PackageRepository, RecordRepository


@dataclass(slots=True)
class CatalogRepositories:
    """Repositories required to reconcile and maintain the catalog."""

    records: RecordRepository
    packages: PackageRepository


@runtime_checkable
class CatalogUnitOfWork(Protocol):
    """Transaction boundary around the catalog repositories."""

    @property
    def repositories(self) -> CatalogRepositories: ...

    def __enter__(self) -> CatalogUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
