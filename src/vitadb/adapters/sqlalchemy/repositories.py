"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, cast

from sqlalchemy import select

from vitadb.adapters.sqlalchemy.mappings import package_table, record_table
from vitadb.domain.model import Package, Record

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from sqlalchemy.orm import Session

_SCAN_BATCH_SIZE: Final[int] = 500


class SqlAlchemyRecordRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find(self, canonical_id: str) -> Record | None:
        return self.session.get(Record, canonical_id)

    def add(self, record: Record) -> None:
        self.session.add(record)

    def update(self, record: Record) -> None:
        # Records handed out by this repository are already attached; this covers
        # detached copies as well.
        self.session.add(record)

    def delete(self, canonical_id: str) -> None:
        record = self.find(canonical_id)
        if record is not None:
            self.session.delete(record)

    def all(self) -> Iterator[Record]:
        stmt = (
            select(Record)
            .order_by(record_table.c.canonical_id)
            .execution_options(yield_per=_SCAN_BATCH_SIZE)
        )
        return iter(self.session.scalars(stmt))

    def find_by_short_id(self, short_id: str) -> Sequence[Record]:
        stmt = (
            select(Record)
            .where(record_table.c.short_id == short_id)
            .order_by(record_table.c.updated_at.desc().nulls_last(), record_table.c.canonical_id)
        )
        return self.session.scalars(stmt).all()


class SqlAlchemyPackageRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def find_by_url(self, url: str) -> Package | None:
        stmt = select(Package).where(package_table.c.url == url).limit(1)
        return self.session.scalars(stmt).first()

    def add(self, package: Package) -> None:
        self.session.add(package)
        # Flush so the caller can reference the generated id.
        self.session.flush()


if TYPE_CHECKING:
    from vitadb.domain.ports.persistence import PackageRepository, RecordRepository

    _session_stub = cast("Session", object())
    _record_repo: RecordRepository = SqlAlchemyRecordRepository(_session_stub)
    _package_repo: PackageRepository = SqlAlchemyPackageRepository(_session_stub)
