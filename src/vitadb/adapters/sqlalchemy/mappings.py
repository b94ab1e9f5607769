"""SQLAlchemy mapping metadata for the VitaDB domain model."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Integer,
    String,
    Table,
    TypeDecorator,
    orm,
)
from sqlalchemy.orm import configure_mappers

from vitadb.domain.model import CANONICAL_ID_LENGTH, Category, FieldLock, Package, Record

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class CategoryType(TypeDecorator[Category]):
    """Store categories by their numeric code (1, 3, 101, 201, 601)."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value: Category | int | None, dialect: Dialect) -> int | None:
        _ = dialect
        if value is None:
            return None
        return int(value)

    def process_result_value(self, value: int | None, dialect: Dialect) -> Category | None:
        _ = dialect
        if value is None:
            return None
        return Category(value)


class FieldLockType(TypeDecorator[FieldLock]):
    """Store the lock bitset as a plain integer."""

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value: FieldLock | int | None, dialect: Dialect) -> int:
        _ = dialect
        return int(value or 0)

    def process_result_value(self, value: int | None, dialect: Dialect) -> FieldLock:
        _ = dialect
        return FieldLock(value or 0)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

package_table = Table(
    "package",
    mapper_registry.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("url", String, nullable=False, unique=True),
    Column("content_id", String(CANONICAL_ID_LENGTH), nullable=False, index=True),
)

# No foreign key on parent_id: dangling parents are legal and reported by maintenance.
record_table = Table(
    "record",
    mapper_registry.metadata,
    Column("canonical_id", String(CANONICAL_ID_LENGTH), primary_key=True),
    Column("short_id", String, nullable=False, index=True),
    Column("category", CategoryType, nullable=True),
    Column("parent_id", String(CANONICAL_ID_LENGTH), nullable=True, index=True),
    Column("name", String, nullable=True),
    Column("alt_name", String, nullable=True),
    Column(
        "package_id",
        Integer,
        ForeignKey("package.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("license_token", String, nullable=True),
    Column("field_locks", FieldLockType, nullable=False, default=0),
    Column("updated_at", UTCDateTime, nullable=True),
)


@cache
def start_mappers() -> orm.registry:
    """Configure SQLAlchemy mappers for the domain model."""

    log.info("Starting SQLAlchemy mappers")

    mapper_registry.map_imperatively(Package, package_table)
    mapper_registry.map_imperatively(Record, record_table)

    configure_mappers()
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the mapped metadata."""

    log.info("Creating all tables")
    mapper_registry.metadata.create_all(engine)
