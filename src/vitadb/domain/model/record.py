"""Catalog records and their provenance locks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from vitadb.domain.model.enums import Category, FieldLock, is_base_category
from vitadb.domain.model.identity import is_placeholder

if TYPE_CHECKING:
    from datetime import datetime

NO_LICENSE_REQUIRED: Final[str] = "NOT REQUIRED"

LOCKABLE_ATTRIBUTES: Final[dict[FieldLock, str]] = {
    FieldLock.CANONICAL_ID: "canonical_id",
    FieldLock.SHORT_ID: "short_id",
    FieldLock.CATEGORY: "category",
    FieldLock.PARENT_ID: "parent_id",
    FieldLock.NAME: "name",
    FieldLock.ALT_NAME: "alt_name",
    FieldLock.PACKAGE: "package_id",
    FieldLock.LICENSE_TOKEN: "license_token",
}


def is_empty_value(value: object) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


@dataclass(eq=False, kw_only=True)
class Record:
    """One distributable title or variant (base app, demo, add-on, theme)."""

    canonical_id: str
    short_id: str
    category: Category | None = None
    parent_id: str | None = None
    name: str | None = None
    alt_name: str | None = None
    package_id: int | None = None
    license_token: str | None = None
    field_locks: FieldLock = FieldLock.NONE
    updated_at: datetime | None = None

    @property
    def is_placeholder(self) -> bool:
        return is_placeholder(self.canonical_id)

    @property
    def is_base(self) -> bool:
        return is_base_category(self.category)

    def is_locked(self, lock: FieldLock) -> bool:
        return (self.field_locks & lock) == lock

    def lock(self, *locks: FieldLock) -> None:
        for lock in locks:
            self.field_locks = FieldLock(self.field_locks | lock)

    def unlock(self, *locks: FieldLock) -> None:
        for lock in locks:
            self.field_locks = FieldLock(self.field_locks & ~lock)

    def value_of(self, lock: FieldLock) -> object:
        return getattr(self, LOCKABLE_ATTRIBUTES[lock])

    def locked_fields(self) -> tuple[FieldLock, ...]:
        return tuple(lock for lock in LOCKABLE_ATTRIBUTES if self.is_locked(lock))

    def empty_locked_fields(self) -> tuple[FieldLock, ...]:
        """Locks whose field holds no value (such a lock protects nothing)."""

        return tuple(lock for lock in self.locked_fields() if is_empty_value(self.value_of(lock)))
