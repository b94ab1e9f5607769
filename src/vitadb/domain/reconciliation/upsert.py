"""Merge a resolved candidate record into the store, honoring provenance locks."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from vitadb.domain.model import LOCKABLE_ATTRIBUTES, FieldLock, is_empty_value

if TYPE_CHECKING:
    from vitadb.domain.model import Record
    from vitadb.domain.ports.persistence import RecordRepository

log = getLogger(__name__)

type Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(UTC)


class UpsertOutcome(StrEnum):
    INSERTED = "inserted"
    UPDATED = "updated"


@dataclass(slots=True, frozen=True)
class UpsertResult:
    outcome: UpsertOutcome
    canonical_id: str
    changed_fields: tuple[str, ...] = ()


def upsert(candidate: Record, *, records: RecordRepository, clock: Clock = utcnow) -> UpsertResult:
    """Insert ``candidate`` or merge it into the stored record with the same canonical id.

    Locked fields of the stored record are never overwritten. Unlocked fields take the
    candidate's value when it has one. Locks carried by the candidate are acquired for
    fields that end up holding a value. Nothing is written when nothing changes.
    """

    existing = records.find(candidate.canonical_id)
    if existing is None:
        candidate.unlock(*candidate.empty_locked_fields())
        candidate.updated_at = clock()
        records.add(candidate)
        return UpsertResult(UpsertOutcome.INSERTED, candidate.canonical_id)

    changed = merge_into(existing, candidate)
    if changed:
        existing.updated_at = clock()
        records.update(existing)
    return UpsertResult(UpsertOutcome.UPDATED, existing.canonical_id, changed)


def merge_into(existing: Record, candidate: Record) -> tuple[str, ...]:
    """Apply ``candidate`` onto ``existing`` field by field; return the changed field names."""

    changed: list[str] = []
    for lock, attribute in LOCKABLE_ATTRIBUTES.items():
        if lock is FieldLock.CANONICAL_ID:
            continue
        value = getattr(candidate, attribute)
        if is_empty_value(value):
            continue
        current = getattr(existing, attribute)
        if current == value:
            continue
        if existing.is_locked(lock):
            log.debug(
                "%s: keeping locked %s=%r over %r",
                existing.canonical_id,
                attribute,
                current,
                value,
            )
            continue
        setattr(existing, attribute, value)
        changed.append(attribute)

    acquired = [
        lock
        for lock in candidate.locked_fields()
        if not existing.is_locked(lock) and not is_empty_value(existing.value_of(lock))
    ]
    if acquired:
        existing.lock(*acquired)
        changed.append("field_locks")
    return tuple(changed)
