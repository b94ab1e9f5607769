"""Input rows and per-row outcomes exchanged with import drivers."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field, fields
from enum import StrEnum
from typing import TYPE_CHECKING, Final, Literal

if TYPE_CHECKING:
    from vitadb.domain.model import Category

    from .errors import RejectionReason


@dataclass(slots=True, frozen=True, kw_only=True)
class ImportRow:
    """One catalog entry offered by a driver.

    ``None`` means the driver had no such column; ``""`` means it was present but blank.
    """

    short_id: str | None = None
    canonical_id: str | None = None
    name: str | None = None
    alt_name: str | None = None
    package_url: str | None = None
    license_token: str | None = None
    default_category: Category | None = None


MAPPABLE_ROW_FIELDS: Final[tuple[str, ...]] = tuple(
    row_field.name for row_field in fields(ImportRow) if row_field.name != "default_category"
)


class ImportStatus(StrEnum):
    INSERTED = "inserted"
    UPDATED = "updated"
    REJECTED = "rejected"


@dataclass(slots=True, frozen=True, kw_only=True)
class Inserted:
    canonical_id: str
    status: Literal[ImportStatus.INSERTED] = ImportStatus.INSERTED


@dataclass(slots=True, frozen=True, kw_only=True)
class Updated:
    """``changed_fields`` is empty when the row added nothing new."""

    canonical_id: str
    changed_fields: tuple[str, ...] = ()
    status: Literal[ImportStatus.UPDATED] = ImportStatus.UPDATED


@dataclass(slots=True, frozen=True, kw_only=True)
class Rejected:
    reason: RejectionReason
    message: str
    status: Literal[ImportStatus.REJECTED] = ImportStatus.REJECTED


type ImportOutcome = Inserted | Updated | Rejected


@dataclass(slots=True)
class ImportSummary:
    """Counters for one import run."""

    processed: int = 0
    inserted: int = 0
    updated: int = 0
    unchanged: int = 0
    rejected: int = 0
    rejections: Counter[RejectionReason] = field(default_factory=Counter["RejectionReason"])
    cancelled: bool = False

    def record(self, outcome: ImportOutcome) -> None:
        self.processed += 1
        match outcome:
            case Inserted():
                self.inserted += 1
            case Updated(changed_fields=()):
                self.unchanged += 1
            case Updated():
                self.updated += 1
            case Rejected(reason=reason):
                self.rejected += 1
                self.rejections[reason] += 1
