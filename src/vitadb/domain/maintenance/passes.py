"""The catalog invariant checks, each one restartable and independent.

Repairing passes scan first, then re-fetch every offending record by id before
touching it and commit record by record. Nothing is repaired from a stale copy,
so an earlier pass that deleted or rewrote records cannot leave a later pass
acting on a removed row.

The two parent checks only report: a dangling or add-on parent needs a human to
decide what the record should bundle into.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from vitadb.domain.model import is_bundle_id, short_id_from
from vitadb.domain.reconciliation.sanitize import clean_display_name

from .report import PassReport

if TYPE_CHECKING:
    from collections.abc import Callable

    from vitadb.domain.cancellation import CancellationToken
    from vitadb.domain.model import Record
    from vitadb.domain.ports.persistence import RecordRepository
    from vitadb.domain.ports.unit_of_work import CatalogUnitOfWork

log = getLogger(__name__)

type PassFunction = Callable[[CatalogUnitOfWork, PassReport, CancellationToken | None], None]


@dataclass(slots=True, frozen=True)
class MaintenancePass:
    name: str
    description: str
    run: PassFunction


def _cancelled(cancellation: CancellationToken | None, report: PassReport) -> bool:
    if cancellation is not None and cancellation.cancelled:
        report.cancel()
        return True
    return False


def _scan(
    records: RecordRepository,
    predicate: Callable[[Record], bool],
    report: PassReport,
    cancellation: CancellationToken | None,
) -> list[str] | None:
    """Collect canonical ids matching ``predicate``; ``None`` when cancelled mid-scan."""

    offenders: list[str] = []
    for record in records.all():
        if _cancelled(cancellation, report):
            return None
        if predicate(record):
            offenders.append(record.canonical_id)
    if offenders:
        report.found_violations()
    return offenders


def _by_short_id(canonical_id: str) -> tuple[str, str]:
    return short_id_from(canonical_id), canonical_id


def fix_short_ids(
    uow: CatalogUnitOfWork,
    report: PassReport,
    cancellation: CancellationToken | None,
) -> None:
    records = uow.repositories.records
    offenders = _scan(
        records,
        lambda record: record.short_id not in record.canonical_id,
        report,
        cancellation,
    )
    for canonical_id in offenders or ():
        if _cancelled(cancellation, report):
            return
        record = records.find(canonical_id)
        if record is None or record.short_id in record.canonical_id:
            continue
        previous = record.short_id
        record.short_id = short_id_from(record.canonical_id)
        records.update(record)
        uow.commit()
        report.repaired(f"{canonical_id}: short_id {previous!r} -> {record.short_id!r}")


def remove_resolvable_placeholders(
    uow: CatalogUnitOfWork,
    report: PassReport,
    cancellation: CancellationToken | None,
) -> None:
    records = uow.repositories.records
    groups: defaultdict[str, list[Record]] = defaultdict(list)
    for record in records.all():
        if _cancelled(cancellation, report):
            return
        groups[record.short_id].append(record)

    superseded: dict[str, str] = {}
    for group in groups.values():
        placeholder = next((record for record in group if record.is_placeholder), None)
        resolved = next(
            (record for record in group if not record.is_placeholder and record.is_base),
            None,
        )
        if placeholder is not None and resolved is not None:
            superseded[placeholder.canonical_id] = resolved.canonical_id
    if superseded:
        report.found_violations()

    for placeholder_id, resolved_id in superseded.items():
        if _cancelled(cancellation, report):
            return
        placeholder = records.find(placeholder_id)
        resolved = records.find(resolved_id)
        if placeholder is None or resolved is None or not resolved.is_base:
            continue
        records.delete(placeholder_id)
        uow.commit()
        report.repaired(f"{placeholder_id} -> {resolved_id}")


def _needs_name_cleanup(record: Record) -> bool:
    return (
        clean_display_name(record.name) != record.name
        or clean_display_name(record.alt_name) != record.alt_name
    )


def normalize_names(
    uow: CatalogUnitOfWork,
    report: PassReport,
    cancellation: CancellationToken | None,
) -> None:
    records = uow.repositories.records
    offenders = _scan(records, _needs_name_cleanup, report, cancellation)
    for canonical_id in offenders or ():
        if _cancelled(cancellation, report):
            return
        record = records.find(canonical_id)
        if record is None or not _needs_name_cleanup(record):
            continue
        changes: list[str] = []
        for attribute in ("name", "alt_name"):
            before = getattr(record, attribute)
            after = clean_display_name(before)
            if after != before:
                setattr(record, attribute, after)
                changes.append(f"{attribute.upper()} {before!r} -> {after!r}")
        records.update(record)
        uow.commit()
        report.repaired(f"{canonical_id}: {', '.join(changes)}")


def clear_empty_locks(
    uow: CatalogUnitOfWork,
    report: PassReport,
    cancellation: CancellationToken | None,
) -> None:
    records = uow.repositories.records
    offenders = _scan(
        records,
        lambda record: bool(record.empty_locked_fields()),
        report,
        cancellation,
    )
    for canonical_id in offenders or ():
        if _cancelled(cancellation, report):
            return
        record = records.find(canonical_id)
        if record is None:
            continue
        empty = record.empty_locked_fields()
        if not empty:
            continue
        record.unlock(*empty)
        records.update(record)
        uow.commit()
        report.repaired(f"{canonical_id}: {', '.join(str(lock.name) for lock in empty)}")


def _distinct_parent_ids(
    records: RecordRepository,
    report: PassReport,
    cancellation: CancellationToken | None,
) -> set[str] | None:
    parent_ids: set[str] = set()
    for record in records.all():
        if _cancelled(cancellation, report):
            return None
        if record.parent_id:
            parent_ids.add(record.parent_id)
    return parent_ids


def report_dangling_parents(
    uow: CatalogUnitOfWork,
    report: PassReport,
    cancellation: CancellationToken | None,
) -> None:
    records = uow.repositories.records
    parent_ids = _distinct_parent_ids(records, report, cancellation)
    if parent_ids is None:
        return
    dangling: list[str] = []
    for parent_id in parent_ids:
        if _cancelled(cancellation, report):
            return
        if is_bundle_id(parent_id):
            continue
        if records.find(parent_id) is None:
            dangling.append(parent_id)
    report.unresolved(sorted(dangling, key=_by_short_id))


def report_addon_parents(
    uow: CatalogUnitOfWork,
    report: PassReport,
    cancellation: CancellationToken | None,
) -> None:
    records = uow.repositories.records
    parent_ids = _distinct_parent_ids(records, report, cancellation)
    if parent_ids is None:
        return
    flagged: list[str] = []
    for parent_id in parent_ids:
        if _cancelled(cancellation, report):
            return
        parent = records.find(parent_id)
        if parent is not None and not parent.is_base:
            flagged.append(parent_id)
    report.unresolved(sorted(flagged, key=_by_short_id))


DEFAULT_PASSES: tuple[MaintenancePass, ...] = (
    MaintenancePass(
        "short-id-consistency",
        "short ids that don't match their canonical ids",
        fix_short_ids,
    ),
    MaintenancePass(
        "resolvable-placeholders",
        "placeholder canonical ids that can be resolved",
        remove_resolvable_placeholders,
    ),
    MaintenancePass(
        "name-whitespace",
        "names that should be trimmed or that contain line breaks",
        normalize_names,
    ),
    MaintenancePass(
        "empty-locks",
        "locked fields with an empty value",
        clear_empty_locks,
    ),
    MaintenancePass(
        "dangling-parents",
        "parent ids that don't exist as canonical ids",
        report_dangling_parents,
    ),
    MaintenancePass(
        "addon-parents",
        "parent ids that have an add-on category",
        report_addon_parents,
    ),
)
