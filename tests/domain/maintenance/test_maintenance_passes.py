from __future__ import annotations

from vitadb.domain.cancellation import CancellationToken
from vitadb.domain.maintenance import PassReport, PassStatus
from vitadb.domain.maintenance.passes import (
    clear_empty_locks,
    fix_short_ids,
    normalize_names,
    remove_resolvable_placeholders,
    report_addon_parents,
    report_dangling_parents,
)
from vitadb.domain.model import Category, FieldLock, Record, placeholder_for
from tests.helpers.catalog import (
    BASE_ID,
    DLC_ID,
    THEME_ID,
    FakeRecordRepository,
    FakeUnitOfWork,
    make_record,
)


def _uow(*records: Record) -> FakeUnitOfWork:
    return FakeUnitOfWork(records=FakeRecordRepository(records))


def test_fix_short_ids_repairs_then_is_a_no_op() -> None:
    uow = _uow(make_record(BASE_ID, short_id="PCSE99999"))

    first = PassReport(name="short-id-consistency")
    fix_short_ids(uow, first, None)
    second = PassReport(name="short-id-consistency")
    fix_short_ids(uow, second, None)

    stored = uow.records.find(BASE_ID)
    assert stored is not None
    assert stored.short_id == "PCSF00001"
    assert first.status is PassStatus.FAIL
    assert first.repaired_count == 1
    assert "PCSE99999" in first.repaired_entries[0]
    assert uow.commits == 1
    assert second.status is PassStatus.PASS
    assert second.repaired_count == 0


def test_resolvable_placeholder_is_deleted() -> None:
    placeholder = placeholder_for("PCSC00010")
    resolved = "UP1234-PCSC00010_00-0000000000000000"
    uow = _uow(make_record(placeholder), make_record(resolved))
    report = PassReport(name="resolvable-placeholders")

    remove_resolvable_placeholders(uow, report, None)

    assert uow.records.find(placeholder) is None
    assert uow.records.find(resolved) is not None
    assert report.repaired_entries == [f"{placeholder} -> {resolved}"]


def test_placeholder_kept_when_only_addons_are_resolved() -> None:
    placeholder = placeholder_for("PCSF00001")
    uow = _uow(make_record(placeholder), make_record(DLC_ID, category=Category.DLC))
    report = PassReport(name="resolvable-placeholders")

    remove_resolvable_placeholders(uow, report, None)

    assert uow.records.find(placeholder) is not None
    assert report.status is PassStatus.PASS


def test_normalize_names_trims_and_replaces_line_breaks() -> None:
    uow = _uow(make_record(name=" Two\nLines ", alt_name="Fine"))
    report = PassReport(name="name-whitespace")

    normalize_names(uow, report, None)

    stored = uow.records.find(BASE_ID)
    assert stored is not None
    assert stored.name == "Two Lines"
    assert stored.alt_name == "Fine"
    assert report.repaired_entries == [f"{BASE_ID}: NAME ' Two\\nLines ' -> 'Two Lines'"]


def test_clear_empty_locks_keeps_locks_with_values() -> None:
    record = make_record(name="Game", field_locks=FieldLock.CANONICAL_ID | FieldLock.NAME)
    record.lock(FieldLock.PACKAGE, FieldLock.LICENSE_TOKEN)
    uow = _uow(record)
    report = PassReport(name="empty-locks")

    clear_empty_locks(uow, report, None)

    assert record.field_locks == FieldLock.CANONICAL_ID | FieldLock.NAME
    assert report.repaired_entries == [f"{BASE_ID}: PACKAGE, LICENSE_TOKEN"]


def test_dangling_parents_are_reported_not_repaired() -> None:
    missing = "EP0001-PCSA00002_00-GAMEGAMEGAME0002"
    bundle = "EP0001-CUSA00001_00-BUNDLEBUNDLEBUND"
    uow = _uow(
        make_record(BASE_ID),
        make_record(DLC_ID, category=Category.DLC, parent_id=BASE_ID),
        make_record(THEME_ID, category=Category.THEME, parent_id=missing),
        make_record(
            "EP0001-PCSF00001_00-ADDONADDONADD002",
            category=Category.DLC,
            parent_id=bundle,
        ),
    )
    report = PassReport(name="dangling-parents")

    report_dangling_parents(uow, report, None)

    assert report.status is PassStatus.FAIL
    assert report.unresolved_entries == [missing]
    assert report.repaired_count == 0
    assert uow.commits == 0
    assert uow.records.find(THEME_ID) is not None


def test_addon_parents_are_reported_sorted_by_short_id() -> None:
    other_dlc = "EP0001-PCSA00001_00-ADDONADDONADD003"
    uow = _uow(
        make_record(DLC_ID, category=Category.DLC),
        make_record(other_dlc, category=Category.DLC),
        make_record(THEME_ID, category=Category.THEME, parent_id=DLC_ID),
        make_record(
            "EP0001-PCSA00001_00-THEMETHEMETHEM02",
            category=Category.THEME,
            parent_id=other_dlc,
        ),
    )
    report = PassReport(name="addon-parents")

    report_addon_parents(uow, report, None)

    assert report.unresolved_entries == [other_dlc, DLC_ID]


def test_passes_stop_when_cancelled() -> None:
    uow = _uow(make_record(BASE_ID, short_id="PCSE99999"))
    cancellation = CancellationToken()
    cancellation.cancel()
    report = PassReport(name="short-id-consistency")

    fix_short_ids(uow, report, cancellation)

    assert report.status is PassStatus.CANCELLED
    assert uow.commits == 0
