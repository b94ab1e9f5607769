from __future__ import annotations

from typing import TYPE_CHECKING

from vitadb.domain.cancellation import CancellationToken
from vitadb.domain.maintenance import (
    DEFAULT_PASSES,
    MaintenancePass,
    PassStatus,
    run_integrity_maintenance,
)
from vitadb.domain.model import placeholder_for
from tests.helpers.catalog import BASE_ID, FakeRecordRepository, FakeUnitOfWork, make_record

if TYPE_CHECKING:
    from vitadb.domain.maintenance import PassReport
    from vitadb.domain.ports.unit_of_work import CatalogUnitOfWork


def _explode(uow: CatalogUnitOfWork, report: PassReport, cancellation: object) -> None:
    raise RuntimeError("store went away")


def test_default_passes_run_in_order() -> None:
    uow = FakeUnitOfWork()

    reports = run_integrity_maintenance(unit_of_work_factory=lambda: uow)

    assert [report.name for report in reports] == [
        "short-id-consistency",
        "resolvable-placeholders",
        "name-whitespace",
        "empty-locks",
        "dangling-parents",
        "addon-parents",
    ]
    assert all(report.status is PassStatus.PASS for report in reports)


def test_failing_pass_does_not_stop_the_rest() -> None:
    placeholder = placeholder_for("PCSF00001")
    uow = FakeUnitOfWork(
        records=FakeRecordRepository([make_record(placeholder), make_record(BASE_ID)])
    )
    passes = (MaintenancePass("broken", "a pass that fails", _explode), *DEFAULT_PASSES)

    reports = run_integrity_maintenance(unit_of_work_factory=lambda: uow, passes=passes)

    assert reports[0].status is PassStatus.ERROR
    assert reports[0].error == "store went away"
    assert len(reports) == len(passes)
    assert reports[2].name == "resolvable-placeholders"
    assert reports[2].repaired_count == 1
    assert uow.records.find(placeholder) is None
    assert uow.rollbacks == 1


def test_cancelled_maintenance_runs_nothing() -> None:
    cancellation = CancellationToken()
    cancellation.cancel()

    reports = run_integrity_maintenance(
        unit_of_work_factory=FakeUnitOfWork,
        cancellation=cancellation,
    )

    assert reports == []
