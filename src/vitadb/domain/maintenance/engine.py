"""Run the integrity passes over the committed catalog."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .passes import DEFAULT_PASSES
from .report import PassReport, PassStatus

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from vitadb.domain.cancellation import CancellationToken
    from vitadb.domain.ports.unit_of_work import CatalogUnitOfWork

    from .passes import MaintenancePass

log = getLogger(__name__)


def run_integrity_maintenance(
    *,
    unit_of_work_factory: Callable[[], CatalogUnitOfWork],
    cancellation: CancellationToken | None = None,
    passes: Sequence[MaintenancePass] = DEFAULT_PASSES,
) -> list[PassReport]:
    """Run every pass in order, each in its own unit of work.

    A pass that raises is reported as ``ERROR`` and the next pass still runs.
    Cancellation stops after the pass that observed it.
    """

    reports: list[PassReport] = []
    for maintenance_pass in passes:
        if cancellation is not None and cancellation.cancelled:
            break
        report = run_pass(
            maintenance_pass,
            unit_of_work_factory=unit_of_work_factory,
            cancellation=cancellation,
        )
        reports.append(report)
        if report.status is PassStatus.CANCELLED:
            break
    return reports


def run_pass(
    maintenance_pass: MaintenancePass,
    *,
    unit_of_work_factory: Callable[[], CatalogUnitOfWork],
    cancellation: CancellationToken | None = None,
) -> PassReport:
    report = PassReport(name=maintenance_pass.name)
    log.info("Checking for %s...", maintenance_pass.description)
    try:
        with unit_of_work_factory() as uow:
            maintenance_pass.run(uow, report, cancellation)
    except Exception as exc:
        log.exception("Pass %s failed", maintenance_pass.name)
        report.status = PassStatus.ERROR
        report.error = str(exc)
        return report

    log.info("%s: [%s]", maintenance_pass.name, report.status.upper())
    for entry in report.repaired_entries:
        log.info("* %s [FIXED]", entry)
    for entry in report.unresolved_entries:
        log.info("* %s", entry)
    return report
