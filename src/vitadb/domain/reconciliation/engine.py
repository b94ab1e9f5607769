"""Row-level reconciliation: evidence → identity → classification → upsert.

``CatalogReconciler.merge_and_upsert`` handles one row against open repositories.
``reconcile_rows`` drives a whole batch sequentially, committing after every row
and polling the cancellation token before starting the next one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from vitadb.domain.model import EvidenceSource, FieldLock, Package, Record
from vitadb.domain.ports.decoding import IdentityDecoders

from .classify import (
    assign_placeholder,
    check_short_id,
    ensure_addon_identity,
    find_parent_id,
    infer_category,
    settle_category,
)
from .contracts import ImportSummary, Inserted, Rejected, Updated
from .errors import ReconciliationError
from .evidence import gather_candidates, resolve_identity, resolve_short_id
from .sanitize import ZRIF_PREFIX, sanitize_row
from .upsert import UpsertOutcome, upsert, utcnow

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from vitadb.domain.cancellation import CancellationToken
    from vitadb.domain.ports.unit_of_work import CatalogRepositories, CatalogUnitOfWork

    from .contracts import ImportOutcome, ImportRow
    from .upsert import Clock

log = getLogger(__name__)


@dataclass(slots=True)
class CatalogReconciler:
    """Merge import rows into the catalog held by ``repositories``."""

    repositories: CatalogRepositories
    decoders: IdentityDecoders = field(default_factory=IdentityDecoders)
    token_prefix: str = ZRIF_PREFIX
    clock: Clock = utcnow

    def merge_and_upsert(self, row: ImportRow) -> ImportOutcome:
        try:
            candidate = self.resolve(row)
        except ReconciliationError as exc:
            log.warning("Rejected row (%s): %s", exc.reason, exc)
            return Rejected(reason=exc.reason, message=str(exc))

        result = upsert(candidate, records=self.repositories.records, clock=self.clock)
        log.debug(
            "%s: %s %s",
            candidate.short_id,
            candidate.canonical_id,
            "(I)" if result.outcome is UpsertOutcome.INSERTED else "(U)",
        )
        if result.outcome is UpsertOutcome.INSERTED:
            return Inserted(canonical_id=result.canonical_id)
        return Updated(canonical_id=result.canonical_id, changed_fields=result.changed_fields)

    def resolve(self, row: ImportRow) -> Record:
        """Build the fully classified candidate record for ``row`` without writing it."""

        row = sanitize_row(row, token_prefix=self.token_prefix)
        records = self.repositories.records

        identity = resolve_identity(gather_candidates(row, self.decoders))
        canonical_id = identity.canonical_id

        category = infer_category(row.short_id or "", row.default_category)
        short_id = resolve_short_id(row.short_id, canonical_id)
        ensure_addon_identity(category, canonical_id, short_id)

        if canonical_id is None:
            canonical_id = assign_placeholder(short_id, records)
        check_short_id(canonical_id, short_id)
        if category is None:
            category = settle_category(canonical_id, records)

        candidate = Record(
            canonical_id=canonical_id,
            short_id=short_id,
            category=category,
            name=row.name or None,
            alt_name=row.alt_name or None,
            license_token=row.license_token or None,
            field_locks=identity.locks,
        )
        if category.is_addon:
            candidate.parent_id = find_parent_id(short_id, records)
        if row.package_url and EvidenceSource.PACKAGE_URL in identity.sources:
            candidate.package_id = self._package_id(row.package_url, canonical_id)
        return candidate

    def _package_id(self, url: str, content_id: str) -> int | None:
        existing = self.repositories.records.find(content_id)
        if existing is not None and existing.is_locked(FieldLock.PACKAGE) and existing.package_id:
            return existing.package_id
        packages = self.repositories.packages
        package = packages.find_by_url(url)
        if package is None:
            package = Package(url=url, content_id=content_id)
            packages.add(package)
            log.info("Added package %s for %s", url, content_id)
        return package.id


def reconcile_rows(
    rows: Iterable[ImportRow],
    *,
    unit_of_work_factory: Callable[[], CatalogUnitOfWork],
    decoders: IdentityDecoders | None = None,
    cancellation: CancellationToken | None = None,
    token_prefix: str = ZRIF_PREFIX,
    clock: Clock = utcnow,
) -> ImportSummary:
    """Reconcile ``rows`` one at a time, committing each before moving on."""

    summary = ImportSummary()
    with unit_of_work_factory() as uow:
        reconciler = CatalogReconciler(
            repositories=uow.repositories,
            decoders=decoders or IdentityDecoders(),
            token_prefix=token_prefix,
            clock=clock,
        )
        for row in rows:
            if cancellation is not None and cancellation.cancelled:
                summary.cancelled = True
                break
            outcome = reconciler.merge_and_upsert(row)
            if not isinstance(outcome, Rejected):
                uow.commit()
            summary.record(outcome)

    log.info(
        "%s: processed=%s, inserted=%s, updated=%s, unchanged=%s, rejected=%s",
        "Import cancelled" if summary.cancelled else "Import finished",
        summary.processed,
        summary.inserted,
        summary.updated,
        summary.unchanged,
        summary.rejected,
    )
    return summary
