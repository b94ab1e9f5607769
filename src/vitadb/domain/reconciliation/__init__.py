"""Identity reconciliation for catalog import rows.

Flow for one row:
1) sanitize the row (urls, license tokens, display names)
2) gather candidate identities from the row and the decoders
3) merge candidates into one canonical id or reject the row
4) infer the category and derive/validate the short id
5) gate add-ons, assign placeholders, cross-check, link parents
6) upsert against the store honoring provenance locks
"""

from __future__ import annotations

from .contracts import (
    ImportOutcome,
    ImportRow,
    ImportStatus,
    ImportSummary,
    Inserted,
    Rejected,
    Updated,
)
from .engine import CatalogReconciler, reconcile_rows
from .errors import (
    IdentityShortIdMismatch,
    InvalidIdentity,
    MismatchedIdentity,
    ReconciliationError,
    RejectionReason,
    UnresolvableAddon,
)
from .upsert import UpsertOutcome, UpsertResult, upsert

__all__ = [
    "CatalogReconciler",
    "IdentityShortIdMismatch",
    "ImportOutcome",
    "ImportRow",
    "ImportStatus",
    "ImportSummary",
    "Inserted",
    "InvalidIdentity",
    "MismatchedIdentity",
    "ReconciliationError",
    "Rejected",
    "RejectionReason",
    "UnresolvableAddon",
    "Updated",
    "UpsertOutcome",
    "UpsertResult",
    "reconcile_rows",
    "upsert",
]
