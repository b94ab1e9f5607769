"""Per-row rejection errors raised while reconciling identity evidence.

None of these abort an import batch: the reconciler turns them into a
``Rejected`` outcome carrying the matching ``RejectionReason``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Mapping

    from vitadb.domain.model import EvidenceSource


class RejectionReason(StrEnum):
    INVALID_IDENTITY = "invalid_identity"
    MISMATCHED_IDENTITY = "mismatched_identity"
    UNRESOLVABLE_ADDON = "unresolvable_addon"
    IDENTITY_SHORT_ID_MISMATCH = "identity_short_id_mismatch"


class ReconciliationError(ValueError):
    """Base class for errors that reject a single import row."""

    reason: ClassVar[RejectionReason]


class InvalidIdentity(ReconciliationError):  # noqa: N818
    reason = RejectionReason.INVALID_IDENTITY

    def __init__(self, message: str, *, value: str | None = None) -> None:
        super().__init__(message)
        self.value = value


class MismatchedIdentity(ReconciliationError):  # noqa: N818
    reason = RejectionReason.MISMATCHED_IDENTITY

    def __init__(self, values_by_source: Mapping[EvidenceSource, str]) -> None:
        ordered = sorted(values_by_source.items(), key=lambda item: item[0], reverse=True)
        details = ", ".join(f"{source.label}={value}" for source, value in ordered)
        super().__init__(f"Canonical id mismatch between sources: {details}")
        self.values_by_source = dict(ordered)


class UnresolvableAddon(ReconciliationError):  # noqa: N818
    reason = RejectionReason.UNRESOLVABLE_ADDON

    def __init__(self, short_id: str) -> None:
        super().__init__(f"Unable to deduce add-on canonical id for {short_id}")
        self.short_id = short_id


class IdentityShortIdMismatch(ReconciliationError):  # noqa: N818
    reason = RejectionReason.IDENTITY_SHORT_ID_MISMATCH

    def __init__(self, canonical_id: str, short_id: str) -> None:
        super().__init__(f"Short id ({short_id}) and canonical id ({canonical_id}) do not match")
        self.canonical_id = canonical_id
        self.short_id = short_id
