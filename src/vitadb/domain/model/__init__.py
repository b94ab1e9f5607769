"""Public domain model surface."""

from __future__ import annotations

from vitadb.domain.model.enums import (
    Category,
    EvidenceSource,
    FieldLock,
    ImportKind,
    is_base_category,
)
from vitadb.domain.model.identity import (
    CANONICAL_ID_LENGTH,
    PLACEHOLDER_MARKER,
    SHORT_ID_LENGTH,
    SHORT_ID_OFFSET,
    is_bundle_id,
    is_placeholder,
    placeholder_for,
    short_id_from,
    validate_canonical_id,
    validate_short_id,
)
from vitadb.domain.model.package import Package
from vitadb.domain.model.record import (
    LOCKABLE_ATTRIBUTES,
    NO_LICENSE_REQUIRED,
    Record,
    is_empty_value,
)

__all__ = [  # noqa: RUF022
    # identity
    "CANONICAL_ID_LENGTH",
    "PLACEHOLDER_MARKER",
    "SHORT_ID_LENGTH",
    "SHORT_ID_OFFSET",
    "is_bundle_id",
    "is_placeholder",
    "placeholder_for",
    "short_id_from",
    "validate_canonical_id",
    "validate_short_id",
    # entities
    "Package",
    "Record",
    "LOCKABLE_ATTRIBUTES",
    "NO_LICENSE_REQUIRED",
    "is_empty_value",
    # enums
    "Category",
    "EvidenceSource",
    "FieldLock",
    "ImportKind",
    "is_base_category",
]
