"""Category inference, add-on gating, placeholder identities and parent linkage."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Final

from vitadb.domain.model import Category, is_base_category, is_placeholder, placeholder_for

from .errors import IdentityShortIdMismatch, UnresolvableAddon

if TYPE_CHECKING:
    from vitadb.domain.model import Record
    from vitadb.domain.ports.persistence import RecordRepository

log = getLogger(__name__)

DLC_MARKER: Final[str] = "dlc"
THEME_MARKER: Final[str] = "theme"


def infer_category(short_id: str | None, default: Category | None) -> Category | None:
    """Spreadsheets sometimes tag add-on title ids, e.g. ``PCSE00001-DLC``."""

    lowered = (short_id or "").lower()
    if DLC_MARKER in lowered:
        return Category.DLC
    if THEME_MARKER in lowered:
        return Category.THEME
    return default


def settle_category(canonical_id: str, records: RecordRepository) -> Category:
    """Rows without a category keep the stored one; new records default to base apps."""

    existing = records.find(canonical_id)
    if existing is not None and existing.category is not None:
        return existing.category
    return Category.APP


def ensure_addon_identity(
    category: Category | None,
    canonical_id: str | None,
    short_id: str,
) -> None:
    """Add-ons have no placeholder scheme, so they need a resolved canonical id."""

    if is_base_category(category):
        return
    if not canonical_id or is_placeholder(canonical_id):
        raise UnresolvableAddon(short_id)


def _base_records(short_id: str, records: RecordRepository) -> list[Record]:
    return [record for record in records.find_by_short_id(short_id) if record.is_base]


def assign_placeholder(short_id: str, records: RecordRepository) -> str:
    """Pick the most likely canonical id for a base record of unknown identity."""

    candidates = _base_records(short_id, records)
    resolved = [record for record in candidates if not record.is_placeholder]
    existing = (resolved or candidates or [None])[0]
    if existing is not None:
        log.debug("Reusing %s for base record %s", existing.canonical_id, short_id)
        return existing.canonical_id
    return placeholder_for(short_id)


def check_short_id(canonical_id: str, short_id: str) -> None:
    if short_id not in canonical_id:
        raise IdentityShortIdMismatch(canonical_id, short_id)


def find_parent_id(short_id: str, records: RecordRepository) -> str | None:
    """Return the resolved base record an add-on with ``short_id`` bundles into."""

    for record in _base_records(short_id, records):
        if not record.is_placeholder:
            return record.canonical_id
    return None
