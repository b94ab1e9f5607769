"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, IntFlag, StrEnum


class Category(IntEnum):
    """Closed set of catalog record kinds, stored by their numeric code."""

    APP = 1
    DEMO = 3
    DLC = 101
    THEME = 201
    PSM = 601

    @property
    def is_addon(self) -> bool:
        return self in (Category.DLC, Category.THEME)


def is_base_category(category: Category | None) -> bool:
    """Unclassified records count as base records."""

    return category is None or not category.is_addon


class FieldLock(IntFlag):
    """One bit per record field that an authoritative source has confirmed."""

    NONE = 0
    CANONICAL_ID = 1 << 0
    SHORT_ID = 1 << 1
    CATEGORY = 1 << 2
    PARENT_ID = 1 << 3
    NAME = 1 << 4
    ALT_NAME = 1 << 5
    PACKAGE = 1 << 6
    LICENSE_TOKEN = 1 << 7


class EvidenceSource(IntEnum):
    """Where a candidate identity came from; higher values carry more authority."""

    ROW = 1
    LICENSE_TOKEN = 2
    PACKAGE_URL = 3

    @property
    def label(self) -> str:
        return _EVIDENCE_LABELS[self]


_EVIDENCE_LABELS: dict[EvidenceSource, str] = {
    EvidenceSource.ROW: "row",
    EvidenceSource.LICENSE_TOKEN: "license token",
    EvidenceSource.PACKAGE_URL: "package url",
}


class ImportKind(StrEnum):
    """Spreadsheet flavours; each one implies a default category."""

    APPS = "apps"
    DLC = "dlc"
    PSM = "psm"

    @property
    def default_category(self) -> Category:
        return _DEFAULT_CATEGORIES[self]


_DEFAULT_CATEGORIES: dict[ImportKind, Category] = {
    ImportKind.APPS: Category.APP,
    ImportKind.DLC: Category.DLC,
    ImportKind.PSM: Category.PSM,
}
