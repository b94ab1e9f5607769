"""Pydantic model for one spreadsheet row after column mapping."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from vitadb.domain.reconciliation.contracts import ImportRow

if TYPE_CHECKING:
    from vitadb.domain.model import Category


def _strip(value: object) -> object:
    if isinstance(value, str):
        return value.strip()
    return value


class SpreadsheetRow(BaseModel):
    """Cells keyed by row field; ``None`` for absent columns, ``""`` for blank cells."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    short_id: str | None = None
    canonical_id: str | None = None
    name: str | None = None
    alt_name: str | None = None
    package_url: str | None = None
    license_token: str | None = None

    _strip_identifiers = field_validator(
        "short_id", "canonical_id", "package_url", "license_token", mode="before"
    )(_strip)

    def is_blank(self) -> bool:
        return not any(
            (self.short_id, self.canonical_id, self.package_url, self.license_token, self.name)
        )

    def to_import_row(self, default_category: Category | None) -> ImportRow:
        return ImportRow(
            short_id=self.short_id,
            canonical_id=self.canonical_id,
            name=self.name,
            alt_name=self.alt_name,
            package_url=self.package_url,
            license_token=self.license_token,
            default_category=default_category,
        )
