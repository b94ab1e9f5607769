"""Spreadsheet (CSV/TSV) import driver."""

from __future__ import annotations

import csv
import logging
from typing import TYPE_CHECKING

from pydantic import ValidationError

from vitadb.domain.model import Category

from .schema import SpreadsheetRow
from .sources import read_source_text, source_name

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from pathlib import Path

    from vitadb.adapters.http_resilience import ResilientClient
    from vitadb.config.catalog import CatalogConfig
    from vitadb.domain.reconciliation.contracts import ImportRow

log = logging.getLogger(__name__)


def default_category_for(source: str | Path) -> Category:
    """Guess the category of a spreadsheet from its file name."""

    name = source_name(source)
    if "dlc" in name:
        return Category.DLC
    if "psm" in name or "psn" in name:
        return Category.PSM
    return Category.APP


def _content_lines(text: str) -> Iterator[str]:
    for line in text.splitlines():
        if line.lstrip().startswith("#"):
            continue
        yield line


def parse_csv_rows(
    lines: Iterable[str],
    config: CatalogConfig,
    default_category: Category | None,
) -> Iterator[ImportRow]:
    reader = csv.DictReader(lines, delimiter=config.csv_separator)
    headers = {header.strip(): header for header in reader.fieldnames or ()}
    columns = {
        row_field: headers[column.strip()]
        for row_field, column in config.csv_mapping.items()
        if column.strip() in headers
    }
    missing = sorted(set(config.csv_mapping) - set(columns))
    if missing:
        log.debug("Spreadsheet has no column for: %s", ", ".join(missing))

    for cells in reader:
        values = {row_field: cells.get(column) for row_field, column in columns.items()}
        try:
            row = SpreadsheetRow.model_validate(values)
        except ValidationError as exc:
            log.warning("Skipping spreadsheet line %s: %s", reader.line_num, exc)
            continue
        if row.is_blank():
            continue
        yield row.to_import_row(default_category)


def read_csv_rows(
    source: str | Path,
    config: CatalogConfig,
    default_category: Category | None = None,
    *,
    client: ResilientClient | None = None,
) -> Iterator[ImportRow]:
    """Yield mapped rows from a local or remote spreadsheet."""

    text = read_source_text(source, client=client)
    label = default_category.name if default_category is not None else "uncategorised"
    log.info("Importing %s CSV data from %s", label, source)
    yield from parse_csv_rows(_content_lines(text), config, default_category)
