"""Import drivers turning external sources into reconciliation rows."""

from __future__ import annotations

from .lists import (
    read_license_token_rows,
    read_search_link_rows,
    read_url_rows,
    rows_from_search_links,
    write_license_tokens,
)
from .schema import SpreadsheetRow
from .sources import SourceUnavailable
from .spreadsheet import default_category_for, parse_csv_rows, read_csv_rows

__all__ = [
    "SourceUnavailable",
    "SpreadsheetRow",
    "default_category_for",
    "parse_csv_rows",
    "read_csv_rows",
    "read_license_token_rows",
    "read_search_link_rows",
    "read_url_rows",
    "rows_from_search_links",
    "write_license_tokens",
]
