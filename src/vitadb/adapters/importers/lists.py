"""Line-oriented drivers: zRIF lists (both ways), package/store URL lists, search links."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Final

from vitadb.adapters.identity.links import (
    PSN_STORE_PREFIX,
    decode_identity_from_search_link,
    decode_identity_from_store_url,
)
from vitadb.domain.model import validate_canonical_id
from vitadb.domain.reconciliation.contracts import ImportRow

from .sources import is_remote, read_source_text

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

log = logging.getLogger(__name__)

_COMMENT_PREFIXES: Final[tuple[str, ...]] = ("#", ";")


def _lines(text: str) -> Iterator[str]:
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith(_COMMENT_PREFIXES):
            continue
        yield line


def read_license_token_rows(path: str | Path) -> Iterator[ImportRow]:
    """One zRIF per line; the decoder supplies the identity."""

    for token in _lines(read_source_text(path)):
        yield ImportRow(license_token=token)


def write_license_tokens(path: str | Path, tokens: Iterable[str]) -> int:
    """Write one zRIF per line, the format ``read_license_token_rows`` accepts."""

    count = 0
    with Path(path).expanduser().open("w", encoding="utf-8") as handle:
        for token in tokens:
            handle.write(f"{token}\n")
            count += 1
    return count


def url_to_row(url: str) -> ImportRow | None:
    if url.startswith(PSN_STORE_PREFIX):
        canonical_id = decode_identity_from_store_url(url)
        if canonical_id is None:
            log.error("%s is not a valid PSN store URL", url)
            return None
        return ImportRow(canonical_id=canonical_id)
    return ImportRow(package_url=url)


def read_url_rows(source: str | Path) -> Iterator[ImportRow]:
    """A single http(s) URL, or a local file listing one URL per line."""

    if is_remote(source):
        urls: Iterable[str] = [str(source)]
    else:
        urls = _lines(read_source_text(source))
    for url in urls:
        row = url_to_row(url)
        if row is not None:
            yield row


def rows_from_search_links(hrefs: Iterable[str], short_id: str) -> list[ImportRow]:
    """Take the first link carrying a valid id for ``short_id``; at most one row."""

    for href in hrefs:
        canonical_id = decode_identity_from_search_link(href, short_id)
        if canonical_id is None:
            continue
        if not validate_canonical_id(canonical_id):
            log.error("%s does not match expected format (href=%r)", canonical_id, href)
            continue
        return [ImportRow(short_id=short_id, canonical_id=canonical_id)]
    return []


def read_search_link_rows(path: str | Path, short_id: str) -> list[ImportRow]:
    return rows_from_search_links(_lines(read_source_text(path)), short_id)
