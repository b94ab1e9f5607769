"""Load import sources from local files or http(s) URLs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

import httpx

if TYPE_CHECKING:
    from vitadb.adapters.http_resilience import ResilientClient

log = logging.getLogger(__name__)


class SourceUnavailable(RuntimeError):  # noqa: N818
    """The import source could not be read."""


def is_remote(source: str | Path) -> bool:
    return isinstance(source, str) and source.startswith(("http:", "https:"))


def source_name(source: str | Path) -> str:
    """Final path component of ``source``, lowercased."""

    if is_remote(source):
        return Path(urlsplit(str(source)).path).name.lower()
    return Path(source).name.lower()


def read_source_text(source: str | Path, *, client: ResilientClient | None = None) -> str:
    if is_remote(source):
        if client is None:
            raise SourceUnavailable(f"No HTTP client available to download {source}")
        log.info("Downloading %s", source)
        try:
            response = client.get(str(source))
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise SourceUnavailable(f"Cannot download {source}: {exc}") from exc
        return response.text
    path = Path(source).expanduser()
    try:
        return path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise SourceUnavailable(f"Could not open {path}: {exc}") from exc
