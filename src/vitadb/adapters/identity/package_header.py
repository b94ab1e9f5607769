"""Read the content id from the header of a remote package file."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

import httpx

from vitadb.domain.model import CANONICAL_ID_LENGTH
from vitadb.domain.ports.decoding import MalformedPackage, UnreachablePackage

if TYPE_CHECKING:
    from vitadb.adapters.http_resilience import ResilientClient

log = logging.getLogger(__name__)

PKG_MAGIC: Final[bytes] = b"\x7fPKG"
HEADER_SIZE: Final[int] = 0x100
CONTENT_ID_OFFSET: Final[int] = 0x30


class PackageHeaderReader:
    """Fetch only the first bytes of a package and decode its content id."""

    def __init__(self, client: ResilientClient) -> None:
        self._client = client

    def __call__(self, url: str) -> str:
        header = self.fetch_header(url)
        if not header.startswith(PKG_MAGIC):
            raise MalformedPackage(f"{url} is not a package file")
        raw = header[CONTENT_ID_OFFSET : CONTENT_ID_OFFSET + CANONICAL_ID_LENGTH]
        if len(raw) < CANONICAL_ID_LENGTH:
            raise MalformedPackage(f"Truncated package header from {url}")
        try:
            return raw.decode("ascii")
        except UnicodeDecodeError as exc:
            raise MalformedPackage(f"Package content id from {url} is not ASCII") from exc

    def fetch_header(self, url: str) -> bytes:
        log.debug("Reading package header from %s", url)
        buffer = bytearray()
        try:
            headers = {"Range": f"bytes=0-{HEADER_SIZE - 1}"}
            with self._client.stream(url, headers=headers) as response:
                response.raise_for_status()
                # Servers may ignore the range request; stop reading once the header is in.
                for chunk in response.iter_bytes():
                    buffer.extend(chunk)
                    if len(buffer) >= HEADER_SIZE:
                        break
        except httpx.HTTPError as exc:
            raise UnreachablePackage(f"Cannot fetch {url}: {exc}") from exc
        return bytes(buffer[:HEADER_SIZE])
