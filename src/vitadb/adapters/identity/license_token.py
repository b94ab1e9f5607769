"""Decode the content id embedded in a zRIF license token.

A zRIF is a base64 string wrapping a zlib stream (usually compressed against a
preset dictionary). The inflated blob is a RIF license whose content id is stored
as NUL-terminated ASCII at offset ``0x10``.
"""

from __future__ import annotations

import base64
import binascii
import logging
import zlib
from typing import TYPE_CHECKING, Final

from vitadb.domain.model import CANONICAL_ID_LENGTH
from vitadb.domain.ports.decoding import InvalidToken

if TYPE_CHECKING:
    from pathlib import Path

log = logging.getLogger(__name__)

CONTENT_ID_OFFSET: Final[int] = 0x10
CONTENT_ID_FIELD_LENGTH: Final[int] = 0x30


class ZRifDecoder:
    def __init__(self, dictionary: bytes | None = None) -> None:
        self._dictionary = dictionary

    @classmethod
    def from_dictionary_file(cls, path: Path | None) -> ZRifDecoder:
        if path is None:
            return cls()
        log.debug("Loading zRIF dictionary from %s", path)
        return cls(path.read_bytes())

    def __call__(self, token: str) -> str:
        blob = self.inflate(token)
        field = blob[CONTENT_ID_OFFSET : CONTENT_ID_OFFSET + CONTENT_ID_FIELD_LENGTH]
        raw = field.split(b"\x00", 1)[0]
        if len(raw) < CANONICAL_ID_LENGTH:
            raise InvalidToken(f"License blob too short for a content id: {token!r}")
        try:
            return raw.decode("ascii")
        except UnicodeDecodeError as exc:
            raise InvalidToken(f"License content id is not ASCII: {token!r}") from exc

    def inflate(self, token: str) -> bytes:
        try:
            compressed = base64.b64decode(token.strip(), validate=True)
        except (binascii.Error, ValueError) as exc:
            raise InvalidToken(f"Not a base64 license token: {token!r}") from exc
        decompressor = (
            zlib.decompressobj(zdict=self._dictionary)
            if self._dictionary is not None
            else zlib.decompressobj()
        )
        try:
            return decompressor.decompress(compressed) + decompressor.flush()
        except zlib.error as exc:
            raise InvalidToken(f"Cannot inflate license token: {exc}") from exc
