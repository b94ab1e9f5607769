from __future__ import annotations

import base64
import zlib
from typing import TYPE_CHECKING

import pytest

from vitadb.adapters.identity import ZRifDecoder
from vitadb.domain.ports.decoding import InvalidToken

if TYPE_CHECKING:
    from pathlib import Path

CONTENT_ID = "EP0001-PCSF00001_00-GAMEGAMEGAME0001"
DICTIONARY = b"\x00" * 0x40 + b"EP9000-PCSF00000_00-0000000000000000" + b"\x00" * 0x40


def _make_token(content_id: str, *, dictionary: bytes | None = None) -> str:
    blob = bytes(0x10) + content_id.encode("ascii") + bytes(0x200 - 0x10 - len(content_id))
    compressor = zlib.compressobj(zdict=dictionary) if dictionary else zlib.compressobj()
    compressed = compressor.compress(blob) + compressor.flush()
    return base64.b64encode(compressed).decode("ascii")


def test_decodes_content_id() -> None:
    assert ZRifDecoder()(_make_token(CONTENT_ID)) == CONTENT_ID


def test_decodes_with_preset_dictionary(tmp_path: Path) -> None:
    path = tmp_path / "zrif.dict"
    path.write_bytes(DICTIONARY)
    token = _make_token(CONTENT_ID, dictionary=DICTIONARY)

    assert ZRifDecoder.from_dictionary_file(path)(token) == CONTENT_ID
    with pytest.raises(InvalidToken):
        ZRifDecoder()(token)


@pytest.mark.parametrize(
    "token",
    [
        "not base64 at all!",
        base64.b64encode(b"plain bytes, not zlib").decode("ascii"),
        base64.b64encode(zlib.compress(bytes(0x20))).decode("ascii"),
    ],
)
def test_rejects_undecodable_tokens(token: str) -> None:
    with pytest.raises(InvalidToken):
        ZRifDecoder()(token)


def test_returns_raw_value_without_validating() -> None:
    # Validation is the evidence merger's job.
    odd_id = "XX" + CONTENT_ID[2:-1] + "z"

    assert ZRifDecoder()(_make_token(odd_id)) == odd_id
