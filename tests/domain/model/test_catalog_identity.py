from __future__ import annotations

import pytest

from vitadb.domain.model import (
    is_bundle_id,
    is_placeholder,
    placeholder_for,
    short_id_from,
    validate_canonical_id,
    validate_short_id,
)


@pytest.mark.parametrize(
    "value",
    [
        "EP0001-PCSF00001_00-GAMEGAMEGAME0001",
        "UP9000-PCSA00123_00-0000000000000000",
        "JP0000-CUSA01234_01-ABCDEFGHIJ012345",
    ],
)
def test_validate_canonical_id_accepts_well_formed_ids(value: str) -> None:
    assert validate_canonical_id(value)


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "EP0001-PCSF00001_00-GAMEGAMEGAME000",  # 35 chars
        "EP0001-PCSF00001_00-GAMEGAMEGAME00011",  # 37 chars
        "ep0001-PCSF00001_00-GAMEGAMEGAME0001",  # lowercase region
        "EP0001_PCSF00001_00-GAMEGAMEGAME0001",  # wrong separator at offset 6
        "EP0001-PCSF00001-00-GAMEGAMEGAME0001",  # wrong separator at offset 16
        "EP0001-PCSF00001_0A-GAMEGAMEGAME0001",  # non-digit variant
        "EP0001-PCSF00001_00-gamegamegame0001",  # lowercase label
        "EP0001-PCS000001_00-GAMEGAMEGAME0001",  # digit inside the letter run
        "??????-PCSF00001_??-????????????????",  # placeholder
    ],
)
def test_validate_canonical_id_rejects_malformed_ids(value: str | None) -> None:
    assert not validate_canonical_id(value)


@pytest.mark.parametrize("value", ["PCSE00001", "PCSE0", "P", "PCSE"])
def test_validate_short_id_accepts_full_and_truncated_codes(value: str) -> None:
    assert validate_short_id(value)


@pytest.mark.parametrize(
    "value",
    [None, "", "PCSE000010", "pcse00001", "PCS100001", "PCSEA0001", "PCSE0000\u0661"],
)
def test_validate_short_id_rejects_bad_codes(value: str | None) -> None:
    assert not validate_short_id(value)


def test_placeholder_round_trip() -> None:
    placeholder = placeholder_for("PCSE00001")

    assert placeholder == "??????-PCSE00001_??-????????????????"
    assert len(placeholder) == 36
    assert is_placeholder(placeholder)
    assert short_id_from(placeholder) == "PCSE00001"
    assert not validate_canonical_id(placeholder)


def test_is_bundle_id_looks_at_the_title_code() -> None:
    assert is_bundle_id("EP0001-CUSA01234_00-BUNDLEBUNDLEBUND")
    assert not is_bundle_id("EP0001-PCSF00001_00-GAMEGAMEGAME0001")
