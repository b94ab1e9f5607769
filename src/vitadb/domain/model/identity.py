"""Structural rules for content ids (canonical ids) and title ids (short ids).

A canonical id looks like ``EP1234-PCSG00001_00-0000000000000000``::

    EP1234     service/owner code (2 letters, 4 digits)
    PCSG00001  short id, always at offset 7
    00         variant
    0000...    16-character label

Records whose identity is not known yet use a placeholder built from the short id,
``??????-PCSG00001_??-????????????????``. Only base records may carry one.
"""

from __future__ import annotations

import re
from typing import Final

CANONICAL_ID_LENGTH: Final[int] = 36
SHORT_ID_LENGTH: Final[int] = 9
SHORT_ID_OFFSET: Final[int] = 7
PLACEHOLDER_MARKER: Final[str] = "???"

_CANONICAL_ID_RE: Final = re.compile(r"[A-Z]{2}[0-9]{4}-[A-Z]{4}[0-9]{5}_[0-9]{2}-[A-Z0-9]{16}")
_SHORT_ID_GRAMMAR: Final[str] = "AAAA99999"


def validate_canonical_id(value: str | None) -> bool:
    """Return whether ``value`` is a fully resolved 36-character content id."""

    if not value or len(value) != CANONICAL_ID_LENGTH:
        return False
    return _CANONICAL_ID_RE.fullmatch(value) is not None


def validate_short_id(value: str | None) -> bool:
    """Return whether ``value`` is a title code, possibly truncated (``PCSE0`` is valid)."""

    if not value or len(value) > SHORT_ID_LENGTH:
        return False
    for char, kind in zip(value, _SHORT_ID_GRAMMAR, strict=False):
        if kind == "A" and not ("A" <= char <= "Z"):
            return False
        if kind == "9" and not ("0" <= char <= "9"):
            return False
    return True


def short_id_from(canonical_id: str) -> str:
    return canonical_id[SHORT_ID_OFFSET : SHORT_ID_OFFSET + SHORT_ID_LENGTH]


def placeholder_for(short_id: str) -> str:
    return f"??????-{short_id}_??-????????????????"


def is_placeholder(canonical_id: str | None) -> bool:
    return bool(canonical_id) and canonical_id.startswith(PLACEHOLDER_MARKER)


def is_bundle_id(canonical_id: str) -> bool:
    """Bundles point at PS4 titles (``CUSA...``) rather than Vita/PSM title codes."""

    if len(canonical_id) <= SHORT_ID_OFFSET:
        return False
    return canonical_id[SHORT_ID_OFFSET] != "P"
