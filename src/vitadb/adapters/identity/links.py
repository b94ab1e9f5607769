"""Extract canonical ids from PlayStation Store links."""

from __future__ import annotations

from typing import Final
from urllib.parse import unquote_plus

from vitadb.domain.model import CANONICAL_ID_LENGTH

PSN_STORE_PREFIX: Final[str] = "https://store.playstation.com/"
_CID_PATH_MARKER: Final[str] = "/cid="
_CID_MARKER: Final[str] = "cid="


def decode_identity_from_search_link(href: str, expected_short_id: str) -> str | None:
    """Return the candidate id a search-result link carries for ``expected_short_id``.

    The link is URL-decoded first. Only store links are considered; the path segment
    containing the short id yields the id (text before the first ``:``, without the
    ``cid=`` marker). The candidate is not validated here.
    """

    link = unquote_plus(href)
    if not link.startswith(PSN_STORE_PREFIX) or expected_short_id not in link:
        return None
    segments = [segment for segment in link.split("/") if expected_short_id in segment]
    if len(segments) != 1:
        return None
    return segments[0].split(":", 1)[0].replace(_CID_MARKER, "")


def decode_identity_from_store_url(url: str) -> str | None:
    """Return the id following ``/cid=`` in a store URL, or ``None`` when absent."""

    index = url.find(_CID_PATH_MARKER)
    if index < 0:
        return None
    start = index + len(_CID_PATH_MARKER)
    candidate = url[start : start + CANONICAL_ID_LENGTH]
    return candidate or None
