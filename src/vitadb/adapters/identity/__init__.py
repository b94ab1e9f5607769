"""Default identity extractors: zRIF license tokens, package headers and store links."""

from __future__ import annotations

from .license_token import ZRifDecoder
from .links import (
    PSN_STORE_PREFIX,
    decode_identity_from_search_link,
    decode_identity_from_store_url,
)
from .package_header import PackageHeaderReader

__all__ = [
    "PSN_STORE_PREFIX",
    "PackageHeaderReader",
    "ZRifDecoder",
    "decode_identity_from_search_link",
    "decode_identity_from_store_url",
]
