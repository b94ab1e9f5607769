"""Clean-up applied to every import row before identity evidence is weighed."""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Final

from vitadb.domain.model import NO_LICENSE_REQUIRED

from .contracts import ImportRow

# zRIFs compressed with a custom zlib window would not start with this, none are known.
ZRIF_PREFIX: Final[str] = "KO5i"

_LINE_BREAKS: Final = re.compile(r"\r\n|[\r\n\u2028\u2029]")


def clean_display_name(value: str | None) -> str | None:
    """Replace embedded line breaks with a space and trim surrounding whitespace."""

    if value is None:
        return None
    return _LINE_BREAKS.sub(" ", value).strip()


def clean_package_url(value: str | None) -> str | None:
    if value is None:
        return None
    url = value.strip()
    if not url.startswith("http"):
        return None
    return url.split("?", 1)[0]


def clean_license_token(value: str | None, *, prefix: str = ZRIF_PREFIX) -> str | None:
    if value is None:
        return None
    token = value.strip()
    if not token:
        return token
    if "not required" in token.lower():
        return NO_LICENSE_REQUIRED
    if not token.startswith(prefix):
        return None
    return token


def _strip(value: str | None) -> str | None:
    return value.strip() if value is not None else None


def sanitize_row(row: ImportRow, *, token_prefix: str = ZRIF_PREFIX) -> ImportRow:
    return replace(
        row,
        short_id=_strip(row.short_id),
        canonical_id=_strip(row.canonical_id),
        name=clean_display_name(row.name),
        alt_name=clean_display_name(row.alt_name),
        package_url=clean_package_url(row.package_url),
        license_token=clean_license_token(row.license_token, prefix=token_prefix),
    )
