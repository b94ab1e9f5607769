"""Domain port definitions for adapters."""

from __future__ import annotations

from .decoding import (
    IdentityDecodeError,
    IdentityDecoders,
    InvalidToken,
    LicenseTokenDecoder,
    MalformedPackage,
    PackageUrlDecoder,
    UnreachablePackage,
)
from .persistence import PackageRepository, RecordRepository
from .unit_of_work import CatalogRepositories, CatalogUnitOfWork

__all__ = [
    "CatalogRepositories",
    "CatalogUnitOfWork",
    "IdentityDecodeError",
    "IdentityDecoders",
    "InvalidToken",
    "LicenseTokenDecoder",
    "MalformedPackage",
    "PackageRepository",
    "PackageUrlDecoder",
    "RecordRepository",
    "UnreachablePackage",
]
