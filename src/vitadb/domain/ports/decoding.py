"""Ports for turning raw evidence into candidate canonical ids.

Decoders either return a candidate id string or raise ``IdentityDecodeError``.
They do not validate the id; the evidence merger does.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


class IdentityDecodeError(RuntimeError):
    """Raised when a collaborator cannot produce a candidate identity."""


class InvalidToken(IdentityDecodeError):  # noqa: N818
    """The license token is not a decodable zRIF."""


class UnreachablePackage(IdentityDecodeError):  # noqa: N818
    """The package URL could not be fetched."""


class MalformedPackage(IdentityDecodeError):  # noqa: N818
    """The package header could not be parsed."""


@runtime_checkable
class LicenseTokenDecoder(Protocol):
    def __call__(self, token: str) -> str: ...


@runtime_checkable
class PackageUrlDecoder(Protocol):
    def __call__(self, url: str) -> str: ...


@dataclass(slots=True, frozen=True)
class IdentityDecoders:
    """Decoders available to one import run; a missing decoder skips that evidence."""

    license_token: LicenseTokenDecoder | None = None
    package_url: PackageUrlDecoder | None = None
