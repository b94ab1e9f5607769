"""Resolve up to three independently derived candidate identities for one row.

Sources, highest authority first:

- package url: the id read from the package header is final,
- license token: the id embedded in the zRIF,
- row: whatever the input stated directly.

Invalid candidates are dropped with a warning. Any disagreement between the
surviving candidates rejects the row, whatever order the evidence arrived in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from vitadb.domain.model import (
    NO_LICENSE_REQUIRED,
    SHORT_ID_LENGTH,
    EvidenceSource,
    FieldLock,
    short_id_from,
    validate_canonical_id,
    validate_short_id,
)
from vitadb.domain.ports.decoding import IdentityDecodeError

from .errors import InvalidIdentity, MismatchedIdentity

if TYPE_CHECKING:
    from collections.abc import Iterable

    from vitadb.domain.ports.decoding import IdentityDecoders

    from .contracts import ImportRow

log = getLogger(__name__)


@dataclass(slots=True, frozen=True)
class IdentityCandidate:
    source: EvidenceSource
    value: str
    origin: str | None = None
    error: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.error is None and validate_canonical_id(self.value)


@dataclass(slots=True, frozen=True)
class ResolvedIdentity:
    """Outcome of evidence merging; ``canonical_id`` is ``None`` when nothing survived."""

    canonical_id: str | None = None
    source: EvidenceSource | None = None
    sources: frozenset[EvidenceSource] = frozenset()
    locks: FieldLock = FieldLock.NONE
    discarded: tuple[InvalidIdentity, ...] = field(default_factory=tuple)


def gather_candidates(row: ImportRow, decoders: IdentityDecoders) -> list[IdentityCandidate]:
    """Collect candidate identities from the row and the configured decoders."""

    candidates: list[IdentityCandidate] = []
    if row.canonical_id:
        candidates.append(IdentityCandidate(EvidenceSource.ROW, row.canonical_id))

    token = row.license_token
    if token and token != NO_LICENSE_REQUIRED and decoders.license_token is not None:
        try:
            decoded = decoders.license_token(token)
        except IdentityDecodeError as exc:
            candidates.append(
                IdentityCandidate(EvidenceSource.LICENSE_TOKEN, "", token, error=str(exc))
            )
        else:
            candidates.append(IdentityCandidate(EvidenceSource.LICENSE_TOKEN, decoded, token))

    url = row.package_url
    if url and decoders.package_url is not None:
        try:
            decoded = decoders.package_url(url)
        except IdentityDecodeError as exc:
            candidates.append(
                IdentityCandidate(EvidenceSource.PACKAGE_URL, "", url, error=str(exc))
            )
        else:
            candidates.append(IdentityCandidate(EvidenceSource.PACKAGE_URL, decoded, url))

    return candidates


def resolve_identity(candidates: Iterable[IdentityCandidate]) -> ResolvedIdentity:
    """Merge candidates into a single canonical id or raise ``MismatchedIdentity``."""

    ordered = sorted(candidates, key=lambda candidate: candidate.source, reverse=True)
    valid: list[IdentityCandidate] = []
    discarded: list[InvalidIdentity] = []
    for candidate in ordered:
        if candidate.is_valid:
            valid.append(candidate)
            continue
        origin = f" from {candidate.origin}" if candidate.origin else ""
        if candidate.error is not None:
            warning = InvalidIdentity(
                f"No canonical id{origin}: {candidate.error}",
                value=candidate.origin,
            )
        else:
            warning = InvalidIdentity(
                f"Canonical id ({candidate.value}){origin} is invalid",
                value=candidate.value,
            )
        log.warning("%s: %s", candidate.source.label, warning)
        discarded.append(warning)

    if not valid:
        return ResolvedIdentity(discarded=tuple(discarded))

    distinct = {candidate.value for candidate in valid}
    if len(distinct) > 1:
        raise MismatchedIdentity({candidate.source: candidate.value for candidate in valid})

    sources = frozenset(candidate.source for candidate in valid)
    locks = FieldLock.CANONICAL_ID
    if EvidenceSource.PACKAGE_URL in sources:
        # Anything read from a package header is final.
        locks |= FieldLock.PACKAGE
    return ResolvedIdentity(
        canonical_id=valid[0].value,
        source=valid[0].source,
        sources=sources,
        locks=locks,
        discarded=tuple(discarded),
    )


def resolve_short_id(short_id: str | None, canonical_id: str | None) -> str:
    """Derive the short id from the canonical id, or truncate and validate the given one."""

    if not short_id:
        if not canonical_id:
            raise InvalidIdentity("Row has neither a short id nor a canonical id")
        short_id = short_id_from(canonical_id)
    short_id = short_id[:SHORT_ID_LENGTH]
    if not validate_short_id(short_id):
        raise InvalidIdentity(f"Short id ({short_id}) is invalid", value=short_id)
    return short_id
