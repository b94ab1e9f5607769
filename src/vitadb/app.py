"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from vitadb.adapters.http_resilience import ResilientClient
from vitadb.adapters.identity import PackageHeaderReader, ZRifDecoder
from vitadb.adapters.importers import (
    default_category_for,
    read_csv_rows,
    read_license_token_rows,
    read_search_link_rows,
    read_url_rows,
    write_license_tokens,
)
from vitadb.adapters.sqlalchemy.unit_of_work import (
    SqlAlchemyCatalogUnitOfWork,
    is_started,
    startup,
)
from vitadb.config import MissingConfigurationError, get_catalog_config, get_http_config
from vitadb.domain.maintenance import DEFAULT_PASSES, run_integrity_maintenance
from vitadb.domain.model import ImportKind
from vitadb.domain.ports.decoding import IdentityDecoders
from vitadb.domain.ports.unit_of_work import CatalogUnitOfWork
from vitadb.domain.reconciliation import reconcile_rows

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator, Sequence
    from pathlib import Path

    from vitadb.config import CatalogConfig
    from vitadb.domain.cancellation import CancellationToken
    from vitadb.domain.maintenance import MaintenancePass, PassReport
    from vitadb.domain.reconciliation import ImportRow, ImportSummary

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


log = getLogger(__name__)


def _unit_of_work_factory(factory: UnitOfWorkFactory | None) -> UnitOfWorkFactory:
    if factory is not None:
        return factory
    if not is_started():
        startup()
    return SqlAlchemyCatalogUnitOfWork


@contextmanager
def _http_client(client: ResilientClient | None) -> Iterator[ResilientClient]:
    if client is not None:
        yield client
        return
    with ResilientClient(get_http_config()) as owned:
        yield owned


def build_decoders(config: CatalogConfig, client: ResilientClient) -> IdentityDecoders:
    """Default zRIF and package-header decoders for one import run."""

    return IdentityDecoders(
        license_token=ZRifDecoder.from_dictionary_file(config.license_dictionary_path),
        package_url=PackageHeaderReader(client),
    )


def _reconcile(
    rows: Iterable[ImportRow],
    *,
    config: CatalogConfig,
    client: ResilientClient,
    unit_of_work_factory: UnitOfWorkFactory | None,
    decoders: IdentityDecoders | None,
    cancellation: CancellationToken | None,
) -> ImportSummary:
    return reconcile_rows(
        rows,
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
        decoders=decoders or build_decoders(config, client),
        cancellation=cancellation,
        token_prefix=config.token_prefix,
    )


def import_spreadsheet(
    source: str | Path,
    *,
    kind: ImportKind | None = None,
    config: CatalogConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    decoders: IdentityDecoders | None = None,
    client: ResilientClient | None = None,
    cancellation: CancellationToken | None = None,
) -> ImportSummary:
    """Import one CSV/TSV spreadsheet from a local path or URL."""

    effective_config = config or get_catalog_config()
    category = kind.default_category if kind is not None else default_category_for(source)
    log.info("Starting spreadsheet import: source=%s, category=%s", source, category.name)
    with _http_client(client) as http:
        rows = read_csv_rows(source, effective_config, category, client=http)
        return _reconcile(
            rows,
            config=effective_config,
            client=http,
            unit_of_work_factory=unit_of_work_factory,
            decoders=decoders,
            cancellation=cancellation,
        )


def import_nps(
    *,
    config: CatalogConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    decoders: IdentityDecoders | None = None,
    client: ResilientClient | None = None,
    cancellation: CancellationToken | None = None,
) -> dict[ImportKind, ImportSummary]:
    """Import every configured spreadsheet source (apps, then dlc, then psm)."""

    effective_config = config or get_catalog_config()
    if not effective_config.sources:
        raise MissingConfigurationError("No spreadsheet sources configured under [sources]")

    summaries: dict[ImportKind, ImportSummary] = {}
    with _http_client(client) as http:
        for kind in ImportKind:
            source = effective_config.sources.get(kind)
            if source is None:
                log.info("No %s source configured; skipping", kind)
                continue
            summary = import_spreadsheet(
                source,
                kind=kind,
                config=effective_config,
                unit_of_work_factory=unit_of_work_factory,
                decoders=decoders,
                client=http,
                cancellation=cancellation,
            )
            summaries[kind] = summary
            if summary.cancelled:
                break
    return summaries


def import_license_tokens(
    path: str | Path,
    *,
    config: CatalogConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    decoders: IdentityDecoders | None = None,
    client: ResilientClient | None = None,
    cancellation: CancellationToken | None = None,
) -> ImportSummary:
    """Import a text file holding one zRIF per line."""

    effective_config = config or get_catalog_config()
    log.info("Importing zRIFs from %s", path)
    with _http_client(client) as http:
        return _reconcile(
            read_license_token_rows(path),
            config=effective_config,
            client=http,
            unit_of_work_factory=unit_of_work_factory,
            decoders=decoders,
            cancellation=cancellation,
        )


def import_urls(
    source: str | Path,
    *,
    config: CatalogConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    decoders: IdentityDecoders | None = None,
    client: ResilientClient | None = None,
    cancellation: CancellationToken | None = None,
) -> ImportSummary:
    """Import a package/store URL, or a file listing such URLs."""

    effective_config = config or get_catalog_config()
    log.info("Importing URLs from %s", source)
    with _http_client(client) as http:
        return _reconcile(
            read_url_rows(source),
            config=effective_config,
            client=http,
            unit_of_work_factory=unit_of_work_factory,
            decoders=decoders,
            cancellation=cancellation,
        )


def import_search_links(
    path: str | Path,
    short_id: str,
    *,
    config: CatalogConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    decoders: IdentityDecoders | None = None,
    client: ResilientClient | None = None,
    cancellation: CancellationToken | None = None,
) -> ImportSummary:
    """Import the identity a saved list of search-result links gives ``short_id``."""

    effective_config = config or get_catalog_config()
    rows = read_search_link_rows(path, short_id)
    if not rows:
        log.warning("No store link in %s resolves %s", path, short_id)
    with _http_client(client) as http:
        return _reconcile(
            rows,
            config=effective_config,
            client=http,
            unit_of_work_factory=unit_of_work_factory,
            decoders=decoders,
            cancellation=cancellation,
        )


def export_license_tokens(
    path: str | Path,
    *,
    config: CatalogConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Back up every stored zRIF to ``path``, one per line; return how many were written.

    Only values carrying the zRIF prefix are real tokens, so the ``NOT REQUIRED``
    sentinel is left out.
    """

    effective_config = config or get_catalog_config()
    log.info("Exporting zRIFs to %s", path)
    with _unit_of_work_factory(unit_of_work_factory)() as uow:
        tokens = (
            record.license_token
            for record in uow.repositories.records.all()
            if record.license_token
            and record.license_token.startswith(effective_config.token_prefix)
        )
        count = write_license_tokens(path, tokens)
    log.info("Exported %s zRIFs", count)
    return count


def run_maintenance(
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
    passes: Sequence[MaintenancePass] = DEFAULT_PASSES,
    cancellation: CancellationToken | None = None,
) -> list[PassReport]:
    """Run the integrity maintenance passes against the configured catalog."""

    log.info("Starting catalog maintenance")
    return run_integrity_maintenance(
        unit_of_work_factory=_unit_of_work_factory(unit_of_work_factory),
        cancellation=cancellation,
        passes=passes,
    )
