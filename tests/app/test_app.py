from __future__ import annotations

from pathlib import Path  # noqa: TC003

import httpx
import pytest

from vitadb import app
from vitadb.adapters.http_resilience import ResilientClient
from vitadb.config import CatalogConfig, MissingConfigurationError, RetryPolicy
from vitadb.config.http import HttpConfig
from vitadb.domain.cancellation import CancellationToken
from vitadb.domain.maintenance import PassStatus
from vitadb.domain.model import Category, ImportKind
from tests.helpers.catalog import (
    BASE_ID,
    DLC_ID,
    FakeUnitOfWork,
    make_decoders,
    make_record,
)

GAMES_TSV = "TITLE_ID\tNAME\tCONTENT_ID\nPCSF00001\tGravity Rush\t" + BASE_ID + "\n"
DLCS_TSV = "TITLE_ID\tNAME\tCONTENT_ID\nPCSF00001\tCostume pack\t" + DLC_ID + "\n"
PKG_URL = "http://zeus.dl.playstation.net/cdn/EP0001/PCSF00001_00/game.pkg"


def _client(transport: httpx.MockTransport | None = None) -> ResilientClient:
    transport = transport or httpx.MockTransport(lambda request: httpx.Response(404))
    return ResilientClient(HttpConfig(retry=RetryPolicy(total=0)), transport=transport)


def test_import_spreadsheet_from_local_file(tmp_path: Path) -> None:
    path = tmp_path / "PSV_GAMES.tsv"
    path.write_text(GAMES_TSV, encoding="utf-8")
    uow = FakeUnitOfWork()

    with _client() as client:
        summary = app.import_spreadsheet(
            path,
            config=CatalogConfig(),
            unit_of_work_factory=lambda: uow,
            decoders=make_decoders(),
            client=client,
        )

    assert summary.inserted == 1
    record = uow.records.records[BASE_ID]
    assert record.name == "Gravity Rush"
    assert record.category is Category.APP


def test_import_nps_runs_sources_in_order() -> None:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.path)
        body = DLCS_TSV if request.url.path.endswith("DLCS.tsv") else GAMES_TSV
        return httpx.Response(200, text=body)

    config = CatalogConfig(
        sources={
            ImportKind.DLC: "https://example.org/PSV_DLCS.tsv",
            ImportKind.APPS: "https://example.org/PSV_GAMES.tsv",
        }
    )
    uow = FakeUnitOfWork()

    with _client(httpx.MockTransport(handler)) as client:
        summaries = app.import_nps(
            config=config,
            unit_of_work_factory=lambda: uow,
            decoders=make_decoders(),
            client=client,
        )

    assert requested == ["/PSV_GAMES.tsv", "/PSV_DLCS.tsv"]
    assert list(summaries) == [ImportKind.APPS, ImportKind.DLC]
    dlc = uow.records.records[DLC_ID]
    assert dlc.category is Category.DLC
    assert dlc.parent_id == BASE_ID


def test_import_nps_stops_after_cancelled_source() -> None:
    requested: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requested.append(request.url.path)
        return httpx.Response(200, text=GAMES_TSV)

    config = CatalogConfig(
        sources={
            ImportKind.APPS: "https://example.org/PSV_GAMES.tsv",
            ImportKind.DLC: "https://example.org/PSV_DLCS.tsv",
        }
    )
    cancellation = CancellationToken()
    cancellation.cancel()

    with _client(httpx.MockTransport(handler)) as client:
        summaries = app.import_nps(
            config=config,
            unit_of_work_factory=FakeUnitOfWork,
            decoders=make_decoders(),
            client=client,
            cancellation=cancellation,
        )

    assert list(summaries) == [ImportKind.APPS]
    assert summaries[ImportKind.APPS].cancelled
    assert requested == ["/PSV_GAMES.tsv"]


def test_import_nps_requires_sources() -> None:
    with pytest.raises(MissingConfigurationError):
        app.import_nps(config=CatalogConfig(), unit_of_work_factory=FakeUnitOfWork)


def test_import_license_tokens(tmp_path: Path) -> None:
    path = tmp_path / "zrifs.txt"
    path.write_text("KO5iTOKEN\n", encoding="utf-8")
    uow = FakeUnitOfWork()

    with _client() as client:
        summary = app.import_license_tokens(
            path,
            config=CatalogConfig(),
            unit_of_work_factory=lambda: uow,
            decoders=make_decoders(tokens={"KO5iTOKEN": BASE_ID}),
            client=client,
        )

    assert summary.inserted == 1
    assert uow.records.records[BASE_ID].license_token == "KO5iTOKEN"


def test_import_urls_links_package(tmp_path: Path) -> None:
    path = tmp_path / "urls.txt"
    path.write_text(f"{PKG_URL}?product=0\n", encoding="utf-8")
    uow = FakeUnitOfWork()

    with _client() as client:
        summary = app.import_urls(
            path,
            config=CatalogConfig(),
            unit_of_work_factory=lambda: uow,
            decoders=make_decoders(packages={PKG_URL: BASE_ID}),
            client=client,
        )

    assert summary.inserted == 1
    package = uow.packages.packages[PKG_URL]
    assert uow.records.records[BASE_ID].package_id == package.id


def test_import_search_links(tmp_path: Path) -> None:
    path = tmp_path / "links.txt"
    path.write_text(
        f"https://www.bing.com/search?q=PCSF00001\n"
        f"https://store.playstation.com/en-gb/product/{BASE_ID}\n",
        encoding="utf-8",
    )
    uow = FakeUnitOfWork()

    with _client() as client:
        summary = app.import_search_links(
            path,
            "PCSF00001",
            config=CatalogConfig(),
            unit_of_work_factory=lambda: uow,
            decoders=make_decoders(),
            client=client,
        )

    assert summary.inserted == 1
    assert BASE_ID in uow.records.records


def test_run_maintenance_repairs_names() -> None:
    uow = FakeUnitOfWork()
    uow.records.records[BASE_ID] = make_record(name=" Gravity\nRush ")

    reports = app.run_maintenance(unit_of_work_factory=lambda: uow)

    by_name = {report.name: report for report in reports}
    assert by_name["name-whitespace"].repaired_count == 1
    assert by_name["short-id-consistency"].status is PassStatus.PASS
    assert uow.records.records[BASE_ID].name == "Gravity Rush"
