from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from vitadb import __version__
from vitadb.adapters.sqlalchemy.unit_of_work import startup
from vitadb.app import (
    export_license_tokens,
    import_license_tokens,
    import_nps,
    import_search_links,
    import_spreadsheet,
    import_urls,
    run_maintenance,
)
from vitadb.config import configure_logging, get_catalog_config, verbosity_to_level
from vitadb.domain.cancellation import CancellationToken
from vitadb.domain.maintenance import PassStatus
from vitadb.domain.model import ImportKind

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import FrameType

    from vitadb.domain.reconciliation import ImportSummary

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Maintain the VitaDB content catalog")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="TOML configuration file (defaults to $VITADB_CONFIG or ./vitadb.toml)",
    )
    parser.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to $DATABASE_URI or the data directory)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    csv_parser = subparsers.add_parser("import-csv", help="Import a CSV/TSV spreadsheet")
    csv_parser.add_argument("source", help="Local path or http(s) URL of the spreadsheet")
    csv_parser.add_argument(
        "--kind",
        type=ImportKind,
        choices=list(ImportKind),
        help="Spreadsheet flavour (guessed from the file name when omitted)",
    )

    subparsers.add_parser("import-nps", help="Import every spreadsheet configured in [sources]")

    zrif = subparsers.add_parser("import-zrif", help="Import a file with one zRIF per line")
    zrif.add_argument("path", type=Path, help="Text file holding the zRIFs")

    export = subparsers.add_parser("export-zrif", help="Write every stored zRIF to a file")
    export.add_argument("path", type=Path, help="Text file to create")

    urls = subparsers.add_parser("import-urls", help="Import PKG or PSN store URL(s)")
    urls.add_argument("source", help="A single URL, or a file listing one URL per line")

    search = subparsers.add_parser(
        "import-search",
        help="Resolve a title id from saved search-result links",
    )
    search.add_argument("path", type=Path, help="Text file holding one link per line")
    search.add_argument("--short-id", required=True, help="Title id the links should resolve")

    subparsers.add_parser("maintenance", help="Check and repair catalog integrity")

    return parser.parse_args(list(argv))


def _log_summary(label: str, summary: ImportSummary) -> None:
    log.info(
        "%s %s: inserted=%s, updated=%s, unchanged=%s, rejected=%s",
        label,
        "CANCELLED" if summary.cancelled else "DONE",
        summary.inserted,
        summary.updated,
        summary.unchanged,
        summary.rejected,
    )
    for reason, count in sorted(summary.rejections.items()):
        log.info("  rejected %s: %s", reason, count)


def _run_command(args: argparse.Namespace, cancellation: CancellationToken) -> int:
    if args.command == "maintenance":
        reports = run_maintenance(cancellation=cancellation)
        return 1 if any(report.status is PassStatus.ERROR for report in reports) else 0

    config = get_catalog_config(path=args.config)
    if args.command == "import-csv":
        summary = import_spreadsheet(
            args.source,
            kind=args.kind,
            config=config,
            cancellation=cancellation,
        )
        _log_summary(args.source, summary)
    elif args.command == "import-nps":
        for kind, kind_summary in import_nps(config=config, cancellation=cancellation).items():
            _log_summary(kind, kind_summary)
    elif args.command == "import-zrif":
        summary = import_license_tokens(args.path, config=config, cancellation=cancellation)
        _log_summary(str(args.path), summary)
    elif args.command == "export-zrif":
        count = export_license_tokens(args.path, config=config)
        log.info("%s: %s zRIFs exported", args.path, count)
    elif args.command == "import-urls":
        summary = import_urls(args.source, config=config, cancellation=cancellation)
        _log_summary(args.source, summary)
    elif args.command == "import-search":
        summary = import_search_links(
            args.path,
            args.short_id,
            config=config,
            cancellation=cancellation,
        )
        _log_summary(args.short_id, summary)
    else:
        raise ValueError(f"Unsupported command: {args.command}")
    return 0


def build_sigint_handler(
    cancellation: CancellationToken,
) -> Callable[[int, FrameType | None], None]:
    """First Ctrl+C cancels cooperatively; a second one exits immediately."""

    def handler(_signal_received: int, _frame: FrameType | None) -> None:
        if cancellation.cancelled:
            log.info("Closed by user (Ctrl+C)")
            sys.exit(130)
        log.info("Cancellation requested; finishing the current item")
        cancellation.cancel()

    return handler


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    load_dotenv()
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=verbosity_to_level(parsed_args.verbose))

    cancellation = CancellationToken()
    signal(SIGINT, build_sigint_handler(cancellation))

    try:
        if parsed_args.database_uri:
            startup(database_uri=parsed_args.database_uri)
        exit_code = _run_command(parsed_args, cancellation)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
