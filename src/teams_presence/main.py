from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

import httpx

from teams_presence.adapters.console import ConsolePresenceSink
from teams_presence.adapters.export.csv_file import CsvPresenceExporter
from teams_presence.adapters.graph.client import GraphPresenceClient
from teams_presence.adapters.input.file import iter_identifiers
from teams_presence.application.services import PresenceLookupService
from teams_presence.config import ConfigurationError, load_settings
from teams_presence.domain.errors import ExportSetupError, InputReadError
from teams_presence.ports.presence import PresenceSinkPort

USAGE = "Please provide either a single object ID (-o) or a file path (-f)"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="teams-presence",
        description="Look up Microsoft Teams presence for one or more object IDs.",
    )
    parser.add_argument("-o", dest="object_id", default="", help="Single object ID")
    parser.add_argument("-f", dest="file_path", default="", help="File path containing object IDs")
    parser.add_argument("-path", dest="export_path", default="", help="Path to export CSV file")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """
    Print the presence of the given object IDs, optionally exporting them to CSV.

    Per-identifier failures are logged and skipped. Failing to create the export
    file or to read the input file aborts the run with exit status 1.
    """

    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        raise SystemExit(f"Invalid configuration: {e}")

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    console = ConsolePresenceSink()
    console.write_banner()

    if not args.object_id and not args.file_path:
        print(USAGE)
        return

    exporter: Optional[CsvPresenceExporter] = None
    if args.export_path:
        try:
            exporter = CsvPresenceExporter(args.export_path)
        except ExportSetupError as e:
            raise SystemExit(str(e))

    sinks: List[PresenceSinkPort] = [console]
    if exporter is not None:
        sinks.append(exporter)

    console.write_header()

    try:
        with httpx.Client(timeout=settings.timeout) as http:
            source = GraphPresenceClient(
                http,
                retry_policy=settings.retry_policy,
                auth_token=settings.auth_token,
            )
            service = PresenceLookupService(source, sinks)
            if args.object_id:
                service.process(args.object_id)
            else:
                summary = service.process_all(iter_identifiers(args.file_path))
                logging.info(
                    "Processed %d object ID(s): %d succeeded, %d failed",
                    summary.processed,
                    summary.succeeded,
                    summary.failed,
                )
    except InputReadError as e:
        raise SystemExit(str(e))
    finally:
        if exporter is not None:
            exporter.close()


if __name__ == "__main__":
    main(sys.argv[1:])
