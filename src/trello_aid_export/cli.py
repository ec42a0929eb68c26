#!/usr/bin/env python3
"""Command-line interface for exporting completed aid requests."""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from trello_aid_export.exporter import CardExporter, ExportConfig
from trello_aid_export.logging_utils import setup_cli_logging

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with its ``csv`` subcommand."""
    parser = argparse.ArgumentParser(
        description="Export aid requests from the Trello board"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    csv_parser = subparsers.add_parser(
        "csv", help="export completed requests in CSV form"
    )
    csv_parser.add_argument(
        "--api-key",
        default=os.environ.get("TRELLO_API_KEY", ""),
        help="A Trello API key (default: $TRELLO_API_KEY)",
    )
    csv_parser.add_argument(
        "--token",
        default=os.environ.get("TRELLO_TOKEN", ""),
        help="A Trello token (default: $TRELLO_TOKEN)",
    )
    csv_parser.add_argument(
        "--out",
        type=Path,
        default=Path("output.csv"),
        help="The path to the output CSV file (default: output.csv)",
    )
    csv_parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_cli_logging(verbose=args.verbose)

    if not args.api_key or not args.token:
        log.warning("No API key or token given, Trello will likely refuse the requests")

    config = ExportConfig(
        api_key=args.api_key,
        token=args.token,
        output_path=args.out,
    )

    try:
        CardExporter(config).export()
    except Exception as e:
        log.error("Error: %s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()
