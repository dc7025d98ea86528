"""Main module for the docx-to-pdf CLI."""

import argparse
import asyncio
import json
import sys
from typing import Any, List, Optional

from pydantic import ValidationError

from . import __version__
from .core import DocxToPdfError, get_logger, load_config, setup_logger
from .handler import convert_batch, parse_requests


def build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="docx-to-pdf",
        description="Convert documents stored in S3 to PDF with LibreOffice",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Convert the requests listed in a JSON file
  docx-to-pdf convert --requests batch.json

  # Read requests from stdin and keep the PDFs on local disk
  echo '[{"prefix": "docs", "key": "a.docx"}]' | docx-to-pdf convert --local

  # Show version
  docx-to-pdf version
        """,
    )

    subparsers: argparse._SubParsersAction = parser.add_subparsers(
        dest="command", help="Available commands"
    )

    convert_parser: argparse.ArgumentParser = subparsers.add_parser(
        "convert", help="Convert a batch of documents"
    )
    convert_parser.add_argument(
        "--requests",
        default="-",
        help="JSON file with a list of requests, '-' for stdin (default)",
    )
    convert_parser.add_argument(
        "--max-concurrency",
        type=int,
        default=None,
        help="Maximum number of documents converted at once (default: no limit)",
    )
    convert_parser.add_argument(
        "--collect-failures",
        action="store_true",
        help="Report per-document failures instead of failing the whole batch",
    )
    convert_parser.add_argument(
        "--local",
        action="store_true",
        help="Write PDFs to local temp files instead of uploading to S3",
    )
    convert_parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )

    subparsers.add_parser("version", help="Show version information")
    return parser


def _read_event(source: str) -> Any:
    if source == "-":
        return json.load(sys.stdin)
    with open(source, "r", encoding="utf-8") as handle:
        return json.load(handle)


def run_convert(args: argparse.Namespace) -> int:
    logger = get_logger("cli")
    overrides = {}
    if args.local:
        overrides["use_s3"] = False
    if args.max_concurrency is not None:
        overrides["max_concurrency"] = args.max_concurrency
    if args.debug:
        overrides["log_level"] = "debug"
        setup_logger(level="debug")

    try:
        config = load_config(**overrides)
        requests = parse_requests(_read_event(args.requests))
    except (DocxToPdfError, ValidationError, OSError, ValueError) as e:
        logger.error(f"Invalid input: {e}")
        return 1

    try:
        items = asyncio.run(
            convert_batch(
                requests,
                config=config,
                collect_failures=args.collect_failures or None,
            )
        )
    except DocxToPdfError as e:
        where = f" for request #{e.request_index}" if e.request_index is not None else ""
        logger.error(f"Conversion failed{where}: {type(e).__name__}: {e}")
        return 1

    payload: List[dict] = [item.to_payload() for item in items]
    print(json.dumps(payload, indent=2))
    if any(not entry.get("ok", True) for entry in payload):
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``docx-to-pdf`` command."""
    parser = build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.command == "convert":
        sys.exit(run_convert(args))
    elif args.command == "version":
        print("docx-to-pdf")
        print(f"Version {__version__}")
        sys.exit(0)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
