"""Send a single log line from the command line.

Credentials come from the environment (``LOGDNA_APIKEY``, ``LOGDNA_TAGS``,
``LOGDNA_APP``); ``--app`` and ``--tags`` override the latter two.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Sequence

import httpx
from pydantic import ValidationError

from .client import LogShipper, ShipperError, ShipperTransportError, build_default_shipper
from .config import get_settings
from .logging_setup import configure_logging

EXIT_OK = 0
EXIT_REJECTED = 1
EXIT_TRANSPORT = 2
EXIT_CONFIG = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m logdna_shipper",
        description="Ship one log line to the ingestion API.",
    )
    parser.add_argument("message", help="Log line to send.")
    parser.add_argument("--level", "-l", default="info", help="Severity label (default: info).")
    parser.add_argument("--app", help="Application name (default: $LOGDNA_APP).")
    parser.add_argument("--tags", help="Comma separated tags (default: $LOGDNA_TAGS).")
    parser.add_argument(
        "--async",
        dest="use_async",
        action="store_true",
        help="Send through the async client instead of the blocking one.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser


def _send(shipper: LogShipper, message: str, level: str, use_async: bool) -> httpx.Response:
    if not use_async:
        with shipper:
            return shipper.submit_blocking(message, level)

    async def run() -> httpx.Response:
        async with shipper:
            return await shipper.submit(message, level)

    return asyncio.run(run())


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)

    overrides = {}
    if args.app is not None:
        overrides["app"] = args.app
    if args.tags is not None:
        overrides["tags"] = args.tags

    try:
        settings = get_settings()
        if overrides:
            settings = settings.model_copy(update=overrides)
        shipper = build_default_shipper(settings)
    except ValidationError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    except ShipperError as exc:
        print(f"setup error: {exc}", file=sys.stderr)
        return EXIT_CONFIG

    try:
        response = _send(shipper, args.message, args.level, args.use_async)
    except ShipperTransportError as exc:
        print(f"transport error: {exc}", file=sys.stderr)
        return EXIT_TRANSPORT

    print(response.status_code)
    if response.text:
        print(response.text)
    return EXIT_OK if response.is_success else EXIT_REJECTED


if __name__ == "__main__":
    raise SystemExit(main())
