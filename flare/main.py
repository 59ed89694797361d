"""Composition root and demo command line for Flare.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here.

Module Structure:
- Configuration loading via config module
- Transport selection (HTTP when a DSN is known, stdout otherwise)
- Reporter initialization
- Command dispatch

Usage:
    python -m flare.main send-message [DSN]
    python -m flare.main send-error [DSN]
    python -m flare.main send-exn [DSN]
    python -m flare.main send-exn-context [DSN]
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

from flare.adapters.cli.commands import DemoCommandHandler
from flare.adapters.transport.dsn import Dsn, InvalidDsn
from flare.adapters.transport.http import HttpTransport
from flare.adapters.transport.stdout import StdoutTransport
from flare.config import Settings, load_settings
from flare.core.ports import TransportPort
from flare.core.reporter import Reporter

COMMANDS = {
    "send-message": ("send_message", "Sends a message"),
    "send-error": ("send_error", "Sends a wrapped error"),
    "send-exn": ("send_exn", "Sends an exception"),
    "send-exn-context": ("send_exn_context", "Sends an exception using a reporting context"),
}


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser."""
    parser = argparse.ArgumentParser(
        prog="flare",
        description="Test commands for Flare",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    for name, (_, summary) in COMMANDS.items():
        sub = subparsers.add_parser(name, help=summary)
        sub.add_argument(
            "dsn",
            nargs="?",
            default=None,
            help="DSN to send to (defaults to FLARE_DSN; stdout when unset)",
        )
    return parser


def build_transport(dsn: str | None, settings: Settings) -> TransportPort:
    """Select the transport for a DSN, falling back to stdout.

    Raises:
        InvalidDsn: If the DSN cannot be parsed.
    """
    dsn = dsn or settings.dsn
    if not dsn:
        return StdoutTransport()
    return HttpTransport(
        dsn=Dsn.parse(dsn),
        timeout_seconds=settings.transport_timeout_seconds,
    )


async def run_command(command: str, dsn: str | None, settings: Settings) -> dict[str, Any]:
    """Wire a reporter and run one demo command.

    Args:
        command: Command name (one of COMMANDS).
        dsn: DSN given on the command line, if any.
        settings: Loaded settings.

    Returns:
        Command result dictionary.
    """
    logger = logging.getLogger(__name__)
    transport = build_transport(dsn, settings)
    logger.info(f"Transport: {type(transport).__name__}")

    reporter = Reporter(
        transport=transport,
        environment=settings.environment,
        release=settings.release,
        server_name=settings.server_name,
    )
    handler = DemoCommandHandler(reporter)
    method_name, _ = COMMANDS[command]
    try:
        return await getattr(handler, method_name)()
    finally:
        await reporter.close()


def main(argv: list[str] | None = None) -> None:
    """Application entry point.

    Exit codes:
        0: Event delivered
        1: Event not delivered or fatal error
        2: Invalid arguments (argparse)
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    args = build_parser().parse_args(argv)
    settings = load_settings()
    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)

    try:
        result = asyncio.run(run_command(args.command, args.dsn, settings))
    except InvalidDsn as e:
        logger.error(f"Invalid DSN: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

    print(json.dumps(result, indent=2, default=str), file=sys.stderr)
    if result.get("status") != "success":
        sys.exit(1)


if __name__ == "__main__":
    main()
