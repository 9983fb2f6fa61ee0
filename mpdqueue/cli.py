"""Command-line front door for mpdqueue.

Parses CLI options, resolves preferences and logging, then dispatches into
the interactive runtime. Startup failures exit non-zero with a message.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .errors import DaemonError, RenderError
from .runtime.config import MIN_TICK_MS, load_config, resolve_settings
from .runtime.logs import configure_logging, parse_log_level

logger = logging.getLogger(__name__)


def _port(value: str) -> int:
    """argparse type for TCP port numbers."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}") from exc
    if not 0 < parsed < 65536:
        raise argparse.ArgumentTypeError("port must be between 1 and 65535")
    return parsed


def _tick_ms(value: str) -> int:
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed < MIN_TICK_MS:
        raise argparse.ArgumentTypeError(f"value must be >= {MIN_TICK_MS}")
    return parsed


def _log_level(value: str) -> int:
    try:
        return parse_log_level(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mpdqueue",
        description="Browse and control the play queue of an MPD server from the terminal.",
    )
    parser.add_argument("-i", "--host", default=None, help="MPD host (default: $MPD_HOST, config, 127.0.0.1).")
    parser.add_argument("-p", "--port", type=_port, default=None, help="MPD port (default: $MPD_PORT, config, 6600).")
    parser.add_argument("--password", default=None, help="MPD password, if the server requires one.")
    parser.add_argument(
        "--tick-ms",
        type=_tick_ms,
        default=None,
        help="Progress refresh interval in milliseconds (default: 500).",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write the session log to this file.")
    parser.add_argument("--log-level", type=_log_level, default=logging.INFO, help="Log level (default: info).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse arguments and run the interactive client."""
    from .runtime.app import run_app

    args = build_parser().parse_args(argv)

    if not os.isatty(sys.stdin.fileno()) or not os.isatty(sys.stdout.fileno()):
        raise SystemExit("mpdqueue needs an interactive terminal.")

    settings = resolve_settings(
        load_config(args.config),
        host=args.host,
        port=args.port,
        tick_ms=args.tick_ms,
        password=args.password,
    )
    configure_logging(args.log_file, args.log_level)
    logger.info("starting up, daemon at %s:%s", settings.host, settings.port)

    try:
        failure = run_app(settings)
    except DaemonError as exc:
        logger.error("startup failed: %s", exc)
        raise SystemExit(
            f"Failed to connect to MPD at {settings.host}:{settings.port}. "
            f"Is it running on that host/port? ({exc.message})"
        ) from exc
    except RenderError as exc:
        logger.error("terminal failure: %s", exc)
        raise SystemExit(f"Terminal error: {exc}") from exc
    if failure is not None:
        raise SystemExit(failure)
    logger.info("clean shutdown")


if __name__ == "__main__":
    main()
