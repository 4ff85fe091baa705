"""
CLI entry point for Lyra Insights.

PURPOSE: Command-line interface for reports, counter previews and the API server.
AI CONTEXT: Main entry points for package execution.

USAGE:
    python -m lyra_insights report data.json

    # Or via CLI command (after install)
    lyra-insights report data.json       # Print text analysis report
    lyra-insights animate 248 --duration 1000
    lyra-insights serve --port 8080      # Run the HTTP API

REPORT FILE FORMAT:
    {"mood": [...], "weather": [...], "savings": [...]}
    Each list holds raw samples in any shape the normalizer accepts.
    "savings" is optional.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any

from .config import Config

DEFAULT_HOST = Config.DEFAULT_HOST
DEFAULT_PORT = Config.DEFAULT_PORT
REPORT_KEYS = ("mood", "weather", "savings")


@lru_cache(maxsize=1)
def _get_logger() -> logging.Logger:
    """Get module logger (cached for thread safety)."""
    logging.basicConfig(level=logging.INFO)
    return logging.getLogger(__name__)


def _log(message: str, *, emoji: str = "") -> None:
    """Log message with optional emoji prefix for CLI output.

    Args:
        message: The message to log.
        emoji: Optional emoji prefix for visual CLI feedback.
    """
    prefix = f"{emoji} " if emoji else ""
    _get_logger().info(f"{prefix}{message}")


def _load_document(path: Path) -> dict[str, Any] | None:
    """
    Read the report input file.

    Returns:
        The parsed JSON object, or None when the file is missing,
        unreadable, not JSON, not a JSON object, or one of its series is
        not a list. The reason is logged.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        _get_logger().error(f"Cannot read {path}: {e}")
        return None
    except json.JSONDecodeError as e:
        _get_logger().error(f"Invalid JSON in {path}: {e}")
        return None
    if not isinstance(data, dict):
        _get_logger().error(f"Expected a JSON object in {path}, got {type(data).__name__}")
        return None
    for key in REPORT_KEYS:
        if data.get(key) is not None and not isinstance(data[key], list):
            _get_logger().error(f"Expected '{key}' to be a list in {path}, got {type(data[key]).__name__}")
            return None
    return data


def run_report(path: str | Path) -> int:
    """
    Print the text analysis report for a JSON input file.

    Business context: Support staff reproduce a user's insight cards from
    an exported data file without running the app.

    Args:
        path: JSON file with "mood", "weather" and optional "savings" lists.

    Returns:
        0 on success, 1 when the file cannot be used.

    Example:
        >>> # From command line:
        >>> # lyra-insights report export.json > report.txt
        >>> run_report("export.json")
        ==================================================
        LYRA INSIGHTS - ANALYSIS REPORT
        ...
    """
    from .presenters import InsightsPresenter

    document = _load_document(Path(path))
    if document is None:
        return 1

    presenter = InsightsPresenter()
    report = presenter.generate_summary_report(
        document.get("mood") or [],
        document.get("weather") or [],
        document.get("savings"),
    )
    # Note: Using print() intentionally for stdout piping support
    print(report)
    return 0


def run_animate(target: float, duration_ms: int | None = None) -> int:
    """
    Print the count-up sequence for a counter target, one value per line.

    Args:
        target: Value to count up to.
        duration_ms: Animation duration. Default Config.ANIMATION_DURATION_MS.

    Returns:
        0 always.

    Example:
        >>> run_animate(10, 64)
        2
        5
        7
        10
    """
    from .animation import animate_to

    for value in animate_to(target, duration_ms):
        print(int(value) if value.is_integer() else value)
    return 0


def run_serve(host: str = DEFAULT_HOST, port: int = DEFAULT_PORT) -> None:
    """
    Launch the HTTP API.

    Args:
        host: Network interface to bind to. Default '127.0.0.1'.
        port: TCP port for the HTTP server. Default 8000.

    Returns:
        None. Blocks until server shutdown (Ctrl+C).

    Raises:
        OSError: If port is already in use.
    """
    from .web import run_server

    _log(f"Starting Lyra Insights API at http://{host}:{port}", emoji="🚀")
    _log("Press Ctrl+C to stop")
    run_server(host=host, port=port)


def main() -> int:
    """
    Main CLI entry point for Lyra Insights.

    Subcommands:
    - report FILE: Print text analysis report
    - animate TARGET [--duration MS]: Print the counter sequence
    - serve [--host HOST] [--port PORT]: Run the HTTP API

    Returns:
        Exit code: 0 for success, 1 for an unusable report file or a
        missing subcommand.

    Raises:
        SystemExit: On --help, --version or argument parsing errors.

    Example:
        >>> # From command line:
        >>> # lyra-insights serve --port 8080
        >>> sys.exit(main())
    """
    from .__version__ import __version__

    parser = argparse.ArgumentParser(
        prog="lyra-insights",
        description="Lyra Insights - align, correlate and chart personal time series",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    report_parser = subparsers.add_parser(
        "report",
        help="Print analysis report for a JSON data file",
    )
    report_parser.add_argument("file", help="JSON file with mood, weather and savings lists")

    animate_parser = subparsers.add_parser(
        "animate",
        help="Print the count-up sequence for a counter",
    )
    animate_parser.add_argument("target", type=float, help="Value to count up to")
    animate_parser.add_argument(
        "--duration",
        type=int,
        default=Config.ANIMATION_DURATION_MS,
        help=f"Duration in milliseconds (default: {Config.ANIMATION_DURATION_MS})",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP API",
    )
    serve_parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Bind address (default: {DEFAULT_HOST})",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port number (default: {DEFAULT_PORT})",
    )

    args = parser.parse_args()

    if args.command == "report":
        return run_report(args.file)
    if args.command == "animate":
        return run_animate(args.target, args.duration)
    if args.command == "serve":
        run_serve(host=args.host, port=args.port)
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
