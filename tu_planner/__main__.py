"""Command-line entry for tu_planner."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import NoReturn, Optional

from . import run_server
from .core.exceptions import ConfigError

logger = logging.getLogger("tu_planner")


def _create_parser() -> argparse.ArgumentParser:
    """Create argument parser for the tu_planner CLI.

    Returns:
        Configured argument parser
    """
    parser = argparse.ArgumentParser(
        prog="tu-planner",
        description="Serve your TISS personal calendar with excluded events removed",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tu-planner                                  # Listen on service.bind (default 127.0.0.1:8485)
  tu-planner --bind 0.0.0.0:9000              # Override the listen address
  tu-planner --config ./my-config.yaml        # Read an extra config file
        """,
    )

    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Additional YAML config file, applied after the standard locations",
    )
    parser.add_argument(
        "--bind",
        metavar="HOST:PORT",
        help="Address to listen on (overrides service.bind)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Log level (default: INFO, or TU_PLANNER_LOG_LEVEL)",
    )

    return parser


def main(argv: Optional[list[str]] = None) -> NoReturn:
    """Run the tu_planner CLI.

    Configuration errors and bind failures end the process with status 1
    before any request is served.
    """
    parser = _create_parser()
    args = parser.parse_args(argv)

    try:
        run_server(args)
    except ConfigError as exc:
        logger.error("Failed to load config: %s", exc)
        sys.exit(1)
    except OSError as exc:
        logger.error("Failed to start server: %s", exc)
        sys.exit(1)
    sys.exit(0)


if __name__ == "__main__":
    main()
