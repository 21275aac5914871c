"""tu_planner - personal TISS calendar proxy.

Fetches the personal iCalendar feed, removes excluded events and serves the
result over HTTP. Imports are kept light at package level; the server stack is
loaded by ``run_server``.
"""

__version__ = "0.1.0"

from typing import Any, Optional


def _init_logging(level_name: Optional[str]) -> None:
    """Initialize root logging to stream to console.

    Sets a colorized formatter so startup messages and configuration errors
    are visible before the config is loaded. ``TU_PLANNER_DEBUG`` forces DEBUG
    verbosity regardless of ``level_name``.
    """
    import logging
    import sys

    from colorlog import ColoredFormatter

    from tu_planner.core.logging_config import debug_forced, install_request_id_filter

    if debug_forced():
        level_name = "DEBUG"

    root = logging.getLogger()
    # Only configure a handler if none is present to avoid duplicate output.
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stderr)
        # HH:MM:SS  LEVEL   [request-id] logger.name: message
        fmt = (
            "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s "
            "[%(request_id)s] %(name)s: %(message)s"
        )
        log_colors = {
            "DEBUG": "cyan",
            "INFO": "green",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        }
        handler.setFormatter(ColoredFormatter(fmt, datefmt="%H:%M:%S", log_colors=log_colors))
        root.addHandler(handler)
    install_request_id_filter(root)

    level = getattr(logging, str(level_name or "INFO").upper(), logging.INFO)
    root.setLevel(level)
    logging.getLogger(__name__).debug(
        "Logging initialized at level %s", logging.getLevelName(level)
    )


def run_server(args: Optional[Any] = None) -> None:
    """Load configuration and start the tu_planner server.

    Args:
        args: Optional namespace with ``config``, ``bind`` and ``log_level``
            attributes from the command line.

    Raises:
        ConfigError: configuration could not be loaded or is invalid
        OSError: the listener could not bind
    """
    import logging
    import os

    _init_logging(getattr(args, "log_level", None) or os.environ.get("TU_PLANNER_LOG_LEVEL"))

    from tu_planner.api.server import start_server
    from tu_planner.config import load_config

    logger = logging.getLogger(__name__)

    overrides: dict[str, Any] = {}
    bind = getattr(args, "bind", None)
    if bind:
        overrides["service"] = {"bind": bind}
        logger.debug("Applied command line bind override: %s", bind)
    log_level = getattr(args, "log_level", None)
    if log_level:
        overrides["log_level"] = log_level

    config = load_config(getattr(args, "config", None), overrides=overrides)
    start_server(config)
