"""
Central logging configuration for tu_planner.

Keeps tu_planner's own loggers at the configured level while holding noisy
third-party libraries at WARNING, and stamps every record with the id of the
request it was emitted for.
"""

import logging
import os
from typing import Optional

DEBUG_ENV_VAR = "TU_PLANNER_DEBUG"

_NOISY_LOGGERS = (
    "aiohttp.access",
    "aiohttp.server",
    "aiohttp.web_log",
    "httpx",
    "httpcore",
    "asyncio",
    "charset_normalizer",
)


class RequestIdFilter(logging.Filter):
    """Add the current request's correlation ID to all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        # Import here to avoid circular dependency
        from tu_planner.api.middleware import get_request_id

        record.request_id = get_request_id()
        return True


def debug_forced() -> bool:
    """Return True when TU_PLANNER_DEBUG is set to a truthy value."""
    return os.getenv(DEBUG_ENV_VAR, "").strip().lower() in ("1", "true", "yes", "on")


def install_request_id_filter(logger: Optional[logging.Logger] = None) -> None:
    """Attach a RequestIdFilter to every handler of ``logger`` (root by default)."""
    target = logger or logging.getLogger()
    for handler in target.handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())


def configure_logging(level_name: Optional[str] = "INFO") -> None:
    """
    Apply the configured log level to tu_planner and quiet third-party loggers.

    Args:
        level_name: Level for the root and tu_planner loggers; TU_PLANNER_DEBUG
            overrides it with DEBUG.
    """
    level = getattr(logging, str(level_name or "INFO").upper(), logging.INFO)
    if debug_forced():
        level = logging.DEBUG

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    install_request_id_filter(root_logger)

    logging.getLogger("tu_planner").setLevel(level)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    root_logger.debug("Logging configured at level %s", logging.getLevelName(level))
