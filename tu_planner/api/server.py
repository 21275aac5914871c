"""tu_planner.api.server: asyncio HTTP server for the calendar proxy.

This module provides the server core that:
- builds the aiohttp application around a single, read-only Config
- serves the filtered calendar on ``GET /``
- binds the configured ``service.bind`` address and runs until SIGINT/SIGTERM
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import Optional

from aiohttp import web

from tu_planner.api.middleware import correlation_id_middleware
from tu_planner.api.routes import register_calendar_routes
from tu_planner.calendar.fetcher import CalendarFetcher
from tu_planner.calendar.proxy import CalendarProxy
from tu_planner.config.models import Config, redact_url
from tu_planner.core.http_client import close_all_clients
from tu_planner.core.logging_config import configure_logging

logger = logging.getLogger(__name__)

APP_NAME = "tu-planner"

CONFIG_KEY = web.AppKey("config", Config)
PROXY_KEY = web.AppKey("proxy", CalendarProxy)


def make_app(config: Config, fetcher: Optional[CalendarFetcher] = None) -> web.Application:
    """Create the aiohttp application.

    Args:
        config: Loaded configuration; shared read-only with every request.
        fetcher: Optional fetcher override (defaults to the shared HTTP client).

    Returns:
        Configured web.Application
    """
    app = web.Application(middlewares=[correlation_id_middleware])

    proxy = CalendarProxy(config.app.tiss, fetcher=fetcher)
    app[CONFIG_KEY] = config
    app[PROXY_KEY] = proxy

    register_calendar_routes(app, proxy)

    async def _cleanup(_app: web.Application) -> None:
        await close_all_clients()
        logger.debug("Shared HTTP clients cleaned up")

    app.on_cleanup.append(_cleanup)
    return app


def _log_source(config: Config) -> None:
    source = config.app.tiss
    logger.info(
        "Proxying %s source %s",
        type(source).__name__,
        redact_url(source.resolved_url()),
    )


async def _serve(config: Config, external_stop_event: Optional[asyncio.Event] = None) -> None:
    """Run the server until signalled to stop.

    Args:
        config: Loaded configuration.
        external_stop_event: Optional event to signal shutdown. If provided,
            signal handlers will NOT be registered (caller owns signal handling).
    """
    stop_event = external_stop_event or asyncio.Event()

    app = make_app(config)
    runner = web.AppRunner(app)
    await runner.setup()

    host, port = config.service.host, config.service.port
    site = web.TCPSite(runner, host=host, port=port)
    try:
        await site.start()
    except OSError:
        logger.exception("Failed to bind %s", config.service.bind)
        await runner.cleanup()
        raise

    _log_source(config)
    logger.info("%s listening on %s", APP_NAME, config.service.bind)

    if external_stop_event is None:
        loop = asyncio.get_running_loop()

        def _on_signal() -> None:
            logger.info("Shutdown signal received")
            stop_event.set()

        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, _on_signal)
    else:
        logger.debug("Using external stop event - skipping signal handler registration")

    await stop_event.wait()
    logger.info("Stop event received, shutting down")

    await runner.cleanup()
    logger.info("Server shutdown complete")


def start_server(config: Config) -> None:
    """Start the asyncio event loop and HTTP server.

    Blocks the calling thread until SIGINT/SIGTERM. Errors while binding
    propagate to the caller.
    """
    configure_logging(config.log_level)

    logger.debug("Running asyncio event loop for server")
    try:
        asyncio.run(_serve(config))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
