"""Calendar route for tu_planner."""

from __future__ import annotations

import logging

from aiohttp import web

from tu_planner.calendar.proxy import CalendarProxy
from tu_planner.calendar.response_builder import build_calendar_response
from tu_planner.core.exceptions import DocumentParseError, FetchError, LocaleResolutionError

logger = logging.getLogger(__name__)


def _error_response(status: int, message: str) -> web.Response:
    return web.Response(status=status, text=f"{message}\n", content_type="text/plain")


def register_calendar_routes(app: web.Application, proxy: CalendarProxy) -> None:
    """Register ``GET /``, which serves the filtered personal calendar.

    Args:
        app: aiohttp web application
        proxy: Shared calendar pipeline
    """

    async def calendar(_request: web.Request) -> web.Response:
        """Fetch, filter and return the upstream calendar."""
        try:
            rendered = await proxy.render()
        except LocaleResolutionError as exc:
            logger.error("Could not resolve calendar locale: %s", exc)
            return _error_response(500, f"Could not resolve calendar locale: {exc}")
        except FetchError as exc:
            logger.error("Failed to fetch upstream calendar: %s", exc)
            return _error_response(502, f"Failed to fetch upstream calendar: {exc}")
        except DocumentParseError as exc:
            logger.error("Upstream calendar could not be parsed: %s", exc)
            return _error_response(502, f"Upstream calendar could not be parsed: {exc}")

        logger.info(
            "Served calendar (locale=%s, %d event(s) removed)",
            rendered.locale,
            rendered.removed_events,
        )
        return build_calendar_response(rendered.text, rendered.locale)

    app.router.add_get("/", calendar)
