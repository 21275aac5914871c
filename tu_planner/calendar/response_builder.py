"""Build the HTTP response that carries the filtered calendar."""

from aiohttp import web

from tu_planner.config.models import Locale

CALENDAR_CONTENT_TYPE = "text/calendar"
CALENDAR_FILENAME = "personal.ics"


def build_calendar_response(calendar_text: str, locale: Locale) -> web.Response:
    """Wrap serialized calendar text in a downloadable ``text/calendar`` response.

    The body is the UTF-8 encoding of ``calendar_text``, unchanged.
    ``Content-Language`` carries the locale code as its only value.
    """
    return web.Response(
        status=200,
        body=calendar_text.encode("utf-8"),
        content_type=CALENDAR_CONTENT_TYPE,
        headers={
            "Content-Disposition": f'attachment; filename="{CALENDAR_FILENAME}"',
            "Content-Language": locale.value,
        },
    )
