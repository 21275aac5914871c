"""Calendar fetching, filtering and response building."""

from .document import parse_calendar, serialize_calendar
from .event_filter import EXCLUSION_PATTERN, EventFilter
from .fetcher import CalendarFetcher
from .proxy import CalendarProxy, RenderedCalendar
from .response_builder import build_calendar_response

__all__ = [
    "EXCLUSION_PATTERN",
    "CalendarFetcher",
    "CalendarProxy",
    "EventFilter",
    "RenderedCalendar",
    "build_calendar_response",
    "parse_calendar",
    "serialize_calendar",
]
