"""Per-request calendar pipeline: resolve, fetch, parse, filter, serialize."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tu_planner.calendar.document import parse_calendar, serialize_calendar
from tu_planner.calendar.event_filter import EventFilter
from tu_planner.calendar.fetcher import CalendarFetcher
from tu_planner.config.models import Locale, SourceConfig, redact_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedCalendar:
    """Filtered calendar ready to be served."""

    text: str
    locale: Locale
    removed_events: int = 0


class CalendarProxy:
    """Runs the linear proxy pipeline for one request at a time.

    The proxy holds only read-only collaborators, so a single instance is
    shared by all concurrent requests. Any step's exception aborts the rest
    of the pipeline and propagates to the caller.
    """

    def __init__(
        self,
        source: SourceConfig,
        fetcher: Optional[CalendarFetcher] = None,
        event_filter: Optional[EventFilter] = None,
    ) -> None:
        self.source = source
        self.fetcher = fetcher or CalendarFetcher()
        self.event_filter = event_filter or EventFilter()

    async def render(self) -> RenderedCalendar:
        """Produce the filtered calendar text and its locale.

        Raises:
            LocaleResolutionError: locale could not be derived (before any fetch)
            FetchError: upstream unreachable or non-success status
            DocumentParseError: upstream body is not valid iCalendar
        """
        url = self.source.resolved_url()
        locale = self.source.resolved_locale()

        text = await self.fetcher.fetch(url)
        calendar = parse_calendar(text)

        before = len(calendar.subcomponents)
        self.event_filter.apply(calendar)
        removed = before - len(calendar.subcomponents)

        logger.debug(
            "Rendered calendar from %s (locale=%s, removed=%d)", redact_url(url), locale, removed
        )
        return RenderedCalendar(text=serialize_calendar(calendar), locale=locale, removed_events=removed)
