"""Parse and serialize iCalendar documents."""

import logging

from icalendar import Calendar

from tu_planner.core.exceptions import DocumentParseError

logger = logging.getLogger(__name__)


def parse_calendar(text: str) -> Calendar:
    """Parse iCalendar text into a Calendar.

    Raises:
        DocumentParseError: the text is not a single valid VCALENDAR
    """
    if not text.strip():
        raise DocumentParseError("upstream returned an empty calendar body")

    try:
        calendar = Calendar.from_ical(text)
    except ValueError as exc:
        raise DocumentParseError(f"upstream body is not valid iCalendar: {exc}") from exc

    if not isinstance(calendar, Calendar) or calendar.name != "VCALENDAR":
        raise DocumentParseError("upstream body does not contain a VCALENDAR")

    logger.debug("Parsed calendar with %d top-level components", len(calendar.subcomponents))
    return calendar


def serialize_calendar(calendar: Calendar) -> str:
    """Serialize a Calendar back to iCalendar text."""
    return calendar.to_ical().decode("utf-8")
