"""Remove excluded events from a calendar before it is served."""

from __future__ import annotations

import logging
import re
from typing import Any

from icalendar import Calendar

logger = logging.getLogger(__name__)

# "SPK" as a standalone token; does not match inside SPK3 or backSPKroom
EXCLUSION_PATTERN: re.Pattern[str] = re.compile(r"\bSPK\b")


class EventFilter:
    """Drops top-level VEVENTs whose DESCRIPTION matches an exclusion pattern.

    Only events are inspected; timezones and other components always pass
    through, and the relative order of what remains is unchanged. Applying
    the filter twice gives the same result as applying it once.
    """

    def __init__(self, pattern: re.Pattern[str] = EXCLUSION_PATTERN):
        self.pattern = pattern

    def is_excluded(self, component: Any) -> bool:
        """Return True if ``component`` is an event with a matching description."""
        if getattr(component, "name", None) != "VEVENT":
            return False

        description = component.get("DESCRIPTION")
        if not description:
            return False

        # A component may carry the property more than once
        values = description if isinstance(description, list) else [description]
        return any(self.pattern.search(str(value)) for value in values)

    def apply(self, calendar: Calendar) -> Calendar:
        """Filter ``calendar`` in place.

        Args:
            calendar: Parsed calendar document

        Returns:
            The same calendar, without excluded events
        """
        kept = [c for c in calendar.subcomponents if not self.is_excluded(c)]
        removed = len(calendar.subcomponents) - len(kept)
        calendar.subcomponents[:] = kept

        if removed:
            logger.info("Removed %d excluded event(s) from calendar", removed)
        else:
            logger.debug("No excluded events found in calendar")
        return calendar
