from collections.abc import AsyncIterator, Iterator
from typing import Any
from uuid import UUID

import pytest
import respx

from tu_planner.config.models import ComponentsSource, Config, LinkSource, Locale
from tu_planner.core.http_client import close_all_clients

TEST_TOKEN = "0f8fad5b-d9cb-469f-a165-70867728950e"
TEST_ENDPOINT = "https://tiss.example.test/events/rest/calendar/personal"


@pytest.fixture
def token() -> UUID:
    """Deterministic calendar token used across tests."""
    return UUID(TEST_TOKEN)


@pytest.fixture
def components_source(token: UUID) -> ComponentsSource:
    """Components-style source pointing at the test endpoint."""
    return ComponentsSource(endpoint=TEST_ENDPOINT, locale=Locale.DE, token=token)


@pytest.fixture
def link_source() -> LinkSource:
    """Link-style source equivalent to ``components_source`` but in English."""
    return LinkSource(url=f"{TEST_ENDPOINT}?locale=en&token={TEST_TOKEN}")


@pytest.fixture
def make_config() -> Any:
    """Return a builder for Config objects from a raw ``tiss`` value."""

    def builder(tiss: Any, bind: str = "127.0.0.1:8485") -> Config:
        return Config.from_mapping({"tiss": tiss, "service": {"bind": bind}})

    return builder


@pytest.fixture
def upstream() -> Iterator[respx.MockRouter]:
    """Mock every outbound httpx request; unmatched requests fail the test."""
    with respx.mock(assert_all_mocked=True, assert_all_called=False) as router:
        yield router


@pytest.fixture(autouse=True)
async def cleanup_shared_http_clients() -> AsyncIterator[None]:
    """Close shared HTTP clients after every test to avoid leaking connections."""
    yield
    await close_all_clients()


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> None:
    """Keep host TU_PLANNER_* variables from leaking into tests."""
    import os

    for key in list(os.environ):
        if key.startswith("TU_PLANNER_"):
            monkeypatch.delenv(key, raising=False)


# ==================== ICS Test Data Fixtures ====================


@pytest.fixture
def sample_ics_with_timezone() -> str:
    """
    Return a calendar with a VTIMEZONE and three events.

    Events, in order:
    - "VO Analysis" described "SPK Lecture" (excluded)
    - "Lab" described "backSPKroom" (kept, no word boundary)
    - "Seminar" described "Workshop" (kept)
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//TU Planner Test//EN
BEGIN:VTIMEZONE
TZID:Europe/Vienna
BEGIN:STANDARD
DTSTART:19701025T030000
TZOFFSETFROM:+0200
TZOFFSETTO:+0100
RRULE:FREQ=YEARLY;BYMONTH=10;BYDAY=-1SU
END:STANDARD
END:VTIMEZONE
BEGIN:VEVENT
UID:event-spk@tu-planner.test
DTSTAMP:20240115T090000Z
DTSTART;TZID=Europe/Vienna:20240115T100000
SUMMARY:VO Analysis
DESCRIPTION:SPK Lecture
END:VEVENT
BEGIN:VEVENT
UID:event-lab@tu-planner.test
DTSTAMP:20240115T090000Z
DTSTART;TZID=Europe/Vienna:20240116T100000
SUMMARY:Lab
DESCRIPTION:backSPKroom
END:VEVENT
BEGIN:VEVENT
UID:event-seminar@tu-planner.test
DTSTAMP:20240115T090000Z
DTSTART;TZID=Europe/Vienna:20240117T100000
SUMMARY:Seminar
DESCRIPTION:Workshop
END:VEVENT
END:VCALENDAR
"""


@pytest.fixture
def sample_ics_two_events() -> str:
    """
    Return a calendar with two events.

    - "Room change" described "Room SPK3 change" (kept, SPK3 is one token)
    - "VO Algebra" described "SPK Lecture" (excluded)
    """
    return """BEGIN:VCALENDAR
VERSION:2.0
PRODID:-//TU Planner Test//EN
BEGIN:VEVENT
UID:event-room@tu-planner.test
DTSTAMP:20240115T090000Z
DTSTART:20240115T100000Z
SUMMARY:Room change
DESCRIPTION:Room SPK3 change
END:VEVENT
BEGIN:VEVENT
UID:event-algebra@tu-planner.test
DTSTAMP:20240115T090000Z
DTSTART:20240116T100000Z
SUMMARY:VO Algebra
DESCRIPTION:SPK Lecture
END:VEVENT
END:VCALENDAR
"""
