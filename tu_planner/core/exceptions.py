"""Exception hierarchy for tu_planner.

Configuration errors are raised once at startup and terminate the process
before the listener binds. Everything else is raised while serving a single
request and is mapped to an HTTP error response by the calendar route.
"""

from __future__ import annotations

from typing import Optional


class TuPlannerError(Exception):
    """Base exception for all tu_planner errors."""


class ConfigError(TuPlannerError):
    """Base class for startup configuration failures."""


class ConfigLoadError(ConfigError):
    """A configuration source could not be read or merged.

    Raised when:
    - A config file exists but cannot be read
    - A config file is not valid YAML
    - A config file does not contain a mapping at the top level
    """


class ConfigParseError(ConfigError):
    """A configuration value is malformed or ambiguous.

    The offending field is kept as a dotted path (``tiss.token``,
    ``service.bind``) so the startup diagnostic can point at it.
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"invalid configuration for `{field}`: {message}")
        self.field = field
        self.reason = message


class LocaleResolutionError(TuPlannerError):
    """The calendar locale could not be derived from the source config.

    Should result in HTTP 500 Internal Server Error response.
    """


class MissingLocaleParameter(LocaleResolutionError):
    """A source link carries no ``locale`` query parameter."""


class UnrecognizedLocale(LocaleResolutionError):
    """A locale string is not one of the supported codes."""

    def __init__(self, value: str):
        super().__init__(f"could not parse {value!r} into a locale")
        self.value = value


class FetchError(TuPlannerError):
    """The upstream calendar could not be retrieved.

    Covers both transport failures (DNS, connect, TLS, timeout) and
    non-success HTTP statuses; ``status_code`` is set only for the latter.

    Should result in HTTP 502 Bad Gateway response.
    """

    def __init__(self, message: str, url: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class DocumentParseError(TuPlannerError):
    """The upstream body is not a valid iCalendar document.

    Should result in HTTP 502 Bad Gateway response.
    """
