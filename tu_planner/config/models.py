"""Configuration models for tu_planner.

The upstream calendar source can be configured in two shapes:

- a bare TISS token link (``tiss: https://...?...&locale=de&token=...``), or
- the link's components (``tiss: {locale: de, token: <uuid>}``, optionally
  with a custom ``endpoint``).

Both shapes resolve to the same fetch URL and locale. The shape is decided by
``parse_source_config``, which tries the mapping form first and falls back to
the bare link.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from enum import Enum
from typing import Any, Union
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tu_planner.core.exceptions import ConfigParseError, MissingLocaleParameter, UnrecognizedLocale

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://tiss.tuwien.ac.at/events/rest/calendar/personal"
DEFAULT_BIND = "127.0.0.1:8485"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Locale(str, Enum):
    """Language of the calendar feed."""

    DE = "de"
    EN = "en"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: str) -> Locale:
        """Parse a two-letter code, raising UnrecognizedLocale for anything else."""
        try:
            return cls(value)
        except ValueError:
            raise UnrecognizedLocale(value) from None


def _validate_http_url(url: str) -> str:
    parsed = urlsplit(url)
    if parsed.scheme not in ("http", "https"):
        raise ValueError(f"URL scheme must be http or https, got {parsed.scheme!r}")
    if not parsed.hostname:
        raise ValueError("URL is missing a hostname")
    return url


def redact_url(url: str) -> str:
    """Return ``url`` with the value of any ``token`` query parameter masked."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    pairs = [
        (key, "***" if key == "token" else value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(pairs, safe="*")))


class LinkSource(BaseModel):
    """A complete TISS token link that embeds its own locale."""

    model_config = ConfigDict(frozen=True)

    url: str

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return _validate_http_url(value)

    def resolved_url(self) -> str:
        return self.url

    def resolved_locale(self) -> Locale:
        """Read the locale from the link's ``locale`` query parameter.

        Raises:
            MissingLocaleParameter: the link has no ``locale`` parameter
            UnrecognizedLocale: the parameter is not a supported code
        """
        for key, value in parse_qsl(urlsplit(self.url).query, keep_blank_values=True):
            if key == "locale":
                return Locale.parse(value)
        raise MissingLocaleParameter("could not find locale query parameter in TISS token link")


class ComponentsSource(BaseModel):
    """The individual parts of a TISS token link."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="TISS calendar endpoint")
    locale: Locale = Field(..., description="Locale of the calendar")
    token: UUID = Field(..., description="Personal calendar token")

    @field_validator("endpoint")
    @classmethod
    def _check_endpoint(cls, value: str) -> str:
        return _validate_http_url(value)

    def resolved_url(self) -> str:
        """Append ``locale`` and ``token`` (in that order) to the endpoint query."""
        parts = urlsplit(self.endpoint)
        params = urlencode([("locale", self.locale.value), ("token", str(self.token))])
        query = f"{parts.query}&{params}" if parts.query else params
        return urlunsplit(parts._replace(query=query))

    def resolved_locale(self) -> Locale:
        return self.locale


SourceConfig = Union[LinkSource, ComponentsSource]


def _parse_error(prefix: str, exc: ValidationError) -> ConfigParseError:
    """Convert the first pydantic error into a ConfigParseError with a dotted field path."""
    error = exc.errors()[0]
    loc = ".".join(str(part) for part in error["loc"])
    return ConfigParseError(f"{prefix}.{loc}" if loc else prefix, error["msg"])


def parse_source_config(value: Any, field: str = "tiss") -> SourceConfig:
    """Decide which source shape ``value`` has and validate it.

    A mapping must be a valid components table; a string must be a valid
    link. Nothing else is accepted.

    Raises:
        ConfigParseError: naming the offending field
    """
    if isinstance(value, (LinkSource, ComponentsSource)):
        return value

    if isinstance(value, Mapping):
        try:
            return ComponentsSource.model_validate(dict(value))
        except ValidationError as exc:
            raise _parse_error(field, exc) from exc

    if isinstance(value, str):
        try:
            return LinkSource(url=value.strip())
        except ValidationError as exc:
            raise ConfigParseError(field, exc.errors()[0]["msg"]) from exc

    raise ConfigParseError(
        field,
        "expected a TISS token link or a table with `locale` and `token`, "
        f"got {type(value).__name__}",
    )


def _split_bind(bind: str) -> tuple[str, int]:
    host, sep, port_text = bind.rpartition(":")
    if not sep or not host:
        raise ValueError(f"expected HOST:PORT, got {bind!r}")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port = int(port_text)
    except ValueError:
        raise ValueError(f"port {port_text!r} is not a number") from None
    if not 0 <= port <= 65535:
        raise ValueError(f"port {port} is out of range")
    return host, port


class ServiceConfig(BaseModel):
    """HTTP listener settings."""

    model_config = ConfigDict(frozen=True)

    bind: str = Field(default=DEFAULT_BIND, description="HOST:PORT to listen on")

    @field_validator("bind")
    @classmethod
    def _check_bind(cls, value: str) -> str:
        _split_bind(value)
        return value

    @property
    def host(self) -> str:
        return _split_bind(self.bind)[0]

    @property
    def port(self) -> int:
        return _split_bind(self.bind)[1]


class AppConfig(BaseModel):
    """Settings shared read-only with every request handler."""

    model_config = ConfigDict(frozen=True)

    tiss: SourceConfig

    @field_validator("tiss", mode="before")
    @classmethod
    def _parse_tiss(cls, value: Any) -> SourceConfig:
        return parse_source_config(value, "tiss")


class Config(BaseModel):
    """Complete tu_planner configuration.

    ``tiss`` lives at the top level of the merged mapping and is grouped
    into ``app`` here; ``service`` and ``log_level`` are optional.
    """

    model_config = ConfigDict(frozen=True)

    app: AppConfig
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    log_level: str = "INFO"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Config:
        """Build a Config from a merged configuration mapping.

        Raises:
            ConfigParseError: a key is missing or malformed
        """
        if "tiss" not in data:
            raise ConfigParseError("tiss", "missing required key")
        app = AppConfig(tiss=data["tiss"])

        service_raw = data.get("service") or {}
        if not isinstance(service_raw, Mapping):
            raise ConfigParseError("service", "expected a table")
        try:
            service = ServiceConfig.model_validate(dict(service_raw))
        except ValidationError as exc:
            raise _parse_error("service", exc) from exc

        log_level = str(data.get("log_level") or "INFO").upper()
        if log_level not in LOG_LEVELS:
            raise ConfigParseError("log_level", f"expected one of {', '.join(LOG_LEVELS)}")

        config = cls(app=app, service=service, log_level=log_level)
        logger.debug(
            "Configuration parsed: source=%s bind=%s",
            type(app.tiss).__name__,
            service.bind,
        )
        return config
