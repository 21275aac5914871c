"""Configuration for tu_planner."""

from .loader import load_config
from .models import (
    DEFAULT_BIND,
    DEFAULT_ENDPOINT,
    AppConfig,
    ComponentsSource,
    Config,
    LinkSource,
    Locale,
    ServiceConfig,
    SourceConfig,
    parse_source_config,
    redact_url,
)

__all__ = [
    "DEFAULT_BIND",
    "DEFAULT_ENDPOINT",
    "AppConfig",
    "ComponentsSource",
    "Config",
    "LinkSource",
    "Locale",
    "ServiceConfig",
    "SourceConfig",
    "load_config",
    "parse_source_config",
    "redact_url",
]
