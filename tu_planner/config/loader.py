"""tu_planner.config.loader

Merge configuration from YAML files and the environment into a ``Config``.

Sources, in ascending precedence:

1. ``$XDG_CONFIG_DIRS/tu-planner/config.yaml`` (default ``/etc/xdg``)
2. ``$XDG_CONFIG_HOME/tu-planner/config.yaml`` (default ``~/.config``)
3. ``./config.yaml``
4. an explicit ``--config`` path, if given
5. ``TU_PLANNER_*`` environment variables, ``__`` separating nested keys
   (``TU_PLANNER_TISS__TOKEN`` -> ``tiss.token``)
6. command-line overrides

Mappings merge recursively; any other value replaces what came before.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import yaml

from tu_planner.config.models import Config
from tu_planner.core.exceptions import ConfigLoadError

logger = logging.getLogger(__name__)

APP_NAME = "tu-planner"
CONFIG_FILE_NAME = "config.yaml"
ENV_PREFIX = "TU_PLANNER_"
ENV_NESTING_SEPARATOR = "__"


def get_config_search_paths(environ: Optional[Mapping[str, str]] = None) -> list[Path]:
    """Return candidate config files, lowest precedence first."""
    env = os.environ if environ is None else environ

    # XDG_CONFIG_DIRS lists the most important directory first
    sys_dirs = [Path(p) for p in (env.get("XDG_CONFIG_DIRS") or "/etc/xdg").split(os.pathsep) if p]
    user_dir = Path(env.get("XDG_CONFIG_HOME") or Path.home() / ".config")

    paths = [d / APP_NAME / CONFIG_FILE_NAME for d in reversed(sys_dirs)]
    paths.append(user_dir / APP_NAME / CONFIG_FILE_NAME)
    paths.append(Path.cwd() / CONFIG_FILE_NAME)
    return paths


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a mapping from a YAML file.

    An empty file yields an empty mapping.

    Raises:
        ConfigLoadError: unreadable file, invalid YAML, or non-mapping top level
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigLoadError(f"config file {path} is not valid YAML: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigLoadError(f"config file {path} must contain a mapping at top level")
    return loaded


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> dict[str, Any]:
    """Build a nested mapping from ``TU_PLANNER_*`` environment variables."""
    env = os.environ if environ is None else environ
    cfg: dict[str, Any] = {}

    for key in sorted(env):
        if not key.startswith(ENV_PREFIX):
            continue
        path = [part.lower() for part in key[len(ENV_PREFIX) :].split(ENV_NESTING_SEPARATOR)]
        if not all(path):
            logger.warning("Ignoring malformed configuration variable %s", key)
            continue

        node = cfg
        for part in path[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[path[-1]] = env[key]

    return cfg


def merge_config(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base`` without mutating either."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config(current, value)
        else:
            merged[key] = value
    return merged


def load_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Config:
    """Load, merge and validate the configuration.

    Args:
        path: Optional extra config file; unlike the search paths it must exist.
        environ: Environment to read (defaults to ``os.environ``).
        overrides: Highest-precedence values, e.g. from the command line.

    Returns:
        Validated Config instance.

    Raises:
        ConfigLoadError: a config file could not be read
        ConfigParseError: the merged configuration is invalid
    """
    paths = get_config_search_paths(environ)
    logger.debug("Searching potential configuration paths: %s", [str(p) for p in paths])

    merged: dict[str, Any] = {}
    for candidate in paths:
        if candidate.is_file():
            merged = merge_config(merged, _load_yaml_file(candidate))
            logger.info("Loaded configuration from %s", candidate)

    if path is not None:
        explicit = Path(path)
        if not explicit.is_file():
            raise ConfigLoadError(f"config file {explicit} does not exist")
        merged = merge_config(merged, _load_yaml_file(explicit))
        logger.info("Loaded configuration from %s", explicit)

    env_cfg = config_from_env(environ)
    if env_cfg:
        logger.debug("Applying environment configuration for keys: %s", ", ".join(sorted(env_cfg)))
        merged = merge_config(merged, env_cfg)

    if overrides:
        merged = merge_config(merged, overrides)

    return Config.from_mapping(merged)
