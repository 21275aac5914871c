"""Unit tests for tu_planner.config.loader."""

from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from tu_planner.config.loader import (
    config_from_env,
    get_config_search_paths,
    load_config,
    merge_config,
)
from tu_planner.config.models import ComponentsSource, LinkSource, Locale
from tu_planner.core.exceptions import ConfigLoadError, ConfigParseError

pytestmark = pytest.mark.unit

TOKEN_A = "0f8fad5b-d9cb-469f-a165-70867728950e"
TOKEN_B = "7c9e6679-7425-40de-944b-e07fc1f90ae7"


@pytest.fixture
def config_dirs(tmp_path: Path, monkeypatch: Any) -> SimpleNamespace:
    """Point XDG and the working directory at isolated temp directories."""
    system = tmp_path / "etc-xdg"
    user = tmp_path / "home-config"
    cwd = tmp_path / "cwd"
    for directory in (system / "tu-planner", user / "tu-planner", cwd):
        directory.mkdir(parents=True)

    monkeypatch.chdir(cwd)
    return SimpleNamespace(
        system=system / "tu-planner" / "config.yaml",
        user=user / "tu-planner" / "config.yaml",
        cwd=cwd / "config.yaml",
        env={"XDG_CONFIG_DIRS": str(system), "XDG_CONFIG_HOME": str(user)},
    )


class TestSearchPaths:
    """Tests for get_config_search_paths."""

    def test_order_is_system_user_cwd(self, tmp_path: Path, monkeypatch: Any) -> None:
        monkeypatch.chdir(tmp_path)
        env = {"XDG_CONFIG_DIRS": "/first:/second", "XDG_CONFIG_HOME": "/home/u/.config"}

        paths = get_config_search_paths(env)

        assert paths == [
            Path("/second/tu-planner/config.yaml"),
            Path("/first/tu-planner/config.yaml"),
            Path("/home/u/.config/tu-planner/config.yaml"),
            tmp_path / "config.yaml",
        ]

    def test_defaults_without_xdg_variables(self, monkeypatch: Any) -> None:
        monkeypatch.setenv("HOME", "/home/someone")

        paths = get_config_search_paths({})

        assert paths[0] == Path("/etc/xdg/tu-planner/config.yaml")
        assert paths[1] == Path("/home/someone/.config/tu-planner/config.yaml")


class TestConfigFromEnv:
    """Tests for config_from_env."""

    def test_nested_keys(self) -> None:
        env = {
            "TU_PLANNER_TISS__LOCALE": "de",
            "TU_PLANNER_TISS__TOKEN": TOKEN_A,
            "TU_PLANNER_SERVICE__BIND": "0.0.0.0:9000",
            "UNRELATED": "x",
        }

        assert config_from_env(env) == {
            "tiss": {"locale": "de", "token": TOKEN_A},
            "service": {"bind": "0.0.0.0:9000"},
        }

    def test_flat_link(self) -> None:
        env = {"TU_PLANNER_TISS": "https://tiss.example.test/cal?locale=en"}
        assert config_from_env(env) == {"tiss": "https://tiss.example.test/cal?locale=en"}

    def test_malformed_names_are_ignored(self) -> None:
        env = {"TU_PLANNER_TISS____TOKEN": TOKEN_A, "TU_PLANNER_": "x"}
        assert config_from_env(env) == {}


def test_merge_config_is_recursive_and_non_mutating() -> None:
    base = {"tiss": {"locale": "de", "token": TOKEN_A}, "service": {"bind": "a:1"}}
    override = {"tiss": {"token": TOKEN_B}}

    merged = merge_config(base, override)

    assert merged == {"tiss": {"locale": "de", "token": TOKEN_B}, "service": {"bind": "a:1"}}
    assert base["tiss"]["token"] == TOKEN_A


def test_merge_config_scalar_replaces_mapping() -> None:
    merged = merge_config({"tiss": {"locale": "de"}}, {"tiss": "https://x.test/?locale=en"})
    assert merged == {"tiss": "https://x.test/?locale=en"}


class TestLoadConfig:
    """Tests for load_config precedence and failures."""

    def test_later_files_take_precedence(self, config_dirs: SimpleNamespace) -> None:
        config_dirs.system.write_text(
            f"tiss:\n  locale: de\n  token: {TOKEN_A}\nservice:\n  bind: 10.0.0.1:1000\n"
        )
        config_dirs.user.write_text(f"tiss:\n  token: {TOKEN_B}\n")
        config_dirs.cwd.write_text("service:\n  bind: 127.0.0.1:2000\n")

        config = load_config(environ=config_dirs.env)

        assert isinstance(config.app.tiss, ComponentsSource)
        assert config.app.tiss.locale is Locale.DE
        assert str(config.app.tiss.token) == TOKEN_B
        assert config.service.bind == "127.0.0.1:2000"

    def test_environment_overrides_files(self, config_dirs: SimpleNamespace) -> None:
        config_dirs.cwd.write_text(f"tiss:\n  locale: de\n  token: {TOKEN_A}\n")

        config = load_config(
            environ={
                **config_dirs.env,
                "TU_PLANNER_TISS__LOCALE": "en",
                "TU_PLANNER_SERVICE__BIND": "0.0.0.0:8000",
            }
        )

        assert config.app.tiss.resolved_locale() is Locale.EN
        assert config.service.port == 8000

    def test_link_from_environment(self, config_dirs: SimpleNamespace) -> None:
        env = {**config_dirs.env, "TU_PLANNER_TISS": "https://tiss.example.test/cal?locale=de"}
        config = load_config(environ=env)

        assert isinstance(config.app.tiss, LinkSource)
        assert config.service.bind == "127.0.0.1:8485"

    def test_explicit_path_and_overrides(self, config_dirs: SimpleNamespace, tmp_path: Path) -> None:
        extra = tmp_path / "extra.yaml"
        extra.write_text(f"tiss:\n  locale: en\n  token: {TOKEN_A}\nlog_level: debug\n")

        config = load_config(
            str(extra), environ=config_dirs.env, overrides={"service": {"bind": "[::1]:7000"}}
        )

        assert config.log_level == "DEBUG"
        assert config.service.host == "::1"

    def test_missing_explicit_path_fails(self, config_dirs: SimpleNamespace, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_config(str(tmp_path / "missing.yaml"), environ=config_dirs.env)

    def test_invalid_yaml_fails(self, config_dirs: SimpleNamespace) -> None:
        config_dirs.cwd.write_text("tiss: [unclosed\n")

        with pytest.raises(ConfigLoadError):
            load_config(environ=config_dirs.env)

    def test_non_mapping_file_fails(self, config_dirs: SimpleNamespace) -> None:
        config_dirs.cwd.write_text("- just\n- a list\n")

        with pytest.raises(ConfigLoadError):
            load_config(environ=config_dirs.env)

    def test_empty_file_is_allowed(self, config_dirs: SimpleNamespace) -> None:
        config_dirs.user.write_text("")

        env = {**config_dirs.env, "TU_PLANNER_TISS": "https://tiss.example.test/?locale=en"}
        config = load_config(environ=env)

        assert isinstance(config.app.tiss, LinkSource)

    def test_missing_token_reports_field(self, config_dirs: SimpleNamespace) -> None:
        config_dirs.cwd.write_text("tiss:\n  locale: de\n")

        with pytest.raises(ConfigParseError) as exc_info:
            load_config(environ=config_dirs.env)
        assert exc_info.value.field == "tiss.token"

    def test_no_configuration_reports_missing_source(self, config_dirs: SimpleNamespace) -> None:
        with pytest.raises(ConfigParseError) as exc_info:
            load_config(environ=config_dirs.env)
        assert exc_info.value.field == "tiss"
