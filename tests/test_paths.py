"""Tests for path management."""

from pathlib import Path

from docket.config.paths import (
    ENV_VAR,
    get_all_paths,
    get_config_path,
    get_docket_home,
    get_logs_path,
    get_state_path,
    get_system_timezone,
)


class TestGetDocketHome:
    """Tests for get_docket_home()."""

    def test_default_is_home_dot_docket(self, monkeypatch):
        monkeypatch.delenv(ENV_VAR, raising=False)
        get_docket_home.cache_clear()

        home = get_docket_home()
        assert home == Path.home() / ".docket"
        get_docket_home.cache_clear()

    def test_respects_env_var(self, monkeypatch, tmp_path):
        custom_path = tmp_path / "custom-docket"
        monkeypatch.setenv(ENV_VAR, str(custom_path))
        get_docket_home.cache_clear()

        home = get_docket_home()
        assert home == custom_path
        get_docket_home.cache_clear()

    def test_expands_tilde_in_env_var(self, monkeypatch):
        monkeypatch.setenv(ENV_VAR, "~/my-docket")
        get_docket_home.cache_clear()

        home = get_docket_home()
        assert home == (Path.home() / "my-docket").resolve()
        get_docket_home.cache_clear()


class TestDerivedPaths:
    """Tests for derived path functions."""

    def test_derived_paths(self, docket_home):
        assert get_config_path() == docket_home / "config.toml"
        assert get_state_path() == docket_home / "state"
        assert get_logs_path() == docket_home / "logs"

    def test_all_paths(self, docket_home):
        paths = get_all_paths()
        assert set(paths) == {"home", "config", "state", "logs"}
        assert paths["home"] == docket_home


class TestSystemTimezone:
    def test_tz_env_wins(self, monkeypatch):
        monkeypatch.setenv("TZ", "Asia/Tokyo")
        assert get_system_timezone() == "Asia/Tokyo"

    def test_always_returns_a_name(self, monkeypatch):
        monkeypatch.delenv("TZ", raising=False)
        assert get_system_timezone()
