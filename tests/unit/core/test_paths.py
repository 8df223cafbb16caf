"""Unit tests for XDG path resolution."""

from pathlib import Path

import pytest

from reprosetup.core.paths import (
    ensure_state_dir,
    get_config_path,
    get_quadlet_dir,
    get_registries_conf_path,
    get_state_path,
    get_systemd_unit_dir,
)


class TestConfigPaths:
    """Tests for paths below the configuration directory."""

    def test_xdg_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """XDG_CONFIG_HOME moves config and state together."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert get_config_path() == tmp_path / "reprosetup" / "config.toml"
        assert get_state_path("containers") == tmp_path / "reprosetup" / "state" / "containers.json"

    def test_home_fallback(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without XDG_CONFIG_HOME ~/.config is used."""
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setattr(Path, "home", lambda: tmp_path)

        assert get_config_path() == tmp_path / ".config" / "reprosetup" / "config.toml"

    def test_state_dir_override(self, tmp_path: Path) -> None:
        """An explicit state directory wins."""
        assert get_state_path("vpn", tmp_path) == tmp_path / "vpn.json"

    def test_ensure_state_dir_creates(self, tmp_path: Path) -> None:
        """The state directory is created on demand."""
        state_dir = tmp_path / "a" / "state"

        assert ensure_state_dir(state_dir) == state_dir
        assert state_dir.is_dir()


class TestUnitDirs:
    """Tests for systemd and Quadlet unit directories."""

    def test_system_units(self) -> None:
        """System units go to /etc."""
        assert get_systemd_unit_dir(user=False) == Path("/etc/systemd/system")

    def test_user_units(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """User units and Quadlet files live below the config home."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert get_systemd_unit_dir(user=True) == tmp_path / "systemd" / "user"
        assert get_quadlet_dir() == tmp_path / "containers" / "systemd"
        assert get_registries_conf_path() == tmp_path / "containers" / "registries.conf"
