"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from pathlib import Path

import pytest

from reprosetup.core.config import ConfigSource, load_config
from reprosetup.core.confirm import ConfirmationPolicy, ConfirmMode


@pytest.fixture
def mock_dnf_output() -> str:
    """Sample dnf repoquery --userinstalled output for testing."""
    return """vim-enhanced\t9.1.083-1.fc40
htop\t3.3.0-3.fc40
kernel-core\t6.8.5-301.fc40
git\t2.44.0-1.fc40"""


@pytest.fixture
def mock_apt_mark_output() -> str:
    """Sample apt-mark showmanual output for testing."""
    return """firefox
neovim
curl"""


@pytest.fixture
def mock_dpkg_output() -> str:
    """Sample dpkg-query output for testing."""
    return """firefox\t128.0\tii
neovim\t0.9.5\tii
libgtk-3-0\t3.24.41\tii
curl\t8.5.0\trc
incomplete"""


@pytest.fixture
def mock_flatpak_output() -> str:
    """Sample flatpak list --app output for testing."""
    return """org.mozilla.firefox\t128.0
com.spotify.Client\t1.2.31.1205
org.gnome.Calculator\t"""


@pytest.fixture
def mock_podman_ps_output() -> str:
    """Sample podman ps --all --format json output for testing."""
    return """[
  {
    "Names": ["web"],
    "Image": "docker.io/library/nginx:1.25",
    "ImageID": "a1b2c3",
    "State": "running"
  },
  {
    "Names": ["db"],
    "Image": "docker.io/library/postgres:16",
    "ImageID": "d4e5f6",
    "State": "exited"
  }
]"""


@pytest.fixture
def sample_config_toml() -> str:
    """A configuration touching every section."""
    return """distro = "fedora"

[system]
hostname = "workstation"
packages = ["vim", "htop"]

[flatpak]
applications = ["org.mozilla.firefox"]

[services.system.sshd]
enabled = true
started = true

[podman]
pre_container_setup = [
    { description = "Enable lingering", command = "loginctl enable-linger" },
]

[containers.web]
image = "nginx:1.25"
raw_flags = "-p 8080:80"
autostart = true

[groups.media]
gid = 2000

[users.alice]
groups = ["media"]
shell = "/bin/bash"

[dotfiles]
source_dir = "dotfiles"
bashrc = true

[custom_commands]
commands = ["echo done"]
"""


@pytest.fixture
def config_file(tmp_path: Path, sample_config_toml: str) -> Path:
    """Write the sample configuration and return its path."""
    path = tmp_path / "config.toml"
    path.write_text(sample_config_toml)
    return path


@pytest.fixture
def config_source(config_file: Path) -> ConfigSource:
    """ConfigSource loaded from the sample configuration."""
    return ConfigSource(config_file, load_config(config_file))


@pytest.fixture
def yes_policy() -> ConfirmationPolicy:
    """Policy accepting every prompt."""
    return ConfirmationPolicy(ConfirmMode.AUTO_YES)


@pytest.fixture
def no_policy() -> ConfirmationPolicy:
    """Policy declining every prompt."""
    return ConfirmationPolicy(ConfirmMode.AUTO_NO)


@pytest.fixture
def state_dir(tmp_path: Path) -> Path:
    """Isolated state directory."""
    return tmp_path / "state"
