"""XDG-compliant path management for reprosetup.

This module provides standardized paths following the XDG Base Directory
Specification. Configuration and reconciliation state both live below
the configuration directory so a machine can be rebuilt from one tree:

- Config: ~/.config/reprosetup/config.toml
- State: ~/.config/reprosetup/state/<domain>.json
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "reprosetup"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def _config_home() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    return Path(base) if base else Path.home() / ".config"


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/reprosetup/ (or XDG_CONFIG_HOME/reprosetup/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/reprosetup/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_state_dir() -> Path:
    """Get the reconciliation state directory path.

    Returns:
        Path to ~/.config/reprosetup/state/.
    """
    return get_config_dir() / "state"


def get_state_path(domain: str, state_dir: Path | None = None) -> Path:
    """Get the state file path for a domain.

    Args:
        domain: State file stem (e.g., "containers").
        state_dir: Optional override for the state directory.

    Returns:
        Path to <state_dir>/<domain>.json.
    """
    return (state_dir or get_state_dir()) / f"{domain}.json"


def get_theme_path() -> Path:
    """Get the user theme configuration path.

    Returns:
        Path to ~/.config/reprosetup/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_systemd_unit_dir(user: bool) -> Path:
    """Get the directory custom systemd units are written to.

    Args:
        user: True for user-scope units, False for system-scope units.

    Returns:
        ~/.config/systemd/user for user scope, /etc/systemd/system otherwise.
    """
    if user:
        return _config_home() / "systemd" / "user"
    return Path("/etc/systemd/system")


def get_quadlet_dir() -> Path:
    """Get the rootless Quadlet unit directory.

    Returns:
        Path to ~/.config/containers/systemd/.
    """
    return _config_home() / "containers" / "systemd"


def get_registries_conf_path() -> Path:
    """Get the per-user container registries configuration path.

    Returns:
        Path to ~/.config/containers/registries.conf.
    """
    return _config_home() / "containers" / "registries.conf"


def ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_state_dir(state_dir: Path | None = None) -> Path:
    """Create the state directory if it doesn't exist.

    Returns:
        Path to the state directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return ensure_dir(state_dir or get_state_dir(), "state")
