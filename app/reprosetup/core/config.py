"""Configuration file I/O operations.

This module provides functions for loading and saving the desktop
configuration in TOML format with validation using Pydantic models, and
the ConfigSource wrapper the reconciler uses to write adopted resources
back into the file.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError as PydanticValidationError

from reprosetup.core.errors import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from reprosetup.core.paths import get_config_path
from reprosetup.models.config import DesktopConfig

logger = logging.getLogger(__name__)


def load_config(path: Path | None = None) -> DesktopConfig:
    """Load and validate a configuration from a TOML file.

    Args:
        path: Path to the configuration file. If None, uses the default path.

    Returns:
        Validated DesktopConfig object.

    Raises:
        ConfigNotFoundError: If the file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Configuration not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read configuration: {e}") from e

    try:
        return DesktopConfig.model_validate(data)
    except PydanticValidationError as e:
        raise ConfigValidationError(f"Invalid configuration content: {e}") from e


def config_to_dict(config: DesktopConfig) -> dict[str, Any]:
    """Convert a DesktopConfig to a dictionary suitable for TOML serialization.

    Unset optional attributes and empty sections are dropped so a written
    file stays close to what a person would write by hand.

    Args:
        config: The configuration to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    data = config.model_dump(mode="json", exclude_none=True)
    return {key: value for key, value in data.items() if not _is_empty(value)}


def _is_empty(value: object) -> bool:
    if isinstance(value, dict):
        return all(_is_empty(v) for v in value.values())
    if isinstance(value, list):
        return not value
    return False


def save_config(config: DesktopConfig, path: Path | None = None) -> Path:
    """Save a configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.
    The temporary file is cleaned up on failure.

    Args:
        config: The configuration to save.
        path: Destination path. If None, uses the default path.

    Returns:
        Path where the configuration was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f, multiline_strings=True)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write configuration: {e}") from e

    return config_path


class ConfigSource:
    """The loaded configuration together with the file it came from.

    Domains read their declared descriptors from ``config`` and mutate it
    when a resource is adopted; ``persist()`` then writes it back.

    Attributes:
        path: Configuration file path.
        config: Loaded configuration.
    """

    def __init__(self, path: Path, config: DesktopConfig) -> None:
        self.path = path
        self.config = config

    @classmethod
    def load(cls, path: Path | None = None) -> "ConfigSource":
        """Load the configuration at path (default path if None).

        Raises:
            ConfigError: If the file cannot be loaded.
        """
        config_path = path or get_config_path()
        return cls(config_path, load_config(config_path))

    def persist(self) -> Path:
        """Write the (possibly adopted-into) configuration back to disk.

        Raises:
            ConfigError: If the file cannot be written.
        """
        logger.info("Writing configuration to %s", self.path)
        return save_config(self.config, self.path)
