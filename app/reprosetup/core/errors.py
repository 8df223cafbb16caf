"""Exception hierarchy for reprosetup.

The error classes map onto how far a failure is allowed to travel:

- ConfigError and ApplyError stop the run and surface at the CLI.
- SnapshotError and StateIOError are recovered locally with a warning.
- ValidationError is recovered per resource key.
- PlanInvariantError signals a programming error in the engine inputs.
"""


class ReprosetupError(Exception):
    """Base exception for all reprosetup errors."""


class ConfigError(ReprosetupError):
    """Raised when the declared configuration cannot be loaded or saved."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file does not exist."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file is not valid TOML."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration content does not match the schema."""


class SnapshotError(ReprosetupError):
    """Raised when the live system state of a domain cannot be queried."""


class StateIOError(ReprosetupError):
    """Raised when a state file cannot be read or written."""


class ValidationError(ReprosetupError):
    """Raised when a single resource fails validation before mutation.

    Attributes:
        key: Resource key that failed validation.
    """

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{key}: {message}")
        self.key = key


class ApplyError(ReprosetupError):
    """Raised when an external command exits with a non-zero status.

    Attributes:
        args_list: The command that failed.
        returncode: Its exit status.
    """

    def __init__(self, description: str, args_list: list[str], returncode: int) -> None:
        super().__init__(
            f"{description} failed (exit {returncode}): {' '.join(args_list)}"
        )
        self.args_list = args_list
        self.returncode = returncode


class PlanInvariantError(ReprosetupError):
    """Raised when the reconciliation core receives malformed input."""
