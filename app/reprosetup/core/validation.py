"""Pre-mutation validation of user and group declarations.

Checks run before any account command, and a failure raises
ValidationError for that single key only; the reconciler records it and
moves on to the next key.
"""

import re
from collections.abc import Collection

from reprosetup.core.errors import ValidationError

# POSIX portable login name, optionally ending in $ (machine accounts)
NAME_PATTERN = re.compile(r"^[a-z_][a-z0-9_-]*[$]?$")
MAX_NAME_LENGTH = 32


def validate_name(name: str) -> None:
    """Validate a user or group name.

    Raises:
        ValidationError: If the name is too long or has invalid characters.
    """
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(name, f"name is longer than {MAX_NAME_LENGTH} characters")
    if not NAME_PATTERN.match(name):
        raise ValidationError(name, "name must match [a-z_][a-z0-9_-]*[$]?")


def validate_id(key: str, kind: str, value: int | None, min_id: int, max_id: int) -> None:
    """Validate that a declared UID or GID lies inside the managed range.

    Args:
        key: Resource key, used in the error.
        kind: "uid" or "gid".
        value: Declared id; None means unmanaged and always passes.
        min_id: Lowest allowed id.
        max_id: Highest allowed id.

    Raises:
        ValidationError: If the id is out of range.
    """
    if value is None:
        return
    if not min_id <= value <= max_id:
        raise ValidationError(key, f"{kind} {value} is outside the allowed range {min_id}-{max_id}")


def validate_shell(key: str, shell: str | None, valid_shells: Collection[str], source: str = "/etc/shells") -> None:
    """Validate that a declared login shell is listed in /etc/shells.

    An empty list rejects every declared shell: nothing can be checked
    against it.

    Raises:
        ValidationError: If the shell is not a valid login shell.
    """
    if shell is None:
        return
    if not valid_shells:
        raise ValidationError(key, f"no valid login shells could be read from {source}")
    if shell not in valid_shells:
        raise ValidationError(key, f"shell {shell} is not listed as a valid login shell")
