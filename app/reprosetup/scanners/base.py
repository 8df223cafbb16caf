"""Abstract base class for snapshot providers.

This module defines the Scanner interface that every live-state query
implements. Scanners turn raw command output into Current Descriptors
keyed the same way as the declared configuration.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Collection
from typing import Generic, TypeVar

from reprosetup.core.errors import SnapshotError

logger = logging.getLogger(__name__)

C = TypeVar("C")


class Scanner(ABC, Generic[C]):
    """Abstract base class for all snapshot providers.

    Example:
        >>> scanner = FlatpakScanner()
        >>> if scanner.is_available():
        ...     for app_id in scanner.snapshot():
        ...         print(app_id)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the tool this scanner queries (e.g. "dnf")."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the queried tool is available on the system.

        Returns:
            True if the scanner can be used, False otherwise.
        """

    @abstractmethod
    def scan(self, keys: Collection[str] = ()) -> dict[str, C]:
        """Query the live system.

        Args:
            keys: Keys the caller is interested in. Enumerating scanners
                  ignore it; per-key scanners (systemd) query only these.

        Returns:
            Current descriptors by key.

        Raises:
            RuntimeError: If the query fails.
        """

    def snapshot(self, keys: Collection[str] = ()) -> dict[str, C]:
        """Run scan() and normalize failures to SnapshotError.

        Raises:
            SnapshotError: If the tool is missing or the query fails.
        """
        if not self.is_available():
            msg = f"{self.name} is not available on this system"
            raise SnapshotError(msg)
        try:
            return self.scan(keys)
        except (OSError, RuntimeError, ValueError) as e:
            msg = f"{self.name} query failed: {e}"
            raise SnapshotError(msg) from e
