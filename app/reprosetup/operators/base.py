"""Abstract base class for package operators.

This module defines the interface that package management appliers
implement. Operators act on one package at a time and raise ApplyError
when the package manager fails; their output streams to the terminal.
"""

from abc import ABC, abstractmethod


class PackageOperator(ABC):
    """Abstract base class for package operators.

    Example:
        >>> operator = DnfOperator()
        >>> if operator.is_available():
        ...     operator.install("htop")
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the package manager name (e.g. "dnf")."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system.

        Returns:
            True if the package manager can be used, False otherwise.
        """

    @abstractmethod
    def install(self, package: str) -> None:
        """Install a package.

        Raises:
            ApplyError: If the package manager fails.
        """

    @abstractmethod
    def remove(self, package: str) -> None:
        """Remove a package.

        Raises:
            ApplyError: If the package manager fails.
        """

    @abstractmethod
    def mark_managed(self, package: str) -> None:
        """Mark an already installed package as explicitly installed.

        Raises:
            ApplyError: If the package manager fails.
        """
