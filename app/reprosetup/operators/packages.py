"""Distribution package operators (dnf and apt)."""

from reprosetup.operators.base import PackageOperator
from reprosetup.utils.shell import as_root, command_exists, run_checked

# sudo resets the environment, so pass the frontend through env(1)
_APT_ENV = ["env", "DEBIAN_FRONTEND=noninteractive"]


class DnfOperator(PackageOperator):
    """Operator for RPM packages on Fedora.

    Uses dnf to install, remove and mark packages. Requires sudo
    privileges for actual execution.
    """

    @property
    def name(self) -> str:
        return "dnf"

    def is_available(self) -> bool:
        """Check if dnf is available."""
        return command_exists("dnf")

    def install(self, package: str) -> None:
        """Install a package using dnf install."""
        run_checked(
            as_root(["dnf", "install", "-y", package]),
            f"Installing package {package}",
        )

    def remove(self, package: str) -> None:
        """Remove a package using dnf remove."""
        run_checked(
            as_root(["dnf", "remove", "-y", package]),
            f"Removing package {package}",
        )

    def mark_managed(self, package: str) -> None:
        """Mark a package user-installed so autoremove keeps it."""
        run_checked(
            as_root(["dnf", "mark", "install", package]),
            f"Marking package {package} as user-installed",
        )


class AptOperator(PackageOperator):
    """Operator for APT/dpkg packages on Debian and Ubuntu."""

    @property
    def name(self) -> str:
        return "apt"

    def is_available(self) -> bool:
        """Check if apt-get is available."""
        return command_exists("apt-get")

    def install(self, package: str) -> None:
        """Install a package using apt-get install."""
        run_checked(
            as_root([*_APT_ENV, "apt-get", "install", "-y", package]),
            f"Installing package {package}",
        )

    def remove(self, package: str) -> None:
        """Remove a package using apt-get remove (configuration is kept)."""
        run_checked(
            as_root([*_APT_ENV, "apt-get", "remove", "-y", package]),
            f"Removing package {package}",
        )

    def mark_managed(self, package: str) -> None:
        """Mark a package manually installed."""
        run_checked(
            as_root(["apt-mark", "manual", package]),
            f"Marking package {package} as manually installed",
        )


class FlatpakOperator(PackageOperator):
    """Operator for Flatpak applications.

    Attributes:
        remote: Remote applications are installed from.
    """

    def __init__(self, remote: str = "flathub") -> None:
        self.remote = remote

    @property
    def name(self) -> str:
        return "flatpak"

    def is_available(self) -> bool:
        """Check if flatpak CLI is available."""
        return command_exists("flatpak")

    def ensure_remote(self, url: str) -> None:
        """Add the configured remote if it is missing."""
        run_checked(
            ["flatpak", "remote-add", "--if-not-exists", self.remote, url],
            f"Adding Flatpak remote {self.remote}",
        )

    def install(self, package: str) -> None:
        """Install an application from the configured remote."""
        run_checked(
            ["flatpak", "install", "-y", "--noninteractive", self.remote, package],
            f"Installing Flatpak {package}",
        )

    def remove(self, package: str) -> None:
        """Uninstall an application."""
        run_checked(
            ["flatpak", "uninstall", "-y", "--noninteractive", package],
            f"Uninstalling Flatpak {package}",
        )

    def mark_managed(self, package: str) -> None:
        """Bring an already installed application up to date."""
        run_checked(
            ["flatpak", "update", "-y", "--noninteractive", package],
            f"Updating Flatpak {package}",
        )


def get_package_operator(distro: str) -> PackageOperator:
    """Return the package operator for a distribution family.

    Args:
        distro: "fedora" or "debian".

    Returns:
        DnfOperator or AptOperator.

    Raises:
        ValueError: If the distribution is unknown.
    """
    if distro == "fedora":
        return DnfOperator()
    if distro == "debian":
        return AptOperator()
    msg = f"Unsupported distribution: {distro}"
    raise ValueError(msg)
