"""Unit tests for the package and Flatpak domains."""

from unittest.mock import MagicMock

import pytest

from reprosetup.domains.flatpak import FlatpakDomain
from reprosetup.domains.packages import PackageDomain, get_package_scanner
from reprosetup.models.config import DesktopConfig, FlatpakConfig, PackageSpec, SystemConfig
from reprosetup.models.current import InstalledPackage
from reprosetup.models.plan import Action, Plan, PlanEntry
from reprosetup.scanners.packages import AptScanner, DnfScanner


@pytest.fixture
def packages() -> PackageDomain:
    """Fedora package domain with mocked scanner and operator."""
    return PackageDomain("fedora", scanner=MagicMock(), operator=MagicMock())


class TestPackageDomain:
    """Tests for PackageDomain."""

    def test_scanner_per_family(self) -> None:
        """dnf on Fedora, apt on Debian."""
        assert isinstance(get_package_scanner("fedora"), DnfScanner)
        assert isinstance(get_package_scanner("debian"), AptScanner)

    def test_declared(self, packages: PackageDomain) -> None:
        """Every listed package is declared with a presence-only spec."""
        config = DesktopConfig(distro="fedora", system=SystemConfig(packages=["vim", "htop"]))

        assert packages.declared(config) == {"vim": PackageSpec(), "htop": PackageSpec()}

    def test_snapshot_hides_protected(self, packages: PackageDomain) -> None:
        """Protected packages are hidden unless declared or managed."""
        packages.scanner.snapshot.return_value = {
            name: InstalledPackage(name) for name in ("vim", "kernel-core", "glibc", "dnf-plugins-core")
        }

        current = packages.snapshot({"glibc": PackageSpec()}, ["dnf-plugins-core"])

        assert set(current) == {"vim", "glibc", "dnf-plugins-core"}

    def test_actions_use_operator(self, packages: PackageDomain) -> None:
        """Create installs, update marks, delete removes."""
        packages.create("vim", PackageSpec())
        packages.update("htop", PackageSpec(), InstalledPackage("htop"))
        packages.delete("git", InstalledPackage("git"), None)

        packages.operator.install.assert_called_once_with("vim")
        packages.operator.mark_managed.assert_called_once_with("htop")
        packages.operator.remove.assert_called_once_with("git")

    def test_adopt_appends_once(self, packages: PackageDomain) -> None:
        """Adoption adds the package to the list exactly once."""
        config = DesktopConfig(distro="fedora", system=SystemConfig(packages=["vim"]))

        packages.adopt(config, "git", InstalledPackage("git"))
        packages.adopt(config, "git", InstalledPackage("git"))

        assert config.system.packages == ["vim", "git"]


class TestFlatpakDomain:
    """Tests for FlatpakDomain."""

    @pytest.fixture
    def flatpak(self) -> FlatpakDomain:
        """Flatpak domain with mocked scanner and operator."""
        return FlatpakDomain(FlatpakConfig(), scanner=MagicMock(), operator=MagicMock())

    def test_prepare_adds_remote_only_for_installs(self, flatpak: FlatpakDomain) -> None:
        """The remote is ensured once when something will be installed."""
        flatpak.prepare(Plan("flatpak", (PlanEntry("org.gnome.Calculator", Action.UPDATE),)))
        flatpak.operator.ensure_remote.assert_not_called()

        flatpak.prepare(Plan("flatpak", (PlanEntry("org.mozilla.firefox", Action.CREATE),)))
        flatpak.operator.ensure_remote.assert_called_once_with("https://flathub.org/repo/flathub.flatpakrepo")

    def test_adopt(self, flatpak: FlatpakDomain) -> None:
        """Adoption adds the application ID."""
        config = DesktopConfig(distro="fedora")

        flatpak.adopt(config, "com.spotify.Client", InstalledPackage("com.spotify.Client"))

        assert config.flatpak.applications == ["com.spotify.Client"]
