"""Distribution package domain."""

import logging
from collections.abc import Collection, Mapping
from typing import Any

from reprosetup.core.baseline import is_protected
from reprosetup.core.state import ManagedRecord, SectionLayout
from reprosetup.domains.base import Domain, RecordExtra
from reprosetup.models.config import DesktopConfig, PackageSpec
from reprosetup.models.current import InstalledPackage
from reprosetup.operators.base import PackageOperator
from reprosetup.operators.packages import get_package_operator
from reprosetup.scanners.base import Scanner
from reprosetup.scanners.packages import AptScanner, DnfScanner

logger = logging.getLogger(__name__)


def get_package_scanner(distro: str) -> Scanner[InstalledPackage]:
    """Return the package scanner for a distribution family."""
    if distro == "fedora":
        return DnfScanner()
    return AptScanner()


class PackageDomain(Domain):
    """System packages installed through dnf or apt.

    Presence is the only managed attribute, so an existing package that is
    not yet managed is "updated" by marking it user-installed.
    """

    selector = "packages"
    state_file = "packages"
    layout = SectionLayout("packages")

    def __init__(
        self,
        distro: str,
        scanner: Scanner[InstalledPackage] | None = None,
        operator: PackageOperator | None = None,
    ) -> None:
        self.distro = distro
        self.scanner = scanner if scanner is not None else get_package_scanner(distro)
        self.operator = operator if operator is not None else get_package_operator(distro)

    @property
    def name(self) -> str:
        return "packages"

    def declared(self, config: DesktopConfig) -> dict[str, PackageSpec]:
        return {name: PackageSpec() for name in config.system.packages}

    def snapshot(
        self, declared: Mapping[str, Any], prior_keys: Collection[str]
    ) -> dict[str, InstalledPackage]:
        """Query user-installed packages, hiding the protected baseline."""
        installed = self.scanner.snapshot()
        keep = set(declared) | set(prior_keys)
        return {
            name: pkg
            for name, pkg in installed.items()
            if name in keep or not is_protected(name, self.distro)
        }

    def create(self, key: str, declared: Any) -> RecordExtra:
        self.operator.install(key)
        return None

    def update(self, key: str, declared: Any, current: Any) -> RecordExtra:
        self.operator.mark_managed(key)
        return None

    def delete(self, key: str, current: Any, record: ManagedRecord | None) -> None:
        self.operator.remove(key)

    def adopt(self, config: DesktopConfig, key: str, current: Any) -> PackageSpec:
        if key not in config.system.packages:
            config.system.packages.append(key)
        return PackageSpec()
