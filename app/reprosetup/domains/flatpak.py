"""Flatpak application domain."""

from collections.abc import Collection, Mapping
from typing import Any

from reprosetup.core.state import ManagedRecord, SectionLayout
from reprosetup.domains.base import Domain, RecordExtra
from reprosetup.models.config import DesktopConfig, FlatpakConfig, PackageSpec
from reprosetup.models.current import InstalledPackage
from reprosetup.models.plan import Action, Plan
from reprosetup.operators.packages import FlatpakOperator
from reprosetup.scanners.flatpak import FlatpakScanner


class FlatpakDomain(Domain):
    """Flatpak applications installed from a single remote."""

    selector = "flatpak"
    state_file = "flatpak"
    layout = SectionLayout("flatpak")

    def __init__(
        self,
        settings: FlatpakConfig,
        scanner: FlatpakScanner | None = None,
        operator: FlatpakOperator | None = None,
    ) -> None:
        self.settings = settings
        self.scanner = scanner if scanner is not None else FlatpakScanner()
        self.operator = operator if operator is not None else FlatpakOperator(settings.remote)

    @property
    def name(self) -> str:
        return "flatpak"

    def declared(self, config: DesktopConfig) -> dict[str, PackageSpec]:
        return {app_id: PackageSpec() for app_id in config.flatpak.applications}

    def snapshot(
        self, declared: Mapping[str, Any], prior_keys: Collection[str]
    ) -> dict[str, InstalledPackage]:
        return self.scanner.snapshot()

    def prepare(self, plan: Plan) -> None:
        """Make sure the remote exists before the first install."""
        if plan.by_action(Action.CREATE):
            self.operator.ensure_remote(self.settings.remote_url)

    def create(self, key: str, declared: Any) -> RecordExtra:
        self.operator.install(key)
        return None

    def update(self, key: str, declared: Any, current: Any) -> RecordExtra:
        self.operator.mark_managed(key)
        return None

    def delete(self, key: str, current: Any, record: ManagedRecord | None) -> None:
        self.operator.remove(key)

    def adopt(self, config: DesktopConfig, key: str, current: Any) -> PackageSpec:
        if key not in config.flatpak.applications:
            config.flatpak.applications.append(key)
        return PackageSpec()
