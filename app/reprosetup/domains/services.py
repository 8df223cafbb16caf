"""systemd service domain, one instance per scope."""

import logging
from collections.abc import Collection, Mapping
from typing import Any

from reprosetup.core.state import ManagedRecord, SectionLayout
from reprosetup.domains.base import Domain, RecordExtra
from reprosetup.models.config import DesktopConfig, ServiceSpec
from reprosetup.models.current import ServiceState
from reprosetup.operators.systemd import SystemctlOperator
from reprosetup.scanners.systemd import SystemdScanner, timer_name, unit_name

logger = logging.getLogger(__name__)


def _unit_content(text: str) -> str:
    return text if text.endswith("\n") else text + "\n"


def service_layout(user: bool) -> SectionLayout:
    """Return the services.json section of a systemd scope."""
    scope = "user" if user else "system"
    return SectionLayout(f"{scope}_services", hash_field="content_hash", time_field="installed_at")


class ServiceDomain(Domain):
    """systemd units of the system or the user manager.

    Only units named in the configuration or in the state file are queried,
    so services never show up as undeclared. A unit's own file is written
    only when the declaration carries its content; otherwise the unit is
    expected to come from a package.
    """

    selector = "services"
    state_file = "services"

    def __init__(
        self,
        user: bool = False,
        scanner: SystemdScanner | None = None,
        operator: SystemctlOperator | None = None,
    ) -> None:
        self.user = user
        self.scope = "user" if user else "system"
        self.layout = service_layout(user)
        self.scanner = scanner
        self.operator = operator if operator is not None else SystemctlOperator(user)

    @property
    def name(self) -> str:
        return f"{self.scope} services"

    def declared(self, config: DesktopConfig) -> dict[str, ServiceSpec]:
        return dict(config.services.user if self.user else config.services.system)

    def snapshot(
        self, declared: Mapping[str, Any], prior_keys: Collection[str]
    ) -> dict[str, ServiceState]:
        timer_keys = {key for key, spec in declared.items() if spec.timer}
        scanner = self.scanner if self.scanner is not None else SystemdScanner(self.user, timer_keys)
        return scanner.snapshot(set(declared) | set(prior_keys))

    def matches(self, declared: ServiceSpec, current: ServiceState) -> bool:
        if declared.unit is not None and current.unit_text != _unit_content(declared.unit):
            return False
        if declared.timer is not None and current.timer_text != _unit_content(declared.timer):
            return False
        if current.static:
            if not declared.enabled:
                logger.warning("%s is static and cannot be disabled, ignoring enabled = false", current.name)
            return current.active == declared.started
        return current.enabled == declared.enabled and current.active == declared.started

    def _activation_unit(self, key: str, spec: ServiceSpec) -> str:
        return timer_name(key) if spec.timer else unit_name(key)

    def _write_files(self, key: str, spec: ServiceSpec, current: ServiceState | None) -> bool:
        written = False
        if spec.unit is not None:
            content = _unit_content(spec.unit)
            if current is None or current.unit_text != content:
                self.operator.write_unit(unit_name(key), content)
                written = True
        if spec.timer is not None:
            content = _unit_content(spec.timer)
            if current is None or current.timer_text != content:
                self.operator.write_unit(timer_name(key), content)
                written = True
        if written:
            self.operator.daemon_reload()
        return written

    def _converge(self, key: str, spec: ServiceSpec, current: ServiceState | None) -> RecordExtra:
        written = self._write_files(key, spec, current)
        unit = self._activation_unit(key, spec)
        enabled = current.enabled if current else False
        active = current.active if current else False

        # Static units have no install section to act on
        if spec.enabled != enabled and not (current and current.static):
            if spec.enabled:
                self.operator.enable(unit)
            else:
                self.operator.disable(unit)

        if spec.started != active:
            if spec.started:
                self.operator.start(unit)
            else:
                self.operator.stop(unit)
        elif spec.started and written:
            # Running with outdated unit content
            self.operator.restart(unit)

        return {"owns_unit": spec.unit is not None, "owns_timer": spec.timer is not None}

    def create(self, key: str, declared: Any) -> RecordExtra:
        return self._converge(key, declared, None)

    def update(self, key: str, declared: Any, current: Any) -> RecordExtra:
        return self._converge(key, declared, current)

    def delete(self, key: str, current: Any, record: ManagedRecord | None) -> None:
        """Disable and stop a unit, removing any unit files reprosetup wrote."""
        extra = record.extra if record else {}
        owns_timer = bool(extra.get("owns_timer"))
        unit = timer_name(key) if owns_timer else unit_name(key)
        self.operator.disable_now(unit)
        if owns_timer:
            self.operator.disable_now(unit_name(key))

        removed = False
        if owns_timer:
            self.operator.remove_unit(timer_name(key))
            removed = True
        if extra.get("owns_unit"):
            self.operator.remove_unit(unit_name(key))
            removed = True
        if removed:
            self.operator.daemon_reload()
