"""Podman host setup: the user API socket and the registry search list.

Runs only when podman is among the declared packages. The registries file
is written in the registries.conf v2 format; a file reprosetup did not
write is left alone.
"""

from collections.abc import Sequence
from pathlib import Path

import tomli_w

from reprosetup.core.paths import get_registries_conf_path
from reprosetup.models.config import PodmanConfig
from reprosetup.models.plan import Action, Outcome, OutcomeStatus
from reprosetup.utils.formatting import print_info, print_warning
from reprosetup.utils.shell import run_checked, run_command

SOCKET = "podman.socket"
HEADER = "# Generated by reprosetup, changes are overwritten.\n"
DEFAULT_REGISTRIES: tuple[str, ...] = (
    "docker.io",
    "registry.fedoraproject.org",
    "quay.io",
    "registry.redhat.io",
    "ghcr.io",
)


def render_registries(registries: Sequence[str]) -> str:
    """Render registries.conf content for the given search list."""
    return HEADER + tomli_w.dumps({"unqualified-search-registries": list(registries)})


def socket_ready() -> bool:
    """Check if the user podman socket is enabled and listening."""
    try:
        enabled = run_command(["systemctl", "--user", "is-enabled", SOCKET])
        active = run_command(["systemctl", "--user", "is-active", SOCKET])
    except FileNotFoundError:
        return False
    return enabled.stdout.strip() == "enabled" and active.success


class PodmanSetupStep:
    """Enable the podman socket and write the registry search list."""

    def __init__(self, settings: PodmanConfig, conf_path: Path | None = None) -> None:
        self.settings = settings
        self.conf_path = conf_path or get_registries_conf_path()

    @property
    def registries(self) -> list[str]:
        if self.settings.registries is None:
            return list(DEFAULT_REGISTRIES)
        return self.settings.registries

    def run(self) -> list[Outcome]:
        """Bring the socket and registries.conf in line.

        Raises:
            ApplyError: If enabling the socket fails.
        """
        outcomes: list[Outcome] = []
        if not socket_ready():
            run_checked(["systemctl", "--user", "enable", "--now", SOCKET], "Enabling Podman socket")
            outcomes.append(Outcome("podman", SOCKET, Action.UPDATE, OutcomeStatus.APPLIED))

        outcome = self._write_registries()
        if outcome is not None:
            outcomes.append(outcome)
        return outcomes

    def _write_registries(self) -> Outcome | None:
        content = render_registries(self.registries)
        path = self.conf_path
        try:
            existing = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            existing = None

        if existing == content:
            return None
        if existing is not None and not existing.startswith(HEADER):
            print_warning(f"{path} was not written by reprosetup, leaving it unchanged")
            return None
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        print_info(f"Wrote container registry search list to {path}")
        action = Action.CREATE if existing is None else Action.UPDATE
        return Outcome("podman", path.name, action, OutcomeStatus.APPLIED)
