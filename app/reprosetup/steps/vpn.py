"""WireGuard VPN step through NetworkManager.

The connection is named after the stem of the configuration file
("wg0.conf" -> "wg0"). It is re-imported only when the file content
changed since the last import or the connection has disappeared.
"""

from pathlib import Path

from reprosetup.core.errors import ApplyError, ConfigError
from reprosetup.core.fingerprint import fingerprint_file
from reprosetup.core.state import SectionLayout, StateStore
from reprosetup.models.config import WireguardConfig
from reprosetup.models.plan import Action, Outcome, OutcomeStatus
from reprosetup.utils.formatting import print_info, print_success
from reprosetup.utils.shell import command_exists, run_checked, run_command

VPN_LAYOUT = SectionLayout("wireguard", hash_field="content_hash", time_field="installed_at")
AUTOCONNECT_PRIORITY = "10"


def connection_exists(name: str) -> bool:
    """Check if NetworkManager knows a connection."""
    return run_command(["nmcli", "connection", "show", name]).success


class WireguardStep:
    """Imports a WireGuard configuration and brings the connection up."""

    def __init__(self, settings: WireguardConfig, store: StateStore) -> None:
        self.conf_path = Path(settings.conf_path).expanduser()
        self.interface = self.conf_path.stem
        self.section = store.section(VPN_LAYOUT)

    def run(self) -> list[Outcome]:
        """Import the connection if needed.

        Raises:
            ConfigError: If the configuration file does not exist.
            ApplyError: If nmcli is missing or an nmcli command fails.
        """
        if not self.conf_path.is_file():
            msg = f"WireGuard configuration not found: {self.conf_path}"
            raise ConfigError(msg)
        if not command_exists("nmcli"):
            raise ApplyError("Configuring WireGuard (nmcli not found)", ["nmcli"], 127)

        digest = fingerprint_file(self.conf_path)
        record = self.section.get(self.interface)
        exists = connection_exists(self.interface)
        if record is not None and record.fingerprint == digest and exists:
            print_info(f"WireGuard connection {self.interface} is up to date")
            return []

        name = self.interface
        if exists:
            run_checked(["nmcli", "connection", "delete", name], f"Removing existing connection {name}")
        run_checked(
            ["nmcli", "connection", "import", "type", "wireguard", "file", str(self.conf_path)],
            f"Importing WireGuard configuration {self.conf_path}",
        )
        run_checked(
            ["nmcli", "connection", "modify", name, "connection.autoconnect", "yes"],
            f"Enabling autoconnect for {name}",
        )
        run_checked(
            ["nmcli", "connection", "modify", name, "connection.autoconnect-priority", AUTOCONNECT_PRIORITY],
            f"Setting autoconnect priority for {name}",
        )
        run_checked(["nmcli", "connection", "up", name], f"Activating connection {name}")

        self.section.record(name, digest, {"conf_path": str(self.conf_path)})
        print_success(f"WireGuard connection {name} configured with autoconnect")
        action = Action.CREATE if record is None else Action.UPDATE
        return [Outcome("vpn", name, action, OutcomeStatus.APPLIED)]
