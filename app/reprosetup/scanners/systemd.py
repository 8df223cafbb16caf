"""systemd unit scanner.

Services are not enumerated: only the units the configuration or the
state store mention are queried, one ``systemctl show`` call per unit.
"""

import logging
from collections.abc import Collection
from pathlib import Path

from reprosetup.core.paths import get_systemd_unit_dir
from reprosetup.models.current import ServiceState
from reprosetup.scanners.base import Scanner
from reprosetup.utils.shell import command_exists, run_command

logger = logging.getLogger(__name__)

_UNIT_SUFFIXES = (".service", ".socket", ".timer", ".path", ".mount", ".target")


def unit_name(key: str) -> str:
    """Return the full unit name for a service key ("sshd" -> "sshd.service")."""
    if key.endswith(_UNIT_SUFFIXES):
        return key
    return f"{key}.service"


def timer_name(key: str) -> str:
    """Return the timer unit paired with a service key."""
    stem = unit_name(key).rsplit(".", 1)[0]
    return f"{stem}.timer"


class SystemdScanner(Scanner[ServiceState]):
    """Scanner for system or user scope systemd units.

    Attributes:
        user: True for the user manager (systemctl --user).
        timer_keys: Keys whose activation unit is their timer.
    """

    def __init__(self, user: bool = False, timer_keys: Collection[str] = ()) -> None:
        self.user = user
        self.timer_keys = set(timer_keys)
        self.unit_dir: Path = get_systemd_unit_dir(user)

    @property
    def name(self) -> str:
        return "systemctl --user" if self.user else "systemctl"

    def is_available(self) -> bool:
        """Check if systemctl is available."""
        return command_exists("systemctl")

    def _systemctl(self) -> list[str]:
        return ["systemctl", "--user"] if self.user else ["systemctl"]

    def _show(self, unit: str) -> dict[str, str]:
        result = run_command(
            [*self._systemctl(), "show", unit, "-p", "LoadState", "-p", "UnitFileState", "-p", "ActiveState"]
        )
        if not result.success:
            msg = f"systemctl show {unit} failed: {result.stderr.strip()}"
            raise RuntimeError(msg)
        properties: dict[str, str] = {}
        for line in result.stdout.splitlines():
            name, sep, value = line.partition("=")
            if sep:
                properties[name.strip()] = value.strip()
        return properties

    def _read_owned(self, filename: str) -> str | None:
        path = self.unit_dir / filename
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot read unit file %s: %s", path, e)
            return None

    def activation_unit(self, key: str) -> str:
        """Return the unit that gets enabled and started for key."""
        timer = timer_name(key)
        if key in self.timer_keys or (self.unit_dir / timer).exists():
            return timer
        return unit_name(key)

    def scan(self, keys: Collection[str] = ()) -> dict[str, ServiceState]:
        """Query the given units.

        Raises:
            RuntimeError: If systemctl show fails.
        """
        states: dict[str, ServiceState] = {}
        for key in sorted(set(keys)):
            unit = unit_name(key)
            main = self._show(unit)
            if main.get("LoadState", "not-found") == "not-found":
                states[key] = ServiceState(name=key, exists=False)
                continue

            activation = self.activation_unit(key)
            props = main if activation == unit else self._show(activation)
            file_state = props.get("UnitFileState", "")
            states[key] = ServiceState(
                name=key,
                exists=True,
                enabled=file_state in ("enabled", "enabled-runtime", "static"),
                active=props.get("ActiveState", "") in ("active", "activating", "reloading"),
                unit_text=self._read_owned(unit),
                timer_text=self._read_owned(timer_name(key)),
                static=file_state == "static",
            )
        return states
