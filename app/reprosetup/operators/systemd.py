"""systemd operator: unit files and enable/start state."""

import logging
from pathlib import Path

from reprosetup.core.errors import ApplyError
from reprosetup.core.paths import get_systemd_unit_dir
from reprosetup.utils.shell import as_root, run_checked, write_root_file

logger = logging.getLogger(__name__)


class SystemctlOperator:
    """Drives systemctl for one scope.

    System scope commands run through sudo; user scope commands talk to
    the calling user's manager and write under ~/.config/systemd/user.

    Attributes:
        user: True for the user manager.
        unit_dir: Directory unit files are written to.
    """

    def __init__(self, user: bool = False, unit_dir: Path | None = None) -> None:
        self.user = user
        self.unit_dir = unit_dir or get_systemd_unit_dir(user)

    def _systemctl(self, *args: str) -> list[str]:
        if self.user:
            return ["systemctl", "--user", *args]
        return as_root(["systemctl", *args])

    def enable(self, unit: str) -> None:
        run_checked(self._systemctl("enable", unit), f"Enabling {unit}")

    def disable(self, unit: str) -> None:
        run_checked(self._systemctl("disable", unit), f"Disabling {unit}")

    def start(self, unit: str) -> None:
        run_checked(self._systemctl("start", unit), f"Starting {unit}")

    def stop(self, unit: str) -> None:
        run_checked(self._systemctl("stop", unit), f"Stopping {unit}")

    def restart(self, unit: str) -> None:
        run_checked(self._systemctl("restart", unit), f"Restarting {unit}")

    def disable_now(self, unit: str) -> None:
        run_checked(self._systemctl("disable", "--now", unit), f"Disabling and stopping {unit}")

    def daemon_reload(self) -> None:
        run_checked(self._systemctl("daemon-reload"), "Reloading systemd units")

    def write_unit(self, filename: str, content: str) -> None:
        """Write a unit file into the scope's unit directory.

        Raises:
            ApplyError: If the file cannot be written.
        """
        path = self.unit_dir / filename
        if not self.user:
            write_root_file(str(path), content, f"Writing unit {filename}")
            return
        logger.info("Writing unit %s", path)
        try:
            self.unit_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ApplyError(f"Writing unit {filename} ({e})", ["write", str(path)], 1) from e

    def remove_unit(self, filename: str) -> None:
        """Remove a unit file written by reprosetup, if present.

        Raises:
            ApplyError: If the file cannot be removed.
        """
        path = self.unit_dir / filename
        if not path.exists():
            return
        if not self.user:
            run_checked(as_root(["rm", "-f", str(path)]), f"Removing unit {filename}")
            return
        logger.info("Removing unit %s", path)
        try:
            path.unlink()
        except OSError as e:
            raise ApplyError(f"Removing unit {filename} ({e})", ["rm", str(path)], 1) from e
