"""Flatpak application scanner.

Scans installed Flatpak applications using the flatpak CLI.
"""

from collections.abc import Collection

from reprosetup.models.current import InstalledPackage
from reprosetup.scanners.base import Scanner
from reprosetup.utils.shell import command_exists, run_command


class FlatpakScanner(Scanner[InstalledPackage]):
    """Scanner for Flatpak applications.

    Uses `flatpak list` to enumerate installed applications. Runtimes are
    dependencies and are not reported.
    """

    @property
    def name(self) -> str:
        return "flatpak"

    def is_available(self) -> bool:
        """Check if flatpak CLI is available."""
        return command_exists("flatpak")

    def scan(self, keys: Collection[str] = ()) -> dict[str, InstalledPackage]:
        """Scan all installed Flatpak applications.

        Raises:
            RuntimeError: If flatpak command fails.
        """
        result = run_command(["flatpak", "list", "--app", "--columns=application,version"])
        if not result.success:
            msg = f"flatpak list failed: {result.stderr.strip()}"
            raise RuntimeError(msg)

        apps: dict[str, InstalledPackage] = {}
        for line in result.stdout.strip().split("\n"):
            parts = line.split("\t")
            app_id = parts[0].strip()
            if not app_id:
                continue
            version = parts[1].strip() if len(parts) > 1 else ""
            apps[app_id] = InstalledPackage(name=app_id, version=version or None)
        return apps
