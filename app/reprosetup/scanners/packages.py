"""Distribution package scanners.

Only user-installed packages are reported; packages pulled in as
dependencies are not resources the user declared and are never offered
for adoption or removal.
"""

from collections.abc import Collection

from reprosetup.models.current import InstalledPackage
from reprosetup.scanners.base import Scanner
from reprosetup.utils.shell import command_exists, run_command


class DnfScanner(Scanner[InstalledPackage]):
    """Scanner for user-installed RPM packages on Fedora."""

    @property
    def name(self) -> str:
        return "dnf"

    def is_available(self) -> bool:
        """Check if dnf is available."""
        return command_exists("dnf")

    def scan(self, keys: Collection[str] = ()) -> dict[str, InstalledPackage]:
        """Query user-installed packages.

        Raises:
            RuntimeError: If dnf repoquery fails.
        """
        result = run_command(
            [
                "dnf",
                "repoquery",
                "--userinstalled",
                "--queryformat",
                "%{name}\t%{version}-%{release}\n",
            ]
        )
        if not result.success:
            msg = f"dnf repoquery failed: {result.stderr.strip()}"
            raise RuntimeError(msg)
        return _parse_name_version(result.stdout)


class AptScanner(Scanner[InstalledPackage]):
    """Scanner for manually installed Debian packages."""

    @property
    def name(self) -> str:
        return "apt"

    def is_available(self) -> bool:
        """Check if apt-mark and dpkg-query are available."""
        return command_exists("apt-mark") and command_exists("dpkg-query")

    def scan(self, keys: Collection[str] = ()) -> dict[str, InstalledPackage]:
        """Query manually installed packages with their versions.

        Raises:
            RuntimeError: If apt-mark or dpkg-query fails.
        """
        manual = run_command(["apt-mark", "showmanual"])
        if not manual.success:
            msg = f"apt-mark showmanual failed: {manual.stderr.strip()}"
            raise RuntimeError(msg)
        manual_names = {line.strip() for line in manual.stdout.splitlines() if line.strip()}

        installed = run_command(
            ["dpkg-query", "-W", "-f=${Package}\t${Version}\t${db:Status-Abbrev}\n"]
        )
        if not installed.success:
            msg = f"dpkg-query failed: {installed.stderr.strip()}"
            raise RuntimeError(msg)

        packages: dict[str, InstalledPackage] = {}
        for line in installed.stdout.splitlines():
            parts = line.split("\t")
            if len(parts) < 3:
                continue
            name, version, status = (p.strip() for p in parts[:3])
            # "ii" = desired install, currently installed
            if name in manual_names and status.startswith("ii"):
                packages[name] = InstalledPackage(name=name, version=version or None)
        return packages


def _parse_name_version(output: str) -> dict[str, InstalledPackage]:
    packages: dict[str, InstalledPackage] = {}
    for line in output.splitlines():
        parts = line.strip().split("\t")
        name = parts[0].strip() if parts else ""
        if not name:
            continue
        version = parts[1].strip() if len(parts) > 1 else None
        packages[name] = InstalledPackage(name=name, version=version or None)
    return packages
