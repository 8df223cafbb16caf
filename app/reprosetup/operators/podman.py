"""Podman operator: image pulls, container lifecycle and Quadlet units."""

import logging
import shlex
from pathlib import Path

from reprosetup.core.errors import ApplyError
from reprosetup.core.paths import get_quadlet_dir
from reprosetup.core.quadlet import render_quadlet
from reprosetup.utils.shell import command_exists, run_checked, run_command

logger = logging.getLogger(__name__)


class PodmanOperator:
    """Drives rootless podman.

    Attributes:
        quadlet_dir: Directory Quadlet units are written to.
    """

    def __init__(self, quadlet_dir: Path | None = None) -> None:
        self.quadlet_dir = quadlet_dir or get_quadlet_dir()

    def is_available(self) -> bool:
        """Check if podman is available."""
        return command_exists("podman")

    def pull(self, image: str) -> None:
        run_checked(["podman", "pull", image], f"Pulling image {image}")

    def create(self, name: str, image: str, raw_flags: str = "") -> None:
        """Create (but do not start) a container.

        Raises:
            ApplyError: If podman create fails.
            ValueError: If raw_flags has unbalanced quotes.
        """
        args = ["podman", "create", f"--name={name}", *shlex.split(raw_flags), image]
        run_checked(args, f"Creating container {name}")

    def start(self, name: str) -> None:
        run_checked(["podman", "start", name], f"Starting container {name}")

    def remove(self, name: str) -> None:
        run_checked(["podman", "rm", "--force", name], f"Removing container {name}")

    def image_id(self, image: str) -> str | None:
        """Return the local ID of an image, or None if unknown."""
        result = run_command(["podman", "image", "inspect", "--format", "{{.Id}}", image])
        if not result.success:
            logger.debug("podman image inspect %s failed: %s", image, result.stderr.strip())
            return None
        return result.stdout.strip() or None

    def quadlet_path(self, name: str) -> Path:
        return self.quadlet_dir / f"{name}.container"

    def write_quadlet(self, name: str, image: str, raw_flags: str) -> Path:
        """Write the Quadlet unit for a container and reload systemd.

        Raises:
            ApplyError: If the unit cannot be written or systemd reload fails.
        """
        path = self.quadlet_path(name)
        content = render_quadlet(name, image, raw_flags)
        logger.info("Writing Quadlet unit %s", path)
        try:
            self.quadlet_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ApplyError(f"Writing Quadlet unit for {name} ({e})", ["write", str(path)], 1) from e
        self.daemon_reload()
        return path

    def remove_quadlet(self, name: str) -> bool:
        """Remove the Quadlet unit of a container if present.

        Returns:
            True if a unit was removed.

        Raises:
            ApplyError: If the unit cannot be removed or systemd reload fails.
        """
        path = self.quadlet_path(name)
        if not path.exists():
            return False
        logger.info("Removing Quadlet unit %s", path)
        try:
            path.unlink()
        except OSError as e:
            raise ApplyError(f"Removing Quadlet unit for {name} ({e})", ["rm", str(path)], 1) from e
        self.daemon_reload()
        return True

    def daemon_reload(self) -> None:
        run_checked(["systemctl", "--user", "daemon-reload"], "Reloading user systemd units")
