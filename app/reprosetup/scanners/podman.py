"""Podman container scanner."""

import json
from collections.abc import Collection

from reprosetup.models.current import ContainerState
from reprosetup.scanners.base import Scanner
from reprosetup.utils.shell import command_exists, run_command


class PodmanScanner(Scanner[ContainerState]):
    """Scanner for rootless Podman containers.

    Uses ``podman ps --all --format json`` so stopped containers are
    reported as existing too.
    """

    @property
    def name(self) -> str:
        return "podman"

    def is_available(self) -> bool:
        """Check if podman is available."""
        return command_exists("podman")

    def scan(self, keys: Collection[str] = ()) -> dict[str, ContainerState]:
        """List all containers.

        Raises:
            RuntimeError: If podman ps fails.
            ValueError: If the JSON output cannot be parsed.
        """
        result = run_command(["podman", "ps", "--all", "--format", "json"])
        if not result.success:
            msg = f"podman ps failed: {result.stderr.strip()}"
            raise RuntimeError(msg)
        return parse_podman_ps(result.stdout)


def parse_podman_ps(output: str) -> dict[str, ContainerState]:
    """Parse ``podman ps --format json`` output.

    Args:
        output: JSON array printed by podman.

    Returns:
        ContainerState by container name.

    Raises:
        ValueError: If the output is not a JSON array.
    """
    if not output.strip():
        return {}
    data = json.loads(output)
    if not isinstance(data, list):
        msg = "podman ps did not return a JSON array"
        raise ValueError(msg)

    containers: dict[str, ContainerState] = {}
    for item in data:
        names = item.get("Names") or []
        if isinstance(names, str):
            names = [names]
        if not names:
            continue
        name = names[0]
        containers[name] = ContainerState(
            name=name,
            image=item.get("Image", ""),
            image_id=item.get("ImageID") or None,
            running=str(item.get("State", "")).lower() == "running",
        )
    return containers
