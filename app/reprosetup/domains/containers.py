"""Podman container domain.

Containers cannot be changed in place: any change to a declaration is
applied by removing the container and creating it again. The image
reference is compared in normalized form so "nginx:1.25" and
"docker.io/library/nginx:1.25" are the same image.
"""

import logging
import shlex
from collections.abc import Collection, Mapping
from typing import Any

from reprosetup.core.errors import ValidationError
from reprosetup.core.state import ManagedRecord, SectionLayout
from reprosetup.domains.base import Domain, RecordExtra
from reprosetup.models.config import ContainerSpec, DesktopConfig
from reprosetup.models.current import ContainerState
from reprosetup.models.plan import Action, PlanEntry
from reprosetup.operators.podman import PodmanOperator
from reprosetup.scanners.podman import PodmanScanner

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY = "docker.io"


def normalize_image(reference: str) -> str:
    """Expand an image reference to registry/namespace/name:tag form.

    Digest references get their registry and namespace expanded but no
    default tag: "nginx@sha256:..." is "docker.io/library/nginx@sha256:...".
    """
    name, at, digest = reference.partition("@")
    if not at and ":" not in name.rsplit("/", 1)[-1]:
        name += ":latest"
    parts = name.split("/")
    if len(parts) == 1:
        parts = [DEFAULT_REGISTRY, "library", *parts]
    elif "." not in parts[0] and ":" not in parts[0] and parts[0] != "localhost":
        parts = [DEFAULT_REGISTRY, *parts]
    return "/".join(parts) + at + digest


class ContainerDomain(Domain):
    """Rootless Podman containers.

    Attributes:
        force_recreate: Recreate every existing declared container.
        no_recreate: Never recreate existing declared containers.
    """

    selector = "containers"
    state_file = "containers"
    layout = SectionLayout("containers", hash_field="config_hash")
    mutable_in_place = False

    def __init__(
        self,
        force_recreate: bool = False,
        no_recreate: bool = False,
        scanner: PodmanScanner | None = None,
        operator: PodmanOperator | None = None,
    ) -> None:
        self.force_recreate = force_recreate
        self.no_recreate = no_recreate
        self.scanner = scanner if scanner is not None else PodmanScanner()
        self.operator = operator if operator is not None else PodmanOperator()

    @property
    def name(self) -> str:
        return "containers"

    def declared(self, config: DesktopConfig) -> dict[str, ContainerSpec]:
        return dict(config.containers)

    def snapshot(
        self, declared: Mapping[str, Any], prior_keys: Collection[str]
    ) -> dict[str, ContainerState]:
        return self.scanner.snapshot()

    def matches(self, declared: ContainerSpec, current: ContainerState) -> bool:
        return normalize_image(declared.image) == normalize_image(current.image)

    def override(self, key: str, declared: Any, current: Any) -> Action | None:
        if self.force_recreate:
            return Action.RECREATE
        if self.no_recreate:
            return Action.SKIP
        return None

    def confirmation_prompt(self, entry: PlanEntry) -> str | None:
        if entry.action == Action.RECREATE:
            return f"Recreate container {entry.key} ({entry.reason})?"
        return None

    def validate(self, key: str, declared: Any) -> None:
        try:
            shlex.split(declared.raw_flags)
        except ValueError as e:
            raise ValidationError(key, f"cannot parse raw_flags: {e}") from e

    def create(self, key: str, declared: Any) -> RecordExtra:
        """Pull, create and optionally start or register a container."""
        spec: ContainerSpec = declared
        if spec.autostart and spec.start_after_creation:
            logger.warning(
                "Container %s: autostart and start_after_creation are both set, "
                "autostart takes precedence",
                key,
            )

        self.operator.pull(spec.image)
        self.operator.create(key, spec.image, spec.raw_flags)
        if spec.autostart:
            self.operator.write_quadlet(key, spec.image, spec.raw_flags)
        else:
            self.operator.remove_quadlet(key)
            if spec.start_after_creation:
                self.operator.start(key)

        image_hash = self.operator.image_id(spec.image)
        return {"image_hash": image_hash} if image_hash else None

    def recreate(self, key: str, declared: Any, current: Any) -> RecordExtra:
        self.operator.remove(key)
        return self.create(key, declared)

    def delete(self, key: str, current: Any, record: ManagedRecord | None) -> None:
        if current is not None:
            self.operator.remove(key)
        self.operator.remove_quadlet(key)

    def adopt(self, config: DesktopConfig, key: str, current: Any) -> ContainerSpec:
        spec = ContainerSpec(image=current.image)
        config.containers[key] = spec
        return spec
