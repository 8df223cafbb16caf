"""Observed (current) state of resources on the live system.

Snapshot providers normalize their raw command output into these frozen
dataclasses. Unlike declared descriptors they are fully populated; every
one carries an ``exists`` flag.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InstalledPackage:
    """A distribution package or Flatpak app found on the system.

    Attributes:
        name: Package name or Flatpak application ID.
        version: Installed version, when the provider reports one.
        exists: Whether the package is installed.
    """

    name: str
    version: str | None = None
    exists: bool = True

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class ServiceState:
    """Observed state of a systemd unit.

    Attributes:
        name: Unit name including suffix (e.g. "syncthing.service").
        exists: Whether systemd knows the unit.
        enabled: Whether the activation unit (timer if present) is enabled.
        active: Whether the activation unit is active.
        unit_text: Content of the reprosetup-owned unit file, if any.
        timer_text: Content of the reprosetup-owned timer file, if any.
        static: Whether the activation unit is static (no [Install] section)
            and so can be neither enabled nor disabled.
    """

    name: str
    exists: bool
    enabled: bool = False
    active: bool = False
    unit_text: str | None = None
    timer_text: str | None = None
    static: bool = False


@dataclass(frozen=True, slots=True)
class ContainerState:
    """Observed state of a Podman container.

    Attributes:
        name: Container name.
        image: Image reference the container was created from.
        image_id: ID of that image.
        running: Whether the container is running.
        exists: Whether the container exists.
    """

    name: str
    image: str
    image_id: str | None = None
    running: bool = False
    exists: bool = True


@dataclass(frozen=True, slots=True)
class UserState:
    """Observed passwd entry plus supplementary groups."""

    name: str
    uid: int
    gid: int
    groups: tuple[str, ...]
    home: str
    shell: str
    comment: str
    exists: bool = True


@dataclass(frozen=True, slots=True)
class GroupState:
    """Observed group entry."""

    name: str
    gid: int
    members: tuple[str, ...]
    exists: bool = True
