"""Configuration models for the declarative desktop description.

This module defines the Pydantic models representing config.toml. A
minimal file looks like::

    distro = "fedora"

    [system]
    hostname = "workstation"
    packages = ["vim", "htop", "podman"]

    [flatpak]
    applications = ["org.mozilla.firefox"]

    [services.user.syncthing]
    enabled = true
    started = true

    [containers.web]
    image = "docker.io/library/nginx:1.25"
    raw_flags = "-p 8080:80 -v ~/www:/usr/share/nginx/html:Z"
    autostart = true

    [users.alice]
    groups = ["wheel"]
    shell = "/bin/bash"

Fields typed ``X | None`` are optional attributes: leaving them out means
"do not manage this attribute".
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

DistroType = Literal["fedora", "debian"]


def _find_duplicates(items: list[str]) -> set[str]:
    seen: set[str] = set()
    duplicates: set[str] = set()
    for item in items:
        if item in seen:
            duplicates.add(item)
        seen.add(item)
    return duplicates


class SystemConfig(BaseModel):
    """System section: hostname and distribution packages.

    Attributes:
        hostname: Machine hostname (informational).
        packages: Distribution packages that should be installed.
    """

    model_config = ConfigDict(extra="forbid")

    hostname: Annotated[str | None, Field(description="Machine hostname")] = None
    packages: Annotated[
        list[str],
        Field(default_factory=list, description="Distribution packages to install"),
    ]

    @model_validator(mode="after")
    def validate_no_duplicates(self) -> "SystemConfig":
        """Validate that every package is listed once."""
        duplicates = _find_duplicates(self.packages)
        if duplicates:
            msg = f"Packages listed more than once: {sorted(duplicates)}"
            raise ValueError(msg)
        return self


class FlatpakConfig(BaseModel):
    """Flatpak section: remote and application IDs.

    Attributes:
        remote: Remote applications are installed from.
        remote_url: Repository file used to add the remote when missing.
        applications: Application IDs that should be installed.
    """

    model_config = ConfigDict(extra="forbid")

    remote: str = "flathub"
    remote_url: str = "https://flathub.org/repo/flathub.flatpakrepo"
    applications: Annotated[
        list[str],
        Field(default_factory=list, description="Flatpak application IDs"),
    ]

    @model_validator(mode="after")
    def validate_no_duplicates(self) -> "FlatpakConfig":
        """Validate that every application is listed once."""
        duplicates = _find_duplicates(self.applications)
        if duplicates:
            msg = f"Flatpak applications listed more than once: {sorted(duplicates)}"
            raise ValueError(msg)
        return self


class PackageSpec(BaseModel):
    """Declared descriptor of a package or Flatpak app: presence only."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class ServiceSpec(BaseModel):
    """Declared state of a systemd unit.

    Attributes:
        enabled: Whether the unit should be enabled.
        started: Whether the unit should be running.
        unit: Optional unit file content written by reprosetup.
        timer: Optional timer unit content; when set, the timer is the
            unit that gets enabled and started.
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    started: bool = True
    unit: Annotated[str | None, Field(description="Custom unit file content")] = None
    timer: Annotated[str | None, Field(description="Custom timer unit content")] = None


class ServicesConfig(BaseModel):
    """Services section, split by systemd scope."""

    model_config = ConfigDict(extra="forbid")

    system: Annotated[dict[str, ServiceSpec], Field(default_factory=dict)]
    user: Annotated[dict[str, ServiceSpec], Field(default_factory=dict)]


class SetupCommand(BaseModel):
    """A described shell command."""

    model_config = ConfigDict(extra="forbid")

    description: str
    command: str


class PodmanConfig(BaseModel):
    """Podman section: host setup done before containers are reconciled.

    Attributes:
        pre_container_setup: Shell commands run in order.
        registries: Unqualified-image search registries written to
            ~/.config/containers/registries.conf. None uses the built-in list.
    """

    model_config = ConfigDict(extra="forbid")

    pre_container_setup: Annotated[list[SetupCommand], Field(default_factory=list)]
    registries: list[str] | None = None


class ContainerSpec(BaseModel):
    """Declared descriptor of a Podman container.

    Attributes:
        image: Image reference.
        raw_flags: Extra ``podman create`` flags as a shell-style string.
        start_after_creation: Start the container right after creating it.
        autostart: Generate a Quadlet unit so systemd starts the container.
    """

    model_config = ConfigDict(extra="forbid")

    image: Annotated[str, Field(min_length=1, description="Container image")]
    raw_flags: str = ""
    start_after_creation: bool = False
    autostart: bool = False


class AccountsConfig(BaseModel):
    """Validation settings for users and groups.

    Attributes:
        min_id: Lowest UID/GID reprosetup may assign.
        max_id: Highest UID/GID reprosetup may assign.
        shells_file: File listing valid login shells.
    """

    model_config = ConfigDict(extra="forbid")

    min_id: int = 1000
    max_id: int = 60000
    shells_file: str = "/etc/shells"

    @model_validator(mode="after")
    def validate_range(self) -> "AccountsConfig":
        """Validate that the id range is not empty."""
        if self.min_id > self.max_id:
            msg = f"accounts.min_id ({self.min_id}) is greater than max_id ({self.max_id})"
            raise ValueError(msg)
        return self


class UserSpec(BaseModel):
    """Declared descriptor of a local user account."""

    model_config = ConfigDict(extra="forbid")

    uid: int | None = None
    gid: int | None = None
    groups: list[str] | None = None
    home: str | None = None
    shell: str | None = None
    comment: str | None = None
    create_home: bool = True
    system: bool = False


class GroupSpec(BaseModel):
    """Declared descriptor of a local group."""

    model_config = ConfigDict(extra="forbid")

    gid: int | None = None
    members: list[str] | None = None
    system: bool = False


class DotfilesConfig(BaseModel):
    """Dotfiles section.

    Attributes:
        source_dir: Directory holding .bashrc and .config/ to install.
        bashrc: Install <source_dir>/.bashrc to ~/.bashrc.
        config_dirs: Install each <source_dir>/.config/<name> directory.
    """

    model_config = ConfigDict(extra="forbid")

    source_dir: str = "."
    bashrc: bool = False
    config_dirs: bool = False


class WireguardConfig(BaseModel):
    """WireGuard section: NetworkManager import of one conf file."""

    model_config = ConfigDict(extra="forbid")

    conf_path: Annotated[str, Field(min_length=1)]


class CustomCommandsConfig(BaseModel):
    """Custom shell commands run at the end of every run."""

    model_config = ConfigDict(extra="forbid")

    commands: Annotated[list[str], Field(default_factory=list)]


class DesktopConfig(BaseModel):
    """Complete declarative description of a desktop machine."""

    model_config = ConfigDict(extra="forbid")

    distro: Annotated[DistroType, Field(description="Target distribution family")]
    system: Annotated[SystemConfig, Field(default_factory=SystemConfig)]
    flatpak: Annotated[FlatpakConfig, Field(default_factory=FlatpakConfig)]
    services: Annotated[ServicesConfig, Field(default_factory=ServicesConfig)]
    podman: Annotated[PodmanConfig, Field(default_factory=PodmanConfig)]
    containers: Annotated[dict[str, ContainerSpec], Field(default_factory=dict)]
    accounts: Annotated[AccountsConfig, Field(default_factory=AccountsConfig)]
    groups: Annotated[dict[str, GroupSpec], Field(default_factory=dict)]
    users: Annotated[dict[str, UserSpec], Field(default_factory=dict)]
    dotfiles: DotfilesConfig | None = None
    wireguard: WireguardConfig | None = None
    custom_commands: CustomCommandsConfig | None = None
