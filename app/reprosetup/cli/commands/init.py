"""Init command implementation.

Creates a configuration file from the packages and Flatpak applications
currently installed, and records them as managed.
"""

import socket
from pathlib import Path
from typing import Annotated

import typer

from reprosetup.core.config import save_config
from reprosetup.core.distro import detect_distro
from reprosetup.core.errors import ConfigError, SnapshotError
from reprosetup.core.fingerprint import fingerprint_model
from reprosetup.core.paths import get_config_path
from reprosetup.core.state import StateStore
from reprosetup.domains.flatpak import FlatpakDomain
from reprosetup.domains.packages import PackageDomain
from reprosetup.models.config import DesktopConfig, FlatpakConfig, PackageSpec, SystemConfig
from reprosetup.utils.formatting import console, print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Create a configuration from the current system.",
    invoke_without_command=True,
)


def _capture(domain: PackageDomain | FlatpakDomain) -> list[str]:
    try:
        return sorted(domain.snapshot({}, ()))
    except SnapshotError as e:
        print_warning(f"Not capturing {domain.name}: {e}")
        return []


def _record(names: list[str], domain: PackageDomain | FlatpakDomain, state_dir: Path | None) -> None:
    section = StateStore.load(domain.state_file, state_dir).section(domain.layout)
    for name in names:
        section.record(name, fingerprint_model(name, PackageSpec()))


@app.callback(invoke_without_command=True)
def init_config(
    ctx: typer.Context,
    path: Annotated[
        Path | None,
        typer.Option(
            "--path",
            "-p",
            help="Where to write the configuration (default: ~/.config/reprosetup/config.toml).",
        ),
    ] = None,
    distro: Annotated[
        str | None,
        typer.Option(
            "--distro",
            help="Distribution family (fedora or debian); detected when omitted.",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing configuration.",
        ),
    ] = False,
    state_dir: Annotated[
        Path | None,
        typer.Option(
            "--state-dir",
            help="Write state to this directory instead of the default.",
        ),
    ] = None,
) -> None:
    """Create a configuration from the current system.

    User-installed packages (without the protected base system) and Flatpak
    applications are written to the configuration and recorded as
    managed, so later removing them from the file offers to uninstall them.

    Examples:
        reprosetup init
        reprosetup init --path ./config.toml --distro fedora
    """
    if ctx.invoked_subcommand is not None:
        return

    output_path = path or get_config_path()
    if output_path.exists() and not force:
        print_error(f"Configuration already exists: {output_path}")
        print_info("Use --force to overwrite or choose another path with --path.")
        raise typer.Exit(code=1)

    family = distro or detect_distro()
    if family not in ("fedora", "debian"):
        print_error("Cannot detect the distribution family; pass --distro fedora or --distro debian.")
        raise typer.Exit(code=2)

    packages_domain = PackageDomain(family)
    flatpak_domain = FlatpakDomain(FlatpakConfig())
    packages = _capture(packages_domain)
    applications = _capture(flatpak_domain)

    config = DesktopConfig(
        distro=family,  # type: ignore[arg-type]
        system=SystemConfig(hostname=socket.gethostname(), packages=packages),
        flatpak=FlatpakConfig(applications=applications),
    )

    try:
        saved_path = save_config(config, output_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    _record(packages, packages_domain, state_dir)
    _record(applications, flatpak_domain, state_dir)

    console.print()
    console.print(f"  Distribution: [info]{family}[/info]")
    console.print(f"  Packages: [bold]{len(packages)}[/bold]")
    console.print(f"  Flatpak applications: [bold]{len(applications)}[/bold]")
    console.print()
    print_success(f"Configuration created: {saved_path}")
