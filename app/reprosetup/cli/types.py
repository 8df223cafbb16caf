"""Shared option types for CLI commands.

Annotated typer options used by more than one command module.
"""

from pathlib import Path
from typing import Annotated

import typer

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="Path to the configuration file (default: ~/.config/reprosetup/config.toml).",
    ),
]

OnlyOption = Annotated[
    list[str] | None,
    typer.Option(
        "--only",
        help="Limit the run to a domain (repeatable): hostname, packages, flatpak, "
        "services, groups, users, containers, vpn, dotfiles, commands.",
    ),
]

ForceRecreateOption = Annotated[
    bool,
    typer.Option(
        "--force-recreate",
        help="Recreate every existing declared container.",
    ),
]

NoRecreateOption = Annotated[
    bool,
    typer.Option(
        "--no-recreate",
        help="Never recreate existing containers, even when their declaration changed.",
    ),
]
