"""Main CLI application entry point.

Defines the Typer application, the global options and the subcommands.
"""

from typing import Annotated

import typer

from reprosetup import __version__
from reprosetup.cli.commands import apply, init, plan, state
from reprosetup.utils.formatting import setup_logging

app = typer.Typer(
    name="reprosetup",
    help="Reproducible desktop setup from a declarative configuration.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

for command in (apply, plan, state, init):
    app.add_typer(command.app, name=command.__name__.rsplit(".", 1)[-1])


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"reprosetup version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option("--version", "-V", callback=_show_version, is_eager=True, help="Show version and exit."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log every command and decision."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only print errors and confirmation prompts."),
    ] = False,
) -> None:
    """reprosetup - Reproducible desktop setup.

    Describe packages, Flatpak applications, services, users, groups,
    containers, VPN and dotfiles in one TOML file and converge the
    machine to it, as often as you like.
    """
    ctx.obj = {"verbose": verbose, "quiet": quiet}
    setup_logging(verbose=verbose, quiet=quiet)


if __name__ == "__main__":
    app()
