"""Apply command implementation.

Reconciles the machine against the configuration, domain by domain.
"""

from typing import Annotated

import typer

from reprosetup.cli.display import create_results_table, format_error, print_results_summary
from reprosetup.cli.types import ConfigOption, ForceRecreateOption, NoRecreateOption, OnlyOption
from reprosetup.core.config import ConfigSource
from reprosetup.core.confirm import ConfirmationPolicy, ConfirmMode
from reprosetup.core.errors import ApplyError, ConfigError
from reprosetup.core.runner import RunOptions, Runner
from reprosetup.utils.formatting import console, print_error, print_success

app = typer.Typer(
    help="Reconcile the system with the configuration.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def apply_config(
    ctx: typer.Context,
    config: ConfigOption = None,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Answer yes to every confirmation prompt.",
        ),
    ] = False,
    no: Annotated[
        bool,
        typer.Option(
            "--no",
            help="Answer no to every confirmation prompt.",
        ),
    ] = False,
    only: OnlyOption = None,
    force_recreate: ForceRecreateOption = False,
    no_recreate: NoRecreateOption = False,
) -> None:
    """Reconcile the system with the configuration.

    Missing resources are created and changed declarations are applied
    right away. Removing resources reprosetup manages but which are no
    longer declared, and adopting or removing resources that were never
    declared, always goes through a confirmation prompt.

    Examples:
        reprosetup apply                      # Interactive run
        reprosetup apply --yes                # Accept every prompt
        reprosetup apply --no                 # Only create and update
        reprosetup apply --only containers --no-recreate
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        mode = ConfirmMode.from_flags(yes, no)
        options = RunOptions(
            only=tuple(only or ()),
            force_recreate=force_recreate,
            no_recreate=no_recreate,
        )
        options.validate()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e

    try:
        source = ConfigSource.load(config)
    except ConfigError as e:
        print_error(format_error(e))
        raise typer.Exit(code=1) from e

    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    runner = Runner(source, ConfirmationPolicy(mode), options)
    try:
        outcomes = runner.run()
    except (ConfigError, ApplyError) as e:
        print_error(format_error(e))
        raise typer.Exit(code=1) from e

    if not outcomes:
        print_success("Everything is up to date.")
        return
    if not quiet:
        console.print()
        console.print(create_results_table(outcomes))
    print_results_summary(outcomes)
