"""Plan command implementation.

Shows what apply would do without changing anything.
"""

import json
from typing import Annotated

import typer

from reprosetup.cli.display import create_plan_table, format_error, print_plan_summary
from reprosetup.cli.types import ConfigOption, ForceRecreateOption, NoRecreateOption, OnlyOption
from reprosetup.core.config import ConfigSource
from reprosetup.core.confirm import ConfirmationPolicy, ConfirmMode
from reprosetup.core.errors import ConfigError
from reprosetup.core.runner import RunOptions, Runner
from reprosetup.utils.formatting import console, print_error

app = typer.Typer(
    help="Preview the actions apply would take.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def show_plan(
    ctx: typer.Context,
    config: ConfigOption = None,
    only: OnlyOption = None,
    output_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the plan as JSON.",
        ),
    ] = False,
    force_recreate: ForceRecreateOption = False,
    no_recreate: NoRecreateOption = False,
) -> None:
    """Preview the actions apply would take.

    Only the reconciled domains (packages, flatpak, services, groups,
    users, containers) are planned; the linear steps are not previewed.

    Examples:
        reprosetup plan
        reprosetup plan --only packages --json
    """
    if ctx.invoked_subcommand is not None:
        return

    options = RunOptions(
        only=tuple(only or ()),
        force_recreate=force_recreate,
        no_recreate=no_recreate,
    )
    try:
        options.validate()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=2) from e

    try:
        source = ConfigSource.load(config)
    except ConfigError as e:
        print_error(format_error(e))
        raise typer.Exit(code=1) from e

    # Planning never asks; the policy is only there to satisfy the runner
    runner = Runner(source, ConfirmationPolicy(ConfirmMode.AUTO_NO), options)
    plans = runner.plan()

    if output_json:
        console.print_json(json.dumps([plan.to_dict() for plan in plans]))
        return

    if any(not plan.is_converged for plan in plans):
        console.print(create_plan_table(plans))
    print_plan_summary(plans)
