"""State command implementation.

Lists the Managed Records, i.e. everything reprosetup created or adopted
and will therefore offer to remove once it is no longer declared.
"""

import json
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.table import Table

from reprosetup.core.runner import STATE_LAYOUTS
from reprosetup.core.state import StateStore
from reprosetup.utils.formatting import console, print_error, print_info

app = typer.Typer(
    help="Show the resources managed by reprosetup.",
    invoke_without_command=True,
)


def _collect(state_dir: Path | None, files: list[str]) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for state_file in files:
        store = StateStore.load(state_file, state_dir)
        for layout in STATE_LAYOUTS[state_file]:
            for key, record in store.section(layout).records().items():
                rows.append(
                    {
                        "file": state_file,
                        "section": layout.name,
                        "key": key,
                        "fingerprint": record.fingerprint,
                        "updated": record.last_updated,
                        **record.extra,
                    }
                )
    return rows


def _create_state_table(rows: list[dict[str, Any]]) -> Table:
    table = Table(
        title="Managed Resources",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Section", no_wrap=True)
    table.add_column("Key", no_wrap=True)
    table.add_column("Fingerprint", width=14)
    table.add_column("Updated")

    for row in rows:
        table.add_row(
            row["section"],
            row["key"],
            f"[muted]{row['fingerprint'][:12]}[/muted]",
            row["updated"],
        )
    return table


@app.callback(invoke_without_command=True)
def show_state(
    ctx: typer.Context,
    domain: Annotated[
        str | None,
        typer.Option(
            "--domain",
            "-d",
            help=f"State file to show: {', '.join(STATE_LAYOUTS)}.",
        ),
    ] = None,
    state_dir: Annotated[
        Path | None,
        typer.Option(
            "--state-dir",
            help="Read state from this directory instead of the default.",
        ),
    ] = None,
    output_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the records as JSON.",
        ),
    ] = False,
) -> None:
    """Show the resources managed by reprosetup.

    Examples:
        reprosetup state
        reprosetup state --domain containers --json
    """
    if ctx.invoked_subcommand is not None:
        return

    if domain is not None and domain not in STATE_LAYOUTS:
        print_error(f"Unknown domain '{domain}' (choose from {', '.join(STATE_LAYOUTS)})")
        raise typer.Exit(code=2)

    files = [domain] if domain else list(STATE_LAYOUTS)
    rows = _collect(state_dir, files)

    if output_json:
        console.print_json(json.dumps(rows))
        return
    if not rows:
        print_info("No managed resources yet.")
        return
    console.print(_create_state_table(rows))
