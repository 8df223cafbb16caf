"""Shared Rich display functions for plans and outcomes.

Provides reusable table builders and summary printers used by the apply
and plan commands.
"""

from rich.table import Table

from reprosetup.models.plan import Action, Outcome, OutcomeStatus, Plan
from reprosetup.utils.formatting import console, print_success

ACTION_LABELS: dict[Action, str] = {
    Action.CREATE: "+create",
    Action.UPDATE: "~update",
    Action.RECREATE: "!recreate",
    Action.DELETE: "-delete",
    Action.ADOPT: "?adopt",
    Action.SKIP: "=skip",
}

STATUS_LABELS: dict[OutcomeStatus, str] = {
    OutcomeStatus.APPLIED: "[success]OK[/success]",
    OutcomeStatus.ADOPTED: "[success]ADOPTED[/success]",
    OutcomeStatus.DELETED: "[success]DELETED[/success]",
    OutcomeStatus.DECLINED: "[muted]SKIPPED[/muted]",
    OutcomeStatus.FAILED: "[error]FAIL[/error]",
}


def format_action(action: Action) -> str:
    """Return the styled label of an action."""
    style = f"action.{action.value}"
    return f"[{style}]{ACTION_LABELS[action]}[/{style}]"


def format_error(error: BaseException) -> str:
    """Render an exception together with its cause chain.

    Args:
        error: The exception to render.

    Returns:
        "message (caused by: cause (caused by: ...))".
    """
    message = str(error)
    cause = error.__cause__
    while cause is not None:
        message += f" (caused by: {cause})"
        cause = cause.__cause__
    return message


def create_plan_table(plans: list[Plan]) -> Table:
    """Create a Rich table of every pending entry of the plans.

    SKIP entries are left out; they are counted in the summary instead.

    Args:
        plans: Plans to display.

    Returns:
        Rich Table configured for plan display.
    """
    table = Table(
        title="Planned Actions",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Domain", no_wrap=True)
    table.add_column("Action", width=10)
    table.add_column("Key", no_wrap=True)
    table.add_column("Reason")

    for plan in plans:
        for entry in plan.pending:
            table.add_row(
                plan.domain,
                format_action(entry.action),
                entry.key,
                f"[muted]{entry.reason}[/muted]",
            )

    return table


def create_results_table(outcomes: list[Outcome]) -> Table:
    """Create a Rich table of run outcomes.

    Args:
        outcomes: Outcomes to display.

    Returns:
        Rich Table configured for results display.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=8, justify="center")
    table.add_column("Domain", no_wrap=True)
    table.add_column("Action", width=10)
    table.add_column("Key", no_wrap=True)
    table.add_column("Message")

    for outcome in outcomes:
        table.add_row(
            STATUS_LABELS[outcome.status],
            outcome.domain,
            format_action(outcome.action),
            outcome.key,
            f"[muted]{outcome.message or ''}[/muted]",
        )

    return table


def print_plan_summary(plans: list[Plan]) -> None:
    """Print the number of entries per action across all plans."""
    counts = {action: 0 for action in Action}
    for plan in plans:
        for entry in plan.entries:
            counts[entry.action] += 1

    parts = [
        f"[action.{action.value}]{counts[action]} {action.value}[/]"
        for action in Action
        if counts[action] and action != Action.SKIP
    ]
    if parts:
        console.print(f"\nSummary: {', '.join(parts)} ({counts[Action.SKIP]} up to date)")
    else:
        print_success(f"Everything is up to date ({counts[Action.SKIP]} resources checked).")


def print_results_summary(outcomes: list[Outcome]) -> None:
    """Print the number of applied, declined and failed entries."""
    done = sum(
        1
        for o in outcomes
        if o.status in (OutcomeStatus.APPLIED, OutcomeStatus.ADOPTED, OutcomeStatus.DELETED)
    )
    declined = sum(1 for o in outcomes if o.status == OutcomeStatus.DECLINED)
    failed = sum(1 for o in outcomes if o.failed)

    if not failed and not declined:
        print_success(f"All {done} action(s) completed successfully.")
    else:
        console.print(
            f"\n[success]{done} done[/success], [muted]{declined} skipped[/muted], "
            f"[error]{failed} failed validation[/error]"
        )
