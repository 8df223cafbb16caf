"""Static hostname step."""

from reprosetup.models.plan import Action, Outcome, OutcomeStatus
from reprosetup.utils.formatting import print_warning
from reprosetup.utils.shell import as_root, run_checked, run_command


def current_hostname() -> str | None:
    """Return the static hostname, or None if hostnamectl is unusable."""
    try:
        result = run_command(["hostnamectl", "--static"])
    except FileNotFoundError:
        return None
    return result.stdout.strip() if result.success else None


def apply_hostname(hostname: str) -> list[Outcome]:
    """Set the static hostname if it differs.

    Raises:
        ApplyError: If hostnamectl set-hostname fails.
    """
    if current_hostname() == hostname:
        return []
    run_checked(as_root(["hostnamectl", "set-hostname", hostname]), f"Setting hostname to {hostname}")
    print_warning("You may need to reboot for the hostname change to take full effect.")
    return [Outcome("hostname", hostname, Action.UPDATE, OutcomeStatus.APPLIED)]
