"""Confirmation policy for destructive or config-changing actions.

The policy mode is fixed for the whole run. Every resolution is echoed to
the console and logged, so a run made with --yes or --no can be
reconstructed from its output.
"""

import logging
from collections.abc import Callable
from enum import Enum

import typer

from reprosetup.core.errors import ConfigError
from reprosetup.utils.formatting import console

logger = logging.getLogger(__name__)


class ConfirmMode(str, Enum):
    """How pending actions are confirmed.

    Attributes:
        AUTO_YES: Accept every prompt without blocking (--yes).
        AUTO_NO: Decline every prompt without blocking (--no).
        INTERACTIVE: Ask the operator on standard input.
    """

    AUTO_YES = "yes"
    AUTO_NO = "no"
    INTERACTIVE = "interactive"

    @classmethod
    def from_flags(cls, yes: bool, no: bool) -> "ConfirmMode":
        """Resolve the mode from the --yes/--no command line flags.

        Raises:
            ConfigError: If both flags are given.
        """
        if yes and no:
            msg = "--yes and --no are mutually exclusive"
            raise ConfigError(msg)
        if yes:
            return cls.AUTO_YES
        if no:
            return cls.AUTO_NO
        return cls.INTERACTIVE


def _ask(prompt: str) -> bool:
    # No default: empty or unrecognized input repeats the question.
    return typer.confirm(prompt, default=None)  # type: ignore[arg-type]


class ConfirmationPolicy:
    """Resolves prompts to proceed (True) or skip (False).

    Example:
        >>> policy = ConfirmationPolicy(ConfirmMode.AUTO_NO)
        >>> policy.resolve("Remove container web?")
        False
    """

    def __init__(self, mode: ConfirmMode, ask: Callable[[str], bool] | None = None) -> None:
        """Initialize the policy.

        Args:
            mode: Confirmation mode for the whole run.
            ask: Interactive question function, defaults to a y/n prompt
                 that loops until it gets y, yes, n or no.
        """
        self.mode = mode
        self._ask = ask or _ask

    def resolve(self, prompt: str) -> bool:
        """Resolve a prompt according to the mode.

        Args:
            prompt: Question shown to the operator.

        Returns:
            True to proceed, False to skip.
        """
        if self.mode == ConfirmMode.AUTO_YES:
            answer = True
            console.print(f"{prompt} [muted](auto)[/] [success]yes[/]")
        elif self.mode == ConfirmMode.AUTO_NO:
            answer = False
            console.print(f"{prompt} [muted](auto)[/] [warning]no[/]")
        else:
            answer = self._ask(prompt)
            console.print(f"[muted]-> {'yes' if answer else 'no'}[/]")

        logger.info("Confirmation: %s -> %s (%s)", prompt, "yes" if answer else "no", self.mode.value)
        return answer
