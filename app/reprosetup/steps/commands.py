"""Shell command steps: Podman pre-container setup and custom commands.

Commands run through ``sh -c`` so they may use variables, pipes and
redirections. They run on every apply, in order, and the first failure
stops the run.
"""

import logging

from reprosetup.models.config import CustomCommandsConfig, SetupCommand
from reprosetup.models.plan import Action, Outcome, OutcomeStatus
from reprosetup.utils.formatting import print_info
from reprosetup.utils.shell import run_shell

logger = logging.getLogger(__name__)


def run_setup_commands(commands: list[SetupCommand]) -> list[Outcome]:
    """Run the Podman pre-container setup commands.

    Raises:
        ApplyError: If a command fails.
    """
    outcomes = []
    for setup in commands:
        print_info(setup.description)
        run_shell(setup.command, setup.description)
        outcomes.append(Outcome("podman setup", setup.description, Action.UPDATE, OutcomeStatus.APPLIED))
    return outcomes


def run_custom_commands(config: CustomCommandsConfig) -> list[Outcome]:
    """Run the custom commands.

    Raises:
        ApplyError: If a command fails.
    """
    outcomes = []
    total = len(config.commands)
    for index, command in enumerate(config.commands, start=1):
        description = f"Custom command {index} of {total}"
        print_info(f"{description}: {command}")
        run_shell(command, description)
        outcomes.append(Outcome("commands", command, Action.UPDATE, OutcomeStatus.APPLIED))
    if total:
        logger.info("Ran %d custom commands", total)
    return outcomes
