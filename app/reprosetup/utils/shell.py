"""Shell execution utilities.

Queries run with captured output so they can be parsed. Mutating commands
inherit the terminal so their output streams live while they run. Neither
kind has a timeout.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass

from reprosetup.core.errors import ApplyError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of a shell command execution.

    Attributes:
        stdout: Standard output from the command.
        stderr: Standard error from the command.
        returncode: Exit code of the command.
    """

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Check if command executed successfully."""
        return self.returncode == 0


def run_command(args: list[str], *, input_text: str | None = None) -> CommandResult:
    """Run a query and capture its output.

    The exit code is reported, not raised; callers decide whether a
    non-zero status is a failure or an answer (``systemctl is-active``).

    Raises:
        FileNotFoundError: If the executable is not found.
    """
    logger.debug("Querying: %s", " ".join(args))
    result = subprocess.run(args, capture_output=True, text=True, input=input_text)
    return CommandResult(stdout=result.stdout, stderr=result.stderr, returncode=result.returncode)


def command_exists(name: str) -> bool:
    """Check if a command exists in the system PATH.

    Args:
        name: Command name to check.

    Returns:
        True if command exists, False otherwise.
    """
    return shutil.which(name) is not None


def run_streaming(
    args: list[str],
    *,
    cwd: str | None = None,
    env: dict[str, str] | None = None,
) -> int:
    """Execute a command with its output streamed to the terminal.

    Unlike run_command(), this does NOT capture stdout/stderr, so a
    failing command is diagnosable from the live output.

    Args:
        args: Command and arguments to execute.
        cwd: Working directory for the command.
        env: Additional environment variables (merged with current env).

    Returns:
        Exit code of the command.
    """
    full_env = {**os.environ, **(env or {})}
    logger.debug("Running: %s", " ".join(args))
    try:
        result = subprocess.run(args, check=False, cwd=cwd, env=full_env)
    except FileNotFoundError:
        # Mirror the shell's "command not found" status
        logger.debug("Executable not found: %s", args[0])
        return 127
    return result.returncode


def run_checked(args: list[str], description: str) -> None:
    """Execute a mutating command, raising ApplyError on failure.

    Args:
        args: Command and arguments to execute.
        description: Human-readable description used in logs and errors.

    Raises:
        ApplyError: If the command exits with a non-zero status.
    """
    logger.info("%s: %s", description, " ".join(args))
    returncode = run_streaming(args)
    if returncode != 0:
        raise ApplyError(description, args, returncode)


def run_shell(command: str, description: str) -> None:
    """Execute a shell snippet through ``sh -c``.

    Args:
        command: Shell command line, may use variables and pipes.
        description: Human-readable description used in logs and errors.

    Raises:
        ApplyError: If the command exits with a non-zero status.
    """
    run_checked(["sh", "-c", command], description)


def as_root(args: list[str]) -> list[str]:
    """Prefix a command with sudo unless already running as root.

    Args:
        args: Command and arguments.

    Returns:
        The command, prefixed with "sudo" for unprivileged users.
    """
    if os.geteuid() == 0:
        return list(args)
    return ["sudo", *args]


def write_root_file(path: str, content: str, description: str) -> None:
    """Write a root-owned file through ``sudo tee``.

    Args:
        path: Destination path.
        content: File content.
        description: Human-readable description used in errors.

    Raises:
        ApplyError: If tee exits with a non-zero status.
    """
    args = as_root(["tee", path])
    logger.info("%s: %s", description, path)
    result = run_command(args, input_text=content)
    if not result.success:
        logger.error("tee %s failed: %s", path, result.stderr.strip())
        raise ApplyError(description, args, result.returncode)
