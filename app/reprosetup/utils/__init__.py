"""Utility modules for reprosetup.

This module exports commonly used utility functions.
"""

from reprosetup.utils.formatting import (
    console,
    err_console,
    print_error,
    print_info,
    print_step,
    print_success,
    print_warning,
    setup_logging,
)
from reprosetup.utils.shell import (
    CommandResult,
    as_root,
    command_exists,
    run_checked,
    run_command,
    run_shell,
    run_streaming,
)

__all__ = [
    "CommandResult",
    "as_root",
    "command_exists",
    "console",
    "err_console",
    "print_error",
    "print_info",
    "print_step",
    "print_success",
    "print_warning",
    "run_checked",
    "run_command",
    "run_shell",
    "run_streaming",
    "setup_logging",
]
