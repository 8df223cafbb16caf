"""CLI commands for reprosetup.

This package contains all subcommand implementations.
"""

from reprosetup.cli.commands import apply, init, plan, state

__all__ = ["apply", "init", "plan", "state"]
