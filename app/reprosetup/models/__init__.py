"""Data models for reprosetup.

This module exports the core data structures used throughout the application.
"""

from reprosetup.models.config import (
    ContainerSpec,
    DesktopConfig,
    GroupSpec,
    PackageSpec,
    ServiceSpec,
    UserSpec,
)
from reprosetup.models.current import (
    ContainerState,
    GroupState,
    InstalledPackage,
    ServiceState,
    UserState,
)
from reprosetup.models.plan import Action, Outcome, OutcomeStatus, Plan, PlanEntry

__all__ = [
    "Action",
    "ContainerSpec",
    "ContainerState",
    "DesktopConfig",
    "GroupSpec",
    "GroupState",
    "InstalledPackage",
    "Outcome",
    "OutcomeStatus",
    "PackageSpec",
    "Plan",
    "PlanEntry",
    "ServiceSpec",
    "ServiceState",
    "UserSpec",
    "UserState",
]
