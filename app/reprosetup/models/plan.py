"""Plan models produced by the reconciliation core.

A Plan is the classified list of per-key actions for one domain. Plans and
their actions are run-local values; only Managed Records are persisted.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Action(str, Enum):
    """Classification of a single resource key.

    Attributes:
        SKIP: Nothing to do, live state matches the declaration.
        CREATE: Declared but missing on the system.
        UPDATE: Present, mutated in place to match the declaration.
        RECREATE: Present, removed and created again (containers).
        DELETE: Orphan, managed by reprosetup but no longer declared.
        ADOPT: Undeclared, present on the system but never managed.
    """

    SKIP = "skip"
    CREATE = "create"
    UPDATE = "update"
    RECREATE = "recreate"
    DELETE = "delete"
    ADOPT = "adopt"

    @property
    def is_apply(self) -> bool:
        """Check if the action is carried out by the applier directly."""
        return self in (Action.CREATE, Action.UPDATE, Action.RECREATE)

    @property
    def is_sweep(self) -> bool:
        """Check if the action is resolved by the orphan sweeper."""
        return self in (Action.DELETE, Action.ADOPT)


@dataclass(frozen=True, slots=True)
class PlanEntry:
    """A classified resource key.

    Attributes:
        key: Resource key.
        action: Classified action.
        declared: Declared descriptor, None for orphans and undeclared keys.
        current: Current descriptor, None when the resource is absent.
        fingerprint: Fingerprint of the declared descriptor, if declared.
        reason: Short human-readable explanation.
    """

    key: str
    action: Action
    declared: Any = None
    current: Any = None
    fingerprint: str | None = None
    reason: str = ""

    @property
    def exists(self) -> bool:
        """Check if the resource currently exists on the system."""
        return self.current is not None and bool(getattr(self.current, "exists", True))

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"key": self.key, "action": self.action.value, "reason": self.reason}


@dataclass(frozen=True, slots=True)
class Plan:
    """Classified actions for one domain.

    Attributes:
        domain: Domain name.
        entries: Entries sorted by key.
    """

    domain: str
    entries: tuple[PlanEntry, ...]

    def by_action(self, action: Action) -> tuple[PlanEntry, ...]:
        """Return the entries classified as action."""
        return tuple(e for e in self.entries if e.action == action)

    @property
    def pending(self) -> tuple[PlanEntry, ...]:
        """Entries that are not SKIP."""
        return tuple(e for e in self.entries if e.action != Action.SKIP)

    @property
    def is_converged(self) -> bool:
        """Check if nothing needs to be done."""
        return not self.pending

    def actions(self) -> dict[str, Action]:
        """Map each key to its action."""
        return {e.key: e.action for e in self.entries}

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        summary = {action.value: len(self.by_action(action)) for action in Action}
        return {
            "domain": self.domain,
            "converged": self.is_converged,
            "summary": summary,
            "entries": [e.to_dict() for e in self.entries if e.action != Action.SKIP],
        }


class OutcomeStatus(str, Enum):
    """What happened to a plan entry during a run."""

    APPLIED = "applied"
    ADOPTED = "adopted"
    DELETED = "deleted"
    DECLINED = "declined"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class Outcome:
    """Result of carrying out one plan entry.

    Attributes:
        domain: Domain name.
        key: Resource key.
        action: Action that was attempted.
        status: What happened.
        message: Optional detail (e.g. a validation error).
    """

    domain: str
    key: str
    action: Action
    status: OutcomeStatus
    message: str | None = None

    @property
    def failed(self) -> bool:
        """Check if the entry failed."""
        return self.status == OutcomeStatus.FAILED
