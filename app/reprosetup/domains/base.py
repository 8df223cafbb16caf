"""Abstract base class for reconciled resource domains.

A Domain is the single object the reconciler drives for one kind of
resource. It satisfies the engine's Resource protocol (fingerprint,
matches, mutable_in_place) and adds everything the engine deliberately
does not know about: where declared descriptors live in the
configuration, how the live system is queried, and which commands carry
out each action.
"""

from abc import ABC, abstractmethod
from collections.abc import Collection, Mapping
from typing import Any

from pydantic import BaseModel

from reprosetup.core.fingerprint import fingerprint_model
from reprosetup.core.state import ManagedRecord, SectionLayout
from reprosetup.models.config import DesktopConfig
from reprosetup.models.plan import Action, Plan, PlanEntry

# Domain specific fields stored alongside a Managed Record
RecordExtra = dict[str, Any] | None


class Domain(ABC):
    """Abstract base class for all resource domains.

    Subclasses implement the declared/snapshot/apply surface; the
    reconciler (reprosetup.core.reconciler) owns ordering, confirmation
    and state bookkeeping.

    Attributes:
        selector: Name accepted by ``--only`` (several domains may share one).
        state_file: Stem of the JSON state file.
        layout: Section of the state file holding this domain's records.
        mutable_in_place: False when changes require remove + create.
    """

    selector: str = ""
    state_file: str = ""
    layout: SectionLayout = SectionLayout("records")
    mutable_in_place: bool = True

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the display name of this domain (e.g. "packages")."""

    @abstractmethod
    def declared(self, config: DesktopConfig) -> dict[str, Any]:
        """Return the declared descriptors by key."""

    @abstractmethod
    def snapshot(self, declared: Mapping[str, Any], prior_keys: Collection[str]) -> dict[str, Any]:
        """Query the live system.

        Args:
            declared: Declared descriptors, for per-key scanners.
            prior_keys: Keys with Managed Records, for per-key scanners.

        Returns:
            Current descriptors by key.

        Raises:
            SnapshotError: If the live state cannot be queried.
        """

    def fingerprint(self, key: str, declared: Any) -> str:
        """Fingerprint the managed attributes of a declared descriptor."""
        if isinstance(declared, BaseModel):
            return fingerprint_model(key, declared)
        msg = f"{self.name}: cannot fingerprint {type(declared).__name__}"
        raise TypeError(msg)

    def matches(self, declared: Any, current: Any) -> bool:
        """Check if the live state satisfies the declaration.

        Presence-only domains need nothing beyond existence.
        """
        return True

    def override(self, key: str, declared: Any, current: Any) -> Action | None:
        """Force an action for an existing declared key, or None to diff."""
        return None

    def confirmation_prompt(self, entry: PlanEntry) -> str | None:
        """Return a prompt if an apply action needs confirmation."""
        return None

    def prepare(self, plan: Plan) -> None:
        """Run once before any entry of the plan is applied."""

    def validate(self, key: str, declared: Any) -> None:
        """Validate a declaration before it is applied.

        Raises:
            ValidationError: If the declaration must not be applied.
        """

    @abstractmethod
    def create(self, key: str, declared: Any) -> RecordExtra:
        """Create a missing resource.

        Returns:
            Extra fields to store in the Managed Record.

        Raises:
            ApplyError: If a command fails.
        """

    def update(self, key: str, declared: Any, current: Any) -> RecordExtra:
        """Mutate an existing resource in place."""
        return self.create(key, declared)

    def recreate(self, key: str, declared: Any, current: Any) -> RecordExtra:
        """Remove and create a resource that cannot be changed in place."""
        self.delete(key, current, None)
        return self.create(key, declared)

    @abstractmethod
    def delete(self, key: str, current: Any, record: ManagedRecord | None) -> None:
        """Remove a resource from the system.

        Args:
            key: Resource key.
            current: Current descriptor.
            record: Managed Record, None for undeclared resources.

        Raises:
            ApplyError: If a command fails.
        """

    def adopt(self, config: DesktopConfig, key: str, current: Any) -> Any:
        """Write the observed resource into the configuration.

        Returns:
            The declared descriptor now present in config.
        """
        msg = f"{self.name} does not support adoption"
        raise NotImplementedError(msg)
