"""Reconciliation core: pure diff and classification.

compute_plan() compares what a domain declares, what the live system
currently holds and which keys reprosetup already manages, and classifies
every key into an Action. It never touches the system; the Reconciler
(reprosetup.core.reconciler) carries the resulting plan out.

Classification rules, per key:

==========  ========  =====  ======================================
declared    current   prior  action
==========  ========  =====  ======================================
yes         absent    any    CREATE
yes         present   no     UPDATE (RECREATE if not mutable in place)
yes         present   yes    SKIP if fingerprint and live state match,
                             UPDATE / RECREATE otherwise
no          present   no     ADOPT (undeclared, resolved by the sweeper)
no          any       yes    DELETE (orphan, resolved by the sweeper)
==========  ========  =====  ======================================
"""

from collections.abc import Callable, Mapping
from typing import Any, Protocol

from reprosetup.core.errors import PlanInvariantError
from reprosetup.core.state import ManagedRecord
from reprosetup.models.plan import Action, Plan, PlanEntry

# Hook letting a domain force an action for an existing declared key
# before the diff runs (container --force-recreate / --no-recreate).
Override = Callable[[str, Any, Any], Action | None]


class Resource(Protocol):
    """Capabilities the core needs from a resource type."""

    @property
    def mutable_in_place(self) -> bool:
        """Whether changes are applied in place (False: remove and create)."""
        ...

    def fingerprint(self, key: str, declared: Any) -> str:
        """Fingerprint the managed attributes of a declared descriptor."""
        ...

    def matches(self, declared: Any, current: Any) -> bool:
        """Check if the live state satisfies every managed attribute."""
        ...


def _exists(current: Any) -> bool:
    return current is not None and bool(getattr(current, "exists", True))


def _check_keys(current: Mapping[str, Any]) -> None:
    for key, descriptor in current.items():
        name = getattr(descriptor, "name", key)
        if name != key:
            msg = f"Snapshot key '{key}' does not match descriptor name '{name}'"
            raise PlanInvariantError(msg)


def classify(
    key: str,
    declared: Any,
    current: Any,
    record: ManagedRecord | None,
    resource: Resource,
    override: Override | None = None,
) -> PlanEntry:
    """Classify a single key.

    Args:
        key: Resource key.
        declared: Declared descriptor, or None if the key is not declared.
        current: Current descriptor, or None if not observed.
        record: Managed Record, or None if the key is not managed.
        resource: Capabilities of the resource type.
        override: Optional hook that can force an action for existing keys.

    Returns:
        The classified PlanEntry.
    """
    exists = _exists(current)

    if declared is None:
        if record is not None:
            reason = "managed but no longer declared" if exists else "managed, already absent"
            return PlanEntry(key, Action.DELETE, current=current if exists else None, reason=reason)
        if exists:
            return PlanEntry(key, Action.ADOPT, current=current, reason="present but not declared")
        msg = f"Key '{key}' is neither declared, present nor managed"
        raise PlanInvariantError(msg)

    fingerprint = resource.fingerprint(key, declared)
    changed = Action.UPDATE if resource.mutable_in_place else Action.RECREATE

    def entry(action: Action, reason: str) -> PlanEntry:
        return PlanEntry(
            key,
            action,
            declared=declared,
            current=current if exists else None,
            fingerprint=fingerprint,
            reason=reason,
        )

    if not exists:
        return entry(Action.CREATE, "declared but missing")

    if override is not None:
        forced = override(key, declared, current)
        if forced is not None:
            return entry(forced, f"forced {forced.value}")

    if record is None:
        return entry(changed, "present but not yet managed")
    if record.fingerprint != fingerprint:
        return entry(changed, "declaration changed")
    if not resource.matches(declared, current):
        return entry(changed, "live state drifted")
    return entry(Action.SKIP, "up to date")


def compute_plan(
    domain: str,
    declared: Mapping[str, Any],
    current: Mapping[str, Any],
    prior: Mapping[str, ManagedRecord],
    resource: Resource,
    override: Override | None = None,
) -> Plan:
    """Compute the classified plan for one domain.

    Args:
        domain: Domain name, carried into the Plan.
        declared: Declared descriptors by key.
        current: Current descriptors by key.
        prior: Managed Records by key.
        resource: Capabilities of the resource type.
        override: Optional hook that can force an action for existing keys.

    Returns:
        Plan with one entry per key, sorted by key.

    Raises:
        PlanInvariantError: If the snapshot is malformed.
    """
    _check_keys(current)

    keys = set(declared) | set(prior) | {k for k, c in current.items() if _exists(c)}
    entries = [
        classify(key, declared.get(key), current.get(key), prior.get(key), resource, override)
        for key in sorted(keys)
    ]
    return Plan(domain=domain, entries=tuple(entries))
