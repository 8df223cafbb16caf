"""Per-domain reconciliation: snapshot, plan, apply, sweep.

The Reconciler ties the pure engine (reprosetup.core.engine) to the
outside world. For every domain it loads the Managed Records, snapshots
the live system, computes the plan, carries out the CREATE, UPDATE and
RECREATE entries and finally hands orphans and undeclared resources to
the OrphanSweeper. A Managed Record is written right after each
successful apply, never before.
"""

import logging
from pathlib import Path

from reprosetup.core.config import ConfigSource
from reprosetup.core.confirm import ConfirmationPolicy
from reprosetup.core.engine import compute_plan
from reprosetup.core.errors import SnapshotError, ValidationError
from reprosetup.core.state import StateSection, StateStore
from reprosetup.core.sweeper import OrphanSweeper
from reprosetup.domains.base import Domain
from reprosetup.models.plan import Action, Outcome, OutcomeStatus, Plan, PlanEntry
from reprosetup.utils.formatting import print_info, print_warning

logger = logging.getLogger(__name__)


class Reconciler:
    """Drives domains against one configuration and policy.

    State stores are cached per state file, so domains sharing a file
    (users and groups) write through the same store.

    Attributes:
        source: Loaded configuration.
        policy: Confirmation policy of the run.
        state_dir: Optional override for the state directory.
    """

    def __init__(
        self,
        source: ConfigSource,
        policy: ConfirmationPolicy,
        state_dir: Path | None = None,
    ) -> None:
        self.source = source
        self.policy = policy
        self.state_dir = state_dir
        self.sweeper = OrphanSweeper(source, policy)
        self._stores: dict[str, StateStore] = {}

    def store(self, state_file: str) -> StateStore:
        """Return the (cached) state store for a state file stem."""
        if state_file not in self._stores:
            self._stores[state_file] = StateStore.load(state_file, self.state_dir)
        return self._stores[state_file]

    def section(self, domain: Domain) -> StateSection:
        return self.store(domain.state_file).section(domain.layout)

    def plan(self, domain: Domain) -> Plan | None:
        """Compute the plan of a domain without changing anything.

        Returns:
            The plan, or None when the live state cannot be queried.

        Raises:
            PlanInvariantError: If the snapshot is malformed.
        """
        declared = domain.declared(self.source.config)
        prior = self.section(domain).records()
        try:
            current = domain.snapshot(declared, prior.keys())
        except SnapshotError as e:
            logger.warning("Skipping %s: %s", domain.name, e)
            print_warning(f"Skipping {domain.name}: {e}")
            return None
        return compute_plan(domain.name, declared, current, prior, domain, domain.override)

    def reconcile(self, domain: Domain) -> list[Outcome]:
        """Plan and carry out one domain.

        Returns:
            Outcomes of every entry that was not SKIP.

        Raises:
            ApplyError: If a command fails; the run stops here.
            ConfigError: If an adoption cannot be written back.
        """
        plan = self.plan(domain)
        if plan is None:
            return []
        if plan.is_converged:
            print_info(f"{domain.name}: up to date")
            return []
        return self.apply(domain, plan)

    def apply(self, domain: Domain, plan: Plan) -> list[Outcome]:
        """Carry out a computed plan."""
        section = self.section(domain)
        outcomes: list[Outcome] = []

        pending = [entry for entry in plan.entries if entry.action.is_apply]
        if pending:
            domain.prepare(plan)
        for entry in pending:
            outcomes.append(self._apply_entry(domain, section, entry))

        outcomes.extend(self.sweeper.sweep(domain, section, plan))
        return outcomes

    def _apply_entry(self, domain: Domain, section: StateSection, entry: PlanEntry) -> Outcome:
        def outcome(status: OutcomeStatus, message: str | None = None) -> Outcome:
            return Outcome(domain.name, entry.key, entry.action, status, message)

        try:
            domain.validate(entry.key, entry.declared)
        except ValidationError as e:
            logger.warning("Not applying %s %s: %s", domain.name, entry.key, e)
            print_warning(f"Skipping {entry.key}: {e}")
            return outcome(OutcomeStatus.FAILED, str(e))

        prompt = domain.confirmation_prompt(entry)
        if prompt is not None and not self.policy.resolve(prompt):
            return outcome(OutcomeStatus.DECLINED)

        print_info(f"{entry.action.value.capitalize()} {entry.key} ({entry.reason})")
        if entry.action == Action.CREATE:
            extra = domain.create(entry.key, entry.declared)
        elif entry.action == Action.UPDATE:
            extra = domain.update(entry.key, entry.declared, entry.current)
        else:
            extra = domain.recreate(entry.key, entry.declared, entry.current)

        # Only reached when every command succeeded
        section.record(entry.key, entry.fingerprint or domain.fingerprint(entry.key, entry.declared), extra)
        return outcome(OutcomeStatus.APPLIED)
