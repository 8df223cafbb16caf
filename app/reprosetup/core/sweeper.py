"""Orphan sweeper: resolution of DELETE and ADOPT plan entries.

Two kinds of entries never get applied directly:

- Orphans (DELETE): reprosetup manages the resource but it is no longer
  declared. Removal is always confirmed; a declined removal keeps the
  Managed Record so the question comes back on the next run.
- Undeclared resources (ADOPT): present on the system, never managed.
  The operator is first asked to add them to the configuration, then to
  remove them; declining both leaves them alone and unmanaged.
"""

import logging

from reprosetup.core.config import ConfigSource
from reprosetup.core.confirm import ConfirmationPolicy
from reprosetup.core.state import StateSection
from reprosetup.domains.base import Domain
from reprosetup.models.plan import Action, Outcome, OutcomeStatus, Plan, PlanEntry
from reprosetup.utils.formatting import print_info, print_success

logger = logging.getLogger(__name__)


class OrphanSweeper:
    """Routes orphans and undeclared resources through the policy."""

    def __init__(self, source: ConfigSource, policy: ConfirmationPolicy) -> None:
        self.source = source
        self.policy = policy

    def sweep(self, domain: Domain, section: StateSection, plan: Plan) -> list[Outcome]:
        """Resolve every DELETE and ADOPT entry of a plan.

        Raises:
            ApplyError: If a removal command fails.
            ConfigError: If the configuration cannot be written back.
        """
        outcomes: list[Outcome] = []
        for entry in plan.entries:
            if entry.action == Action.ADOPT:
                outcomes.append(self._undeclared(domain, section, entry))
            elif entry.action == Action.DELETE:
                outcomes.append(self._orphan(domain, section, entry))
        return outcomes

    def _outcome(self, domain: Domain, entry: PlanEntry, status: OutcomeStatus) -> Outcome:
        return Outcome(domain.name, entry.key, entry.action, status)

    def _undeclared(self, domain: Domain, section: StateSection, entry: PlanEntry) -> Outcome:
        key = entry.key
        print_info(f"{domain.name}: {key} is installed but not in the configuration")

        if self.policy.resolve(f"Add {key} to the {domain.name} configuration?"):
            declared = domain.adopt(self.source.config, key, entry.current)
            self.source.persist()
            section.record(key, domain.fingerprint(key, declared))
            print_success(f"Adopted {key} into {self.source.path}")
            return self._outcome(domain, entry, OutcomeStatus.ADOPTED)

        if self.policy.resolve(f"Remove {key} from the system?"):
            domain.delete(key, entry.current, None)
            print_success(f"Removed {key}")
            return self._outcome(domain, entry, OutcomeStatus.DELETED)

        logger.info("Leaving undeclared %s %s alone", domain.name, key)
        return self._outcome(domain, entry, OutcomeStatus.DECLINED)

    def _orphan(self, domain: Domain, section: StateSection, entry: PlanEntry) -> Outcome:
        key = entry.key
        if not entry.exists:
            logger.info("Managed %s %s is already gone, dropping its record", domain.name, key)
            section.forget(key)
            return self._outcome(domain, entry, OutcomeStatus.DELETED)

        if not self.policy.resolve(f"{key} is no longer declared in {domain.name}. Remove it?"):
            return self._outcome(domain, entry, OutcomeStatus.DECLINED)

        domain.delete(key, entry.current, section.get(key))
        section.forget(key)
        print_success(f"Removed {key}")
        return self._outcome(domain, entry, OutcomeStatus.DELETED)
