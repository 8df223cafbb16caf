"""Full run orchestration in the fixed domain order.

Order: hostname, packages, flatpak, services (system then user), groups,
users, podman setup (socket and registries, when podman is declared),
pre-container setup, containers, vpn, dotfiles, custom
commands. Packages come before containers so podman is installed first;
groups come before users so users may reference them.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from reprosetup.core.config import ConfigSource
from reprosetup.core.confirm import ConfirmationPolicy
from reprosetup.core.distro import check_distro
from reprosetup.core.errors import ConfigError
from reprosetup.core.reconciler import Reconciler
from reprosetup.core.state import SectionLayout
from reprosetup.domains import (
    ContainerDomain,
    Domain,
    FlatpakDomain,
    GroupDomain,
    PackageDomain,
    ServiceDomain,
    UserDomain,
)
from reprosetup.domains.services import service_layout
from reprosetup.models.config import DesktopConfig
from reprosetup.models.plan import Outcome, Plan
from reprosetup.steps.commands import run_custom_commands, run_setup_commands
from reprosetup.steps.dotfiles import DOTFILES_LAYOUT, DotfilesStep
from reprosetup.steps.hostname import apply_hostname
from reprosetup.steps.podman import PodmanSetupStep
from reprosetup.steps.vpn import VPN_LAYOUT, WireguardStep
from reprosetup.utils.formatting import print_step, print_warning

logger = logging.getLogger(__name__)

# Values accepted by --only, in run order
SELECTORS: tuple[str, ...] = (
    "hostname",
    "packages",
    "flatpak",
    "services",
    "groups",
    "users",
    "containers",
    "vpn",
    "dotfiles",
    "commands",
)

# Sections of every state file, by file stem
STATE_LAYOUTS: dict[str, tuple[SectionLayout, ...]] = {
    "packages": (PackageDomain.layout,),
    "flatpak": (FlatpakDomain.layout,),
    "services": (service_layout(False), service_layout(True)),
    "accounts": (GroupDomain.layout, UserDomain.layout),
    "containers": (ContainerDomain.layout,),
    "vpn": (VPN_LAYOUT,),
    "dotfiles": (DOTFILES_LAYOUT,),
}


@dataclass(frozen=True)
class RunOptions:
    """Run-wide options from the command line.

    Attributes:
        only: Selectors to run; empty runs everything.
        force_recreate: Recreate every existing declared container.
        no_recreate: Never recreate existing declared containers.
        state_dir: Optional override for the state directory.
    """

    only: tuple[str, ...] = ()
    force_recreate: bool = False
    no_recreate: bool = False
    state_dir: Path | None = None

    def validate(self) -> None:
        """Reject contradictory or unknown options.

        Raises:
            ConfigError: If both recreate flags are set or a selector is unknown.
        """
        if self.force_recreate and self.no_recreate:
            msg = "--force-recreate and --no-recreate are mutually exclusive"
            raise ConfigError(msg)
        unknown = sorted(set(self.only) - set(SELECTORS))
        if unknown:
            msg = f"Unknown domain(s) for --only: {', '.join(unknown)} (choose from {', '.join(SELECTORS)})"
            raise ConfigError(msg)

    def selects(self, selector: str) -> bool:
        return not self.only or selector in self.only


def build_domains(config: DesktopConfig, options: RunOptions) -> list[Domain]:
    """Instantiate the reconciled domains in run order."""
    return [
        PackageDomain(config.distro),
        FlatpakDomain(config.flatpak),
        ServiceDomain(user=False),
        ServiceDomain(user=True),
        GroupDomain(config.accounts),
        UserDomain(config.accounts),
        ContainerDomain(force_recreate=options.force_recreate, no_recreate=options.no_recreate),
    ]


class Runner:
    """Runs or previews a whole configuration.

    Example:
        >>> runner = Runner(ConfigSource.load(), ConfirmationPolicy(ConfirmMode.AUTO_NO))
        >>> outcomes = runner.run()
    """

    def __init__(
        self,
        source: ConfigSource,
        policy: ConfirmationPolicy,
        options: RunOptions | None = None,
        domains: list[Domain] | None = None,
    ) -> None:
        """Initialize the runner.

        Raises:
            ConfigError: If the options are invalid.
        """
        self.options = options or RunOptions()
        self.options.validate()
        self.source = source
        self.policy = policy
        self.reconciler = Reconciler(source, policy, self.options.state_dir)
        self.domains = domains if domains is not None else build_domains(source.config, self.options)

    @property
    def config(self) -> DesktopConfig:
        return self.source.config

    def selected_domains(self) -> list[Domain]:
        return [domain for domain in self.domains if self.options.selects(domain.selector)]

    def plan(self) -> list[Plan]:
        """Compute the plan of every selected domain without applying it."""
        plans = []
        for domain in self.selected_domains():
            plan = self.reconciler.plan(domain)
            if plan is not None:
                plans.append(plan)
        return plans

    def _steps(self) -> list[tuple[str, str, Callable[[], list[Outcome]]]]:
        config = self.config
        steps: list[tuple[str, str, Callable[[], list[Outcome]]]] = []

        if config.system.hostname:
            hostname = config.system.hostname
            steps.append(("hostname", "Hostname", lambda: apply_hostname(hostname)))

        for domain in self.domains:
            if domain.selector == "containers" and "podman" in config.system.packages:
                podman = PodmanSetupStep(config.podman)
                steps.append(("containers", "Podman setup", podman.run))
            if domain.selector == "containers" and config.podman.pre_container_setup:
                commands = config.podman.pre_container_setup
                steps.append(("containers", "Podman pre-container setup", lambda: run_setup_commands(commands)))
            steps.append((domain.selector, domain.name.capitalize(), self._reconcile_step(domain)))

        if config.wireguard is not None:
            vpn = WireguardStep(config.wireguard, self.reconciler.store("vpn"))
            steps.append(("vpn", "WireGuard VPN", vpn.run))
        if config.dotfiles is not None:
            dotfiles = DotfilesStep(
                config.dotfiles,
                self.policy,
                self.reconciler.store("dotfiles"),
                base_dir=self.source.path.parent,
            )
            steps.append(("dotfiles", "Dotfiles", dotfiles.run))
        if config.custom_commands is not None and config.custom_commands.commands:
            custom = config.custom_commands
            steps.append(("commands", "Custom commands", lambda: run_custom_commands(custom)))
        return steps

    def _reconcile_step(self, domain: Domain) -> Callable[[], list[Outcome]]:
        return lambda: self.reconciler.reconcile(domain)

    def run(self) -> list[Outcome]:
        """Carry out every selected step, stopping at the first failure.

        Returns:
            Outcomes of every step in order.

        Raises:
            ApplyError: If a command fails.
            ConfigError: If configuration cannot be written back or a
                referenced file is missing.
        """
        warning = check_distro(self.config.distro)
        if warning:
            print_warning(f"{warning}. Continuing.")

        outcomes: list[Outcome] = []
        for selector, title, step in self._steps():
            if not self.options.selects(selector):
                continue
            print_step(title)
            outcomes.extend(step())
        return outcomes
