"""Unit tests for run orchestration."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from reprosetup.core.config import ConfigSource
from reprosetup.core.confirm import ConfirmationPolicy
from reprosetup.core.errors import ConfigError
from reprosetup.core.runner import SELECTORS, STATE_LAYOUTS, RunOptions, Runner, build_domains
from reprosetup.models.plan import Plan


def fake_domain(selector: str, name: str | None = None) -> MagicMock:
    domain = MagicMock()
    domain.selector = selector
    domain.name = name or selector
    return domain


class TestRunOptions:
    """Tests for RunOptions validation."""

    def test_defaults_select_everything(self) -> None:
        """Without --only every selector runs."""
        options = RunOptions()

        assert all(options.selects(s) for s in SELECTORS)

    def test_only_limits_selection(self) -> None:
        """--only restricts the selectors."""
        options = RunOptions(only=("users", "groups"))

        assert options.selects("users")
        assert not options.selects("containers")

    def test_recreate_flags_are_exclusive(self) -> None:
        """Both recreate flags together are rejected."""
        with pytest.raises(ConfigError, match="mutually exclusive"):
            RunOptions(force_recreate=True, no_recreate=True).validate()

    def test_unknown_selector_rejected(self) -> None:
        """Unknown --only values are rejected with the valid choices."""
        with pytest.raises(ConfigError, match="gnome"):
            RunOptions(only=("gnome",)).validate()


class TestBuildDomains:
    """Tests for the reconciled domain list."""

    def test_run_order(self, config_source: ConfigSource) -> None:
        """Packages come before containers and groups before users."""
        domains = build_domains(config_source.config, RunOptions())

        assert [d.name for d in domains] == [
            "packages",
            "flatpak",
            "system services",
            "user services",
            "groups",
            "users",
            "containers",
        ]

    def test_recreate_flags_reach_containers(self, config_source: ConfigSource) -> None:
        """Container recreate flags are passed through."""
        domains = build_domains(config_source.config, RunOptions(no_recreate=True))

        assert domains[-1].no_recreate is True

    def test_state_layouts_cover_every_state_file(self, config_source: ConfigSource) -> None:
        """Every domain's section is listed for the state command."""
        for domain in build_domains(config_source.config, RunOptions()):
            assert domain.layout in STATE_LAYOUTS[domain.state_file]


class TestRunner:
    """Tests for Runner.run() and Runner.plan()."""

    @pytest.fixture
    def calls(self) -> list[str]:
        """Order in which steps ran."""
        return []

    @pytest.fixture
    def runner_factory(self, config_source: ConfigSource, no_policy: ConfirmationPolicy, state_dir: Path, calls: list[str]):
        """Build a runner whose steps only record that they ran."""

        def factory(only: tuple[str, ...] = ()) -> Runner:
            domains = [fake_domain("packages"), fake_domain("flatpak"), fake_domain("containers")]
            runner = Runner(
                config_source,
                no_policy,
                RunOptions(only=only, state_dir=state_dir),
                domains=domains,
            )
            runner.reconciler = MagicMock()
            runner.reconciler.reconcile.side_effect = lambda domain: calls.append(domain.selector) or []
            return runner

        return factory

    @pytest.fixture(autouse=True)
    def patched_steps(self, calls: list[str]):
        """Replace the linear steps with recorders."""
        dotfiles = MagicMock()
        dotfiles.return_value.run.side_effect = lambda: calls.append("dotfiles") or []
        podman = MagicMock()
        podman.return_value.run.side_effect = lambda: calls.append("podman") or []
        with (
            patch("reprosetup.core.runner.check_distro", return_value=None),
            patch("reprosetup.core.runner.apply_hostname", side_effect=lambda h: calls.append("hostname") or []),
            patch("reprosetup.core.runner.run_setup_commands", side_effect=lambda c: calls.append("setup") or []),
            patch("reprosetup.core.runner.run_custom_commands", side_effect=lambda c: calls.append("commands") or []),
            patch("reprosetup.core.runner.DotfilesStep", dotfiles),
            patch("reprosetup.core.runner.PodmanSetupStep", podman),
        ):
            yield

    def test_full_run_order(self, runner_factory, calls: list[str]) -> None:
        """Steps run in the fixed order, setup right before containers."""
        runner_factory().run()

        assert calls == [
            "hostname",
            "packages",
            "flatpak",
            "setup",
            "containers",
            "dotfiles",
            "commands",
        ]

    def test_only_containers_includes_setup(self, runner_factory, calls: list[str]) -> None:
        """Pre-container setup belongs to the containers selector."""
        runner_factory(only=("containers",)).run()

        assert calls == ["setup", "containers"]

    def test_podman_setup_when_podman_declared(self, runner_factory, calls: list[str]) -> None:
        """Declaring the podman package adds socket and registries setup before containers."""
        runner = runner_factory(only=("containers",))
        runner.source.config.system.packages.append("podman")

        runner.run()

        assert calls == ["podman", "setup", "containers"]

    def test_only_dotfiles(self, runner_factory, calls: list[str]) -> None:
        """Unselected steps are not touched."""
        runner_factory(only=("dotfiles",)).run()

        assert calls == ["dotfiles"]

    def test_distro_mismatch_continues(self, runner_factory, calls: list[str]) -> None:
        """A distro mismatch only warns."""
        with patch("reprosetup.core.runner.check_distro", return_value="looks like debian"):
            runner_factory(only=("packages",)).run()

        assert calls == ["packages"]

    def test_plan_skips_unavailable_domains(self, runner_factory) -> None:
        """Domains whose snapshot failed are left out of the plans."""
        runner = runner_factory()
        available = Plan(domain="packages", entries=())
        runner.reconciler.plan.side_effect = [available, None, None]

        assert runner.plan() == [available]

    def test_invalid_options_rejected(self, config_source: ConfigSource, no_policy: ConfirmationPolicy) -> None:
        """The runner refuses invalid options up front."""
        with pytest.raises(ConfigError):
            Runner(config_source, no_policy, RunOptions(only=("nope",)), domains=[])
