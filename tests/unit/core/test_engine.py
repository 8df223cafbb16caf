"""Unit tests for the reconciliation core.

Tests for classify() and compute_plan() covering every classification rule.
"""

from unittest.mock import MagicMock

import pytest

from reprosetup.core.engine import classify, compute_plan
from reprosetup.core.errors import PlanInvariantError
from reprosetup.core.fingerprint import fingerprint_model
from reprosetup.core.state import ManagedRecord
from reprosetup.domains.containers import ContainerDomain
from reprosetup.domains.packages import PackageDomain
from reprosetup.models.config import ContainerSpec, PackageSpec
from reprosetup.models.current import ContainerState, InstalledPackage
from reprosetup.models.plan import Action


def record(key: str, fingerprint: str) -> ManagedRecord:
    return ManagedRecord(key=key, fingerprint=fingerprint, last_updated="2026-01-01T00:00:00+00:00")


@pytest.fixture
def packages() -> PackageDomain:
    """Package domain with mocked system access."""
    return PackageDomain("fedora", scanner=MagicMock(), operator=MagicMock())


def containers(**kwargs: bool) -> ContainerDomain:
    return ContainerDomain(scanner=MagicMock(), operator=MagicMock(), **kwargs)


class TestPackageClassification:
    """Tests for a presence-only, mutable-in-place domain."""

    def test_sync_scenario(self, packages: PackageDomain) -> None:
        """Missing is created, managed is skipped, unknown is offered for adoption."""
        declared = {"vim": PackageSpec(), "htop": PackageSpec()}
        current = {"htop": InstalledPackage("htop"), "git": InstalledPackage("git")}
        prior = {"htop": record("htop", fingerprint_model("htop", PackageSpec()))}

        plan = compute_plan("packages", declared, current, prior, packages)

        assert plan.actions() == {
            "git": Action.ADOPT,
            "htop": Action.SKIP,
            "vim": Action.CREATE,
        }

    def test_entries_sorted_by_key(self, packages: PackageDomain) -> None:
        """Entries come out in key order."""
        declared = {"zsh": PackageSpec(), "atop": PackageSpec(), "mc": PackageSpec()}

        plan = compute_plan("packages", declared, {}, {}, packages)

        assert [e.key for e in plan.entries] == ["atop", "mc", "zsh"]

    def test_present_but_unmanaged_is_update(self, packages: PackageDomain) -> None:
        """A declared package installed outside reprosetup is updated, never skipped."""
        plan = compute_plan(
            "packages",
            {"vim": PackageSpec()},
            {"vim": InstalledPackage("vim")},
            {},
            packages,
        )

        assert plan.actions() == {"vim": Action.UPDATE}

    def test_orphan_is_delete(self, packages: PackageDomain) -> None:
        """A managed package that is no longer declared is an orphan."""
        plan = compute_plan(
            "packages",
            {},
            {"git": InstalledPackage("git")},
            {"git": record("git", "abc")},
            packages,
        )

        entry = plan.entries[0]
        assert entry.action == Action.DELETE
        assert entry.exists is True

    def test_orphan_already_absent(self, packages: PackageDomain) -> None:
        """An orphan that is already gone is still a DELETE, without current state."""
        plan = compute_plan("packages", {}, {}, {"git": record("git", "abc")}, packages)

        entry = plan.entries[0]
        assert entry.action == Action.DELETE
        assert entry.current is None
        assert entry.exists is False

    def test_orphans_never_touch_other_keys(self, packages: PackageDomain) -> None:
        """Undeclared unmanaged resources are ADOPT, never DELETE."""
        plan = compute_plan(
            "packages",
            {},
            {"git": InstalledPackage("git"), "tmux": InstalledPackage("tmux")},
            {"git": record("git", "abc")},
            packages,
        )

        assert plan.actions() == {"git": Action.DELETE, "tmux": Action.ADOPT}

    def test_nonexistent_current_is_ignored(self, packages: PackageDomain) -> None:
        """Descriptors flagged as not existing do not create undeclared keys."""
        plan = compute_plan(
            "packages",
            {},
            {"gone": InstalledPackage("gone", exists=False)},
            {},
            packages,
        )

        assert plan.entries == ()
        assert plan.is_converged is True


class TestIdempotence:
    """Tests for the SKIP fixed point."""

    def test_second_plan_after_apply_is_converged(self, packages: PackageDomain) -> None:
        """Recording what was applied makes the next plan all SKIP."""
        declared = {"vim": PackageSpec(), "htop": PackageSpec()}
        first = compute_plan("packages", declared, {}, {}, packages)
        assert all(e.action == Action.CREATE for e in first.entries)

        current = {key: InstalledPackage(key) for key in declared}
        prior = {e.key: record(e.key, e.fingerprint or "") for e in first.entries}
        second = compute_plan("packages", declared, current, prior, packages)

        assert second.is_converged
        assert second.pending == ()

    def test_changed_declaration_is_update(self) -> None:
        """A fingerprint mismatch on a mutable resource is UPDATE."""
        resource = MagicMock(mutable_in_place=True)
        resource.fingerprint.return_value = "new"
        resource.matches.return_value = True

        entry = classify("k", object(), object(), record("k", "old"), resource)

        assert entry.action == Action.UPDATE
        assert entry.reason == "declaration changed"

    def test_drifted_live_state_is_update(self) -> None:
        """An unchanged declaration whose live state drifted is UPDATE."""
        resource = MagicMock(mutable_in_place=True)
        resource.fingerprint.return_value = "same"
        resource.matches.return_value = False

        entry = classify("k", object(), object(), record("k", "same"), resource)

        assert entry.action == Action.UPDATE
        assert entry.reason == "live state drifted"


class TestContainerClassification:
    """Tests for a resource that is recreated instead of updated."""

    def test_changed_image_is_recreate(self) -> None:
        """A changed declaration on an existing container is RECREATE."""
        domain = containers()
        old = ContainerSpec(image="nginx:1.24")
        new = ContainerSpec(image="nginx:1.25")
        current = {"web": ContainerState("web", "docker.io/library/nginx:1.24")}
        prior = {"web": record("web", domain.fingerprint("web", old))}

        plan = compute_plan("containers", {"web": new}, current, prior, domain, domain.override)

        assert plan.actions() == {"web": Action.RECREATE}

    def test_no_recreate_skips_changed_container(self) -> None:
        """--no-recreate turns the RECREATE into SKIP."""
        domain = containers(no_recreate=True)
        old = ContainerSpec(image="nginx:1.24")
        new = ContainerSpec(image="nginx:1.25")
        current = {"web": ContainerState("web", "docker.io/library/nginx:1.24")}
        prior = {"web": record("web", domain.fingerprint("web", old))}

        plan = compute_plan("containers", {"web": new}, current, prior, domain, domain.override)

        assert plan.actions() == {"web": Action.SKIP}

    def test_force_recreate_recreates_unchanged_container(self) -> None:
        """--force-recreate recreates even an up-to-date container."""
        domain = containers(force_recreate=True)
        spec = ContainerSpec(image="nginx:1.25")
        current = {"web": ContainerState("web", "docker.io/library/nginx:1.25")}
        prior = {"web": record("web", domain.fingerprint("web", spec))}

        plan = compute_plan("containers", {"web": spec}, current, prior, domain, domain.override)

        assert plan.actions() == {"web": Action.RECREATE}

    def test_override_never_applies_to_missing_container(self) -> None:
        """Missing containers are created regardless of the recreate flags."""
        domain = containers(no_recreate=True)

        plan = compute_plan(
            "containers",
            {"web": ContainerSpec(image="nginx")},
            {},
            {},
            domain,
            domain.override,
        )

        assert plan.actions() == {"web": Action.CREATE}

    def test_unchanged_container_is_skipped(self) -> None:
        """Equivalent image spellings do not count as drift."""
        domain = containers()
        spec = ContainerSpec(image="nginx:1.25")
        current = {"web": ContainerState("web", "docker.io/library/nginx:1.25")}
        prior = {"web": record("web", domain.fingerprint("web", spec))}

        plan = compute_plan("containers", {"web": spec}, current, prior, domain, domain.override)

        assert plan.is_converged


class TestInvariants:
    """Tests for malformed inputs."""

    def test_mismatched_snapshot_key_raises(self, packages: PackageDomain) -> None:
        """A descriptor stored under a different key is rejected."""
        with pytest.raises(PlanInvariantError, match="does not match"):
            compute_plan("packages", {}, {"vim": InstalledPackage("nano")}, {}, packages)

    def test_unknown_key_raises(self, packages: PackageDomain) -> None:
        """classify() refuses a key that is neither declared, present nor managed."""
        with pytest.raises(PlanInvariantError):
            classify("ghost", None, None, None, packages)


class TestPlanModel:
    """Tests for the Plan helpers."""

    def test_to_dict_omits_skip_entries(self, packages: PackageDomain) -> None:
        """JSON output lists pending entries and counts everything."""
        declared = {"vim": PackageSpec(), "htop": PackageSpec()}
        current = {"htop": InstalledPackage("htop")}
        prior = {"htop": record("htop", fingerprint_model("htop", PackageSpec()))}

        data = compute_plan("packages", declared, current, prior, packages).to_dict()

        assert data["domain"] == "packages"
        assert data["converged"] is False
        assert data["summary"]["create"] == 1
        assert data["summary"]["skip"] == 1
        assert data["entries"] == [{"key": "vim", "action": "create", "reason": "declared but missing"}]
