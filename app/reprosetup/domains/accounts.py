"""User and group domains.

Both share accounts.json: groups in ``managed_groups``, users in
``managed_users``. Groups run first so users may reference groups created
in the same run. Members that do not exist yet are left out of a group
with a warning; they are added when the user itself is created.
"""

import grp
import logging
import pwd
from collections.abc import Collection, Mapping
from typing import Any

from reprosetup.core.errors import ValidationError
from reprosetup.core.state import ManagedRecord, SectionLayout
from reprosetup.core.validation import validate_id, validate_name, validate_shell
from reprosetup.domains.base import Domain, RecordExtra
from reprosetup.models.config import AccountsConfig, DesktopConfig, GroupSpec, UserSpec
from reprosetup.models.current import GroupState, UserState
from reprosetup.operators.accounts import AccountOperator
from reprosetup.scanners.accounts import GroupScanner, UserScanner, read_valid_shells

logger = logging.getLogger(__name__)


def lookup_uid(name: str) -> int | None:
    try:
        return pwd.getpwnam(name).pw_uid
    except KeyError:
        return None


def lookup_gid(name: str) -> int | None:
    try:
        return grp.getgrnam(name).gr_gid
    except KeyError:
        return None


class GroupDomain(Domain):
    """Local groups."""

    selector = "groups"
    state_file = "accounts"
    layout = SectionLayout("managed_groups", time_field="managed_at")

    def __init__(
        self,
        settings: AccountsConfig,
        scanner: GroupScanner | None = None,
        operator: AccountOperator | None = None,
    ) -> None:
        self.settings = settings
        self.scanner = scanner if scanner is not None else GroupScanner(settings.min_id, settings.max_id)
        self.operator = operator if operator is not None else AccountOperator()

    @property
    def name(self) -> str:
        return "groups"

    def declared(self, config: DesktopConfig) -> dict[str, GroupSpec]:
        return dict(config.groups)

    def snapshot(
        self, declared: Mapping[str, Any], prior_keys: Collection[str]
    ) -> dict[str, GroupState]:
        return self.scanner.snapshot(set(declared) | set(prior_keys))

    def matches(self, declared: GroupSpec, current: GroupState) -> bool:
        if declared.gid is not None and declared.gid != current.gid:
            return False
        if declared.members is not None and sorted(set(declared.members)) != sorted(current.members):
            return False
        return True

    def validate(self, key: str, declared: Any) -> None:
        validate_name(key)
        if not declared.system:
            validate_id(key, "gid", declared.gid, self.settings.min_id, self.settings.max_id)

    def _existing_members(self, key: str, members: list[str]) -> list[str]:
        existing = []
        for member in sorted(set(members)):
            if lookup_uid(member) is None:
                logger.warning("Group %s: member %s does not exist yet, skipping", key, member)
                continue
            existing.append(member)
        return existing

    def create(self, key: str, declared: Any) -> RecordExtra:
        spec: GroupSpec = declared
        self.operator.add_group(key, spec)
        if spec.members:
            self.operator.set_members(key, self._existing_members(key, spec.members))
        return {"gid": lookup_gid(key)}

    def update(self, key: str, declared: Any, current: Any) -> RecordExtra:
        spec: GroupSpec = declared
        if spec.gid is not None and spec.gid != current.gid:
            self.operator.modify_group(key, spec.gid)
        if spec.members is not None and sorted(set(spec.members)) != sorted(current.members):
            self.operator.set_members(key, self._existing_members(key, spec.members))
        return {"gid": lookup_gid(key)}

    def delete(self, key: str, current: Any, record: ManagedRecord | None) -> None:
        if current is not None:
            self.operator.delete_group(key)

    def adopt(self, config: DesktopConfig, key: str, current: Any) -> GroupSpec:
        spec = GroupSpec(gid=current.gid, members=list(current.members) or None)
        config.groups[key] = spec
        return spec


# usermod long option for each managed scalar attribute
_USERMOD_OPTIONS = {
    "uid": "uid",
    "gid": "gid",
    "home": "home",
    "shell": "shell",
    "comment": "comment",
}


class UserDomain(Domain):
    """Local user accounts."""

    selector = "users"
    state_file = "accounts"
    layout = SectionLayout("managed_users", time_field="managed_at")

    def __init__(
        self,
        settings: AccountsConfig,
        scanner: UserScanner | None = None,
        operator: AccountOperator | None = None,
    ) -> None:
        self.settings = settings
        self.scanner = scanner if scanner is not None else UserScanner(settings.min_id, settings.max_id)
        self.operator = operator if operator is not None else AccountOperator()
        self._valid_shells: set[str] | None = None

    @property
    def name(self) -> str:
        return "users"

    @property
    def valid_shells(self) -> set[str]:
        if self._valid_shells is None:
            self._valid_shells = read_valid_shells(self.settings.shells_file)
        return self._valid_shells

    def declared(self, config: DesktopConfig) -> dict[str, UserSpec]:
        return dict(config.users)

    def snapshot(
        self, declared: Mapping[str, Any], prior_keys: Collection[str]
    ) -> dict[str, UserState]:
        return self.scanner.snapshot(set(declared) | set(prior_keys))

    def _changes(self, spec: UserSpec, current: UserState) -> dict[str, str]:
        changes: dict[str, str] = {}
        for field, option in _USERMOD_OPTIONS.items():
            wanted = getattr(spec, field)
            if wanted is not None and wanted != getattr(current, field):
                changes[option] = str(wanted)
        if spec.groups is not None and sorted(set(spec.groups)) != sorted(current.groups):
            changes["groups"] = ",".join(sorted(set(spec.groups)))
        return changes

    def matches(self, declared: UserSpec, current: UserState) -> bool:
        return not self._changes(declared, current)

    def validate(self, key: str, declared: Any) -> None:
        """Check name, id range, login shell and supplementary groups.

        Raises:
            ValidationError: If any check fails.
        """
        spec: UserSpec = declared
        validate_name(key)
        if not spec.system:
            validate_id(key, "uid", spec.uid, self.settings.min_id, self.settings.max_id)
            validate_id(key, "gid", spec.gid, self.settings.min_id, self.settings.max_id)
        validate_shell(key, spec.shell, self.valid_shells, self.settings.shells_file)
        missing = [group for group in spec.groups or [] if lookup_gid(group) is None]
        if missing:
            raise ValidationError(key, f"groups do not exist: {', '.join(sorted(missing))}")

    def create(self, key: str, declared: Any) -> RecordExtra:
        self.operator.add_user(key, declared)
        return {"uid": lookup_uid(key)}

    def update(self, key: str, declared: Any, current: Any) -> RecordExtra:
        self.operator.modify_user(key, self._changes(declared, current))
        return {"uid": lookup_uid(key)}

    def delete(self, key: str, current: Any, record: ManagedRecord | None) -> None:
        if current is not None:
            self.operator.delete_user(key)

    def adopt(self, config: DesktopConfig, key: str, current: Any) -> UserSpec:
        spec = UserSpec(
            uid=current.uid,
            gid=current.gid,
            groups=list(current.groups),
            home=current.home,
            shell=current.shell,
            comment=current.comment or None,
        )
        config.users[key] = spec
        return spec
