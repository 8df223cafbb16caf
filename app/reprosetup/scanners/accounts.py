"""User and group scanners backed by the passwd and group databases.

Only accounts whose id falls inside the managed range are reported, plus
any key asked for explicitly, so system accounts are never offered for
adoption or removal.
"""

import grp
import pwd
from collections.abc import Collection

from reprosetup.models.current import GroupState, UserState
from reprosetup.scanners.base import Scanner


class _AccountScanner:
    def __init__(self, min_id: int = 1000, max_id: int = 60000) -> None:
        self.min_id = min_id
        self.max_id = max_id

    def is_available(self) -> bool:
        """The passwd and group databases are always readable."""
        return True

    def _in_range(self, ident: int) -> bool:
        return self.min_id <= ident <= self.max_id


class UserScanner(_AccountScanner, Scanner[UserState]):
    """Scanner for local users."""

    @property
    def name(self) -> str:
        return "passwd"

    def scan(self, keys: Collection[str] = ()) -> dict[str, UserState]:
        """Read users and their supplementary groups."""
        wanted = set(keys)
        supplementary: dict[str, list[str]] = {}
        for group in grp.getgrall():
            for member in group.gr_mem:
                supplementary.setdefault(member, []).append(group.gr_name)

        users: dict[str, UserState] = {}
        for entry in pwd.getpwall():
            if entry.pw_name not in wanted and not self._in_range(entry.pw_uid):
                continue
            users[entry.pw_name] = UserState(
                name=entry.pw_name,
                uid=entry.pw_uid,
                gid=entry.pw_gid,
                groups=tuple(sorted(supplementary.get(entry.pw_name, []))),
                home=entry.pw_dir,
                shell=entry.pw_shell,
                comment=entry.pw_gecos,
            )
        return users


class GroupScanner(_AccountScanner, Scanner[GroupState]):
    """Scanner for local groups.

    Groups are reported only when their gid is in range or they are asked
    for explicitly; per-user private groups are skipped.
    """

    @property
    def name(self) -> str:
        return "group"

    def scan(self, keys: Collection[str] = ()) -> dict[str, GroupState]:
        """Read groups and their members."""
        wanted = set(keys)
        private = {(entry.pw_name, entry.pw_gid) for entry in pwd.getpwall()}

        groups: dict[str, GroupState] = {}
        for entry in grp.getgrall():
            if entry.gr_name not in wanted:
                if not self._in_range(entry.gr_gid):
                    continue
                if (entry.gr_name, entry.gr_gid) in private:
                    continue
            groups[entry.gr_name] = GroupState(
                name=entry.gr_name,
                gid=entry.gr_gid,
                members=tuple(sorted(entry.gr_mem)),
            )
        return groups


def read_valid_shells(path: str = "/etc/shells") -> set[str]:
    """Read the list of valid login shells.

    Args:
        path: Shells file.

    Returns:
        Set of absolute shell paths; empty if the file is unreadable.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return {
                line.strip()
                for line in f
                if line.strip() and not line.lstrip().startswith("#")
            }
    except OSError:
        return set()
