"""User and group operator backed by the shadow-utils commands."""

from reprosetup.models.config import GroupSpec, UserSpec
from reprosetup.utils.shell import as_root, run_checked


class AccountOperator:
    """Creates, modifies and deletes local users and groups via sudo."""

    def add_group(self, name: str, spec: GroupSpec) -> None:
        args = ["groupadd"]
        if spec.gid is not None:
            args += ["--gid", str(spec.gid)]
        if spec.system:
            args.append("--system")
        run_checked(as_root([*args, name]), f"Creating group {name}")

    def modify_group(self, name: str, gid: int) -> None:
        run_checked(as_root(["groupmod", "--gid", str(gid), name]), f"Changing gid of group {name}")

    def set_members(self, name: str, members: list[str]) -> None:
        """Replace the member list of a group (gpasswd -M)."""
        run_checked(
            as_root(["gpasswd", "-M", ",".join(members), name]),
            f"Setting members of group {name}",
        )

    def delete_group(self, name: str) -> None:
        run_checked(as_root(["groupdel", name]), f"Deleting group {name}")

    def add_user(self, name: str, spec: UserSpec) -> None:
        """Create a user with every declared attribute."""
        args = ["useradd"]
        if spec.uid is not None:
            args += ["--uid", str(spec.uid)]
        if spec.gid is not None:
            args += ["--gid", str(spec.gid)]
        if spec.groups:
            args += ["--groups", ",".join(spec.groups)]
        if spec.home is not None:
            args += ["--home-dir", spec.home]
        if spec.shell is not None:
            args += ["--shell", spec.shell]
        if spec.comment is not None:
            args += ["--comment", spec.comment]
        args.append("--create-home" if spec.create_home else "--no-create-home")
        if spec.system:
            args.append("--system")
        run_checked(as_root([*args, name]), f"Creating user {name}")

    def modify_user(self, name: str, changes: dict[str, str]) -> None:
        """Apply usermod options.

        Args:
            name: User name.
            changes: usermod long options (without dashes) to their values,
                     e.g. {"shell": "/bin/zsh", "groups": "wheel,audio"}.
        """
        if not changes:
            return
        args = ["usermod"]
        for option, value in changes.items():
            args += [f"--{option}", value]
        run_checked(as_root([*args, name]), f"Modifying user {name}")

    def delete_user(self, name: str) -> None:
        """Delete a user; the home directory is kept."""
        run_checked(as_root(["userdel", name]), f"Deleting user {name}")
