"""Unit tests for distribution detection and the protected baseline."""

from pathlib import Path

import pytest

from reprosetup.core.baseline import get_protected_patterns, is_protected
from reprosetup.core.distro import check_distro, detect_distro, parse_os_release

FEDORA = 'NAME="Fedora Linux"\nID=fedora\nVERSION_ID=40\n'
UBUNTU = 'NAME="Ubuntu"\nID=ubuntu\nID_LIKE=debian\n'
POP = 'NAME="Pop!_OS"\nID=pop\nID_LIKE="ubuntu debian"\n'
ARCH = "NAME=Arch\nID=arch\n"


def os_release(tmp_path: Path, content: str) -> Path:
    path = tmp_path / "os-release"
    path.write_text(content)
    return path


class TestOsRelease:
    """Tests for os-release parsing."""

    def test_parse_strips_quotes_and_comments(self) -> None:
        """Values are unquoted; comments and blanks are skipped."""
        fields = parse_os_release('# comment\n\nNAME="Fedora Linux"\nID=fedora\n')

        assert fields == {"NAME": "Fedora Linux", "ID": "fedora"}

    @pytest.mark.parametrize(
        ("content", "expected"),
        [(FEDORA, "fedora"), (UBUNTU, "debian"), (POP, "debian"), (ARCH, None)],
    )
    def test_detect(self, tmp_path: Path, content: str, expected: str | None) -> None:
        """Families are derived from ID and ID_LIKE."""
        assert detect_distro(os_release(tmp_path, content)) == expected

    def test_detect_missing_file(self, tmp_path: Path) -> None:
        """An unreadable os-release yields None."""
        assert detect_distro(tmp_path / "missing") is None

    def test_check_mismatch_warns(self, tmp_path: Path) -> None:
        """A mismatch returns a message naming both families."""
        message = check_distro("fedora", os_release(tmp_path, UBUNTU))

        assert message is not None
        assert "fedora" in message
        assert "debian" in message

    def test_check_match_is_silent(self, tmp_path: Path) -> None:
        """A match or an undetectable system returns None."""
        assert check_distro("fedora", os_release(tmp_path, FEDORA)) is None
        assert check_distro("fedora", os_release(tmp_path, ARCH)) is None


class TestBaseline:
    """Tests for the protected package baseline."""

    @pytest.mark.parametrize("name", ["kernel-core", "glibc", "dnf", "systemd-udev", "bash", "sudo"])
    def test_fedora_core_is_protected(self, name: str) -> None:
        """Operating system packages are protected on Fedora."""
        assert is_protected(name, "fedora") is True

    @pytest.mark.parametrize("name", ["linux-image-generic", "apt", "libc6", "dpkg"])
    def test_debian_core_is_protected(self, name: str) -> None:
        """Operating system packages are protected on Debian."""
        assert is_protected(name, "debian") is True

    @pytest.mark.parametrize("name", ["vim", "htop", "git", "firefox"])
    def test_user_packages_are_not_protected(self, name: str) -> None:
        """Ordinary applications are not protected."""
        assert is_protected(name, "fedora") is False
        assert is_protected(name, "debian") is False

    def test_patterns_are_family_specific(self) -> None:
        """Fedora patterns do not apply on Debian."""
        assert "kernel*" in get_protected_patterns("fedora")
        assert "kernel*" not in get_protected_patterns("debian")
        assert is_protected("apt-utils", "fedora") is False
