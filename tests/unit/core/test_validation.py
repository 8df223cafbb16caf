"""Unit tests for account validation rules."""

import pytest

from reprosetup.core.errors import ValidationError
from reprosetup.core.validation import validate_id, validate_name, validate_shell


class TestValidateName:
    """Tests for validate_name()."""

    @pytest.mark.parametrize("name", ["alice", "_svc", "build-bot", "web_01", "host$"])
    def test_valid_names(self, name: str) -> None:
        """Portable names pass."""
        validate_name(name)

    @pytest.mark.parametrize("name", ["Alice", "1user", "-dash", "us er", "a$b", ""])
    def test_invalid_names(self, name: str) -> None:
        """Names outside the portable pattern are rejected."""
        with pytest.raises(ValidationError, match="must match"):
            validate_name(name)

    def test_too_long(self) -> None:
        """Names longer than 32 characters are rejected."""
        with pytest.raises(ValidationError, match="longer than 32"):
            validate_name("a" * 33)

    def test_error_carries_key(self) -> None:
        """The failing key is available on the exception."""
        with pytest.raises(ValidationError) as exc_info:
            validate_name("Bad")

        assert exc_info.value.key == "Bad"


class TestValidateId:
    """Tests for validate_id()."""

    def test_unset_id_passes(self) -> None:
        """An unmanaged id is never checked."""
        validate_id("alice", "uid", None, 1000, 60000)

    @pytest.mark.parametrize("value", [1000, 30000, 60000])
    def test_inside_range(self, value: int) -> None:
        """Bounds are inclusive."""
        validate_id("alice", "uid", value, 1000, 60000)

    @pytest.mark.parametrize("value", [0, 999, 60001])
    def test_outside_range(self, value: int) -> None:
        """Ids outside the range are rejected."""
        with pytest.raises(ValidationError, match="outside the allowed range"):
            validate_id("alice", "uid", value, 1000, 60000)


class TestValidateShell:
    """Tests for validate_shell()."""

    def test_listed_shell(self) -> None:
        """Shells in the list pass."""
        validate_shell("alice", "/bin/bash", {"/bin/bash", "/bin/zsh"})

    def test_unlisted_shell(self) -> None:
        """Other shells are rejected."""
        with pytest.raises(ValidationError, match="not listed"):
            validate_shell("alice", "/bin/fish", {"/bin/bash"})

    def test_unset_shell(self) -> None:
        """An unmanaged shell passes."""
        validate_shell("alice", None, set())

    def test_empty_list_rejects_shell(self) -> None:
        """An empty shells list cannot vouch for any shell."""
        with pytest.raises(ValidationError, match="no valid login shells could be read from /etc/shells"):
            validate_shell("alice", "/bin/bash", set())
