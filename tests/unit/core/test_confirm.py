"""Unit tests for the confirmation policy."""

from unittest.mock import MagicMock, patch

import pytest

from reprosetup.core.confirm import ConfirmationPolicy, ConfirmMode
from reprosetup.core.errors import ConfigError


class TestConfirmMode:
    """Tests for resolving the mode from command line flags."""

    @pytest.mark.parametrize(
        ("yes", "no", "expected"),
        [
            (True, False, ConfirmMode.AUTO_YES),
            (False, True, ConfirmMode.AUTO_NO),
            (False, False, ConfirmMode.INTERACTIVE),
        ],
    )
    def test_from_flags(self, yes: bool, no: bool, expected: ConfirmMode) -> None:
        """Each flag combination maps to one mode."""
        assert ConfirmMode.from_flags(yes, no) == expected

    def test_both_flags_rejected(self) -> None:
        """--yes and --no together are a configuration error."""
        with pytest.raises(ConfigError, match="mutually exclusive"):
            ConfirmMode.from_flags(True, True)


class TestConfirmationPolicy:
    """Tests for ConfirmationPolicy.resolve()."""

    def test_auto_yes_never_asks(self) -> None:
        """AUTO_YES accepts without calling the question function."""
        ask = MagicMock()
        policy = ConfirmationPolicy(ConfirmMode.AUTO_YES, ask=ask)

        assert policy.resolve("Remove web?") is True
        ask.assert_not_called()

    def test_auto_no_never_asks(self) -> None:
        """AUTO_NO declines without calling the question function."""
        ask = MagicMock()
        policy = ConfirmationPolicy(ConfirmMode.AUTO_NO, ask=ask)

        assert policy.resolve("Remove web?") is False
        ask.assert_not_called()

    @pytest.mark.parametrize("answer", [True, False])
    def test_interactive_uses_answer(self, answer: bool) -> None:
        """INTERACTIVE returns what the operator answered."""
        ask = MagicMock(return_value=answer)
        policy = ConfirmationPolicy(ConfirmMode.INTERACTIVE, ask=ask)

        assert policy.resolve("Remove web?") is answer
        ask.assert_called_once_with("Remove web?")

    def test_interactive_default_prompt(self) -> None:
        """Without an injected function the typer prompt is used."""
        policy = ConfirmationPolicy(ConfirmMode.INTERACTIVE)
        with patch("reprosetup.core.confirm.typer.confirm", return_value=True) as mock_confirm:
            assert policy.resolve("Add vim?") is True

        mock_confirm.assert_called_once()
        assert mock_confirm.call_args[0][0] == "Add vim?"
