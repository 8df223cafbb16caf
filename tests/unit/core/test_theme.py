"""Unit tests for console theme loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from reprosetup.core.theme import Palette, ThemeFile, build_theme, load_theme_file
from reprosetup.models.plan import Action


class TestPalette:
    """Tests for color validation."""

    def test_accepts_short_and_long_hex(self) -> None:
        """#RGB and #RRGGBB are both valid."""
        palette = Palette(text="#abc", header="#123456")

        assert palette.text == "#abc"
        assert palette.header == "#123456"

    @pytest.mark.parametrize("value", ["ffffff", "#ff", "#fffffff", "#gggggg"])
    def test_rejects_invalid_colors(self, value: str) -> None:
        """Anything else is rejected."""
        with pytest.raises(ValidationError, match="RRGGBB"):
            Palette(text=value)


class TestLoadThemeFile:
    """Tests for load_theme_file()."""

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        """No theme file means the built-in colors."""
        theme_file = load_theme_file(tmp_path / "theme.toml")

        assert theme_file == ThemeFile()

    def test_overrides(self, tmp_path: Path) -> None:
        """Colors and action colors can be overridden separately."""
        path = tmp_path / "theme.toml"
        path.write_text('[colors]\nheader = "#88c0d0"\n\n[actions]\nrecreate = "#ff00ff"\n')

        theme_file = load_theme_file(path)

        assert theme_file.colors.header == "#88c0d0"
        assert theme_file.colors.error == Palette().error
        assert theme_file.action_color(Action.RECREATE) == "#ff00ff"
        assert theme_file.action_color(Action.CREATE) == "#c1ff62"

    @pytest.mark.parametrize(
        "content",
        ['[colors\nheader = "#fff"', '[colors]\nheader = "white"\n', '[actions]\nrebuild = "#fff"\n'],
    )
    def test_broken_file_falls_back(self, tmp_path: Path, content: str) -> None:
        """Unparsable or invalid theme files are ignored."""
        path = tmp_path / "theme.toml"
        path.write_text(content)

        assert load_theme_file(path) == ThemeFile()


class TestBuildTheme:
    """Tests for build_theme()."""

    def test_every_action_has_a_style(self) -> None:
        """Tables can style any action by its value."""
        theme = build_theme(ThemeFile())

        for action in Action:
            assert f"action.{action.value}" in theme.styles

    def test_delete_is_bold(self) -> None:
        """Deletions are emphasized."""
        theme = build_theme(ThemeFile())

        assert theme.styles["action.delete"].bold is True
        assert theme.styles["bold_header"].bold is True
