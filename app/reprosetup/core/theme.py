"""Console styles for reprosetup.

Defaults can be overridden from ~/.config/reprosetup/theme.toml::

    [colors]
    header = "#88c0d0"

    [actions]
    recreate = "#ff00ff"

Every plan action gets an ``action.<name>`` style, so tables and summaries
can style an action by its value alone.
"""

import logging
import re
import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError
from rich.theme import Theme

from reprosetup.core.paths import get_theme_path
from reprosetup.models.plan import Action

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")


def _hex_color(value: str) -> str:
    value = value.strip()
    if not _HEX_COLOR.match(value):
        msg = f"'{value}' is not a #RGB or #RRGGBB color"
        raise ValueError(msg)
    return value


HexColor = Annotated[str, AfterValidator(_hex_color)]


class Palette(BaseModel):
    """General purpose colors."""

    model_config = ConfigDict(extra="forbid")

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"


def _default_action_colors() -> dict[Action, str]:
    return {
        Action.SKIP: "#b2bec3",
        Action.CREATE: "#c1ff62",
        Action.UPDATE: "#0e8ac8",
        Action.RECREATE: "#d44ebc",
        Action.DELETE: "#f53263",
        Action.ADOPT: "#faf870",
    }


class ThemeFile(BaseModel):
    """Parsed theme.toml."""

    model_config = ConfigDict(extra="forbid")

    colors: Palette = Field(default_factory=Palette)
    actions: dict[Action, HexColor] = Field(default_factory=_default_action_colors)

    def action_color(self, action: Action) -> str:
        return self.actions.get(action) or _default_action_colors()[action]


def load_theme_file(path: Path | None = None) -> ThemeFile:
    """Read theme overrides, falling back to the defaults on any problem.

    A broken theme file never stops a run: it is reported as a warning and
    the built-in colors are used.
    """
    path = path or get_theme_path()
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return ThemeFile()
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return ThemeFile()

    try:
        return ThemeFile.model_validate(data)
    except ValidationError as e:
        logger.warning("Ignoring invalid theme file %s: %s", path, e)
        return ThemeFile()


def build_theme(theme_file: ThemeFile) -> Theme:
    colors = theme_file.colors
    styles = {
        "text": colors.text,
        "muted": colors.muted,
        "header": colors.header,
        "bold_header": f"bold {colors.header}",
        "border": colors.border,
        "success": colors.success,
        "warning": colors.warning,
        "error": f"bold {colors.error}",
        "info": colors.info,
    }
    for action in Action:
        style = theme_file.action_color(action)
        # Deletions stand out in plan tables
        styles[f"action.{action.value}"] = f"bold {style}" if action is Action.DELETE else style
    return Theme(styles)


_cached_theme: Theme | None = None


def get_theme() -> Theme:
    """Return the Rich theme, loading it on first use."""
    global _cached_theme
    if _cached_theme is None:
        _cached_theme = build_theme(load_theme_file())
    return _cached_theme
