"""Browser color theme.

Colors are grouped by the part of the screen they paint: tree rows, the
status line, and the panel chrome around them. The bundled
``treerm/data/theme.toml`` is merged section by section with the user's
``~/.config/treerm/theme.toml``.
"""

import functools
import logging
import tomllib
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError
from rich.theme import Theme

from treerm.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

HexColor = Annotated[
    str,
    StringConstraints(strip_whitespace=True, pattern=r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"),
]


class _Colors(BaseModel):
    model_config = ConfigDict(extra="forbid")


class TreeColors(_Colors):
    """Tree rows: entry names by kind, connector guides, selection and cursor."""

    directory: HexColor = "#69B9A1"
    file: HexColor = "#ffffff"
    symlink: HexColor = "#d44ebc"
    guide: HexColor = "#636e72"
    selected: HexColor = "#f53263"
    cursor: HexColor = "#0ec1c8"


class StatusColors(_Colors):
    """Status line and one-off CLI messages."""

    ok: HexColor = "#03b971"
    error: HexColor = "#f53263"
    warning: HexColor = "#f5b332"
    info: HexColor = "#0ec1c8"
    muted: HexColor = "#b2bec3"


class ChromeColors(_Colors):
    """Panel title, border and the key help bar."""

    title: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    key: HexColor = "#0e8ac8"


class BrowserTheme(_Colors):
    """All browser colors, one table per screen area."""

    tree: Annotated[TreeColors, Field(default_factory=TreeColors)]
    status: Annotated[StatusColors, Field(default_factory=StatusColors)]
    chrome: Annotated[ChromeColors, Field(default_factory=ChromeColors)]

    def styles(self) -> dict[str, str]:
        """Rich style definitions keyed by the names the renderer uses."""
        tree, status, chrome = self.tree, self.status, self.chrome
        return {
            "tree.directory": f"bold {tree.directory}",
            "tree.file": tree.file,
            "tree.symlink": f"italic {tree.symlink}",
            "tree.guide": tree.guide,
            "tree.selected": f"bold {tree.selected}",
            "tree.cursor": f"reverse {tree.cursor}",
            "status.ok": status.ok,
            "status.error": f"bold {status.error}",
            "success": status.ok,
            "error": f"bold {status.error}",
            "warning": status.warning,
            "info": status.info,
            "muted": status.muted,
            "title": f"bold {chrome.title}",
            "border": chrome.border,
            "key": f"bold {chrome.key}",
            "key.danger": f"bold {status.error}",
        }

    def to_rich(self) -> Theme:
        return Theme(self.styles())


def _read_sections(source: Traversable | Path) -> dict[str, dict[str, object]]:
    """Read the color tables of a theme file. Missing or broken files yield {}."""
    try:
        with source.open("rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.warning("Ignoring theme file %s: %s", source, e)
        return {}
    return {name: table for name, table in data.items() if isinstance(table, dict)}


def load_browser_theme(user_path: Path | None = None) -> BrowserTheme:
    """Merge the bundled theme with the user's overrides.

    Any subset of colors may be overridden. An invalid user theme is
    logged and the built-in colors are used instead.

    Args:
        user_path: User theme file. Defaults to the XDG theme path.

    Returns:
        Validated BrowserTheme.
    """
    bundled = _read_sections(resources.files("treerm.data").joinpath("theme.toml"))
    user = _read_sections(user_path or get_user_theme_path())

    merged = {
        section: {**bundled.get(section, {}), **user.get(section, {})}
        for section in bundled.keys() | user.keys()
    }
    try:
        return BrowserTheme.model_validate(merged)
    except ValidationError as e:
        logger.warning("Invalid theme, using built-in colors: %s", e)
        return BrowserTheme()


@functools.cache
def get_theme() -> Theme:
    """Rich theme shared by the CLI consoles, loaded once per process."""
    return load_browser_theme().to_rich()
