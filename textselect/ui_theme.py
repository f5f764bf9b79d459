"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the picker chrome: cursor row, selected rows,
truncation marker, and status bar. Cursor and selection attributes are
combined on the same row, so each must stay meaningful on its own.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    cursor: str
    selected: str
    truncation_marker: str
    status: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    cursor="\033[7m",
    selected="\033[1;38;5;81m",
    truncation_marker="\033[2m",
    status="\033[7m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    cursor="\033[48;5;24m",
    selected="\033[1;38;5;45m",
    truncation_marker="\033[2;38;5;110m",
    status="\033[38;5;153;48;5;17m",
)

# Attribute-only palette for --no-color: still distinguishes cursor and selection.
PLAIN_THEME = UITheme(
    name="plain",
    reset="\033[0m",
    cursor="\033[7m",
    selected="\033[1m",
    truncation_marker="",
    status="\033[7m",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
