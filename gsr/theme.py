"""Shared visual constants and helpers for the gsr summary table."""

from __future__ import annotations

from rich.style import Style
from rich.text import Text

# ── Color Palette (GitHub Dark) ─────────────────────────────────────────

SURFACE = "#161b22"
MUTED = "#8b949e"

CYAN = "#58a6ff"
YELLOW = "#e3b341"
RED = "#f85149"
PURPLE = "#bc8cff"

# Per-flag colors
FLAG_COLORS = {
    "dirty": RED,
    "ahead": YELLOW,
    "behind": PURPLE,
}

ICON_YES = "●"
ICON_NO = "·"


def flag_cell(name: str, value: bool) -> Text:
    """Render one repository flag as a colored dot, or a muted one when unset."""
    if value:
        return Text(ICON_YES, style=Style(color=FLAG_COLORS.get(name, CYAN), bold=True))
    return Text(ICON_NO, style=Style(color=MUTED))


def render_title(matched: int, total: int) -> Text:
    """Render the summary heading, e.g. ``3 of 12 repositories``."""
    text = Text()
    text.append(f"{matched}", style=Style(color=CYAN, bold=True))
    text.append(" of ", style=Style(color=MUTED))
    text.append(f"{total}", style=Style(color=CYAN, bold=True))
    text.append(" repositories", style=Style(color=MUTED))
    return text
