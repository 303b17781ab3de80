"""Visualization theme presets for the box and board preview renderers.

Themes are frozen dataclasses that group all styling constants together, so
renderers take a ``Theme`` instead of referencing module-level colours.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """Complete collection of visualization style tokens."""

    # Edgeworth box
    agent_colors: tuple[str, str] = ("tab:blue", "tab:red")
    box_edge_color: str = "#333333"
    endowment_color: str = "black"
    curve_linewidth: float = 1.8

    # Minesweeper board
    hidden_cell_color: str = "#D0D0D0"
    revealed_cell_color: str = "#FFFFFF"
    mine_cell_color: str = "#EF4444"
    flag_color: str = "#EF4444"
    grid_line_color: str = "#999999"
    # index = adjacency count; 0 is never drawn
    number_colors: tuple[str, ...] = (
        "",
        "#2563EB",
        "#16A34A",
        "#DC2626",
        "#9333EA",
        "#CA8A04",
        "#DB2777",
        "#111111",
        "#6B7280",
    )


DEFAULT_THEME = Theme()

PAPER_THEME = Theme(
    agent_colors=("#1f77b4", "#d62728"),
    box_edge_color="#000000",
    hidden_cell_color="#E0E0E0",
    mine_cell_color="#7f7f7f",
    flag_color="#d62728",
    grid_line_color="#BBBBBB",
)

REGISTERED_THEMES: dict[str, Theme] = {
    "default": DEFAULT_THEME,
    "paper": PAPER_THEME,
}


def get_theme(name: str) -> Theme:
    """Look up a theme by name (case-insensitive)."""
    key = name.lower()
    if key not in REGISTERED_THEMES:
        valid = ", ".join(sorted(REGISTERED_THEMES))
        raise ValueError(f"Unknown theme {name!r}; available: {valid}")
    return REGISTERED_THEMES[key]
