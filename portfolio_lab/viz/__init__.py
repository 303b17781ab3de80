"""Visualization layer: themes, preview renderers, and the CLI."""

from portfolio_lab.viz.cli import main
from portfolio_lab.viz.render import board_to_text, render_board, render_edgeworth_box
from portfolio_lab.viz.theme import (
    DEFAULT_THEME,
    PAPER_THEME,
    REGISTERED_THEMES,
    Theme,
    get_theme,
)

__all__ = [
    "DEFAULT_THEME",
    "PAPER_THEME",
    "REGISTERED_THEMES",
    "Theme",
    "board_to_text",
    "get_theme",
    "main",
    "render_board",
    "render_edgeworth_box",
]
