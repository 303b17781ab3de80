"""Smoke tests for the matplotlib preview renderers."""

from __future__ import annotations

from pathlib import Path

import pytest

from portfolio_lab.config.types import CurveConfig
from portfolio_lab.econ.box import EdgeworthBox
from portfolio_lab.econ.utility import Agent
from portfolio_lab.mines.game import MinesweeperGame
from portfolio_lab.mines.seed import MineSeed
from portfolio_lab.viz.render import board_to_text, render_board, render_edgeworth_box
from portfolio_lab.viz.theme import DEFAULT_THEME, PAPER_THEME, get_theme


def _game() -> MinesweeperGame:
    return MinesweeperGame.from_seed(MineSeed(width=4, height=3, mines=((0, 0), (2, 3))))


class TestBoardText:
    def test_hidden_board(self) -> None:
        assert board_to_text(_game()) == "# # # #\n# # # #\n# # # #"

    def test_reveal_all(self) -> None:
        assert board_to_text(_game(), reveal_all=True) == "* 1 . .\n1 1 1 1\n. . 1 *"

    def test_flags_and_partial_reveal(self) -> None:
        game = _game()
        game.toggle_flag(0, 0)
        game.reveal(1, 1)
        assert board_to_text(game) == "F # # #\n# 1 # #\n# # # #"


class TestEdgeworthRender:
    def test_writes_image(self, tmp_path: Path) -> None:
        box = EdgeworthBox(Agent("x * y", (3.0, 7.0)), Agent("ln(x) + ln(y)", (5.0, 2.0)))
        output = render_edgeworth_box(
            box,
            tmp_path / "plots" / "box.png",
            extra_levels={1: [10.0], 2: [1.0]},
            config=CurveConfig(steps=8),
        )
        assert output.exists()
        assert output.stat().st_size > 0

    def test_undrawable_curve_is_skipped(self, tmp_path: Path) -> None:
        box = EdgeworthBox(Agent("not valid +", (5.0, 5.0)), Agent())
        output = render_edgeworth_box(box, tmp_path / "box.png", config=CurveConfig(steps=6))
        assert output.exists()

    def test_rejects_path_outside_base_dir(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="escapes"):
            render_edgeworth_box(EdgeworthBox(), Path("../box.png"), base_dir=tmp_path)


class TestBoardRender:
    def test_writes_image(self, tmp_path: Path) -> None:
        game = _game()
        game.reveal(3, 0)
        output = render_board(game, tmp_path / "board.png", theme=PAPER_THEME)
        assert output.exists()

    def test_reveal_all_after_loss(self, tmp_path: Path) -> None:
        game = _game()
        game.toggle_flag(1, 0)
        game.reveal(0, 0)
        output = render_board(game, tmp_path / "lost.png", reveal_all=True)
        assert output.exists()


class TestTheme:
    def test_lookup_is_case_insensitive(self) -> None:
        assert get_theme("Paper") is PAPER_THEME
        assert get_theme("default") is DEFAULT_THEME

    def test_unknown_theme(self) -> None:
        with pytest.raises(ValueError, match="Unknown theme"):
            get_theme("neon")

    def test_number_colors_cover_all_counts(self) -> None:
        assert len(DEFAULT_THEME.number_colors) == 9
