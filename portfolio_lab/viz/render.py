"""Matplotlib previews of the Edgeworth box and Minesweeper boards.

These are developer previews for the CLI; the site draws its own widgets.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
from matplotlib.colors import BoundaryNorm, ListedColormap  # noqa: E402
from matplotlib.patches import Rectangle  # noqa: E402

from portfolio_lab.config.constants import MINE  # noqa: E402
from portfolio_lab.config.types import CurveConfig  # noqa: E402
from portfolio_lab.econ.box import EdgeworthBox  # noqa: E402
from portfolio_lab.econ.curves import curve_is_drawable  # noqa: E402
from portfolio_lab.io.paths import prepare_output_path  # noqa: E402
from portfolio_lab.mines.game import MinesweeperGame  # noqa: E402
from portfolio_lab.viz.theme import DEFAULT_THEME, Theme  # noqa: E402

# Cell fill codes for the board image
_HIDDEN = 0
_REVEALED = 1
_MINE_SHOWN = 2

# ---------------------------------------------------------------------------
# Edgeworth box
# ---------------------------------------------------------------------------


def render_edgeworth_box(
    box: EdgeworthBox,
    output_path: Path,
    *,
    extra_levels: dict[int, list[float]] | None = None,
    config: CurveConfig | None = None,
    base_dir: Path | None = None,
    theme: Theme = DEFAULT_THEME,
) -> Path:
    """Draw both agents' curves through the endowment, plus optional extra levels.

    Agent 1's axes run from the bottom-left corner; agent 2's secondary axes
    run from the top-right. Curves with fewer than two points are skipped.
    """
    output_path = prepare_output_path(output_path, base_dir)
    dims = box.dimensions
    width, height = dims.width, dims.height

    fig, ax = plt.subplots(figsize=(6, 6 * height / width))
    frame = Rectangle(
        (0, 0), width, height, fill=False, edgecolor=theme.box_edge_color, linewidth=1.5
    )
    ax.add_patch(frame)

    for index in (1, 2):
        color = theme.agent_colors[index - 1]
        levels: list[float | None] = [None]
        if extra_levels:
            levels.extend(extra_levels.get(index, []))
        for i, level in enumerate(levels):
            points = box.indifference_curve(index, level=level, config=config)
            if not curve_is_drawable(points):
                continue
            xs, ys = zip(*points, strict=True)
            ax.plot(
                xs,
                ys,
                color=color,
                linewidth=theme.curve_linewidth,
                linestyle="-" if i == 0 else "--",
                label=f"Agent {index}: {box.agent(index).utility_function}" if i == 0 else None,
            )

    ex, ey = box.endowment_point
    ax.scatter([ex], [ey], color=theme.endowment_color, zorder=3, label="Endowment")

    ax.set_xlim(0, width)
    ax.set_ylim(0, height)
    ax.set_aspect("equal")
    ax.set_xlabel("Agent 1: good 1")
    ax.set_ylabel("Agent 1: good 2")
    top = ax.secondary_xaxis("top", functions=(lambda v: width - v, lambda v: width - v))
    top.set_xlabel("Agent 2: good 1")
    right = ax.secondary_yaxis("right", functions=(lambda v: height - v, lambda v: height - v))
    right.set_ylabel("Agent 2: good 2")
    ax.legend(loc="lower center", bbox_to_anchor=(0.5, -0.3), fontsize=8)

    fig.savefig(output_path, bbox_inches="tight")
    plt.close(fig)
    return output_path


# ---------------------------------------------------------------------------
# Minesweeper
# ---------------------------------------------------------------------------


def _visible_codes(game: MinesweeperGame, reveal_all: bool) -> np.ndarray:
    shown = np.ones(game.board.shape, dtype=bool) if reveal_all else game.revealed
    codes = np.full(game.board.shape, _HIDDEN, dtype=int)
    codes[shown] = _REVEALED
    codes[shown & (game.board == MINE)] = _MINE_SHOWN
    return codes


def board_to_text(game: MinesweeperGame, reveal_all: bool = False) -> str:
    """ASCII view: ``#`` hidden, ``F`` flag, ``*`` mine, ``.`` empty, digits otherwise."""
    codes = _visible_codes(game, reveal_all)
    lines: list[str] = []
    for y in range(game.height):
        chars: list[str] = []
        for x in range(game.width):
            code = codes[y, x]
            if code == _HIDDEN:
                chars.append("F" if game.flagged[y, x] else "#")
            elif code == _MINE_SHOWN:
                chars.append("*")
            else:
                value = int(game.board[y, x])
                chars.append(str(value) if value > 0 else ".")
        lines.append(" ".join(chars))
    return "\n".join(lines)


def render_board(
    game: MinesweeperGame,
    output_path: Path,
    *,
    reveal_all: bool = False,
    base_dir: Path | None = None,
    theme: Theme = DEFAULT_THEME,
) -> Path:
    """Render the board as a PNG-style image with counts, flags, and mines."""
    output_path = prepare_output_path(output_path, base_dir)
    codes = _visible_codes(game, reveal_all)
    cmap = ListedColormap(
        [theme.hidden_cell_color, theme.revealed_cell_color, theme.mine_cell_color]
    )
    norm = BoundaryNorm([-0.5, 0.5, 1.5, 2.5], cmap.N)

    fig, ax = plt.subplots(figsize=(max(2.0, game.width * 0.35), max(2.0, game.height * 0.35)))
    ax.imshow(codes, cmap=cmap, norm=norm, origin="upper", aspect="equal")
    for x in range(game.width + 1):
        ax.axvline(x - 0.5, color=theme.grid_line_color, linewidth=0.5)
    for y in range(game.height + 1):
        ax.axhline(y - 0.5, color=theme.grid_line_color, linewidth=0.5)

    for y in range(game.height):
        for x in range(game.width):
            code = codes[y, x]
            if code == _HIDDEN and game.flagged[y, x]:
                ax.text(x, y, "F", ha="center", va="center", color=theme.flag_color, fontsize=8)
            elif code == _MINE_SHOWN:
                ax.text(x, y, "*", ha="center", va="center", color="black", fontsize=9)
            elif code == _REVEALED and game.board[y, x] > 0:
                value = int(game.board[y, x])
                ax.text(
                    x,
                    y,
                    str(value),
                    ha="center",
                    va="center",
                    color=theme.number_colors[value],
                    fontsize=8,
                    fontweight="bold",
                )

    ax.set_xticks([])
    ax.set_yticks([])
    ax.set_title(f"{game.width}x{game.height}, {game.mine_count} mines ({game.state.value})")
    fig.savefig(output_path, bbox_inches="tight")
    plt.close(fig)
    return output_path
