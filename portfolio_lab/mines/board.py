"""Board grids: mine placement and adjacency counts.

A board is an ``(height, width)`` int array indexed ``[y, x]``; ``MINE``
(-1) marks a mine and every other cell holds its 8-neighbour mine count.
Every structural change is followed by a full recount rather than an
incremental update.
"""

from __future__ import annotations

import numpy as np

from portfolio_lab.config.constants import MINE, NEIGHBOR_OFFSETS
from portfolio_lab.mines.seed import MinePosition, MineSeed


def in_bounds(cells: np.ndarray, x: int, y: int) -> bool:
    height, width = cells.shape
    return 0 <= x < width and 0 <= y < height


def neighbors(cells: np.ndarray, x: int, y: int) -> list[tuple[int, int]]:
    """Return in-bounds (x, y) cells of the 8-neighbourhood."""
    return [
        (x + dx, y + dy) for dx, dy in NEIGHBOR_OFFSETS if in_bounds(cells, x + dx, y + dy)
    ]


def count_adjacent_mines(cells: np.ndarray, x: int, y: int) -> int:
    """Count mines among the up-to-8 neighbours of ``(x, y)``."""
    return sum(1 for nx_, ny_ in neighbors(cells, x, y) if cells[ny_, nx_] == MINE)


def compute_adjacency(cells: np.ndarray) -> np.ndarray:
    """Return a copy of *cells* with every non-mine cell recounted."""
    result = cells.copy()
    height, width = cells.shape
    for y in range(height):
        for x in range(width):
            if cells[y, x] != MINE:
                result[y, x] = count_adjacent_mines(cells, x, y)
    return result


def place_mines(width: int, height: int, mines: tuple[MinePosition, ...]) -> np.ndarray:
    """Return a grid with mines placed and adjacency counted.

    Positions outside the grid (including negative ones) are ignored.
    """
    cells = np.zeros((height, width), dtype=int)
    for row, col in mines:
        if 0 <= row < height and 0 <= col < width:
            cells[row, col] = MINE
    return compute_adjacency(cells)


def board_from_seed(seed: MineSeed) -> np.ndarray:
    return place_mines(seed.width, seed.height, seed.mines)


def mine_positions(cells: np.ndarray) -> tuple[MinePosition, ...]:
    """Return (row, col) of every mine in row-major order."""
    rows, cols = np.nonzero(cells == MINE)
    return tuple((int(r), int(c)) for r, c in zip(rows, cols, strict=True))


def seed_from_board(cells: np.ndarray) -> MineSeed:
    height, width = cells.shape
    return MineSeed(width=width, height=height, mines=mine_positions(cells))


def toggle_mine(cells: np.ndarray, x: int, y: int) -> tuple[np.ndarray, bool]:
    """Flip ``(x, y)`` between mine and safe and recount the whole board.

    Returns the new grid and whether the cell is now a mine. The input grid
    is left untouched.
    """
    toggled = cells.copy()
    now_mine = bool(toggled[y, x] != MINE)
    toggled[y, x] = MINE if now_mine else 0
    return compute_adjacency(toggled), now_mine
