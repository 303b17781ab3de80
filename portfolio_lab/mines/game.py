"""Minesweeper play/edit state machine with flood-fill reveal.

State moves ``READY -> PLAYING -> {WON, LOST}``; the terminal states accept
no further reveals or flags. Mutators return ``True`` when applied and
``False`` when rejected, and never raise for out-of-bounds coordinates.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from random import Random

import numpy as np

from portfolio_lab.config.constants import DEFAULT_PRESET, MINE
from portfolio_lab.config.types import BoardPreset, GameMode, GameState
from portfolio_lab.mines.board import (
    board_from_seed,
    in_bounds,
    neighbors,
    seed_from_board,
    toggle_mine,
)
from portfolio_lab.mines.seed import (
    MineSeed,
    detect_preset,
    encode_seed,
    generate_random_seed,
    load_seed,
    resolve_preset,
)

logger = logging.getLogger(__name__)


@dataclass
class MinesweeperGame:
    """Board plus the parallel revealed/flagged grids and game status."""

    board: np.ndarray  # (height, width), MINE or adjacency count
    revealed: np.ndarray  # (height, width) bool
    flagged: np.ndarray  # (height, width) bool
    seed: MineSeed
    mine_count: int
    mode: GameMode = GameMode.PLAY
    state: GameState = GameState.READY
    preset: str | None = None

    @classmethod
    def from_seed(cls, seed: MineSeed, mode: GameMode = GameMode.PLAY) -> MinesweeperGame:
        """Build a fresh game for *seed*; the mine counter is ``len(seed.mines)``."""
        board = board_from_seed(seed)
        return cls(
            board=board,
            revealed=np.zeros(board.shape, dtype=bool),
            flagged=np.zeros(board.shape, dtype=bool),
            seed=seed,
            mine_count=seed.mine_count,
            mode=mode,
            preset=detect_preset(seed),
        )

    @classmethod
    def from_encoded(cls, encoded: str | None, rng: Random | None = None) -> MinesweeperGame:
        """Build a game from a share-URL seed, self-healing bad input."""
        return cls.from_seed(load_seed(encoded, rng))

    @classmethod
    def create(
        cls, preset: str | BoardPreset = DEFAULT_PRESET, rng: Random | None = None
    ) -> MinesweeperGame:
        return cls.from_seed(generate_random_seed(preset, rng))

    # -- derived views -----------------------------------------------------

    @property
    def width(self) -> int:
        return int(self.board.shape[1])

    @property
    def height(self) -> int:
        return int(self.board.shape[0])

    @property
    def encoded_seed(self) -> str:
        return encode_seed(self.seed)

    @property
    def flag_count(self) -> int:
        return int(self.flagged.sum())

    @property
    def remaining_mines(self) -> int:
        """Mine counter shown while playing: mines minus flags placed."""
        return self.mine_count - self.flag_count

    def hidden_safe_cells(self) -> int:
        return int(np.count_nonzero(~self.revealed & (self.board != MINE)))

    # -- mode and lifecycle ------------------------------------------------

    def set_mode(self, mode: GameMode) -> None:
        """Switch play/edit; revealed and flagged grids are kept."""
        self.mode = mode

    def toggle_mode(self) -> GameMode:
        self.mode = GameMode.EDIT if self.mode == GameMode.PLAY else GameMode.PLAY
        return self.mode

    def reset(self) -> None:
        """Hide every cell and clear flags, keeping the current layout."""
        self.revealed = np.zeros(self.board.shape, dtype=bool)
        self.flagged = np.zeros(self.board.shape, dtype=bool)
        self.state = GameState.READY

    def new_board(self, preset: str, rng: Random | None = None) -> None:
        """Replace the layout with a random board for *preset*."""
        config = resolve_preset(preset)
        seed = generate_random_seed(config, rng)
        self.board = board_from_seed(seed)
        self.seed = seed
        self.mine_count = seed.mine_count
        self.preset = preset
        self.reset()

    # -- play --------------------------------------------------------------

    def reveal(self, x: int, y: int) -> bool:
        """Reveal ``(x, y)``, flood-filling from zero cells."""
        if self.mode != GameMode.PLAY or self.state.is_terminal:
            return False
        if not in_bounds(self.board, x, y):
            return False
        if self.revealed[y, x] or self.flagged[y, x]:
            return False

        if self.board[y, x] == MINE:
            self.revealed[y, x] = True
            self.revealed[self.board == MINE] = True
            self.state = GameState.LOST
            logger.debug("mine hit at (%s, %s)", x, y)
            return True

        self.revealed[y, x] = True
        if self.board[y, x] == 0:
            self._flood_fill(x, y)

        self.state = GameState.PLAYING
        if self.hidden_safe_cells() == 0 and self.mine_count > 0:
            self.state = GameState.WON
        return True

    def _flood_fill(self, x: int, y: int) -> None:
        """Breadth-first reveal from a zero cell; flags block the fill."""
        queue: deque[tuple[int, int]] = deque([(x, y)])
        visited = {(x, y)}
        while queue:
            cx, cy = queue.popleft()
            for nx_, ny_ in neighbors(self.board, cx, cy):
                if (nx_, ny_) in visited:
                    continue
                if self.revealed[ny_, nx_] or self.flagged[ny_, nx_]:
                    continue
                visited.add((nx_, ny_))
                self.revealed[ny_, nx_] = True
                if self.board[ny_, nx_] == 0:
                    queue.append((nx_, ny_))

    def toggle_flag(self, x: int, y: int) -> bool:
        if self.mode != GameMode.PLAY or self.state.is_terminal:
            return False
        if not in_bounds(self.board, x, y) or self.revealed[y, x]:
            return False
        self.flagged[y, x] = not self.flagged[y, x]
        return True

    # -- edit --------------------------------------------------------------

    def toggle_mine(self, x: int, y: int) -> bool:
        """Edit mode only: flip a cell's mine status and re-serialise the seed."""
        if self.mode != GameMode.EDIT or not in_bounds(self.board, x, y):
            return False
        self.board, now_mine = toggle_mine(self.board, x, y)
        self.mine_count += 1 if now_mine else -1
        self.seed = seed_from_board(self.board)
        return True
