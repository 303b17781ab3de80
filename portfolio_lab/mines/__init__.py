"""Minesweeper engine: seeds, board grids, and the reveal state machine."""

from portfolio_lab.mines.board import (
    board_from_seed,
    compute_adjacency,
    count_adjacent_mines,
    mine_positions,
    place_mines,
    seed_from_board,
    toggle_mine,
)
from portfolio_lab.mines.game import MinesweeperGame
from portfolio_lab.mines.seed import (
    MineSeed,
    SeedDecodeError,
    decode_seed,
    detect_preset,
    encode_seed,
    generate_random_seed,
    load_seed,
    resolve_preset,
    seed_from_url,
    seed_url,
)

__all__ = [
    "MineSeed",
    "MinesweeperGame",
    "SeedDecodeError",
    "board_from_seed",
    "compute_adjacency",
    "count_adjacent_mines",
    "decode_seed",
    "detect_preset",
    "encode_seed",
    "generate_random_seed",
    "load_seed",
    "mine_positions",
    "place_mines",
    "resolve_preset",
    "seed_from_board",
    "seed_from_url",
    "seed_url",
    "toggle_mine",
]
