"""Configuration dataclasses and enums for the curve solver and board engine.

All frozen dataclasses that parameterise curve sampling and board presets
live here, next to the enums describing game mode and game state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from portfolio_lab.config.constants import (
    BISECTION_MAX_ITERATIONS,
    BISECTION_MIN_BRACKET,
    CURVE_STEPS,
    CURVE_TOLERANCE,
    EXHAUSTED_TOLERANCE_FACTOR,
)

__all__ = [
    "BoardPreset",
    "CurveConfig",
    "GameMode",
    "GameState",
    "PRESETS",
]

# ---------------------------------------------------------------------------
# Curve sampling
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CurveConfig:
    """Sampling and solver knobs for one indifference curve."""

    steps: int = CURVE_STEPS
    tolerance: float = CURVE_TOLERANCE
    max_iterations: int = BISECTION_MAX_ITERATIONS
    min_bracket: float = BISECTION_MIN_BRACKET
    exhausted_tolerance_factor: float = EXHAUSTED_TOLERANCE_FACTOR
    use_algebraic: bool = True

    def __post_init__(self) -> None:
        if self.steps < 1:
            raise ValueError("steps must be >= 1")
        if self.tolerance <= 0.0:
            raise ValueError("tolerance must be > 0")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        if self.min_bracket <= 0.0:
            raise ValueError("min_bracket must be > 0")
        if self.exhausted_tolerance_factor < 1.0:
            raise ValueError("exhausted_tolerance_factor must be >= 1.0")


# ---------------------------------------------------------------------------
# Minesweeper
# ---------------------------------------------------------------------------


class GameMode(Enum):
    """Interaction mode: play reveals and flags, edit toggles mines."""

    PLAY = "play"
    EDIT = "edit"


class GameState(Enum):
    """Reveal state machine. WON and LOST are terminal."""

    READY = "ready"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self in (GameState.WON, GameState.LOST)


@dataclass(frozen=True)
class BoardPreset:
    """Named board size with a fixed mine count."""

    width: int
    height: int
    mines: int

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("board dimensions must be >= 1x1")
        if not 0 <= self.mines <= self.width * self.height:
            raise ValueError("mines must be in [0, width * height]")


PRESETS: dict[str, BoardPreset] = {
    "beginner": BoardPreset(width=9, height=9, mines=10),
    "intermediate": BoardPreset(width=16, height=16, mines=40),
    "expert": BoardPreset(width=30, height=16, mines=99),
}
"""Standard presets, in selector order."""
