"""Configuration layer: constants and typed config dataclasses."""

from portfolio_lab.config.constants import (
    CURVE_STEPS,
    CURVE_TOLERANCE,
    DEFAULT_PRESET,
    DEFAULT_UTILITY_FUNCTION,
    DOMAIN_EPSILON,
    MAX_BOARD_CELLS,
    MIN_ENDOWMENT,
    MINE,
    SEED_QUERY_PARAM,
)
from portfolio_lab.config.types import (
    PRESETS,
    BoardPreset,
    CurveConfig,
    GameMode,
    GameState,
)

__all__ = [
    "BoardPreset",
    "CURVE_STEPS",
    "CURVE_TOLERANCE",
    "CurveConfig",
    "DEFAULT_PRESET",
    "DEFAULT_UTILITY_FUNCTION",
    "DOMAIN_EPSILON",
    "GameMode",
    "GameState",
    "MAX_BOARD_CELLS",
    "MIN_ENDOWMENT",
    "MINE",
    "PRESETS",
    "SEED_QUERY_PARAM",
]
