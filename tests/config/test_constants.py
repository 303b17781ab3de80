"""Tests for config constants and validated config types."""

from __future__ import annotations

import pytest

from portfolio_lab.config.constants import (
    BISECTION_MAX_ITERATIONS,
    BISECTION_MIN_BRACKET,
    CURVE_STEPS,
    CURVE_TOLERANCE,
    DOMAIN_EPSILON,
    MIN_ENDOWMENT,
    MINE,
    NEIGHBOR_OFFSETS,
)
from portfolio_lab.config.types import PRESETS, BoardPreset, CurveConfig, GameState


def test_endowment_floor_is_above_domain_epsilon() -> None:
    assert MIN_ENDOWMENT == 0.1
    assert DOMAIN_EPSILON < MIN_ENDOWMENT


def test_curve_defaults() -> None:
    assert CURVE_STEPS == 30
    assert BISECTION_MAX_ITERATIONS == 40
    assert BISECTION_MIN_BRACKET == 0.0001
    assert CURVE_TOLERANCE > 0


def test_mine_sentinel_is_negative() -> None:
    assert MINE == -1


def test_neighbor_offsets_cover_eight_cells() -> None:
    assert len(NEIGHBOR_OFFSETS) == 8
    assert len(set(NEIGHBOR_OFFSETS)) == 8
    assert (0, 0) not in NEIGHBOR_OFFSETS


def test_presets_match_standard_boards() -> None:
    assert PRESETS["beginner"] == BoardPreset(width=9, height=9, mines=10)
    assert PRESETS["intermediate"] == BoardPreset(width=16, height=16, mines=40)
    assert PRESETS["expert"] == BoardPreset(width=30, height=16, mines=99)
    assert list(PRESETS) == ["beginner", "intermediate", "expert"]


class TestValidation:
    def test_curve_config_rejects_zero_steps(self) -> None:
        with pytest.raises(ValueError, match="steps"):
            CurveConfig(steps=0)

    def test_curve_config_rejects_non_positive_tolerance(self) -> None:
        with pytest.raises(ValueError, match="tolerance"):
            CurveConfig(tolerance=0.0)

    def test_preset_rejects_too_many_mines(self) -> None:
        with pytest.raises(ValueError, match="mines"):
            BoardPreset(width=2, height=2, mines=5)

    def test_preset_rejects_empty_board(self) -> None:
        with pytest.raises(ValueError):
            BoardPreset(width=0, height=3, mines=0)


def test_terminal_states() -> None:
    assert GameState.WON.is_terminal
    assert GameState.LOST.is_terminal
    assert not GameState.READY.is_terminal
    assert not GameState.PLAYING.is_terminal
