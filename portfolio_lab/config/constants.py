"""Centralized domain constants for the curve solver and the board engine.

All magic numbers shared across modules are defined here. Consuming modules
should import from this module rather than defining their own inline literals.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Edgeworth box / utility evaluation
# ---------------------------------------------------------------------------

MIN_ENDOWMENT = 0.1
"""Lower clamp for every endowment coordinate."""

DOMAIN_EPSILON = 0.001
"""Coordinates at or below this are treated as non-positive by the evaluator.

Also the inset from each box edge used for curve sampling bounds.
"""

CURVE_STEPS = 30
"""Default number of x intervals for curve sampling (steps + 1 samples)."""

CURVE_TOLERANCE = 0.01
"""Default accepted residual |U - level| for the bisection tier."""

BISECTION_MAX_ITERATIONS = 40
"""Upper bound on bisection iterations per x sample."""

BISECTION_MIN_BRACKET = 0.0001
"""Bisection stops once the y bracket is narrower than this."""

EXHAUSTED_TOLERANCE_FACTOR = 10.0
"""Residual multiplier accepted when bisection runs out of iterations."""

DEFAULT_UTILITY_FUNCTION = "ln(x) + ln(y)"
"""Utility function used when none is supplied."""

# ---------------------------------------------------------------------------
# Minesweeper
# ---------------------------------------------------------------------------

MINE = -1
"""Board cell value marking a mine."""

DEFAULT_PRESET = "beginner"
"""Preset used for fresh boards and for self-healing a bad seed."""

SEED_QUERY_PARAM = "seed"
"""URL query parameter carrying the encoded board seed."""

NEIGHBOR_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)
)
"""(dx, dy) offsets of the 8-neighbourhood."""

MAX_BOARD_CELLS = 10_000
"""Largest width * height accepted from an encoded seed (100x100).

Decoded seeds above this are rejected so a shared link cannot request an
arbitrarily large grid; the expert preset uses 480 cells.
"""
