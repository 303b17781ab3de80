"""Agents, box dimensions, and the fail-soft utility evaluator."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from portfolio_lab.config.constants import (
    DEFAULT_UTILITY_FUNCTION,
    DOMAIN_EPSILON,
    MIN_ENDOWMENT,
)
from portfolio_lab.econ.expression import ExpressionError, evaluate, parse_expression

logger = logging.getLogger(__name__)

Point = tuple[float, float]


def clamp_endowment(value: float) -> float:
    """Clamp an endowment coordinate to ``MIN_ENDOWMENT`` (NaN clamps too)."""
    if math.isnan(value) or value < MIN_ENDOWMENT:
        return MIN_ENDOWMENT
    return float(value)


def parse_endowment_value(raw: object) -> float:
    """Coerce a user-entered endowment value, clamping to ``MIN_ENDOWMENT``.

    Zero, negative, and unparseable inputs all become ``MIN_ENDOWMENT``.
    """
    if isinstance(raw, bool):
        return MIN_ENDOWMENT
    if isinstance(raw, str):
        raw = raw.strip()
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return MIN_ENDOWMENT
    return clamp_endowment(value)


@dataclass(frozen=True)
class Agent:
    """One trader: a utility function over (good1, good2) and an endowment.

    The utility function is always written in the agent's own frame, with
    its origin at the agent's corner of the box.
    """

    utility_function: str = DEFAULT_UTILITY_FUNCTION
    endowment: Point = (5.0, 5.0)

    def __post_init__(self) -> None:
        x, y = self.endowment
        object.__setattr__(
            self, "endowment", (parse_endowment_value(x), parse_endowment_value(y))
        )

    def with_endowment(self, x: object = None, y: object = None) -> Agent:
        """Return a copy with updated endowment coordinates (``None`` keeps)."""
        new_x = self.endowment[0] if x is None else parse_endowment_value(x)
        new_y = self.endowment[1] if y is None else parse_endowment_value(y)
        return Agent(utility_function=self.utility_function, endowment=(new_x, new_y))

    def with_utility_function(self, utility_function: str) -> Agent:
        return Agent(utility_function=utility_function, endowment=self.endowment)


@dataclass(frozen=True)
class BoxDimensions:
    """Edgeworth box size: total holdings of each good."""

    width: float
    height: float

    def __post_init__(self) -> None:
        if not (self.width > 0 and self.height > 0):
            raise ValueError("box dimensions must be > 0")

    def reflect(self, point: Point) -> Point:
        """Map a point between agent 1's frame and agent 2's frame."""
        return (self.width - point[0], self.height - point[1])


def box_dimensions(agent1: Agent, agent2: Agent) -> BoxDimensions:
    """Sum both agents' endowments axis by axis."""
    return BoxDimensions(
        width=agent1.endowment[0] + agent2.endowment[0],
        height=agent1.endowment[1] + agent2.endowment[1],
    )


def evaluate_utility(
    utility_function: str,
    point: Point,
    *,
    is_agent2: bool = False,
    box: BoxDimensions | None = None,
) -> float:
    """Return U(x, y), or 0.0 if the function cannot be evaluated there.

    With ``is_agent2`` the box-coordinate *point* is first reflected into
    agent 2's frame, which requires *box*. Points with a coordinate at or
    below ``DOMAIN_EPSILON`` score 0.0, as does any parse error, domain
    error, division by zero, overflow, or non-finite result.
    """
    if is_agent2:
        if box is None:
            raise ValueError("box is required to evaluate agent 2's utility")
        point = box.reflect(point)
    x, y = point
    if x <= DOMAIN_EPSILON or y <= DOMAIN_EPSILON:
        return 0.0
    try:
        value = evaluate(parse_expression(utility_function), x, y)
    except (ExpressionError, ArithmeticError, ValueError, RecursionError) as exc:
        logger.debug("utility %r undefined at (%s, %s): %s", utility_function, x, y, exc)
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value
