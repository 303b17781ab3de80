"""Indifference-curve sampling: algebraic solve with a bisection fallback.

For each x sample the solver first tries the closed-form branches of
``U(x, y) = level`` solved for ``y``; when no closed form is available, or a
branch cannot be evaluated at that x, it falls back to bisecting ``y``
inside the box. Failures are per sample: a sample that neither tier can
place is simply dropped, so curves may have gaps near the box edges.
"""

from __future__ import annotations

import cmath
import logging
import math

import numpy as np
import sympy

from portfolio_lab.config.constants import DOMAIN_EPSILON
from portfolio_lab.config.types import CurveConfig
from portfolio_lab.econ.expression import (
    ExpressionError,
    parse_expression,
    to_sympy,
    variables_in,
)
from portfolio_lab.econ.utility import BoxDimensions, Point, evaluate_utility

logger = logging.getLogger(__name__)

_X = sympy.Symbol("x", positive=True)
_Y = sympy.Symbol("y", positive=True)

# Imaginary parts below this (relative) are treated as round-off
_IMAG_TOLERANCE = 1e-9


def sample_x_values(width: float, steps: int) -> np.ndarray:
    """Return ``steps + 1`` evenly spaced x samples inside ``(0, width)``."""
    return np.linspace(DOMAIN_EPSILON, width - DOMAIN_EPSILON, steps + 1)


def curve_is_drawable(points: list[Point]) -> bool:
    """A polyline needs at least two points."""
    return len(points) >= 2


def _as_real(value: complex) -> float | None:
    if not cmath.isfinite(value):
        return None
    if abs(value.imag) > _IMAG_TOLERANCE * max(1.0, abs(value.real)):
        return None
    return value.real


class IndifferenceSolver:
    """Solve ``U(x, y) = level`` for y at arbitrary x, in the agent's own frame.

    The symbolic solve runs at most once per solver; ``branches`` is ``None``
    when it failed, in which case every x goes straight to bisection.
    """

    def __init__(
        self,
        utility_function: str,
        level: float,
        box: BoxDimensions,
        config: CurveConfig | None = None,
    ) -> None:
        self.utility_function = utility_function
        self.level = float(level)
        self.box = box
        self.config = config or CurveConfig()
        self.y_low = DOMAIN_EPSILON
        self.y_high = box.height - DOMAIN_EPSILON
        self._branches: list[sympy.Expr] | None = None
        self._solved = False

    @property
    def branches(self) -> list[sympy.Expr] | None:
        if not self._solved:
            self._solved = True
            if self.config.use_algebraic:
                self._branches = self._solve_symbolic()
        return self._branches

    def _solve_symbolic(self) -> list[sympy.Expr] | None:
        try:
            node = parse_expression(self.utility_function)
            if "y" not in variables_in(node):
                logger.debug("%r does not depend on y; bisecting", self.utility_function)
                return None
            expr = to_sympy(node, _X, _Y)
            level = (
                sympy.Integer(int(self.level))
                if self.level.is_integer()
                else sympy.Float(self.level)
            )
            # Float exponents stay floats; rationalising them stalls the solver
            solutions = sympy.solve(sympy.Eq(expr, level), _Y, rational=False)
        except Exception as exc:  # noqa: BLE001 - any solver failure means "use bisection"
            logger.debug("no closed form for %r = %s: %s", self.utility_function, self.level, exc)
            return None
        if not isinstance(solutions, list) or any(isinstance(s, dict) for s in solutions):
            logger.debug("unexpected solve result for %r: %r", self.utility_function, solutions)
            return None
        return solutions

    def _real_roots_at(self, branches: list[sympy.Expr], x: float) -> list[float]:
        roots: list[float] = []
        for branch in branches:
            value = _as_real(complex(branch.subs(_X, x).evalf()))
            if value is not None:
                roots.append(value)
        return roots

    def _bisect(self, x: float) -> float | None:
        cfg = self.config
        lo, hi = self.y_low, self.y_high
        mid = lo
        residual = math.inf
        for _ in range(cfg.max_iterations):
            if hi - lo < cfg.min_bracket:
                break
            mid = (lo + hi) / 2.0
            utility = evaluate_utility(self.utility_function, (x, mid))
            residual = abs(utility - self.level)
            if residual < cfg.tolerance:
                return mid
            # Assumes U(x, .) is increasing in y
            if utility < self.level:
                lo = mid
            else:
                hi = mid
        if residual < cfg.tolerance * cfg.exhausted_tolerance_factor:
            return mid
        return None

    def solve_at(self, x: float) -> float | None:
        """Return the y on the curve at *x*, or ``None`` when no point is found."""
        branches = self.branches
        if branches is not None:
            try:
                roots = self._real_roots_at(branches, x)
            except (TypeError, ValueError, ArithmeticError) as exc:
                logger.debug("closed form failed at x=%s, bisecting: %s", x, exc)
            else:
                for root in roots:
                    if self.y_low <= root <= self.y_high:
                        return root
                return None
        return self._bisect(x)


def sample_indifference_curve(
    utility_function: str,
    level: float,
    box: BoxDimensions,
    *,
    is_agent2: bool = False,
    config: CurveConfig | None = None,
) -> list[Point]:
    """Sample the level set ``U = level`` as box-coordinate points.

    Points are ordered by increasing x in the agent's own frame; for agent 2
    they are reflected into box coordinates, so display x decreases. Unparseable
    functions yield an empty list.
    """
    config = config or CurveConfig()
    try:
        parse_expression(utility_function)
    except ExpressionError as exc:
        logger.debug("cannot sample %r: %s", utility_function, exc)
        return []

    solver = IndifferenceSolver(utility_function, level, box, config)
    points: list[Point] = []
    for x in sample_x_values(box.width, config.steps):
        x = float(x)
        y = solver.solve_at(x)
        if y is None:
            continue
        point = (x, y)
        points.append(box.reflect(point) if is_agent2 else point)
    return points


def solve_indifference_point(
    utility_function: str,
    level: float,
    x: float,
    box: BoxDimensions,
    config: CurveConfig | None = None,
) -> float | None:
    """Solve a single x sample in the agent's own frame."""
    return IndifferenceSolver(utility_function, level, box, config).solve_at(x)
