"""Edgeworth box economics: expression parsing, utility, and curve sampling."""

from portfolio_lab.econ.box import EdgeworthBox
from portfolio_lab.econ.curves import (
    IndifferenceSolver,
    curve_is_drawable,
    sample_indifference_curve,
    sample_x_values,
    solve_indifference_point,
)
from portfolio_lab.econ.expression import ExpressionError, evaluate, parse_expression
from portfolio_lab.econ.utility import (
    Agent,
    BoxDimensions,
    box_dimensions,
    clamp_endowment,
    evaluate_utility,
    parse_endowment_value,
)

__all__ = [
    "Agent",
    "BoxDimensions",
    "EdgeworthBox",
    "ExpressionError",
    "IndifferenceSolver",
    "box_dimensions",
    "clamp_endowment",
    "curve_is_drawable",
    "evaluate",
    "evaluate_utility",
    "parse_endowment_value",
    "parse_expression",
    "sample_indifference_curve",
    "sample_x_values",
    "solve_indifference_point",
]
