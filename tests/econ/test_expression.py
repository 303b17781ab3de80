"""Tests for the utility-expression tokenizer, parser, and evaluators."""

from __future__ import annotations

import math

import pytest
import sympy

from portfolio_lab.econ.expression import (
    BinaryOp,
    Call,
    ExpressionError,
    Number,
    UnaryOp,
    Variable,
    evaluate,
    parse_expression,
    to_sympy,
    variables_in,
)

X = Variable("x")
Y = Variable("y")


def _eval(source: str, x: float, y: float) -> float:
    return evaluate(parse_expression(source), x, y)


class TestParse:
    def test_precedence(self) -> None:
        assert parse_expression("x + y * 2") == BinaryOp("+", X, BinaryOp("*", Y, Number(2)))

    def test_power_is_right_associative(self) -> None:
        assert parse_expression("x^y^2") == BinaryOp("^", X, BinaryOp("^", Y, Number(2)))

    def test_double_star_is_power(self) -> None:
        assert parse_expression("x**2") == parse_expression("x^2")

    def test_unary_minus_binds_looser_than_power(self) -> None:
        assert parse_expression("-x^2") == UnaryOp("-", BinaryOp("^", X, Number(2)))

    def test_ln_call(self) -> None:
        assert parse_expression("ln(x)") == Call("ln", (X,))

    def test_constants(self) -> None:
        assert parse_expression("pi") == Call("pi", ())


class TestShorthand:
    def test_implicit_coefficient(self) -> None:
        assert parse_expression("2x") == BinaryOp("*", Number(2), X)

    def test_glued_variables_multiply(self) -> None:
        assert parse_expression("xy") == BinaryOp("*", X, Y)

    def test_implicit_exponent(self) -> None:
        assert parse_expression("x2") == BinaryOp("^", X, Number(2))

    def test_implicit_exponent_in_product(self) -> None:
        assert _eval("x2y", 3.0, 2.0) == pytest.approx(18.0)

    def test_fractional_exponent_groups(self) -> None:
        node = parse_expression("x^1/2")
        assert node == BinaryOp("^", X, BinaryOp("/", Number(1), Number(2)))
        assert _eval("x^1/2 * y^1/2", 4.0, 9.0) == pytest.approx(6.0)

    def test_parenthesised_product(self) -> None:
        assert _eval("2(x + 1)", 2.0, 0.0) == pytest.approx(6.0)
        assert _eval("x(y + 1)", 2.0, 3.0) == pytest.approx(8.0)

    def test_coefficient_before_function(self) -> None:
        assert _eval("2ln(x)", math.e, 1.0) == pytest.approx(2.0)
        assert _eval("2exp(x)", 0.0, 0.0) == pytest.approx(2.0)

    def test_scientific_notation(self) -> None:
        assert parse_expression("1e3") == Number(1000.0)

    def test_case_insensitive_names(self) -> None:
        assert parse_expression("LN(X)") == Call("ln", (X,))


class TestErrors:
    @pytest.mark.parametrize(
        "source",
        ["", "   ", "x +", "(x + y", "x + z", "foo(x)", "ln()", "min(x)", "x $ y", "ln(x, y, 2)"],
    )
    def test_invalid_expressions_raise(self, source: str) -> None:
        with pytest.raises(ExpressionError):
            parse_expression(source)

    def test_expression_error_is_value_error(self) -> None:
        assert issubclass(ExpressionError, ValueError)


class TestEvaluate:
    def test_cobb_douglas(self) -> None:
        assert _eval("x^0.5 * y^0.5", 4.0, 16.0) == pytest.approx(8.0)

    def test_log_utility(self) -> None:
        assert _eval("ln(x) + ln(y)", math.e, math.e) == pytest.approx(2.0)

    def test_log_with_base(self) -> None:
        assert _eval("log(x, 2)", 8.0, 1.0) == pytest.approx(3.0)

    def test_two_argument_functions(self) -> None:
        assert _eval("min(x, 2y)", 3.0, 1.0) == pytest.approx(2.0)
        assert _eval("max(x, y)", 3.0, 5.0) == pytest.approx(5.0)
        assert _eval("pow(x, 3)", 2.0, 0.0) == pytest.approx(8.0)

    def test_domain_errors_propagate(self) -> None:
        with pytest.raises(ValueError):
            _eval("ln(x)", 0.0, 1.0)
        with pytest.raises(ZeroDivisionError):
            _eval("1 / x", 0.0, 1.0)
        with pytest.raises(ValueError):
            _eval("x^0.5", -4.0, 1.0)

    def test_variables_in(self) -> None:
        assert variables_in(parse_expression("ln(x) + 3")) == frozenset({"x"})
        assert variables_in(parse_expression("xy")) == frozenset({"x", "y"})


class TestSympyBridge:
    def test_product_converts(self) -> None:
        x, y = sympy.symbols("x y", positive=True)
        assert to_sympy(parse_expression("2xy"), x, y) == 2 * x * y

    def test_fraction_exponent_is_rational(self) -> None:
        x, y = sympy.symbols("x y", positive=True)
        assert to_sympy(parse_expression("x^1/2"), x, y) == sympy.sqrt(x)

    def test_ln_is_natural_log(self) -> None:
        x, y = sympy.symbols("x y", positive=True)
        assert to_sympy(parse_expression("ln(x)"), x, y) == sympy.log(x)


class TestNesting:
    def test_deep_parentheses_raise_expression_error(self) -> None:
        with pytest.raises(ExpressionError, match="nested too deeply"):
            parse_expression("(" * 1500 + "x" + ")" * 1500)

    def test_moderate_nesting_parses(self) -> None:
        assert parse_expression("(" * 20 + "x" + ")" * 20) == X
