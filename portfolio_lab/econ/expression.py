"""Tokenizer, parser, and evaluators for two-good utility expressions.

The accepted language is small: numbers, the variables ``x`` and ``y``,
``+ - * / ^`` (``**`` is a synonym for ``^``), parentheses, and calls to
``ln``, ``log``, ``sqrt``, ``exp``, ``abs``, ``min``, ``max`` and ``pow``.

Hand-typed utility functions lean on a few shorthands, all handled by the
grammar rather than by rewriting the source text:

- implicit multiplication: ``2x``, ``2(x + 1)``, ``x(y + 1)``, ``xy``
- implicit exponent: a digit run glued to a variable, ``x2`` is ``x^2``
- fractional exponents: ``x^1/2`` groups as ``x^(1/2)``

``ln`` and single-argument ``log`` are both the natural logarithm.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Union

import sympy

__all__ = [
    "BinaryOp",
    "Call",
    "ExpressionError",
    "FUNCTION_ARITY",
    "Node",
    "Number",
    "UnaryOp",
    "Variable",
    "evaluate",
    "parse_expression",
    "to_sympy",
    "variables_in",
]


class ExpressionError(ValueError):
    """Raised when a utility expression cannot be tokenized or parsed."""


# ---------------------------------------------------------------------------
# AST
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Number:
    value: int | float


@dataclass(frozen=True)
class Variable:
    name: str


@dataclass(frozen=True)
class UnaryOp:
    op: str
    operand: Node


@dataclass(frozen=True)
class BinaryOp:
    op: str
    left: Node
    right: Node


@dataclass(frozen=True)
class Call:
    name: str
    args: tuple[Node, ...]


Node = Union[Number, Variable, UnaryOp, BinaryOp, Call]

# name -> (min_args, max_args)
FUNCTION_ARITY: dict[str, tuple[int, int]] = {
    "ln": (1, 1),
    "log": (1, 2),
    "sqrt": (1, 1),
    "exp": (1, 1),
    "abs": (1, 1),
    "min": (2, 2),
    "max": (2, 2),
    "pow": (2, 2),
}

CONSTANTS: dict[str, float] = {"e": math.e, "pi": math.pi}

VARIABLE_NAMES = frozenset({"x", "y"})

# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

# Token kinds
_NUM = "num"
_VAR = "var"
_FUNC = "func"
_CONST = "const"
_OP = "op"
_END = "end"

_OPERATOR_CHARS = "+-*/^(),"


@dataclass(frozen=True)
class _Token:
    kind: str
    text: str
    pos: int


def _scan_number(source: str, start: int) -> int:
    """Return the end index of the numeric literal starting at *start*."""
    i = start
    n = len(source)
    while i < n and source[i].isdigit():
        i += 1
    if i < n and source[i] == ".":
        i += 1
        while i < n and source[i].isdigit():
            i += 1
    if i == start or source[start:i] == ".":
        raise ExpressionError(f"malformed number at position {start}")
    # Exponent suffix only when digits follow, so "2exp(x)" stays 2 * exp(x)
    if i < n and source[i] in "eE":
        j = i + 1
        if j < n and source[j] in "+-":
            j += 1
        if j < n and source[j].isdigit():
            while j < n and source[j].isdigit():
                j += 1
            i = j
    return i


def _tokenize(source: str) -> list[_Token]:
    tokens: list[_Token] = []
    i = 0
    n = len(source)
    while i < n:
        ch = source[i]
        if ch.isspace():
            i += 1
            continue
        if ch.isdigit() or ch == ".":
            end = _scan_number(source, i)
            tokens.append(_Token(_NUM, source[i:end], i))
            i = end
            continue
        if ch.isalpha() or ch == "_":
            end = i
            while end < n and (source[end].isalpha() or source[end] == "_"):
                end += 1
            name = source[i:end].lower()
            if name in FUNCTION_ARITY:
                tokens.append(_Token(_FUNC, name, i))
            elif name in CONSTANTS:
                tokens.append(_Token(_CONST, name, i))
            elif set(name) <= VARIABLE_NAMES:
                # "xy" is x * y; adjacency is resolved by the parser
                for offset, var in enumerate(name):
                    tokens.append(_Token(_VAR, var, i + offset))
                # "x2" is x ^ 2
                if end < n and source[end].isdigit():
                    tokens.append(_Token(_OP, "^", end))
            else:
                raise ExpressionError(f"unknown name {name!r} at position {i}")
            i = end
            continue
        if ch == "*" and source.startswith("**", i):
            tokens.append(_Token(_OP, "^", i))
            i += 2
            continue
        if ch in _OPERATOR_CHARS:
            tokens.append(_Token(_OP, ch, i))
            i += 1
            continue
        raise ExpressionError(f"unexpected character {ch!r} at position {i}")
    tokens.append(_Token(_END, "", n))
    return tokens


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def _number_value(text: str) -> int | float:
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)


def _is_literal(node: Node) -> bool:
    if isinstance(node, Number):
        return True
    return isinstance(node, UnaryOp) and isinstance(node.operand, Number)


class _Parser:
    """Recursive-descent parser.

    Grammar (lowest to highest precedence)::

        expr    := term (("+" | "-") term)*
        term    := unary (("*" | "/") unary | <implicit> unary)*
        unary   := ("+" | "-") unary | power
        power   := primary ("^" unary)?
        primary := NUMBER | VAR | CONST | FUNC "(" expr ("," expr)? ")" | "(" expr ")"
    """

    def __init__(self, source: str) -> None:
        self._tokens = _tokenize(source)
        self._index = 0

    @property
    def _current(self) -> _Token:
        return self._tokens[self._index]

    def _peek(self, offset: int = 1) -> _Token:
        return self._tokens[min(self._index + offset, len(self._tokens) - 1)]

    def _advance(self) -> _Token:
        token = self._current
        self._index += 1
        return token

    def _at_op(self, *ops: str) -> bool:
        return self._current.kind == _OP and self._current.text in ops

    def _expect_op(self, op: str) -> None:
        if not self._at_op(op):
            found = self._current.text or "end of input"
            raise ExpressionError(
                f"expected {op!r} at position {self._current.pos}, found {found!r}"
            )
        self._advance()

    def _starts_primary(self) -> bool:
        token = self._current
        if token.kind in (_NUM, _VAR, _CONST, _FUNC):
            return True
        return token.kind == _OP and token.text == "("

    def parse(self) -> Node:
        if self._current.kind == _END:
            raise ExpressionError("empty expression")
        node = self._expr()
        if self._current.kind != _END:
            raise ExpressionError(
                f"unexpected {self._current.text!r} at position {self._current.pos}"
            )
        return node

    def _expr(self) -> Node:
        node = self._term()
        while self._at_op("+", "-"):
            op = self._advance().text
            node = BinaryOp(op, node, self._term())
        return node

    def _term(self) -> Node:
        node = self._unary()
        while True:
            if self._at_op("*", "/"):
                op = self._advance().text
                node = BinaryOp(op, node, self._unary())
            elif self._starts_primary():
                node = BinaryOp("*", node, self._unary())
            else:
                return node

    def _unary(self) -> Node:
        if self._at_op("+", "-"):
            op = self._advance().text
            operand = self._unary()
            return operand if op == "+" else UnaryOp("-", operand)
        return self._power()

    def _power(self) -> Node:
        base = self._primary()
        if not self._at_op("^"):
            return base
        self._advance()
        exponent = self._unary()
        # x^1/2 reads as x^(1/2)
        if _is_literal(exponent) and self._at_op("/") and self._peek().kind == _NUM:
            self._advance()
            denominator = Number(_number_value(self._advance().text))
            exponent = BinaryOp("/", exponent, denominator)
        return BinaryOp("^", base, exponent)

    def _primary(self) -> Node:
        token = self._current
        if token.kind == _NUM:
            self._advance()
            return Number(_number_value(token.text))
        if token.kind == _VAR:
            self._advance()
            return Variable(token.text)
        if token.kind == _CONST:
            self._advance()
            return Call(token.text, ())
        if token.kind == _FUNC:
            return self._call()
        if self._at_op("("):
            self._advance()
            node = self._expr()
            self._expect_op(")")
            return node
        found = token.text or "end of input"
        raise ExpressionError(f"unexpected {found!r} at position {token.pos}")

    def _call(self) -> Node:
        token = self._advance()
        self._expect_op("(")
        args = [self._expr()]
        while self._at_op(","):
            self._advance()
            args.append(self._expr())
        self._expect_op(")")
        low, high = FUNCTION_ARITY[token.text]
        if not low <= len(args) <= high:
            raise ExpressionError(
                f"{token.text}() takes {low if low == high else f'{low} or {high}'} "
                f"argument(s), got {len(args)}"
            )
        return Call(token.text, tuple(args))


@lru_cache(maxsize=256)
def parse_expression(source: str) -> Node:
    """Parse *source* into an immutable AST.

    Raises :exc:`ExpressionError` when the text is not a valid expression.
    """
    if not isinstance(source, str):
        raise ExpressionError("expression must be a string")
    try:
        return _Parser(source).parse()
    except RecursionError as exc:
        raise ExpressionError("expression is nested too deeply") from exc


def variables_in(node: Node) -> frozenset[str]:
    """Return the set of variable names referenced by *node*."""
    if isinstance(node, Variable):
        return frozenset({node.name})
    if isinstance(node, UnaryOp):
        return variables_in(node.operand)
    if isinstance(node, BinaryOp):
        return variables_in(node.left) | variables_in(node.right)
    if isinstance(node, Call):
        names: frozenset[str] = frozenset()
        for arg in node.args:
            names |= variables_in(arg)
        return names
    return frozenset()


# ---------------------------------------------------------------------------
# Float evaluation
# ---------------------------------------------------------------------------


def _call_float(name: str, args: list[float]) -> float:
    if name in CONSTANTS:
        return CONSTANTS[name]
    if name in ("ln", "log"):
        if len(args) == 2:
            return math.log(args[0]) / math.log(args[1])
        return math.log(args[0])
    if name == "sqrt":
        return math.sqrt(args[0])
    if name == "exp":
        return math.exp(args[0])
    if name == "abs":
        return abs(args[0])
    if name == "min":
        return min(args)
    if name == "max":
        return max(args)
    if name == "pow":
        return _power(args[0], args[1])
    raise ExpressionError(f"unknown function {name!r}")


def _power(base: float, exponent: float) -> float:
    result = base**exponent
    if isinstance(result, complex):
        raise ValueError("power has no real value")
    return float(result)


def evaluate(node: Node, x: float, y: float) -> float:
    """Evaluate *node* at ``(x, y)`` with float arithmetic.

    Propagates :exc:`ValueError`, :exc:`ZeroDivisionError` and
    :exc:`OverflowError` for points outside the function's real domain.
    """
    if isinstance(node, Number):
        return float(node.value)
    if isinstance(node, Variable):
        return x if node.name == "x" else y
    if isinstance(node, UnaryOp):
        return -evaluate(node.operand, x, y)
    if isinstance(node, BinaryOp):
        left = evaluate(node.left, x, y)
        right = evaluate(node.right, x, y)
        if node.op == "+":
            return left + right
        if node.op == "-":
            return left - right
        if node.op == "*":
            return left * right
        if node.op == "/":
            return left / right
        return _power(left, right)
    if isinstance(node, Call):
        return _call_float(node.name, [evaluate(arg, x, y) for arg in node.args])
    raise ExpressionError(f"unsupported node {node!r}")


# ---------------------------------------------------------------------------
# Sympy bridge
# ---------------------------------------------------------------------------


def _number_to_sympy(value: int | float) -> sympy.Expr:
    if isinstance(value, int):
        return sympy.Integer(value)
    return sympy.Float(value)


def _call_to_sympy(name: str, args: list[sympy.Expr]) -> sympy.Expr:
    if name == "e":
        return sympy.E
    if name == "pi":
        return sympy.pi
    if name in ("ln", "log"):
        return sympy.log(*args)
    if name == "sqrt":
        return sympy.sqrt(args[0])
    if name == "exp":
        return sympy.exp(args[0])
    if name == "abs":
        return sympy.Abs(args[0])
    if name == "min":
        return sympy.Min(*args)
    if name == "max":
        return sympy.Max(*args)
    if name == "pow":
        return sympy.Pow(args[0], args[1])
    raise ExpressionError(f"unknown function {name!r}")


def to_sympy(node: Node, x: sympy.Symbol, y: sympy.Symbol) -> sympy.Expr:
    """Convert *node* to a sympy expression over the given symbols."""
    if isinstance(node, Number):
        return _number_to_sympy(node.value)
    if isinstance(node, Variable):
        return x if node.name == "x" else y
    if isinstance(node, UnaryOp):
        return -to_sympy(node.operand, x, y)
    if isinstance(node, BinaryOp):
        left = to_sympy(node.left, x, y)
        right = to_sympy(node.right, x, y)
        if node.op == "+":
            return left + right
        if node.op == "-":
            return left - right
        if node.op == "*":
            return left * right
        if node.op == "/":
            return left / right
        return sympy.Pow(left, right)
    if isinstance(node, Call):
        return _call_to_sympy(node.name, [to_sympy(arg, x, y) for arg in node.args])
    raise ExpressionError(f"unsupported node {node!r}")
