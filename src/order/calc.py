"""
Arithmetic expression evaluator for ``order math``.

Expressions are parsed with :mod:`ast` and only a whitelist of node
types is evaluated: numbers, arithmetic operators, parentheses, and
calls to a fixed set of math functions. ``^`` is accepted as power.
"""

from __future__ import annotations

import ast
import math
import operator
from typing import Any, Callable

from order.exceptions import ExpressionError

MAX_EXPONENT = 10_000
# Keeps integer results printable (str(int) refuses past ~4300 digits).
MAX_RESULT_BITS = 13_000
MAX_FACTORIAL = 1000

_BINARY_OPERATORS: dict[type, Callable[[Any, Any], Any]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPERATORS: dict[type, Callable[[Any], Any]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

_FUNCTIONS: dict[str, Callable[..., Any]] = {
    name: getattr(math, name)
    for name in (
        "sqrt", "cbrt", "exp", "log", "log2", "log10",
        "sin", "cos", "tan", "asin", "acos", "atan", "atan2",
        "sinh", "cosh", "tanh", "degrees", "radians",
        "floor", "ceil", "factorial", "hypot", "gcd",
    )
    if hasattr(math, name)
}
_FUNCTIONS.update({"abs": abs, "round": round, "min": min, "max": max})

_CONSTANTS: dict[str, float] = {
    "pi": math.pi,
    "e": math.e,
    "tau": math.tau,
    "inf": math.inf,
}


def evaluate(expression: str) -> int | float:
    """Evaluate an arithmetic expression.

    Raises:
        ExpressionError: If the expression is empty, malformed, uses
            anything outside the whitelist, or fails to evaluate
    """
    text = expression.strip().replace("^", "**")
    if not text:
        raise ExpressionError("Empty expression", expression)
    try:
        tree = ast.parse(text, mode="eval")
    except SyntaxError as e:
        raise ExpressionError(f"Invalid expression: {e.msg}", expression) from e

    try:
        return _check_size(_eval(tree.body, expression), expression)
    except ZeroDivisionError as e:
        raise ExpressionError("Division by zero", expression) from e
    except (ArithmeticError, ValueError, TypeError) as e:
        raise ExpressionError(f"Cannot evaluate: {e}", expression) from e


def _eval(node: ast.AST, expression: str) -> Any:
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise ExpressionError(f"Unsupported literal: {node.value!r}", expression)
        return node.value

    if isinstance(node, ast.Name):
        if node.id in _CONSTANTS:
            return _CONSTANTS[node.id]
        raise ExpressionError(f"Unknown name: {node.id}", expression)

    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPERATORS:
        left = _eval(node.left, expression)
        right = _eval(node.right, expression)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right, expression)
        return _check_size(_BINARY_OPERATORS[type(node.op)](left, right), expression)

    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPERATORS:
        return _UNARY_OPERATORS[type(node.op)](_eval(node.operand, expression))

    if isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name) or node.func.id not in _FUNCTIONS:
            name = getattr(node.func, "id", type(node.func).__name__)
            raise ExpressionError(f"Unknown function: {name}", expression)
        if node.keywords:
            raise ExpressionError("Keyword arguments are not supported", expression)
        args = [_eval(arg, expression) for arg in node.args]
        if node.func.id == "factorial" and args and isinstance(args[0], (int, float)) and args[0] > MAX_FACTORIAL:
            raise ExpressionError(f"Factorial argument too large: {args[0]} (max {MAX_FACTORIAL})", expression)
        return _check_size(_FUNCTIONS[node.func.id](*args), expression)

    raise ExpressionError(f"Unsupported syntax: {type(node).__name__}", expression)


def _check_power(base: Any, exponent: Any, expression: str) -> None:
    if abs(exponent) > MAX_EXPONENT:
        raise ExpressionError(f"Exponent too large: {exponent}", expression)
    if isinstance(base, int) and isinstance(exponent, int) and exponent > 0:
        if (abs(base).bit_length() - 1) * exponent > MAX_RESULT_BITS:
            raise ExpressionError("Result too large", expression)


def _check_size(value: Any, expression: str) -> Any:
    if isinstance(value, int) and value.bit_length() > MAX_RESULT_BITS:
        raise ExpressionError("Result too large", expression)
    return value


def format_number(value: int | float) -> str:
    """Render a result the way a calculator would."""
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and abs(value) < 1e15:
            return str(int(value))
        return f"{value:.12g}"
    return str(value)
