"""Opaque capabilities consumed by the ranking engine.

- ``fuzzy_match``: subsequence test plus a similarity score, via RapidFuzz.
- ``evaluate``: arithmetic over a whitelisted AST (nothing is executed).
- ``format_number``: calculator display formatting.
"""

from __future__ import annotations

import ast
import math
import operator
from decimal import Decimal

from rapidfuzz import fuzz
from rapidfuzz.distance import LCSseq


class ExpressionError(ValueError):
    """Raised when a calculator expression cannot be evaluated."""


def fuzzy_match(haystack: str, needle: str) -> float | None:
    """Score *needle* against *haystack*, or None when it does not match.

    A match requires every character of *needle* to occur in *haystack*
    in order. The score (0-100) is RapidFuzz's partial ratio.
    """
    if LCSseq.similarity(needle, haystack) != len(needle):
        return None
    return fuzz.partial_ratio(needle, haystack)


_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

_CONSTANTS = {
    "pi": math.pi,
    "e": math.e,
    "tau": math.tau,
}

def _round_half_away(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


_FUNCTIONS = {
    "sqrt": math.sqrt,
    "abs": abs,
    "exp": math.exp,
    "ln": math.log,
    "log": math.log,
    "log10": math.log10,
    "log2": math.log2,
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "asin": math.asin,
    "acos": math.acos,
    "atan": math.atan,
    "sinh": math.sinh,
    "cosh": math.cosh,
    "tanh": math.tanh,
    "floor": math.floor,
    "ceil": math.ceil,
    "round": _round_half_away,
    "min": min,
    "max": max,
}


def evaluate(expr: str) -> float:
    """Evaluate an arithmetic expression.

    ``^`` is exponentiation and binds like ``**``: ``2*3^2`` is 18 and
    ``-2^2`` is -4.

    Raises:
        ExpressionError: On syntax errors, unknown names, unsupported
            constructs, math domain/overflow/zero-division errors, or
            expressions nested too deeply to evaluate.
    """
    text = expr.strip()
    if not text:
        raise ExpressionError("empty expression")
    try:
        tree = ast.parse(text.replace("^", "**"), mode="eval")
    except (SyntaxError, ValueError) as exc:
        raise ExpressionError(f"invalid expression: {text!r}") from exc
    except (RecursionError, MemoryError) as exc:
        raise ExpressionError("expression too deeply nested") from exc

    try:
        return float(_eval_node(tree.body))
    except ExpressionError:
        raise
    except (RecursionError, MemoryError) as exc:
        raise ExpressionError("expression too deeply nested") from exc
    except (ArithmeticError, ValueError, TypeError) as exc:
        raise ExpressionError(str(exc)) from exc


def _eval_node(node: ast.AST) -> float:
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float)):
            raise ExpressionError(f"unsupported literal {node.value!r}")
        return float(node.value)
    if isinstance(node, ast.Name):
        if node.id not in _CONSTANTS:
            raise ExpressionError(f"unknown name {node.id!r}")
        return _CONSTANTS[node.id]
    if isinstance(node, ast.BinOp):
        op = _BINARY_OPS.get(type(node.op))
        if op is None:
            raise ExpressionError(f"unsupported operator {type(node.op).__name__}")
        return op(_eval_node(node.left), _eval_node(node.right))
    if isinstance(node, ast.UnaryOp):
        op = _UNARY_OPS.get(type(node.op))
        if op is None:
            raise ExpressionError(f"unsupported operator {type(node.op).__name__}")
        return op(_eval_node(node.operand))
    if isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name) or node.func.id not in _FUNCTIONS:
            raise ExpressionError("unsupported function call")
        if node.keywords:
            raise ExpressionError("keyword arguments are not supported")
        args = [_eval_node(arg) for arg in node.args]
        return _FUNCTIONS[node.func.id](*args)
    raise ExpressionError(f"unsupported syntax {type(node).__name__}")


def format_number(value: float) -> str:
    """Render a calculator result in plain positional notation.

    Uses the shortest digits that round-trip, never an exponent:
    ``4.0`` -> ``"4"``, ``1e-07`` -> ``"0.0000001"``, ``1e20`` ->
    ``"100000000000000000000"``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text
