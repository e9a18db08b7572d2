"""
Expression evaluator for the calculator screen.

Calculator input is parsed with Python's ``ast`` module and evaluated against
a whitelist of operators, functions and constants, so nothing outside plain
arithmetic can ever run. Every number is a float.

Semantics:
- ``+ - * /`` and unary ``+``/``-`` as usual, ``^`` is power.
- ``%`` is modulo (floored; the sign follows the divisor).
- ``sin cos tan`` take radians, ``log`` is the natural logarithm.
- Division or modulo by zero, domain errors and non-finite results fail.

``evaluate`` never raises for bad input: it returns ``Ok(text)`` or
``Err(ErrorKind.INVALID_EXPRESSION)``.
"""

import ast
import logging
import math
import operator as op
import re
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Context, Decimal
from enum import Enum

from .config import DEFAULT_MAX_EXPRESSION_LENGTH, MAX_PRECISION

logger = logging.getLogger(__name__)


# -------------------------
# Errors
# -------------------------
class EvalError(Exception):
    pass


class ParseError(EvalError):
    """Malformed input: bad token, unbalanced parentheses, dangling operator."""


class UnknownNameError(EvalError):
    """A function or constant name that is not whitelisted."""


class MathError(EvalError):
    """Domain error, overflow or a non-finite result."""


class DivisionByZeroError(MathError):
    pass


class ErrorKind(Enum):
    INVALID_EXPRESSION = "InvalidExpression"


@dataclass(frozen=True)
class Ok:
    value: str

    @property
    def ok(self):
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind = ErrorKind.INVALID_EXPRESSION
    # Internal cause, for logging only; two errors compare equal regardless.
    detail: EvalError = field(default=None, compare=False, repr=False)

    @property
    def ok(self):
        return False


# -------------------------
# Whitelists
# -------------------------
def _div(a, b):
    if b == 0:
        raise DivisionByZeroError("division by zero")
    return a / b


def _mod(a, b):
    if b == 0:
        raise DivisionByZeroError("modulo by zero")
    return a % b


_BINARY_OPERATORS = {
    ast.Add: op.add,
    ast.Sub: op.sub,
    ast.Mult: op.mul,
    ast.Div: _div,
    ast.Mod: _mod,
    ast.Pow: op.pow,  # written as '^'
}

_UNARY_OPERATORS = {
    ast.USub: op.neg,
    ast.UAdd: op.pos,
}

_FUNCTIONS = {
    "sin": math.sin,
    "cos": math.cos,
    "tan": math.tan,
    "log": math.log,
    "sqrt": math.sqrt,
}

_CONSTANTS = {
    "pi": math.pi,
    "e": math.e,
}

_ALLOWED_NODES = (
    ast.Expression, ast.BinOp, ast.UnaryOp, ast.Call, ast.Name, ast.Constant, ast.Load,
    *_BINARY_OPERATORS, *_UNARY_OPERATORS,
)

_ALLOWED_CHARS = re.compile(r"[0-9a-z.+\-*/%^()\s]*")
# '**' and '//' are Python spellings, not calculator ones.
_PYTHON_ONLY = re.compile(r"\*\*|//")
# A letter glued to a digit: hex/binary literals, "2pi", "1j". Exponents stay legal.
_DIGIT_LETTER = re.compile(r"\d[a-df-z]")
# Leading zeros of an integer part ("007" -> "7"), which Python refuses.
_LEADING_ZEROS = re.compile(r"(?<![\d.])0+(?=\d)")


# -------------------------
# Evaluation
# -------------------------
def _apply(func, *args):
    try:
        result = func(*args)
    except ZeroDivisionError as e:
        raise DivisionByZeroError(str(e)) from e
    except (ArithmeticError, ValueError) as e:
        raise MathError(str(e)) from e
    if isinstance(result, complex):
        raise MathError("complex result")
    return result


def _operands(node):
    """Check ``node`` against the whitelist and return its child expressions."""
    if isinstance(node, ast.BinOp):
        if type(node.op) not in _BINARY_OPERATORS:
            raise ParseError(f"Unsupported operator: {type(node.op).__name__}")
        return [node.left, node.right]

    if isinstance(node, ast.UnaryOp):
        if type(node.op) not in _UNARY_OPERATORS:
            raise ParseError(f"Unsupported operator: {type(node.op).__name__}")
        return [node.operand]

    if isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name):
            raise ParseError("Only direct function calls are allowed")
        name = node.func.id
        if name not in _FUNCTIONS:
            raise UnknownNameError(f"Unknown function '{name}'")
        if len(node.args) != 1 or node.keywords:
            raise ParseError(f"'{name}' takes exactly one argument")
        return [node.args[0]]

    if isinstance(node, (ast.Constant, ast.Name)):
        return []

    raise ParseError(f"Unsupported expression: {type(node).__name__}")


def _reduce(node, values):
    """Compute ``node`` from its already evaluated operands on top of ``values``."""
    if isinstance(node, ast.Constant):
        if isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
            return float(node.value)
        raise ParseError(f"Unsupported literal: {node.value!r}")

    if isinstance(node, ast.Name):
        if node.id in _CONSTANTS:
            return _CONSTANTS[node.id]
        raise UnknownNameError(f"Unknown name '{node.id}'")

    if isinstance(node, ast.BinOp):
        right = values.pop()
        left = values.pop()
        return _apply(_BINARY_OPERATORS[type(node.op)], left, right)

    if isinstance(node, ast.UnaryOp):
        return _apply(_UNARY_OPERATORS[type(node.op)], values.pop())

    return _apply(_FUNCTIONS[node.func.id], values.pop())


def _eval_ast(tree):
    """Evaluate a parsed expression post-order with an explicit stack.

    A 2000-character sum or sign chain nests far deeper than Python's
    recursion limit allows, so the walk does not recurse.
    """
    values = []
    pending = [(tree.body, False)]
    while pending:
        node, ready = pending.pop()
        if ready:
            values.append(_reduce(node, values))
            continue
        pending.append((node, True))
        pending.extend((child, False) for child in reversed(_operands(node)))
    return values.pop()


def _parse(expression, max_length):
    if not isinstance(expression, str):
        raise ParseError("Expression must be text")
    expr = expression.strip()
    if not expr:
        raise ParseError("Empty expression")
    if len(expr) > max_length:
        raise ParseError(f"Expression too long (limit: {max_length} chars)")
    if not _ALLOWED_CHARS.fullmatch(expr):
        raise ParseError("Invalid character in expression")
    if _PYTHON_ONLY.search(expr):
        raise ParseError("Invalid operator in expression")
    if _DIGIT_LETTER.search(expr):
        raise ParseError("Invalid number in expression")

    expr = _LEADING_ZEROS.sub("", expr).replace("^", "**")
    try:
        tree = ast.parse(expr, mode="eval")
    except SyntaxError as e:
        raise ParseError(f"Syntax error: {e.msg}") from None
    except (RecursionError, MemoryError):
        raise ParseError("Expression is nested too deeply") from None

    for node in ast.walk(tree):
        if not isinstance(node, _ALLOWED_NODES):
            raise ParseError(f"Disallowed syntax: {type(node).__name__}")
    return tree


def compute(expression, max_length=DEFAULT_MAX_EXPRESSION_LENGTH) -> float:
    """Evaluate ``expression`` to a finite float or raise an EvalError subclass."""
    value = _eval_ast(_parse(expression, max_length))
    if not math.isfinite(value):
        raise MathError("Result is not a finite number")
    return value


# -------------------------
# Formatting
# -------------------------
def check_precision(precision):
    if isinstance(precision, bool) or not isinstance(precision, int):
        raise ValueError(f"precision must be an integer, got {precision!r}")
    if not 0 <= precision <= MAX_PRECISION:
        raise ValueError(f"precision must be 0..{MAX_PRECISION}, got {precision}")


def format_result(value, precision: int) -> str:
    """Fixed-point text with exactly ``precision`` decimals.

    Rounds half away from zero on the exact binary value of ``value``, so
    ``2.5`` gives ``"3"`` and ``1.005`` (really 1.00499...) gives ``"1.00"``.
    """
    check_precision(precision)
    exact = Decimal(value)
    # Room for every integer digit plus the requested decimals.
    context = Context(prec=max(exact.adjusted(), 0) + precision + 2)
    quantum = Decimal(1).scaleb(-precision)
    rounded = exact.quantize(quantum, rounding=ROUND_HALF_UP, context=context)
    if rounded.is_zero():
        rounded = rounded.copy_abs()
    return f"{rounded:f}"


def evaluate(expression: str, precision: int, max_length=DEFAULT_MAX_EXPRESSION_LENGTH):
    """
    Evaluate calculator input and format it for display.

    Returns ``Ok(text)`` on success and ``Err(INVALID_EXPRESSION)`` for any
    rejected input. An invalid ``precision`` is a caller bug and raises
    ValueError.
    """
    check_precision(precision)
    try:
        value = compute(expression, max_length)
    except EvalError as e:
        logger.debug(f"Rejected {expression!r}: {type(e).__name__}: {e}")
        return Err(detail=e)
    return Ok(format_result(value, precision))
