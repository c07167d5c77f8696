"""Operator nodes for arithmetic, comparison, and boolean operations."""

__all__ = [
    "ArithmeticOp",
    "MathFunction",
    "ComparisonOp",
    "EqualityOp",
    "LogicalOp",
    "NotOp",
]

import math
import operator

import wormscript
from . import _base


_ARITHMETIC = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
}


def _divide(left, right):
    """IEEE division, zero divisors give infinities or nan."""
    if right == 0.0:
        if left == 0.0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)
    return left / right


_ARITHMETIC["/"] = _divide


class ArithmeticOp(_base.Expression):
    """Arithmetic operation: x + y, x - y, x * y, x / y.

    Both operands must be numbers.
    """

    type = wormscript.Type.NUMBER

    def __init__(self, op, left, right, position=None):
        if op not in _ARITHMETIC:
            raise ValueError(f"ArithmeticOp requires +, -, *, or /, got {op!r}")
        self.position = position
        self._expect(left, wormscript.Type.NUMBER, f"Left operand of {op}")
        self._expect(right, wormscript.Type.NUMBER, f"Right operand of {op}")
        self.op = op
        self.left = left
        self.right = right

    def evaluate(self, context):
        left = self.left.evaluate(context).data
        right = self.right.evaluate(context).data
        return wormscript.Value.number(_ARITHMETIC[self.op](left, right))

    def unparse(self):
        return f"({self.left.unparse()} {self.op} {self.right.unparse()})"

    def __repr__(self):
        return f"ArithmeticOp({self.left}, {self.op!r}, {self.right})"


_FUNCTIONS = {
    "sqrt": lambda x: math.sqrt(x) if x >= 0 else math.nan,
    "sin": math.sin,
    "cos": math.cos,
}


class MathFunction(_base.Expression):
    """Single argument math function: sqrt, sin, cos.

    Results follow floating point conventions, so the square root of a
    negative number is nan rather than an error.
    """

    type = wormscript.Type.NUMBER

    def __init__(self, name, operand, position=None):
        if name not in _FUNCTIONS:
            raise ValueError(f"Unknown math function {name!r}")
        self.position = position
        self._expect(operand, wormscript.Type.NUMBER, f"Argument of {name}")
        self.name = name
        self.operand = operand

    def evaluate(self, context):
        value = self.operand.evaluate(context).data
        if math.isinf(value) and self.name != "sqrt":
            return wormscript.Value.number(math.nan)
        return wormscript.Value.number(_FUNCTIONS[self.name](value))

    def unparse(self):
        return f"{self.name}({self.operand.unparse()})"

    def __repr__(self):
        return f"MathFunction({self.name!r}, {self.operand})"


_ORDERING = {
    "<": operator.lt,
    ">": operator.gt,
    "<=": wormscript.fuzzy_less_or_equal,
    ">=": wormscript.fuzzy_greater_or_equal,
}


class ComparisonOp(_base.Expression):
    """Ordering comparison: x < y, x <= y, x > y, x >= y.

    Both operands must be numbers. The inclusive comparisons tolerate
    differences up to `EPSILON`; the strict ones compare exactly.
    """

    type = wormscript.Type.BOOLEAN

    def __init__(self, op, left, right, position=None):
        if op not in _ORDERING:
            raise ValueError(f"ComparisonOp requires <, <=, >, or >=, got {op!r}")
        self.position = position
        self._expect(left, wormscript.Type.NUMBER, f"Left operand of {op}")
        self._expect(right, wormscript.Type.NUMBER, f"Right operand of {op}")
        self.op = op
        self.left = left
        self.right = right

    def evaluate(self, context):
        left = self.left.evaluate(context).data
        right = self.right.evaluate(context).data
        return wormscript.Value.boolean(bool(_ORDERING[self.op](left, right)))

    def unparse(self):
        return f"({self.left.unparse()} {self.op} {self.right.unparse()})"

    def __repr__(self):
        return f"ComparisonOp({self.left}, {self.op!r}, {self.right})"


class EqualityOp(_base.Expression):
    """Equality comparison: x == y, x != y.

    Both operands must have the same static type. Numbers compare exactly,
    entities compare by identity.
    """

    type = wormscript.Type.BOOLEAN

    def __init__(self, op, left, right, position=None):
        if op not in ("==", "!="):
            raise ValueError(f"EqualityOp requires == or !=, got {op!r}")
        self.position = position
        if left.type is not None and right.type is not None and left.type is not right.type:
            raise wormscript.TypeCheckError(
                f"Operands of {op} must have the same type, got "
                f"{left.type.keyword} and {right.type.keyword}",
                position)
        self.op = op
        self.left = left
        self.right = right

    def evaluate(self, context):
        equal = self.left.evaluate(context) == self.right.evaluate(context)
        if self.op == "!=":
            equal = not equal
        return wormscript.Value.boolean(equal)

    def unparse(self):
        return f"({self.left.unparse()} {self.op} {self.right.unparse()})"

    def __repr__(self):
        return f"EqualityOp({self.left}, {self.op!r}, {self.right})"


class LogicalOp(_base.Expression):
    """Boolean operation: x && y, x || y.

    The right operand is only evaluated when the left one does not decide
    the result.
    """

    type = wormscript.Type.BOOLEAN

    def __init__(self, op, left, right, position=None):
        if op not in ("&&", "||"):
            raise ValueError(f"LogicalOp requires && or ||, got {op!r}")
        self.position = position
        self._expect(left, wormscript.Type.BOOLEAN, f"Left operand of {op}")
        self._expect(right, wormscript.Type.BOOLEAN, f"Right operand of {op}")
        self.op = op
        self.left = left
        self.right = right

    def evaluate(self, context):
        left = self.left.evaluate(context).data
        if self.op == "&&" and not left:
            return wormscript.Value.boolean(False)
        if self.op == "||" and left:
            return wormscript.Value.boolean(True)
        return wormscript.Value.boolean(self.right.evaluate(context).data)

    def unparse(self):
        return f"({self.left.unparse()} {self.op} {self.right.unparse()})"

    def __repr__(self):
        return f"LogicalOp({self.left}, {self.op!r}, {self.right})"


class NotOp(_base.Expression):
    """Boolean negation: !x"""

    type = wormscript.Type.BOOLEAN

    def __init__(self, operand, position=None):
        self.position = position
        self._expect(operand, wormscript.Type.BOOLEAN, "Operand of !")
        self.operand = operand

    def evaluate(self, context):
        return wormscript.Value.boolean(not self.operand.evaluate(context).data)

    def unparse(self):
        return f"!{self.operand.unparse()}"

    def __repr__(self):
        return f"NotOp({self.operand})"
