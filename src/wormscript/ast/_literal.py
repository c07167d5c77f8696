"""Literal expression nodes."""

__all__ = ["Number", "Boolean", "Null"]

import wormscript
from . import _base


class Number(_base.Expression):
    """Numeric literal."""

    type = wormscript.Type.NUMBER

    def __init__(self, value, position=None):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"Number literal requires int or float, got {type(value)}")
        self.position = position
        self.value = wormscript.Value.number(value)

    def evaluate(self, context):
        return self.value

    def unparse(self):
        return self.value.format()

    def __repr__(self):
        return f"Number({self.value.data!r})"


class Boolean(_base.Expression):
    """Boolean literal."""

    type = wormscript.Type.BOOLEAN

    def __init__(self, value, position=None):
        if not isinstance(value, bool):
            raise TypeError(f"Boolean literal requires bool, got {type(value)}")
        self.position = position
        self.value = wormscript.Value.boolean(value)

    def evaluate(self, context):
        return self.value

    def unparse(self):
        return self.value.format()

    def __repr__(self):
        return f"Boolean({self.value.data!r})"


class Null(_base.Expression):
    """The absent entity."""

    type = wormscript.Type.ENTITY

    def __init__(self, position=None):
        self.position = position

    def evaluate(self, context):
        return wormscript.Value.entity(None)

    def unparse(self):
        return "null"

    def __repr__(self):
        return "Null()"
