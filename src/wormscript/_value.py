"""Runtime values and the closed type set of the language."""

__all__ = [
    "Type",
    "Value",
    "EPSILON",
    "fuzzy_equals",
    "fuzzy_less_or_equal",
    "fuzzy_greater_or_equal",
]

import enum
import math

import wormscript


EPSILON = 1e-4


class Type(enum.Enum):
    """Static type of an expression or variable.

    Every type knows the value a fresh variable starts with and the keyword
    used to declare it in source.
    """

    NUMBER = ("double", 0.0)
    BOOLEAN = ("bool", False)
    ENTITY = ("entity", None)

    def __init__(self, keyword, default):
        self.keyword = keyword
        self.default = default

    def accepts(self, data):
        """Check whether python data can be stored as this type."""
        if self is Type.BOOLEAN:
            return isinstance(data, bool)
        if self is Type.NUMBER:
            return isinstance(data, (int, float)) and not isinstance(data, bool)
        # Any non-primitive object is treated as an entity handle
        return not isinstance(data, (bool, int, float, str))

    def __repr__(self):
        return f"Type.{self.name}"


class Value:
    """Immutable runtime value.

    Values are a tagged pair of a `Type` and python data. Numbers are always
    stored as floats, booleans as bools, and entities as an opaque entity
    object or None when there is no entity.

    Args:
        type: (Type) Type tag for the data
        data: Python data matching the type
    Attributes:
        type: (Type) Type tag
        data: (float | bool | Entity | None) Underlying data
    """

    __slots__ = ("type", "data")

    def __init__(self, type, data):
        if not isinstance(type, Type):
            raise TypeError(f"Value type must be Type, got {type!r}")
        if not type.accepts(data):
            raise wormscript.ValueTypeError(
                f"Cannot store {data!r} as {type.keyword}")
        if type is Type.NUMBER:
            data = float(data)
        object.__setattr__(self, "type", type)
        object.__setattr__(self, "data", data)

    def __setattr__(self, name, value):
        raise AttributeError("Value is immutable")

    @classmethod
    def number(cls, data):
        """Create a number value."""
        return cls(Type.NUMBER, data)

    @classmethod
    def boolean(cls, data):
        """Create a boolean value."""
        return cls(Type.BOOLEAN, data)

    @classmethod
    def entity(cls, data):
        """Create an entity value, None meaning no entity."""
        return cls(Type.ENTITY, data)

    @classmethod
    def default(cls, type):
        """Create the initial value for a freshly declared variable."""
        return cls(type, type.default)

    @property
    def is_null(self):
        """(bool) Whether this is the absent entity."""
        return self.type is Type.ENTITY and self.data is None

    def format(self):
        """Convert value to text as the print statement shows it.

        Returns:
            (str) Display text
        """
        if self.type is Type.BOOLEAN:
            return "true" if self.data else "false"
        if self.type is Type.NUMBER:
            if math.isfinite(self.data) and self.data == int(self.data):
                return f"{self.data:.1f}"
            return repr(self.data)
        if self.data is None:
            return "null"
        return str(self.data)

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        if self.type is not other.type:
            return False
        if self.type is Type.ENTITY:
            return self.data is other.data
        return self.data == other.data

    def __hash__(self):
        if self.type is Type.ENTITY:
            return hash((self.type, id(self.data)))
        return hash((self.type, self.data))

    def __repr__(self):
        return f"Value({self.type.keyword}, {self.data!r})"


def fuzzy_equals(x, y, eps=EPSILON):
    """Returns true if x == y within eps."""
    if math.isnan(x) or math.isnan(y):
        return False
    return abs(x - y) <= eps or x == y


def fuzzy_less_or_equal(x, y, eps=EPSILON):
    """Returns true if x <= y within eps."""
    if fuzzy_equals(x, y, eps):
        return True
    return x < y


def fuzzy_greater_or_equal(x, y, eps=EPSILON):
    """Returns true if x >= y within eps."""
    if fuzzy_equals(x, y, eps):
        return True
    return x > y
