"""Variable access by name."""

__all__ = ["VariableAccess"]

import wormscript
from . import _base


class VariableAccess(_base.Expression):
    """Read a global variable.

    The variable is resolved by name through the shared table on every
    evaluation. The static type is the declared type known when the node is
    built.

    Args:
        name: (str) Variable name
        type: (Type) Declared type of the variable
        table: (VariableTable) Table the name is resolved in
    """

    def __init__(self, name, type, table, position=None):
        if not name or not isinstance(name, str):
            raise wormscript.ArgumentError(f"Invalid variable name {name!r}", position)
        if not isinstance(type, wormscript.Type):
            raise TypeError(f"VariableAccess type must be Type, got {type!r}")
        self.position = position
        self.name = name
        self.type = type
        self.table = table

    def evaluate(self, context):
        variable = self.table.lookup(self.name, self.position)
        value = variable.value
        if value.type is not self.type:
            raise wormscript.VariableReferenceError(
                f"{self.name} is no longer a {self.type.keyword}", self.position)
        return value

    def unparse(self):
        return self.name

    def __repr__(self):
        return f"VariableAccess({self.name!r}, {self.type.keyword})"
