"""Global variables of a worm program."""

__all__ = ["Variable", "VariableTable"]

import wormscript


class Variable:
    """A declared global variable.

    The declared type never changes. The value starts at the type default
    (0.0, false, or no entity) until assigned.

    Args:
        type: (Type) Declared type
        value: (Value | None) Optional initial value
    Attributes:
        type: (Type) Declared type
    """

    __slots__ = ("type", "_value")

    def __init__(self, type, value=None):
        if not isinstance(type, wormscript.Type):
            raise TypeError(f"Variable type must be Type, got {type!r}")
        self.type = type
        self._value = wormscript.Value.default(type)
        if value is not None:
            self.set_value(value)

    @property
    def value(self):
        """(Value) Current value."""
        return self._value

    def accepts(self, value):
        """Check whether a value could be stored in this variable."""
        if isinstance(value, wormscript.Value):
            return value.type is self.type
        return self.type.accepts(value)

    def set_value(self, value):
        """Store a new value.

        Python data is wrapped into a `Value` of the declared type, so plain
        ints are accepted for number variables and stored as floats.

        Args:
            value: (Value | float | int | bool | Entity | None) New value
        Raises:
            ValueTypeError: Value does not match the declared type
        """
        if not isinstance(value, wormscript.Value):
            value = wormscript.Value(self.type, value)
        elif value.type is not self.type:
            raise wormscript.ValueTypeError(
                f"Cannot assign {value.type.keyword} to {self.type.keyword} variable")
        self._value = value

    def __repr__(self):
        return f"Variable({self.type.keyword}, {self._value.data!r})"


class VariableTable:
    """Flat table of the global variables of one program.

    Names are unique. The table is filled while the program is built and
    shared by reference with every node that reads or writes a variable.
    """

    def __init__(self):
        self._variables = {}

    def declare(self, name, type, position=None):
        """Add a new variable with its type default.

        Args:
            name: (str) Variable name
            type: (Type) Declared type
            position: (SourcePosition | None) Declaration position for errors
        Returns:
            (Variable) The new variable
        Raises:
            ArgumentError: Name is invalid or already declared
        """
        if not name or not isinstance(name, str):
            raise wormscript.ArgumentError(f"Invalid variable name {name!r}", position)
        if name in self._variables:
            raise wormscript.ArgumentError(f"Variable {name} is already declared", position)
        variable = Variable(type)
        self._variables[name] = variable
        return variable

    def get(self, name):
        """Look up a variable, None if it does not exist."""
        return self._variables.get(name)

    def lookup(self, name, position=None):
        """Look up a variable that must exist.

        Raises:
            VariableReferenceError: No variable with this name
        """
        variable = self._variables.get(name)
        if variable is None:
            raise wormscript.VariableReferenceError(f"{name} does not exist", position)
        return variable

    def remove(self, name):
        """Drop a variable from the table.

        Only hosts that rewrite a program use this; nodes referencing the
        name will fail at their next access.
        """
        del self._variables[name]

    def __contains__(self, name):
        return name in self._variables

    def __getitem__(self, name):
        return self._variables[name]

    def __iter__(self):
        return iter(self._variables)

    def __len__(self):
        return len(self._variables)

    def items(self):
        return self._variables.items()

    def __repr__(self):
        return f"VariableTable<{', '.join(self._variables)}>"
