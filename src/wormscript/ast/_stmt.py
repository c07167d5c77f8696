"""Plain statements: sequences, assignment, and print."""

__all__ = ["Sequence", "Assignment", "Print"]

import wormscript
from . import _base


class Sequence(_base.Statement):
    """Statements executed in order.

    Execution stops at the first statement that fails, and the failure is
    passed up unchanged.
    """

    def __init__(self, statements, position=None):
        statements = tuple(statements)
        for statement in statements:
            if not isinstance(statement, _base.Statement):
                raise TypeError(f"Sequence requires Statements, got {type(statement)}")
        self.position = position
        self.statements = statements
        self.has_action = any(s.has_action for s in statements)

    def execute(self, program):
        for statement in self.statements:
            if not statement.execute(program):
                return False
        return True

    def children(self):
        return self.statements

    def unparse(self):
        body = " ".join(s.unparse() for s in self.statements)
        return f"{{ {body} }}" if body else "{ }"

    def __repr__(self):
        return f"Sequence({len(self.statements)})"


class Assignment(_base.Statement):
    """Assign the value of an expression to a global variable.

    The variable is not checked when the node is built, since the full set
    of declarations is not known yet; `Program.validate` reports a missing
    variable or a type mismatch. Executing a mismatched assignment anyway is
    an `IllegalStateError`.

    Args:
        name: (str) Target variable name
        expression: (Expression) Value to assign
        table: (VariableTable) Table holding the variable
    """

    def __init__(self, name, expression, table, position=None):
        if not name or not isinstance(name, str):
            raise wormscript.ArgumentError(f"Invalid variable name {name!r}", position)
        self.position = position
        self.name = name
        self.expression = expression
        self.table = table

    def check(self):
        """Return the semantic error of this assignment, or None."""
        variable = self.table.get(self.name)
        if variable is None:
            return wormscript.SemanticError(
                f"Assignment to undeclared variable {self.name}", self.position)
        if self.expression.type is not None and self.expression.type is not variable.type:
            return wormscript.SemanticError(
                f"Variable {self.name} is {variable.type.keyword} but is assigned "
                f"{self.expression.type.keyword}", self.position)
        return None

    def execute(self, program):
        state = program.state
        if state.exhausted:
            return False
        if state.seeking:
            return True
        state.charge()

        variable = self.table.get(self.name)
        if variable is None:
            raise wormscript.IllegalStateError(
                f"The variable {self.name} does not exist anymore", self.position)
        value = self.expression.evaluate(program.context)
        if not variable.accepts(value):
            raise wormscript.IllegalStateError(
                f"Cannot assign {value.type.keyword} to {variable.type.keyword} "
                f"variable {self.name}", self.position)
        variable.set_value(value)
        return True

    def unparse(self):
        return f"{self.name} := {self.expression.unparse()};"

    def __repr__(self):
        return f"Assignment({self.name!r}, {self.expression})"


class Print(_base.Statement):
    """Send the text of a value to the action handler."""

    def __init__(self, expression, position=None):
        self.position = position
        self.expression = expression

    def execute(self, program):
        state = program.state
        if state.exhausted:
            return False
        if state.seeking:
            return True
        state.charge()
        value = self.expression.evaluate(program.context)
        program.context.handler.print(value.format())
        return True

    def unparse(self):
        return f"print {self.expression.unparse()};"

    def __repr__(self):
        return f"Print({self.expression})"
