"""Node base classes."""

__all__ = ["AstNode", "Expression", "Statement", "SourcePosition", "Invalid"]

from dataclasses import dataclass

import wormscript


@dataclass(frozen=True)
class SourcePosition:
    """Source code position information for AST nodes.

    Tracks where an AST node originated in the source code,
    useful for error messages and debugging.

    Attributes:
        line: Starting line number (1-indexed)
        column: Starting column number (1-indexed)
        end_line: Ending line number (1-indexed)
        end_column: Ending column number (1-indexed)
        filename: Source file path if known
    """
    line: int | None = None
    column: int | None = None
    end_line: int | None = None
    end_column: int | None = None
    filename: str | None = None

    def __str__(self) -> str:
        """Format position for error messages."""
        if self.line is None:
            return ""
        where = f"line {self.line}, column {self.column}"
        if self.filename:
            return f"{self.filename}: {where}"
        return where


class AstNode:
    """Base class for all AST nodes.

    AST nodes are immutable structures describing a worm program. They are
    validated on construction and raise `TypeCheckError` or `ArgumentError`
    if invalid, so a node that exists is statically well typed.

    This is a base class that should not be instantiated directly.

    Attributes:
        position: Optional source position information (line, column).
                  Set by the builder when creating nodes from source code.
    """

    position = None

    def unparse(self) -> str:
        """Convert this node back to source code.

        Binary operations are fully parenthesized and negation is written
        as a subtraction from zero, so the text parses back to the same
        nodes. `wormscript check --dump` shows programs this way.

        Returns:
            Source code string
        """
        raise NotImplementedError(f"{self.__class__.__name__}.unparse() not implemented")

    def _expect(self, operand, expected, what):
        """Check the static type of an operand at construction.

        Operands of unknown type (placeholders for nodes that already failed
        to build) are accepted so one mistake is reported once.

        Raises:
            TypeCheckError: Operand type is not the expected type
        """
        if operand.type is None or operand.type is expected:
            return
        raise wormscript.TypeCheckError(
            f"{what} must be {expected.keyword}, got {operand.type.keyword}",
            self.position)


class Expression(AstNode):
    """Base class for nodes that produce a `Value`.

    Expressions are pure. They read the variable table and the execution
    context but never change either. The static `type` is fixed when the
    node is constructed and every evaluation produces a value of that type.

    Attributes:
        type: (Type | None) Static result type, None only for placeholders
    """

    type = None

    def evaluate(self, context) -> 'wormscript.Value':
        """Compute the value of this expression.

        Args:
            context: (ExecutionContext) Bound entity and world
        Returns:
            (Value) Result with the static type of this node
        """
        raise NotImplementedError(f"{self.__class__.__name__}.evaluate() not implemented")


class Statement(AstNode):
    """Base class for executable statements.

    `execute` returns False when the statement could not complete in the
    current run (budget exhausted, or an action the handler refused). The
    failure propagates unchanged up to the program, which stops the run.

    Attributes:
        has_action: (bool) Whether this statement or any nested statement
            is an action statement. Computed once at construction.
    """

    has_action = False

    def execute(self, program) -> bool:
        """Run this statement for a program.

        Args:
            program: (Program) Program owning the run state and context
        Returns:
            (bool) False if the run must stop here
        """
        raise NotImplementedError(f"{self.__class__.__name__}.execute() not implemented")

    def children(self):
        """Return the statements nested directly inside this one."""
        return ()

    def walk(self):
        """Iterate this statement and all nested statements, depth first."""
        yield self
        for child in self.children():
            yield from child.walk()


class Invalid(Expression, Statement):
    """Placeholder for a node that failed to build.

    The builder returns this in place of a rejected node so that building
    can continue and report every error in one pass. A program containing a
    placeholder is never handed out, so it is never evaluated.
    """

    type = None

    def __init__(self, error):
        self.error = error
        self.position = error.position

    def evaluate(self, context):
        raise wormscript.IllegalStateError("Invalid node evaluated", self.position)

    def execute(self, program):
        raise wormscript.IllegalStateError("Invalid node executed", self.position)

    def __repr__(self):
        return f"Invalid({self.error.message!r})"
