"""Error classes and helpers"""

__all__ = [
    "ProgramError",
    "TypeCheckError",
    "ArgumentError",
    "SemanticError",
    "ParseError",
    "ProgramParseError",
    "IllegalStateError",
    "CapabilityError",
    "VariableReferenceError",
    "ValueTypeError",
]


class ProgramError(Exception):
    """Base class for every error reported about a worm program.

    Args:
        message: (str) Error description
        position: (SourcePosition | None) Where the error originated

    Attributes:
        message: (str) Error description without location
        position: (SourcePosition | None) Source position if known
    """

    def __init__(self, message, position=None):
        self.message = message
        self.position = position
        if position is not None and position.line is not None:
            message = f"line {position.line}, column {position.column}: {message}"
        super().__init__(message)

    @property
    def line(self):
        """(int | None) Source line of the error."""
        return self.position.line if self.position is not None else None

    @property
    def column(self):
        """(int | None) Source column of the error."""
        return self.position.column if self.position is not None else None


class TypeCheckError(ProgramError):
    """Static type mismatch found while constructing a node."""


class ArgumentError(ProgramError):
    """Invalid or missing name, or a malformed statement body."""


class SemanticError(ProgramError):
    """Error found by `Program.validate` once all declarations are known."""


class ParseError(ProgramError):
    """Source text does not match the grammar."""


class ProgramParseError(ProgramError):
    """Parsing a program failed.

    Args:
        errors: (list[ProgramError]) Every error collected during the parse

    Attributes:
        errors: (list[ProgramError]) Every error collected during the parse
    """

    def __init__(self, errors):
        self.errors = list(errors)
        count = len(self.errors)
        summary = f"{count} error{'s' if count != 1 else ''} in program"
        if self.errors:
            summary += f"; first: {self.errors[0]}"
        super().__init__(summary)


class IllegalStateError(ProgramError):
    """Program used in a state where the operation is not allowed."""


class CapabilityError(ProgramError):
    """Entity does not support the queried capability."""


class VariableReferenceError(ProgramError):
    """Variable is no longer present in the variable table."""


class ValueTypeError(ProgramError, TypeError):
    """Value does not match the declared type of a variable."""
