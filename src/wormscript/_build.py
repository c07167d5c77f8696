"""Construct program nodes with static checks and collected errors.

The builder is the only place programs are assembled. The parser calls one
`create_*` method per node it recognizes, in source order, passing the
source position of the node. Each method checks the static types of its
operands. A failed check does not stop the build: the error is appended to
`Builder.errors` and an `Invalid` placeholder is returned in place of the
node, so one pass reports every construction error of a program.

Checks that need every declaration of the program (assignments and foreach
loop variables) are left to `Program.validate`.
"""

__all__ = ["Builder"]

import logging

import wormscript
from wormscript import ast


logger = logging.getLogger("wormscript.build")
logger.addHandler(logging.NullHandler())


class Builder:
    """Builds program nodes, collecting errors instead of raising them.

    Args:
        handler: (ActionHandler | None) Handler the program will use for
            actions and printing unless another one is given when binding

    Attributes:
        globals: (VariableTable) Declared variables
        errors: (list[ProgramError]) Construction errors, in build order
        handler: (ActionHandler | None) Handler for built programs
    """

    def __init__(self, handler=None):
        self.handler = handler
        self.globals = wormscript.VariableTable()
        self.errors = []

    def _make(self, node_type, *args, position=None):
        """Construct a node, recording a failed check as an error."""
        try:
            return node_type(*args, position=position)
        except (wormscript.TypeCheckError, wormscript.ArgumentError) as err:
            logger.debug("Rejected %s: %s", node_type.__name__, err)
            self.errors.append(err)
            return ast.Invalid(err)

    @property
    def failed(self):
        """(bool) Whether any error was collected."""
        return bool(self.errors)

    # Declarations

    def declare(self, position, name, type):
        """Declare a global variable.

        Returns:
            (Variable | None) New variable, None if the declaration failed
        """
        try:
            return self.globals.declare(name, type, position)
        except wormscript.ArgumentError as err:
            self.errors.append(err)
            return None

    def create_double_type(self):
        return wormscript.Type.NUMBER

    def create_boolean_type(self):
        return wormscript.Type.BOOLEAN

    def create_entity_type(self):
        return wormscript.Type.ENTITY

    # Literals

    def create_double_literal(self, position, value):
        return self._make(ast.Number, value, position=position)

    def create_boolean_literal(self, position, value):
        return self._make(ast.Boolean, value, position=position)

    def create_null(self, position):
        return self._make(ast.Null, position=position)

    def create_self(self, position):
        return self._make(ast.Self, position=position)

    # Arithmetic

    def create_add(self, position, left, right):
        return self._make(ast.ArithmeticOp, "+", left, right, position=position)

    def create_subtraction(self, position, left, right):
        return self._make(ast.ArithmeticOp, "-", left, right, position=position)

    def create_mul(self, position, left, right):
        return self._make(ast.ArithmeticOp, "*", left, right, position=position)

    def create_division(self, position, left, right):
        return self._make(ast.ArithmeticOp, "/", left, right, position=position)

    def create_negation(self, position, operand):
        zero = self.create_double_literal(position, 0.0)
        return self.create_subtraction(position, zero, operand)

    def create_sqrt(self, position, operand):
        return self._make(ast.MathFunction, "sqrt", operand, position=position)

    def create_sin(self, position, operand):
        return self._make(ast.MathFunction, "sin", operand, position=position)

    def create_cos(self, position, operand):
        return self._make(ast.MathFunction, "cos", operand, position=position)

    # Comparison and logic

    def create_less_than(self, position, left, right):
        return self._make(ast.ComparisonOp, "<", left, right, position=position)

    def create_greater_than(self, position, left, right):
        return self._make(ast.ComparisonOp, ">", left, right, position=position)

    def create_less_than_or_equal_to(self, position, left, right):
        return self._make(ast.ComparisonOp, "<=", left, right, position=position)

    def create_greater_than_or_equal_to(self, position, left, right):
        return self._make(ast.ComparisonOp, ">=", left, right, position=position)

    def create_equality(self, position, left, right):
        return self._make(ast.EqualityOp, "==", left, right, position=position)

    def create_inequality(self, position, left, right):
        return self._make(ast.EqualityOp, "!=", left, right, position=position)

    def create_and(self, position, left, right):
        return self._make(ast.LogicalOp, "&&", left, right, position=position)

    def create_or(self, position, left, right):
        return self._make(ast.LogicalOp, "||", left, right, position=position)

    def create_not(self, position, operand):
        return self._make(ast.NotOp, operand, position=position)

    # Entities

    def create_entity_query(self, position, query, operand):
        """Create one of the numeric entity queries (getx, gethp, ...)."""
        return self._make(ast.EntityQuery, query, operand, position=position)

    def create_get_x(self, position, operand):
        return self.create_entity_query(position, "getx", operand)

    def create_get_y(self, position, operand):
        return self.create_entity_query(position, "gety", operand)

    def create_get_radius(self, position, operand):
        return self.create_entity_query(position, "getradius", operand)

    def create_get_dir(self, position, operand):
        return self.create_entity_query(position, "getdir", operand)

    def create_get_ap(self, position, operand):
        return self.create_entity_query(position, "getap", operand)

    def create_get_max_ap(self, position, operand):
        return self.create_entity_query(position, "getmaxap", operand)

    def create_get_hp(self, position, operand):
        return self.create_entity_query(position, "gethp", operand)

    def create_get_max_hp(self, position, operand):
        return self.create_entity_query(position, "getmaxhp", operand)

    def create_same_team(self, position, operand):
        return self._make(ast.SameTeam, operand, position=position)

    def create_is_worm(self, position, operand):
        return self._make(ast.IsKind, wormscript.EntityKind.WORM, operand, position=position)

    def create_is_food(self, position, operand):
        return self._make(ast.IsKind, wormscript.EntityKind.FOOD, operand, position=position)

    def create_search_obj(self, position, offset):
        return self._make(ast.SearchObject, offset, position=position)

    # Variables

    def create_variable_access(self, position, name, type=None):
        """Create a variable read.

        The type defaults to the declared type in the table; a name that is
        not declared is an `ArgumentError`.
        """
        if type is None:
            variable = self.globals.get(name)
            if variable is None:
                err = wormscript.ArgumentError(f"Variable {name} is not declared", position)
                self.errors.append(err)
                return ast.Invalid(err)
            type = variable.type
        return self._make(ast.VariableAccess, name, type, self.globals, position=position)

    # Statements

    def create_assignment(self, position, name, expression):
        return self._make(ast.Assignment, name, expression, self.globals, position=position)

    def create_print(self, position, expression):
        return self._make(ast.Print, expression, position=position)

    def create_sequence(self, position, statements):
        return self._make(ast.Sequence, statements, position=position)

    def create_if(self, position, condition, then, otherwise=None):
        return self._make(ast.If, condition, then, otherwise, position=position)

    def create_while(self, position, condition, body):
        return self._make(ast.While, condition, body, position=position)

    def create_foreach(self, position, kind, name, body):
        return self._make(ast.ForEach, kind, name, body, self.globals, position=position)

    # Actions

    def create_turn(self, position, angle):
        return self._make(ast.Turn, angle, position=position)

    def create_move(self, position):
        return self._make(ast.Move, position=position)

    def create_jump(self, position):
        return self._make(ast.Jump, position=position)

    def create_toggle_weap(self, position):
        return self._make(ast.ToggleWeapon, position=position)

    def create_fire(self, position, yield_):
        return self._make(ast.Fire, yield_, position=position)

    def create_skip(self, position):
        return self._make(ast.Skip, position=position)

    # Program

    def create_program(self, statement, max_statements=None):
        """Wrap the root statement and the declared globals in a Program.

        Raises:
            ProgramParseError: Construction errors were collected
        """
        if self.errors:
            raise wormscript.ProgramParseError(self.errors)
        return wormscript.Program(
            statement, self.globals, self.handler, max_statements=max_statements)
