"""Control flow statements and the resumption protocol.

A run may stop anywhere: when the statement budget runs out or when the
handler refuses an action. The next run has to continue where the last one
stopped. Only conditional statements (if, while, foreach) are remembered as
resumption points, in the program run state as its cursor.

A run that starts with a cursor set begins in seek mode. The tree is walked
from the root without spending budget, without performing actions and
without assignments, until the conditional statement held by the cursor is
reached. There the cursor is cleared, the run switches to live mode, and the
statement starts over from its own beginning. Statements inside it that ran
before the suspension are run again; none of them are actions, so nothing is
performed twice in the game.

While seeking, a conditional cannot use its condition to decide where to
go, because the value may have changed since the suspension:

- If tries its then branch, and its else branch when the cursor was not
  found in the first one.
- While runs its body once whatever the condition says.
- ForEach runs its body for the first element only.

The first conditional to fail during a run, the innermost one, becomes the
new cursor; enclosing conditionals that fail because of it leave it alone.
"""

__all__ = ["ConditionalStatement", "If", "While", "ForEach"]

import wormscript
from . import _base


class ConditionalStatement(_base.Statement):
    """Base class for statements that can become the resumption point.

    Subclasses implement `perform`. This class takes care of the budget and
    the cursor bookkeeping around it.
    """

    def execute(self, program):
        state = program.state
        if state.exhausted:
            state.suspend_at(self)
            return False

        if state.cursor is self and state.seeking:
            state.resume_at(self)
            state.charge()
        elif not state.seeking:
            state.charge()

        if not self.perform(program):
            state.suspend_at(self)
            return False
        return True

    def perform(self, program) -> bool:
        """Execute the nested statements.

        Returns:
            (bool) False if the run must stop
        """
        raise NotImplementedError(f"{self.__class__.__name__}.perform() not implemented")

    def _condition(self, condition, context):
        return condition.evaluate(context).data


class If(ConditionalStatement):
    """Run one of two branches depending on a condition."""

    def __init__(self, condition, then, otherwise=None, position=None):
        self.position = position
        self._expect(condition, wormscript.Type.BOOLEAN, "Condition of if")
        if otherwise is None:
            otherwise = wormscript.ast.Sequence((), position)
        self.condition = condition
        self.then = then
        self.otherwise = otherwise
        self.has_action = then.has_action or otherwise.has_action

    def perform(self, program):
        if program.state.seeking:
            if not self.then.execute(program):
                return False
            if program.state.seeking:
                return self.otherwise.execute(program)
            return True

        if self._condition(self.condition, program.context):
            return self.then.execute(program)
        return self.otherwise.execute(program)

    def children(self):
        return (self.then, self.otherwise)

    def unparse(self):
        text = f"if {self.condition.unparse()} then {self.then.unparse()}"
        if self.otherwise.children():
            text += f" else {self.otherwise.unparse()}"
        return text

    def __repr__(self):
        return f"If({self.condition})"


class While(ConditionalStatement):
    """Repeat the body while a condition holds.

    Each iteration costs one unit of budget besides the statements of the
    body, so a loop with an empty body still ends its run.
    """

    def __init__(self, condition, body, position=None):
        self.position = position
        self._expect(condition, wormscript.Type.BOOLEAN, "Condition of while")
        self.condition = condition
        self.body = body
        self.has_action = body.has_action

    def perform(self, program):
        state = program.state
        if state.seeking:
            if not self.body.execute(program):
                return False
            if state.seeking:
                return True

        while True:
            if state.exhausted:
                return False
            state.charge()
            if not self._condition(self.condition, program.context):
                return True
            if not self.body.execute(program):
                return False

    def children(self):
        return (self.body,)

    def unparse(self):
        return f"while {self.condition.unparse()} {self.body.unparse()}"

    def __repr__(self):
        return f"While({self.condition})"


class ForEach(ConditionalStatement):
    """Run the body once for every entity of a world collection.

    The collection is fetched again every time the statement starts, so its
    members and order may differ between runs. That is why the body may not
    contain actions: after a suspension the iteration starts over, and an
    action would be performed again for other entities.

    Args:
        kind: (ForeachKind) Collection to iterate
        name: (str) Entity variable bound to each element
        body: (Statement) Loop body
        table: (VariableTable) Table holding the loop variable
    Raises:
        ArgumentError: Body contains an action statement
    """

    def __init__(self, kind, name, body, table, position=None):
        self.position = position
        if not isinstance(kind, wormscript.ForeachKind):
            raise wormscript.ArgumentError(f"Invalid foreach kind {kind!r}", position)
        if not name or not isinstance(name, str):
            raise wormscript.ArgumentError(f"Invalid variable name {name!r}", position)
        if body.has_action:
            raise wormscript.ArgumentError(
                "The body of a foreach may not contain action statements", position)
        self.kind = kind
        self.name = name
        self.body = body
        self.table = table

    def check(self):
        """Return the semantic error of this loop, or None."""
        variable = self.table.get(self.name)
        if variable is None:
            return wormscript.SemanticError(
                f"Foreach variable {self.name} is not declared", self.position)
        if variable.type is not wormscript.Type.ENTITY:
            return wormscript.SemanticError(
                f"Foreach variable {self.name} must be entity, not "
                f"{variable.type.keyword}", self.position)
        return None

    def perform(self, program):
        error = self.check()
        if error is not None:
            raise wormscript.IllegalStateError(error.message, self.position)
        variable = self.table[self.name]
        state = program.state

        for entity in program.context.world.collection(self.kind):
            if state.exhausted:
                return False
            seeking = state.seeking
            if not seeking:
                state.charge()
            variable.set_value(wormscript.Value.entity(entity))
            if not self.body.execute(program):
                return False
            if seeking and state.seeking:
                # cursor is not inside this loop
                break
        return True

    def children(self):
        return (self.body,)

    def unparse(self):
        return f"foreach ({self.kind.value}, {self.name}) do {self.body.unparse()}"

    def __repr__(self):
        return f"ForEach({self.kind.name}, {self.name!r})"
