"""Program controller: owns the AST and drives one run per turn."""

__all__ = ["Program", "RunState"]

import logging

import wormscript


logger = logging.getLogger("wormscript.program")
logger.addHandler(logging.NullHandler())


class RunState:
    """Budget and resumption bookkeeping of a program.

    Statements read and update this through `Program.state`. The budget is
    refilled at the start of every run; the cursor survives between runs.

    Attributes:
        budget: (int) Statements left in the current run
        finished: (bool) Live mode. False while a run is seeking the cursor
            left behind by the previous run.
        cursor: (ConditionalStatement | None) Statement to resume at, or
            the statement being sought while in seek mode
    """

    def __init__(self, budget=0):
        self.budget = budget
        self.finished = True
        self.cursor = None

    @property
    def exhausted(self):
        """(bool) Whether the budget of this run is used up."""
        return self.budget <= 0

    @property
    def seeking(self):
        """(bool) Whether the run is still looking for the cursor."""
        return not self.finished

    def charge(self):
        """Spend one unit of budget."""
        self.budget -= 1

    def start(self, budget):
        """Prepare a new run, seeking if a cursor was left behind."""
        self.budget = budget
        self.finished = self.cursor is None

    def resume_at(self, statement):
        """The sought statement was reached, continue live from here."""
        self.cursor = None
        self.finished = True

    def suspend_at(self, statement):
        """Record where a failing run stopped, unless a nested statement did."""
        if self.cursor is None:
            self.cursor = statement

    def complete(self):
        """The root statement ran to its end."""
        self.cursor = None
        self.finished = True

    def __repr__(self):
        return f"RunState<budget={self.budget} finished={self.finished} cursor={self.cursor!r}>"


class Program:
    """A worm program bound to one entity.

    Programs are built once, usually through `wormscript.parse`, then bound
    to an entity and an action handler and `run` once per turn. Each run
    gets a fresh statement budget. A run that cannot complete leaves a
    cursor behind and the next run continues from there.

    Fatal errors (capability, reference, and state errors) escape `run` and
    leave the program terminated; later runs raise `IllegalStateError`.

    Args:
        statement: (Statement) Root statement
        globals: (VariableTable) Global variables
        handler: (ActionHandler | None) Handler used when `bind` gets none
        max_statements: (int | None) Budget per run, default MAX_STATEMENTS
    """

    MAX_STATEMENTS = 1000

    def __init__(self, statement, globals, handler=None, max_statements=None):
        if not isinstance(statement, wormscript.ast.Statement):
            raise TypeError(f"Program requires a Statement, got {type(statement)}")
        if not isinstance(globals, wormscript.VariableTable):
            raise TypeError(f"Program requires a VariableTable, got {type(globals)}")
        if max_statements is None:
            max_statements = self.MAX_STATEMENTS
        if max_statements < 0:
            raise ValueError("max_statements cannot be negative")

        self.statement = statement
        self.globals = globals
        self.handler = handler
        self.max_statements = max_statements
        self.context = wormscript.ExecutionContext()
        self.state = RunState(max_statements)
        self.terminated = False

    def __repr__(self):
        return f"Program<{len(self.globals)} globals>"

    @property
    def cursor(self):
        """(ConditionalStatement | None) Where the next run resumes."""
        return self.state.cursor

    def bind(self, entity, handler=None):
        """Bind the entity this program runs for.

        Args:
            entity: (Entity) Entity performing the actions
            handler: (ActionHandler | None) Defaults to the handler given
                when the program was built
        Raises:
            IllegalStateError: Program is already bound
        """
        if handler is None:
            handler = self.handler
        self.context.bind(entity, handler)
        self.handler = handler

    def terminate(self):
        """Make the program unusable, for when its entity dies or drops it."""
        self.terminated = True

    def is_finished(self):
        """Whether the last run completed the whole program."""
        return self.state.finished

    def remaining_budget(self):
        """Statements left from the budget of the last run."""
        return max(self.state.budget, 0)

    def run(self):
        """Execute the program until it ends or the run is suspended.

        Raises:
            IllegalStateError: Program terminated, unbound, or its entity
                has no world
            CapabilityError: An entity was queried for something it lacks
            VariableReferenceError: A variable vanished
        """
        if self.terminated:
            raise wormscript.IllegalStateError("Program has been terminated")
        if not self.context.is_bound:
            raise wormscript.IllegalStateError("Program must be bound to an entity before running")
        if self.context.entity.world is None:
            raise wormscript.IllegalStateError("Bound entity is not part of a world")

        state = self.state
        state.start(self.max_statements)
        logger.debug("Run started, resuming at %r", state.cursor)
        try:
            done = self.statement.execute(self)
            if done and state.seeking:
                # The cursor sits somewhere the walk could not reach again
                logger.debug("Cursor %r not found, running from the start", state.cursor)
                state.complete()
                done = self.statement.execute(self)
        except Exception:
            self.terminated = True
            raise

        if done:
            state.complete()
            logger.debug("Run finished with %d statements left", state.budget)
        else:
            state.finished = False
            logger.debug("Run suspended at %r", state.cursor)

    def validate(self):
        """Find errors that need the complete set of declarations.

        Checks that every assignment targets a declared variable of the
        same type as its expression, and that every foreach iterates with a
        declared entity variable.

        Returns:
            (list[SemanticError]) Errors in source order
        """
        errors = []
        for statement in self.statement.walk():
            check = getattr(statement, "check", None)
            if check is None:
                continue
            error = check()
            if error is not None:
                errors.append(error)
        return errors

    def is_well_formed(self):
        """Whether no foreach body contains an action statement."""
        for statement in self.statement.walk():
            if isinstance(statement, wormscript.ast.ForEach) and statement.body.has_action:
                return False
        return True

    def unparse(self):
        """Source text of the program, declarations first.

        Initializers are not repeated in the declarations since they are
        already assignments in the statements.
        """
        lines = [f"{v.type.keyword} {name};" for name, v in self.globals.items()]
        statement = self.statement
        if isinstance(statement, wormscript.ast.Sequence):
            lines.extend(s.unparse() for s in statement.statements)
        else:
            lines.append(statement.unparse())
        return "\n".join(lines)
