"""Action statements: everything with an effect on the game world."""

__all__ = ["Action", "Turn", "Move", "Jump", "ToggleWeapon", "Fire", "Skip"]

import logging

import wormscript
from . import _base


logger = logging.getLogger("wormscript.action")
logger.addHandler(logging.NullHandler())


class Action(_base.Statement):
    """Base class for action statements.

    An action costs one unit of budget and is performed by the action
    handler for the bound entity. While a run is still seeking its
    resumption point actions are skipped; they can never be a resumption
    point themselves. When the handler refuses the action the run stops and
    the action is tried again on the next run.
    """

    has_action = True
    keyword = None

    def execute(self, program):
        state = program.state
        if state.exhausted:
            return False
        if state.seeking:
            return True
        state.charge()
        context = program.context
        done = bool(self.perform(context.handler, context.entity, context))
        if not done:
            logger.debug("%s refused by handler", self.keyword)
        return done

    def perform(self, handler, entity, context):
        """Ask the handler to perform the action, returning its result."""
        raise NotImplementedError(f"{self.__class__.__name__}.perform() not implemented")

    def unparse(self):
        return f"{self.keyword};"

    def __repr__(self):
        return f"{self.__class__.__name__}()"


class Turn(Action):
    """Turn by an angle in radians."""

    keyword = "turn"

    def __init__(self, angle, position=None):
        self.position = position
        self._expect(angle, wormscript.Type.NUMBER, "Angle of turn")
        self.angle = angle

    def perform(self, handler, entity, context):
        return handler.turn(entity, self.angle.evaluate(context).data)

    def unparse(self):
        return f"turn {self.angle.unparse()};"

    def __repr__(self):
        return f"Turn({self.angle})"


class Move(Action):
    keyword = "move"

    def __init__(self, position=None):
        self.position = position

    def perform(self, handler, entity, context):
        return handler.move(entity)


class Jump(Action):
    keyword = "jump"

    def __init__(self, position=None):
        self.position = position

    def perform(self, handler, entity, context):
        return handler.jump(entity)


class ToggleWeapon(Action):
    keyword = "toggleweap"

    def __init__(self, position=None):
        self.position = position

    def perform(self, handler, entity, context):
        return handler.toggle_weapon(entity)


class Fire(Action):
    """Fire the active weapon with a propulsion yield.

    The yield is truncated to a whole number before it reaches the handler.
    """

    keyword = "fire"

    def __init__(self, yield_, position=None):
        self.position = position
        self._expect(yield_, wormscript.Type.NUMBER, "Yield of fire")
        self.yield_ = yield_

    def perform(self, handler, entity, context):
        return handler.fire(entity, int(self.yield_.evaluate(context).data))

    def unparse(self):
        return f"fire {self.yield_.unparse()};"

    def __repr__(self):
        return f"Fire({self.yield_})"


class Skip(Action):
    """Do nothing, but still cost a statement as an action."""

    keyword = "skip"

    def __init__(self, position=None):
        self.position = position

    def perform(self, handler, entity, context):
        return True
