"""Interfaces to the game a worm program is bound into.

The interpreter never moves worms or tracks game objects itself. It talks to
the game through three narrow interfaces defined here:

- `Entity`: a game object a program can refer to and query
- `World`: the collections and spatial search over entities
- `ActionHandler`: performs actions on behalf of the bound entity

Hosts subclass these. `ExecutionContext` ties one entity and one handler to
a program.
"""

__all__ = [
    "EntityKind",
    "ForeachKind",
    "Entity",
    "World",
    "ActionHandler",
    "ExecutionContext",
]

import enum

import wormscript


class EntityKind(enum.Enum):
    """Kind of game object behind an entity."""

    WORM = "worm"
    FOOD = "food"
    OTHER = "other"


class ForeachKind(enum.Enum):
    """Which world collection a foreach statement iterates."""

    WORM = "worm"
    FOOD = "food"
    ANY = "any"


class Entity:
    """Base class for game objects visible to programs.

    Every capability raises `CapabilityError` unless the subclass overrides
    it. Entity kinds only implement what they model, so querying hit points
    on a piece of food fails instead of producing a made up number.
    """

    kind = EntityKind.OTHER

    def _unsupported(self, capability):
        raise wormscript.CapabilityError(
            f"{type(self).__name__} does not support {capability}")

    @property
    def world(self):
        """(World | None) World this entity lives in."""
        return None

    @property
    def position(self):
        """(tuple[float, float]) Center position as x, y."""
        self._unsupported("position")

    @property
    def radius(self):
        """(float) Radius."""
        self._unsupported("radius")

    @property
    def direction(self):
        """(float) Orientation in radians."""
        self._unsupported("direction")

    @property
    def hit_points(self):
        """(float) Current hit points."""
        self._unsupported("hit points")

    @property
    def max_hit_points(self):
        """(float) Maximum hit points."""
        self._unsupported("maximum hit points")

    @property
    def action_points(self):
        """(float) Current action points."""
        self._unsupported("action points")

    @property
    def max_action_points(self):
        """(float) Maximum action points."""
        self._unsupported("maximum action points")

    @property
    def team(self):
        """(object | None) Team, None when not part of a team."""
        self._unsupported("teams")


class World:
    """Collections and queries over the entities of a game."""

    def worms(self):
        """Return the living worms."""
        raise NotImplementedError(f"{type(self).__name__}.worms() not implemented")

    def food(self):
        """Return the food items."""
        raise NotImplementedError(f"{type(self).__name__}.food() not implemented")

    def entities(self):
        """Return every entity."""
        raise NotImplementedError(f"{type(self).__name__}.entities() not implemented")

    def search_object(self, position, angle):
        """Find the nearest entity in a direction.

        Args:
            position: (tuple[float, float]) Where to search from
            angle: (float) Search direction in radians
        Returns:
            (Entity | None) Closest entity along the direction
        """
        raise NotImplementedError(f"{type(self).__name__}.search_object() not implemented")

    def collection(self, kind):
        """Return the collection selected by a `ForeachKind`."""
        if kind is ForeachKind.WORM:
            return list(self.worms())
        if kind is ForeachKind.FOOD:
            return list(self.food())
        if kind is ForeachKind.ANY:
            return list(self.entities())
        raise ValueError(f"Unknown foreach kind {kind!r}")


class ActionHandler:
    """Performs actions for a program.

    Every action returns True when it was performed and False when the
    entity could not do it (for example not enough action points). A false
    result suspends the program; the action is retried on the next run.
    """

    def turn(self, entity, angle):
        raise NotImplementedError(f"{type(self).__name__}.turn() not implemented")

    def move(self, entity):
        raise NotImplementedError(f"{type(self).__name__}.move() not implemented")

    def jump(self, entity):
        raise NotImplementedError(f"{type(self).__name__}.jump() not implemented")

    def toggle_weapon(self, entity):
        raise NotImplementedError(f"{type(self).__name__}.toggle_weapon() not implemented")

    def fire(self, entity, yield_):
        raise NotImplementedError(f"{type(self).__name__}.fire() not implemented")

    def print(self, text):
        raise NotImplementedError(f"{type(self).__name__}.print() not implemented")


class ExecutionContext:
    """Entity and handler a program runs for.

    Expressions read the bound entity and its world through the context.
    A context starts unbound and can be bound exactly once.
    """

    def __init__(self):
        self._entity = None
        self._handler = None

    def bind(self, entity, handler):
        """Bind the entity and action handler.

        Raises:
            IllegalStateError: Context already bound
            ArgumentError: Entity or handler missing
        """
        if self._entity is not None:
            raise wormscript.IllegalStateError("Program is already bound to an entity")
        if entity is None or handler is None:
            raise wormscript.ArgumentError("Binding requires an entity and a handler")
        self._entity = entity
        self._handler = handler

    @property
    def is_bound(self):
        """(bool) Whether an entity has been bound."""
        return self._entity is not None

    @property
    def entity(self):
        """(Entity) Bound entity.

        Raises:
            IllegalStateError: Context is not bound
        """
        if self._entity is None:
            raise wormscript.IllegalStateError("Program has no bound entity")
        return self._entity

    @property
    def handler(self):
        """(ActionHandler) Bound action handler."""
        if self._handler is None:
            raise wormscript.IllegalStateError("Program has no bound action handler")
        return self._handler

    @property
    def world(self):
        """(World) World of the bound entity."""
        world = self.entity.world
        if world is None:
            raise wormscript.IllegalStateError("Bound entity is not part of a world")
        return world

    def __repr__(self):
        return f"ExecutionContext<{self._entity!r}>"
