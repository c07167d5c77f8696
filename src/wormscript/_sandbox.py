"""In-memory world for checking programs without a game.

The sandbox implements the host interfaces of `wormscript` with plain
python objects: a flat list of entities, worms that track their own action
points, and a handler that records everything a program does. The command
line tool runs programs against it, and so do the tests.
"""

__all__ = [
    "SEARCH_EPSILON",
    "Team",
    "SandboxWorld",
    "SandboxEntity",
    "SandboxWorm",
    "SandboxFood",
    "RecordingHandler",
]

import logging
import math

import wormscript


logger = logging.getLogger("wormscript.sandbox")
logger.addHandler(logging.NullHandler())


SEARCH_EPSILON = 1e-2

FULL_TURN = 2 * math.pi


def normalize_angle(angle):
    """Bring an angle into [0, 2*pi)."""
    angle = math.fmod(angle, FULL_TURN)
    if angle < 0:
        angle += FULL_TURN
    # fmod of a tiny negative angle can round up to a full turn
    if angle >= FULL_TURN:
        angle = 0.0
    return angle


def angle_difference(a, b):
    """Smallest absolute difference between two angles."""
    diff = abs(normalize_angle(a) - normalize_angle(b))
    return min(diff, FULL_TURN - diff)


class Team:
    """Named team of worms. Teams are compared by identity."""

    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return f"Team({self.name!r})"


class SandboxWorld(wormscript.World):
    """World keeping its entities in insertion order."""

    def __init__(self):
        self._entities = []

    def add(self, entity):
        """Place an entity in this world, returning it."""
        if entity in self._entities:
            raise ValueError(f"{entity!r} is already in this world")
        self._entities.append(entity)
        entity._world = self
        return entity

    def remove(self, entity):
        """Take an entity out of this world."""
        self._entities.remove(entity)
        entity._world = None

    def worms(self):
        return [e for e in self._entities if e.kind is wormscript.EntityKind.WORM]

    def food(self):
        return [e for e in self._entities if e.kind is wormscript.EntityKind.FOOD]

    def entities(self):
        return list(self._entities)

    def search_object(self, position, angle):
        """Find the nearest entity whose bearing matches an angle.

        Entities at the search position itself are never found, so a worm
        searching from its own center does not see itself.
        """
        x, y = position
        nearest = None
        nearest_distance = math.inf
        for entity in self._entities:
            ex, ey = entity.position
            distance = math.hypot(ex - x, ey - y)
            if distance <= 0 or distance >= nearest_distance:
                continue
            bearing = math.atan2(ey - y, ex - x)
            if angle_difference(bearing, angle) <= SEARCH_EPSILON:
                nearest = entity
                nearest_distance = distance
        logger.debug("search from %s at %.4f found %r", position, angle, nearest)
        return nearest

    def __repr__(self):
        return f"SandboxWorld<{len(self._entities)} entities>"


class SandboxEntity(wormscript.Entity):
    """Round entity with a position, the part every sandbox kind shares."""

    def __init__(self, x, y, radius):
        self._world = None
        self._position = (float(x), float(y))
        self._radius = float(radius)

    @property
    def world(self):
        return self._world

    @property
    def position(self):
        return self._position

    @position.setter
    def position(self, value):
        x, y = value
        self._position = (float(x), float(y))

    @property
    def radius(self):
        return self._radius


class SandboxWorm(SandboxEntity):
    """Worm with every capability a program can query.

    Args:
        x, y: (float) Center position
        direction: (float) Orientation in radians
        radius: (float) Radius
        hit_points: (float) Starting and maximum hit points
        action_points: (float) Starting and maximum action points
        team: (Team | None) Team of the worm
        name: (str) Display name
    """

    kind = wormscript.EntityKind.WORM

    def __init__(self, x=0.0, y=0.0, direction=0.0, radius=0.5,
                 hit_points=100, action_points=100, team=None, name="worm"):
        super().__init__(x, y, radius)
        self.name = name
        self._direction = normalize_angle(direction)
        self._hit_points = float(hit_points)
        self._max_hit_points = float(hit_points)
        self._action_points = float(action_points)
        self._max_action_points = float(action_points)
        self._team = team

    @property
    def direction(self):
        return self._direction

    @direction.setter
    def direction(self, value):
        self._direction = normalize_angle(value)

    @property
    def hit_points(self):
        return self._hit_points

    @property
    def max_hit_points(self):
        return self._max_hit_points

    @property
    def action_points(self):
        return self._action_points

    @action_points.setter
    def action_points(self, value):
        self._action_points = max(0.0, min(float(value), self._max_action_points))

    @property
    def max_action_points(self):
        return self._max_action_points

    @property
    def team(self):
        return self._team

    def start_turn(self):
        """Restore the action points for a new turn."""
        self._action_points = self._max_action_points

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"SandboxWorm({self.name!r})"


class SandboxFood(SandboxEntity):
    """Food only has a position and a radius."""

    kind = wormscript.EntityKind.FOOD

    def __init__(self, x=0.0, y=0.0, radius=0.2):
        super().__init__(x, y, radius)

    def __str__(self):
        return "food"

    def __repr__(self):
        return f"SandboxFood{self._position}"


class RecordingHandler(wormscript.ActionHandler):
    """Action handler that records performed actions.

    Actions cost action points of the worm performing them. An action the
    worm cannot pay for is refused, which suspends the program.

    Attributes:
        actions: (list[tuple]) Performed actions as (name, entity, *args)
        refused: (list[tuple]) Refused actions in the same form
        printed: (list[str]) Text sent by print statements
    """

    MOVE_COST = 1
    FIRE_COST = 10
    TOGGLE_COST = 0

    def __init__(self):
        self.actions = []
        self.refused = []
        self.printed = []

    @staticmethod
    def turn_cost(angle):
        """Action points to turn by an angle: one per sixtieth of a turn."""
        if not math.isfinite(angle):
            return math.inf
        return math.ceil(60 * abs(angle) / FULL_TURN)

    def _pay(self, entity, cost, record):
        if entity.action_points < cost:
            self.refused.append(record)
            return False
        entity.action_points = entity.action_points - cost
        self.actions.append(record)
        return True

    def turn(self, entity, angle):
        if not self._pay(entity, self.turn_cost(angle), ("turn", entity, angle)):
            return False
        entity.direction = entity.direction + angle
        return True

    def move(self, entity):
        if not self._pay(entity, self.MOVE_COST, ("move", entity)):
            return False
        x, y = entity.position
        step = entity.radius
        entity.position = (x + step * math.cos(entity.direction),
                           y + step * math.sin(entity.direction))
        return True

    def jump(self, entity):
        if entity.action_points <= 0:
            self.refused.append(("jump", entity))
            return False
        return self._pay(entity, entity.action_points, ("jump", entity))

    def toggle_weapon(self, entity):
        return self._pay(entity, self.TOGGLE_COST, ("toggleweap", entity))

    def fire(self, entity, yield_):
        return self._pay(entity, self.FIRE_COST, ("fire", entity, yield_))

    def print(self, text):
        self.printed.append(text)

    def names(self):
        """Names of the performed actions, in order."""
        return [record[0] for record in self.actions]

    def clear(self):
        """Forget everything recorded so far."""
        self.actions.clear()
        self.refused.clear()
        self.printed.clear()
