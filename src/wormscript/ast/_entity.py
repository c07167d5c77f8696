"""Nodes that refer to and query game entities."""

__all__ = [
    "Self",
    "EntityQuery",
    "SameTeam",
    "IsKind",
    "SearchObject",
    "QUERIES",
]

import wormscript
from . import _base


# Query keyword -> (capability description, accessor)
QUERIES = {
    "getx": ("position", lambda entity: entity.position[0]),
    "gety": ("position", lambda entity: entity.position[1]),
    "getradius": ("radius", lambda entity: entity.radius),
    "getdir": ("direction", lambda entity: entity.direction),
    "getap": ("action points", lambda entity: entity.action_points),
    "getmaxap": ("maximum action points", lambda entity: entity.max_action_points),
    "gethp": ("hit points", lambda entity: entity.hit_points),
    "getmaxhp": ("maximum hit points", lambda entity: entity.max_hit_points),
}


def _query(entity, capability, accessor, position):
    """Read a capability, turning every way of not having it into one error."""
    if entity is None:
        raise wormscript.CapabilityError(f"Cannot query {capability} of null", position)
    try:
        return accessor(entity)
    except wormscript.CapabilityError as err:
        raise wormscript.CapabilityError(err.message, position) from err
    except AttributeError as err:
        raise wormscript.CapabilityError(
            f"{type(entity).__name__} does not support {capability}", position) from err


class Self(_base.Expression):
    """The entity the program is bound to."""

    type = wormscript.Type.ENTITY

    def __init__(self, position=None):
        self.position = position

    def evaluate(self, context):
        return wormscript.Value.entity(context.entity)

    def unparse(self):
        return "self"

    def __repr__(self):
        return "Self()"


class EntityQuery(_base.Expression):
    """Numeric capability of an entity: getx, gety, getradius, getdir,
    getap, getmaxap, gethp, getmaxhp.

    Fails with `CapabilityError` on null or on entity kinds that do not
    model the capability.
    """

    type = wormscript.Type.NUMBER

    def __init__(self, query, operand, position=None):
        if query not in QUERIES:
            raise ValueError(f"Unknown entity query {query!r}")
        self.position = position
        self._expect(operand, wormscript.Type.ENTITY, f"Argument of {query}")
        self.query = query
        self.operand = operand

    def evaluate(self, context):
        entity = self.operand.evaluate(context).data
        capability, accessor = QUERIES[self.query]
        result = _query(entity, capability, accessor, self.position)
        return wormscript.Value.number(result)

    def unparse(self):
        return f"{self.query} {self.operand.unparse()}"

    def __repr__(self):
        return f"EntityQuery({self.query!r}, {self.operand})"


class SameTeam(_base.Expression):
    """True when the bound entity and the operand share a team."""

    type = wormscript.Type.BOOLEAN

    def __init__(self, operand, position=None):
        self.position = position
        self._expect(operand, wormscript.Type.ENTITY, "Argument of sameteam")
        self.operand = operand

    def evaluate(self, context):
        other = self.operand.evaluate(context).data
        other_team = _query(other, "teams", lambda e: e.team, self.position)
        own_team = _query(context.entity, "teams", lambda e: e.team, self.position)
        return wormscript.Value.boolean(own_team is not None and own_team is other_team)

    def unparse(self):
        return f"sameteam {self.operand.unparse()}"

    def __repr__(self):
        return f"SameTeam({self.operand})"


class IsKind(_base.Expression):
    """Type test of an entity: isworm, isfood. Null is never of any kind."""

    type = wormscript.Type.BOOLEAN

    _KEYWORDS = {
        wormscript.EntityKind.WORM: "isworm",
        wormscript.EntityKind.FOOD: "isfood",
    }

    def __init__(self, kind, operand, position=None):
        if kind not in self._KEYWORDS:
            raise ValueError(f"Cannot test for entity kind {kind!r}")
        self.position = position
        self._expect(operand, wormscript.Type.ENTITY, f"Argument of {self._KEYWORDS[kind]}")
        self.kind = kind
        self.operand = operand

    def evaluate(self, context):
        entity = self.operand.evaluate(context).data
        kind = getattr(entity, "kind", None)
        return wormscript.Value.boolean(entity is not None and kind is self.kind)

    def unparse(self):
        return f"{self._KEYWORDS[self.kind]} {self.operand.unparse()}"

    def __repr__(self):
        return f"IsKind({self.kind.name}, {self.operand})"


class SearchObject(_base.Expression):
    """Nearest entity in a direction relative to the bound entity.

    The angle offset is added to the direction of the bound entity and the
    search itself is left to the world.
    """

    type = wormscript.Type.ENTITY

    def __init__(self, offset, position=None):
        self.position = position
        self._expect(offset, wormscript.Type.NUMBER, "Argument of searchobj")
        self.offset = offset

    def evaluate(self, context):
        offset = self.offset.evaluate(context).data
        entity = context.entity
        origin = _query(entity, "position", lambda e: e.position, self.position)
        direction = _query(entity, "direction", lambda e: e.direction, self.position)
        found = context.world.search_object(origin, direction + offset)
        return wormscript.Value.entity(found)

    def unparse(self):
        return f"searchobj {self.offset.unparse()}"

    def __repr__(self):
        return f"SearchObject({self.offset})"
