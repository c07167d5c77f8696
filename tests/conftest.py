import pytest
import wormscript


@pytest.fixture
def world():
    """Empty sandbox world."""
    return wormscript.SandboxWorld()


@pytest.fixture
def team():
    return wormscript.Team("red")


@pytest.fixture
def worm(world, team):
    """Worm at the origin facing along x, member of the red team."""
    return world.add(wormscript.SandboxWorm(0, 0, 0, team=team, name="w1"))


@pytest.fixture
def handler():
    return wormscript.RecordingHandler()


@pytest.fixture
def context(worm, handler):
    """Execution context bound to the worm."""
    ctx = wormscript.ExecutionContext()
    ctx.bind(worm, handler)
    return ctx
