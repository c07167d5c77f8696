"""Test suspension and resumption of programs across runs."""

import math

import pytest

import wormscript
from wormscript import ast
import runtest


def test_budget_exhausted_in_while():
    program, worm, handler = runtest.make_program(
        "double x;\nwhile true { x := x + 1; }")

    program.run()
    first = runtest.value_of(program, "x")
    assert first == 499
    assert not program.is_finished()
    assert program.remaining_budget() == 0
    assert isinstance(program.cursor, ast.While)

    program.run()
    second = runtest.value_of(program, "x")
    assert second > first
    assert second == 998
    assert not program.is_finished()
    assert isinstance(program.cursor, ast.While)


def test_seek_skips_assignments():
    program, worm, handler = runtest.make_program(
        "double n;\nn := 5;\nwhile true { n := n + 1; }", max_statements=10)

    program.run()
    assert runtest.value_of(program, "n") == 9
    program.run()
    assert runtest.value_of(program, "n") == 13


def test_refused_action_in_while():
    world = wormscript.SandboxWorld()
    worm = world.add(wormscript.SandboxWorm(action_points=11))
    program, worm, handler = runtest.make_program(
        "double n;\nmove;\nwhile n < 3 { turn 0.5; n := n + 1; }", world, worm)

    runtest.run_turn(program, worm)
    assert handler.names() == ["move", "turn", "turn"]
    assert [r[0] for r in handler.refused] == ["turn"]
    assert runtest.value_of(program, "n") == 2
    assert not program.is_finished()
    assert isinstance(program.cursor, ast.While)

    handler.clear()
    runtest.run_turn(program, worm)
    assert handler.names() == ["turn"]
    assert runtest.value_of(program, "n") == 3
    assert program.is_finished()
    assert program.cursor is None


def test_resume_inside_if_branch():
    world = wormscript.SandboxWorld()
    worm = world.add(wormscript.SandboxWorm(action_points=10))
    source = "\n".join([
        "bool b; double n;",
        "b := true;",
        "if b then {",
        "    while n < 2 { turn 1; n := n + 1; }",
        "} else {",
        "    move;",
        "}",
    ])
    program, worm, handler = runtest.make_program(source, world, worm)

    runtest.run_turn(program, worm)
    assert handler.names() == ["turn"]
    assert isinstance(program.cursor, ast.While)

    handler.clear()
    runtest.run_turn(program, worm)
    assert handler.names() == ["turn"]
    assert runtest.value_of(program, "n") == 2
    assert program.is_finished()


def test_resume_inside_else_branch():
    world = wormscript.SandboxWorld()
    worm = world.add(wormscript.SandboxWorm(action_points=10))
    source = "\n".join([
        "double n;",
        "if n > 0 then { move; } else {",
        "    while n < 2 { turn 1; n := n + 1; }",
        "}",
    ])
    program, worm, handler = runtest.make_program(source, world, worm)

    runtest.run_turn(program, worm)
    assert runtest.value_of(program, "n") == 1

    handler.clear()
    runtest.run_turn(program, worm)
    # n > 0 now, but the loop in the else branch is resumed
    assert handler.names() == ["turn"]
    assert runtest.value_of(program, "n") == 2
    assert program.is_finished()


def test_innermost_loop_is_cursor():
    world = wormscript.SandboxWorld()
    worm = world.add(wormscript.SandboxWorm(action_points=20))
    source = "\n".join([
        "double i; double j;",
        "while i < 2 {",
        "    j := 0;",
        "    while j < 2 { turn 1; j := j + 1; }",
        "    i := i + 1;",
        "}",
    ])
    program, worm, handler = runtest.make_program(source, world, worm)

    runtest.run_turn(program, worm)
    assert handler.names() == ["turn", "turn"]
    assert runtest.value_of(program, "i") == 1
    assert runtest.value_of(program, "j") == 0
    inner = program.statement.statements[0].body.statements[1]
    assert program.cursor is inner

    handler.clear()
    runtest.run_turn(program, worm)
    # resumes the inner loop: j restarts from its current value
    assert handler.names() == ["turn", "turn"]
    assert runtest.value_of(program, "i") == 2
    assert program.is_finished()


def test_foreach_restarts_from_first_element():
    world = wormscript.SandboxWorld()
    worm = world.add(wormscript.SandboxWorm(name="a"))
    world.add(wormscript.SandboxWorm(3, 0, name="b"))
    world.add(wormscript.SandboxWorm(6, 0, name="c"))
    program, worm, handler = runtest.make_program(
        "entity w; double count;\nforeach (worm, w) do { count := count + 1; }",
        world, worm, max_statements=5)

    program.run()
    assert runtest.value_of(program, "count") == 2
    assert isinstance(program.cursor, ast.ForEach)

    program.run()
    assert runtest.value_of(program, "count") == 4
    assert str(runtest.value_of(program, "w")) == "b"


def test_foreach_completes_with_budget():
    world = wormscript.SandboxWorld()
    worm = world.add(wormscript.SandboxWorm(name="a"))
    world.add(wormscript.SandboxWorm(3, 0, name="b"))
    world.add(wormscript.SandboxWorm(6, 0, name="c"))
    program, worm, handler = runtest.make_program(
        "entity w; double count;\nforeach (worm, w) do { count := count + 1; }",
        world, worm, max_statements=7)

    program.run()
    assert runtest.value_of(program, "count") == 3
    assert program.is_finished()
    assert program.remaining_budget() == 0


def test_foreach_over_empty_collection():
    program, worm, handler = runtest.make_program(
        "double n; entity f;\nforeach (food, f) do { n := n + 1 }\nprint n")

    program.run()
    assert handler.printed == ["0.0"]
    assert runtest.value_of(program, "f") is None
    assert program.is_finished()
    assert program.cursor is None
    assert program.remaining_budget() == program.MAX_STATEMENTS - 2


def test_stale_cursor_runs_from_start():
    world = wormscript.SandboxWorld()
    worm = world.add(wormscript.SandboxWorm())
    food = world.add(wormscript.SandboxFood(1, 1))
    program, worm, handler = runtest.make_program(
        "entity f; double n;\n"
        "foreach (food, f) do { while true { n := n + 1; } }\n"
        "print n;",
        world, worm)

    program.run()
    assert isinstance(program.cursor, ast.While)
    assert handler.printed == []

    world.remove(food)
    program.run()
    assert program.is_finished()
    assert program.cursor is None
    assert len(handler.printed) == 1


def test_top_level_action_repeats():
    world = wormscript.SandboxWorld()
    worm = world.add(wormscript.SandboxWorm(action_points=1))
    program, worm, handler = runtest.make_program("move; move;", world, worm)

    runtest.run_turn(program, worm)
    assert handler.names() == ["move"]
    assert not program.is_finished()
    assert program.cursor is None

    handler.clear()
    runtest.run_turn(program, worm)
    # no conditional to resume at, so the run starts over
    assert handler.names() == ["move"]


def test_float_loop_then_action():
    program, worm, handler = runtest.make_program(
        "double x;\nx := 0;\nwhile (x < 1.5) { x := x + 0.1; }\nturn(x);")
    program.run()
    assert program.is_finished()
    assert runtest.value_of(program, "x") > 1.5
    name, entity, angle = handler.actions[0]
    assert name == "turn"
    assert angle == pytest.approx(1.5)
    assert worm.direction == pytest.approx(1.5)


def test_empty_while_body_costs_budget():
    program, worm, handler = runtest.make_program("while true { }", max_statements=50)
    program.run()
    assert not program.is_finished()
    assert program.remaining_budget() == 0


def test_skip_costs_budget():
    program, worm, handler = runtest.make_program(
        "skip; skip; skip; print 1", max_statements=3)
    program.run()
    assert handler.printed == []
    assert not program.is_finished()


@pytest.mark.parametrize("budget", [0, 1])
def test_conditional_without_budget(budget):
    program, worm, handler = runtest.make_program(
        "if true then { print 1 }", max_statements=budget)
    program.run()
    assert handler.printed == []
    assert isinstance(program.cursor, ast.If)

    program.max_statements = 10
    program.run()
    assert handler.printed == ["1.0"]
    assert program.is_finished()


def test_fire_yield_truncated():
    program, worm, handler = runtest.make_program("fire 3.9; fire -2.5")
    program.run()
    assert [a[2] for a in handler.actions] == [3, -2]
    assert worm.action_points == 80


def test_jump_uses_all_points():
    program, worm, handler = runtest.make_program("jump; jump")
    runtest.run_turn(program, worm)
    assert handler.names() == ["jump"]
    assert worm.action_points == 0
    assert not program.is_finished()


def test_turn_infinite_angle_refused():
    program, worm, handler = runtest.make_program("turn 1 / 0")
    program.run()
    assert handler.names() == []
    assert [r[0] for r in handler.refused] == ["turn"]
    assert not math.isinf(worm.direction)
