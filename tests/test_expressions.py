"""Test expression nodes: evaluation, static type checks, capabilities."""

import math

import pytest

import wormscript
from wormscript import ast
import runtest


def num(value):
    return ast.Number(value)


@runtest.params(
    "code expected",
    add=("1 + 2", "3.0"),
    sub=("1 - 2.5", "-1.5"),
    mul=("2 * 3.5", "7.0"),
    div=("7 / 2", "3.5"),
    precedence=("2 + 3 * 4", "14.0"),
    parens=("(2 + 3) * 4", "20.0"),
    negate=("-3", "-3.0"),
    double_negate=("1 - -2", "3.0"),
    div_zero=("1 / 0", "inf"),
    div_neg_zero=("-1 / 0", "-inf"),
    zero_div_zero=("0 / 0", "nan"),
    sqrt=("sqrt(16)", "4.0"),
    sqrt_negative=("sqrt(-1)", "nan"),
    sin=("sin(0)", "0.0"),
    cos=("cos(0)", "1.0"),
    sin_inf=("sin(1 / 0)", "nan"),
)
def test_arithmetic(key, code, expected):
    assert runtest.print_value(code) == expected


@runtest.params(
    "code expected",
    lt=("1 < 2", "true"),
    lt_equal=("2 < 2", "false"),
    gt=("3 > 2", "true"),
    le=("2 <= 2", "true"),
    ge=("1 >= 2", "false"),
    le_fuzzy=("1.00005 <= 1", "true"),
    ge_fuzzy=("1 >= 1.00005", "true"),
    lt_exact=("1 < 1.00005", "true"),
    eq_exact=("1 == 1.00005", "false"),
    ne=("1 != 2", "true"),
    eq_bool=("true == true", "true"),
    eq_null=("null == null", "true"),
    and_=("true && false", "false"),
    or_=("false || true", "true"),
    not_=("!(1 < 2)", "false"),
    and_before_or=("true || false && false", "true"),
)
def test_comparison_and_logic(key, code, expected):
    assert runtest.print_value(code) == expected


def test_variables_in_expressions():
    assert runtest.print_value("x * y + 1", x=2, y=3) == "7.0"


def test_short_circuit_skips_capability_error():
    assert runtest.print_value("false && getx null > 0") == "false"
    assert runtest.print_value("true || gethp null > 0") == "true"


def test_evaluate_nodes(context):
    expr = ast.ArithmeticOp("+", num(1), ast.MathFunction("sqrt", num(9)))
    assert expr.evaluate(context) == wormscript.Value.number(4)
    assert expr.type is wormscript.Type.NUMBER

    expr = ast.LogicalOp("&&", ast.Boolean(True), ast.NotOp(ast.Boolean(False)))
    assert expr.evaluate(context) == wormscript.Value.boolean(True)


@runtest.params(
    "make",
    add_bool=lambda: ast.ArithmeticOp("+", num(1), ast.Boolean(True)),
    sqrt_entity=lambda: ast.MathFunction("sqrt", ast.Null()),
    compare_bool=lambda: ast.ComparisonOp("<", ast.Boolean(True), num(1)),
    equal_mixed=lambda: ast.EqualityOp("==", num(1), ast.Boolean(True)),
    and_number=lambda: ast.LogicalOp("&&", num(1), ast.Boolean(True)),
    not_number=lambda: ast.NotOp(num(0)),
    query_number=lambda: ast.EntityQuery("getx", num(0)),
    sameteam_bool=lambda: ast.SameTeam(ast.Boolean(False)),
    search_entity=lambda: ast.SearchObject(ast.Self()),
    isworm_number=lambda: ast.IsKind(wormscript.EntityKind.WORM, num(1)),
)
def test_construction_type_errors(key, make):
    with pytest.raises(wormscript.TypeCheckError):
        make()


def test_invalid_operands_are_accepted():
    err = wormscript.TypeCheckError("bad")
    expr = ast.ArithmeticOp("+", ast.Invalid(err), num(1))
    assert expr.type is wormscript.Type.NUMBER


def test_self(context, worm):
    assert ast.Self().evaluate(context).data is worm


@runtest.params(
    "query expected",
    getx=("getx", 0.0),
    gety=("gety", 0.0),
    getradius=("getradius", 0.5),
    getdir=("getdir", 0.0),
    getap=("getap", 100.0),
    getmaxap=("getmaxap", 100.0),
    gethp=("gethp", 100.0),
    getmaxhp=("getmaxhp", 100.0),
)
def test_worm_queries(key, query, expected, context):
    result = ast.EntityQuery(query, ast.Self()).evaluate(context)
    assert result == wormscript.Value.number(expected)


def test_parsed_queries():
    printed = [runtest.print_value(f"{query} self") for query in [
        "getx", "gety", "getradius", "getdir", "getap", "getmaxap", "gethp", "getmaxhp"]]
    assert printed == ["0.0", "0.0", "0.5", "0.0", "100.0", "100.0", "100.0", "100.0"]


def test_query_null_is_capability_error(context):
    with pytest.raises(wormscript.CapabilityError):
        ast.EntityQuery("gethp", ast.Null()).evaluate(context)


def test_query_food(world, handler):
    food = world.add(wormscript.SandboxFood(3, 4, radius=0.2))
    program = wormscript.parse(
        "entity f; double r;\n"
        "foreach (food, f) do { r := getradius f; }\n"
        "print r; print getx f")
    program.bind(world.add(wormscript.SandboxWorm(name="w")), handler)
    program.run()
    assert handler.printed == ["0.2", "3.0"]

    program = wormscript.parse(
        "entity f;\nforeach (food, f) do { print gethp f; }")
    program.bind(food, handler)
    with pytest.raises(wormscript.CapabilityError) as info:
        program.run()
    assert info.value.line == 2
    assert program.terminated


def test_same_team(world, worm, team, context):
    friend = world.add(wormscript.SandboxWorm(5, 0, team=team, name="friend"))
    enemy = world.add(wormscript.SandboxWorm(6, 0, team=wormscript.Team("blue")))
    loner = world.add(wormscript.SandboxWorm(7, 0))

    def same(other):
        table = wormscript.VariableTable()
        table.declare("e", wormscript.Type.ENTITY).set_value(other)
        access = ast.VariableAccess("e", wormscript.Type.ENTITY, table)
        return ast.SameTeam(access).evaluate(context).data

    assert same(friend) is True
    assert same(worm) is True
    assert same(enemy) is False
    assert same(loner) is False


def test_same_team_without_team(world, handler):
    loner = world.add(wormscript.SandboxWorm(0, 0))
    context = wormscript.ExecutionContext()
    context.bind(loner, handler)
    assert ast.SameTeam(ast.Self()).evaluate(context).data is False
    with pytest.raises(wormscript.CapabilityError):
        ast.SameTeam(ast.Null()).evaluate(context)


def test_same_team_food(world, context):
    world.add(wormscript.SandboxFood(1, 0))
    with pytest.raises(wormscript.CapabilityError):
        ast.SameTeam(ast.SearchObject(num(0))).evaluate(context)


def test_is_kind(world, context):
    world.add(wormscript.SandboxFood(1, 0))
    found = ast.SearchObject(num(0))
    assert ast.IsKind(wormscript.EntityKind.FOOD, found).evaluate(context).data is True
    assert ast.IsKind(wormscript.EntityKind.WORM, found).evaluate(context).data is False
    assert ast.IsKind(wormscript.EntityKind.WORM, ast.Self()).evaluate(context).data is True
    assert ast.IsKind(wormscript.EntityKind.WORM, ast.Null()).evaluate(context).data is False
    assert ast.IsKind(wormscript.EntityKind.FOOD, ast.Null()).evaluate(context).data is False


def test_search_object(world, worm, context):
    far = world.add(wormscript.SandboxFood(4, 0))
    near = world.add(wormscript.SandboxWorm(2, 0, name="near"))
    above = world.add(wormscript.SandboxFood(0, 3))

    assert ast.SearchObject(num(0)).evaluate(context).data is near
    assert ast.SearchObject(num(math.pi / 2)).evaluate(context).data is above
    assert ast.SearchObject(num(math.pi)).evaluate(context).is_null

    world.remove(near)
    assert ast.SearchObject(num(0)).evaluate(context).data is far


def test_search_object_relative_to_direction(world, handler):
    worm = world.add(wormscript.SandboxWorm(0, 0, direction=math.pi / 2))
    above = world.add(wormscript.SandboxFood(0, 3))
    right = world.add(wormscript.SandboxFood(3, 0))
    context = wormscript.ExecutionContext()
    context.bind(worm, handler)

    assert ast.SearchObject(num(0)).evaluate(context).data is above
    assert ast.SearchObject(num(-math.pi / 2)).evaluate(context).data is right


def test_variable_access_removed(context):
    table = wormscript.VariableTable()
    table.declare("x", wormscript.Type.NUMBER)
    access = ast.VariableAccess("x", wormscript.Type.NUMBER, table)
    assert access.evaluate(context).data == 0.0
    table.remove("x")
    with pytest.raises(wormscript.VariableReferenceError):
        access.evaluate(context)
