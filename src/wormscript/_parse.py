"""Parse worm program source into a Program.

Source text is parsed with a lark grammar (`lark/worm.lark`) and the lark
tree is converted node by node through a `Builder`. The lark tree itself is
not exposed; it only lives until the program is built.

Every problem found along the way is collected: syntax errors stop the
parse at the first one, but construction errors and the semantic errors of
`Program.validate` are all reported together in one `ProgramParseError`.
"""

__all__ = ["parse", "parse_tree", "pos_from_lark"]

import logging

import lark

import wormscript


logger = logging.getLogger("wormscript.parse")
logger.addHandler(logging.NullHandler())


def parse(source, handler=None, filename=None, max_statements=None):
    """Parse source into a Program.

    Args:
        source: (str) Program text
        handler: (ActionHandler | None) Handler the program binds by default
        filename: (str | None) Source name used in error positions
        max_statements: (int | None) Budget per run for the program

    Returns:
        (Program) Validated program, not yet bound to an entity

    Raises:
        ProgramParseError: The source has errors, all listed in `errors`
    """
    tree = parse_tree(source, filename)
    builder = wormscript.Builder(handler)
    statement = _convert_program(tree, builder, filename)
    program = builder.create_program(statement, max_statements=max_statements)

    errors = program.validate()
    if errors:
        logger.debug("Program rejected with %d semantic errors", len(errors))
        raise wormscript.ProgramParseError(errors)
    return program


def parse_tree(source, filename=None):
    """Parse source into the intermediate lark tree.

    Raises:
        ProgramParseError: Source does not match the grammar
    """
    parser = _lark_parser("worm")
    try:
        return parser.parse(source)
    except lark.exceptions.UnexpectedInput as err:
        line = getattr(err, "line", None)
        column = getattr(err, "column", None)
        if not isinstance(line, int) or line < 1:
            # end of input has no usable location
            line = column = None
        position = wormscript.ast.SourcePosition(line, column, filename=filename)
        error = wormscript.ParseError(_describe_syntax_error(err), position)
        raise wormscript.ProgramParseError([error]) from err


def _describe_syntax_error(err):
    if isinstance(err, lark.exceptions.UnexpectedEOF):
        return "Unexpected end of program"
    if isinstance(err, lark.exceptions.UnexpectedToken):
        if err.token.type == "$END":
            return "Unexpected end of program"
        return f"Unexpected {err.token.value!r}"
    if isinstance(err, lark.exceptions.UnexpectedCharacters):
        return f"Unexpected character {err.char!r}"
    return "Invalid syntax"


def pos_from_lark(treetoken, filename=None):
    """Create the SourcePosition from a lark Tree or Token value."""
    if isinstance(treetoken, lark.Token):
        token = treetoken
        return wormscript.ast.SourcePosition(
            token.line,
            token.column,
            token.end_line or token.line,
            token.end_column or token.column,
            filename,
        )
    meta = treetoken.meta
    line = getattr(meta, "line", None)
    column = getattr(meta, "column", None)
    return wormscript.ast.SourcePosition(
        line,
        column,
        getattr(meta, "end_line", None) or line,
        getattr(meta, "end_column", None) or column,
        filename,
    )


def _convert_program(tree, builder, filename):
    """Convert the start rule into the root sequence.

    Declarations are processed first so every variable is known with its
    type before any statement referring to it is built.
    """
    items = tree.children
    for item in items:
        if isinstance(item, lark.Tree) and item.data == "declaration":
            type_tree, name, _ = item.children
            var_type = getattr(builder, _TYPES[type_tree.children[0].value])()
            builder.declare(pos_from_lark(name, filename), name.value, var_type)

    statements = []
    for item in items:
        if isinstance(item, lark.Tree) and item.data == "declaration":
            _, name, initial = item.children
            if initial is not None:
                pos = pos_from_lark(item, filename)
                expr = _convert_expr(initial, builder, filename)
                statements.append(builder.create_assignment(pos, name.value, expr))
            continue
        statements.append(_convert_stmt(item, builder, filename))

    return builder.create_sequence(pos_from_lark(tree, filename), statements)


_TYPES = {
    "double": "create_double_type",
    "bool": "create_boolean_type",
    "entity": "create_entity_type",
}

_FOREACH_KINDS = {
    "worm": wormscript.ForeachKind.WORM,
    "food": wormscript.ForeachKind.FOOD,
    "any": wormscript.ForeachKind.ANY,
}


def _convert_stmt(tree, builder, filename):
    """Convert a statement tree through the builder."""
    pos = pos_from_lark(tree, filename)
    kids = tree.children

    def expr(kid):
        return _convert_expr(kid, builder, filename)

    def stmt(kid):
        return _convert_stmt(kid, builder, filename)

    match tree.data:
        case "block":
            return builder.create_sequence(pos, [stmt(kid) for kid in kids])
        case "assignment":
            return builder.create_assignment(pos, kids[0].value, expr(kids[1]))
        case "print_stmt":
            return builder.create_print(pos, expr(kids[0]))
        case "if_stmt":
            otherwise = stmt(kids[2]) if kids[2] is not None else None
            return builder.create_if(pos, expr(kids[0]), stmt(kids[1]), otherwise)
        case "while_stmt":
            return builder.create_while(pos, expr(kids[0]), stmt(kids[1]))
        case "foreach_stmt":
            kind = _FOREACH_KINDS[kids[0].children[0].value]
            return builder.create_foreach(pos, kind, kids[1].value, stmt(kids[2]))

        # Actions
        case "turn":
            return builder.create_turn(pos, expr(kids[0]))
        case "fire":
            return builder.create_fire(pos, expr(kids[0]))
        case "move":
            return builder.create_move(pos)
        case "jump":
            return builder.create_jump(pos)
        case "toggleweap":
            return builder.create_toggle_weap(pos)
        case "skip":
            return builder.create_skip(pos)
        case _:
            raise ValueError(f"Unhandled grammar rule: {tree.data}")


_BINARY = {
    "or_op": "create_or",
    "and_op": "create_and",
    "lt": "create_less_than",
    "le": "create_less_than_or_equal_to",
    "gt": "create_greater_than",
    "ge": "create_greater_than_or_equal_to",
    "eq": "create_equality",
    "ne": "create_inequality",
    "add": "create_add",
    "sub": "create_subtraction",
    "mul": "create_mul",
    "div": "create_division",
}

_UNARY = {
    "neg": "create_negation",
    "not_op": "create_not",
    "sameteam": "create_same_team",
    "isworm": "create_is_worm",
    "isfood": "create_is_food",
    "searchobj": "create_search_obj",
    "sqrt": "create_sqrt",
    "sin": "create_sin",
    "cos": "create_cos",
    "getx": "create_get_x",
    "gety": "create_get_y",
    "getradius": "create_get_radius",
    "getdir": "create_get_dir",
    "getap": "create_get_ap",
    "getmaxap": "create_get_max_ap",
    "gethp": "create_get_hp",
    "getmaxhp": "create_get_max_hp",
}


def _convert_expr(tree, builder, filename):
    """Convert an expression tree through the builder."""
    pos = pos_from_lark(tree, filename)
    kids = tree.children

    # Operators
    if tree.data in _BINARY:
        left = _convert_expr(kids[0], builder, filename)
        right = _convert_expr(kids[1], builder, filename)
        return getattr(builder, _BINARY[tree.data])(pos, left, right)
    if tree.data in _UNARY:
        operand = _convert_expr(kids[0], builder, filename)
        return getattr(builder, _UNARY[tree.data])(pos, operand)

    match tree.data:
        case "number":
            return builder.create_double_literal(pos, float(kids[0].value))
        case "true":
            return builder.create_boolean_literal(pos, True)
        case "false":
            return builder.create_boolean_literal(pos, False)
        case "null":
            return builder.create_null(pos)
        case "self":
            return builder.create_self(pos)
        case "variable":
            return builder.create_variable_access(pos, kids[0].value)
        case _:
            raise ValueError(f"Unhandled grammar rule: {tree.data}")


_parsers = {}


def _lark_parser(name):
    """Get globally shared lark parser.

    Args:
        name: (str) name of the grammar file (without .lark)

    Returns:
        (lark.Lark) Parser instance
    """
    parser = _parsers.get(name)
    if parser is not None:
        return parser

    path = f"lark/{name}.lark"
    parser = lark.Lark.open(
        path, rel_to=__file__, parser="lalr", lexer="basic",
        propagate_positions=True,
    )
    _parsers[name] = parser
    return parser
