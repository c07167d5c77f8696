#!/usr/bin/env python3
"""wormscript CLI - check and dry-run worm programs.

Usage:
    wormscript check <file.worm>                 # Parse and validate
    wormscript check <file.worm> --dump          # Show the parsed program
    wormscript run <file.worm> --turns 3         # Run against a sandbox worm
    wormscript run <file.worm> --ap 20 -v        # Low action points, debug log
"""

import argparse
import logging
import pathlib
import sys

import rich.console
import rich.logging
import rich.markup
import rich.table

import wormscript


console = rich.console.Console(highlight=False, soft_wrap=True)


def load_program(filepath, handler=None, max_statements=None):
    """Parse a program file, printing its errors.

    Returns:
        (Program | None) The program, None when it has errors
    """
    source = pathlib.Path(filepath).read_text()
    try:
        return wormscript.parse(
            source, handler, filename=str(filepath), max_statements=max_statements)
    except wormscript.ProgramParseError as err:
        for error in err.errors:
            kind = type(error).__name__
            console.print(f"[red]{kind}[/red] {filepath}: {rich.markup.escape(str(error))}")
        console.print(f"[bold red]{len(err.errors)} error(s)[/bold red]")
        return None


def check_command(args):
    program = load_program(args.source)
    if program is None:
        return 1

    table = rich.table.Table("variable", "type", "initial")
    for name, variable in program.globals.items():
        table.add_row(name, variable.type.keyword, variable.value.format())
    if program.globals:
        console.print(table)
    if args.dump:
        console.print(rich.markup.escape(program.unparse()))
    if not program.is_well_formed():
        console.print("[yellow]foreach body contains actions[/yellow]")
        return 1
    console.print(f"[green]ok[/green] {args.source}")
    return 0


def run_command(args):
    handler = wormscript.RecordingHandler()
    program = load_program(args.source, handler, max_statements=args.max_statements)
    if program is None:
        return 1

    world = wormscript.SandboxWorld()
    worm = world.add(wormscript.SandboxWorm(action_points=args.ap, name="self"))
    program.bind(worm)

    for turn in range(1, args.turns + 1):
        worm.start_turn()
        handler.clear()
        try:
            program.run()
        except wormscript.ProgramError as err:
            console.print(f"[red]turn {turn}: {type(err).__name__}[/red] {rich.markup.escape(str(err))}")
            return 1

        status = "finished" if program.is_finished() else "suspended"
        console.print(
            f"[bold]turn {turn}[/bold] {status}, "
            f"{program.remaining_budget()} statements left, "
            f"{worm.action_points:g} AP left")
        for name, _entity, *params in handler.actions:
            detail = " ".join(f"{p:g}" if isinstance(p, float) else str(p) for p in params)
            console.print(f"  {name} {detail}".rstrip())
        for name, _entity, *params in handler.refused:
            console.print(f"  [yellow]{name} refused[/yellow]")
        for text in handler.printed:
            console.print(f"  > {rich.markup.escape(text)}")
    return 0


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="wormscript", description="Check and run worm programs")
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true",
        help="Show debug logging of the interpreter")
    commands = parser.add_subparsers(dest="command", required=True)

    check = commands.add_parser("check", parents=[common], help="Parse and validate a program")
    check.add_argument("source", help="Program file")
    check.add_argument("--dump", action="store_true",
        help="Print the program as it was understood")
    check.set_defaults(func=check_command)

    run = commands.add_parser("run", parents=[common], help="Run a program against a sandbox worm")
    run.add_argument("source", help="Program file")
    run.add_argument("--turns", type=int, default=1,
        help="Number of turns to run (default 1)")
    run.add_argument("--ap", type=float, default=100,
        help="Action points of the worm per turn (default 100)")
    run.add_argument("--max-statements", type=int, default=None,
        help=f"Statement budget per turn (default {wormscript.Program.MAX_STATEMENTS})")
    run.set_defaults(func=run_command)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(name)s: %(message)s",
            handlers=[rich.logging.RichHandler(console=console, show_time=False)])

    if not pathlib.Path(args.source).is_file():
        parser.error(f"No such file: {args.source}")

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
