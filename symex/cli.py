# coding=utf-8
"""
Navigating the symexes of a Lisp file from the command line, e.g.

    python -m symex.cli example.scm --position 0 i 2f preorder

Commands are executed in order. They take a vim-like count prefix and are either one of the four directions (f: forward,
b: backward, i: in, o: out) or the name of a standard traversal (see `symex.traversal.library.TRAVERSALS`). After the
last command, the resulting cursor position is printed, followed by the line it's on with a caret under the cursor.
"""
import argparse
import logging
import sys
from os.path import isfile

from rich.console import Console
from rich.logging import RichHandler

from symex.utils import count_prefix

from symex.s_expr.oracle import TextOracle
from symex.traversal.clef import BACKWARD, FORWARD, IN, OUT, Move, make_circuit
from symex.traversal.construct import execute_traversal, traversal_displacement
from symex.traversal.library import TRAVERSALS

logger = logging.getLogger(__name__)

DIRECTIONS = {
    'f': FORWARD,
    'b': BACKWARD,
    'i': IN,
    'o': OUT,
}


def traversal_for_command(command):
    """
    >>> traversal_for_command('3f')
    Move(x=3, y=0)
    >>> traversal_for_command('o')
    Move(x=0, y=-1)
    >>> traversal_for_command('2first')
    Circuit(Circuit(Move(x=-1, y=0), times=None), times=2)
    >>> traversal_for_command('sideways') is None
    True
    """
    count, name = count_prefix(command)

    if name in DIRECTIONS:
        direction = DIRECTIONS[name]
        return Move(direction.x * count, direction.y * count)

    if name in TRAVERSALS:
        if count == 1:
            return TRAVERSALS[name]
        return make_circuit(TRAVERSALS[name], count)

    return None


def render_cursor(text, position):
    """
    >>> print(render_cursor("(a\\n (b c))", 5))
     (b c))
      ^
    """
    line_start = text.rfind('\n', 0, position) + 1
    line_end = text.find('\n', position)
    if line_end == -1:
        line_end = len(text)

    return text[line_start:line_end] + "\n" + " " * (position - line_start) + "^"


def configure_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_time=False, show_path=False)],
    )


def navigate(oracle, commands):
    """Executes the commands in order; returns the list of unknown commands (nothing is executed if there are any)."""
    traversals = [(command, traversal_for_command(command)) for command in commands]

    unknown = [command for (command, traversal) in traversals if traversal is None]
    if unknown:
        return unknown

    for command, traversal in traversals:
        executed = execute_traversal(oracle, traversal)
        if executed is None:
            # not an error; the command simply didn't apply at the cursor
            logger.info("%s: no movement", command)
        else:
            logger.info("%s: %r to %d", command, traversal_displacement(executed), oracle.cursor_position())

    return []


def main(argv=None):
    parser = argparse.ArgumentParser(description="Navigate the symexes of a Lisp file.")
    parser.add_argument("filename")
    parser.add_argument("commands", nargs="*", help="e.g. f, 3b, i, o, preorder, 2postorder-backward")
    parser.add_argument("--position", type=int, default=0, help="the initial cursor position")
    parser.add_argument("--verbose", "-v", action="store_true", help="log every executed traversal")
    args = parser.parse_intermixed_args(argv)

    configure_logging(args.verbose)

    if not isfile(args.filename):
        logger.error("No such file: %s", args.filename)
        return 1

    with open(args.filename, encoding="utf-8") as f:
        text = f.read()

    try:
        oracle = TextOracle(text, args.position)
    except IndexError as e:
        logger.error("Invalid --position: %s", e)
        return 2

    unknown = navigate(oracle, args.commands)
    if unknown:
        logger.error("Unknown command(s): %s", ", ".join(unknown))
        return 2

    print(oracle.cursor_position())
    print(render_cursor(text, oracle.cursor_position()))
    return 0


if __name__ == '__main__':
    sys.exit(main())
