"""
Execution of traversals against a live cursor.

`execute_traversal` interprets a traversal (see `symex.traversal.clef`) by dispatching to the four primitives of
`symex.s_expr.primitives`, recursively for the composite kinds. The result is the list of Moves that were actually
executed, in order, or None if the traversal failed.

Failure is all-or-nothing: a traversal that fails leaves the cursor exactly where it was before. Because each (sub-)
execution restores the cursor on its own failure, the composite cases can simply stop, skip, or retry without keeping
track of what the failed part did. Note the difference between a failure (None) and a success in which nothing moved
(the empty list), e.g. a circuit that could not repeat its traversal even once.
"""

import logging

from symex.s_expr.primitives import forward, backward, enter, exit
from symex.traversal.clef import (
    Circuit,
    Detour,
    Maneuver,
    Move,
    Precaution,
    Protocol,
    add_moves,
)

logger = logging.getLogger(__name__)


def execute_traversal(oracle, traversal):
    # :: ExpressionOracle, Traversal => [Move] | None
    original = oracle.cursor_position()

    try:
        executed = _execute(oracle, traversal)
    except BaseException:
        # e.g. a raising pre- or post-condition; the cursor is put back before the exception moves on
        oracle.set_cursor_position(original)
        raise

    if executed is None:
        oracle.set_cursor_position(original)
        logger.debug("%r failed at %d", traversal, original)
    else:
        logger.debug("%r: %d -> %d", traversal, original, oracle.cursor_position())

    return executed


def traversal_displacement(executed):
    """The net Move of an execution's result; None (failure) stays None."""
    if executed is None:
        return None
    return add_moves(executed)


def _execute(oracle, traversal):
    if isinstance(traversal, Move):
        return execute_move(oracle, traversal)

    if isinstance(traversal, Maneuver):
        return execute_maneuver(oracle, traversal)

    if isinstance(traversal, Circuit):
        return execute_circuit(oracle, traversal)

    if isinstance(traversal, Detour):
        return execute_detour(oracle, traversal)

    if isinstance(traversal, Precaution):
        return execute_precaution(oracle, traversal)

    if isinstance(traversal, Protocol):
        return execute_protocol(oracle, traversal)

    raise Exception("Unknown traversal: %s" % type(traversal))


def execute_move(oracle, move):
    # Only the dominant axis is taken into account (x if it's non-zero, y otherwise); diagonal moves are not executable.
    if move.x > 0:
        achieved = forward(oracle, move.x)
    elif move.x < 0:
        achieved = backward(oracle, -move.x)
    elif move.y > 0:
        achieved = enter(oracle, move.y)
    elif move.y < 0:
        achieved = exit(oracle, -move.y)
    else:
        achieved = None  # the zero move: nothing to do is not the same as having done something

    if achieved is None:
        return None
    return [achieved]


def execute_maneuver(oracle, maneuver):
    executed = []
    for phase in maneuver.phases:
        result = execute_traversal(oracle, phase)
        if result is None:
            return None  # the earlier phases are undone by execute_traversal
        executed += result
    return executed


def execute_circuit(oracle, circuit):
    executed = []

    if circuit.times is not None:
        for i in range(circuit.times):
            result = execute_traversal(oracle, circuit.traversal)
            if result is None:
                return None
            executed += result
        return executed

    # Until failure. Positions are finite and the outcome of a traversal depends on the position only, so revisiting a
    # position would mean looping forever; we stop there instead.
    visited = {oracle.cursor_position()}
    while True:
        before = oracle.cursor_position()
        result = execute_traversal(oracle, circuit.traversal)
        if result is None:
            break

        if oracle.cursor_position() in visited:
            oracle.set_cursor_position(before)
            break

        visited.add(oracle.cursor_position())
        executed += result

    return executed


def execute_detour(oracle, detour):
    executed = []

    # As in execute_circuit: reorienting towards an already visited position would never end.
    visited = {oracle.cursor_position()}
    while True:
        reoriented = execute_traversal(oracle, detour.reorientation)
        if reoriented is None:
            return None

        executed += reoriented

        result = execute_traversal(oracle, detour.traversal)
        if result is not None:
            return executed + result

        if oracle.cursor_position() in visited:
            return None

        visited.add(oracle.cursor_position())


def execute_precaution(oracle, precaution):
    if not precaution.pre_condition(oracle):
        return None

    result = execute_traversal(oracle, precaution.traversal)
    if result is None:
        return None

    if not precaution.post_condition(oracle):
        return None  # undone by execute_traversal

    return result


def execute_protocol(oracle, protocol):
    for option in protocol.options:
        result = execute_traversal(oracle, option)
        if result is not None:
            return result
    return None
