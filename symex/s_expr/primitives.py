"""
The four elementary directions (forward, backward, enter, exit) as actual cursor movement.

Each primitive repeats a one-step movement `count` times and returns the Move it actually achieved, which may be less
than what was asked for. When not a single step could be taken, None is returned: "no movement" is not the same thing as
a Move of length 0, and callers must check for it explicitly. Primitives don't raise for navigational reasons; being
stuck at a boundary of the tree is the normal way for a traversal to fail.

The underlying oracle tells us about success mostly through the position of the cursor: an operation that left the
cursor where it was didn't do anything, whatever else it claims. `if_stuck` captures that.
"""

from contextlib import contextmanager

from symex.traversal.clef import Move


@contextmanager
def excursion(oracle):
    """Restores the cursor on leaving the block, whatever happened inside it."""
    position = oracle.cursor_position()
    try:
        yield oracle
    finally:
        oracle.set_cursor_position(position)


def if_stuck(oracle, fallback, operation):
    """Runs `operation`; if that leaves the cursor in place, runs `fallback` instead. Returns the value of whichever
    ran last."""
    original = oracle.cursor_position()
    result = operation()
    if oracle.cursor_position() == original:
        return fallback()
    return result


def _no_progress():
    return 0


def _forward_one(oracle):
    original = oracle.cursor_position()

    # With a forward skip that lands right after an expression, the start of the next sibling is found by skipping
    # over the current one and the next, and backing up over the latter.
    if oracle.is_expression_at_cursor() and oracle.skip_expression_forward(2):
        oracle.skip_expression_backward(1)
    elif oracle.skip_expression_forward(1):
        oracle.skip_expression_backward(1)

    if oracle.cursor_position() <= original:
        # the last sibling, or the cursor was inside the last expression: either way this is not progress
        oracle.set_cursor_position(original)
        return 0

    return 1


def _backward_one(oracle):
    return if_stuck(oracle, _no_progress, lambda: 1 if oracle.skip_expression_backward(1) else 0)


def _enter_one(oracle):
    if on_comment_line(oracle):
        return if_stuck(oracle, _no_progress, lambda: 1 if oracle.flow_forward() else 0)

    if not oracle.is_opening_delimiter_at_cursor() or on_empty_list(oracle):
        return 0

    oracle.set_cursor_position(oracle.cursor_position() + 1)
    if not oracle.is_expression_at_cursor():
        # whitespace or comments before the first child
        oracle.skip_expression_forward(1)
        oracle.skip_expression_backward(1)

    return 1


def _exit_one(oracle):
    return if_stuck(oracle, _no_progress, lambda: 1 if oracle.ascend_out_of_enclosing_expression() else 0)


def _repeat(oracle, one_step, count):
    total = 0
    for i in range(count):
        contribution = one_step(oracle)
        if contribution == 0:
            # stuck now means stuck forever: the next attempt would start from the very same position.
            break
        total += contribution
    return total


def forward(oracle, count=1):
    """
    >>> from symex.s_expr.oracle import TextOracle
    >>> oracle = TextOracle("a b c")
    >>> forward(oracle, 5), oracle.cursor_position()
    (Move(x=2, y=0), 4)
    >>> forward(oracle) is None
    True
    """
    total = _repeat(oracle, _forward_one, count)
    return Move(total, 0) if total > 0 else None


def backward(oracle, count=1):
    total = _repeat(oracle, _backward_one, count)
    return Move(-total, 0) if total > 0 else None


def enter(oracle, count=1):
    """
    >>> from symex.s_expr.oracle import TextOracle
    >>> oracle = TextOracle("((a) ())")
    >>> enter(oracle, 3), oracle.cursor_position()
    (Move(x=0, y=2), 2)
    """
    total = _repeat(oracle, _enter_one, count)
    return Move(0, total) if total > 0 else None


def exit(oracle, count=1):
    total = _repeat(oracle, _exit_one, count)
    return Move(0, -total) if total > 0 else None


# ## Boundary predicates; none of them moves the cursor.

def at_root(oracle):
    with excursion(oracle):
        return _exit_one(oracle) == 0


def at_first_symex(oracle):
    """First in its level: there's no going backward from here."""
    with excursion(oracle):
        return _backward_one(oracle) == 0


def at_last_symex(oracle):
    """Last in its level: there's no going forward from here."""
    with excursion(oracle):
        return _forward_one(oracle) == 0


def at_final_symex(oracle):
    """The very last symex in the buffer: neither it, nor any of its ancestors, has a next sibling."""
    with excursion(oracle):
        if _forward_one(oracle) != 0:
            return False

        while _exit_one(oracle) != 0:
            if _forward_one(oracle) != 0:
                return False

        return True


def at_initial_symex(oracle):
    """The very first symex in the buffer: neither it, nor any of its ancestors, has a previous sibling.

    >>> from symex.s_expr.oracle import TextOracle
    >>> at_initial_symex(TextOracle("(a b) c", 1)), at_initial_symex(TextOracle("(a b) c", 3))
    (True, False)
    """
    with excursion(oracle):
        if _backward_one(oracle) != 0:
            return False

        while _exit_one(oracle) != 0:
            if _backward_one(oracle) != 0:
                return False

        return True


def on_empty_list(oracle):
    """On an opening delimiter, with nothing but (possibly) whitespace and comments before the closing one."""
    if not oracle.is_opening_delimiter_at_cursor():
        return False

    with excursion(oracle):
        oracle.set_cursor_position(oracle.cursor_position() + 1)
        return not oracle.skip_expression_forward(1)


def on_comment_line(oracle):
    return oracle.is_at_line_start() and oracle.is_comment_at_cursor()
