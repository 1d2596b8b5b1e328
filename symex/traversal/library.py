"""
Commonly used traversals, expressed in the vocabulary of `symex.traversal.clef`.

These are plain values; they can be executed with `symex.traversal.construct.execute_traversal` and can serve as
building blocks for larger traversals.

Depth-first walks, for the tree of `(a (b c) d)`:

    pre-order:  (a (b c) d), a, (b c), b, c, d
    post-order: a, b, c, (b c), d, (a (b c) d)
"""

from symex.s_expr.primitives import at_root
from symex.traversal.clef import (
    BACKWARD,
    FORWARD,
    IN,
    OUT,
    make_circuit,
    make_detour,
    make_maneuver,
    make_precaution,
    make_protocol,
)

GOTO_FIRST = make_circuit(BACKWARD)
GOTO_LAST = make_circuit(FORWARD)
GOTO_LOWEST = make_circuit(IN)
GOTO_HIGHEST = make_circuit(OUT)

# Next in pre-order: our first child if we have one; else our next sibling; else the next sibling of the closest
# ancestor that has one.
PREORDER = make_protocol(
    IN,
    FORWARD,
    make_detour(OUT, FORWARD))

# Previous in pre-order: the deepest last descendant of the previous sibling (or that sibling itself); else the parent.
PREORDER_BACKWARD = make_protocol(
    make_maneuver(BACKWARD, make_circuit(make_maneuver(IN, GOTO_LAST))),
    OUT)

# Next in post-order: the lowest first descendant of the next sibling (or that sibling itself); else the parent.
POSTORDER = make_protocol(
    make_maneuver(FORWARD, GOTO_LOWEST),
    OUT)

# Previous in post-order: the mirror image of PREORDER.
POSTORDER_BACKWARD = make_protocol(
    make_maneuver(IN, GOTO_LAST),
    BACKWARD,
    make_detour(OUT, BACKWARD))


def _not_at_root(oracle):
    return not at_root(oracle)


# Out by one level, but never onto the top level itself (i.e. stay inside the current top-level form).
CLIMB_BRANCH = make_precaution(OUT, post_condition=_not_at_root)


TRAVERSALS = {
    'first': GOTO_FIRST,
    'last': GOTO_LAST,
    'lowest': GOTO_LOWEST,
    'highest': GOTO_HIGHEST,
    'preorder': PREORDER,
    'preorder-backward': PREORDER_BACKWARD,
    'postorder': POSTORDER,
    'postorder-backward': POSTORDER_BACKWARD,
    'climb': CLIMB_BRANCH,
}
