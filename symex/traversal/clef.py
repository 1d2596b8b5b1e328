"""
The vocabulary of traversals (AKA the "Clef" of cursor movement over a tree of symexes).

A traversal is a value, not an action: it is built once (declaratively, like a tiny program) and can be executed
any number of times against a live cursor by `symex.traversal.construct.execute_traversal`. The vocabulary is closed;
it consists of exactly the following six kinds:

* Move: a displacement `(x, y)`; x counts sibling steps (positive is forward), y counts depth steps (positive is in).
* Maneuver: phases executed in order, all-or-nothing.
* Circuit: a traversal repeated a fixed number of times (all-or-nothing), or until it fails (keeping what succeeded).
* Detour: "reorient, then try again": repeat a reorientation until the actual traversal succeeds.
* Precaution: a traversal guarded by a pre-condition and undone if its post-condition doesn't hold afterwards.
* Protocol: alternatives, the first one to succeed wins.

Every field that holds a sub-traversal accepts any of the six kinds, which means arbitrary nesting is possible (a
maneuver of protocols of circuits of detours...).

On adding a seventh kind: don't subclass. Add it to TRAVERSAL_TYPES and give the evaluator a case for it; the evaluator
raises on anything it doesn't know, so a forgotten case is found on first use rather than silently ignored.

Pre- and post-conditions are callables taking the oracle (i.e. the cursor context that's being traversed) and
returning a bool. Traversal values don't hold on to any cursor themselves, which is what makes them reusable.
"""

from collections import namedtuple

from symex.utils import pmts, pmts_callable


class Move(namedtuple('Move', ('x', 'y'))):
    """
    >>> Move(1, 0) + Move(0, -1)
    Move(x=1, y=-1)
    """
    __slots__ = ()

    def __add__(self, other):
        return Move(self.x + other.x, self.y + other.y)


ZERO = Move(0, 0)
FORWARD = Move(1, 0)
BACKWARD = Move(-1, 0)
IN = Move(0, 1)
OUT = Move(0, -1)


def make_move(x, y):
    pmts(x, int)
    pmts(y, int)
    return Move(x, y)


def add_moves(moves):
    """Vector sum of a list of moves (a right fold, with the zero move as its seed).

    >>> add_moves([])
    Move(x=0, y=0)
    >>> add_moves([FORWARD, FORWARD, IN, BACKWARD])
    Move(x=1, y=1)
    """
    result = ZERO
    for move in reversed(moves):
        result = move + result
    return result


def move_length(move):
    """The magnitude along the dominant axis; only meaningful for axis-aligned moves, but always defined.

    >>> move_length(Move(-3, 0))
    -3
    >>> move_length(Move(0, 2))
    2
    """
    if move.x != 0:
        return move.x
    return move.y


def always(oracle):
    return True


class Maneuver(object):
    def __init__(self, phases):
        self.phases = tuple(phases)
        for phase in self.phases:
            pmts(phase, TRAVERSAL_TYPES)

    def __repr__(self):
        return "Maneuver(" + ", ".join(repr(p) for p in self.phases) + ")"

    def __eq__(self, other):
        return isinstance(other, Maneuver) and self.phases == other.phases


class Circuit(object):
    def __init__(self, traversal, times=None):
        pmts(traversal, TRAVERSAL_TYPES)
        if times is not None:
            pmts(times, int)
            assert times >= 0, "A circuit can't be repeated a negative number of times: %s" % times

        self.traversal = traversal
        self.times = times  # None means: until the traversal fails

    def __repr__(self):
        return "Circuit(%r, times=%r)" % (self.traversal, self.times)

    def __eq__(self, other):
        return isinstance(other, Circuit) and self.traversal == other.traversal and self.times == other.times


class Detour(object):
    def __init__(self, reorientation, traversal):
        pmts(reorientation, TRAVERSAL_TYPES)
        pmts(traversal, TRAVERSAL_TYPES)
        self.reorientation = reorientation
        self.traversal = traversal

    def __repr__(self):
        return "Detour(%r, %r)" % (self.reorientation, self.traversal)

    def __eq__(self, other):
        return isinstance(other, Detour) and (
            self.reorientation == other.reorientation and
            self.traversal == other.traversal)


class Precaution(object):
    def __init__(self, traversal, pre_condition=always, post_condition=always):
        pmts(traversal, TRAVERSAL_TYPES)
        pmts_callable(pre_condition)
        pmts_callable(post_condition)
        self.traversal = traversal
        self.pre_condition = pre_condition  # :: oracle => bool
        self.post_condition = post_condition  # :: oracle => bool

    def __repr__(self):
        return "Precaution(%r)" % (self.traversal,)

    def __eq__(self, other):
        # conditions are compared by identity; two equal-looking lambdas are not the same condition.
        return isinstance(other, Precaution) and (
            self.traversal == other.traversal and
            self.pre_condition is other.pre_condition and
            self.post_condition is other.post_condition)


class Protocol(object):
    def __init__(self, options):
        self.options = tuple(options)
        for option in self.options:
            pmts(option, TRAVERSAL_TYPES)

    def __repr__(self):
        return "Protocol(" + ", ".join(repr(o) for o in self.options) + ")"

    def __eq__(self, other):
        return isinstance(other, Protocol) and self.options == other.options


TRAVERSAL_TYPES = (Move, Maneuver, Circuit, Detour, Precaution, Protocol)


def make_maneuver(*phases):
    return Maneuver(phases)


def make_circuit(traversal, times=None):
    return Circuit(traversal, times)


def make_detour(reorientation, traversal):
    return Detour(reorientation, traversal)


def make_precaution(traversal, pre_condition=None, post_condition=None):
    return Precaution(
        traversal,
        always if pre_condition is None else pre_condition,
        always if post_condition is None else post_condition)


def make_protocol(*options):
    return Protocol(options)


# The predicates below classify; they don't validate. Anything that isn't one of ours is simply "not this kind".

def is_move(v):
    """
    >>> is_move(FORWARD), is_move((1, 0)), is_move(None)
    (True, False, False)
    """
    return isinstance(v, Move)


def is_maneuver(v):
    return isinstance(v, Maneuver)


def is_circuit(v):
    return isinstance(v, Circuit)


def is_detour(v):
    return isinstance(v, Detour)


def is_precaution(v):
    return isinstance(v, Precaution)


def is_protocol(v):
    return isinstance(v, Protocol)


def is_traversal(v):
    """
    >>> is_traversal(make_protocol(FORWARD, make_circuit(IN)))
    True
    >>> is_traversal("forward")
    False
    """
    return isinstance(v, TRAVERSAL_TYPES)
