import itertools
import unittest

from symex.s_expr.oracle import TextOracle
from symex.s_expr.primitives import (
    at_final_symex,
    at_first_symex,
    at_initial_symex,
    at_last_symex,
    at_root,
    backward,
    enter,
    excursion,
    exit,
    forward,
    on_comment_line,
    on_empty_list,
)
from symex.traversal.clef import (
    FORWARD,
    IN,
    Move,
    add_moves,
    is_circuit,
    is_detour,
    is_maneuver,
    is_move,
    is_precaution,
    is_protocol,
    is_traversal,
    make_circuit,
    make_detour,
    make_maneuver,
    make_move,
    make_precaution,
    make_protocol,
    move_length,
)
from symex.traversal.construct import execute_traversal
from symex.traversal.library import TRAVERSALS

PROGRAM = """\
; squares
(define (square x)
  (* x x))

(define (sum-of-squares . xs)
  (apply + (map square xs)))  ; trailing

'(1 2 [3 4] #(5) "a \\" (string)")
(display (sum-of-squares 1 2 3))
"""

PREDICATES = [
    at_root, at_first_symex, at_last_symex, at_final_symex, at_initial_symex, on_empty_list, on_comment_line]


def symex_starts(oracle):
    """All positions at which an expression starts."""
    return [position for position in range(len(oracle.text) + 1) if _starts_expression(oracle, position)]


def _starts_expression(oracle, position):
    oracle.set_cursor_position(position)
    if not oracle.is_expression_at_cursor():
        return False
    if not oracle.skip_expression_forward(1):
        return False
    oracle.skip_expression_backward(1)
    return oracle.cursor_position() == position


def enclosing_list(oracle):
    """The position of the opening delimiter of the list around the cursor; None at the top level."""
    with excursion(oracle):
        if exit(oracle) is None:
            return None
        return oracle.cursor_position()


class MoveAlgebraTestCase(unittest.TestCase):
    moves = [Move(x, y) for (x, y) in itertools.product([-2, 0, 3], [-1, 0, 4])]

    def test_zero_is_identity(self):
        self.assertEqual(Move(0, 0), add_moves([]))
        for move in self.moves:
            self.assertEqual(move, add_moves([move, Move(0, 0)]))
            self.assertEqual(move, add_moves([Move(0, 0), move]))

    def test_associative_and_commutative(self):
        for a, b, c in itertools.product(self.moves, repeat=3):
            self.assertEqual(add_moves([a, add_moves([b, c])]), add_moves([add_moves([a, b]), c]))
            self.assertEqual(add_moves([a, b, c]), add_moves([c, a, b]))

    def test_length(self):
        for n in [-7, -1, 1, 12]:
            self.assertEqual(n, move_length(Move(n, 0)))
            self.assertEqual(n, move_length(Move(0, n)))
        self.assertEqual(0, move_length(Move(0, 0)))

    def test_malformed_construction(self):
        self.assertRaises(AssertionError, make_move, 1.5, 0)
        self.assertRaises(AssertionError, make_maneuver, FORWARD, "in")
        self.assertRaises(AssertionError, make_circuit, FORWARD, -1)
        self.assertRaises(AssertionError, make_precaution, FORWARD, True)

    def test_discriminants(self):
        samples = [
            (is_move, FORWARD),
            (is_maneuver, make_maneuver(FORWARD, IN)),
            (is_circuit, make_circuit(FORWARD)),
            (is_detour, make_detour(IN, FORWARD)),
            (is_precaution, make_precaution(FORWARD)),
            (is_protocol, make_protocol(FORWARD, IN)),
        ]
        odd_values = [None, 0, (1, 0), [FORWARD], "forward", object(), {'x': 1, 'y': 0}]

        for predicate, value in samples:
            self.assertTrue(is_traversal(value))
            for other_predicate, other_value in samples:
                self.assertEqual(predicate is other_predicate, predicate(other_value))
            for odd in odd_values:
                self.assertFalse(predicate(odd))

        for odd in odd_values:
            self.assertFalse(is_traversal(odd))

    def test_nesting(self):
        nested = make_maneuver(make_protocol(make_circuit(make_detour(IN, FORWARD), 2)), FORWARD)
        self.assertTrue(is_traversal(nested))
        self.assertEqual(nested, make_maneuver(make_protocol(make_circuit(make_detour(IN, FORWARD), 2)), FORWARD))


class PrimitivesTestCase(unittest.TestCase):

    def test_forward_backward_inverse(self):
        oracle = TextOracle("(a b c d e)", 1)
        for n in [1, 2, 3, 4]:
            self.assertEqual(Move(n, 0), forward(oracle, n))
            self.assertEqual(Move(-n, 0), backward(oracle, n))
            self.assertEqual(1, oracle.cursor_position())

    def test_boundaries_of_the_buffer(self):
        oracle = TextOracle("a b c")
        self.assertTrue(at_initial_symex(oracle))
        self.assertIsNone(backward(oracle))

        oracle.set_cursor_position(4)
        self.assertTrue(at_final_symex(oracle))
        self.assertIsNone(forward(oracle))
        self.assertEqual(4, oracle.cursor_position())

    def test_enter_exit(self):
        oracle = TextOracle("(a b) ()")
        self.assertEqual(Move(0, 1), enter(oracle))
        self.assertEqual(Move(0, -1), exit(oracle))
        self.assertEqual(0, oracle.cursor_position())

        oracle.set_cursor_position(6)
        self.assertIsNone(enter(oracle))
        self.assertEqual(6, oracle.cursor_position())

    def test_predicates_restore_the_cursor(self):
        oracle = TextOracle(PROGRAM)
        for position in range(len(PROGRAM) + 1):
            for predicate in PREDICATES:
                oracle.set_cursor_position(position)
                predicate(oracle)
                self.assertEqual(position, oracle.cursor_position(), (predicate.__name__, position))

    def test_primitives_are_total(self):
        oracle = TextOracle(PROGRAM)
        for position in range(len(PROGRAM) + 1):
            for primitive in [forward, backward, enter, exit]:
                oracle.set_cursor_position(position)
                result = primitive(oracle, 2)
                self.assertTrue(result is None or result != Move(0, 0))
                if result is None:
                    self.assertEqual(position, oracle.cursor_position())

    def test_forward_stays_on_its_level_in_unbalanced_text(self):
        for text in ["(a b", "((a) (b", "a) b)", "(a (b c) d"]:
            oracle = TextOracle(text)
            for position in symex_starts(oracle):
                oracle.set_cursor_position(position)
                level = enclosing_list(oracle)
                if forward(oracle) is not None:
                    self.assertEqual(level, enclosing_list(oracle), (text, position))

    def test_unclosed_list_cannot_be_skipped_over(self):
        oracle = TextOracle("(a b")
        self.assertTrue(at_last_symex(oracle))
        self.assertIsNone(forward(oracle))
        self.assertEqual(0, oracle.cursor_position())

        self.assertEqual(Move(0, 1), enter(oracle))
        self.assertEqual(Move(1, 0), forward(oracle))
        self.assertEqual(3, oracle.cursor_position())
        self.assertEqual(Move(0, -1), exit(oracle))
        self.assertEqual(0, oracle.cursor_position())

    def test_unmatched_closing_delimiter_is_ignored(self):
        oracle = TextOracle("a) (b)")
        self.assertEqual(Move(1, 0), forward(oracle))
        self.assertEqual(3, oracle.cursor_position())
        self.assertEqual(Move(-1, 0), backward(oracle))
        self.assertTrue(at_initial_symex(oracle))


class TraversalTestCase(unittest.TestCase):

    def test_unbounded_circuit_over_three_siblings(self):
        oracle = TextOracle("a b c")
        self.assertEqual([FORWARD, FORWARD], execute_traversal(oracle, make_circuit(FORWARD)))
        self.assertEqual([], execute_traversal(oracle, make_circuit(FORWARD)))

    def test_failing_post_condition_rolls_back(self):
        oracle = TextOracle(PROGRAM)
        precaution = make_precaution(FORWARD, post_condition=lambda oracle: False)

        for position in symex_starts(oracle):
            oracle.set_cursor_position(position)
            if at_last_symex(oracle):
                continue
            self.assertIsNone(execute_traversal(oracle, precaution))
            self.assertEqual(position, oracle.cursor_position())

    def test_raising_condition_restores_the_cursor(self):
        def boom(oracle):
            raise ValueError("boom")

        oracle = TextOracle("a b c")
        traversal = make_maneuver(FORWARD, make_precaution(FORWARD, post_condition=boom))
        self.assertRaises(ValueError, execute_traversal, oracle, traversal)
        self.assertEqual(0, oracle.cursor_position())

    def test_protocol_falls_back_to_entering(self):
        oracle = TextOracle("(a (b c))", 3)
        self.assertEqual([IN], execute_traversal(oracle, make_protocol(FORWARD, IN)))
        self.assertEqual(4, oracle.cursor_position())

    def test_failure_leaves_the_cursor_in_place(self):
        oracle = TextOracle(PROGRAM)
        for name, traversal in sorted(TRAVERSALS.items()):
            for position in symex_starts(oracle):
                oracle.set_cursor_position(position)
                if execute_traversal(oracle, traversal) is None:
                    self.assertEqual(position, oracle.cursor_position(), (name, position))

    def test_preorder_and_preorder_backward_agree(self):
        oracle = TextOracle(PROGRAM, PROGRAM.index("(define"))

        visited = [oracle.cursor_position()]
        while execute_traversal(oracle, TRAVERSALS['preorder']) is not None:
            visited.append(oracle.cursor_position())

        revisited = [oracle.cursor_position()]
        while execute_traversal(oracle, TRAVERSALS['preorder-backward']) is not None:
            revisited.append(oracle.cursor_position())

        self.assertEqual(visited, list(reversed(revisited)))
        self.assertEqual(len(set(visited)), len(visited))


if __name__ == '__main__':
    unittest.main()
