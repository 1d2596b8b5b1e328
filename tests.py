import unittest
import doctest

from symex import cli
from symex import utils
import test_cli
import test_properties

from symex.s_expr import oracle as s_expr_oracle
from symex.s_expr import primitives as s_expr_primitives
from symex.traversal import clef as traversal_clef


def load_tests(loader, tests, ignore):
    # Test the docstrings inside our actual codebase
    tests.addTests(doctest.DocTestSuite(utils))
    tests.addTests(doctest.DocTestSuite(cli))
    tests.addTests(doctest.DocTestSuite(s_expr_oracle))
    tests.addTests(doctest.DocTestSuite(s_expr_primitives))
    tests.addTests(doctest.DocTestSuite(traversal_clef))

    # Some tests in the doctests style are too large to nicely fit into a docstring; better to keep them separate:
    tests.addTests(doctest.DocFileSuite("doctests/primitives.txt"))
    tests.addTests(doctest.DocFileSuite("doctests/traversal.txt"))

    # Property-style tests, for which a narrative doesn't help much:
    tests.addTests(loader.loadTestsFromModule(test_properties))
    tests.addTests(loader.loadTestsFromModule(test_cli))

    return tests


if __name__ == '__main__':
    unittest.main()
