def pmts(v, type_):
    """Poor man's type system"""
    assert isinstance(v, type_), "Expected value of type '%s' but is type '%s'" % (
        type_.__name__ if isinstance(type_, type) else " or ".join(t.__name__ for t in type_),
        type(v).__name__)


def pmts_callable(v):
    assert callable(v), "Expected a callable but got type '%s'" % type(v).__name__


def count_prefix(s):
    """Splits a vim-like count prefix off a command; the count defaults to 1.

    >>> count_prefix('3f')
    (3, 'f')
    >>> count_prefix('preorder')
    (1, 'preorder')
    >>> count_prefix('12')
    (12, '')
    """
    digits = 0
    while digits < len(s) and s[digits].isdigit():
        digits += 1

    if digits == 0:
        return 1, s

    return int(s[:digits]), s[digits:]
