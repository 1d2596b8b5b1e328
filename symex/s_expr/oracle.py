"""
The expression-boundary oracle: the thing that knows what "one expression" is.

The primitives in `symex.s_expr.primitives` never look at text themselves; they move a cursor by asking an oracle to
skip over expressions, to climb out of the enclosing one, and to classify what's at the cursor. Anything implementing
`ExpressionOracle` can be plugged in (an editor buffer, a rope, ...). `TextOracle` is the in-memory implementation over
a Python string; it's what the command line tool and the tests use.

Conventions (shared by all oracles):

* The cursor is an "ibeam": a position in `[0, len(text)]`, sitting right before the character with the same index.
* An expression starts at its first character, including any quote-like prefix (`'`, `` ` ``, `,`, `,@`, `#(`), and
  ends right after its last character.
* Skipping is all-or-nothing: a skip that cannot be completed leaves the cursor where it was and returns False.
"""

import logging

logger = logging.getLogger(__name__)


class ExpressionOracle(object):

    def cursor_position(self):
        raise NotImplementedError()

    def set_cursor_position(self, position):
        raise NotImplementedError()

    def skip_expression_forward(self, n=1):
        """Moves to right after the n-th expression following the cursor at the cursor's level."""
        raise NotImplementedError()

    def skip_expression_backward(self, n=1):
        """Moves to the start of the n-th expression preceding the cursor at the cursor's level."""
        raise NotImplementedError()

    def ascend_out_of_enclosing_expression(self):
        """Moves to the opening delimiter of the innermost list enclosing the cursor."""
        raise NotImplementedError()

    def is_opening_delimiter_at_cursor(self):
        raise NotImplementedError()

    def is_closing_delimiter_at_cursor(self):
        raise NotImplementedError()

    def is_expression_at_cursor(self):
        """True iff the cursor is on (the start or the inside of) an expression at the cursor's level."""
        raise NotImplementedError()

    def is_at_line_start(self):
        raise NotImplementedError()

    def is_comment_at_cursor(self):
        raise NotImplementedError()

    def flow_forward(self):
        """Moves to the next opening delimiter in the text, skipping over comments and strings."""
        raise NotImplementedError()


# Token kinds
ATOM = 'atom'
STRING = 'string'
COMMENT = 'comment'
OPEN = 'open'
CLOSE = 'close'
PREFIX = 'prefix'


class Token(object):
    def __init__(self, kind, start, end):
        self.kind = kind
        self.start = start
        self.end = end

    def __repr__(self):
        return "%s[%d:%d]" % (self.kind, self.start, self.end)


class Span(object):
    """An expression in the text; lists have children (possibly none), atoms and strings have `children is None`."""

    def __init__(self, start, parent):
        self.start = start
        self.end = None
        self.parent = parent
        self.children = None

        # lists only: positions of the delimiters. An unclosed list is closed by the end of the text.
        self.opening = None
        self.closing = None

        # An unclosed list has no end to skip to: the end of the text is inside it, not after it.
        self.closed = True

    def contains_in_interior(self, position):
        return self.opening < position <= self.closing


def tokenize(text, opening, closing, comment_marker):
    """
    >>> tokenize("(a 'b) ; c", "(", ")", ";")
    [open[0:1], atom[1:2], prefix[3:4], atom[4:5], close[5:6], comment[7:10]]
    >>> tokenize('"x \\\\" y" #\\\\( #(1)', "(", ")", ";")
    [string[0:8], atom[9:12], prefix[13:14], open[14:15], atom[15:16], close[16:17]]
    """
    delimiters = opening + closing
    result = []

    i = 0
    while i < len(text):
        c = text[i]

        if c.isspace():
            i += 1
            continue

        if text.startswith(comment_marker, i):
            end = text.find('\n', i)
            end = len(text) if end == -1 else end
            result.append(Token(COMMENT, i, end))
            i = end
            continue

        if c == '"':
            end = i + 1
            while end < len(text) and text[end] != '"':
                end += 2 if text[end] == '\\' else 1
            end = min(end + 1, len(text))  # unterminated strings run to the end of the text
            result.append(Token(STRING, i, end))
            i = end
            continue

        if c in opening:
            result.append(Token(OPEN, i, i + 1))
            i += 1
            continue

        if c in closing:
            result.append(Token(CLOSE, i, i + 1))
            i += 1
            continue

        if text.startswith(',@', i):
            result.append(Token(PREFIX, i, i + 2))
            i += 2
            continue

        if c in "'`," or (c == '#' and i + 1 < len(text) and text[i + 1] in opening):
            result.append(Token(PREFIX, i, i + 1))
            i += 1
            continue

        end = i
        while end < len(text):
            d = text[end]
            if d == '\\':
                end += 2
                continue
            if d.isspace() or d in delimiters or d == '"' or text.startswith(comment_marker, end):
                break
            end += 1
        end = min(end, len(text))
        result.append(Token(ATOM, i, end))
        i = end

    return result


class TextOracle(ExpressionOracle):
    """
    >>> oracle = TextOracle("(define (f x) x)", 8)
    >>> oracle.skip_expression_forward(1), oracle.cursor_position()
    (True, 13)
    >>> oracle.skip_expression_forward(2), oracle.cursor_position()
    (False, 13)
    >>> oracle.ascend_out_of_enclosing_expression(), oracle.cursor_position()
    (True, 0)
    """

    def __init__(self, text, position=0, delimiters="()[]{}", comment_marker=";"):
        assert len(delimiters) % 2 == 0, "Delimiters come in pairs: %r" % delimiters
        assert comment_marker, "A comment marker cannot be empty"

        self.text = text
        self.opening = delimiters[0::2]
        self.closing = delimiters[1::2]
        self.comment_marker = comment_marker

        self.tokens = tokenize(text, self.opening, self.closing, comment_marker)
        self.root, self.lists = self._build_tree()

        self.position = 0
        self.set_cursor_position(position)

    def _build_tree(self):
        root = Span(0, None)
        root.end = len(self.text)
        root.children = []
        root.opening = -1
        root.closing = len(self.text)

        lists = []  # in order of their opening delimiters; hence ancestors before descendants
        stack = [root]
        prefix_start = None

        for token in self.tokens:
            if token.kind == COMMENT:
                continue

            if token.kind == PREFIX:
                if prefix_start is None:
                    prefix_start = token.start
                continue

            if token.kind == CLOSE:
                # a prefix right before a closing delimiter is not attached to anything, and is dropped
                prefix_start = None

                if len(stack) == 1:
                    logger.debug("Unmatched closing delimiter at %d", token.start)
                    continue

                span = stack.pop()
                span.closing = token.start
                span.end = token.end
                continue

            span = Span(token.start if prefix_start is None else prefix_start, stack[-1])
            prefix_start = None
            stack[-1].children.append(span)

            if token.kind == OPEN:
                span.opening = token.start
                span.children = []
                stack.append(span)
                lists.append(span)
            else:
                span.end = token.end

        for span in stack[1:]:
            logger.debug("Unclosed list at %d", span.opening)
            span.closing = len(self.text)
            span.end = len(self.text)
            span.closed = False

        return root, lists

    def _level(self, position):
        # The innermost list that has the position in its interior; the last match in document order.
        level = self.root
        for span in self.lists:
            if span.opening >= position:
                break
            if span.contains_in_interior(position):
                level = span
        return level

    def cursor_position(self):
        return self.position

    def set_cursor_position(self, position):
        if not (0 <= position <= len(self.text)):
            raise IndexError("position out of bounds: %s" % position)
        self.position = position

    def skip_expression_forward(self, n=1):
        position = self.position
        for i in range(n):
            following = [c for c in self._level(position).children if c.end > position]
            if not following or not following[0].closed:
                return False
            position = following[0].end

        self.position = position
        return True

    def skip_expression_backward(self, n=1):
        position = self.position
        for i in range(n):
            preceding = [c for c in self._level(position).children if c.start < position]
            if not preceding:
                return False
            position = preceding[-1].start

        self.position = position
        return True

    def ascend_out_of_enclosing_expression(self):
        level = self._level(self.position)
        if level is self.root:
            return False

        self.position = level.opening
        return True

    def _token_at_cursor(self, kind):
        # delimiters inside strings, comments and character escapes are not delimiters
        return any(t.kind == kind and t.start == self.position for t in self.tokens)

    def is_opening_delimiter_at_cursor(self):
        return self._token_at_cursor(OPEN)

    def is_closing_delimiter_at_cursor(self):
        return self._token_at_cursor(CLOSE)

    def is_expression_at_cursor(self):
        return any(c.start <= self.position < c.end for c in self._level(self.position).children)

    def is_at_line_start(self):
        return self.position == 0 or self.text[self.position - 1] == '\n'

    def is_comment_at_cursor(self):
        return self._token_at_cursor(COMMENT)

    def flow_forward(self):
        for token in self.tokens:
            if token.kind == OPEN and token.start > self.position:
                self.position = token.start
                return True
        return False

    def __repr__(self):
        return "TextOracle(%r, %d)" % (self.text, self.position)
