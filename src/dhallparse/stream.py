"""Character stream, source positions, and character classification helpers."""

from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


NO_SPAN = Span(Position(1, 1, 0), Position(1, 1, 0))


class CharStream:
    """Cursor over decoded source text with mark/reset backtracking.

    The stream also keeps the furthest-failure bookkeeping: rules call
    ``fail()`` with a description of what they expected, and the stream
    remembers the deepest offset reached together with every expectation
    recorded there.
    """

    def __init__(self, source: str) -> None:
        self.source = source
        self.offset = 0
        self.furthest = 0
        self.expected: set[str] = set()
        self._line_starts = [0]
        for idx, ch in enumerate(source):
            if ch == "\n":
                self._line_starts.append(idx + 1)

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def mark(self) -> int:
        return self.offset

    def reset(self, mark: int) -> None:
        self.offset = mark

    def at_end(self) -> bool:
        return self.offset >= len(self.source)

    def peek(self, ahead: int = 0) -> str:
        """Return the character `ahead` positions away, or "" past the end."""
        idx = self.offset + ahead
        if idx < len(self.source):
            return self.source[idx]
        return ""

    def next(self) -> str:
        """Consume and return one character, or "" at end of input."""
        if self.offset >= len(self.source):
            return ""
        ch = self.source[self.offset]
        self.offset += 1
        return ch

    def peek_matches(self, literal: str) -> bool:
        return self.source.startswith(literal, self.offset)

    def match(self, literal: str) -> bool:
        """Consume `literal` if it is next in the input; all or nothing."""
        if self.source.startswith(literal, self.offset):
            self.offset += len(literal)
            return True
        return False

    def text(self, start: int, end: int | None = None) -> str:
        return self.source[start : self.offset if end is None else end]

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    def position(self, offset: int | None = None) -> Position:
        if offset is None:
            offset = self.offset
        line = bisect_right(self._line_starts, offset)
        column = offset - self._line_starts[line - 1] + 1
        return Position(line, column, offset)

    def span(self, start: int, end: int | None = None) -> Span:
        return Span(self.position(start), self.position(self.offset if end is None else end))

    # ------------------------------------------------------------------
    # Failure bookkeeping
    # ------------------------------------------------------------------

    def fail(self, expected: str) -> None:
        """Record that `expected` could not be matched at the current offset."""
        if self.offset > self.furthest:
            self.furthest = self.offset
            self.expected = {expected}
        elif self.offset == self.furthest:
            self.expected.add(expected)


def is_digit(ch: str) -> bool:
    """Return True if ch is an ASCII decimal digit."""
    return "0" <= ch <= "9"


def is_alpha(ch: str) -> bool:
    """Return True if ch is an ASCII letter."""
    return "a" <= ch <= "z" or "A" <= ch <= "Z"


def is_hex_digit(ch: str) -> bool:
    """Return True if ch is a hexadecimal digit."""
    return ch != "" and ch in "0123456789abcdefABCDEF"


def is_label_first(ch: str) -> bool:
    return is_alpha(ch) or ch == "_"


def is_label_next(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch) or (ch != "" and ch in "-/_")


def is_quoted_label_char(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch) or (ch != "" and ch in "-/_:.$")


# Printable ASCII minus whitespace and the characters other rules rely on
_PATH_EXCLUDED = frozenset('"#(),/<>?[\\]{}')


def is_path_char(ch: str) -> bool:
    """Return True if ch may appear inside a local path component."""
    return "!" <= ch <= "~" and ch not in _PATH_EXCLUDED


_UNRESERVED_EXTRA = frozenset("-._~")
# RFC 3986 sub-delims without "(", ")" and ",", which close or separate
# enclosing expressions
_SUB_DELIMS = frozenset("!$&'*+;=")


def is_url_unreserved(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch) or (ch != "" and ch in _UNRESERVED_EXTRA)


def is_url_sub_delim(ch: str) -> bool:
    return ch != "" and ch in _SUB_DELIMS


def is_bash_env_first(ch: str) -> bool:
    return is_alpha(ch) or ch == "_"


def is_bash_env_next(ch: str) -> bool:
    return is_alpha(ch) or is_digit(ch) or ch == "_"


def is_posix_env_char(ch: str) -> bool:
    """Unescaped POSIX environment variable name character."""
    return " " <= ch <= "~" and ch not in '"=\\'
