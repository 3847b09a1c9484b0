"""Lexical primitives for whitespace, tokens, labels, numbers and import targets.

There is no separate tokenizing pass: the grammar needs the parser's
context to decide what a character run means (``./ab`` against ``.ab``,
string interpolation, nested comments), so every primitive here scans the
shared character stream directly. Each primitive either succeeds, consumes
its trailing whitespace and returns a value, or fails, records what it
expected, and leaves the stream where it found it.
"""

from __future__ import annotations

import sys

from dhallparse.ast import EnvVar, FilePrefix
from dhallparse.stream import (
    CharStream,
    is_bash_env_first,
    is_bash_env_next,
    is_digit,
    is_hex_digit,
    is_label_first,
    is_label_next,
    is_path_char,
    is_posix_env_char,
    is_quoted_label_char,
    is_url_sub_delim,
    is_url_unreserved,
)
from dhallparse.strings import POSIX_ENV_ESCAPES

KEYWORDS: frozenset[str] = frozenset(
    {
        "if",
        "then",
        "else",
        "let",
        "in",
        "as",
        "using",
        "merge",
        "missing",
        "constructors",
        "forall",
    }
)

RESERVED: frozenset[str] = frozenset(
    {
        "Bool",
        "Optional",
        "Natural",
        "Integer",
        "Double",
        "Text",
        "List",
        "True",
        "False",
        "NaN",
        "Infinity",
        "Type",
        "Kind",
    }
)

RESERVED_NAMESPACED: frozenset[str] = frozenset(
    {
        "Natural/fold",
        "Natural/build",
        "Natural/isZero",
        "Natural/even",
        "Natural/odd",
        "Natural/toInteger",
        "Natural/show",
        "Integer/toDouble",
        "Integer/show",
        "Double/show",
        "List/build",
        "List/fold",
        "List/length",
        "List/head",
        "List/last",
        "List/indexed",
        "List/reverse",
        "Optional/fold",
        "Optional/build",
        "Text/show",
    }
)

# Longest first, so a reserved word never shadows a longer one it prefixes
_NAMESPACED_BY_LENGTH = tuple(sorted(RESERVED_NAMESPACED, key=len, reverse=True))
_RESERVED_BY_LENGTH = tuple(sorted(RESERVED, key=len, reverse=True))


class Lexer:
    """Token-level scanning over a CharStream."""

    def __init__(self, stream: CharStream) -> None:
        self._stream = stream
        # end offset -> start offset of every non-empty whitespace run seen
        self._gaps: dict[int, int] = {}

    # ------------------------------------------------------------------
    # Whitespace and comments
    # ------------------------------------------------------------------

    def whitespace(self) -> bool:
        """Skip whitespace and comments; return True if anything was skipped."""
        s = self._stream
        start = s.offset
        while True:
            ch = s.peek()
            if ch in (" ", "\t", "\n"):
                s.next()
            elif ch == "\r" and s.peek(1) == "\n":
                s.offset += 2
            elif s.peek_matches("--"):
                self._line_comment()
            elif s.peek_matches("{-"):
                if not self._block_comment():
                    break
            else:
                break
        if s.offset > start:
            self._gaps[s.offset] = min(start, self._gaps.get(s.offset, start))
            return True
        return False

    def _line_comment(self) -> None:
        s = self._stream
        s.offset += 2
        while not s.at_end():
            if s.peek() == "\n":
                s.next()
                return
            if s.peek_matches("\r\n"):
                s.offset += 2
                return
            s.next()

    def _block_comment(self) -> bool:
        """Skip a nested block comment; on an unterminated one consume nothing."""
        s = self._stream
        start = s.offset
        s.offset += 2
        depth = 1
        while depth:
            if s.at_end():
                s.fail("'-}'")
                s.reset(start)
                return False
            if s.match("{-"):
                depth += 1
            elif s.match("-}"):
                depth -= 1
            else:
                s.next()
        return True

    def after_whitespace(self) -> bool:
        """Return True if the current offset directly follows skipped whitespace."""
        return self._stream.offset in self._gaps

    def token_end(self, offset: int) -> int:
        """Map an offset past trailing whitespace back to where the token ended."""
        return self._gaps.get(offset, offset)

    # ------------------------------------------------------------------
    # Fixed tokens
    # ------------------------------------------------------------------

    def symbol(self, *spellings: str) -> bool:
        """Match one spelling of a punctuation token, then trailing whitespace."""
        s = self._stream
        for text in spellings:
            if s.match(text):
                self.whitespace()
                return True
        s.fail(f"'{spellings[0]}'")
        return False

    def keyword(self, word: str) -> bool:
        """Match `word` as a whole word (not followed by a label character)."""
        s = self._stream
        start = s.offset
        if s.match(word) and not is_label_next(s.peek()):
            self.whitespace()
            return True
        s.reset(start)
        s.fail(f"'{word}'")
        return False

    def lambda_(self) -> bool:
        return self.symbol("\\", "λ")

    def forall(self) -> bool:
        s = self._stream
        if s.match("∀"):
            self.whitespace()
            return True
        return self.keyword("forall")

    def arrow(self) -> bool:
        return self.symbol("->", "→")

    # ------------------------------------------------------------------
    # Labels and identifiers
    # ------------------------------------------------------------------

    def label(self) -> str | None:
        """Parse a simple or quoted label (keywords only when quoted)."""
        s = self._stream
        start = s.offset
        if s.peek() == "`":
            s.next()
            chars_start = s.offset
            while is_quoted_label_char(s.peek()):
                s.next()
            if s.offset > chars_start and s.peek() == "`":
                name = s.text(chars_start)
                s.next()
                self.whitespace()
                return sys.intern(name)
            s.reset(start)
            s.fail("label")
            return None

        word = self._simple_word()
        if word is None or word in KEYWORDS:
            s.reset(start)
            s.fail("label")
            return None
        self.whitespace()
        return sys.intern(word)

    def _simple_word(self) -> str | None:
        s = self._stream
        start = s.offset
        if not is_label_first(s.peek()):
            return None
        s.next()
        while is_label_next(s.peek()):
            s.next()
        return s.text(start)

    def identifier(self) -> tuple[str, str, int] | None:
        """Parse an identifier-like token as ("builtin" | "reserved" | "variable", name, index).

        Classification order: a namespaced built-in followed by more label
        characters is a variable; then the namespaced built-in itself; then
        a reserved word followed by more label characters (a variable
        again); then the bare reserved word; then any other label.
        """
        s = self._stream
        start = s.offset
        word = self._simple_word()
        if word is not None:
            for name in _NAMESPACED_BY_LENGTH:
                if word.startswith(name):
                    if len(word) > len(name):
                        return self._variable(word)
                    self.whitespace()
                    return ("builtin", name, 0)
            for name in _RESERVED_BY_LENGTH:
                if word.startswith(name):
                    if len(word) > len(name):
                        return self._variable(word)
                    self.whitespace()
                    return ("reserved", name, 0)
            s.reset(start)

        name = self.label()
        if name is None:
            s.fail("identifier")
            return None
        return self._index("variable", name)

    def _variable(self, word: str) -> tuple[str, str, int]:
        self.whitespace()
        return self._index("variable", sys.intern(word))

    def _index(self, kind: str, name: str) -> tuple[str, str, int]:
        s = self._stream
        mark = s.offset
        if s.match("@"):
            self.whitespace()
            value = self.natural_raw()
            if value is not None:
                self.whitespace()
                return (kind, name, value)
            s.reset(mark)
        return (kind, name, 0)

    # ------------------------------------------------------------------
    # Numbers
    # ------------------------------------------------------------------

    def natural_raw(self) -> int | None:
        """Digits only, no trailing whitespace."""
        s = self._stream
        start = s.offset
        while is_digit(s.peek()):
            s.next()
        if s.offset == start:
            s.fail("natural number")
            return None
        return int(s.text(start))

    def double_literal(self) -> float | None:
        s = self._stream
        start = s.offset
        if s.peek() in ("+", "-"):
            s.next()
        if not self._digits():
            s.reset(start)
            return None
        mark = s.offset
        if s.match(".") and self._digits():
            self._exponent()
        else:
            s.reset(mark)
            if not self._exponent():
                s.reset(start)
                s.fail("double")
                return None
        value = float(s.text(start))
        self.whitespace()
        return value

    def _digits(self) -> bool:
        s = self._stream
        start = s.offset
        while is_digit(s.peek()):
            s.next()
        return s.offset > start

    def _exponent(self) -> bool:
        s = self._stream
        start = s.offset
        if s.peek() not in ("e", "E"):
            return False
        s.next()
        if s.peek() in ("+", "-"):
            s.next()
        if not self._digits():
            s.reset(start)
            return False
        return True

    def natural_literal(self) -> int | None:
        value = self.natural_raw()
        if value is not None:
            self.whitespace()
        return value

    def integer_literal(self) -> int | None:
        s = self._stream
        start = s.offset
        sign = s.peek()
        if sign not in ("+", "-"):
            s.fail("integer")
            return None
        s.next()
        value = self.natural_raw()
        if value is None:
            s.reset(start)
            return None
        self.whitespace()
        return -value if sign == "-" else value

    def minus_infinity(self) -> bool:
        s = self._stream
        start = s.offset
        if s.match("-") and self.keyword("Infinity"):
            return True
        s.reset(start)
        return False

    # ------------------------------------------------------------------
    # Import targets
    # ------------------------------------------------------------------

    def local_path(self) -> tuple[FilePrefix, tuple[str, ...]] | None:
        """Parse `../p`, `./p`, `~/p` or `/p`, tried in that order."""
        s = self._stream
        start = s.offset
        for marker, prefix in (
            ("..", FilePrefix.PARENT),
            (".", FilePrefix.HERE),
            ("~", FilePrefix.HOME),
            ("", FilePrefix.ABSOLUTE),
        ):
            if s.match(marker):
                components = self._path_components()
                if components:
                    self.whitespace()
                    return prefix, components
            s.reset(start)
        s.fail("path")
        return None

    def _path_components(self) -> tuple[str, ...]:
        s = self._stream
        components: list[str] = []
        while s.peek() == "/":
            mark = s.offset
            s.next()
            comp_start = s.offset
            while is_path_char(s.peek()):
                s.next()
            if s.offset == comp_start:
                s.reset(mark)
                break
            components.append(s.text(comp_start))
        return tuple(components)

    def http_raw(self) -> tuple[str, str, tuple[str, ...], str | None, str | None] | None:
        """Parse a URL into (scheme, authority, path, query, fragment)."""
        s = self._stream
        start = s.offset
        scheme = None
        for candidate in ("https", "http"):
            if s.match(candidate + "://"):
                scheme = candidate
                break
        if scheme is None:
            s.fail("URL")
            return None

        authority = self._authority()
        if authority is None:
            s.reset(start)
            return None

        path: list[str] = []
        while s.match("/"):
            seg_start = s.offset
            while self._pchar():
                pass
            path.append(s.text(seg_start))

        query = None
        if s.match("?"):
            query_start = s.offset
            while self._pchar() or s.match("/") or s.match("?"):
                pass
            query = s.text(query_start)

        fragment = None
        if s.match("#"):
            fragment_start = s.offset
            while self._pchar() or s.match("/") or s.match("?"):
                pass
            fragment = s.text(fragment_start)

        self.whitespace()
        return scheme, authority, tuple(path), query, fragment

    def _authority(self) -> str | None:
        s = self._stream
        start = s.offset
        # userinfo is optional and only recognizable by the "@" after it
        while self._userinfo_char():
            pass
        if not s.match("@"):
            s.reset(start)
        if not self._host():
            s.fail("host")
            s.reset(start)
            return None
        if s.match(":"):
            self._digits()
        return s.text(start)

    def _host(self) -> bool:
        s = self._stream
        if s.peek() == "[":
            start = s.offset
            s.next()
            while is_hex_digit(s.peek()) or s.peek() in (":", ".", "v"):
                s.next()
            if s.offset > start + 1 and s.match("]"):
                return True
            s.reset(start)
            return False
        start = s.offset
        while True:
            ch = s.peek()
            if is_url_unreserved(ch) or is_url_sub_delim(ch):
                s.next()
            elif not self._pct_encoded():
                break
        return s.offset > start

    def _userinfo_char(self) -> bool:
        s = self._stream
        ch = s.peek()
        if is_url_unreserved(ch) or is_url_sub_delim(ch) or ch == ":":
            s.next()
            return True
        return self._pct_encoded()

    def _pchar(self) -> bool:
        s = self._stream
        ch = s.peek()
        if is_url_unreserved(ch) or is_url_sub_delim(ch) or (ch != "" and ch in ":@"):
            s.next()
            return True
        return self._pct_encoded()

    def _pct_encoded(self) -> bool:
        s = self._stream
        if s.peek() == "%" and is_hex_digit(s.peek(1)) and is_hex_digit(s.peek(2)):
            s.offset += 3
            return True
        return False

    def env(self) -> EnvVar | None:
        """Parse `env:NAME` or `env:"NAME"`."""
        s = self._stream
        start = s.offset
        if not s.match("env:"):
            s.fail("'env:'")
            return None
        if is_bash_env_first(s.peek()):
            name_start = s.offset
            s.next()
            while is_bash_env_next(s.peek()):
                s.next()
            name = s.text(name_start)
            self.whitespace()
            return EnvVar(name)
        if s.match('"'):
            chars: list[str] = []
            while True:
                ch = s.peek()
                if ch == '"':
                    s.next()
                    break
                if ch == "\\" and s.peek(1) in POSIX_ENV_ESCAPES:
                    chars.append(POSIX_ENV_ESCAPES[s.peek(1)])
                    s.offset += 2
                elif is_posix_env_char(ch):
                    chars.append(s.next())
                else:
                    s.fail("environment variable character")
                    s.reset(start)
                    return None
            if chars:
                self.whitespace()
                return EnvVar("".join(chars), posix=True)
        s.fail("environment variable name")
        s.reset(start)
        return None

    def integrity_hash(self) -> str | None:
        """Parse `sha256:` followed by 64 hex digits; returns the digest."""
        s = self._stream
        start = s.offset
        if not s.match("sha256:"):
            s.fail("'sha256:'")
            return None
        digest_start = s.offset
        for _ in range(64):
            if not is_hex_digit(s.peek()):
                s.fail("hex digit")
                s.reset(start)
                return None
            s.next()
        digest = s.text(digest_start).lower()
        self.whitespace()
        return digest
