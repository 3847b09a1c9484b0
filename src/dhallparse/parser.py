"""Recursive-descent parser that builds an expression tree straight from source text.

Alternatives are ordered: the first one that succeeds wins, even when a
later one would match more input. Every rule either returns a node with
the stream advanced past the node and its trailing whitespace, or returns
None with the stream back where the rule started.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass
from functools import partial

from dhallparse.ast import (
    Annot,
    App,
    BinOp,
    BoolLit,
    Builtin,
    Const,
    Constructors,
    DoubleLit,
    Expr,
    Field,
    If,
    Import,
    ImportTarget,
    IntegerLit,
    Interpolation,
    Lambda,
    Let,
    ListLiteral,
    LocalPath,
    Merge,
    Missing,
    NaturalLit,
    Operator,
    OptionalLiteral,
    Pi,
    Project,
    RecordLiteral,
    RecordType,
    RemoteURL,
    TextChunk,
    TextLiteral,
    UnionLiteral,
    UnionType,
    Var,
)
from dhallparse.errors import InvalidSyntaxError, RecursionLimitError, TrailingInputError
from dhallparse.lexer import Lexer
from dhallparse.stream import CharStream, Span, is_hex_digit
from dhallparse.strings import TEXT_ESCAPES, combine_surrogates

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 32

# Lowest precedence first; each level's operands come from the next one
_OPERATOR_LEVELS: tuple[tuple[Operator, tuple[str, ...]], ...] = (
    (Operator.IMPORT_ALT, ("?",)),
    (Operator.OR, ("||",)),
    (Operator.PLUS, ("+",)),
    (Operator.TEXT_APPEND, ("++",)),
    (Operator.LIST_APPEND, ("#",)),
    (Operator.AND, ("&&",)),
    (Operator.COMBINE, ("/\\", "∧")),
    (Operator.PREFER, ("//", "⫽")),
    (Operator.COMBINE_TYPES, ("//\\\\", "⩓")),
    (Operator.TIMES, ("*",)),
    (Operator.EQUAL, ("==",)),
    (Operator.NOT_EQUAL, ("!=",)),
)
_LAST_LEVEL = len(_OPERATOR_LEVELS) - 1


class Parser:
    """Backtracking recursive-descent parser over a single source text."""

    def __init__(
        self,
        source: str,
        filename: str = "input.dhall",
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
            raise ValueError(f"max_depth must be a positive integer, got {max_depth!r}")
        self._source = source
        self._filename = filename
        self._max_depth = max_depth
        self._stream = CharStream(source)
        self._lex = Lexer(self._stream)
        self._depth = 0
        # start offset -> (result, end offset); results depend only on position
        self._expression_memo: dict[int, tuple[Expr | None, int]] = {}
        self._operator_memo: dict[int, tuple[Expr | None, int]] = {}

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def parse(self) -> Expr:
        """Parse a complete program; the whole input must be consumed."""
        expr, end = self.parse_expression()
        s = self._stream
        if end < len(self._source):
            if s.furthest > end:
                raise self._syntax_error()
            raise TrailingInputError(
                "unexpected input after expression",
                s.span(end, end + 1),
                self._source,
                self._filename,
            )
        return expr

    def parse_expression(self) -> tuple[Expr, int]:
        """Parse one expression after leading whitespace; return it and the end offset."""
        self._lex.whitespace()
        try:
            expr = self._expression()
        except RecursionError:
            raise self._recursion_error() from None
        if expr is None:
            raise self._syntax_error()
        logger.debug(
            "parsed %s up to offset %d (%d expression / %d operator memo entries)",
            self._filename,
            self._stream.offset,
            len(self._expression_memo),
            len(self._operator_memo),
        )
        return expr, self._stream.offset

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _span(self, start: int) -> Span:
        """Span from `start` to the end of the last token (trailing whitespace excluded)."""
        return self._stream.span(start, self._lex.token_end(self._stream.offset))

    def _backtrack(self, mark: int) -> None:
        self._stream.reset(mark)
        return None

    def _syntax_error(self) -> InvalidSyntaxError:
        s = self._stream
        offset = s.furthest
        expected = tuple(sorted(s.expected))
        if offset >= len(self._source):
            found = "end of input"
            span = s.span(offset, offset)
        else:
            found = repr(self._source[offset])
            span = s.span(offset, offset + 1)
        message = f"unexpected {found}"
        if expected:
            message += f", expected {_describe(expected)}"
        return InvalidSyntaxError(message, span, self._source, self._filename, expected)

    def _recursion_error(self) -> RecursionLimitError:
        s = self._stream
        return RecursionLimitError(
            f"expression nesting exceeds the limit of {self._max_depth}",
            s.span(s.offset, min(s.offset + 1, len(self._source))),
            self._source,
            self._filename,
            self._max_depth,
        )

    # ------------------------------------------------------------------
    # Structural expressions
    # ------------------------------------------------------------------

    def _expression(self) -> Expr | None:
        s = self._stream
        start = s.offset
        cached = self._expression_memo.get(start)
        if cached is not None:
            expr, end = cached
            s.reset(end)
            return expr

        self._depth += 1
        if self._depth > self._max_depth:
            raise self._recursion_error()
        try:
            expr = self._binder_chain()
        finally:
            self._depth -= 1

        self._expression_memo[start] = (expr, s.offset)
        return expr

    def _binder_chain(self) -> Expr | None:
        """Binding forms whose last part is a whole expression, parsed in a loop.

        The heads `\\(x : A) ->`, `if c then t else`, `let x = v in`,
        `forall (x : A) ->` and `A ->` are collected until none matches,
        then the remaining expression is folded into them from the right.
        A long flat `let` or arrow chain therefore costs one nesting level.
        """
        s = self._stream
        binders: list[_Binder] = []
        while True:
            binder = self._binder()
            if binder is None:
                break
            binders.append(binder)

        body = self._annotated_expression()
        # A head whose body failed: only `A ->` falls back to `A` on its own
        while body is None and binders:
            binder = binders.pop()
            s.reset(binder.start)
            if binder.arrow:
                body = self._annotated_expression()

        if body is None:
            return None
        while binders:
            binder = binders.pop()
            body = binder.build(body, self._span(binder.start))
        return body

    def _binder(self) -> _Binder | None:
        for rule in (self._lambda, self._if, self._let, self._forall, self._arrow):
            binder = rule()
            if binder is not None:
                return binder
        return None

    def _lambda(self) -> _Binder | None:
        lex = self._lex
        start = self._stream.offset
        if not lex.lambda_():
            return None
        if not lex.symbol("("):
            return self._backtrack(start)
        label = lex.label()
        if label is None or not lex.symbol(":"):
            return self._backtrack(start)
        domain = self._expression()
        if domain is None or not lex.symbol(")") or not lex.arrow():
            return self._backtrack(start)
        return _Binder(start, partial(Lambda, label, domain))

    def _if(self) -> _Binder | None:
        lex = self._lex
        start = self._stream.offset
        if not lex.keyword("if"):
            return None
        condition = self._expression()
        if condition is None or not lex.keyword("then"):
            return self._backtrack(start)
        then_branch = self._expression()
        if then_branch is None or not lex.keyword("else"):
            return self._backtrack(start)
        return _Binder(start, partial(If, condition, then_branch))

    def _let(self) -> _Binder | None:
        lex = self._lex
        start = self._stream.offset
        if not lex.keyword("let"):
            return None
        label = lex.label()
        if label is None:
            return self._backtrack(start)
        annotation = None
        if lex.symbol(":"):
            annotation = self._expression()
            if annotation is None:
                return self._backtrack(start)
        if not lex.symbol("="):
            return self._backtrack(start)
        value = self._expression()
        if value is None or not lex.keyword("in"):
            return self._backtrack(start)
        return _Binder(start, partial(Let, label, annotation, value))

    def _forall(self) -> _Binder | None:
        lex = self._lex
        start = self._stream.offset
        if not lex.forall():
            return None
        if not lex.symbol("("):
            return self._backtrack(start)
        label = lex.label()
        if label is None or not lex.symbol(":"):
            return self._backtrack(start)
        domain = self._expression()
        if domain is None or not lex.symbol(")") or not lex.arrow():
            return self._backtrack(start)
        return _Binder(start, partial(Pi, label, domain))

    def _arrow(self) -> _Binder | None:
        """`A ->`; without the arrow, `A` is parsed again as an annotated expression."""
        start = self._stream.offset
        domain = self._operator_expression()
        if domain is None:
            return None
        if not self._lex.arrow():
            return self._backtrack(start)
        return _Binder(start, partial(Pi, "_", domain), arrow=True)

    def _annotated_expression(self) -> Expr | None:
        for rule in (self._merge, self._bracket_collection, self._annotated_operator):
            expr = rule()
            if expr is not None:
                return expr
        return None

    def _merge(self) -> Merge | None:
        lex = self._lex
        start = self._stream.offset
        if not lex.keyword("merge"):
            return None
        handlers = self._import_expression()
        if handlers is None:
            return self._backtrack(start)
        union = self._import_expression()
        if union is None:
            return self._backtrack(start)
        annotation = None
        mark = self._stream.offset
        if lex.symbol(":"):
            annotation = self._application_expression()
            if annotation is None:
                self._stream.reset(mark)
        return Merge(handlers, union, annotation, self._span(start))

    def _bracket_collection(self) -> ListLiteral | OptionalLiteral | None:
        """`[] : List T`, `[] : Optional T` or `[x] : Optional T`."""
        lex = self._lex
        s = self._stream
        start = s.offset
        if not lex.symbol("["):
            return None

        mark = s.offset
        if lex.symbol("]") and lex.symbol(":"):
            if lex.keyword("List"):
                element_type = self._import_expression()
                if element_type is not None:
                    return ListLiteral((), element_type, self._span(start))
            elif lex.keyword("Optional"):
                optional_type = self._import_expression()
                if optional_type is not None:
                    return OptionalLiteral(None, optional_type, self._span(start))
        s.reset(mark)

        value = self._expression()
        if (
            value is not None
            and lex.symbol("]")
            and lex.symbol(":")
            and lex.keyword("Optional")
        ):
            optional_type = self._import_expression()
            if optional_type is not None:
                return OptionalLiteral(value, optional_type, self._span(start))
        return self._backtrack(start)

    def _annotated_operator(self) -> Expr | None:
        start = self._stream.offset
        expr = self._operator_expression()
        if expr is None:
            return None
        mark = self._stream.offset
        if self._lex.symbol(":"):
            annotation = self._expression()
            if annotation is not None:
                return Annot(expr, annotation, self._span(start))
            self._stream.reset(mark)
        return expr

    # ------------------------------------------------------------------
    # Operator chain
    # ------------------------------------------------------------------

    def _operator_expression(self) -> Expr | None:
        s = self._stream
        start = s.offset
        cached = self._operator_memo.get(start)
        if cached is not None:
            expr, end = cached
            s.reset(end)
            return expr
        expr = self._binary(0)
        self._operator_memo[start] = (expr, s.offset)
        return expr

    def _binary(self, level: int) -> Expr | None:
        """One precedence level: operand *(operator operand), folded to the left."""
        s = self._stream
        start = s.offset
        operator, spellings = _OPERATOR_LEVELS[level]
        last = level == _LAST_LEVEL

        left = self._application_expression() if last else self._binary(level + 1)
        if left is None:
            return None
        while True:
            mark = s.offset
            if not self._operator(operator, spellings):
                break
            right = self._application_expression() if last else self._binary(level + 1)
            if right is None:
                s.reset(mark)
                break
            left = BinOp(operator, left, right, self._span(start))
        return left

    def _operator(self, operator: Operator, spellings: tuple[str, ...]) -> bool:
        s = self._stream
        mark = s.offset
        if not any(s.match(text) for text in spellings):
            s.fail(f"'{spellings[0]}'")
            return False
        skipped = self._lex.whitespace()
        # A "+" glued to what follows is the sign of an integer literal
        if operator is Operator.PLUS and not skipped:
            s.reset(mark)
            return False
        return True

    # ------------------------------------------------------------------
    # Application, imports and selectors
    # ------------------------------------------------------------------

    def _application_expression(self) -> Expr | None:
        start = self._stream.offset
        constructors = self._lex.keyword("constructors")
        expr = self._import_expression()
        if expr is None:
            return self._backtrack(start)
        if constructors:
            expr = Constructors(expr, self._span(start))
        while self._lex.after_whitespace():
            argument = self._import_expression()
            if argument is None:
                break
            expr = App(expr, argument, self._span(start))
        return expr

    def _import_expression(self) -> Expr | None:
        expr = self._import()
        if expr is None:
            expr = self._selector_expression()
        return expr

    def _import(self) -> Import | None:
        lex = self._lex
        s = self._stream
        start = s.offset
        hashed = self._import_hashed()
        if hashed is None:
            return None
        target, digest = hashed
        as_text = False
        mark = s.offset
        if lex.keyword("as"):
            if lex.keyword("Text"):
                as_text = True
            else:
                s.reset(mark)
        return Import(target, digest, as_text, self._span(start))

    def _import_hashed(self) -> tuple[ImportTarget, str | None] | None:
        target = self._import_type()
        if target is None:
            return None
        return target, self._lex.integrity_hash()

    def _import_type(self) -> ImportTarget | None:
        lex = self._lex
        if lex.keyword("missing"):
            return Missing()
        local = lex.local_path()
        if local is not None:
            prefix, components = local
            return LocalPath(prefix, components)
        remote = self._remote()
        if remote is not None:
            return remote
        return lex.env()

    def _remote(self) -> RemoteURL | None:
        lex = self._lex
        s = self._stream
        raw = lex.http_raw()
        if raw is None:
            return None
        scheme, authority, path, query, fragment = raw
        headers = None
        mark = s.offset
        if lex.keyword("using"):
            headers = self._headers()
            if headers is None:
                s.reset(mark)
        return RemoteURL(scheme, authority, path, query, fragment, headers)

    def _headers(self) -> Import | None:
        """Import supplying custom request headers, optionally parenthesized."""
        lex = self._lex
        s = self._stream
        start = s.offset
        parenthesized = lex.symbol("(")
        inner_start = s.offset
        hashed = self._import_hashed()
        if hashed is None:
            return self._backtrack(start)
        target, digest = hashed
        headers = Import(target, digest, False, self._span(inner_start))
        if parenthesized and not lex.symbol(")"):
            return self._backtrack(start)
        return headers

    def _selector_expression(self) -> Expr | None:
        lex = self._lex
        s = self._stream
        start = s.offset
        expr = self._primitive_expression()
        if expr is None:
            return None
        while True:
            mark = s.offset
            if not lex.symbol("."):
                break
            label = lex.label()
            if label is not None:
                expr = Field(expr, label, self._span(start))
                continue
            labels = self._labels()
            if labels is not None:
                expr = Project(expr, labels, self._span(start))
                continue
            # "./x" and "../x" belong to an import in the enclosing application
            s.reset(mark)
            break
        return expr

    def _labels(self) -> tuple[str, ...] | None:
        lex = self._lex
        start = self._stream.offset
        if not lex.symbol("{"):
            return None
        labels: list[str] = []
        label = lex.label()
        if label is not None:
            labels.append(label)
            while lex.symbol(","):
                label = lex.label()
                if label is None:
                    return self._backtrack(start)
                labels.append(label)
        if not lex.symbol("}"):
            return self._backtrack(start)
        return tuple(labels)

    # ------------------------------------------------------------------
    # Primitive expressions
    # ------------------------------------------------------------------

    def _primitive_expression(self) -> Expr | None:
        lex = self._lex
        s = self._stream
        start = s.offset

        # Doubles first: "2.0" would otherwise stop after the natural "2"
        double = lex.double_literal()
        if double is not None:
            return DoubleLit(double, self._span(start))
        natural = lex.natural_literal()
        if natural is not None:
            return NaturalLit(natural, self._span(start))
        integer = lex.integer_literal()
        if integer is not None:
            return IntegerLit(integer, self._span(start))
        if lex.minus_infinity():
            return DoubleLit(-math.inf, self._span(start))

        for rule in (
            self._text_literal,
            self._record_type_or_literal,
            self._union_type_or_literal,
            self._non_empty_list,
            self._identifier,
            self._parenthesized,
        ):
            expr = rule()
            if expr is not None:
                return expr
        return None

    def _identifier(self) -> Expr | None:
        start = self._stream.offset
        ident = self._lex.identifier()
        if ident is None:
            return None
        kind, name, index = ident
        span = self._span(start)
        if kind == "variable":
            return Var(name, index, span)
        if kind == "builtin":
            return Builtin(name, span)
        if name in ("True", "False"):
            return BoolLit(name == "True", span)
        if name == "NaN":
            return DoubleLit(math.nan, span)
        if name == "Infinity":
            return DoubleLit(math.inf, span)
        if name in ("Type", "Kind"):
            return Const(name, span)
        return Builtin(name, span)

    def _parenthesized(self) -> Expr | None:
        lex = self._lex
        start = self._stream.offset
        if not lex.symbol("("):
            return None
        expr = self._expression()
        if expr is None or not lex.symbol(")"):
            return self._backtrack(start)
        return expr

    def _non_empty_list(self) -> ListLiteral | None:
        lex = self._lex
        start = self._stream.offset
        if not lex.symbol("["):
            return None
        elements: list[Expr] = []
        while True:
            element = self._expression()
            if element is None:
                return self._backtrack(start)
            elements.append(element)
            if not lex.symbol(","):
                break
        if not lex.symbol("]"):
            return self._backtrack(start)
        return ListLiteral(tuple(elements), None, self._span(start))

    # ------------------------------------------------------------------
    # Records and unions
    # ------------------------------------------------------------------

    def _record_type_or_literal(self) -> RecordLiteral | RecordType | None:
        """`{ = }`, `{ }`, `{ a = x, ... }` or `{ a : T, ... }`.

        The first member decides between literal and type; later members
        must use the same separator.
        """
        lex = self._lex
        start = self._stream.offset
        if not lex.symbol("{"):
            return None

        if lex.symbol("="):
            if lex.symbol("}"):
                return RecordLiteral((), self._span(start))
            return self._backtrack(start)

        label = lex.label()
        if label is None:
            if lex.symbol("}"):
                return RecordType((), self._span(start))
            return self._backtrack(start)

        node: type[RecordLiteral] | type[RecordType]
        if lex.symbol("="):
            separator, node = "=", RecordLiteral
        elif lex.symbol(":"):
            separator, node = ":", RecordType
        else:
            return self._backtrack(start)

        fields = self._record_fields(label, separator)
        if fields is None or not lex.symbol("}"):
            return self._backtrack(start)
        return node(fields, self._span(start))

    def _record_fields(self, label: str, separator: str) -> tuple[tuple[str, Expr], ...] | None:
        """Members after the first label and its separator, in source order."""
        lex = self._lex
        s = self._stream
        fields: list[tuple[str, Expr]] = []
        while True:
            value = self._expression()
            if value is None:
                return None
            fields.append((label, value))
            mark = s.offset
            if not lex.symbol(","):
                break
            next_label = lex.label()
            if next_label is None or not lex.symbol(separator):
                s.reset(mark)
                break
            label = next_label
        return tuple(fields)

    def _union_type_or_literal(self) -> UnionLiteral | UnionType | None:
        """`< a : A | b : B >`, or with one member written `a = value`."""
        lex = self._lex
        start = self._stream.offset
        if not lex.symbol("<"):
            return None
        if lex.symbol(">"):
            return UnionType((), self._span(start))

        members: list[tuple[str, Expr]] = []
        selected: int | None = None
        while True:
            label = lex.label()
            if label is None:
                return self._backtrack(start)
            if selected is None and lex.symbol("="):
                selected = len(members)
            elif not lex.symbol(":"):
                return self._backtrack(start)
            member = self._expression()
            if member is None:
                return self._backtrack(start)
            members.append((label, member))
            if not lex.symbol("|"):
                break

        if not lex.symbol(">"):
            return self._backtrack(start)
        if selected is not None:
            return UnionLiteral(tuple(members), selected, self._span(start))
        return UnionType(tuple(members), self._span(start))

    # ------------------------------------------------------------------
    # Text literals
    # ------------------------------------------------------------------

    def _text_literal(self) -> TextLiteral | None:
        s = self._stream
        if s.peek() == '"':
            return self._double_quote_literal()
        if s.peek_matches("''"):
            return self._single_quote_literal()
        s.fail("text literal")
        return None

    def _double_quote_literal(self) -> TextLiteral | None:
        s = self._stream
        start = s.offset
        s.next()
        parts = _TextParts(s)
        while True:
            ch = s.peek()
            if ch == '"':
                parts.flush()
                s.next()
                break
            if s.peek_matches("${"):
                parts.flush()
                interpolation = self._interpolation()
                if interpolation is None:
                    return self._backtrack(start)
                parts.append(interpolation)
            elif ch == "\\":
                chunk_start = s.offset
                decoded = self._text_escape()
                if decoded is None:
                    return self._backtrack(start)
                parts.add(decoded, chunk_start)
            elif ch >= " ":
                parts.add(ch, s.offset)
                s.next()
            else:
                s.fail("'\"'")
                return self._backtrack(start)
        self._lex.whitespace()
        return TextLiteral(tuple(parts.parts), False, self._span(start))

    def _text_escape(self) -> str | None:
        s = self._stream
        start = s.offset
        s.next()
        ch = s.peek()
        if ch in TEXT_ESCAPES:
            s.next()
            return TEXT_ESCAPES[ch]
        if ch == "u":
            s.next()
            digits_start = s.offset
            for _ in range(4):
                if not is_hex_digit(s.peek()):
                    s.fail("hex digit")
                    s.reset(start)
                    return None
                s.next()
            return chr(int(s.text(digits_start), 16))
        s.fail("escape sequence")
        s.reset(start)
        return None

    def _single_quote_literal(self) -> TextLiteral | None:
        """`''...''` text; the raw lines are kept, see strings.dedent()."""
        s = self._stream
        start = s.offset
        s.offset += 2
        parts = _TextParts(s)
        while True:
            chunk_start = s.offset
            if s.match("'''"):
                parts.add("''", chunk_start)
            elif s.peek_matches("${"):
                parts.flush()
                interpolation = self._interpolation()
                if interpolation is None:
                    return self._backtrack(start)
                parts.append(interpolation)
            elif s.match("''${"):
                parts.add("${", chunk_start)
            elif s.peek_matches("''"):
                parts.flush()
                s.offset += 2
                break
            elif s.match("\r\n"):
                parts.add("\r\n", chunk_start)
            elif s.peek() in ("\n", "\t") or s.peek() >= " ":
                parts.add(s.next(), chunk_start)
            else:
                s.fail("\"''\"")
                return self._backtrack(start)
        self._lex.whitespace()
        return TextLiteral(tuple(parts.parts), True, self._span(start))

    def _interpolation(self) -> Interpolation | None:
        """`${ expression }`; no whitespace is skipped after the closing brace."""
        s = self._stream
        start = s.offset
        s.offset += 2
        self._lex.whitespace()
        expr = self._expression()
        if expr is None:
            return self._backtrack(start)
        if not s.match("}"):
            s.fail("'}'")
            return self._backtrack(start)
        return Interpolation(expr, s.span(start))


@dataclass(frozen=True, slots=True)
class _Binder:
    """Head of a binding form; `build(body, span)` makes the finished node."""

    start: int
    build: Callable[[Expr, Span], Expr]
    arrow: bool = False


class _TextParts:
    """Accumulates text literal characters into chunks between interpolations."""

    def __init__(self, stream: CharStream) -> None:
        self._stream = stream
        self.parts: list[TextChunk | Interpolation] = []
        self._chars: list[str] = []
        self._start = 0

    def add(self, text: str, start: int) -> None:
        if not self._chars:
            self._start = start
        self._chars.append(text)

    def append(self, interpolation: Interpolation) -> None:
        self.parts.append(interpolation)

    def flush(self) -> None:
        if self._chars:
            value = combine_surrogates("".join(self._chars))
            self.parts.append(TextChunk(value, self._stream.span(self._start)))
            self._chars.clear()


def _describe(expected: tuple[str, ...]) -> str:
    if len(expected) == 1:
        return expected[0]
    return ", ".join(expected[:-1]) + f" or {expected[-1]}"


def _decode(source: str | bytes, filename: str) -> str:
    if isinstance(source, str):
        return source
    try:
        return source.decode("utf-8")
    except UnicodeDecodeError as exc:
        text = source[: exc.start].decode("utf-8")
        stream = CharStream(text)
        end = len(text)
        raise InvalidSyntaxError(
            "input is not valid UTF-8", stream.span(end, end), text, filename
        ) from None


def parse(
    source: str | bytes,
    filename: str = "input.dhall",
    *,
    max_depth: int | None = None,
) -> Expr:
    """Convenience function: parse a complete program and return its expression tree."""
    text = _decode(source, filename)
    depth = DEFAULT_MAX_DEPTH if max_depth is None else max_depth
    return Parser(text, filename, depth).parse()


def parse_expression(
    source: str | bytes,
    filename: str = "input.dhall",
    *,
    max_depth: int | None = None,
) -> tuple[Expr, int]:
    """Convenience function: parse one expression, allowing input after it."""
    text = _decode(source, filename)
    depth = DEFAULT_MAX_DEPTH if max_depth is None else max_depth
    return Parser(text, filename, depth).parse_expression()
