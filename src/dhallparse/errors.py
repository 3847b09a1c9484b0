"""Error types with formatted source context."""

from __future__ import annotations

from dhallparse.stream import Span


class ParseError(Exception):
    """Base class for parse failures, with span and source context."""

    def __init__(self, message: str, span: Span, source: str, filename: str = "input.dhall") -> None:
        self.message = message
        self.span = span
        self.source = source
        self.filename = filename
        super().__init__(self.format(filename))

    def format(self, filename: str | None = None) -> str:
        if filename is None:
            filename = self.filename
        lines = self.source.splitlines(keepends=True)
        line_idx = self.span.start.line - 1
        col = self.span.start.column

        if 0 <= line_idx < len(lines):
            source_line = lines[line_idx].rstrip("\n").rstrip("\r")
        else:
            source_line = ""

        # Underline the full span when on one line, otherwise to end of line
        if self.span.end.line == self.span.start.line:
            underline_len = max(1, self.span.end.column - col)
        else:
            underline_len = max(1, len(source_line) - col + 1)

        pad = " " * (col - 1)
        carets = "^" * underline_len

        line_num = str(self.span.start.line)
        gutter_width = len(line_num) + 1

        blank_gutter = " " * gutter_width + "|"
        line_gutter = f"{line_num:>{gutter_width - 1}} |"

        return (
            f"error: {self.message}\n"
            f"{' ' * gutter_width}--> {filename}:{self.span.start.line}:{col}\n"
            f"{blank_gutter}\n"
            f"{line_gutter} {source_line}\n"
            f"{blank_gutter} {pad}{carets}"
        )


class InvalidSyntaxError(ParseError):
    """No alternative matched; `expected` lists what was tried at the position."""

    def __init__(
        self,
        message: str,
        span: Span,
        source: str,
        filename: str = "input.dhall",
        expected: tuple[str, ...] = (),
    ) -> None:
        self.expected = expected
        super().__init__(message, span, source, filename)


class TrailingInputError(ParseError):
    """A complete expression was parsed but input remains after it."""


class RecursionLimitError(ParseError):
    """Expression nesting went deeper than the configured limit."""

    def __init__(
        self,
        message: str,
        span: Span,
        source: str,
        filename: str = "input.dhall",
        limit: int = 0,
    ) -> None:
        self.limit = limit
        super().__init__(message, span, source, filename)
