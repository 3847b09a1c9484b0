"""Parser and AST builder for a Dhall-style configuration language."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from dhallparse.ast import Expr

__version__ = "0.1.0"


def parse(source: str | bytes, filename: str = "input.dhall", *, max_depth: int | None = None) -> Expr:
    """Parse a complete program and return its expression tree."""
    from dhallparse.parser import parse as _parse

    return _parse(source, filename, max_depth=max_depth)


def parse_expression(
    source: str | bytes, filename: str = "input.dhall", *, max_depth: int | None = None
) -> tuple[Expr, int]:
    """Parse one expression and return it with the offset where it ended."""
    from dhallparse.parser import parse_expression as _parse_expression

    return _parse_expression(source, filename, max_depth=max_depth)
