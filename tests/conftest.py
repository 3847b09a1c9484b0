"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from dhallparse.ast import Builtin, Expr, FilePrefix, Import, LocalPath, NaturalLit, Var
from dhallparse.errors import ParseError
from dhallparse.parser import parse


@pytest.fixture
def parse_source():
    """Return a helper that parses a complete program."""

    def _parse(source: str, filename: str = "test.dhall", max_depth: int | None = None) -> Expr:
        return parse(source, filename, max_depth=max_depth)

    return _parse


@pytest.fixture
def parse_error():
    """Return a helper that parses source expected to fail and returns the error."""

    def _parse_error(source: str, filename: str = "test.dhall") -> ParseError:
        with pytest.raises(ParseError) as exc_info:
            parse(source, filename)
        return exc_info.value

    return _parse_error


def var(name: str, index: int = 0) -> Var:
    return Var(name, index)


def nat(value: int) -> NaturalLit:
    return NaturalLit(value)


def builtin(name: str) -> Builtin:
    return Builtin(name)


def here(*components: str) -> Import:
    """Import of a path relative to the current directory."""
    return Import(LocalPath(FilePrefix.HERE, components))
