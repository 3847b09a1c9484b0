"""Tests for error types, positions, messages, and formatting."""

from __future__ import annotations

import pytest

from dhallparse.ast import App, If, Lambda, Let, Pi
from dhallparse.errors import (
    InvalidSyntaxError,
    ParseError,
    RecursionLimitError,
    TrailingInputError,
)
from dhallparse.parser import DEFAULT_MAX_DEPTH, Parser, parse, parse_expression

from tests.conftest import nat, var


class TestSyntaxErrors:
    def test_missing_parameter_type(self) -> None:
        with pytest.raises(InvalidSyntaxError, match="expected label") as exc_info:
            parse("\\( -> x")
        exc = exc_info.value
        assert exc.span.start.offset == 3
        assert exc.message == "unexpected '-', expected label"

    def test_expected_items_sorted(self, parse_error) -> None:
        exc = parse_error("if a then b")
        assert list(exc.expected) == sorted(exc.expected)

    def test_message_lists_alternatives(self, parse_error) -> None:
        exc = parse_error("let x = 1")
        assert exc.message.startswith("unexpected end of input, expected ")
        assert " or " in exc.message

    def test_error_on_later_line(self, parse_error) -> None:
        exc = parse_error("let x = 1\nin \\( -> x")
        assert exc.span.start.line == 2
        assert exc.span.start.column == 7

    def test_byte_order_mark_rejected(self, parse_error) -> None:
        exc = parse_error("\ufeffx")
        assert isinstance(exc, InvalidSyntaxError)
        assert exc.span.start.offset == 0

    def test_filename_recorded(self, parse_error) -> None:
        assert parse_error("(", filename="conf.dhall").filename == "conf.dhall"


class TestTrailingInput:
    def test_trailing_paren(self) -> None:
        with pytest.raises(TrailingInputError, match="unexpected input after expression") as exc_info:
            parse("x )")
        assert exc_info.value.span.start.column == 3

    def test_is_parse_error(self) -> None:
        with pytest.raises(ParseError):
            parse("x )")

    def test_parse_expression_allows_trailing(self) -> None:
        assert parse_expression("x )") == (var("x"), 2)

    def test_parse_expression_skips_leading_whitespace(self) -> None:
        expr, end = parse_expression("  f x )")
        assert expr == App(var("f"), var("x"))
        assert end == 6

    def test_arrow_without_body_falls_back(self) -> None:
        assert parse_expression("a -> )") == (var("a"), 2)
        assert parse_expression("let b = 1 in a -> )") == (
            Let("b", None, nat(1), var("a")),
            15,
        )

    def test_parse_expression_still_needs_an_expression(self) -> None:
        with pytest.raises(InvalidSyntaxError):
            parse_expression(")")


class TestRecursionLimit:
    def test_default_limit(self) -> None:
        assert DEFAULT_MAX_DEPTH == 32

    def test_within_limit(self) -> None:
        assert parse("(" * 20 + "x" + ")" * 20) == var("x")

    def test_parentheses_over_limit(self) -> None:
        with pytest.raises(RecursionLimitError, match="limit of 10") as exc_info:
            parse("(" * 20 + "x" + ")" * 20, max_depth=10)
        assert exc_info.value.limit == 10

    def test_lists_over_default_limit(self) -> None:
        with pytest.raises(RecursionLimitError):
            parse("[" * 40 + "1" + "]" * 40)

    def test_records_over_limit(self) -> None:
        with pytest.raises(RecursionLimitError):
            parse("{ a = " * 10 + "1" + " }" * 10, max_depth=5)

    def test_interpreter_limit_is_converted(self) -> None:
        with pytest.raises(RecursionLimitError):
            parse("(" * 5000 + "x" + ")" * 5000, max_depth=1_000_000)

    def test_limit_is_inclusive(self) -> None:
        parser = Parser("((x))", max_depth=3)
        assert parser.parse() == var("x")

    def test_long_let_chain_within_default_limit(self) -> None:
        source = "".join(f"let a{i} = {i} in\n" for i in range(150)) + "a0"
        expr = parse(source)
        for i in range(150):
            assert isinstance(expr, Let)
            assert expr.label == f"a{i}"
            assert expr.value == nat(i)
            expr = expr.body
        assert expr == var("a0")

    def test_long_arrow_chain_within_default_limit(self) -> None:
        expr = parse("a -> " * 1000 + "a")
        for _ in range(1000):
            assert isinstance(expr, Pi)
            assert expr.domain == var("a")
            expr = expr.body
        assert expr == var("a")

    def test_long_lambda_and_if_chains_within_default_limit(self) -> None:
        lambdas = parse("\\(x : T) -> " * 100 + "x")
        assert isinstance(lambdas, Lambda)
        branches = parse("if a then b else " * 100 + "c")
        assert isinstance(branches, If)
        assert branches.then_branch == var("b")

    def test_let_values_still_nest(self) -> None:
        assert parse("let a = 1 in a", max_depth=2) == Let("a", None, nat(1), var("a"))
        with pytest.raises(RecursionLimitError):
            parse("let a = 1 in a", max_depth=1)

    @pytest.mark.parametrize("value", [0, -3])
    def test_non_positive_limit_rejected(self, value: int) -> None:
        with pytest.raises(ValueError, match="max_depth"):
            parse("x", max_depth=value)
        with pytest.raises(ValueError, match="max_depth"):
            parse_expression("x", max_depth=value)

    def test_limit_of_one_is_used(self) -> None:
        assert parse("x", max_depth=1) == var("x")
        with pytest.raises(RecursionLimitError, match="limit of 1"):
            parse("(x)", max_depth=1)


class TestFormatting:
    def test_caret_under_error(self) -> None:
        with pytest.raises(InvalidSyntaxError) as exc_info:
            parse("\\( -> x", "test.dhall")
        assert exc_info.value.format() == (
            "error: unexpected '-', expected label\n"
            "  --> test.dhall:1:4\n"
            "  |\n"
            "1 | \\( -> x\n"
            "  | " + " " * 3 + "^"
        )

    def test_str_is_formatted(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("x )", "a.dhall")
        assert str(exc_info.value) == exc_info.value.format()
        assert "--> a.dhall:1:3" in str(exc_info.value)

    def test_format_other_filename(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            parse("x )", "a.dhall")
        assert "--> b.dhall:1:3" in exc_info.value.format("b.dhall")

    def test_end_of_input_points_past_last_char(self) -> None:
        with pytest.raises(InvalidSyntaxError) as exc_info:
            parse("let x = 1", "t.dhall")
        assert exc_info.value.format().endswith("1 | let x = 1\n  | " + " " * 9 + "^")


class TestBytesInput:
    def test_utf8_bytes(self) -> None:
        assert parse("λ(x : T) → x".encode()) == parse("λ(x : T) → x")

    def test_invalid_utf8(self) -> None:
        with pytest.raises(InvalidSyntaxError, match="not valid UTF-8") as exc_info:
            parse(b"x \xff")
        assert exc_info.value.span.start.offset == 2
