"""Tests for records, unions, lists, and optionals."""

from __future__ import annotations

from dhallparse.ast import (
    Annot,
    App,
    ListLiteral,
    OptionalLiteral,
    RecordLiteral,
    RecordType,
    TextChunk,
    TextLiteral,
    UnionLiteral,
    UnionType,
)
from dhallparse.errors import InvalidSyntaxError

from tests.conftest import builtin, nat, var


class TestRecords:
    def test_empty_literal(self, parse_source) -> None:
        assert parse_source("{ = }") == RecordLiteral(())
        assert parse_source("{=}") == RecordLiteral(())

    def test_empty_type(self, parse_source) -> None:
        assert parse_source("{ }") == RecordType(())
        assert parse_source("{}") == RecordType(())

    def test_literal_keeps_order(self, parse_source) -> None:
        expr = parse_source("{ x = 1, y = 2 }")
        assert expr == RecordLiteral((("x", nat(1)), ("y", nat(2))))
        assert [label for label, _ in expr.fields] == ["x", "y"]

    def test_type(self, parse_source) -> None:
        assert parse_source("{ x : Natural, y : Text }") == RecordType(
            (("x", builtin("Natural")), ("y", builtin("Text")))
        )

    def test_duplicates_kept(self, parse_source) -> None:
        assert parse_source("{ x = 1, x = 2 }") == RecordLiteral((("x", nat(1)), ("x", nat(2))))

    def test_mixed_members_rejected(self, parse_error) -> None:
        assert isinstance(parse_error("{ x = 1, y : Natural }"), InvalidSyntaxError)
        assert isinstance(parse_error("{ x : Natural, y = 1 }"), InvalidSyntaxError)

    def test_trailing_comma_rejected(self, parse_error) -> None:
        parse_error("{ x = 1, }")

    def test_nested(self, parse_source) -> None:
        assert parse_source("{ a = { b = 1 } }") == RecordLiteral(
            (("a", RecordLiteral((("b", nat(1)),))),)
        )

    def test_quoted_field_name(self, parse_source) -> None:
        assert parse_source("{ `let` = 1 }") == RecordLiteral((("let", nat(1)),))


class TestUnions:
    def test_empty(self, parse_source) -> None:
        assert parse_source("< >") == UnionType(())
        assert parse_source("<>") == UnionType(())

    def test_type(self, parse_source) -> None:
        assert parse_source("< A : Natural | B : Text >") == UnionType(
            (("A", builtin("Natural")), ("B", builtin("Text")))
        )

    def test_literal_first(self, parse_source) -> None:
        expr = parse_source("< A = 1 | B : Text >")
        assert expr == UnionLiteral((("A", nat(1)), ("B", builtin("Text"))), 0)
        assert expr.label == "A"
        assert expr.value == nat(1)
        assert expr.alternatives == (("B", builtin("Text")),)

    def test_literal_last(self, parse_source) -> None:
        expr = parse_source('< A : Natural | B = "x" >')
        assert expr == UnionLiteral(
            (("A", builtin("Natural")), ("B", TextLiteral((TextChunk("x"),)))), 1
        )
        assert expr.label == "B"
        assert expr.alternatives == (("A", builtin("Natural")),)

    def test_literal_alone(self, parse_source) -> None:
        assert parse_source("< A = 1 >") == UnionLiteral((("A", nat(1)),), 0)

    def test_literal_keeps_member_order(self, parse_source) -> None:
        first = parse_source("< a : Natural | b = 1 >")
        second = parse_source("< b = 1 | a : Natural >")
        assert first != second
        assert [label for label, _ in first.members] == ["a", "b"]
        assert [label for label, _ in second.members] == ["b", "a"]

    def test_selected_member_in_the_middle(self, parse_source) -> None:
        expr = parse_source("< a : Natural | b = 1 | c : Text >")
        assert expr.selected == 1
        assert expr.alternatives == (("a", builtin("Natural")), ("c", builtin("Text")))

    def test_two_literal_members_rejected(self, parse_error) -> None:
        assert isinstance(parse_error("< A = 1 | B = 2 >"), InvalidSyntaxError)

    def test_unclosed(self, parse_error) -> None:
        assert isinstance(parse_error("< A : Natural"), InvalidSyntaxError)


class TestLists:
    def test_non_empty(self, parse_source) -> None:
        assert parse_source("[1, 2, 3]") == ListLiteral((nat(1), nat(2), nat(3)))

    def test_single(self, parse_source) -> None:
        assert parse_source("[ x ]") == ListLiteral((var("x"),))

    def test_empty_with_type(self, parse_source) -> None:
        assert parse_source("[]  : List Natural") == ListLiteral((), builtin("Natural"))

    def test_empty_with_record_type(self, parse_source) -> None:
        assert parse_source("[] : List { a : Natural }") == ListLiteral(
            (), RecordType((("a", builtin("Natural")),))
        )

    def test_empty_without_type_rejected(self, parse_error) -> None:
        assert isinstance(parse_error("[]"), InvalidSyntaxError)

    def test_annotated_non_empty(self, parse_source) -> None:
        assert parse_source("[1, 2] : List Natural") == Annot(
            ListLiteral((nat(1), nat(2))), App(builtin("List"), builtin("Natural"))
        )

    def test_nested(self, parse_source) -> None:
        assert parse_source("[[1], [2]]") == ListLiteral(
            (ListLiteral((nat(1),)), ListLiteral((nat(2),)))
        )

    def test_as_argument(self, parse_source) -> None:
        assert parse_source("f [1]") == App(var("f"), ListLiteral((nat(1),)))


class TestOptionals:
    def test_empty(self, parse_source) -> None:
        assert parse_source("[] : Optional Natural") == OptionalLiteral(None, builtin("Natural"))

    def test_with_value(self, parse_source) -> None:
        assert parse_source("[1] : Optional Natural") == OptionalLiteral(
            nat(1), builtin("Natural")
        )

    def test_two_values_is_annotated_list(self, parse_source) -> None:
        assert parse_source("[1, 2] : Optional Natural") == Annot(
            ListLiteral((nat(1), nat(2))), App(builtin("Optional"), builtin("Natural"))
        )
