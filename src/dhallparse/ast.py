"""AST node types for parsed expressions.

Every node is a frozen dataclass carrying the source span it was built
from. Spans are left out of equality and repr so that two parses of
differently laid out but structurally identical source compare equal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from dhallparse.stream import NO_SPAN, Span


def _span() -> Span:
    return field(default=NO_SPAN, compare=False, repr=False)  # type: ignore[return-value]


class Operator(Enum):
    """Binary operators, listed from lowest to highest precedence."""

    IMPORT_ALT = "?"
    OR = "||"
    PLUS = "+"
    TEXT_APPEND = "++"
    LIST_APPEND = "#"
    AND = "&&"
    COMBINE = "/\\"
    PREFER = "//"
    COMBINE_TYPES = "//\\\\"
    TIMES = "*"
    EQUAL = "=="
    NOT_EQUAL = "!="


class FilePrefix(Enum):
    ABSOLUTE = "/"
    HERE = "."
    PARENT = ".."
    HOME = "~"


# ----------------------------------------------------------------------
# Variables, binders and control flow
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Var:
    """Variable reference; index is the `@n` disambiguator (0 when absent)."""

    name: str
    index: int = 0
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class Lambda:
    label: str
    domain: Expr
    body: Expr
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class Pi:
    """Function type; `A -> B` is stored with the label "_"."""

    label: str
    domain: Expr
    body: Expr
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class App:
    function: Expr
    argument: Expr
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class Let:
    label: str
    annotation: Expr | None
    value: Expr
    body: Expr
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class If:
    condition: Expr
    then_branch: Expr
    else_branch: Expr
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class BinOp:
    operator: Operator
    left: Expr
    right: Expr
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class Annot:
    expression: Expr
    annotation: Expr
    span: Span = _span()


# ----------------------------------------------------------------------
# Records, unions and collections
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Field:
    record: Expr
    label: str
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class Project:
    record: Expr
    labels: tuple[str, ...]
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class RecordLiteral:
    """Record value; fields keep declaration order, duplicates included."""

    fields: tuple[tuple[str, Expr], ...]
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class RecordType:
    fields: tuple[tuple[str, Expr], ...]
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class UnionType:
    alternatives: tuple[tuple[str, Expr], ...]
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class UnionLiteral:
    """Union value; `members` keeps source order and `selected` indexes the `label = value` one."""

    members: tuple[tuple[str, Expr], ...]
    selected: int = 0
    span: Span = _span()

    @property
    def label(self) -> str:
        return self.members[self.selected][0]

    @property
    def value(self) -> Expr:
        return self.members[self.selected][1]

    @property
    def alternatives(self) -> tuple[tuple[str, Expr], ...]:
        """The typed members, without the selected one."""
        return self.members[: self.selected] + self.members[self.selected + 1 :]


@dataclass(frozen=True, slots=True)
class ListLiteral:
    """List literal; `element_type` is only set for the empty list."""

    elements: tuple[Expr, ...]
    element_type: Expr | None = None
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class OptionalLiteral:
    """`[] : Optional T` (value None) or `[x] : Optional T`."""

    value: Expr | None
    type: Expr
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class Merge:
    handlers: Expr
    union: Expr
    annotation: Expr | None = None
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class Constructors:
    expression: Expr
    span: Span = _span()


# ----------------------------------------------------------------------
# Literals and built-ins
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NaturalLit:
    value: int
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class IntegerLit:
    value: int
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class DoubleLit:
    value: float
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class BoolLit:
    value: bool
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class TextChunk:
    """Literal characters of a text literal, escapes already resolved."""

    value: str
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class Interpolation:
    """`${ expression }` splice inside a text literal."""

    expression: Expr
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class TextLiteral:
    """Text literal; `multiline` marks the `''...''` form (not yet dedented)."""

    parts: tuple[TextChunk | Interpolation, ...]
    multiline: bool = False
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class Builtin:
    """Built-in type or function, e.g. `Natural` or `List/fold`."""

    name: str
    span: Span = _span()


@dataclass(frozen=True, slots=True)
class Const:
    """`Type` or `Kind`."""

    name: str
    span: Span = _span()


# ----------------------------------------------------------------------
# Imports
# ----------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LocalPath:
    prefix: FilePrefix
    components: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class EnvVar:
    """Environment variable; `posix` marks the quoted `env:"..."` form."""

    name: str
    posix: bool = False


@dataclass(frozen=True, slots=True)
class RemoteURL:
    scheme: str
    authority: str
    path: tuple[str, ...]
    query: str | None = None
    fragment: str | None = None
    headers: Import | None = None


@dataclass(frozen=True, slots=True)
class Missing:
    pass


ImportTarget = Union[LocalPath, EnvVar, RemoteURL, Missing]


@dataclass(frozen=True, slots=True)
class Import:
    """Import of another expression; resolution happens downstream."""

    target: ImportTarget
    hash: str | None = None
    as_text: bool = False
    span: Span = _span()


Expr = Union[
    Var,
    Lambda,
    Pi,
    App,
    Let,
    If,
    BinOp,
    Annot,
    Field,
    Project,
    RecordLiteral,
    RecordType,
    UnionType,
    UnionLiteral,
    ListLiteral,
    OptionalLiteral,
    Merge,
    Constructors,
    NaturalLit,
    IntegerLit,
    DoubleLit,
    BoolLit,
    TextLiteral,
    Builtin,
    Const,
    Import,
]
