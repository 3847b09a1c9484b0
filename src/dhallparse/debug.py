"""--debug expression tree dump."""

from __future__ import annotations

import sys
from typing import TextIO

from dhallparse.ast import (
    Annot,
    App,
    BinOp,
    BoolLit,
    Builtin,
    Const,
    Constructors,
    DoubleLit,
    EnvVar,
    Expr,
    Field,
    FilePrefix,
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
    OptionalLiteral,
    Pi,
    Project,
    RecordLiteral,
    RecordType,
    RemoteURL,
    TextLiteral,
    UnionLiteral,
    UnionType,
    Var,
)


def dump_ast(expr: Expr, *, file: TextIO = sys.stderr) -> None:
    """Print a human-readable expression tree to *file*."""
    _dump(expr, 0, file)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump(node: Expr, depth: int, f: TextIO) -> None:
    pad = _indent(depth)
    if isinstance(node, Var):
        suffix = f"@{node.index}" if node.index else ""
        f.write(f"{pad}Var {node.name}{suffix}\n")
    elif isinstance(node, (Lambda, Pi)):
        f.write(f"{pad}{type(node).__name__} {node.label}\n")
        _dump(node.domain, depth + 1, f)
        _dump(node.body, depth + 1, f)
    elif isinstance(node, App):
        f.write(f"{pad}App\n")
        _dump(node.function, depth + 1, f)
        _dump(node.argument, depth + 1, f)
    elif isinstance(node, Let):
        f.write(f"{pad}Let {node.label}\n")
        if node.annotation is not None:
            _dump_labeled(":", node.annotation, depth + 1, f)
        _dump_labeled("=", node.value, depth + 1, f)
        _dump_labeled("in", node.body, depth + 1, f)
    elif isinstance(node, If):
        f.write(f"{pad}If\n")
        _dump(node.condition, depth + 1, f)
        _dump_labeled("then", node.then_branch, depth + 1, f)
        _dump_labeled("else", node.else_branch, depth + 1, f)
    elif isinstance(node, BinOp):
        f.write(f"{pad}BinOp {node.operator.value}\n")
        _dump(node.left, depth + 1, f)
        _dump(node.right, depth + 1, f)
    elif isinstance(node, Annot):
        f.write(f"{pad}Annot\n")
        _dump(node.expression, depth + 1, f)
        _dump_labeled(":", node.annotation, depth + 1, f)
    elif isinstance(node, Field):
        f.write(f"{pad}Field .{node.label}\n")
        _dump(node.record, depth + 1, f)
    elif isinstance(node, Project):
        f.write(f"{pad}Project .{{{', '.join(node.labels)}}}\n")
        _dump(node.record, depth + 1, f)
    elif isinstance(node, RecordLiteral):
        f.write(f"{pad}RecordLiteral\n")
        _dump_fields(node.fields, "=", depth + 1, f)
    elif isinstance(node, RecordType):
        f.write(f"{pad}RecordType\n")
        _dump_fields(node.fields, ":", depth + 1, f)
    elif isinstance(node, UnionType):
        f.write(f"{pad}UnionType\n")
        _dump_fields(node.alternatives, ":", depth + 1, f)
    elif isinstance(node, UnionLiteral):
        f.write(f"{pad}UnionLiteral\n")
        for index, (label, value) in enumerate(node.members):
            separator = "=" if index == node.selected else ":"
            _dump_labeled(f"{label} {separator}", value, depth + 1, f)
    elif isinstance(node, ListLiteral):
        f.write(f"{pad}ListLiteral\n")
        for element in node.elements:
            _dump(element, depth + 1, f)
        if node.element_type is not None:
            _dump_labeled(": List", node.element_type, depth + 1, f)
    elif isinstance(node, OptionalLiteral):
        f.write(f"{pad}OptionalLiteral\n")
        if node.value is not None:
            _dump(node.value, depth + 1, f)
        _dump_labeled(": Optional", node.type, depth + 1, f)
    elif isinstance(node, Merge):
        f.write(f"{pad}Merge\n")
        _dump(node.handlers, depth + 1, f)
        _dump(node.union, depth + 1, f)
        if node.annotation is not None:
            _dump_labeled(":", node.annotation, depth + 1, f)
    elif isinstance(node, Constructors):
        f.write(f"{pad}Constructors\n")
        _dump(node.expression, depth + 1, f)
    elif isinstance(node, (NaturalLit, IntegerLit, DoubleLit)):
        f.write(f"{pad}{type(node).__name__} {node.value!r}\n")
    elif isinstance(node, BoolLit):
        f.write(f"{pad}BoolLit {node.value}\n")
    elif isinstance(node, TextLiteral):
        kind = "''" if node.multiline else '"'
        f.write(f"{pad}TextLiteral {kind}\n")
        for part in node.parts:
            if isinstance(part, Interpolation):
                f.write(f"{_indent(depth + 1)}Interpolation\n")
                _dump(part.expression, depth + 2, f)
            else:
                f.write(f"{_indent(depth + 1)}Chunk {part.value!r}\n")
    elif isinstance(node, Builtin):
        f.write(f"{pad}Builtin {node.name}\n")
    elif isinstance(node, Const):
        f.write(f"{pad}Const {node.name}\n")
    elif isinstance(node, Import):
        _dump_import(node, depth, f)


def _dump_labeled(label: str, node: Expr, depth: int, f: TextIO) -> None:
    f.write(f"{_indent(depth)}{label}\n")
    _dump(node, depth + 1, f)


def _dump_fields(fields: tuple[tuple[str, Expr], ...], separator: str, depth: int, f: TextIO) -> None:
    for label, value in fields:
        _dump_labeled(f"{label} {separator}", value, depth, f)


def _dump_import(node: Import, depth: int, f: TextIO) -> None:
    line = f"{_indent(depth)}Import {format_target(node.target)}"
    if node.hash is not None:
        line += f" sha256:{node.hash}"
    if node.as_text:
        line += " as Text"
    f.write(line + "\n")
    if isinstance(node.target, RemoteURL) and node.target.headers is not None:
        f.write(f"{_indent(depth + 1)}using\n")
        _dump_import(node.target.headers, depth + 2, f)


def format_target(target: ImportTarget) -> str:
    """Render an import target the way it is written in source."""
    if isinstance(target, LocalPath):
        prefix = "" if target.prefix is FilePrefix.ABSOLUTE else target.prefix.value
        return prefix + "".join(f"/{component}" for component in target.components)
    if isinstance(target, EnvVar):
        if target.posix:
            escaped = target.name.replace("\\", "\\\\").replace('"', '\\"')
            return f'env:"{escaped}"'
        return f"env:{target.name}"
    if isinstance(target, RemoteURL):
        url = f"{target.scheme}://{target.authority}"
        url += "".join(f"/{segment}" for segment in target.path)
        if target.query is not None:
            url += f"?{target.query}"
        if target.fragment is not None:
            url += f"#{target.fragment}"
        return url
    if isinstance(target, Missing):
        return "missing"
    raise TypeError(f"unknown import target: {target!r}")
