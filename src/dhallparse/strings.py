"""Escape tables and indentation stripping for text literals."""

from __future__ import annotations

from dataclasses import replace

from dhallparse.ast import Interpolation, TextChunk, TextLiteral

# Single-character escapes after "\" in double-quoted text
TEXT_ESCAPES: dict[str, str] = {
    '"': '"',
    "$": "$",
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}

# Escapes inside quoted POSIX environment variable names
POSIX_ENV_ESCAPES: dict[str, str] = {
    '"': '"',
    "\\": "\\",
    "a": "\a",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}


def combine_surrogates(text: str) -> str:
    """Join UTF-16 surrogate pairs produced by consecutive `\\u` escapes.

    A surrogate without its partner is kept as is.
    """
    if not any("\ud800" <= ch <= "\udfff" for ch in text):
        return text
    out: list[str] = []
    i = 0
    while i < len(text):
        ch = text[i]
        low = text[i + 1] if i + 1 < len(text) else ""
        if "\ud800" <= ch <= "\udbff" and "\udc00" <= low <= "\udfff":
            out.append(chr(0x10000 + ((ord(ch) - 0xD800) << 10) + (ord(low) - 0xDC00)))
            i += 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def dedent(literal: TextLiteral) -> TextLiteral:
    """Strip the common indentation from a multi-line text literal.

    Algorithm:
    1. Split the parts into lines at "\\n" (interpolations stay whole and
       count as non-blank content).
    2. If the first line is blank, discard it.
    3. The common prefix is the longest run of spaces/tabs shared by every
       non-blank line and by the last line, which holds the closing `''`.
    4. Remove the prefix from the start of every line (blank lines lose
       whatever part of it they have).
    5. Rejoin, merging adjacent text chunks.

    Double-quoted literals are returned unchanged.
    """
    if not literal.multiline:
        return literal

    lines = _split_lines(literal.parts)

    if len(lines) > 1 and _is_blank(lines[0]):
        lines = lines[1:]

    candidates = [line for line in lines[:-1] if not _is_blank(line)]
    candidates.append(lines[-1])
    prefix = _common_indent([_leading_indent(line) for line in candidates])

    if prefix:
        lines = [_strip_prefix(line, len(prefix)) for line in lines]

    parts: list[TextChunk | Interpolation] = []
    for idx, line in enumerate(lines):
        if idx > 0:
            parts.append(TextChunk("\n"))
        parts.extend(line)
    return replace(literal, parts=tuple(_coalesce(parts)))


def _split_lines(
    parts: tuple[TextChunk | Interpolation, ...],
) -> list[list[TextChunk | Interpolation]]:
    lines: list[list[TextChunk | Interpolation]] = [[]]
    for part in parts:
        if isinstance(part, Interpolation):
            lines[-1].append(part)
            continue
        pieces = part.value.split("\n")
        for idx, piece in enumerate(pieces):
            if idx > 0:
                lines.append([])
            if piece:
                lines[-1].append(TextChunk(piece, part.span))
    return lines


def _is_blank(line: list[TextChunk | Interpolation]) -> bool:
    """Return True if line contains only spaces and tabs (or is empty)."""
    return all(
        isinstance(part, TextChunk) and all(ch in " \t\r" for ch in part.value) for part in line
    )


def _leading_indent(line: list[TextChunk | Interpolation]) -> str:
    indent = []
    for part in line:
        if isinstance(part, Interpolation):
            break
        for ch in part.value:
            if ch not in " \t":
                return "".join(indent)
            indent.append(ch)
    return "".join(indent)


def _common_indent(indents: list[str]) -> str:
    if not indents:
        return ""
    prefix = indents[0]
    for indent in indents[1:]:
        n = 0
        while n < len(prefix) and n < len(indent) and prefix[n] == indent[n]:
            n += 1
        prefix = prefix[:n]
    return prefix


def _strip_prefix(
    line: list[TextChunk | Interpolation], count: int
) -> list[TextChunk | Interpolation]:
    result: list[TextChunk | Interpolation] = []
    for part in line:
        if count and isinstance(part, TextChunk):
            # Only spaces and tabs can sit inside the prefix
            drop = 0
            while drop < count and drop < len(part.value) and part.value[drop] in " \t":
                drop += 1
            count -= drop
            rest = part.value[drop:]
            if rest:
                result.append(TextChunk(rest, part.span))
                count = 0
            continue
        count = 0
        result.append(part)
    return result


def _coalesce(parts: list[TextChunk | Interpolation]) -> list[TextChunk | Interpolation]:
    """Coalesce adjacent TextChunk nodes into single nodes."""
    result: list[TextChunk | Interpolation] = []
    for part in parts:
        if isinstance(part, TextChunk) and result and isinstance(result[-1], TextChunk):
            prev = result[-1]
            result[-1] = TextChunk(prev.value + part.value, prev.span)
        else:
            result.append(part)
    return result
