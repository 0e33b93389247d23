"""Actual spans of declarations and fields.

A parser reports the minimal range of a declaration or field. The actual span widens it backwards over the leading
doc comment and forwards over argument lists, bodies and directive lines, so that cutting the actual span out of a
buffer takes everything that belongs to the entity and nothing else.
"""

import re
from dataclasses import dataclass

from types_splitter.core.scanner import (
    BLOCK_QUOTE,
    find_matching_close,
    find_next_open,
    line_end,
    line_start,
)
from types_splitter.errors import InternalConsistencyError
from types_splitter.models import Definition, DefinitionKind, FieldDefinition, FieldKind, Span

_WHITESPACE = " \t\r\n"
_LEADING_BLANK_LINES = re.compile(r"(?:[ \t\r]*\n)*")


@dataclass(frozen=True)
class ExtractedSpan:
    content: str
    start: int
    end: int
    lines_above: int


def find_comment_start(text: str, start: int) -> int:
    """Return where the entity at ``start`` begins once its leading doc block is included."""
    current = line_start(text, start)
    if _starts_with_quote(text, current):
        # the line is a description already
        return current

    entered_comment = False
    i = current - 1
    while i >= 0:
        char = text[i]
        if char == '"' and i >= 2 and text[i - 2 : i + 1] == BLOCK_QUOTE:
            if entered_comment:
                return line_start(text, i - 2)
            entered_comment = True
            i -= len(BLOCK_QUOTE)
            continue
        if char not in _WHITESPACE and not entered_comment:
            return current
        i -= 1

    return current


def find_comment_end(text: str, start: int) -> int:
    """Return the offset just past a doc block beginning at ``start``, or ``start`` when there is none."""
    entered_comment = False
    i = start
    while i < len(text):
        if text.startswith(BLOCK_QUOTE, i):
            if entered_comment:
                return i + len(BLOCK_QUOTE)
            entered_comment = True
            i += len(BLOCK_QUOTE)
            continue
        if text[i] not in _WHITESPACE and not entered_comment:
            return start
        i += 1
    return start


def find_directive_lines_end(text: str, end: int) -> int:
    """Extend ``end`` (a line end) over the following lines that start with a directive."""
    i = end
    while i < len(text):
        j = i
        while j < len(text) and text[j] in _WHITESPACE:
            j += 1
        if j >= len(text) or text[j] != "@":
            return i
        i = line_end(text, j)
    return i


def extract_field_span(text: str, raw: Span) -> ExtractedSpan:
    start = find_comment_start(text, raw.start)
    end = find_comment_end(text, start) + 1

    if find_next_open("(", text, end) < len(text):
        end = find_matching_close("(", text, end)

    end = line_end(text, max(end, raw.end))
    end = find_directive_lines_end(text, end)

    return _trimmed(text, start, end, raw)


def extract_definition_span(text: str, raw: Span, kind: DefinitionKind, has_body: bool = True) -> ExtractedSpan:
    start = find_comment_start(text, raw.start)
    end = raw.end

    if has_body and kind is not DefinitionKind.SCALAR:
        end = max(end, find_matching_close("{", text, raw.start))

    end = line_end(text, end)

    return _trimmed(text, start, end, raw)


def wrap_field_definition(text: str, name: str, kind: FieldKind, raw: Span) -> FieldDefinition:
    extracted = extract_field_span(text, raw)
    return FieldDefinition(
        name=name,
        kind=kind,
        raw=raw,
        actual=_actual_span(extracted, raw),
        content=extracted.content,
    )


def wrap_definition(
    text: str,
    name: str,
    kind: DefinitionKind,
    raw: Span,
    extension: bool = False,
    has_body: bool = True,
) -> Definition:
    extracted = extract_definition_span(text, raw, kind, has_body)
    return Definition(
        name=name,
        kind=kind,
        raw=raw,
        actual=_actual_span(extracted, raw),
        content=extracted.content,
        extension=extension,
        has_body=has_body,
    )


def _actual_span(extracted: ExtractedSpan, raw: Span) -> Span:
    return Span(
        start=extracted.start,
        end=extracted.end,
        line=raw.line - extracted.lines_above,
        source=raw.source,
    )


def _starts_with_quote(text: str, pos: int) -> bool:
    while pos < len(text) and text[pos] in " \t":
        pos += 1
    return text.startswith('"', pos)


def _trimmed(text: str, start: int, end: int, raw: Span) -> ExtractedSpan:
    content = text[start : end + 1].rstrip()
    leading = _LEADING_BLANK_LINES.match(content)
    skipped = leading.end() if leading else 0
    content = content[skipped:]

    start += skipped
    end = start + len(content) - 1

    # we can't be off by a single character here, every later excision relies on it
    if text[start : end + 1] != content:
        raise InternalConsistencyError(f"invalid span content: {text[start : end + 1]!r} != {content!r}")

    return ExtractedSpan(
        content=content,
        start=start,
        end=end,
        lines_above=text.count("\n", start, raw.start),
    )
