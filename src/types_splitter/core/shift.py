"""Keep recorded spans in step with deletions from a buffer."""

import re
from collections.abc import Callable, Iterable

from types_splitter.errors import InternalConsistencyError
from types_splitter.models import Definition, FieldDefinition, Span

Entity = Definition | FieldDefinition
DeletionCallback = Callable[[int, str], None]

# (pattern, group whose start marks the end of the deletion); text before that point inside the match is kept
_NORMALIZATION_RULES: list[tuple[re.Pattern[str], int]] = [
    (re.compile(r"\n\n(\n+)"), 1),
    (re.compile(r"\A(\n+)"), 1),
    (re.compile(r"\n(\n+)\s*}"), 1),
    (re.compile(r"\n(\n+)\Z"), 1),
]


def shift_span(span: Span, start: int, removed: str) -> bool:
    """Adjust ``span`` for the deletion of ``removed`` at ``start``; return True if the span shrank."""
    end = start + len(removed)
    if span.start >= end:
        span.shift(len(removed), removed.count("\n"))
        return False
    if span.end < start:
        return False
    if span.start <= start and span.end >= end - 1:
        span.end -= len(removed)
        return True
    raise InternalConsistencyError(
        f"deletion [{start}, {end}) partially overlaps span [{span.start}, {span.end}] in {span.source}"
    )


def apply_deletion(entities: Iterable[Entity], start: int, removed: str) -> list[Entity]:
    """Shift or shrink the raw and actual spans of ``entities`` after ``removed`` was cut out at ``start``.

    Returns the entities whose actual span encloses the deletion. Their ``content`` has to be re-read from the
    buffer by the caller.
    """
    if not removed:
        return []

    shrunk: list[Entity] = []
    for entity in entities:
        shift_span(entity.raw, start, removed)
        if shift_span(entity.actual, start, removed):
            shrunk.append(entity)
    return shrunk


def normalize_blank_lines(text: str, on_delete: DeletionCallback | None = None) -> str:
    """Collapse blank-line runs, strip leading newlines and blank lines before ``}``, end with one newline.

    Every edit is a deletion reported to ``on_delete(start, removed)`` in an order where ``start`` is valid for
    the text at the time of the call. The rules are applied until nothing changes, so the result is a fixed point.
    """
    while True:
        changed = False
        for pattern, group in _NORMALIZATION_RULES:
            matches = list(pattern.finditer(text))
            for match in reversed(matches):
                start, end = match.start(group), match.end(group)
                removed = text[start:end]
                text = text[:start] + text[end:]
                if on_delete is not None:
                    on_delete(start, removed)
                changed = True
        if not changed:
            break

    if text and not text.endswith("\n"):
        text += "\n"
    return text
