"""Quote- and nesting-aware forward scanning over schema text.

Every search returns an offset into ``text``; ``len(text)`` is the "not found" value, which callers treat as
"extend to the end of the buffer".
"""

BLOCK_QUOTE = '"""'

_CLOSING_DELIMITERS = {
    "(": ")",
    "{": "}",
    "[": "]",
}


def closing_delimiter(open_delim: str) -> str:
    try:
        return _CLOSING_DELIMITERS[open_delim]
    except KeyError:
        raise ValueError(f"Unsupported delimiter '{open_delim}'. Supported: {sorted(_CLOSING_DELIMITERS)}") from None


def find_matching_close(open_delim: str, text: str, start: int, already_inside: bool = False) -> int:
    """Return the offset of the delimiter closing the scope opened at or after ``start``.

    With ``already_inside`` the scan starts within the scope, so the first unmatched close wins. Delimiters in
    quoted strings, triple-quoted blocks and ``#`` comments are ignored.
    """
    close_delim = closing_delimiter(open_delim)
    depth = 0 if already_inside else -1
    quote: str | None = None
    in_block = False
    in_comment = False

    i = start
    n = len(text)
    while i < n:
        char = text[i]
        if in_block:
            if text.startswith(BLOCK_QUOTE, i):
                in_block = False
                i += len(BLOCK_QUOTE)
                continue
            i += 1
            continue
        if quote is not None:
            if char == quote and (i == 0 or text[i - 1] != "\\"):
                quote = None
            i += 1
            continue
        if in_comment:
            if char == "\n":
                in_comment = False
            i += 1
            continue

        if text.startswith(BLOCK_QUOTE, i):
            in_block = True
            i += len(BLOCK_QUOTE)
            continue
        if char in ('"', "'"):
            quote = char
        elif char == "#":
            in_comment = True
        elif char == close_delim:
            if depth == 0:
                return i
            depth -= 1
        elif char == open_delim:
            depth += 1
        i += 1

    return n


def find_next_open(delim: str, text: str, start: int, multiline: bool = False) -> int:
    """Return the offset of the next ``delim``; unless ``multiline``, give up at the end of the line."""
    for i in range(start, len(text)):
        if text[i] == "\n" and not multiline:
            return len(text)
        if text[i] == delim:
            return i
    return len(text)


def line_start(text: str, pos: int) -> int:
    """Offset of the first character of the line containing ``pos``."""
    return text.rfind("\n", 0, pos) + 1


def line_end(text: str, pos: int) -> int:
    """Offset of the newline ending the line containing ``pos`` (``len(text)`` on the last line)."""
    found = text.find("\n", pos)
    return len(text) if found == -1 else found
