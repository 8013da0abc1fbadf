"""Offset/line conversion and identifier character classes shared by all document queries."""

from .symbols import SourcePosition

SIGIL = "$"
"""Marks variable declarations and references, e.g. `$count = 0`."""


def is_identifier_char(c: str) -> bool:
    """
    True for characters that may be part of a token under the cursor.

    ASCII letters, digits, underscore and the variable sigil. Like the declaration patterns, this ignores
    non-ASCII letters.
    """
    return ("a" <= c <= "z") or ("A" <= c <= "Z") or ("0" <= c <= "9") or c == "_" or c == SIGIL


def offset_to_position(text: str, offset: int) -> SourcePosition:
    """
    Convert a character offset into text to a zero-based line/column position.

    Offsets past the end of text are clamped to the end.
    """
    offset = min(offset, len(text))
    line = text.count("\n", 0, offset)
    line_start = text.rfind("\n", 0, offset) + 1
    return SourcePosition(line=line, column=offset - line_start)


def split_lines(text: str) -> list[str]:
    """
    Split text on newlines, dropping a trailing carriage return from each line.

    A text ending with a newline yields a final empty line, so a cursor on the line after the last newline is valid.
    """
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def get_line(text: str, line: int) -> str | None:
    "Return the given zero-based line of text, or None if the text has fewer lines."
    if line < 0:
        return None
    lines = split_lines(text)
    if line >= len(lines):
        return None
    return lines[line]


def position_to_offset(text: str, line: int, character: int) -> int:
    """
    Convert a zero-based line/column position into a character offset into text.

    Lines past the end map to the end of text, columns past the end of their line map to the end of that line.
    """
    offset = 0
    for _ in range(line):
        newline = text.find("\n", offset)
        if newline < 0:
            return len(text)
        offset = newline + 1

    line_end = text.find("\n", offset)
    if line_end < 0:
        line_end = len(text)
    return min(offset + max(character, 0), line_end)
