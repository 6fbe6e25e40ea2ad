"""Cursor helpers that operate on a single line of source text."""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "WordRange",
    "callee_name_at",
    "is_identifier_char",
    "open_call_paren_index",
    "parameter_index_at",
    "word_range_at",
]


@dataclass(frozen=True, slots=True)
class WordRange:
    """Half-open ``[start, end)`` span of an identifier token on one line."""

    start: int
    end: int

    def slice(self, line: str) -> str:
        """Return the text covered by this range."""
        return line[self.start : self.end]


def is_identifier_char(char: str) -> bool:
    """Return True for letters, digits, underscore and dot."""
    # Dotted member chains such as ``os.path.join`` are one token.
    return char.isalnum() or char in "_."


def word_range_at(line: str, pos: int) -> WordRange | None:
    """Return the maximal identifier range containing ``pos``.

    ``None`` is returned when ``pos`` is outside the line, when the character
    under the cursor is not an identifier character, or when the range is empty.
    """
    if not line or pos < 0 or pos >= len(line):
        return None
    if not is_identifier_char(line[pos]):
        return None

    start = pos
    end = pos + 1
    while start > 0 and is_identifier_char(line[start - 1]):
        start -= 1
    while end < len(line) and is_identifier_char(line[end]):
        end += 1

    if end <= start:
        return None
    return WordRange(start=start, end=end)


def open_call_paren_index(line: str, pos: int) -> int:
    """Return the index of the last unmatched ``(`` before ``pos`` or ``-1``."""
    depth = 0
    index = min(max(pos, 0), len(line)) - 1
    while index >= 0:
        char = line[index]
        if char == ")":
            depth += 1
        elif char == "(":
            if depth == 0:
                return index
            depth -= 1
        index -= 1
    return -1


def parameter_index_at(line: str, pos: int) -> int:
    """Return the zero-based index of the call argument being typed at ``pos``.

    Commas nested inside inner calls or tuples are skipped, so
    ``"foo(a, bar(1,2), "`` at the end of the string yields ``2``.
    """
    open_index = open_call_paren_index(line, pos)
    if open_index == -1:
        return 0

    count = 0
    depth = 0
    for char in line[open_index + 1 : max(pos, 0)]:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif char == "," and depth == 0:
            count += 1
    return count


def callee_name_at(line: str, pos: int) -> str:
    """Return the dotted name written directly before the open call at ``pos``."""
    open_index = open_call_paren_index(line, pos)
    if open_index == -1:
        return ""
    start = open_index
    while start > 0 and is_identifier_char(line[start - 1]):
        start -= 1
    return line[start:open_index]
