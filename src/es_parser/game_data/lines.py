"""
Line and indentation model for the data language.

Nesting is expressed by leading tabs only. Blank lines and comment lines
carry no structure and are invisible to every indentation comparison.
"""

from enum import Enum
from typing import List, Optional

INDENT_CHAR = "\t"
COMMENT_CHAR = "#"


class LineClass(Enum):
    """Classification of a raw line."""

    BLANK = "blank"
    COMMENT = "comment"
    CONTENT = "content"


def indent_of(line: str) -> int:
    """Return the number of leading indent characters."""
    return len(line) - len(line.lstrip(INDENT_CHAR))


def classify(line: str) -> LineClass:
    stripped = line.strip()
    if not stripped:
        return LineClass.BLANK
    if stripped.startswith(COMMENT_CHAR):
        return LineClass.COMMENT
    return LineClass.CONTENT


def is_content(line: str) -> bool:
    return classify(line) is LineClass.CONTENT


def split_lines(text: str) -> List[str]:
    """Split file text into lines, dropping carriage returns."""
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def next_content_index(lines: List[str], start: int) -> Optional[int]:
    """Return the index of the first content line at or after ``start``."""
    i = start
    while i < len(lines):
        if is_content(lines[i]):
            return i
        i += 1
    return None


def opens_block(lines: List[str], i: int) -> bool:
    """Check whether the line at ``i`` is followed by a deeper content line."""
    nxt = next_content_index(lines, i + 1)
    if nxt is None:
        return False
    return indent_of(lines[nxt]) > indent_of(lines[i])


def skip_block(lines: List[str], i: int, base_indent: int) -> int:
    """Skip the line at ``i`` and everything indented deeper than ``base_indent``.

    Returns:
        Index of the first content line at or above ``base_indent`` (or len(lines))
    """
    i += 1
    while i < len(lines):
        line = lines[i]
        if is_content(line) and indent_of(line) <= base_indent:
            break
        i += 1
    return i
