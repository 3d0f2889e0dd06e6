"""
Key-value tokenizer for single data lines.

A stripped line is matched against an ordered cascade of patterns. The
order matters: many lines match several patterns, and the first one wins.
Numeric coercion happens here and nowhere else.
"""

import re
from typing import Optional, Tuple, Union

from .models import Value

KEY_VALUE_PATTERNS: Tuple[Tuple["re.Pattern[str]", bool, bool], ...] = (
    # "key" "value"
    (re.compile(r'"([^"]+)"\s+"([^"]+)"'), True, False),
    # "key" `value`
    (re.compile(r'"([^"]+)"\s+`([^`]+)`'), True, False),
    # `key` "value"
    (re.compile(r'`([^`]+)`\s+"([^"]+)"'), True, False),
    # `key` `value`
    (re.compile(r"`([^`]+)`\s+`([^`]+)`"), True, False),
    # "key" value
    (re.compile(r'"([^"]+)"\s+([^"`\s][^"`]*)'), False, False),
    # `key` value
    (re.compile(r"`([^`]+)`\s+([^\"`\s][^\"`]*)"), False, False),
    # key "value"
    (re.compile(r'^(\S+)\s+"([^"]+)"$'), True, False),
    # key `value`
    (re.compile(r"^(\S+)\s+`([^`]+)`$"), True, False),
    # key value, only when the line has no quotes at all
    (re.compile(r"^(\S+)\s+(.+)$"), False, True),
)
"""Ordered (regex, is_string, requires_no_quotes) triples."""

QUOTED_TOKEN = re.compile(r"^[\"'`]([^\"'`]+)[\"'`]$")
NUMBER = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def has_quotes(text: str) -> bool:
    return '"' in text or "`" in text


def coerce_number(text: str) -> Union[int, float, str]:
    """Return ``text`` as an int or float when it is a number, else unchanged."""
    if not NUMBER.fullmatch(text):
        return text
    if any(c in text for c in ".eE"):
        return float(text)
    return int(text)


def tokenize(stripped: str) -> Optional[Tuple[str, Value]]:
    """Resolve a stripped line to ``(key, value)``.

    Args:
        stripped: Line text without surrounding whitespace

    Returns:
        The key and its typed value, ``(key, True)`` for a lone flag, or None
        when the line is free text
    """
    quoted = has_quotes(stripped)
    for pattern, is_string, requires_no_quotes in KEY_VALUE_PATTERNS:
        if requires_no_quotes and quoted:
            continue
        match = pattern.search(stripped)
        if not match:
            continue
        key = match.group(1)
        value_str = match.group(2).strip()
        if is_string:
            return key, value_str
        return key, coerce_number(value_str)

    # Single quoted token such as "repeat" or `no repeat`
    match = QUOTED_TOKEN.match(stripped)
    if match:
        return match.group(1), True

    # Single bare word flag
    if stripped and not quoted and len(stripped.split()) == 1:
        return stripped, True

    return None


def unquote(text: str) -> str:
    """Strip one pair of matching delimiters from a token, if present."""
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'`":
        return text[1:-1]
    return text
