"""
Hardpoint grammar for ship blocks.

Recognizes engine, reverse/steering engine, gun, turret and bay lines and
returns the hardpoint record together with the sequence it belongs to.
"""

import re
from typing import List, Optional, Tuple

from .lines import indent_of, is_content
from .models import Record
from .tokenizer import tokenize, unquote

_Q = "[\"'`]?"
_NUM = r"(-?\d*\.?\d+)"

ENGINE = re.compile(rf"^{_Q}engine{_Q}\s+{_NUM}\s+{_NUM}(?:\s+{_NUM})?")
REVERSE_ENGINE = re.compile(
    rf"^{_Q}reverse engine{_Q}\s+{_NUM}\s+{_NUM}(?:\s+{_NUM})?"
)
STEERING_ENGINE = re.compile(
    rf"^{_Q}steering engine{_Q}\s+{_NUM}\s+{_NUM}(?:\s+{_NUM})?"
)
GUN = re.compile(rf"^{_Q}gun{_Q}\s+{_NUM}\s+{_NUM}")
TURRET = re.compile(rf"^{_Q}turret{_Q}\s+{_NUM}\s+{_NUM}")
BAY = re.compile(
    rf"^{_Q}bay{_Q}\s+[\"'`]?([^\"'`\s]+)[\"'`]?\s+{_NUM}\s+{_NUM}(?:\s+(.+))?"
)

HardpointMatch = Tuple[str, Record, int]
"""(sequence key, hardpoint record, next line index)"""


def _engine(match: "re.Match[str]") -> Record:
    data: Record = {"x": float(match.group(1)), "y": float(match.group(2))}
    if match.group(3):
        data["zoom"] = float(match.group(3))
    return data


def _nested_position(lines: List[str], i: int, base_indent: int, data: Record) -> int:
    """Consume deeper lines after an engine; the last one becomes ``position``."""
    i += 1
    while i < len(lines):
        line = lines[i]
        if is_content(line):
            if indent_of(line) <= base_indent:
                break
            data["position"] = line.strip()
        i += 1
    return i


def _bay_properties(lines: List[str], i: int, base_indent: int, data: Record) -> int:
    """Merge key-value pairs from the bay's sub-block into the bay record."""
    i += 1
    while i < len(lines):
        line = lines[i]
        if is_content(line):
            if indent_of(line) <= base_indent:
                break
            pair = tokenize(line.strip())
            if pair:
                data[pair[0]] = pair[1]
        i += 1
    return i


def parse_hardpoint(
    stripped: str, lines: List[str], i: int, base_indent: int
) -> Optional[HardpointMatch]:
    """Try to read a hardpoint from the line at ``i``.

    Args:
        stripped: The stripped text of ``lines[i]``
        lines: All lines of the file
        i: Index of the current line
        base_indent: Indentation of the current line

    Returns:
        (sequence key, hardpoint, next index), or None if this is not a hardpoint
    """
    match = ENGINE.match(stripped)
    if match:
        return "engines", _engine(match), i + 1

    match = REVERSE_ENGINE.match(stripped)
    if match:
        data = _engine(match)
        return "reverseEngines", data, _nested_position(lines, i, base_indent, data)

    match = STEERING_ENGINE.match(stripped)
    if match:
        data = _engine(match)
        return "steeringEngines", data, _nested_position(lines, i, base_indent, data)

    match = GUN.match(stripped)
    if match:
        return "guns", {"x": float(match.group(1)), "y": float(match.group(2)), "gun": ""}, i + 1

    match = TURRET.match(stripped)
    if match:
        return (
            "turrets",
            {"x": float(match.group(1)), "y": float(match.group(2)), "turret": ""},
            i + 1,
        )

    match = BAY.match(stripped)
    if match:
        data = {
            "type": match.group(1),
            "x": float(match.group(2)),
            "y": float(match.group(3)),
        }
        if match.group(4):
            data["position"] = unquote(match.group(4).strip())
        return "bays", data, _bay_properties(lines, i, base_indent, data)

    return None
