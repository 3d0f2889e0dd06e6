"""
Block parser for the indentation-based data language.

Turns an indented run of lines into a nested record. Every line is consumed
by exactly one rule (hardpoint, skipped block, description, sprite field,
nested block, key-value pair or free text), so parsing never fails and
always makes progress.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple

from .hardpoints import parse_hardpoint
from .lines import indent_of, is_content, next_content_index, opens_block, skip_block
from .models import (
    DESCRIPTION_KEY,
    SPRITE_DATA_NAMES,
    SPRITE_FIELDS,
    Record,
    Value,
    sprite_data_key,
)
from .tokenizer import tokenize

DEFAULT_MAX_DEPTH = 64

SPRITE_LINE = re.compile(
    r"^[\"'`]?(" + "|".join(re.escape(f) for f in SPRITE_FIELDS) + r")[\"'`]?"
    r"\s+(?:[\"'`]([^\"'`]+)[\"'`]|(\S+))"
)
DESCRIPTION_SINGLE = re.compile(r"description\s+([`\"])(.+)\1$")
DESCRIPTION_START = re.compile(r"description\s+([`\"])(.*)$")
DESCRIPTION_BARE = re.compile(r"description\s+(.+)$")


@dataclass(frozen=True)
class BlockOptions:
    """Per-record-kind switches for the block parser."""

    hardpoints: bool = False
    skip: FrozenSet[str] = field(default_factory=frozenset)


def store(data: Record, key: str, value: Value) -> None:
    """Store a value, promoting repeated keys to a list instead of overwriting."""
    if key in data:
        existing = data[key]
        if not isinstance(existing, list):
            existing = [existing]
            data[key] = existing
        existing.append(value)
    else:
        data[key] = value


def normalize_sprite_data(data: Record) -> Record:
    """Rename animation keys to the names the sprite animator reads."""
    return {SPRITE_DATA_NAMES.get(key, key): value for key, value in data.items()}


def is_description(stripped: str) -> bool:
    return stripped == DESCRIPTION_KEY or stripped.startswith(DESCRIPTION_KEY + " ")


class BlockParser:
    """Recursive-descent parser over a list of lines."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH):
        self.max_depth = max_depth
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def parse_block(
        self,
        lines: List[str],
        start: int,
        options: Optional[BlockOptions] = None,
        depth: int = 0,
    ) -> Tuple[Record, int]:
        """Parse the block whose first line is at (or after) ``start``.

        The indentation of the first content line is the block's base. The
        block ends at the first content line indented less than the base.

        Args:
            lines: All lines of the file
            start: Index of the block's first line
            options: Record-kind switches (hardpoints, skipped sub-blocks)
            depth: Current nesting depth

        Returns:
            (parsed record, index of the first line after the block)
        """
        options = options or BlockOptions()
        data: Record = {}
        text: List[str] = []

        first = next_content_index(lines, start)
        if first is None:
            return data, len(lines)
        base_indent = indent_of(lines[first])

        i = first
        while i < len(lines):
            line = lines[i]
            if not is_content(line):
                i += 1
                continue
            indent = indent_of(line)
            if indent < base_indent:
                break
            if indent > base_indent:
                # Orphaned deeper line, no header at this level owns it
                i += 1
                continue
            i = self.parse_field(lines, i, data, text, options, depth)

        self.finish(data, text)
        return data, i

    def parse_field(
        self,
        lines: List[str],
        i: int,
        data: Record,
        text: List[str],
        options: BlockOptions,
        depth: int = 0,
    ) -> int:
        """Consume the field starting at line ``i`` into ``data``.

        Free text and description lines are collected in ``text``; call
        :meth:`finish` once the whole block has been read.

        Returns:
            Index of the next unconsumed line
        """
        line = lines[i]
        indent = indent_of(line)
        stripped = line.strip()

        if options.hardpoints:
            hardpoint = parse_hardpoint(stripped, lines, i, indent)
            if hardpoint:
                key, point, next_i = hardpoint
                if key not in data:
                    data[key] = []
                store(data, key, point)
                return next_i

        if stripped in options.skip:
            return skip_block(lines, i, indent)

        if is_description(stripped):
            desc, next_i = self.parse_description(lines, i, indent)
            text.extend(desc)
            return next_i

        sprite = SPRITE_LINE.match(stripped)
        if sprite:
            return self.parse_sprite(lines, i, sprite, data, depth)

        if opens_block(lines, i):
            key = stripped.replace('"', "").replace("`", "")
            if depth + 1 > self.max_depth:
                self.logger.warning(
                    f"Block '{key}' nested deeper than {self.max_depth} levels, skipped"
                )
                return skip_block(lines, i, indent)
            child, next_i = self.parse_block(lines, i + 1, options, depth + 1)
            store(data, key, child)
            return next_i

        pair = tokenize(stripped)
        if pair:
            store(data, pair[0], pair[1])
            return i + 1

        text.append(stripped)
        return i + 1

    @staticmethod
    def finish(data: Record, text: List[str]) -> None:
        """Join collected description and free text into ``description``."""
        if text:
            data[DESCRIPTION_KEY] = " ".join(text)

    def parse_sprite(
        self,
        lines: List[str],
        i: int,
        match: "re.Match[str]",
        data: Record,
        depth: int,
    ) -> int:
        """Read a sprite path and its optional animation sub-block."""
        sprite_field = match.group(1)
        data[sprite_field] = match.group(2) or match.group(3)

        if opens_block(lines, i):
            if depth + 1 > self.max_depth:
                return skip_block(lines, i, indent_of(lines[i]))
            sprite_data, next_i = self.parse_block(lines, i + 1, BlockOptions(), depth + 1)
            data[sprite_data_key(sprite_field)] = normalize_sprite_data(sprite_data)
            return next_i
        return i + 1

    def parse_description(
        self, lines: List[str], i: int, base_indent: int
    ) -> Tuple[List[str], int]:
        """Read a description field.

        Handles three forms: a single quoted line, a quoted text spanning
        several lines up to the line that ends with the closing quote, and
        the legacy unquoted form where the text is the indented sub-block.

        Returns:
            (description lines, index of the next unconsumed line)
        """
        stripped = lines[i].strip()

        match = DESCRIPTION_SINGLE.match(stripped)
        if match:
            return [match.group(2)], i + 1

        match = DESCRIPTION_START.match(stripped)
        if match:
            quote, start_text = match.group(1), match.group(2)
            if start_text.endswith(quote):
                return _non_empty([start_text[:-1]]), i + 1

            desc = _non_empty([start_text])
            i += 1
            while i < len(lines):
                line = lines[i]
                desc_stripped = line.strip()
                if is_content(line) and indent_of(line) < base_indent:
                    break
                # The closing line may sit at the field's own indentation
                if desc_stripped.endswith(quote):
                    desc.extend(_non_empty([desc_stripped[:-1]]))
                    return desc, i + 1
                if is_content(line) and indent_of(line) <= base_indent:
                    break
                if desc_stripped:
                    desc.append(desc_stripped)
                i += 1
            return desc, i

        # Legacy form: indented lines without quotes
        desc = []
        match = DESCRIPTION_BARE.match(stripped)
        if match:
            desc.append(match.group(1).strip())
        i += 1
        while i < len(lines):
            line = lines[i]
            if is_content(line) and indent_of(line) <= base_indent:
                break
            if line.strip():
                desc.append(line.strip())
            i += 1
        return desc, i


def _non_empty(parts: List[str]) -> List[str]:
    return [part for part in parts if part]
