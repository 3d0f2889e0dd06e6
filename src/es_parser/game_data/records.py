"""
Record parsers for ships, outfits and effects.

Scans a file's root level for record headers, builds records through the
block parser and hands reference blocks to the reference collector. Ship
headers naming a variant only leave a stub behind; variants are resolved
once every file has been read.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .block_parser import BlockOptions, BlockParser
from .lines import indent_of, is_content, next_content_index, opens_block, skip_block, split_lines
from .models import (
    ADD_ATTRIBUTES_KEY,
    DESCRIPTION_KEY,
    OUTFIT_MAP_KEY,
    OUTFITS_KEY,
    NAME_KEY,
    OutfitMap,
    Record,
    RecordCollection,
    VariantStub,
    new_ship,
)
from .references import ReferenceCollector
from .species import ReferenceTables
from .tokenizer import tokenize

SHIP_HEADER = re.compile(
    r"^ship\s+[\"'`]([^\"'`]+)[\"'`](?:\s+[\"'`]([^\"'`]+)[\"'`])?"
)
OUTFIT_HEADER = re.compile(r"^outfit\s+[\"'`]([^\"'`]+)[\"'`]\s*$")
EFFECT_HEADER = re.compile(r"^effect\s+[\"'`]([^\"'`]+)[\"'`]\s*$")

SHIP_OPTIONS = BlockOptions(hardpoints=True)
PLAIN_OPTIONS = BlockOptions()


@dataclass
class ShipBody:
    """A ship block read field by field."""

    data: Record
    outfit_map: Optional[OutfitMap]
    add_attributes: Optional[Record]
    next_index: int


@dataclass
class FileParseResult:
    """Everything one file contributes before the resolution barrier."""

    path: str = ""
    ships: RecordCollection = field(default_factory=list)
    outfits: RecordCollection = field(default_factory=list)
    effects: RecordCollection = field(default_factory=list)
    variant_stubs: List[VariantStub] = field(default_factory=list)
    tables: ReferenceTables = field(default_factory=ReferenceTables)


def has_body(lines: List[str], i: int) -> bool:
    """Check that the header at ``i`` is followed by an indented block."""
    nxt = next_content_index(lines, i + 1)
    return nxt is not None and indent_of(lines[nxt]) > indent_of(lines[i])


def _count(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 1
    return int(value)


def parse_outfit_map(lines: List[str], i: int) -> Tuple[OutfitMap, int]:
    """Read an ``outfits`` sub-block into outfit name -> count.

    A line without a count installs one; repeated names add up.
    """
    outfit_map: OutfitMap = {}
    base_indent = indent_of(lines[i])
    i += 1
    while i < len(lines):
        line = lines[i]
        if is_content(line):
            if indent_of(line) <= base_indent:
                break
            pair = tokenize(line.strip())
            if pair:
                name, value = pair
                outfit_map[name] = outfit_map.get(name, 0) + _count(value)
        i += 1
    return outfit_map, i


def read_ship_body(block_parser: BlockParser, lines: List[str], start: int) -> ShipBody:
    """Read a ship or variant block, intercepting ``outfits`` and ``add attributes``.

    The two sub-blocks are picked out wherever they appear; every other
    field goes through the block parser with hardpoints enabled.
    """
    data: Record = {}
    text: List[str] = []
    outfit_map: Optional[OutfitMap] = None
    add_attributes: Optional[Record] = None

    first = next_content_index(lines, start)
    if first is None:
        return ShipBody(data, None, None, len(lines))
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
            i += 1
            continue

        stripped = line.strip()
        if stripped == OUTFITS_KEY:
            parsed, i = parse_outfit_map(lines, i)
            if outfit_map is None:
                outfit_map = {}
            for name, count in parsed.items():
                outfit_map[name] = outfit_map.get(name, 0) + count
        elif stripped == ADD_ATTRIBUTES_KEY:
            if opens_block(lines, i):
                parsed_attrs, i = block_parser.parse_block(lines, i + 1, PLAIN_OPTIONS, 1)
            else:
                parsed_attrs, i = {}, i + 1
            add_attributes = {**(add_attributes or {}), **parsed_attrs}
        else:
            i = block_parser.parse_field(lines, i, data, text, SHIP_OPTIONS)

    block_parser.finish(data, text)
    return ShipBody(data, outfit_map, add_attributes, i)


class RecordParser:
    """Parses one file's text into records, variant stubs and reference tables."""

    def __init__(self, block_parser: Optional[BlockParser] = None):
        self.block_parser = block_parser or BlockParser()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def parse_text(self, text: str, path: str = "") -> FileParseResult:
        """Parse a whole file.

        Only root-level lines are considered as headers; anything else at
        the root that is not a known header is skipped one line at a time.

        Args:
            text: Full file content
            path: Virtual path of the file, used for stubs and logging

        Returns:
            The file's private contribution
        """
        result = FileParseResult(path=path)
        collector = ReferenceCollector(result.tables)
        lines = split_lines(text)

        i = 0
        while i < len(lines):
            line = lines[i]
            if not is_content(line) or indent_of(line) != 0:
                i += 1
                continue
            stripped = line.strip()

            if stripped.startswith("ship "):
                record, i = self.parse_ship(lines, i, result)
                if record:
                    result.ships.append(record)
            elif stripped.startswith("outfit "):
                record, i = self.parse_outfit(lines, i)
                if record:
                    result.outfits.append(record)
            elif stripped.startswith("effect "):
                record, i = self.parse_effect(lines, i)
                if record:
                    result.effects.append(record)
            else:
                header = collector.match_header(stripped)
                if header:
                    i = collector.collect(header[0], header[1], lines, i)
                else:
                    i += 1

        self.logger.debug(
            f"{path or '<text>'}: {len(result.ships)} ships, {len(result.outfits)} outfits, "
            f"{len(result.effects)} effects, {len(result.variant_stubs)} variant stubs"
        )
        return result

    def parse_ship(
        self, lines: List[str], i: int, result: FileParseResult
    ) -> Tuple[Optional[Record], int]:
        """Parse a ship header and its block.

        A two-name header records a variant stub and skips the block. A
        single-name header produces a ship, kept only with a description.
        """
        match = SHIP_HEADER.match(lines[i].strip())
        if not match:
            self.logger.debug(f"Malformed ship header skipped: {lines[i].strip()}")
            return None, i + 1

        base_name, variant_name = match.group(1), match.group(2)
        if not has_body(lines, i):
            self.logger.debug(f"Skipping ship '{base_name}' - no indented content")
            return None, i + 1

        if variant_name:
            result.variant_stubs.append(
                VariantStub(base_name, variant_name, lines, i, result.path)
            )
            return None, skip_block(lines, i, 0)

        ship = new_ship(base_name)
        body = read_ship_body(self.block_parser, lines, i + 1)
        ship.update(body.data)
        if body.outfit_map is not None:
            ship[OUTFIT_MAP_KEY] = body.outfit_map
            result.tables.collect_ship_outfits(base_name, list(body.outfit_map))

        if not ship.get(DESCRIPTION_KEY):
            self.logger.debug(f"Ship '{base_name}' has no description, dropped")
            return None, body.next_index
        return ship, body.next_index

    def parse_outfit(self, lines: List[str], i: int) -> Tuple[Optional[Record], int]:
        """Parse an outfit; kept only with a description."""
        record, next_i = self._parse_named(OUTFIT_HEADER, "outfit", lines, i)
        if record is not None and not record.get(DESCRIPTION_KEY):
            self.logger.debug(f"Outfit '{record[NAME_KEY]}' has no description, dropped")
            return None, next_i
        return record, next_i

    def parse_effect(self, lines: List[str], i: int) -> Tuple[Optional[Record], int]:
        """Parse an effect; effects are kept even without a description."""
        return self._parse_named(EFFECT_HEADER, "effect", lines, i)

    def _parse_named(
        self, header: "re.Pattern[str]", kind: str, lines: List[str], i: int
    ) -> Tuple[Optional[Record], int]:
        match = header.match(lines[i].strip())
        if not match:
            self.logger.debug(f"Malformed {kind} header skipped: {lines[i].strip()}")
            return None, i + 1

        name = match.group(1)
        if not has_body(lines, i):
            self.logger.debug(f"Skipping {kind} '{name}' - no indented content")
            return None, i + 1

        record: Record = {NAME_KEY: name}
        data, next_i = self.block_parser.parse_block(lines, i + 1, PLAIN_OPTIONS)
        record.update(data)
        return record, next_i
