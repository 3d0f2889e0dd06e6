"""
Interceptors for root-level blocks that only feed the species resolver.

Fleets, missions, shipyards, outfitters and planets produce no output
records of their own; they are read here into :class:`ReferenceTables`.
"""

import logging
import re
from typing import Iterator, List, Optional, Tuple

from .lines import indent_of, is_content
from .species import ReferenceTables
from .tokenizer import tokenize, unquote

REFERENCE_HEADER = re.compile(
    r"^(fleet|mission|shipyard|outfitter|planet)\s+"
    r"(?:[\"'`]([^\"'`]+)[\"'`]|(\S.*?))\s*$"
)
NPC_SHIP = re.compile(
    r"^ship\s+(?:[\"'`]([^\"'`]+)[\"'`]|(\S+))(?:\s+[\"'`]?([^\"'`]+)[\"'`]?)?"
)

ContentLine = Tuple[int, int, str]
"""(line index, indentation, stripped text)"""


def block_lines(lines: List[str], i: int) -> Iterator[ContentLine]:
    """Yield content lines of the block below the header at ``i``."""
    header_indent = indent_of(lines[i])
    j = i + 1
    while j < len(lines):
        line = lines[j]
        if is_content(line):
            indent = indent_of(line)
            if indent <= header_indent:
                return
            yield j, indent, line.strip()
        j += 1


def block_end(lines: List[str], i: int) -> int:
    """Return the index of the first line after the block headed at ``i``."""
    end = i + 1
    for j, _, _ in block_lines(lines, i):
        end = j + 1
    return end


def first_word(stripped: str) -> str:
    return stripped.split(None, 1)[0] if stripped else ""


def listed_name(stripped: str) -> Optional[str]:
    """Return the name from a catalog or roster line like ``"Sparrow" 2``."""
    pair = tokenize(stripped)
    if pair:
        return pair[0]
    return unquote(stripped) or None


class ReferenceCollector:
    """Reads reference blocks into a file's private reference tables."""

    def __init__(self, tables: ReferenceTables):
        self.tables = tables
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @staticmethod
    def match_header(stripped: str) -> Optional[Tuple[str, str]]:
        """Return (kind, name) for a reference block header, else None."""
        match = REFERENCE_HEADER.match(stripped)
        if not match:
            return None
        return match.group(1), match.group(2) or match.group(3)

    def collect(self, kind: str, name: str, lines: List[str], i: int) -> int:
        """Read the block headed at ``i`` and return the index after it."""
        handler = getattr(self, f"_collect_{kind}")
        handler(name, lines, i)
        return block_end(lines, i)

    def _collect_fleet(self, name: str, lines: List[str], i: int) -> None:
        government, ship_names = self._read_roster(lines, i)
        if not government:
            self.logger.debug(f"Fleet '{name}' has no government, ignored")
        self.tables.collect_fleet(government, ship_names)

    def _read_roster(self, lines: List[str], i: int) -> Tuple[Optional[str], List[str]]:
        """Read ``government`` and the ships under every ``variant`` sub-block."""
        government: Optional[str] = None
        ship_names: List[str] = []
        header_indent = indent_of(lines[i])
        variant_indent: Optional[int] = None

        for _, indent, stripped in block_lines(lines, i):
            if variant_indent is not None and indent > variant_indent:
                name = listed_name(stripped)
                if name and name not in ship_names:
                    ship_names.append(name)
                continue
            variant_indent = None
            if first_word(stripped) == "variant":
                variant_indent = indent
            elif indent == header_indent + 1:
                pair = tokenize(stripped)
                if pair and pair[0] == "government" and isinstance(pair[1], str):
                    government = pair[1]
        return government, ship_names

    def _collect_mission(self, name: str, lines: List[str], i: int) -> None:
        for j, _, stripped in block_lines(lines, i):
            if first_word(stripped) == "npc":
                self._collect_npc(lines, j)

    def _collect_npc(self, lines: List[str], i: int) -> None:
        """Read one ``npc`` sub-block: its government and every ship type in it."""
        npc_indent = indent_of(lines[i])
        government: Optional[str] = None
        ship_types: List[str] = []

        for j, indent, stripped in block_lines(lines, i):
            if indent != npc_indent + 1:
                continue
            word = first_word(stripped)
            if word == "ship":
                match = NPC_SHIP.match(stripped)
                if match:
                    ship_types.append(match.group(1) or match.group(2))
            elif word == "fleet":
                _, roster = self._read_roster(lines, j)
                ship_types.extend(roster)
            elif word == "government":
                pair = tokenize(stripped)
                if pair and isinstance(pair[1], str):
                    government = pair[1]

        for ship_type in ship_types:
            self.tables.collect_npc_ref(government, ship_type)

    def _collect_shipyard(self, name: str, lines: List[str], i: int) -> None:
        self.tables.collect_shipyard(name, self._read_catalog(lines, i))

    def _collect_outfitter(self, name: str, lines: List[str], i: int) -> None:
        self.tables.collect_outfitter(name, self._read_catalog(lines, i))

    def _read_catalog(self, lines: List[str], i: int) -> List[str]:
        names: List[str] = []
        for _, _, stripped in block_lines(lines, i):
            item = listed_name(stripped)
            if item:
                names.append(item)
        return names

    def _collect_planet(self, name: str, lines: List[str], i: int) -> None:
        header_indent = indent_of(lines[i])
        government: Optional[str] = None
        shipyards: List[str] = []
        outfitters: List[str] = []

        for _, indent, stripped in block_lines(lines, i):
            if indent != header_indent + 1:
                continue
            pair = tokenize(stripped)
            if not pair or not isinstance(pair[1], str):
                continue
            key, value = pair
            if key == "government":
                government = value
            elif key == "shipyard":
                shipyards.append(value)
            elif key == "outfitter":
                outfitters.append(value)

        self.tables.collect_planet(name, government, shipyards, outfitters)
