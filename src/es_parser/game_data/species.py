"""
Government ("species") resolution for ships, variants and outfits.

Reference tables are filled while files are parsed: fleet rosters, mission
NPC ships, shipyard and outfitter catalogs, planets and ship loadouts. Once
every file has been read, the resolver infers which governments own each
ship and outfit by joining those tables.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from .models import (
    BASE_SHIP_KEY,
    GOVERNMENTS_KEY,
    NAME_KEY,
    OUTFIT_MAP_KEY,
    Record,
    RecordCollection,
)

VARIANT_SUFFIX = re.compile(r"\s*\([^)]+\)\s*$")

GovernmentSet = Dict[str, None]
"""Insertion-ordered set of government names."""


@dataclass
class FleetRef:
    government: str
    ship_names: List[str]


@dataclass
class NpcRef:
    government: str
    ship_name: str


@dataclass
class PlanetRef:
    name: str
    government: Optional[str] = None
    shipyards: List[str] = field(default_factory=list)
    outfitters: List[str] = field(default_factory=list)


@dataclass
class ReferenceTables:
    """Cross-reference tables contributed by parsed files."""

    fleets: List[FleetRef] = field(default_factory=list)
    npc_refs: List[NpcRef] = field(default_factory=list)
    shipyards: Dict[str, List[str]] = field(default_factory=dict)
    outfitters: Dict[str, List[str]] = field(default_factory=dict)
    planets: List[PlanetRef] = field(default_factory=list)
    ship_outfits: Dict[str, List[str]] = field(default_factory=dict)
    known_governments: GovernmentSet = field(default_factory=dict)

    def collect_fleet(self, government: Optional[str], ship_names: List[str]) -> None:
        if government and ship_names:
            self.known_governments[government] = None
            self.fleets.append(FleetRef(government, list(ship_names)))

    def collect_npc_ref(self, government: Optional[str], ship_name: Optional[str]) -> None:
        if government and ship_name:
            self.known_governments[government] = None
            self.npc_refs.append(NpcRef(government, ship_name))

    def collect_shipyard(self, name: str, ship_names: List[str]) -> None:
        self.shipyards.setdefault(name, []).extend(ship_names)

    def collect_outfitter(self, name: str, outfit_names: List[str]) -> None:
        self.outfitters.setdefault(name, []).extend(outfit_names)

    def collect_planet(
        self,
        name: str,
        government: Optional[str],
        shipyards: List[str],
        outfitters: List[str],
    ) -> None:
        if government:
            self.known_governments[government] = None
        self.planets.append(PlanetRef(name, government, list(shipyards), list(outfitters)))

    def collect_ship_outfits(self, ship_name: str, outfit_names: List[str]) -> None:
        if outfit_names:
            self.ship_outfits.setdefault(ship_name, []).extend(outfit_names)

    def merge(self, other: "ReferenceTables") -> None:
        """Append another file's contributions, keeping their order."""
        self.fleets.extend(other.fleets)
        self.npc_refs.extend(other.npc_refs)
        for name, ships in other.shipyards.items():
            self.collect_shipyard(name, ships)
        for name, outfits in other.outfitters.items():
            self.collect_outfitter(name, outfits)
        self.planets.extend(other.planets)
        for name, outfits in other.ship_outfits.items():
            self.collect_ship_outfits(name, outfits)
        self.known_governments.update(other.known_governments)


def base_form(ship_name: str) -> str:
    """Strip a trailing variant suffix: ``"Carrier (Alpha)"`` -> ``"Carrier"``."""
    return VARIANT_SUFFIX.sub("", ship_name).strip()


def as_flags(governments: Iterable[str]) -> Dict[str, bool]:
    """Serialize a government set as ordered ``{name: True}`` pairs."""
    return {government: True for government in governments}


class SpeciesResolver:
    """Infers governments for ships and outfits from reference tables."""

    def __init__(self, tables: Optional[ReferenceTables] = None):
        self.tables = tables if tables is not None else ReferenceTables()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def reset(self) -> None:
        self.tables = ReferenceTables()

    @property
    def known_governments(self) -> List[str]:
        return list(self.tables.known_governments)

    def governments_for_ship(self, ship_name: str) -> GovernmentSet:
        """Return governments that field, employ or sell the named ship.

        Both the exact name and its base form are checked, since missions
        refer to full variant names while fleets and shipyards mostly list
        base names.
        """
        govts: GovernmentSet = {}
        names = {ship_name, base_form(ship_name)}

        for fleet in self.tables.fleets:
            if names.intersection(fleet.ship_names):
                govts[fleet.government] = None

        for ref in self.tables.npc_refs:
            if ref.ship_name in names:
                govts[ref.government] = None

        for yard, ship_list in self.tables.shipyards.items():
            if not names.intersection(ship_list):
                continue
            for planet in self.tables.planets:
                if planet.government and yard in planet.shipyards:
                    govts[planet.government] = None

        return govts

    def governments_for_outfit(self, outfit_name: str) -> GovernmentSet:
        """Return governments selling the outfit or flying ships that carry it."""
        govts: GovernmentSet = {}

        for outfitter, outfit_list in self.tables.outfitters.items():
            if outfit_name not in outfit_list:
                continue
            for planet in self.tables.planets:
                if planet.government and outfitter in planet.outfitters:
                    govts[planet.government] = None

        for ship_name, outfit_list in self.tables.ship_outfits.items():
            if outfit_name in outfit_list:
                govts.update(self.governments_for_ship(ship_name))

        return govts

    def _outfit_fallback(self, record: Record) -> GovernmentSet:
        govts: GovernmentSet = {}
        outfit_map = record.get(OUTFIT_MAP_KEY)
        if isinstance(outfit_map, dict):
            for outfit_name in outfit_map:
                govts.update(self.governments_for_outfit(outfit_name))
        return govts

    def attach(
        self,
        ships: RecordCollection,
        variants: RecordCollection,
        outfits: RecordCollection,
        fallback_name: Optional[str] = None,
        outfit_fallback: bool = False,
    ) -> None:
        """Attach a ``governments`` flag map to every record.

        Args:
            ships: Base ship records
            variants: Resolved variant records (carry ``baseShip``)
            outfits: Outfit records
            fallback_name: Government used when nothing else matches
            outfit_fallback: Derive ship governments from carried outfits
                when the ship itself matches nothing
        """
        for ship in ships:
            govts = self.governments_for_ship(str(ship[NAME_KEY]))
            self._finish(ship, govts, fallback_name, outfit_fallback)

        for variant in variants:
            name = str(variant[NAME_KEY])
            govts = self.governments_for_ship(name)
            govts.update(self.governments_for_ship(str(variant.get(BASE_SHIP_KEY, name))))
            self._finish(variant, govts, fallback_name, outfit_fallback)

        for outfit in outfits:
            govts = self.governments_for_outfit(str(outfit[NAME_KEY]))
            self._finish(outfit, govts, fallback_name, False)

        self.logger.debug(
            f"Attached governments to {len(ships)} ships, {len(variants)} variants, "
            f"{len(outfits)} outfits"
        )

    def _finish(
        self,
        record: Record,
        govts: GovernmentSet,
        fallback_name: Optional[str],
        outfit_fallback: bool,
    ) -> None:
        if not govts and outfit_fallback:
            govts = self._outfit_fallback(record)
        if not govts and fallback_name:
            govts = {fallback_name: None}
        record[GOVERNMENTS_KEY] = as_flags(govts)
