"""
Data models for Endless Sky game data.

Contains type definitions, field-name constants and the few small data
structures used throughout the game_data package. Records stay plain dicts
so they serialize straight to JSON for the display layer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple, TypeAlias, Union

# Type aliases for clarity
Value: TypeAlias = Union[str, int, float, bool, Dict[str, Any], List[Any]]
"""A parsed value: string, number, flag (True), nested record or list of values."""

Record: TypeAlias = Dict[str, Value]
"""A single parsed record (ship, variant, outfit, effect or nested block)."""

RecordCollection: TypeAlias = List[Record]
"""An ordered collection of records."""

OutfitMap: TypeAlias = Dict[str, int]
"""Maps outfit name to installed count."""

SourceFile: TypeAlias = Tuple[str, str]
"""A (virtual path, full text) pair handed over by file discovery."""


# Record fields the display layer keys on
NAME_KEY = "name"
DESCRIPTION_KEY = "description"
DISPLAY_NAME_KEY = "display name"
SPRITE_KEY = "sprite"
SPRITE_DATA_KEY = "spriteData"
THUMBNAIL_KEY = "thumbnail"
ATTRIBUTES_KEY = "attributes"
ADD_ATTRIBUTES_KEY = "add attributes"
OUTFITS_KEY = "outfits"
OUTFIT_MAP_KEY = "outfitMap"
GOVERNMENTS_KEY = "governments"
VARIANT_KEY = "variant"
BASE_SHIP_KEY = "baseShip"

# Hardpoint sequences, in the order they are initialized on a ship
HARDPOINT_KEYS = (
    "engines",
    "reverseEngines",
    "steeringEngines",
    "guns",
    "turrets",
    "bays",
)

# Fields whose value is a sprite path with optional animation sub-block
SPRITE_FIELDS = (
    "sprite",
    "flare sprite",
    "steering flare sprite",
    "reverse flare sprite",
    "afterburner effect",
)

# Data-language animation keys -> names used by the sprite animator
SPRITE_DATA_NAMES = {
    "frame rate": "frameRate",
    "frame time": "frameTime",
    "delay": "delay",
    "start frame": "startFrame",
    "random start frame": "randomStart",
    "no repeat": "noRepeat",
    "rewind": "rewind",
    "scale": "scale",
}


def sprite_data_key(sprite_field: str) -> str:
    """Return the record key holding animation data for a sprite field."""
    if sprite_field == SPRITE_KEY:
        return SPRITE_DATA_KEY
    return f"{sprite_field} data"


@dataclass
class VariantStub:
    """A ship variant seen during the first pass, resolved after all files."""

    base_name: str
    variant_name: str
    lines: List[str] = field(repr=False)
    start: int
    source: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.base_name} ({self.variant_name})"


def new_ship(name: str) -> Record:
    """Create an empty ship record with all hardpoint sequences present."""
    ship: Record = {NAME_KEY: name}
    for key in HARDPOINT_KEYS:
        ship[key] = []
    return ship


@dataclass
class DataSource:
    """A named set of data files: the base game or one plugin."""

    name: str
    path: str = ""
    display_name: str = ""
    group: str = ""
    repository: str = ""

    @property
    def label(self) -> str:
        return self.display_name or self.name
