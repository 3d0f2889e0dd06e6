"""
Module for working with Endless Sky game data.

Provides the data-language parser (line model, tokenizer, block and record
parsers), the variant and government resolvers, file loading and JSON export.
"""

from .service import GameDataService
from .models import (
    Value,
    Record,
    RecordCollection,
    OutfitMap,
    SourceFile,
    DataSource,
    VariantStub,
    HARDPOINT_KEYS,
    SPRITE_FIELDS,
)
from .block_parser import BlockParser, BlockOptions
from .records import RecordParser, FileParseResult
from .managers import ParseContext, SourceResult
from .loaders import GameDataFileLoader
from .variants import VariantResolver
from .species import SpeciesResolver, ReferenceTables
from .export import Exporter

# Public exports
__all__ = [
    # Main service
    "GameDataService",
    # Type aliases
    "Value",
    "Record",
    "RecordCollection",
    "OutfitMap",
    "SourceFile",
    # Data models
    "DataSource",
    "VariantStub",
    "SourceResult",
    "FileParseResult",
    # Constants
    "HARDPOINT_KEYS",
    "SPRITE_FIELDS",
    # Component classes (for advanced usage)
    "BlockParser",
    "BlockOptions",
    "RecordParser",
    "ParseContext",
    "GameDataFileLoader",
    "VariantResolver",
    "SpeciesResolver",
    "ReferenceTables",
    "Exporter",
]
