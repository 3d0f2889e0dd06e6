"""
Managers for parsed game data.

Provides ParseContext, which owns everything a parse run accumulates:
per-source record buckets, pending variant stubs and the merged reference
tables. File results are merged in one at a time, so parsing itself never
touches shared state.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import NAME_KEY, Record, RecordCollection, VariantStub
from .records import FileParseResult
from .species import ReferenceTables


@dataclass
class SourceResult:
    """Records produced for a single data source."""

    ships: RecordCollection = field(default_factory=list)
    variants: RecordCollection = field(default_factory=list)
    outfits: RecordCollection = field(default_factory=list)
    effects: RecordCollection = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {
            "ships": len(self.ships),
            "variants": len(self.variants),
            "outfits": len(self.outfits),
            "effects": len(self.effects),
        }


class ParseContext:
    """Accumulates file results for one parse run.

    Maintains:
    - results: source name -> SourceResult (in order of first merge)
    - variant_stubs: stubs awaiting resolution, in merge order
    - tables: reference tables merged across all sources
    """

    def __init__(self):
        self.results: Dict[str, SourceResult] = {}
        self.variant_stubs: List[VariantStub] = []
        self.tables = ReferenceTables()
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def reset(self) -> None:
        """Drop everything accumulated by a previous run."""
        self.results = {}
        self.variant_stubs = []
        self.tables = ReferenceTables()

    def source(self, source_name: str) -> SourceResult:
        """Return the bucket for a source, creating it if needed."""
        if source_name not in self.results:
            self.results[source_name] = SourceResult()
        return self.results[source_name]

    def merge(self, source_name: str, file_result: FileParseResult) -> None:
        """Add one file's private result to the run."""
        bucket = self.source(source_name)
        bucket.ships.extend(file_result.ships)
        bucket.outfits.extend(file_result.outfits)
        bucket.effects.extend(file_result.effects)

        for stub in file_result.variant_stubs:
            stub.source = source_name
        self.variant_stubs.extend(file_result.variant_stubs)
        self.tables.merge(file_result.tables)

    def find_base_ship(self, stub: VariantStub) -> Optional[Record]:
        """Find a variant's base ship, preferring the stub's own source."""
        order = [stub.source] + [name for name in self.results if name != stub.source]
        for source_name in order:
            bucket = self.results.get(source_name)
            if bucket is None:
                continue
            for ship in bucket.ships:
                if ship.get(NAME_KEY) == stub.base_name:
                    return ship
        return None

