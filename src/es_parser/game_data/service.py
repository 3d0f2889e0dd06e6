"""
Main service for parsing Endless Sky game data.

Provides the high-level pipeline: parse every file of every data source in
a thread pool, merge the private per-file results, resolve ship variants
against the complete ship pool and attach governments to every record.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

from .block_parser import BlockParser
from .loaders import GameDataFileLoader
from .managers import ParseContext, SourceResult
from .models import DataSource, SourceFile
from .species import SpeciesResolver
from .variants import VariantResolver

if TYPE_CHECKING:
    from ..settings import AppSettings

DEFAULT_MAX_WORKERS = 8

SourceFiles = Tuple[DataSource, Sequence[SourceFile]]
"""A data source together with its ordered (virtual path, text) pairs."""


class GameDataService:
    """Service for parsing Endless Sky game data.

    Every call to :meth:`parse_sources` is one complete run: the parse
    context is reset first, so a service can be reused and separate
    services can work in parallel without sharing state.
    """

    def __init__(self, settings: Optional["AppSettings"] = None):
        """Initialize the service.

        Args:
            settings: App settings for worker count, nesting limit and
                government fallbacks. Defaults are used without settings.
        """
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.settings = settings

        if settings is not None:
            self.max_workers = settings.parser.max_workers
            block_parser = BlockParser(settings.parser.max_depth)
        else:
            self.max_workers = DEFAULT_MAX_WORKERS
            block_parser = BlockParser()

        self.loader = GameDataFileLoader(block_parser)
        self.context = ParseContext()
        self.variants = VariantResolver(block_parser)
        self.species = SpeciesResolver(self.context.tables)

    @property
    def known_governments(self) -> List[str]:
        """Governments seen during the last run."""
        return self.species.known_governments

    def parse_texts(self, files: Sequence[SourceFile], name: str = "default") -> SourceResult:
        """Parse a single data source given as (path, text) pairs."""
        results = self.parse_sources([(DataSource(name=name), files)])
        return results[name]

    def parse_directories(self, sources: Sequence[DataSource]) -> Dict[str, SourceResult]:
        """Read every source's local checkout and parse them in one run."""
        return self.parse_sources(
            [(source, self.loader.read_source_dir(source.path)) for source in sources]
        )

    def parse_sources(self, sources: Sequence[SourceFiles]) -> Dict[str, SourceResult]:
        """Parse several data sources in one run.

        Variants and governments are resolved across all sources, so a
        plugin's variants may build on ships of the base game.

        Args:
            sources: Data sources with their files, in output order

        Returns:
            Mapping of source name -> parsed records
        """
        self.context.reset()
        self.variants.reset()
        self.species.tables = self.context.tables

        jobs: List[Tuple[str, str, str]] = []
        for source, files in sources:
            self.context.source(source.name)
            jobs.extend((source.name, path, text) for path, text in files)

        self.logger.info(f"Parsing {len(jobs)} files from {len(sources)} sources...")
        self._first_pass(jobs)
        self._resolve_variants()
        self._attach_governments(sources)

        for name, result in self.context.results.items():
            counts = result.counts()
            self.logger.info(
                f"{name}: {counts['ships']} ships, {counts['variants']} variants, "
                f"{counts['outfits']} outfits, {counts['effects']} effects"
            )
        self.logger.info(
            f"Known governments ({len(self.known_governments)}): "
            f"{', '.join(self.known_governments) or 'none'}"
        )
        return dict(self.context.results)

    def _first_pass(self, jobs: List[Tuple[str, str, str]]) -> None:
        """Parse files in parallel and merge their results in input order."""
        if not jobs:
            return
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                executor.submit(self.loader.parse_file, path, text)
                for _, path, text in jobs
            ]
            for (source_name, _, _), future in zip(jobs, futures):
                self.context.merge(source_name, future.result())

    def _resolve_variants(self) -> None:
        self.variants.add_stubs(self.context.variant_stubs)
        for stub, variant in self.variants.resolve(self.context.find_base_ship):
            self.context.source(stub.source).variants.append(variant)
            # A variant's own loadout counts toward its outfits' governments
            own_outfits = self.variants.own_outfits.get(stub.full_name)
            if own_outfits:
                self.context.tables.collect_ship_outfits(stub.full_name, own_outfits)

    def _attach_governments(self, sources: Sequence[SourceFiles]) -> None:
        plugin_fallback = False
        outfit_fallback = False
        if self.settings is not None:
            plugin_fallback = self.settings.species.plugin_fallback
            outfit_fallback = self.settings.species.outfit_fallback

        for source, _ in sources:
            result = self.context.results[source.name]
            self.species.attach(
                result.ships,
                result.variants,
                result.outfits,
                fallback_name=source.label if plugin_fallback else None,
                outfit_fallback=outfit_fallback,
            )
