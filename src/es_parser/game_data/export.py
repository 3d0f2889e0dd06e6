"""
JSON export of parsed game data.

Layout under the data directory::

    index.json                          group -> [{outputName, displayName}]
    <outputName>/dataFiles/ships.json
    <outputName>/dataFiles/variants.json
    <outputName>/dataFiles/outfits.json
    <outputName>/dataFiles/effects.json
    <outputName>/dataFiles/complete.json
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import orjson

from .managers import SourceResult
from .models import DataSource

INDEX_FILE = "index.json"
DATA_FILES_DIR = "dataFiles"


class Exporter:
    """Writes per-source JSON files and the shared source index."""

    def __init__(self, data_dir: str | Path, pretty: bool = True):
        self.data_dir = Path(data_dir)
        self.pretty = pretty
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _dump(self, path: Path, payload: Any) -> None:
        option = orjson.OPT_INDENT_2 if self.pretty else 0
        path.write_bytes(orjson.dumps(payload, option=option))

    def write(
        self,
        results: Mapping[str, SourceResult],
        sources: Sequence[DataSource],
        parsed_at: Optional[datetime] = None,
    ) -> List[Path]:
        """Write every source's files and the index.

        Args:
            results: Parsed records by source name
            sources: Sources in index order; sources without results are skipped
            parsed_at: Timestamp stored in complete.json (defaults to now, UTC)

        Returns:
            Paths of all written files
        """
        timestamp = (parsed_at or datetime.now(timezone.utc)).isoformat()
        written: List[Path] = []
        index: Dict[str, List[Dict[str, str]]] = {}

        for source in sources:
            result = results.get(source.name)
            if result is None:
                self.logger.warning(f"No parse results for source '{source.name}'")
                continue
            written.extend(self.write_source(source, result, timestamp))
            index.setdefault(source.group or source.name, []).append(
                {"outputName": source.name, "displayName": source.label}
            )

        self.data_dir.mkdir(parents=True, exist_ok=True)
        index_path = self.data_dir / INDEX_FILE
        self._dump(index_path, index)
        written.append(index_path)

        self.logger.info(f"Wrote {len(written)} files to {self.data_dir}")
        return written

    def write_source(
        self, source: DataSource, result: SourceResult, timestamp: str
    ) -> List[Path]:
        """Write the dataFiles folder of one source."""
        out_dir = self.data_dir / source.name / DATA_FILES_DIR
        out_dir.mkdir(parents=True, exist_ok=True)

        collections = {
            "ships": result.ships,
            "variants": result.variants,
            "outfits": result.outfits,
            "effects": result.effects,
        }
        written: List[Path] = []
        for kind, records in collections.items():
            path = out_dir / f"{kind}.json"
            self._dump(path, records)
            written.append(path)
            self.logger.debug(f"Saved {len(records)} {kind} to {path}")

        complete_path = out_dir / "complete.json"
        self._dump(
            complete_path,
            {
                "plugin": source.name,
                "repository": source.repository,
                **collections,
                "parsedAt": timestamp,
            },
        )
        written.append(complete_path)
        return written
