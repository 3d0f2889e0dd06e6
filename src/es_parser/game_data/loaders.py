"""
File loaders for Endless Sky game data.

Reads data files from local checkouts and the plugin list describing them,
and parses single files into private results. Files are parsed in a worker
pool by the service, so nothing here touches shared state.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import orjson

from ..settings.types import ConfigError
from .block_parser import BlockParser
from .models import DataSource, SourceFile
from .records import FileParseResult, RecordParser


class GameDataFileLoader:
    """Discovers, reads and parses game data text files."""

    def __init__(self, block_parser: Optional[BlockParser] = None):
        self.parser = RecordParser(block_parser)
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")
        self.logger.debug("GameDataFileLoader initialized")

    def read_source_dir(self, path: str | Path) -> List[SourceFile]:
        """Read the data files of a local checkout.

        Uses ``data/**/*.txt`` when the checkout has a ``data`` folder and
        every ``*.txt`` below ``path`` otherwise. Files are returned sorted by
        their path relative to ``path``, which becomes the virtual path.

        Args:
            path: Root directory of the checkout

        Returns:
            Ordered (virtual path, text) pairs
        """
        root = Path(path)
        data_dir = root / "data"
        search_root = data_dir if data_dir.is_dir() else root
        txt_files = sorted(
            search_root.rglob("*.txt"), key=lambda p: p.relative_to(root).as_posix()
        )

        files: List[SourceFile] = []
        for txt_file in txt_files:
            virtual_path = txt_file.relative_to(root).as_posix()
            try:
                text = txt_file.read_bytes().decode("utf-8", errors="replace")
            except OSError as e:
                self.logger.error(f"Error reading data file {txt_file}: {e}")
                continue
            files.append((virtual_path, text))

        if not files:
            self.logger.warning(f"No data files found in {root}")
        else:
            self.logger.debug(f"Found {len(files)} data files in {root}")
        return files

    def parse_file(self, path: str, text: str) -> FileParseResult:
        """Parse one file, returning an empty result if parsing fails.

        Args:
            path: Virtual path of the file
            text: Full file content

        Returns:
            The file's private contribution
        """
        try:
            return self.parser.parse_text(text, path)
        except Exception as e:
            # One broken file must not stop the whole run
            self.logger.error(f"Error parsing data file {path}: {e}")
            return FileParseResult(path=path)

    def load_plugins(self, json_file: str | Path) -> List[DataSource]:
        """Read a plugin list file.

        The file holds ``{"plugins": [{"name", "path", ...}]}``. Relative
        paths are resolved against the list file's directory.

        Raises:
            ConfigError: If the file cannot be read or is malformed
        """
        json_path = Path(json_file)
        try:
            with json_path.open("rb") as f:  # orjson works with bytes
                data = orjson.loads(f.read())
        except OSError as e:
            raise ConfigError(f"Cannot read plugin list {json_path}: {e}") from e
        except orjson.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in plugin list {json_path}: {e}") from e

        entries = data.get("plugins") if isinstance(data, dict) else None
        if not isinstance(entries, list):
            raise ConfigError(f"Plugin list {json_path} has no 'plugins' array")

        sources: List[DataSource] = []
        seen: set[str] = set()
        for index, entry in enumerate(entries):
            source = self._plugin_entry(entry, index, json_path)
            if source.name in seen:
                raise ConfigError(f"Duplicate plugin name '{source.name}' in {json_path}")
            seen.add(source.name)
            sources.append(source)

        self.logger.info(f"Loaded {len(sources)} plugins from {json_path}")
        return sources

    @staticmethod
    def _plugin_entry(entry: Any, index: int, json_path: Path) -> DataSource:
        if not isinstance(entry, dict):
            raise ConfigError(f"Plugin #{index} in {json_path} is not an object")
        fields: Dict[str, Any] = entry
        name = fields.get("name")
        path = fields.get("path")
        if not isinstance(name, str) or not name:
            raise ConfigError(f"Plugin #{index} in {json_path} has no name")
        if not isinstance(path, str) or not path:
            raise ConfigError(f"Plugin '{name}' in {json_path} has no path")

        local_path = Path(path)
        if not local_path.is_absolute():
            local_path = json_path.parent / local_path

        return DataSource(
            name=name,
            path=str(local_path),
            display_name=str(fields.get("displayName") or name),
            group=str(fields.get("source") or name),
            repository=str(fields.get("repository") or ""),
        )
