"""
Output settings for es-parser.
"""

from pathlib import Path

from .base import SettingsSection


class OutputSettings(SettingsSection):
    """Manages where and how exported JSON is written."""

    @property
    def data_dir(self) -> Path:
        """Get root directory for exported data files."""
        return Path(self._get_str("output/data_dir", "data"))

    @data_dir.setter
    def data_dir(self, value: str | Path) -> None:
        self._set("output/data_dir", str(value))

    @property
    def pretty(self) -> bool:
        """Check if JSON output should be indented."""
        return self._get_bool("output/pretty", True)

    @pretty.setter
    def pretty(self, value: bool) -> None:
        self._set("output/pretty", value)
