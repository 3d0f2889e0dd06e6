"""
Parser-related settings for es-parser.
"""

import logging

from .base import SettingsSection

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8
DEFAULT_MAX_DEPTH = 64


class ParserSettings(SettingsSection):
    """Manages worker pool size and nesting limits."""

    @property
    def max_workers(self) -> int:
        """Get number of threads used for the first parse pass."""
        return self._get_int("parser/max_workers", DEFAULT_MAX_WORKERS)

    @max_workers.setter
    def max_workers(self, value: int) -> None:
        if value > 0:
            self._set("parser/max_workers", value)
        else:
            logger.warning(
                f"Invalid max workers: {value}, keeping current: {self.max_workers}"
            )

    @property
    def max_depth(self) -> int:
        """Get maximum nesting depth of data blocks."""
        return self._get_int("parser/max_depth", DEFAULT_MAX_DEPTH)

    @max_depth.setter
    def max_depth(self, value: int) -> None:
        if value > 0:
            self._set("parser/max_depth", value)
        else:
            logger.warning(
                f"Invalid max depth: {value}, keeping current: {self.max_depth}"
            )
