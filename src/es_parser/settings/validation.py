"""
Settings validation for es-parser.
"""

import logging
from typing import List, TYPE_CHECKING

from .logging import VALID_LEVELS
from .types import ValidationResult

if TYPE_CHECKING:
    from .core import AppSettings

logger = logging.getLogger(__name__)


class SettingsValidator:
    """Validates configuration settings."""

    def __init__(self, settings: "AppSettings"):
        self.settings = settings

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        errors: List[str] = []
        warnings: List[str] = []

        if self.settings.parser.max_workers <= 0:
            errors.append(f"Invalid max workers: {self.settings.parser.max_workers}")
        if self.settings.parser.max_depth <= 0:
            errors.append(f"Invalid max depth: {self.settings.parser.max_depth}")

        level = self.settings.logging.console_log_level
        if level.upper() not in VALID_LEVELS:
            errors.append(f"Invalid console log level: {level}")

        data_dir = self.settings.output.data_dir
        if not data_dir.exists():
            warnings.append(f"Output directory does not exist, it will be created: {data_dir}")
        elif not data_dir.is_dir():
            errors.append(f"Output path is not a directory: {data_dir}")

        if errors:
            logger.debug(f"Settings validation failed: {errors}")
        return ValidationResult(
            is_valid=len(errors) == 0, errors=errors, warnings=warnings
        )
