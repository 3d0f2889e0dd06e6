"""
Core settings management for es-parser.
"""

import logging
from pathlib import Path
from typing import Optional

from PySide6.QtCore import QSettings

from .types import ConfigVersion, ValidationResult
from .validation import SettingsValidator
from .logging import LoggingSettings
from .output import OutputSettings
from .parser import ParserSettings
from .species import SpeciesSettings

logger = logging.getLogger(__name__)


class AppSettings:
    """
    Configuration management using QSettings.

    Provides type-safe access to parser settings with automatic
    cross-platform storage and validation.
    """

    def __init__(
        self, profile: str = "default", settings_file: Optional[str | Path] = None
    ):
        """Initialize settings with organization, application name, and profile.

        Args:
            profile: Settings profile name (default: "default")
            settings_file: Optional INI file to store settings in instead of
                the platform default location
        """
        if settings_file is not None:
            self.settings = QSettings(str(settings_file), QSettings.Format.IniFormat)
        else:
            self.settings = QSettings("es-parser", "es_parser")
        self.profile = profile

        # Profile as a group: es-parser/es_parser/default/...
        self.settings.beginGroup(profile)

        self._validator = SettingsValidator(self)
        self._parser = ParserSettings(self.settings)
        self._species = SpeciesSettings(self.settings)
        self._output = OutputSettings(self.settings)
        self._logging = LoggingSettings(self.settings)

        self._ensure_version()

        logger.debug(
            f"Settings initialized for profile '{profile}', stored at: {self.settings.fileName()}"
        )

    def _ensure_version(self) -> None:
        current_version = str(self.settings.value("app/version", ""))
        if not current_version:
            self.settings.setValue("app/version", ConfigVersion.CURRENT.value)
            self.settings.setValue("app/first_run", True)
            self.settings.sync()
            logger.info("First run detected, initializing configuration")
        elif current_version != ConfigVersion.CURRENT.value:
            logger.warning(
                f"Unknown configuration version {current_version}, "
                f"expected {ConfigVersion.CURRENT.value}"
            )

    # === SUBSYSTEM ACCESS ===

    @property
    def parser(self) -> ParserSettings:
        """Access parser settings subsystem."""
        return self._parser

    @property
    def species(self) -> SpeciesSettings:
        """Access government resolution settings subsystem."""
        return self._species

    @property
    def output(self) -> OutputSettings:
        """Access output settings subsystem."""
        return self._output

    @property
    def logging(self) -> LoggingSettings:
        """Access logging settings subsystem."""
        return self._logging

    # === VERSION AND FIRST RUN ===

    @property
    def is_first_run(self) -> bool:
        value = self.settings.value("app/first_run", True)
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        return bool(value)

    def set_first_run_complete(self) -> None:
        self.settings.setValue("app/first_run", False)
        self.settings.sync()

    # === VALIDATION ===

    def validate(self) -> ValidationResult:
        """Validate current configuration."""
        return self._validator.validate()

    # === UTILITY METHODS ===

    def get_settings_file_path(self) -> str:
        """Get the file path where settings are stored."""
        return self.settings.fileName()
