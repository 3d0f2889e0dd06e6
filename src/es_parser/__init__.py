"""
es-parser: Endless Sky game data parser

Reads the indentation-based data files of Endless Sky and its plugins into
ship, variant, outfit and effect records with inferred governments.
"""

__version__ = "0.1.0"
__author__ = "es-parser Contributors"

from .game_data import DataSource, GameDataService, SourceResult
from .utils.logging_config import setup_logging

__all__ = [
    # Services
    "GameDataService",

    # Logging
    "setup_logging",

    # Data models
    "DataSource",
    "SourceResult",
]
