"""Shared fixtures for es-parser tests."""

import logging
import logging.handlers
from pathlib import Path
from typing import Iterator, List

import pytest

from es_parser.game_data import GameDataService
from es_parser.settings import AppSettings


@pytest.fixture
def settings(tmp_path: Path) -> AppSettings:
    """Settings stored in a temporary INI file."""
    return AppSettings(settings_file=tmp_path / "settings.ini")


@pytest.fixture
def service() -> GameDataService:
    return GameDataService()


@pytest.fixture
def sparrow_lines() -> List[str]:
    return [
        'ship "Sparrow"',
        '\tsprite "ship/sparrow"',
        '\tdescription "A small ship."',
        "\tattributes",
        '\t\t"hull" 600',
        "\tgun 0 -20",
    ]


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Drop handlers installed by setup_logging() during a test."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in root.handlers[:]:
        if type(handler) in (logging.StreamHandler, logging.handlers.RotatingFileHandler):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
