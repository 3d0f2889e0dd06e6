"""Basic unit tests for es-parser modules."""

import logging
from pathlib import Path

from es_parser.settings import AppSettings


class TestPackage:
    """Package-level imports."""

    def test_public_api(self) -> None:
        """The top-level package exposes the service."""
        import es_parser

        assert es_parser.__version__
        assert es_parser.GameDataService is not None


class TestGameDataModels:
    """Test game data model creation."""

    def test_new_ship_has_hardpoint_sequences(self) -> None:
        """A new ship starts with every hardpoint sequence empty."""
        from es_parser.game_data.models import HARDPOINT_KEYS, new_ship

        ship = new_ship("Sparrow")
        assert ship["name"] == "Sparrow"
        assert all(ship[key] == [] for key in HARDPOINT_KEYS)

    def test_sprite_data_key(self) -> None:
        """Only the primary sprite uses spriteData."""
        from es_parser.game_data.models import sprite_data_key

        assert sprite_data_key("sprite") == "spriteData"
        assert sprite_data_key("flare sprite") == "flare sprite data"


class TestUtilsLogging:
    """Test logging configuration."""

    def test_logging_setup_with_settings(self, settings: AppSettings) -> None:
        """Test logging setup works with settings."""
        from es_parser.utils.logging_config import setup_logging

        setup_logging(settings)

        logger = logging.getLogger("es_parser")
        assert logger.level == logging.DEBUG
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].level == logging.INFO

    def test_level_override(self, settings: AppSettings) -> None:
        """The console level can be overridden."""
        from es_parser.utils.logging_config import setup_logging

        settings.logging.console_use_colors = False
        setup_logging(settings, "DEBUG")
        [handler] = logging.getLogger().handlers
        assert handler.level == logging.DEBUG
        assert type(handler.formatter) is logging.Formatter

    def test_file_logging(
        self, settings: AppSettings, tmp_path: Path, monkeypatch
    ) -> None:
        """File logging writes CSV lines under logs/."""
        from es_parser.utils.logging_config import setup_logging

        monkeypatch.chdir(tmp_path)
        settings.logging.console_logging = False
        settings.logging.file_logging = True
        setup_logging(settings)
        logging.getLogger("es_parser.test").warning('say "hi"')
        for handler in logging.getLogger().handlers:
            handler.close()
        logging.getLogger().handlers.clear()

        text = (tmp_path / "logs" / "es_parser.csv").read_text(encoding="utf-8")
        assert '"say ""hi"""' in text
        assert '"es_parser.test"' in text

    def test_colored_formatter(self) -> None:
        """Only the level name is coloured."""
        from es_parser.utils.logging_config import ColoredFormatter

        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None, None)
        formatted = ColoredFormatter(fmt="%(levelname)s : %(message)s").format(record)
        assert formatted == "\033[31mERROR\033[0m : failed"
