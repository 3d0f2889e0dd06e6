"""Tests for the settings package."""

from pathlib import Path

import pytest

from es_parser.settings import AppSettings


class TestDefaults:
    """Default values of every subsystem."""

    def test_parser_defaults(self, settings: AppSettings) -> None:
        """Parser defaults."""
        assert settings.parser.max_workers == 8
        assert settings.parser.max_depth == 64

    def test_species_defaults(self, settings: AppSettings) -> None:
        """Fallbacks are off by default."""
        assert settings.species.plugin_fallback is False
        assert settings.species.outfit_fallback is False

    def test_output_defaults(self, settings: AppSettings) -> None:
        """Output goes to ./data, indented."""
        assert settings.output.data_dir == Path("data")
        assert settings.output.pretty is True

    def test_logging_defaults(self, settings: AppSettings) -> None:
        """Console logging at INFO with colours, no file logging."""
        assert settings.logging.console_logging is True
        assert settings.logging.console_log_level == "INFO"
        assert settings.logging.console_use_colors is True
        assert settings.logging.file_logging is False
        assert settings.logging.log_file_path == "logs/es_parser.csv"

    def test_first_run(self, settings: AppSettings) -> None:
        """A fresh file is a first run with the current version."""
        assert settings.is_first_run is True
        assert settings.settings.value("app/version") == "1.0"
        settings.set_first_run_complete()
        assert settings.is_first_run is False


class TestPersistence:
    """Values survive a reload from the same file."""

    def test_round_trip(self, tmp_path: Path) -> None:
        """Setters write through to the INI file."""
        path = tmp_path / "settings.ini"
        first = AppSettings(settings_file=path)
        first.parser.max_workers = 2
        first.species.outfit_fallback = True
        first.output.data_dir = tmp_path / "out"
        first.logging.console_log_level = "debug"

        second = AppSettings(settings_file=path)
        assert second.parser.max_workers == 2
        assert second.species.outfit_fallback is True
        assert second.output.data_dir == tmp_path / "out"
        assert second.logging.console_log_level == "DEBUG"
        assert second.get_settings_file_path() == str(path)

    def test_profiles_are_separate(self, tmp_path: Path) -> None:
        """Profiles group their values."""
        path = tmp_path / "settings.ini"
        AppSettings(settings_file=path).parser.max_workers = 3
        assert AppSettings("other", settings_file=path).parser.max_workers == 8


class TestValidation:
    """AppSettings.validate."""

    def test_rejected_setters(self, settings: AppSettings) -> None:
        """Invalid values are ignored by setters."""
        settings.parser.max_workers = 0
        settings.parser.max_depth = -1
        settings.logging.console_log_level = "LOUD"
        assert settings.parser.max_workers == 8
        assert settings.parser.max_depth == 64
        assert settings.logging.console_log_level == "INFO"

    def test_invalid_stored_values(self, settings: AppSettings) -> None:
        """Bad values written behind the setters' back are errors."""
        settings.settings.setValue("parser/max_workers", 0)
        settings.settings.setValue("logging/console_level", "LOUD")
        result = settings.validate()
        assert result.is_valid is False
        assert len(result.errors) == 2

    @pytest.mark.parametrize("exists", [True, False])
    def test_output_dir(self, settings: AppSettings, tmp_path: Path, exists: bool) -> None:
        """A missing output directory is only a warning."""
        out = tmp_path / "out"
        if exists:
            out.mkdir()
        settings.output.data_dir = out
        result = settings.validate()
        assert result.is_valid is True
        assert bool(result.warnings) is not exists

    def test_output_path_is_file(self, settings: AppSettings, tmp_path: Path) -> None:
        """An output path that is a file is an error."""
        out = tmp_path / "out"
        out.write_text("", encoding="utf-8")
        settings.output.data_dir = out
        assert settings.validate().is_valid is False
