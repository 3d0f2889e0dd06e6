"""Tests for the parsing pipeline."""

import logging
from pathlib import Path

import orjson
import pytest

from es_parser.game_data import DataSource, GameDataService
from es_parser.settings import AppSettings

from .helpers import data_file

SHIPS = data_file(
    'ship "Sparrow"',
    '\tsprite "ship/sparrow"',
    '\tdescription "A small ship."',
    'ship "Sparrow" "Red"',
    '\tsprite "ship/sparrow-red"',
)
OUTFITS = data_file('outfit "Blaster"', '\tdescription "Pew."')
EFFECTS = data_file('effect "spark"', '\tsprite "effect/spark"')


class TestPipeline:
    """parse_texts and parse_sources."""

    def test_parse_texts(self, service: GameDataService) -> None:
        """A single source yields all four collections."""
        result = service.parse_texts(
            [("ships.txt", SHIPS), ("outfits.txt", OUTFITS), ("effects.txt", EFFECTS)]
        )
        assert result.counts() == {"ships": 1, "variants": 1, "outfits": 1, "effects": 1}

    def test_idempotent(self, service: GameDataService) -> None:
        """Parsing the same input twice gives byte-identical output."""
        files = [("ships.txt", SHIPS), ("outfits.txt", OUTFITS)]
        first = orjson.dumps(service.parse_texts(files))
        second = orjson.dumps(service.parse_texts(files))
        assert first == second
        assert orjson.dumps(GameDataService().parse_texts(files)) == first

    def test_file_order_kept(self) -> None:
        """Records come out in input file order regardless of workers."""
        files = [
            (f"ships/{n:02d}.txt", data_file(f'ship "Ship {n}"', f'\tdescription "No. {n}"'))
            for n in range(40)
        ]
        service = GameDataService()
        service.max_workers = 4
        result = service.parse_texts(files)
        assert [ship["name"] for ship in result.ships] == [f"Ship {n}" for n in range(40)]

    def test_variant_across_sources(self, service: GameDataService) -> None:
        """A plugin's variant may build on a base game ship."""
        results = service.parse_sources(
            [
                (DataSource("base"), [("ships.txt", SHIPS)]),
                (
                    DataSource("plugin"),
                    [("more.txt", data_file('ship "Sparrow" "Blue"', '\tsprite "ship/blue"'))],
                ),
            ]
        )
        assert list(results) == ["base", "plugin"]
        assert [v["name"] for v in results["base"].variants] == ["Sparrow (Red)"]
        assert [v["name"] for v in results["plugin"].variants] == ["Sparrow (Blue)"]
        assert results["plugin"].ships == []

    def test_variant_outfits_get_variant_governments(self, service: GameDataService) -> None:
        """Outfits carried only by a variant inherit the variant's governments."""
        text = data_file(
            'ship "Sparrow"',
            '\tdescription "A small ship."',
            'ship "Sparrow" "Laser"',
            "\toutfits",
            '\t\t"Beam Laser"',
            'outfit "Beam Laser"',
            '\tdescription "Zap."',
            'fleet "Raiders"',
            '\tgovernment "Pirates"',
            "\tvariant",
            '\t\t"Sparrow (Laser)"',
        )
        result = service.parse_texts([("data.txt", text)])
        assert result.variants[0]["governments"] == {"Pirates": True}
        assert result.outfits[0]["governments"] == {"Pirates": True}
        assert result.ships[0]["governments"] == {}

    def test_empty_source_present(self, service: GameDataService) -> None:
        """Sources without files still get an (empty) result."""
        results = service.parse_sources([(DataSource("empty"), [])])
        assert results["empty"].counts() == {
            "ships": 0,
            "variants": 0,
            "outfits": 0,
            "effects": 0,
        }

    def test_failed_file_is_skipped(
        self,
        service: GameDataService,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """One broken file is logged and the rest of the batch survives."""
        original = service.loader.parser.parse_text

        def parse_text(text: str, path: str = ""):
            if path == "bad.txt":
                raise ValueError("boom")
            return original(text, path)

        monkeypatch.setattr(service.loader.parser, "parse_text", parse_text)
        with caplog.at_level(logging.ERROR):
            result = service.parse_texts([("bad.txt", OUTFITS), ("ships.txt", SHIPS)])
        assert [ship["name"] for ship in result.ships] == ["Sparrow"]
        assert result.outfits == []
        assert "Error parsing data file bad.txt: boom" in caplog.text


class TestSettingsIntegration:
    """Settings that change the pipeline."""

    def test_plugin_fallback(self, settings: AppSettings) -> None:
        """With the plugin fallback, unmatched records get the source label."""
        settings.species.plugin_fallback = True
        service = GameDataService(settings)
        results = service.parse_sources(
            [(DataSource("mine", display_name="My Ships"), [("ships.txt", SHIPS)])]
        )
        assert results["mine"].ships[0]["governments"] == {"My Ships": True}

    def test_default_no_fallback(self, settings: AppSettings) -> None:
        """Without fallbacks, unmatched records get no governments."""
        result = GameDataService(settings).parse_texts([("ships.txt", SHIPS)])
        assert result.ships[0]["governments"] == {}

    def test_max_depth(self, settings: AppSettings) -> None:
        """The nesting limit comes from settings."""
        settings.parser.max_depth = 3
        service = GameDataService(settings)
        assert service.loader.parser.block_parser.max_depth == 3
        assert service.variants.block_parser is service.loader.parser.block_parser


def test_parse_directories(tmp_path: Path, service: GameDataService) -> None:
    """Local checkouts are read and parsed."""
    checkout = tmp_path / "plugin"
    (checkout / "data" / "ships").mkdir(parents=True)
    (checkout / "data" / "ships" / "sparrow.txt").write_text(SHIPS, encoding="utf-8")
    (checkout / "notes.txt").write_text(OUTFITS, encoding="utf-8")

    results = service.parse_directories([DataSource("plugin", path=str(checkout))])
    assert results["plugin"].counts()["ships"] == 1
    assert results["plugin"].outfits == []
