"""Tests for variant resolution."""

import logging
from typing import List

import pytest

from es_parser.game_data import GameDataService
from es_parser.game_data.models import VariantStub
from es_parser.game_data.variants import (
    ResolverState,
    VariantResolver,
    add_attributes,
    structure_key,
)

from .helpers import data_file

BASE_SHIP = [
    'ship "Sparrow"',
    '\tsprite "ship/sparrow"',
    '\tthumbnail "thumbnail/sparrow"',
    "\tattributes",
    '\t\tcategory "Interceptor"',
    '\t\t"hull" 600',
    '\t\t"mass" 20',
    "\toutfits",
    '\t\t"Blaster" 2',
    "\tgun -6 -20",
    "\tgun 6 -20",
    '\tdescription "A small ship."',
]


def _variants(service: GameDataService, *variant_lines: str) -> List[dict]:
    result = service.parse_texts([("ships.txt", data_file(*BASE_SHIP, *variant_lines))])
    return result.variants


class TestDiffOrDrop:
    """Variants are kept only when they change something tracked."""

    def test_identical_sprite_dropped(self, service: GameDataService) -> None:
        """Same sprite and a description is still no change."""
        variants = _variants(
            service,
            'ship "Sparrow" "Same"',
            '\tsprite "ship/sparrow"',
            '\tdescription "Exactly the same."',
        )
        assert variants == []

    def test_new_sprite_kept(self, service: GameDataService) -> None:
        """A different sprite makes a variant."""
        variants = _variants(
            service,
            'ship "Sparrow" "Red"',
            '\tsprite "ship/sparrow-red"',
            '\t\t"frame rate" 8',
            '\tdescription "A red ship."',
        )
        assert len(variants) == 1
        variant = variants[0]
        assert variant["name"] == "Sparrow (Red)"
        assert variant["variant"] == "Red"
        assert variant["baseShip"] == "Sparrow"
        assert variant["sprite"] == "ship/sparrow-red"
        assert variant["spriteData"] == {"frameRate": 8}
        assert variant["description"] == "A red ship."
        assert variant["attributes"]["hull"] == 600

    def test_display_name_always_kept(self, service: GameDataService) -> None:
        """A display name is a change on its own."""
        variants = _variants(
            service, 'ship "Sparrow" "Named"', '\t"display name" "Swallow"'
        )
        assert [v["display name"] for v in variants] == ["Swallow"]
        assert variants[0]["description"] == "A small ship."

    def test_hardpoints_replace_base(self, service: GameDataService) -> None:
        """Any hardpoint line replaces the whole base sequence."""
        variants = _variants(service, 'ship "Sparrow" "Turret"', "\tturret 0 0")
        assert variants[0]["turrets"] == [{"x": 0.0, "y": 0.0, "turret": ""}]
        assert len(variants[0]["guns"]) == 2

    def test_outfits_override_only_when_different(self, service: GameDataService) -> None:
        """An identical loadout is no change, a different one is."""
        variants = _variants(
            service,
            'ship "Sparrow" "Same Guns"',
            "\toutfits",
            '\t\t"Blaster" 2',
            'ship "Sparrow" "Missiles"',
            "\toutfits",
            '\t\t"Meteor Missile Launcher"',
        )
        assert [v["name"] for v in variants] == ["Sparrow (Missiles)"]
        assert variants[0]["outfitMap"] == {"Meteor Missile Launcher": 1}

    def test_add_attributes(self, service: GameDataService) -> None:
        """add attributes sums numbers and replaces everything else."""
        result = service.parse_texts(
            [
                (
                    "ships.txt",
                    data_file(
                        *BASE_SHIP,
                        'ship "Sparrow" "Armored"',
                        "\tadd attributes",
                        '\t\t"hull" 100',
                        '\t\tcategory "Light Warship"',
                        '\t\t"shields" 50',
                    ),
                )
            ]
        )
        assert result.variants[0]["attributes"] == {
            "category": "Light Warship",
            "hull": 700,
            "mass": 20,
            "shields": 50,
        }
        assert result.ships[0]["attributes"]["hull"] == 600

    def test_missing_base(
        self, service: GameDataService, caplog: pytest.LogCaptureFixture
    ) -> None:
        """A variant of an unknown ship is discarded with a warning."""
        text = data_file('ship "Ghost" "Pale"', '\tsprite "ship/ghost"')
        with caplog.at_level(logging.WARNING):
            result = service.parse_texts([("ghost.txt", text)])
        assert result.variants == []
        assert "Base ship 'Ghost' not found" in caplog.text


class TestDedup:
    """Structurally identical variants collapse."""

    def test_display_name_only_difference(self, service: GameDataService) -> None:
        """Two variants differing only in display name keep the first."""
        variants = _variants(
            service,
            'ship "Sparrow" "A"',
            '\t"display name" "Alpha"',
            '\tsprite "ship/sparrow-red"',
            'ship "Sparrow" "B"',
            '\t"display name" "Beta"',
            '\tsprite "ship/sparrow-red"',
        )
        assert [v["name"] for v in variants] == ["Sparrow (A)"]

    def test_structure_key(self) -> None:
        """Hardpoint positions are part of the structure."""
        first = {"sprite": "s", "guns": [{"x": 1.0, "y": 2.0, "gun": ""}]}
        second = {"sprite": "s", "guns": [{"x": 1.0, "y": 2.0, "gun": "Blaster"}]}
        third = {"sprite": "s", "guns": [{"x": 1.0, "y": 3.0, "gun": ""}]}
        assert structure_key(first) == structure_key(second)
        assert structure_key(first) != structure_key(third)


class TestResolverLifecycle:
    """The resolver's collecting/resolving/done states."""

    def test_states(self) -> None:
        """Stubs cannot be added after resolution until reset."""
        resolver = VariantResolver()
        assert resolver.state is ResolverState.COLLECTING
        resolver.add_stubs([VariantStub("Sparrow", "Red", ['ship "Sparrow" "Red"'], 0)])
        assert resolver.resolve(lambda stub: None) == []
        assert resolver.state is ResolverState.DONE
        with pytest.raises(RuntimeError):
            resolver.add_stubs([])
        resolver.reset()
        assert resolver.state is ResolverState.COLLECTING
        assert resolver.stubs == []


def test_add_attributes_helper() -> None:
    """Booleans are not summed."""
    attributes = {"hull": 1, "flag": True, "name": "x"}
    add_attributes(attributes, {"hull": 2.5, "flag": True, "name": "y", "new": 1})
    assert attributes == {"hull": 3.5, "flag": True, "name": "y", "new": 1}
