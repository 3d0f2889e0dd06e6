"""
Variant resolution for ship definitions.

A variant header (``ship "Base" "Variant"``) only leaves a stub during the
first pass. After every file of every source has been parsed, each stub is
re-read against a deep copy of its base ship. Variants that change nothing
tracked are dropped, and structurally identical variants are collapsed.
"""

import copy
import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .block_parser import BlockParser
from .models import (
    ATTRIBUTES_KEY,
    BASE_SHIP_KEY,
    DESCRIPTION_KEY,
    DISPLAY_NAME_KEY,
    HARDPOINT_KEYS,
    NAME_KEY,
    OUTFIT_MAP_KEY,
    SPRITE_DATA_KEY,
    SPRITE_KEY,
    THUMBNAIL_KEY,
    VARIANT_KEY,
    Record,
    VariantStub,
)
from .records import read_ship_body

# Fields applied from the variant block by dedicated rules below
_HANDLED_KEYS = frozenset(
    {DISPLAY_NAME_KEY, SPRITE_KEY, SPRITE_DATA_KEY, THUMBNAIL_KEY, ATTRIBUTES_KEY, NAME_KEY}
    | set(HARDPOINT_KEYS)
)


class ResolverState(Enum):
    COLLECTING = "collecting"
    RESOLVING = "resolving"
    DONE = "done"


def add_attributes(attributes: Record, additions: Record) -> None:
    """Sum numeric additions into ``attributes``; other values replace."""
    for key, value in additions.items():
        current = attributes.get(key)
        if _is_number(current) and _is_number(value):
            attributes[key] = current + value  # type: ignore[operator]
        else:
            attributes[key] = value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _positions(points: Any) -> List[Tuple[Any, Any]]:
    if not isinstance(points, list):
        return []
    return [(p.get("x"), p.get("y")) for p in points if isinstance(p, dict)]


def structure_key(variant: Record) -> Tuple[Any, ...]:
    """Return the fields that make two variants the same ship."""
    return (
        variant.get(SPRITE_KEY),
        variant.get(THUMBNAIL_KEY),
        tuple(tuple(_positions(variant.get(key))) for key in HARDPOINT_KEYS),
        variant.get(ATTRIBUTES_KEY),
        variant.get(OUTFIT_MAP_KEY),
    )


class VariantResolver:
    """Collects variant stubs and resolves them against base ships.

    Lifecycle: stubs are added while COLLECTING; :meth:`resolve` runs once
    (RESOLVING) and leaves the resolver DONE until :meth:`reset`.
    """

    def __init__(self, block_parser: Optional[BlockParser] = None):
        self.block_parser = block_parser or BlockParser()
        self.stubs: List[VariantStub] = []
        self.own_outfits: Dict[str, List[str]] = {}
        self.state = ResolverState.COLLECTING
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def reset(self) -> None:
        self.stubs = []
        self.own_outfits = {}
        self.state = ResolverState.COLLECTING

    def add_stubs(self, stubs: List[VariantStub]) -> None:
        if self.state is not ResolverState.COLLECTING:
            raise RuntimeError(f"Cannot add variant stubs while {self.state.value}")
        self.stubs.extend(stubs)

    def resolve(
        self, find_base: Callable[[VariantStub], Optional[Record]]
    ) -> List[Tuple[VariantStub, Record]]:
        """Resolve every collected stub.

        Args:
            find_base: Returns the base ship for a stub, or None if unknown

        Returns:
            (stub, variant record) pairs for the kept variants, in stub order
        """
        self.state = ResolverState.RESOLVING
        self.logger.info(f"Processing {len(self.stubs)} ship variants...")

        kept: List[Tuple[VariantStub, Record]] = []
        seen: Dict[str, str] = {}
        for stub in self.stubs:
            base = find_base(stub)
            if base is None:
                self.logger.warning(
                    f"Base ship '{stub.base_name}' not found for variant "
                    f"'{stub.variant_name}' ({stub.source or 'unknown source'})"
                )
                continue

            variant = self.resolve_stub(stub, base)
            if variant is None:
                self.logger.debug(f"Skipped variant: {stub.full_name}")
                continue

            key = repr(structure_key(variant))
            if key in seen:
                self.logger.debug(
                    f"Skipped variant: {stub.full_name} (same as {seen[key]})"
                )
                continue
            seen[key] = stub.full_name
            kept.append((stub, variant))
            self.logger.debug(f"Added variant: {stub.full_name}")

        self.state = ResolverState.DONE
        return kept

    def resolve_stub(self, stub: VariantStub, base: Record) -> Optional[Record]:
        """Build the variant record for one stub.

        Returns:
            The variant, or None if it has no description or changes nothing
        """
        variant = copy.deepcopy(base)
        variant[NAME_KEY] = stub.full_name
        variant[VARIANT_KEY] = stub.variant_name
        variant[BASE_SHIP_KEY] = stub.base_name

        body = read_ship_body(self.block_parser, stub.lines, stub.start + 1)
        parsed = body.data
        changed = False

        if parsed.get(DISPLAY_NAME_KEY):
            variant[DISPLAY_NAME_KEY] = parsed[DISPLAY_NAME_KEY]
            changed = True

        if parsed.get(SPRITE_KEY) and parsed[SPRITE_KEY] != base.get(SPRITE_KEY):
            variant[SPRITE_KEY] = parsed[SPRITE_KEY]
            if SPRITE_DATA_KEY in parsed:
                variant[SPRITE_DATA_KEY] = parsed[SPRITE_DATA_KEY]
            else:
                variant.pop(SPRITE_DATA_KEY, None)
            changed = True

        if parsed.get(THUMBNAIL_KEY) and parsed[THUMBNAIL_KEY] != base.get(THUMBNAIL_KEY):
            variant[THUMBNAIL_KEY] = parsed[THUMBNAIL_KEY]
            changed = True

        for key in HARDPOINT_KEYS:
            points = parsed.get(key)
            if isinstance(points, list) and points:
                variant[key] = points
                changed = True

        attributes = parsed.get(ATTRIBUTES_KEY)
        if isinstance(attributes, dict) and attributes != base.get(ATTRIBUTES_KEY):
            variant[ATTRIBUTES_KEY] = attributes
            changed = True

        if body.add_attributes:
            current = variant.get(ATTRIBUTES_KEY)
            if not isinstance(current, dict):
                current = {}
                variant[ATTRIBUTES_KEY] = current
            add_attributes(current, body.add_attributes)
            changed = True

        if body.outfit_map is not None and body.outfit_map != base.get(OUTFIT_MAP_KEY):
            variant[OUTFIT_MAP_KEY] = body.outfit_map
            self.own_outfits[stub.full_name] = list(body.outfit_map)
            changed = True

        # Remaining fields override the base only where they differ
        for key, value in parsed.items():
            if key in _HANDLED_KEYS or value == base.get(key):
                continue
            variant[key] = value

        if not variant.get(DESCRIPTION_KEY):
            return None
        return variant if changed else None
