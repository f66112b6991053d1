# processing/entity_registry.py
"""
Append-or-merge registries for characters, locations, timeline years and echoes.

One `EntityRegistry` is created per cascade run and discarded afterwards; there is
no module-level state. Every insertion goes through the same gate:

1. Noise words are never registered, in any registry.
2. Names are keyed by [`identity_key()`](utils/text_processing.py).
3. A key lives in at most one of characters, locations and echoes. Precedence is
   character > location > echo: a higher-ranked registration evicts a lower-ranked
   entry with the same key, and a lower-ranked one is refused.
4. Re-encountering a key merges: list fields gain unseen values in first-seen order,
   empty fields are backfilled, populated fields are never overwritten.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from models.extraction_models import (
    ExtractedCharacter,
    ExtractedEcho,
    ExtractedLocation,
    ExtractedTimelineEntry,
    ExtractionResult,
)
from utils.text_processing import identity_key, is_noise_word

logger = structlog.get_logger(__name__)


def merge_traits(existing: Iterable[str], incoming: Iterable[str]) -> tuple[str, ...]:
    """Ordered union: existing traits first, then unseen incoming traits."""
    merged: list[str] = []
    for trait in (*existing, *incoming):
        cleaned = trait.strip()
        if cleaned and cleaned not in merged:
            merged.append(cleaned)
    return tuple(merged)


class EntityRegistry:
    """Call-local keyed collections built up while the cascade walks the lines."""

    def __init__(self) -> None:
        self._characters: dict[str, ExtractedCharacter] = {}
        self._locations: dict[str, ExtractedLocation] = {}
        self._timeline: dict[int, ExtractedTimelineEntry] = {}
        self._echoes: dict[str, ExtractedEcho] = {}

    @staticmethod
    def _admissible_key(name: str) -> str | None:
        if not name or not name.strip() or is_noise_word(name):
            return None
        return identity_key(name)

    def owner_of(self, name: str) -> str | None:
        """Return which registry (if any) currently claims `name`."""
        key = identity_key(name)
        if key in self._characters:
            return "character"
        if key in self._locations:
            return "location"
        if key in self._echoes:
            return "echo"
        return None

    def add_character(
        self,
        name: str,
        line: int,
        age: int | None = None,
        traits: Iterable[str] = (),
        source: str = "",
    ) -> bool:
        """Register or merge a character.

        Returns:
            True when a new character was created.
        """
        key = self._admissible_key(name)
        if key is None:
            return False

        existing = self._characters.get(key)
        if existing is not None:
            merged_traits = merge_traits(existing.traits, traits)
            merged_age = existing.age if existing.age is not None else age
            if merged_traits != existing.traits or merged_age != existing.age:
                self._characters[key] = existing.model_copy(update={"traits": merged_traits, "age": merged_age})
                logger.debug(f"Merged character: {existing.name}", traits=list(merged_traits), age=merged_age, rule=source)
            return False

        for lower_rank in (self._locations, self._echoes):
            evicted = lower_rank.pop(key, None)
            if evicted is not None:
                logger.debug(f"Character claim evicted {type(evicted).__name__}: {evicted.name}")

        self._characters[key] = ExtractedCharacter(
            name=name.strip(),
            age=age,
            traits=merge_traits((), traits),
            first_mention=line,
        )
        logger.debug(f"Found character: {name.strip()}", age=age, rule=source, line=line)
        return True

    def add_location(self, name: str, line: int, year: int | None = None, source: str = "") -> bool:
        """Register a location unless the key is already a character.

        Returns:
            True when a new location was created.
        """
        key = self._admissible_key(name)
        if key is None or key in self._characters:
            return False

        existing = self._locations.get(key)
        if existing is not None:
            if existing.year is None and year is not None:
                self._locations[key] = existing.model_copy(update={"year": year})
            return False

        evicted = self._echoes.pop(key, None)
        if evicted is not None:
            logger.debug(f"Location claim evicted echo: {evicted.name}")

        self._locations[key] = ExtractedLocation(name=name.strip(), year=year, first_mention=line)
        logger.debug(f"Found location: {name.strip()}", year=year, rule=source, line=line)
        return True

    def add_timeline(self, year: int, context: str, line: int) -> bool:
        """Record a year; the first occurrence wins and later ones are ignored."""
        if year in self._timeline:
            return False
        self._timeline[year] = ExtractedTimelineEntry(year=year, context=context, first_mention=line)
        logger.debug(f"Found timeline year: {year}", line=line)
        return True

    def add_echo(self, name: str, line: int, source: str = "") -> bool:
        """Register an echo unless a character or location already owns the key."""
        key = self._admissible_key(name)
        if key is None or key in self._characters or key in self._locations or key in self._echoes:
            return False
        self._echoes[key] = ExtractedEcho(name=name.strip(), first_mention=line)
        logger.debug(f"Found echo: {name.strip()}", rule=source, line=line)
        return True

    def snapshot(self) -> ExtractionResult:
        return ExtractionResult(
            characters=list(self._characters.values()),
            locations=list(self._locations.values()),
            timeline=list(self._timeline.values()),
            echoes=list(self._echoes.values()),
        )
