# converters/characters.py
"""Convert parsed characters into roster seeds."""

from __future__ import annotations

from models.app_models import CharacterEra, CharacterSeed, VoiceProfile
from models.script_models import ParsedCharacter, UnifiedParseResult

from .common import IdFactory, new_id

DEFAULT_ROLE = "Supporting"
DEFAULT_ERA_NAME = "Origin"


def describe_presence(character: ParsedCharacter) -> str:
    """Fallback description when the parser produced none."""
    return f"Appears on {len(character.pages_present)} page(s), {character.lines_count} line(s)."


def to_character_seeds(result: UnifiedParseResult, *, id_factory: IdFactory = new_id) -> list[CharacterSeed]:
    """One seed per parsed character, each with a single default era.

    The seed's `smart_tags["source"]` records which parser produced it.
    """
    return [
        CharacterSeed(
            name=character.name,
            role=character.role.value if character.role else DEFAULT_ROLE,
            eras=[CharacterEra(id=id_factory(), name=DEFAULT_ERA_NAME)],
            voice_profile=VoiceProfile(samples=list(character.notable_quotes or [])),
            smart_tags={"source": result.parser_source.value},
            description=character.description or describe_presence(character),
        )
        for character in result.characters
    ]
