# models/__init__.py
"""Export the canonical parse contract and the downstream record shapes.

This package exposes a stable import surface for the Pydantic models used by
parsers, the cascade, and converters.
"""

from .app_models import (
    ArtifactRecord,
    AspectRatio,
    CharacterEra,
    CharacterSeed,
    ConceptRecord,
    EventRecord,
    FactionRecord,
    Issue,
    LegacyBubble,
    LegacyCharacter,
    LegacyPage,
    LegacyPanel,
    LegacyParseResult,
    LocationRecord,
    LoreRecord,
    LoreType,
    RuleRecord,
    ScriptRef,
    StoryboardPage,
    StoryboardPanel,
    TextElement,
    TimelineEventRecord,
    VoiceProfile,
)
from .extraction_models import (
    ExtractedCharacter,
    ExtractedEcho,
    ExtractedLocation,
    ExtractedTimelineEntry,
    ExtractionResult,
)
from .script_models import (
    SPEAKER_REQUIRED_BLOCK_TYPES,
    Block,
    BlockType,
    CharacterRole,
    LoreCategory,
    ParsedCharacter,
    ParsedLoreEntry,
    ParsedPage,
    ParsedPanel,
    ParsedTimelineEvent,
    ParserSource,
    ProjectType,
    UnifiedParseResult,
)

__all__ = [
    "Block",
    "BlockType",
    "CharacterRole",
    "LoreCategory",
    "ParsedCharacter",
    "ParsedLoreEntry",
    "ParsedPage",
    "ParsedPanel",
    "ParsedTimelineEvent",
    "ParserSource",
    "ProjectType",
    "SPEAKER_REQUIRED_BLOCK_TYPES",
    "UnifiedParseResult",
    "ExtractedCharacter",
    "ExtractedEcho",
    "ExtractedLocation",
    "ExtractedTimelineEntry",
    "ExtractionResult",
    "ArtifactRecord",
    "AspectRatio",
    "CharacterEra",
    "CharacterSeed",
    "ConceptRecord",
    "EventRecord",
    "FactionRecord",
    "Issue",
    "LegacyBubble",
    "LegacyCharacter",
    "LegacyPage",
    "LegacyPanel",
    "LegacyParseResult",
    "LocationRecord",
    "LoreRecord",
    "LoreType",
    "RuleRecord",
    "ScriptRef",
    "StoryboardPage",
    "StoryboardPanel",
    "TextElement",
    "TimelineEventRecord",
    "VoiceProfile",
]
