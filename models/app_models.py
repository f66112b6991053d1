# models/app_models.py
"""Define the record shapes consumed by downstream authoring tools.

Each consumer owns its own shape:
- the storyboard editor reads `Issue` / `StoryboardPage` / `StoryboardPanel`,
- the character roster reads `CharacterSeed`,
- the lore catalogue reads the `LoreRecord` variants,
- the timeline reads `TimelineEventRecord`,
- not-yet-migrated consumers read the `Legacy*` models.

Notes:
    Consumers expect camelCase keys in a few places. Python attributes stay
    snake_case and the wire names are declared as aliases, so serialize with
    `model_dump(by_alias=True)`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class AspectRatio(str, Enum):
    WIDE = "wide"
    STD = "std"
    SQUARE = "square"
    TALL = "tall"
    PORTRAIT = "portrait"


class LoreType(str, Enum):
    FACTION = "faction"
    LOCATION = "location"
    EVENT = "event"
    CONCEPT = "concept"
    ARTIFACT = "artifact"
    RULE = "rule"


TextElementType = Literal["dialogue", "thought", "caption", "phone"]
BubbleType = Literal["dialogue", "caption", "thought", "sfx", "screen-text", "phone"]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Storyboard -------------------------------------------------------------


class TextElement(_CamelModel):
    id: str
    type: TextElementType
    content: str
    x: int
    y: int
    width: int
    height: int
    font_size: int
    color: str


class ScriptRef(_CamelModel):
    page_number: int
    panel_number: int
    start_offset: int = 0
    end_offset: int = 0
    visual_marker: str | None = None


class StoryboardPanel(_CamelModel):
    id: str
    prompt: str
    aspect_ratio: AspectRatio
    character_ids: list[str] = Field(default_factory=list)
    text_elements: list[TextElement] = Field(default_factory=list)
    x: int
    y: int
    width: int
    height: int
    script_ref: ScriptRef


class StoryboardPage(_CamelModel):
    id: str
    number: int
    panels: list[StoryboardPanel] = Field(default_factory=list)


class Issue(_CamelModel):
    id: str
    title: str
    pages: list[StoryboardPage] = Field(default_factory=list)


# --- Character roster -------------------------------------------------------


class CharacterEra(BaseModel):
    id: str
    name: str = "Origin"
    visual_tags: list[str] = Field(default_factory=list)
    age_appearance: str = ""


class VoiceProfile(BaseModel):
    samples: list[str] = Field(default_factory=list)
    style: str = ""


class CharacterSeed(BaseModel):
    """A roster record ready to be inserted; ids and timestamps are assigned on insert."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    role: str = "Supporting"
    archetype: str = ""
    eras: list[CharacterEra] = Field(default_factory=list)
    voice_profile: VoiceProfile = Field(default_factory=VoiceProfile)
    smart_tags: dict[str, Any] = Field(default_factory=dict)
    gallery: list[str] = Field(default_factory=list)
    lore_entry_ids: list[str] = Field(default_factory=list, alias="loreEntryIds")
    description: str = ""
    current_location_id: str | None = Field(default=None, alias="currentLocationId")
    status: str = "Active"
    inventory: list[str] = Field(default_factory=list)
    relationships: dict[str, Any] = Field(default_factory=dict)


# --- Lore catalogue ---------------------------------------------------------


class LoreRecordBase(_CamelModel):
    id: str
    name: str
    type: LoreType
    description: str
    tags: list[str] = Field(default_factory=list)
    related_entry_ids: list[str] = Field(default_factory=list)
    character_ids: list[str] = Field(default_factory=list)
    created_at: int
    updated_at: int


class FactionRecord(LoreRecordBase):
    type: Literal[LoreType.FACTION] = LoreType.FACTION
    ideology: str = ""
    leader: str = ""
    influence: int = 5


class LocationRecord(LoreRecordBase):
    type: Literal[LoreType.LOCATION] = LoreType.LOCATION
    region: str = ""
    climate: str = ""
    importance: str = ""


class EventRecord(LoreRecordBase):
    type: Literal[LoreType.EVENT] = LoreType.EVENT
    date: str = ""
    participants: str = ""
    consequences: str = ""


class ConceptRecord(LoreRecordBase):
    type: Literal[LoreType.CONCEPT] = LoreType.CONCEPT
    origin: str = ""
    rules: str = ""
    complexity: str = "Low"


class ArtifactRecord(LoreRecordBase):
    type: Literal[LoreType.ARTIFACT] = LoreType.ARTIFACT
    origin: str = ""
    current_holder: str = ""
    properties: str = ""


class RuleRecord(LoreRecordBase):
    type: Literal[LoreType.RULE] = LoreType.RULE
    scope: str = ""
    exceptions: str = ""
    canon_locked: bool = False


LoreRecord = FactionRecord | LocationRecord | EventRecord | ConceptRecord | ArtifactRecord | RuleRecord


# --- Timeline ---------------------------------------------------------------


class TimelineEventRecord(BaseModel):
    name: str
    description: str
    page: int
    characters_involved: list[str] = Field(default_factory=list)


# --- Legacy parse shape -----------------------------------------------------


class LegacyBubble(BaseModel):
    type: BubbleType
    text: str
    character: str | None = None


class LegacyPanel(_CamelModel):
    panel_number: int
    description: str
    bubbles: list[LegacyBubble] = Field(default_factory=list)
    artist_notes: list[str] = Field(default_factory=list)
    visual_marker: str = "standard"
    aspect_ratio: AspectRatio = AspectRatio.WIDE


class LegacyPage(_CamelModel):
    page_number: int
    panels: list[LegacyPanel] = Field(default_factory=list)


class LegacyCharacter(_CamelModel):
    name: str
    description: str | None = None
    line_count: int = 0
    first_appearance: str | None = None


class LegacyParseResult(BaseModel):
    success: bool
    pages: list[LegacyPage] = Field(default_factory=list)
    characters: list[LegacyCharacter] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
