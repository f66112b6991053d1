# models/script_models.py
"""Define the canonical parse result shared by every parser implementation.

Both the deterministic cascade and the AI-backed parser produce a
[`UnifiedParseResult`](models/script_models.py). Downstream converters only
ever read this shape, so any field added here must carry a default.

Notes:
- `BlockType` and `LoreCategory` are closed enums. Converters match them
  exhaustively and raise on an unmapped member instead of silently defaulting.
- Field names mirror the JSON contract exactly (snake_case), so
  `model_dump(mode="json", exclude_none=True)` is the wire form.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class ProjectType(str, Enum):
    COMIC = "comic"
    SCREENPLAY = "screenplay"
    STAGE_PLAY = "stage-play"
    TV_SERIES = "tv-series"


class BlockType(str, Enum):
    ART_NOTE = "ART_NOTE"
    DIALOGUE = "DIALOGUE"
    CAPTION = "CAPTION"
    NARRATOR = "NARRATOR"
    SFX = "SFX"
    THOUGHT = "THOUGHT"
    CRAWLER = "CRAWLER"
    TITLE_CARD = "TITLE_CARD"
    OTHER = "OTHER"


# Block types that are meaningless without an attributed speaker.
SPEAKER_REQUIRED_BLOCK_TYPES: frozenset[BlockType] = frozenset({BlockType.DIALOGUE, BlockType.THOUGHT})


class CharacterRole(str, Enum):
    PROTAGONIST = "Protagonist"
    ANTAGONIST = "Antagonist"
    SUPPORTING = "Supporting"
    MINOR = "Minor"


class LoreCategory(str, Enum):
    FACTION = "faction"
    LOCATION = "location"
    EVENT = "event"
    CONCEPT = "concept"
    ARTIFACT = "artifact"
    RULE = "rule"
    ITEM = "item"


class ParserSource(str, Enum):
    AI = "ai"
    DETERMINISTIC = "deterministic"
    AI_DETERMINISTIC = "ai+deterministic"


class Block(BaseModel):
    """One typed unit of panel content."""

    type: BlockType
    text: str
    speaker: str | None = None
    meta: dict[str, Any] | None = None


class ParsedPanel(BaseModel):
    panel_number: int
    blocks: list[Block] = Field(default_factory=list)
    visual_marker: str | None = None
    aspect_hint: str | None = None


class ParsedPage(BaseModel):
    page_number: int
    panels: list[ParsedPanel] = Field(default_factory=list)


class ParsedCharacter(BaseModel):
    """Roster entry for a speaking or declared character.

    `notable_quotes` is capped at two entries wherever the result is built or
    repaired.
    """

    name: str
    role: CharacterRole | None = None
    description: str | None = None
    pages_present: list[int] = Field(default_factory=list)
    first_appearance_page: int = 1
    lines_count: int = 0
    notable_quotes: list[str] | None = None


class ParsedLoreEntry(BaseModel):
    name: str
    category: LoreCategory
    description: str
    pages: list[int] = Field(default_factory=list)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    related_characters: list[str] | None = None
    metadata: dict[str, Any] | None = None


class ParsedTimelineEvent(BaseModel):
    name: str
    description: str = ""
    page: int = 0
    characters_involved: list[str] = Field(default_factory=list)


class UnifiedParseResult(BaseModel):
    """The single output contract of every parser implementation.

    Invariants:
        - Panel numbers are globally monotonic across the document.
        - Collections are never `None`; an empty parse has empty lists and at
          least one warning.
    """

    source_hash: str
    project_type: ProjectType = ProjectType.COMIC
    warnings: list[str] = Field(default_factory=list)
    pages: list[ParsedPage] = Field(default_factory=list)
    characters: list[ParsedCharacter] = Field(default_factory=list)
    lore: list[ParsedLoreEntry] = Field(default_factory=list)
    timeline: list[ParsedTimelineEvent] = Field(default_factory=list)
    parser_source: ParserSource = ParserSource.DETERMINISTIC
    ai_model: str | None = None
    parse_duration_ms: float | None = None

    def to_json_dict(self) -> dict[str, Any]:
        """Return the wire form with optional fields omitted when unset."""
        return self.model_dump(mode="json", exclude_none=True)

    @property
    def panel_count(self) -> int:
        return sum(len(page.panels) for page in self.pages)
