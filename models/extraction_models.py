# models/extraction_models.py
"""Entity records produced by the comic pattern cascade.

Records are frozen. The registries in
[`processing.entity_registry`](processing/entity_registry.py) replace a record with
a merged copy instead of mutating it, so anything handed back to a caller stays
stable.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ExtractedCharacter(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    age: int | None = None
    traits: tuple[str, ...] = ()
    first_mention: int


class ExtractedLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    year: int | None = None
    first_mention: int


class ExtractedTimelineEntry(BaseModel):
    """A plausible year and the line it was first seen on."""

    model_config = ConfigDict(frozen=True)

    year: int
    context: str
    first_mention: int


class ExtractedEcho(BaseModel):
    """A salient object such as a weapon or keepsake."""

    model_config = ConfigDict(frozen=True)

    name: str
    type: Literal["object"] = "object"
    first_mention: int


class ExtractionResult(BaseModel):
    """The four entity collections, each in first-mention order."""

    model_config = ConfigDict(frozen=True)

    characters: list[ExtractedCharacter] = Field(default_factory=list)
    locations: list[ExtractedLocation] = Field(default_factory=list)
    timeline: list[ExtractedTimelineEntry] = Field(default_factory=list)
    echoes: list[ExtractedEcho] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.characters or self.locations or self.timeline or self.echoes)
