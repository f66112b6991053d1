# converters/lore.py
"""Convert parsed lore entries into typed lore records.

Every `LoreCategory` maps to exactly one record type. `item` has no record type
of its own and takes the artifact shape. Type-specific fields are read from the
entry's `metadata` when present.
"""

from __future__ import annotations

from typing import Any

from models.app_models import (
    ArtifactRecord,
    ConceptRecord,
    EventRecord,
    FactionRecord,
    LocationRecord,
    LoreRecord,
    LoreType,
    RuleRecord,
)
from models.script_models import LoreCategory, ParsedLoreEntry, UnifiedParseResult

from .common import Clock, IdFactory, new_id, now_ms, unmapped

AUTO_EXTRACTED_TAG = "auto-extracted"

CATEGORY_TO_LORE_TYPE: dict[LoreCategory, LoreType] = {
    LoreCategory.FACTION: LoreType.FACTION,
    LoreCategory.LOCATION: LoreType.LOCATION,
    LoreCategory.EVENT: LoreType.EVENT,
    LoreCategory.CONCEPT: LoreType.CONCEPT,
    LoreCategory.ARTIFACT: LoreType.ARTIFACT,
    LoreCategory.RULE: LoreType.RULE,
    LoreCategory.ITEM: LoreType.ARTIFACT,
}


def _meta_str(metadata: dict[str, Any], key: str, default: str = "") -> str:
    value = metadata.get(key)
    return str(value) if value not in (None, "") else default


def _faction(entry: ParsedLoreEntry, base: dict[str, Any], metadata: dict[str, Any]) -> FactionRecord:
    influence = metadata.get("influence")
    return FactionRecord(
        **base,
        ideology=_meta_str(metadata, "ideology"),
        leader=_meta_str(metadata, "leader"),
        influence=influence if isinstance(influence, int) and not isinstance(influence, bool) and influence else 5,
    )


def _location(entry: ParsedLoreEntry, base: dict[str, Any], metadata: dict[str, Any]) -> LocationRecord:
    return LocationRecord(
        **base,
        region=_meta_str(metadata, "region"),
        climate=_meta_str(metadata, "climate"),
        importance=_meta_str(metadata, "importance"),
    )


def _event(entry: ParsedLoreEntry, base: dict[str, Any], metadata: dict[str, Any]) -> EventRecord:
    return EventRecord(
        **base,
        date=_meta_str(metadata, "date"),
        participants=", ".join(entry.related_characters or []),
        consequences=_meta_str(metadata, "consequences"),
    )


def _concept(entry: ParsedLoreEntry, base: dict[str, Any], metadata: dict[str, Any]) -> ConceptRecord:
    return ConceptRecord(
        **base,
        origin=_meta_str(metadata, "origin"),
        rules=_meta_str(metadata, "rules"),
        complexity=_meta_str(metadata, "complexity", "Low"),
    )


def _artifact(entry: ParsedLoreEntry, base: dict[str, Any], metadata: dict[str, Any]) -> ArtifactRecord:
    return ArtifactRecord(
        **base,
        origin=_meta_str(metadata, "origin"),
        current_holder=_meta_str(metadata, "currentHolder"),
        properties=_meta_str(metadata, "properties"),
    )


def _rule(entry: ParsedLoreEntry, base: dict[str, Any], metadata: dict[str, Any]) -> RuleRecord:
    return RuleRecord(
        **base,
        scope=_meta_str(metadata, "scope"),
        exceptions=_meta_str(metadata, "exceptions"),
        canon_locked=metadata.get("canonLocked") is True,
    )


_BUILDERS = {
    LoreType.FACTION: _faction,
    LoreType.LOCATION: _location,
    LoreType.EVENT: _event,
    LoreType.CONCEPT: _concept,
    LoreType.ARTIFACT: _artifact,
    LoreType.RULE: _rule,
}


def to_lore_record(entry: ParsedLoreEntry, *, id_factory: IdFactory = new_id, clock: Clock = now_ms) -> LoreRecord:
    """Convert one entry.

    Raises:
        ValueError: If the category or its lore type has no conversion.
    """
    lore_type = CATEGORY_TO_LORE_TYPE.get(entry.category)
    if lore_type is None:
        raise unmapped("lore category", entry.category)
    builder = _BUILDERS.get(lore_type)
    if builder is None:
        raise unmapped("lore type", lore_type)

    timestamp = clock()
    base = {
        "id": id_factory(),
        "name": entry.name,
        "description": entry.description,
        "tags": [AUTO_EXTRACTED_TAG, entry.category.value],
        "related_entry_ids": [],
        "character_ids": [],
        "created_at": timestamp,
        "updated_at": timestamp,
    }
    return builder(entry, base, entry.metadata or {})


def to_lore_records(
    result: UnifiedParseResult,
    *,
    id_factory: IdFactory = new_id,
    clock: Clock = now_ms,
) -> list[LoreRecord]:
    return [to_lore_record(entry, id_factory=id_factory, clock=clock) for entry in result.lore]
