# core/parsers/result_validation.py
"""Repair arbitrary collaborator output into a well-formed `UnifiedParseResult`.

`validate_canonical_result()` is the boundary between the AI collaborator and
everything downstream. It accepts any decoded JSON value and, unless called
with `strict=True`, never raises. Missing or malformed arrays become empty
lists, non-finite numbers fall back to defaults, unknown enum values map to safe
defaults, and every repair is recorded as a warning on the result.
"""

from __future__ import annotations

import math
from typing import Any

import structlog

from core.exceptions import ContractValidationError, create_error_context
from models.script_models import (
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

logger = structlog.get_logger(__name__)

MAX_NOTABLE_QUOTES = 2
DEFAULT_CONFIDENCE = 0.5


def _is_number(value: Any) -> bool:
    """True for ints and finite floats. `json.loads` accepts NaN and Infinity."""
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def _as_int(value: Any, default: int) -> int:
    return int(value) if _is_number(value) else default


def _int_list(value: Any) -> list[int]:
    if not isinstance(value, list):
        return []
    return [int(item) for item in value if _is_number(item)]


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _opt_dict(value: Any) -> dict[str, Any] | None:
    return value if isinstance(value, dict) else None


def _list_field(raw: dict[str, Any], key: str) -> list[Any]:
    value = raw.get(key)
    return value if isinstance(value, list) else []


def _repair_blocks(raw_blocks: list[Any], location: str, warnings: list[str]) -> list[Block]:
    blocks: list[Block] = []
    for raw_block in raw_blocks:
        if not isinstance(raw_block, dict):
            warnings.append(f"{location}: non-object block dropped.")
            continue
        raw_type = raw_block.get("type")
        try:
            block_type = BlockType(raw_type)
        except ValueError:
            warnings.append(f'{location}: unknown block type "{raw_type}" mapped to OTHER')
            block_type = BlockType.OTHER

        speaker = _opt_str(raw_block.get("speaker"))
        if block_type in SPEAKER_REQUIRED_BLOCK_TYPES and not speaker:
            warnings.append(f"{location}: {block_type.value} block missing speaker.")

        blocks.append(
            Block(
                type=block_type,
                text=raw_block.get("text") if isinstance(raw_block.get("text"), str) else "",
                speaker=speaker or None,
                meta=_opt_dict(raw_block.get("meta")),
            )
        )
    return blocks


def _repair_pages(raw_pages: list[Any], warnings: list[str]) -> list[ParsedPage]:
    """Drop duplicate page numbers and duplicate panel numbers within a page.

    Panel numbers that would break document-wide monotonicity are renumbered to
    continue the running count.
    """
    pages: list[ParsedPage] = []
    seen_pages: set[int] = set()
    last_panel = 0

    for raw_page in raw_pages:
        if not isinstance(raw_page, dict):
            warnings.append("Non-object page dropped.")
            continue
        page_number = _as_int(raw_page.get("page_number"), len(pages) + 1)
        if page_number in seen_pages:
            warnings.append(f"Duplicate page_number {page_number} - skipping duplicate.")
            continue
        seen_pages.add(page_number)

        panels: list[ParsedPanel] = []
        seen_panels: set[int] = set()
        raw_panels = raw_page.get("panels") if isinstance(raw_page.get("panels"), list) else []
        for raw_panel in raw_panels:
            if not isinstance(raw_panel, dict):
                warnings.append(f"Page {page_number}: non-object panel dropped.")
                continue
            written = _as_int(raw_panel.get("panel_number"), len(panels) + 1)
            if written in seen_panels:
                warnings.append(f"Page {page_number}: duplicate panel_number {written} - skipping.")
                continue
            seen_panels.add(written)

            panel_number = written
            if panel_number <= last_panel:
                panel_number = last_panel + 1
                warnings.append(f"Page {page_number}: panel_number {written} renumbered to {panel_number}.")
            last_panel = panel_number

            raw_blocks = raw_panel.get("blocks") if isinstance(raw_panel.get("blocks"), list) else []
            panels.append(
                ParsedPanel(
                    panel_number=panel_number,
                    blocks=_repair_blocks(raw_blocks, f"Page {page_number} Panel {panel_number}", warnings),
                    visual_marker=_opt_str(raw_panel.get("visual_marker")),
                    aspect_hint=_opt_str(raw_panel.get("aspect_hint")),
                )
            )

        pages.append(ParsedPage(page_number=page_number, panels=panels))
    return pages


def _repair_characters(raw_characters: list[Any], warnings: list[str]) -> list[ParsedCharacter]:
    characters: list[ParsedCharacter] = []
    for raw_char in raw_characters:
        if not isinstance(raw_char, dict):
            continue
        name = raw_char.get("name")
        if not isinstance(name, str) or not name.strip():
            warnings.append("Character without a name dropped.")
            continue

        role: CharacterRole | None = None
        raw_role = raw_char.get("role")
        if raw_role is not None:
            try:
                role = CharacterRole(raw_role)
            except ValueError:
                warnings.append(f'Character {name}: unknown role "{raw_role}" dropped.')

        quotes = _str_list(raw_char.get("notable_quotes"))
        characters.append(
            ParsedCharacter(
                name=name.strip(),
                role=role,
                description=_opt_str(raw_char.get("description")),
                pages_present=_int_list(raw_char.get("pages_present")),
                first_appearance_page=_as_int(raw_char.get("first_appearance_page"), 1),
                lines_count=max(0, _as_int(raw_char.get("lines_count"), 0)),
                notable_quotes=quotes[:MAX_NOTABLE_QUOTES] if isinstance(raw_char.get("notable_quotes"), list) else None,
            )
        )
    return characters


def _repair_lore(raw_lore: list[Any], warnings: list[str]) -> list[ParsedLoreEntry]:
    lore: list[ParsedLoreEntry] = []
    for raw_entry in raw_lore:
        if not isinstance(raw_entry, dict):
            continue
        name = raw_entry.get("name")
        description = raw_entry.get("description")
        if not isinstance(name, str) or not isinstance(description, str):
            continue

        try:
            category = LoreCategory(raw_entry.get("category"))
        except ValueError:
            warnings.append(f'Lore {name}: unknown category "{raw_entry.get("category")}" mapped to concept.')
            category = LoreCategory.CONCEPT

        raw_confidence = raw_entry.get("confidence")
        confidence = float(max(0.0, min(1.0, raw_confidence))) if _is_number(raw_confidence) else DEFAULT_CONFIDENCE

        related = raw_entry.get("related_characters")
        lore.append(
            ParsedLoreEntry(
                name=name,
                category=category,
                description=description,
                pages=_int_list(raw_entry.get("pages")),
                confidence=confidence,
                related_characters=_str_list(related) if isinstance(related, list) else None,
                metadata=_opt_dict(raw_entry.get("metadata")),
            )
        )
    return lore


def _repair_timeline(raw_timeline: list[Any]) -> list[ParsedTimelineEvent]:
    events: list[ParsedTimelineEvent] = []
    for raw_event in raw_timeline:
        if not isinstance(raw_event, dict) or not isinstance(raw_event.get("name"), str):
            continue
        events.append(
            ParsedTimelineEvent(
                name=raw_event["name"],
                description=raw_event.get("description") if isinstance(raw_event.get("description"), str) else "",
                page=_as_int(raw_event.get("page"), 0),
                characters_involved=_str_list(raw_event.get("characters_involved")),
            )
        )
    return events


def validate_canonical_result(
    raw: Any,
    *,
    project_type: ProjectType | str = ProjectType.COMIC,
    source_hash: str,
    ai_model: str | None = None,
    parser_source: ParserSource | str = ParserSource.AI,
    strict: bool = False,
) -> UnifiedParseResult:
    """Normalize any decoded value into a `UnifiedParseResult`.

    Args:
        raw: Whatever the collaborator returned after JSON decoding.
        project_type: Declared format of the script.
        source_hash: Hash of the raw script text.
        ai_model: Model identifier to record on the result.
        parser_source: Provenance to record on the result.
        strict: Raise instead of returning an empty result when `raw` is not
            an object at all.

    Returns:
        A complete result. Shape problems inside an object never raise.

    Raises:
        ContractValidationError: Only with `strict=True` and a non-object `raw`.
    """
    warnings: list[str] = []

    if not isinstance(raw, dict):
        if strict:
            raise ContractValidationError(
                "Parse result is not an object.",
                details=create_error_context(value_type=type(raw).__name__, model=ai_model),
            )
        warnings.append(f"AI response was a {type(raw).__name__}, not an object; returning an empty result.")
        logger.warning("Collaborator returned a non-object parse result", value_type=type(raw).__name__)
        return UnifiedParseResult(
            source_hash=source_hash,
            project_type=ProjectType(project_type),
            warnings=warnings,
            parser_source=ParserSource(parser_source),
            ai_model=ai_model,
        )

    warnings.extend(_str_list(raw.get("warnings")))

    pages = _repair_pages(_list_field(raw, "pages"), warnings)
    if not pages:
        warnings.append("AI returned no pages.")

    characters = _repair_characters(_list_field(raw, "characters"), warnings)
    if not characters:
        warnings.append("AI returned no characters - deterministic pass should fill these.")

    lore = _repair_lore(_list_field(raw, "lore"), warnings)
    if not lore:
        warnings.append("AI returned no lore entries - deterministic pass should extract these.")

    timeline = _repair_timeline(_list_field(raw, "timeline"))

    result = UnifiedParseResult(
        source_hash=source_hash,
        project_type=ProjectType(project_type),
        warnings=warnings,
        pages=pages,
        characters=characters,
        lore=lore,
        timeline=timeline,
        parser_source=ParserSource(parser_source),
        ai_model=ai_model,
    )
    if warnings:
        logger.debug("Canonical result repaired", warnings=len(warnings))
    return result
