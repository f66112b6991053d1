# converters/legacy.py
"""Reshape the canonical result for consumers still on the pre-canonical format.

This is a compatibility boundary only. New behavior belongs in the canonical
result and the other converters; delete this module once the remaining
consumers read `UnifiedParseResult` directly.
"""

from __future__ import annotations

from models.app_models import LegacyBubble, LegacyCharacter, LegacyPage, LegacyPanel, LegacyParseResult
from models.constants import LEGACY_VISUAL_MARKERS
from models.script_models import BlockType, ParsedPanel, UnifiedParseResult

from .common import to_aspect_ratio, unmapped

DEFAULT_VISUAL_MARKER = "standard"

_DESCRIPTION_TYPES = frozenset({BlockType.ART_NOTE, BlockType.NARRATOR})

_BUBBLE_TYPES: dict[BlockType, str | None] = {
    BlockType.DIALOGUE: "dialogue",
    BlockType.THOUGHT: "thought",
    BlockType.CAPTION: "caption",
    BlockType.SFX: "sfx",
    BlockType.CRAWLER: "screen-text",
    BlockType.ART_NOTE: None,
    BlockType.NARRATOR: None,
    BlockType.TITLE_CARD: None,
    BlockType.OTHER: None,
}


def to_legacy_visual_marker(marker: str | None) -> str:
    return marker if marker in LEGACY_VISUAL_MARKERS else DEFAULT_VISUAL_MARKER


def _convert_panel(panel: ParsedPanel) -> LegacyPanel:
    bubbles: list[LegacyBubble] = []
    for block in panel.blocks:
        if block.type not in _BUBBLE_TYPES:
            raise unmapped("block type", block.type)
        bubble_type = _BUBBLE_TYPES[block.type]
        if bubble_type is not None:
            bubbles.append(LegacyBubble(type=bubble_type, text=block.text, character=block.speaker))

    return LegacyPanel(
        panel_number=panel.panel_number,
        description=" ".join(b.text for b in panel.blocks if b.type in _DESCRIPTION_TYPES).strip(),
        bubbles=bubbles,
        artist_notes=[b.text for b in panel.blocks if b.type is BlockType.ART_NOTE],
        visual_marker=to_legacy_visual_marker(panel.visual_marker),
        aspect_ratio=to_aspect_ratio(panel.aspect_hint),
    )


def to_legacy_parse_result(result: UnifiedParseResult) -> LegacyParseResult:
    """`success` is true when at least one page was parsed; `errors` are the
    warnings that mention a failure or error."""
    pages = [
        LegacyPage(page_number=page.page_number, panels=[_convert_panel(panel) for panel in page.panels])
        for page in result.pages
    ]
    characters = [
        LegacyCharacter(
            name=character.name,
            description=character.description,
            line_count=character.lines_count,
            first_appearance=f"Page {character.pages_present[0]}" if character.pages_present else None,
        )
        for character in result.characters
    ]
    return LegacyParseResult(
        success=bool(result.pages),
        pages=pages,
        characters=characters,
        errors=[w for w in result.warnings if "failure" in w or "error" in w],
        warnings=list(result.warnings),
    )
