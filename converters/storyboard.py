# converters/storyboard.py
"""Convert a canonical parse result into a storyboard issue.

Panels are laid out on a three-column grid in document order within each page.
The panel prompt is the visual description of the panel (art notes, narration,
captions and bracketed SFX); spoken text becomes stacked text elements.
"""

from __future__ import annotations

import config
from models.app_models import Issue, ScriptRef, StoryboardPage, StoryboardPanel, TextElement
from models.script_models import Block, BlockType, ParsedPage, ParsedPanel, UnifiedParseResult

from .common import IdFactory, new_id, to_aspect_ratio, unmapped

GRID_COLUMNS = 3
PANEL_ORIGIN = 40
PANEL_WIDTH = 360
PANEL_HEIGHT = 420
COLUMN_STRIDE = 400
ROW_STRIDE = 480

TEXT_ORIGIN = 20
TEXT_STRIDE = 60
TEXT_WIDTH = 200
TEXT_HEIGHT = 50
TEXT_FONT_SIZE = 12
TEXT_COLOR = "#000000"

# None means the block contributes to neither the prompt nor the text elements.
_PROMPT_PARTS: dict[BlockType, str | None] = {
    BlockType.ART_NOTE: "{text}",
    BlockType.NARRATOR: "{text}",
    BlockType.CAPTION: "{text}",
    BlockType.SFX: "[SFX: {text}]",
    BlockType.DIALOGUE: None,
    BlockType.THOUGHT: None,
    BlockType.CRAWLER: None,
    BlockType.TITLE_CARD: None,
    BlockType.OTHER: None,
}

_TEXT_ELEMENT_TYPES: dict[BlockType, str | None] = {
    BlockType.DIALOGUE: "dialogue",
    BlockType.THOUGHT: "thought",
    BlockType.CAPTION: "caption",
    BlockType.CRAWLER: "phone",
    BlockType.SFX: "caption",
    BlockType.ART_NOTE: None,
    BlockType.NARRATOR: None,
    BlockType.TITLE_CARD: None,
    BlockType.OTHER: None,
}


def build_prompt(blocks: list[Block]) -> str:
    parts: list[str] = []
    for block in blocks:
        if block.type not in _PROMPT_PARTS:
            raise unmapped("block type", block.type)
        template = _PROMPT_PARTS[block.type]
        if template is not None:
            parts.append(template.format(text=block.text))
    return " ".join(parts).strip()


def build_text_elements(blocks: list[Block], id_factory: IdFactory = new_id) -> list[TextElement]:
    elements: list[TextElement] = []
    for block in blocks:
        if block.type not in _TEXT_ELEMENT_TYPES:
            raise unmapped("block type", block.type)
        element_type = _TEXT_ELEMENT_TYPES[block.type]
        if element_type is None:
            continue
        elements.append(
            TextElement(
                id=id_factory(),
                type=element_type,
                content=f"{block.speaker}: {block.text}" if block.speaker else block.text,
                x=TEXT_ORIGIN,
                y=TEXT_ORIGIN + len(elements) * TEXT_STRIDE,
                width=TEXT_WIDTH,
                height=TEXT_HEIGHT,
                font_size=TEXT_FONT_SIZE,
                color=TEXT_COLOR,
            )
        )
    return elements


def _convert_panel(page: ParsedPage, panel: ParsedPanel, index: int, id_factory: IdFactory) -> StoryboardPanel:
    return StoryboardPanel(
        id=id_factory(),
        prompt=build_prompt(panel.blocks),
        aspect_ratio=to_aspect_ratio(panel.aspect_hint),
        character_ids=[],
        text_elements=build_text_elements(panel.blocks, id_factory),
        x=PANEL_ORIGIN + (index % GRID_COLUMNS) * COLUMN_STRIDE,
        y=PANEL_ORIGIN + (index // GRID_COLUMNS) * ROW_STRIDE,
        width=PANEL_WIDTH,
        height=PANEL_HEIGHT,
        script_ref=ScriptRef(
            page_number=page.page_number,
            panel_number=panel.panel_number,
            visual_marker=panel.visual_marker,
        ),
    )


def to_storyboard_issue(
    result: UnifiedParseResult,
    issue_title: str | None = None,
    *,
    id_factory: IdFactory = new_id,
) -> Issue:
    """Build an `Issue` with one storyboard page per parsed page.

    Character ids are left empty; linking characters to panels happens after
    the roster is inserted.
    """
    pages = [
        StoryboardPage(
            id=id_factory(),
            number=page.page_number,
            panels=[_convert_panel(page, panel, index, id_factory) for index, panel in enumerate(page.panels)],
        )
        for page in result.pages
    ]
    return Issue(id=id_factory(), title=issue_title or config.DEFAULT_ISSUE_TITLE, pages=pages)
