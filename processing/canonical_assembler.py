# processing/canonical_assembler.py
"""
Fold segmented lines and cascade registries into the canonical parse result.

Two independent passes feed this module:
- `build_page_tree()` walks the lines once for structure (pages, panels, typed
  blocks) and records which page every line sits on.
- The cascade's `ExtractionResult` supplies the entities.

The fold joins them by line number: an entity's pages come from the page its
first mention sits on plus every page it speaks on.

Numbering:
    Page and panel numbers follow the script where they can, but are forced to be
    strictly increasing across the whole document (`max(written, previous + 1)`).
    A second "Panel 1" on page 2 therefore continues the count.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from models.extraction_models import ExtractedCharacter, ExtractionResult
from models.script_models import (
    Block,
    BlockType,
    LoreCategory,
    ParsedCharacter,
    ParsedLoreEntry,
    ParsedPage,
    ParsedPanel,
    ParsedTimelineEvent,
    ProjectType,
)
from processing.block_classifier import (
    FORMAT_PATTERNS,
    SpeakerCue,
    classify_block,
    detect_visual_marker,
    header_description,
    header_number,
    infer_aspect_hint,
    is_transition,
    match_parenthetical,
    match_speaker_cue,
    slugline_location,
)
from processing.line_segmenter import ScriptLine
from utils.text_processing import (
    has_faction_keyword,
    has_location_indicator,
    identity_key,
    is_noise_word,
    is_non_character_name,
)

logger = structlog.get_logger(__name__)

LOCATION_CONFIDENCE_WITH_YEAR = 0.8
LOCATION_CONFIDENCE = 0.6
SLUGLINE_LOCATION_CONFIDENCE = 0.8
ITEM_CONFIDENCE = 0.75
FACTION_CONFIDENCE = 0.7
MAX_NOTABLE_QUOTES = 2

_SPEAKING_BLOCK_TYPES = frozenset({BlockType.DIALOGUE, BlockType.THOUGHT, BlockType.NARRATOR})
_CAPS_PHRASE_RE = re.compile(r"\b([A-Z][A-Z\s'.\-]{2,49})\b")


@dataclass
class SpeakerStats:
    name: str
    lines_count: int = 0
    pages: set[int] = field(default_factory=set)
    quotes: list[str] = field(default_factory=list)


@dataclass
class PageTree:
    pages: list[ParsedPage] = field(default_factory=list)
    # line number -> page number (0 for lines before the first page)
    line_pages: dict[int, int] = field(default_factory=dict)
    speakers: dict[str, SpeakerStats] = field(default_factory=dict)
    # (location, line number) for every INT./EXT. slugline header
    sluglines: list[tuple[str, int]] = field(default_factory=list)

    def page_of(self, line_number: int) -> int:
        return self.line_pages.get(line_number, 0)


@dataclass
class _PanelDraft:
    number: int
    blocks: list[Block] = field(default_factory=list)
    texts: list[str] = field(default_factory=list)

    def build(self) -> ParsedPanel:
        return ParsedPanel(
            panel_number=self.number,
            blocks=list(self.blocks),
            visual_marker=detect_visual_marker(self.texts),
            aspect_hint=infer_aspect_hint(self.texts),
        )


def build_page_tree(lines: Iterable[ScriptLine], project_type: ProjectType = ProjectType.COMIC) -> PageTree:
    """Walk lines once, producing pages/panels/blocks and speaker statistics.

    A panel header before any page header opens page 1; content on a page before
    its first panel header opens an implicit panel. Lines before any page are
    treated as front matter and produce no blocks. Structural markers come from
    `FORMAT_PATTERNS[project_type]`.
    """
    patterns = FORMAT_PATTERNS[project_type]
    tree = PageTree()
    page: ParsedPage | None = None
    panel: _PanelDraft | None = None
    cue: SpeakerCue | None = None
    last_page = 0
    last_panel = 0

    def close_panel() -> None:
        nonlocal panel, cue
        if panel is not None and page is not None:
            page.panels.append(panel.build())
        panel = None
        cue = None

    def open_page(written: int) -> ParsedPage:
        nonlocal last_page
        last_page = max(written, last_page + 1)
        new_page = ParsedPage(page_number=last_page)
        tree.pages.append(new_page)
        return new_page

    def open_panel(written: int) -> _PanelDraft:
        nonlocal last_panel
        last_panel = max(written, last_panel + 1)
        return _PanelDraft(number=last_panel)

    def note_slugline(line: ScriptLine) -> None:
        location = slugline_location(line.text)
        if location:
            tree.sluglines.append((location, line.number))

    for line in lines:
        text = line.text
        if line.after_blank:
            cue = None
            if patterns.beats_on_blank_lines and panel is not None:
                close_panel()

        page_match = patterns.page_break.match(text)
        if page_match:
            close_panel()
            page = open_page(header_number(page_match))
            tree.line_pages[line.number] = page.page_number
            note_slugline(line)
            continue

        panel_match = patterns.panel_break.match(text) if patterns.panel_break else None
        if panel_match:
            close_panel()
            if page is None:
                page = open_page(1)
            panel = open_panel(header_number(panel_match))
            tree.line_pages[line.number] = page.page_number
            note_slugline(line)
            description = header_description(panel_match)
            if description:
                panel.blocks.append(Block(type=BlockType.ART_NOTE, text=description))
                panel.texts.append(description)
            continue

        if page is None:
            tree.line_pages[line.number] = 0
            continue
        tree.line_pages[line.number] = page.page_number

        if is_transition(text):
            continue

        block: Block | None = None
        if patterns.speaker_cues:
            new_cue = match_speaker_cue(text)
            if new_cue is not None:
                cue = new_cue
                continue
            if cue is not None:
                parenthetical = match_parenthetical(text)
                if parenthetical is not None:
                    cue.modifier = cue.modifier or parenthetical or None
                    continue
                block = cue.block(text)

        if block is None:
            block = classify_block(text, project_type)
        if block is None:
            continue
        if panel is None:
            panel = open_panel(last_panel + 1)
        panel.blocks.append(block)
        panel.texts.append(text)

        if block.speaker and block.type in _SPEAKING_BLOCK_TYPES:
            stats = tree.speakers.setdefault(identity_key(block.speaker), SpeakerStats(name=block.speaker))
            stats.lines_count += 1
            stats.pages.add(page.page_number)
            if block.type is BlockType.DIALOGUE and len(stats.quotes) < MAX_NOTABLE_QUOTES:
                stats.quotes.append(block.text)

    close_panel()
    return tree


def _describe(character: ExtractedCharacter) -> str | None:
    parts: list[str] = []
    if character.age is not None:
        parts.append(f"Age {character.age}")
    parts.extend(character.traits)
    return ", ".join(parts) if parts else None


def fold_characters(extraction: ExtractionResult, tree: PageTree) -> list[ParsedCharacter]:
    """Build the roster in first-mention order, then add speakers the cascade missed."""
    claimed = {identity_key(loc.name) for loc in extraction.locations} | {identity_key(e.name) for e in extraction.echoes}
    roster: list[ParsedCharacter] = []
    seen: set[str] = set()

    def add(name: str, first_page: int, description: str | None) -> None:
        key = identity_key(name)
        stats = tree.speakers.get(key)
        pages = set(stats.pages) if stats else set()
        if first_page > 0:
            pages.add(first_page)
        pages_present = sorted(pages)
        roster.append(
            ParsedCharacter(
                name=name,
                description=description,
                pages_present=pages_present,
                first_appearance_page=pages_present[0] if pages_present else 1,
                lines_count=stats.lines_count if stats else 0,
                notable_quotes=list(stats.quotes[:MAX_NOTABLE_QUOTES]) if stats and stats.quotes else None,
            )
        )
        seen.add(key)

    for character in extraction.characters:
        if is_non_character_name(character.name):
            logger.debug(f"Filtered non-character: {character.name}")
            continue
        add(character.name, tree.page_of(character.first_mention), _describe(character))

    for key, stats in tree.speakers.items():
        if key in seen or key in claimed or is_noise_word(stats.name) or is_non_character_name(stats.name):
            continue
        first_page = min(stats.pages) if stats.pages else 0
        add(stats.name, first_page, None)

    return roster


def _related_characters(page: int, characters: list[ParsedCharacter]) -> list[str] | None:
    if page <= 0:
        return None
    related = [c.name for c in characters if page in c.pages_present]
    return related or None


def fold_lore(
    extraction: ExtractionResult,
    tree: PageTree,
    lines: Iterable[ScriptLine],
    characters: list[ParsedCharacter],
) -> list[ParsedLoreEntry]:
    """Sluglines and cascade locations become `location` lore, echoes `item` lore,
    and upper-case organisation phrases `faction` lore. First category to claim a
    key wins."""
    lore: list[ParsedLoreEntry] = []
    taken: set[str] = {identity_key(c.name) for c in characters}

    def add(name: str, category: LoreCategory, description: str, line: int, confidence: float, metadata: dict | None) -> None:
        key = identity_key(name)
        if key in taken:
            return
        taken.add(key)
        page = tree.page_of(line)
        lore.append(
            ParsedLoreEntry(
                name=name,
                category=category,
                description=description,
                pages=[page] if page > 0 else [],
                confidence=confidence,
                related_characters=_related_characters(page, characters),
                metadata=metadata,
            )
        )

    for name, line_number in tree.sluglines:
        add(name, LoreCategory.LOCATION, name, line_number, SLUGLINE_LOCATION_CONFIDENCE, None)

    for location in extraction.locations:
        if location.year is not None:
            add(
                location.name,
                LoreCategory.LOCATION,
                f"{location.name} ({location.year})",
                location.first_mention,
                LOCATION_CONFIDENCE_WITH_YEAR,
                {"year": location.year},
            )
        else:
            add(location.name, LoreCategory.LOCATION, location.name, location.first_mention, LOCATION_CONFIDENCE, None)

    for echo in extraction.echoes:
        add(echo.name, LoreCategory.ITEM, echo.name, echo.first_mention, ITEM_CONFIDENCE, {"type": echo.type})

    for line in lines:
        for match in _CAPS_PHRASE_RE.finditer(line.text):
            phrase = match.group(1).strip()
            if len(phrase) < 3 or is_noise_word(phrase):
                continue
            if has_location_indicator(phrase) or not has_faction_keyword(phrase):
                continue
            add(phrase, LoreCategory.FACTION, phrase, line.number, FACTION_CONFIDENCE, None)

    return lore


def fold_timeline(
    extraction: ExtractionResult,
    tree: PageTree,
    characters: list[ParsedCharacter],
) -> list[ParsedTimelineEvent]:
    events: list[ParsedTimelineEvent] = []
    for entry in extraction.timeline:
        involved = [
            c.name for c in characters if re.search(rf"\b{re.escape(c.name)}\b", entry.context, re.IGNORECASE)
        ]
        events.append(
            ParsedTimelineEvent(
                name=f"Year {entry.year}",
                description=entry.context,
                page=tree.page_of(entry.first_mention),
                characters_involved=involved,
            )
        )
    return events
