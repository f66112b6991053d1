# core/parsers/enrichment.py
"""Cross-check an AI parse result against the deterministic cascade.

The deterministic pass is treated as ground truth for things patterns are good
at (who speaks, how often, on which pages, bracketed markers, explicit years)
and as a gap filler for lore. The AI result is never mutated; a new result with
`parser_source="ai+deterministic"` is returned.
"""

from __future__ import annotations

import structlog

from core.parsers.deterministic_parser import parse_deterministic
from models.script_models import (
    LoreCategory,
    ParsedCharacter,
    ParsedLoreEntry,
    ParsedPage,
    ParserSource,
    ProjectType,
    UnifiedParseResult,
)
from processing.block_classifier import detect_visual_marker
from utils.text_processing import is_non_character_name

logger = structlog.get_logger(__name__)

PAGE_COUNT_TOLERANCE = 2
MIN_LINES_FOR_MISSED_CHARACTER = 2
LINES_COUNT_TOLERANCE = 0.5
DIVERSE_LORE_CATEGORIES = 2
EXPECTED_LORE_CATEGORIES = 3


def _overlaps(left: str, right: str) -> bool:
    """Exact or substring match, case-insensitive ("JOHN" vs "JOHN DOE")."""
    a, b = left.upper(), right.upper()
    return a == b or a in b or b in a


def _fill_visual_markers(pages: list[ParsedPage]) -> list[ParsedPage]:
    filled: list[ParsedPage] = []
    for page in pages:
        panels = []
        for panel in page.panels:
            if panel.visual_marker is None:
                marker = detect_visual_marker([block.text for block in panel.blocks])
                if marker is not None:
                    panel = panel.model_copy(update={"visual_marker": marker})
            panels.append(panel)
        filled.append(page.model_copy(update={"panels": panels}))
    return filled


def _merge_characters(
    ai_characters: list[ParsedCharacter],
    det_characters: list[ParsedCharacter],
    warnings: list[str],
) -> list[ParsedCharacter]:
    missed = [
        det
        for det in det_characters
        if det.lines_count >= MIN_LINES_FOR_MISSED_CHARACTER
        and not any(_overlaps(ai.name, det.name) for ai in ai_characters)
    ]
    for det in missed:
        warnings.append(f"AI missed character: {det.name} (added by deterministic pass).")

    det_by_name = {det.name.upper(): det for det in det_characters}
    merged: list[ParsedCharacter] = []
    for character in [*ai_characters, *missed]:
        if is_non_character_name(character.name):
            warnings.append(f'Filtered non-character: "{character.name}"')
            continue

        det = det_by_name.get(character.name.upper())
        if det is not None and det is not character:
            update: dict = {}
            deviation = abs(character.lines_count - det.lines_count)
            if det.lines_count > 0 and deviation > det.lines_count * LINES_COUNT_TOLERANCE:
                warnings.append(
                    f"lines_count corrected for {character.name}: AI said {character.lines_count}, "
                    f"deterministic found {det.lines_count}."
                )
                update["lines_count"] = det.lines_count
            pages_present = sorted(set(character.pages_present) | set(det.pages_present))
            update["pages_present"] = pages_present
            if pages_present:
                update["first_appearance_page"] = pages_present[0]
            character = character.model_copy(update=update)
        merged.append(character)
    return merged


def _merge_lore(
    ai_lore: list[ParsedLoreEntry],
    det_lore: list[ParsedLoreEntry],
    warnings: list[str],
) -> list[ParsedLoreEntry]:
    ai_categories: set[LoreCategory] = {entry.category for entry in ai_lore}
    additional: list[ParsedLoreEntry] = []

    if len(ai_categories) >= DIVERSE_LORE_CATEGORIES:
        warnings.append("AI found diverse lore; skipped deterministic lore enrichment to prevent dilution.")
    else:
        for det in det_lore:
            if det.category in ai_categories:
                continue
            additional.append(det)
            warnings.append(f"AI missed lore category '{det.category.value}': added {det.name} from deterministic pass.")

    merged = [*ai_lore, *additional]
    categories = sorted({entry.category.value for entry in merged})
    if merged and len(categories) < EXPECTED_LORE_CATEGORIES:
        warnings.append(
            f"Low lore diversity: only {len(categories)} categories found ({', '.join(categories)}). Expected 4+."
        )
    return merged


def enrich_parse_result(
    ai_result: UnifiedParseResult,
    text: str,
    project_type: ProjectType | str | None = None,
) -> UnifiedParseResult:
    """Fill gaps in an AI parse using a deterministic pass over the same text.

    Args:
        ai_result: Validated AI result.
        text: The raw script text the AI parsed.
        project_type: Format selector for the deterministic pass; defaults to the
            AI result's project type.

    Returns:
        A new result marked `ai+deterministic`.
    """
    deterministic = parse_deterministic(text, project_type or ai_result.project_type)
    warnings = list(ai_result.warnings)

    if deterministic.pages and ai_result.pages:
        ai_pages, det_pages = len(ai_result.pages), len(deterministic.pages)
        if abs(ai_pages - det_pages) > PAGE_COUNT_TOLERANCE:
            warnings.append(f"Page count mismatch: AI found {ai_pages} pages, deterministic found {det_pages}.")

    characters = _merge_characters(ai_result.characters, deterministic.characters, warnings)
    lore = _merge_lore(ai_result.lore, deterministic.lore, warnings)

    ai_timeline_names = {event.name for event in ai_result.timeline}
    timeline = [*ai_result.timeline, *(event for event in deterministic.timeline if event.name not in ai_timeline_names)]

    enriched = ai_result.model_copy(
        update={
            "warnings": warnings,
            "pages": _fill_visual_markers(ai_result.pages),
            "characters": characters,
            "lore": lore,
            "timeline": timeline,
            "parser_source": ParserSource.AI_DETERMINISTIC,
        }
    )
    logger.info(
        "Enriched AI parse with deterministic pass",
        added_warnings=len(warnings) - len(ai_result.warnings),
        characters=len(characters),
        lore=len(lore),
        timeline=len(timeline),
    )
    return enriched
