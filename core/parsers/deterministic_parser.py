# core/parsers/deterministic_parser.py
"""Parse scripts into the canonical result without any network calls.

The pipeline is normalize -> segment -> cascade -> assemble. It never raises for
content: degenerate input produces an empty result with explanatory warnings.
Page and panel structure follows the selected format; the entity cascade is the
same for every format.
"""

from __future__ import annotations

import hashlib
import re
import time

import structlog

import config
from models.script_models import ParserSource, ProjectType, UnifiedParseResult
from processing.canonical_assembler import build_page_tree, fold_characters, fold_lore, fold_timeline
from processing.extraction_rules import run_cascade
from processing.line_segmenter import segment
from utils.text_processing import normalize_markup

logger = structlog.get_logger(__name__)

FORMAT_DETECTION_LINES = 100

EMPTY_INPUT_WARNING = "Empty script: nothing to parse."
NO_PAGES_WARNING = "No pages detected. Check that script uses recognized page/panel headers."
NO_CHARACTERS_WARNING = "No characters detected. Check that dialogue follows NAME: text format."

_COMIC_PAGE_RE = re.compile(r"^PAGE\s+\d+", re.IGNORECASE | re.MULTILINE)
_COMIC_PANEL_RE = re.compile(r"^Panel\s+\d+", re.IGNORECASE | re.MULTILINE)
_SLUGLINE_RE = re.compile(r"^(INT|EXT|INT/EXT)\.\s", re.MULTILINE)
_STAGE_ACT_RE = re.compile(r"^ACT\s+(ONE|TWO|THREE|FOUR|FIVE|I|II|III|IV|V)\b", re.IGNORECASE | re.MULTILINE)
_STAGE_SCENE_RE = re.compile(r"^SCENE", re.IGNORECASE | re.MULTILINE)
_TV_OPENER_RE = re.compile(r"^(COLD OPEN|TEASER|ACT ONE)", re.IGNORECASE | re.MULTILINE)


def compute_source_hash(text: str) -> str:
    """SHA-256 hex digest of the raw, un-normalized input."""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def detect_format(text: str) -> ProjectType:
    """Guess the script format from the first lines; falls back to comic."""
    head = "\n".join(text.splitlines()[:FORMAT_DETECTION_LINES])

    if _COMIC_PAGE_RE.search(head) and _COMIC_PANEL_RE.search(head):
        return ProjectType.COMIC
    # TV is checked before screenplay since TV scripts also carry sluglines.
    if _TV_OPENER_RE.search(head) and _SLUGLINE_RE.search(head):
        return ProjectType.TV_SERIES
    if _SLUGLINE_RE.search(head):
        return ProjectType.SCREENPLAY
    if _STAGE_ACT_RE.search(head) and _STAGE_SCENE_RE.search(head):
        return ProjectType.STAGE_PLAY
    return ProjectType.COMIC


def resolve_project_type(text: str, selector: str | ProjectType | None) -> tuple[ProjectType | None, list[str]]:
    """Turn a caller-supplied format selector into a project type.

    `None` and `"auto"` trigger detection. An unknown selector resolves to None
    with a warning; callers return an empty result for it.
    """
    if isinstance(selector, ProjectType):
        return selector, []
    if selector is None or str(selector).strip().lower() == "auto":
        return detect_format(text), []
    try:
        return ProjectType(str(selector).strip().lower()), []
    except ValueError:
        return None, [unknown_format_warning(selector)]


def unknown_format_warning(selector: object) -> str:
    return f"Unknown format '{selector}'; returning an empty result."


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


def parse_deterministic(text: str | None, project_type: str | ProjectType | None = None) -> UnifiedParseResult:
    """Parse a script with the pattern cascade.

    Args:
        text: Raw script text; `None` is treated as empty.
        project_type: Format selector (`comic`, `screenplay`, ..., `auto`, or None).

    Returns:
        A fresh `UnifiedParseResult` with `parser_source="deterministic"`.
    """
    started = time.perf_counter()
    raw = text if isinstance(text, str) else ""
    source_hash = compute_source_hash(raw)

    if not raw.strip():
        logger.info("Deterministic parse skipped: empty input")
        return UnifiedParseResult(
            source_hash=source_hash,
            project_type=ProjectType(config.DEFAULT_PROJECT_TYPE),
            warnings=[EMPTY_INPUT_WARNING],
            parser_source=ParserSource.DETERMINISTIC,
            parse_duration_ms=_elapsed_ms(started),
        )

    effective_type, warnings = resolve_project_type(raw, project_type)
    if effective_type is None:
        logger.warning("Unknown format selector", selector=str(project_type))
        return UnifiedParseResult(
            source_hash=source_hash,
            project_type=ProjectType(config.DEFAULT_PROJECT_TYPE),
            warnings=warnings,
            parser_source=ParserSource.DETERMINISTIC,
            parse_duration_ms=_elapsed_ms(started),
        )

    lines = segment(normalize_markup(raw))
    extraction = run_cascade(lines)
    tree = build_page_tree(lines, effective_type)
    characters = fold_characters(extraction, tree)
    lore = fold_lore(extraction, tree, lines, characters)
    timeline = fold_timeline(extraction, tree, characters)

    if not tree.pages:
        warnings.append(NO_PAGES_WARNING)
    if not characters:
        warnings.append(NO_CHARACTERS_WARNING)

    result = UnifiedParseResult(
        source_hash=source_hash,
        project_type=effective_type,
        warnings=warnings,
        pages=tree.pages,
        characters=characters,
        lore=lore,
        timeline=timeline,
        parser_source=ParserSource.DETERMINISTIC,
        parse_duration_ms=_elapsed_ms(started),
    )
    logger.info(
        "Deterministic parse complete",
        pages=len(result.pages),
        panels=result.panel_count,
        characters=len(result.characters),
        lore=len(result.lore),
        timeline=len(result.timeline),
        warnings=len(result.warnings),
    )
    return result
