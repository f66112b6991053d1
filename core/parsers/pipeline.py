# core/parsers/pipeline.py
"""Single entry point for script parsing.

With an AI parser, the pipeline makes one AI call and (unless disabled in config)
cross-checks it against the deterministic cascade. Without one, it runs the
deterministic parser only. Converters downstream never need to know which path
produced the result.
"""

from __future__ import annotations

import structlog

import config
from core.parsers.ai_parser import AIScriptParser
from core.parsers.deterministic_parser import parse_deterministic, resolve_project_type
from core.parsers.enrichment import enrich_parse_result
from models.script_models import ProjectType, UnifiedParseResult

logger = structlog.get_logger(__name__)


async def parse_script(
    text: str,
    project_type: str | ProjectType | None = None,
    *,
    ai_parser: AIScriptParser | None = None,
    enrich: bool | None = None,
) -> UnifiedParseResult:
    """Parse `text` into the canonical result.

    Args:
        text: Raw script text.
        project_type: Format selector, or None / "auto" to detect.
        ai_parser: Optional AI parser; errors from it propagate to the caller.
        enrich: Override `config.ENABLE_DETERMINISTIC_ENRICHMENT`.
    """
    if ai_parser is None:
        return parse_deterministic(text, project_type)
    if resolve_project_type(text or "", project_type)[0] is None:
        # Unknown selector: empty result with a warning and no request.
        return parse_deterministic(text, project_type)

    result = await ai_parser.parse(text, project_type)
    should_enrich = config.ENABLE_DETERMINISTIC_ENRICHMENT if enrich is None else enrich
    if should_enrich and text and text.strip():
        return enrich_parse_result(result, text, result.project_type)
    return result


def parse_script_sync(text: str, project_type: str | ProjectType | None = None) -> UnifiedParseResult:
    """Deterministic-only parse for synchronous callers."""
    return parse_deterministic(text, project_type)
