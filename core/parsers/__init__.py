# core/parsers/__init__.py
"""Script parsers producing the canonical parse result.

This package contains the deterministic cascade parser, the AI-backed parser,
the validation boundary that repairs collaborator output, and the enrichment
step that cross-checks one against the other.
"""

from .ai_parser import AIScriptParser
from .deterministic_parser import compute_source_hash, detect_format, parse_deterministic
from .enrichment import enrich_parse_result
from .pipeline import parse_script, parse_script_sync
from .result_validation import validate_canonical_result

__all__ = [
    "AIScriptParser",
    "compute_source_hash",
    "detect_format",
    "enrich_parse_result",
    "parse_deterministic",
    "parse_script",
    "parse_script_sync",
    "validate_canonical_result",
]
