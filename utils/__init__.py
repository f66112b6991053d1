# utils/__init__.py
"""General text and JSON helpers shared by the parsers and converters."""

from .json_utils import extract_json_from_text, safe_json_loads, strip_code_fences, truncate_for_log
from .text_processing import (
    has_faction_keyword,
    has_location_indicator,
    identity_key,
    is_noise_word,
    is_non_character_name,
    normalize_markup,
    truncate,
)

__all__ = [
    "extract_json_from_text",
    "has_faction_keyword",
    "has_location_indicator",
    "identity_key",
    "is_noise_word",
    "is_non_character_name",
    "normalize_markup",
    "safe_json_loads",
    "strip_code_fences",
    "truncate",
    "truncate_for_log",
]
