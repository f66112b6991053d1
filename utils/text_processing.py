# utils/text_processing.py
import re

import structlog

from models.constants import FACTION_KEYWORDS, LOCATION_INDICATORS, NOISE_WORDS, NON_CHARACTER_WORDS

logger = structlog.get_logger(__name__)

# Applied in order; each rewrite only ever shortens the text.
_MARKUP_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\*\*([^*]+)\*\*"), r"\1"),
    (re.compile(r"(^|\s)\*([^*\s][^*]*?)\*(\s|$)", re.MULTILINE), r"\1\2\3"),
    (re.compile(r"^#{1,6}[ \t]+", re.MULTILINE), ""),
    (re.compile(r"^>[ \t]*", re.MULTILINE), ""),
    (re.compile(r"^\|[-: \t|]+\|[ \t]*$", re.MULTILINE), ""),
)
_TABLE_ROW_RE = re.compile(r"^\|(.+?)\|[ \t]*$", re.MULTILINE)
_INLINE_RULES: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"`([^`\n]+)`"), r"\1"),
    (re.compile(r"~~([^~\n]+)~~"), r"\1"),
)

_WHITESPACE_RE = re.compile(r"\s+")
_INDICATOR_STRIP_RE = re.compile(r"[,.\-]")


def _flatten_table_row(match: re.Match[str]) -> str:
    cells = [cell.strip() for cell in match.group(1).split("|")]
    return " ".join(cell for cell in cells if cell)


def _strip_markup_once(text: str) -> str:
    for pattern, replacement in _MARKUP_RULES:
        text = pattern.sub(replacement, text)
    text = _TABLE_ROW_RE.sub(_flatten_table_row, text)
    for pattern, replacement in _INLINE_RULES:
        text = pattern.sub(replacement, text)
    return text


def normalize_markup(text: str) -> str:
    """
    Strip inline markdown so the cascade never sees emphasis or heading syntax.

    Removes bold, italic, heading markers, blockquote markers, inline code and
    strikethrough, and flattens table rows into space-separated cells. Line
    breaks and ordinary punctuation are preserved.

    The rewrite runs to a fixed point, which makes the function idempotent:
    ``normalize_markup(normalize_markup(s)) == normalize_markup(s)``.
    """
    if not isinstance(text, str) or not text:
        return ""

    current = text
    while True:
        stripped = _strip_markup_once(current)
        if stripped == current:
            break
        current = stripped

    if len(current) != len(text):
        logger.debug("Markup stripped", before=len(text), after=len(current))
    return current


def identity_key(name: str) -> str:
    """Return the dedup key for an entity name: trimmed, lower-cased, whitespace collapsed."""
    if not isinstance(name, str):
        name = str(name) if name is not None else ""
    return _WHITESPACE_RE.sub(" ", name.strip().lower())


def is_noise_word(name: str) -> bool:
    """True when the whole name is a scene-direction term or stop-word."""
    return name.strip().upper() in NOISE_WORDS


def _keyword_tokens(text: str) -> list[str]:
    return [_INDICATOR_STRIP_RE.sub("", word) for word in text.upper().split()]


def has_location_indicator(text: str) -> bool:
    """True when any whitespace-separated word (minus , . -) is a location keyword."""
    return any(token in LOCATION_INDICATORS for token in _keyword_tokens(text))


def has_faction_keyword(text: str) -> bool:
    return any(token in FACTION_KEYWORDS for token in _keyword_tokens(text))


_NON_CHARACTER_SPLIT_RE = re.compile(r"[\s\-_/]+")
_BROADCAST_RE = re.compile(r"\b(ON|FROM|VIA)\s+(RADIO|TV|SCREEN|PHONE|INTERCOM)")


def is_non_character_name(name: str) -> bool:
    """
    Detect speakers that are devices, signage or crowds.

    "RADIO", "NEWS ANCHOR ON TV" and "CROWD" are not characters even though
    they carry dialogue.
    """
    upper = name.strip().upper()
    if upper in NON_CHARACTER_WORDS:
        return True
    if any(word in NON_CHARACTER_WORDS for word in _NON_CHARACTER_SPLIT_RE.split(upper)):
        return True
    return bool(_BROADCAST_RE.search(upper))


def truncate(text: str, limit: int) -> str:
    """Cut text to at most `limit` characters."""
    return text[:limit] if len(text) > limit else text
