# utils/json_utils.py
"""JSON sanitization and safe loading utilities for AI collaborator output.

Centralizes the heuristics used when a model wraps its JSON in prose or
markdown code fences.
"""

from __future__ import annotations

import json
import re
from typing import Any

_FENCE_RE = re.compile(r"^\s*```(?:json|JSON)?\s*\n?(.*?)\n?\s*```\s*$", re.DOTALL)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if present."""
    if not isinstance(text, str):
        return ""
    match = _FENCE_RE.match(text)
    return match.group(1).strip() if match else text.strip()


def extract_json_from_text(text: str) -> str | None:
    """Extract a JSON object/array substring from arbitrary text.

    Looks for the earliest '[' or '{' and the latest ']' or '}' and
    returns the substring between them if non‑empty.
    """
    if not isinstance(text, str) or not text:
        return None

    first = min([i for i in (text.find("["), text.find("{")) if i != -1] or [len(text)])
    last = max([i for i in (text.rfind("]"), text.rfind("}")) if i != -1] or [-1])
    if first < len(text) and last != -1 and last >= first:
        candidate = text[first : last + 1]
        return candidate if candidate.strip() else None
    return None


def safe_json_loads(text: str, *, expected: type | tuple[type, ...] | None = None) -> Any | None:
    """Safely json.loads text after fence stripping and extraction; optionally validate type.

    Returns None on failure or unexpected type.
    """
    if not isinstance(text, str) or not text.strip():
        return None

    unfenced = strip_code_fences(text)
    try:
        obj = json.loads(unfenced)
    except json.JSONDecodeError:
        candidate = extract_json_from_text(unfenced)
        if candidate is None:
            return None
        try:
            obj = json.loads(candidate)
        except json.JSONDecodeError:
            return None

    if expected is not None and not isinstance(obj, expected):
        return None
    return obj


def truncate_for_log(s: str, limit: int = 300) -> str:
    """Return a truncated string for logging purposes."""
    if not isinstance(s, str):
        return ""
    return s if len(s) <= limit else s[:limit] + "..."
