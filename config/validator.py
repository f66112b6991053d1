# config/validator.py
"""
Configuration validation utilities.

`validate_all()` performs cross‑field sanity checks that cannot be expressed
purely with Pydantic field validators and returns a structured health report:

{
    "overall_health": "healthy" | "warning" | "error",
    "issues": {
        "errors":   [{ "field": "<field>", "message": "<msg>" }, ...],
        "warnings": [{ "field": "<field>", "message": "<msg>" }, ...],
        "info":     [{ "field": "<field>", "message": "<msg>" }, ...],
    }
}
"""

from __future__ import annotations

from typing import Any

from models.script_models import ProjectType


def _add_issue(
    issues: dict[str, list[dict[str, str]]],
    severity: str,
    field: str,
    message: str,
) -> None:
    """Utility to append an issue entry to the report."""
    issues.setdefault(severity, []).append({"field": field, "message": message})


def validate_all(current_settings: Any | None = None) -> dict:
    """
    Validate the current (or a supplied) configuration.

    Returns a health‑report dict with overall status and detailed issue lists.
    """
    if current_settings is None:
        import config

        current_settings = config.settings

    issues: dict[str, list[dict[str, str]]] = {"errors": [], "warnings": [], "info": []}

    if current_settings.MIN_VALID_YEAR > current_settings.MAX_VALID_YEAR:
        _add_issue(
            issues,
            "errors",
            "MIN_VALID_YEAR",
            f"MIN_VALID_YEAR ({current_settings.MIN_VALID_YEAR}) must not exceed MAX_VALID_YEAR ({current_settings.MAX_VALID_YEAR}).",
        )
    elif current_settings.MIN_VALID_YEAR < 1000 or current_settings.MAX_VALID_YEAR > 9999:
        _add_issue(
            issues,
            "errors",
            "MAX_VALID_YEAR",
            "Year bounds must stay within four-digit years (1000-9999).",
        )

    if current_settings.MIN_LOCATION_NAME_LENGTH < 1:
        _add_issue(issues, "errors", "MIN_LOCATION_NAME_LENGTH", "MIN_LOCATION_NAME_LENGTH must be >= 1.")
    if current_settings.MIN_LOCATION_NAME_LENGTH > current_settings.MAX_LOCATION_NAME_LENGTH:
        _add_issue(
            issues,
            "errors",
            "MAX_LOCATION_NAME_LENGTH",
            (
                f"MAX_LOCATION_NAME_LENGTH ({current_settings.MAX_LOCATION_NAME_LENGTH}) must be >= "
                f"MIN_LOCATION_NAME_LENGTH ({current_settings.MIN_LOCATION_NAME_LENGTH})."
            ),
        )

    if current_settings.MAX_CONTEXT_LENGTH < current_settings.MAX_LOCATION_NAME_LENGTH:
        _add_issue(
            issues,
            "warnings",
            "MAX_CONTEXT_LENGTH",
            "MAX_CONTEXT_LENGTH is shorter than MAX_LOCATION_NAME_LENGTH; slug locations may be cut off.",
        )

    try:
        ProjectType(current_settings.DEFAULT_PROJECT_TYPE)
    except ValueError:
        _add_issue(
            issues,
            "errors",
            "DEFAULT_PROJECT_TYPE",
            f"DEFAULT_PROJECT_TYPE '{current_settings.DEFAULT_PROJECT_TYPE}' is not one of {[p.value for p in ProjectType]}.",
        )

    if not (0.0 <= current_settings.AI_PARSER_TEMPERATURE <= 2.0):
        _add_issue(
            issues,
            "warnings",
            "AI_PARSER_TEMPERATURE",
            f"AI_PARSER_TEMPERATURE = {current_settings.AI_PARSER_TEMPERATURE} is outside the recommended range 0.0‑2.0.",
        )

    for name in ("MAX_CONCURRENT_LLM_CALLS", "AI_PARSER_MAX_TOKENS", "HTTPX_TIMEOUT"):
        value = getattr(current_settings, name)
        if value <= 0:
            _add_issue(issues, "errors", name, f"{name} must be > 0; got {value}.")

    if not current_settings.OPENAI_API_KEY:
        _add_issue(
            issues,
            "info",
            "OPENAI_API_KEY",
            "No API key configured; only the deterministic parser is available.",
        )

    overall = "healthy"
    if issues["errors"]:
        overall = "error"
    elif issues["warnings"]:
        overall = "warning"

    return {
        "overall_health": overall,
        "issues": issues,
    }
