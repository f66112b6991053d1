# config/__init__.py
"""Expose scriptcanon configuration as stable module-level constants.

This package is a facade over the Pydantic settings model defined in
[`config.settings`](config/settings.py). The primary API is the `settings`
singleton plus a set of module-level constants mirroring its fields.

Configuration precedence and lifecycle:
- On initial import, configuration is loaded by importing
  [`config.settings`](config/settings.py), which constructs the `settings` singleton.
- Values come from the process environment and may be sourced from a `.env` file.
- [`reload()`](config/__init__.py) re-reads `.env` with override enabled, then replaces
  this module's exported values (see [`config.loader.reload_settings()`](config/loader.py)).

Notes:
    The cascade reads bounds through this module at call time, so tests may
    monkeypatch e.g. `config.ECHO_ARTICLE_CAPS_ENABLED` without rebuilding settings.
"""

from typing import Any

from .settings import (
    rich_formatter as rich_formatter,
)
from .settings import (
    settings as settings,
)
from .settings import (
    simple_formatter as simple_formatter,
)

AI_PARSER_MAX_TOKENS = settings.AI_PARSER_MAX_TOKENS
AI_PARSER_MODEL = settings.AI_PARSER_MODEL
AI_PARSER_TEMPERATURE = settings.AI_PARSER_TEMPERATURE
DEFAULT_ISSUE_TITLE = settings.DEFAULT_ISSUE_TITLE
DEFAULT_PROJECT_TYPE = settings.DEFAULT_PROJECT_TYPE
ECHO_ARTICLE_CAPS_ENABLED = settings.ECHO_ARTICLE_CAPS_ENABLED
ENABLE_DETERMINISTIC_ENRICHMENT = settings.ENABLE_DETERMINISTIC_ENRICHMENT
ENABLE_RICH_LOGGING = settings.ENABLE_RICH_LOGGING
HTTPX_TIMEOUT = settings.HTTPX_TIMEOUT
LOG_DATE_FORMAT = settings.LOG_DATE_FORMAT
LOG_FILE = settings.LOG_FILE
LOG_FORMAT = settings.LOG_FORMAT
LOG_LEVEL_STR = settings.LOG_LEVEL_STR
MAX_CONCURRENT_LLM_CALLS = settings.MAX_CONCURRENT_LLM_CALLS
MAX_CONTEXT_LENGTH = settings.MAX_CONTEXT_LENGTH
MAX_LOCATION_NAME_LENGTH = settings.MAX_LOCATION_NAME_LENGTH
MAX_VALID_YEAR = settings.MAX_VALID_YEAR
MIN_LOCATION_NAME_LENGTH = settings.MIN_LOCATION_NAME_LENGTH
MIN_VALID_YEAR = settings.MIN_VALID_YEAR
OPENAI_API_BASE = settings.OPENAI_API_BASE
OPENAI_API_KEY = settings.OPENAI_API_KEY
SIMPLE_LOGGING_MODE = settings.SIMPLE_LOGGING_MODE


def get(key: str) -> Any:
    """Return the value of a configuration attribute from `settings`.

    Raises:
        AttributeError: If `key` is not a valid attribute on `settings`.
    """
    return getattr(settings, key)


def set(key: str, value: Any) -> None:
    """Set a configuration attribute on `settings` and the mirrored constant.

    This mutates the in-memory settings instance and does not persist to `.env`.

    Raises:
        AttributeError: If `key` is not a valid attribute on `settings`.
    """
    if key not in type(settings).model_fields:
        raise AttributeError(f"Unknown configuration key: {key}")
    setattr(settings, key, value)
    globals()[key] = value


def reload() -> bool:
    """Reload configuration and refresh this package's exported constants.

    Returns:
        True when the settings were rebuilt, False when the loader failed.
    """
    from .loader import reload_settings

    return reload_settings()
