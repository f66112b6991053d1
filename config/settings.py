# config/settings.py
"""
Configuration settings for the scriptcanon parsing pipeline.
Uses Pydantic BaseSettings for automatic environment variable loading.
"""

from __future__ import annotations

import logging as stdlib_logging
from collections.abc import MutableMapping
from typing import Any

import structlog
from dotenv import load_dotenv
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()

logger = structlog.get_logger()


class ScriptCanonSettings(BaseSettings):
    """Full configuration for the parsing pipeline."""

    # Cascade bounds
    MIN_VALID_YEAR: int = 2000
    MAX_VALID_YEAR: int = 2199
    MAX_CONTEXT_LENGTH: int = 100
    MIN_LOCATION_NAME_LENGTH: int = 3
    MAX_LOCATION_NAME_LENGTH: int = 50

    # Strictness knob for the "a/an/the + CAPS" echo sub-pattern. Disabling it
    # trades recall for fewer false positives from shouted dialogue.
    ECHO_ARTICLE_CAPS_ENABLED: bool = True

    # Defaults applied at the pipeline boundary
    DEFAULT_PROJECT_TYPE: str = "comic"
    DEFAULT_ISSUE_TITLE: str = "Untitled Issue"

    # AI collaborator (OpenAI-compatible chat completions)
    OPENAI_API_BASE: str = "http://127.0.0.1:8080/v1"
    OPENAI_API_KEY: str = ""
    AI_PARSER_MODEL: str = "gpt-4o"
    AI_PARSER_TEMPERATURE: float = 0.1
    AI_PARSER_MAX_TOKENS: int = 16384
    HTTPX_TIMEOUT: float = 120.0
    MAX_CONCURRENT_LLM_CALLS: int = 4
    ENABLE_DETERMINISTIC_ENRICHMENT: bool = True

    # Logging
    LOG_LEVEL_STR: str = Field("INFO", alias="LOG_LEVEL")
    LOG_FORMAT: str = "%(asctime)s - %(levelname)s - [%(name)s:%(funcName)s:%(lineno)d] - %(message)s"
    LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"
    LOG_FILE: str | None = None
    ENABLE_RICH_LOGGING: bool = True
    # Console only, no rotation/Rich
    SIMPLE_LOGGING_MODE: bool = False

    @model_validator(mode="after")
    def normalize_log_level(self) -> ScriptCanonSettings:
        object.__setattr__(self, "LOG_LEVEL_STR", self.LOG_LEVEL_STR.upper())
        return self

    model_config = SettingsConfigDict(env_prefix="", env_file=".env", extra="ignore", populate_by_name=True)


settings = ScriptCanonSettings()


# Update module level variables for backward compatibility
for _field in ScriptCanonSettings.model_fields:
    globals()[_field] = getattr(settings, _field)


# Configure structlog to integrate with standard logging and output human‑readable messages
structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="%m/%d/%Y, %H:%M:%S"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)


def filter_internal_keys(logger: Any, name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Remove internal structlog fields from event dict."""
    for key in [k for k in event_dict if k.startswith("_")]:
        event_dict.pop(key, None)
    return event_dict


def _format_context(event_dict: MutableMapping[str, Any], markup: bool) -> str:
    context_parts = []
    for key, value in event_dict.items():
        if key.startswith("_"):
            continue
        if isinstance(value, str) and len(value) > 50:
            value_str = f"{value[:47]}..."
        else:
            value_str = str(value)
        context_parts.append(f"[dim]{key}[/dim]={value_str}" if markup else f"{key}={value_str}")
    return f"({', '.join(context_parts)})" if context_parts else ""


_LEVEL_COLORS = {"CRITICAL": "red", "ERROR": "red", "WARNING": "yellow", "INFO": "green"}


def _simple_log_format(event_dict: MutableMapping[str, Any], markup: bool) -> str:
    event_dict.pop("_record", None)
    event_dict.pop("_from_structlog", None)

    level = event_dict.pop("level", "INFO").upper()
    timestamp = event_dict.pop("timestamp", "")
    logger_name = event_dict.pop("logger", "")
    event = event_dict.pop("event", "")

    parts = []
    if timestamp:
        parts.append(f"{timestamp}")
    if logger_name:
        # Shorten logger names for readability
        short_name = logger_name.split(".")[-1]
        parts.append(f"[cyan]{short_name}[/cyan]" if markup else f"[{short_name}]")

    color = _LEVEL_COLORS.get(level)
    parts.append(f"[{color}]{level}[/{color}]" if markup and color else level)
    if markup and event:
        parts.append(f"[bold]{event}[/bold]")
    else:
        parts.append(str(event))

    context = _format_context(event_dict, markup)
    if context:
        parts.append(context)
    return " ".join(parts)


def simple_log_format_rich(logger: Any, name: str, event_dict: MutableMapping[str, Any]) -> str:
    """Simple human-readable log formatter with Rich markup for console output."""
    return _simple_log_format(event_dict, markup=True)


def simple_log_format_plain(logger: Any, name: str, event_dict: MutableMapping[str, Any]) -> str:
    """Simple human-readable log formatter without markup for file output."""
    return _simple_log_format(event_dict, markup=False)


_FOREIGN_PRE_CHAIN = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="%m/%d/%Y, %H:%M:%S"),
    structlog.stdlib.ProcessorFormatter.remove_processors_meta,
]

# Formatter for file and plain console output (no Rich markup)
simple_formatter = structlog.stdlib.ProcessorFormatter(
    foreign_pre_chain=_FOREIGN_PRE_CHAIN,
    processors=[filter_internal_keys, simple_log_format_plain],
)

# Formatter for Rich console output (with color markup)
rich_formatter = structlog.stdlib.ProcessorFormatter(
    foreign_pre_chain=_FOREIGN_PRE_CHAIN,
    processors=[filter_internal_keys, simple_log_format_rich],
)

handler: stdlib_logging.Handler = stdlib_logging.StreamHandler()
if settings.LOG_FILE:
    handler = stdlib_logging.FileHandler(settings.LOG_FILE)

handler.setFormatter(simple_formatter)
root_logger = stdlib_logging.getLogger()
root_logger.addHandler(handler)
root_logger.setLevel(settings.LOG_LEVEL_STR)
