# core/logging_config.py
"""Configure scriptcanon logging sinks and formatting.

This module configures:
- Standard library logging handlers (console and optional rotating file).
- Rich console integration via `rich.logging.RichHandler`.
- Baseline log level overrides for noisy third-party libraries.

Notes:
    This module performs side-effectful logger configuration and should be
    called once at process startup via [`setup_logging()`](core/logging_config.py).
    Library callers that only import the parsers never need it.
"""

import logging as stdlib_logging
import logging.handlers
import os

import structlog
from rich.console import Console
from rich.logging import RichHandler

import config
from config import rich_formatter, simple_formatter


def setup_logging(console: Console | None = None) -> None:
    """Set up logging handlers and formatting.

    This configures:
    - Console logging in simple mode.
    - Rotating file logging when a log file is configured.
    - Rich console output (stderr) when enabled.

    Args:
        console: Optional Rich console to log through. Defaults to a stderr
            console so JSON written to stdout by the CLI stays clean.
    """
    stdlib_logging.basicConfig(
        level=config.LOG_LEVEL_STR,
        format=config.LOG_FORMAT,
        datefmt=config.LOG_DATE_FORMAT,
        handlers=[],
    )
    root_logger = stdlib_logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(config.LOG_LEVEL_STR)

    if config.SIMPLE_LOGGING_MODE:
        stream_handler = stdlib_logging.StreamHandler()
        stream_handler.setLevel(config.LOG_LEVEL_STR)
        stream_handler.setFormatter(simple_formatter)
        root_logger.addHandler(stream_handler)
        root_logger.info("Simple logging mode enabled: console only.")
    elif config.LOG_FILE:
        log_path = config.LOG_FILE
        try:
            os.makedirs(os.path.dirname(log_path) or ".", exist_ok=True)
            file_handler = logging.handlers.RotatingFileHandler(
                log_path,
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                mode="a",
                encoding="utf-8",
            )
            file_handler.setLevel(config.LOG_LEVEL_STR)
            file_handler.setFormatter(simple_formatter)
            root_logger.addHandler(file_handler)
            root_logger.info(f"File logging enabled. Log file: {log_path}")
        except OSError as e:
            console_handler_fallback = stdlib_logging.StreamHandler()
            console_handler_fallback.setFormatter(simple_formatter)
            root_logger.addHandler(console_handler_fallback)
            root_logger.error(
                f"Failed to configure file logging: {e}. Logging to console instead.",
                exc_info=True,
            )

    if not config.SIMPLE_LOGGING_MODE and config.ENABLE_RICH_LOGGING:
        rich_handler = RichHandler(
            level=config.LOG_LEVEL_STR,
            rich_tracebacks=True,
            show_path=False,
            markup=True,
            show_time=False,  # Timestamp already in our formatter
            show_level=False,  # Level already in our formatter
            console=console or Console(stderr=True),
        )
        rich_handler.setFormatter(rich_formatter)
        root_logger.addHandler(rich_handler)
    elif not any(isinstance(h, stdlib_logging.StreamHandler) for h in root_logger.handlers):
        stream_handler = stdlib_logging.StreamHandler()
        stream_handler.setLevel(config.LOG_LEVEL_STR)
        stream_handler.setFormatter(simple_formatter)
        root_logger.addHandler(stream_handler)

    stdlib_logging.getLogger("httpx").setLevel(stdlib_logging.WARNING)
    stdlib_logging.getLogger("httpcore").setLevel(stdlib_logging.WARNING)

    structlog.get_logger(__name__).debug(f"Logging setup complete. Application Log Level: {config.LOG_LEVEL_STR}.")
