# config/loader.py
"""
Configuration reload utilities.

The main public function is ``reload_settings()`` which:
1. Reloads environment variables from ``.env`` (via ``dotenv.load_dotenv``).
2. Re‑creates the ``ScriptCanonSettings`` instance so that any changed values apply.
3. Updates the constants exported by the ``config`` package to reflect the new values.

When the process supports it, ``reload_settings()`` is hooked to ``SIGHUP`` so an
operator can trigger a live reload of a long-running CLI batch. Set
``CONFIG_DISABLE_SIGHUP`` to skip registration.
"""

from __future__ import annotations

import importlib
import os
import signal
from typing import Any

import structlog
from dotenv import load_dotenv
from pydantic import ValidationError

logger = structlog.get_logger(__name__)


def reload_settings() -> bool:
    """
    Reload configuration from the environment and refresh the ``config`` package.

    Returns ``True`` on success, ``False`` when the new environment does not
    validate (the previous settings stay in effect).
    """
    import config as config_pkg
    settings_mod = importlib.import_module("config.settings")

    load_dotenv(override=True)

    try:
        fresh = settings_mod.ScriptCanonSettings()
    except ValidationError as exc:
        logger.error("Configuration reload rejected; keeping previous settings", errors=exc.error_count())
        return False

    settings_mod.settings = fresh
    config_pkg.settings = fresh
    for field_name in type(fresh).model_fields:
        value = getattr(fresh, field_name)
        setattr(settings_mod, field_name, value)
        setattr(config_pkg, field_name, value)

    logger.info("Configuration reloaded")
    return True


def _handle_sighup(signum: int, frame: Any) -> None:  # pragma: no cover
    """Signal handler that invokes ``reload_settings``."""
    if reload_settings():
        logger.info("Configuration reloaded via SIGHUP")
    else:
        logger.warning("Failed to reload configuration via SIGHUP")


if not os.getenv("CONFIG_DISABLE_SIGHUP") and hasattr(signal, "SIGHUP"):
    signal.signal(signal.SIGHUP, _handle_sighup)
