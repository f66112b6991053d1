# converters/common.py
"""Shared helpers for the converters: id and clock defaults, enum mappings."""

from __future__ import annotations

import time
import uuid
from collections.abc import Callable

from models.app_models import AspectRatio

IdFactory = Callable[[], str]
Clock = Callable[[], int]


def new_id() -> str:
    return str(uuid.uuid4())


def now_ms() -> int:
    return int(time.time() * 1000)


_ASPECT_RATIOS: dict[str, AspectRatio] = {
    "wide": AspectRatio.WIDE,
    "tall": AspectRatio.TALL,
    "square": AspectRatio.SQUARE,
    "portrait": AspectRatio.PORTRAIT,
}


def to_aspect_ratio(hint: str | None) -> AspectRatio:
    """Map a panel aspect hint to an aspect ratio; unknown or missing hints are wide."""
    return _ASPECT_RATIOS.get(hint or "", AspectRatio.WIDE)


def unmapped(kind: str, value: object) -> ValueError:
    return ValueError(f"No conversion defined for {kind} {value!r}")
