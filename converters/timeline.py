# converters/timeline.py
"""Pass timeline events through to the timeline consumer's shape."""

from __future__ import annotations

from models.app_models import TimelineEventRecord
from models.script_models import UnifiedParseResult


def to_timeline_events(result: UnifiedParseResult) -> list[TimelineEventRecord]:
    return [
        TimelineEventRecord(
            name=event.name,
            description=event.description,
            page=event.page,
            characters_involved=list(event.characters_involved),
        )
        for event in result.timeline
    ]
