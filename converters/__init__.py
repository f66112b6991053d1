# converters/__init__.py
"""Pure conversions from the canonical parse result to downstream record shapes.

Every converter accepts an empty result and returns empty-but-well-formed output.
Converters that mint ids or timestamps take injectable `id_factory` / `clock`
callables so output can be made deterministic in tests.
"""

from .characters import to_character_seeds
from .legacy import to_legacy_parse_result
from .lore import to_lore_record, to_lore_records
from .storyboard import to_storyboard_issue
from .timeline import to_timeline_events

__all__ = [
    "to_character_seeds",
    "to_legacy_parse_result",
    "to_lore_record",
    "to_lore_records",
    "to_storyboard_issue",
    "to_timeline_events",
]
