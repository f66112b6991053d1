# processing/line_segmenter.py
"""Split normalized script text into numbered, trimmed lines.

Line numbers are 1-based positions in the normalized text, so blank lines still
advance the counter and first-mention numbers line up with what an editor shows.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

PANEL_HEADER_RE = re.compile(r"^Panel\s+(\d+)\s*:?\s*(.*)", re.IGNORECASE)


@dataclass(frozen=True)
class ScriptLine:
    number: int
    text: str
    panel: int
    # True when one or more blank lines precede this line.
    after_blank: bool = False


def iter_lines(text: str) -> Iterator[ScriptLine]:
    """Yield each non-blank line with its line number and the running panel counter.

    The panel counter is updated before the header line itself is yielded, so a
    "Panel 3" line reports panel 3.
    """
    current_panel = 0
    after_blank = False
    for index, raw in enumerate(text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped:
            after_blank = True
            continue
        header = PANEL_HEADER_RE.match(stripped)
        if header:
            current_panel = int(header.group(1))
        yield ScriptLine(number=index, text=stripped, panel=current_panel, after_blank=after_blank)
        after_blank = False


def segment(text: str) -> list[ScriptLine]:
    return list(iter_lines(text))
