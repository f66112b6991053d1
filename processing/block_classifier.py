# processing/block_classifier.py
"""Type individual script lines as panel content blocks.

This classification is independent of entity extraction: the cascade decides
which registry a name lands in, this module decides how a line renders in a
panel. Anything unrecognized becomes an art note.

Each format has its own structural markers (`FORMAT_PATTERNS`). Comic pages and
panels are numbered headers; screenplays open a page per slugline and a panel
per blank-line beat; stage plays map acts and scenes; TV scripts map act breaks
and sluglines.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import config
from models.constants import VISUAL_MARKERS
from models.script_models import Block, BlockType, ProjectType
from utils.text_processing import is_noise_word

_ACT_NAMES = r"(?P<number>ONE|TWO|THREE|FOUR|FIVE|I|II|III|IV|V)\b"

PAGE_BREAK_RE = re.compile(r"^PAGE\s+(?P<number>\d+)", re.IGNORECASE)
PANEL_BREAK_RE = re.compile(r"^Panel\s+(?P<number>\d+)\s*:?\s*(?P<description>.*)", re.IGNORECASE)
SLUGLINE_RE = re.compile(r"^(?:INT|EXT|INT/EXT)\.\s+(?P<location>.+)")
STAGE_ACT_RE = re.compile(rf"^ACT\s+{_ACT_NAMES}", re.IGNORECASE)
STAGE_SCENE_RE = re.compile(r"^SCENE\s+(?P<number>\d+)\s*:?\s*(?P<description>.*)", re.IGNORECASE)
TV_ACT_BREAK_RE = re.compile(rf"^(?:COLD OPEN|TEASER|TAG|ACT\s+{_ACT_NAMES})\b", re.IGNORECASE)
TV_SLUGLINE_RE = re.compile(r"^(?P<description>(?:INT|EXT|INT/EXT)\.\s+.+)")

_TRANSITION_RE = re.compile(r"^(FADE|CUT|DISSOLVE|CONTINUED|SMASH CUT|MATCH CUT|\(CONTINUED\))")
_TIME_OF_DAY_RE = re.compile(r"\s*-\s*(DAY|NIGHT|MORNING|EVENING|CONTINUOUS|LATER)\s*$", re.IGNORECASE)
_SPEAKER_CUE_RE = re.compile(r"^([A-Z][A-Z\s'.\-]{1,30}?)\s*(?:\(([^)]*)\))?\s*$")
_PARENTHETICAL_RE = re.compile(r"^\((.*)\)$")
_STAGE_DIALOGUE_RE = re.compile(r"^([A-Z][A-Z\s'\-]+?)\.\s+(.+)")
_ASIDE_RE = re.compile(r"^\(aside\)\s*", re.IGNORECASE)
_THOUGHT_RE = re.compile(r"^([A-Z][A-Z\s'.\-]+?)\s*\(thought(?:\s+caption)?\)\s*:\s*(.+)", re.IGNORECASE)
_CAPTION_RE = re.compile(r"^CAPTION\s*:\s*(.+)", re.IGNORECASE)
_SFX_RE = re.compile(r"^SFX\s*:\s*(.+)", re.IGNORECASE)
_TITLE_CARD_RE = re.compile(r"^TITLE(?:\s+CARD)?\s*:\s*(.+)", re.IGNORECASE)
_CRAWLER_RE = re.compile(r"^(?:CRAWLER|CRAWL|CHYRON|SCREEN|TEXT)\s*:\s*(.+)")
_NARRATOR_RE = re.compile(r"^(?:NARRATOR|NARRATION)\s*:\s*(.+)", re.IGNORECASE)
_VOICE_OVER_RE = re.compile(r"^([A-Z][A-Z\s'.\-]+?)\s*\(V\.?O\.?\)\s*:\s*(.+)")
_ART_NOTE_RE = re.compile(r"^\[.*\]$|^ARTIST\s*NOTE", re.IGNORECASE)
_ART_NOTE_PREFIX_RE = re.compile(r"^ARTIST\s*NOTE\s*:?\s*", re.IGNORECASE)
_DIALOGUE_RE = re.compile(r"^([A-Z][A-Z\s'.\-]+?)(?:\s*\(([^)]*)\))?\s*:\s*(.+)")
_VISUAL_MARKER_RE = re.compile(r"\[(ECHO|HITCH|OVERFLOW|SHATTERED|SPLIT)\]", re.IGNORECASE)

# First matching hint wins.
_ASPECT_HINTS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\b(wide|panoramic|establishing)\b", re.IGNORECASE), "wide"),
    (re.compile(r"\b(tall|vertical)\b", re.IGNORECASE), "tall"),
    (re.compile(r"\b(close[- ]?up|square)\b", re.IGNORECASE), "square"),
)


@dataclass(frozen=True)
class FormatPatterns:
    """Structural markers of one script format.

    Attributes:
        page_break: Opens a page. An optional `number` group carries the written
            number; non-numeric numbers continue the running count.
        panel_break: Opens a panel, with optional `number` and `description`
            groups. None when panels are blank-line separated beats.
        speaker_cues: A character name alone on its line introduces the
            dialogue lines that follow it, up to the next blank line.
    """

    page_break: re.Pattern[str]
    panel_break: re.Pattern[str] | None
    speaker_cues: bool = False

    @property
    def beats_on_blank_lines(self) -> bool:
        return self.panel_break is None


FORMAT_PATTERNS: dict[ProjectType, FormatPatterns] = {
    ProjectType.COMIC: FormatPatterns(PAGE_BREAK_RE, PANEL_BREAK_RE),
    ProjectType.SCREENPLAY: FormatPatterns(SLUGLINE_RE, None, speaker_cues=True),
    ProjectType.STAGE_PLAY: FormatPatterns(STAGE_ACT_RE, STAGE_SCENE_RE),
    ProjectType.TV_SERIES: FormatPatterns(TV_ACT_BREAK_RE, TV_SLUGLINE_RE, speaker_cues=True),
}


def header_number(match: re.Match[str]) -> int:
    """Written number of a page or panel header, or 0 when it is not numeric."""
    raw = match.groupdict().get("number")
    return int(raw) if raw and raw.isdigit() else 0


def header_description(match: re.Match[str]) -> str:
    return (match.groupdict().get("description") or "").strip()


def slugline_location(text: str) -> str | None:
    """Location named by an `INT.`/`EXT.` slugline, without the time of day."""
    match = SLUGLINE_RE.match(text)
    if not match:
        return None
    name = _TIME_OF_DAY_RE.sub("", match.group("location")).strip().rstrip(".-:").strip()
    return name if len(name) >= config.MIN_LOCATION_NAME_LENGTH else None


@dataclass
class SpeakerCue:
    """A screenplay character cue waiting for its dialogue lines."""

    speaker: str
    modifier: str | None = None

    def block(self, text: str) -> Block:
        meta = {"modifier": self.modifier} if self.modifier else None
        if self.modifier and self.modifier.replace(".", "").upper() == "VO":
            return Block(type=BlockType.NARRATOR, text=text, speaker=self.speaker, meta=meta)
        return Block(type=BlockType.DIALOGUE, text=text, speaker=self.speaker, meta=meta)


def match_speaker_cue(text: str) -> SpeakerCue | None:
    match = _SPEAKER_CUE_RE.match(text)
    if not match:
        return None
    speaker = match.group(1).strip()
    if len(speaker) < 2 or is_noise_word(speaker):
        return None
    modifier = match.group(2)
    return SpeakerCue(speaker=speaker.upper(), modifier=modifier.strip() if modifier and modifier.strip() else None)


def match_parenthetical(text: str) -> str | None:
    match = _PARENTHETICAL_RE.match(text)
    return match.group(1).strip() if match else None


def is_transition(text: str) -> bool:
    return bool(_TRANSITION_RE.match(text))


def _classify_stage_line(text: str) -> Block | None:
    direction = match_parenthetical(text)
    if direction is not None:
        return Block(type=BlockType.ART_NOTE, text=direction or text)

    dialogue = _STAGE_DIALOGUE_RE.match(text)
    if not dialogue or is_noise_word(dialogue.group(1)):
        return None
    speaker = dialogue.group(1).strip().upper()
    spoken = dialogue.group(2).strip()
    if _ASIDE_RE.match(spoken):
        return Block(type=BlockType.THOUGHT, text=_ASIDE_RE.sub("", spoken).strip(), speaker=speaker)
    return Block(type=BlockType.DIALOGUE, text=spoken, speaker=speaker)


def classify_block(text: str, project_type: ProjectType = ProjectType.COMIC) -> Block | None:
    """Classify one trimmed, non-header line.

    Stage plays try `NAME. text` dialogue and parenthesised directions first;
    every format then falls through to the comic line shapes.

    Returns:
        The typed block, or None for transition lines that carry no content.
    """
    if is_transition(text):
        return None

    if project_type is ProjectType.STAGE_PLAY:
        stage_block = _classify_stage_line(text)
        if stage_block is not None:
            return stage_block

    thought = _THOUGHT_RE.match(text)
    if thought and not is_noise_word(thought.group(1)):
        return Block(type=BlockType.THOUGHT, text=thought.group(2).strip(), speaker=thought.group(1).strip().upper())

    caption = _CAPTION_RE.match(text)
    if caption:
        return Block(type=BlockType.CAPTION, text=caption.group(1).strip())

    sfx = _SFX_RE.match(text)
    if sfx:
        return Block(type=BlockType.SFX, text=sfx.group(1).strip())

    title = _TITLE_CARD_RE.match(text)
    if title:
        return Block(type=BlockType.TITLE_CARD, text=title.group(1).strip())

    crawler = _CRAWLER_RE.match(text)
    if crawler:
        return Block(type=BlockType.CRAWLER, text=crawler.group(1).strip())

    narrator = _NARRATOR_RE.match(text)
    if narrator:
        return Block(type=BlockType.NARRATOR, text=narrator.group(1).strip())

    voice_over = _VOICE_OVER_RE.match(text)
    if voice_over and not is_noise_word(voice_over.group(1)):
        return Block(
            type=BlockType.NARRATOR,
            text=voice_over.group(2).strip(),
            speaker=voice_over.group(1).strip().upper(),
            meta={"modifier": "V.O."},
        )

    if _ART_NOTE_RE.match(text):
        note = _ART_NOTE_PREFIX_RE.sub("", text.strip("[]").strip())
        return Block(type=BlockType.ART_NOTE, text=note.strip() or text)

    dialogue = _DIALOGUE_RE.match(text)
    if dialogue and not is_noise_word(dialogue.group(1)):
        modifier = dialogue.group(2)
        return Block(
            type=BlockType.DIALOGUE,
            text=dialogue.group(3).strip(),
            speaker=dialogue.group(1).strip().upper(),
            meta={"modifier": modifier.strip()} if modifier and modifier.strip() else None,
        )

    return Block(type=BlockType.ART_NOTE, text=text)


def detect_visual_marker(texts: list[str]) -> str | None:
    """Return the first `[ECHO]`-style marker found in any of the texts, lower-cased."""
    for text in texts:
        match = _VISUAL_MARKER_RE.search(text)
        if match and match.group(1).lower() in VISUAL_MARKERS:
            return match.group(1).lower()
    return None


def infer_aspect_hint(texts: list[str]) -> str | None:
    joined = " ".join(texts)
    for pattern, hint in _ASPECT_HINTS:
        if pattern.search(joined):
            return hint
    return None
