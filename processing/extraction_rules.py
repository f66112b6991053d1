# processing/extraction_rules.py
"""Ordered pattern cascade that extracts characters, locations, years and echoes.

The cascade is data: `RULES` is the evaluation order, and each rule declares which
earlier rules short-circuit it on the same line. The driver in `run_cascade()` is
the only control flow. Reordering `RULES` changes which registry a line's content
lands in, so the order is pinned by tests.

A rule "matches" when its pattern matches, whether or not the registry accepted
the name. A panel header whose description is noise still blocks the rules that
panel headers block.

Bounds (valid years, name lengths, snippet length) and the article+caps echo
knob are read from `config` on every call.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

import structlog

import config
from models.constants import ECHO_ACTION_VERBS
from models.extraction_models import ExtractionResult
from processing.entity_registry import EntityRegistry
from processing.line_segmenter import PANEL_HEADER_RE, ScriptLine, iter_lines
from utils.text_processing import has_location_indicator, is_noise_word, normalize_markup, truncate

logger = structlog.get_logger(__name__)

RuleHandler = Callable[[ScriptLine, EntityRegistry], bool]


@dataclass(frozen=True)
class ExtractionRule:
    """One step of the cascade.

    Attributes:
        name: Stable identifier, also used in `blocked_by` / `requires`.
        handler: Applies the pattern to a line, writes to the registry, and
            returns whether the pattern matched.
        blocked_by: Skip this rule when any of these rules matched the line.
        requires: Only run when all of these rules matched the line.
        enabled: Evaluated per line; lets configuration switch a rule off.
    """

    name: str
    handler: RuleHandler
    blocked_by: frozenset[str] = field(default_factory=frozenset)
    requires: frozenset[str] = field(default_factory=frozenset)
    enabled: Callable[[], bool] = lambda: True

    def should_run(self, matched: set[str]) -> bool:
        if self.blocked_by & matched:
            return False
        if not self.requires <= matched:
            return False
        return self.enabled()


# --- Patterns -----------------------------------------------------------------

_SIMPLE_DESCRIPTION_RE = re.compile(r"^([^.]+?)\.?$")
_CHARACTER_WITH_AGE_RE = re.compile(r"^([A-Z][A-Z\s'.-]+)\s*\((\d+)(?:,\s*(.+?))?\)")
_INLINE_CHARACTER_RE = re.compile(
    r"([A-Z][A-Z\s'.-]{2,}?)\s*\((\d+|early\s+\d+s|late\s+\d+s|mid-\d+s|older|younger)(?:,\s*(.+?))?\)"
)
_DIGITS_RE = re.compile(r"(\d+)")
_DIALOGUE_RE = re.compile(r"^([A-Z][A-Z\s'.-]+?)(?:\s*\([^)]*\))?\s*:\s*(.+)")
_LOCATION_WITH_YEAR_RE = re.compile(r"^([A-Z][A-Z\s'.-]+)\s*-\s*(\d{4})$")
_CAPS_LOCATION_RE = re.compile(r"^([A-Z][A-Z\s'.-]+?)(?:\.\s?|$)")
_PANEL_DESCRIPTION_RE = re.compile(r"^Panel\s+\d+\s*:?\s*(.+?)\.?$", re.IGNORECASE)
_INTERIOR_EXTERIOR_RE = re.compile(r"^(Interior|Exterior)[.\s]+([^.]+?)\.?$", re.IGNORECASE)
_ESTABLISHING_SHOT_RE = re.compile(r"establishing\s+shot[.\s]+(.+?)(?:\s+at\s+|\s+in\s+|\.|\s*$)", re.IGNORECASE)
_ESTABLISHING_NAME_RE = re.compile(r"^([^,]+?)(?:,|\s+near|\s+at|\s+in|$)")
_DESCRIPTIVE_LOCATION_RES = (
    re.compile(
        r"^([A-Z][a-z]+(?:\s+[a-z]+)*\s+"
        r"(?:garage|hospital|street|site|building|office|center|ward|room|hall|studio|clinic|lab|park|station))",
        re.IGNORECASE,
    ),
    re.compile(
        r"^([A-Z][a-z]+(?:\s+[a-z]+)*\s+(?:garage|hospital|site|building|office)\s+(?:interior|exterior))",
        re.IGNORECASE,
    ),
)
_YEAR_RE = re.compile(r"\b(\d{4})\b")
_VERB_RES: tuple[tuple[str, re.Pattern[str]], ...] = tuple(
    (verb, re.compile(rf"\b{re.escape(verb)}\b(.+)", re.IGNORECASE)) for verb in ECHO_ACTION_VERBS
)
_CAPS_RUN_RE = re.compile(r"\b([A-Z][A-Z\s'.-]+)\b")
_LEADING_ARTICLE_RE = re.compile(r"^(A|AN|THE)\s+")
# Article is case-insensitive; the object words must be upper-case.
_ARTICLE_CAPS_RE = re.compile(r"\b(?i:a|an|the)\s+([A-Z]+(?:\s+[A-Z]+){0,2})(?=\s|[.,!?;:]|$)")


def _split_traits(raw: str | None) -> list[str]:
    if not raw:
        return []
    return [trait.strip() for trait in raw.split(",") if trait.strip()]


def _valid_year(year: int) -> bool:
    return config.MIN_VALID_YEAR <= year <= config.MAX_VALID_YEAR


def _location_length_ok(name: str, upper: int | None = None) -> bool:
    limit = config.MAX_LOCATION_NAME_LENGTH if upper is None else upper
    return config.MIN_LOCATION_NAME_LENGTH <= len(name) <= limit


# --- Handlers -------------------------------------------------------------------


def _panel_header(line: ScriptLine, registry: EntityRegistry) -> bool:
    match = PANEL_HEADER_RE.match(line.text)
    if not match:
        return False
    description = match.group(2).strip()
    if description:
        simple = _SIMPLE_DESCRIPTION_RE.match(description)
        if simple:
            name = simple.group(1).strip()
            if _location_length_ok(name) and has_location_indicator(name):
                registry.add_location(name, line.number, source="panel_header")
    return True


def _character_with_age(line: ScriptLine, registry: EntityRegistry) -> bool:
    match = _CHARACTER_WITH_AGE_RE.match(line.text)
    if not match:
        return False
    registry.add_character(
        match.group(1).strip(),
        line.number,
        age=int(match.group(2)),
        traits=_split_traits(match.group(3)),
        source="character_with_age",
    )
    return True


def _inline_character(line: ScriptLine, registry: EntityRegistry) -> bool:
    match = _INLINE_CHARACTER_RE.search(line.text)
    if not match:
        return False
    digits = _DIGITS_RE.search(match.group(2))
    registry.add_character(
        match.group(1).strip(),
        line.number,
        age=int(digits.group(1)) if digits else None,
        traits=_split_traits(match.group(3)),
        source="inline_character",
    )
    return True


def _dialogue(line: ScriptLine, registry: EntityRegistry) -> bool:
    match = _DIALOGUE_RE.match(line.text)
    if not match:
        return False
    registry.add_character(match.group(1).strip(), line.number, source="dialogue")
    return True


def _location_with_year(line: ScriptLine, registry: EntityRegistry) -> bool:
    match = _LOCATION_WITH_YEAR_RE.match(line.text)
    if not match:
        return False
    year = int(match.group(2))
    if _valid_year(year):
        registry.add_location(match.group(1).strip(), line.number, year=year, source="location_with_year")
    return True


def _caps_location(line: ScriptLine, registry: EntityRegistry) -> bool:
    match = _CAPS_LOCATION_RE.match(line.text)
    if not match:
        return False
    name = match.group(1).strip()
    if has_location_indicator(name):
        registry.add_location(name, line.number, source="caps_location")
    return True


def _panel_description_location(line: ScriptLine, registry: EntityRegistry) -> bool:
    match = _PANEL_DESCRIPTION_RE.match(line.text)
    if not match or line.panel <= 0:
        return False
    name = match.group(1).strip()
    if _location_length_ok(name) and has_location_indicator(name):
        registry.add_location(name, line.number, source="panel_description")
    return True


def _interior_exterior(line: ScriptLine, registry: EntityRegistry) -> bool:
    match = _INTERIOR_EXTERIOR_RE.match(line.text)
    if not match:
        return False
    name = match.group(2).strip()
    if _location_length_ok(name, config.MAX_CONTEXT_LENGTH) and has_location_indicator(name):
        registry.add_location(name, line.number, source="interior_exterior")
    return True


def _establishing_shot(line: ScriptLine, registry: EntityRegistry) -> bool:
    match = _ESTABLISHING_SHOT_RE.search(line.text)
    if not match:
        return False
    description = match.group(1).strip()
    if _location_length_ok(description, config.MAX_CONTEXT_LENGTH) and has_location_indicator(description):
        name_match = _ESTABLISHING_NAME_RE.match(description)
        if name_match:
            registry.add_location(name_match.group(1).strip(), line.number, source="establishing_shot")
    return True


def _descriptive_location(line: ScriptLine, registry: EntityRegistry) -> bool:
    for pattern in _DESCRIPTIVE_LOCATION_RES:
        match = pattern.match(line.text)
        if match:
            name = match.group(1).strip()
            if _location_length_ok(name):
                registry.add_location(name, line.number, source="descriptive_location")
            return True
    return False


def _timeline_year(line: ScriptLine, registry: EntityRegistry) -> bool:
    found = False
    for match in _YEAR_RE.finditer(line.text):
        year = int(match.group(1))
        if _valid_year(year):
            found = True
            registry.add_timeline(year, truncate(line.text, config.MAX_CONTEXT_LENGTH), line.number)
    return found


def _echo_action_verb(line: ScriptLine, registry: EntityRegistry) -> bool:
    found = False
    for verb, pattern in _VERB_RES:
        verb_match = pattern.search(line.text)
        if not verb_match:
            continue
        for caps in _CAPS_RUN_RE.finditer(verb_match.group(1)):
            name = _LEADING_ARTICLE_RE.sub("", caps.group(1).strip())
            if name and not is_noise_word(name):
                found = True
                registry.add_echo(name, line.number, source=f"verb:{verb}")
    return found


def _echo_article_caps(line: ScriptLine, registry: EntityRegistry) -> bool:
    found = False
    for match in _ARTICLE_CAPS_RE.finditer(line.text):
        name = match.group(1).strip()
        if not is_noise_word(name):
            found = True
            registry.add_echo(name, line.number, source="article_caps")
    return found


# --- Cascade --------------------------------------------------------------------

PANEL_HEADER = "panel_header"
CHARACTER_WITH_AGE = "character_with_age"
INLINE_CHARACTER = "inline_character"
DIALOGUE = "dialogue"
LOCATION_WITH_YEAR = "location_with_year"
CAPS_LOCATION = "caps_location"
PANEL_DESCRIPTION_LOCATION = "panel_description_location"
INTERIOR_EXTERIOR = "interior_exterior"
ESTABLISHING_SHOT = "establishing_shot"
DESCRIPTIVE_LOCATION = "descriptive_location"
TIMELINE_YEAR = "timeline_year"
ECHO_ACTION_VERB = "echo_action_verb"
ECHO_ARTICLE_CAPS = "echo_article_caps"

RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule(PANEL_HEADER, _panel_header),
    ExtractionRule(CHARACTER_WITH_AGE, _character_with_age, blocked_by=frozenset({PANEL_HEADER})),
    ExtractionRule(INLINE_CHARACTER, _inline_character, blocked_by=frozenset({PANEL_HEADER, CHARACTER_WITH_AGE})),
    ExtractionRule(DIALOGUE, _dialogue, blocked_by=frozenset({PANEL_HEADER})),
    ExtractionRule(LOCATION_WITH_YEAR, _location_with_year, blocked_by=frozenset({PANEL_HEADER})),
    ExtractionRule(
        CAPS_LOCATION,
        _caps_location,
        blocked_by=frozenset({PANEL_HEADER, CHARACTER_WITH_AGE, DIALOGUE, LOCATION_WITH_YEAR}),
    ),
    # Panel headers whose description has internal periods are skipped by the
    # header rule; this catches them.
    ExtractionRule(PANEL_DESCRIPTION_LOCATION, _panel_description_location, requires=frozenset({PANEL_HEADER})),
    ExtractionRule(INTERIOR_EXTERIOR, _interior_exterior, blocked_by=frozenset({PANEL_HEADER})),
    ExtractionRule(ESTABLISHING_SHOT, _establishing_shot, blocked_by=frozenset({PANEL_HEADER})),
    ExtractionRule(
        DESCRIPTIVE_LOCATION,
        _descriptive_location,
        blocked_by=frozenset({PANEL_HEADER, CHARACTER_WITH_AGE, DIALOGUE}),
    ),
    ExtractionRule(TIMELINE_YEAR, _timeline_year),
    ExtractionRule(ECHO_ACTION_VERB, _echo_action_verb, blocked_by=frozenset({PANEL_HEADER})),
    ExtractionRule(
        ECHO_ARTICLE_CAPS,
        _echo_article_caps,
        blocked_by=frozenset({PANEL_HEADER}),
        enabled=lambda: bool(config.ECHO_ARTICLE_CAPS_ENABLED),
    ),
)


def classify_line(line: ScriptLine, registry: EntityRegistry, rules: Iterable[ExtractionRule] = RULES) -> list[str]:
    """Run every applicable rule on one line, in order.

    Returns:
        Names of the rules whose patterns matched, in evaluation order.
    """
    matched: list[str] = []
    matched_set: set[str] = set()
    for rule in rules:
        if not rule.should_run(matched_set):
            continue
        if rule.handler(line, registry):
            matched.append(rule.name)
            matched_set.add(rule.name)
    return matched


def run_cascade(lines: Iterable[ScriptLine], rules: Iterable[ExtractionRule] = RULES) -> ExtractionResult:
    """Drive the cascade over pre-segmented lines with a fresh registry."""
    rule_list = tuple(rules)
    registry = EntityRegistry()
    for line in lines:
        classify_line(line, registry, rule_list)
    return registry.snapshot()


def extract_entities(text: str) -> ExtractionResult:
    """Normalize, segment and run the comic cascade over raw script text.

    Never raises for content; empty input yields an empty result.
    """
    normalized = normalize_markup(text)
    result = run_cascade(iter_lines(normalized))
    logger.debug(
        "Cascade complete",
        characters=len(result.characters),
        locations=len(result.locations),
        timeline=len(result.timeline),
        echoes=len(result.echoes),
    )
    return result
