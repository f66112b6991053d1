import itertools

import pytest

from converters import (
    to_character_seeds,
    to_legacy_parse_result,
    to_lore_record,
    to_lore_records,
    to_storyboard_issue,
    to_timeline_events,
)
from converters.common import to_aspect_ratio
from converters.storyboard import build_prompt, build_text_elements
from core.parsers.deterministic_parser import parse_deterministic
from models.app_models import ArtifactRecord, AspectRatio, FactionRecord, LoreType, RuleRecord
from models.script_models import (
    Block,
    BlockType,
    CharacterRole,
    LoreCategory,
    ParsedCharacter,
    ParsedLoreEntry,
    ParsedPage,
    ParsedPanel,
    ParsedTimelineEvent,
    ParserSource,
    UnifiedParseResult,
)


def _ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


def _clock() -> int:
    return 1_700_000_000_000


@pytest.fixture
def empty_result() -> UnifiedParseResult:
    return UnifiedParseResult(source_hash="h", warnings=["Empty script: nothing to parse."])


class TestEmptyResult:
    def test_every_converter_accepts_empty_result(self, empty_result: UnifiedParseResult) -> None:
        issue = to_storyboard_issue(empty_result, id_factory=_ids())
        assert issue.pages == []
        assert issue.title == "Untitled Issue"
        assert to_character_seeds(empty_result) == []
        assert to_lore_records(empty_result) == []
        assert to_timeline_events(empty_result) == []

        legacy = to_legacy_parse_result(empty_result)
        assert legacy.success is False
        assert legacy.pages == []
        assert legacy.warnings == ["Empty script: nothing to parse."]


class TestStoryboard:
    def test_prompt_uses_visual_blocks_only(self) -> None:
        blocks = [
            Block(type=BlockType.ART_NOTE, text="Rain."),
            Block(type=BlockType.DIALOGUE, text="Run!", speaker="ELIAS"),
            Block(type=BlockType.CAPTION, text="2093."),
            Block(type=BlockType.SFX, text="KRAK"),
        ]
        assert build_prompt(blocks) == "Rain. 2093. [SFX: KRAK]"

    def test_text_elements_stack_vertically(self) -> None:
        blocks = [
            Block(type=BlockType.DIALOGUE, text="Run!", speaker="ELIAS"),
            Block(type=BlockType.ART_NOTE, text="Rain."),
            Block(type=BlockType.THOUGHT, text="Not today.", speaker="MAYA"),
            Block(type=BlockType.CRAWLER, text="BREAKING"),
        ]
        elements = build_text_elements(blocks, _ids())

        assert [(e.type, e.content, e.y) for e in elements] == [
            ("dialogue", "ELIAS: Run!", 20),
            ("thought", "MAYA: Not today.", 80),
            ("phone", "BREAKING", 140),
        ]
        assert {(e.x, e.width, e.height, e.font_size, e.color) for e in elements} == {(20, 200, 50, 12, "#000000")}

    def test_panels_are_laid_out_on_three_column_grid(self) -> None:
        page = ParsedPage(page_number=4, panels=[ParsedPanel(panel_number=n) for n in range(10, 15)])
        result = UnifiedParseResult(source_hash="h", pages=[page])
        issue = to_storyboard_issue(result, "Issue One", id_factory=_ids())

        panels = issue.pages[0].panels
        assert issue.title == "Issue One"
        assert issue.pages[0].number == 4
        assert [(p.x, p.y) for p in panels] == [(40, 40), (440, 40), (840, 40), (40, 520), (440, 520)]
        assert {(p.width, p.height) for p in panels} == {(360, 420)}
        assert [p.script_ref.panel_number for p in panels] == [10, 11, 12, 13, 14]

    def test_issue_from_parsed_script(self, multi_page_script: str) -> None:
        issue = to_storyboard_issue(parse_deterministic(multi_page_script), id_factory=_ids())
        last_panel = issue.pages[1].panels[0]

        assert last_panel.script_ref.visual_marker == "echo"
        assert last_panel.aspect_ratio is AspectRatio.SQUARE
        assert last_panel.character_ids == []

        dumped = issue.model_dump(mode="json", by_alias=True)
        panel = dumped["pages"][0]["panels"][0]
        assert panel["aspectRatio"] == "wide"
        assert panel["scriptRef"]["pageNumber"] == 1

    def test_ids_come_from_factory(self) -> None:
        result = UnifiedParseResult(source_hash="h", pages=[ParsedPage(page_number=1, panels=[ParsedPanel(panel_number=1)])])
        issue = to_storyboard_issue(result, id_factory=_ids())

        assert issue.pages[0].id == "id-1"
        assert issue.pages[0].panels[0].id == "id-2"
        assert issue.id == "id-3"


@pytest.mark.parametrize(
    ("hint", "expected"),
    [("wide", AspectRatio.WIDE), ("tall", AspectRatio.TALL), ("square", AspectRatio.SQUARE), (None, AspectRatio.WIDE), ("odd", AspectRatio.WIDE)],
)
def test_aspect_ratio_mapping(hint, expected) -> None:
    assert to_aspect_ratio(hint) is expected


class TestCharacterSeeds:
    def test_seed_fields(self) -> None:
        result = UnifiedParseResult(
            source_hash="h",
            parser_source=ParserSource.AI_DETERMINISTIC,
            characters=[
                ParsedCharacter(name="ELIAS", role=CharacterRole.PROTAGONIST, description="Age 30", notable_quotes=["Run."]),
                ParsedCharacter(name="MAYA", pages_present=[1, 2], lines_count=4),
            ],
        )
        elias, maya = to_character_seeds(result, id_factory=_ids())

        assert elias.role == "Protagonist"
        assert elias.description == "Age 30"
        assert elias.voice_profile.samples == ["Run."]
        assert [(era.id, era.name) for era in elias.eras] == [("id-1", "Origin")]
        assert elias.smart_tags == {"source": "ai+deterministic"}
        assert maya.role == "Supporting"
        assert maya.description == "Appears on 2 page(s), 4 line(s)."
        assert maya.voice_profile.samples == []


class TestLoreRecords:
    def test_item_becomes_artifact_with_tags(self) -> None:
        entry = ParsedLoreEntry(
            name="SCARAB",
            category=LoreCategory.ITEM,
            description="Pendant.",
            metadata={"currentHolder": "ELIAS"},
        )
        record = to_lore_record(entry, id_factory=_ids(), clock=_clock)

        assert isinstance(record, ArtifactRecord)
        assert record.type is LoreType.ARTIFACT
        assert record.tags == ["auto-extracted", "item"]
        assert record.current_holder == "ELIAS"
        assert record.created_at == record.updated_at == 1_700_000_000_000
        assert record.id == "id-1"

    def test_faction_defaults(self) -> None:
        entry = ParsedLoreEntry(name="ORDER OF DAWN", category=LoreCategory.FACTION, description="Cult.")
        record = to_lore_record(entry, id_factory=_ids(), clock=_clock)

        assert isinstance(record, FactionRecord)
        assert record.influence == 5

    def test_rule_canon_lock_requires_literal_true(self) -> None:
        locked = ParsedLoreEntry(name="R", category=LoreCategory.RULE, description="d", metadata={"canonLocked": True})
        loose = ParsedLoreEntry(name="R", category=LoreCategory.RULE, description="d", metadata={"canonLocked": "yes"})

        assert isinstance(to_lore_record(locked), RuleRecord)
        assert to_lore_record(locked).canon_locked is True
        assert to_lore_record(loose).canon_locked is False

    def test_every_category_is_mapped(self) -> None:
        for category in LoreCategory:
            entry = ParsedLoreEntry(name="X", category=category, description="d")
            assert to_lore_record(entry, id_factory=_ids(), clock=_clock).name == "X"

    def test_camel_case_wire_form(self) -> None:
        entry = ParsedLoreEntry(name="Key", category=LoreCategory.ARTIFACT, description="d")
        dumped = to_lore_record(entry, id_factory=_ids(), clock=_clock).model_dump(mode="json", by_alias=True)

        assert dumped["type"] == "artifact"
        assert "currentHolder" in dumped
        assert "createdAt" in dumped


def test_timeline_events_pass_through() -> None:
    result = UnifiedParseResult(
        source_hash="h",
        timeline=[ParsedTimelineEvent(name="Year 2093", description="CAPTION: 2093", page=1, characters_involved=["ELIAS"])],
    )
    (event,) = to_timeline_events(result)
    assert (event.name, event.description, event.page, event.characters_involved) == (
        "Year 2093",
        "CAPTION: 2093",
        1,
        ["ELIAS"],
    )


class TestLegacy:
    def test_legacy_shape(self, multi_page_script: str) -> None:
        legacy = to_legacy_parse_result(parse_deterministic(multi_page_script))

        assert legacy.success is True
        first_panel = legacy.pages[0].panels[0]
        assert first_panel.description.startswith("Wide view of the pier at dawn.")
        assert [b.type for b in first_panel.bubbles] == ["caption"]
        assert legacy.pages[1].panels[0].visual_marker == "echo"
        assert legacy.pages[0].panels[0].visual_marker == "standard"

        elias = legacy.characters[0]
        assert elias.line_count == 3
        assert elias.first_appearance == "Page 1"

    def test_crawler_becomes_screen_text_and_errors_are_split_out(self) -> None:
        panel = ParsedPanel(panel_number=1, blocks=[Block(type=BlockType.CRAWLER, text="BREAKING")], visual_marker="warp")
        result = UnifiedParseResult(
            source_hash="h",
            pages=[ParsedPage(page_number=1, panels=[panel])],
            warnings=["AI parse failure on page 2", "Low lore diversity"],
        )
        legacy = to_legacy_parse_result(result)

        assert legacy.pages[0].panels[0].bubbles[0].type == "screen-text"
        assert legacy.pages[0].panels[0].visual_marker == "standard"
        assert legacy.errors == ["AI parse failure on page 2"]
