import pytest

from core.exceptions import ContractValidationError
from core.parsers.result_validation import validate_canonical_result
from models.script_models import BlockType, CharacterRole, LoreCategory, ParserSource, ProjectType
from utils.json_utils import safe_json_loads


def _validate(raw):
    return validate_canonical_result(raw, project_type="comic", source_hash="abc", ai_model="test-model")


@pytest.mark.parametrize("raw", [None, "pages", 42, ["not", "a", "mapping"]])
def test_non_mapping_becomes_empty_result(raw) -> None:
    result = _validate(raw)

    assert result.pages == []
    assert result.characters == []
    assert result.lore == []
    assert result.timeline == []
    assert len(result.warnings) == 1
    assert result.parser_source is ParserSource.AI
    assert result.ai_model == "test-model"


def test_missing_arrays_default_to_empty() -> None:
    result = _validate({"pages": "oops", "characters": None})

    assert result.pages == []
    assert result.characters == []
    assert result.lore == []
    assert result.timeline == []
    assert "AI returned no pages." in result.warnings


def test_blocks_are_repaired() -> None:
    raw = {
        "pages": [
            {
                "page_number": 1,
                "panels": [
                    {
                        "panel_number": 1,
                        "blocks": [
                            {"type": "SPEECH", "text": "Hello"},
                            {"type": "DIALOGUE", "text": "Who?"},
                            {"type": "CAPTION", "text": 7},
                        ],
                        "visual_marker": "echo",
                    }
                ],
            }
        ]
    }
    result = _validate(raw)
    blocks = result.pages[0].panels[0].blocks

    assert [b.type for b in blocks] == [BlockType.OTHER, BlockType.DIALOGUE, BlockType.CAPTION]
    assert blocks[2].text == ""
    assert result.pages[0].panels[0].visual_marker == "echo"
    assert any('unknown block type "SPEECH"' in w for w in result.warnings)
    assert any("DIALOGUE block missing speaker" in w for w in result.warnings)


def test_duplicate_pages_and_panels_are_skipped() -> None:
    raw = {
        "pages": [
            {"page_number": 1, "panels": [{"panel_number": 1}, {"panel_number": 1}, {"panel_number": 2}]},
            {"page_number": 1, "panels": [{"panel_number": 9}]},
        ]
    }
    result = _validate(raw)

    assert [p.page_number for p in result.pages] == [1]
    assert [panel.panel_number for panel in result.pages[0].panels] == [1, 2]
    assert any("Duplicate page_number 1" in w for w in result.warnings)
    assert any("duplicate panel_number 1" in w for w in result.warnings)


def test_panel_numbers_continue_across_pages() -> None:
    raw = {
        "pages": [
            {"page_number": 1, "panels": [{"panel_number": 1}, {"panel_number": 2}]},
            {"page_number": 2, "panels": [{"panel_number": 1}]},
        ]
    }
    result = _validate(raw)

    assert [panel.panel_number for page in result.pages for panel in page.panels] == [1, 2, 3]
    assert any("renumbered to 3" in w for w in result.warnings)


def test_characters_are_repaired() -> None:
    raw = {
        "characters": [
            {"name": "ELIAS", "role": "Protagonist", "notable_quotes": ["a", "b", "c", 4], "lines_count": "many"},
            {"name": "MAYA", "role": "Sidekick", "pages_present": [2, "x", 3]},
            {"role": "Minor"},
        ]
    }
    result = _validate(raw)
    elias, maya = result.characters

    assert elias.role is CharacterRole.PROTAGONIST
    assert elias.notable_quotes == ["a", "b"]
    assert elias.lines_count == 0
    assert maya.role is None
    assert maya.pages_present == [2, 3]
    assert maya.first_appearance_page == 1
    assert any('unknown role "Sidekick"' in w for w in result.warnings)


def test_lore_is_repaired() -> None:
    raw = {
        "lore": [
            {"name": "Order", "category": "cult", "description": "A cult.", "confidence": 3},
            {"name": "Key", "category": "artifact", "description": "Old key.", "confidence": -1},
            {"name": "Vault", "category": "location", "description": "Deep.", "confidence": "high"},
            {"name": "Nameless"},
        ]
    }
    result = _validate(raw)

    assert [entry.name for entry in result.lore] == ["Order", "Key", "Vault"]
    assert result.lore[0].category is LoreCategory.CONCEPT
    assert result.lore[0].confidence == 1.0
    assert result.lore[1].confidence == 0.0
    assert result.lore[2].confidence == 0.5


def test_timeline_entries_without_name_are_dropped() -> None:
    raw = {"timeline": [{"name": "The Fall", "page": 2}, {"description": "no name"}]}
    result = _validate(raw)

    (event,) = result.timeline
    assert event.name == "The Fall"
    assert event.description == ""
    assert event.characters_involved == []


def test_provenance_and_project_type_are_recorded() -> None:
    result = validate_canonical_result(
        {},
        project_type=ProjectType.SCREENPLAY,
        source_hash="h",
        parser_source="ai+deterministic",
    )
    assert result.project_type is ProjectType.SCREENPLAY
    assert result.parser_source is ParserSource.AI_DETERMINISTIC
    assert result.source_hash == "h"


def test_strict_mode_raises_for_non_mapping() -> None:
    with pytest.raises(ContractValidationError):
        validate_canonical_result(["pages"], source_hash="h", strict=True)

    assert validate_canonical_result({}, source_hash="h", strict=True).pages == []


def test_non_finite_numbers_fall_back_to_defaults() -> None:
    raw = safe_json_loads(
        """{
            "pages": [{"page_number": NaN, "panels": [{"panel_number": Infinity, "blocks": []}]}],
            "characters": [{"name": "ZOEY", "lines_count": Infinity, "first_appearance_page": -Infinity,
                            "pages_present": [1, NaN, 2]}],
            "lore": [{"name": "WAREHOUSE", "category": "location", "description": "Abandoned.", "confidence": NaN}],
            "timeline": [{"name": "Fire", "page": NaN}]
        }"""
    )
    result = _validate(raw)

    assert result.pages[0].page_number == 1
    assert result.pages[0].panels[0].panel_number == 1
    (zoey,) = result.characters
    assert (zoey.lines_count, zoey.first_appearance_page, zoey.pages_present) == (0, 1, [1, 2])
    assert result.lore[0].confidence == 0.5
    assert result.timeline[0].page == 0


def test_huge_integer_confidence_is_clamped() -> None:
    result = _validate({"lore": [{"name": "X", "category": "item", "description": "d", "confidence": 10**400}]})
    assert result.lore[0].confidence == 1.0
