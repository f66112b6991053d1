import pytest

import config
from processing.entity_registry import EntityRegistry
from processing.extraction_rules import RULES, classify_line, extract_entities, run_cascade
from processing.line_segmenter import ScriptLine, iter_lines


def _names(items) -> list[str]:
    return [item.name for item in items]


class TestScenarios:
    def test_scenario_a(self, scenario_a: str) -> None:
        result = extract_entities(scenario_a)

        (elias,) = result.characters
        assert (elias.name, elias.age, elias.first_mention) == ("ELIAS", 30, 5)

        (warehouse,) = result.locations
        assert (warehouse.name, warehouse.year) == ("WAREHOUSE", 2093)

        assert [entry.year for entry in result.timeline] == [2093]
        assert _names(result.echoes) == ["SCARAB"]
        assert result.echoes[0].type == "object"

    def test_scenario_b(self, scenario_b: str) -> None:
        result = extract_entities(scenario_b)

        by_name = {c.name: c for c in result.characters}
        assert list(by_name) == ["ELIAS", "ZOEY"]
        assert by_name["ELIAS"].age == 30
        assert by_name["ELIAS"].traits == ("DBS scar",)
        assert by_name["ZOEY"].age == 25
        assert by_name["ZOEY"].traits == ("scarred",)

        assert [(loc.name, loc.year) for loc in result.locations] == [("WAREHOUSE", 2093)]
        assert [entry.year for entry in result.timeline] == [2093]
        assert _names(result.echoes) == ["SCARAB PENDANT"]

    def test_merge_keeps_first_age_and_adds_traits(self) -> None:
        result = extract_entities("ELIAS (30) stands.\nLater, ELIAS (older, scarred) returns.")

        (elias,) = result.characters
        assert elias.age == 30
        assert "scarred" in elias.traits

    def test_empty_input(self) -> None:
        assert extract_entities("").is_empty
        assert extract_entities("   \n\n  ").is_empty

    def test_is_deterministic(self, scenario_b: str) -> None:
        assert extract_entities(scenario_b) == extract_entities(scenario_b)


class TestRuleOrder:
    def test_rule_order_is_pinned(self) -> None:
        assert [rule.name for rule in RULES] == [
            "panel_header",
            "character_with_age",
            "inline_character",
            "dialogue",
            "location_with_year",
            "caps_location",
            "panel_description_location",
            "interior_exterior",
            "establishing_shot",
            "descriptive_location",
            "timeline_year",
            "echo_action_verb",
            "echo_article_caps",
        ]

    def test_panel_header_short_circuits_echoes(self) -> None:
        registry = EntityRegistry()
        matched = classify_line(ScriptLine(1, "Panel 1: She holds a KNIFE.", 1), registry)

        assert matched == ["panel_header", "panel_description_location"]
        assert registry.snapshot().echoes == []

    def test_panel_header_description_registers_location(self) -> None:
        registry = EntityRegistry()
        classify_line(ScriptLine(1, "PANEL 1: Rooftop.", 1), registry)
        assert _names(registry.snapshot().locations) == ["Rooftop"]

    def test_panel_description_rule_handles_internal_periods(self) -> None:
        result = run_cascade(iter_lines("Panel 2: Int. warehouse office."))
        assert _names(result.locations) == ["Int. warehouse office"]

    def test_character_with_age_blocks_inline_rule(self) -> None:
        registry = EntityRegistry()
        matched = classify_line(ScriptLine(1, "ELIAS (30) meets MAYA (early 20s).", 0), registry)

        assert "character_with_age" in matched
        assert "inline_character" not in matched
        assert _names(registry.snapshot().characters) == ["ELIAS"]

    def test_inline_character_with_descriptive_age(self) -> None:
        result = extract_entities("A man enters. MARCUS (late 40s, limping) follows.")
        (marcus,) = result.characters
        assert marcus.age == 40
        assert marcus.traits == ("limping",)

    def test_dialogue_claims_line_before_caps_location(self) -> None:
        result = extract_entities("HOSPITAL: We're closed.")
        assert _names(result.characters) == ["HOSPITAL"]
        assert result.locations == []

    def test_character_with_age_claims_line_before_caps_location(self) -> None:
        result = extract_entities("WAREHOUSE (30).")
        assert _names(result.characters) == ["WAREHOUSE"]
        assert result.characters[0].age == 30
        assert result.locations == []


class TestLocationRules:
    def test_caps_only_location_line(self) -> None:
        assert _names(extract_entities("ABANDONED WAREHOUSE.").locations) == ["ABANDONED WAREHOUSE"]

    def test_caps_line_without_indicator_is_ignored(self) -> None:
        assert extract_entities("SUDDENLY.").locations == []

    def test_interior_slug_requires_indicator(self) -> None:
        assert _names(extract_entities("Interior. Abandoned warehouse.").locations) == ["Abandoned warehouse"]
        assert extract_entities("Exterior. Night sky.").locations == []

    def test_establishing_shot(self) -> None:
        result = extract_entities("Establishing shot. Grand Central Station at night.")
        assert _names(result.locations) == ["Grand Central Station"]

    def test_descriptive_location_phrase(self) -> None:
        assert _names(extract_entities("Hospital ward, third floor.").locations) == ["Hospital ward"]

    def test_location_year_outside_range_is_not_registered(self) -> None:
        result = extract_entities("WAREHOUSE - 1999")
        assert result.locations == []
        assert result.timeline == []


class TestTimeline:
    def test_only_years_in_range_are_kept(self) -> None:
        result = extract_entities("Between 1999, 2250 and 2101 things changed.")
        assert [entry.year for entry in result.timeline] == [2101]

    def test_first_occurrence_wins(self) -> None:
        result = extract_entities("CAPTION: 2093, the fall.\nCAPTION: Still 2093.")
        (entry,) = result.timeline
        assert entry.context == "CAPTION: 2093, the fall."
        assert entry.first_mention == 1

    def test_context_is_truncated(self) -> None:
        line = "2093 " + "x" * 200
        (entry,) = extract_entities(line).timeline
        assert len(entry.context) == config.MAX_CONTEXT_LENGTH


class TestEchoes:
    def test_action_verb_strips_leading_article(self) -> None:
        assert _names(extract_entities("She grabs THE KEY.").echoes) == ["KEY"]

    def test_echo_never_shares_character_key(self) -> None:
        result = extract_entities("ELIAS: Hello.\nMaya holds ELIAS.")
        assert _names(result.characters) == ["ELIAS"]
        assert result.echoes == []

    def test_article_caps_requires_upper_case_words(self) -> None:
        assert extract_entities("He sees a Broken watch.").echoes == []

    def test_article_caps_knob(self, monkeypatch: pytest.MonkeyPatch) -> None:
        line = "There is a BROKEN WATCH on the table."
        assert _names(extract_entities(line).echoes) == ["BROKEN WATCH"]

        monkeypatch.setattr(config, "ECHO_ARTICLE_CAPS_ENABLED", False)
        assert extract_entities(line).echoes == []


def test_segmenter_flags_lines_after_blank_lines() -> None:
    lines = list(iter_lines("MAYA\nHello.\n\n\nPanel 2\n  ELIAS\n"))

    assert [(line.number, line.text, line.after_blank) for line in lines] == [
        (1, "MAYA", False),
        (2, "Hello.", False),
        (5, "Panel 2", True),
        (6, "ELIAS", False),
    ]
    assert [line.panel for line in lines] == [0, 0, 2, 2]
