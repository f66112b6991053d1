import pytest

from utils.text_processing import (
    has_faction_keyword,
    has_location_indicator,
    identity_key,
    is_noise_word,
    is_non_character_name,
    normalize_markup,
    truncate,
)


class TestNormalizeMarkup:
    def test_strips_bold_italic_and_headings(self) -> None:
        text = "## PAGE 1\n**ELIAS**: *Run.*"
        assert normalize_markup(text) == "PAGE 1\nELIAS: Run."

    def test_strips_blockquote_code_and_strikethrough(self) -> None:
        text = "> CAPTION: `2093`\n~~old line~~ kept"
        assert normalize_markup(text) == "CAPTION: 2093\nold line kept"

    def test_flattens_table_rows_and_drops_separators(self) -> None:
        text = "| ELIAS | holds a SCARAB |\n|---|---|"
        assert normalize_markup(text) == "ELIAS holds a SCARAB\n"

    def test_preserves_line_breaks_and_punctuation(self) -> None:
        text = "PANEL 1:\n\nWAREHOUSE - 2093.\n"
        assert normalize_markup(text) == text

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "plain text",
            "***nested*** emphasis",
            "# **Heading** with *italic*",
            "| a | **b** |\n|---|---|\n> quote",
            "**bold `code` inside**",
        ],
    )
    def test_is_idempotent(self, text: str) -> None:
        once = normalize_markup(text)
        assert normalize_markup(once) == once

    def test_non_string_input_returns_empty(self) -> None:
        assert normalize_markup(None) == ""  # type: ignore[arg-type]


class TestNameHelpers:
    def test_identity_key_trims_lowercases_and_collapses(self) -> None:
        assert identity_key("  Elias   Vance ") == "elias vance"
        assert identity_key("ELIAS\tVANCE") == identity_key("elias vance")

    def test_noise_words_are_case_insensitive(self) -> None:
        assert is_noise_word("panel")
        assert is_noise_word(" CAPTION ")
        assert not is_noise_word("ELIAS")

    def test_location_indicator_matches_any_word(self) -> None:
        assert has_location_indicator("Abandoned warehouse")
        assert has_location_indicator("ROOFTOP, NIGHT")
        assert not has_location_indicator("ELIAS")

    def test_faction_keyword(self) -> None:
        assert has_faction_keyword("ORDER OF DAWN")
        assert not has_faction_keyword("SCARAB PENDANT")

    @pytest.mark.parametrize("name", ["RADIO", "NEWS ANCHOR ON TV", "CROWD", "PA-SYSTEM", "voice from PHONE"])
    def test_non_character_names(self, name: str) -> None:
        assert is_non_character_name(name)

    def test_regular_names_are_characters(self) -> None:
        assert not is_non_character_name("ELIAS")
        assert not is_non_character_name("ZOEY")

    def test_truncate(self) -> None:
        assert truncate("abcdef", 3) == "abc"
        assert truncate("ab", 3) == "ab"


def test_package_exports_resolve() -> None:
    import utils

    for name in utils.__all__:
        assert callable(getattr(utils, name)), name
