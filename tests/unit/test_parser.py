"""Unit tests for the ingredient parser."""

import pytest

from src.pipeline.fallbacks import CANONICAL_INGREDIENTS, FALLBACK_VISION_TEXT
from src.pipeline.parser import (
    DENYLIST,
    deduplicate,
    extract_pattern_clauses,
    extract_structured_lines,
    parse_ingredients,
)


class TestStructuredLines:
    """Dash, bullet, star and numbered list lines."""

    def test_dash_list(self):
        assert parse_ingredients("- Flour\n- Sugar\n- Water") == ["Flour", "Sugar", "Water"]

    def test_mixed_markers_and_indentation(self):
        text = "Here is what I see:\n  • Rolled oats\n* Honey\n3. Sea salt\n10. Almonds"
        assert extract_structured_lines(text) == ["Rolled oats", "Honey", "Sea salt", "Almonds"]

    def test_marker_requires_whitespace(self):
        assert extract_structured_lines("-Flour\n1.5 cups sugar") == []

    def test_short_and_denylisted_items_are_dropped(self):
        text = "- Oats\n- B6\n- Product of Italy\n- Photo of a box\n- Milk"
        assert extract_structured_lines(text) == ["Oats", "Milk"]

    def test_structured_lines_win_over_patterns(self):
        text = "Ingredients: corn, rice\n- Wheat\n- Barley"
        assert parse_ingredients(text) == ["Wheat", "Barley"]


class TestPatternClauses:
    """Keyword clauses used when no list lines are present."""

    def test_ingredients_clause_stops_at_contains(self):
        text = "Ingredients: oats, milk, salt. Contains: nuts."
        assert parse_ingredients(text) == ["oats", "milk", "salt"]

    def test_contains_clause(self):
        assert extract_pattern_clauses("Contains wheat; soy; eggs. May contain traces of nuts") == [
            "wheat",
            "soy",
            "eggs",
        ]

    def test_made_with_clause(self):
        assert extract_pattern_clauses("Proudly made with: cocoa, cane sugar\nBest before 2027") == [
            "cocoa",
            "cane sugar",
        ]

    def test_clause_stops_at_newline(self):
        assert extract_pattern_clauses("INGREDIENTS: Water, Salt\nNutrition facts per 100g") == ["Water", "Salt"]

    def test_stopwords_are_dropped(self):
        assert extract_pattern_clauses("Ingredients: sugar, and, the, with, cocoa butter") == [
            "sugar",
            "cocoa butter",
        ]

    def test_falls_through_to_next_pattern_when_clause_is_empty(self):
        text = "Ingredient: a, or\nContains: peanuts, sesame"
        assert extract_pattern_clauses(text) == ["peanuts", "sesame"]

    def test_fallback_vision_text_is_parseable(self):
        items = parse_ingredients(FALLBACK_VISION_TEXT)
        assert items[:3] == ["flour", "sugar", "salt"]
        assert "minerals" in items


class TestDeduplication:
    def test_case_sensitive_by_default(self):
        assert parse_ingredients("- Sugar\n- sugar\n- Sugar", case_insensitive=False) == ["Sugar", "sugar"]

    def test_case_insensitive_keeps_first_spelling(self):
        assert deduplicate(["Sugar", "SUGAR", "Salt", "sugar"], case_insensitive=True) == ["Sugar", "Salt"]


class TestLimitsAndFallback:
    def test_capped_at_max_items(self):
        text = "\n".join(f"- Ingredient number {i}" for i in range(30))
        items = parse_ingredients(text, max_items=20)
        assert len(items) == 20
        assert items[0] == "Ingredient number 0"

    @pytest.mark.parametrize(
        "text",
        ["", None, "The image shows a colorful box.", "- ab\n- Product photo", "Ingredients: a, of, in"],
    )
    def test_no_ingredients_returns_canonical_list(self, text):
        assert parse_ingredients(text, max_items=20) == CANONICAL_INGREDIENTS

    def test_canonical_list_is_a_copy(self):
        items = parse_ingredients("", max_items=20)
        items.append("Extra")
        assert "Extra" not in CANONICAL_INGREDIENTS


class TestProperties:
    SAMPLES = [
        "- Flour\n- Sugar\n- Water",
        "Ingredients: oats, milk, salt. Contains: nuts.",
        "This product label shows: ingredients: Photo paper, rice, beans",
        FALLBACK_VISION_TEXT,
        "",
    ]

    @pytest.mark.parametrize("text", SAMPLES)
    def test_parser_is_deterministic(self, text):
        assert parse_ingredients(text) == parse_ingredients(text)

    @pytest.mark.parametrize("text", SAMPLES)
    def test_results_are_bounded_and_clean(self, text):
        items = parse_ingredients(text)
        assert 1 <= len(items) <= 20
        for item in items:
            assert len(item) > 2
            assert not any(word in item.lower() for word in DENYLIST)
