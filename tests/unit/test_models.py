"""Unit tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from src.models.models import (
    AnalyzeImageResponse,
    MealDetails,
    MealDetailsRequest,
    MealRecommendation,
    MealRecommendationsRequest,
    MealRecommendationsResponse,
    NutritionalFacts,
    ProviderAttempt,
    ProviderErrorKind,
    VisionExtractionResult,
)


def _meal(**overrides):
    meal = {
        "id": "m1",
        "name": "Veggie Omelette",
        "description": "Eggs with spinach and peppers",
        "plateMethod": {"vegetables": ["Spinach"], "protein": ["Eggs"], "carbohydrates": ["Toast"]},
        "suitabilityScore": 8,
        "cookingTime": "15 minutes",
        "difficulty": "Easy",
        "servings": 1,
    }
    meal.update(overrides)
    return meal


def _details(**overrides):
    details = {
        "id": "m1",
        "name": "Veggie Omelette",
        "description": "Eggs with spinach",
        "servings": 1,
        "cookingTime": "15 minutes",
        "difficulty": "Easy",
        "nutritionalFacts": {
            "calories": 300,
            "carbohydrates": 12,
            "protein": 20,
            "fat": 18,
            "fiber": 4,
            "sugar": 3,
            "sodium": 400,
            "glycemicIndex": 25,
        },
        "ingredients": ["2 eggs", "1 cup spinach"],
        "cookingInstructions": [
            {"step": 1, "instruction": "Whisk eggs"},
            {"step": 2, "instruction": "Cook with spinach", "time": "5 minutes"},
        ],
        "diabeticTips": ["Pair with whole grain toast"],
        "plateMethodBreakdown": {
            "vegetables": {"items": ["Spinach"], "percentage": 50},
            "protein": {"items": ["Eggs"], "percentage": 25},
            "carbohydrates": {"items": ["Toast"], "percentage": 25},
        },
    }
    details.update(overrides)
    return details


class TestMealDetailsRequest:
    """Test request validation for meal details."""

    def test_accepts_meal_id(self):
        request = MealDetailsRequest.model_validate({"mealId": "diabetic-fish-2"})
        assert request.meal_id == "diabetic-fish-2"
        assert request.display_name == "diabetic-fish-2"

    def test_prefers_name_for_display(self):
        request = MealDetailsRequest.model_validate({"mealId": "x-1", "mealName": "Lentil Curry"})
        assert request.display_name == "Lentil Curry"

    @pytest.mark.parametrize("body", [{}, {"mealId": ""}, {"mealId": "  ", "mealName": ""}])
    def test_requires_an_identifier(self, body):
        with pytest.raises(ValidationError, match="Meal ID or name required"):
            MealDetailsRequest.model_validate(body)

    def test_numeric_id_is_stringified(self):
        assert MealDetailsRequest.model_validate({"mealId": 7}).meal_id == "7"


class TestMealRecommendationsRequest:
    def test_accepts_empty_list(self):
        assert MealRecommendationsRequest.model_validate({"ingredients": []}).ingredients == []

    def test_array_items_are_stringified(self):
        request = MealRecommendationsRequest.model_validate({"ingredients": [1, 2.5, " oats ", None, "", "  "]})
        assert request.ingredients == ["1", "2.5", "oats"]

    @pytest.mark.parametrize("body", [{}, {"ingredients": "oats"}, {"ingredients": None}, ["oats"]])
    def test_rejects_invalid_bodies(self, body):
        with pytest.raises(ValidationError):
            MealRecommendationsRequest.model_validate(body)


class TestMealRecommendation:
    """Test normalization of model-generated meals."""

    def test_valid_meal(self):
        meal = MealRecommendation.model_validate(_meal())
        assert meal.plate_method.protein == ["Eggs"]
        assert meal.suitability_score == 8

    def test_serializes_camel_case(self):
        dumped = MealRecommendation.model_validate(_meal()).model_dump(by_alias=True)
        assert "plateMethod" in dumped
        assert "suitabilityScore" in dumped
        assert "cookingTime" in dumped

    def test_long_description_is_truncated(self):
        meal = MealRecommendation.model_validate(_meal(description="x" * 150))
        assert len(meal.description) == 100
        assert meal.description.endswith("...")

    def test_normalizes_loose_values(self):
        meal = MealRecommendation.model_validate(
            _meal(id=3, suitabilityScore="9/10", cookingTime=25, difficulty="medium")
        )
        assert meal.id == "3"
        assert meal.suitability_score == 9
        assert meal.cooking_time == "25 minutes"
        assert meal.difficulty == "Medium"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"suitabilityScore": 11},
            {"suitabilityScore": 0},
            {"difficulty": "Expert"},
            {"servings": 0},
            {"name": ""},
            {"plateMethod": {"vegetables": ["Kale"]}},
        ],
    )
    def test_rejects_invalid_meals(self, overrides):
        with pytest.raises(ValidationError):
            MealRecommendation.model_validate(_meal(**overrides))


class TestNutritionalFacts:
    def test_parses_units(self):
        facts = NutritionalFacts.model_validate(
            {
                "calories": "420 kcal",
                "carbohydrates": "35g",
                "protein": 35,
                "fat": "16.5 g",
                "fiber": 10,
                "sugar": 6,
                "sodium": "450mg",
                "glycemicIndex": "30 (low)",
            }
        )
        assert facts.calories == 420
        assert facts.fat == 16.5
        assert facts.sodium == 450
        assert facts.glycemic_index == 30

    def test_rejects_negative(self):
        with pytest.raises(ValidationError):
            NutritionalFacts.model_validate(
                {
                    "calories": -1,
                    "carbohydrates": 0,
                    "protein": 0,
                    "fat": 0,
                    "fiber": 0,
                    "sugar": 0,
                    "sodium": 0,
                    "glycemicIndex": 0,
                }
            )


class TestMealDetails:
    def test_valid_details(self):
        details = MealDetails.model_validate(_details())
        assert details.cooking_instructions[1].time == "5 minutes"
        assert details.plate_method_breakdown.percentage_total() == 100

    def test_plain_string_steps_are_numbered(self):
        details = MealDetails.model_validate(_details(cookingInstructions=["Whisk eggs", "Cook"]))
        assert [s.step for s in details.cooking_instructions] == [1, 2]
        assert details.cooking_instructions[0].instruction == "Whisk eggs"

    def test_out_of_order_steps_are_renumbered(self):
        details = MealDetails.model_validate(
            _details(
                cookingInstructions=[
                    {"step": 2, "instruction": "A"},
                    {"step": 2, "instruction": "B"},
                    {"step": 1, "instruction": "C"},
                ]
            )
        )
        assert [s.step for s in details.cooking_instructions] == [1, 2, 3]
        assert [s.instruction for s in details.cooking_instructions] == ["A", "B", "C"]

    def test_increasing_steps_are_kept(self):
        details = MealDetails.model_validate(
            _details(cookingInstructions=[{"step": 1, "instruction": "A"}, {"step": 3, "instruction": "B"}])
        )
        assert [s.step for s in details.cooking_instructions] == [1, 3]

    def test_percentages_are_not_enforced(self):
        breakdown = _details()["plateMethodBreakdown"]
        breakdown["vegetables"]["percentage"] = 40
        details = MealDetails.model_validate(_details(plateMethodBreakdown=breakdown))
        assert details.plate_method_breakdown.percentage_total() == 90

    @pytest.mark.parametrize("field", ["ingredients", "cookingInstructions", "diabeticTips"])
    def test_empty_collections_are_rejected(self, field):
        with pytest.raises(ValidationError):
            MealDetails.model_validate(_details(**{field: []}))


class TestProviderAttempt:
    def test_success(self):
        attempt = ProviderAttempt(provider_id="gemini", model_id="gemini-2.5-flash-lite", text="- Oats")
        assert attempt.succeeded is True
        assert "ok" in attempt.describe()

    def test_whitespace_text_is_not_success(self):
        attempt = ProviderAttempt(provider_id="hf", model_id="m", text="   ")
        assert attempt.succeeded is False

    def test_failure_description_includes_status(self):
        attempt = ProviderAttempt(
            provider_id="huggingface",
            model_id="llava-hf/llava-1.5-7b-hf",
            error_kind=ProviderErrorKind.NON_SUCCESS_STATUS,
            status_code=503,
        )
        assert attempt.succeeded is False
        assert "non_success_status(503)" in attempt.describe()

    def test_vision_result_fallback_flag(self):
        failed = ProviderAttempt(provider_id="gemini", model_id="g", error_kind=ProviderErrorKind.TIMEOUT)
        result = VisionExtractionResult(text="sample", model_used="Fallback", attempts=[failed])
        assert result.used_fallback is True


class TestResponses:
    def test_analyze_response_wire_names(self):
        dumped = AnalyzeImageResponse(
            ingredients=["Oats"], raw_response="- Oats", model_used="gemini"
        ).model_dump(by_alias=True)
        assert dumped == {"success": True, "ingredients": ["Oats"], "rawResponse": "- Oats", "modelUsed": "gemini"}

    def test_recommendations_response_omits_empty_note(self):
        response = MealRecommendationsResponse(meals=[MealRecommendation.model_validate(_meal())], total_count=1)
        dumped = response.model_dump(by_alias=True, exclude_none=True)
        assert dumped["totalCount"] == 1
        assert "note" not in dumped
