"""Data models and schemas for the diabetic meal pipeline.

Defines Pydantic models for request/response validation and domain objects.
All models use Pydantic v2. Wire names are camelCase (the browser UI contract),
Python attributes are snake_case; every model accepts either form on input.

Models that decode chat-model output are lenient on representation (numbers
given as "45g", difficulty given as "easy", steps numbered out of order) but
strict on presence and type: anything that cannot be normalized raises
ValidationError, which the generators treat as a schema failure.
"""

import re
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.utils.config import MAX_INGREDIENTS_LIMIT


MAX_DESCRIPTION_LENGTH = 100

Number = Union[int, float]
Difficulty = Literal["Easy", "Medium", "Hard"]
ResultSource = Literal["generated", "fallback"]

_NUMBER_PATTERN = re.compile(r"-?\d+(?:\.\d+)?")


class CamelModel(BaseModel):
    """Base model serializing to camelCase and accepting both naming styles."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


def _stringify(value):
    """Coerce bare numbers to strings (models often emit ids and times as numbers)."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return value


# ============================================================================
# Input
# ============================================================================


class ImageBlob(BaseModel):
    """Image payload for one analysis run. Never persisted."""

    data: Annotated[bytes, Field(min_length=1, description="Raw image bytes")]
    mime_type: Annotated[str, Field("image/jpeg", description="Declared MIME type")]


class MealRecommendationsRequest(CamelModel):
    """Request body for POST /api/meal-recommendations."""

    ingredients: Annotated[
        List[str], Field(description="Ingredient names (may be empty; fallback meals are returned)")
    ]

    @field_validator("ingredients", mode="before")
    @classmethod
    def stringify_items(cls, value):
        """Accept any array; items become trimmed strings, nulls and blanks are dropped."""
        if isinstance(value, list):
            items = (item if isinstance(item, str) else str(item) for item in value if item is not None)
            return [item.strip() for item in items if item.strip()]
        return value


class MealDetailsRequest(CamelModel):
    """Request body for POST /api/meal-details. At least one identifier is required."""

    meal_id: Annotated[Optional[str], Field(None, description="Meal identifier from a recommendation")]
    meal_name: Annotated[Optional[str], Field(None, description="Display name of the meal")]

    @field_validator("meal_id", "meal_name", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        value = _stringify(value)
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @model_validator(mode="after")
    def require_identifier(self) -> "MealDetailsRequest":
        """Ensure either meal_id or meal_name is provided."""
        if not self.meal_id and not self.meal_name:
            raise ValueError("Meal ID or name required")
        return self

    @property
    def display_name(self) -> str:
        return self.meal_name or self.meal_id


# ============================================================================
# Provider attempts
# ============================================================================


class ProviderErrorKind(str, Enum):
    """Why a single provider call produced no usable text."""

    UNREACHABLE = "unreachable"
    TIMEOUT = "timeout"
    NON_SUCCESS_STATUS = "non_success_status"
    EMPTY_BODY = "empty_body"


class ProviderAttempt(BaseModel):
    """Outcome of one provider call: Success(text) or Failure(kind)."""

    provider_id: str
    model_id: str
    text: Optional[str] = None
    error_kind: Optional[ProviderErrorKind] = None
    status_code: Optional[int] = None
    detail: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.error_kind is None and bool(self.text and self.text.strip())

    def describe(self) -> str:
        if self.succeeded:
            return f"{self.provider_id}:{self.model_id} ok ({len(self.text)} chars)"
        kind = self.error_kind.value if self.error_kind else "empty_body"
        if self.status_code is not None:
            kind = f"{kind}({self.status_code})"
        return f"{self.provider_id}:{self.model_id} failed [{kind}]"


class VisionExtractionResult(BaseModel):
    """Text produced by the vision stage plus the model that produced it."""

    text: str
    model_used: str
    attempts: List[ProviderAttempt] = Field(default_factory=list)

    @property
    def used_fallback(self) -> bool:
        return not any(attempt.succeeded for attempt in self.attempts)


# ============================================================================
# Meal recommendations
# ============================================================================


class PlateMethod(CamelModel):
    """Plate-method grouping of a meal's components."""

    vegetables: List[str]
    protein: List[str]
    carbohydrates: List[str]


class MealRecommendation(CamelModel):
    """One diabetes-friendly meal suggestion."""

    id: Annotated[str, Field(min_length=1)]
    name: Annotated[str, Field(min_length=1, max_length=200)]
    description: Annotated[str, Field(max_length=MAX_DESCRIPTION_LENGTH)]
    plate_method: PlateMethod
    suitability_score: Annotated[int, Field(ge=1, le=10, description="How suitable for diabetes (1-10)")]
    cooking_time: Annotated[str, Field(min_length=1, description='e.g. "30 minutes"')]
    difficulty: Difficulty
    servings: Annotated[int, Field(gt=0)]

    @field_validator("id", "cooking_time", mode="before")
    @classmethod
    def coerce_text(cls, value, info):
        if info.field_name == "cooking_time" and isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{int(value)} minutes"
        return _stringify(value)

    @field_validator("description", mode="before")
    @classmethod
    def truncate_description(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if len(value) > MAX_DESCRIPTION_LENGTH:
                return value[: MAX_DESCRIPTION_LENGTH - 3].rstrip() + "..."
        return value

    @field_validator("suitability_score", mode="before")
    @classmethod
    def round_score(cls, value):
        if isinstance(value, float):
            return int(round(value))
        if isinstance(value, str):
            match = _NUMBER_PATTERN.search(value)
            return int(round(float(match.group()))) if match else value
        return value

    @field_validator("difficulty", mode="before")
    @classmethod
    def normalize_difficulty(cls, value):
        if isinstance(value, str):
            return value.strip().capitalize()
        return value


# ============================================================================
# Meal details
# ============================================================================


class NutritionalFacts(CamelModel):
    """Per-serving nutrition estimate. Grams except sodium (mg) and glycemic index."""

    calories: Annotated[Number, Field(ge=0)]
    carbohydrates: Annotated[Number, Field(ge=0)]
    protein: Annotated[Number, Field(ge=0)]
    fat: Annotated[Number, Field(ge=0)]
    fiber: Annotated[Number, Field(ge=0)]
    sugar: Annotated[Number, Field(ge=0)]
    sodium: Annotated[Number, Field(ge=0)]
    glycemic_index: Annotated[Number, Field(ge=0)]

    @field_validator("*", mode="before")
    @classmethod
    def parse_quantity(cls, value):
        """Accept "45g", "580 mg" or "35 (low)" by taking the first number."""
        if isinstance(value, str):
            match = _NUMBER_PATTERN.search(value)
            if not match:
                return value
            number = float(match.group())
            return int(number) if number.is_integer() else number
        return value


class CookingInstruction(CamelModel):
    """One step of a recipe."""

    step: Annotated[int, Field(ge=1)]
    instruction: Annotated[str, Field(min_length=1)]
    time: Optional[str] = None
    temperature: Optional[str] = None

    @field_validator("time", "temperature", mode="before")
    @classmethod
    def coerce_text(cls, value):
        return _stringify(value)


class PlateSection(CamelModel):
    """Items and share of the plate for one plate-method category."""

    items: List[str]
    percentage: Annotated[int, Field(ge=0, le=100)]

    @field_validator("percentage", mode="before")
    @classmethod
    def parse_percentage(cls, value):
        if isinstance(value, str):
            match = _NUMBER_PATTERN.search(value)
            return int(round(float(match.group()))) if match else value
        if isinstance(value, float):
            return int(round(value))
        return value


class PlateMethodBreakdown(CamelModel):
    """Plate-method split of a detailed meal. Percentages are advisory."""

    vegetables: PlateSection
    protein: PlateSection
    carbohydrates: PlateSection

    def percentage_total(self) -> int:
        return self.vegetables.percentage + self.protein.percentage + self.carbohydrates.percentage


class MealDetails(CamelModel):
    """Full recipe and nutrition record for one meal."""

    id: Annotated[str, Field(min_length=1)]
    name: Annotated[str, Field(min_length=1)]
    description: str
    servings: Annotated[int, Field(gt=0)]
    cooking_time: Annotated[str, Field(min_length=1)]
    difficulty: Annotated[str, Field(min_length=1)]
    nutritional_facts: NutritionalFacts
    ingredients: Annotated[List[str], Field(min_length=1)]
    cooking_instructions: Annotated[List[CookingInstruction], Field(min_length=1)]
    diabetic_tips: Annotated[List[str], Field(min_length=1)]
    plate_method_breakdown: PlateMethodBreakdown

    @field_validator("id", "cooking_time", mode="before")
    @classmethod
    def coerce_text(cls, value, info):
        if info.field_name == "cooking_time" and isinstance(value, (int, float)) and not isinstance(value, bool):
            return f"{int(value)} minutes"
        return _stringify(value)

    @field_validator("cooking_instructions", mode="before")
    @classmethod
    def accept_plain_steps(cls, value):
        """Accept a list of plain strings as step instructions."""
        if isinstance(value, list):
            return [
                {"step": index, "instruction": item} if isinstance(item, str) else item
                for index, item in enumerate(value, start=1)
            ]
        return value

    @model_validator(mode="after")
    def number_steps_in_order(self) -> "MealDetails":
        """Renumber steps 1..n when the given numbering is not strictly increasing."""
        steps = [instruction.step for instruction in self.cooking_instructions]
        if any(later <= earlier for earlier, later in zip(steps, steps[1:])):
            for index, instruction in enumerate(self.cooking_instructions, start=1):
                instruction.step = index
        return self


# ============================================================================
# Pipeline results and HTTP responses
# ============================================================================


class RecommendationResult(BaseModel):
    """Meals produced by the recommendation stage with their provenance."""

    meals: Annotated[List[MealRecommendation], Field(min_length=1)]
    source: ResultSource
    note: Optional[str] = None


class MealDetailsResult(BaseModel):
    """Detail record produced by the detail stage with its provenance."""

    meal_details: MealDetails
    source: ResultSource
    note: Optional[str] = None


class AnalyzeImageResponse(CamelModel):
    """Response body for POST /api/analyze-image."""

    success: bool = True
    ingredients: Annotated[List[str], Field(min_length=1, max_length=MAX_INGREDIENTS_LIMIT)]
    raw_response: str
    model_used: str


class MealRecommendationsResponse(CamelModel):
    """Response body for POST /api/meal-recommendations."""

    success: bool = True
    meals: Annotated[List[MealRecommendation], Field(min_length=1)]
    total_count: int
    note: Optional[str] = None


class MealDetailsResponse(CamelModel):
    """Response body for POST /api/meal-details."""

    success: bool = True
    meal_details: MealDetails
    note: Optional[str] = None


class ErrorResponse(BaseModel):
    """Body returned with 4xx input errors."""

    error: str
