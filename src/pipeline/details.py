"""Meal detail generator.

Same contract as the recommendation generator, for a single meal: one chat
call, coerce a JSON object, validate it as MealDetails. On failure the result
is built from pre-authored records merged over a generic template.
"""

from typing import Optional

from src.models.models import MealDetails, MealDetailsRequest, MealDetailsResult
from src.pipeline.coercion import CoercionError, SchemaError, coerce, decode
from src.pipeline.fallbacks import (
    GENERIC_COOKING_INSTRUCTIONS,
    GENERIC_DIABETIC_TIPS,
    GENERIC_INGREDIENTS,
    GENERIC_MEAL_DESCRIPTION,
    GENERIC_MEAL_NAME,
    GENERIC_NUTRITIONAL_FACTS,
    GENERIC_PLATE_BREAKDOWN,
    MEAL_DETAIL_RECORDS,
    NOTE_DETAILS_FALLBACK,
    find_catalog_meal,
)
from src.pipeline.recommendations import build_chat_provider
from src.prompts.prompts import get_meal_details_messages
from src.providers.client import ChatPayload, ProviderClient
from src.utils.config import Config, config
from src.utils.logger import logger


def _catalog_breakdown(catalog_meal: dict) -> dict:
    plate = catalog_meal["plateMethod"]
    return {
        category: {"items": plate[category], "percentage": section["percentage"]}
        for category, section in GENERIC_PLATE_BREAKDOWN.items()
    }


def build_fallback_details(meal_id: Optional[str] = None, meal_name: Optional[str] = None) -> MealDetails:
    """Build a complete MealDetails record without any provider call.

    Resolution order: pre-authored record for the id (or for the catalog meal
    whose name matches), then catalog meal metadata, then the generic template.
    """
    catalog_meal = find_catalog_meal(meal_id, meal_name)
    key = catalog_meal["id"] if catalog_meal else meal_id
    record = MEAL_DETAIL_RECORDS.get(key, {})

    details = {
        "id": key or meal_name or GENERIC_MEAL_NAME,
        "name": GENERIC_MEAL_NAME,
        "description": GENERIC_MEAL_DESCRIPTION,
        "servings": 1,
        "cookingTime": "30 minutes",
        "difficulty": "Easy",
        "nutritionalFacts": GENERIC_NUTRITIONAL_FACTS,
        "ingredients": GENERIC_INGREDIENTS,
        "cookingInstructions": GENERIC_COOKING_INSTRUCTIONS,
        "diabeticTips": GENERIC_DIABETIC_TIPS,
        "plateMethodBreakdown": GENERIC_PLATE_BREAKDOWN,
    }
    if catalog_meal:
        details.update(
            name=catalog_meal["name"],
            description=catalog_meal["description"],
            servings=catalog_meal["servings"],
            cookingTime=catalog_meal["cookingTime"],
            difficulty=catalog_meal["difficulty"],
            plateMethodBreakdown=_catalog_breakdown(catalog_meal),
        )
    elif meal_name:
        details["name"] = meal_name
    details.update(record)

    # model_validate copies nested data, so the module-level templates are never shared
    return MealDetails.model_validate(details)


def fallback_details(request: MealDetailsRequest, note: str = NOTE_DETAILS_FALLBACK) -> MealDetailsResult:
    return MealDetailsResult(
        meal_details=build_fallback_details(request.meal_id, request.meal_name),
        source="fallback",
        note=note,
    )


class DetailGenerator:
    """Chat prompt → provider → coercion → validation, or the fallback record."""

    def __init__(self, client: Optional[ProviderClient] = None, settings: Config = config):
        self.client = client or ProviderClient()
        self.settings = settings
        self.provider = build_chat_provider(settings)

    @staticmethod
    def parse_reply(text: str, request: MealDetailsRequest) -> MealDetails:
        """Decode a chat reply into MealDetails, defaulting `id` from the request.

        Raises:
            CoercionError: No JSON object could be read.
            SchemaError: The object does not validate.
        """
        value = coerce(text, "object")
        if not str(value.get("id") or "").strip():
            value["id"] = request.meal_id or request.meal_name
        details = decode(value, MealDetails)

        total = details.plate_method_breakdown.percentage_total()
        if total != 100:
            logger.warning(
                f"Plate method percentages for {details.id} add up to {total}",
                extra={"stage": "details"},
            )
        return details

    async def generate(self, request: MealDetailsRequest) -> MealDetailsResult:
        """Produce full details for one meal.

        Args:
            request: Validated request carrying meal_id and/or meal_name.

        Returns:
            MealDetailsResult with source "generated", or a fallback record with
            source "fallback" and a note.
        """
        system, user = get_meal_details_messages(request.display_name)
        payload = ChatPayload(
            system=system,
            user=user,
            temperature=self.settings.DETAILS_TEMPERATURE,
            max_tokens=self.settings.DETAILS_MAX_TOKENS,
        )
        attempt = await self.client.invoke(self.provider, payload, self.settings.CHAT_TIMEOUT_SECONDS)

        if not attempt.succeeded:
            logger.warning(
                f"Detail provider unavailable, using fallback details for {request.display_name}",
                extra={"stage": "details", "source": "fallback"},
            )
            return fallback_details(request)

        try:
            details = self.parse_reply(attempt.text, request)
        except (CoercionError, SchemaError) as e:
            logger.warning(
                f"Could not use detail reply ({e}), using fallback details",
                extra={"stage": "details", "source": "fallback"},
            )
            return fallback_details(request)

        logger.info(f"Generated meal details for {details.name}", extra={"stage": "details", "source": "generated"})
        return MealDetailsResult(meal_details=details, source="generated")
