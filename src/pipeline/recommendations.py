"""Meal recommendation generator.

One chat call per request. The reply is coerced into a JSON array and each
element is validated as a MealRecommendation; invalid elements are dropped.
Any failure (provider, coercion, empty result) returns the fixed fallback
catalog instead.
"""

from typing import Optional

from src.models.models import MealRecommendation, RecommendationResult
from src.pipeline.coercion import CoercionError, SchemaError, coerce, decode_items
from src.pipeline.fallbacks import NOTE_RECOMMENDATIONS_FALLBACK, get_fallback_meals
from src.prompts.prompts import get_recommendation_messages
from src.providers.client import ChatPayload, ProviderClient, ProviderKind, ProviderSpec
from src.utils.config import Config, config
from src.utils.logger import logger


def build_chat_provider(settings: Config = config) -> ProviderSpec:
    """ProviderSpec for the configured OpenAI-compatible chat endpoint."""
    return ProviderSpec(
        provider_id="deepseek",
        kind=ProviderKind.CHAT_COMPLETION,
        model_id=settings.CHAT_MODEL,
        api_key=settings.DEEPSEEK_API_KEY,
        base_url=settings.CHAT_API_BASE_URL,
    )


def fallback_recommendations(note: str = NOTE_RECOMMENDATIONS_FALLBACK) -> RecommendationResult:
    return RecommendationResult(meals=get_fallback_meals(), source="fallback", note=note)


class RecommendationGenerator:
    """Chat prompt → provider → coercion → validation, or the fallback catalog."""

    def __init__(self, client: Optional[ProviderClient] = None, settings: Config = config):
        self.client = client or ProviderClient()
        self.settings = settings
        self.provider = build_chat_provider(settings)

    def parse_reply(self, text: str) -> list[MealRecommendation]:
        """Decode a chat reply into at most MAX_MEALS validated meals.

        Raises:
            CoercionError: No JSON array could be read.
            SchemaError: No element passed validation.
        """
        items = coerce(text, "array")
        meals = decode_items(items, MealRecommendation)
        if not meals:
            raise SchemaError(f"None of {len(items)} recommended meals passed validation")
        if len(meals) < len(items):
            logger.info(
                f"Dropped {len(items) - len(meals)} invalid meal(s) from model reply",
                extra={"stage": "recommendations"},
            )
        return meals[: self.settings.MAX_MEALS]

    async def generate(self, ingredients: list[str]) -> RecommendationResult:
        """Produce meal recommendations for an ingredient list (may be empty).

        Args:
            ingredients: Parsed ingredient names.

        Returns:
            RecommendationResult with source "generated", or the fallback catalog
            with source "fallback" and a note.
        """
        system, user = get_recommendation_messages(ingredients, meal_count=self.settings.MAX_MEALS)
        payload = ChatPayload(
            system=system,
            user=user,
            temperature=self.settings.RECOMMENDATION_TEMPERATURE,
            max_tokens=self.settings.RECOMMENDATION_MAX_TOKENS,
        )
        attempt = await self.client.invoke(self.provider, payload, self.settings.CHAT_TIMEOUT_SECONDS)

        if not attempt.succeeded:
            logger.warning(
                "Recommendation provider unavailable, using fallback catalog",
                extra={"stage": "recommendations", "source": "fallback"},
            )
            return fallback_recommendations()

        try:
            meals = self.parse_reply(attempt.text)
        except (CoercionError, SchemaError) as e:
            logger.warning(
                f"Could not use recommendation reply ({e}), using fallback catalog",
                extra={"stage": "recommendations", "source": "fallback"},
            )
            return fallback_recommendations()

        logger.info(
            f"Generated {len(meals)} meal recommendations from {len(ingredients)} ingredients",
            extra={"stage": "recommendations", "source": "generated"},
        )
        return RecommendationResult(meals=meals, source="generated")
