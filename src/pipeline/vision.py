"""Vision extraction orchestrator.

Walks an ordered list of vision providers, one at a time, and stops at the
first non-empty answer. When every provider fails, a fixed sample description
is returned with `model_used="Fallback"`, so `extract()` never raises (apart
from cancellation).
"""

from contextlib import aclosing
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from src.models.models import ImageBlob, ProviderAttempt, VisionExtractionResult
from src.pipeline.fallbacks import FALLBACK_VISION_MODEL, FALLBACK_VISION_TEXT
from src.prompts.prompts import get_vision_instruction
from src.providers.client import ProviderClient, ProviderKind, ProviderSpec, VisionPayload
from src.utils.config import Config, config
from src.utils.logger import logger


@dataclass(frozen=True)
class OrchestratorConfig:
    """Ordered, immutable list of vision providers plus the per-call timeout."""

    providers: tuple[ProviderSpec, ...]
    timeout: float = 30.0


def build_vision_providers(settings: Config = config) -> OrchestratorConfig:
    """Default provider order: Gemini, then each configured Hugging Face model."""
    providers = [
        ProviderSpec(
            provider_id="gemini",
            kind=ProviderKind.GEMINI_VISION,
            model_id=settings.GEMINI_VISION_MODEL,
            api_key=settings.GEMINI_API_KEY,
        )
    ]
    providers.extend(
        ProviderSpec(
            provider_id="huggingface",
            kind=ProviderKind.HF_IMAGE_TO_TEXT,
            model_id=model_id,
            api_key=settings.HUGGINGFACE_API_KEY,
            base_url=settings.HF_INFERENCE_URL,
        )
        for model_id in settings.HF_VISION_MODELS
    )
    return OrchestratorConfig(providers=tuple(providers), timeout=settings.VISION_TIMEOUT_SECONDS)


class VisionExtractionOrchestrator:
    """Sequential first-success search over vision providers."""

    def __init__(self, orchestrator_config: OrchestratorConfig, client: Optional[ProviderClient] = None):
        self.config = orchestrator_config
        self.client = client or ProviderClient()

    async def _attempts(self, blob: ImageBlob) -> AsyncIterator[ProviderAttempt]:
        """Yield one attempt per provider, lazily, in configured order."""
        payload = VisionPayload(image=blob, instruction=get_vision_instruction())
        for spec in self.config.providers:
            yield await self.client.invoke(spec, payload, self.config.timeout)

    async def extract(self, blob: ImageBlob) -> VisionExtractionResult:
        """Return the first successful provider text, or the fallback description.

        Args:
            blob: Image to analyze.

        Returns:
            VisionExtractionResult with text, the winning model id and every attempt made.
        """
        attempts: list[ProviderAttempt] = []
        async with aclosing(self._attempts(blob)) as stream:
            async for attempt in stream:
                attempts.append(attempt)
                if attempt.succeeded:
                    logger.info(
                        f"Vision extraction succeeded with {attempt.model_id} after {len(attempts)} attempt(s)",
                        extra={"stage": "vision", "provider": attempt.provider_id},
                    )
                    return VisionExtractionResult(text=attempt.text, model_used=attempt.model_id, attempts=attempts)

        logger.warning(
            f"All {len(attempts)} vision providers failed, using fallback description",
            extra={"stage": "vision", "source": "fallback"},
        )
        return VisionExtractionResult(text=FALLBACK_VISION_TEXT, model_used=FALLBACK_VISION_MODEL, attempts=attempts)
