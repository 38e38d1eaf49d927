"""Configuration management for the Diabetic Meal Pipeline Service.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults

Provider API keys are intentionally optional: a missing or placeholder key makes
the corresponding provider unreachable, which the pipeline answers with fallback
data instead of refusing to start.
"""

import os
from typing import Optional

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


# Values shipped in example .env files that must be treated as "not configured"
PLACEHOLDER_KEY_PREFIXES = ("your_", "your-", "<", "changeme")

# Upper bound on ingredients returned by image analysis
MAX_INGREDIENTS_LIMIT = 20


def _as_bool(value: Optional[str]) -> bool:
    return (value or "").lower() in ("true", "1", "yes")


def _as_list(value: Optional[str]) -> list[str]:
    return [item.strip() for item in (value or "").split(",") if item.strip()]


def is_placeholder_key(api_key: Optional[str]) -> bool:
    """Return True when an API key is empty or a template placeholder.

    Args:
        api_key: Raw key value from configuration.

    Returns:
        True if the key should be treated as absent.
    """
    if not api_key or not api_key.strip():
        return True
    lowered = api_key.strip().lower()
    return lowered.startswith(PLACEHOLDER_KEY_PREFIXES) or lowered.endswith("_here")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Vision provider 1: Gemini (google-genai). Tried first when a key is configured.
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Default: gemini-2.5-flash-lite (fast, cost-effective for images)
        self.GEMINI_VISION_MODEL: str = os.getenv("GEMINI_VISION_MODEL", "gemini-2.5-flash-lite")
        # Vision providers 2..n: Hugging Face hosted image-to-text models, tried in listed order
        self.HUGGINGFACE_API_KEY: str = os.getenv("HUGGINGFACE_API_KEY", "")
        self.HF_INFERENCE_URL: str = os.getenv(
            "HF_INFERENCE_URL", "https://router.huggingface.co/hf-inference/models"
        ).rstrip("/")
        self.HF_VISION_MODELS: list[str] = _as_list(
            os.getenv(
                "HF_VISION_MODELS",
                "Qwen/Qwen2-VL-7B-Instruct,"
                "llava-hf/llava-1.5-7b-hf,"
                "Salesforce/blip-image-captioning-large,"
                "nlpconnect/vit-gpt2-image-captioning",
            )
        )
        # Chat provider: any OpenAI-compatible /chat/completions endpoint (DeepSeek by default)
        self.DEEPSEEK_API_KEY: str = os.getenv("DEEPSEEK_API_KEY", "")
        self.CHAT_API_BASE_URL: str = os.getenv("CHAT_API_BASE_URL", "https://api.deepseek.com/v1").rstrip("/")
        self.CHAT_MODEL: str = os.getenv("CHAT_MODEL", "deepseek-chat")
        # Per-call timeouts in seconds. A timed out call counts as a provider failure.
        self.VISION_TIMEOUT_SECONDS: float = float(os.getenv("VISION_TIMEOUT_SECONDS", "30"))
        self.CHAT_TIMEOUT_SECONDS: float = float(os.getenv("CHAT_TIMEOUT_SECONDS", "45"))
        # Sampling parameters for the two chat stages
        # Recommendations: 0.7 gives variety across the 10 meals
        self.RECOMMENDATION_TEMPERATURE: float = float(os.getenv("RECOMMENDATION_TEMPERATURE", "0.7"))
        self.RECOMMENDATION_MAX_TOKENS: int = int(os.getenv("RECOMMENDATION_MAX_TOKENS", "2000"))
        # Details: 0.3 keeps nutrition numbers and steps consistent
        self.DETAILS_TEMPERATURE: float = float(os.getenv("DETAILS_TEMPERATURE", "0.3"))
        self.DETAILS_MAX_TOKENS: int = int(os.getenv("DETAILS_MAX_TOKENS", "1500"))
        # Maximum number of ingredients returned by the parser. Default: 20
        self.MAX_INGREDIENTS: int = int(os.getenv("MAX_INGREDIENTS", "20"))
        # Number of meal recommendations requested from the chat model. Default: 10
        self.MAX_MEALS: int = int(os.getenv("MAX_MEALS", "10"))
        # Images above this size (in MB) are always compressed before upload. Default: 5 MB
        self.MAX_IMAGE_SIZE_MB: int = int(os.getenv("MAX_IMAGE_SIZE_MB", "5"))
        # Image Compression: Enable/disable image compression before provider calls
        self.COMPRESS_IMG: bool = _as_bool(os.getenv("COMPRESS_IMG", "true"))
        # Image Compression Threshold: Only compress if image size is above this (in KB)
        self.COMPRESS_IMG_THRESHOLD_KB: int = int(os.getenv("COMPRESS_IMG_THRESHOLD_KB", "300"))
        # Ingredient deduplication policy. Default false keeps "Sugar" and "sugar" as two entries.
        self.INGREDIENT_DEDUPE_CASE_INSENSITIVE: bool = _as_bool(
            os.getenv("INGREDIENT_DEDUPE_CASE_INSENSITIVE", "false")
        )
        # Server settings
        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("PORT", "7777"))
        # Origins allowed to call the API from the browser UI
        self.CORS_ORIGINS: list[str] = _as_list(os.getenv("CORS_ORIGINS", "*"))

    @property
    def gemini_configured(self) -> bool:
        return not is_placeholder_key(self.GEMINI_API_KEY)

    @property
    def huggingface_configured(self) -> bool:
        return not is_placeholder_key(self.HUGGINGFACE_API_KEY)

    @property
    def chat_configured(self) -> bool:
        return not is_placeholder_key(self.DEEPSEEK_API_KEY)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If a numeric setting is out of range.
        """
        if self.VISION_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"VISION_TIMEOUT_SECONDS must be positive, got: {self.VISION_TIMEOUT_SECONDS}"
            )
        if self.CHAT_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"CHAT_TIMEOUT_SECONDS must be positive, got: {self.CHAT_TIMEOUT_SECONDS}"
            )
        for name in ("RECOMMENDATION_TEMPERATURE", "DETAILS_TEMPERATURE"):
            value = getattr(self, name)
            if not (0.0 <= value <= 2.0):
                raise ValueError(f"{name} must be between 0.0 and 2.0, got: {value}")
        for name in ("RECOMMENDATION_MAX_TOKENS", "DETAILS_MAX_TOKENS"):
            value = getattr(self, name)
            if value < 256:
                raise ValueError(f"{name} must be at least 256, got: {value}")
        if not (1 <= self.MAX_INGREDIENTS <= MAX_INGREDIENTS_LIMIT):
            raise ValueError(
                f"MAX_INGREDIENTS must be between 1 and {MAX_INGREDIENTS_LIMIT}, got: {self.MAX_INGREDIENTS}"
            )
        if self.MAX_MEALS < 1:
            raise ValueError(f"MAX_MEALS must be at least 1, got: {self.MAX_MEALS}")
        if self.MAX_IMAGE_SIZE_MB < 1:
            raise ValueError(f"MAX_IMAGE_SIZE_MB must be at least 1, got: {self.MAX_IMAGE_SIZE_MB}")


# Create module-level config instance and validate immediately
config = Config()
config.validate()
