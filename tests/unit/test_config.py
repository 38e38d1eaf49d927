"""Unit tests for configuration management."""

import pytest

from src.utils.config import Config, is_placeholder_key


class TestConfigInitialization:
    """Test Config class initialization and environment variable loading."""

    def test_config_loads_default_values(self, monkeypatch):
        """Test that Config uses default values when env vars not set."""
        for name in (
            "PORT",
            "MAX_INGREDIENTS",
            "MAX_MEALS",
            "MAX_IMAGE_SIZE_MB",
            "GEMINI_VISION_MODEL",
            "CHAT_MODEL",
            "CHAT_API_BASE_URL",
            "HF_VISION_MODELS",
            "RECOMMENDATION_TEMPERATURE",
            "RECOMMENDATION_MAX_TOKENS",
            "DETAILS_TEMPERATURE",
            "DETAILS_MAX_TOKENS",
            "INGREDIENT_DEDUPE_CASE_INSENSITIVE",
        ):
            monkeypatch.delenv(name, raising=False)

        config = Config()

        assert config.PORT == 7777
        assert config.MAX_INGREDIENTS == 20
        assert config.MAX_MEALS == 10
        assert config.MAX_IMAGE_SIZE_MB == 5
        assert config.GEMINI_VISION_MODEL == "gemini-2.5-flash-lite"
        assert config.CHAT_MODEL == "deepseek-chat"
        assert config.CHAT_API_BASE_URL == "https://api.deepseek.com/v1"
        assert config.HF_VISION_MODELS == [
            "Qwen/Qwen2-VL-7B-Instruct",
            "llava-hf/llava-1.5-7b-hf",
            "Salesforce/blip-image-captioning-large",
            "nlpconnect/vit-gpt2-image-captioning",
        ]
        assert config.RECOMMENDATION_TEMPERATURE == 0.7
        assert config.RECOMMENDATION_MAX_TOKENS == 2000
        assert config.DETAILS_TEMPERATURE == 0.3
        assert config.DETAILS_MAX_TOKENS == 1500
        assert config.INGREDIENT_DEDUPE_CASE_INSENSITIVE is False

    def test_config_loads_from_environment(self, monkeypatch):
        """Test that Config loads values from environment variables."""
        monkeypatch.setenv("PORT", "8888")
        monkeypatch.setenv("MAX_INGREDIENTS", "12")
        monkeypatch.setenv("CHAT_MODEL", "custom-chat")
        monkeypatch.setenv("CHAT_API_BASE_URL", "https://llm.example.com/v1/")
        monkeypatch.setenv("HF_VISION_MODELS", "org/model-a, org/model-b")
        monkeypatch.setenv("CORS_ORIGINS", "http://localhost:3000,https://app.example.com")

        config = Config()

        assert config.PORT == 8888
        assert config.MAX_INGREDIENTS == 12
        assert config.CHAT_MODEL == "custom-chat"
        assert config.CHAT_API_BASE_URL == "https://llm.example.com/v1"
        assert config.HF_VISION_MODELS == ["org/model-a", "org/model-b"]
        assert config.CORS_ORIGINS == ["http://localhost:3000", "https://app.example.com"]

    def test_config_converts_numeric_types(self, monkeypatch):
        """Test that Config properly converts numeric environment variables."""
        monkeypatch.setenv("VISION_TIMEOUT_SECONDS", "12.5")
        monkeypatch.setenv("DETAILS_MAX_TOKENS", "900")

        config = Config()

        assert isinstance(config.VISION_TIMEOUT_SECONDS, float)
        assert config.VISION_TIMEOUT_SECONDS == 12.5
        assert isinstance(config.DETAILS_MAX_TOKENS, int)


class TestProviderKeys:
    """Missing or placeholder keys mean the provider is not configured."""

    @pytest.mark.parametrize("value", ["", "   ", "your_deepseek_api_key_here", "your-key", "<api-key>", "changeme"])
    def test_placeholder_keys(self, value):
        assert is_placeholder_key(value) is True

    def test_none_is_placeholder(self):
        assert is_placeholder_key(None) is True

    def test_real_key_is_not_placeholder(self):
        assert is_placeholder_key("sk-3f9a0c") is False

    def test_configured_properties(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "AIza-test")
        monkeypatch.setenv("HUGGINGFACE_API_KEY", "your_huggingface_token_here")
        monkeypatch.setenv("DEEPSEEK_API_KEY", "")

        config = Config()

        assert config.gemini_configured is True
        assert config.huggingface_configured is False
        assert config.chat_configured is False

    def test_missing_keys_are_not_validation_errors(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "")
        monkeypatch.setenv("HUGGINGFACE_API_KEY", "")
        monkeypatch.setenv("DEEPSEEK_API_KEY", "")

        Config().validate()  # Should not raise


class TestConfigValidation:
    """Test Config validation logic."""

    def test_validate_succeeds_with_defaults(self):
        Config().validate()

    @pytest.mark.parametrize(
        "name,value",
        [
            ("VISION_TIMEOUT_SECONDS", "0"),
            ("CHAT_TIMEOUT_SECONDS", "-1"),
            ("RECOMMENDATION_TEMPERATURE", "2.5"),
            ("DETAILS_TEMPERATURE", "-0.1"),
            ("RECOMMENDATION_MAX_TOKENS", "100"),
            ("MAX_INGREDIENTS", "0"),
            ("MAX_INGREDIENTS", "25"),
            ("MAX_MEALS", "0"),
            ("MAX_IMAGE_SIZE_MB", "0"),
        ],
    )
    def test_validate_rejects_out_of_range_values(self, monkeypatch, name, value):
        monkeypatch.setenv(name, value)

        config = Config()
        with pytest.raises(ValueError, match=name):
            config.validate()


class TestBooleanFlags:
    """Test boolean parsing for COMPRESS_IMG and INGREDIENT_DEDUPE_CASE_INSENSITIVE."""

    def test_default_compress_img_enabled(self, monkeypatch):
        """Test that COMPRESS_IMG defaults to True (enabled)."""
        monkeypatch.delenv("COMPRESS_IMG", raising=False)
        assert Config().COMPRESS_IMG is True

    @pytest.mark.parametrize("value", ["true", "TRUE", "yes", "1"])
    def test_compress_img_enabled(self, monkeypatch, value):
        monkeypatch.setenv("COMPRESS_IMG", value)
        assert Config().COMPRESS_IMG is True

    @pytest.mark.parametrize("value", ["false", "False", "no", "0"])
    def test_compress_img_disabled(self, monkeypatch, value):
        monkeypatch.setenv("COMPRESS_IMG", value)
        assert Config().COMPRESS_IMG is False

    def test_case_insensitive_dedupe_opt_in(self, monkeypatch):
        monkeypatch.setenv("INGREDIENT_DEDUPE_CASE_INSENSITIVE", "true")
        assert Config().INGREDIENT_DEDUPE_CASE_INSENSITIVE is True
