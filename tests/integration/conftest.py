"""Pytest configuration and fixtures for integration tests.

Loads .env from the project root and skips tests whose provider keys are not
configured. These tests call the live providers and may take a while.
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv


def pytest_configure(config):
    """Load .env (in project root) before test collection imports src.utils.config."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: integration tests call live providers")
    print(f"Environment loaded from: {env_path}")
    print("  - Vision: GEMINI_API_KEY and/or HUGGINGFACE_API_KEY")
    print("  - Chat:   DEEPSEEK_API_KEY")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session")
def require_vision():
    from src.utils.config import config

    if not (config.gemini_configured or config.huggingface_configured):
        pytest.skip("Vision tests skipped. Set GEMINI_API_KEY or HUGGINGFACE_API_KEY in your .env file.")


@pytest.fixture(scope="session")
def require_chat():
    from src.utils.config import config

    if not config.chat_configured:
        pytest.skip("Chat tests skipped. Set DEEPSEEK_API_KEY in your .env file.")


@pytest.fixture(scope="session")
def sample_image() -> bytes:
    """Synthetic ingredient label rendered with Pillow."""
    from io import BytesIO

    from PIL import Image, ImageDraw

    image = Image.new("RGB", (900, 300), "white")
    draw = ImageDraw.Draw(image)
    draw.text((20, 40), "INGREDIENTS: WHOLE GRAIN OATS, SUGAR,", fill="black")
    draw.text((20, 80), "CORN STARCH, HONEY, SALT, TRIPOTASSIUM PHOSPHATE.", fill="black")
    draw.text((20, 120), "CONTAINS: WHEAT.", fill="black")
    output = BytesIO()
    image.save(output, format="PNG")
    return output.getvalue()
