"""FastAPI Application - Diabetic Meal Pipeline Service.

Single entry point for the HTTP service:
- Mounts the /api routes (image analysis, recommendations, meal details)
- Enables CORS for the separate browser UI
- Exposes GET /health for liveness checks

Run with: python app.py
"""

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes import router
from src.utils.config import config
from src.utils.logger import logger


app = FastAPI(
    title="Diabetic Meal Pipeline",
    description="Food package photo → ingredient list → diabetes-friendly meals",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials="*" not in config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/health")
async def health():
    """Liveness check."""
    return {"status": "healthy"}


def _log_provider_status() -> None:
    logger.info(f"Gemini vision: {'configured' if config.gemini_configured else 'not configured'}")
    logger.info(f"Hugging Face vision: {'configured' if config.huggingface_configured else 'not configured'}")
    logger.info(f"Chat completions: {'configured' if config.chat_configured else 'not configured (fallback data)'}")


if __name__ == "__main__":
    logger.info(f"Starting Diabetic Meal Pipeline Service on port {config.PORT}")
    _log_provider_status()
    logger.info(f"API docs available at: http://localhost:{config.PORT}/docs")
    uvicorn.run(app, host=config.HOST, port=config.PORT)
