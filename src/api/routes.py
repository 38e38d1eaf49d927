"""HTTP endpoints for the meal pipeline.

- POST /api/analyze-image: image → vision providers → ingredient list
- POST /api/meal-recommendations: ingredient list → 10 meals
- POST /api/meal-details: meal id/name → full recipe

Only malformed input produces an error status. Provider failures and
unexpected pipeline errors are answered with fallback data and a note.
Each pipeline run is raced against client disconnection; a client that goes
away cancels the in-flight provider call.
"""

import asyncio
import uuid
from typing import Awaitable, Optional, TypeVar

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException

from src.models.models import (
    AnalyzeImageResponse,
    ErrorResponse,
    MealDetailsRequest,
    MealDetailsResponse,
    MealRecommendationsRequest,
    MealRecommendationsResponse,
)
from src.pipeline.details import DetailGenerator, fallback_details
from src.pipeline.fallbacks import (
    DEMO_INGREDIENTS,
    DEMO_MODEL,
    DEMO_RAW_RESPONSE,
    NOTE_DETAILS_ERROR,
    NOTE_RECOMMENDATIONS_ERROR,
)
from src.pipeline.images import prepare_image
from src.pipeline.parser import parse_ingredients
from src.pipeline.recommendations import RecommendationGenerator, fallback_recommendations
from src.pipeline.vision import VisionExtractionOrchestrator, build_vision_providers
from src.utils.logger import logger
from src.utils.safe_execute import safe_execute_async


T = TypeVar("T")

# Non-standard status used by nginx for "client closed request"
CLIENT_CLOSED_REQUEST = 499
DISCONNECT_POLL_SECONDS = 0.25

router = APIRouter(prefix="/api", tags=["meals"], responses={400: {"model": ErrorResponse}})

vision_orchestrator = VisionExtractionOrchestrator(build_vision_providers())
recommendation_generator = RecommendationGenerator()
detail_generator = DetailGenerator()


class ClientDisconnected(Exception):
    """The HTTP client went away before the pipeline finished."""


async def run_until_disconnected(request: Request, coro: Awaitable[T]) -> T:
    """Await `coro` as a task, cancelling it if the client disconnects first.

    Raises:
        ClientDisconnected: The client disconnected and the task was cancelled.
    """
    task = asyncio.ensure_future(coro)
    try:
        while not task.done():
            await asyncio.wait({task}, timeout=DISCONNECT_POLL_SECONDS)
            if not task.done() and await request.is_disconnected():
                task.cancel()
                await asyncio.gather(task, return_exceptions=True)
                raise ClientDisconnected()
        return task.result()
    finally:
        if not task.done():
            task.cancel()


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(status_code=400, content=ErrorResponse(error=message).model_dump())


def _request_id() -> str:
    return uuid.uuid4().hex[:8]


async def _read_json(request: Request):
    try:
        return await request.json()
    except ValueError:
        return None


async def _read_upload(request: Request, field: str) -> Optional[UploadFile]:
    """Uploaded file in `field`; None when absent, sent as plain text, or the body is malformed."""
    try:
        form = await request.form()
    except HTTPException:
        return None
    upload = form.get(field)
    return upload if isinstance(upload, UploadFile) else None


async def analyze_image_bytes(data: bytes, content_type: Optional[str] = None) -> AnalyzeImageResponse:
    """Full image pipeline: prepare → vision orchestrator → ingredient parser."""
    blob = prepare_image(data, content_type)
    extraction = await vision_orchestrator.extract(blob)
    ingredients = parse_ingredients(extraction.text)
    return AnalyzeImageResponse(
        ingredients=ingredients,
        raw_response=extraction.text,
        model_used=extraction.model_used,
    )


def demo_analysis() -> AnalyzeImageResponse:
    return AnalyzeImageResponse(
        ingredients=list(DEMO_INGREDIENTS),
        raw_response=DEMO_RAW_RESPONSE,
        model_used=DEMO_MODEL,
    )


@router.post("/analyze-image", response_model=AnalyzeImageResponse, response_model_exclude_none=True)
async def analyze_image(request: Request):
    """Extract an ingredient list from a food package photo (multipart field `image`)."""
    request_id = _request_id()
    image = await _read_upload(request, "image")
    if image is None:
        return _bad_request("No image file provided")

    data = await image.read()
    if not data:
        return _bad_request("Uploaded image is empty")

    logger.info(
        f"Analyzing image {image.filename or '(unnamed)'} ({len(data) / 1024:.1f}KB)",
        extra={"request_id": request_id, "stage": "vision"},
    )
    try:
        return await run_until_disconnected(
            request,
            safe_execute_async(
                analyze_image_bytes(data, image.content_type),
                "Image analysis",
                log_level="error",
                default_return=demo_analysis(),
            ),
        )
    except ClientDisconnected:
        logger.info("Client disconnected, image analysis cancelled", extra={"request_id": request_id})
        return Response(status_code=CLIENT_CLOSED_REQUEST)


@router.post(
    "/meal-recommendations", response_model=MealRecommendationsResponse, response_model_exclude_none=True
)
async def meal_recommendations(request: Request):
    """Recommend diabetes-friendly meals for an ingredient list."""
    request_id = _request_id()
    body = await _read_json(request)
    try:
        payload = MealRecommendationsRequest.model_validate(body)
    except ValidationError:
        return _bad_request("Ingredients array is required")

    logger.info(
        f"Recommending meals for {len(payload.ingredients)} ingredients",
        extra={"request_id": request_id, "stage": "recommendations"},
    )
    try:
        result = await run_until_disconnected(
            request,
            safe_execute_async(
                recommendation_generator.generate(payload.ingredients),
                "Meal recommendations",
                log_level="error",
                default_return=fallback_recommendations(NOTE_RECOMMENDATIONS_ERROR),
            ),
        )
    except ClientDisconnected:
        logger.info("Client disconnected, recommendations cancelled", extra={"request_id": request_id})
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    return MealRecommendationsResponse(meals=result.meals, total_count=len(result.meals), note=result.note)


@router.post("/meal-details", response_model=MealDetailsResponse, response_model_exclude_none=True)
async def meal_details(request: Request):
    """Full recipe, nutrition and tips for one meal."""
    request_id = _request_id()
    body = await _read_json(request)
    try:
        payload = MealDetailsRequest.model_validate(body)
    except ValidationError:
        return _bad_request("Meal ID or name required")

    logger.info(
        f"Getting meal details for {payload.display_name}",
        extra={"request_id": request_id, "stage": "details"},
    )
    try:
        result = await run_until_disconnected(
            request,
            safe_execute_async(
                detail_generator.generate(payload),
                "Meal details",
                log_level="error",
                default_return=fallback_details(payload, NOTE_DETAILS_ERROR),
            ),
        )
    except ClientDisconnected:
        logger.info("Client disconnected, meal details cancelled", extra={"request_id": request_id})
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    return MealDetailsResponse(meal_details=result.meal_details, note=result.note)
