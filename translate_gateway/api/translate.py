"""
Translation API endpoint.

POST /api/v1/translate
    {"text": "Hello", "targetLang": "pt", "sourceLang": "en"}

Outcomes:
- 200 TranslationResponse, success recorded in the stats store
- 400 ApiError (MISSING_TEXT_PARAMETER, INVALID_TEXT_TYPE, ...), not recorded
- 500 ApiError (TRANSLATION_ERROR), failure recorded in the stats store

Stats are written as background tasks after the response is sent.
"""
from fastapi import APIRouter, BackgroundTasks, Depends, Request
from typing import Any
import json
import logging

from translate_gateway.config import Settings
from translate_gateway.dependencies import (
    get_app_settings,
    get_logger,
    get_stats_store,
    get_translation_service,
)
from translate_gateway.errors import TranslationError, ValidationError, error_response
from translate_gateway.schemas.schemas import ApiError, TranslationResponse
from translate_gateway.services.stats_service import StatsStore
from translate_gateway.services.translation_service import TranslationService

router = APIRouter(prefix="/api/v1", tags=["Translation"])


async def read_json_body(request: Request) -> Any:
    """Decoded JSON body; {} when empty, None when not JSON."""
    body = await request.body()
    if not body.strip():
        return {}
    try:
        return json.loads(body)
    except ValueError:
        return None


async def record_success(stats: StatsStore, logger: logging.Logger, response: TranslationResponse):
    try:
        await stats.record_success(
            response.translation_time,
            response.detected_language,
            response.target_language
        )
    except Exception:
        logger.exception("Failed to record translation success in stats store")


async def record_failure(stats: StatsStore, logger: logging.Logger):
    try:
        await stats.record_failure()
    except Exception:
        logger.exception("Failed to record translation failure in stats store")


@router.post(
    "/translate",
    response_model=TranslationResponse,
    responses={400: {"model": ApiError}, 500: {"model": ApiError}},
    summary="Translate Text",
    description="""
    Translate text with the external translation service.

    - **text**: required, non-empty string
    - **targetLang**: target language code (default: en)
    - **sourceLang**: source language code (default: auto-detect)

    Returns the translated text, the detected source language and the
    time spent in the external call (milliseconds).
    """
)
async def translate_text(
    request: Request,
    background_tasks: BackgroundTasks,
    service: TranslationService = Depends(get_translation_service),
    stats: StatsStore = Depends(get_stats_store),
    settings: Settings = Depends(get_app_settings),
    logger: logging.Logger = Depends(get_logger)
):
    """Translate text."""
    payload = await read_json_body(request)

    try:
        translation_request = service.parse_request(payload)
    except ValidationError as e:
        logger.warning(f"Validation failed: {e.code} - {e.message}")
        raise

    try:
        response = await service.translate(translation_request)
    except TranslationError as e:
        logger.error(f"Translation failed: {e.reason}\n{e.details or ''}".rstrip())
        # Background tasks only attach to a returned response, not a raised one.
        background_tasks.add_task(record_failure, stats, logger)
        return error_response(e, expose_details=settings.is_development)

    background_tasks.add_task(record_success, stats, logger, response)
    return response
