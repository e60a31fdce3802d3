"""
Translation Gateway.

Sits between the HTTP layer and the external translator:

1. parse_request() applies the input policy before any external call
   (missing text, wrong types, non-object body).
2. translate() calls the external translator once, times the call with a
   monotonic clock and builds an immutable TranslationResponse.

Every failure of the external call surfaces as TranslationError. There
are no retries.
"""
from typing import Any, Optional
import logging
import time
import traceback

import httpx

from translate_gateway.errors import TranslationError, ValidationError
from translate_gateway.schemas.schemas import TranslationRequest, TranslationResponse, utc_timestamp
from translate_gateway.services.translator_client import (
    MalformedResultError,
    Recognized,
    parse_detected_language,
)

DEFAULT_TARGET_LANG = "en"
UNKNOWN_LANGUAGE = "unknown"


def _language_field(payload: dict, field: str) -> Optional[str]:
    value = payload.get(field)
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ValidationError.invalid_language(field)
    return value.strip()


class TranslationService:
    """Validates, times and shapes calls to the external translator."""

    def __init__(self, client, logger: Optional[logging.Logger] = None):
        self.client = client
        self.logger = logger or logging.getLogger(__name__)

    @staticmethod
    def parse_request(payload: Any) -> TranslationRequest:
        """Turn a decoded JSON body into a TranslationRequest or raise ValidationError."""
        if not isinstance(payload, dict):
            raise ValidationError.invalid_body()

        text = payload.get("text")
        if text is None or (isinstance(text, str) and text == ""):
            raise ValidationError.missing_text()
        if not isinstance(text, str):
            raise ValidationError.invalid_text_type()

        target_lang = _language_field(payload, "targetLang") or DEFAULT_TARGET_LANG
        source_lang = _language_field(payload, "sourceLang")

        return TranslationRequest(text=text, target_lang=target_lang, source_lang=source_lang)

    async def translate(self, request: TranslationRequest) -> TranslationResponse:
        self.logger.info(
            f"Starting translation for text: {request.text[:50]}... "
            f"(target={request.target_lang}, source={request.source_lang or 'auto'}, "
            f"length={len(request.text)})"
        )

        start_time = time.perf_counter()
        try:
            result = await self.client.translate(
                request.text,
                to=request.target_lang,
                from_=request.source_lang
            )
        except httpx.TimeoutException as e:
            raise TranslationError(
                "o serviço de tradução não respondeu a tempo",
                details=traceback.format_exc()
            ) from e
        except httpx.HTTPStatusError as e:
            raise TranslationError(
                f"o serviço de tradução respondeu com status {e.response.status_code}",
                details=traceback.format_exc()
            ) from e
        except MalformedResultError as e:
            raise TranslationError(
                "resposta inválida do serviço de tradução",
                details=str(e)
            ) from e
        except Exception as e:
            raise TranslationError(
                str(e) or type(e).__name__,
                details=traceback.format_exc()
            ) from e
        elapsed_ms = (time.perf_counter() - start_time) * 1000

        detected = parse_detected_language(result.raw)
        if isinstance(detected, Recognized):
            detected_language = detected.language
        else:
            detected_language = UNKNOWN_LANGUAGE
            self.logger.warning("External translator did not report a source language")

        response = TranslationResponse(
            original_text=request.text,
            translated_text=result.text,
            detected_language=detected_language,
            target_language=request.target_lang,
            translation_time=elapsed_ms,
            timestamp=utc_timestamp()
        )

        self.logger.info(
            f"Translation completed successfully in {elapsed_ms:.2f}ms "
            f"(detected={detected_language}, target={request.target_lang})"
        )
        return response
