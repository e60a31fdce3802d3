"""
External Translator Client.

Calls the public Google Translate endpoint used by the common
"google-translate-api" style libraries:

    POST {TRANSLATE_URL}/translate_a/single?client=gtx&sl=auto&tl=pt&dt=t&dj=1
    body: q=<text>

With dj=1 the answer is a JSON object:

    {
      "sentences": [{"trans": "Olá", "orig": "Hello"}, ...],
      "src": "en",
      ...
    }

The payload shape is not a published contract, so it is never probed
ad hoc: parse_translation_payload() and parse_detected_language() are the
only places that look inside it.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union
import logging
import httpx

from translate_gateway.config import Settings


@dataclass(frozen=True)
class ExternalTranslation:
    """Translated text plus the untouched external payload."""
    text: str
    raw: Dict[str, Any]


@dataclass(frozen=True)
class Recognized:
    language: str
    source_field: str


@dataclass(frozen=True)
class Unrecognized:
    pass


DetectedLanguage = Union[Recognized, Unrecognized]

# Probed in order
DETECTED_LANGUAGE_FIELDS = ("src", "detectedLanguage")


class MalformedResultError(ValueError):
    """The external service answered with something that is not a translation."""


def parse_detected_language(raw: Any) -> DetectedLanguage:
    """Extract the source language reported by the external service."""
    if not isinstance(raw, dict):
        return Unrecognized()

    for field in DETECTED_LANGUAGE_FIELDS:
        value = raw.get(field)
        if isinstance(value, str) and value.strip():
            return Recognized(language=value.strip(), source_field=field)

    return Unrecognized()


def parse_translation_payload(raw: Any) -> str:
    """Join the translated sentences of a dj=1 payload."""
    if not isinstance(raw, dict):
        raise MalformedResultError("response is not a JSON object")

    sentences = raw.get("sentences")
    if not isinstance(sentences, list):
        raise MalformedResultError("response has no sentences")

    # Transliteration entries carry "translit" instead of "trans"
    parts = [
        s["trans"] for s in sentences
        if isinstance(s, dict) and isinstance(s.get("trans"), str)
    ]
    if not parts:
        raise MalformedResultError("response has no translated sentences")

    return "".join(parts)


class GoogleTranslateClient:
    """Async client for the external translation capability."""

    TRANSLATE_PATH = "/translate_a/single"

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_settings(cls, settings: Settings, logger: Optional[logging.Logger] = None) -> "GoogleTranslateClient":
        return cls(
            base_url=settings.TRANSLATE_URL,
            timeout=settings.TRANSLATE_TIMEOUT,
            logger=logger
        )

    async def translate(
        self,
        text: str,
        to: str,
        from_: Optional[str] = None
    ) -> ExternalTranslation:
        """
        Translate text into `to`, auto-detecting the source when `from_` is None.

        Raises httpx errors, ValueError on a non-JSON body and
        MalformedResultError on an unusable payload. No retries.
        """
        params = {
            "client": "gtx",
            "sl": from_ or "auto",
            "tl": to,
            "dt": "t",
            "dj": "1",
            "ie": "UTF-8",
            "oe": "UTF-8",
        }

        response = await self._client.post(
            f"{self.base_url}{self.TRANSLATE_PATH}",
            params=params,
            data={"q": text}
        )
        response.raise_for_status()

        raw = response.json()
        translated = parse_translation_payload(raw)
        self.logger.debug(f"External translator answered {response.status_code} ({len(translated)} chars)")

        return ExternalTranslation(text=translated, raw=raw)

    async def aclose(self):
        await self._client.aclose()
