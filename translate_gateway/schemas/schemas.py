"""
Pydantic Schemas for the Translate Gateway.
Request, response and persisted models.

Attributes are snake_case in Python; JSON keys are camelCase.
"""
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional, List, Dict


def utc_timestamp() -> str:
    """ISO-8601 UTC timestamp with a Z suffix, as used in every timestamp field."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================
# TRANSLATION SCHEMAS
# ============================================
class TranslationRequest(CamelModel):
    """Validated translation request."""
    text: str = Field(..., min_length=1)
    target_lang: str = "en"
    source_lang: Optional[str] = Field(None, description="None means auto-detect")


class TranslationResponse(CamelModel):
    """Result of one successful translation."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    original_text: str
    translated_text: str
    detected_language: str
    target_language: str
    translation_time: float = Field(..., description="Milliseconds spent in the external call")
    timestamp: str


# ============================================
# ERROR SCHEMAS
# ============================================
class ApiError(BaseModel):
    """Error envelope shared by every non-2xx response."""
    error: str
    message: str
    code: str
    details: Optional[str] = None


# ============================================
# STATISTICS SCHEMAS
# ============================================
class StoredStats(CamelModel):
    """Counters persisted in the stats file."""
    total_requests: int = 0
    successful_translations: int = 0
    failed_translations: int = 0
    total_response_time: float = 0.0
    source_languages: Dict[str, int] = Field(default_factory=dict)
    target_languages: Dict[str, int] = Field(default_factory=dict)
    last_updated: str


class LanguageCount(BaseModel):
    code: str
    count: int


class StatsSnapshot(CamelModel):
    """Aggregate view served by /api/v1/stats."""
    total_requests: int
    successful_translations: int
    failed_translations: int
    average_response_time: float
    top_source_languages: List[LanguageCount]
    top_target_languages: List[LanguageCount]
    last_updated: str


# ============================================
# SYSTEM SCHEMAS
# ============================================
class MemoryUsage(BaseModel):
    rss: int
    vms: int
    percent: float


class HealthResponse(CamelModel):
    status: str
    uptime: float
    timestamp: str
    memory_usage: MemoryUsage
