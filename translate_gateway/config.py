"""
Translate Gateway Configuration.

Centralized configuration management using Pydantic Settings.

Environment Variables:
======================
All settings can be overridden via environment variables or .env file.

Server:
-------
- HOST: Bind address (default: 0.0.0.0)
- PORT: Listen port (default: 3000)
- ALLOWED_ORIGINS: Comma-separated CORS allow-list (default: *)
- APP_ENV / NODE_ENV: Operating mode; "development" exposes error details

Logging:
--------
- LOG_LEVEL: debug, info, warning, error (default: info)
- LOG_DIR: Directory for rotating log files (default: logs)
- LOG_TO_FILE: Disable to log to console only

Translation:
------------
- TRANSLATE_URL: Base URL of the external translator
- TRANSLATE_TIMEOUT: Seconds before the external call is abandoned

Statistics:
-----------
- STATS_FILE: JSON document holding the request counters
- STATS_TOP_LANGUAGES: Entries in the top-language lists of /api/v1/stats
"""
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List
import logging


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Settings are cached via @lru_cache in get_settings().
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True
    )

    # ==========================================================================
    # Server
    # ==========================================================================
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ALLOWED_ORIGINS: str = "*"
    APP_ENV: str = Field(
        default="production",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV")
    )
    API_V1_PREFIX: str = "/api/v1"

    # ==========================================================================
    # Logging
    # ==========================================================================
    LOG_LEVEL: str = "info"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = True
    LOG_RETENTION_DAYS: int = 14

    # ==========================================================================
    # External translator
    # ==========================================================================
    TRANSLATE_URL: str = "https://translate.google.com"
    TRANSLATE_TIMEOUT: float = 30.0

    # ==========================================================================
    # Statistics store
    # ==========================================================================
    STATS_FILE: str = "stats.json"
    STATS_TOP_LANGUAGES: int = Field(default=5, ge=1)

    @property
    def is_development(self) -> bool:
        return self.APP_ENV.strip().lower() == "development"

    @property
    def cors_origins(self) -> List[str]:
        origins = [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]
        return origins or ["*"]

    @property
    def log_level(self) -> int:
        level = logging.getLevelName(self.LOG_LEVEL.strip().upper())
        return level if isinstance(level, int) else logging.INFO


@lru_cache()
def get_settings() -> Settings:
    return Settings()
