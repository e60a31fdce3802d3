"""
Services module initialization.
"""
from translate_gateway.services.translator_client import GoogleTranslateClient
from translate_gateway.services.translation_service import TranslationService
from translate_gateway.services.stats_service import StatsStore
from translate_gateway.services.system_service import SystemService

__all__ = [
    "GoogleTranslateClient",
    "TranslationService",
    "StatsStore",
    "SystemService",
]
