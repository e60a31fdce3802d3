"""
FastAPI dependencies for the Translate Gateway.

Components are built in the application lifespan and kept on app.state.
"""
import logging

from fastapi import Request

from translate_gateway.config import Settings
from translate_gateway.logging_config import LOGGER_NAME
from translate_gateway.services.stats_service import StatsStore
from translate_gateway.services.system_service import SystemService
from translate_gateway.services.translation_service import TranslationService


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_logger(request: Request) -> logging.Logger:
    return getattr(request.app.state, "logger", None) or logging.getLogger(LOGGER_NAME)


def get_translation_service(request: Request) -> TranslationService:
    return request.app.state.translation_service


def get_stats_store(request: Request) -> StatsStore:
    return request.app.state.stats_store


def get_system_service(request: Request) -> SystemService:
    return request.app.state.system_service
