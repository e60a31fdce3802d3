"""
Tests for config.py and logging_config.py.
"""
import logging
import pytest

from translate_gateway.config import Settings
from translate_gateway.logging_config import LoggingContext


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("PORT", "LOG_LEVEL", "ALLOWED_ORIGINS", "APP_ENV", "NODE_ENV"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.PORT == 3000
        assert settings.LOG_LEVEL == "info"
        assert settings.cors_origins == ["*"]
        assert settings.is_development is False

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("ALLOWED_ORIGINS", "http://a.example, http://b.example,")

        settings = Settings(_env_file=None)

        assert settings.PORT == 8080
        assert settings.log_level == logging.DEBUG
        assert settings.cors_origins == ["http://a.example", "http://b.example"]

    def test_node_env_alias(self, monkeypatch):
        monkeypatch.delenv("APP_ENV", raising=False)
        monkeypatch.setenv("NODE_ENV", "development")

        assert Settings(_env_file=None).is_development is True

    def test_unknown_log_level_falls_back_to_info(self):
        assert Settings(_env_file=None, LOG_LEVEL="chatty").log_level == logging.INFO


class TestLoggingContext:

    def test_file_handlers_created_and_closed(self, make_settings, tmp_path):
        settings = make_settings(LOG_TO_FILE=True, LOG_LEVEL="warning")
        context = LoggingContext(settings, name="tests.logging_context")

        with context as logger:
            assert logger.level == logging.WARNING
            assert len(logger.handlers) == 3
            logger.error("disk full")

        assert logger.handlers == []
        assert (tmp_path / "logs" / "translate.log").exists()
        assert "disk full" in (tmp_path / "logs" / "exceptions.log").read_text(encoding="utf-8")

    def test_console_only(self, make_settings, tmp_path):
        context = LoggingContext(make_settings(), name="tests.console_only")

        logger = context.open()
        try:
            assert len(logger.handlers) == 1
            assert context.child("stats").name == "tests.console_only.stats"
        finally:
            context.close()

        assert not (tmp_path / "logs").exists()

    def test_open_twice_does_not_duplicate_handlers(self, make_settings):
        context = LoggingContext(make_settings(), name="tests.open_twice")

        context.open()
        logger = context.open()
        try:
            assert len(logger.handlers) == 1
        finally:
            context.close()
