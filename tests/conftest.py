"""
Pytest configuration and shared fixtures for Translate Gateway tests.
"""
import json
import pytest
from pathlib import Path
from fastapi.testclient import TestClient

from translate_gateway.config import Settings
from translate_gateway.main import create_app
from translate_gateway.services.translator_client import ExternalTranslation


class FakeTranslatorClient:
    """Stands in for GoogleTranslateClient; records calls."""

    def __init__(self, text="Olá mundo", raw=None, error=None):
        self.text = text
        self.raw = {"src": "en"} if raw is None else raw
        self.error = error
        self.calls = []

    async def translate(self, text, to, from_=None):
        self.calls.append({"text": text, "to": to, "from_": from_})
        if self.error is not None:
            raise self.error
        return ExternalTranslation(text=self.text, raw=self.raw)

    async def aclose(self):
        pass


@pytest.fixture
def make_settings(tmp_path):
    """Build Settings isolated from the environment and .env files."""
    def _make(**overrides):
        values = {
            "STATS_FILE": str(tmp_path / "stats.json"),
            "LOG_DIR": str(tmp_path / "logs"),
            "LOG_TO_FILE": False,
            "APP_ENV": "production",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def fake_translator():
    return FakeTranslatorClient()


@pytest.fixture
def make_client(settings, fake_translator):
    """Create a TestClient around a fresh app; lifespan runs on enter."""
    def _make(app_settings=None, translator=None):
        app = create_app(
            app_settings or settings,
            translator_client=translator or fake_translator,
            supervise=False
        )
        return TestClient(app, raise_server_exceptions=False)

    return _make


@pytest.fixture
def test_client(make_client):
    with make_client() as client:
        yield client


@pytest.fixture
def read_stats_file(settings):
    def _read():
        return json.loads(Path(settings.STATS_FILE).read_text(encoding="utf-8"))

    return _read
