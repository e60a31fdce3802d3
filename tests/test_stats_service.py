"""
Tests for services/stats_service.py - file-backed counters.
"""
import asyncio
import json
import logging
import pytest
from pathlib import Path
from unittest.mock import patch

from translate_gateway.errors import StatsStoreError
from translate_gateway.services.stats_service import StatsStore


@pytest.fixture
def stats_path(tmp_path):
    return tmp_path / "data" / "stats.json"


@pytest.fixture
def store(stats_path):
    return StatsStore(stats_path)


def read_file(path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestEnsureInitialized:

    @pytest.mark.asyncio
    async def test_creates_zeroed_file(self, store, stats_path):
        created = await store.ensure_initialized()

        assert created is True
        data = read_file(stats_path)
        assert data["totalRequests"] == 0
        assert data["successfulTranslations"] == 0
        assert data["failedTranslations"] == 0
        assert data["totalResponseTime"] == 0
        assert data["sourceLanguages"] == {}
        assert data["targetLanguages"] == {}
        assert "lastUpdated" in data

    @pytest.mark.asyncio
    async def test_idempotent(self, store, stats_path):
        await store.ensure_initialized()
        await store.record_success(12.5, "en", "pt")
        before = read_file(stats_path)

        created = await store.ensure_initialized()

        assert created is False
        assert read_file(stats_path) == before


class TestRecording:

    @pytest.mark.asyncio
    async def test_record_success_increments_by_one(self, store):
        await store.ensure_initialized()
        before = await store.read()

        await store.record_success(100.0, "en", "pt")
        after = await store.read()

        assert after.total_requests == before.total_requests + 1
        assert after.successful_translations == before.successful_translations + 1
        assert after.failed_translations == before.failed_translations
        assert after.source_languages == {"en": 1}
        assert after.target_languages == {"pt": 1}
        assert after.total_response_time == pytest.approx(100.0)

    @pytest.mark.asyncio
    async def test_record_failure(self, store):
        await store.record_failure()
        stats = await store.read()

        assert stats.total_requests == 1
        assert stats.failed_translations == 1
        assert stats.successful_translations == 0
        assert stats.source_languages == {}

    @pytest.mark.asyncio
    async def test_totals_match_outcomes(self, store):
        for _ in range(3):
            await store.record_success(10.0, "en", "es")
        for _ in range(2):
            await store.record_failure()

        stats = await store.read()
        assert stats.total_requests == stats.successful_translations + stats.failed_translations == 5

    @pytest.mark.asyncio
    async def test_average_matches_recorded_times(self, store):
        times = [12.5, 80.25, 3.125, 400.0]
        for t in times:
            await store.record_success(t, "en", "pt")

        stats = await store.read()
        snapshot = await store.snapshot()

        assert stats.total_response_time / stats.successful_translations == pytest.approx(sum(times) / len(times))
        assert snapshot.average_response_time == pytest.approx(sum(times) / len(times))

    @pytest.mark.asyncio
    async def test_concurrent_updates_are_not_lost(self, store):
        await store.ensure_initialized()

        await asyncio.gather(
            *[store.record_success(1.0, "en", "pt") for _ in range(25)],
            *[store.record_failure() for _ in range(15)]
        )

        stats = await store.read()
        assert stats.total_requests == 40
        assert stats.successful_translations == 25
        assert stats.failed_translations == 15
        assert stats.target_languages == {"pt": 25}


class TestRecovery:

    @pytest.mark.asyncio
    async def test_missing_file_is_created_on_read(self, store, stats_path):
        stats = await store.read()

        assert stats.total_requests == 0
        assert stats_path.exists()

    @pytest.mark.asyncio
    async def test_corrupt_file_is_quarantined(self, store, stats_path):
        stats_path.parent.mkdir(parents=True)
        stats_path.write_text("{ not json", encoding="utf-8")

        stats = await store.record_success(5.0, "en", "pt")

        assert stats.total_requests == 1
        assert read_file(stats_path)["successfulTranslations"] == 1
        quarantined = list(stats_path.parent.glob("stats.json.corrupt-*"))
        assert len(quarantined) == 1
        assert quarantined[0].read_text(encoding="utf-8") == "{ not json"

    @pytest.mark.asyncio
    async def test_schema_mismatch_is_recovered(self, store, stats_path):
        stats_path.parent.mkdir(parents=True)
        stats_path.write_text(json.dumps({"totalRequests": "many"}), encoding="utf-8")

        stats = await store.read()

        assert stats.total_requests == 0

    @pytest.mark.asyncio
    async def test_missing_file_is_created_without_warning(self, store, caplog):
        with caplog.at_level(logging.INFO):
            await store.record_failure()

        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]
        assert "Created stats file" in caplog.text

    @pytest.mark.asyncio
    async def test_transient_read_error_keeps_counters(self, store, stats_path):
        for _ in range(5):
            await store.record_success(1.0, "en", "pt")

        with patch.object(Path, "read_text", side_effect=PermissionError(13, "Permission denied")):
            with pytest.raises(StatsStoreError):
                await store.record_success(1.0, "en", "pt")

        assert list(stats_path.parent.glob("stats.json.corrupt-*")) == []
        assert read_file(stats_path)["totalRequests"] == 5

        stats = await store.record_success(1.0, "en", "pt")
        assert stats.total_requests == 6

    @pytest.mark.asyncio
    async def test_second_failure_raises(self, store):
        with patch.object(StatsStore, "_read_sync", side_effect=ValueError("broken disk")):
            with pytest.raises(StatsStoreError):
                await store.read()


class TestSnapshot:

    @pytest.mark.asyncio
    async def test_empty_snapshot(self, store):
        snapshot = await store.snapshot()

        assert snapshot.total_requests == 0
        assert snapshot.average_response_time == 0
        assert snapshot.top_source_languages == []

    @pytest.mark.asyncio
    async def test_top_languages_sorted_and_truncated(self, store):
        for target, count in [("pt", 3), ("es", 1), ("fr", 2), ("de", 1)]:
            for _ in range(count):
                await store.record_success(1.0, "en", target)

        snapshot = await store.snapshot(top=3)

        assert [(item.code, item.count) for item in snapshot.top_target_languages] == [
            ("pt", 3), ("fr", 2), ("de", 1)
        ]
        assert snapshot.model_dump(by_alias=True)["topTargetLanguages"][0] == {"code": "pt", "count": 3}
