"""
Statistics Store.

Request counters persisted as a single JSON document (STATS_FILE):

{
  "totalRequests": 3,
  "successfulTranslations": 2,
  "failedTranslations": 1,
  "totalResponseTime": 412.7,
  "sourceLanguages": {"en": 2},
  "targetLanguages": {"pt": 2},
  "lastUpdated": "2024-01-01T12:00:00.000000Z"
}

Every read-modify-write cycle holds the store's asyncio.Lock, so requests
served by this process never overwrite each other's updates. Several
worker processes sharing one file remain last-writer-wins.

File I/O runs in a worker thread; writes go to a temp file that is then
renamed over the document.

A missing document is created with zeroed counters. A document that is
not valid JSON or does not match the schema is moved aside to
<name>.corrupt-<stamp>, recreated empty and read once more. Any other I/O
error, or a second failure, raises StatsStoreError and leaves the file
in place.
"""
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Union
import asyncio
import json
import logging
import os

from translate_gateway.errors import StatsStoreError
from translate_gateway.schemas.schemas import LanguageCount, StatsSnapshot, StoredStats, utc_timestamp


def _top_languages(counts: Dict[str, int], limit: int) -> List[LanguageCount]:
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return [LanguageCount(code=code, count=count) for code, count in ranked[:limit]]


class StatsStore:
    """File-backed translation counters."""

    def __init__(self, path: Union[str, Path], logger: Optional[logging.Logger] = None):
        self.path = Path(path)
        self.logger = logger or logging.getLogger(__name__)
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------ #
    # Blocking helpers (run in a worker thread)
    # ------------------------------------------------------------------ #

    def _write_sync(self, stats: StoredStats):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        tmp_path.write_text(
            json.dumps(stats.model_dump(by_alias=True), indent=2, ensure_ascii=False),
            encoding="utf-8"
        )
        os.replace(tmp_path, self.path)

    def _ensure_sync(self) -> bool:
        if self.path.exists():
            return False
        self._write_sync(StoredStats(last_updated=utc_timestamp()))
        return True

    def _read_sync(self) -> StoredStats:
        data = json.loads(self.path.read_text(encoding="utf-8"))
        return StoredStats.model_validate(data)

    def _recover_sync(self) -> Optional[Path]:
        quarantined = None
        if self.path.exists():
            stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%f")
            quarantined = self.path.with_name(f"{self.path.name}.corrupt-{stamp}")
            os.replace(self.path, quarantined)
        self._ensure_sync()
        return quarantined

    # ------------------------------------------------------------------ #
    # Lock-held helpers
    # ------------------------------------------------------------------ #

    async def _load(self) -> StoredStats:
        try:
            return await asyncio.to_thread(self._read_sync)
        except FileNotFoundError:
            if await asyncio.to_thread(self._ensure_sync):
                self.logger.info(f"Created stats file {self.path}")
        except ValueError as e:
            self.logger.warning(f"Stats file {self.path} is corrupt ({e}); re-initializing")
            quarantined = await asyncio.to_thread(self._recover_sync)
            if quarantined is not None:
                self.logger.warning(f"Previous stats file kept as {quarantined}")
        except OSError as e:
            # Permissions, descriptor limits: the document stays in place.
            raise StatsStoreError(f"Stats file {self.path} could not be read: {e}") from e

        try:
            return await asyncio.to_thread(self._read_sync)
        except (OSError, ValueError) as e:
            raise StatsStoreError(f"Stats file {self.path} unreadable after re-initialization: {e}") from e

    async def _save(self, stats: StoredStats):
        await asyncio.to_thread(self._write_sync, stats)

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def ensure_initialized(self) -> bool:
        """Create the stats file with zeroed counters if it does not exist."""
        async with self._lock:
            created = await asyncio.to_thread(self._ensure_sync)
        if created:
            self.logger.info(f"Created stats file {self.path}")
        return created

    async def read(self) -> StoredStats:
        async with self._lock:
            return await self._load()

    async def record_success(self, response_time_ms: float, source_lang: str, target_lang: str) -> StoredStats:
        async with self._lock:
            stats = await self._load()

            stats.total_requests += 1
            stats.successful_translations += 1
            stats.total_response_time += response_time_ms
            stats.source_languages[source_lang] = stats.source_languages.get(source_lang, 0) + 1
            stats.target_languages[target_lang] = stats.target_languages.get(target_lang, 0) + 1
            stats.last_updated = utc_timestamp()

            await self._save(stats)
            return stats

    async def record_failure(self) -> StoredStats:
        async with self._lock:
            stats = await self._load()

            stats.total_requests += 1
            stats.failed_translations += 1
            stats.last_updated = utc_timestamp()

            await self._save(stats)
            return stats

    async def snapshot(self, top: int = 5) -> StatsSnapshot:
        stats = await self.read()

        average = 0.0
        if stats.successful_translations:
            average = stats.total_response_time / stats.successful_translations

        return StatsSnapshot(
            total_requests=stats.total_requests,
            successful_translations=stats.successful_translations,
            failed_translations=stats.failed_translations,
            average_response_time=average,
            top_source_languages=_top_languages(stats.source_languages, top),
            top_target_languages=_top_languages(stats.target_languages, top),
            last_updated=stats.last_updated
        )
