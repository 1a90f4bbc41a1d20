from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone

import httpx

from fxrates.core.config import Settings
from fxrates.core.errors import RateServiceError
from fxrates.services.provider import fetch_snapshot, parse_quotes
from fxrates.services.store import RateStore


logger = logging.getLogger("fxrates.sync")


@dataclass(frozen=True)
class SyncResult:
    applied: int
    skipped: int
    recorded_at: datetime


class RateSynchronizer:
    """Pulls one provider snapshot and applies it to the store in a single transaction."""

    def __init__(
        self,
        store: RateStore,
        data_url: str,
        base_currency: str = "USD",
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.store = store
        self.data_url = data_url
        self.base_currency = base_currency
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, store: RateStore, settings: Settings) -> RateSynchronizer:
        return cls(
            store,
            data_url=settings.data_url,
            base_currency=settings.base_currency,
            timeout_seconds=settings.http_timeout_seconds,
        )

    async def sync_once(self) -> SyncResult:
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            snapshot = await fetch_snapshot(client, self.data_url)

        rates, skipped = parse_quotes(snapshot, self.base_currency)
        recorded_at = datetime.now(timezone.utc)
        if not rates:
            logger.warning("provider snapshot had no usable quotes, store left unchanged")
            return SyncResult(applied=0, skipped=len(skipped), recorded_at=recorded_at)

        applied = await asyncio.to_thread(self.store.apply_snapshot, rates, recorded_at)
        return SyncResult(applied=applied, skipped=len(skipped), recorded_at=recorded_at)

    async def run_cycle(self) -> SyncResult | None:
        logger.info("syncing rates with external provider")
        try:
            result = await self.sync_once()
        except RateServiceError as exc:
            logger.error("sync cycle failed: %s", exc.message)
            return None
        except Exception:
            logger.exception("sync cycle failed unexpectedly")
            return None

        logger.info("sync finished: %d rates applied, %d quotes skipped", result.applied, result.skipped)
        return result


class RateSyncWorker:
    """Runs the synchronizer immediately and then every ``interval_seconds``.

    ``stop`` lets an in-flight cycle finish before the task exits.
    """

    def __init__(self, synchronizer: RateSynchronizer, interval_seconds: float) -> None:
        self.synchronizer = synchronizer
        self.interval_seconds = interval_seconds
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run(), name="rate-sync-worker")

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is not None:
            await self._task
            self._task = None

    async def _run(self) -> None:
        while not self._stop_event.is_set():
            await self.synchronizer.run_cycle()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                continue
        logger.info("rate sync worker stopped")
