"""
Timer-driven refresh loop.

Waits `initial_delay` seconds after startup, then refreshes every category
every `interval` seconds. The blocking pipeline runs in a worker thread so
request handling on the event loop is never stalled. A failed or skipped
tick is logged and the loop carries on.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from dinger_api.services.refresh import RefreshInProgress, RefreshService

logger = logging.getLogger(__name__)


class PeriodicRefresher:
    def __init__(self, service: RefreshService, interval: float, initial_delay: float = 0.0):
        self.service = service
        self.interval = interval
        self.initial_delay = initial_delay
        self.runs = 0
        self.failures = 0
        self._task: Optional[asyncio.Task] = None

    async def run_once(self) -> None:
        try:
            counts = await asyncio.to_thread(self.service.refresh_all)
        except RefreshInProgress:
            logger.warning("Skipping scheduled refresh: previous run still in progress")
            return
        except Exception:
            self.failures += 1
            logger.exception("Scheduled refresh failed")
            return
        self.runs += 1
        logger.info("Scheduled refresh completed: %s", counts)

    async def _loop(self) -> None:
        if self.initial_delay > 0:
            await asyncio.sleep(self.initial_delay)
        while True:
            await self.run_once()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self._task is None or self._task.done():
            logger.info("Scheduled updates every %.0f seconds", self.interval)
            self._task = asyncio.create_task(self._loop())

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
