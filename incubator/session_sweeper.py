# incubator/session_sweeper.py

import asyncio
import logging

from incubator.session_store import SessionStore

logger = logging.getLogger("incubator_backend")


class SessionSweeper:
    """
    Background loop that evicts expired sessions on a fixed interval,
    independent of request traffic.
    """

    def __init__(self, store: SessionStore, ttl_seconds: float, interval_seconds: float):
        self.store = store
        self.ttl_seconds = ttl_seconds
        self.interval_seconds = interval_seconds
        self._task: asyncio.Task | None = None

    def sweep(self) -> int:
        removed = self.store.sweep_expired(self.ttl_seconds)
        if removed:
            logger.info("Session sweep: removed %d expired sessions", removed)
        return removed

    async def run(self) -> None:
        logger.info(
            "SessionSweeper running: ttl=%ss interval=%ss", self.ttl_seconds, self.interval_seconds
        )
        while True:
            await asyncio.sleep(self.interval_seconds)
            self.sweep()

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
