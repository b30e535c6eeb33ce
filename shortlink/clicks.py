"""Background click accounting.

Redirects must not wait on the click counter, and a slow or unavailable store
must not pile up unbounded pending work. ``ClickRecorder`` owns a bounded
queue of slugs and a fixed pool of worker tasks that apply
``UrlStore.increment_clicks`` one slug at a time.

Flow Diagram — submit()
=======================
::
    ┌─────────────┐
    │ redirect    │
    │ handler     │
    └──────┬──────┘
           ▼ put_nowait
    ┌─────────────┐  full
    │ bounded     ├──────► dropped (logged, counted)
    │ queue       │
    └──────┬──────┘
           ▼
    ┌─────────────┐  error
    │ worker pool ├──────► failed (logged, counted, not retried)
    └──────┬──────┘
           ▼
    clicks = clicks + 1

Key Behaviours
===============
- ``submit`` never blocks and never raises.
- Queued increments belong to the recorder, not to the request task, so a
  client disconnect does not cancel them.
- ``stop`` drains the queue (bounded by a timeout) before cancelling workers.
"""

import asyncio
import contextlib
import logging

from shortlink.enums import ClickOutcome
from shortlink.metrics import CLICK_INCREMENTS_TOTAL
from shortlink.store import UrlStore

__all__ = ["ClickRecorder"]

logger = logging.getLogger(__name__)


class ClickRecorder:
    def __init__(
        self,
        store: UrlStore,
        max_pending: int = 1000,
        workers: int = 2,
        drain_timeout: float = 5.0,
    ) -> None:
        if max_pending < 1:
            raise ValueError(f"max_pending must be at least 1, got {max_pending!r}")
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers!r}")
        self._store = store
        self._queue: asyncio.Queue[str] = asyncio.Queue(maxsize=max_pending)
        self._worker_count = workers
        self._drain_timeout = drain_timeout
        self._workers: list[asyncio.Task[None]] = []

    @property
    def running(self) -> bool:
        return bool(self._workers)

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def start(self) -> None:
        if self._workers:
            return
        self._workers = [
            asyncio.create_task(self._run(), name=f"click-worker-{index}")
            for index in range(self._worker_count)
        ]
        logger.info(f"Started {self._worker_count} click workers")

    def submit(self, slug: str) -> bool:
        try:
            self._queue.put_nowait(slug)
        except asyncio.QueueFull:
            CLICK_INCREMENTS_TOTAL.labels(outcome=ClickOutcome.DROPPED).inc()
            logger.warning(f"Click queue full, dropping increment for {slug}")
            return False
        return True

    async def drain(self) -> None:
        await self._queue.join()

    async def stop(self) -> None:
        if not self._workers:
            return
        try:
            await asyncio.wait_for(self.drain(), timeout=self._drain_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Stopping click workers with {self.pending} increments still queued")
        for worker in self._workers:
            worker.cancel()
        for worker in self._workers:
            with contextlib.suppress(asyncio.CancelledError):
                await worker
        self._workers = []
        logger.info("Click workers stopped")

    async def _run(self) -> None:
        while True:
            slug = await self._queue.get()
            try:
                await self._store.increment_clicks(slug)
                CLICK_INCREMENTS_TOTAL.labels(outcome=ClickOutcome.APPLIED).inc()
            except Exception as exc:
                CLICK_INCREMENTS_TOTAL.labels(outcome=ClickOutcome.FAILED).inc()
                logger.warning(f"Click increment failed for {slug}: {exc}")
            finally:
                self._queue.task_done()
