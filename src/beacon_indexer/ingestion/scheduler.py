"""
Recurring driver for the ingestion pipeline.

Ticks fire on a fixed cadence. Each tick starts a cycle in the background
unless the previous cycle is still running, in which case the tick is
skipped. Overlapping cycles would plan the same slot range twice.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from dataclasses import dataclass, field

from beacon_indexer import metrics
from beacon_indexer.types import IndexerError

from .config import DEFAULT_POLL_INTERVAL
from .pipeline import IngestionPipeline

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestionScheduler:
    """
    Runs one ingestion cycle per interval, never two at once.

    A failing cycle is logged and the next tick tries again.
    Nothing raised by a cycle stops the loop.
    """

    pipeline: IngestionPipeline
    """Pipeline to drive."""

    interval: float = DEFAULT_POLL_INTERVAL
    """Seconds between ticks."""

    _cycle_task: asyncio.Task[None] | None = field(default=None, init=False, repr=False)
    """The in-flight cycle, if any."""

    _running: bool = field(default=False, repr=False)
    """Whether the tick loop is running."""

    _wakeup: asyncio.Event = field(default_factory=asyncio.Event, repr=False)
    """Set by stop() to cut the current sleep short."""

    async def run(self) -> None:
        """
        Tick until stopped.

        The first tick fires immediately. On exit the in-flight cycle is cancelled.
        """
        self._running = True
        self._wakeup.clear()
        logger.info("Ingestion scheduler started (interval=%.1fs)", self.interval)

        try:
            while self._running:
                self.tick()
                with contextlib.suppress(TimeoutError):
                    await asyncio.wait_for(self._wakeup.wait(), timeout=self.interval)
        finally:
            await self._cancel_cycle()
            logger.info("Ingestion scheduler stopped")

    def tick(self) -> bool:
        """
        Start a cycle unless one is already running.

        Must be called from within the event loop.

        Returns:
            True if a cycle was started, False if the tick was skipped.
        """
        if self.is_busy:
            metrics.cycles_skipped.inc()
            logger.info("Previous ingestion cycle still running, skipping tick")
            return False

        self._cycle_task = asyncio.create_task(self._run_cycle())
        return True

    async def wait_idle(self) -> None:
        """Wait for the in-flight cycle, if any, to finish."""
        if self._cycle_task is not None:
            await asyncio.shield(self._cycle_task)

    async def _run_cycle(self) -> None:
        """Run one cycle, logging its outcome."""
        started = time.monotonic()
        try:
            report = await self.pipeline.run_cycle()
        except IndexerError as e:
            logger.error("Ingestion cycle aborted: %s", e)
        except Exception:
            # Unexpected bugs must not kill the background loop either.
            logger.exception("Unexpected error in ingestion cycle")
        else:
            if not report.idle:
                logger.info(
                    "Ingestion cycle done: stored=%d failed=%d quarantined=%d chain=%d",
                    len(report.stored),
                    len(report.failed),
                    len(report.quarantined),
                    report.latest_chain_slot,
                )
        finally:
            metrics.cycle_duration.observe(time.monotonic() - started)

    async def _cancel_cycle(self) -> None:
        """Cancel the in-flight cycle and wait for it to unwind."""
        task = self._cycle_task
        if task is None or task.done():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    def stop(self) -> None:
        """
        Stop the tick loop.

        The loop exits promptly; the in-flight cycle is cancelled.
        """
        self._running = False
        self._wakeup.set()

    @property
    def is_busy(self) -> bool:
        """Whether a cycle is currently running."""
        return self._cycle_task is not None and not self._cycle_task.done()

    @property
    def is_running(self) -> bool:
        """Check if the tick loop is running."""
        return self._running
