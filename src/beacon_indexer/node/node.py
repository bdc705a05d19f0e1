"""
Indexer node orchestrator.

Wires together all services and runs them with structured concurrency.

Two independent paths share the store:

- Write path: scheduler -> pipeline -> explorer client -> store
- Read path: API server -> participation service -> aggregator -> store
"""

from __future__ import annotations

import asyncio
import logging
import signal
from dataclasses import dataclass, field

from beacon_indexer.api import ApiServer, ApiServerConfig
from beacon_indexer.config import IndexerConfig
from beacon_indexer.explorer import ChainClient
from beacon_indexer.ingestion import (
    IngestionPipeline,
    IngestionScheduler,
    SlotRetryTracker,
    SlotSource,
)
from beacon_indexer.participation import ParticipationAggregator, ParticipationService
from beacon_indexer.storage import SlotRecordStore, SQLiteSlotRecordStore

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IndexerNode:
    """
    Indexer node orchestrator.

    Builds every component from configuration.
    Runs the ingestion scheduler and the API server concurrently.
    """

    store: SlotRecordStore
    """Slot record storage shared by both paths."""

    pipeline: IngestionPipeline
    """Catch-up ingestion."""

    scheduler: IngestionScheduler
    """Drives the pipeline on a fixed cadence."""

    service: ParticipationService
    """Participation rate for HTTP callers."""

    api_server: ApiServer | None = field(default=None)
    """Optional API server."""

    _shutdown: asyncio.Event = field(default_factory=asyncio.Event)
    """Event signaling shutdown request."""

    @classmethod
    def from_config(
        cls,
        config: IndexerConfig,
        *,
        client: SlotSource | None = None,
        store: SlotRecordStore | None = None,
    ) -> IndexerNode:
        """
        Create a fully-wired node.

        Args:
            config: Indexer configuration.
            client: Explorer client to use instead of one built from config.
            store: Store to use instead of the configured SQLite database.
        """
        if store is None:
            store = SQLiteSlotRecordStore(config.database_path)

        if client is None:
            client = ChainClient(
                base_url=config.explorer_url,
                timeout=config.request_timeout,
                api_key=config.api_key,
            )

        pipeline = IngestionPipeline(
            client=client,
            store=store,
            request_delay=config.request_delay,
            bitfield_mode=config.bitfield_mode,
            retries=SlotRetryTracker(config.max_slot_attempts),
        )
        scheduler = IngestionScheduler(pipeline=pipeline, interval=config.poll_interval)

        aggregator = ParticipationAggregator(store=store, window_epochs=config.window_epochs)
        service = ParticipationService(aggregator=aggregator)

        api_server = None
        if config.api_enabled:
            api_server = ApiServer(
                config=ApiServerConfig(host=config.api_host, port=config.api_port),
                service_getter=lambda: service,
            )

        return cls(
            store=store,
            pipeline=pipeline,
            scheduler=scheduler,
            service=service,
            api_server=api_server,
        )

    async def run(self, *, install_signal_handlers: bool = True) -> None:
        """
        Run all services until shutdown.

        Args:
            install_signal_handlers: Whether to handle SIGINT/SIGTERM.
                Disable for testing or non-main threads.
        """
        if install_signal_handlers:
            self._install_signal_handlers()

        # The store is closed only after every service has exited,
        # or when the API server fails to bind.
        try:
            if self.api_server is not None:
                await self.api_server.start()

            async with asyncio.TaskGroup() as tg:
                tg.create_task(self.scheduler.run())
                if self.api_server is not None:
                    tg.create_task(self.api_server.run())
                tg.create_task(self._wait_shutdown())
        finally:
            self.store.close()

    def _install_signal_handlers(self) -> None:
        """
        Install signal handlers for graceful shutdown.

        Silently ignores errors if handlers cannot be installed.
        This happens in non-main threads or embedded contexts.
        """
        try:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                loop.add_signal_handler(sig, self._shutdown.set)
        except (ValueError, RuntimeError):
            # Cannot add handlers outside main thread.
            pass

    async def _wait_shutdown(self) -> None:
        """Wait for shutdown signal then stop services."""
        await self._shutdown.wait()
        logger.info("Shutting down indexer")

        self.scheduler.stop()
        if self.api_server is not None:
            self.api_server.stop()

    def stop(self) -> None:
        """Request graceful shutdown."""
        self._shutdown.set()

    @property
    def is_running(self) -> bool:
        """Check if node is currently running."""
        return not self._shutdown.is_set()
