"""
API server for the participation rate and node status endpoints.

Provides HTTP endpoints for:
- /network/participation_rate - Participation rate as plain text
- /network/participation - Participation rate with its status as JSON
- /health - Health check endpoint
- /metrics - Prometheus metrics endpoint
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from aiohttp import web

from .endpoints.keys import SERVICE_GETTER
from .routes import ROUTES

if TYPE_CHECKING:
    from beacon_indexer.participation import ParticipationService

logger = logging.getLogger(__name__)


def _no_service() -> ParticipationService | None:
    """Default service getter that returns None."""
    return None


@dataclass(frozen=True, slots=True)
class ApiServerConfig:
    """Configuration for the API server."""

    host: str = "0.0.0.0"
    """Host address to bind to."""

    port: int = 8000
    """Port to listen on."""

    enabled: bool = True
    """Whether the API server is enabled."""


@dataclass(slots=True)
class ApiServer:
    """
    HTTP API server for the participation rate.

    Handlers never block on ingestion: they read the store directly.

    Uses aiohttp to handle HTTP protocol details efficiently.
    """

    config: ApiServerConfig
    """Server configuration."""

    service_getter: Callable[[], ParticipationService | None] = _no_service
    """Callable that returns the participation service."""

    _runner: web.AppRunner | None = field(default=None, init=False)
    """The aiohttp application runner."""

    _site: web.TCPSite | None = field(default=None, init=False)
    """The TCP site for the server."""

    @property
    def service(self) -> ParticipationService | None:
        """Get the current participation service."""
        return self.service_getter()

    def create_app(self) -> web.Application:
        """Build the aiohttp application with all routes."""
        app = web.Application()
        app[SERVICE_GETTER] = self.service_getter
        app.add_routes([web.get(path, handler) for path, handler in ROUTES.items()])
        return app

    async def start(self) -> None:
        """Start the API server in the background."""
        if not self.config.enabled:
            logger.info("API server is disabled")
            return

        if self._runner is not None:
            return

        self._runner = web.AppRunner(self.create_app())
        await self._runner.setup()

        self._site = web.TCPSite(self._runner, self.config.host, self.config.port)
        await self._site.start()

        logger.info("API server listening on %s:%d", self.config.host, self.config.port)

    async def run(self) -> None:
        """
        Run the API server until shutdown.

        This method blocks until stop() is called.
        """
        await self.start()

        # Keep running until stopped
        while self._runner is not None:
            await asyncio.sleep(1)

    def stop(self) -> None:
        """Request graceful shutdown."""
        if self._runner is not None:
            asyncio.create_task(self._async_stop())

    async def _async_stop(self) -> None:
        """Gracefully stop the server."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None
            self._site = None
            logger.info("API server stopped")
