"""API route definitions."""

from collections.abc import Awaitable, Callable

from aiohttp import web

from .endpoints import health, metrics, participation

ROUTES: dict[str, Callable[[web.Request], Awaitable[web.Response]]] = {
    "/network/participation_rate": participation.handle_rate,
    "/network/participation": participation.handle_snapshot,
    "/health": health.handle,
    "/metrics": metrics.handle,
}
"""All API routes mapped to their handlers."""
