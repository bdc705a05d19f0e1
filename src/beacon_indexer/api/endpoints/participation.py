"""Participation rate endpoint handlers."""

from __future__ import annotations

from aiohttp import web

from beacon_indexer.participation import (
    DEFAULT_WINDOW_EPOCHS,
    ParticipationService,
    ParticipationSnapshot,
    ParticipationStatus,
    format_participation_rate,
)
from beacon_indexer.participation.service import DEFAULT_RATE

from .keys import SERVICE_GETTER


def _service(request: web.Request) -> ParticipationService | None:
    getter = request.app.get(SERVICE_GETTER)
    return getter() if getter else None


async def handle_rate(request: web.Request) -> web.Response:
    """
    Handle participation rate request.

    Response: plain text ``Participation Rate: {value}%`` with two decimals.

    Status Codes:
        200 OK: Always. Missing data and internal failures render as 0.00%.
    """
    service = _service(request)
    body = service.render() if service else format_participation_rate(DEFAULT_RATE)
    return web.Response(text=body, content_type="text/plain")


async def handle_snapshot(request: web.Request) -> web.Response:
    """
    Handle structured participation request.

    Response: JSON object with fields:
        - status (string): "ok", "no_data" or "error".
        - rate (number): The rate as a fraction; 0 unless status is "ok".
        - percentage (string): The rate as a two-decimal percentage.
        - window_epochs (integer): Epochs covered by the rate.

    Status Codes:
        200 OK: Always. The status field carries the outcome.
    """
    service = _service(request)
    if service is None:
        snapshot = ParticipationSnapshot(
            ParticipationStatus.NO_DATA,
            DEFAULT_RATE,
            DEFAULT_WINDOW_EPOCHS,
        )
    else:
        snapshot = service.snapshot()

    return web.json_response(
        {
            "status": snapshot.status.value,
            "rate": snapshot.rate,
            "percentage": snapshot.percentage,
            "window_epochs": snapshot.window_epochs,
        }
    )
