"""Application keys shared between the server and its handlers."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from aiohttp import web

if TYPE_CHECKING:
    from beacon_indexer.participation import ParticipationService

SERVICE_GETTER: web.AppKey[Callable[[], ParticipationService | None]] = web.AppKey(
    "service_getter"
)
"""Callable returning the participation service, or None before it is wired."""
