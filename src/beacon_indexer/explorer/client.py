"""
Explorer API client.

Each call issues exactly one HTTP request and decodes the response into a
typed model. There is no retry here: the ingestion pipeline decides what
to do with a failed slot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from beacon_indexer.containers import (
    AttestationsResponse,
    CommitteeAttestation,
    LatestSlotResponse,
)
from beacon_indexer.types import FetchError

from .config import (
    API_KEY_PARAM,
    DEFAULT_EXPLORER_URL,
    DEFAULT_TIMEOUT,
    LATEST_SLOT_ENDPOINT,
    SLOT_ATTESTATIONS_ENDPOINT,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True, slots=True)
class ChainClient:
    """
    Client for the slot endpoints of the explorer API.

    A fresh ``httpx.AsyncClient`` is opened per request. Requests are spaced
    out by the caller, so connection reuse buys little.
    """

    base_url: str = DEFAULT_EXPLORER_URL
    """Base URL of the explorer API (e.g., "https://beaconcha.in/api/v1")."""

    timeout: float = DEFAULT_TIMEOUT
    """Per-request timeout in seconds."""

    api_key: str | None = None
    """Optional API key sent as a query parameter."""

    transport: httpx.AsyncBaseTransport | None = None
    """Custom transport. Tests inject ``httpx.MockTransport`` here."""

    async def fetch_latest_slot_number(self) -> int:
        """
        Fetch the number of the most recent chain slot.

        Raises:
            FetchError: If the request fails or the body is malformed.
        """
        response = await self._get(LATEST_SLOT_ENDPOINT, LatestSlotResponse)
        return response.data.slot

    async def fetch_slot_attestations(self, slot_number: int) -> list[CommitteeAttestation]:
        """
        Fetch the committee attestations included for a slot.

        Args:
            slot_number: Slot to fetch.

        Returns:
            One entry per committee attestation.

        Raises:
            FetchError: If the request fails or the body is malformed.
        """
        path = SLOT_ATTESTATIONS_ENDPOINT.format(slot=slot_number)
        response = await self._get(path, AttestationsResponse)
        return response.data

    async def _get(self, path: str, model: type[M]) -> M:
        """Issue one GET request and validate the JSON body against a model."""
        url = f"{self.base_url.rstrip('/')}{path}"
        params: dict[str, Any] = {}
        if self.api_key:
            params[API_KEY_PARAM] = self.api_key

        logger.debug("GET %s", url)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.get(
                    url,
                    params=params,
                    headers={"Accept": "application/json"},
                )
                response.raise_for_status()
                payload = response.json()

        except httpx.HTTPStatusError as exc:
            raise FetchError(
                url,
                exc.response.text[:200],
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            raise FetchError(url, f"network error: {exc}") from exc
        except ValueError as exc:
            # response.json() raises a ValueError subclass on invalid JSON.
            raise FetchError(url, f"invalid JSON body: {exc}") from exc

        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise FetchError(
                url,
                f"unexpected response shape: {exc.error_count()} validation error(s)",
            ) from exc
