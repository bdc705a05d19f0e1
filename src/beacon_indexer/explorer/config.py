"""
Explorer client constants.

Endpoint paths and request defaults for the explorer API.
"""

from __future__ import annotations

from typing import Final

DEFAULT_EXPLORER_URL: Final[str] = "https://beaconcha.in/api/v1"
"""Base URL of the public mainnet explorer API."""

DEFAULT_TIMEOUT: Final[float] = 30.0
"""HTTP request timeout in seconds."""

LATEST_SLOT_ENDPOINT: Final[str] = "/slot/latest"
"""Path returning the most recent slot."""

SLOT_ATTESTATIONS_ENDPOINT: Final[str] = "/slot/{slot}/attestations"
"""Path returning committee attestations for a slot."""

API_KEY_PARAM: Final[str] = "apikey"
"""Query parameter carrying the optional API key."""
