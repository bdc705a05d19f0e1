"""
Ingestion configuration constants.

Operational parameters for the catch-up loop: cadence, pacing, and retry limits.
"""

from __future__ import annotations

from typing import Final

DEFAULT_POLL_INTERVAL: Final[float] = 10.0
"""Seconds between ingestion ticks. Slightly under the 12 second slot time."""

DEFAULT_REQUEST_DELAY: Final[float] = 0.1
"""Pause in seconds between slot requests, to stay under explorer rate limits."""

DEFAULT_MAX_SLOT_ATTEMPTS: Final[int] = 5
"""Failed attempts after which a slot is quarantined."""
