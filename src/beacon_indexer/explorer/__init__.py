"""
Explorer API client.

Fetches the latest slot number and per-slot committee attestations from a
beaconcha.in compatible explorer.
"""

from .client import ChainClient
from .config import DEFAULT_EXPLORER_URL, DEFAULT_TIMEOUT

__all__ = [
    "DEFAULT_EXPLORER_URL",
    "DEFAULT_TIMEOUT",
    "ChainClient",
]
