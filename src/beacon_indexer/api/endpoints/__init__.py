"""API endpoint handlers."""

from . import health, metrics, participation

__all__ = [
    "health",
    "metrics",
    "participation",
]
