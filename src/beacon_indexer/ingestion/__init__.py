"""
Ingestion module.

Polls the explorer for new slots, decodes their attestations, and stores
one record per slot.
"""

from .config import DEFAULT_MAX_SLOT_ATTEMPTS, DEFAULT_POLL_INTERVAL, DEFAULT_REQUEST_DELAY
from .pipeline import CycleReport, IngestionPipeline, SlotSource
from .retry import SlotRetryTracker
from .scheduler import IngestionScheduler

__all__ = [
    "DEFAULT_MAX_SLOT_ATTEMPTS",
    "DEFAULT_POLL_INTERVAL",
    "DEFAULT_REQUEST_DELAY",
    "CycleReport",
    "IngestionPipeline",
    "IngestionScheduler",
    "SlotRetryTracker",
    "SlotSource",
]
