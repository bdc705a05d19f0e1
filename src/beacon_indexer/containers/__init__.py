"""
Data containers for the indexer.

- Explorer payloads: attestation committees and the latest-slot envelope
- SlotRecord: one persisted, aggregated chain slot
- EpochAggregate: windowed sums used to compute the participation rate
"""

from .attestation import (
    AttestationsResponse,
    CommitteeAttestation,
    LatestSlot,
    LatestSlotResponse,
)
from .epoch import EpochAggregate
from .slot_record import SlotRecord

__all__ = [
    "AttestationsResponse",
    "CommitteeAttestation",
    "EpochAggregate",
    "LatestSlot",
    "LatestSlotResponse",
    "SlotRecord",
]
