"""
Explorer API payload models.

The explorer wraps every response in an envelope with a ``data`` field.
Only the fields needed to aggregate a slot are declared; everything else
in the payload is ignored.
"""

from __future__ import annotations

from pydantic import Field

from beacon_indexer.types import ExplorerModel


class CommitteeAttestation(ExplorerModel):
    """
    One committee's aggregated attestation for a slot.

    Each committee votes once per slot. The aggregation bitfield carries one
    bit per committee member: set if that validator's vote was included.
    """

    aggregationbits: str
    """Hex-encoded aggregation bitfield, usually ``0x``-prefixed."""

    validators: list[int]
    """Indices of the validators assigned to the committee."""

    target_epoch: int = Field(ge=0)
    """Epoch of the checkpoint the committee voted for."""

    @property
    def committee_size(self) -> int:
        """Number of validators expected to vote."""
        return len(self.validators)


class AttestationsResponse(ExplorerModel):
    """Envelope for ``GET /slot/{slot}/attestations``."""

    data: list[CommitteeAttestation]


class LatestSlot(ExplorerModel):
    """Slot summary returned by ``GET /slot/latest``."""

    slot: int = Field(ge=0)


class LatestSlotResponse(ExplorerModel):
    """Envelope for ``GET /slot/latest``."""

    data: LatestSlot
