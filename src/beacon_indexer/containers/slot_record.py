"""Aggregated statistics for a single ingested slot."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from pydantic import Field

from beacon_indexer.types import StrictBaseModel

from .attestation import CommitteeAttestation


class SlotRecord(StrictBaseModel):
    """
    Participation statistics for one chain slot.

    Records are written once by the ingestion pipeline and never updated.

    The number of missed attestations should not exceed the validator set
    size. This is not enforced here: a lossy bitfield decoding can break it,
    and the record keeps what was decoded.
    """

    slot_number: int = Field(ge=0)
    """Slot number. Unique key in storage."""

    epoch: int = Field(ge=0)
    """Highest target epoch among the slot's attestations."""

    validator_set_size: int = Field(ge=0)
    """Sum of committee sizes across the slot's attestations."""

    missed_attestations: int = Field(ge=0)
    """Sum of unset bits across the slot's aggregation bitfields."""

    @classmethod
    def from_attestations(
        cls,
        slot_number: int,
        attestations: Iterable[CommitteeAttestation],
        count_missed: Callable[[CommitteeAttestation], int],
    ) -> SlotRecord:
        """
        Aggregate a slot's committee attestations into a record.

        Args:
            slot_number: The slot the attestations belong to.
            attestations: Committee attestations fetched for the slot.
            count_missed: Returns the missed-vote count of one attestation.
                Decoding errors propagate to the caller.

        Returns:
            The aggregated record. A slot without attestations yields zeros.
        """
        epoch = 0
        validator_set_size = 0
        missed_attestations = 0

        for attestation in attestations:
            validator_set_size += attestation.committee_size
            missed_attestations += count_missed(attestation)
            epoch = max(epoch, attestation.target_epoch)

        return cls(
            slot_number=slot_number,
            epoch=epoch,
            validator_set_size=validator_set_size,
            missed_attestations=missed_attestations,
        )
