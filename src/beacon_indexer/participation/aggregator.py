"""
Windowed participation rate over stored slot records.

The rate covers the most recent epochs present in the store:

    rate = 1 - missed / (epoch_count * validator_set_size)

where ``missed`` and ``validator_set_size`` are summed over every record
whose epoch lies in the window.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final

from beacon_indexer.containers import EpochAggregate
from beacon_indexer.storage import SlotRecordStore

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_EPOCHS: Final[int] = 5
"""Number of most recent epochs covered by the rate."""


@dataclass(frozen=True, slots=True)
class ParticipationAggregator:
    """Computes the participation rate from the store on every call."""

    store: SlotRecordStore
    """Source of slot records."""

    window_epochs: int = DEFAULT_WINDOW_EPOCHS
    """Epochs counted back from the newest stored epoch."""

    def __post_init__(self) -> None:
        if self.window_epochs < 1:
            raise ValueError(f"window_epochs must be at least 1, got {self.window_epochs}")

    def aggregate(self) -> EpochAggregate:
        """
        Sum the records of the window.

        Raises:
            StorageError: If the store query fails.
        """
        return self.store.get_recent_epochs_aggregate(self.window_epochs)

    def compute_participation_rate(self) -> float:
        """
        Compute the participation rate over the window.

        Returns:
            The rate. Nominally in [0, 1]; lossy bitfield decoding can push it outside.

        Raises:
            InsufficientDataError: If the store is empty or the window sums to zero.
            StorageError: If the store query fails.
        """
        aggregate = self.aggregate()
        logger.debug(
            "Window aggregate: validators=%d missed=%d epochs=%d",
            aggregate.validator_set_size_sum,
            aggregate.missed_attestations_sum,
            aggregate.epoch_count,
        )
        return aggregate.participation_rate()
