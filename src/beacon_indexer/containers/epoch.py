"""Windowed epoch sums used for the participation rate."""

from __future__ import annotations

from dataclasses import dataclass

from beacon_indexer.types import InsufficientDataError


@dataclass(frozen=True, slots=True)
class EpochAggregate:
    """
    Sums over the slot records of the most recent epochs.

    Recomputed on every request; never persisted.
    """

    validator_set_size_sum: int = 0
    """Total committee seats across the window."""

    missed_attestations_sum: int = 0
    """Total unset bitfield bits across the window."""

    epoch_count: int = 0
    """Number of distinct epochs represented in the window."""

    @property
    def is_empty(self) -> bool:
        """Whether the window contains any records."""
        return self.epoch_count == 0

    def participation_rate(self) -> float:
        """
        Fraction of expected votes observed in the window.

        Computed as ``1 - missed / (epoch_count * validator_set_size)``.

        The result is not clamped. Lossy bitfield decoding can push it
        outside [0, 1].

        Raises:
            InsufficientDataError: If the denominator is zero.
        """
        denominator = self.epoch_count * self.validator_set_size_sum
        if denominator == 0:
            raise InsufficientDataError(
                f"Cannot compute participation rate: epoch_count={self.epoch_count}, "
                f"validator_set_size_sum={self.validator_set_size_sum}"
            )
        return 1.0 - self.missed_attestations_sum / denominator
