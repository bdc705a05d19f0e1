"""
Participation rate as served to HTTP callers.

Errors stop here. A caller always gets a rate: the computed one, or zero
when nothing can be computed. The snapshot view additionally reports why
the rate is zero, so "no data yet" and "storage failure" can be told apart.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from beacon_indexer import metrics
from beacon_indexer.types import IndexerError, InsufficientDataError

from .aggregator import ParticipationAggregator

logger = logging.getLogger(__name__)

DEFAULT_RATE = 0.0
"""Rate reported when none can be computed."""


def format_participation_rate(rate: float) -> str:
    """Render a rate as ``"Participation Rate: 99.00%"``."""
    return f"Participation Rate: {rate * 100:.2f}%"


class ParticipationStatus(str, Enum):
    """Why a snapshot carries the rate it does."""

    OK = "ok"
    """The rate was computed from stored records."""

    NO_DATA = "no_data"
    """Not enough records to compute a rate."""

    ERROR = "error"
    """The computation failed."""


@dataclass(frozen=True, slots=True)
class ParticipationSnapshot:
    """A rate together with how it was obtained."""

    status: ParticipationStatus
    """Outcome of the computation."""

    rate: float
    """The computed rate, or the default when status is not OK."""

    window_epochs: int
    """Epochs covered by the rate."""

    @property
    def percentage(self) -> str:
        """Rate as a two-decimal percentage string."""
        return f"{self.rate * 100:.2f}"


@dataclass(frozen=True, slots=True)
class ParticipationService:
    """Read-through facade over the aggregator that never raises."""

    aggregator: ParticipationAggregator
    """Rate computation."""

    def snapshot(self) -> ParticipationSnapshot:
        """Compute the rate, recording the outcome instead of raising."""
        window = self.aggregator.window_epochs
        try:
            rate = self.aggregator.compute_participation_rate()
        except InsufficientDataError as e:
            logger.info("Participation rate unavailable: %s", e)
            metrics.participation_rate.set(DEFAULT_RATE)
            return ParticipationSnapshot(ParticipationStatus.NO_DATA, DEFAULT_RATE, window)
        except IndexerError as e:
            logger.error("Error calculating participation rate: %s", e)
            metrics.participation_rate.set(DEFAULT_RATE)
            return ParticipationSnapshot(ParticipationStatus.ERROR, DEFAULT_RATE, window)

        metrics.participation_rate.set(rate)
        return ParticipationSnapshot(ParticipationStatus.OK, rate, window)

    def participation_rate(self) -> float:
        """The current rate, or zero if it cannot be computed."""
        return self.snapshot().rate

    def render(self) -> str:
        """The current rate formatted for display."""
        return format_participation_rate(self.participation_rate())
