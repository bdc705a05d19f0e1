"""
Participation module.

Aggregates stored slot records over the most recent epochs into a network
participation rate, and formats it for display.
"""

from .aggregator import DEFAULT_WINDOW_EPOCHS, ParticipationAggregator
from .service import (
    ParticipationService,
    ParticipationSnapshot,
    ParticipationStatus,
    format_participation_rate,
)

__all__ = [
    "DEFAULT_WINDOW_EPOCHS",
    "ParticipationAggregator",
    "ParticipationService",
    "ParticipationSnapshot",
    "ParticipationStatus",
    "format_participation_rate",
]
