"""
Metrics module for observability.

Provides counters, gauges, and histograms for tracking ingestion and the
served participation rate. Exposes metrics in Prometheus text format.
"""

from .registry import (
    REGISTRY,
    cycle_duration,
    cycles_skipped,
    generate_metrics,
    latest_ingested_slot,
    participation_rate,
    slot_failures,
    slots_ingested,
    slots_quarantined,
)

__all__ = [
    "REGISTRY",
    "cycle_duration",
    "cycles_skipped",
    "generate_metrics",
    "latest_ingested_slot",
    "participation_rate",
    "slot_failures",
    "slots_ingested",
    "slots_quarantined",
]
