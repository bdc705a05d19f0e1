"""
Metric registry using prometheus_client.

Provides pre-defined metrics for the indexer.
Exposes metrics in Prometheus text format via the /metrics endpoint.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Dedicated registry, free of the default Python process metrics.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Ingestion
# -----------------------------------------------------------------------------

slots_ingested = Counter(
    "indexer_slots_ingested_total",
    "Slot records written to storage",
    registry=REGISTRY,
)

slot_failures = Counter(
    "indexer_slot_failures_total",
    "Slot fetch or decode failures",
    registry=REGISTRY,
)

slots_quarantined = Counter(
    "indexer_slots_quarantined_total",
    "Slots abandoned after exhausting their retry attempts",
    registry=REGISTRY,
)

cycles_skipped = Counter(
    "indexer_cycles_skipped_total",
    "Ingestion ticks skipped because a cycle was still running",
    registry=REGISTRY,
)

latest_ingested_slot = Gauge(
    "indexer_latest_ingested_slot",
    "Highest slot number written to storage",
    registry=REGISTRY,
)

cycle_duration = Histogram(
    "indexer_cycle_seconds",
    "Ingestion cycle duration",
    buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0),
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Participation
# -----------------------------------------------------------------------------

participation_rate = Gauge(
    "indexer_participation_rate",
    "Most recently served network participation rate",
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus text format output as bytes.
    """
    return generate_latest(REGISTRY)
