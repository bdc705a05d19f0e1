"""Tests for the participation service."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from beacon_indexer import metrics
from beacon_indexer.containers import EpochAggregate
from beacon_indexer.participation import (
    ParticipationAggregator,
    ParticipationService,
    ParticipationStatus,
    format_participation_rate,
)
from beacon_indexer.storage import SQLiteSlotRecordStore
from beacon_indexer.types import StorageError
from tests.beacon_indexer.helpers import make_records


class _BrokenStore(SQLiteSlotRecordStore):
    """Store whose aggregate query always fails."""

    def get_recent_epochs_aggregate(self, window_epochs: int) -> EpochAggregate:
        raise StorageError("aggregate", "database is locked")


@pytest.fixture
def store() -> Generator[SQLiteSlotRecordStore, None, None]:
    """Create an in-memory store for testing."""
    s = SQLiteSlotRecordStore(":memory:")
    yield s
    s.close()


def _service(store: SQLiteSlotRecordStore) -> ParticipationService:
    return ParticipationService(ParticipationAggregator(store))


class TestFormatParticipationRate:
    """Tests for the display format."""

    @pytest.mark.parametrize(
        ("rate", "expected"),
        [
            (0.0, "Participation Rate: 0.00%"),
            (0.99, "Participation Rate: 99.00%"),
            (1.0, "Participation Rate: 100.00%"),
            (0.98766, "Participation Rate: 98.77%"),
        ],
    )
    def test_two_decimal_percentage(self, rate: float, expected: str) -> None:
        """Rates render as a percentage with two decimals."""
        assert format_participation_rate(rate) == expected


class TestSnapshot:
    """Tests for the status-carrying view."""

    def test_ok(self, store: SQLiteSlotRecordStore) -> None:
        """A computable rate is reported as ok."""
        for record in make_records(range(5), validator_set_size=100, missed_attestations=5):
            store.put_slot_record(record)

        snapshot = _service(store).snapshot()

        assert snapshot.status is ParticipationStatus.OK
        assert snapshot.rate == pytest.approx(0.99)
        assert snapshot.percentage == "99.00"
        assert snapshot.window_epochs == 5
        assert metrics.participation_rate._value.get() == pytest.approx(0.99)

    def test_no_data(self, store: SQLiteSlotRecordStore) -> None:
        """An empty store is reported as no_data with a zero rate."""
        snapshot = _service(store).snapshot()

        assert snapshot.status is ParticipationStatus.NO_DATA
        assert snapshot.rate == 0.0

    def test_storage_error(self) -> None:
        """A failing store is reported as error with a zero rate."""
        store = _BrokenStore(":memory:")
        try:
            snapshot = _service(store).snapshot()
        finally:
            store.close()

        assert snapshot.status is ParticipationStatus.ERROR
        assert snapshot.rate == 0.0

    def test_gauge_resets_when_rate_unavailable(self, store: SQLiteSlotRecordStore) -> None:
        """The exported gauge matches the served rate after data disappears."""
        metrics.participation_rate.set(0.99)

        _service(store).snapshot()

        assert metrics.participation_rate._value.get() == 0.0

    def test_gauge_resets_on_error(self) -> None:
        """A failing store does not leave the last good rate exported."""
        metrics.participation_rate.set(0.99)
        store = _BrokenStore(":memory:")
        try:
            _service(store).snapshot()
        finally:
            store.close()

        assert metrics.participation_rate._value.get() == 0.0


class TestRender:
    """Tests for the text rendering served over HTTP."""

    def test_empty_store_renders_zero(self, store: SQLiteSlotRecordStore) -> None:
        """Nothing stored yet renders as 0.00%."""
        assert _service(store).render() == "Participation Rate: 0.00%"

    def test_reference_rate(self, store: SQLiteSlotRecordStore) -> None:
        """A 0.99 window renders as 99.00%."""
        for record in make_records(range(5), validator_set_size=100, missed_attestations=5):
            store.put_slot_record(record)

        assert _service(store).render() == "Participation Rate: 99.00%"

    def test_error_renders_zero(self) -> None:
        """Failures are never surfaced to the caller."""
        store = _BrokenStore(":memory:")
        try:
            assert _service(store).render() == "Participation Rate: 0.00%"
        finally:
            store.close()
