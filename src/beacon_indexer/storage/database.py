"""
Abstract interface for slot record storage.

Defines the Protocol that all store implementations must follow.
Uses structural subtyping for flexibility.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from beacon_indexer.containers import EpochAggregate, SlotRecord


class SlotRecordStore(Protocol):
    """
    Protocol for slot record storage.

    Implementations own their concurrency control. The ingestion pipeline
    writes and the participation service reads through the same store
    without any locking of their own.

    Every method may raise StorageError.
    """

    # -------------------------------------------------------------------------
    # Write Path
    # -------------------------------------------------------------------------

    def put_slot_record(self, record: SlotRecord) -> None:
        """
        Insert a slot record.

        Records are append-only. Inserting a slot that already exists fails.

        Args:
            record: The record to persist.
        """
        ...

    # -------------------------------------------------------------------------
    # Read Path
    # -------------------------------------------------------------------------

    def get_latest_slot_number(self) -> int:
        """
        Return the highest stored slot number.

        Returns:
            Latest slot number, or 0 if the store is empty.
        """
        ...

    def get_slot_record(self, slot_number: int) -> SlotRecord | None:
        """
        Retrieve the record for a slot.

        Returns:
            The record if stored, None otherwise.
        """
        ...

    def has_slot(self, slot_number: int) -> bool:
        """Check if a slot has been stored."""
        ...

    def count_slot_records(self) -> int:
        """Return the number of stored records."""
        ...

    def get_recent_epochs_aggregate(self, window_epochs: int) -> EpochAggregate:
        """
        Sum the records of the most recent epochs.

        Selects records with ``epoch > max(epoch) - window_epochs``.

        Args:
            window_epochs: Number of epochs counting back from the newest.

        Returns:
            Sums over the window. All zeros when the store is empty.
        """
        ...

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close connections and release resources."""
        ...
