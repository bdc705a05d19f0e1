"""
Table definitions for slot record storage.

Defines table names and schema constants for SQLite storage.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class SlotNamespace:
    """
    Namespace for slot record storage.

    One row per ingested slot, keyed by slot number.
    The epoch index serves the windowed aggregate query.
    """

    TABLE_NAME: str = "slots"
    """Table name for slot records."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS slots (
            slot_number INTEGER PRIMARY KEY,
            epoch INTEGER NOT NULL,
            validator_set_size INTEGER NOT NULL,
            missed_attestations INTEGER NOT NULL
        )
    """
    """SQL to create the slots table."""

    CREATE_INDEX: str = """
        CREATE INDEX IF NOT EXISTS idx_slots_epoch ON slots(epoch)
    """
    """SQL to create the epoch index."""


# Singleton instance for convenient access
SLOTS = SlotNamespace()
