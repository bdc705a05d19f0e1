"""
Storage module for persistent slot records.

Provides the slot record store interface and its SQLite implementation.
"""

from .database import SlotRecordStore
from .namespaces import SLOTS, SlotNamespace
from .sqlite import SQLiteSlotRecordStore

__all__ = [
    "SLOTS",
    "SQLiteSlotRecordStore",
    "SlotNamespace",
    "SlotRecordStore",
]
