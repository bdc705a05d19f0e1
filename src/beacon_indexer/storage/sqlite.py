"""
SQLite implementation of slot record storage.

One row per ingested slot in a single table. Records are append-only:
the ingestion pipeline inserts each slot once and never rewrites it.

Concurrency
-----------
The ingestion cycle writes while HTTP requests read. A lock around each
connection serializes statements. Every write is a single auto-committed
statement, so a reader never waits behind more than one of them.

File-backed databases run in WAL mode with a second, read-only connection.
Readers then see the last committed state without contending with the
writer. In-memory databases cannot be shared across connections and use a
single connection for both paths.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from beacon_indexer.containers import EpochAggregate, SlotRecord
from beacon_indexer.types import StorageError

from .namespaces import SLOTS

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"
"""Special path selecting an in-memory database."""


class SQLiteSlotRecordStore:
    """
    SQLite implementation of the SlotRecordStore protocol.

    Safe to share across threads and tasks.
    All sqlite3 errors surface as StorageError.
    """

    def __init__(self, path: Path | str) -> None:
        """
        Open the database and create the schema if needed.

        Args:
            path: Path to the SQLite file, or ":memory:" for an in-memory database.

        Raises:
            StorageError: If the database cannot be opened.
        """
        self._in_memory = str(path) == MEMORY_PATH
        self._path = path if self._in_memory else Path(path)

        self._write_lock = threading.Lock()

        with self._guard("open"):
            self._conn = self._connect(str(self._path))
            self._init_schema()

            if self._in_memory:
                self._read_conn = self._conn
                self._read_lock = self._write_lock
            else:
                # WAL lets the read connection see committed data while a write is in flight.
                self._conn.execute("PRAGMA journal_mode=WAL")
                # as_uri percent-encodes "#", "?" and "%", which SQLite would
                # otherwise read as URI delimiters.
                self._read_conn = self._connect(
                    f"{Path(self._path).absolute().as_uri()}?mode=ro",
                    uri=True,
                )
                self._read_lock = threading.Lock()

        logger.debug("Opened slot record store at %s", self._path)

    @staticmethod
    def _connect(database: str, *, uri: bool = False) -> sqlite3.Connection:
        """Open a connection usable from any thread with dict-like rows."""
        conn = sqlite3.connect(database, check_same_thread=False, uri=uri)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Create tables if they don't exist."""
        cursor = self._conn.cursor()
        cursor.execute(SLOTS.CREATE_TABLE)
        cursor.execute(SLOTS.CREATE_INDEX)
        self._conn.commit()

    @contextmanager
    def _guard(self, operation: str) -> Iterator[None]:
        """Translate sqlite3 errors into StorageError."""
        try:
            yield
        except sqlite3.Error as exc:
            raise StorageError(operation, str(exc)) from exc

    @contextmanager
    def _reading(self, operation: str) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor on the read connection under its lock."""
        with self._guard(operation), self._read_lock:
            yield self._read_conn.cursor()

    # -------------------------------------------------------------------------
    # Write Path
    # -------------------------------------------------------------------------

    def put_slot_record(self, record: SlotRecord) -> None:
        """Insert a slot record."""
        with self._guard("insert"), self._write_lock:
            # Plain INSERT: a duplicate slot is a pipeline bug, not an update.
            self._conn.execute(
                f"""
                INSERT INTO {SLOTS.TABLE_NAME}
                    (slot_number, epoch, validator_set_size, missed_attestations)
                VALUES (?, ?, ?, ?)
                """,
                (
                    record.slot_number,
                    record.epoch,
                    record.validator_set_size,
                    record.missed_attestations,
                ),
            )
            self._conn.commit()

    # -------------------------------------------------------------------------
    # Read Path
    # -------------------------------------------------------------------------

    def get_latest_slot_number(self) -> int:
        """Return the highest stored slot number, or 0 if empty."""
        with self._reading("latest slot") as cursor:
            cursor.execute(f"SELECT MAX(slot_number) AS slot_number FROM {SLOTS.TABLE_NAME}")
            row = cursor.fetchone()

        if row is None or row["slot_number"] is None:
            return 0
        return int(row["slot_number"])

    def get_slot_record(self, slot_number: int) -> SlotRecord | None:
        """Retrieve the record for a slot."""
        with self._reading("get slot") as cursor:
            cursor.execute(
                f"""
                SELECT slot_number, epoch, validator_set_size, missed_attestations
                FROM {SLOTS.TABLE_NAME}
                WHERE slot_number = ?
                """,
                (slot_number,),
            )
            row = cursor.fetchone()

        if row is None:
            return None
        return SlotRecord(
            slot_number=row["slot_number"],
            epoch=row["epoch"],
            validator_set_size=row["validator_set_size"],
            missed_attestations=row["missed_attestations"],
        )

    def has_slot(self, slot_number: int) -> bool:
        """Check if a slot has been stored."""
        with self._reading("has slot") as cursor:
            cursor.execute(
                f"SELECT 1 FROM {SLOTS.TABLE_NAME} WHERE slot_number = ?",
                (slot_number,),
            )
            return cursor.fetchone() is not None

    def count_slot_records(self) -> int:
        """Return the number of stored records."""
        with self._reading("count") as cursor:
            cursor.execute(f"SELECT COUNT(*) AS n FROM {SLOTS.TABLE_NAME}")
            return int(cursor.fetchone()["n"])

    def get_recent_epochs_aggregate(self, window_epochs: int) -> EpochAggregate:
        """Sum the records whose epoch lies within the most recent window."""
        with self._reading("aggregate") as cursor:
            # On an empty table the subquery is NULL, no row matches,
            # and the sums collapse to NULL. COALESCE maps them to zero.
            cursor.execute(
                f"""
                SELECT
                    COALESCE(SUM(validator_set_size), 0) AS validator_set_size_sum,
                    COALESCE(SUM(missed_attestations), 0) AS missed_attestations_sum,
                    COUNT(DISTINCT epoch) AS epoch_count
                FROM {SLOTS.TABLE_NAME}
                WHERE epoch > (SELECT MAX(epoch) - ? FROM {SLOTS.TABLE_NAME})
                """,
                (window_epochs,),
            )
            row = cursor.fetchone()

        return EpochAggregate(
            validator_set_size_sum=int(row["validator_set_size_sum"]),
            missed_attestations_sum=int(row["missed_attestations_sum"]),
            epoch_count=int(row["epoch_count"]),
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close database connections."""
        with self._guard("close"):
            if self._read_conn is not self._conn:
                self._read_conn.close()
            self._conn.close()

    def __enter__(self) -> SQLiteSlotRecordStore:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
