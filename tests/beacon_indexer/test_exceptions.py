"""Tests for the indexer exception hierarchy."""

from __future__ import annotations

from beacon_indexer.types import (
    DecodeError,
    FetchError,
    IndexerError,
    InsufficientDataError,
    StorageError,
)


class TestExceptionHierarchy:
    """All indexer errors share one base."""

    def test_subclasses(self) -> None:
        """Callers can catch IndexerError for any indexer failure."""
        for cls in (DecodeError, FetchError, StorageError, InsufficientDataError):
            assert issubclass(cls, IndexerError)

    def test_repr(self) -> None:
        """The repr names the class and message."""
        assert repr(IndexerError("boom")) == "IndexerError('boom')"


class TestMessages:
    """Tests for error messages."""

    def test_fetch_error_with_status(self) -> None:
        """Status codes appear in the message."""
        err = FetchError("https://x/slot/latest", "rate limited", status_code=429)

        assert err.message == "Request to https://x/slot/latest failed with status 429: rate limited"

    def test_fetch_error_without_status(self) -> None:
        """Transport failures have no status."""
        err = FetchError("https://x/slot/latest", "timed out")

        assert err.status_code is None
        assert err.message == "Request to https://x/slot/latest failed: timed out"

    def test_decode_error_truncates_long_values(self) -> None:
        """Huge bitfields are shortened in the message but kept whole."""
        value = "0x" + "g" * 200
        err = DecodeError(value, "bad digits")

        assert err.value == value
        assert "..." in err.message
        assert len(err.message) < 120

    def test_storage_error(self) -> None:
        """The failed operation is recorded."""
        err = StorageError("insert", "UNIQUE constraint failed")

        assert err.operation == "insert"
        assert str(err) == "Storage insert failed: UNIQUE constraint failed"
