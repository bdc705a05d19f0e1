"""Exception hierarchy for the indexer."""

from __future__ import annotations


class IndexerError(Exception):
    """
    Base exception for all indexer errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class DecodeError(IndexerError):
    """
    Raised when an aggregation bitfield cannot be decoded.

    Attributes:
        value: The offending bitfield string (truncated for display).
        detail: Description of what went wrong.
    """

    def __init__(self, value: str, detail: str) -> None:
        self.value = value
        self.detail = detail

        value_repr = repr(value)
        if len(value_repr) > 50:
            value_repr = value_repr[:47] + "..."

        super().__init__(f"Failed to decode bitfield {value_repr}: {detail}")


class FetchError(IndexerError):
    """
    Raised when a request to the explorer API fails.

    Covers transport errors, non-success status codes, and bodies that
    do not match the expected shape.

    Attributes:
        url: The requested URL.
        status_code: HTTP status of the response, if one was received.
    """

    def __init__(
        self,
        url: str,
        detail: str,
        *,
        status_code: int | None = None,
    ) -> None:
        self.url = url
        self.detail = detail
        self.status_code = status_code

        if status_code is not None:
            msg = f"Request to {url} failed with status {status_code}: {detail}"
        else:
            msg = f"Request to {url} failed: {detail}"

        super().__init__(msg)


class StorageError(IndexerError):
    """
    Raised when the slot record store cannot complete an operation.

    Attributes:
        operation: The store operation that failed (e.g., "insert", "aggregate").
    """

    def __init__(self, operation: str, detail: str) -> None:
        self.operation = operation
        self.detail = detail
        super().__init__(f"Storage {operation} failed: {detail}")


class InsufficientDataError(IndexerError):
    """
    Raised when no participation rate can be computed.

    This happens when the store is empty or the window sums to zero.
    Callers substitute a default rate.
    """
