"""Bounded retry bookkeeping for slots that failed to ingest."""

from __future__ import annotations

from dataclasses import dataclass, field

from .config import DEFAULT_MAX_SLOT_ATTEMPTS


@dataclass(slots=True)
class SlotRetryTracker:
    """
    Remembers failed slots until they succeed or run out of attempts.

    Without this, a slot that fails in the middle of a catch-up range is
    lost as soon as a later slot is stored, and a slot that always fails
    at the tip is re-fetched every cycle forever.

    State lives in memory. A restart forgets pending and quarantined slots.
    """

    max_attempts: int = DEFAULT_MAX_SLOT_ATTEMPTS
    """Failures allowed before a slot is quarantined."""

    _attempts: dict[int, int] = field(default_factory=dict, repr=False)
    """Failure count per pending slot."""

    _quarantined: set[int] = field(default_factory=set, repr=False)
    """Slots that will not be attempted again."""

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def record_failure(self, slot_number: int) -> bool:
        """
        Count a failed attempt.

        Returns:
            True if this failure quarantined the slot.
        """
        attempts = self._attempts.get(slot_number, 0) + 1
        if attempts >= self.max_attempts:
            self._attempts.pop(slot_number, None)
            self._quarantined.add(slot_number)
            return True

        self._attempts[slot_number] = attempts
        return False

    def record_success(self, slot_number: int) -> None:
        """Forget a slot once it has been stored."""
        self._attempts.pop(slot_number, None)

    def attempts(self, slot_number: int) -> int:
        """Number of failures recorded for a pending slot."""
        return self._attempts.get(slot_number, 0)

    def pending(self, up_to: int) -> list[int]:
        """Pending slots not above ``up_to``, in increasing order."""
        return sorted(slot for slot in self._attempts if slot <= up_to)

    def is_quarantined(self, slot_number: int) -> bool:
        """Check if a slot has been abandoned."""
        return slot_number in self._quarantined

    @property
    def quarantined(self) -> frozenset[int]:
        """All abandoned slots."""
        return frozenset(self._quarantined)
