"""Test helpers for beacon_indexer unit tests."""

from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import TypeVar

from .builders import (
    full_bitfield,
    make_attestation,
    make_record,
    make_records,
)
from .mocks import MockSlotSource

_T = TypeVar("_T")


def run_async(coro: Coroutine[object, object, _T]) -> _T:
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


__all__ = [
    # Builders
    "full_bitfield",
    "make_attestation",
    "make_record",
    "make_records",
    # Mocks
    "MockSlotSource",
    # Async utilities
    "run_async",
]
