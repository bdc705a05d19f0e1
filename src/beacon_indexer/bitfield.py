"""
Aggregation bitfield decoding.

An aggregation bitfield marks which committee members had their vote
included. The explorer delivers it as a hex string, usually ``0x``-prefixed.
Every unset bit is a missed attestation.

Two decoding modes exist:

- NATURAL: read the hex as an unsigned big integer and count the zeros of
  its unpadded binary rendering. Leading zero bits are lost, so misses in
  the high positions are undercounted. This matches the historical output
  of the indexer and is the default.
- FIXED_WIDTH: treat the bitfield as at least ``committee_size`` bits wide,
  so every committee seat is counted.
"""

from __future__ import annotations

import re
from enum import Enum

from beacon_indexer.types import DecodeError

HEX_PREFIX = "0x"
"""Optional prefix on explorer bitfields."""

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]+")


class BitfieldMode(str, Enum):
    """How unset bits are counted."""

    NATURAL = "natural"
    """Count zeros of the unpadded big-integer binary rendering."""

    FIXED_WIDTH = "fixed_width"
    """Count zeros across a width of at least the committee size."""


def parse_bitfield(aggregation_bits: str) -> int:
    """
    Parse a hex bitfield into an unsigned integer.

    Raises:
        DecodeError: If the string is empty or contains non-hex characters.
    """
    digits = aggregation_bits.removeprefix(HEX_PREFIX)

    # int(..., 16) also accepts whitespace, signs and underscores.
    #
    # None of those are valid in a bitfield, so match the digits explicitly.
    if not _HEX_DIGITS.fullmatch(digits):
        raise DecodeError(aggregation_bits, "expected a non-empty string of hex digits")

    return int(digits, 16)


def count_missed_attestations(
    aggregation_bits: str,
    committee_size: int | None = None,
    *,
    mode: BitfieldMode = BitfieldMode.NATURAL,
) -> int:
    """
    Count the unset bits of a hex aggregation bitfield.

    Args:
        aggregation_bits: Hex string, optionally ``0x``-prefixed.
        committee_size: Number of committee members. Required for FIXED_WIDTH.
        mode: Decoding mode.

    Returns:
        Number of missed attestations.

    Raises:
        DecodeError: If the bitfield is malformed, or FIXED_WIDTH is
            requested without a committee size.
    """
    value = parse_bitfield(aggregation_bits)

    if mode is BitfieldMode.NATURAL:
        # bin(0) is "0b0": a zero value still renders one zero bit.
        return bin(value)[2:].count("0")

    if committee_size is None:
        raise DecodeError(aggregation_bits, "fixed-width decoding requires a committee size")

    width = max(committee_size, value.bit_length())
    return width - value.bit_count()
