"""
Catch-up ingestion of chain slots.

The Catch-up Problem
--------------------
The chain produces a slot every 12 seconds. The indexer polls the explorer
on a fixed cadence and must store every slot it has not seen yet, in order,
without hammering the explorer's rate limits.

How a Cycle Works
-----------------
1. Read the latest stored slot (0 for an empty store)
2. Ask the explorer for the latest chain slot
3. If the chain is not ahead and nothing awaits retry, the cycle is idle
4. Otherwise walk the slots from the last stored one up to the chain tip
5. For each slot: fetch attestations, decode bitfields, store one record
6. Pause between slot requests

An empty store starts at the chain tip. History before the first observed
slot is never backfilled.

Failure Handling
----------------
- Failing to learn the chain tip aborts the cycle: no range can be planned.
- A slot that fails to fetch or decode is logged and skipped. It is retried
  on later cycles until it succeeds or runs out of attempts.
- A storage failure aborts the cycle.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Protocol

from beacon_indexer import metrics
from beacon_indexer.bitfield import BitfieldMode, count_missed_attestations
from beacon_indexer.containers import CommitteeAttestation, SlotRecord
from beacon_indexer.storage import SlotRecordStore
from beacon_indexer.types import DecodeError, FetchError

from .config import DEFAULT_MAX_SLOT_ATTEMPTS, DEFAULT_REQUEST_DELAY
from .retry import SlotRetryTracker

logger = logging.getLogger(__name__)


class SlotSource(Protocol):
    """Source of chain slot data. Satisfied by ChainClient."""

    async def fetch_latest_slot_number(self) -> int:
        """Return the number of the most recent chain slot."""
        ...

    async def fetch_slot_attestations(self, slot_number: int) -> list[CommitteeAttestation]:
        """Return the committee attestations of a slot."""
        ...


@dataclass(slots=True)
class CycleReport:
    """Outcome of one ingestion cycle."""

    last_stored_slot: int
    """Latest stored slot when the cycle began."""

    latest_chain_slot: int
    """Chain tip reported by the explorer."""

    stored: list[int] = field(default_factory=list)
    """Slots written this cycle, in order."""

    failed: list[int] = field(default_factory=list)
    """Slots that failed and remain eligible for retry."""

    quarantined: list[int] = field(default_factory=list)
    """Slots that failed for the last time this cycle."""

    @property
    def idle(self) -> bool:
        """Whether the cycle had nothing to do."""
        return not (self.stored or self.failed or self.quarantined)


@dataclass(slots=True)
class IngestionPipeline:
    """
    Fetches, decodes and stores every slot between the store and the chain tip.

    The pipeline is the only writer of slot records.
    It must not run concurrently with itself; the scheduler guarantees that.
    """

    client: SlotSource
    """Explorer client."""

    store: SlotRecordStore
    """Destination of slot records."""

    request_delay: float = DEFAULT_REQUEST_DELAY
    """Pause in seconds between slot requests."""

    bitfield_mode: BitfieldMode = BitfieldMode.NATURAL
    """How missed attestations are counted."""

    retries: SlotRetryTracker = field(
        default_factory=lambda: SlotRetryTracker(DEFAULT_MAX_SLOT_ATTEMPTS)
    )
    """Failed slots awaiting another attempt."""

    async def run_cycle(self) -> CycleReport:
        """
        Run one catch-up cycle.

        Returns:
            What was stored, skipped and abandoned.

        Raises:
            FetchError: If the chain tip cannot be fetched.
            StorageError: If the store cannot be read or written.
        """
        last_stored = self.store.get_latest_slot_number()
        latest = await self.client.fetch_latest_slot_number()

        report = CycleReport(last_stored_slot=last_stored, latest_chain_slot=latest)

        slots = self.plan(last_stored, latest)
        if not slots:
            logger.debug("No new slots (stored=%d, chain=%d)", last_stored, latest)
            return report

        logger.info(
            "Ingesting %d slot(s) from %d to %d (stored=%d)",
            len(slots),
            slots[0],
            slots[-1],
            last_stored,
        )

        for index, slot_number in enumerate(slots):
            if index > 0:
                await asyncio.sleep(self.request_delay)
            await self._ingest_slot(slot_number, report)

        if report.stored:
            metrics.latest_ingested_slot.set(max(last_stored, *report.stored))

        return report

    def plan(self, last_stored: int, latest: int) -> list[int]:
        """
        Choose the slots to process this cycle.

        New slots run from the one after the last stored slot up to the tip.
        An empty store starts at the tip itself. Slots awaiting retry are
        merged in. Quarantined slots are left out.

        Returns:
            Slot numbers in increasing order.
        """
        slots: set[int] = set()

        if latest > last_stored:
            start = latest if last_stored == 0 else last_stored + 1
            slots.update(range(start, latest + 1))

        for slot_number in self.retries.pending(latest):
            if self.store.has_slot(slot_number):
                self.retries.record_success(slot_number)
            else:
                slots.add(slot_number)

        return sorted(slot for slot in slots if not self.retries.is_quarantined(slot))

    async def _ingest_slot(self, slot_number: int, report: CycleReport) -> None:
        """Fetch, decode and store one slot. Fetch and decode failures are contained."""
        try:
            attestations = await self.client.fetch_slot_attestations(slot_number)
            record = SlotRecord.from_attestations(
                slot_number,
                attestations,
                self._count_missed,
            )
        except (FetchError, DecodeError) as e:
            metrics.slot_failures.inc()
            if self.retries.record_failure(slot_number):
                metrics.slots_quarantined.inc()
                report.quarantined.append(slot_number)
                logger.warning("Quarantining slot %d after repeated failures: %s", slot_number, e)
            else:
                report.failed.append(slot_number)
                logger.warning(
                    "Skipping slot %d (attempt %d): %s",
                    slot_number,
                    self.retries.attempts(slot_number),
                    e,
                )
            return

        self.store.put_slot_record(record)
        self.retries.record_success(slot_number)
        report.stored.append(slot_number)

        metrics.slots_ingested.inc()

        logger.debug(
            "Stored slot %d: epoch=%d validators=%d missed=%d",
            record.slot_number,
            record.epoch,
            record.validator_set_size,
            record.missed_attestations,
        )

    def _count_missed(self, attestation: CommitteeAttestation) -> int:
        """Decode one committee's bitfield with the configured mode."""
        return count_missed_attestations(
            attestation.aggregationbits,
            attestation.committee_size,
            mode=self.bitfield_mode,
        )
