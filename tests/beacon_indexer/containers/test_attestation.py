"""Tests for explorer payload models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from beacon_indexer.containers import AttestationsResponse, LatestSlotResponse


class TestAttestationsResponse:
    """Tests for the slot attestations envelope."""

    def test_parses_explorer_payload(self) -> None:
        """Only the needed fields are kept; the rest is ignored."""
        payload = {
            "status": "OK",
            "data": [
                {
                    "aggregationbits": "0xff7f",
                    "validators": [10, 11, 12],
                    "target_epoch": 250000,
                    "slot": 8000000,
                    "signature": "0xabc",
                    "beaconblockroot": "0x00",
                }
            ],
        }

        response = AttestationsResponse.model_validate(payload)

        assert len(response.data) == 1
        attestation = response.data[0]
        assert attestation.aggregationbits == "0xff7f"
        assert attestation.committee_size == 3
        assert attestation.target_epoch == 250000

    def test_empty_data(self) -> None:
        """A slot without attestations has an empty list."""
        assert AttestationsResponse.model_validate({"data": []}).data == []

    def test_missing_field_is_rejected(self) -> None:
        """Every declared field must be present."""
        with pytest.raises(ValidationError):
            AttestationsResponse.model_validate(
                {"data": [{"aggregationbits": "0x1", "validators": []}]}
            )


class TestLatestSlotResponse:
    """Tests for the latest slot envelope."""

    def test_parses_slot(self) -> None:
        """The slot number is read from data.slot."""
        response = LatestSlotResponse.model_validate(
            {"status": "OK", "data": {"slot": 9000000, "epoch": 281250}}
        )

        assert response.data.slot == 9000000

    def test_negative_slot_is_rejected(self) -> None:
        """Slot numbers are non-negative."""
        with pytest.raises(ValidationError):
            LatestSlotResponse.model_validate({"data": {"slot": -1}})
