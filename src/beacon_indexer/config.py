"""
Indexer configuration.

Settings are read from an optional YAML file. Keys match the field names:

    explorer_url: https://beaconcha.in/api/v1
    database_path: ./indexer.db
    poll_interval: 10
    bitfield_mode: natural
    api_port: 8000

The explorer API key is a secret and is read from the environment.
Command-line flags override both.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Final

import yaml
from pydantic import Field, field_validator

from beacon_indexer.bitfield import BitfieldMode
from beacon_indexer.explorer import DEFAULT_EXPLORER_URL, DEFAULT_TIMEOUT
from beacon_indexer.ingestion import (
    DEFAULT_MAX_SLOT_ATTEMPTS,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_REQUEST_DELAY,
)
from beacon_indexer.participation import DEFAULT_WINDOW_EPOCHS
from beacon_indexer.types import StrictBaseModel

API_KEY_ENV: Final = "BEACON_INDEXER_API_KEY"
"""Environment variable holding the explorer API key."""

DEFAULT_DATABASE_PATH: Final = "beacon_indexer.db"
"""SQLite file used when none is configured."""


class IndexerConfig(StrictBaseModel):
    """Complete, validated configuration of an indexer process."""

    explorer_url: str = DEFAULT_EXPLORER_URL
    """Base URL of the explorer API."""

    api_key: str | None = None
    """Explorer API key. Usually supplied through the environment."""

    database_path: str = DEFAULT_DATABASE_PATH
    """SQLite database file, or ":memory:"."""

    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    """Seconds between ingestion ticks."""

    request_delay: float = Field(default=DEFAULT_REQUEST_DELAY, ge=0)
    """Pause in seconds between slot requests."""

    request_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    """Per-request HTTP timeout in seconds."""

    max_slot_attempts: int = Field(default=DEFAULT_MAX_SLOT_ATTEMPTS, ge=1)
    """Failed attempts after which a slot is quarantined."""

    window_epochs: int = Field(default=DEFAULT_WINDOW_EPOCHS, ge=1)
    """Epochs covered by the participation rate."""

    bitfield_mode: BitfieldMode = BitfieldMode.NATURAL
    """How missed attestations are counted."""

    api_host: str = "0.0.0.0"
    """Host address of the HTTP API."""

    api_port: int = Field(default=8000, ge=1, le=65535)
    """Port of the HTTP API."""

    api_enabled: bool = True
    """Whether the HTTP API is served."""

    @field_validator("bitfield_mode", mode="before")
    @classmethod
    def parse_bitfield_mode(cls, v: Any) -> BitfieldMode:
        """Accept the mode's string value, as written in YAML."""
        if isinstance(v, str):
            try:
                return BitfieldMode(v)
            except ValueError:
                allowed = ", ".join(mode.value for mode in BitfieldMode)
                raise ValueError(f"bitfield_mode must be one of: {allowed}") from None
        return v

    @field_validator("explorer_url")
    @classmethod
    def check_explorer_url(cls, v: str) -> str:
        """Require an absolute HTTP(S) URL."""
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"explorer_url must be an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @classmethod
    def from_yaml_file(cls, path: Path) -> IndexerConfig:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            Validated configuration. Missing keys take their defaults.

        Raises:
            ValueError: If the file does not contain a mapping.
            pydantic.ValidationError: If a value is invalid.
        """
        with path.open() as f:
            data = yaml.safe_load(f)

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")

        return cls.model_validate(data)

    @classmethod
    def load(cls, path: Path | None = None) -> IndexerConfig:
        """
        Load configuration from an optional file and the environment.

        The API key from the environment applies only when the file sets none.
        """
        config = cls.from_yaml_file(path) if path is not None else cls()

        api_key = os.environ.get(API_KEY_ENV)
        if api_key and config.api_key is None:
            config = config.model_copy(update={"api_key": api_key})

        return config
