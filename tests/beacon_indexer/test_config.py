"""Tests for indexer configuration loading."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from beacon_indexer.bitfield import BitfieldMode
from beacon_indexer.config import API_KEY_ENV, IndexerConfig


class TestDefaults:
    """Tests for the built-in defaults."""

    def test_defaults(self) -> None:
        """Defaults poll beaconcha.in every 10 s and serve on port 8000."""
        config = IndexerConfig()

        assert config.explorer_url == "https://beaconcha.in/api/v1"
        assert config.poll_interval == 10.0
        assert config.request_delay == 0.1
        assert config.window_epochs == 5
        assert config.bitfield_mode is BitfieldMode.NATURAL
        assert config.api_port == 8000
        assert config.api_key is None


class TestValidation:
    """Tests for field validation."""

    def test_bitfield_mode_from_string(self) -> None:
        """The mode accepts its string value."""
        config = IndexerConfig.model_validate({"bitfield_mode": "fixed_width"})

        assert config.bitfield_mode is BitfieldMode.FIXED_WIDTH

    def test_unknown_bitfield_mode(self) -> None:
        """Unknown modes list the allowed values."""
        with pytest.raises(ValidationError, match="natural, fixed_width"):
            IndexerConfig.model_validate({"bitfield_mode": "padded"})

    def test_explorer_url_must_be_http(self) -> None:
        """Non-HTTP URLs are rejected."""
        with pytest.raises(ValidationError):
            IndexerConfig(explorer_url="ftp://explorer")

    def test_explorer_url_trailing_slash_stripped(self) -> None:
        """A trailing slash is removed."""
        assert IndexerConfig(explorer_url="http://localhost:5051/").explorer_url == (
            "http://localhost:5051"
        )

    @pytest.mark.parametrize(
        "field",
        [
            {"poll_interval": 0},
            {"request_delay": -1},
            {"max_slot_attempts": 0},
            {"window_epochs": 0},
            {"api_port": 70000},
        ],
    )
    def test_out_of_range_values(self, field: dict[str, int]) -> None:
        """Numeric fields are range-checked."""
        with pytest.raises(ValidationError):
            IndexerConfig.model_validate(field)

    def test_unknown_keys_rejected(self) -> None:
        """Typos in config keys are errors, not silently ignored."""
        with pytest.raises(ValidationError):
            IndexerConfig.model_validate({"pol_interval": 5})


class TestFromYamlFile:
    """Tests for loading YAML files."""

    def test_loads_values(self, tmp_path: Path) -> None:
        """Keys map onto fields; missing keys keep defaults."""
        path = tmp_path / "indexer.yaml"
        path.write_text(
            "explorer_url: http://localhost:8080/api/v1\n"
            "database_path: ./data/indexer.db\n"
            "poll_interval: 12\n"
            "bitfield_mode: fixed_width\n"
            "api_port: 9000\n"
        )

        config = IndexerConfig.from_yaml_file(path)

        assert config.explorer_url == "http://localhost:8080/api/v1"
        assert config.database_path == "./data/indexer.db"
        assert config.poll_interval == 12
        assert config.bitfield_mode is BitfieldMode.FIXED_WIDTH
        assert config.api_port == 9000
        assert config.window_epochs == 5

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty file yields the defaults."""
        path = tmp_path / "indexer.yaml"
        path.write_text("")

        assert IndexerConfig.from_yaml_file(path) == IndexerConfig()

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        """A top-level list is not a config."""
        path = tmp_path / "indexer.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ValueError, match="must contain a mapping"):
            IndexerConfig.from_yaml_file(path)


class TestLoad:
    """Tests for merging file and environment."""

    def test_api_key_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """The environment supplies the key when no file is given."""
        monkeypatch.setenv(API_KEY_ENV, "env-key")

        assert IndexerConfig.load().api_key == "env-key"

    def test_file_key_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """A key set in the file is not overridden."""
        monkeypatch.setenv(API_KEY_ENV, "env-key")
        path = tmp_path / "indexer.yaml"
        path.write_text("api_key: file-key\n")

        assert IndexerConfig.load(path).api_key == "file-key"

    def test_no_key(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without file or environment the key stays unset."""
        monkeypatch.delenv(API_KEY_ENV, raising=False)

        assert IndexerConfig.load().api_key is None
