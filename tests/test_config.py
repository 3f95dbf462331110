"""Tests for LegacyConfig."""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from legacycore import LegacyConfig, LogLevel, load_config_from_env


class TestLegacyConfig:
    """Tests for LegacyConfig model."""

    def test_create_default_config(self) -> None:
        """Test creating a LegacyConfig with defaults."""
        config = LegacyConfig()
        assert config.log_level == LogLevel.INFO
        assert config.log_json is False
        assert config.service_name is None
        assert config.immediate_processing is True
        assert config.process_all_max_workers == 1

    def test_create_custom_config(self) -> None:
        """Test creating a LegacyConfig with custom values."""
        config = LegacyConfig(
            log_level=LogLevel.DEBUG,
            log_json=True,
            service_name="legacy-service",
            immediate_processing=False,
            process_all_max_workers=4,
        )
        assert config.log_level == LogLevel.DEBUG
        assert config.log_json is True
        assert config.service_name == "legacy-service"
        assert config.immediate_processing is False
        assert config.process_all_max_workers == 4

    def test_log_level_from_string(self) -> None:
        """Test creating config with log level as string."""
        config = LegacyConfig(log_level="debug")
        assert config.log_level == LogLevel.DEBUG

    def test_log_level_invalid(self) -> None:
        """Test creating config with invalid log level."""
        with pytest.raises(ValueError, match="Invalid log level"):
            LegacyConfig(log_level="INVALID")

    def test_max_workers_must_be_positive(self) -> None:
        """Test that process_all_max_workers rejects zero."""
        with pytest.raises(ValueError):
            LegacyConfig(process_all_max_workers=0)

    def test_extra_fields_forbidden(self) -> None:
        """Test that extra fields are forbidden."""
        with pytest.raises(Exception):  # Pydantic validation error
            LegacyConfig(extra_field="value")  # type: ignore[call-arg]


class TestLoadConfigFromEnv:
    """Tests for load_config_from_env function."""

    @patch.dict(os.environ, {}, clear=True)
    def test_load_defaults(self) -> None:
        """Test loading config with no environment variables."""
        config = load_config_from_env()
        assert config.log_level == LogLevel.INFO
        assert config.log_json is False
        assert config.immediate_processing is True
        assert config.process_all_max_workers == 1

    @patch.dict(
        os.environ,
        {
            "LOG_LEVEL": "DEBUG",
            "LOG_JSON": "true",
            "SERVICE_NAME": "legacy-service",
            "IMMEDIATE_PROCESSING": "false",
            "PROCESS_ALL_MAX_WORKERS": "8",
        },
        clear=True,
    )
    def test_load_from_env(self) -> None:
        """Test loading config from environment variables."""
        config = load_config_from_env()
        assert config.log_level == LogLevel.DEBUG
        assert config.log_json is True
        assert config.service_name == "legacy-service"
        assert config.immediate_processing is False
        assert config.process_all_max_workers == 8

    def test_immediate_processing_variants(self) -> None:
        """Test IMMEDIATE_PROCESSING accepts various true values."""
        for value in ("true", "1", "yes", "on", "TRUE"):
            with patch.dict(os.environ, {"IMMEDIATE_PROCESSING": value}, clear=True):
                config = load_config_from_env()
                assert config.immediate_processing is True

    @patch.dict(os.environ, {"IMMEDIATE_PROCESSING": "off"}, clear=True)
    def test_immediate_processing_false(self) -> None:
        """Test IMMEDIATE_PROCESSING false values."""
        config = load_config_from_env()
        assert config.immediate_processing is False

    @patch.dict(os.environ, {"PROCESS_ALL_MAX_WORKERS": "0"}, clear=True)
    def test_invalid_worker_count(self) -> None:
        """Test that an out-of-range worker count fails validation."""
        with pytest.raises(ValueError):
            load_config_from_env()
