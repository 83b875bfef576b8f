"""Unit tests for configuration management.

Tests cover configuration loading, validation, environment variable overrides,
and error handling.
"""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from wellness_record.config import (
    AttesterConfig,
    CodedConcept,
    Config,
    FeedConfig,
    LoggingConfig,
    get_attester_config,
    get_feed_config,
    get_logging_config,
    get_terminology_config,
    load_config,
)
from wellness_record.config.defaults import DEFAULT_CONFIG
from wellness_record.utils.exceptions import ConfigurationError


@pytest.fixture(autouse=True)
def clear_wellness_env(monkeypatch):
    """Keep WELLNESS_* variables from the environment out of these tests."""
    for name in (
        "WELLNESS_LOG_LEVEL",
        "WELLNESS_LOG_FILE",
        "WELLNESS_REDACT_PII",
        "WELLNESS_FEED_SOURCE",
        "WELLNESS_FEED_TIMEOUT",
        "WELLNESS_PRACTITIONER_NAME",
        "WELLNESS_PRACTITIONER_LICENSE",
        "WELLNESS_PRACTITIONER_LOGIN_ID",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("wellness_record.config.manager.load_dotenv", lambda: False)


class TestConfigurationSchema:
    """Test pydantic configuration models validation."""

    def test_logging_config_case_insensitive(self) -> None:
        # Arrange & Act
        config = LoggingConfig(level="debug")

        # Assert
        assert config.level == "DEBUG"

    def test_logging_config_invalid_level(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            LoggingConfig(level="VERBOSE")

        assert "Invalid log level" in str(exc_info.value)

    def test_feed_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            FeedConfig(timeout=0)

    def test_coded_concept_accepts_loinc_and_snomed(self) -> None:
        # Arrange & Act
        loinc = CodedConcept(system="http://loinc.org", code="8867-4")
        snomed = CodedConcept(system="http://snomed.info/sct", code="229819007", display="Tobacco")

        # Assert
        assert loinc.to_coding() == {"system": "http://loinc.org", "code": "8867-4"}
        assert snomed.to_coding()["display"] == "Tobacco"

    def test_coded_concept_rejects_other_systems(self) -> None:
        """Test observation codings are limited to the approved systems."""
        with pytest.raises(ValidationError) as exc_info:
            CodedConcept(system="http://example.org/codes", code="X1")

        assert "Invalid code system" in str(exc_info.value)

    def test_defaults(self) -> None:
        # Arrange & Act
        config = Config()

        # Assert
        assert config.attester.name == "Dr. ABC"
        assert config.attester.license == "LIC-1234"
        assert config.attester.login_id == "pract-001"
        assert config.terminology.physical_activity.code == "68516-4"
        assert config.terminology.general_assessment.code == "8693-4"
        assert config.terminology.lifestyle.code == "229819007"
        assert config.terminology.document_type.code == "11502-2"
        assert config.identifier_systems.bundle == "https://nrces.in/ids/bundles"


class TestConfigurationLoading:
    """Test configuration file loading."""

    def test_load_config_with_valid_file(self, tmp_path: Path) -> None:
        # Arrange
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps(
                {
                    "feed": {"source": "https://example.org/patients.json", "timeout": 5},
                    "attester": {"name": "Dr. Rao", "license": "KMC-77", "login_id": "rao"},
                    "terminology": {
                        "lifestyle": {"system": "http://snomed.info/sct", "code": "228273003"}
                    },
                }
            )
        )

        # Act
        config = load_config(config_file)

        # Assert
        assert config.feed.source == "https://example.org/patients.json"
        assert config.feed.timeout == 5
        assert config.attester.name == "Dr. Rao"
        assert config.terminology.lifestyle.code == "228273003"
        assert config.terminology.physical_activity.code == "68516-4"

    def test_load_config_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        # Arrange & Act
        config = load_config(tmp_path / "missing.json")

        # Assert
        assert config.feed.source == DEFAULT_CONFIG["feed"]["source"]
        assert config.logging.log_file == Path("logs/wellness-record.log")

    def test_load_config_malformed_json(self, tmp_path: Path) -> None:
        # Arrange
        config_file = tmp_path / "bad.json"
        config_file.write_text("{ invalid json }")

        # Act & Assert
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_file)

        assert "Invalid JSON" in str(exc_info.value)

    def test_load_config_non_object(self, tmp_path: Path) -> None:
        # Arrange
        config_file = tmp_path / "list.json"
        config_file.write_text("[1, 2]")

        # Act & Assert
        with pytest.raises(ConfigurationError, match="must contain a JSON object"):
            load_config(config_file)

    def test_load_config_with_validation_error(self, tmp_path: Path) -> None:
        """Test a terminology outside LOINC/SNOMED is a configuration error."""
        # Arrange
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps(
                {"terminology": {"lifestyle": {"system": "http://example.org", "code": "X"}}}
            )
        )

        # Act & Assert
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(config_file)

        assert "Configuration validation failed" in str(exc_info.value)


class TestEnvironmentVariableOverrides:
    """Test WELLNESS_* environment variable overrides."""

    def test_env_override_feed_and_attester(self, tmp_path: Path, monkeypatch) -> None:
        # Arrange
        monkeypatch.setenv("WELLNESS_FEED_SOURCE", "feed.csv")
        monkeypatch.setenv("WELLNESS_FEED_TIMEOUT", "30")
        monkeypatch.setenv("WELLNESS_PRACTITIONER_NAME", "Dr. Env")
        monkeypatch.setenv("WELLNESS_PRACTITIONER_LICENSE", "ENV-1")
        monkeypatch.setenv("WELLNESS_PRACTITIONER_LOGIN_ID", "env-login")

        # Act
        config = load_config(tmp_path / "missing.json")

        # Assert
        assert config.feed.source == "feed.csv"
        assert config.feed.timeout == 30
        assert config.attester == AttesterConfig(name="Dr. Env", license="ENV-1", login_id="env-login")

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch) -> None:
        # Arrange
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"logging": {"level": "INFO"}}))
        monkeypatch.setenv("WELLNESS_LOG_LEVEL", "DEBUG")

        # Act
        config = load_config(config_file)

        # Assert
        assert config.logging.level == "DEBUG"

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("yes", True), ("false", False)])
    def test_env_override_boolean_values(self, tmp_path: Path, monkeypatch, value, expected) -> None:
        # Arrange
        monkeypatch.setenv("WELLNESS_REDACT_PII", value)

        # Act & Assert
        assert load_config(tmp_path / "missing.json").logging.redact_pii is expected

    def test_env_override_invalid_timeout(self, tmp_path: Path, monkeypatch) -> None:
        # Arrange
        monkeypatch.setenv("WELLNESS_FEED_TIMEOUT", "soon")

        # Act & Assert
        with pytest.raises(ConfigurationError, match="WELLNESS_FEED_TIMEOUT"):
            load_config(tmp_path / "missing.json")


class TestConfigurationHelpers:
    def test_getters(self) -> None:
        # Arrange
        config = Config()

        # Act & Assert
        assert get_logging_config(config) is config.logging
        assert get_feed_config(config) is config.feed
        assert get_attester_config(config) is config.attester
        assert get_terminology_config(config) is config.terminology
