"""Configuration manager for loading and managing configuration.

This module provides the main configuration loading and management functionality,
including support for JSON configuration files, environment variable overrides,
and configuration validation.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from wellness_record.config.defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from wellness_record.config.schema import (
    AttesterConfig,
    Config,
    FeedConfig,
    LoggingConfig,
    TerminologyConfig,
)
from wellness_record.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variable prefix for all configuration overrides
ENV_PREFIX = "WELLNESS_"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. CLI arguments (handled by caller)
    2. Environment variables (WELLNESS_* prefix)
    3. Configuration file (JSON)
    4. Default values

    Args:
        config_path: Path to configuration file. If None, uses ./config/config.json

    Returns:
        Validated Config instance

    Raises:
        ConfigurationError: If configuration is invalid or malformed

    Example:
        >>> config = load_config(Path("custom/config.json"))
        >>> config.attester.license
        'LIC-1234'
    """
    # Load .env file if present in project root
    load_dotenv()

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_PATH)

    config_dict = _load_config_file(config_path)
    config_dict = _apply_env_overrides(config_dict)

    try:
        return Config(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed:\n{e}\n\n"
            f"Fix: Check your configuration file at {config_path} and ensure all "
            f"values match the expected format."
        ) from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration file or return defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If JSON is malformed or the file is unreadable
    """
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {config_path}\n"
                f"Error: {e}\n"
                f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read config file: {config_path}\n"
                f"Error: {e}\n"
                f"Fix: Check file permissions and path"
            ) from e
        if not isinstance(config_dict, dict):
            raise ConfigurationError(
                f"Config file {config_path} must contain a JSON object, "
                f"got {type(config_dict).__name__}"
            )
        logger.info(f"Loaded configuration from {config_path}")
        return config_dict

    logger.info(
        f"Config file not found: {config_path}. Using default configuration."
    )
    # Return a deep copy of defaults to avoid mutation
    return json.loads(json.dumps(DEFAULT_CONFIG))


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides with WELLNESS_ prefix.

    Environment variables follow the pattern: WELLNESS_<SECTION>_<FIELD>
    For example: WELLNESS_FEED_SOURCE, WELLNESS_LOG_LEVEL

    Args:
        config_dict: Configuration dictionary to update

    Returns:
        Updated configuration dictionary with environment overrides applied
    """
    # Logging section
    if log_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        config_dict.setdefault("logging", {})["level"] = log_level
        logger.debug("Override: log_level from environment")

    if log_file := os.getenv(f"{ENV_PREFIX}LOG_FILE"):
        config_dict.setdefault("logging", {})["log_file"] = log_file
        logger.debug("Override: log_file from environment")

    if redact_pii := os.getenv(f"{ENV_PREFIX}REDACT_PII"):
        config_dict.setdefault("logging", {})["redact_pii"] = _parse_bool(redact_pii)
        logger.debug("Override: redact_pii from environment")

    # Feed section
    if feed_source := os.getenv(f"{ENV_PREFIX}FEED_SOURCE"):
        config_dict.setdefault("feed", {})["source"] = feed_source
        logger.debug("Override: feed source from environment")

    if feed_timeout := os.getenv(f"{ENV_PREFIX}FEED_TIMEOUT"):
        try:
            config_dict.setdefault("feed", {})["timeout"] = int(feed_timeout)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid {ENV_PREFIX}FEED_TIMEOUT value: {feed_timeout}. "
                f"Must be a whole number of seconds."
            ) from e
        logger.debug("Override: feed timeout from environment")

    # Attester section
    if name := os.getenv(f"{ENV_PREFIX}PRACTITIONER_NAME"):
        config_dict.setdefault("attester", {})["name"] = name
        logger.debug("Override: practitioner name from environment")

    if license_number := os.getenv(f"{ENV_PREFIX}PRACTITIONER_LICENSE"):
        config_dict.setdefault("attester", {})["license"] = license_number
        logger.debug("Override: practitioner license from environment")

    if login_id := os.getenv(f"{ENV_PREFIX}PRACTITIONER_LOGIN_ID"):
        config_dict.setdefault("attester", {})["login_id"] = login_id
        logger.debug("Override: practitioner login id from environment")

    return config_dict


def _parse_bool(value: str) -> bool:
    """Parse boolean value from string.

    Args:
        value: String value to parse (case-insensitive)

    Returns:
        Boolean value
    """
    return value.lower() in ("true", "1", "yes", "on")


def get_logging_config(config: Config) -> LoggingConfig:
    """Get logging configuration."""
    return config.logging


def get_feed_config(config: Config) -> FeedConfig:
    """Get person feed configuration."""
    return config.feed


def get_attester_config(config: Config) -> AttesterConfig:
    """Get the default practitioner configuration.

    Example:
        >>> config = load_config()
        >>> get_attester_config(config).name
        'Dr. ABC'
    """
    return config.attester


def get_terminology_config(config: Config) -> TerminologyConfig:
    """Get observation and document terminology."""
    return config.terminology
