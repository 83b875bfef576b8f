"""Config module.

This module provides configuration management functionality.
"""

from wellness_record.config.manager import (
    get_attester_config,
    get_feed_config,
    get_logging_config,
    get_terminology_config,
    load_config,
)
from wellness_record.config.schema import (
    AttesterConfig,
    CodedConcept,
    Config,
    FeedConfig,
    IdentifierSystemsConfig,
    LoggingConfig,
    TerminologyConfig,
)

__all__ = [
    # Main configuration loading
    "load_config",
    # Helper functions
    "get_attester_config",
    "get_feed_config",
    "get_logging_config",
    "get_terminology_config",
    # Configuration models
    "AttesterConfig",
    "CodedConcept",
    "Config",
    "FeedConfig",
    "IdentifierSystemsConfig",
    "LoggingConfig",
    "TerminologyConfig",
]
