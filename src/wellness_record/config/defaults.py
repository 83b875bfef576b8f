"""Default configuration values.

This module defines the default configuration values used when no configuration
file is provided or when configuration values are not specified.
"""

from typing import Any

# Default configuration dictionary
# This is used as a fallback when no configuration file is present.
# Terminology and identifier systems fall back to the schema defaults.
DEFAULT_CONFIG: dict[str, Any] = {
    "feed": {
        # Person list next to the working directory, as served by the form app
        "source": "patients.json",
        "timeout": 10,
    },
    "attester": {
        "name": "Dr. ABC",
        "license": "LIC-1234",
        "login_id": "pract-001",
    },
    "logging": {
        "level": "INFO",
        "log_file": "logs/wellness-record.log",
        # Do not redact PII by default (user must opt-in for privacy)
        "redact_pii": False,
    },
}

# Default configuration file path
DEFAULT_CONFIG_PATH = "config/config.json"
