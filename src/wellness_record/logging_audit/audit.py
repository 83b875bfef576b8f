"""Audit trail functionality for the Wellness Record Builder.

This module provides structured audit logging for feed loads and document
generation runs.
"""

import time
import uuid
from typing import Any, Dict

from .logger import get_logger

logger = get_logger(__name__)

# Key fields rendered first, in this order
FIELD_ORDER = [
    "status",
    "source",
    "record_count",
    "resource_count",
    "bundle_id",
    "duration",
    "error_message",
    "correlation_id",
]


def log_audit_event(event_type: str, details: Dict[str, Any]) -> None:
    """Log an audit trail event.

    Creates a structured audit log entry with standard fields. Audit events are
    logged at INFO level for successful operations and ERROR level for failures.
    The details dictionary is not modified.

    Args:
        event_type: Type of operation (e.g., "FEED_LOADED", "BUNDLE_GENERATED",
                   "GENERATION_REFUSED")
        details: Dictionary with event details. Common fields include:
                - source: Feed URL or path (if applicable)
                - record_count: Number of records processed
                - resource_count: Number of resources in a bundle
                - bundle_id: Generated bundle id
                - status: "success" or "failure"
                - duration: Operation duration in seconds
                - error_message: Error details (if status is failure)

    Example:
        >>> log_audit_event("BUNDLE_GENERATED", {
        ...     "status": "success",
        ...     "resource_count": 7,
        ...     "duration": 0.01
        ... })
    """
    event = dict(details)
    event.setdefault("timestamp", time.time())
    event.setdefault("correlation_id", str(uuid.uuid4()))

    message_parts = [f"AUDIT [{event_type}]"]

    for field in FIELD_ORDER:
        if field in event:
            value = event[field]
            if field == "duration" and isinstance(value, (int, float)):
                message_parts.append(f"{field}={value:.2f}s")
            else:
                message_parts.append(f"{field}={value}")

    for key, value in event.items():
        if key not in FIELD_ORDER and key != "timestamp":
            message_parts.append(f"{key}={value}")

    audit_message = " | ".join(message_parts)

    if event.get("status") == "failure":
        logger.error(audit_message)
    else:
        logger.info(audit_message)
