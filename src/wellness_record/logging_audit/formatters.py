"""Custom log formatters for the Wellness Record Builder.

This module provides specialized formatters for logging, including PII redaction.
"""

import logging
import re
from typing import List, Tuple


class PIIRedactingFormatter(logging.Formatter):
    """Custom formatter that redacts Personally Identifiable Information (PII) from log messages.

    This formatter applies regex-based pattern matching to identify and redact
    ABHA numbers, ABHA addresses, mobile numbers and person names.

    Attributes:
        redact_pii: Whether to enable PII redaction
        patterns: List of (regex_pattern, replacement_text) tuples for redaction

    Example:
        >>> formatter = PIIRedactingFormatter(
        ...     fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        ...     redact_pii=True
        ... )
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
    """

    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: str | None = None,
        redact_pii: bool = False,
    ) -> None:
        """Initialize the PIIRedactingFormatter.

        Args:
            fmt: Log message format string
            datefmt: Date format string (optional)
            redact_pii: Whether to enable PII redaction
        """
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_pii = redact_pii

        # Define redaction patterns: (regex, replacement_text)
        self.patterns: List[Tuple[re.Pattern[str], str]] = [
            # ABHA number: 12-3456-7890-1234 or 14 plain digits
            (re.compile(r'\b\d{2}-\d{4}-\d{4}-\d{4}\b|\b\d{14}\b'), '[ABHA-REDACTED]'),

            # ABHA address: user.name@abdm, user@sbx
            (re.compile(r'\b[\w.]+@(?:abdm|sbx)\b'), '[ABHA-ADDRESS-REDACTED]'),

            # Indian mobile numbers, optionally with +91 prefix
            (re.compile(r'(?:\+91[-\s]?)?\b[6-9]\d{9}\b'), '[PHONE-REDACTED]'),

            # Matches: name="Asha Rao", name='Ravi', name=Ravi
            (re.compile(r'name=["\']?([^"\'|]+)["\']?'), 'name=[NAME-REDACTED]'),

            # Matches: "Patient: Asha", "Name: A. K. Sharma", "Practitioner: Dr. RAO"
            (re.compile(
                r'\b(Patient|Person|Practitioner|Name):\s+'
                r'((?:Dr\.\s+)?[A-Z][A-Za-z.]*(?:\s+[A-Z][A-Za-z.]*)*)'
            ), r'\1: [NAME-REDACTED]'),
        ]

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional PII redaction.

        Args:
            record: Log record to format

        Returns:
            Formatted log message with PII redacted if enabled
        """
        original = super().format(record)

        if self.redact_pii:
            for pattern, replacement in self.patterns:
                original = pattern.sub(replacement, original)

        return original
