"""Custom exception classes for the Wellness Record Builder.

All exceptions inherit from WellnessRecordError to allow catching all custom exceptions.
"""

from typing import Optional


class WellnessRecordError(Exception):
    """Base exception for all Wellness Record Builder custom exceptions."""

    pass


class ValidationError(WellnessRecordError):
    """Raised when data validation fails.

    Examples:
        - Selected ABHA address is not one of the person's candidates
        - Malformed narrative XHTML
        - Invalid observation input values
    """

    pass


class ConfigurationError(WellnessRecordError):
    """Raised when configuration loading or validation fails.

    Examples:
        - Invalid configuration file format
        - Code system outside the approved terminologies
        - Configuration value out of range
    """

    pass


class FeedError(WellnessRecordError):
    """Raised when the person feed cannot be fetched or parsed.

    The feed loader converts this into an empty person list plus a message;
    it is only visible to callers of the low-level read functions.
    """

    pass


class GenerationError(WellnessRecordError):
    """Base exception for document generation errors."""

    pass


class PreconditionError(GenerationError):
    """Raised when generation is refused because a required input is missing.

    Attributes:
        field: Name of the missing form field (e.g. "license")

    Examples:
        - No person selected
        - No ABHA number or ABHA address available
        - Practitioner name or license empty
    """

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


class IdentityCoinError(GenerationError):
    """Raised when a unique resource identity cannot be coined.

    Collisions are practically impossible with UUID4; this signals a broken
    random source.
    """

    pass


class BundleIntegrityError(GenerationError):
    """Raised when a composed bundle breaks its reference invariants.

    Examples:
        - A reference that does not resolve to any bundle entry
        - Two entries sharing one identity
        - Header resource not in first position
    """

    pass
