"""Configuration schema models using pydantic.

This module defines the configuration structure and validation rules using pydantic.
All configuration values are validated according to the schema defined here.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from wellness_record import profiles


VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file
        redact_pii: Whether to redact PII from logs
    """

    level: str = Field(
        default="INFO",
        description="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL"
    )
    log_file: Path = Field(
        default=Path("logs/wellness-record.log"),
        description="Log file path"
    )
    redact_pii: bool = Field(
        default=False,
        description="Redact PII from logs"
    )

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level.

        Args:
            v: Log level string

        Returns:
            Validated log level (uppercase)

        Raises:
            ValueError: If log level is not valid
        """
        v_upper = v.upper()
        if v_upper not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        return v_upper


class FeedConfig(BaseModel):
    """Configuration for the person feed.

    Attributes:
        source: URL or file path of the person list (JSON or CSV)
        timeout: HTTP timeout in seconds when the source is a URL
    """

    source: str = Field(default="patients.json", description="Person feed URL or path")
    timeout: int = Field(default=10, ge=1, description="Feed fetch timeout in seconds")


class AttesterConfig(BaseModel):
    """Default practitioner used as author, attester and performer.

    Attributes:
        name: Practitioner display name
        license: Medical license number
        login_id: Login id in the source system
    """

    name: str = Field(default="Dr. ABC", description="Practitioner name")
    license: str = Field(default="LIC-1234", description="Medical license number")
    login_id: str = Field(default="pract-001", description="Practitioner login id")


class CodedConcept(BaseModel):
    """A single code from an approved observation code system.

    Attributes:
        system: Code system URI (LOINC or SNOMED CT)
        code: Code value
        display: Official display string, omitted from output when None
        text: Human-readable concept text
    """

    system: str
    code: str
    display: Optional[str] = None
    text: Optional[str] = None

    @field_validator("system")
    @classmethod
    def validate_system(cls, v: str) -> str:
        """Validate the code system is LOINC or SNOMED CT.

        Raises:
            ValueError: If the system is not an approved observation code system
        """
        if v not in profiles.APPROVED_OBSERVATION_SYSTEMS:
            raise ValueError(
                f"Invalid code system: {v}. "
                f"Must be one of: {', '.join(profiles.APPROVED_OBSERVATION_SYSTEMS)}"
            )
        return v

    def to_coding(self) -> dict[str, str]:
        """Render as a FHIR Coding."""
        coding = {"system": self.system, "code": self.code}
        if self.display:
            coding["display"] = self.display
        return coding


class TerminologyConfig(BaseModel):
    """Codes used to classify the wellness observations and the document.

    The lifestyle code is reused for every lifestyle item regardless of its
    label; the label travels in ``code.text``.
    """

    physical_activity: CodedConcept = CodedConcept(
        system=profiles.LOINC_SYSTEM,
        code="68516-4",
        display=(
            "On those days that you engage in moderate to strenuous exercise, "
            "how many minutes, on average, do you exercise"
        ),
        text="Physical activity",
    )
    general_assessment: CodedConcept = CodedConcept(
        system=profiles.LOINC_SYSTEM,
        code="8693-4",
        display="Mental status",
        text="General assessment",
    )
    lifestyle: CodedConcept = CodedConcept(
        system=profiles.SNOMED_SYSTEM,
        code="229819007",
        display="Tobacco use and exposure",
        text="Lifestyle",
    )
    document_type: CodedConcept = CodedConcept(
        system=profiles.LOINC_SYSTEM,
        code="11502-2",
        text=profiles.DOCUMENT_TITLE,
    )


class IdentifierSystemsConfig(BaseModel):
    """Identifier system URIs for person, practitioner and bundle identifiers."""

    abha_number: str = profiles.ABHA_NUMBER_SYSTEM
    abha_address: str = profiles.ABHA_ADDRESS_SYSTEM
    mrn: str = profiles.MRN_SYSTEM
    practitioner_license: str = profiles.PRACTITIONER_LICENSE_SYSTEM
    practitioner_login: str = profiles.PRACTITIONER_LOGIN_SYSTEM
    bundle: str = profiles.BUNDLE_IDENTIFIER_SYSTEM


class Config(BaseModel):
    """Root configuration model.

    Attributes:
        logging: Logging configuration
        feed: Person feed configuration
        attester: Default practitioner
        terminology: Observation and document codes
        identifier_systems: Identifier system URIs

    Example:
        >>> config = Config(attester=AttesterConfig(name="Dr. Rao", license="KMC-77"))
        >>> config.terminology.lifestyle.code
        '229819007'
    """

    logging: LoggingConfig = LoggingConfig()
    feed: FeedConfig = FeedConfig()
    attester: AttesterConfig = AttesterConfig()
    terminology: TerminologyConfig = TerminologyConfig()
    identifier_systems: IdentifierSystemsConfig = IdentifierSystemsConfig()
