"""Person and attester data models.

This module defines the CanonicalPerson dataclass produced by the field
normalizer and the Attester dataclass for the single authoring practitioner.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Gender(Enum):
    """Administrative gender as carried by the FHIR Patient resource."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"
    UNKNOWN = "unknown"
    ABSENT = "absent"  # not rendered into the Patient resource


@dataclass(frozen=True)
class CanonicalPerson:
    """Normalized subject record for a wellness document.

    Attributes:
        identity: Lower-cased UUID reused as the Patient id, or None to coin one
        display_name: Person's display name
        gender: Administrative gender
        birth_date: ISO calendar date (YYYY-MM-DD), or None when unknown
        contact_number: Mobile number (optional)
        postal_address: Free-text address (optional)
        external_health_id: ABHA number (optional)
        health_address_candidates: De-duplicated ABHA addresses in feed order
        external_health_address: The selected ABHA address (optional)
        local_record_number: Medical record number (optional)
    """

    display_name: str
    identity: Optional[str] = None
    gender: Gender = Gender.ABSENT
    birth_date: Optional[str] = None
    contact_number: Optional[str] = None
    postal_address: Optional[str] = None
    external_health_id: Optional[str] = None
    health_address_candidates: tuple[str, ...] = ()
    external_health_address: Optional[str] = None
    local_record_number: Optional[str] = None

    @property
    def has_health_identity(self) -> bool:
        """Check if an ABHA number or ABHA address is available."""
        return bool(self.external_health_id or self.external_health_address)


@dataclass(frozen=True)
class Attester:
    """Practitioner acting as author, attester and performer of a document.

    Attributes:
        display_name: Practitioner name
        license_number: Medical license number
        login_reference: Login id of the practitioner in the source system
    """

    display_name: str
    license_number: str
    login_reference: str = ""
