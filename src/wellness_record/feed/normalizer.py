"""Field normalization for raw person records.

This module converts loosely-typed person records from the input feed into
CanonicalPerson instances. Malformed optional fields never raise: each helper
returns the defaulted value together with diagnostics describing what was
dropped, and the caller decides whether to log them.
"""

import json
import logging
import re
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Generic, Mapping, Optional, TypeVar

from wellness_record.document.identity import is_uuid
from wellness_record.models.person import CanonicalPerson, Gender
from wellness_record.utils.exceptions import ValidationError


logger = logging.getLogger(__name__)

T = TypeVar("T")

ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")
# Day-first dates with one consistent separator (back-reference \2)
DAY_FIRST_DATE_PATTERN = re.compile(r"^(\d{1,2})([-/])(\d{1,2})\2(\d{4})$")

# Single-letter gender codes accepted alongside FHIR gender words
GENDER_CODES = {
    "m": Gender.MALE,
    "f": Gender.FEMALE,
    "o": Gender.OTHER,
    "u": Gender.UNKNOWN,
}


@dataclass(frozen=True)
class Normalized(Generic[T]):
    """A normalized value with diagnostics about any fallback applied.

    Attributes:
        value: The normalized (possibly defaulted) value
        diagnostics: Human-readable notes, empty when the input was clean
    """

    value: T
    diagnostics: tuple[str, ...] = ()


@dataclass(frozen=True)
class NormalizationResult:
    """Normalized person plus all diagnostics collected while normalizing."""

    person: CanonicalPerson
    diagnostics: tuple[str, ...] = ()


def _text(value: Any) -> str:
    """Convert a raw field to stripped text, treating None as empty."""
    if value is None:
        return ""
    return str(value).strip()


def repair_date(value: Any) -> Normalized[Optional[str]]:
    """Repair a date of birth into ISO YYYY-MM-DD form.

    Accepts YYYY-MM-DD, DD-MM-YYYY and DD/MM/YYYY. Anything else, including
    impossible calendar dates, becomes None.

    Args:
        value: Raw date value from the feed

    Returns:
        Normalized ISO date string or None
    """
    text = _text(value)
    if not text:
        return Normalized(None)

    iso_match = ISO_DATE_PATTERN.match(text)
    day_first_match = DAY_FIRST_DATE_PATTERN.match(text)
    if iso_match:
        year, month, day = iso_match.groups()
    elif day_first_match:
        day, _, month, year = day_first_match.groups()
    else:
        return Normalized(
            None,
            (f"Unrecognized date format '{text}'. Expected YYYY-MM-DD or DD-MM-YYYY",),
        )

    try:
        repaired = date(int(year), int(month), int(day))
    except ValueError:
        return Normalized(None, (f"Invalid calendar date '{text}'",))
    return Normalized(repaired.isoformat())


def normalize_gender(value: Any) -> Normalized[Gender]:
    """Map a raw gender string onto the Gender enum.

    Args:
        value: Raw gender (e.g. "Male", "F", "unknown")

    Returns:
        Normalized Gender; ABSENT for empty input, UNKNOWN for unrecognized input
    """
    text = _text(value).lower()
    if not text:
        return Normalized(Gender.ABSENT)
    if text in GENDER_CODES:
        return Normalized(GENDER_CODES[text])
    try:
        gender = Gender(text)
    except ValueError:
        return Normalized(Gender.UNKNOWN, (f"Unrecognized gender '{value}'",))
    if gender is Gender.ABSENT:
        return Normalized(Gender.UNKNOWN, (f"Unrecognized gender '{value}'",))
    return Normalized(gender)


def extract_identity_seed(value: Any) -> Normalized[Optional[str]]:
    """Extract a reusable resource identity from the record reference.

    Args:
        value: Raw internal record reference

    Returns:
        Lower-cased UUID, or None when the reference is not a valid UUID
    """
    if value is None or value == "":
        return Normalized(None)
    if is_uuid(value):
        return Normalized(value.lower())
    return Normalized(
        None, (f"Record reference '{value}' is not a valid UUID; a fresh id will be coined",)
    )


def _encode_address(item: Any) -> Optional[str]:
    if not item:
        return None
    if isinstance(item, str):
        return item
    if isinstance(item, Mapping):
        if item.get("address"):
            return str(item["address"])
        return json.dumps(item, sort_keys=True, separators=(",", ":"), default=str)
    return None


def extract_health_addresses(raw: Mapping[str, Any]) -> Normalized[tuple[str, ...]]:
    """Collect candidate ABHA addresses from a raw record.

    Reads ``additional_attributes.abha_addresses``. Items may be strings or
    objects with an ``address`` property; other objects are encoded as
    compact JSON. When the list is missing or not a list, the legacy
    ``abha_ref`` field is the single candidate.

    Args:
        raw: Raw person record

    Returns:
        De-duplicated candidates in first-occurrence order
    """
    attributes = raw.get("additional_attributes")
    candidates = attributes.get("abha_addresses") if isinstance(attributes, Mapping) else None

    if not isinstance(candidates, list):
        diagnostics: tuple[str, ...] = ()
        if candidates is not None:
            diagnostics = ("abha_addresses is not a list; falling back to abha_ref",)
        legacy = _text(raw.get("abha_ref"))
        return Normalized((legacy,) if legacy else (), diagnostics)

    addresses: dict[str, None] = {}
    skipped = 0
    for item in candidates:
        encoded = _encode_address(item)
        if encoded is None:
            skipped += 1
            continue
        addresses.setdefault(encoded, None)

    diagnostics = (f"Skipped {skipped} empty or unusable ABHA address item(s)",) if skipped else ()
    return Normalized(tuple(addresses), diagnostics)


def normalize_with_diagnostics(raw: Mapping[str, Any]) -> NormalizationResult:
    """Normalize a raw person record and keep the diagnostics.

    Args:
        raw: Raw person record from the input feed

    Returns:
        NormalizationResult with the CanonicalPerson and collected diagnostics
    """
    birth_date = repair_date(raw.get("dob"))
    gender = normalize_gender(raw.get("gender"))
    identity = extract_identity_seed(raw.get("user_ref_id"))
    addresses = extract_health_addresses(raw)

    external_health_id = _text(raw.get("abha_ref")) or None
    if addresses.value:
        selected = addresses.value[0]
    else:
        selected = external_health_id

    person = CanonicalPerson(
        identity=identity.value,
        display_name=_text(raw.get("name")),
        gender=gender.value,
        birth_date=birth_date.value,
        contact_number=_text(raw.get("mobile")) or None,
        postal_address=_text(raw.get("address")) or None,
        external_health_id=external_health_id,
        health_address_candidates=addresses.value,
        external_health_address=selected,
        local_record_number=_text(raw.get("user_id")) or None,
    )
    diagnostics = (
        birth_date.diagnostics
        + gender.diagnostics
        + identity.diagnostics
        + addresses.diagnostics
    )
    return NormalizationResult(person=person, diagnostics=diagnostics)


def normalize(raw: Mapping[str, Any]) -> CanonicalPerson:
    """Normalize a raw person record into a CanonicalPerson.

    Pure function: the same record always yields an equal person.

    Args:
        raw: Raw person record from the input feed

    Returns:
        CanonicalPerson with defaults applied to malformed optional fields
    """
    return normalize_with_diagnostics(raw).person


def select_health_address(person: CanonicalPerson, address: Optional[str]) -> CanonicalPerson:
    """Select one of the person's ABHA address candidates.

    Args:
        person: Normalized person
        address: Candidate to select, or None/"" to clear the selection

    Returns:
        Copy of the person with the selection applied

    Raises:
        ValidationError: If address is not among the person's candidates
    """
    if not address:
        return replace(person, external_health_address=None)
    if address not in person.health_address_candidates:
        raise ValidationError(
            f"ABHA address '{address}' is not available for {person.display_name or 'this person'}. "
            f"Choose one of: {', '.join(person.health_address_candidates) or '(none)'}"
        )
    return replace(person, external_health_address=address)
