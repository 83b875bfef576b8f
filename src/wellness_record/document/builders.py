"""FHIR resource builders for the wellness record.

Each builder is a pure function of its inputs: it receives the identity to
stamp on the resource, the identities it must reference, the run clock and
the configured terminology, and returns a GeneratedResource. Nothing is read
from global state, so one process can build documents for several
practitioners or terminologies side by side.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Sequence, Union

from wellness_record import profiles
from wellness_record.config.schema import (
    CodedConcept,
    IdentifierSystemsConfig,
    TerminologyConfig,
)
from wellness_record.document.narrative import render_narrative
from wellness_record.models.observations import (
    GeneralAssessment,
    LifestyleItem,
    PhysicalActivitySummary,
    VitalMeasurement,
)
from wellness_record.models.person import Attester, CanonicalPerson, Gender
from wellness_record.models.resources import (
    GeneratedResource,
    Section,
    fhir_instant,
    urn_reference,
)


logger = logging.getLogger(__name__)

DEFAULT_TERMINOLOGY = TerminologyConfig()
DEFAULT_IDENTIFIER_SYSTEMS = IdentifierSystemsConfig()

Number = Union[int, float]


@dataclass(frozen=True)
class ObservationContext:
    """Values shared by every observation of one generation run.

    Attributes:
        person_identity: Identity of the Patient resource (subject)
        attester_identity: Identity of the Practitioner resource (performer)
        generated_at: Run clock stamped as effectiveDateTime
        terminology: Codes for the observation categories
    """

    person_identity: str
    attester_identity: str
    generated_at: datetime
    terminology: TerminologyConfig = field(default_factory=TerminologyConfig)


def identifier(system: str, value: str, type_code: str, text: str) -> dict[str, Any]:
    """Build a FHIR Identifier typed with a v2-0203 identifier type code.

    Args:
        system: Identifier namespace URI
        value: Identifier value
        type_code: One of PI, PN, MR, MD
        text: Human-readable type label

    Returns:
        FHIR Identifier dictionary
    """
    return {
        "system": system,
        "value": value,
        "type": {
            "coding": [
                {
                    "system": profiles.IDENTIFIER_TYPE_SYSTEM,
                    "code": type_code,
                    "display": profiles.IDENTIFIER_TYPES[type_code],
                }
            ],
            "text": text,
        },
    }


def person_identifiers(
    person: CanonicalPerson,
    identity: str,
    systems: IdentifierSystemsConfig = DEFAULT_IDENTIFIER_SYSTEMS,
) -> list[dict[str, Any]]:
    """Build the Patient identifier list, which is never empty.

    One entry per present source (ABHA number, ABHA address, MRN). When none
    is present, a single generated-id entry keyed on the identity is used.
    """
    identifiers = []
    if person.external_health_id:
        identifiers.append(
            identifier(systems.abha_number, person.external_health_id, "PI", "ABHA Number")
        )
    if person.external_health_address:
        identifiers.append(
            identifier(systems.abha_address, person.external_health_address, "PN", "ABHA Address")
        )
    if person.local_record_number:
        identifiers.append(
            identifier(systems.mrn, person.local_record_number, "MR", "MRN")
        )
    if not identifiers:
        identifiers.append(
            identifier(profiles.GENERATED_ID_SYSTEM, identity, "PI", "generated-id")
        )
    return identifiers


def build_person(
    person: CanonicalPerson,
    identity: str,
    systems: IdentifierSystemsConfig = DEFAULT_IDENTIFIER_SYSTEMS,
) -> GeneratedResource:
    """Build the NDHM Patient resource.

    Args:
        person: Normalized person
        identity: Patient id (reused seed or freshly coined)
        systems: Identifier system URIs

    Returns:
        Patient resource
    """
    body: dict[str, Any] = {"identifier": person_identifiers(person, identity, systems)}
    if person.display_name:
        body["name"] = [{"text": person.display_name}]
    if person.gender is not Gender.ABSENT:
        body["gender"] = person.gender.value
    if person.birth_date:
        body["birthDate"] = person.birth_date
    if person.contact_number:
        body["telecom"] = [{"system": "phone", "value": person.contact_number}]
    if person.postal_address:
        body["address"] = [{"text": person.postal_address}]

    return GeneratedResource(
        resource_type="Patient",
        identity=identity,
        profile=profiles.PATIENT_PROFILE,
        narrative=render_narrative(person.display_name),
        body=body,
    )


def build_attester(
    attester: Attester,
    identity: str,
    systems: IdentifierSystemsConfig = DEFAULT_IDENTIFIER_SYSTEMS,
) -> GeneratedResource:
    """Build the NDHM Practitioner resource.

    Both identifiers are always emitted; a missing login id becomes an empty
    value rather than a missing entry.
    """
    body = {
        "identifier": [
            identifier(
                systems.practitioner_license,
                str(attester.license_number or ""),
                "MD",
                profiles.IDENTIFIER_TYPES["MD"],
            ),
            identifier(
                systems.practitioner_login,
                str(attester.login_reference or ""),
                "PN",
                "Login id",
            ),
        ],
        "name": [{"text": attester.display_name}],
    }
    return GeneratedResource(
        resource_type="Practitioner",
        identity=identity,
        profile=profiles.PRACTITIONER_PROFILE,
        narrative=render_narrative(attester.display_name),
        body=body,
    )


def codeable_concept(concept: CodedConcept, text: Optional[str] = None) -> dict[str, Any]:
    """Render a configured concept as a FHIR CodeableConcept."""
    rendered: dict[str, Any] = {"coding": [concept.to_coding()]}
    label = text or concept.text
    if label:
        rendered["text"] = label
    return rendered


def _observation(
    identity: str,
    profile: Optional[str],
    code: dict[str, Any],
    value: dict[str, Any],
    narrative_text: str,
    context: ObservationContext,
) -> GeneratedResource:
    body: dict[str, Any] = {
        "status": "final",
        "code": code,
        "subject": {"reference": urn_reference(context.person_identity)},
        "performer": [{"reference": urn_reference(context.attester_identity)}],
        "effectiveDateTime": fhir_instant(context.generated_at),
    }
    body.update(value)
    return GeneratedResource(
        resource_type="Observation",
        identity=identity,
        profile=profile,
        narrative=render_narrative(narrative_text),
        body=body,
    )


def yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def build_physical_activity(
    summary: PhysicalActivitySummary,
    identity: str,
    context: ObservationContext,
) -> GeneratedResource:
    """Build the physical activity Observation (valueString)."""
    text = summary.text.strip() or profiles.NOT_PROVIDED
    return _observation(
        identity,
        profiles.PHYSICAL_ACTIVITY_PROFILE,
        codeable_concept(context.terminology.physical_activity),
        {"valueString": text},
        text,
        context,
    )


def build_general_assessment(
    assessment: GeneralAssessment,
    identity: str,
    context: ObservationContext,
) -> GeneratedResource:
    """Build the general assessment Observation with its pain component."""
    notes = assessment.notes.strip() or profiles.NOT_PROVIDED
    value = {
        "valueCodeableConcept": {"text": notes},
        "component": [
            {
                "code": {"text": profiles.PAIN_QUESTION},
                "valueCodeableConcept": {"text": yes_no(assessment.pain)},
            }
        ],
    }
    return _observation(
        identity,
        profiles.GENERAL_ASSESSMENT_PROFILE,
        codeable_concept(context.terminology.general_assessment),
        value,
        notes,
        context,
    )


def lifestyle_value_text(value: Union[bool, str, None]) -> str:
    """Render a lifestyle value: Yes/No for booleans, text otherwise."""
    if isinstance(value, bool):
        return yes_no(value)
    text = "" if value is None else str(value).strip()
    return text or profiles.NOT_PROVIDED


def build_lifestyle(
    item: LifestyleItem,
    identity: str,
    context: ObservationContext,
) -> GeneratedResource:
    """Build a lifestyle Observation.

    The label is carried in ``code.text``; the coding is the single configured
    lifestyle code shared by every lifestyle item.
    """
    label = item.label.strip() or context.terminology.lifestyle.text or "Lifestyle"
    value_text = lifestyle_value_text(item.value)
    return _observation(
        identity,
        profiles.LIFESTYLE_PROFILE,
        codeable_concept(context.terminology.lifestyle, text=label),
        {"valueCodeableConcept": {"text": value_text}},
        f"{label}: {value_text}",
        context,
    )


def parse_quantity(value: Any) -> Optional[Number]:
    """Parse a vital value into a number.

    Args:
        value: Value as entered (number or numeric string)

    Returns:
        int for whole-number strings, the float/int otherwise, or None when
        the value is empty, not numeric or not finite
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None

    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def build_vital(
    measurement: VitalMeasurement,
    identity: str,
    context: ObservationContext,
) -> Optional[GeneratedResource]:
    """Build a vital sign Observation with a numeric quantity.

    Args:
        measurement: Vital measurement input
        identity: Identity for the resource
        context: Shared observation context

    Returns:
        Observation without a profile tag, or None when the measurement has
        no numeric value (the measurement is dropped)
    """
    quantity = parse_quantity(measurement.value)
    if quantity is None:
        if measurement.value not in (None, ""):
            logger.warning(
                f"Dropping vital '{measurement.label}': value {measurement.value!r} is not numeric"
            )
        else:
            logger.debug(f"Dropping vital '{measurement.label}': no value recorded")
        return None

    label = measurement.label.strip() or "Measurement"
    if measurement.code:
        code: dict[str, Any] = {
            "coding": [
                {"system": profiles.LOINC_SYSTEM, "code": measurement.code, "display": label}
            ],
            "text": label,
        }
    else:
        code = {"text": label}

    value_quantity: dict[str, Any] = {"value": quantity}
    unit = measurement.unit.strip()
    if unit:
        value_quantity.update(unit=unit, system=profiles.UCUM_SYSTEM, code=unit)

    return _observation(
        identity,
        None,
        code,
        {"valueQuantity": value_quantity},
        f"{label}: {quantity} {unit}".strip(),
        context,
    )


def build_composition(
    identity: str,
    person: CanonicalPerson,
    person_identity: str,
    attester: Attester,
    attester_identity: str,
    sections: Sequence[Section],
    generated_at: datetime,
    terminology: TerminologyConfig = DEFAULT_TERMINOLOGY,
) -> GeneratedResource:
    """Build the Wellness Record Composition (document header).

    Args:
        identity: Identity for the header
        person: Subject of the document
        person_identity: Identity of the Patient resource
        attester: Author and attester of the document
        attester_identity: Identity of the Practitioner resource
        sections: Assembled sections in document order
        generated_at: Run clock stamped as the document date
        terminology: Codes including the document type

    Returns:
        Composition resource
    """
    subject: dict[str, Any] = {"reference": urn_reference(person_identity)}
    if person.display_name:
        subject["display"] = person.display_name
    author: dict[str, Any] = {"reference": urn_reference(attester_identity)}
    if attester.display_name:
        author["display"] = attester.display_name

    body = {
        "status": "final",
        "type": codeable_concept(terminology.document_type),
        "subject": subject,
        "date": fhir_instant(generated_at),
        "author": [author],
        "attester": [
            {"mode": "official", "party": {"reference": urn_reference(attester_identity)}}
        ],
        "title": profiles.DOCUMENT_TITLE,
        "section": [section.to_fhir() for section in sections],
    }
    heading = profiles.DOCUMENT_TITLE
    if person.display_name:
        heading = f"{heading} - {person.display_name}"
    return GeneratedResource(
        resource_type="Composition",
        identity=identity,
        profile=profiles.WELLNESS_RECORD_PROFILE,
        narrative=render_narrative(heading, element="h3"),
        body=body,
    )
