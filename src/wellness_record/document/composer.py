"""Bundle composition and reference integrity checks.

The composer places the header, person, attester and observations into one
document bundle. Every ``reference`` inside the bundle must resolve to the
``fullUrl`` of one of its entries.
"""

import logging
from datetime import datetime
from typing import Any, Iterator, Sequence

from fhir.resources.R4B.bundle import Bundle as FHIRBundle
from pydantic import ValidationError

from wellness_record.document.identity import IdentityCoiner
from wellness_record.models.resources import Bundle, BundleEntry, GeneratedResource
from wellness_record.profiles import BUNDLE_IDENTIFIER_SYSTEM
from wellness_record.utils.exceptions import BundleIntegrityError


logger = logging.getLogger(__name__)

HEADER_RESOURCE_TYPE = "Composition"


def collect_references(node: Any) -> Iterator[str]:
    """Yield every ``reference`` string found in a FHIR JSON structure.

    Args:
        node: Resource dictionary, list or scalar

    Yields:
        Reference values in document order
    """
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "reference" and isinstance(value, str):
                yield value
            else:
                yield from collect_references(value)
    elif isinstance(node, list):
        for item in node:
            yield from collect_references(item)


def without_empty_strings(node: Any) -> Any:
    """Copy a FHIR JSON structure, leaving out empty string values."""
    if isinstance(node, dict):
        return {
            key: without_empty_strings(value) for key, value in node.items() if value != ""
        }
    if isinstance(node, list):
        return [without_empty_strings(item) for item in node]
    return node


def validate_fhir_bundle(bundle: Bundle) -> None:
    """Validate a bundle against the FHIR R4B base resource models.

    NDHM profile rules are not checked. The Practitioner login identifier
    keeps an empty value when no login id is configured; FHIR JSON has no
    empty strings, so such values are left out of the validated copy.

    Raises:
        BundleIntegrityError: If a resource does not conform to its base model
    """
    try:
        FHIRBundle.model_validate(without_empty_strings(bundle.to_dict()))
    except ValidationError as e:
        raise BundleIntegrityError(
            f"Bundle {bundle.identity} does not conform to the FHIR base resources: {e}"
        ) from e


def check_bundle_integrity(bundle: Bundle) -> None:
    """Verify the reference invariants of a composed bundle.

    Reference checks run first; the bundle is then validated against the FHIR
    R4B base models.

    Args:
        bundle: Bundle to check

    Raises:
        BundleIntegrityError: If the header is not first, an identity repeats,
            a fullUrl does not match its resource, a reference dangles, or a
            resource breaks its FHIR base model
    """
    if not bundle.entries or bundle.header.resource_type != HEADER_RESOURCE_TYPE:
        raise BundleIntegrityError(
            f"First bundle entry must be the {HEADER_RESOURCE_TYPE} header"
        )

    seen: set[str] = set()
    for entry in bundle.entries:
        identity = entry.resource.identity
        if identity in seen:
            raise BundleIntegrityError(f"Identity {identity} used by more than one entry")
        seen.add(identity)
        if entry.full_url != entry.resource.reference:
            raise BundleIntegrityError(
                f"fullUrl {entry.full_url} does not match resource id {identity}"
            )

    full_urls = {entry.full_url for entry in bundle.entries}
    for entry in bundle.entries:
        for reference in collect_references(entry.resource.to_fhir()):
            if reference not in full_urls:
                raise BundleIntegrityError(
                    f"{entry.resource.resource_type}/{entry.resource.identity} "
                    f"references {reference}, which is not in the bundle"
                )

    validate_fhir_bundle(bundle)


def compose_bundle(
    header: GeneratedResource,
    person: GeneratedResource,
    attester: GeneratedResource,
    observations: Sequence[GeneratedResource],
    coiner: IdentityCoiner,
    generated_at: datetime,
    identifier_system: str = BUNDLE_IDENTIFIER_SYSTEM,
) -> Bundle:
    """Compose the document bundle and check its integrity.

    Args:
        header: Composition resource
        person: Patient resource
        attester: Practitioner resource
        observations: Observations in generation order
        coiner: Coiner of the current run, used for the bundle id and identifier
        generated_at: Bundle timestamp
        identifier_system: System of the document identifier

    Returns:
        Document bundle with header, person, attester and observations in order

    Raises:
        BundleIntegrityError: If the composed bundle breaks a reference invariant
    """
    resources = [header, person, attester, *observations]
    bundle = Bundle(
        identity=coiner.new_identity(),
        timestamp=generated_at,
        identifier_system=identifier_system,
        identifier_value=coiner.new_identity(),
        entries=tuple(
            BundleEntry(full_url=resource.reference, resource=resource)
            for resource in resources
        ),
    )
    check_bundle_integrity(bundle)
    logger.debug(f"Composed bundle {bundle.identity} with {len(bundle.entries)} entries")
    return bundle
