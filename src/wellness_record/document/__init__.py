"""Document module.

This module builds FHIR resources from normalized inputs and composes them
into Wellness Record document bundles.
"""

from wellness_record.document.composer import (
    check_bundle_integrity,
    compose_bundle,
    validate_fhir_bundle,
)
from wellness_record.document.generator import (
    GenerationState,
    WellnessRecordGenerator,
    check_preconditions,
)
from wellness_record.document.identity import IdentityCoiner, is_uuid, new_identity, reuse_or_coin
from wellness_record.document.inputs import (
    attester_from_config,
    observation_inputs_from_dict,
    parse_lifestyle_value,
    vitals_from_form,
)
from wellness_record.document.narrative import render_narrative, validate_narrative
from wellness_record.document.sections import assemble_sections, content_or_fallback

__all__ = [
    "GenerationState",
    "IdentityCoiner",
    "WellnessRecordGenerator",
    "assemble_sections",
    "attester_from_config",
    "check_bundle_integrity",
    "check_preconditions",
    "compose_bundle",
    "content_or_fallback",
    "is_uuid",
    "new_identity",
    "observation_inputs_from_dict",
    "parse_lifestyle_value",
    "render_narrative",
    "reuse_or_coin",
    "validate_fhir_bundle",
    "validate_narrative",
    "vitals_from_form",
]
