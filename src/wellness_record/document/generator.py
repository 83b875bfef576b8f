"""Wellness Record generation.

WellnessRecordGenerator turns a selected person, the practitioner and the
observation inputs into one FHIR document bundle. It is either IDLE (nothing
generated, possibly with a refusal message) or GENERATED (holding the last
bundle).
"""

import logging
import time
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from wellness_record.config.schema import Config
from wellness_record.document.builders import (
    ObservationContext,
    build_attester,
    build_composition,
    build_general_assessment,
    build_lifestyle,
    build_person,
    build_physical_activity,
    build_vital,
)
from wellness_record.document.composer import compose_bundle
from wellness_record.document.identity import IdentityCoiner
from wellness_record.document.inputs import attester_from_config
from wellness_record.document.sections import assemble_sections
from wellness_record.logging_audit import log_audit_event
from wellness_record.models.observations import ObservationInputs
from wellness_record.models.person import Attester, CanonicalPerson
from wellness_record.models.resources import Bundle, GeneratedResource
from wellness_record.utils.exceptions import PreconditionError


logger = logging.getLogger(__name__)


class GenerationState(Enum):
    IDLE = "idle"
    GENERATED = "generated"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def check_preconditions(
    person: Optional[CanonicalPerson], attester: Optional[Attester]
) -> None:
    """Check the inputs required before any resource is built.

    Args:
        person: Selected person
        attester: Practitioner

    Raises:
        PreconditionError: For the first missing input, in order: person,
            ABHA address or number, practitioner name and license
    """
    if person is None:
        raise PreconditionError("Please select a patient.", field="person")
    if not person.has_health_identity:
        raise PreconditionError("Please select ABHA address.", field="abha_address")
    if attester is None or not attester.display_name.strip():
        raise PreconditionError(
            "Practitioner name and license required (missing: practitioner name).",
            field="name",
        )
    if not str(attester.license_number or "").strip():
        raise PreconditionError(
            "Practitioner name and license required (missing: practitioner license).",
            field="license",
        )


def build_observations(
    observations: ObservationInputs,
    coiner: IdentityCoiner,
    context: ObservationContext,
) -> list[GeneratedResource]:
    """Build observation resources in generation order.

    Vitals come first in input order (measurements without a numeric value
    are dropped), then physical activity, general assessment and the
    lifestyle items. Lifestyle items with neither label nor value are skipped.
    """
    resources = []
    for measurement in observations.vitals:
        vital = build_vital(measurement, coiner.new_identity(), context)
        if vital is not None:
            resources.append(vital)

    resources.append(
        build_physical_activity(observations.physical_activity, coiner.new_identity(), context)
    )
    resources.append(
        build_general_assessment(observations.general_assessment, coiner.new_identity(), context)
    )

    for item in observations.lifestyle:
        if item.is_blank:
            logger.debug("Skipping blank lifestyle item")
            continue
        resources.append(build_lifestyle(item, coiner.new_identity(), context))
    return resources


class WellnessRecordGenerator:
    """Generates Wellness Record document bundles.

    Example:
        >>> generator = WellnessRecordGenerator(load_config())
        >>> bundle = generator.generate(person, observations=inputs)
        >>> generator.state
        <GenerationState.GENERATED: 'generated'>
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize the generator.

        Args:
            config: Configuration (attester defaults, terminology, identifier
                    systems). Defaults to Config().
            clock: Returns the generation time. Defaults to UTC now. Naive
                   values are taken as local time and converted to UTC.
        """
        self.config = config or Config()
        self._clock = clock or utc_now
        self._state = GenerationState.IDLE
        self._bundle: Optional[Bundle] = None
        self._last_message = ""

    @property
    def state(self) -> GenerationState:
        return self._state

    @property
    def bundle(self) -> Optional[Bundle]:
        """The last generated bundle, or None when idle."""
        return self._bundle

    @property
    def last_message(self) -> str:
        """Outcome message of the last generate() call."""
        return self._last_message

    def reset(self) -> None:
        """Discard the last output and return to IDLE."""
        self._bundle = None
        self._last_message = ""
        self._state = GenerationState.IDLE

    def generate(
        self,
        person: Optional[CanonicalPerson],
        attester: Optional[Attester] = None,
        observations: Optional[ObservationInputs] = None,
        seed: Optional[int] = None,
    ) -> Bundle:
        """Generate a Wellness Record bundle.

        Args:
            person: Selected person
            attester: Practitioner; defaults to the configured attester
            observations: Observation inputs; defaults to an empty form
            seed: Seed for deterministic identities (reproducible output)

        Returns:
            The composed document bundle

        Raises:
            PreconditionError: If a required input is missing. The generator
                is left IDLE with the message on ``last_message``.
        """
        start_time = time.time()
        self.reset()

        if attester is None:
            attester = attester_from_config(self.config.attester)
        try:
            check_preconditions(person, attester)
        except PreconditionError as e:
            self._last_message = str(e)
            log_audit_event(
                "GENERATION_REFUSED",
                {"status": "failure", "error_message": str(e), "field": e.field},
            )
            raise

        generated_at = self._clock()
        if generated_at.tzinfo is None:
            # FHIR instants carry an offset; naive clock values are local time
            logger.warning("Generation clock returned a naive datetime; converting to UTC")
            generated_at = generated_at.astimezone(timezone.utc)
        coiner = IdentityCoiner(seed)
        systems = self.config.identifier_systems
        terminology = self.config.terminology

        patient = build_person(person, coiner.reuse_or_coin(person.identity), systems)
        practitioner = build_attester(attester, coiner.new_identity(), systems)
        context = ObservationContext(
            person_identity=patient.identity,
            attester_identity=practitioner.identity,
            generated_at=generated_at,
            terminology=terminology,
        )
        resources = build_observations(observations or ObservationInputs(), coiner, context)
        sections = assemble_sections(resources)
        header = build_composition(
            coiner.new_identity(),
            person,
            patient.identity,
            attester,
            practitioner.identity,
            sections,
            generated_at,
            terminology,
        )
        bundle = compose_bundle(
            header, patient, practitioner, resources, coiner, generated_at, systems.bundle
        )

        self._bundle = bundle
        self._state = GenerationState.GENERATED
        self._last_message = f"Bundle generated with {len(bundle.entries)} resources."
        log_audit_event(
            "BUNDLE_GENERATED",
            {
                "status": "success",
                "resource_count": len(bundle.entries),
                "bundle_id": bundle.identity,
                "duration": time.time() - start_time,
            },
        )
        return bundle
