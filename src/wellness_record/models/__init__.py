"""Models module.

This module provides the dataclasses shared by the feed and document packages.
"""

from wellness_record.models.observations import (
    GeneralAssessment,
    LifestyleItem,
    ObservationInput,
    ObservationInputs,
    PhysicalActivitySummary,
    VitalMeasurement,
)
from wellness_record.models.person import Attester, CanonicalPerson, Gender
from wellness_record.models.resources import (
    Bundle,
    BundleEntry,
    GeneratedResource,
    Narrative,
    Section,
    SectionContent,
)

__all__ = [
    "Attester",
    "Bundle",
    "BundleEntry",
    "CanonicalPerson",
    "Gender",
    "GeneralAssessment",
    "GeneratedResource",
    "LifestyleItem",
    "Narrative",
    "ObservationInput",
    "ObservationInputs",
    "PhysicalActivitySummary",
    "Section",
    "SectionContent",
    "VitalMeasurement",
]
