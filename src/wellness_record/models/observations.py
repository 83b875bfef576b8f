"""Observation input models.

Each dataclass is one variant of the observation inputs a user can record on a
wellness form. Inputs are plain values; coding happens in the resource builders.
"""

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class PhysicalActivitySummary:
    """Free-text summary of the person's physical activity."""

    text: str = ""


@dataclass(frozen=True)
class GeneralAssessment:
    """General assessment notes with the current-pain flag."""

    notes: str = ""
    pain: bool = False


@dataclass(frozen=True)
class LifestyleItem:
    """One lifestyle observation, e.g. ``LifestyleItem("Smoking", False)``.

    Attributes:
        label: Human-readable name of what is observed
        value: Boolean (rendered Yes/No) or free text
    """

    label: str = ""
    value: Union[bool, str, None] = ""

    @property
    def is_blank(self) -> bool:
        """Check if neither label nor value was entered."""
        if self.label.strip():
            return False
        return self.value is None or (isinstance(self.value, str) and not self.value.strip())


@dataclass(frozen=True)
class VitalMeasurement:
    """A numeric vital sign or body measurement.

    Attributes:
        label: Display label (e.g. "Heart rate")
        value: Numeric value as entered; None or "" means not measured
        unit: UCUM unit string (e.g. "beats/min")
        code: LOINC code, or None for a text-only classification
    """

    label: str
    value: Union[int, float, str, None] = None
    unit: str = ""
    code: Optional[str] = None


ObservationInput = Union[
    PhysicalActivitySummary, GeneralAssessment, LifestyleItem, VitalMeasurement
]


@dataclass(frozen=True)
class ObservationInputs:
    """All observation inputs for one generation run.

    Attributes:
        physical_activity: The single physical activity summary
        general_assessment: The single general assessment
        lifestyle: Repeatable lifestyle items in entry order
        vitals: Vital measurements in entry order
    """

    physical_activity: PhysicalActivitySummary = field(
        default_factory=PhysicalActivitySummary
    )
    general_assessment: GeneralAssessment = field(default_factory=GeneralAssessment)
    lifestyle: tuple[LifestyleItem, ...] = ()
    vitals: tuple[VitalMeasurement, ...] = ()
