"""Conversion of form-style values into observation inputs.

The CLI and the ``--inputs`` JSON file describe observations the way the
wellness form does: vitals keyed by preset name, lifestyle items as
``label=value`` pairs and booleans spelled as text.
"""

from typing import Any, Mapping, Optional, Union

from wellness_record.config.schema import AttesterConfig
from wellness_record.models.observations import (
    GeneralAssessment,
    LifestyleItem,
    ObservationInputs,
    PhysicalActivitySummary,
    VitalMeasurement,
)
from wellness_record.models.person import Attester
from wellness_record.profiles import VITAL_PRESETS
from wellness_record.utils.exceptions import ValidationError


VITAL_KEYS = tuple(preset[0] for preset in VITAL_PRESETS)


def parse_lifestyle_value(value: Any) -> Union[bool, str]:
    """Interpret a lifestyle value entered as text.

    Example:
        >>> parse_lifestyle_value("False")
        False
        >>> parse_lifestyle_value("2 cups/day")
        '2 cups/day'
    """
    if isinstance(value, bool):
        return value
    text = "" if value is None else str(value).strip()
    if text.lower() == "true":
        return True
    if text.lower() == "false":
        return False
    return text


def parse_lifestyle_pair(pair: str) -> LifestyleItem:
    """Parse a ``LABEL=VALUE`` pair; a pair without ``=`` is a bare label."""
    label, _, value = pair.partition("=")
    return LifestyleItem(label=label.strip(), value=parse_lifestyle_value(value))


def vitals_from_form(values: Mapping[str, Any]) -> tuple[VitalMeasurement, ...]:
    """Build vital measurements from preset-keyed form values.

    Args:
        values: Mapping of preset key (hr, systolic, diastolic, temp, spo2,
                height, weight, bmi) to the entered value

    Returns:
        Measurements in preset order for every key present in values

    Raises:
        ValidationError: If values contains a key that is not a vital preset
    """
    unknown = sorted(set(values) - set(VITAL_KEYS))
    if unknown:
        raise ValidationError(
            f"Unknown vital sign(s): {', '.join(unknown)}. "
            f"Expected any of: {', '.join(VITAL_KEYS)}"
        )
    return tuple(
        VitalMeasurement(label=label, value=values[key], unit=unit, code=code)
        for key, label, unit, code in VITAL_PRESETS
        if values.get(key) is not None
    )


def attester_from_config(config: AttesterConfig) -> Attester:
    return Attester(
        display_name=config.name,
        license_number=config.license,
        login_reference=config.login_id,
    )


def _lifestyle_items(raw: Any) -> tuple[LifestyleItem, ...]:
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise ValidationError("'lifestyle' must be a list of {label, value} objects")
    items = []
    for entry in raw:
        if isinstance(entry, str):
            items.append(parse_lifestyle_pair(entry))
        elif isinstance(entry, Mapping):
            items.append(
                LifestyleItem(
                    label=str(entry.get("label") or "").strip(),
                    value=parse_lifestyle_value(entry.get("value")),
                )
            )
        else:
            raise ValidationError(f"Invalid lifestyle item: {entry!r}")
    return tuple(items)


def _vitals(raw: Any) -> tuple[VitalMeasurement, ...]:
    if raw is None:
        return ()
    if isinstance(raw, Mapping):
        return vitals_from_form(raw)
    if not isinstance(raw, list):
        raise ValidationError("'vitals' must be an object keyed by vital name or a list")

    measurements = []
    for entry in raw:
        if not isinstance(entry, Mapping) or not entry.get("label"):
            raise ValidationError(f"Vital entries need at least a label: {entry!r}")
        measurements.append(
            VitalMeasurement(
                label=str(entry["label"]),
                value=entry.get("value"),
                unit=str(entry.get("unit") or ""),
                code=entry.get("code") or None,
            )
        )
    return tuple(measurements)


def observation_inputs_from_dict(data: Mapping[str, Any]) -> ObservationInputs:
    """Build ObservationInputs from a JSON document.

    Expected shape::

        {
            "physical_activity": "Walks 30 minutes daily",
            "general_assessment": {"notes": "Alert", "pain": false},
            "lifestyle": [{"label": "Smoking", "value": false}, "Diet=Vegetarian"],
            "vitals": {"hr": 72, "systolic": 120}
        }

    Args:
        data: Parsed JSON object

    Returns:
        ObservationInputs

    Raises:
        ValidationError: If a field has the wrong shape
    """
    if not isinstance(data, Mapping):
        raise ValidationError("Observation inputs must be a JSON object")

    assessment = data.get("general_assessment") or {}
    if not isinstance(assessment, Mapping):
        raise ValidationError("'general_assessment' must be an object with notes and pain")

    return ObservationInputs(
        physical_activity=PhysicalActivitySummary(
            text=str(data.get("physical_activity") or "")
        ),
        general_assessment=GeneralAssessment(
            notes=str(assessment.get("notes") or ""),
            pain=parse_lifestyle_value(assessment.get("pain")) is True,
        ),
        lifestyle=_lifestyle_items(data.get("lifestyle")),
        vitals=_vitals(data.get("vitals")),
    )


def merge_inputs(
    base: Optional[ObservationInputs],
    physical_activity: Optional[str] = None,
    general_notes: Optional[str] = None,
    pain: Optional[bool] = None,
    lifestyle: tuple[LifestyleItem, ...] = (),
    vitals: tuple[VitalMeasurement, ...] = (),
) -> ObservationInputs:
    """Overlay explicit values on top of inputs loaded from a file.

    Scalars replace the file values when given; lifestyle items and vitals
    are appended after the file's own.
    """
    base = base or ObservationInputs()
    activity = base.physical_activity
    if physical_activity is not None:
        activity = PhysicalActivitySummary(text=physical_activity)
    assessment = GeneralAssessment(
        notes=base.general_assessment.notes if general_notes is None else general_notes,
        pain=base.general_assessment.pain if pain is None else pain,
    )
    return ObservationInputs(
        physical_activity=activity,
        general_assessment=assessment,
        lifestyle=base.lifestyle + tuple(lifestyle),
        vitals=base.vitals + tuple(vitals),
    )
