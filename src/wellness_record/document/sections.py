"""Section assembly for the Wellness Record document header.

The four sections always appear, in a fixed order. A section either lists the
observations that belong to it or carries a narrative saying nothing was
recorded.
"""

from typing import Callable, Optional, Sequence

from wellness_record import profiles
from wellness_record.document.narrative import render_narrative
from wellness_record.models.resources import GeneratedResource, Section, SectionContent


VITALS_TITLE = "Vitals"
PHYSICAL_ACTIVITY_TITLE = "Physical Activity"
GENERAL_ASSESSMENT_TITLE = "General Assessment"
LIFESTYLE_TITLE = "Lifestyle"

SECTION_ORDER = (
    VITALS_TITLE,
    PHYSICAL_ACTIVITY_TITLE,
    GENERAL_ASSESSMENT_TITLE,
    LIFESTYLE_TITLE,
)


def content_or_fallback(
    references: Sequence[str],
    placeholder: Optional[str],
    fallback: str,
) -> SectionContent:
    """Choose between the reference list and the fallback narrative.

    Args:
        references: Member references in generation order
        placeholder: Bare-text narrative shown alongside a non-empty list,
                     or None for no narrative
        fallback: Bare-text narrative used when there are no members

    Returns:
        SectionContent holding either the references or the fallback
    """
    if references:
        narrative = render_narrative(placeholder, element=None) if placeholder else None
        return SectionContent(references=tuple(references), narrative=narrative)
    return SectionContent(narrative=render_narrative(fallback, element=None))


def _with_profile(profile: str) -> Callable[[GeneratedResource], bool]:
    return lambda resource: resource.profile == profile


# (title, membership rule, placeholder, fallback) in document order
SECTION_RULES: tuple[tuple[str, Callable[[GeneratedResource], bool], Optional[str], str], ...] = (
    (
        VITALS_TITLE,
        lambda resource: resource.has_quantity,
        None,
        "No vitals recorded",
    ),
    (
        PHYSICAL_ACTIVITY_TITLE,
        _with_profile(profiles.PHYSICAL_ACTIVITY_PROFILE),
        "Physical activity",
        "No physical activity recorded",
    ),
    (
        GENERAL_ASSESSMENT_TITLE,
        _with_profile(profiles.GENERAL_ASSESSMENT_PROFILE),
        "General assessment",
        "No general assessment recorded",
    ),
    (
        LIFESTYLE_TITLE,
        _with_profile(profiles.LIFESTYLE_PROFILE),
        "Lifestyle",
        "No lifestyle observations recorded",
    ),
)


def assemble_sections(observations: Sequence[GeneratedResource]) -> list[Section]:
    """Group observations into the four document sections.

    Args:
        observations: Observation resources in generation order

    Returns:
        Vitals, Physical Activity, General Assessment and Lifestyle sections
    """
    sections = []
    for title, is_member, placeholder, fallback in SECTION_RULES:
        references = [
            resource.reference for resource in observations if is_member(resource)
        ]
        sections.append(
            Section(title, content_or_fallback(references, placeholder, fallback))
        )
    return sections
