"""Wellness Record generation example.

This module shows the programmatic workflow behind the ``record generate``
command: load the person feed, pick a person and ABHA address, enter
observations and save the document bundle.
"""

import logging
from pathlib import Path

from wellness_record.config import load_config
from wellness_record.document import WellnessRecordGenerator, attester_from_config
from wellness_record.feed import load_feed, select_health_address
from wellness_record.models import (
    GeneralAssessment,
    LifestyleItem,
    ObservationInputs,
    PhysicalActivitySummary,
    VitalMeasurement,
)
from wellness_record.utils.exceptions import PreconditionError

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main() -> None:
    config = load_config()

    feed = load_feed(Path("examples/patients_sample.json"))
    print(feed.message)
    if not feed.persons:
        return

    person = feed.persons[0]
    print(f"Selected: {person.display_name}")
    print(f"ABHA addresses: {', '.join(person.health_address_candidates)}")
    person = select_health_address(person, person.health_address_candidates[-1])

    observations = ObservationInputs(
        physical_activity=PhysicalActivitySummary("Brisk walk, 30 minutes daily"),
        general_assessment=GeneralAssessment(notes="Alert and oriented", pain=False),
        lifestyle=(
            LifestyleItem("Smoking", False),
            LifestyleItem("Diet", "Vegetarian"),
        ),
        vitals=(
            VitalMeasurement("Heart rate", 72, "beats/min", "8867-4"),
            VitalMeasurement("SpO2", 98, "%", "59408-5"),
        ),
    )

    generator = WellnessRecordGenerator(config)
    try:
        bundle = generator.generate(
            person, attester_from_config(config.attester), observations
        )
    except PreconditionError as e:
        print(f"Generation refused: {e}")
        return

    output = Path("wellness-record.json")
    bundle.to_file(output)
    print(generator.last_message)
    print(f"Saved to {output} (SHA256 {bundle.sha256_hash[:12]}...)")


if __name__ == "__main__":
    main()
