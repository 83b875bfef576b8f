"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across all test suites
(unit and integration tests).
"""

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator

import pytest

from wellness_record.config import Config
from wellness_record.document.builders import ObservationContext
from wellness_record.models import (
    Attester,
    CanonicalPerson,
    GeneralAssessment,
    Gender,
    LifestyleItem,
    ObservationInputs,
    PhysicalActivitySummary,
    VitalMeasurement,
)

FIXED_TIME = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def project_root() -> Path:
    """
    Return the project root directory.

    Returns:
        Path: Absolute path to the project root directory.
    """
    return Path(__file__).parent.parent


@pytest.fixture
def fixtures_dir() -> Path:
    """
    Return the test fixtures directory path.

    Returns:
        Path: Absolute path to the test fixtures directory.
    """
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def patients_json(fixtures_dir: Path) -> Path:
    return fixtures_dir / "patients.json"


@pytest.fixture
def patients_csv(fixtures_dir: Path) -> Path:
    return fixtures_dir / "patients.csv"


@pytest.fixture
def fixed_clock():
    """Clock returning a fixed generation time."""
    return lambda: FIXED_TIME


@pytest.fixture
def config() -> Config:
    return Config()


@pytest.fixture
def raw_person() -> dict[str, Any]:
    """
    Return a raw person record as found in the input feed.

    Returns:
        dict: Raw person record with ABHA number and addresses.
    """
    return {
        "user_ref_id": "3F2504E0-4F89-41D3-9A0C-0305E82C3301",
        "user_id": "MRN-1001",
        "name": "Asha Verma",
        "gender": "F",
        "dob": "15-08-1990",
        "mobile": "9876543210",
        "address": "12 MG Road, Pune",
        "abha_ref": "91-1234-5678-9012",
        "additional_attributes": {"abha_addresses": ["asha.verma@sbx", "asha@abdm"]},
    }


@pytest.fixture
def person() -> CanonicalPerson:
    """
    Return a normalized person with ABHA number and address.

    Returns:
        CanonicalPerson: Person ready for document generation.
    """
    return CanonicalPerson(
        identity="3f2504e0-4f89-41d3-9a0c-0305e82c3301",
        display_name="Asha Verma",
        gender=Gender.FEMALE,
        birth_date="1990-08-15",
        contact_number="9876543210",
        postal_address="12 MG Road, Pune",
        external_health_id="91-1234-5678-9012",
        health_address_candidates=("asha.verma@sbx", "asha@abdm"),
        external_health_address="asha.verma@sbx",
        local_record_number="MRN-1001",
    )


@pytest.fixture
def attester() -> Attester:
    return Attester(display_name="Dr. ABC", license_number="LIC-1234", login_reference="pract-001")


@pytest.fixture
def observation_context() -> ObservationContext:
    """Context shared by observation builders in unit tests."""
    return ObservationContext(
        person_identity="11111111-1111-4111-8111-111111111111",
        attester_identity="22222222-2222-4222-8222-222222222222",
        generated_at=FIXED_TIME,
    )


@pytest.fixture
def full_inputs() -> ObservationInputs:
    """
    Return observation inputs covering every section.

    Returns:
        ObservationInputs: Two vitals, activity, assessment and two lifestyle items.
    """
    return ObservationInputs(
        physical_activity=PhysicalActivitySummary("Walks 30 minutes daily"),
        general_assessment=GeneralAssessment(notes="Alert and oriented", pain=True),
        lifestyle=(
            LifestyleItem("Smoking", False),
            LifestyleItem("Diet", "Vegetarian"),
        ),
        vitals=(
            VitalMeasurement("Heart rate", "72", "beats/min", "8867-4"),
            VitalMeasurement("SpO2", 98, "%", "59408-5"),
        ),
    )


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """Remove log handlers added by configure_logging during a test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    root_logger.setLevel(level)
