"""Integration test fixtures and configuration.

This module provides fixtures for end-to-end generation tests:
- A generator with a fixed clock
- A feed file written to the test directory
"""

import json
from pathlib import Path

import pytest

from wellness_record.config import Config
from wellness_record.document import WellnessRecordGenerator


@pytest.fixture
def generator(fixed_clock) -> WellnessRecordGenerator:
    return WellnessRecordGenerator(Config(), clock=fixed_clock)


@pytest.fixture
def feed_file(tmp_path: Path, raw_person) -> Path:
    """Feed with one complete person and one without identifiers."""
    path = tmp_path / "patients.json"
    path.write_text(
        json.dumps([raw_person, {"name": "Walk-in", "gender": "U"}]),
        encoding="utf-8",
    )
    return path
