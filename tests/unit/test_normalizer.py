"""Unit tests for raw person record normalization."""

import pytest

from wellness_record.feed.normalizer import (
    extract_health_addresses,
    extract_identity_seed,
    normalize,
    normalize_gender,
    normalize_with_diagnostics,
    repair_date,
    select_health_address,
)
from wellness_record.models import Gender
from wellness_record.utils.exceptions import ValidationError


class TestRepairDate:
    """Test suite for date of birth repair."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("1990-08-15", "1990-08-15"),
            ("15-08-1990", "1990-08-15"),
            ("15/08/1990", "1990-08-15"),
            ("5/8/1990", "1990-08-05"),
            (" 1990-08-15 ", "1990-08-15"),
        ],
    )
    def test_accepted_formats(self, raw, expected):
        """Test ISO and day-first dates are repaired to ISO form."""
        # Arrange & Act
        result = repair_date(raw)

        # Assert
        assert result.value == expected
        assert result.diagnostics == ()

    @pytest.mark.parametrize("raw", ["15-08/1990", "August 15 1990", "1990/08/15", "abc"])
    def test_unrecognized_format_is_absent(self, raw):
        """Test unrecognized formats become None with a diagnostic."""
        # Arrange & Act
        result = repair_date(raw)

        # Assert
        assert result.value is None
        assert "Unrecognized date format" in result.diagnostics[0]

    def test_impossible_calendar_date_is_absent(self):
        """Test 30 February is rejected rather than rolled over."""
        # Arrange & Act
        result = repair_date("1985-02-30")

        # Assert
        assert result.value is None
        assert "Invalid calendar date" in result.diagnostics[0]

    @pytest.mark.parametrize("raw", [None, "", "   "])
    def test_missing_date_has_no_diagnostic(self, raw):
        """Test missing dates are absent without noise."""
        # Arrange & Act
        result = repair_date(raw)

        # Assert
        assert result.value is None
        assert result.diagnostics == ()


class TestNormalizeGender:
    """Test suite for gender normalization."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("male", Gender.MALE),
            ("Female", Gender.FEMALE),
            ("M", Gender.MALE),
            ("f", Gender.FEMALE),
            ("O", Gender.OTHER),
            ("unknown", Gender.UNKNOWN),
            ("other", Gender.OTHER),
        ],
    )
    def test_known_values(self, raw, expected):
        # Arrange & Act & Assert
        assert normalize_gender(raw).value is expected

    def test_empty_gender_is_absent(self):
        # Arrange & Act
        result = normalize_gender("")

        # Assert
        assert result.value is Gender.ABSENT
        assert result.diagnostics == ()

    def test_unrecognized_gender_is_unknown(self):
        """Test unrecognized text maps to unknown with a diagnostic."""
        # Arrange & Act
        result = normalize_gender("robot")

        # Assert
        assert result.value is Gender.UNKNOWN
        assert "robot" in result.diagnostics[0]

    def test_absent_word_is_not_accepted_as_input(self):
        # Arrange & Act
        result = normalize_gender("absent")

        # Assert
        assert result.value is Gender.UNKNOWN


class TestExtractIdentitySeed:
    """Test suite for identity seed extraction."""

    def test_valid_uuid_is_lower_cased(self):
        # Arrange & Act
        result = extract_identity_seed("3F2504E0-4F89-41D3-9A0C-0305E82C3301")

        # Assert
        assert result.value == "3f2504e0-4f89-41d3-9a0c-0305e82c3301"

    def test_invalid_reference_is_dropped(self):
        # Arrange & Act
        result = extract_identity_seed("legacy-42")

        # Assert
        assert result.value is None
        assert "not a valid UUID" in result.diagnostics[0]


class TestExtractHealthAddresses:
    """Test suite for ABHA address candidate extraction."""

    def test_mixed_items_are_encoded_and_deduplicated(self):
        """Test strings, address objects and other objects in first-seen order."""
        # Arrange
        raw = {
            "additional_attributes": {
                "abha_addresses": [
                    "a@sbx",
                    {"address": "b@abdm"},
                    {"kind": "x", "id": 7},
                    "a@sbx",
                    {"address": "b@abdm", "primary": True},
                ]
            }
        }

        # Act
        result = extract_health_addresses(raw)

        # Assert
        assert result.value == ("a@sbx", "b@abdm", '{"id":7,"kind":"x"}')

    def test_unusable_items_are_skipped_with_diagnostic(self):
        # Arrange
        raw = {"additional_attributes": {"abha_addresses": ["a@sbx", "", None, 42]}}

        # Act
        result = extract_health_addresses(raw)

        # Assert
        assert result.value == ("a@sbx",)
        assert "Skipped 3" in result.diagnostics[0]

    def test_missing_list_falls_back_to_abha_ref(self):
        # Arrange & Act
        result = extract_health_addresses({"abha_ref": "ravi@sbx"})

        # Assert
        assert result.value == ("ravi@sbx",)
        assert result.diagnostics == ()

    def test_non_list_falls_back_to_abha_ref_with_diagnostic(self):
        # Arrange
        raw = {"abha_ref": "ravi@sbx", "additional_attributes": {"abha_addresses": "ravi@sbx"}}

        # Act
        result = extract_health_addresses(raw)

        # Assert
        assert result.value == ("ravi@sbx",)
        assert "not a list" in result.diagnostics[0]

    def test_no_sources_gives_no_candidates(self):
        # Arrange & Act & Assert
        assert extract_health_addresses({}).value == ()


class TestNormalize:
    """Test suite for whole-record normalization."""

    def test_full_record(self, raw_person):
        """Test every field of a clean record is carried over."""
        # Arrange & Act
        person = normalize(raw_person)

        # Assert
        assert person.identity == "3f2504e0-4f89-41d3-9a0c-0305e82c3301"
        assert person.display_name == "Asha Verma"
        assert person.gender is Gender.FEMALE
        assert person.birth_date == "1990-08-15"
        assert person.contact_number == "9876543210"
        assert person.postal_address == "12 MG Road, Pune"
        assert person.external_health_id == "91-1234-5678-9012"
        assert person.health_address_candidates == ("asha.verma@sbx", "asha@abdm")
        assert person.external_health_address == "asha.verma@sbx"
        assert person.local_record_number == "MRN-1001"

    def test_normalization_is_idempotent(self, raw_person):
        """Test the same record always yields an equal person."""
        # Arrange & Act & Assert
        assert normalize(raw_person) == normalize(dict(raw_person))

    def test_malformed_optional_fields_never_raise(self):
        """Test a badly shaped record yields defaults and diagnostics."""
        # Arrange
        raw = {
            "name": None,
            "gender": 3,
            "dob": "31/31/2020",
            "user_ref_id": 12345,
            "additional_attributes": "oops",
        }

        # Act
        result = normalize_with_diagnostics(raw)

        # Assert
        assert result.person.display_name == ""
        assert result.person.gender is Gender.UNKNOWN
        assert result.person.birth_date is None
        assert result.person.identity is None
        assert result.person.external_health_address is None
        assert not result.person.has_health_identity
        assert len(result.diagnostics) == 3

    def test_abha_ref_is_default_selection_without_list(self):
        # Arrange & Act
        person = normalize({"name": "Ravi", "abha_ref": "ravi@sbx"})

        # Assert
        assert person.external_health_address == "ravi@sbx"
        assert person.has_health_identity


class TestSelectHealthAddress:
    """Test suite for ABHA address selection."""

    def test_select_candidate(self, person):
        # Arrange & Act
        selected = select_health_address(person, "asha@abdm")

        # Assert
        assert selected.external_health_address == "asha@abdm"
        assert person.external_health_address == "asha.verma@sbx"

    def test_clear_selection(self, person):
        # Arrange & Act
        cleared = select_health_address(person, "")

        # Assert
        assert cleared.external_health_address is None

    def test_unknown_address_rejected(self, person):
        # Arrange & Act & Assert
        with pytest.raises(ValidationError) as exc_info:
            select_health_address(person, "someone@sbx")

        assert "asha.verma@sbx" in str(exc_info.value)
