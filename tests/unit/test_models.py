"""Unit tests for generated resource and bundle models."""

from datetime import datetime, timezone

import pytest

from wellness_record.models import (
    Bundle,
    BundleEntry,
    GeneratedResource,
    LifestyleItem,
    Narrative,
    Section,
    SectionContent,
)

NARRATIVE = Narrative('<div xmlns="http://www.w3.org/1999/xhtml">x</div>')


class TestGeneratedResource:
    def test_to_fhir_is_a_copy(self):
        """Test mutating rendered JSON leaves the resource untouched."""
        # Arrange
        resource = GeneratedResource("Observation", "o-1", NARRATIVE, body={"code": {"text": "A"}})

        # Act
        rendered = resource.to_fhir()
        rendered["code"]["text"] = "B"

        # Assert
        assert resource.body["code"]["text"] == "A"

    def test_body_is_read_only(self):
        """Test the stored body is detached from the input and cannot be changed."""
        # Arrange
        body = {"code": {"text": "A"}}
        resource = GeneratedResource("Observation", "o-1", NARRATIVE, body=body)

        # Act
        body["code"] = {"text": "B"}
        body["valueString"] = "x"

        # Assert
        assert resource.body["code"] == {"text": "A"}
        assert "valueString" not in resource.body
        with pytest.raises(TypeError):
            resource.body["status"] = "final"

    def test_untagged_resource_has_no_meta(self):
        # Arrange & Act
        rendered = GeneratedResource("Observation", "o-1", NARRATIVE).to_fhir()

        # Assert
        assert list(rendered) == ["resourceType", "id", "text"]

    def test_reference(self):
        assert GeneratedResource("Patient", "p-1", NARRATIVE).reference == "urn:uuid:p-1"


class TestSection:
    def test_references_only(self):
        # Arrange
        section = Section("Vitals", SectionContent(references=["urn:uuid:a"]))

        # Act & Assert
        assert section.to_fhir() == {"title": "Vitals", "entry": [{"reference": "urn:uuid:a"}]}

    def test_fallback_only(self):
        # Arrange
        section = Section("Vitals", SectionContent(narrative=NARRATIVE))

        # Act & Assert
        assert section.to_fhir() == {"title": "Vitals", "text": NARRATIVE.to_fhir()}

    def test_empty_rejected(self):
        with pytest.raises(ValueError):
            SectionContent(references=[])


class TestBundle:
    def test_serialization_and_hash(self, tmp_path):
        # Arrange
        header = GeneratedResource("Composition", "c-1", NARRATIVE)
        bundle = Bundle(
            identity="b-1",
            timestamp=datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc),
            identifier_system="https://nrces.in/ids/bundles",
            identifier_value="v-1",
            entries=(BundleEntry("urn:uuid:c-1", header),),
        )
        output = tmp_path / "bundle.json"

        # Act
        bundle.to_file(output)

        # Assert
        assert output.read_text(encoding="utf-8") == bundle.to_json()
        assert len(bundle.sha256_hash) == 64
        assert bundle.to_dict()["timestamp"] == "2024-05-01T09:30:00+00:00"


@pytest.mark.parametrize(
    "item,blank",
    [
        (LifestyleItem("", ""), True),
        (LifestyleItem("", None), True),
        (LifestyleItem("", False), False),
        (LifestyleItem("Smoking", ""), False),
        (LifestyleItem("  ", ""), True),
        (LifestyleItem(" ", "  "), True),
        (LifestyleItem("  ", "Daily"), False),
    ],
)
def test_lifestyle_item_is_blank(item, blank):
    assert item.is_blank is blank
