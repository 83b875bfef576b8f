"""Unit tests for XHTML narrative rendering."""

import pytest

from wellness_record.document.narrative import (
    escape_xhtml_text,
    render_narrative,
    validate_narrative,
)
from wellness_record.utils.exceptions import ValidationError

XHTML = 'xmlns="http://www.w3.org/1999/xhtml"'


class TestRenderNarrative:
    """Test suite for render_narrative."""

    def test_paragraph(self):
        # Arrange & Act
        narrative = render_narrative("Asha Verma")

        # Assert
        assert narrative.status == "generated"
        assert narrative.div == f"<div {XHTML}><p>Asha Verma</p></div>"

    def test_bare_text(self):
        # Arrange & Act
        narrative = render_narrative("Lifestyle", element=None)

        # Assert
        assert narrative.div == f"<div {XHTML}>Lifestyle</div>"

    def test_heading(self):
        # Arrange & Act & Assert
        assert "<h3>Wellness Record - Asha</h3>" in render_narrative(
            "Wellness Record - Asha", element="h3"
        ).div

    @pytest.mark.parametrize("text", [None, "", "   ", "\x00\x01"])
    def test_blank_text_is_never_empty(self, text):
        """Test blank input falls back to 'Not provided'."""
        # Arrange & Act
        narrative = render_narrative(text)

        # Assert
        assert "<p>Not provided</p>" in narrative.div

    def test_markup_is_escaped(self):
        """Test user text cannot break the XHTML."""
        # Arrange & Act
        narrative = render_narrative("<b>BP</b> & 'ok'")

        # Assert
        assert "&lt;b&gt;BP&lt;/b&gt; &amp; &apos;ok&apos;" in narrative.div
        assert validate_narrative(narrative.div)


class TestValidateNarrative:
    """Test suite for validate_narrative."""

    def test_malformed_xml(self):
        with pytest.raises(ValidationError, match="Malformed narrative"):
            validate_narrative(f"<div {XHTML}><p>open</div>")

    def test_wrong_namespace(self):
        with pytest.raises(ValidationError, match="XHTML div"):
            validate_narrative("<div><p>text</p></div>")

    def test_empty_div(self):
        with pytest.raises(ValidationError, match="must contain text"):
            validate_narrative(f"<div {XHTML}><p> </p></div>")


def test_escape_strips_control_characters():
    assert escape_xhtml_text("a\x07b") == "ab"
