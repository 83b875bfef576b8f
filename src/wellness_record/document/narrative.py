"""XHTML narrative rendering and validation.

Every resource and every fallback section carries a narrative ``div``. The
NDHM profiles reject empty narratives, so rendering substitutes a default text
for blank input and each rendered fragment is checked for well-formedness.
"""

import logging
import re
from html import escape as html_escape
from typing import Optional

from lxml import etree

from wellness_record.models.resources import Narrative
from wellness_record.profiles import NOT_PROVIDED, XHTML_NAMESPACE
from wellness_record.utils.exceptions import ValidationError


logger = logging.getLogger(__name__)

# Characters not allowed in XML 1.0 documents
_INVALID_XML_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

XHTML_DIV_TAG = f"{{{XHTML_NAMESPACE}}}div"


def escape_xhtml_text(value: str) -> str:
    """Escape text for inclusion in an XHTML narrative.

    Example:
        >>> escape_xhtml_text("BP <120 & steady")
        'BP &lt;120 &amp; steady'
    """
    cleaned = _INVALID_XML_CHARS.sub("", value)
    return html_escape(cleaned, quote=True).replace("&#x27;", "&apos;")


def validate_narrative(div: str) -> bool:
    """Validate that a narrative fragment is a well-formed, non-empty XHTML div.

    Args:
        div: XHTML fragment

    Returns:
        True if the fragment is valid

    Raises:
        ValidationError: If the XML is malformed, the root is not an XHTML
            ``div`` or the fragment has no text
    """
    try:
        root = etree.fromstring(div.encode("utf-8"))
    except etree.XMLSyntaxError as e:
        raise ValidationError(
            f"Malformed narrative XHTML at line {e.lineno}: {e.msg}"
        ) from e

    if root.tag != XHTML_DIV_TAG:
        raise ValidationError(
            f"Narrative root must be an XHTML div, got {root.tag}"
        )
    if not "".join(root.itertext()).strip():
        raise ValidationError("Narrative div must contain text")
    return True


def render_narrative(text: Optional[str], element: Optional[str] = "p") -> Narrative:
    """Render text into a generated narrative.

    Args:
        text: Human-readable text; blank text is replaced with "Not provided"
        element: Inner XHTML element wrapping the text (``p``, ``h3``...),
                 or None to put the text directly in the div

    Returns:
        Narrative with status "generated"

    Raises:
        ValidationError: If the rendered fragment is not valid XHTML
    """
    content = escape_xhtml_text(text.strip() if text else "")
    if not content:
        content = NOT_PROVIDED
    if element:
        content = f"<{element}>{content}</{element}>"
    div = f'<div xmlns="{XHTML_NAMESPACE}">{content}</div>'
    validate_narrative(div)
    return Narrative(div=div)
