"""Generated FHIR resource, section and bundle models.

These dataclasses hold the output of one generation run. They are frozen and
render to FHIR R4 JSON through ``to_fhir()`` / ``to_dict()``.
"""

import copy
import hashlib
import json
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping, Optional

URN_UUID_PREFIX = "urn:uuid:"


def fhir_instant(moment: datetime) -> str:
    """Format a timezone-aware datetime as a FHIR instant/dateTime string."""
    return moment.isoformat(timespec="seconds")


def urn_reference(identity: str) -> str:
    """Build the bundle-local reference for a coined identity."""
    return f"{URN_UUID_PREFIX}{identity}"


@dataclass(frozen=True)
class Narrative:
    """Human-readable narrative of a resource or section.

    Attributes:
        div: XHTML fragment rooted at a ``div`` in the XHTML namespace
        status: FHIR narrative status (always "generated" here)
    """

    div: str
    status: str = "generated"

    def to_fhir(self) -> dict[str, str]:
        return {"status": self.status, "div": self.div}


@dataclass(frozen=True)
class GeneratedResource:
    """A typed resource produced by a resource builder.

    Attributes:
        resource_type: FHIR resource type (Patient, Practitioner, Observation...)
        identity: Freshly coined (or reused, for Patient) UUID
        narrative: Non-empty narrative fallback
        profile: Profile the resource declares conformance to, None if untagged
        body: Resource-specific FHIR fields. Stored as a read-only copy of
              the mapping given; nested values must not be edited.
    """

    resource_type: str
    identity: str
    narrative: Narrative
    profile: Optional[str] = None
    body: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "body", MappingProxyType(copy.deepcopy(dict(self.body))))

    @property
    def reference(self) -> str:
        """Bundle-local reference to this resource."""
        return urn_reference(self.identity)

    @property
    def has_quantity(self) -> bool:
        """Check if the resource carries a numeric quantity value."""
        return "valueQuantity" in self.body

    def to_fhir(self) -> dict[str, Any]:
        """Render the resource as FHIR JSON.

        Returns:
            New dictionary; mutating it does not affect this resource
        """
        resource: dict[str, Any] = {
            "resourceType": self.resource_type,
            "id": self.identity,
        }
        if self.profile:
            resource["meta"] = {"profile": [self.profile]}
        resource["text"] = self.narrative.to_fhir()
        resource.update(copy.deepcopy(dict(self.body)))
        return resource


@dataclass(frozen=True)
class SectionContent:
    """Content of a document section: references or a narrative fallback.

    A section either lists at least one reference (optionally with a
    placeholder narrative) or carries only a narrative. An empty reference
    list without narrative cannot be constructed.

    Attributes:
        references: Ordered bundle-local references
        narrative: Placeholder or fallback narrative
    """

    references: tuple[str, ...] = ()
    narrative: Optional[Narrative] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "references", tuple(self.references))
        if not self.references and self.narrative is None:
            raise ValueError(
                "Section content needs at least one reference or a narrative fallback"
            )

    @property
    def is_fallback(self) -> bool:
        """Check if this content is the narrative-only fallback branch."""
        return not self.references


@dataclass(frozen=True)
class Section:
    """A titled section of the document header."""

    title: str
    content: SectionContent

    def to_fhir(self) -> dict[str, Any]:
        section: dict[str, Any] = {"title": self.title}
        if self.content.references:
            section["entry"] = [
                {"reference": reference} for reference in self.content.references
            ]
        if self.content.narrative is not None:
            section["text"] = self.content.narrative.to_fhir()
        return section


@dataclass(frozen=True)
class BundleEntry:
    """One (fullUrl, resource) pair of a bundle."""

    full_url: str
    resource: GeneratedResource


@dataclass(frozen=True)
class Bundle:
    """The FHIR document bundle produced by one generation run.

    Attributes:
        identity: Bundle id (fresh UUID)
        timestamp: Generation time (timezone-aware)
        identifier_system: System URI of the document identifier
        identifier_value: Opaque run-scoped document identifier
        entries: Header first, then person, attester and observations
    """

    identity: str
    timestamp: datetime
    identifier_system: str
    identifier_value: str
    entries: tuple[BundleEntry, ...] = ()

    @property
    def header(self) -> GeneratedResource:
        """The document header (Composition) resource."""
        return self.entries[0].resource

    def resources(self) -> Iterator[GeneratedResource]:
        for entry in self.entries:
            yield entry.resource

    def resolve(self, reference: str) -> Optional[GeneratedResource]:
        """Resolve a bundle-local reference to its resource.

        Args:
            reference: Reference string such as ``urn:uuid:<id>``

        Returns:
            The matching resource, or None if nothing in the bundle matches
        """
        for entry in self.entries:
            if entry.full_url == reference:
                return entry.resource
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "resourceType": "Bundle",
            "id": self.identity,
            "type": "document",
            "identifier": {
                "system": self.identifier_system,
                "value": self.identifier_value,
            },
            "timestamp": fhir_instant(self.timestamp),
            "entry": [
                {"fullUrl": entry.full_url, "resource": entry.resource.to_fhir()}
                for entry in self.entries
            ],
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    @property
    def sha256_hash(self) -> str:
        """SHA256 of the serialized document, for integrity verification."""
        return hashlib.sha256(self.to_json().encode("utf-8")).hexdigest()

    def to_file(self, output_path: Path) -> None:
        """Save the bundle JSON to file.

        Args:
            output_path: Path where JSON should be saved

        Raises:
            OSError: If file cannot be written
        """
        output_path.write_text(self.to_json(), encoding="utf-8")
