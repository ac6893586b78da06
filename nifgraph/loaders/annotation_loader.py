"""
Annotation Loader - Reads annotation records for NIF graph construction.

This module provides:
- The AnnotationRecord model (one annotated span or context)
- JSON/YAML record file loading
- RFC 5147 record construction for a whole document
- Conversion of DBpedia Spotlight annotation responses into records
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any, Iterable

import yaml
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

# Configure logging
logger = logging.getLogger(__name__)

# =============================================================================
# SPOTLIGHT TYPE PREFIXES
# =============================================================================

SPOTLIGHT_TYPE_PREFIXES = {
    "DBpedia": "http://dbpedia.org/ontology/",
    "Schema": "http://schema.org/",
    "Wikidata": "http://www.wikidata.org/entity/",
    "DUL": "http://www.ontologydesignpatterns.org/ont/dul/DUL.owl#",
    "Freebase": "http://rdf.freebase.com/ns/",
}


# =============================================================================
# PYDANTIC MODELS
# =============================================================================


class RecordRole(str, Enum):
    """Whether a record describes a whole context or a span inside one."""

    CONTEXT = "context"
    SPAN = "span"


class AnnotationRecord(BaseModel):
    """
    One annotation result: a substring of a document, or the document itself.

    A record with a reference context is a span situated in that context.
    A record without one is itself the context. Empty and missing reference
    contexts are treated the same.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    url: str = Field(alias="URL", description="Subject IRI of the span or context")
    begin_index: int = Field(alias="offset", description="Begin character offset")
    end_index: int = Field(alias="endIndex", description="End character offset")
    content: str = Field(default="", description="Text covered by the span")
    reference_context_url: str | None = Field(
        default=None,
        alias="referenceContextURL",
        description="IRI of the context this span belongs to",
    )
    resource_types: frozenset[str] = Field(
        default_factory=frozenset,
        alias="resourceTypes",
        description="Semantic class IRIs assigned to the span",
    )

    @field_validator("reference_context_url", mode="before")
    @classmethod
    def _empty_context_is_absent(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return value

    @field_validator("resource_types", mode="before")
    @classmethod
    def _coerce_types(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            return frozenset(t.strip() for t in value.split(",") if t.strip())
        return value

    @computed_field
    @property
    def role(self) -> RecordRole:
        """Return CONTEXT for standalone contexts, SPAN otherwise."""
        if self.reference_context_url is None:
            return RecordRole.CONTEXT
        return RecordRole.SPAN

    @property
    def is_context(self) -> bool:
        return self.role is RecordRole.CONTEXT


# =============================================================================
# PARSING
# =============================================================================


def parse_records(data: Iterable[dict[str, Any]] | dict[str, Any]) -> list[AnnotationRecord]:
    """
    Parse raw record mappings into AnnotationRecord objects.

    Args:
        data: List of record dicts, or a dict with a "records" list

    Returns:
        Records in input order
    """
    if isinstance(data, dict):
        data = data.get("records", [])

    records = [AnnotationRecord.model_validate(item) for item in data]
    logger.debug("Parsed %d annotation records", len(records))
    return records


def load_records(path: str | Path) -> list[AnnotationRecord]:
    """
    Load annotation records from a JSON or YAML file.

    Args:
        path: Path to a .json, .yaml or .yml file

    Returns:
        Records in file order
    """
    path = Path(path)
    suffix = path.suffix.lower()

    with open(path, "r", encoding="utf-8") as f:
        if suffix == ".json":
            data = json.load(f)
        elif suffix in (".yaml", ".yml"):
            data = yaml.safe_load(f) or []
        else:
            raise ValueError(f"Unsupported record file type: {path.suffix}. Use .json or .yaml")

    records = parse_records(data)
    logger.info("Loaded %d records from %s", len(records), path)
    return records


# =============================================================================
# DOCUMENT RECORDS
# =============================================================================


def rfc5147_uri(document_uri: str, begin: int, end: int) -> str:
    """Return the RFC 5147 fragment IRI for a character range of a document."""
    return f"{document_uri}#char={begin},{end}"


def document_records(
    document_uri: str,
    text: str,
    spans: Iterable[tuple[str, int, Iterable[str]]] = (),
) -> list[AnnotationRecord]:
    """
    Build the record set for one annotated document.

    The first record is the context covering the whole text; each span
    (surface_form, offset, types) becomes a record referencing it.
    """
    context_uri = rfc5147_uri(document_uri, 0, len(text))
    records = [
        AnnotationRecord(
            url=context_uri,
            begin_index=0,
            end_index=len(text),
            content=text,
        )
    ]

    for surface_form, offset, types in spans:
        end = offset + len(surface_form)
        records.append(
            AnnotationRecord(
                url=rfc5147_uri(document_uri, offset, end),
                begin_index=offset,
                end_index=end,
                content=surface_form,
                reference_context_url=context_uri,
                resource_types=frozenset(types),
            )
        )

    return records


def expand_spotlight_type(spotlight_type: str) -> str | None:
    """Expand a Spotlight type such as 'DBpedia:Person' to a full IRI."""
    prefix, _, local = spotlight_type.partition(":")
    if not local:
        return None
    if prefix.lower() in ("http", "https"):
        return f"{prefix.lower()}:{local}"
    base = SPOTLIGHT_TYPE_PREFIXES.get(prefix)
    if base is None:
        logger.debug("Dropping Spotlight type with unknown prefix: %s", spotlight_type)
        return None
    return base + local


def records_from_spotlight(response: dict[str, Any], document_uri: str) -> list[AnnotationRecord]:
    """
    Convert a DBpedia Spotlight JSON annotation response into records.

    Args:
        response: Parsed Spotlight response with "@text" and "Resources"
        document_uri: IRI of the annotated document (without fragment)

    Returns:
        Context record followed by one span record per annotated resource
    """
    text = response.get("@text", "")
    spans = []

    for resource in response.get("Resources") or []:
        surface_form = resource.get("@surfaceForm", "")
        offset = int(resource.get("@offset", 0))
        raw_types = [t.strip() for t in resource.get("@types", "").split(",") if t.strip()]
        types = [iri for iri in (expand_spotlight_type(t) for t in raw_types) if iri]
        spans.append((surface_form, offset, types))

    logger.info("Converted %d Spotlight resources for %s", len(spans), document_uri)
    return document_records(document_uri, text, spans)
