"""
Triple Generator - Converts annotation records to NIF RDF triples.

Generates the RFC 5147 offset-addressed string description of every
record according to the NIF core vocabulary.
"""

import logging
from dataclasses import dataclass
from typing import Iterable

from rdflib import Graph, Literal, Namespace, URIRef

from nifgraph.loaders import AnnotationRecord, RecordRole

logger = logging.getLogger(__name__)


# =============================================================================
# NAMESPACE DEFINITIONS
# =============================================================================

RDF_CORE = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"

# Internationalization Tag Set (typed literal / annotation target) namespace
ITSRDF_CORE = "http://www.w3.org/2005/11/its/rdf#"
ITSRDF = Namespace(ITSRDF_CORE)

# NLP Interchange Format core namespace
NIF_CORE = "http://persistence.uni-leipzig.org/nlp2rdf/ontologies/nif-core#"
NIF = Namespace(NIF_CORE)


class VocabularyError(ValueError):
    """Raised when the vocabulary configuration is malformed."""


# =============================================================================
# VOCABULARY
# =============================================================================


@dataclass(frozen=True)
class NIFVocabulary:
    """Prefixes, namespace bases and term names used to describe text spans."""

    rdf_base: str = RDF_CORE
    itsrdf_base: str = ITSRDF_CORE
    nif_base: str = NIF_CORE

    rfc5147_string: str = "RFC5147String"
    begin_index: str = "beginIndex"
    end_index: str = "endIndex"
    reference_context: str = "referenceContext"
    is_string: str = "isString"
    context: str = "Context"

    def __post_init__(self) -> None:
        for name in ("rdf_base", "itsrdf_base", "nif_base"):
            base = getattr(self, name)
            if not (base.startswith(("http://", "https://")) and base.endswith(("#", "/"))):
                raise VocabularyError(f"{name} must be an absolute IRI ending in '#' or '/': {base!r}")
        for name in (
            "rfc5147_string",
            "begin_index",
            "end_index",
            "reference_context",
            "is_string",
            "context",
        ):
            term = getattr(self, name)
            if not term or any(c in term for c in " <>\"#/"):
                raise VocabularyError(f"Invalid vocabulary term for {name}: {term!r}")

    @property
    def prefixes(self) -> dict[str, str]:
        return {"rdf": self.rdf_base, "itsrdf": self.itsrdf_base, "nif": self.nif_base}

    def nif(self, term: str) -> URIRef:
        return URIRef(self.nif_base + term)

    @property
    def rdf_type(self) -> URIRef:
        return URIRef(self.rdf_base + "type")


DEFAULT_VOCABULARY = NIFVocabulary()


# =============================================================================
# TRIPLE GENERATOR
# =============================================================================


class TripleGenerator:
    """
    Generates NIF triples from AnnotationRecord objects.

    Every record becomes an nif:RFC5147String with begin/end indices and
    its string content. A record is typed nif:Context when it has no
    reference context, and linked with nif:referenceContext otherwise.
    """

    def __init__(self, vocabulary: NIFVocabulary | None = None):
        """
        Initialize the triple generator.

        Args:
            vocabulary: NIF vocabulary (uses the standard NIF core terms if None)
        """
        self.vocabulary = vocabulary or DEFAULT_VOCABULARY

        voc = self.vocabulary
        self._type = voc.rdf_type
        self._rfc5147_string = voc.nif(voc.rfc5147_string)
        self._begin_index = voc.nif(voc.begin_index)
        self._end_index = voc.nif(voc.end_index)
        self._reference_context = voc.nif(voc.reference_context)
        self._is_string = voc.nif(voc.is_string)
        self._context = voc.nif(voc.context)

    def generate(self, records: Iterable[AnnotationRecord]) -> Graph:
        """
        Generate an RDF graph from annotation records.

        Args:
            records: Records in input order

        Returns:
            rdflib Graph containing all generated triples
        """
        graph = Graph()

        # Bind namespaces for clean serialization
        for prefix, base in self.vocabulary.prefixes.items():
            graph.bind(prefix, Namespace(base), override=True, replace=True)

        count = 0
        for record in records:
            self._add_record(graph, record)
            count += 1

        logger.info("Generated %d triples for %d records", len(graph), count)
        return graph

    def _add_record(self, graph: Graph, record: AnnotationRecord) -> None:
        """Add all triples describing one record."""
        root = URIRef(record.url)

        graph.add((root, self._type, self._rfc5147_string))
        graph.add((root, self._begin_index, Literal(str(record.begin_index))))
        graph.add((root, self._end_index, Literal(str(record.end_index))))

        if record.role is RecordRole.SPAN:
            graph.add((root, self._reference_context, URIRef(record.reference_context_url)))

        graph.add((root, self._is_string, Literal(record.content)))

        if record.role is RecordRole.CONTEXT:
            graph.add((root, self._type, self._context))

        for resource_type in record.resource_types:
            graph.add((root, self._type, URIRef(resource_type)))

        logger.debug("Mapped %s record %s", record.role.value, record.url)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def build_graph(records: Iterable[AnnotationRecord]) -> Graph:
    """Quick function to build a NIF graph from records."""
    return TripleGenerator().generate(records)
