"""
NIF Document - A built NIF graph with its three textual views.
"""

import logging
from typing import Iterable

from rdflib import Graph

from nifgraph.loaders import AnnotationRecord

from .generator import NIFVocabulary, TripleGenerator
from .serializer import TripleSerializer

logger = logging.getLogger(__name__)


class NIFDocument:
    """
    NIF description of a list of annotation records.

    The graph is built once, when the document is created, and is not
    modified afterwards. Rendering may be called any number of times and
    from several threads.

    Usage:
        doc = NIFDocument(records)
        print(doc.get_turtle())
    """

    def __init__(
        self,
        records: Iterable[AnnotationRecord],
        vocabulary: NIFVocabulary | None = None,
    ):
        self.records = tuple(records)
        self._serializer = TripleSerializer()
        self._graph = TripleGenerator(vocabulary).generate(self.records)
        logger.debug("Built NIF document: %d records, %d triples", len(self.records), len(self._graph))

    @property
    def graph(self) -> Graph:
        return self._graph

    def __len__(self) -> int:
        return len(self._graph)

    def render(self, format: str) -> str:
        """Render the graph in any supported format (turtle, nt, xml)."""
        return self._serializer.render(self._graph, format)

    def get_rdf_xml(self) -> str:
        """Return the graph as an RDF/XML document."""
        return self.render("xml")

    def get_ntriples(self) -> str:
        """Return the graph as N-Triples, one triple per line."""
        return self.render("nt")

    def get_turtle(self) -> str:
        """Return the graph as Turtle, declaring the rdf/itsrdf/nif prefixes."""
        return self.render("turtle")
