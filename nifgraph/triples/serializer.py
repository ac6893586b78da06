"""
Triple Serializer - Serializes NIF graphs to RDF text formats.

Supports RDF/XML, N-Triples and Turtle output. The RDF/XML and Turtle
writers declare every vocabulary prefix bound on the graph, including
prefixes no triple uses.
"""

import io
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Iterable

from rdflib import Graph, URIRef, plugin
from rdflib.plugins.serializers.rdfxml import XMLSerializer
from rdflib.plugins.serializers.turtle import TurtleSerializer
from rdflib.serializer import Serializer

logger = logging.getLogger(__name__)


# =============================================================================
# SUPPORTED FORMATS
# =============================================================================

# Prefixes written in the header of every RDF/XML and Turtle document
DECLARED_PREFIXES = ("rdf", "itsrdf", "nif")

FORMATS = {
    "turtle": {"rdflib": "nif-turtle", "extension": ".ttl", "mime": "text/turtle"},
    "ttl": {"rdflib": "nif-turtle", "extension": ".ttl", "mime": "text/turtle"},
    "nt": {"rdflib": "nt", "extension": ".nt", "mime": "application/n-triples"},
    "ntriples": {"rdflib": "nt", "extension": ".nt", "mime": "application/n-triples"},
    "xml": {"rdflib": "nif-xml", "extension": ".rdf", "mime": "application/rdf+xml"},
    "rdf": {"rdflib": "nif-xml", "extension": ".rdf", "mime": "application/rdf+xml"},
    "rdfxml": {"rdflib": "nif-xml", "extension": ".rdf", "mime": "application/rdf+xml"},
}


def resolve_format(format: str) -> dict[str, str]:
    """Look up a format name, raising ValueError for unsupported ones."""
    entry = FORMATS.get(format.lower())
    if entry is None:
        raise ValueError(f"Unsupported format: {format}. Supported: {list(FORMATS.keys())}")
    return entry


# =============================================================================
# PREFIX-DECLARING WRITERS
# =============================================================================


def declared_bindings(graph: Graph, prefixes: Iterable[str]) -> list[tuple[str, URIRef]]:
    """Namespaces bound on graph under the given prefixes, in prefix order."""
    bound = {prefix: URIRef(namespace) for prefix, namespace in graph.namespaces()}
    return [(prefix, bound[prefix]) for prefix in prefixes if prefix in bound]


class NIFTurtleSerializer(TurtleSerializer):
    """Turtle writer that emits @prefix lines for unused vocabulary prefixes too."""

    _declare: tuple[str, ...] = ()

    def serialize(self, stream, base=None, encoding=None, spacious=None, **args):
        self._declare = tuple(args.pop("declare", ()))
        super().serialize(stream, base=base, encoding=encoding, spacious=spacious, **args)

    def startDocument(self):
        for prefix, namespace in declared_bindings(self.store, self._declare):
            self.namespaces.setdefault(prefix, namespace)
        super().startDocument()


class NIFXMLSerializer(XMLSerializer):
    """RDF/XML writer that emits xmlns attributes for unused vocabulary prefixes too."""

    _declare: tuple[str, ...] = ()

    def serialize(self, stream, base=None, encoding=None, **args):
        self._declare = tuple(args.pop("declare", ()))
        super().serialize(stream, base=base, encoding=encoding, **args)

    # XMLSerializer.serialize builds the rdf:RDF xmlns block from this hook
    def _XMLSerializer__bindings(self):
        bindings = dict(declared_bindings(self.store, self._declare))
        bindings.update(super()._XMLSerializer__bindings())
        return bindings.items()


plugin.register("nif-turtle", Serializer, __name__, "NIFTurtleSerializer")
plugin.register("nif-xml", Serializer, __name__, "NIFXMLSerializer")


# =============================================================================
# TRIPLE SERIALIZER
# =============================================================================


class TripleSerializer:
    """
    Serializes RDF graphs to the supported output formats.

    The graph is only read; any number of renders can be made from the
    same graph in any order.
    """

    def __init__(self, declared_prefixes: Iterable[str] = DECLARED_PREFIXES):
        """
        Initialize the serializer.

        Args:
            declared_prefixes: Prefixes always declared by RDF/XML and Turtle
                output when they are bound on the rendered graph
        """
        self.declared_prefixes = tuple(declared_prefixes)

    def render(self, graph: Graph, format: str) -> str:
        """
        Serialize graph to the requested format.

        Args:
            graph: RDF graph to serialize
            format: turtle/ttl, nt/ntriples or xml/rdf/rdfxml

        Returns:
            Serialized document text
        """
        rdflib_format = resolve_format(format)["rdflib"]
        options = {}
        if rdflib_format != "nt":
            options["declare"] = self.declared_prefixes

        buffer = io.BytesIO()
        try:
            graph.serialize(destination=buffer, format=rdflib_format, encoding="utf-8", **options)
            text = buffer.getvalue().decode("utf-8")
        finally:
            _close_quietly(buffer)

        logger.debug("Rendered %d triples as %s (%d chars)", len(graph), rdflib_format, len(text))
        return text

    def to_turtle(self, graph: Graph) -> str:
        """Serialize graph to Turtle format."""
        return self.render(graph, "turtle")

    def to_ntriples(self, graph: Graph) -> str:
        """Serialize graph to N-Triples format."""
        return self.render(graph, "nt")

    def to_rdfxml(self, graph: Graph) -> str:
        """Serialize graph to RDF/XML format."""
        return self.render(graph, "xml")

    def to_file(
        self,
        graph: Graph,
        path: Path | str,
        format: str = "turtle",
    ) -> None:
        """
        Serialize graph to a file.

        Args:
            graph: RDF graph to serialize
            path: Output file path
            format: Output format (turtle, nt, xml)
        """
        path = Path(path)
        content = self.render(graph, format)

        # Ensure directory exists
        path.parent.mkdir(parents=True, exist_ok=True)

        path.write_text(content, encoding="utf-8")
        logger.info("Serialized %d triples to %s (%s)", len(graph), path, format)

    def get_statistics(self, graph: Graph) -> dict[str, Any]:
        """
        Get statistics about the graph.

        Args:
            graph: RDF graph to analyze

        Returns:
            Dictionary with graph statistics
        """
        predicates = Counter()
        subjects = set()
        objects_uris = set()

        for s, p, o in graph:
            predicates[str(p)] += 1
            subjects.add(str(s))
            if isinstance(o, URIRef):
                objects_uris.add(str(o))

        namespaces = {prefix: str(uri) for prefix, uri in graph.namespaces()}

        return {
            "total_triples": len(graph),
            "unique_subjects": len(subjects),
            "unique_predicates": len(predicates),
            "unique_object_uris": len(objects_uris),
            "predicates": dict(predicates.most_common(20)),
            "namespaces": namespaces,
        }


def _close_quietly(buffer: io.IOBase) -> None:
    """Release a render buffer; failures are logged, never raised."""
    try:
        buffer.close()
    except (OSError, ValueError) as e:
        logger.warning("Failed to close render buffer: %s", e)

