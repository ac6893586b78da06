"""
Triple Validator - Validates generated NIF graphs.

Performs structural checks on RFC5147String descriptions and optional
SHACL-based validation of RDF graphs.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pyshacl
from rdflib import Graph, Literal, Namespace, URIRef
from rdflib.namespace import RDF

from .generator import ITSRDF_CORE, NIF, NIF_CORE, RDF_CORE

logger = logging.getLogger(__name__)

# Bundled SHACL shapes for nif:RFC5147String
DEFAULT_SHAPES_PATH = Path(__file__).parent / "shapes" / "nif-shapes.ttl"


# =============================================================================
# VALIDATION RESULT
# =============================================================================


@dataclass
class ValidationResult:
    """Result of triple validation."""

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    info: dict[str, Any] = field(default_factory=dict)

    def add_error(self, message: str) -> None:
        """Add an error message."""
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def summary(self) -> str:
        """Get a summary of the validation result."""
        status = "VALID" if self.is_valid else "INVALID"
        return f"Validation {status}: {len(self.errors)} errors, {len(self.warnings)} warnings"


# =============================================================================
# TRIPLE VALIDATOR
# =============================================================================


class TripleValidator:
    """
    Validates NIF graphs.

    Performs:
    - Namespace validation (rdf, itsrdf and nif prefixes bound)
    - Cardinality of begin/end index and string content
    - Offset well-formedness
    - Known nif: terms
    - Context / reference context exclusivity
    """

    REQUIRED_PREFIXES = {"rdf": RDF_CORE, "itsrdf": ITSRDF_CORE, "nif": NIF_CORE}

    NIF_CLASSES = {NIF.RFC5147String, NIF.Context}

    NIF_PROPERTIES = {NIF.beginIndex, NIF.endIndex, NIF.referenceContext, NIF.isString}

    def __init__(self, shapes_path: Path | str | None = None):
        """
        Initialize the validator.

        Args:
            shapes_path: Optional path to SHACL shapes file (.ttl)
        """
        self.shacl_graph = None
        if shapes_path:
            self._load_shacl_shapes(shapes_path)

    def _load_shacl_shapes(self, path: Path | str) -> None:
        """Load SHACL shapes from a Turtle file."""
        path = Path(path)
        if path.exists():
            self.shacl_graph = Graph()
            self.shacl_graph.parse(path, format="turtle")
            logger.info("Loaded SHACL shapes from %s (%d triples)", path, len(self.shacl_graph))
        else:
            logger.warning("SHACL shapes file not found: %s", path)

    def validate(self, graph: Graph) -> ValidationResult:
        """
        Validate an RDF graph.

        Args:
            graph: RDF graph to validate

        Returns:
            ValidationResult with errors and warnings
        """
        result = ValidationResult(is_valid=True)

        if len(graph) == 0:
            result.add_warning("Graph is empty")

        logger.info("TripleValidator: Validating namespace bindings...")
        self._check_namespaces(graph, result)

        logger.info("TripleValidator: Validating string descriptions...")
        self._check_strings(graph, result)

        logger.info("TripleValidator: Validating nif terms...")
        self._check_terms(graph, result)

        for issue in self.check_consistency(graph):
            result.add_error(issue)

        if self.shacl_graph is not None:
            logger.info("TripleValidator: Running SHACL validation...")
            self._check_shacl(graph, result)

        result.info["triple_count"] = len(graph)
        result.info["subject_count"] = len(set(graph.subjects(RDF.type, NIF.RFC5147String)))
        result.info["context_count"] = len(set(graph.subjects(RDF.type, NIF.Context)))

        logger.info("Validation complete: %s", result.summary())
        return result

    def _check_namespaces(self, graph: Graph, result: ValidationResult) -> None:
        """Check that required namespaces are bound to the right IRIs."""
        bound = {prefix: str(uri) for prefix, uri in graph.namespaces()}
        for prefix, base in self.REQUIRED_PREFIXES.items():
            if bound.get(prefix) != base:
                result.add_warning(f"{prefix} namespace not bound to {base}")

    def _check_strings(self, graph: Graph, result: ValidationResult) -> None:
        """Check cardinalities and offsets of every RFC5147String."""
        for s in set(graph.subjects(RDF.type, NIF.RFC5147String)):
            begins = list(graph.objects(s, NIF.beginIndex))
            ends = list(graph.objects(s, NIF.endIndex))
            strings = list(graph.objects(s, NIF.isString))

            for name, values in (("beginIndex", begins), ("endIndex", ends), ("isString", strings)):
                if len(values) != 1:
                    result.add_error(f"{s} has {len(values)} nif:{name} values (expected 1)")

            if len(begins) == 1 and len(ends) == 1:
                begin, end = str(begins[0]), str(ends[0])
                if not (begin.isdigit() and end.isdigit()):
                    result.add_warning(f"{s} has non-decimal offsets ({begin}, {end})")
                elif int(end) < int(begin):
                    result.add_warning(f"{s} ends before it begins ({begin}, {end})")
                elif len(strings) == 1 and len(str(strings[0])) != int(end) - int(begin):
                    result.add_warning(f"{s} string length does not match offsets")

    def _check_terms(self, graph: Graph, result: ValidationResult) -> None:
        """Check that nif: classes and properties are known."""
        for _, p, o in graph:
            if str(p).startswith(NIF_CORE) and p not in self.NIF_PROPERTIES:
                result.add_warning(f"Unknown nif property: {p}")
            if p == RDF.type and isinstance(o, URIRef):
                if str(o).startswith(NIF_CORE) and o not in self.NIF_CLASSES:
                    result.add_warning(f"Unknown nif class: {o}")
            if p in (NIF.beginIndex, NIF.endIndex, NIF.isString) and not isinstance(o, Literal):
                result.add_error(f"nif property {p} must have a literal value")
            if p == NIF.referenceContext and not isinstance(o, URIRef):
                result.add_error(f"nif:referenceContext must point to an IRI, got {o!r}")

    def _check_shacl(self, graph: Graph, result: ValidationResult) -> None:
        """Run SHACL validation using pyshacl."""
        try:
            conforms, results_graph, results_text = pyshacl.validate(
                data_graph=graph,
                shacl_graph=self.shacl_graph,
                inference="none",
                abort_on_first=False,
                allow_infos=True,
                allow_warnings=True,
            )
        except Exception as e:
            logger.error("SHACL validation failed with exception: %s", e)
            result.add_warning(f"SHACL validation could not be completed: {e}")
            return

        SH = Namespace("http://www.w3.org/ns/shacl#")
        violations = 0

        for report in results_graph.subjects(RDF.type, SH.ValidationResult):
            severity = results_graph.value(report, SH.resultSeverity)
            message = results_graph.value(report, SH.resultMessage)
            focus = results_graph.value(report, SH.focusNode)

            detail = f"SHACL: {message}"
            if focus:
                detail += f" (node: {focus})"

            if severity == SH.Violation:
                result.add_error(detail)
                violations += 1
            elif severity == SH.Warning:
                result.add_warning(detail)

        result.info["shacl_conforms"] = conforms
        result.info["shacl_violations"] = violations

        if conforms:
            logger.info("SHACL validation: CONFORMS")
        else:
            logger.warning("SHACL validation: %d violations", violations)

    def check_consistency(self, graph: Graph) -> list[str]:
        """
        Check that every string is either a context or situated in one.

        Returns:
            List of inconsistency messages
        """
        issues = []

        for s in set(graph.subjects(RDF.type, NIF.RFC5147String)):
            has_reference = (s, NIF.referenceContext, None) in graph
            is_context = (s, RDF.type, NIF.Context) in graph

            if has_reference and is_context:
                issues.append(f"{s} is a nif:Context and also has a nif:referenceContext")
            elif not has_reference and not is_context:
                issues.append(f"{s} is neither a nif:Context nor has a nif:referenceContext")

        return issues


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_graph(graph: Graph) -> ValidationResult:
    """Quick function to validate a graph."""
    return TripleValidator().validate(graph)


def check_consistency(graph: Graph) -> list[str]:
    """Quick function to check graph consistency."""
    return TripleValidator().check_consistency(graph)
