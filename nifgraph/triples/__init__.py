"""
Triples Module - NIF triple generation and serialization.

This module provides functionality for converting annotation records
to RDF triples according to the NIF core vocabulary.

Components:
- generator.py: Converts records to RDF triples
- document.py: Built graph with RDF/XML, N-Triples and Turtle views
- serializer.py: Serializes graphs to RDF/XML, N-Triples and Turtle
- validator.py: Validates NIF graphs
"""

from .generator import (
    DEFAULT_VOCABULARY,
    ITSRDF,
    NIF,
    NIFVocabulary,
    TripleGenerator,
    VocabularyError,
    build_graph,
)
from .document import NIFDocument
from .serializer import DECLARED_PREFIXES, FORMATS, TripleSerializer
from .validator import (
    DEFAULT_SHAPES_PATH,
    TripleValidator,
    ValidationResult,
    check_consistency,
    validate_graph,
)

__all__ = [
    # Generator
    "DEFAULT_VOCABULARY",
    "ITSRDF",
    "NIF",
    "NIFVocabulary",
    "TripleGenerator",
    "VocabularyError",
    "build_graph",
    # Document
    "NIFDocument",
    # Serializer
    "DECLARED_PREFIXES",
    "FORMATS",
    "TripleSerializer",
    # Validator
    "DEFAULT_SHAPES_PATH",
    "TripleValidator",
    "ValidationResult",
    "validate_graph",
    "check_consistency",
]
