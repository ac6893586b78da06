"""
nifgraph - Annotation records to NIF RDF.

Builds NLP Interchange Format graphs from text-annotation records and
renders them as RDF/XML, N-Triples or Turtle.
"""

from nifgraph.loaders import AnnotationRecord, RecordRole
from nifgraph.triples import NIFDocument, TripleGenerator, TripleSerializer

__all__ = [
    "AnnotationRecord",
    "RecordRole",
    "NIFDocument",
    "TripleGenerator",
    "TripleSerializer",
]
