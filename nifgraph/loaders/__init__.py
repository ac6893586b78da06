"""Loaders package for annotation records."""

from .annotation_loader import (
    AnnotationRecord,
    RecordRole,
    document_records,
    expand_spotlight_type,
    load_records,
    parse_records,
    records_from_spotlight,
    rfc5147_uri,
    SPOTLIGHT_TYPE_PREFIXES,
)

__all__ = [
    "AnnotationRecord",
    "RecordRole",
    "document_records",
    "expand_spotlight_type",
    "load_records",
    "parse_records",
    "records_from_spotlight",
    "rfc5147_uri",
    "SPOTLIGHT_TYPE_PREFIXES",
]
