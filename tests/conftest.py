"""Pytest configuration for nifgraph tests."""

import logging

import pytest

from nifgraph.loaders import AnnotationRecord

DOC = "http://ex.org/doc1"


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo global logging changes made by the CLI."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    logging.disable(logging.NOTSET)
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def span_record() -> AnnotationRecord:
    """Span situated in a reference context, no types."""
    return AnnotationRecord(
        url=f"{DOC}#char=0,5",
        begin_index=0,
        end_index=5,
        content="Hello",
        reference_context_url=DOC,
    )


@pytest.fixture
def context_record() -> AnnotationRecord:
    """Standalone context with one resource type."""
    return AnnotationRecord(
        url=f"{DOC}#char=0,5",
        begin_index=0,
        end_index=5,
        content="Hello",
        reference_context_url="",
        resource_types=["http://ex.org/Class1"],
    )


@pytest.fixture
def document_record_dicts() -> list[dict]:
    """A small document in the external bean field naming."""
    return [
        {
            "URL": f"{DOC}#char=0,11",
            "offset": 0,
            "endIndex": 11,
            "content": "Hello Paris",
            "referenceContextURL": "",
            "resourceTypes": [],
        },
        {
            "URL": f"{DOC}#char=6,11",
            "offset": 6,
            "endIndex": 11,
            "content": "Paris",
            "referenceContextURL": f"{DOC}#char=0,11",
            "resourceTypes": [
                "http://dbpedia.org/ontology/City",
                "http://dbpedia.org/ontology/Place",
            ],
        },
    ]
