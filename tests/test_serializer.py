"""Tests for graph serialization and the NIFDocument views."""

import io
import logging
import types

import pytest
from rdflib import Graph

from nifgraph.loaders import AnnotationRecord, parse_records
from nifgraph.triples import NIF, NIFDocument, NIFVocabulary, TripleSerializer, build_graph
from nifgraph.triples.generator import ITSRDF_CORE as ITSRDF_BASE
from nifgraph.triples.generator import RDF_CORE as RDF_BASE
from nifgraph.triples import serializer as serializer_module

NIF_BASE = str(NIF)


def _parse(text: str, format: str) -> Graph:
    return Graph().parse(data=text, format=format)


@pytest.fixture
def document(document_record_dicts) -> NIFDocument:
    return NIFDocument(parse_records(document_record_dicts))


class TestNIFDocument:
    """NIFDocument builds once and renders three views."""

    def test_graph_is_built_at_construction(self, document):
        assert len(document) == 5 + 5 + 2

    def test_views_differ_textually(self, document):
        views = {document.get_rdf_xml(), document.get_ntriples(), document.get_turtle()}
        assert len(views) == 3

    def test_round_trip_equivalence(self, document):
        expected = set(document.graph)

        assert set(_parse(document.get_rdf_xml(), "xml")) == expected
        assert set(_parse(document.get_ntriples(), "nt")) == expected
        assert set(_parse(document.get_turtle(), "turtle")) == expected

    def test_repeated_renders_are_identical(self, document):
        first = document.get_ntriples()
        document.get_turtle()
        document.get_rdf_xml()
        assert document.get_ntriples() == first

    def test_rendering_does_not_mutate_graph(self, document):
        before = set(document.graph)
        for fmt in ("turtle", "nt", "xml"):
            document.render(fmt)
        assert set(document.graph) == before

    def test_records_are_kept_in_order(self, document):
        assert [r.begin_index for r in document.records] == [0, 6]

    def test_special_characters_round_trip(self):
        record = AnnotationRecord(
            url="http://ex.org/doc#char=0,20",
            begin_index=0,
            end_index=20,
            content='He said "<ciao>" & \n left',
        )
        document = NIFDocument([record])
        expected = set(document.graph)

        for text, fmt in (
            (document.get_rdf_xml(), "xml"),
            (document.get_ntriples(), "nt"),
            (document.get_turtle(), "turtle"),
        ):
            assert set(_parse(text, fmt)) == expected

    def test_empty_content_round_trips(self):
        record = AnnotationRecord(url="http://ex.org/doc#char=2,2", begin_index=2, end_index=2)
        document = NIFDocument([record])
        expected = set(document.graph)

        assert set(_parse(document.get_rdf_xml(), "xml")) == expected
        assert set(_parse(document.get_ntriples(), "nt")) == expected
        assert set(_parse(document.get_turtle(), "turtle")) == expected


class TestFormats:
    """Surface syntax of each view."""

    def test_ntriples_one_triple_per_line(self, document):
        lines = [line for line in document.get_ntriples().splitlines() if line.strip()]

        assert len(lines) == len(document)
        assert all(line.endswith(" .") for line in lines)
        assert all(line.startswith("<http://ex.org/doc1#char=") for line in lines)

    def test_ntriples_uses_full_iris(self, document):
        text = document.get_ntriples()

        assert f"<{NIF_BASE}beginIndex>" in text
        assert "nif:" not in text

    def test_turtle_declares_all_prefixes(self, span_record):
        text = NIFDocument([span_record]).get_turtle()

        assert f"@prefix rdf: <{RDF_BASE}> ." in text
        assert f"@prefix itsrdf: <{ITSRDF_BASE}> ." in text
        assert f"@prefix nif: <{NIF_BASE}> ." in text
        assert "nif:beginIndex" in text

    def test_rdfxml_declares_all_namespaces(self, span_record):
        text = NIFDocument([span_record]).get_rdf_xml()

        assert "<rdf:RDF" in text
        assert f'xmlns:rdf="{RDF_BASE}"' in text
        assert f'xmlns:itsrdf="{ITSRDF_BASE}"' in text
        assert f'xmlns:nif="{NIF_BASE}"' in text

    def test_empty_graph_renders_valid_documents(self):
        document = NIFDocument([])
        rdf_xml, turtle = document.get_rdf_xml(), document.get_turtle()

        assert len(document) == 0
        assert "<rdf:RDF" in rdf_xml
        assert len(_parse(rdf_xml, "xml")) == 0
        assert document.get_ntriples().strip() == ""
        assert len(_parse(turtle, "turtle")) == 0
        for prefix, base in (("rdf", RDF_BASE), ("itsrdf", ITSRDF_BASE), ("nif", NIF_BASE)):
            assert f'xmlns:{prefix}="{base}"' in rdf_xml
            assert f"@prefix {prefix}: <{base}> ." in turtle

    def test_custom_vocabulary_prefixes_are_declared(self, span_record):
        vocabulary = NIFVocabulary(nif_base="http://ex.org/nif#")
        document = NIFDocument([span_record], vocabulary=vocabulary)

        assert "@prefix nif: <http://ex.org/nif#> ." in document.get_turtle()
        assert 'xmlns:nif="http://ex.org/nif#"' in document.get_rdf_xml()
        assert set(_parse(document.get_turtle(), "turtle")) == set(document.graph)


class TestTripleSerializer:
    """TripleSerializer format handling and cleanup."""

    @pytest.mark.parametrize("fmt", ["turtle", "ttl", "nt", "ntriples", "xml", "rdf", "rdfxml", "NT"])
    def test_format_aliases(self, span_record, fmt):
        graph = build_graph([span_record])
        assert TripleSerializer().render(graph, fmt)

    @pytest.mark.parametrize("fmt", ["json-ld", "n3", "", "trig"])
    def test_unsupported_format_fails_fast(self, span_record, fmt):
        graph = build_graph([span_record])
        with pytest.raises(ValueError, match="Unsupported format"):
            TripleSerializer().render(graph, fmt)

    def test_wrappers_match_render(self, span_record):
        graph = build_graph([span_record])
        serializer = TripleSerializer()

        assert serializer.to_ntriples(graph) == serializer.render(graph, "nt")
        assert set(_parse(serializer.to_turtle(graph), "turtle")) == set(graph)
        assert set(_parse(serializer.to_rdfxml(graph), "xml")) == set(graph)

    def test_declared_prefixes_can_be_narrowed(self, span_record):
        graph = build_graph([span_record])
        serializer = TripleSerializer(declared_prefixes=())

        turtle = serializer.to_turtle(graph)
        rdf_xml = serializer.to_rdfxml(graph)

        assert "@prefix itsrdf:" not in turtle
        assert "xmlns:itsrdf" not in rdf_xml
        assert f"@prefix nif: <{NIF_BASE}> ." in turtle
        assert set(_parse(turtle, "turtle")) == set(graph)

    def test_close_failure_is_logged_not_raised(self, span_record, monkeypatch, caplog):
        class FailingBuffer(io.BytesIO):
            def close(self):
                if not getattr(self, "_failed", False):
                    self._failed = True
                    raise OSError("flush failed")
                super().close()

        monkeypatch.setattr(serializer_module, "io", types.SimpleNamespace(BytesIO=FailingBuffer))
        graph = build_graph([span_record])

        with caplog.at_level(logging.WARNING, logger="nifgraph.triples.serializer"):
            text = TripleSerializer().render(graph, "nt")

        assert set(_parse(text, "nt")) == set(graph)
        assert "Failed to close render buffer" in caplog.text

    def test_to_file(self, span_record, tmp_path):
        graph = build_graph([span_record])
        path = tmp_path / "nested" / "out.ttl"

        TripleSerializer().to_file(graph, path, format="turtle")

        assert set(_parse(path.read_text(encoding="utf-8"), "turtle")) == set(graph)

    def test_statistics(self, document):
        stats = TripleSerializer().get_statistics(document.graph)

        assert stats["total_triples"] == 12
        assert stats["unique_subjects"] == 2
        assert stats["predicates"][f"{NIF_BASE}isString"] == 2
        assert stats["namespaces"]["nif"] == NIF_BASE
