"""Tests for annotation record loading."""

import json

import pytest
import yaml
from pydantic import ValidationError

from nifgraph.loaders import (
    AnnotationRecord,
    RecordRole,
    document_records,
    expand_spotlight_type,
    load_records,
    parse_records,
    records_from_spotlight,
    rfc5147_uri,
)

DOC = "http://ex.org/doc1"


class TestAnnotationRecord:
    """AnnotationRecord model."""

    def test_bean_aliases(self, document_record_dicts):
        record = AnnotationRecord.model_validate(document_record_dicts[1])

        assert record.url == f"{DOC}#char=6,11"
        assert record.begin_index == 6
        assert record.end_index == 11
        assert record.content == "Paris"
        assert record.reference_context_url == f"{DOC}#char=0,11"
        assert len(record.resource_types) == 2

    def test_field_names_are_accepted(self):
        record = AnnotationRecord(url="http://ex.org/a", begin_index=1, end_index=2)
        assert record.content == ""
        assert record.resource_types == frozenset()

    @pytest.mark.parametrize("context", [None, ""])
    def test_missing_or_empty_context_is_a_context(self, context):
        record = AnnotationRecord(url="http://ex.org/a", begin_index=0, end_index=0, reference_context_url=context)

        assert record.reference_context_url is None
        assert record.role is RecordRole.CONTEXT
        assert record.is_context

    def test_reference_context_makes_a_span(self, span_record):
        assert span_record.role is RecordRole.SPAN
        assert not span_record.is_context

    def test_types_from_comma_string(self):
        record = AnnotationRecord(
            url="http://ex.org/a",
            begin_index=0,
            end_index=1,
            resource_types="http://ex.org/A, http://ex.org/B,",
        )
        assert record.resource_types == {"http://ex.org/A", "http://ex.org/B"}

    def test_record_is_immutable(self, span_record):
        with pytest.raises(ValidationError):
            span_record.content = "changed"

    def test_offsets_are_not_range_checked(self):
        record = AnnotationRecord(url="http://ex.org/a", begin_index=9, end_index=-1)
        assert (record.begin_index, record.end_index) == (9, -1)

    def test_missing_offsets_are_rejected(self):
        with pytest.raises(ValidationError):
            AnnotationRecord.model_validate({"URL": "http://ex.org/a", "content": "x"})


class TestLoadRecords:
    """Reading record files."""

    def test_parse_records_keeps_order(self, document_record_dicts):
        records = parse_records(document_record_dicts)
        assert [r.begin_index for r in records] == [0, 6]

    def test_parse_records_wrapped(self, document_record_dicts):
        assert len(parse_records({"records": document_record_dicts})) == 2

    def test_load_json(self, tmp_path, document_record_dicts):
        path = tmp_path / "records.json"
        path.write_text(json.dumps(document_record_dicts), encoding="utf-8")

        records = load_records(path)

        assert [r.role for r in records] == [RecordRole.CONTEXT, RecordRole.SPAN]

    def test_load_yaml(self, tmp_path, document_record_dicts):
        path = tmp_path / "records.yaml"
        path.write_text(yaml.safe_dump({"records": document_record_dicts}), encoding="utf-8")

        assert len(load_records(path)) == 2

    def test_load_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")

        assert load_records(path) == []

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "records.csv"
        path.write_text("URL,offset\n", encoding="utf-8")

        with pytest.raises(ValueError, match="Unsupported record file type"):
            load_records(path)


class TestDocumentRecords:
    """RFC 5147 record construction."""

    def test_rfc5147_uri(self):
        assert rfc5147_uri(DOC, 3, 8) == f"{DOC}#char=3,8"

    def test_context_and_spans(self):
        text = "Berlin is in Germany"
        records = document_records(
            DOC,
            text,
            [("Berlin", 0, ["http://ex.org/City"]), ("Germany", 13, [])],
        )
        context, berlin, germany = records

        assert context.url == f"{DOC}#char=0,20"
        assert context.role is RecordRole.CONTEXT
        assert context.content == text

        assert berlin.url == f"{DOC}#char=0,6"
        assert berlin.reference_context_url == context.url
        assert berlin.resource_types == {"http://ex.org/City"}

        assert germany.url == f"{DOC}#char=13,20"
        assert text[germany.begin_index : germany.end_index] == "Germany"

    def test_text_only(self):
        records = document_records(DOC, "")
        assert len(records) == 1
        assert records[0].url == f"{DOC}#char=0,0"


class TestSpotlight:
    """DBpedia Spotlight response conversion."""

    RESPONSE = {
        "@text": "Angela Merkel visited Paris.",
        "@confidence": "0.5",
        "Resources": [
            {
                "@URI": "http://dbpedia.org/resource/Angela_Merkel",
                "@surfaceForm": "Angela Merkel",
                "@offset": "0",
                "@types": "Http://xmlns.com/foaf/0.1/Person,DBpedia:Person,Schema:Person,Wikidata:Q5",
            },
            {
                "@URI": "http://dbpedia.org/resource/Paris",
                "@surfaceForm": "Paris",
                "@offset": "22",
                "@types": "",
            },
        ],
    }

    @pytest.mark.parametrize(
        "spotlight_type, expected",
        [
            ("DBpedia:Person", "http://dbpedia.org/ontology/Person"),
            ("Schema:Place", "http://schema.org/Place"),
            ("Wikidata:Q5", "http://www.wikidata.org/entity/Q5"),
            ("DUL:Agent", "http://www.ontologydesignpatterns.org/ont/dul/DUL.owl#Agent"),
            ("Http://xmlns.com/foaf/0.1/Person", "http://xmlns.com/foaf/0.1/Person"),
            ("Unknown:Thing", None),
            ("NoPrefix", None),
        ],
    )
    def test_expand_type(self, spotlight_type, expected):
        assert expand_spotlight_type(spotlight_type) == expected

    def test_records_from_response(self):
        context, merkel, paris = records_from_spotlight(self.RESPONSE, DOC)

        assert context.url == f"{DOC}#char=0,28"
        assert merkel.url == f"{DOC}#char=0,13"
        assert merkel.resource_types == {
            "http://xmlns.com/foaf/0.1/Person",
            "http://dbpedia.org/ontology/Person",
            "http://schema.org/Person",
            "http://www.wikidata.org/entity/Q5",
        }
        assert paris.url == f"{DOC}#char=22,27"
        assert paris.resource_types == frozenset()
        assert paris.reference_context_url == context.url

    def test_response_without_resources(self):
        records = records_from_spotlight({"@text": "Nothing here."}, DOC)
        assert len(records) == 1
