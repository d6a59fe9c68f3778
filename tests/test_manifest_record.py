# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: test_manifest_record.py
# -----------------------------------------------------------------------------
import uuid

import pytest

from conftest import FailingEmbeddingService, make_event, make_manifest
from etw.ParsedEtw import EtwProvider, ParsedEtwManifest
from records.EtwProviderManifestRecord import (
    EtwProviderManifestRecord,
    EtwProviderManifestRecordMapper,
)
from vectorstore.StoragePoint import StoragePoint


def test_create_from_parsed_manifest_fills_every_field(embedder):
    pid = uuid.UUID("22fb2cd6-0e7b-422b-a0c7-2fad1fd0e716")
    record = EtwProviderManifestRecord.create_from_parsed_manifest(
        make_manifest(provider_id=pid), embedder
    )

    assert record.id == pid
    assert record.name == "Microsoft-Windows-Kernel-Process"
    assert record.source == "Xml"
    assert record.event_ids == ["1", "2", "3"]
    assert record.channels == ["Microsoft-Windows-Kernel-Process/Analytic"]
    assert record.keywords == ["WINEVENT_KEYWORD_PROCESS", "WINEVENT_KEYWORD_THREAD"]
    assert record.tasks == [
        "task ProcessStart(value=1) has opcodes win:Start",
        "task ThreadWork(value=1A) has opcodes win:Start,win:Stop",
    ]
    # empty strings are skipped
    assert record.strings == ["Process started"]
    # de-duplicated, first-seen order
    assert record.template_fields == ["ProcessID", "ImageName", "ThreadID"]
    assert len(record.description_embedding) == embedder.dimensions


def test_description_layout(embedder):
    pid = uuid.UUID("22fb2cd6-0e7b-422b-a0c7-2fad1fd0e716")
    record = EtwProviderManifestRecord.create_from_parsed_manifest(
        make_manifest(provider_id=pid), embedder
    )

    assert record.description.startswith(
        f"There is an ETW provider with Id={pid} named Microsoft-Windows-Kernel-Process "
        "whose events are formatted from source Xml. The supported events have IDs 1,2,3"
    )
    assert "unique template fields named ProcessID,ImageName,ThreadID" in record.description
    assert "keywords: WINEVENT_KEYWORD_PROCESS,WINEVENT_KEYWORD_THREAD;" in record.description
    assert record.description.endswith("strings: Process started")


def test_exactly_one_embedding_call_for_the_description(embedder):
    record = EtwProviderManifestRecord.create_from_parsed_manifest(make_manifest(), embedder)
    assert embedder.calls == [record.description]


def test_description_is_deterministic(embedder):
    manifest = make_manifest()
    a = EtwProviderManifestRecord.create_from_parsed_manifest(manifest, embedder)
    b = EtwProviderManifestRecord.create_from_parsed_manifest(manifest, embedder)
    assert a.description == b.description
    assert a.description_embedding == b.description_embedding


def test_missing_name_and_source_use_sentinels(embedder):
    record = EtwProviderManifestRecord.create_from_parsed_manifest(
        make_manifest(name=None, source=None), embedder
    )
    assert record.name == "(unnamed)"
    assert record.source == "(unknown)"


def test_empty_manifest_still_builds(embedder):
    manifest = ParsedEtwManifest(provider=EtwProvider(id=uuid.uuid4()))
    record = EtwProviderManifestRecord.create_from_parsed_manifest(manifest, embedder)
    assert record.event_ids == []
    assert record.tasks == []
    assert "The supported events have IDs  and" in record.description


def test_embedding_failure_propagates():
    failing = FailingEmbeddingService()
    with pytest.raises(ConnectionError):
        EtwProviderManifestRecord.create_from_parsed_manifest(make_manifest(), failing)
    assert failing.calls == 1


def test_from_domain_object_rejects_other_types(embedder):
    with pytest.raises(TypeError, match="EtwProviderManifestRecord"):
        EtwProviderManifestRecord.from_domain_object(make_event(), embedder)
    assert embedder.calls == []


def test_mapper_round_trip_drops_symbolic_event_ids(embedder):
    record = EtwProviderManifestRecord.create_from_parsed_manifest(
        make_manifest(event_ids=("10", "win:Info", "11")), embedder
    )
    mapper = EtwProviderManifestRecordMapper()
    point = mapper.to_storage_point(record)

    assert point.key == str(record.id)
    assert point.payload["EventIds"] == [10, 11]
    assert point.payload["Description"] == record.description
    assert point.vectors["DescriptionEmbedding"] == record.description_embedding

    back = mapper.from_storage_point(point)
    assert back.id == record.id
    assert back.event_ids == ["10", "11"]
    assert back.tasks == record.tasks
    assert back.template_fields == record.template_fields
    assert back.description == record.description


def test_from_stored_point_with_sparse_payload():
    key = str(uuid.uuid4())
    record = EtwProviderManifestRecord.from_stored_point(StoragePoint(key=key, payload={"Description": "d"}))
    assert str(record.id) == key
    assert record.name == "(unnamed)"
    assert record.source == "(unknown)"
    assert record.channels == []
    assert record.description == "d"
    assert record.description_embedding == []


def test_collection_name_and_definition():
    assert EtwProviderManifestRecord.collection_name(384) == "manifests_384"
    schema = EtwProviderManifestRecord.record_definition(384)
    assert schema.vector.name == "DescriptionEmbedding"
    assert schema.vector.dimensions == 384
    assert schema.document_field == "Description"
    assert "EventIds" in schema.field_names
