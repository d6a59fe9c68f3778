# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: test_chroma_point_store.py
# -----------------------------------------------------------------------------
import uuid

import pytest

from conftest import DIMENSIONS
from records.EtwProviderManifestRecord import EtwProviderManifestRecord
from vectorstore.StoragePoint import StoragePoint
from vectorstore.VectorStoreErrors import CollectionNotFoundError, SchemaMismatchError

SCHEMA = EtwProviderManifestRecord.record_definition(DIMENSIONS)


def _unit(slot: int) -> list:
    vec = [0.0] * DIMENSIONS
    vec[slot] = 1.0
    return vec


def _point(slot: int, name: str) -> StoragePoint:
    return StoragePoint(
        key=str(uuid.uuid4()),
        payload={
            "ProviderName": name,
            "EventIds": [1, 2],
            "Channels": ["Analytic"],
            "Description": f"provider {name}",
        },
        vectors={"DescriptionEmbedding": _unit(slot)},
    )


def test_create_list_delete(store):
    assert store.list_collection_names() == []
    store.create_collection("manifests_384", SCHEMA)
    assert store.collection_exists("manifests_384")
    assert store.count("manifests_384") == 0
    assert store.delete_collection("manifests_384") is True
    assert store.delete_collection("manifests_384") is False
    assert store.count("manifests_384") == 0


def test_upsert_query_decodes_lists_and_document(store):
    store.create_collection("manifests_384", SCHEMA)
    a, b = _point(0, "A"), _point(1, "B")
    store.upsert("manifests_384", SCHEMA, [a, b])

    hits = store.query("manifests_384", SCHEMA, "DescriptionEmbedding", _unit(1), top_k=2)
    assert [h.point.key for h in hits] == [b.key, a.key]
    assert hits[0].score == pytest.approx(1.0, abs=1e-4)
    assert hits[0].score >= hits[1].score
    assert hits[0].point.payload["EventIds"] == [1, 2]
    assert hits[0].point.payload["Channels"] == ["Analytic"]
    assert hits[0].point.payload["Description"] == "provider B"
    assert hits[0].point.vectors == {}


def test_upsert_same_key_overwrites(store):
    store.create_collection("manifests_384", SCHEMA)
    p = _point(0, "A")
    store.upsert("manifests_384", SCHEMA, [p])
    p.payload["ProviderName"] = "A2"
    store.upsert("manifests_384", SCHEMA, [p])
    assert store.count("manifests_384") == 1


def test_query_on_empty_collection_is_empty(store):
    store.create_collection("manifests_384", SCHEMA)
    assert store.query("manifests_384", SCHEMA, "DescriptionEmbedding", _unit(0)) == []


def test_query_unknown_vector_field(store):
    store.create_collection("manifests_384", SCHEMA)
    with pytest.raises(ValueError, match="no vector field"):
        store.query("manifests_384", SCHEMA, "Nope", _unit(0))


def test_upsert_rejects_wrong_dimensions(store):
    store.create_collection("manifests_384", SCHEMA)
    bad = StoragePoint(key=str(uuid.uuid4()), payload={}, vectors={"DescriptionEmbedding": [1.0, 0.0]})
    with pytest.raises(ValueError, match="dimensions"):
        store.upsert("manifests_384", SCHEMA, [bad])


def test_missing_collection(store):
    with pytest.raises(CollectionNotFoundError):
        store.upsert("manifests_384", SCHEMA, [_point(0, "A")])


def test_schema_mismatch_is_detected(store):
    other = EtwProviderManifestRecord.record_definition(1536)
    store.create_collection("manifests_384", other)
    with pytest.raises(SchemaMismatchError):
        store.query("manifests_384", SCHEMA, "DescriptionEmbedding", _unit(0))


def test_scroll_pages_with_vectors(store):
    store.create_collection("manifests_384", SCHEMA)
    points = [_point(i, f"P{i}") for i in range(5)]
    store.upsert("manifests_384", SCHEMA, points)

    pages = list(store.scroll("manifests_384", SCHEMA, batch_size=2))
    assert [len(p) for p in pages] == [2, 2, 1]
    seen = {pt.key: pt for page in pages for pt in page}
    assert set(seen) == {p.key for p in points}
    for p in points:
        assert seen[p.key].vectors["DescriptionEmbedding"] == pytest.approx(p.vectors["DescriptionEmbedding"])


def test_scroll_without_vectors(store):
    store.create_collection("manifests_384", SCHEMA)
    store.upsert("manifests_384", SCHEMA, [_point(0, "A")])
    page = next(store.scroll("manifests_384", SCHEMA, include_vectors=False))
    assert page[0].vectors == {}
    assert page[0].payload["ProviderName"] == "A"
