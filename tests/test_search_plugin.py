# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: test_search_plugin.py
# -----------------------------------------------------------------------------
import pytest

from conftest import DIMENSIONS, make_event, make_manifest
from plugins.EtwVectorSearchPlugin import EtwVectorSearchPlugin
from records.EtwEventRecord import EtwEventRecord
from records.EtwProviderManifestRecord import EtwProviderManifestRecord
from vectorstore.EtwVectorDb import EtwVectorDb
from vectorstore.Topic import Topic


@pytest.fixture
def plugin(store, embedder) -> EtwVectorSearchPlugin:
    db = EtwVectorDb(dimensions=DIMENSIONS)
    db.initialize(embedder, store)
    return EtwVectorSearchPlugin(vector_db=db)


def test_functions_are_named_and_described(plugin):
    names = [f["name"] for f in plugin.functions()]
    assert names == ["SearchEtwProviderManifests", "SearchEtwEvents"]
    for f in plugin.functions():
        assert f["description"]
        assert callable(f["callable"])


def test_empty_collections_return_blank(plugin):
    assert plugin.search_etw_provider_manifests("kernel") == ""
    assert plugin.search_etw_events("process 4242") == ""


def test_manifest_search_routes_to_manifests(plugin, embedder):
    manifest = make_manifest(name="Microsoft-Windows-DNS-Client")
    plugin.vector_db.import_data(Topic.MANIFESTS, [manifest])
    expected = EtwProviderManifestRecord.create_from_parsed_manifest(manifest, embedder).description

    assert plugin.search_etw_provider_manifests(expected) == expected
    # the events collection is still empty
    assert plugin.search_etw_events(expected) == ""


def test_event_search_by_function_name(plugin, embedder):
    event = make_event(42)
    plugin.vector_db.import_data(Topic.EVENT_DATA, [event])
    expected = EtwEventRecord.create_from_parsed_event(event, embedder).description

    search = plugin.get_function("SearchEtwEvents")
    assert search(expected) == expected


def test_unknown_function_name(plugin):
    with pytest.raises(KeyError):
        plugin.get_function("SearchEtwTraces")
