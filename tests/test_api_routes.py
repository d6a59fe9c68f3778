# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: test_api_routes.py
# -----------------------------------------------------------------------------
import threading
import time
import uuid

import pytest
from starlette.testclient import TestClient

from api import dependencies
from api.dependencies import get_collection_service, get_health_service
from api.main import app
from conftest import DIMENSIONS
from plugins.EtwVectorSearchPlugin import EtwVectorSearchPlugin
from services.EtwCollectionService import EtwCollectionService
from services.EtwHealthService import EtwHealthService
from vectorstore.EtwVectorDb import EtwVectorDb

PROVIDER_ID = "22fb2cd6-0e7b-422b-a0c7-2fad1fd0e716"


def _manifest_json(name: str = "Microsoft-Windows-Kernel-Process", provider_id: str | None = None) -> dict:
    return {
        "provider": {"id": provider_id or str(uuid.uuid4()), "name": name, "source": "Xml"},
        "events": [{"id": "1"}, {"id": "2"}],
        "channels": [{"name": "Analytic", "value": 16}],
        "keywords": [{"name": "WINEVENT_KEYWORD_PROCESS", "value": 16}],
        "tasks": [{"name": "ProcessStart", "value": 1, "opcodes": [{"name": "win:Start", "value": 1}]}],
        "templates": {"ProcessStartArgs": [{"name": "ProcessID", "type": "UInt32"}]},
        "string_table": ["Process started"],
    }


def _event_json(event_id: int = 1) -> dict:
    return {
        "provider": {"id": PROVIDER_ID, "name": "Microsoft-Windows-Kernel-Process"},
        "event_id": event_id,
        "version": 1,
        "process_id": 4242,
        "thread_id": 17,
        "user_sid": "S-1-5-18",
        "timestamp": "2026-01-15T10:20:30Z",
        "task": "ProcessStart",
        "opcode": "win:Start",
        "keywords": ["WINEVENT_KEYWORD_PROCESS"],
        "template_data": {"ImageName": "notepad.exe"},
    }


@pytest.fixture
def services(store, embedder, tmp_path):
    db = EtwVectorDb(dimensions=DIMENSIONS)
    db.initialize(embedder, store)
    plugin = EtwVectorSearchPlugin(vector_db=db)
    collection_service = EtwCollectionService(vector_db=db, plugin=plugin, snapshot_dir=str(tmp_path))
    health_service = EtwHealthService(store=store, embedder=embedder, vector_db=db)
    return collection_service, health_service


@pytest.fixture
def client(services):
    collection_service, health_service = services
    app.dependency_overrides[get_collection_service] = lambda: collection_service
    app.dependency_overrides[get_health_service] = lambda: health_service
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_deep_health_reports_counts(client):
    resp = client.get("/health/deep")
    assert resp.status_code == 200, resp.text
    data = resp.json()
    assert data["status"] == "ok"
    assert data["counts"] == {"manifests": 0, "events": 0}
    assert data["summary"]["failed"] == 0


def test_import_count_and_search_manifests(client):
    resp = client.post("/collections/manifests/import", json={"manifests": [_manifest_json(), _manifest_json("Other")]})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["collection_name"] == "manifests_384"
    assert body["requested"] == 2
    assert body["imported"] == 2

    resp = client.get("/collections/manifests/count")
    assert resp.json()["count"] == 2
    assert client.get("/collections/events/count").json()["count"] == 0

    resp = client.post("/search/manifests", json={"query": "Microsoft-Windows-Kernel-Process provider"})
    assert resp.status_code == 200, resp.text
    assert resp.json()["description"].startswith("There is an ETW provider")


def test_search_empty_events_returns_blank(client):
    resp = client.post("/search/events", json={"query": "process 4242"})
    assert resp.status_code == 200
    assert resp.json()["description"] == ""


def test_search_records(client):
    client.post("/collections/events/import", json={"events": [_event_json(1), _event_json(2), _event_json(3)]})
    resp = client.post("/search/events/records", json={"query": "notepad.exe", "top": 2})
    assert resp.status_code == 200, resp.text
    results = resp.json()["results"]
    assert len(results) == 2
    assert results[0]["score"] >= results[1]["score"]


def test_blank_query_is_rejected(client):
    assert client.post("/search/manifests", json={"query": "   "}).status_code == 400
    assert client.post("/search/manifests", json={"query": ""}).status_code == 422


def test_unknown_topic_is_rejected(client):
    assert client.get("/collections/traces/count").status_code == 422


def test_empty_import_is_rejected(client):
    assert client.post("/collections/manifests/import", json={"manifests": []}).status_code == 422


def test_erase(client):
    client.post("/collections/manifests/import", json={"manifests": [_manifest_json()]})
    resp = client.delete("/collections/manifests")
    assert resp.status_code == 200
    assert resp.json()["erased"] is True
    assert client.get("/collections/manifests/count").json()["count"] == 0


def test_save_and_restore(client, tmp_path):
    client.post("/collections/events/import", json={"events": [_event_json(1), _event_json(2)]})

    resp = client.post("/collections/events/save", json={})
    assert resp.status_code == 200, resp.text
    path = resp.json()["path"]
    assert path.startswith(str(tmp_path))

    client.delete("/collections/events")
    resp = client.post("/collections/events/restore", json={"path": path})
    assert resp.status_code == 200, resp.text
    assert resp.json()["restored"] == 2
    assert client.get("/collections/events/count").json()["count"] == 2


def test_restore_missing_file_is_an_error(client, tmp_path):
    resp = client.post("/collections/events/restore", json={"path": str(tmp_path / "missing.jsonl")})
    assert resp.status_code == 404


def test_cancel_import(client):
    resp = client.post("/collections/import/cancel")
    assert resp.status_code == 200
    assert resp.json() == {"cancelled": True}


def test_app_container_is_built_once_under_concurrent_requests(monkeypatch):
    built = []

    class SlowContainer:
        def __init__(self, cfg=None):
            time.sleep(0.05)
            built.append(self)

    monkeypatch.setattr(dependencies, "AppContainer", SlowContainer)
    monkeypatch.setattr(dependencies, "get_cfg", lambda: None)
    monkeypatch.setattr(dependencies, "_app_container", None)

    results = []
    threads = [threading.Thread(target=lambda: results.append(dependencies.get_app_container())) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(built) == 1
    assert all(r is built[0] for r in results)
