from __future__ import annotations

import json
from datetime import date

from fastapi.testclient import TestClient


def _client() -> TestClient:
    import app as app_module

    return TestClient(app_module.create_app())


def test_app_smoke_routes(reload_endpoints):
    client = _client()

    r = client.get("/", follow_redirects=False)
    assert r.status_code == 307
    assert r.headers["location"] == "/settings"

    r = client.get("/settings")
    assert r.status_code == 200
    assert r.json() == {}


def test_put_get_and_commit(reload_endpoints, sandbox_project):
    client = _client()

    r = client.put("/settings/values/server.host", json="localhost")
    assert r.status_code == 200
    assert r.json()["value"] == "localhost"
    assert r.json()["valid"] is True

    client.put("/settings/values/server.port", json=8080)
    client.put("/settings/values/server.tags", json=["a", "b"])
    client.put("/settings/values/server.tags", json=["b", "c"])

    r = client.get("/settings/values/server.port")
    assert r.json() == {"path": "server.port", "value": 8080}
    assert sorted(client.get("/settings/values/server.tags").json()["value"]) == ["a", "b", "c"]

    r = client.post("/settings/commit")
    assert r.json() == {"committed": True, "persistent": True}

    stored = sandbox_project / "data" / "store" / "app-settings.json"
    assert json.loads(stored.read_text(encoding="utf-8"))["server"]["port"] == 8080


def test_missing_value_is_404_and_falsy_value_is_found(reload_endpoints):
    client = _client()
    assert client.get("/settings/values/nope").status_code == 404

    client.put("/settings/values/feature.enabled", json=False)
    r = client.get("/settings/values/feature.enabled")
    assert r.status_code == 200
    assert r.json()["value"] is False


def test_invalid_path_is_400(reload_endpoints):
    client = _client()
    assert client.put("/settings/values/a..b", json=1).status_code == 400


def test_patch_extends_document(reload_endpoints):
    client = _client()
    client.put("/settings/values/keep", json=1)
    r = client.patch("/settings", json={"server": {"host": "h"}})
    assert r.status_code == 200
    assert client.get("/settings").json() == {"keep": 1, "server": {"host": "h"}}


def test_export_download_headers(reload_endpoints):
    client = _client()
    client.put("/settings/values/server.host", json="localhost")
    client.put("/settings/values/server.port", json=8080)

    r = client.get("/settings/export", params={"format": "json", "name": "backup"})
    assert r.status_code == 200
    assert r.content == b'{"server":{"host":"localhost","port":8080}}'
    assert r.headers["content-disposition"] == f"attachment; filename=backup-{date.today().isoformat()}.json"
    assert r.headers["content-type"] == "application/json; charset=utf-8"
    assert r.headers["cache-control"] == "public"
    assert r.headers["content-description"] == "File Transfer"
    assert r.headers["content-transfer-encoding"] == "binary"


def test_validate_endpoint_without_schema(reload_endpoints):
    r = _client().post("/settings/validate")
    assert r.json() == {"valid": True, "violations": [], "committed": False}


def test_keys_named_like_actions_are_reachable(reload_endpoints):
    client = _client()
    client.put("/settings/values/export", json="nightly")
    client.put("/settings/values/commit", json=False)

    assert client.get("/settings/values/export").json() == {"path": "export", "value": "nightly"}
    assert client.get("/settings/values/commit").json()["value"] is False
    assert client.get("/settings/export").headers["content-disposition"].startswith("attachment;")
