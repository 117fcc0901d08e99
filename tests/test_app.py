import pytest
from fastapi.testclient import TestClient

from vent_forge import app as app_module
from vent_forge import config
from vent_forge.models import ALIASES, REGISTRY, get_builder, resolve_slug


@pytest.fixture
def client(monkeypatch):
    # sin Supabase: /generate devuelve los bytes directamente
    monkeypatch.setattr(config, "SUPABASE_URL", "")
    monkeypatch.setattr(config, "SUPABASE_SERVICE_KEY", "")
    return TestClient(app_module.app)


def test_registry_discovers_vent_cover():
    assert "vent_cover" in REGISTRY
    for slug in ("vent_cover", "vent-cover", "VENT-COVER", "rejilla-ventilacion", "rejilla_ventilacion"):
        assert resolve_slug(slug) == "vent_cover"
    assert ALIASES["ventilation_cover"] == "vent_cover"
    assert get_builder("no-such-model") is None


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["loaded_models"] == ["vent_cover"]
    assert body["storage"] is False


def test_model_info(client):
    r = client.get("/models/vent-cover")
    assert r.status_code == 200
    body = r.json()
    assert body["slug"] == "vent_cover"
    assert body["defaults"]["slot_count"] == 6
    assert body["types"]["fragments"] == "int"
    assert client.get("/models/nope").status_code == 404


def test_generate_unknown_slug(client):
    r = client.post("/generate", json={"slug": "nope", "params": {}})
    assert r.status_code == 404


@pytest.mark.parametrize("params", [
    {"plate_fillet": 80},
    {"wall_thickness": 60},
    {"plate_width": "abc"},
])
def test_generate_invalid_parameters(client, params):
    r = client.post("/generate", json={"slug": "vent_cover", "params": params})
    assert r.status_code == 422
    assert "Invalid parameters" in r.json()["detail"]


def test_generate_returns_binary_stl(client):
    r = client.post("/generate", json={"slug": "vent-cover", "params": {"fragments": 24}})
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("model/stl")
    assert "vent-cover-" in r.headers["content-disposition"]
    data = r.content
    # STL binario: cabecera 80 + contador 4 + 50 bytes por triángulo
    n = int.from_bytes(data[80:84], "little")
    assert n > 0
    assert len(data) == 84 + 50 * n


def test_generate_uploads_when_storage_configured(client, monkeypatch):
    calls = {}

    def fake_upload(data, object_path, *, content_type):
        calls["path"] = object_path
        calls["type"] = content_type
        calls["size"] = len(data)
        return {"path": object_path, "signed_url": "https://example.invalid/signed"}

    monkeypatch.setattr(config, "SUPABASE_URL", "https://example.invalid")
    monkeypatch.setattr(config, "SUPABASE_SERVICE_KEY", "key")
    monkeypatch.setattr(app_module, "upload_and_get_url", fake_upload)

    r = client.post("/generate", json={"slug": "vent_cover", "params": {"fragments": 24}, "fmt": "glb"})
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True
    assert body["slug"] == "vent_cover"
    assert body["signed_url"] == "https://example.invalid/signed"
    assert calls["path"].startswith("vent-cover/") and calls["path"].endswith(".glb")
    assert calls["type"] == "model/gltf-binary"
    assert calls["size"] > 0
