from fastapi.testclient import TestClient
from api.main import app

client = TestClient(app)

def test_config():
    response = client.get("/config")
    assert response.status_code == 200
    data = response.json()
    assert data["settings"]["index_path"] == ".docindex/index.jsonl"
    assert data["settings"]["search_limit"] == 10
    assert data["resolved"]["extensions"] == [".md", ".markdown", ".txt"]
    assert data["resolved"]["index_exists"] is False
    assert data["resolved"]["index_path"].endswith("index.jsonl")


def test_config_resolves_custom_extensions(monkeypatch):
    from core.config import get_settings

    monkeypatch.setenv("DOCINDEX_EXTENSIONS", "RST, .md,rst")
    get_settings.cache_clear()

    data = client.get("/config").json()

    assert data["resolved"]["extensions"] == [".rst", ".md"]
