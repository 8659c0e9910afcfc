"""Tests for the HTTP API: search, full text, summaries, lectures, status."""

import json
import sys
import tempfile
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from fastapi.testclient import TestClient
from server.app import app
from server.config import Settings
from server.dependencies import get_runtime, get_settings
from server.runtime import build_runtime
from server.services.llm.provider import FakeProvider


# ============================================================================
# Helpers
# ============================================================================

def _write_corpus(root: Path):
    chunks = [
        {"ID": "GA052/7", "index": "n5x6ru", "title": "Kant", "fileName": "GA052_07.md",
         "content": "Kant und die Erkenntnistheorie: das Ding an sich bleibt unerkennbar."},
        {"ID": "GA052/8", "index": "^g1", "title": "Goethe", "fileName": "GA052_08.md",
         "content": "Goethes Weltanschauung und das Denken in der Natur."},
        {"ID": "GA053/1", "index": "s1", "title": "", "fileName": "GA053_01.md",
         "content": "Die Seele und das Bewusstsein."},
    ]
    lectures = [
        {
            "ID": "GA052/7", "title": "Kant", "fileName": "GA052_07.md", "lectureNumber": 7,
            "gaNumber": "052", "gaTitle": "Spirituelle Seelenlehre", "location": "Berlin", "date": "1903-03-19",
            "paragraphs": [
                {"index": "n5x6ru", "content": "Kant und die Erkenntnistheorie."},
                {"index": "a2", "content": "Ein Zwischenstück."},
                {"index": "a3", "content": "Goethe sieht das anders."},
            ],
        },
        {
            "ID": "GA052/8", "title": "Goethe", "fileName": "GA052_08.md", "lectureNumber": 8,
            "paragraphs": [{"index": "^g1", "content": "Goethes Weltanschauung."}],
        },
    ]
    (root / "steiner-search-052-053.json").write_text(json.dumps({"chunks": chunks}), encoding="utf-8")
    (root / "steiner-full-lectures-052-053.json").write_text(json.dumps({"lectures": lectures}), encoding="utf-8")


def _client(tmp: str) -> TestClient:
    root = Path(tmp)
    _write_corpus(root)
    settings = Settings(data_dir=root, claude_api_key="", load_env_file=False)
    app.dependency_overrides.clear()
    app.dependency_overrides[get_settings] = lambda: settings
    return TestClient(app)


def _client_with_provider(tmp: str, provider) -> TestClient:
    root = Path(tmp)
    _write_corpus(root)
    runtime = build_runtime(Settings(data_dir=root, claude_api_key="", load_env_file=False), provider=provider)
    app.dependency_overrides.clear()
    app.dependency_overrides[get_runtime] = lambda: runtime
    return TestClient(app)


# ============================================================================
# Status
# ============================================================================

def test_health():
    client = TestClient(app)
    assert client.get("/health").json() == {"ok": True}


def test_debug_status():
    with tempfile.TemporaryDirectory() as tmp:
        client = _client(tmp)
        data = client.get("/debug/status").json()
        assert data["status"] == "running"
        assert data["passagesLoaded"] == 3
        assert data["lecturesLoaded"] == 2
        assert data["synonymGroups"] == 8
        assert data["llmConfigured"] is False
    app.dependency_overrides.clear()


# ============================================================================
# Search
# ============================================================================

def test_hybrid_search():
    with tempfile.TemporaryDirectory() as tmp:
        client = _client(tmp)
        resp = client.post("/api/hybrid-search", json={"query": "kant", "limit": 5})
        assert resp.status_code == 200
        data = resp.json()
        assert data["searchMethod"] == "hybrid-keyword-semantic"
        assert data["results"][0]["ID"] == "GA052/7"
        assert "kant" in data["results"][0]["matchedTerms"]
        assert data["results"][0]["finalScore"] > 0
        assert data["resultCount"] <= 5
    app.dependency_overrides.clear()


def test_hybrid_search_without_hits():
    with tempfile.TemporaryDirectory() as tmp:
        client = _client(tmp)
        data = client.post("/api/hybrid-search", json={"query": "quantenmechanik"}).json()
        assert data["results"] == []
        assert data["searchMethod"] == "hybrid-keyword"
        assert data["message"]
    app.dependency_overrides.clear()


def test_hybrid_search_requires_query():
    with tempfile.TemporaryDirectory() as tmp:
        client = _client(tmp)
        assert client.post("/api/hybrid-search", json={"query": ""}).status_code == 422
        assert client.post("/api/hybrid-search", json={}).status_code == 422
    app.dependency_overrides.clear()


def test_thematic_search_without_model_uses_fallback():
    with tempfile.TemporaryDirectory() as tmp:
        client = _client(tmp)
        data = client.post("/api/thematic-hybrid-search", json={"query": "Wie ist das Verhältnis von Kant und Goethe?"}).json()
        assert data["llmUsed"] is False
        assert data["content"].startswith("# Analyse zu:")
        ids = {s["ID"] for s in data["sources"]}
        assert {"GA052/7", "GA052/8"} <= ids
        assert all(isinstance(s["score"], int) for s in data["sources"])
    app.dependency_overrides.clear()


def test_thematic_search_links_model_citations():
    with tempfile.TemporaryDirectory() as tmp:
        provider = FakeProvider(canned="Kant zieht Grenzen (GA052/7:n5x6ru), Goethe nicht (GA052/8:g1).")
        client = _client_with_provider(tmp, provider)
        data = client.post("/api/thematic-hybrid-search", json={"query": "Kant Goethe", "depth": "genau"}).json()
        assert data["llmUsed"] is True
        assert 'data-id="GA052/7" data-index="n5x6ru"' in data["content"]
        assert 'data-id="GA052/8" data-index="^g1"' in data["content"]
        assert provider.calls[0]["max_tokens"] == 3500
    app.dependency_overrides.clear()


def test_thematic_search_without_hits():
    with tempfile.TemporaryDirectory() as tmp:
        client = _client(tmp)
        data = client.post("/api/thematic-hybrid-search", json={"query": "Quantenmechanik"}).json()
        assert data["content"] == "Keine relevanten Textstellen gefunden."
        assert data["sources"] == []
    app.dependency_overrides.clear()


def test_fulltext_search_with_proximity():
    with tempfile.TemporaryDirectory() as tmp:
        client = _client(tmp)
        near = client.post("/api/fulltext-search", json={"word1": "kant", "word2": "goethe", "proximity": 2}).json()
        assert [(r["ID"], r["paragraphIndex"]) for r in near["results"]] == [("GA052/7", 0), ("GA052/7", 2)]
        assert near["results"][0]["location"] == "Berlin"

        far = client.post("/api/fulltext-search", json={"word1": "kant", "word2": "goethe", "proximity": 1}).json()
        assert far["resultCount"] == 0
    app.dependency_overrides.clear()


def test_fulltext_search_validation():
    with tempfile.TemporaryDirectory() as tmp:
        client = _client(tmp)
        assert client.post("/api/fulltext-search", json={"word1": ""}).status_code == 422
        assert client.post("/api/fulltext-search", json={"word1": "a", "proximity": -1}).status_code == 422
    app.dependency_overrides.clear()


# ============================================================================
# Summaries and lectures
# ============================================================================

def test_summarize_lecture_round_trip():
    with tempfile.TemporaryDirectory() as tmp:
        client = _client(tmp)
        first = client.post("/api/summarize-lecture", json={"lectureId": "GA052/7"}).json()
        assert first["fromCache"] is False
        assert first["saved"] is True
        second = client.post("/api/summarize-lecture", json={"lectureId": "GA052/7"}).json()
        assert second["fromCache"] is True
        assert "saved" not in second
    app.dependency_overrides.clear()


def test_summarize_unknown_lecture():
    with tempfile.TemporaryDirectory() as tmp:
        client = _client(tmp)
        resp = client.post("/api/summarize-lecture", json={"lectureId": "GA999/1"})
        assert resp.status_code == 404
        assert "GA052/7" in resp.json()["available"]
    app.dependency_overrides.clear()


def test_full_lecture_routes():
    with tempfile.TemporaryDirectory() as tmp:
        client = _client(tmp)
        by_number = client.get("/api/full-lecture/ga052/7")
        assert by_number.status_code == 200
        assert by_number.json()["lecture"]["ID"] == "GA052/7"
        assert by_number.json()["paragraphCount"] == 3

        missing = client.get("/api/full-lecture/GA052/99")
        assert missing.status_code == 404

        listing = client.get("/api/lectures/list").json()
        assert listing["count"] == 2
    app.dependency_overrides.clear()


def test_ga_overview_route():
    with tempfile.TemporaryDirectory() as tmp:
        client = _client(tmp)
        first = client.get("/api/ga-overview/GA052").json()
        assert first["lectureCount"] == 2
        assert first["fromCache"] is False
        assert client.get("/api/ga-overview/ga052").json()["fromCache"] is True
        assert client.get("/api/ga-overview/GA052?refresh=true").json()["fromCache"] is False
        assert client.get("/api/ga-overview/GA999").status_code == 404
    app.dependency_overrides.clear()


def test_cors_uses_configured_origins():
    origins = get_settings().cors_origins
    origin = "http://example.org" if "*" in origins else origins[0]
    resp = TestClient(app).get("/health", headers={"Origin": origin})
    assert resp.headers["access-control-allow-origin"] in ("*", origin)
