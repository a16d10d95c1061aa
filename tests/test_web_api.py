"""Tests for the analysis HTTP API."""

import json
from pathlib import Path

import pytest

try:
    from fastapi.testclient import TestClient
    from repo_mapper.web import create_app
    from repo_mapper.web.state import state
    HAS_WEB = True
except ImportError:
    HAS_WEB = False

pytestmark = pytest.mark.skipif(not HAS_WEB, reason="web dependencies not installed")

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def client():
    state.clear()
    return TestClient(create_app())


@pytest.fixture
def sample():
    return json.loads((FIXTURES / "sample_repo.json").read_text())


def _analyze(client, payload):
    res = client.post("/api/analysis/analyze", json=payload)
    assert res.status_code == 200, res.text
    return res.json()


class TestAnalyzeAPI:
    def test_analyze(self, client, sample):
        data = _analyze(client, sample)
        assert data["analysis_id"]
        assert data["total_components"] == 10
        assert data["cycles"] == [["src/core/events.py::EventBus", "src/core/events.py::Handler"]]
        assert len(data["unresolved_references"]) == 1

    def test_get_analysis(self, client, sample):
        data = _analyze(client, sample)
        res = client.get(f"/api/analysis/{data['analysis_id']}")
        assert res.status_code == 200
        assert res.json()["processing_order"] == data["processing_order"]

    def test_analysis_not_found(self, client):
        res = client.get("/api/analysis/nonexistent")
        assert res.status_code == 404

    def test_invalid_kind_422(self, client):
        res = client.post("/api/analysis/analyze", json={
            "symbols": [{"id": "a", "name": "a", "kind": "banana", "file_path": "a.py"}],
        })
        assert res.status_code == 422

    def test_duplicate_ids_400(self, client):
        res = client.post("/api/analysis/analyze", json={
            "symbols": [
                {"id": "x", "name": "x", "file_path": "a.py"},
                {"id": "x", "name": "x", "file_path": "b.py"},
            ],
        })
        assert res.status_code == 400

    def test_delete(self, client, sample):
        analysis_id = _analyze(client, sample)["analysis_id"]
        assert client.delete(f"/api/analysis/{analysis_id}").status_code == 200
        assert client.get(f"/api/analysis/{analysis_id}").status_code == 404
        assert client.delete(f"/api/analysis/{analysis_id}").status_code == 404


class TestQueryAPI:
    def test_dependencies(self, client, sample):
        analysis_id = _analyze(client, sample)["analysis_id"]
        res = client.get(
            f"/api/analysis/{analysis_id}/dependencies",
            params={"component_id": "src/app/main.py::main"},
        )
        assert res.status_code == 200
        assert res.json()["dependencies"] == ["src/app/main.py::App", "src/app/main.py::App.run"]

    def test_dependents(self, client, sample):
        analysis_id = _analyze(client, sample)["analysis_id"]
        res = client.get(
            f"/api/analysis/{analysis_id}/dependents",
            params={"component_id": "src/util/log.py::get_logger"},
        )
        assert res.status_code == 200
        assert res.json()["dependents"] == [
            "src/app/main.py::App.run",
            "src/core/service.py::UserService",
        ]

    def test_component_not_found(self, client, sample):
        analysis_id = _analyze(client, sample)["analysis_id"]
        res = client.get(
            f"/api/analysis/{analysis_id}/dependencies",
            params={"component_id": "missing"},
        )
        assert res.status_code == 404

    def test_map(self, client, sample):
        sample["label"] = "sample-repo"
        analysis_id = _analyze(client, sample)["analysis_id"]
        res = client.get(
            f"/api/analysis/{analysis_id}/map",
            params={"show_order": True, "focus": "App"},
        )
        assert res.status_code == 200
        data = res.json()
        assert "Path: sample-repo" in data["map"]
        assert "Focus: App" in data["map"]
        assert data["entry_points"][0] == "src/app/main.py::App"

    def test_health(self, client):
        res = client.get("/api/health")
        assert res.json()["status"] == "ok"


class TestDiffAPI:
    def test_diff_two_analyses(self, client, sample):
        old_id = _analyze(client, sample)["analysis_id"]
        sample["references"] = [
            r for r in sample["references"]
            if r["from_id"] != "src/core/events.py::Handler"
        ]
        new_id = _analyze(client, sample)["analysis_id"]

        res = client.post("/api/analysis/diff", json={"old_id": old_id, "new_id": new_id})
        assert res.status_code == 200
        data = res.json()
        assert data["old_id"] == old_id
        assert data["resolved_cycles"] == [
            ["src/core/events.py::EventBus", "src/core/events.py::Handler"],
        ]
        assert data["added"] == [] and data["removed"] == []

    def test_diff_unknown_analysis(self, client, sample):
        old_id = _analyze(client, sample)["analysis_id"]
        res = client.post("/api/analysis/diff", json={"old_id": old_id, "new_id": "nope"})
        assert res.status_code == 404
