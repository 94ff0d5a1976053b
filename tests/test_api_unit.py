"""
Unit tests using FastAPI TestClient (no separate server needed).
Needs a local Redis; uses db=15.
"""

import pytest
from fastapi.testclient import TestClient

from senserank.server.main import app


DSL = """
parse p1
word w1 sit: sit.1 sit.2
word w2 bank: bank.1 bank.2
edge w1:sit.1 <-> w2:bank.1 [0.7]
edge w1:sit.2 <-> w2:bank.2 [0.1]

parse p2
word w3 river: river.1
word w4 the:
"""


@pytest.fixture
def client(redis_client):
    return TestClient(app)


def create(client) -> str:
    r = client.post("/api/graphs?db=15", json={"name": "unit_graph", "dsl": DSL})
    assert r.status_code == 200
    return r.json()["id"]


def test_root(client):
    r = client.get("/")
    assert r.json()["name"] == "SenseRank API"


class TestGraphs:
    def test_create_and_get(self, client):
        graph_id = create(client)

        r = client.get(f"/api/graphs/{graph_id}?db=15")
        assert r.status_code == 200
        data = r.json()
        assert data["name"] == "unit_graph"
        assert [p["id"] for p in data["graph"]["parses"]] == ["p1", "p2"]

        r = client.get("/api/graphs?db=15")
        assert any(g["id"] == graph_id for g in r.json()["graphs"])

    def test_create_bad_text(self, client):
        r = client.post("/api/graphs?db=15", json={"name": "bad", "dsl": "word w1 x: x.1"})
        assert r.status_code == 400
        assert "line 1" in r.json()["detail"]

    def test_not_found(self, client):
        assert client.get("/api/graphs/nonexistent123?db=15").status_code == 404
        assert client.post("/api/graphs/nonexistent123/rank?db=15").status_code == 404
        assert client.delete("/api/graphs/nonexistent123?db=15").status_code == 404

    def test_delete(self, client):
        graph_id = create(client)
        r = client.delete(f"/api/graphs/{graph_id}?db=15")
        assert r.json() == {"deleted": graph_id}
        assert client.get(f"/api/graphs/{graph_id}?db=15").status_code == 404


class TestRank:
    def test_rank_and_read_scores(self, client):
        graph_id = create(client)

        r = client.post(f"/api/graphs/{graph_id}/rank?db=15", json={"seed": 1})
        assert r.status_code == 200
        report = r.json()["report"]
        assert report["parses"] == 2
        assert report["empty_words"] == ["w4"]
        assert report["disconnected"] == ["w3:river.1"]
        assert report["converge"]["p1"] < 0.03

        r = client.get(f"/api/graphs/{graph_id}/scores?db=15")
        scores = r.json()["scores"]
        assert scores["w3:river.1"] == {"mean": 1.0, "confidence": 0.9}
        # each sense pair is symmetric, so ranks stay at the fixed point
        assert scores["w2:bank.1"]["mean"] == pytest.approx(1.0)

    def test_rank_with_config(self, client):
        graph_id = create(client)

        r = client.post(
            f"/api/graphs/{graph_id}/rank?db=15",
            json={"seed": 2, "damping_factor": 0.8, "convergence_limit": 0.01},
        )
        config = r.json()["config"]
        assert config["damping_factor"] == 0.8
        assert config["convergence_limit"] == 0.01

    def test_rank_bad_config(self, client):
        graph_id = create(client)
        r = client.post(f"/api/graphs/{graph_id}/rank?db=15", json={"damping_factor": 1.5})
        assert r.status_code == 400
