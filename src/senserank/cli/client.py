"""
HTTP client for the SenseRank API.

Every call takes the Redis database number the server should use.
"""

import httpx

BASE_URL = "http://localhost:8000/api"


def create_graph(name: str, dsl: str, db: int = 0) -> dict:
    r = httpx.post(f"{BASE_URL}/graphs", params={"db": db}, json={"name": name, "dsl": dsl}, timeout=60)
    r.raise_for_status()
    return r.json()


def list_graphs(db: int = 0) -> list[dict]:
    r = httpx.get(f"{BASE_URL}/graphs", params={"db": db})
    r.raise_for_status()
    return r.json()["graphs"]


def get_graph(graph_id: str, db: int = 0) -> dict:
    r = httpx.get(f"{BASE_URL}/graphs/{graph_id}", params={"db": db})
    r.raise_for_status()
    return r.json()


def delete_graph(graph_id: str, db: int = 0) -> dict:
    r = httpx.delete(f"{BASE_URL}/graphs/{graph_id}", params={"db": db})
    r.raise_for_status()
    return r.json()


def rank_graph(graph_id: str, options: dict = None, db: int = 0) -> dict:
    payload = {k: v for k, v in (options or {}).items() if v is not None}
    r = httpx.post(f"{BASE_URL}/graphs/{graph_id}/rank", params={"db": db}, json=payload, timeout=120)
    r.raise_for_status()
    return r.json()


def get_scores(graph_id: str, db: int = 0) -> dict:
    r = httpx.get(f"{BASE_URL}/graphs/{graph_id}/scores", params={"db": db})
    r.raise_for_status()
    return r.json()
