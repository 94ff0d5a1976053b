"""
Sense graphs and scores stored in Redis.

    senserank:graphs                  list of graph ids
    senserank:graph:<id>              JSON: name, created_at, source text, structure
    senserank:graph:<id>:scores       hash sense_ref -> JSON [mean, confidence]
    senserank:graph:<id>:weights      hash edge_ref -> weight
"""

import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone

import redis

from senserank.core.graph import ScoreStore, SenseGraph
from senserank.core.sense_lang import parse_senses


class RedisScoreStore(ScoreStore):
    """ScoreStore over the score and weight hashes of one stored graph."""

    def __init__(self, client: redis.Redis, graph_id: str):
        self.client = client
        self.graph_id = graph_id

    def _scores_key(self) -> str:
        return f"senserank:graph:{self.graph_id}:scores"

    def _weights_key(self) -> str:
        return f"senserank:graph:{self.graph_id}:weights"

    def get_score(self, ref: str) -> tuple[float, float]:
        data = self.client.hget(self._scores_key(), ref)
        if data is None:
            raise KeyError(f"No score for sense: {ref}")
        mean, confidence = json.loads(data)
        return mean, confidence

    def set_score(self, ref: str, mean: float, confidence: float) -> None:
        self.client.hset(self._scores_key(), ref, json.dumps([mean, confidence]))

    def get_edge_weight(self, edge_ref: int) -> float:
        data = self.client.hget(self._weights_key(), str(edge_ref))
        if data is None:
            raise KeyError(f"No weight for edge: {edge_ref}")
        return float(data)

    def seed_from(self, graph: SenseGraph) -> None:
        """Copy a graph's current scores and edge weights in."""
        scores = {
            ref: json.dumps([mean, conf])
            for ref, (mean, conf) in graph.scores().items()
        }
        weights = {str(i): e.weight for i, e in enumerate(graph.edges)}

        pipe = self.client.pipeline()
        pipe.delete(self._scores_key(), self._weights_key())
        if scores:
            pipe.hset(self._scores_key(), mapping=scores)
        if weights:
            pipe.hset(self._weights_key(), mapping=weights)
        pipe.execute()

    def all_scores(self) -> dict[str, tuple[float, float]]:
        raw = self.client.hgetall(self._scores_key())
        scores = {}
        for ref, data in raw.items():
            mean, confidence = json.loads(data)
            scores[ref.decode()] = (mean, confidence)
        return scores

    def clear(self) -> None:
        self.client.delete(self._scores_key(), self._weights_key())


@dataclass
class StoredGraph:
    id: str
    name: str
    created_at: str
    dsl: str
    graph: SenseGraph

    def summary(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at,
            **self.graph.stats(),
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at,
            "dsl": self.dsl,
            "graph": self.graph.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StoredGraph":
        return cls(
            id=data["id"],
            name=data["name"],
            created_at=data["created_at"],
            dsl=data.get("dsl", ""),
            graph=SenseGraph.from_dict(data["graph"]),
        )


class GraphStore:
    """Stores sense graphs in Redis."""

    def __init__(self, client: redis.Redis):
        self.client = client

    def _graph_key(self, graph_id: str) -> str:
        return f"senserank:graph:{graph_id}"

    def _graph_list_key(self) -> str:
        return "senserank:graphs"

    def create(self, name: str, dsl_text: str) -> str:
        """Create a graph from .senses text, returns graph_id."""
        graph = parse_senses(dsl_text)
        graph_id = uuid.uuid4().hex[:12]

        stored = StoredGraph(
            id=graph_id,
            name=name,
            created_at=datetime.now(timezone.utc).isoformat(),
            dsl=dsl_text,
            graph=graph,
        )

        self.client.set(self._graph_key(graph_id), json.dumps(stored.to_dict()))
        self.client.rpush(self._graph_list_key(), graph_id)
        self.score_store(graph_id).seed_from(graph)

        return graph_id

    def get(self, graph_id: str) -> StoredGraph | None:
        data = self.client.get(self._graph_key(graph_id))
        if not data:
            return None
        return StoredGraph.from_dict(json.loads(data))

    def list_all(self) -> list[StoredGraph]:
        graph_ids = self.client.lrange(self._graph_list_key(), 0, -1)
        graphs = []
        for gid in graph_ids:
            stored = self.get(gid.decode())
            if stored:
                graphs.append(stored)
        return graphs

    def score_store(self, graph_id: str) -> RedisScoreStore:
        return RedisScoreStore(self.client, graph_id)

    def delete(self, graph_id: str) -> bool:
        if not self.client.exists(self._graph_key(graph_id)):
            return False
        self.client.delete(self._graph_key(graph_id))
        self.client.lrem(self._graph_list_key(), 0, graph_id)
        self.score_store(graph_id).clear()
        return True
