"""
Sense graph routes: /api/graphs
"""

import random

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from senserank.core.config import RankConfig
from senserank.core.errors import ConfigurationError
from senserank.core.sense_rank import SenseRank
from senserank.server.deps import get_graph_store


router = APIRouter(prefix="/api/graphs", tags=["graphs"])


class CreateGraphRequest(BaseModel):
    name: str
    dsl: str


class RankRequest(BaseModel):
    seed: int | None = None
    damping_factor: float | None = None
    convergence_damper: float | None = None
    convergence_limit: float | None = None
    max_steps: int | None = None
    on_degenerate: str | None = None


@router.get("")
async def list_graphs(db: int = 0):
    """List all sense graphs."""
    store = get_graph_store(db)
    return {"graphs": [g.summary() for g in store.list_all()]}


@router.post("")
async def create_graph(req: CreateGraphRequest, db: int = 0):
    """Create a sense graph from .senses text."""
    store = get_graph_store(db)
    try:
        graph_id = store.create(req.name, req.dsl)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return store.get(graph_id).summary()


@router.get("/{graph_id}")
async def get_graph(graph_id: str, db: int = 0):
    """Get a sense graph by ID."""
    store = get_graph_store(db)
    stored = store.get(graph_id)
    if not stored:
        raise HTTPException(status_code=404, detail="Graph not found")
    return stored.to_dict()


@router.delete("/{graph_id}")
async def delete_graph(graph_id: str, db: int = 0):
    """Delete a sense graph and its scores."""
    store = get_graph_store(db)
    if not store.delete(graph_id):
        raise HTTPException(status_code=404, detail="Graph not found")
    return {"deleted": graph_id}


@router.post("/{graph_id}/rank")
async def rank_graph(graph_id: str, req: RankRequest | None = None, db: int = 0):
    """Rank every parse of a graph, storing the scores."""
    store = get_graph_store(db)
    stored = store.get(graph_id)
    if not stored:
        raise HTTPException(status_code=404, detail="Graph not found")

    req = req or RankRequest()
    try:
        config = RankConfig.from_dict(req.model_dump(exclude={"seed"}))
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    ranker = SenseRank(
        stored.graph,
        store.score_store(graph_id),
        config=config,
        rng=random.Random(req.seed),
    )
    report = ranker.rank_document(list(stored.graph.parses()))

    return {"id": graph_id, "config": config.to_dict(), "report": report.to_dict()}


@router.get("/{graph_id}/scores")
async def get_scores(graph_id: str, db: int = 0):
    """Get the current (mean, confidence) of every sense."""
    store = get_graph_store(db)
    stored = store.get(graph_id)
    if not stored:
        raise HTTPException(status_code=404, detail="Graph not found")

    scores = store.score_store(graph_id).all_scores()
    return {
        "id": graph_id,
        "scores": {
            ref: {"mean": mean, "confidence": conf}
            for ref, (mean, conf) in scores.items()
        },
    }
