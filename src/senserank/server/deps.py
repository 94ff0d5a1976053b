"""
Shared dependencies for routes.
"""

import redis

from senserank.core.store import GraphStore


def get_redis(db: int = 0):
    return redis.Redis(host="localhost", port=6379, db=db)


def get_graph_store(db: int = 0) -> GraphStore:
    return GraphStore(get_redis(db))
