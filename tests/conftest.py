"""Shared fixtures."""

import pytest
import redis

from senserank.core.graph import SenseGraph


@pytest.fixture
def redis_client():
    r = redis.Redis(host="localhost", port=6379, db=15)  # db=15 for tests
    try:
        r.ping()
    except redis.exceptions.ConnectionError:
        pytest.skip("Redis server not available")
    yield r
    # cleanup after each test
    for key in r.scan_iter("senserank:*"):
        r.delete(key)


def build_graph(parses: dict[str, dict[str, list[str]]], edges: list[tuple]) -> SenseGraph:
    """
    parses: {parse_id: {word_id: [sense_id, ...]}}
    edges:  [(source_ref, target_ref, weight, symmetric)]
    """
    graph = SenseGraph()
    for parse_id, words in parses.items():
        graph.add_parse(parse_id)
        for word_id, sense_ids in words.items():
            graph.add_word(parse_id, word_id, word_id)
            for sid in sense_ids:
                graph.add_sense(word_id, sid)
    for source, target, weight, symmetric in edges:
        if symmetric:
            graph.add_symmetric_edge(source, target, weight)
        else:
            graph.add_edge(source, target, weight)
    return graph


@pytest.fixture
def pair_graph() -> SenseGraph:
    """A <-> B with weight 1.0: every rank 1.0 is already the fixed point."""
    return build_graph(
        {"p1": {"a": ["1"], "b": ["1"]}},
        [("a:1", "b:1", 1.0, True)],
    )


@pytest.fixture
def bank_graph() -> SenseGraph:
    """Three words, six senses, symmetric edges of varied weight."""
    return build_graph(
        {"p1": {"sit": ["1", "2"], "bank": ["1", "2", "3"], "river": ["1"]}},
        [
            ("sit:1", "bank:1", 0.3, True),
            ("sit:1", "bank:2", 0.2, True),
            ("sit:2", "bank:1", 0.1, True),
            ("bank:1", "river:1", 0.9, True),
            ("bank:2", "river:1", 0.1, True),
            ("bank:3", "river:1", 0.05, True),
        ],
    )
