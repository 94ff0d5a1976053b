# src/senserank/core/graph.py
"""
Sense graph: parses, word instances, candidate senses and weighted edges.

A document is an ordered list of parses. Each parse holds word instances,
each word instance holds its candidate senses, and senses are joined by
directed, weighted similarity edges.

    sense ref: "<word_id>:<sense_id>"   e.g. "w1:bank.1"
    edge ref:  index into SenseGraph.edges

GraphAccessor and ScoreStore are the two views the ranker needs. SenseGraph
implements both in memory; senserank.core.store has the Redis-backed
score store.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Iterator


def sense_ref(word_id: str, sense_id: str) -> str:
    return f"{word_id}:{sense_id}"


@dataclass
class WordSense:
    """One candidate meaning of one word instance."""
    word_id: str
    sense_id: str
    mean: float = 1.0        # current rank
    confidence: float = 0.9

    @property
    def ref(self) -> str:
        return sense_ref(self.word_id, self.sense_id)


@dataclass
class SenseEdge:
    source: str  # sense ref
    target: str  # sense ref
    weight: float = 1.0


@dataclass
class WordInstance:
    id: str
    word: str
    sense_refs: list[str] = field(default_factory=list)


@dataclass
class Parse:
    id: str
    word_ids: list[str] = field(default_factory=list)


class GraphAccessor(ABC):
    """Ordered, lazy traversal over a document's sense graph."""

    @abstractmethod
    def parses(self) -> Iterator[Parse]:
        pass

    @abstractmethod
    def word_instances(self, parse: Parse) -> Iterator[WordInstance]:
        pass

    @abstractmethod
    def senses_of(self, word: WordInstance) -> Iterator[tuple[WordSense, str]]:
        """Yield (sense, sense_ref) for each candidate sense of a word."""
        pass

    @abstractmethod
    def outgoing_edges(self, ref: str) -> Iterator[tuple[str, int]]:
        """Yield (target_ref, edge_ref) for edges leaving a sense."""
        pass

    @abstractmethod
    def incoming_edges(self, ref: str) -> Iterator[tuple[str, int]]:
        """Yield (source_ref, edge_ref) for edges entering a sense."""
        pass


class ScoreStore(ABC):
    """Per-sense (mean, confidence) storage plus edge weights."""

    @abstractmethod
    def get_score(self, ref: str) -> tuple[float, float]:
        pass

    @abstractmethod
    def set_score(self, ref: str, mean: float, confidence: float) -> None:
        pass

    @abstractmethod
    def get_edge_weight(self, edge_ref: int) -> float:
        pass


@dataclass
class SenseGraph(GraphAccessor, ScoreStore):
    """In-memory sense graph for one document."""
    parse_index: dict[str, Parse] = field(default_factory=dict)
    words: dict[str, WordInstance] = field(default_factory=dict)
    senses: dict[str, WordSense] = field(default_factory=dict)
    edges: list[SenseEdge] = field(default_factory=list)

    # Index: edge refs leaving / entering each sense
    outgoing: dict[str, list[int]] = field(default_factory=dict)
    incoming: dict[str, list[int]] = field(default_factory=dict)

    def add_parse(self, parse_id: str) -> Parse:
        if parse_id not in self.parse_index:
            self.parse_index[parse_id] = Parse(id=parse_id)
        return self.parse_index[parse_id]

    def add_word(self, parse_id: str, word_id: str, word: str) -> WordInstance:
        if parse_id not in self.parse_index:
            raise KeyError(f"Unknown parse: {parse_id}")
        if word_id in self.words:
            raise ValueError(f"Duplicate word instance: {word_id}")

        inst = WordInstance(id=word_id, word=word)
        self.words[word_id] = inst
        self.parse_index[parse_id].word_ids.append(word_id)
        return inst

    def add_sense(
        self,
        word_id: str,
        sense_id: str,
        mean: float = 1.0,
        confidence: float = 0.9,
    ) -> WordSense:
        if word_id not in self.words:
            raise KeyError(f"Unknown word instance: {word_id}")

        ref = sense_ref(word_id, sense_id)
        if ref in self.senses:
            return self.senses[ref]

        sense = WordSense(word_id, sense_id, mean, confidence)
        self.senses[ref] = sense
        self.words[word_id].sense_refs.append(ref)
        self.outgoing[ref] = []
        self.incoming[ref] = []
        return sense

    def add_edge(self, source: str, target: str, weight: float = 1.0) -> int:
        """Add source -> target [weight], returns the edge ref."""
        for ref in (source, target):
            if ref not in self.senses:
                raise KeyError(f"Unknown sense: {ref}")
        if not math.isfinite(weight) or weight < 0.0:
            raise ValueError(f"Edge weight must be finite and >= 0, got {weight}")

        edge_ref = len(self.edges)
        self.edges.append(SenseEdge(source, target, weight))
        self.outgoing[source].append(edge_ref)
        self.incoming[target].append(edge_ref)
        return edge_ref

    def add_symmetric_edge(self, a: str, b: str, weight: float = 1.0) -> tuple[int, int]:
        return self.add_edge(a, b, weight), self.add_edge(b, a, weight)

    # === GraphAccessor ===

    def parses(self) -> Iterator[Parse]:
        yield from self.parse_index.values()

    def word_instances(self, parse: Parse) -> Iterator[WordInstance]:
        for word_id in parse.word_ids:
            yield self.words[word_id]

    def senses_of(self, word: WordInstance) -> Iterator[tuple[WordSense, str]]:
        for ref in word.sense_refs:
            yield self.senses[ref], ref

    def outgoing_edges(self, ref: str) -> Iterator[tuple[str, int]]:
        for edge_ref in self.outgoing[ref]:
            yield self.edges[edge_ref].target, edge_ref

    def incoming_edges(self, ref: str) -> Iterator[tuple[str, int]]:
        for edge_ref in self.incoming[ref]:
            yield self.edges[edge_ref].source, edge_ref

    # === ScoreStore ===

    def get_score(self, ref: str) -> tuple[float, float]:
        sense = self.senses[ref]
        return sense.mean, sense.confidence

    def set_score(self, ref: str, mean: float, confidence: float) -> None:
        sense = self.senses[ref]
        sense.mean = mean
        sense.confidence = confidence

    def get_edge_weight(self, edge_ref: int) -> float:
        return self.edges[edge_ref].weight

    # === Helpers ===

    def get_parse(self, parse_id: str) -> Parse:
        if parse_id not in self.parse_index:
            raise KeyError(f"Unknown parse: {parse_id}")
        return self.parse_index[parse_id]

    def scores(self) -> dict[str, tuple[float, float]]:
        return {ref: (s.mean, s.confidence) for ref, s in self.senses.items()}

    def stats(self) -> dict:
        return {
            "parses": len(self.parse_index),
            "words": len(self.words),
            "senses": len(self.senses),
            "edges": len(self.edges),
        }

    def to_dict(self) -> dict:
        return {
            "parses": [
                {
                    "id": p.id,
                    "words": [
                        {
                            "id": w.id,
                            "word": w.word,
                            "senses": [
                                {
                                    "id": self.senses[ref].sense_id,
                                    "mean": self.senses[ref].mean,
                                    "confidence": self.senses[ref].confidence,
                                }
                                for ref in w.sense_refs
                            ],
                        }
                        for w in self.word_instances(p)
                    ],
                }
                for p in self.parses()
            ],
            "edges": [
                {"source": e.source, "target": e.target, "weight": e.weight}
                for e in self.edges
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SenseGraph":
        graph = cls()

        for pdata in data.get("parses", []):
            graph.add_parse(pdata["id"])
            for wdata in pdata.get("words", []):
                graph.add_word(pdata["id"], wdata["id"], wdata["word"])
                for sdata in wdata.get("senses", []):
                    graph.add_sense(
                        wdata["id"],
                        sdata["id"],
                        mean=sdata.get("mean", 1.0),
                        confidence=sdata.get("confidence", 0.9),
                    )

        for edata in data.get("edges", []):
            graph.add_edge(edata["source"], edata["target"], edata.get("weight", 1.0))

        return graph

    def print_graph(self) -> None:
        """Debug print the graph structure."""
        for parse in self.parses():
            print(f"=== Parse {parse.id} ===")
            for word in self.word_instances(parse):
                print(f"  {word.id} ({word.word})")
                for sense, ref in self.senses_of(word):
                    print(f"    {ref}: rank={sense.mean:.4f} conf={sense.confidence:.2f}")

        print(f"\n=== Edges ({len(self.edges)}) ===")
        for i, e in enumerate(self.edges):
            print(f"  [{i}] {e.source} -> {e.target} [{e.weight:g}]")
