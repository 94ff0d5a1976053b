# src/senserank/core/sense_rank.py
"""
PageRank over word senses.

The rank of a sense a is

    P(a) = (1-d) + d * sum_b (w_ba / sum_c w_cb) * P(b)

where b ranges over senses with an edge into a, w_ba is the weight of that
edge and sum_c w_cb is the total weight entering b. Dividing by the
neighbor's incoming weight makes t_ba = w_ba / sum_c w_cb a column of a
Markov transition matrix, so rank mass is conserved over *all* senses of
all words. The ranks of one word's senses are not normalized on their own.

Ranks are updated in place along a weighted random walk (Gauss-Seidel
order, not a Jacobi sweep). The walk stops when an exponentially decaying
average of recent rank changes drops below a limit. That average is shared
by every walk in a parse, so later walks stop quickly once the graph has
settled.
"""

import logging
import random
from dataclasses import dataclass, field

from senserank.core.config import RankConfig
from senserank.core.errors import SenseRankError, NumericDegeneracyError
from senserank.core.graph import GraphAccessor, ScoreStore, Parse


logger = logging.getLogger(__name__)


class ConvergenceTracker:
    """Exponential moving average of rank-update magnitudes."""

    def __init__(self, damper: float = 1.0 / 30, limit: float = 0.03):
        self.damper = damper
        self.limit = limit
        self.converge = 1.0

    def observe(self, delta: float) -> float:
        self.converge *= 1.0 - self.damper
        self.converge += self.damper * delta
        return self.converge

    def has_converged(self) -> bool:
        return self.converge < self.limit


@dataclass
class WalkResult:
    start_ref: str
    steps: int = 0
    converged: bool = False
    skipped: bool = False  # start sense was disconnected
    capped: bool = False   # stopped at max_steps


@dataclass
class RankReport:
    """What happened while ranking; scores themselves live in the ScoreStore."""
    parses: int = 0
    walks: int = 0
    steps: int = 0
    disconnected: list[str] = field(default_factory=list)
    empty_words: list[str] = field(default_factory=list)
    capped_walks: list[str] = field(default_factory=list)
    degenerate_terms: int = 0
    failed_parses: dict[str, str] = field(default_factory=dict)
    converge: dict[str, float] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed_parses and not self.capped_walks

    def to_dict(self) -> dict:
        return {
            "parses": self.parses,
            "walks": self.walks,
            "steps": self.steps,
            "disconnected": self.disconnected,
            "empty_words": self.empty_words,
            "capped_walks": self.capped_walks,
            "degenerate_terms": self.degenerate_terms,
            "failed_parses": self.failed_parses,
            "converge": self.converge,
        }


def pick_weighted(candidates: list[tuple[str, float]], draw: float) -> str | None:
    """
    Return the first candidate at which the running weight sum exceeds draw.

    Returns None if draw is not below the total weight.
    """
    running = 0.0
    for ref, weight in candidates:
        running += weight
        if draw < running:
            return ref
    return None


class SenseRank:
    def __init__(
        self,
        graph: GraphAccessor,
        scores: ScoreStore | None = None,
        config: RankConfig | None = None,
        rng: random.Random | None = None,
        trace=None,
    ):
        if scores is None:
            if not isinstance(graph, ScoreStore):
                raise TypeError("scores is required when graph is not a ScoreStore")
            scores = graph

        self.graph = graph
        self.scores = scores
        self.config = config or RankConfig()
        self.rng = rng or random.Random()
        self.trace = trace

    def new_tracker(self) -> ConvergenceTracker:
        return ConvergenceTracker(
            damper=self.config.convergence_damper,
            limit=self.config.convergence_limit,
        )

    # === Entry points ===

    def rank_sentence(self, parse: Parse | str) -> RankReport:
        return self.rank_document([parse])

    def rank_document(self, parses: list[Parse | str]) -> RankReport:
        """
        Rank each parse until its walks converge.

        Every parse is initialized before any is ranked. Each parse keeps its
        own convergence accumulator, and an error in one parse is recorded
        in the report without stopping the others.
        """
        report = RankReport()
        resolved = [self._resolve_parse(p) for p in parses]

        trackers = {}
        for parse in resolved:
            trackers[parse.id] = self.init_parse(parse)

        for parse in resolved:
            tracker = trackers[parse.id]
            walks_before, steps_before = report.walks, report.steps
            report.parses += 1
            try:
                self.rank_parse(parse, tracker, report)
            except SenseRankError as e:
                logger.warning(f"Ranking parse {parse.id} failed: {e}")
                report.failed_parses[parse.id] = str(e)
            report.converge[parse.id] = tracker.converge

            logger.info(
                f"Ranked parse {parse.id}: converge={tracker.converge:.4g} "
                f"walks={report.walks - walks_before} steps={report.steps - steps_before}"
            )

        return report

    def _resolve_parse(self, parse: Parse | str) -> Parse:
        if isinstance(parse, Parse):
            return parse
        for p in self.graph.parses():
            if p.id == parse:
                return p
        raise KeyError(f"Unknown parse: {parse}")

    # === Initializer ===

    def init_parse(self, parse: Parse) -> ConvergenceTracker:
        """
        Give every sense of every word in the parse the same prior.

        Returns a fresh convergence accumulator for the parse.
        """
        for word in self.graph.word_instances(parse):
            for _, ref in self.graph.senses_of(word):
                self.scores.set_score(
                    ref, self.config.prior_mean, self.config.prior_confidence
                )
        return self.new_tracker()

    # === Driver ===

    def rank_parse(
        self,
        parse: Parse,
        tracker: ConvergenceTracker,
        report: RankReport | None = None,
    ) -> None:
        """
        Start one walk per word instance.

        The graph may have several disconnected components, so starting at
        each word samples every component that contains some word's sense.
        A word's walk starts at its first connected sense.
        """
        report = report if report is not None else RankReport()

        for word in self.graph.word_instances(parse):
            refs = [ref for _, ref in self.graph.senses_of(word)]
            if not refs:
                logger.warning(f"Word instance {word.id} ({word.word}) has no senses, skipping")
                report.empty_words.append(word.id)
                continue

            for ref in refs:
                result = self.walk_from(ref, tracker, report, parse_id=parse.id)
                if not result.skipped:
                    break

    # === RandomWalker ===

    def walk_from(
        self,
        start_ref: str,
        tracker: ConvergenceTracker | None = None,
        report: RankReport | None = None,
        parse_id: str | None = None,
    ) -> WalkResult:
        """Walk randomly over the component containing start_ref."""
        tracker = tracker or self.new_tracker()
        result = WalkResult(start_ref)

        if self.incoming_weight_sum(start_ref) < self.config.disconnect_epsilon:
            logger.debug(f"Disconnected sense {start_ref}, skipping")
            result.skipped = True
            if report is not None:
                report.disconnected.append(start_ref)
            return result

        logger.debug(f"Walk start at {start_ref}")
        max_steps = self.config.max_steps
        ref = start_ref

        while True:
            new_rank, delta = self.update_rank(ref, report)
            converge = tracker.observe(delta)
            result.steps += 1

            if self.trace is not None:
                self.trace.record(parse_id, ref, new_rank, delta, converge)

            if tracker.has_converged():
                result.converged = True
                break

            if max_steps is not None and result.steps >= max_steps:
                logger.warning(
                    f"Walk from {start_ref} hit max_steps={max_steps} "
                    f"(converge={converge:.4g}), keeping current ranks"
                )
                result.capped = True
                break

            next_ref = self.pick_next(ref)
            if next_ref is None:
                # Dead end: no outgoing weight, keep updating in place
                logger.debug(f"Dead end at {ref}")
            else:
                ref = next_ref

        if report is not None:
            report.walks += 1
            report.steps += result.steps
            if result.capped:
                report.capped_walks.append(start_ref)

        return result

    def pick_next(self, ref: str) -> str | None:
        """
        Choose an outgoing edge with probability proportional to its weight.

        Returns the edge's target, or None if the sense has no outgoing weight.
        """
        candidates = [
            (target, self.scores.get_edge_weight(edge_ref))
            for target, edge_ref in self.graph.outgoing_edges(ref)
        ]
        total = sum(w for _, w in candidates)
        if total <= 0.0:
            return None

        draw = self.rng.random() * total
        chosen = pick_weighted(candidates, draw)
        if chosen is None:
            # Rounding left draw at the total; take the last weighted edge
            chosen = next(t for t, w in reversed(candidates) if w > 0.0)
        return chosen

    # === RankUpdater ===

    def update_rank(self, ref: str, report: RankReport | None = None) -> tuple[float, float]:
        """
        Recompute the rank of one sense and store it.

        Returns (new_rank, delta). Confidence is left unchanged.
        """
        rank_sum = 0.0
        for neighbor, edge_ref in self.graph.incoming_edges(ref):
            weight = self.scores.get_edge_weight(edge_ref)

            edge_sum = self.incoming_weight_sum(neighbor)
            if edge_sum <= 0.0:
                if self.config.on_degenerate == "raise":
                    raise NumericDegeneracyError(ref, neighbor)
                logger.debug(f"Zero incoming weight at {neighbor}, dropping its term for {ref}")
                if report is not None:
                    report.degenerate_terms += 1
                continue

            rank_b, _ = self.scores.get_score(neighbor)
            rank_sum += weight / edge_sum * rank_b

        damping = self.config.damping_factor
        new_rank = damping * rank_sum + (1.0 - damping)

        old_rank, confidence = self.scores.get_score(ref)
        self.scores.set_score(ref, new_rank, confidence)

        return new_rank, abs(new_rank - old_rank)

    # === EdgeWeightNormalizer ===

    def incoming_weight_sum(self, ref: str) -> float:
        """Total weight of edges entering a sense, recomputed on every call."""
        edge_sum = 0.0
        for _, edge_ref in self.graph.incoming_edges(ref):
            edge_sum += self.scores.get_edge_weight(edge_ref)
        return edge_sum
