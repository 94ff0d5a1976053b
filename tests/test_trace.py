"""Tests for the walk trace."""

import csv
import io
import random

from rich.console import Console

from senserank.core.sense_rank import SenseRank
from senserank.core.trace import RankTrace


def ranked_trace(graph, seed=4):
    trace = RankTrace(console=Console(file=io.StringIO(), width=120))
    report = SenseRank(graph, rng=random.Random(seed), trace=trace).rank_sentence("p1")
    return trace, report


def test_records_every_step(bank_graph):
    trace, report = ranked_trace(bank_graph)

    assert len(trace.steps) == report.steps
    assert [s.step for s in trace.steps] == list(range(report.steps))
    assert all(s.parse_id == "p1" for s in trace.steps)
    assert trace.steps[-1].converge == report.converge["p1"]


def test_visits_cover_walked_senses(bank_graph):
    trace, _ = ranked_trace(bank_graph)
    visits = trace.visits()

    assert sum(visits.values()) == len(trace.steps)
    assert "bank:1" in visits


def test_sparkline_width(bank_graph):
    trace, _ = ranked_trace(bank_graph)
    assert 0 < len(trace.sparkline(width=40)) <= 40
    assert RankTrace().sparkline() == ""


def test_to_csv(bank_graph, tmp_path):
    trace, _ = ranked_trace(bank_graph)
    path = tmp_path / "trace.csv"

    trace.to_csv(str(path))

    with open(path) as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == len(trace.steps)
    assert set(rows[0]) == {"step", "parse", "sense", "rank", "delta", "converge"}
    assert float(rows[-1]["converge"]) == trace.steps[-1].converge


def test_print_ranks_table(bank_graph):
    trace, _ = ranked_trace(bank_graph)

    trace.print_ranks_table(bank_graph, bank_graph)
    trace.print_convergence_spark()
    trace.print_summary()

    output = trace.console.file.getvalue()
    assert "Parse p1" in output
    assert "bank:1" in output
    assert "Steps:" in output
