"""Tests for the .senses text format."""

import pytest

from senserank.core.errors import GraphFormatError
from senserank.core.sense_lang import parse_senses


BANK = """
# She sat on the bank of the river.
parse p1
word w1 sit: sit.1 sit.2
word w2 bank: bank.1 bank.2
word w3 river: river.1

edge w1:sit.1 <-> w2:bank.1 [0.3]
edge w2:bank.1 -> w3:river.1 [0.9]
edge w2:bank.2 -> w3:river.1

parse p2
word w4 bank: bank.4
"""


def test_parse_structure():
    graph = parse_senses(BANK)

    assert graph.stats() == {"parses": 2, "words": 4, "senses": 6, "edges": 4}
    assert [p.id for p in graph.parses()] == ["p1", "p2"]

    words = list(graph.word_instances(graph.get_parse("p1")))
    assert [w.id for w in words] == ["w1", "w2", "w3"]
    assert words[1].word == "bank"
    assert [ref for _, ref in graph.senses_of(words[1])] == ["w2:bank.1", "w2:bank.2"]


def test_parse_edges():
    graph = parse_senses(BANK)

    # <-> adds both directions
    assert sorted(t for t, _ in graph.outgoing_edges("w1:sit.1")) == ["w2:bank.1"]
    assert sorted(s for s, _ in graph.incoming_edges("w1:sit.1")) == ["w2:bank.1"]

    incoming = {s: graph.get_edge_weight(e) for s, e in graph.incoming_edges("w3:river.1")}
    assert incoming == {"w2:bank.1": 0.9, "w2:bank.2": 1.0}


def test_sense_ids_may_contain_colons():
    graph = parse_senses("""
parse p1
word w1 bank: bank%1:14:00:: bank%1:17:01::
word w2 river: river%1:17:00::
edge w1:bank%1:17:01:: <-> w2:river%1:17:00:: [0.5]
""")
    assert "w1:bank%1:17:01::" in graph.senses
    assert len(graph.edges) == 2


def test_word_without_senses():
    graph = parse_senses("parse p1\nword w1 the:\n")
    assert graph.words["w1"].sense_refs == []


@pytest.mark.parametrize("text, line_no", [
    ("word w1 bank: bank.1", 1),
    ("parse p1\nword w1 bank bank.1", 2),
    ("parse p1\nword w1 bank: b.1\nedge w1:b.1 -> w1:b.9", 3),
    ("parse p1\nword w1 bank: b.1\nedge w1:b.1 -> w1:b.1 [heavy]", 3),
    ("parse p1\nword w1 bank: b.1\nedge w1:b.1 -> w1:b.1 [-1]", 3),
    ("parse p1\nword w1 bank: b.1\nword w1 bank: b.2", 3),
    ("parse p1\nfrobnicate", 2),
])
def test_errors_report_line(text, line_no):
    with pytest.raises(GraphFormatError) as exc:
        parse_senses(text)
    assert exc.value.line_no == line_no
    assert f"line {line_no}" in str(exc.value)


def test_format_error_is_value_error():
    with pytest.raises(ValueError):
        parse_senses("nonsense")
