"""Tests for the local `senserank rank` command."""

import csv
import sys

import pytest

from senserank.cli.main import main


BANK = """
parse p1
word w1 sit: sit.1 sit.2
word w2 bank: bank.1 bank.2
word w3 the:
edge w1:sit.1 <-> w2:bank.1 [0.7]
edge w1:sit.2 <-> w2:bank.2 [0.1]
"""


@pytest.fixture
def senses_file(tmp_path):
    path = tmp_path / "bank.senses"
    path.write_text(BANK)
    return path


def run_cli(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["senserank", *argv])
    main()


def test_rank_prints_table(monkeypatch, capsys, senses_file):
    run_cli(monkeypatch, "rank", str(senses_file), "--seed", "1", "--summary")

    out = capsys.readouterr().out
    assert "w2:bank.1" in out
    assert "Words without senses: w3" in out
    assert "Steps:" in out


def test_rank_writes_csv(monkeypatch, capsys, senses_file, tmp_path):
    csv_path = tmp_path / "trace.csv"
    run_cli(monkeypatch, "rank", str(senses_file), "--seed", "1", "--no-table", "--csv", str(csv_path))

    with open(csv_path) as f:
        rows = list(csv.DictReader(f))
    assert rows
    assert rows[0]["parse"] == "p1"


def test_rank_missing_file(monkeypatch, capsys, tmp_path):
    run_cli(monkeypatch, "rank", str(tmp_path / "nope.senses"))
    assert "File not found" in capsys.readouterr().out


def test_rank_bad_config(monkeypatch, capsys, senses_file):
    run_cli(monkeypatch, "rank", str(senses_file), "--damping", "2")
    assert "damping_factor" in capsys.readouterr().out


# === graph commands ===

class FakeResponse:
    def __init__(self, data):
        self.data = data

    def raise_for_status(self):
        pass

    def json(self):
        return self.data


@pytest.fixture
def http_calls(monkeypatch):
    calls = []

    def fake_get(url, params=None, **kwargs):
        calls.append(("GET", url, params))
        if url.endswith("/scores"):
            return FakeResponse({"id": "g1", "scores": {}})
        return FakeResponse({"graphs": []})

    def fake_post(url, params=None, json=None, **kwargs):
        calls.append(("POST", url, params))
        report = {
            "parses": 1, "walks": 2, "steps": 10, "converge": {"p1": 0.01},
            "disconnected": [], "empty_words": [], "capped_walks": [],
            "degenerate_terms": 0, "failed_parses": {},
        }
        return FakeResponse({"id": "g1", "config": json, "report": report})

    monkeypatch.setattr("senserank.cli.client.httpx.get", fake_get)
    monkeypatch.setattr("senserank.cli.client.httpx.post", fake_post)
    return calls


def test_graph_commands_default_to_db_zero(monkeypatch, capsys, http_calls):
    run_cli(monkeypatch, "graph", "list")

    assert http_calls == [("GET", "http://localhost:8000/api/graphs", {"db": 0})]
    assert "No graphs." in capsys.readouterr().out


def test_graph_commands_pass_db(monkeypatch, capsys, http_calls):
    run_cli(monkeypatch, "graph", "rank", "g1", "--db", "15", "--seed", "2")
    run_cli(monkeypatch, "graph", "scores", "g1", "--db", "15")

    assert [c[2] for c in http_calls] == [{"db": 15}, {"db": 15}]
    assert http_calls[0][1].endswith("/graphs/g1/rank")
    out = capsys.readouterr().out
    assert "✓ Ranked graph: g1" in out
    assert "No scores." in out
