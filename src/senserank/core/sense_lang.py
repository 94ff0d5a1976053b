# src/senserank/core/sense_lang.py
"""
A line-oriented text format for sense graphs.

Syntax:
  parse <parse_id>
  word <word_id> <word>: <sense_id> <sense_id> ...
  edge <word_id>:<sense_id> -> <word_id>:<sense_id> [weight]
  edge <word_id>:<sense_id> <-> <word_id>:<sense_id> [weight]

`word` lines belong to the most recent `parse`. `<->` adds the edge in both
directions. The weight is optional and defaults to 1.0.
"""

import re

from senserank.core.errors import GraphFormatError
from senserank.core.graph import SenseGraph, sense_ref


PARSE_RE = re.compile(r"parse\s+(\S+)$")
WORD_RE = re.compile(r"word\s+([^\s:]+)\s+([^\s:]+)\s*:\s*(.*)$")
EDGE_RE = re.compile(r"edge\s+(\S+)\s+(<->|->)\s+(\S+)(?:\s+\[([^\]]*)\])?$")


class SenseParser:
    def __init__(self):
        self.graph = SenseGraph()
        self.current_parse: str | None = None

    def parse(self, text: str) -> SenseGraph:
        self.graph = SenseGraph()
        self.current_parse = None

        for i, line in enumerate(text.split("\n"), 1):
            line = line.strip()

            if not line or line.startswith("#"):
                continue

            try:
                self.parse_line(line)
            except GraphFormatError as e:
                raise GraphFormatError(str(e), i) from e
            except (KeyError, ValueError) as e:
                raise GraphFormatError(str(e).strip("'\""), i) from e

        return self.graph

    def parse_line(self, line: str):
        if line.startswith("parse "):
            self.parse_parse(line)
        elif line.startswith("word "):
            self.parse_word(line)
        elif line.startswith("edge "):
            self.parse_edge(line)
        else:
            raise GraphFormatError(f"Unknown syntax: {line}")

    def parse_parse(self, line: str):
        match = PARSE_RE.match(line)
        if not match:
            raise GraphFormatError("Expected: parse <id>")
        self.current_parse = match.group(1)
        self.graph.add_parse(self.current_parse)

    def parse_word(self, line: str):
        if self.current_parse is None:
            raise GraphFormatError("word before any parse")

        match = WORD_RE.match(line)
        if not match:
            raise GraphFormatError("Expected: word <id> <word>: <sense> ...")

        word_id, word, senses_str = match.groups()
        self.graph.add_word(self.current_parse, word_id, word)
        for sense_id in senses_str.split():
            self.graph.add_sense(word_id, sense_id)

    def parse_edge(self, line: str):
        match = EDGE_RE.match(line)
        if not match:
            raise GraphFormatError("Expected: edge <word>:<sense> -> <word>:<sense> [weight]")

        source, arrow, target, weight_str = match.groups()
        source = self.resolve_ref(source)
        target = self.resolve_ref(target)

        weight = 1.0
        if weight_str is not None:
            try:
                weight = float(weight_str)
            except ValueError:
                raise GraphFormatError(f"Bad weight: {weight_str}")

        if arrow == "<->":
            self.graph.add_symmetric_edge(source, target, weight)
        else:
            self.graph.add_edge(source, target, weight)

    def resolve_ref(self, text: str) -> str:
        if ":" not in text:
            raise GraphFormatError(f"Expected <word_id>:<sense_id>, got: {text}")
        word_id, sense_id = text.split(":", 1)
        ref = sense_ref(word_id, sense_id)
        if ref not in self.graph.senses:
            raise GraphFormatError(f"Unknown sense: {ref}")
        return ref


def parse_senses(text: str) -> SenseGraph:
    return SenseParser().parse(text)
