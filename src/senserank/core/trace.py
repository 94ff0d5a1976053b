# src/senserank/core/trace.py
"""Per-step record of a ranking run, with rich display and CSV export."""

import csv
from dataclasses import dataclass, field

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from senserank.core.graph import GraphAccessor, ScoreStore


SPARK_CHARS = "▁▂▃▄▅▆▇█"


@dataclass
class TraceStep:
    step: int
    parse_id: str | None
    sense_ref: str
    rank: float
    delta: float
    converge: float


@dataclass
class RankTrace:
    steps: list[TraceStep] = field(default_factory=list)
    console: Console = field(default_factory=Console)

    def record(self, parse_id: str | None, sense_ref: str, rank: float, delta: float, converge: float) -> None:
        self.steps.append(TraceStep(len(self.steps), parse_id, sense_ref, rank, delta, converge))

    def visits(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for s in self.steps:
            counts[s.sense_ref] = counts.get(s.sense_ref, 0) + 1
        return counts

    def sparkline(self, width: int = 60) -> str:
        """Convergence accumulator over the run, bucketed to `width` chars."""
        if not self.steps:
            return ""

        values = [s.converge for s in self.steps]
        bucket = max(1, len(values) // width + (1 if len(values) % width else 0))
        sampled = [max(values[i:i + bucket]) for i in range(0, len(values), bucket)]

        hi = max(sampled)
        lo = min(sampled)
        span = hi - lo or 1.0
        top = len(SPARK_CHARS) - 1
        return "".join(SPARK_CHARS[round((v - lo) / span * top)] for v in sampled)

    def print_convergence_spark(self) -> None:
        if not self.steps:
            self.console.print("[dim]No steps recorded[/dim]")
            return
        first = self.steps[0].converge
        last = self.steps[-1].converge
        self.console.print(f"converge {first:.3f} {self.sparkline()} {last:.4f}")

    def print_summary(self) -> None:
        visits = self.visits()
        self.console.print(f"[bold]Steps:[/bold] {len(self.steps)}")
        self.console.print(f"[bold]Senses visited:[/bold] {len(visits)}")
        if self.steps:
            biggest = max(self.steps, key=lambda s: s.delta)
            self.console.print(
                f"[bold]Largest delta:[/bold] {biggest.delta:.4f} "
                f"at {biggest.sense_ref} (step {biggest.step})"
            )
            self.console.print(f"[bold]Final converge:[/bold] {self.steps[-1].converge:.4f}")

    def print_ranks_table(self, graph: GraphAccessor, scores: ScoreStore) -> None:
        """Final ranks grouped by parse and word, best sense first."""
        visits = self.visits()

        for parse in graph.parses():
            table = Table(title=f"Parse {parse.id}")
            table.add_column("Word")
            table.add_column("Sense")
            table.add_column("Rank", justify="right")
            table.add_column("Conf", justify="right")
            table.add_column("Visits", justify="right")

            for word in graph.word_instances(parse):
                rows = []
                for _, ref in graph.senses_of(word):
                    mean, conf = scores.get_score(ref)
                    rows.append((ref, mean, conf))
                rows.sort(key=lambda r: r[1], reverse=True)

                for i, (ref, mean, conf) in enumerate(rows):
                    label = f"{word.id} ({word.word})" if i == 0 else ""
                    style = "bold green" if i == 0 and len(rows) > 1 else None
                    table.add_row(escape(label), escape(ref), f"{mean:.4f}", f"{conf:.2f}", str(visits.get(ref, 0)), style=style)

            self.console.print(table)

    def to_csv(self, path: str) -> None:
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["step", "parse", "sense", "rank", "delta", "converge"])
            for s in self.steps:
                writer.writerow([s.step, s.parse_id or "", s.sense_ref, s.rank, s.delta, s.converge])
