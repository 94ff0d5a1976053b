"""Rank a local .senses file."""

import random
from pathlib import Path

from rich.console import Console
from rich.markup import escape

console = Console()


def add_config_arguments(parser):
    parser.add_argument("--seed", type=int, help="Random seed for the walk")
    parser.add_argument("-d", "--damping", type=float, help="PageRank damping factor (default 0.90)")
    parser.add_argument("--damper", type=float, help="Convergence damper (default 1/30)")
    parser.add_argument("-l", "--limit", type=float, help="Convergence limit (default 0.03)")
    parser.add_argument("-n", "--max-steps", type=int, help="Step cap per walk (default 10000)")
    parser.add_argument("--strict", action="store_true", help="Fail on zero incoming weight instead of skipping the term")


def config_options(args) -> dict:
    return {
        "damping_factor": args.damping,
        "convergence_damper": args.damper,
        "convergence_limit": args.limit,
        "max_steps": args.max_steps,
        "on_degenerate": "raise" if args.strict else None,
    }


def add_subparser(subparsers):
    parser = subparsers.add_parser("rank", help="Rank word senses in a .senses file")
    parser.add_argument("path", help="Path to .senses file")
    add_config_arguments(parser)
    parser.add_argument("-g", "--graph", action="store_true", help="Show graph structure")
    parser.add_argument("-t", "--table", action="store_true", default=True, help="Show rank table")
    parser.add_argument("--no-table", action="store_false", dest="table", help="Hide rank table")
    parser.add_argument("-s", "--spark", action="store_true", help="Show convergence sparkline")
    parser.add_argument("--summary", action="store_true", help="Show walk summary")
    parser.add_argument("--csv", dest="csv_out", help="Write per-step trace to CSV")
    parser.set_defaults(func=run_rank)


def run_rank(args):
    from senserank.core.config import RankConfig
    from senserank.core.errors import SenseRankError
    from senserank.core.sense_lang import parse_senses
    from senserank.core.sense_rank import SenseRank
    from senserank.core.trace import RankTrace

    path = Path(args.path)
    if not path.exists():
        console.print(f"[red]✗ File not found: {args.path}[/red]")
        return

    try:
        graph = parse_senses(path.read_text())
        config = RankConfig.from_dict(config_options(args))
    except SenseRankError as e:
        console.print(f"[red]✗ {escape(str(e))}[/red]")
        return

    stats = graph.stats()
    console.print(
        f"[dim]Graph: {stats['parses']} parses, {stats['words']} words, "
        f"{stats['senses']} senses, {stats['edges']} edges[/dim]"
    )

    trace = RankTrace(console=console)
    ranker = SenseRank(graph, config=config, rng=random.Random(args.seed), trace=trace)
    report = ranker.rank_document(list(graph.parses()))

    console.print(f"[dim]{report.walks} walks, {report.steps} steps[/dim]\n")

    if args.graph:
        graph.print_graph()
        console.print()

    if args.table:
        trace.print_ranks_table(graph, graph)
        console.print()

    if args.spark:
        trace.print_convergence_spark()
        console.print()

    if args.summary:
        trace.print_summary()
        console.print()

    print_report_warnings(report.to_dict())

    if args.csv_out:
        trace.to_csv(args.csv_out)
        console.print(f"[dim]Wrote {args.csv_out}[/dim]")


def print_report_warnings(report: dict):
    if report["empty_words"]:
        console.print(f"[yellow]Words without senses: {', '.join(report['empty_words'])}[/yellow]")
    if report["disconnected"]:
        console.print(f"[dim]Disconnected start senses skipped: {len(report['disconnected'])}[/dim]")
    if report["degenerate_terms"]:
        console.print(f"[yellow]Zero-weight neighbor terms dropped: {report['degenerate_terms']}[/yellow]")
    for ref in report["capped_walks"]:
        console.print(f"[yellow]Walk from {ref} hit the step cap, ranks are best effort[/yellow]")
    for parse_id, message in report["failed_parses"].items():
        console.print(f"[red]✗ Parse {parse_id} failed: {escape(message)}[/red]")
