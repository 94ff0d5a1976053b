"""
Sense graph commands (via the API server).
"""

import argparse
import sys
from pathlib import Path

from senserank.cli import client
from senserank.cli.commands.rank import add_config_arguments, config_options, print_report_warnings


def add_subparser(subparsers):
    parser = subparsers.add_parser("graph", help="Sense graph management")
    db_parent = argparse.ArgumentParser(add_help=False)
    db_parent.add_argument("--db", type=int, default=0, help="Redis database on the server (default: 0)")

    graph_sub = parser.add_subparsers(dest="graph_command", required=True)

    # add (from file)
    add_p = graph_sub.add_parser("add", parents=[db_parent], help="Add graph from .senses file")
    add_p.add_argument("file", help="Path to .senses file")
    add_p.add_argument("--name", help="Graph name (default: filename)")
    add_p.set_defaults(func=graph_add)

    # list
    list_p = graph_sub.add_parser("list", parents=[db_parent], help="List all graphs")
    list_p.set_defaults(func=graph_list)

    # show
    show_p = graph_sub.add_parser("show", parents=[db_parent], help="Show graph details")
    show_p.add_argument("graph_id", help="Graph ID")
    show_p.set_defaults(func=graph_show)

    # rank
    rank_p = graph_sub.add_parser("rank", parents=[db_parent], help="Rank a stored graph")
    rank_p.add_argument("graph_id", help="Graph ID")
    add_config_arguments(rank_p)
    rank_p.set_defaults(func=graph_rank)

    # scores
    scores_p = graph_sub.add_parser("scores", parents=[db_parent], help="Show stored sense scores")
    scores_p.add_argument("graph_id", help="Graph ID")
    scores_p.set_defaults(func=graph_scores)

    # delete
    delete_p = graph_sub.add_parser("delete", parents=[db_parent], help="Delete a graph")
    delete_p.add_argument("graph_id", help="Graph ID")
    delete_p.set_defaults(func=graph_delete)


def graph_add(args):
    path = Path(args.file)
    if not path.exists():
        print(f"✗ File not found: {args.file}")
        sys.exit(1)

    dsl = path.read_text()
    name = args.name or path.stem

    try:
        result = client.create_graph(name, dsl, db=args.db)
        print(f"✓ Created graph: {result['id']}")
        print(f"  name: {result['name']}")
        print(f"  parses: {result['parses']}")
        print(f"  words: {result['words']}")
        print(f"  senses: {result['senses']}")
        print(f"  edges: {result['edges']}")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def graph_list(args):
    try:
        graphs = client.list_graphs(db=args.db)
        if not graphs:
            print("No graphs.")
            return
        for g in graphs:
            print(f"{g['id']}  {g['name']:20} ({g['parses']} parses, {g['senses']} senses, {g['edges']} edges)")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def graph_show(args):
    try:
        stored = client.get_graph(args.graph_id, db=args.db)
        print(f"ID: {stored['id']}")
        print(f"Name: {stored['name']}")
        print(f"Created: {stored['created_at']}")
        print()
        for parse in stored['graph']['parses']:
            print(f"Parse {parse['id']}:")
            for word in parse['words']:
                senses = " ".join(s['id'] for s in word['senses'])
                print(f"  {word['id']} {word['word']}: {senses}")
        print()
        edges = stored['graph']['edges']
        print(f"Edges ({len(edges)}):")
        for e in edges:
            print(f"  {e['source']} -> {e['target']} [{e['weight']:g}]")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def graph_rank(args):
    options = config_options(args)
    options["seed"] = args.seed
    try:
        result = client.rank_graph(args.graph_id, options, db=args.db)
        report = result['report']
        print(f"✓ Ranked graph: {result['id']}")
        print(f"  parses: {report['parses']}")
        print(f"  walks: {report['walks']}")
        print(f"  steps: {report['steps']}")
        for parse_id, converge in report['converge'].items():
            print(f"  converge[{parse_id}]: {converge:.4f}")
        print_report_warnings(report)
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def graph_scores(args):
    try:
        result = client.get_scores(args.graph_id, db=args.db)
        scores = result['scores']
        if not scores:
            print("No scores.")
            return
        for ref in sorted(scores):
            s = scores[ref]
            print(f"  {ref:30} {s['mean']:.4f}  (conf {s['confidence']:.2f})")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)


def graph_delete(args):
    try:
        client.delete_graph(args.graph_id, db=args.db)
        print(f"✓ Deleted graph: {args.graph_id}")
    except Exception as e:
        print(f"✗ Error: {e}")
        sys.exit(1)
