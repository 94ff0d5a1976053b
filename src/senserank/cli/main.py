"""
SenseRank CLI.
"""

import argparse
import logging

from senserank.cli.commands import graph, rank


def main():
    parser = argparse.ArgumentParser(prog="senserank", description="SenseRank CLI")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for INFO, -vv for DEBUG")
    subparsers = parser.add_subparsers(dest="command")

    rank.add_subparser(subparsers)
    graph.add_subparser(subparsers)

    args = parser.parse_args()

    if args.verbose:
        level = logging.DEBUG if args.verbose > 1 else logging.INFO
        logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
