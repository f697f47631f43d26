"""`knownet export`: write the network as Markdown or Graphviz DOT."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from knownet.cli.common import CLI_ERRORS, _print_error, add_data_file_argument, open_store


def run_export(argv: list[str]) -> int:
    """Entry point for `knownet export`."""
    parser = argparse.ArgumentParser(prog="knownet export", description="Export the network.")
    parser.add_argument("format", choices=("markdown", "dot", "json"), help="Output format.")
    parser.add_argument("-o", "--output", default=None, help="Output file (default: stdout).")
    parser.add_argument("--title", default="Knowledge Network", help="DOT graph title.")
    parser.add_argument("--rankdir", default="TB", choices=("TB", "BT", "LR", "RL"))
    parser.add_argument(
        "--no-orphans",
        action="store_true",
        default=False,
        help="Leave unconnected statements out of DOT output.",
    )
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    import json

    from knownet.services.export_service import to_dot, to_markdown, write_export

    try:
        _config, store = open_store(args)
        graph = store.load()
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    if args.format == "markdown":
        text = to_markdown(graph)
    elif args.format == "dot":
        text = to_dot(
            graph,
            title=args.title,
            rankdir=args.rankdir,
            include_orphans=not args.no_orphans,
        )
    else:
        text = json.dumps(graph.to_dict(), indent=2, ensure_ascii=False)

    if args.output is None:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        return 0

    try:
        path = write_export(text, Path(args.output))
    except OSError as exc:
        _print_error(f"Failed to write {args.output}: {exc}")
        return 1
    print(f"Exported {len(graph)} statements to {path}")
    return 0
