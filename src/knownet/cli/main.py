"""Entry point for the ``knownet`` command."""
from __future__ import annotations

import argparse
import sys
from collections.abc import Callable

from knownet.cli.analysis_cmd import (
    run_chain,
    run_orphans,
    run_path,
    run_search,
    run_stats,
    run_tags,
)
from knownet.cli.assistant_cmd import run_duplicates, run_review
from knownet.cli.backup_cmd import run_backup
from knownet.cli.contradictions_cmd import run_contradictions
from knownet.cli.export_cmd import run_export
from knownet.cli.generate_cmd import run_generate
from knownet.cli.statements_cmd import run_add, run_delete, run_list, run_show, run_update


def run_serve(argv: list[str]) -> int:
    """Entry point for `knownet serve`: run the HTTP API."""
    parser = argparse.ArgumentParser(prog="knownet serve", description="Run the HTTP API.")
    parser.add_argument("--host", default=None, help="Bind address (default: configured host).")
    parser.add_argument("--port", type=int, default=None, help="Port (default: configured port).")
    args = parser.parse_args(argv)

    from knownet.api.app import main as serve

    serve(host=args.host, port=args.port)
    return 0


COMMANDS: dict[str, tuple[Callable[[list[str]], int], str]] = {
    "add": (run_add, "Add a statement"),
    "show": (run_show, "Show one statement"),
    "list": (run_list, "List statements"),
    "update": (run_update, "Update a statement"),
    "delete": (run_delete, "Delete a statement"),
    "chain": (run_chain, "Show a derivation chain"),
    "path": (run_path, "Shortest path between two statements"),
    "search": (run_search, "Search statements"),
    "contradictions": (run_contradictions, "List potential contradictions"),
    "stats": (run_stats, "Network statistics"),
    "tags": (run_tags, "Tag usage counts"),
    "orphans": (run_orphans, "Statements nothing derives from"),
    "review": (run_review, "Statements worth reviewing"),
    "duplicates": (run_duplicates, "Check a text for existing duplicates"),
    "export": (run_export, "Export as Markdown, DOT or JSON"),
    "backup": (run_backup, "Create, list or restore backups"),
    "generate": (run_generate, "Draft theories with an LLM"),
    "serve": (run_serve, "Run the HTTP API"),
}


def _print_usage() -> None:
    print("Usage: knownet <command> [options]")
    print()
    print("Commands:")
    width = max(len(name) for name in COMMANDS)
    for name, (_handler, summary) in COMMANDS.items():
        print(f"  {name.ljust(width)}  {summary}")
    print()
    print("Run `knownet <command> --help` for command options.")


def main(argv: list[str] | None = None) -> int:
    """Dispatch ``knownet <command>`` to its handler and return the exit status."""
    args = sys.argv[1:] if argv is None else list(argv)

    if not args or args[0] in ("-h", "--help"):
        _print_usage()
        return 0
    if args[0] == "--version":
        from knownet import __version__

        print(__version__)
        return 0

    command, rest = args[0], args[1:]
    entry = COMMANDS.get(command)
    if entry is None:
        print(f"Error: unknown command '{command}'", file=sys.stderr)
        _print_usage()
        return 1

    handler = entry[0]
    if command != "serve":
        from knownet.config import Config
        from knownet.core.logging_config import setup_logging

        # Ordinary commands only surface warnings; `serve` configures its own logging.
        setup_logging(Config.load().logging.with_level("WARNING"))
    return handler(rest)


if __name__ == "__main__":
    sys.exit(main())
