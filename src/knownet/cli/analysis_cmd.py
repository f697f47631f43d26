"""CLI commands that read and analyse the network without changing it."""
from __future__ import annotations

import argparse

from knownet.cli.common import (
    CLI_ERRORS,
    _print_error,
    add_data_file_argument,
    open_store,
    short,
    statement_table,
    type_label,
)


def _load(args: argparse.Namespace):
    config, store = open_store(args)
    return config, store.load()


def run_chain(argv: list[str]) -> int:
    """Entry point for `knownet chain`: print the derivation tree of a statement."""
    parser = argparse.ArgumentParser(prog="knownet chain", description="Show a derivation chain.")
    parser.add_argument("id", help="Statement id.")
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console
    from rich.tree import Tree

    from knownet.graph.derivation import DerivationEngine

    try:
        config, graph = _load(args)
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    engine = DerivationEngine(graph, confidence_discount=config.analysis.confidence_discount)
    chain = engine.build_chain(args.id)
    if chain is None:
        _print_error(f"Statement not found: {args.id}")
        return 1

    def label(node) -> str:
        s = node.statement
        return f"{type_label(s.kind.value)} {s.id}: {short(s.content)}"

    root = Tree(label(chain))
    stack = [(chain, root)]
    while stack:
        node, branch = stack.pop()
        for parent in node.parents:
            child_branch = branch.add(label(parent))
            stack.append((parent, child_branch))

    console = Console()
    console.print(root)
    confidence = engine.confidence(args.id)
    if confidence is not None:
        console.print(f"Effective confidence: {confidence:.2f}")
    return 0


def run_path(argv: list[str]) -> int:
    """Entry point for `knownet path`."""
    parser = argparse.ArgumentParser(
        prog="knownet path",
        description="Shortest derivation path between two statements.",
    )
    parser.add_argument("from_id", help="Start statement id.")
    parser.add_argument("to_id", help="End statement id.")
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console

    from knownet.services.query_service import QueryService

    try:
        _config, graph = _load(args)
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    path = QueryService(graph).derivation_path(args.from_id, args.to_id)
    console = Console()
    if path is None:
        console.print(f"[yellow]No path between {args.from_id} and {args.to_id}.[/yellow]")
        return 1
    console.print(" -> ".join(s.id for s in path))
    return 0


def run_search(argv: list[str]) -> int:
    """Entry point for `knownet search`."""
    parser = argparse.ArgumentParser(prog="knownet search", description="Search statements.")
    parser.add_argument("text", nargs="?", default=None, help="Case-insensitive substring.")
    parser.add_argument("--type", choices=("axiom", "theory", "conclusion"), default=None)
    parser.add_argument("--tag", action="append", default=None, help="Match any of these tags.")
    parser.add_argument("--min-confidence", type=float, default=None)
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console

    from knownet.models.domain import StatementQuery
    from knownet.services.query_service import QueryService

    try:
        _config, graph = _load(args)
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    query = StatementQuery(
        kind=args.type,
        tags=args.tag,
        content=args.text,
        min_confidence=args.min_confidence,
    )
    result = QueryService(graph).advanced_query(query)
    console = Console()
    if not result.statements:
        console.print("[green]No matching statements.[/green]")
        return 0
    console.print(statement_table(f"Matches ({result.count})", result.statements))
    return 0


def run_stats(argv: list[str]) -> int:
    """Entry point for `knownet stats`."""
    parser = argparse.ArgumentParser(prog="knownet stats", description="Network statistics.")
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console
    from rich.table import Table

    from knownet.graph.derivation import DerivationEngine
    from knownet.services.query_service import QueryService

    try:
        config, graph = _load(args)
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    engine = DerivationEngine(graph, confidence_discount=config.analysis.confidence_discount)
    summary = QueryService(graph, engine).summary()

    table = Table(title="Knowledge Network", show_header=False)
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_row("Statements", str(summary.total))
    for kind, count in summary.by_kind.items():
        table.add_row(f"  {kind}", str(count))
    table.add_row(
        "Average confidence",
        "-" if summary.avg_confidence is None else f"{summary.avg_confidence:.2f}",
    )
    table.add_row("Average depth", f"{summary.avg_depth:.2f}")
    table.add_row("Distinct tags", str(summary.total_tags))
    Console().print(table)
    return 0


def run_tags(argv: list[str]) -> int:
    """Entry point for `knownet tags`."""
    parser = argparse.ArgumentParser(prog="knownet tags", description="Tag usage counts.")
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console
    from rich.table import Table

    from knownet.services.query_service import QueryService

    try:
        _config, graph = _load(args)
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    counts = QueryService(graph).tag_counts()
    console = Console()
    if not counts:
        console.print("[green]No tags in use.[/green]")
        return 0
    table = Table(title=f"Tags ({len(counts)})")
    table.add_column("Tag", style="cyan")
    table.add_column("Statements", justify="right")
    for entry in counts:
        table.add_row(entry.tag, str(entry.count))
    console.print(table)
    return 0


def run_orphans(argv: list[str]) -> int:
    """Entry point for `knownet orphans`."""
    parser = argparse.ArgumentParser(
        prog="knownet orphans",
        description="Non-axiom statements that nothing derives from.",
    )
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console

    from knownet.services.query_service import QueryService

    try:
        _config, graph = _load(args)
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    orphans = QueryService(graph).orphans()
    console = Console()
    if not orphans:
        console.print("[green]No orphaned statements.[/green]")
        return 0
    console.print(statement_table(f"Orphans ({len(orphans)})", orphans))
    return 0
