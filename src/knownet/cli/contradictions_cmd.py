"""`knownet contradictions`: list potentially contradictory statement pairs."""
from __future__ import annotations

import argparse

from knownet.cli.common import CLI_ERRORS, _print_error, add_data_file_argument, open_store, short


def run_contradictions(argv: list[str]) -> int:
    """Entry point for `knownet contradictions`."""
    parser = argparse.ArgumentParser(
        prog="knownet contradictions",
        description="List potentially contradictory statement pairs.",
    )
    parser.add_argument(
        "--severity",
        choices=("high", "medium", "low"),
        default=None,
        help="Only show pairs of this severity.",
    )
    parser.add_argument("--limit", type=int, default=50, help="Max pairs to show.")
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console
    from rich.table import Table

    from knownet.contradictions.detector import ContradictionDetector

    try:
        config, store = open_store(args)
        graph = store.load()
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    analysis = config.analysis
    detector = ContradictionDetector(
        graph,
        opposite_threshold=analysis.opposite_threshold,
        negation_threshold=analysis.negation_threshold,
        semantic_threshold=analysis.semantic_threshold,
    )
    pairs = detector.detect_all()
    if args.severity:
        pairs = [p for p in pairs if p.severity.value == args.severity]
    pairs = pairs[: args.limit]

    console = Console()
    if not pairs:
        console.print("[green]No contradictions found.[/green]")
        return 0

    table = Table(title=f"Contradictions ({len(pairs)})", show_lines=True)
    table.add_column("Severity", justify="center")
    table.add_column("Statement A", no_wrap=False, max_width=35)
    table.add_column("Statement B", no_wrap=False, max_width=35)
    table.add_column("Reason", no_wrap=False)

    for pair in pairs:
        colour = "red" if pair.severity.value == "high" else "yellow"
        table.add_row(
            f"[{colour}]{pair.severity.value.upper()}[/{colour}]",
            short(pair.statement1.content),
            short(pair.statement2.content),
            pair.reason,
        )

    console.print(table)
    return 0
