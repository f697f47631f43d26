"""`knownet review` and `knownet duplicates`: curation hints from the knowledge assistant."""
from __future__ import annotations

import argparse

from knownet.cli.common import CLI_ERRORS, _print_error, add_data_file_argument, open_store, short


def run_review(argv: list[str]) -> int:
    """Entry point for `knownet review`."""
    parser = argparse.ArgumentParser(
        prog="knownet review",
        description="List statements worth reviewing, with a reason for each.",
    )
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console
    from rich.table import Table

    from knownet.services.assistant import KnowledgeAssistant

    try:
        _config, store = open_store(args)
        graph = store.load()
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    suggestions = KnowledgeAssistant(graph).review_suggestions()
    console = Console()
    if not suggestions:
        console.print("[green]Nothing to review.[/green]")
        return 0

    table = Table(title=f"Review suggestions ({len(suggestions)})")
    table.add_column("Priority", justify="center")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Content", no_wrap=False, max_width=45)
    table.add_column("Reason", no_wrap=False)
    for suggestion in suggestions:
        colour = "red" if suggestion.priority == "high" else "yellow"
        table.add_row(
            f"[{colour}]{suggestion.priority}[/{colour}]",
            suggestion.statement.id,
            short(suggestion.statement.content),
            suggestion.reason,
        )
    console.print(table)
    return 0


def run_duplicates(argv: list[str]) -> int:
    """Entry point for `knownet duplicates`."""
    parser = argparse.ArgumentParser(
        prog="knownet duplicates",
        description="Check whether a text is already in the network before adding it.",
    )
    parser.add_argument("content", help="Statement text to check.")
    parser.add_argument("--tag", action="append", default=[], help="Tag (repeatable).")
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console
    from rich.table import Table

    from knownet.services.assistant import KnowledgeAssistant

    try:
        _config, store = open_store(args)
        graph = store.load()
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    check = KnowledgeAssistant(graph).check_duplicates(args.content, args.tag)
    console = Console()
    if not check.has_duplicates:
        console.print("[green]No similar statements found.[/green]")
        return 0

    table = Table(title=f"Similar statements ({len(check.similar)})")
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Similarity", justify="right")
    table.add_column("Content", no_wrap=False, max_width=45)
    table.add_column("Reason", no_wrap=False)
    for similar in check.similar:
        table.add_row(
            similar.statement.id,
            f"{similar.similarity:.0%}",
            short(similar.statement.content),
            similar.reason,
        )
    console.print(table)
    for suggestion in check.suggestions:
        console.print(f"- {suggestion}")
    return 0
