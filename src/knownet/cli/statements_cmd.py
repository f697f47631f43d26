"""CLI commands that create, inspect, change and remove statements."""
from __future__ import annotations

import argparse

from knownet.cli.common import (
    CLI_ERRORS,
    _print_error,
    add_data_file_argument,
    open_store,
    statement_table,
    type_label,
)

_TYPES = ("axiom", "theory", "conclusion")


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def run_add(argv: list[str]) -> int:
    """Entry point for `knownet add`."""
    parser = argparse.ArgumentParser(prog="knownet add", description="Add a statement.")
    parser.add_argument("type", choices=_TYPES, help="Statement type.")
    parser.add_argument("content", help="Statement text.")
    parser.add_argument("--id", default=None, help="Explicit statement id (default: generated).")
    parser.add_argument("--confidence", type=float, default=None, help="Confidence in [0, 1].")
    parser.add_argument("--tags", default=None, help="Comma-separated tags.")
    parser.add_argument(
        "--from",
        dest="derived_from",
        default=None,
        help="Comma-separated ids this statement derives from.",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        default=False,
        help="Report contradictions with existing statements before adding.",
    )
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console

    from knownet.contradictions.detector import ContradictionDetector
    from knownet.models.domain import Statement

    console = Console()
    try:
        config, store = open_store(args)
        graph = store.load()
        kwargs: dict = {
            "kind": args.type,
            "content": args.content,
            "confidence": args.confidence,
            "tags": _split_csv(args.tags),
            "derived_from": _split_csv(args.derived_from),
        }
        if args.id:
            kwargs["id"] = args.id
        statement = Statement(**kwargs)

        if args.check:
            analysis = config.analysis
            detector = ContradictionDetector(
                graph,
                opposite_threshold=analysis.opposite_threshold,
                negation_threshold=analysis.negation_threshold,
                semantic_threshold=analysis.semantic_threshold,
            )
            for pair in detector.check_against_existing(statement):
                console.print(
                    f"[yellow]Possible contradiction[/yellow] with {pair.statement2.id}: "
                    f"{pair.reason}"
                )

        graph.add(statement)
        store.save(graph)
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    console.print(f"Added {type_label(statement.kind.value)} {statement.id}")
    return 0


def run_show(argv: list[str]) -> int:
    """Entry point for `knownet show`."""
    parser = argparse.ArgumentParser(prog="knownet show", description="Show one statement.")
    parser.add_argument("id", help="Statement id.")
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console

    from knownet.graph.derivation import DerivationEngine

    try:
        config, store = open_store(args)
        graph = store.load()
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    statement = graph.get(args.id)
    if statement is None:
        _print_error(f"Statement not found: {args.id}")
        return 1

    engine = DerivationEngine(graph, confidence_discount=config.analysis.confidence_discount)
    effective = engine.confidence(statement.id)

    console = Console()
    console.print(f"[bold]{statement.id}[/bold] ({type_label(statement.kind.value)})")
    console.print(statement.content)
    console.print(
        "Confidence: "
        + ("-" if statement.confidence is None else f"{statement.confidence:.2f}")
        + ("" if effective is None else f" (effective {effective:.2f})")
    )
    console.print(f"Depth: {engine.depth(statement.id)}")
    if statement.tags:
        console.print(f"Tags: {', '.join(statement.tags)}")
    if statement.derived_from:
        console.print(f"Derived from: {', '.join(statement.derived_from)}")
    dependents = graph.dependent_ids(statement.id)
    if dependents:
        console.print(f"Dependents: {', '.join(dependents)}")
    console.print(f"Created: {statement.created_at.isoformat()}")
    return 0


def run_list(argv: list[str]) -> int:
    """Entry point for `knownet list`."""
    parser = argparse.ArgumentParser(prog="knownet list", description="List statements.")
    parser.add_argument("--type", choices=_TYPES, default=None, help="Only this type.")
    parser.add_argument("--tag", action="append", default=None, help="Only statements with this tag.")
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console

    from knownet.models.domain import StatementQuery

    try:
        _config, store = open_store(args)
        graph = store.load()
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    statements = graph.query(StatementQuery(kind=args.type, tags=args.tag))
    console = Console()
    if not statements:
        console.print("[green]No statements found.[/green]")
        return 0
    console.print(statement_table(f"Statements ({len(statements)})", statements))
    return 0


def run_update(argv: list[str]) -> int:
    """Entry point for `knownet update`."""
    parser = argparse.ArgumentParser(prog="knownet update", description="Update a statement.")
    parser.add_argument("id", help="Statement id.")
    parser.add_argument("--content", default=None, help="New text.")
    parser.add_argument("--type", choices=_TYPES, default=None, help="New type.")
    parser.add_argument("--confidence", type=float, default=None, help="New confidence.")
    parser.add_argument(
        "--clear-confidence",
        action="store_true",
        default=False,
        help="Remove the stated confidence.",
    )
    parser.add_argument("--tags", default=None, help="Replace tags (comma-separated).")
    parser.add_argument(
        "--from",
        dest="derived_from",
        default=None,
        help="Replace parents (comma-separated ids).",
    )
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console

    from knownet.models.domain import StatementUpdate

    changes = StatementUpdate(
        content=args.content,
        kind=args.type,
        confidence=args.confidence,
        clear_confidence=args.clear_confidence,
        tags=_split_csv(args.tags) if args.tags is not None else None,
        derived_from=_split_csv(args.derived_from) if args.derived_from is not None else None,
    )
    try:
        _config, store = open_store(args)
        graph = store.load()
        updated = graph.update(args.id, changes)
        store.save(graph)
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    Console().print(f"Updated {updated.id}")
    return 0


def run_delete(argv: list[str]) -> int:
    """Entry point for `knownet delete`."""
    parser = argparse.ArgumentParser(prog="knownet delete", description="Delete a statement.")
    parser.add_argument("id", help="Statement id.")
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console

    try:
        _config, store = open_store(args)
        graph = store.load()
        removed = graph.delete(args.id)
        store.save(graph)
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1

    Console().print(f"Deleted {removed.id}")
    return 0
