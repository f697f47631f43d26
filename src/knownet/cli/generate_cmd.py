"""`knownet generate`: draft theories from existing statements with an LLM."""
from __future__ import annotations

import argparse

from knownet.cli.common import CLI_ERRORS, _print_error, add_data_file_argument, open_store


def run_generate(argv: list[str]) -> int:
    """Entry point for `knownet generate`."""
    parser = argparse.ArgumentParser(
        prog="knownet generate",
        description="Draft new theories derived from the given statements.",
    )
    parser.add_argument("ids", nargs="+", help="Source statement ids.")
    parser.add_argument("--count", type=int, default=1, help="Number of drafts.")
    parser.add_argument("--provider", default=None, help="openai, ollama or lmstudio.")
    parser.add_argument("--model", default=None, help="Model name override.")
    parser.add_argument(
        "--add",
        action="store_true",
        default=False,
        help="Add the first draft to the network as a theory.",
    )
    add_data_file_argument(parser)
    args = parser.parse_args(argv)

    from rich.console import Console
    from rich.panel import Panel

    from knownet.models.domain import Statement
    from knownet.services.theory_generator import TheoryGenerator

    console = Console()
    try:
        config, store = open_store(args)
        graph = store.load()
        sources = []
        for source_id in args.ids:
            statement = graph.get(source_id)
            if statement is None:
                _print_error(f"Statement not found: {source_id}")
                return 1
            sources.append(statement)

        generator = TheoryGenerator(config.llm, provider=args.provider, model=args.model)
        drafts = generator.generate_many(sources, count=args.count)

        for index, draft in enumerate(drafts, start=1):
            body = (
                f"{draft.content}\n\n"
                f"[dim]Tags:[/dim] {', '.join(draft.suggested_tags) or '-'}\n"
                f"[dim]Confidence:[/dim] {draft.suggested_confidence:.2f}\n"
                f"[dim]Reasoning:[/dim] {draft.reasoning}"
            )
            console.print(Panel(body, title=f"Draft {index}"))

        if args.add and drafts:
            first = drafts[0]
            theory = Statement(
                kind="theory",
                content=first.content,
                confidence=first.suggested_confidence,
                tags=first.suggested_tags,
                derived_from=[s.id for s in sources],
            )
            graph.add(theory)
            store.save(graph)
            console.print(f"Added theory {theory.id}")
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1
    return 0
