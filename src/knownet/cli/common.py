"""Helpers shared by the CLI commands."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

from knownet.errors import KnowNetError
from knownet.services.llm_service import LLMServiceError
from knownet.services.storage import StorageError
from knownet.services.theory_generator import TheoryGenerationError

# Failures reported as "Error: ..." with exit status 1.
CLI_ERRORS: tuple[type[Exception], ...] = (
    KnowNetError,
    StorageError,
    TheoryGenerationError,
    LLMServiceError,
)

_TYPE_STYLES = {
    "axiom": "blue",
    "theory": "green",
    "conclusion": "yellow",
}


def _print_error(msg: str) -> None:
    print(f"Error: {msg}", file=sys.stderr)


def add_data_file_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--data-file",
        default=None,
        help="Knowledge network JSON file (defaults to the configured data file).",
    )


def open_store(args: argparse.Namespace):
    """Return ``(config, store)`` honouring ``--data-file`` over configuration."""
    from knownet.config import Config
    from knownet.services.storage import JSONGraphStore

    config = Config.load()
    data_file = Path(args.data_file) if getattr(args, "data_file", None) else config.storage.data_path
    return config, JSONGraphStore(data_file, max_backups=config.storage.max_backups)


def short(text: str, length: int = 60) -> str:
    return text if len(text) <= length else text[:length] + "…"


def type_label(kind_value: str) -> str:
    style = _TYPE_STYLES.get(kind_value, "white")
    return f"[{style}]{kind_value}[/{style}]"


def statement_table(title: str, statements, confidence_of=None):
    """Rich table of statements; *confidence_of* overrides the displayed confidence."""
    from rich.table import Table

    table = Table(title=title, show_lines=False)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Type", justify="center")
    table.add_column("Content", no_wrap=False, max_width=60)
    table.add_column("Confidence", justify="right")
    table.add_column("Tags", style="cyan")

    for s in statements:
        confidence = confidence_of(s) if confidence_of else s.confidence
        table.add_row(
            s.id,
            type_label(s.kind.value),
            short(s.content),
            "-" if confidence is None else f"{confidence:.2f}",
            ", ".join(s.tags),
        )
    return table
