"""CLI commands: knownet backup create|list|restore."""
from __future__ import annotations

import argparse

from knownet.cli.common import CLI_ERRORS, _print_error, add_data_file_argument, open_store


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="knownet backup",
        description="Backup commands for the data file.",
    )
    sub = parser.add_subparsers(dest="subcommand", metavar="SUBCOMMAND")
    sub.required = True

    create_p = sub.add_parser("create", help="Back up the data file.")
    add_data_file_argument(create_p)

    list_p = sub.add_parser("list", help="List backups, newest first.")
    add_data_file_argument(list_p)

    restore_p = sub.add_parser("restore", help="Restore the data file from a backup.")
    restore_p.add_argument("name", help="Backup file name, as shown by `backup list`.")
    add_data_file_argument(restore_p)

    return parser


def _cmd_create(args: argparse.Namespace) -> int:
    _config, store = open_store(args)
    path = store.backup()
    print(f"Created backup {path.name}")
    return 0


def _cmd_list(args: argparse.Namespace) -> int:
    from rich.console import Console
    from rich.table import Table

    _config, store = open_store(args)
    names = store.list_backups()
    console = Console()
    if not names:
        console.print("[green]No backups found.[/green]")
        return 0
    table = Table(title=f"Backups ({len(names)})")
    table.add_column("Name", no_wrap=True)
    for name in names:
        table.add_row(name)
    console.print(table)
    return 0


def _cmd_restore(args: argparse.Namespace) -> int:
    _config, store = open_store(args)
    graph = store.restore_backup(args.name)
    print(f"Restored {len(graph)} statements from {args.name}")
    return 0


def run_backup(argv: list[str]) -> int:
    """Entry point for `knownet backup` subcommands."""
    parser = _build_parser()

    if not argv:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)

    handlers = {
        "create": _cmd_create,
        "list": _cmd_list,
        "restore": _cmd_restore,
    }
    try:
        return handlers[args.subcommand](args)
    except CLI_ERRORS as exc:
        _print_error(str(exc))
        return 1
