"""Command-line interface for knownet."""
from knownet.cli.main import main

__all__ = ["main"]
