"""Enumerations for knownet."""
from __future__ import annotations

from enum import Enum


class StatementKind(str, Enum):
    """Kinds of statements in the knowledge network."""

    AXIOM = "axiom"
    THEORY = "theory"
    CONCLUSION = "conclusion"


class Severity(str, Enum):
    """Severity of a detected contradiction."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
