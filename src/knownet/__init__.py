from __future__ import annotations

__version__ = "0.1.0"
__author__ = "KnowNet Contributors"

from knownet.errors import (
    CycleError,
    DanglingParentError,
    DuplicateIdError,
    HasDependentsError,
    KnowNetError,
    NotFoundError,
    ValidationError,
)
from knownet.models import (
    Statement,
    StatementKind,
    StatementQuery,
    StatementUpdate,
)
from knownet.graph import DerivationEngine, KnowledgeGraph
from knownet.contradictions import ContradictionDetector

__all__ = [
    "Statement",
    "StatementKind",
    "StatementQuery",
    "StatementUpdate",
    "KnowledgeGraph",
    "DerivationEngine",
    "ContradictionDetector",
    "KnowNetError",
    "ValidationError",
    "DuplicateIdError",
    "DanglingParentError",
    "CycleError",
    "NotFoundError",
    "HasDependentsError",
]

