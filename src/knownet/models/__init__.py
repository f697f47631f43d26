"""Data models for knownet."""
from __future__ import annotations

from knownet.models.domain import (
    ContradictionPair,
    DerivationChain,
    DuplicateCheck,
    GraphData,
    GraphNode,
    GraphStats,
    ImpactAnalysis,
    KnowledgeContext,
    QueryResult,
    RelatedStatements,
    RelationshipAnalysis,
    ReviewSuggestion,
    SimilarStatement,
    Statement,
    StatementQuery,
    StatementSummary,
    StatementUpdate,
    Subgraph,
    SubgraphNode,
    TagCount,
    TheoryDraft,
)
from knownet.models.enums import Severity, StatementKind

__all__ = [
    "StatementKind",
    "Severity",
    "Statement",
    "StatementUpdate",
    "StatementQuery",
    "DerivationChain",
    "ContradictionPair",
    "ImpactAnalysis",
    "Subgraph",
    "SubgraphNode",
    "TheoryDraft",
    "QueryResult",
    "RelatedStatements",
    "TagCount",
    "StatementSummary",
    "SimilarStatement",
    "DuplicateCheck",
    "KnowledgeContext",
    "ReviewSuggestion",
    "RelationshipAnalysis",
    "GraphNode",
    "GraphData",
    "GraphStats",
]
