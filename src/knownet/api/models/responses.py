"""Pydantic response models for API endpoints."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from knownet.models.domain import (
    ContradictionPair,
    DerivationChain,
    DuplicateCheck,
    KnowledgeContext,
    Statement,
)


class StatementResponse(BaseModel):
    """A statement as returned by the API."""
    id: str
    type: str
    content: str
    confidence: float | None
    tags: list[str]
    derived_from: list[str]
    created_at: str
    updated_at: str | None

    @classmethod
    def from_statement(cls, statement: Statement) -> "StatementResponse":
        return cls(
            id=statement.id,
            type=statement.kind.value,
            content=statement.content,
            confidence=statement.confidence,
            tags=list(statement.tags),
            derived_from=list(statement.derived_from),
            created_at=statement.created_at.isoformat(),
            updated_at=statement.updated_at.isoformat() if statement.updated_at else None,
        )


class StatementListResponse(BaseModel):
    results: list[StatementResponse]
    total: int


class ContradictionResponse(BaseModel):
    statement1: StatementResponse
    statement2: StatementResponse
    reason: str
    severity: str

    @classmethod
    def from_pair(cls, pair: ContradictionPair) -> "ContradictionResponse":
        return cls(
            statement1=StatementResponse.from_statement(pair.statement1),
            statement2=StatementResponse.from_statement(pair.statement2),
            reason=pair.reason,
            severity=pair.severity.value,
        )


class StatementCreateResponse(BaseModel):
    statement: StatementResponse
    contradictions: list[ContradictionResponse]


class ChainResponse(BaseModel):
    """Recursive derivation chain; ``parents`` repeat the same shape."""
    statement_id: str
    statement: StatementResponse
    parents: list[dict[str, Any]]

    @classmethod
    def from_chain(cls, chain: DerivationChain) -> "ChainResponse":
        return cls(
            statement_id=chain.statement_id,
            statement=StatementResponse.from_statement(chain.statement),
            parents=[cls.from_chain(p).model_dump() for p in chain.parents],
        )


class StatsResponse(BaseModel):
    total: int
    by_type: dict[str, int]
    with_confidence: int
    avg_confidence: float | None
    avg_depth: float
    total_tags: int
    contradictions: int


class TheoryDraftResponse(BaseModel):
    content: str
    suggested_tags: list[str]
    suggested_confidence: float
    reasoning: str


class SimilarStatementResponse(BaseModel):
    statement: StatementResponse
    similarity: float
    reason: str


class DuplicateCheckResponse(BaseModel):
    has_duplicates: bool
    duplicates: list[SimilarStatementResponse]
    suggestions: list[str]

    @classmethod
    def from_check(cls, check: DuplicateCheck) -> "DuplicateCheckResponse":
        return cls(
            has_duplicates=check.has_duplicates,
            duplicates=[
                SimilarStatementResponse(
                    statement=StatementResponse.from_statement(s.statement),
                    similarity=round(s.similarity, 4),
                    reason=s.reason,
                )
                for s in check.similar
            ],
            suggestions=check.suggestions,
        )


class KnowledgeContextResponse(BaseModel):
    recent: list[StatementResponse]
    related_by_tags: list[StatementResponse]
    related_by_derivation: list[StatementResponse]
    gaps: list[str]

    @classmethod
    def from_context(cls, context: KnowledgeContext) -> "KnowledgeContextResponse":
        def convert(statements: list[Statement]) -> list[StatementResponse]:
            return [StatementResponse.from_statement(s) for s in statements]

        return cls(
            recent=convert(context.recent),
            related_by_tags=convert(context.related_by_tags),
            related_by_derivation=convert(context.related_by_derivation),
            gaps=context.gaps,
        )


class ReviewSuggestionResponse(BaseModel):
    statement: StatementResponse
    reason: str
    priority: str


class ReviewSuggestionsResponse(BaseModel):
    total: int
    suggestions: list[ReviewSuggestionResponse]


class RelationshipAnalysisResponse(BaseModel):
    statement: StatementResponse
    derivation_depth: int
    parent_count: int
    dependent_count: int
    related_count: int
    potential_gaps: list[str]
    context: KnowledgeContextResponse


class TheoryBatchResponse(BaseModel):
    count: int
    theories: list[TheoryDraftResponse]
    source_ids: list[str]


class GraphNodeResponse(BaseModel):
    id: str
    label: str
    type: str
    confidence: float | None
    tags: list[str]


class GraphEdgeResponse(BaseModel):
    source: str
    target: str
    label: str = "derives"


class GraphDataResponse(BaseModel):
    nodes: list[GraphNodeResponse]
    edges: list[GraphEdgeResponse]


class NodeConnectionsResponse(BaseModel):
    parents: list[StatementResponse]
    dependents: list[StatementResponse]
    parent_count: int
    dependent_count: int


class NodeDetailResponse(BaseModel):
    node: StatementResponse
    connections: NodeConnectionsResponse


class GraphStatsResponse(BaseModel):
    total_nodes: int
    total_edges: int
    isolated_nodes: int
    max_depth: int
    connected_components: int
