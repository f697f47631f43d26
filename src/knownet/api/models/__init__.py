"""Pydantic models for API requests and responses."""
from knownet.api.models.requests import (
    DuplicateCheckRequest,
    KnowledgeContextRequest,
    RelationshipRequest,
    SearchRequest,
    StatementCreateRequest,
    StatementUpdateRequest,
    TheoryBatchRequest,
    TheoryRequest,
)
from knownet.api.models.responses import (
    ChainResponse,
    ContradictionResponse,
    DuplicateCheckResponse,
    GraphDataResponse,
    GraphEdgeResponse,
    GraphNodeResponse,
    GraphStatsResponse,
    KnowledgeContextResponse,
    NodeConnectionsResponse,
    NodeDetailResponse,
    RelationshipAnalysisResponse,
    ReviewSuggestionResponse,
    ReviewSuggestionsResponse,
    StatementCreateResponse,
    StatementListResponse,
    StatementResponse,
    StatsResponse,
    TheoryBatchResponse,
    TheoryDraftResponse,
)

__all__ = [
    "DuplicateCheckRequest",
    "KnowledgeContextRequest",
    "RelationshipRequest",
    "SearchRequest",
    "StatementCreateRequest",
    "StatementUpdateRequest",
    "TheoryBatchRequest",
    "TheoryRequest",
    "ChainResponse",
    "ContradictionResponse",
    "DuplicateCheckResponse",
    "GraphDataResponse",
    "GraphEdgeResponse",
    "GraphNodeResponse",
    "GraphStatsResponse",
    "KnowledgeContextResponse",
    "NodeConnectionsResponse",
    "NodeDetailResponse",
    "RelationshipAnalysisResponse",
    "ReviewSuggestionResponse",
    "ReviewSuggestionsResponse",
    "StatementCreateResponse",
    "StatementListResponse",
    "StatementResponse",
    "StatsResponse",
    "TheoryBatchResponse",
    "TheoryDraftResponse",
]
