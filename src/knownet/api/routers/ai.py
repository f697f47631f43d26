"""Theory generation and knowledge-assistant endpoints."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from knownet.api.dependencies import get_assistant, get_graph, get_theory_backend
from knownet.api.models import (
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    KnowledgeContextRequest,
    KnowledgeContextResponse,
    RelationshipAnalysisResponse,
    RelationshipRequest,
    ReviewSuggestionResponse,
    ReviewSuggestionsResponse,
    StatementListResponse,
    StatementResponse,
    TheoryBatchRequest,
    TheoryBatchResponse,
    TheoryDraftResponse,
    TheoryRequest,
)
from knownet.models.domain import Statement, TheoryDraft
from knownet.services.theory_generator import MAX_SUGGESTIONS, suggest_derivations

router = APIRouter(prefix="/api/ai", tags=["ai"])


def _sources(source_ids: list[str]) -> list[Statement]:
    graph = get_graph()
    sources = []
    for source_id in source_ids:
        statement = graph.get(source_id)
        if statement is None:
            raise HTTPException(404, f"Statement not found: {source_id}")
        sources.append(statement)
    return sources


def _draft_response(draft: TheoryDraft) -> TheoryDraftResponse:
    return TheoryDraftResponse(
        content=draft.content,
        suggested_tags=draft.suggested_tags,
        suggested_confidence=draft.suggested_confidence,
        reasoning=draft.reasoning,
    )


def _to_list(statements: list[Statement]) -> StatementListResponse:
    return StatementListResponse(
        results=[StatementResponse.from_statement(s) for s in statements],
        total=len(statements),
    )


@router.post("/generate-theory", response_model=list[TheoryDraftResponse])
def generate_theory(body: TheoryRequest) -> list[TheoryDraftResponse]:
    """Draft theories from the given source statements. Nothing is added to the graph."""
    sources = _sources(body.source_ids)
    backend = get_theory_backend()
    return [_draft_response(backend.generate(sources)) for _ in range(body.count)]


@router.post("/generate-theories-batch", response_model=TheoryBatchResponse)
def generate_theories_batch(body: TheoryBatchRequest) -> TheoryBatchResponse:
    sources = _sources(body.source_ids)
    backend = get_theory_backend()
    drafts = [_draft_response(backend.generate(sources)) for _ in range(body.count)]
    return TheoryBatchResponse(
        count=len(drafts),
        theories=drafts,
        source_ids=[s.id for s in sources],
    )


@router.get("/suggest-derivations/{statement_id}", response_model=StatementListResponse)
def suggest(statement_id: str, limit: int = MAX_SUGGESTIONS) -> StatementListResponse:
    """Tag-sharing statements that *statement_id* could additionally derive from."""
    graph = get_graph()
    if statement_id not in graph:
        raise HTTPException(404, f"Statement not found: {statement_id}")
    return _to_list(suggest_derivations(graph, statement_id, limit=limit))


@router.post("/check-duplicates", response_model=DuplicateCheckResponse)
def check_duplicates(body: DuplicateCheckRequest) -> DuplicateCheckResponse:
    check = get_assistant().check_duplicates(body.content, body.tags)
    return DuplicateCheckResponse.from_check(check)


@router.post("/knowledge-context", response_model=KnowledgeContextResponse)
def knowledge_context(body: KnowledgeContextRequest) -> KnowledgeContextResponse:
    context = get_assistant().knowledge_context(body.query, body.tags)
    return KnowledgeContextResponse.from_context(context)


@router.get("/review-suggestions", response_model=ReviewSuggestionsResponse)
def review_suggestions() -> ReviewSuggestionsResponse:
    suggestions = get_assistant().review_suggestions()
    return ReviewSuggestionsResponse(
        total=len(suggestions),
        suggestions=[
            ReviewSuggestionResponse(
                statement=StatementResponse.from_statement(s.statement),
                reason=s.reason,
                priority=s.priority,
            )
            for s in suggestions
        ],
    )


@router.get("/suggest-related/{statement_id}", response_model=StatementListResponse)
def suggest_related(statement_id: str) -> StatementListResponse:
    if statement_id not in get_graph():
        raise HTTPException(404, f"Statement not found: {statement_id}")
    return _to_list(get_assistant().suggest_related(statement_id))


@router.post("/analyze-relationships", response_model=RelationshipAnalysisResponse)
def analyze_relationships(body: RelationshipRequest) -> RelationshipAnalysisResponse:
    analysis = get_assistant().analyze_relationships(body.statement_id)
    if analysis is None:
        raise HTTPException(404, f"Statement not found: {body.statement_id}")
    return RelationshipAnalysisResponse(
        statement=StatementResponse.from_statement(analysis.statement),
        derivation_depth=analysis.derivation_depth,
        parent_count=analysis.parent_count,
        dependent_count=analysis.dependent_count,
        related_count=analysis.related_count,
        potential_gaps=analysis.context.gaps,
        context=KnowledgeContextResponse.from_context(analysis.context),
    )
