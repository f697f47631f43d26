"""Query and analytics endpoints."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query

from knownet.api.dependencies import get_detector, get_graph, get_query_service
from knownet.api.models import (
    ContradictionResponse,
    SearchRequest,
    StatementListResponse,
    StatementResponse,
    StatsResponse,
)
from knownet.config.constants import DEFAULT_LISTING_LIMIT
from knownet.models.domain import Statement, StatementQuery
from knownet.models.enums import StatementKind

router = APIRouter(prefix="/api/query", tags=["query"])


def _to_list(statements: list[Statement]) -> StatementListResponse:
    return StatementListResponse(
        results=[StatementResponse.from_statement(s) for s in statements],
        total=len(statements),
    )


@router.post("/search", response_model=StatementListResponse)
def search(body: SearchRequest) -> StatementListResponse:
    kind = None
    if body.type:
        try:
            kind = StatementKind(body.type)
        except ValueError:
            raise HTTPException(422, f"Invalid type '{body.type}'")
    query = StatementQuery(
        kind=kind,
        tags=body.tags,
        content=body.content,
        derived_from=body.derived_from,
        min_confidence=body.min_confidence,
    )
    result = get_query_service().advanced_query(query)
    return _to_list(result.statements)


@router.get("/stats", response_model=StatsResponse)
def stats() -> StatsResponse:
    summary = get_query_service().summary()
    return StatsResponse(
        total=summary.total,
        by_type=summary.by_kind,
        with_confidence=summary.with_confidence,
        avg_confidence=summary.avg_confidence,
        avg_depth=summary.avg_depth,
        total_tags=summary.total_tags,
        contradictions=len(get_detector().detect_all()),
    )


@router.get("/orphans", response_model=StatementListResponse)
def orphans() -> StatementListResponse:
    return _to_list(get_query_service().orphans())


@router.get("/most-derived", response_model=StatementListResponse)
def most_derived(limit: int = Query(DEFAULT_LISTING_LIMIT, ge=1, le=100)) -> StatementListResponse:
    return _to_list(get_query_service().most_derived(limit))


@router.get("/deepest", response_model=StatementListResponse)
def deepest(limit: int = Query(DEFAULT_LISTING_LIMIT, ge=1, le=100)) -> StatementListResponse:
    return _to_list(get_query_service().deepest(limit))


@router.get("/contradictions", response_model=list[ContradictionResponse])
def contradictions() -> list[ContradictionResponse]:
    return [ContradictionResponse.from_pair(p) for p in get_detector().detect_all()]


@router.get("/path/{from_id}/{to_id}", response_model=StatementListResponse)
def derivation_path(from_id: str, to_id: str) -> StatementListResponse:
    path = get_query_service().derivation_path(from_id, to_id)
    if path is None:
        raise HTTPException(404, f"No path between {from_id} and {to_id}")
    return _to_list(path)


@router.get("/related/{statement_id}")
def related(statement_id: str) -> dict[str, Any]:
    if statement_id not in get_graph():
        raise HTTPException(404, f"Statement not found: {statement_id}")
    found = get_query_service().related(statement_id)
    return {
        "parents": [StatementResponse.from_statement(s) for s in found.parents],
        "children": [StatementResponse.from_statement(s) for s in found.children],
        "siblings": [StatementResponse.from_statement(s) for s in found.siblings],
    }


@router.get("/tags")
def tags() -> list[dict[str, Any]]:
    return [{"tag": t.tag, "count": t.count} for t in get_query_service().tag_counts()]
