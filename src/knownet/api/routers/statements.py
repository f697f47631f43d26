"""Statement CRUD endpoints."""
from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query

from knownet.api.dependencies import get_detector, get_engine, get_graph, persist
from knownet.api.models import (
    ChainResponse,
    ContradictionResponse,
    StatementCreateRequest,
    StatementCreateResponse,
    StatementListResponse,
    StatementResponse,
    StatementUpdateRequest,
)
from knownet.models.domain import Statement, StatementQuery, StatementUpdate
from knownet.models.enums import StatementKind

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/statements", tags=["statements"])


def _to_list(statements: list[Statement]) -> StatementListResponse:
    return StatementListResponse(
        results=[StatementResponse.from_statement(s) for s in statements],
        total=len(statements),
    )


def _parse_kind(value: str) -> StatementKind:
    try:
        return StatementKind(value)
    except ValueError:
        valid = ", ".join(k.value for k in StatementKind)
        raise HTTPException(422, f"Invalid type '{value}'. Must be one of: {valid}")


@router.get("", response_model=StatementListResponse)
def list_statements(
    type: str | None = Query(None),
    tag: list[str] | None = Query(None),
) -> StatementListResponse:
    """List statements, optionally filtered by type and tags (any match)."""
    query = StatementQuery(
        kind=_parse_kind(type) if type else None,
        tags=tag or None,
    )
    return _to_list(get_graph().query(query))


@router.post("", response_model=StatementCreateResponse, status_code=201)
def create_statement(body: StatementCreateRequest) -> StatementCreateResponse:
    kwargs: dict = {
        "kind": body.type,
        "content": body.content,
        "confidence": body.confidence,
        "tags": body.tags,
        "derived_from": body.derived_from,
    }
    if body.id:
        kwargs["id"] = body.id
    statement = Statement(**kwargs)

    contradictions = []
    if body.check_contradictions:
        contradictions = get_detector().check_against_existing(statement)

    graph = get_graph()
    statement = graph.add(statement)
    persist(undo=lambda: graph.delete(statement.id))
    logger.info("Created %s %s", statement.kind.value, statement.id)

    return StatementCreateResponse(
        statement=StatementResponse.from_statement(statement),
        contradictions=[ContradictionResponse.from_pair(p) for p in contradictions],
    )


@router.get("/{statement_id}", response_model=StatementResponse)
def get_statement(statement_id: str) -> StatementResponse:
    statement = get_graph().get(statement_id)
    if statement is None:
        raise HTTPException(404, f"Statement not found: {statement_id}")
    return StatementResponse.from_statement(statement)


@router.put("/{statement_id}", response_model=StatementResponse)
def update_statement(statement_id: str, body: StatementUpdateRequest) -> StatementResponse:
    changes = StatementUpdate(
        content=body.content,
        kind=body.type,
        confidence=body.confidence,
        clear_confidence=body.clear_confidence,
        tags=body.tags,
        derived_from=body.derived_from,
    )
    graph = get_graph()
    previous = graph.get(statement_id)
    updated = graph.update(statement_id, changes)
    persist(undo=lambda: graph.restore(previous))
    return StatementResponse.from_statement(updated)


@router.delete("/{statement_id}", response_model=StatementResponse)
def delete_statement(statement_id: str) -> StatementResponse:
    graph = get_graph()
    removed = graph.delete(statement_id)
    persist(undo=lambda: graph.restore(removed))
    logger.info("Deleted %s", statement_id)
    return StatementResponse.from_statement(removed)


@router.get("/{statement_id}/chain", response_model=ChainResponse)
def get_chain(statement_id: str) -> ChainResponse:
    chain = get_engine().build_chain(statement_id)
    if chain is None:
        raise HTTPException(404, f"Statement not found: {statement_id}")
    return ChainResponse.from_chain(chain)


@router.get("/{statement_id}/dependents", response_model=StatementListResponse)
def get_dependents(statement_id: str) -> StatementListResponse:
    graph = get_graph()
    if statement_id not in graph:
        raise HTTPException(404, f"Statement not found: {statement_id}")
    return _to_list(graph.dependents(statement_id))
