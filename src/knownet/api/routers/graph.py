"""Graph view data, neighbourhood and export endpoints."""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import PlainTextResponse

from knownet.api.dependencies import get_engine, get_graph
from knownet.api.models import (
    GraphDataResponse,
    GraphEdgeResponse,
    GraphNodeResponse,
    GraphStatsResponse,
    NodeConnectionsResponse,
    NodeDetailResponse,
    StatementResponse,
)
from knownet.config.constants import DEFAULT_SUBGRAPH_DEPTH
from knownet.services.export_service import graph_data, graph_stats, to_dot, to_markdown

router = APIRouter(prefix="/api/graph", tags=["graph"])


@router.get("/data", response_model=GraphDataResponse)
def data(
    include_orphans: bool = Query(True),
    max_label_length: int = Query(50, ge=4, le=500),
) -> GraphDataResponse:
    """Every node with a short label, plus parent -> child edges."""
    found = graph_data(
        get_graph(), include_orphans=include_orphans, max_label_length=max_label_length
    )
    return GraphDataResponse(
        nodes=[
            GraphNodeResponse(
                id=n.id, label=n.label, type=n.kind.value, confidence=n.confidence, tags=n.tags
            )
            for n in found.nodes
        ],
        edges=[GraphEdgeResponse(source=src, target=dst) for src, dst in found.edges],
    )


@router.get("/stats", response_model=GraphStatsResponse)
def stats() -> GraphStatsResponse:
    found = graph_stats(get_graph(), get_engine())
    return GraphStatsResponse(
        total_nodes=found.total_nodes,
        total_edges=found.total_edges,
        isolated_nodes=found.isolated_nodes,
        max_depth=found.max_depth,
        connected_components=found.connected_components,
    )


@router.get("/node/{statement_id}", response_model=NodeDetailResponse)
def node(statement_id: str) -> NodeDetailResponse:
    graph = get_graph()
    statement = graph.get(statement_id)
    if statement is None:
        raise HTTPException(404, f"Statement not found: {statement_id}")
    parents = [p for p in (graph.get(pid) for pid in statement.derived_from) if p is not None]
    dependents = graph.dependents(statement_id)
    return NodeDetailResponse(
        node=StatementResponse.from_statement(statement),
        connections=NodeConnectionsResponse(
            parents=[StatementResponse.from_statement(p) for p in parents],
            dependents=[StatementResponse.from_statement(d) for d in dependents],
            parent_count=len(parents),
            dependent_count=len(dependents),
        ),
    )


@router.get("/subgraph/{statement_id}")
def subgraph(
    statement_id: str,
    depth: int = Query(DEFAULT_SUBGRAPH_DEPTH, ge=0, le=10),
) -> dict[str, Any]:
    """Statements within *depth* hops of a statement, plus the edges among them."""
    found = get_engine().subgraph(statement_id, depth=depth)
    if found is None:
        raise HTTPException(404, f"Statement not found: {statement_id}")
    return {
        "center": found.center,
        "depth": found.depth,
        "nodes": [
            {
                "statement": StatementResponse.from_statement(node.statement),
                "distance": node.distance,
            }
            for node in found.nodes
        ],
        "edges": [{"source": src, "target": dst} for src, dst in found.edges],
    }


@router.get("/export/dot", response_class=PlainTextResponse)
def export_dot(
    title: str = Query("Knowledge Network"),
    rankdir: str = Query("TB"),
    include_orphans: bool = Query(True),
) -> str:
    try:
        return to_dot(get_graph(), title=title, rankdir=rankdir, include_orphans=include_orphans)
    except ValueError as exc:
        raise HTTPException(422, str(exc))


@router.get("/export/markdown", response_class=PlainTextResponse)
def export_markdown() -> str:
    return to_markdown(get_graph())
