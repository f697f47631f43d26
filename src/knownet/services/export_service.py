"""Markdown and Graphviz DOT export of the knowledge graph, plus node/edge data for graph views."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from knownet.graph.derivation import DerivationEngine
from knownet.graph.network import KnowledgeGraph
from knownet.models.domain import GraphData, GraphNode, GraphStats, Statement
from knownet.models.enums import StatementKind

logger = logging.getLogger(__name__)

_SECTION_TITLES = {
    StatementKind.AXIOM: "Axioms",
    StatementKind.THEORY: "Theories",
    StatementKind.CONCLUSION: "Conclusions",
}

_DOT_SHAPES = {
    StatementKind.AXIOM: "box",
    StatementKind.THEORY: "ellipse",
    StatementKind.CONCLUSION: "diamond",
}

_DOT_RANKDIRS = ("TB", "BT", "LR", "RL")
_LABEL_LENGTH = 50


def to_markdown(graph: KnowledgeGraph) -> str:
    statements = graph.all()
    lines = [
        "# Knowledge Network Export",
        "",
        f"Generated on: {datetime.now(timezone.utc).isoformat()}",
        "",
        f"Total Statements: {len(statements)}",
        "",
    ]
    for kind, title in _SECTION_TITLES.items():
        lines.extend([f"## {title}", ""])
        for statement in statements:
            if statement.kind is kind:
                lines.extend(_markdown_entry(statement))
    return "\n".join(lines)


def _markdown_entry(statement: Statement) -> list[str]:
    confidence = "N/A" if statement.confidence is None else f"{statement.confidence}"
    entry = [
        f"### {statement.id}",
        f"- **Content**: {statement.content}",
        f"- **Confidence**: {confidence}",
        f"- **Tags**: {', '.join(statement.tags) or 'None'}",
    ]
    if not statement.is_axiom:
        entry.append(f"- **Derived From**: {', '.join(statement.derived_from) or 'None'}")
    entry.extend([f"- **Created**: {statement.created_at.isoformat()}", ""])
    return entry


def _dot_escape(text: str) -> str:
    return text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", " ")


def _truncate(text: str, length: int = _LABEL_LENGTH) -> str:
    return text if len(text) <= length else text[:length] + "..."


def to_dot(
    graph: KnowledgeGraph,
    title: str = "Knowledge Network",
    rankdir: str = "TB",
    include_orphans: bool = True,
) -> str:
    """Render the derivation DAG as a Graphviz digraph (parent -> child)."""
    if rankdir not in _DOT_RANKDIRS:
        raise ValueError(f"rankdir must be one of {', '.join(_DOT_RANKDIRS)}")

    statements = graph.all()
    if not include_orphans:
        statements = [s for s in statements if not _is_isolated(graph, s)]
    included = {s.id for s in statements}

    lines = [
        "digraph KnowledgeNetwork {",
        f'  label="{_dot_escape(title)}";',
        f"  rankdir={rankdir};",
        "  node [fontname=\"Helvetica\"];",
    ]
    for s in statements:
        lines.append(
            f'  "{s.id}" [label="{_dot_escape(_truncate(s.content))}", '
            f"shape={_DOT_SHAPES[s.kind]}];"
        )
    for s in statements:
        for parent_id in s.derived_from:
            if parent_id in included:
                lines.append(f'  "{parent_id}" -> "{s.id}";')
    lines.append("}")
    return "\n".join(lines) + "\n"


def _is_isolated(graph: KnowledgeGraph, statement: Statement) -> bool:
    return not statement.derived_from and not graph.dependent_ids(statement.id)


def _label(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max(max_length - 3, 0)] + "..."


def graph_data(
    graph: KnowledgeGraph,
    include_orphans: bool = True,
    max_label_length: int = _LABEL_LENGTH,
) -> GraphData:
    """Nodes with short labels and parent -> child edges for an interactive view.

    Labels longer than *max_label_length* are cut so that, with the trailing
    "...", they are exactly that long.
    """
    statements = graph.all()
    if not include_orphans:
        statements = [s for s in statements if not _is_isolated(graph, s)]
    nodes = [
        GraphNode(
            id=s.id,
            label=_label(s.content, max_label_length),
            kind=s.kind,
            confidence=s.confidence,
            tags=list(s.tags),
        )
        for s in statements
    ]
    edges = [(parent_id, s.id) for s in statements for parent_id in s.derived_from]
    return GraphData(nodes=nodes, edges=edges)


def graph_stats(graph: KnowledgeGraph, engine: DerivationEngine | None = None) -> GraphStats:
    engine = engine or DerivationEngine(graph)
    statements = graph.all()

    # Weakly connected components via union-find over derivation edges.
    root_of = {s.id: s.id for s in statements}

    def find(sid: str) -> str:
        while root_of[sid] != sid:
            root_of[sid] = root_of[root_of[sid]]
            sid = root_of[sid]
        return sid

    edges = 0
    for s in statements:
        for parent_id in s.derived_from:
            edges += 1
            root_of[find(s.id)] = find(parent_id)

    return GraphStats(
        total_nodes=len(statements),
        total_edges=edges,
        isolated_nodes=sum(1 for s in statements if _is_isolated(graph, s)),
        max_depth=max((engine.depth(s.id) or 0 for s in statements), default=0),
        connected_components=len({find(s.id) for s in statements}),
    )


def write_export(text: str, output_path: Path) -> Path:
    output_path = Path(output_path).expanduser()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(text, encoding="utf-8")
    logger.info("Wrote export to %s", output_path)
    return output_path
