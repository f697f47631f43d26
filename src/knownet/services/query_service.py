"""Higher-level queries and analytics over the knowledge graph."""
from __future__ import annotations

from knownet.config.constants import DEFAULT_LISTING_LIMIT
from knownet.graph.derivation import DerivationEngine
from knownet.graph.network import KnowledgeGraph
from knownet.models.domain import (
    QueryResult,
    RelatedStatements,
    Statement,
    StatementQuery,
    StatementSummary,
    TagCount,
)
from knownet.models.enums import StatementKind


class QueryService:
    """Read-only facade composing the graph and the derivation engine."""

    def __init__(self, graph: KnowledgeGraph, engine: DerivationEngine | None = None) -> None:
        self._graph = graph
        self._engine = engine or DerivationEngine(graph)

    @property
    def engine(self) -> DerivationEngine:
        return self._engine

    def search(self, text: str) -> QueryResult:
        return self.advanced_query(StatementQuery(content=text))

    def advanced_query(self, query: StatementQuery) -> QueryResult:
        statements = self._graph.query(query)
        return QueryResult(statements=statements, count=len(statements), query=query)

    def by_tags(self, tags: list[str], match_all: bool = False) -> list[Statement]:
        if match_all:
            return [s for s in self._graph.all() if all(t in s.tags for t in tags)]
        return [s for s in self._graph.all() if any(t in s.tags for t in tags)]

    def related(self, statement_id: str) -> RelatedStatements:
        """Parents, children and siblings (other children of the same parents)."""
        statement = self._graph.get(statement_id)
        if statement is None:
            return RelatedStatements()

        parents = [p for p in (self._graph.get(pid) for pid in statement.derived_from) if p]
        children = self._graph.dependents(statement_id)

        siblings: list[Statement] = []
        seen: set[str] = set()
        for parent_id in statement.derived_from:
            for sibling in self._graph.dependents(parent_id):
                if sibling.id != statement_id and sibling.id not in seen:
                    seen.add(sibling.id)
                    siblings.append(sibling)

        return RelatedStatements(parents=parents, children=children, siblings=siblings)

    def derivation_path(self, from_id: str, to_id: str) -> list[Statement] | None:
        path = self._engine.shortest_path(from_id, to_id)
        if path is None:
            return None
        return [s for s in (self._graph.get(sid) for sid in path) if s is not None]

    def effective_confidence(self, statement: Statement) -> float | None:
        if statement.confidence is not None:
            return statement.confidence
        return self._engine.confidence(statement.id)

    def by_confidence_range(self, minimum: float, maximum: float) -> list[Statement]:
        results = []
        for statement in self._graph.all():
            confidence = self.effective_confidence(statement)
            if confidence is not None and minimum <= confidence <= maximum:
                results.append(statement)
        return results

    def most_derived(self, limit: int = DEFAULT_LISTING_LIMIT) -> list[Statement]:
        ranked = sorted(
            self._graph.all(),
            key=lambda s: len(self._graph.dependent_ids(s.id)),
            reverse=True,
        )
        return ranked[:limit]

    def deepest(self, limit: int = DEFAULT_LISTING_LIMIT) -> list[Statement]:
        ranked = sorted(
            self._graph.all(),
            key=lambda s: self._engine.depth(s.id) or 0,
            reverse=True,
        )
        return ranked[:limit]

    def orphans(self) -> list[Statement]:
        """Non-axiom statements nothing derives from."""
        return [
            s for s in self._graph.all()
            if not s.is_axiom and not self._graph.dependent_ids(s.id)
        ]

    def tag_counts(self) -> list[TagCount]:
        counts: dict[str, int] = {}
        for statement in self._graph.all():
            for tag in statement.tags:
                counts[tag] = counts.get(tag, 0) + 1
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        return [TagCount(tag=tag, count=count) for tag, count in ranked]

    def summary(self) -> StatementSummary:
        statements = self._graph.all()
        by_kind = {kind.value: 0 for kind in StatementKind}
        total_confidence = 0.0
        with_confidence = 0
        total_depth = 0

        for statement in statements:
            by_kind[statement.kind.value] += 1
            confidence = self.effective_confidence(statement)
            if confidence is not None:
                total_confidence += confidence
                with_confidence += 1
            total_depth += self._engine.depth(statement.id) or 0

        return StatementSummary(
            total=len(statements),
            by_kind=by_kind,
            with_confidence=with_confidence,
            avg_confidence=total_confidence / with_confidence if with_confidence else None,
            avg_depth=total_depth / len(statements) if statements else 0.0,
            total_tags=len(self.tag_counts()),
        )
