"""Read-only derivation algorithms over a KnowledgeGraph."""
from __future__ import annotations

from collections import deque
from collections.abc import Callable
from typing import TypeVar

from knownet.config.constants import DEFAULT_CONFIDENCE_DISCOUNT
from knownet.graph.network import KnowledgeGraph
from knownet.models.domain import (
    DerivationChain,
    ImpactAnalysis,
    Statement,
    Subgraph,
    SubgraphNode,
)

T = TypeVar("T")


class DerivationEngine:
    """Chain reconstruction, closures, confidence, depth and path finding.

    Never mutates the graph. Unknown ids yield ``None`` or empty results.
    """

    def __init__(
        self,
        graph: KnowledgeGraph,
        confidence_discount: float = DEFAULT_CONFIDENCE_DISCOUNT,
    ) -> None:
        self._graph = graph
        self._discount = confidence_discount

    # ------------------------------------------------------------------
    # Chains and closures
    # ------------------------------------------------------------------

    def build_chain(self, statement_id: str) -> DerivationChain | None:
        """Parent tree rooted at *statement_id*. Shared ancestors share one sub-chain."""
        return self._fold(
            statement_id,
            leaf=lambda s: (False, None),
            combine=lambda s, parents: DerivationChain(
                statement_id=s.id,
                statement=s,
                parents=tuple(p for p in parents if p is not None),
            ),
        )

    def ancestors(self, statement_id: str) -> set[str]:
        found: set[str] = set()
        start = self._graph.get(statement_id)
        if start is None:
            return found
        stack = list(start.derived_from)
        while stack:
            current = stack.pop()
            if current in found:
                continue
            found.add(current)
            node = self._graph.get(current)
            if node is not None:
                stack.extend(node.derived_from)
        return found

    def descendants(self, statement_id: str) -> set[str]:
        found: set[str] = set()
        stack = self._graph.dependent_ids(statement_id)
        while stack:
            current = stack.pop()
            if current in found:
                continue
            found.add(current)
            stack.extend(self._graph.dependent_ids(current))
        return found

    def impact_analysis(self, statement_id: str) -> ImpactAnalysis | None:
        if self._graph.get(statement_id) is None:
            return None
        all_dependents = self._resolve(self.descendants(statement_id))
        axiom_roots = [s for s in self._resolve(self.ancestors(statement_id)) if s.is_axiom]
        return ImpactAnalysis(
            direct_dependents=self._graph.dependents(statement_id),
            all_dependents=all_dependents,
            axiom_roots=axiom_roots,
        )

    # ------------------------------------------------------------------
    # Confidence and depth
    # ------------------------------------------------------------------

    def confidence(self, statement_id: str) -> float | None:
        """Explicit confidence, 1.0 for axioms, else weakest parent times the discount."""

        def leaf(s: Statement) -> tuple[bool, float | None]:
            if s.confidence is not None:
                return True, float(s.confidence)
            if s.is_axiom:
                return True, 1.0
            if not s.derived_from:
                return True, None
            return False, None

        def combine(s: Statement, parents: list[float | None]) -> float | None:
            resolved = [c for c in parents if c is not None]
            if not resolved:
                return None
            return min(resolved) * self._discount

        return self._fold(statement_id, leaf=leaf, combine=combine)

    def depth(self, statement_id: str) -> int | None:
        """Length of the longest derivation path back to a root; None if unknown."""

        def leaf(s: Statement) -> tuple[bool, int | None]:
            if s.is_axiom or not s.derived_from:
                return True, 0
            return False, None

        def combine(s: Statement, parents: list[int | None]) -> int:
            return 1 + max((d for d in parents if d is not None), default=-1)

        return self._fold(statement_id, leaf=leaf, combine=combine)

    # ------------------------------------------------------------------
    # Paths and neighbourhoods
    # ------------------------------------------------------------------

    def shortest_path(self, from_id: str, to_id: str) -> list[str] | None:
        """BFS over derivation edges treated as undirected."""
        if self._graph.get(from_id) is None or self._graph.get(to_id) is None:
            return None

        previous: dict[str, str | None] = {from_id: None}
        queue: deque[str] = deque([from_id])
        while queue:
            current = queue.popleft()
            if current == to_id:
                path = [current]
                while previous[path[-1]] is not None:
                    path.append(previous[path[-1]])  # type: ignore[arg-type]
                path.reverse()
                return path
            for neighbour in self._neighbours(current):
                if neighbour not in previous:
                    previous[neighbour] = current
                    queue.append(neighbour)
        return None

    def subgraph(self, statement_id: str, depth: int = 2) -> Subgraph | None:
        """Statements within *depth* undirected hops, with the edges between them."""
        if self._graph.get(statement_id) is None:
            return None

        distances: dict[str, int] = {statement_id: 0}
        queue: deque[str] = deque([statement_id])
        while queue:
            current = queue.popleft()
            if distances[current] >= depth:
                continue
            for neighbour in self._neighbours(current):
                if neighbour not in distances:
                    distances[neighbour] = distances[current] + 1
                    queue.append(neighbour)

        nodes: list[SubgraphNode] = []
        edges: list[tuple[str, str]] = []
        for sid, distance in distances.items():
            statement = self._graph.get(sid)
            if statement is None:
                continue
            nodes.append(SubgraphNode(statement=statement, distance=distance))
            for parent_id in statement.derived_from:
                edge = (parent_id, sid)
                if parent_id in distances and edge not in edges:
                    edges.append(edge)
        return Subgraph(center=statement_id, depth=depth, nodes=nodes, edges=edges)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _neighbours(self, statement_id: str) -> list[str]:
        statement = self._graph.get(statement_id)
        if statement is None:
            return []
        return [*statement.derived_from, *self._graph.dependent_ids(statement_id)]

    def _resolve(self, ids: set[str]) -> list[Statement]:
        # Keep graph insertion order rather than set order.
        return [s for s in self._graph.all() if s.id in ids]

    def _fold(
        self,
        root_id: str,
        leaf: Callable[[Statement], tuple[bool, T | None]],
        combine: Callable[[Statement, list[T | None]], T | None],
    ) -> T | None:
        """Iterative post-order evaluation over the parent DAG, memoised per id.

        *leaf* may short-circuit a node by returning ``(True, value)``; other
        nodes get ``combine(statement, parent_values)`` once every parent is
        resolved. Unknown ids resolve to ``None``.
        """
        memo: dict[str, T | None] = {}
        stack = [root_id]
        while stack:
            sid = stack[-1]
            if sid in memo:
                stack.pop()
                continue
            statement = self._graph.get(sid)
            if statement is None:
                memo[sid] = None
                stack.pop()
                continue
            outcome = leaf(statement)
            if outcome[0]:
                memo[sid] = outcome[1]
                stack.pop()
                continue
            pending = [p for p in statement.derived_from if p not in memo]
            if pending:
                stack.extend(pending)
                continue
            memo[sid] = combine(statement, [memo[p] for p in statement.derived_from])
            stack.pop()
        return memo.get(root_id)
