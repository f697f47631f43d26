"""In-memory knowledge graph: statements plus a reverse derivation index."""
from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import datetime, timezone
from threading import RLock
from typing import Any

from knownet.errors import (
    CycleError,
    DanglingParentError,
    DuplicateIdError,
    HasDependentsError,
    NotFoundError,
    ValidationError,
)
from knownet.models.domain import Statement, StatementQuery, StatementUpdate
from knownet.models.enums import StatementKind

_logger = logging.getLogger(__name__)

FORMAT_VERSION = "1.0.0"


class KnowledgeGraph:
    """Owns every statement and keeps the dependents index consistent with it.

    The statement map and the dependents index are only touched through the
    public mutation methods, each of which holds the graph lock for its full
    duration. Statements go in and come out as copies, so editing a returned
    object never changes what the graph holds.
    """

    def __init__(self) -> None:
        self._statements: dict[str, Statement] = {}
        # parent id -> insertion-ordered set of child ids
        self._dependents: dict[str, dict[str, None]] = {}
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add(self, statement: Statement) -> Statement:
        with self._lock:
            if statement.id in self._statements:
                raise DuplicateIdError(statement.id)
            self._check_parents_exist(statement)
            self._check_acyclic(statement)

            stored = statement.copy()
            self._statements[stored.id] = stored
            self._link(stored.id, stored.derived_from)
            _logger.debug("added %s %s", stored.kind.value, stored.id)
            return stored.copy()

    def update(self, statement_id: str, changes: StatementUpdate) -> Statement:
        """Apply *changes* to a statement; the graph is unchanged if anything fails."""
        with self._lock:
            current = self._statements.get(statement_id)
            if current is None:
                raise NotFoundError(statement_id)

            candidate = current.updated(changes)
            relinked = candidate.derived_from != current.derived_from
            if relinked:
                self._check_parents_exist(candidate)
                self._check_acyclic(candidate)

            self._statements[statement_id] = candidate
            if relinked:
                self._unlink(statement_id, current.derived_from)
                self._link(statement_id, candidate.derived_from)
            _logger.debug("updated %s", statement_id)
            return candidate.copy()

    def delete(self, statement_id: str) -> Statement:
        with self._lock:
            statement = self._statements.get(statement_id)
            if statement is None:
                raise NotFoundError(statement_id)

            children = self._dependents.get(statement_id)
            if children:
                raise HasDependentsError(statement_id, list(children))

            self._unlink(statement_id, statement.derived_from)
            del self._statements[statement_id]
            _logger.debug("deleted %s", statement_id)
            return statement

    def restore(self, statement: Statement) -> Statement:
        """Put back a previously returned version of a statement, exactly as it was.

        Used to undo a mutation; the statement is added if its id is absent and
        swapped in (timestamps included) otherwise, under the usual parent and
        cycle checks.
        """
        with self._lock:
            current = self._statements.get(statement.id)
            if current is None:
                return self.add(statement)
            relinked = statement.derived_from != current.derived_from
            if relinked:
                self._check_parents_exist(statement)
                self._check_acyclic(statement)
            self._statements[statement.id] = statement.copy()
            if relinked:
                self._unlink(statement.id, current.derived_from)
                self._link(statement.id, statement.derived_from)
            _logger.debug("restored %s", statement.id)
            return statement.copy()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, statement_id: str) -> Statement | None:
        with self._lock:
            statement = self._statements.get(statement_id)
            return None if statement is None else statement.copy()

    def dependents(self, statement_id: str) -> list[Statement]:
        """Direct children of *statement_id*; empty for unknown ids."""
        with self._lock:
            child_ids = self._dependents.get(statement_id, {})
            return [self._statements[cid].copy() for cid in child_ids if cid in self._statements]

    def dependent_ids(self, statement_id: str) -> list[str]:
        with self._lock:
            return list(self._dependents.get(statement_id, {}))

    def all(self) -> list[Statement]:
        with self._lock:
            return [s.copy() for s in self._statements.values()]

    def ids(self) -> list[str]:
        with self._lock:
            return list(self._statements)

    def by_kind(self, kind: StatementKind | str) -> list[Statement]:
        kind = StatementKind(kind)
        with self._lock:
            return [s.copy() for s in self._statements.values() if s.kind is kind]

    def query(self, query: StatementQuery) -> list[Statement]:
        with self._lock:
            return [s.copy() for s in self._statements.values() if query.matches(s)]

    def __len__(self) -> int:
        return len(self._statements)

    def __contains__(self, statement_id: object) -> bool:
        return statement_id in self._statements

    def __iter__(self) -> Iterator[Statement]:
        return iter(self.all())

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        with self._lock:
            statements = list(self._statements.values())
        counts = {kind: 0 for kind in StatementKind}
        for s in statements:
            counts[s.kind] += 1
        return {
            "statements": [s.to_dict() for s in statements],
            "metadata": {
                "version": FORMAT_VERSION,
                "exportedAt": datetime.now(timezone.utc).isoformat(),
                "totalStatements": len(statements),
                "axioms": counts[StatementKind.AXIOM],
                "theories": counts[StatementKind.THEORY],
                "conclusions": counts[StatementKind.CONCLUSION],
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KnowledgeGraph:
        """Rebuild a graph, inserting parents before the statements that cite them."""
        records = data.get("statements") if isinstance(data, dict) else None
        if not isinstance(records, list):
            raise ValidationError("Invalid knowledge network data")

        statements = [Statement.from_dict(r) for r in records]
        statements.sort(key=lambda s: len(s.derived_from))

        graph = cls()
        pending = statements
        while pending:
            deferred = [s for s in pending if not all(p in graph for p in s.derived_from)]
            ready = [s for s in pending if all(p in graph for p in s.derived_from)]
            if not ready:
                # Nothing can make progress; surface the first unresolved parent.
                graph.add(deferred[0])
            for statement in ready:
                graph.add(statement)
            pending = deferred
        return graph

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _check_parents_exist(self, statement: Statement) -> None:
        for parent_id in statement.derived_from:
            if parent_id not in self._statements:
                raise DanglingParentError(parent_id)

    def _check_acyclic(self, statement: Statement) -> None:
        """Reject *statement* if its own id is reachable through its parents."""
        stack = list(statement.derived_from)
        visited: set[str] = set()
        while stack:
            current = stack.pop()
            if current == statement.id:
                raise CycleError(statement.id)
            if current in visited:
                continue
            visited.add(current)
            node = self._statements.get(current)
            if node is not None:
                stack.extend(node.derived_from)

    def _link(self, child_id: str, parent_ids: list[str]) -> None:
        for parent_id in parent_ids:
            self._dependents.setdefault(parent_id, {})[child_id] = None

    def _unlink(self, child_id: str, parent_ids: list[str]) -> None:
        for parent_id in parent_ids:
            bucket = self._dependents.get(parent_id)
            if bucket is None:
                continue
            bucket.pop(child_id, None)
            if not bucket:
                del self._dependents[parent_id]
