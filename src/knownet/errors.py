"""Error taxonomy for the knowledge network core."""
from __future__ import annotations


class KnowNetError(Exception):
    """Base class for all knowledge network domain errors."""


class ValidationError(KnowNetError, ValueError):
    """Raised when a statement violates one of its invariants."""


class DuplicateIdError(KnowNetError):
    """Raised when a statement id is already present in the graph."""

    def __init__(self, statement_id: str) -> None:
        super().__init__(f"Statement with id {statement_id} already exists")
        self.statement_id = statement_id


class DanglingParentError(KnowNetError):
    """Raised when a statement derives from an id the graph does not hold."""

    def __init__(self, parent_id: str) -> None:
        super().__init__(f"Parent statement {parent_id} not found")
        self.parent_id = parent_id


class CycleError(KnowNetError):
    """Raised when a derivation would close a cycle."""

    def __init__(self, statement_id: str) -> None:
        super().__init__(f"Circular dependency detected for statement {statement_id}")
        self.statement_id = statement_id


class NotFoundError(KnowNetError, LookupError):
    """Raised when update/delete targets an unknown statement."""

    def __init__(self, statement_id: str) -> None:
        super().__init__(f"Statement with id {statement_id} not found")
        self.statement_id = statement_id


class HasDependentsError(KnowNetError):
    """Raised when deleting a statement that other statements derive from."""

    def __init__(self, statement_id: str, dependent_ids: list[str]) -> None:
        super().__init__(
            f"Cannot delete statement {statement_id} because it has "
            f"{len(dependent_ids)} dependent statements"
        )
        self.statement_id = statement_id
        self.dependent_ids = dependent_ids
