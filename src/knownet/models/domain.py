"""Domain models for the knowledge network."""
from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any

from knownet.errors import ValidationError
from knownet.models.enums import Severity, StatementKind


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _make_id() -> str:
    return str(uuid.uuid4())


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 string (or pass through a datetime) into an aware datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValidationError(f"Invalid timestamp: {value!r}") from exc
    else:
        raise ValidationError(f"Invalid timestamp: {value!r}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass
class StatementUpdate:
    """Explicit partial update for a statement. ``None`` means "not provided"."""

    content: str | None = None
    kind: StatementKind | str | None = None
    confidence: float | None = None
    tags: list[str] | None = None
    derived_from: list[str] | None = None
    clear_confidence: bool = False

    @property
    def changes_derivation(self) -> bool:
        return self.derived_from is not None

    def as_fields(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        if self.content is not None:
            values["content"] = self.content
        if self.kind is not None:
            values["kind"] = self.kind
        if self.clear_confidence:
            values["confidence"] = None
        elif self.confidence is not None:
            values["confidence"] = self.confidence
        if self.tags is not None:
            values["tags"] = list(self.tags)
        if self.derived_from is not None:
            values["derived_from"] = list(self.derived_from)
        return values


@dataclass
class Statement:
    """A single claim in the knowledge network.

    Invariants are checked on construction and on every update:
    content is non-empty, confidence (if set) lies in [0, 1], axioms have
    no parents and theories have at least one.
    """

    kind: StatementKind
    content: str
    id: str = field(default_factory=_make_id)
    confidence: float | None = None
    tags: list[str] = field(default_factory=list)
    derived_from: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        try:
            self.kind = StatementKind(self.kind)
        except ValueError as exc:
            valid = ", ".join(k.value for k in StatementKind)
            raise ValidationError(
                f"Invalid statement type '{self.kind}'. Must be one of: {valid}"
            ) from exc
        if not isinstance(self.content, str):
            raise ValidationError("Statement content must be a string")
        self.content = self.content.strip()
        self.tags = list(dict.fromkeys(str(t) for t in self.tags))
        self.derived_from = [str(p) for p in self.derived_from]
        if self.updated_at is None:
            self.updated_at = self.created_at
        self.validate()

    def validate(self) -> None:
        if not self.content:
            raise ValidationError("Statement content cannot be empty")

        if self.confidence is not None:
            if isinstance(self.confidence, bool) or not isinstance(self.confidence, (int, float)):
                raise ValidationError("Confidence must be a number")
            if math.isnan(self.confidence) or not 0.0 <= self.confidence <= 1.0:
                raise ValidationError("Confidence must be between 0 and 1")

        if self.kind is StatementKind.AXIOM and self.derived_from:
            raise ValidationError("Axioms cannot be derived from other statements")

        if self.kind is StatementKind.THEORY and not self.derived_from:
            raise ValidationError("Theories must be derived from at least one statement")

    @property
    def is_axiom(self) -> bool:
        return self.kind is StatementKind.AXIOM

    def updated(self, changes: StatementUpdate) -> Statement:
        """Return a validated copy with *changes* applied and a fresh ``updated_at``."""
        return replace(self, **changes.as_fields(), updated_at=_utcnow())

    def update(self, changes: StatementUpdate) -> None:
        """Apply *changes* in place; nothing is modified if validation fails."""
        candidate = self.updated(changes)
        for f in fields(self):
            setattr(self, f.name, getattr(candidate, f.name))

    def copy(self) -> Statement:
        """Independent copy; list fields are not shared with the original."""
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.kind.value,
            "content": self.content,
            "confidence": self.confidence,
            "tags": list(self.tags),
            "derivedFrom": list(self.derived_from),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Statement:
        if "type" not in data or "content" not in data:
            raise ValidationError(f"Statement record missing 'type' or 'content': {data!r}")
        kwargs: dict[str, Any] = {
            "kind": data["type"],
            "content": data["content"],
            "confidence": data.get("confidence"),
            "tags": data.get("tags") or [],
            "derived_from": data.get("derivedFrom") or [],
        }
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        if data.get("createdAt"):
            kwargs["created_at"] = parse_timestamp(data["createdAt"])
        if data.get("updatedAt"):
            kwargs["updated_at"] = parse_timestamp(data["updatedAt"])
        return cls(**kwargs)


@dataclass
class StatementQuery:
    """Conjunctive filter over statements. Unset fields do not filter."""

    kind: StatementKind | None = None
    tags: list[str] | None = None
    content: str | None = None
    derived_from: list[str] | None = None
    min_confidence: float | None = None

    def matches(self, statement: Statement) -> bool:
        if self.kind is not None and statement.kind != StatementKind(self.kind):
            return False
        if self.tags and not any(tag in statement.tags for tag in self.tags):
            return False
        if self.content and self.content.lower() not in statement.content.lower():
            return False
        if self.derived_from and not any(pid in statement.derived_from for pid in self.derived_from):
            return False
        if self.min_confidence is not None:
            if statement.confidence is None or statement.confidence < self.min_confidence:
                return False
        return True

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": StatementKind(self.kind).value if self.kind is not None else None,
            "tags": self.tags,
            "content": self.content,
            "derivedFrom": self.derived_from,
            "minConfidence": self.min_confidence,
        }


@dataclass(frozen=True)
class DerivationChain:
    """Read-only parent tree rooted at one statement."""

    statement_id: str
    statement: Statement
    parents: tuple[DerivationChain, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "statementId": self.statement_id,
            "statement": self.statement.to_dict(),
            "parents": [p.to_dict() for p in self.parents],
        }


@dataclass(frozen=True)
class ContradictionPair:
    """A pair of statements flagged as potentially contradictory."""

    statement1: Statement
    statement2: Statement
    reason: str
    severity: Severity

    def to_dict(self) -> dict[str, Any]:
        return {
            "statement1": self.statement1.to_dict(),
            "statement2": self.statement2.to_dict(),
            "reason": self.reason,
            "severity": self.severity.value,
        }


@dataclass
class ImpactAnalysis:
    """What depends on a statement and which axioms it ultimately rests on."""

    direct_dependents: list[Statement]
    all_dependents: list[Statement]
    axiom_roots: list[Statement]


@dataclass
class SubgraphNode:
    statement: Statement
    distance: int


@dataclass
class Subgraph:
    """Neighbourhood of a statement within a number of undirected hops."""

    center: str
    depth: int
    nodes: list[SubgraphNode] = field(default_factory=list)
    edges: list[tuple[str, str]] = field(default_factory=list)


@dataclass
class TheoryDraft:
    """A theory proposed by the theory-generation backend."""

    content: str
    suggested_tags: list[str] = field(default_factory=list)
    suggested_confidence: float = 0.7
    reasoning: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "content": self.content,
            "suggestedTags": list(self.suggested_tags),
            "suggestedConfidence": self.suggested_confidence,
            "reasoning": self.reasoning,
        }


@dataclass
class QueryResult:
    statements: list[Statement]
    count: int
    query: StatementQuery


@dataclass
class RelatedStatements:
    parents: list[Statement] = field(default_factory=list)
    children: list[Statement] = field(default_factory=list)
    siblings: list[Statement] = field(default_factory=list)


@dataclass
class TagCount:
    tag: str
    count: int


@dataclass
class StatementSummary:
    """Aggregate figures over the whole network."""

    total: int
    by_kind: dict[str, int]
    with_confidence: int
    avg_confidence: float | None
    avg_depth: float
    total_tags: int


@dataclass
class SimilarStatement:
    statement: Statement
    similarity: float
    reason: str


@dataclass
class DuplicateCheck:
    """Existing statements that look like a new text, most similar first."""

    similar: list[SimilarStatement] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)

    @property
    def has_duplicates(self) -> bool:
        return bool(self.similar)


@dataclass
class KnowledgeContext:
    recent: list[Statement] = field(default_factory=list)
    related_by_tags: list[Statement] = field(default_factory=list)
    related_by_derivation: list[Statement] = field(default_factory=list)
    gaps: list[str] = field(default_factory=list)


@dataclass
class ReviewSuggestion:
    statement: Statement
    reason: str
    priority: str


@dataclass
class RelationshipAnalysis:
    """Where a statement sits in the network, plus the context around it."""

    statement: Statement
    derivation_depth: int
    parent_count: int
    dependent_count: int
    context: KnowledgeContext

    @property
    def related_count(self) -> int:
        return len(self.context.related_by_derivation)


@dataclass
class GraphNode:
    id: str
    label: str
    kind: StatementKind
    confidence: float | None
    tags: list[str]


@dataclass
class GraphData:
    """Nodes and parent -> child edges, ready for a front-end graph view."""

    nodes: list[GraphNode]
    edges: list[tuple[str, str]]


@dataclass
class GraphStats:
    total_nodes: int
    total_edges: int
    isolated_nodes: int
    max_depth: int
    connected_components: int
