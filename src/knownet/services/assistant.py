"""Editorial help while the network grows.

Duplicate checks for a new text, the context around a topic, related
statements worth reading next and statements worth reviewing. All of it
is lexical and deterministic; nothing here calls an LLM.
"""
from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Iterable, Iterator

from knownet.graph.network import KnowledgeGraph
from knownet.models.domain import (
    DerivationChain,
    DuplicateCheck,
    KnowledgeContext,
    RelationshipAnalysis,
    ReviewSuggestion,
    SimilarStatement,
    Statement,
    StatementQuery,
)
from knownet.models.enums import StatementKind
from knownet.services.query_service import QueryService

logger = logging.getLogger(__name__)

_STOPWORDS = frozenset({"this", "that", "with", "from", "have", "been"})
_NEGATIONS = frozenset({"not", "never", "no", "cannot", "don't", "doesn't", "isn't"})
_WORD_RE = re.compile(r"[a-z0-9']+")

MSG_DUPLICATE = "This appears to be a duplicate. Consider updating the existing statement instead."
MSG_LINK = "Consider linking this as a derivation of existing knowledge."
MSG_DIFFERENTIATE = "You might want to differentiate this more clearly from existing statements."
MSG_CONFLICT = "This might conflict with existing beliefs. Consider adding as a theory to explore."

MSG_NO_AXIOMS = "No axioms found for this topic - consider adding fundamental beliefs"

REVIEW_WEAK_SUPPORT = (
    "Low confidence statement with high confidence dependents - may need strengthening"
)
REVIEW_STALE_AXIOM = "Axiom is over 30 days old - consider if it still holds true"
REVIEW_ISOLATED = "Isolated statement - consider connecting to other knowledge"


def keywords(text: str) -> list[str]:
    """Lower-cased words longer than three characters, minus a few fillers."""
    return [
        word for word in re.split(r"\W+", text.lower())
        if len(word) > 3 and word not in _STOPWORDS
    ]


def _jaccard(left: set[str], right: set[str]) -> float:
    union = left | right
    return len(left & right) / len(union) if union else 0.0


def has_negation(text: str) -> bool:
    return any(word in _NEGATIONS for word in _WORD_RE.findall(text.lower()))


def potential_conflict(text1: str, text2: str) -> bool:
    """Exactly one side is negated and the two share more than two keywords.

    A cheap hint for the assistant; ContradictionDetector is the real check.
    """
    if has_negation(text1) == has_negation(text2):
        return False
    return len(set(keywords(text1)) & set(keywords(text2))) > 2


def _chain_statements(chain: DerivationChain | None) -> Iterator[Statement]:
    """Every statement in a derivation chain, depth first, root included."""
    stack = [chain] if chain is not None else []
    while stack:
        node = stack.pop()
        yield node.statement
        stack.extend(reversed(node.parents))


class KnowledgeAssistant:
    """Suggestions for the person curating a knowledge graph."""

    duplicate_threshold = 0.7
    identical_threshold = 0.9
    content_weight = 0.7
    tag_weight = 0.3

    recent_limit = 5
    tag_related_limit = 3
    conflict_limit = 3
    related_limit = 10

    weak_confidence = 0.5
    strong_confidence = 0.8
    stale_axiom_age = timedelta(days=30)
    stale_axiom_limit = 3
    isolated_limit = 2

    def __init__(self, graph: KnowledgeGraph, query_service: QueryService | None = None) -> None:
        self._graph = graph
        self._queries = query_service or QueryService(graph)

    # ------------------------------------------------------------------
    # Duplicates
    # ------------------------------------------------------------------

    def similarity(
        self,
        text1: str,
        text2: str,
        tags1: Iterable[str] = (),
        tags2: Iterable[str] = (),
    ) -> float:
        """Keyword overlap, blended with tag overlap when both sides are tagged."""
        content = _jaccard(set(keywords(text1)), set(keywords(text2)))
        left, right = set(tags1), set(tags2)
        if not left or not right:
            return content
        return content * self.content_weight + _jaccard(left, right) * self.tag_weight

    def check_duplicates(self, content: str, tags: list[str] | None = None) -> DuplicateCheck:
        tags = tags or []
        similar = []
        for statement in self._graph.all():
            score = self.similarity(content, statement.content, tags, statement.tags)
            if score > self.duplicate_threshold:
                similar.append(
                    SimilarStatement(
                        statement=statement,
                        similarity=score,
                        reason=self._explain(content, statement, score),
                    )
                )
        similar.sort(key=lambda s: s.similarity, reverse=True)

        result = DuplicateCheck(similar=similar)
        if similar:
            result.suggestions = self._duplicate_suggestions(content, similar)
        logger.debug("duplicate check: %d similar statements", len(similar))
        return result

    def _explain(self, content: str, existing: Statement, score: float) -> str:
        if score > self.identical_threshold:
            return f"Nearly identical content ({score:.0%} similar)"
        existing_text = existing.content.lower()
        shared = [word for word in keywords(content) if word in existing_text]
        if len(shared) > 3:
            return f"Shares key concepts: {', '.join(shared[:3])}"
        return "Similar theme and structure"

    def _duplicate_suggestions(self, content: str, similar: list[SimilarStatement]) -> list[str]:
        if any(s.similarity > self.identical_threshold for s in similar):
            suggestions = [MSG_DUPLICATE]
        else:
            suggestions = [MSG_LINK, MSG_DIFFERENTIATE]
        if any(potential_conflict(content, s.statement.content) for s in similar):
            suggestions.append(MSG_CONFLICT)
        return suggestions

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def knowledge_context(self, query: str, tags: list[str] | None = None) -> KnowledgeContext:
        """Recent statements, tag matches, derivation neighbours of text matches, and gaps."""
        tags = tags or []
        statements = self._graph.all()

        recent = sorted(statements, key=lambda s: s.created_at, reverse=True)
        related_by_tags: list[Statement] = []
        if tags:
            related_by_tags = self._queries.advanced_query(StatementQuery(tags=tags)).statements

        neighbour_ids: dict[str, None] = {}
        for match in self._queries.search(query).statements:
            for child_id in self._graph.dependent_ids(match.id):
                neighbour_ids.setdefault(child_id)
            for parent_id in match.derived_from:
                neighbour_ids.setdefault(parent_id)
        related_by_derivation = [
            s for s in (self._graph.get(sid) for sid in neighbour_ids) if s is not None
        ]

        return KnowledgeContext(
            recent=recent[: self.recent_limit],
            related_by_tags=related_by_tags,
            related_by_derivation=related_by_derivation,
            gaps=self._gaps(tags, statements),
        )

    def _gaps(self, tags: list[str], statements: list[Statement]) -> list[str]:
        gaps = []
        if "conclusion" in tags or "theory" in tags:
            wanted = set(tags)
            if not any(s.is_axiom and wanted.intersection(s.tags) for s in statements):
                gaps.append(MSG_NO_AXIOMS)

        unsupported = [
            s for s in statements
            if s.kind is StatementKind.CONCLUSION and not s.derived_from
        ]
        if unsupported:
            gaps.append(
                f"{len(unsupported)} conclusions without derivations - consider linking to sources"
            )
        return gaps

    def analyze_relationships(self, statement_id: str) -> RelationshipAnalysis | None:
        statement = self._graph.get(statement_id)
        if statement is None:
            return None
        return RelationshipAnalysis(
            statement=statement,
            derivation_depth=self._queries.engine.depth(statement_id) or 0,
            parent_count=len(statement.derived_from),
            dependent_count=len(self._graph.dependent_ids(statement_id)),
            context=self.knowledge_context(statement.content, list(statement.tags)),
        )

    # ------------------------------------------------------------------
    # Related and review
    # ------------------------------------------------------------------

    def suggest_related(self, statement_id: str) -> list[Statement]:
        """Tag neighbours first, then the derivation chain, then possible conflicts."""
        statement = self._graph.get(statement_id)
        if statement is None:
            return []

        picked: dict[str, Statement] = {}

        def pick(candidates: Iterable[Statement]) -> None:
            for candidate in candidates:
                if candidate.id != statement_id:
                    picked.setdefault(candidate.id, candidate)

        if statement.tags:
            tagged = [s for s in self._queries.by_tags(statement.tags) if s.id != statement_id]
            pick(tagged[: self.tag_related_limit])
        pick(_chain_statements(self._queries.engine.build_chain(statement_id)))
        pick(self.potential_conflicts(statement))

        return list(picked.values())[: self.related_limit]

    def potential_conflicts(self, statement: Statement) -> list[Statement]:
        conflicts = [
            other for other in self._graph.all()
            if other.id != statement.id and potential_conflict(statement.content, other.content)
        ]
        return conflicts[: self.conflict_limit]

    def review_suggestions(self, now: datetime | None = None) -> list[ReviewSuggestion]:
        """Statements worth a second look, each with a reason and a priority.

        A statement can appear more than once when several reasons apply.
        """
        now = now or datetime.now(timezone.utc)
        statements = self._graph.all()
        flagged: list[tuple[Statement, str]] = []

        for statement in statements:
            if statement.confidence is None or statement.confidence >= self.weak_confidence:
                continue
            if any(
                child.confidence is not None and child.confidence > self.strong_confidence
                for child in self._graph.dependents(statement.id)
            ):
                flagged.append((statement, REVIEW_WEAK_SUPPORT))

        stale = [
            s for s in statements
            if s.is_axiom and now - s.created_at > self.stale_axiom_age
        ]
        flagged.extend((s, REVIEW_STALE_AXIOM) for s in stale[: self.stale_axiom_limit])

        isolated = [
            s for s in statements
            if not s.is_axiom and not s.derived_from and not self._graph.dependent_ids(s.id)
        ]
        flagged.extend((s, REVIEW_ISOLATED) for s in isolated[: self.isolated_limit])

        return [
            ReviewSuggestion(statement=s, reason=reason, priority=self._priority(s))
            for s, reason in flagged
        ]

    def _priority(self, statement: Statement) -> str:
        if statement.confidence is not None and statement.confidence < self.weak_confidence:
            return "high"
        return "medium"
