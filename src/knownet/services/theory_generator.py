"""LLM-backed generation of candidate theories from existing statements."""
from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from knownet.config.settings import LLMConfig
from knownet.graph.derivation import DerivationEngine
from knownet.graph.network import KnowledgeGraph
from knownet.models.domain import Statement, StatementQuery, TheoryDraft
from knownet.services.llm_service import LLMService, LLMServiceError

logger = logging.getLogger(__name__)

THEORY_PROMPT = """\
You are helping with a personal knowledge network of axioms, theories and conclusions.
Generate one new theory that follows logically from the statements you are given.
Rules:
- The theory must be original and not repeat any of the given statements
- Match the tone, vocabulary and brevity of the given statements
- Do not introduce beliefs or facts that the statements do not support
- Do not refer to the statements themselves; the theory must stand on its own
Statement types:
- Axiom: a fundamental belief that is not derived from anything
- Theory: a hypothesis derived from other statements
- Conclusion: a final judgement drawn from theories
Respond with a JSON object with these keys:
- content: the new theory as a single sentence
- suggestedTags: a short list of lowercase tags
- suggestedConfidence: a number between 0.0 and 1.0
- reasoning: one sentence explaining the derivation"""

DEFAULT_DRAFT_CONTENT = "Generated theory"
DEFAULT_DRAFT_CONFIDENCE = 0.7
DEFAULT_DRAFT_REASONING = "AI-generated derivation"
MAX_SUGGESTIONS = 5


class TheoryGenerationError(RuntimeError):
    """Raised when a theory cannot be generated (no sources, LLM failure, bad response)."""


class TheoryBackend(Protocol):
    def generate(self, sources: list[Statement]) -> TheoryDraft: ...


class TheoryGenerator:
    """Asks an LLM for a theory derived from a set of source statements."""

    def __init__(
        self,
        llm_config: LLMConfig,
        provider: str | None = None,
        model: str | None = None,
        llm: LLMService | None = None,
    ) -> None:
        self._llm = llm or LLMService(llm_config)
        self._provider = provider or llm_config.provider
        self._model = model

    def generate(self, sources: list[Statement]) -> TheoryDraft:
        if not sources:
            raise TheoryGenerationError("At least one source statement is required")

        context = "\n".join(f'[{s.kind.value.upper()}] "{s.content}"' for s in sources)
        messages = [
            {"role": "system", "content": THEORY_PROMPT},
            {"role": "user", "content": context},
        ]
        try:
            raw = self._llm.completion(
                messages=messages,
                provider=self._provider,
                model_name=self._model,
                response_format={"type": "json_object"},
            )
        except (LLMServiceError, ValueError) as exc:
            raise TheoryGenerationError(
                f"LLM provider '{self._provider}' unavailable: {exc}"
            ) from exc

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise TheoryGenerationError(
                f"LLM returned non-JSON response: {exc}\nRaw output: {raw!r}"
            ) from exc

        if not isinstance(payload, dict):
            raise TheoryGenerationError(
                f"LLM response must be a JSON object, got {type(payload).__name__!r}."
            )

        draft = _build_draft(payload)
        logger.debug("Generated theory from %d sources: %s", len(sources), draft.content)
        return draft

    def generate_many(self, sources: list[Statement], count: int = 3) -> list[TheoryDraft]:
        """Independent drafts from the same sources, one LLM call each."""
        return [self.generate(sources) for _ in range(count)]


def _build_draft(payload: dict[str, Any]) -> TheoryDraft:
    content = payload.get("content")
    if not isinstance(content, str) or not content.strip():
        content = DEFAULT_DRAFT_CONTENT

    raw_tags = payload.get("suggestedTags") or []
    tags = [str(t) for t in raw_tags] if isinstance(raw_tags, list) else []

    raw_confidence = payload.get("suggestedConfidence")
    try:
        confidence = (
            float(raw_confidence) if raw_confidence is not None else DEFAULT_DRAFT_CONFIDENCE
        )
    except (TypeError, ValueError):
        confidence = DEFAULT_DRAFT_CONFIDENCE
    confidence = max(0.0, min(1.0, confidence))

    reasoning = payload.get("reasoning")
    if not isinstance(reasoning, str) or not reasoning.strip():
        reasoning = DEFAULT_DRAFT_REASONING

    return TheoryDraft(
        content=content.strip(),
        suggested_tags=tags,
        suggested_confidence=confidence,
        reasoning=reasoning.strip(),
    )


def suggest_derivations(
    graph: KnowledgeGraph,
    statement_id: str,
    limit: int = MAX_SUGGESTIONS,
) -> list[Statement]:
    """Statements sharing a tag with *statement_id* that it could also derive from.

    Axioms derive from nothing, and existing ancestors are already part of the
    chain, so neither is suggested. Descendants are skipped too: deriving from
    one would close a cycle.
    """
    statement = graph.get(statement_id)
    if statement is None or statement.is_axiom or not statement.tags:
        return []

    engine = DerivationEngine(graph)
    excluded = engine.ancestors(statement_id) | engine.descendants(statement_id)
    suggestions = []
    for candidate in graph.query(StatementQuery(tags=list(statement.tags))):
        if candidate.id == statement_id or candidate.id in excluded:
            continue
        suggestions.append(candidate)
        if len(suggestions) >= limit:
            break
    return suggestions
