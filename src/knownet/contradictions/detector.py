"""Lexical contradiction detection over statement content.

Three heuristics run in a fixed order and the first hit wins:

1. direct opposite terms ("always" / "never") with near-identical remainders,
2. negation templates ("X is Y" / "X is not Y"),
3. directional antonyms ("increase" / "decrease") with similar remainders.

Similarity is the Jaccard index over words longer than two characters.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from knownet.config.constants import (
    DEFAULT_NEGATION_THRESHOLD,
    DEFAULT_OPPOSITE_THRESHOLD,
    DEFAULT_SEMANTIC_THRESHOLD,
)
from knownet.graph.network import KnowledgeGraph
from knownet.models.domain import ContradictionPair, Statement
from knownet.models.enums import Severity

_logger = logging.getLogger(__name__)

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")

NEGATION_REASON = "Direct negation pattern detected"


def normalize_content(text: str) -> str:
    """Lowercase, drop punctuation, collapse whitespace."""
    text = _NON_WORD_RE.sub(" ", text.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def word_set(text: str) -> set[str]:
    return {w for w in normalize_content(text).split(" ") if len(w) > 2}


def jaccard_similarity(text1: str, text2: str) -> float:
    """|A & B| / |A | B| over words longer than two characters; 0 if either is empty."""
    words1 = word_set(text1)
    words2 = word_set(text2)
    if not words1 or not words2:
        return 0.0
    return len(words1 & words2) / len(words1 | words2)


class _TermPair:
    """Two opposing terms, matched as whole words on normalized text."""

    def __init__(self, first: str, second: str, inflected: bool = False) -> None:
        self.first = first
        self.second = second
        self._first_re = self._compile(first, inflected)
        self._second_re = self._compile(second, inflected)
        # Strip the longer term first when one term contains the other
        # ("exist" inside "not exist").
        if self._first_re.search(second):
            self._order = (self._second_re, self._first_re)
        else:
            self._order = (self._first_re, self._second_re)

    @staticmethod
    def _compile(term: str, inflected: bool) -> re.Pattern[str]:
        body = r"\s+".join(re.escape(word) for word in term.split())
        suffix = r"\w*" if inflected else ""
        return re.compile(rf"\b{body}{suffix}\b")

    def sides(self, text: str) -> tuple[bool, bool]:
        """Which of (first, second) *text* contains, nested occurrences not double-counted."""
        outer, inner = self._order
        has_outer = outer.search(text) is not None
        has_inner = inner.search(outer.sub(" ", text)) is not None
        if outer is self._first_re:
            return has_outer, has_inner
        return has_inner, has_outer

    def strip(self, text: str) -> str:
        outer, inner = self._order
        return normalize_content(inner.sub(" ", outer.sub(" ", text)))


_OPPOSITE_TERMS: tuple[_TermPair, ...] = tuple(
    _TermPair(a, b)
    for a, b in (
        ("true", "false"),
        ("always", "never"),
        ("all", "none"),
        ("possible", "impossible"),
        ("necessary", "unnecessary"),
        ("exist", "not exist"),
        ("exists", "does not exist"),
    )
)

_ANTONYM_TERMS: tuple[_TermPair, ...] = tuple(
    _TermPair(a, b, inflected=True)
    for a, b in (
        ("increase", "decrease"),
        ("rise", "fall"),
        ("grow", "shrink"),
        ("expand", "contract"),
        ("strengthen", "weaken"),
        ("improve", "worsen"),
        ("accelerate", "decelerate"),
        ("positive", "negative"),
        ("benefit", "harm"),
        ("help", "hinder"),
        ("support", "oppose"),
        ("agree", "disagree"),
        ("accept", "reject"),
        ("allow", "forbid"),
        ("permit", "prohibit"),
    )
)


def _verb_forms(verb: str) -> list[str]:
    forms = [verb, f"{verb}s", f"{verb}es", f"{verb}d", f"{verb}ed"]
    if verb.endswith("y"):
        forms += [f"{verb[:-1]}ies", f"{verb[:-1]}ied"]
    return forms


@dataclass(frozen=True)
class _NegationTemplate:
    positive: re.Pattern[str]
    negative: re.Pattern[str]
    auxiliary: bool = False

    def positive_cores(self, text: str) -> list[str]:
        match = self.positive.match(text)
        return [" ".join(match.groups())] if match else []

    def negative_cores(self, text: str) -> list[str]:
        match = self.negative.match(text)
        if not match:
            return []
        if not self.auxiliary:
            return [" ".join(match.groups())]
        # "x does not improve y" -> "x improves y", "x improve y", ...
        subject, verb, rest = match.groups()
        return [f"{subject} {form}{rest}" for form in _verb_forms(verb)]


_NEGATION_TEMPLATES: tuple[_NegationTemplate, ...] = (
    _NegationTemplate(re.compile(r"^(.+)$"), re.compile(r"^not (.+)$")),
    _NegationTemplate(re.compile(r"^(.+)$"), re.compile(r"^no (.+)$")),
    _NegationTemplate(re.compile(r"^(.+) is (.+)$"), re.compile(r"^(.+) is not (.+)$")),
    _NegationTemplate(re.compile(r"^(.+) are (.+)$"), re.compile(r"^(.+) are not (.+)$")),
    _NegationTemplate(re.compile(r"^(.+) can (.+)$"), re.compile(r"^(.+) cannot (.+)$")),
    _NegationTemplate(re.compile(r"^(.+) will (.+)$"), re.compile(r"^(.+) will not (.+)$")),
    _NegationTemplate(
        re.compile(r"^(.+)$"),
        re.compile(r"^(.+?) (?:does|do|did) not (\w+)(.*)$"),
        auxiliary=True,
    ),
)


class ContradictionDetector:
    """Pairwise heuristic contradiction analysis over a knowledge graph.

    ``detect_all`` scans every unordered pair (O(N^2)); ``check_against_existing``
    compares a single candidate with every stored statement (O(N)).
    """

    OPPOSITE_THRESHOLD: float = DEFAULT_OPPOSITE_THRESHOLD
    NEGATION_THRESHOLD: float = DEFAULT_NEGATION_THRESHOLD
    SEMANTIC_THRESHOLD: float = DEFAULT_SEMANTIC_THRESHOLD

    def __init__(
        self,
        graph: KnowledgeGraph,
        opposite_threshold: float | None = None,
        negation_threshold: float | None = None,
        semantic_threshold: float | None = None,
    ) -> None:
        self._graph = graph
        self._opposite_threshold = (
            self.OPPOSITE_THRESHOLD if opposite_threshold is None else opposite_threshold
        )
        self._negation_threshold = (
            self.NEGATION_THRESHOLD if negation_threshold is None else negation_threshold
        )
        self._semantic_threshold = (
            self.SEMANTIC_THRESHOLD if semantic_threshold is None else semantic_threshold
        )

    # ------------------------------------------------------------------
    # Batch operations
    # ------------------------------------------------------------------

    def detect_all(self) -> list[ContradictionPair]:
        statements = self._graph.all()
        texts = [normalize_content(s.content) for s in statements]
        found: list[ContradictionPair] = []
        for i in range(len(statements)):
            for j in range(i + 1, len(statements)):
                pair = self._check(statements[i], texts[i], statements[j], texts[j])
                if pair is not None:
                    found.append(pair)
        _logger.debug("contradiction scan: %d statements, %d hits", len(statements), len(found))
        return found

    def check_against_existing(self, candidate: Statement) -> list[ContradictionPair]:
        text = normalize_content(candidate.content)
        found: list[ContradictionPair] = []
        for existing in self._graph.all():
            if existing.id == candidate.id:
                continue
            pair = self._check(candidate, text, existing, normalize_content(existing.content))
            if pair is not None:
                found.append(pair)
        return found

    def check_pair(self, stmt1: Statement, stmt2: Statement) -> ContradictionPair | None:
        return self._check(
            stmt1,
            normalize_content(stmt1.content),
            stmt2,
            normalize_content(stmt2.content),
        )

    def report(self) -> str:
        contradictions = self.detect_all()
        if not contradictions:
            return "No contradictions detected in the knowledge network."

        lines = [f"Found {len(contradictions)} potential contradictions:", ""]
        for index, pair in enumerate(contradictions, start=1):
            lines.append(f"{index}. {pair.reason} (Severity: {pair.severity.value})")
            lines.append(
                f'   Statement 1 [{pair.statement1.kind.value}]: "{pair.statement1.content}"'
            )
            lines.append(
                f'   Statement 2 [{pair.statement2.kind.value}]: "{pair.statement2.content}"'
            )
            lines.append("")
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Heuristics
    # ------------------------------------------------------------------

    def _check(
        self,
        stmt1: Statement,
        text1: str,
        stmt2: Statement,
        text2: str,
    ) -> ContradictionPair | None:
        if text1 == text2:
            return None

        for check, severity in (
            (self._opposite_terms, Severity.HIGH),
            (self._negation, Severity.HIGH),
            (self._antonyms, Severity.MEDIUM),
        ):
            reason = check(text1, text2)
            if reason is not None:
                return ContradictionPair(
                    statement1=stmt1,
                    statement2=stmt2,
                    reason=reason,
                    severity=severity,
                )
        return None

    def _opposite_terms(self, text1: str, text2: str) -> str | None:
        for pair in _OPPOSITE_TERMS:
            first1, second1 = pair.sides(text1)
            first2, second2 = pair.sides(text2)
            if (first1 and second2) or (second1 and first2):
                rest1 = pair.strip(text1)
                rest2 = pair.strip(text2)
                if rest1 == rest2 or jaccard_similarity(rest1, rest2) >= self._opposite_threshold:
                    return f'Opposing terms: "{pair.first}" vs "{pair.second}"'
        return None

    def _negation(self, text1: str, text2: str) -> str | None:
        for template in _NEGATION_TEMPLATES:
            for positive_text, negative_text in ((text1, text2), (text2, text1)):
                positives = template.positive_cores(positive_text)
                if not positives:
                    continue
                for negative in template.negative_cores(negative_text):
                    if self._negation_similar(positives[0], negative):
                        return NEGATION_REASON
        return None

    def _negation_similar(self, core1: str, core2: str) -> bool:
        core1 = normalize_content(core1)
        core2 = normalize_content(core2)
        if core1 == core2:
            return True
        return jaccard_similarity(core1, core2) > self._negation_threshold

    def _antonyms(self, text1: str, text2: str) -> str | None:
        for pair in _ANTONYM_TERMS:
            sides1 = pair.sides(text1)
            sides2 = pair.sides(text2)
            if (sides1, sides2) in (((True, False), (False, True)), ((False, True), (True, False))):
                similarity = jaccard_similarity(pair.strip(text1), pair.strip(text2))
                if similarity > self._semantic_threshold:
                    return f'Contradictory terms: "{pair.first}" vs "{pair.second}"'
        return None
