"""Tests for knownet.contradictions.detector."""
from __future__ import annotations

from unittest.mock import patch

import pytest

from knownet.contradictions.detector import (
    ContradictionDetector,
    jaccard_similarity,
    normalize_content,
)
from knownet.graph.network import KnowledgeGraph
from knownet.models.domain import Statement
from knownet.models.enums import Severity


def _axiom(content: str, sid: str | None = None) -> Statement:
    kwargs = {"id": sid} if sid else {}
    return Statement(kind="axiom", content=content, **kwargs)


def _pair(text1: str, text2: str):
    detector = ContradictionDetector(KnowledgeGraph())
    return detector.check_pair(_axiom(text1), _axiom(text2))


class TestTextHelpers:
    def test_normalize(self):
        assert normalize_content("  The SKY, is   blue!! ") == "the sky is blue"

    def test_jaccard_ignores_short_words(self):
        # "is" and "a" are dropped; {the, sky, blue} vs {the, sky, red}
        assert jaccard_similarity("The sky is blue", "The sky is a red") == pytest.approx(2 / 4)

    def test_jaccard_empty_side(self):
        assert jaccard_similarity("a b", "the sky") == 0.0


class TestDirectOpposites:
    def test_always_never(self):
        pair = _pair("The sky is always blue", "The sky is never blue")
        assert pair is not None
        assert pair.severity is Severity.HIGH
        assert "always" in pair.reason and "never" in pair.reason

    def test_true_false_reversed_assignment(self):
        pair = _pair("This claim is false", "This claim is true")
        assert pair is not None
        assert pair.reason == 'Opposing terms: "true" vs "false"'

    def test_exists_vs_does_not_exist(self):
        pair = _pair("Free will exists", "Free will does not exist")
        assert pair is not None
        assert pair.severity is Severity.HIGH

    def test_dissimilar_remainder_not_reported(self):
        assert _pair("Cats always land on their feet", "Dogs never climb tall trees") is None

    def test_terms_match_whole_words_only(self):
        # "allergy" contains "all" but is not the word "all"
        assert _pair("Pollen allergy causes sneezing", "None causes sneezing pollen allergy") is None


class TestNegation:
    def test_does_not_form(self):
        pair = _pair("Exercise improves health", "Exercise does not improve health")
        assert pair is not None
        assert pair.severity is Severity.HIGH
        assert pair.reason == "Direct negation pattern detected"

    def test_is_not_form(self):
        pair = _pair("Knowledge is power", "Knowledge is not power")
        assert pair is not None
        assert pair.reason == "Direct negation pattern detected"

    def test_cannot_form(self):
        pair = _pair("Machines cannot think creatively", "Machines can think creatively")
        assert pair is not None
        assert pair.severity is Severity.HIGH

    def test_bare_not_prefix(self):
        pair = _pair("Not every habit is permanent", "Every habit is permanent")
        assert pair is not None

    def test_different_subjects_not_reported(self):
        assert _pair("Knowledge is power", "Money is not happiness") is None


class TestSemanticAntonyms:
    def test_increase_decrease(self):
        pair = _pair("Exercise increases energy levels", "Exercise decreases energy levels")
        assert pair is not None
        assert pair.severity is Severity.MEDIUM
        assert pair.reason == 'Contradictory terms: "increase" vs "decrease"'

    def test_both_sides_in_one_statement_not_reported(self):
        assert _pair(
            "Prices rise and fall with demand",
            "Prices fall with demand",
        ) is None

    def test_threshold_is_strict(self):
        # Remainders {taxes, jobs} vs {taxes, growth}: similarity 1/3
        assert _pair("Taxes help jobs", "Taxes hinder growth") is None


class TestNoContradiction:
    def test_unrelated(self):
        assert _pair("Water boils at 100C", "Paris is the capital of France") is None

    def test_identical_content(self):
        assert _pair("The sky is blue", "the sky is BLUE!") is None


class TestBatchOperations:
    @pytest.fixture
    def detector(self) -> ContradictionDetector:
        graph = KnowledgeGraph()
        graph.add(_axiom("The sky is always blue", "s1"))
        graph.add(_axiom("The sky is never blue", "s2"))
        graph.add(_axiom("Water boils at 100C", "s3"))
        graph.add(_axiom("Paris is the capital of France", "s4"))
        return ContradictionDetector(graph)

    def test_detect_all_reports_each_pair_once(self, detector):
        pairs = detector.detect_all()
        assert len(pairs) == 1
        assert {pairs[0].statement1.id, pairs[0].statement2.id} == {"s1", "s2"}

    def test_check_against_existing(self, detector):
        candidate = _axiom("Water never boils at 100C", "new")
        # No opposite-term partner exists for "never" with a matching remainder.
        assert detector.check_against_existing(candidate) == []

        candidate = _axiom("Paris is not the capital of France", "new")
        found = detector.check_against_existing(candidate)
        assert [p.statement2.id for p in found] == ["s4"]
        assert found[0].statement1 is candidate

    def test_check_against_existing_skips_same_id(self, detector):
        candidate = _axiom("The sky is never blue", "s1")
        found = detector.check_against_existing(candidate)
        assert [p.statement2.id for p in found] == []

    def test_report(self, detector):
        report = detector.report()
        assert report.startswith("Found 1 potential contradictions:")
        assert "(Severity: high)" in report

    def test_report_empty(self):
        assert ContradictionDetector(KnowledgeGraph()).report() == (
            "No contradictions detected in the knowledge network."
        )

    def test_threshold_override(self):
        graph = KnowledgeGraph()
        detector = ContradictionDetector(graph, semantic_threshold=0.2)
        pair = detector.check_pair(_axiom("Taxes help jobs"), _axiom("Taxes hinder growth"))
        assert pair is not None
        assert pair.severity is Severity.MEDIUM


class TestScanCost:
    """detect_all compares every pair once; checking a candidate is one pass."""

    SIZE = 200

    @pytest.fixture
    def large_detector(self) -> ContradictionDetector:
        graph = KnowledgeGraph()
        for i in range(self.SIZE - 2):
            graph.add(_axiom(f"Measurement {i} recorded sample value {i * 7}", f"m{i}"))
        graph.add(_axiom("The sky is always blue", "sky1"))
        graph.add(_axiom("The sky is never blue", "sky2"))
        return ContradictionDetector(graph)

    def test_detect_all_checks_each_pair_once(self, large_detector):
        with patch.object(large_detector, "_check", wraps=large_detector._check) as check:
            pairs = large_detector.detect_all()

        assert check.call_count == self.SIZE * (self.SIZE - 1) // 2
        assert [(p.statement1.id, p.statement2.id) for p in pairs] == [("sky1", "sky2")]

    def test_check_against_existing_is_linear(self, large_detector):
        candidate = _axiom("The sky is not blue", "fresh")
        with patch.object(large_detector, "_check", wraps=large_detector._check) as check:
            found = large_detector.check_against_existing(candidate)

        assert check.call_count == self.SIZE
        assert all(call.args[0] is candidate for call in check.call_args_list)
        assert {p.statement2.id for p in found} <= {"sky1", "sky2"}

    def test_check_against_existing_skips_own_id(self, large_detector):
        candidate = _axiom("Measurement 5 recorded sample value 35", "m5")
        with patch.object(large_detector, "_check", wraps=large_detector._check) as check:
            assert large_detector.check_against_existing(candidate) == []

        assert check.call_count == self.SIZE - 1
