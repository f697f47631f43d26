"""API tests for /api/ai with a mocked theory backend."""
from __future__ import annotations

from knownet.models.domain import Statement, TheoryDraft
from knownet.services.theory_generator import TheoryGenerationError


class TestGenerateTheory:
    def test_drafts_returned_not_added(self, client, api_state):
        api_state.backend.generate.return_value = TheoryDraft(
            content="Energy budgets shape behaviour",
            suggested_tags=["biology"],
            suggested_confidence=0.6,
            reasoning="Follows from both axioms",
        )
        resp = client.post("/api/ai/generate-theory", json={"source_ids": ["a1", "a2"], "count": 2})

        assert resp.status_code == 200
        drafts = resp.json()
        assert len(drafts) == 2
        assert drafts[0]["content"] == "Energy budgets shape behaviour"
        assert drafts[0]["suggested_confidence"] == 0.6
        assert api_state.backend.generate.call_count == 2
        sources = api_state.backend.generate.call_args.args[0]
        assert [s.id for s in sources] == ["a1", "a2"]
        assert len(api_state.graph) == 5

    def test_unknown_source(self, client, api_state):
        resp = client.post("/api/ai/generate-theory", json={"source_ids": ["ghost"]})
        assert resp.status_code == 404
        api_state.backend.generate.assert_not_called()

    def test_empty_sources(self, client):
        assert client.post("/api/ai/generate-theory", json={"source_ids": []}).status_code == 422

    def test_backend_failure(self, client, api_state):
        api_state.backend.generate.side_effect = TheoryGenerationError("LLM provider 'ollama' unavailable")
        resp = client.post("/api/ai/generate-theory", json={"source_ids": ["a1"]})
        assert resp.status_code == 502
        assert "unavailable" in resp.json()["detail"]


class TestSuggestDerivations:
    def test_suggestions(self, client, api_state):
        api_state.graph.add(Statement(kind="axiom", content="Cells store energy", id="a3", tags=["energy"]))
        data = client.get("/api/ai/suggest-derivations/t2").json()
        assert [s["id"] for s in data["results"]] == ["a3"]

    def test_missing(self, client):
        assert client.get("/api/ai/suggest-derivations/zz").status_code == 404


class TestTheoryBatch:
    def test_batch_defaults_to_three(self, client, api_state):
        api_state.backend.generate.return_value = TheoryDraft(
            content="Energy flows through food",
            suggested_tags=[],
            suggested_confidence=0.7,
            reasoning="r",
        )
        resp = client.post("/api/ai/generate-theories-batch", json={"source_ids": ["a1", "t1"]})
        assert resp.status_code == 200
        data = resp.json()
        assert data["count"] == 3
        assert len(data["theories"]) == 3
        assert data["source_ids"] == ["a1", "t1"]
        assert api_state.backend.generate.call_count == 3
        assert len(api_state.graph) == 5

    def test_unknown_source(self, client, api_state):
        resp = client.post("/api/ai/generate-theories-batch", json={"source_ids": ["a1", "ghost"]})
        assert resp.status_code == 404
        api_state.backend.generate.assert_not_called()


class TestCheckDuplicates:
    def test_duplicate_found(self, client):
        resp = client.post("/api/ai/check-duplicates", json={"content": "Organisms convert food into energy"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["has_duplicates"] is True
        assert data["duplicates"][0]["statement"]["id"] == "t1"
        assert data["duplicates"][0]["similarity"] == 1.0
        assert data["suggestions"] == [
            "This appears to be a duplicate. Consider updating the existing statement instead."
        ]

    def test_no_duplicates(self, client):
        data = client.post("/api/ai/check-duplicates", json={"content": "Quantum fields fluctuate"}).json()
        assert data == {"has_duplicates": False, "duplicates": [], "suggestions": []}

    def test_content_required(self, client):
        assert client.post("/api/ai/check-duplicates", json={"content": ""}).status_code == 422


class TestKnowledgeContext:
    def test_context(self, client):
        data = client.post("/api/ai/knowledge-context", json={"query": "organisms"}).json()
        assert [s["id"] for s in data["related_by_derivation"]] == ["t2", "c1", "a1", "a2", "t1"]
        assert len(data["recent"]) == 5
        assert data["related_by_tags"] == []
        assert data["gaps"] == []

    def test_query_required(self, client):
        assert client.post("/api/ai/knowledge-context", json={}).status_code == 422


class TestReviewAndRelated:
    def test_review_suggestions(self, client, api_state):
        assert client.get("/api/ai/review-suggestions").json() == {"total": 0, "suggestions": []}

        api_state.graph.add(Statement(kind="conclusion", content="Naps help", id="c9", confidence=0.3))
        data = client.get("/api/ai/review-suggestions").json()
        assert data["total"] == 1
        assert data["suggestions"][0]["statement"]["id"] == "c9"
        assert data["suggestions"][0]["priority"] == "high"
        assert data["suggestions"][0]["reason"].startswith("Isolated statement")

    def test_suggest_related(self, client):
        data = client.get("/api/ai/suggest-related/t1").json()
        assert [s["id"] for s in data["results"]] == ["a2", "t2", "a1"]

    def test_suggest_related_missing(self, client):
        assert client.get("/api/ai/suggest-related/zz").status_code == 404


class TestAnalyzeRelationships:
    def test_analysis(self, client):
        resp = client.post("/api/ai/analyze-relationships", json={"statement_id": "t2"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["statement"]["id"] == "t2"
        assert data["derivation_depth"] == 2
        assert data["parent_count"] == 1
        assert data["dependent_count"] == 1
        assert data["related_count"] == 2
        assert data["potential_gaps"] == []
        assert [s["id"] for s in data["context"]["related_by_derivation"]] == ["c1", "t1"]

    def test_missing(self, client):
        resp = client.post("/api/ai/analyze-relationships", json={"statement_id": "zz"})
        assert resp.status_code == 404
