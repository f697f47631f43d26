"""Tests for knownet.graph.network.KnowledgeGraph."""
from __future__ import annotations

import threading

import pytest

from knownet.errors import (
    CycleError,
    DanglingParentError,
    DuplicateIdError,
    HasDependentsError,
    NotFoundError,
    ValidationError,
)
from knownet.graph.network import KnowledgeGraph
from knownet.models.domain import Statement, StatementQuery, StatementUpdate
from knownet.models.enums import StatementKind


def _axiom(sid: str, content: str | None = None, **kwargs) -> Statement:
    return Statement(kind="axiom", content=content or f"Axiom {sid}", id=sid, **kwargs)


def _theory(sid: str, parents: list[str], content: str | None = None, **kwargs) -> Statement:
    return Statement(
        kind="theory", content=content or f"Theory {sid}", id=sid, derived_from=parents, **kwargs
    )


def _assert_consistent(graph: KnowledgeGraph) -> None:
    """Every parent resolves and the reverse index mirrors derived_from exactly."""
    for s in graph.all():
        for parent_id in s.derived_from:
            assert parent_id in graph
            assert s.id in graph.dependent_ids(parent_id)
        for child_id in graph.dependent_ids(s.id):
            assert s.id in graph.get(child_id).derived_from


class TestAdd:
    def test_add_and_get(self, graph):
        a = graph.add(_axiom("a"))
        assert graph.get("a") == a
        assert "a" in graph
        assert len(graph) == 1

    def test_get_unknown_returns_none(self, graph):
        assert graph.get("missing") is None

    def test_duplicate_id(self, graph):
        graph.add(_axiom("a"))
        with pytest.raises(DuplicateIdError):
            graph.add(_axiom("a"))

    def test_dangling_parent(self, graph):
        with pytest.raises(DanglingParentError) as exc_info:
            graph.add(_theory("t", ["ghost"]))
        assert exc_info.value.parent_id == "ghost"
        assert len(graph) == 0

    def test_self_derivation_is_a_cycle(self, graph):
        graph.add(_axiom("a"))
        graph.add(_theory("t", ["a"]))
        with pytest.raises(CycleError):
            graph.update("t", StatementUpdate(derived_from=["a", "t"]))

    def test_reverse_index_populated(self, food_graph):
        assert food_graph.dependent_ids("ax1") == ["th1"]
        assert [s.id for s in food_graph.dependents("ax2")] == ["th1"]
        assert food_graph.dependents("th1") == []
        assert food_graph.dependents("unknown") == []


class TestUpdate:
    def test_unknown_id(self, graph):
        with pytest.raises(NotFoundError):
            graph.update("nope", StatementUpdate(content="x"))

    def test_update_content(self, food_graph):
        updated = food_graph.update("th1", StatementUpdate(content="Eat first", confidence=0.4))
        assert food_graph.get("th1") == updated
        assert updated.content == "Eat first"
        assert updated.confidence == 0.4

    def test_rewire_parents_swaps_index(self, food_graph):
        food_graph.update("th1", StatementUpdate(derived_from=["ax2"]))
        assert food_graph.dependent_ids("ax1") == []
        assert food_graph.dependent_ids("ax2") == ["th1"]
        _assert_consistent(food_graph)

    def test_rewire_to_unknown_parent_leaves_graph_unchanged(self, food_graph):
        before = food_graph.to_dict()["statements"]
        with pytest.raises(DanglingParentError):
            food_graph.update("th1", StatementUpdate(derived_from=["ghost"]))
        assert food_graph.to_dict()["statements"] == before
        assert food_graph.dependent_ids("ax1") == ["th1"]

    def test_cycle_rejection_leaves_graph_unchanged(self, graph):
        # B derived from A; making A derive from B would close a cycle.
        graph.add(Statement(kind="conclusion", content="A", id="A"))
        graph.add(_theory("B", ["A"]))
        before = graph.to_dict()["statements"]

        with pytest.raises(CycleError):
            graph.update("A", StatementUpdate(derived_from=["B"]))

        assert graph.to_dict()["statements"] == before
        assert graph.get("A").derived_from == []
        assert graph.dependent_ids("B") == []
        assert graph.dependent_ids("A") == ["B"]

    def test_invalid_update_leaves_statement_untouched(self, food_graph):
        original = food_graph.get("th1")
        with pytest.raises(ValidationError):
            food_graph.update("th1", StatementUpdate(content="New", derived_from=[]))
        assert food_graph.get("th1") == original
        assert original.content == "Food must be prioritized under time limits"
        _assert_consistent(food_graph)


class TestDelete:
    def test_unknown_id(self, graph):
        with pytest.raises(NotFoundError):
            graph.delete("nope")

    def test_delete_guard_and_order(self, food_graph):
        with pytest.raises(HasDependentsError) as exc_info:
            food_graph.delete("ax1")
        assert exc_info.value.dependent_ids == ["th1"]
        assert "ax1" in food_graph

        food_graph.delete("th1")
        assert food_graph.dependent_ids("ax1") == []
        assert food_graph.dependent_ids("ax2") == []
        food_graph.delete("ax1")
        assert "ax1" not in food_graph
        assert food_graph.ids() == ["ax2"]

    def test_delete_returns_statement(self, graph):
        a = graph.add(_axiom("a"))
        assert graph.delete("a") == a


class TestOwnership:
    def test_added_object_is_detached(self, graph):
        graph.add(_axiom("a"))
        graph.add(_axiom("b"))
        t = _theory("t", ["a"])
        graph.add(t)

        t.update(StatementUpdate(derived_from=["b"]))
        t.tags.append("edited")

        assert graph.get("t").derived_from == ["a"]
        assert graph.get("t").tags == []
        assert graph.dependent_ids("b") == []
        graph.delete("b")
        _assert_consistent(graph)

    def test_returned_objects_are_copies(self, food_graph):
        fetched = food_graph.get("th1")
        fetched.update(StatementUpdate(derived_from=["ax2"], content="Edited"))
        listed = food_graph.all()[2]
        listed.derived_from.append("ghost")
        food_graph.dependents("ax1")[0].tags.append("x")

        stored = food_graph.get("th1")
        assert stored.content == "Food must be prioritized under time limits"
        assert stored.derived_from == ["ax1", "ax2"]
        assert stored.tags == []
        with pytest.raises(HasDependentsError):
            food_graph.delete("ax1")
        _assert_consistent(food_graph)

    def test_update_result_is_detached(self, food_graph):
        updated = food_graph.update("th1", StatementUpdate(confidence=0.3))
        updated.derived_from.clear()
        assert food_graph.get("th1").derived_from == ["ax1", "ax2"]

    def test_restore_puts_back_previous_version(self, food_graph):
        previous = food_graph.get("th1")
        food_graph.update("th1", StatementUpdate(content="Changed", derived_from=["ax2"]))

        food_graph.restore(previous)

        assert food_graph.get("th1") == previous
        assert food_graph.dependent_ids("ax1") == ["th1"]
        _assert_consistent(food_graph)

    def test_restore_re_adds_deleted(self, food_graph):
        removed = food_graph.delete("th1")
        food_graph.restore(removed)
        assert food_graph.get("th1") == removed
        assert food_graph.dependent_ids("ax2") == ["th1"]


class TestInvariantsUnderMutation:
    def test_sequence_preserves_invariants(self, graph):
        graph.add(_axiom("a"))
        graph.add(_axiom("b"))
        graph.add(_theory("t1", ["a"]))
        graph.add(_theory("t2", ["t1", "b"]))
        _assert_consistent(graph)

        for parents in (["b"], ["t2"], ["a", "b"]):
            try:
                graph.update("t1", StatementUpdate(derived_from=parents))
            except CycleError:
                pass
            _assert_consistent(graph)

        with pytest.raises(HasDependentsError):
            graph.delete("t1")
        graph.delete("t2")
        graph.delete("t1")
        _assert_consistent(graph)
        assert sorted(graph.ids()) == ["a", "b"]


class TestQueries:
    def test_by_kind(self, mixed_graph):
        assert [s.id for s in mixed_graph.by_kind("axiom")] == ["a1", "a2"]
        assert [s.id for s in mixed_graph.by_kind(StatementKind.CONCLUSION)] == ["c1"]

    def test_query_keeps_insertion_order(self, mixed_graph):
        results = mixed_graph.query(StatementQuery(tags=["energy"]))
        assert [s.id for s in results] == ["a2", "t2"]

    def test_iteration(self, mixed_graph):
        assert [s.id for s in mixed_graph] == ["a1", "a2", "t1", "t2", "c1"]


class TestSerialization:
    def test_metadata(self, mixed_graph):
        meta = mixed_graph.to_dict()["metadata"]
        assert meta["totalStatements"] == 5
        assert meta["axioms"] == 2
        assert meta["theories"] == 2
        assert meta["conclusions"] == 1
        assert meta["version"] == "1.0.0"

    def test_round_trip_field_for_field(self, mixed_graph):
        restored = KnowledgeGraph.from_dict(mixed_graph.to_dict())

        assert len(restored) == 5
        for original in mixed_graph.all():
            assert restored.get(original.id) == original
            assert restored.dependent_ids(original.id) == mixed_graph.dependent_ids(original.id)

    def test_from_dict_tolerates_arbitrary_order(self, mixed_graph):
        records = list(reversed(mixed_graph.to_dict()["statements"]))
        restored = KnowledgeGraph.from_dict({"statements": records})
        assert sorted(restored.ids()) == sorted(mixed_graph.ids())
        _assert_consistent(restored)

    def test_from_dict_defers_deep_chains(self):
        # A conclusion with one parent listed before the theory (two parents) it depends on.
        records = [
            {"id": "c", "type": "conclusion", "content": "C", "derivedFrom": ["t"]},
            {"id": "t", "type": "theory", "content": "T", "derivedFrom": ["a", "b"]},
            {"id": "a", "type": "axiom", "content": "A"},
            {"id": "b", "type": "axiom", "content": "B"},
        ]
        restored = KnowledgeGraph.from_dict({"statements": records})
        assert restored.dependent_ids("t") == ["c"]

    def test_from_dict_unresolvable_parent(self):
        records = [{"id": "t", "type": "theory", "content": "T", "derivedFrom": ["ghost"]}]
        with pytest.raises(DanglingParentError):
            KnowledgeGraph.from_dict({"statements": records})

    def test_from_dict_requires_statement_list(self):
        with pytest.raises(ValidationError):
            KnowledgeGraph.from_dict({"metadata": {}})


class TestThreadSafety:
    def test_concurrent_adds(self, graph):
        graph.add(_axiom("root"))

        def worker(prefix: str) -> None:
            for i in range(50):
                graph.add(_theory(f"{prefix}-{i}", ["root"]))

        threads = [threading.Thread(target=worker, args=(str(n),)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(graph) == 201
        assert len(graph.dependent_ids("root")) == 200
        _assert_consistent(graph)
