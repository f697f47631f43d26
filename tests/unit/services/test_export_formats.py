"""Tests for knownet.services.export_service."""
from __future__ import annotations

import pytest

from knownet.models.domain import Statement
from knownet.models.enums import StatementKind
from knownet.services.export_service import (
    graph_data,
    graph_stats,
    to_dot,
    to_markdown,
    write_export,
)


class TestMarkdown:
    def test_sections_and_entries(self, mixed_graph):
        text = to_markdown(mixed_graph)
        assert text.startswith("# Knowledge Network Export")
        assert "Total Statements: 5" in text
        assert text.index("## Axioms") < text.index("## Theories") < text.index("## Conclusions")
        assert "### t1" in text
        assert "- **Derived From**: a1, a2" in text
        assert "- **Confidence**: N/A" in text
        assert "- **Tags**: None" in text

    def test_axioms_have_no_derived_from_line(self, food_graph):
        text = to_markdown(food_graph)
        axiom_block = text.split("### ax1")[1].split("###")[0]
        assert "Derived From" not in axiom_block


class TestDot:
    def test_nodes_edges_and_shapes(self, mixed_graph):
        dot = to_dot(mixed_graph)
        assert dot.startswith("digraph KnowledgeNetwork {")
        assert '"a1" [label="Energy is conserved", shape=box];' in dot
        assert "shape=ellipse" in dot
        assert "shape=diamond" in dot
        assert '"a1" -> "t1";' in dot
        assert '"t2" -> "c1";' in dot
        assert dot.rstrip().endswith("}")

    def test_labels_truncated_and_escaped(self, graph):
        graph.add(Statement(kind="axiom", content='He said "x" ' + "y" * 60, id="q"))
        dot = to_dot(graph)
        assert '\\"x\\"' in dot
        assert "..." in dot

    def test_exclude_orphans(self, food_graph):
        food_graph.add(Statement(kind="axiom", content="Alone", id="alone"))
        assert '"alone"' in to_dot(food_graph)
        assert '"alone"' not in to_dot(food_graph, include_orphans=False)

    def test_rankdir_validated(self, food_graph):
        assert "rankdir=LR;" in to_dot(food_graph, rankdir="LR")
        with pytest.raises(ValueError, match="rankdir"):
            to_dot(food_graph, rankdir="XY")


class TestGraphData:
    def test_nodes_and_edges(self, mixed_graph):
        data = graph_data(mixed_graph)
        assert [n.id for n in data.nodes] == ["a1", "a2", "t1", "t2", "c1"]
        assert data.nodes[4].kind is StatementKind.CONCLUSION
        assert data.nodes[4].confidence == 0.6
        assert data.edges == [("a1", "t1"), ("a2", "t1"), ("t1", "t2"), ("t1", "c1"), ("t2", "c1")]

    def test_labels_cut_to_max_length(self, mixed_graph):
        labels = {n.id: n.label for n in graph_data(mixed_graph, max_label_length=10).nodes}
        assert labels["a1"] == "Energy ..."
        assert labels["t1"] == "Organis..."
        assert graph_data(mixed_graph).nodes[0].label == "Energy is conserved"

    def test_exclude_orphans(self, mixed_graph):
        mixed_graph.add(Statement(kind="axiom", content="Alone", id="lone"))
        assert "lone" in [n.id for n in graph_data(mixed_graph).nodes]
        assert "lone" not in [n.id for n in graph_data(mixed_graph, include_orphans=False).nodes]


class TestGraphStats:
    def test_single_component(self, mixed_graph):
        stats = graph_stats(mixed_graph)
        assert stats.total_nodes == 5
        assert stats.total_edges == 5
        assert stats.isolated_nodes == 0
        assert stats.max_depth == 3
        assert stats.connected_components == 1

    def test_components_counted_not_roots(self, mixed_graph):
        # a1 and a2 are both roots but belong to one component.
        mixed_graph.add(Statement(kind="axiom", content="Alone", id="lone"))
        mixed_graph.add(Statement(kind="axiom", content="Base", id="b"))
        mixed_graph.add(Statement(kind="theory", content="On base", id="ob", derived_from=["b"]))
        stats = graph_stats(mixed_graph)
        assert stats.connected_components == 3
        assert stats.isolated_nodes == 1
        assert stats.total_edges == 6

    def test_empty(self, graph):
        stats = graph_stats(graph)
        assert (stats.total_nodes, stats.max_depth, stats.connected_components) == (0, 0, 0)


class TestWriteExport:
    def test_writes_file(self, tmp_path):
        target = tmp_path / "out" / "graph.dot"
        path = write_export("digraph {}\n", target)
        assert path == target
        assert target.read_text(encoding="utf-8") == "digraph {}\n"
