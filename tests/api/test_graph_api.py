"""API tests for /api/graph."""
from __future__ import annotations


class TestSubgraph:
    def test_depth_one(self, client):
        data = client.get("/api/graph/subgraph/a1", params={"depth": 1}).json()
        assert data["center"] == "a1"
        nodes = {n["statement"]["id"]: n["distance"] for n in data["nodes"]}
        assert nodes == {"a1": 0, "t1": 1}
        assert data["edges"] == [{"source": "a1", "target": "t1"}]

    def test_depth_zero(self, client):
        data = client.get("/api/graph/subgraph/t1", params={"depth": 0}).json()
        assert [n["statement"]["id"] for n in data["nodes"]] == ["t1"]
        assert data["edges"] == []

    def test_default_depth_reaches_two_hops(self, client):
        data = client.get("/api/graph/subgraph/a1").json()
        assert data["depth"] == 2
        ids = {n["statement"]["id"] for n in data["nodes"]}
        assert ids == {"a1", "t1", "a2", "t2", "c1"}

    def test_missing(self, client):
        assert client.get("/api/graph/subgraph/zz").status_code == 404


class TestExport:
    def test_dot(self, client):
        resp = client.get("/api/graph/export/dot", params={"rankdir": "LR"})
        assert resp.status_code == 200
        assert resp.text.startswith("digraph KnowledgeNetwork {")
        assert "rankdir=LR;" in resp.text
        assert '"t1" -> "c1";' in resp.text

    def test_dot_bad_rankdir(self, client):
        assert client.get("/api/graph/export/dot", params={"rankdir": "UP"}).status_code == 422

    def test_markdown(self, client):
        resp = client.get("/api/graph/export/markdown")
        assert resp.status_code == 200
        assert "Total Statements: 5" in resp.text
        assert "## Conclusions" in resp.text


class TestGraphData:
    def test_nodes_and_edges(self, client):
        data = client.get("/api/graph/data").json()
        assert [n["id"] for n in data["nodes"]] == ["a1", "a2", "t1", "t2", "c1"]
        assert data["nodes"][2] == {
            "id": "t1",
            "label": "Organisms convert food into energy",
            "type": "theory",
            "confidence": 0.8,
            "tags": ["biology"],
        }
        assert {"source": "a1", "target": "t1", "label": "derives"} in data["edges"]
        assert len(data["edges"]) == 5

    def test_label_length(self, client):
        data = client.get("/api/graph/data", params={"max_label_length": 10}).json()
        labels = {n["id"]: n["label"] for n in data["nodes"]}
        assert labels["t1"] == "Organis..."
        assert all(len(label) <= 10 for label in labels.values())

    def test_label_length_too_small(self, client):
        assert client.get("/api/graph/data", params={"max_label_length": 2}).status_code == 422

    def test_exclude_orphans(self, client, api_state):
        from knownet.models.domain import Statement

        api_state.graph.add(Statement(kind="axiom", content="Alone", id="lone"))
        with_all = client.get("/api/graph/data").json()
        without = client.get("/api/graph/data", params={"include_orphans": "false"}).json()
        assert "lone" in [n["id"] for n in with_all["nodes"]]
        assert "lone" not in [n["id"] for n in without["nodes"]]


class TestNodeAndStats:
    def test_node(self, client):
        data = client.get("/api/graph/node/t1").json()
        assert data["node"]["id"] == "t1"
        connections = data["connections"]
        assert [p["id"] for p in connections["parents"]] == ["a1", "a2"]
        assert [d["id"] for d in connections["dependents"]] == ["t2", "c1"]
        assert connections["parent_count"] == 2
        assert connections["dependent_count"] == 2

    def test_node_missing(self, client):
        assert client.get("/api/graph/node/zz").status_code == 404

    def test_stats(self, client):
        assert client.get("/api/graph/stats").json() == {
            "total_nodes": 5,
            "total_edges": 5,
            "isolated_nodes": 0,
            "max_depth": 3,
            "connected_components": 1,
        }
