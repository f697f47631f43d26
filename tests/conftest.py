"""Pytest configuration and shared fixtures for knownet tests."""

from __future__ import annotations

import pytest

from knownet.graph.network import KnowledgeGraph
from knownet.models.domain import Statement


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path_factory, monkeypatch):
    """Keep every test away from the real ~/.knownet directory and KNOWNET_* settings."""
    import os

    for key in list(os.environ):
        if key.startswith("KNOWNET_"):
            monkeypatch.delenv(key, raising=False)
    home = tmp_path_factory.mktemp("knownet-home")
    monkeypatch.setenv("KNOWNET_DATA_DIR", str(home))
    monkeypatch.setenv("KNOWNET_DATA_FILE", str(home / "data" / "knowledge.json"))
    yield


@pytest.fixture
def graph() -> KnowledgeGraph:
    return KnowledgeGraph()


@pytest.fixture
def food_graph() -> KnowledgeGraph:
    """Two axioms and one theory derived from both, confidence unset."""
    g = KnowledgeGraph()
    g.add(Statement(kind="axiom", content="Humans need food", id="ax1"))
    g.add(Statement(kind="axiom", content="Time is limited", id="ax2"))
    g.add(
        Statement(
            kind="theory",
            content="Food must be prioritized under time limits",
            id="th1",
            derived_from=["ax1", "ax2"],
        )
    )
    return g


@pytest.fixture
def mixed_graph() -> KnowledgeGraph:
    """2 axioms, 2 theories and 1 conclusion with mixed confidence and tags."""
    g = KnowledgeGraph()
    g.add(Statement(kind="axiom", content="Energy is conserved", id="a1", tags=["physics"]))
    g.add(
        Statement(
            kind="axiom",
            content="Living things need energy",
            id="a2",
            confidence=0.9,
            tags=["biology", "energy"],
        )
    )
    g.add(
        Statement(
            kind="theory",
            content="Organisms convert food into energy",
            id="t1",
            derived_from=["a1", "a2"],
            confidence=0.8,
            tags=["biology"],
        )
    )
    g.add(
        Statement(
            kind="theory",
            content="Starving organisms lose energy reserves",
            id="t2",
            derived_from=["t1"],
            tags=["biology", "energy"],
        )
    )
    g.add(
        Statement(
            kind="conclusion",
            content="Regular meals sustain activity",
            id="c1",
            derived_from=["t1", "t2"],
            confidence=0.6,
        )
    )
    return g


@pytest.fixture
def api_state(tmp_path, mixed_graph):
    """Serve ``mixed_graph`` through the API with a temp store and a mocked theory backend."""
    from types import SimpleNamespace
    from unittest.mock import MagicMock

    import knownet.api.dependencies as deps
    from knownet.config import Config
    from knownet.services.storage import JSONGraphStore

    backend = MagicMock()
    store = JSONGraphStore(tmp_path / "api-knowledge.json")
    deps.set_state(config=Config.defaults(), graph=mixed_graph, store=store, theory_backend=backend)
    yield SimpleNamespace(graph=mixed_graph, store=store, backend=backend)
    deps.reset_state()


@pytest.fixture
def client(api_state):
    from fastapi.testclient import TestClient

    from knownet.api.app import app

    return TestClient(app)
