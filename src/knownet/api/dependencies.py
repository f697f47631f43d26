"""Shared dependencies for FastAPI routes.

The API serves one in-memory KnowledgeGraph backed by a JSONGraphStore. State
is created on first use (or at startup) from the loaded Config; tests install
their own graph and store with ``set_state``.
"""
from __future__ import annotations

import logging
from threading import Lock
from typing import Callable

from knownet.config import Config
from knownet.contradictions.detector import ContradictionDetector
from knownet.services.storage import StorageError
from knownet.graph.derivation import DerivationEngine
from knownet.graph.network import KnowledgeGraph
from knownet.services.assistant import KnowledgeAssistant
from knownet.services.query_service import QueryService
from knownet.services.storage import JSONGraphStore
from knownet.services.theory_generator import TheoryBackend, TheoryGenerator


logger = logging.getLogger(__name__)


# Global singletons (initialized on startup)
_config: Config | None = None
_graph: KnowledgeGraph | None = None
_store: JSONGraphStore | None = None
_theory_backend: TheoryBackend | None = None

_service_lock = Lock()


def initialize_services(config: Config | None = None) -> None:
    """Load configuration and the persisted graph. Idempotent."""
    global _config, _graph, _store

    with _service_lock:
        if _graph is not None:
            return
        _config = config or Config.load()
        _store = JSONGraphStore(
            _config.storage.data_path,
            max_backups=_config.storage.max_backups,
        )
        _graph = _store.load()
        logger.info("Serving %d statements from %s", len(_graph), _store.file_path)


def set_state(
    *,
    config: Config,
    graph: KnowledgeGraph,
    store: JSONGraphStore,
    theory_backend: TheoryBackend | None = None,
) -> None:
    """Replace the served state wholesale."""
    global _config, _graph, _store, _theory_backend

    with _service_lock:
        _config = config
        _graph = graph
        _store = store
        _theory_backend = theory_backend


def reset_state() -> None:
    global _config, _graph, _store, _theory_backend

    with _service_lock:
        _config = None
        _graph = None
        _store = None
        _theory_backend = None


def get_config() -> Config:
    if _config is None:
        initialize_services()
    assert _config is not None
    return _config


def get_graph() -> KnowledgeGraph:
    if _graph is None:
        initialize_services()
    assert _graph is not None
    return _graph


def get_store() -> JSONGraphStore:
    if _store is None:
        initialize_services()
    assert _store is not None
    return _store


def get_engine() -> DerivationEngine:
    return DerivationEngine(
        get_graph(),
        confidence_discount=get_config().analysis.confidence_discount,
    )


def get_query_service() -> QueryService:
    return QueryService(get_graph(), get_engine())


def get_detector() -> ContradictionDetector:
    analysis = get_config().analysis
    return ContradictionDetector(
        get_graph(),
        opposite_threshold=analysis.opposite_threshold,
        negation_threshold=analysis.negation_threshold,
        semantic_threshold=analysis.semantic_threshold,
    )


def get_theory_backend() -> TheoryBackend:
    if _theory_backend is not None:
        return _theory_backend
    return TheoryGenerator(get_config().llm)


def persist(undo: Callable[[], object] | None = None) -> None:
    """Write the served graph back to its store.

    When the write fails, ``undo`` is called to revert the in-memory change
    that was being persisted, so memory and disk stay in step. The
    StorageError is re-raised either way.
    """
    try:
        get_store().save(get_graph())
    except StorageError:
        if undo is not None:
            undo()
            logger.warning("Save failed; in-memory change reverted")
        raise


def get_assistant() -> KnowledgeAssistant:
    return KnowledgeAssistant(get_graph(), get_query_service())
