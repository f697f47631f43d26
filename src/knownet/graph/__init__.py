"""Statement graph and derivation analysis."""
from __future__ import annotations

from knownet.graph.derivation import DerivationEngine
from knownet.graph.network import KnowledgeGraph

__all__ = ["KnowledgeGraph", "DerivationEngine"]
