"""Lexical contradiction detection."""
from __future__ import annotations

from knownet.contradictions.detector import (
    ContradictionDetector,
    jaccard_similarity,
    normalize_content,
)

__all__ = ["ContradictionDetector", "jaccard_similarity", "normalize_content"]
