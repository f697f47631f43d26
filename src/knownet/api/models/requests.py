"""Pydantic request models for API endpoints."""
from __future__ import annotations

from pydantic import BaseModel, Field


class StatementCreateRequest(BaseModel):
    """New statement; the domain model validates type/derivation invariants."""
    type: str
    content: str
    id: str | None = None
    confidence: float | None = None
    tags: list[str] = Field(default_factory=list)
    derived_from: list[str] = Field(default_factory=list)
    check_contradictions: bool = False


class StatementUpdateRequest(BaseModel):
    """Partial update. Omitted fields are left unchanged."""
    type: str | None = None
    content: str | None = None
    confidence: float | None = None
    clear_confidence: bool = False
    tags: list[str] | None = None
    derived_from: list[str] | None = None


class SearchRequest(BaseModel):
    """Conjunctive filter; unset fields do not filter."""
    type: str | None = None
    tags: list[str] | None = None
    content: str | None = None
    derived_from: list[str] | None = None
    min_confidence: float | None = None


class TheoryRequest(BaseModel):
    source_ids: list[str] = Field(..., min_length=1)
    count: int = Field(1, ge=1, le=5)


class DuplicateCheckRequest(BaseModel):
    content: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)


class KnowledgeContextRequest(BaseModel):
    query: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list)


class RelationshipRequest(BaseModel):
    statement_id: str


class TheoryBatchRequest(BaseModel):
    source_ids: list[str] = Field(..., min_length=1)
    count: int = Field(3, ge=1, le=10)
