# src/core/models.py - v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


# === STORED DOCUMENTS ===


class DocumentRecord(BaseModel):
    """Persisted metadata for one stored document. Content lives in the blob store."""

    id: str
    name: str
    content_hash: str
    size: int
    created_at: datetime
    blob_ref: str


class Document(DocumentRecord):
    """A stored document together with its bytes."""

    content: bytes

    @property
    def hash(self) -> str:
        return self.content_hash

    @property
    def location(self) -> str:
        return self.blob_ref


class DocumentRef(BaseModel):
    """Result of an ingestion: identity plus where the bytes live."""

    id: str
    name: str
    location: str
    created: bool = True


class DocumentSummary(BaseModel):
    """Content-free listing entry."""

    id: str
    name: str
    created_at: datetime


# === ANALYSIS ===


class WordFrequency(BaseModel):
    """One row of a frequency table."""

    word: str
    count: int


class TextStats(BaseModel):
    """Word count, character count and top-K words of one text."""

    word_count: int
    character_count: int
    top_words: list[WordFrequency] = Field(default_factory=list)


class SimilarityResult(BaseModel):
    """Similarity of the analyzed document to one other corpus member."""

    document_id: str
    document_name: str = ""
    similarity_percentage: float = Field(ge=0.0, le=100.0)


class AnalysisReport(BaseModel):
    """Everything computed for one analysis request."""

    id: str
    name: str
    hash: str
    word_count: int
    character_count: int
    top_words: list[WordFrequency] = Field(default_factory=list)
    similar_documents: list[SimilarityResult] = Field(default_factory=list)
