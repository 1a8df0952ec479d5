"""Chunk data models."""
from dataclasses import dataclass, field
from typing import List


@dataclass
class Chunk:
    """Represents a document chunk for retrieval."""
    chunk_id: str  # Format: "{document_id}_{index}"
    text: str
    document_id: int
    document_name: str
    index: int  # zero-based position among the document's chunks
    word_count: int = 0


@dataclass
class ScoredChunk:
    """Chunk with keyword relevance score for one question."""
    chunk: Chunk
    relevance_score: float  # >= 0.0, unbounded above


@dataclass
class CitationChunk:
    """Preview of one chunk shown as a citation."""
    index: int  # 1-based
    preview: str


@dataclass
class Citation:
    """Chunks used from a single document, grouped for display."""
    document_id: int
    filename: str
    chunks: List[CitationChunk] = field(default_factory=list)


@dataclass
class RetrievalResult:
    """Output of a retrieval pass over one or more documents."""
    chunks: List[ScoredChunk]  # order used to build the prompt
    context: str
    citations: List[Citation]

    @property
    def is_empty(self) -> bool:
        return not self.chunks
