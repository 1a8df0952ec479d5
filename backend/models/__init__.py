"""Data models for DocMind."""
from .document import Document, DocumentSummary
from .chunk import Chunk, ScoredChunk, Citation, CitationChunk, RetrievalResult
from .user import User, Workspace, ROLE_ADMIN, ROLE_USER
from .question import InvalidQuestionError, validate_question

__all__ = [
    "Document",
    "DocumentSummary",
    "Chunk",
    "ScoredChunk",
    "Citation",
    "CitationChunk",
    "RetrievalResult",
    "User",
    "Workspace",
    "ROLE_ADMIN",
    "ROLE_USER",
    "InvalidQuestionError",
    "validate_question",
]
