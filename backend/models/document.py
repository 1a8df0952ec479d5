"""Document data models."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class Document:
    """A stored document with its extracted text."""
    id: int
    filename: str
    content: str
    file_size: int
    user_id: int
    workspace_id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass
class DocumentSummary:
    """Document metadata without the text body."""
    id: int
    filename: str
    file_size: int
    workspace_id: Optional[int] = None
    created_at: Optional[datetime] = None
