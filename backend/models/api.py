"""Request and response schemas for the HTTP API."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, StrictBool, StrictInt, field_validator, model_validator

from config import MAX_PASSWORD_BYTES
from models.question import validate_question


class SignupRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=8)
    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        value = value.strip().lower()
        if "@" not in value:
            raise ValueError("Invalid email address")
        return value

    @field_validator("password")
    @classmethod
    def check_password_length(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return value

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Name is required")
        return value


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


class UserOut(BaseModel):
    id: int
    email: str
    name: str
    role: str
    is_approved: bool
    created_at: Optional[datetime] = None


class AuthResponse(BaseModel):
    message: str
    token: Optional[str] = None
    user: UserOut


class ApprovalRequest(BaseModel):
    """Admin decision on a pending account."""
    user_id: StrictInt
    is_approved: StrictBool


class ApprovalResponse(BaseModel):
    message: str
    user: UserOut


class WorkspaceCreateRequest(BaseModel):
    name: str
    description: Optional[str] = None

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Workspace name is required")
        if len(value) > 100:
            raise ValueError("Name must be under 100 characters")
        return value

    @field_validator("description")
    @classmethod
    def blank_description_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class WorkspaceOut(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    doc_count: int = 0


class DocumentOut(BaseModel):
    id: int
    filename: str
    file_size: int
    workspace_id: Optional[int] = None
    created_at: Optional[datetime] = None


class UploadResponse(DocumentOut):
    content_length: int


class AskRequest(BaseModel):
    """Question about one document or every document in a workspace."""
    question: str
    document_id: Optional[int] = None
    workspace_id: Optional[int] = None

    @field_validator("question")
    @classmethod
    def check_question(cls, value: str) -> str:
        return validate_question(value)

    @model_validator(mode="after")
    def check_scope(self) -> "AskRequest":
        if (self.document_id is None) == (self.workspace_id is None):
            raise ValueError("Provide exactly one of document_id or workspace_id")
        return self


class DeepSearchRequest(BaseModel):
    question: str
    workspace_id: Optional[int] = None

    @field_validator("question")
    @classmethod
    def check_question(cls, value: str) -> str:
        return validate_question(value)


class CitationChunkOut(BaseModel):
    index: int
    preview: str


class CitationOut(BaseModel):
    document_id: int
    filename: str
    chunks: List[CitationChunkOut]


class AskResponse(BaseModel):
    answer: str
    model_used: str
    citations: List[CitationOut]


class WebSourceOut(BaseModel):
    url: str
    title: str
    snippet: str


class DeepSearchResponse(BaseModel):
    answer: str
    model_used: str
    doc_sources: List[CitationOut]
    web_sources: List[WebSourceOut]
    has_doc_context: bool
    has_web_context: bool
