"""User and workspace data models."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

ROLE_ADMIN = "admin"
ROLE_USER = "user"


@dataclass
class User:
    """Represents an account; new accounts wait for admin approval."""
    id: int
    email: str
    name: str
    password_hash: str
    role: str = ROLE_USER
    is_approved: bool = False
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN


@dataclass
class Workspace:
    """User-defined grouping of documents."""
    id: int
    user_id: int
    name: str
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    doc_count: int = 0
