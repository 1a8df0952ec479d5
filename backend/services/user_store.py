"""User accounts stored in Supabase."""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from models.user import User, ROLE_USER
from services.supabase_store import SupabaseStore

logger = logging.getLogger(__name__)


class DuplicateEmailError(ValueError):
    """Raised when signing up with an email that already has an account."""


class UserStore(SupabaseStore):
    """Create, look up and approve user accounts."""

    table_name = "users"

    def get_by_email(self, email: str) -> Optional[User]:
        result = self.table().select("*").eq("email", email).limit(1).execute()
        return self._to_user(result.data[0]) if result.data else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        result = self.table().select("*").eq("id", user_id).limit(1).execute()
        return self._to_user(result.data[0]) if result.data else None

    def create_user(self, email: str, password_hash: str, name: str) -> User:
        """
        Create an account awaiting admin approval.

        Raises:
            DuplicateEmailError: If the email is already registered
        """
        if self.get_by_email(email) is not None:
            raise DuplicateEmailError("An account with this email already exists")

        result = self.table().insert({
            "email": email,
            "password_hash": password_hash,
            "name": name,
            "role": ROLE_USER,
            "is_approved": False,
        }).execute()

        user = self._to_user(result.data[0])
        logger.info(f"Created user {user.id} (pending approval)")
        return user

    def list_users(self) -> List[User]:
        result = self.table().select("*").order("created_at").execute()
        return [self._to_user(row) for row in result.data or []]

    def set_approval(self, user_id: int, is_approved: bool) -> Optional[User]:
        """
        Approve or reject a user.

        Returns:
            The updated user, or None if no such user exists
        """
        result = self.table().update({
            "is_approved": is_approved,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }).eq("id", user_id).execute()

        if not result.data:
            return None

        logger.info(f"User {user_id} {'approved' if is_approved else 'rejected'}")
        return self._to_user(result.data[0])

    def _to_user(self, row: Dict[str, Any]) -> User:
        return User(
            id=row["id"],
            email=row["email"],
            name=row["name"],
            password_hash=row.get("password_hash", ""),
            role=row.get("role", ROLE_USER),
            is_approved=bool(row.get("is_approved", False)),
            created_at=self.parse_timestamp(row.get("created_at"))
        )
