"""Workspaces stored in Supabase."""
import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from models.user import Workspace
from services.supabase_store import SupabaseStore

logger = logging.getLogger(__name__)


class WorkspaceStore(SupabaseStore):
    """Workspaces are always read and written on behalf of their owner."""

    table_name = "workspaces"

    def list_workspaces(self, user_id: int) -> List[Workspace]:
        """List a user's workspaces, oldest first, with document counts."""
        result = self.table().select("*").eq("user_id", user_id).order("created_at").execute()
        rows = result.data or []
        if not rows:
            return []

        doc_rows = (
            self.client.table("documents")
            .select("workspace_id")
            .eq("user_id", user_id)
            .execute()
        ).data or []
        counts = Counter(row["workspace_id"] for row in doc_rows if row.get("workspace_id") is not None)

        workspaces = []
        for row in rows:
            workspace = self._to_workspace(row)
            workspace.doc_count = counts.get(workspace.id, 0)
            workspaces.append(workspace)
        return workspaces

    def get_workspace(self, user_id: int, workspace_id: int) -> Optional[Workspace]:
        result = (
            self.table()
            .select("*")
            .eq("id", workspace_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return self._to_workspace(result.data[0]) if result.data else None

    def create_workspace(self, user_id: int, name: str, description: Optional[str] = None) -> Workspace:
        result = self.table().insert({
            "user_id": user_id,
            "name": name,
            "description": description,
        }).execute()

        workspace = self._to_workspace(result.data[0])
        logger.info(f"Created workspace {workspace.id} for user {user_id}")
        return workspace

    def delete_workspace(self, user_id: int, workspace_id: int) -> bool:
        """
        Delete a workspace; its documents go with it through the
        ON DELETE CASCADE on documents.workspace_id.

        Returns:
            False if the workspace does not exist or belongs to someone else
        """
        result = self.table().delete().eq("id", workspace_id).eq("user_id", user_id).execute()

        deleted = bool(result.data)
        if deleted:
            logger.info(f"Deleted workspace {workspace_id} for user {user_id}")
        return deleted

    def _to_workspace(self, row: Dict[str, Any]) -> Workspace:
        return Workspace(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            description=row.get("description"),
            created_at=self.parse_timestamp(row.get("created_at"))
        )
