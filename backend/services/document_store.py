"""Documents stored in Supabase."""
import logging
from typing import Any, Dict, List, Optional

from models.document import Document, DocumentSummary
from services.supabase_store import SupabaseStore

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = "id, filename, file_size, workspace_id, created_at"


class DocumentStore(SupabaseStore):
    """
    Document persistence scoped by owner.

    Every read filters on user_id, so a document that is missing and one that
    belongs to another user look the same to the caller.
    """

    table_name = "documents"

    def list_documents(self, user_id: int) -> List[DocumentSummary]:
        """List a user's documents without their text, oldest first."""
        result = (
            self.table()
            .select(SUMMARY_COLUMNS)
            .eq("user_id", user_id)
            .order("created_at")
            .execute()
        )
        return [self._to_summary(row) for row in result.data or []]

    def get_document(self, user_id: int, document_id: int) -> Optional[Document]:
        result = (
            self.table()
            .select("*")
            .eq("id", document_id)
            .eq("user_id", user_id)
            .limit(1)
            .execute()
        )
        return self._to_document(result.data[0]) if result.data else None

    def list_workspace_documents(self, user_id: int, workspace_id: int) -> List[Document]:
        """Load every document of a workspace, with text, in upload order."""
        result = (
            self.table()
            .select("*")
            .eq("workspace_id", workspace_id)
            .eq("user_id", user_id)
            .order("created_at")
            .execute()
        )
        return [self._to_document(row) for row in result.data or []]

    def add_document(
        self,
        user_id: int,
        filename: str,
        content: str,
        file_size: int,
        workspace_id: Optional[int] = None
    ) -> Document:
        result = self.table().insert({
            "user_id": user_id,
            "workspace_id": workspace_id,
            "filename": filename,
            "content": content,
            "file_size": file_size,
        }).execute()

        document = self._to_document(result.data[0])
        logger.info(
            f"Stored document {document.id} ({filename}, {file_size} bytes) for user {user_id}"
        )
        return document

    def delete_document(self, user_id: int, document_id: int) -> bool:
        result = self.table().delete().eq("id", document_id).eq("user_id", user_id).execute()
        deleted = bool(result.data)
        if deleted:
            logger.info(f"Deleted document {document_id} for user {user_id}")
        return deleted

    def _to_document(self, row: Dict[str, Any]) -> Document:
        return Document(
            id=row["id"],
            filename=row["filename"],
            content=row.get("content") or "",
            file_size=row.get("file_size", 0),
            user_id=row.get("user_id", 0),
            workspace_id=row.get("workspace_id"),
            created_at=self.parse_timestamp(row.get("created_at"))
        )

    def _to_summary(self, row: Dict[str, Any]) -> DocumentSummary:
        return DocumentSummary(
            id=row["id"],
            filename=row["filename"],
            file_size=row.get("file_size", 0),
            workspace_id=row.get("workspace_id"),
            created_at=self.parse_timestamp(row.get("created_at"))
        )
