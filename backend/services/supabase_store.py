"""Shared Supabase plumbing for the table stores."""
import logging
from datetime import datetime
from typing import Optional

from supabase import create_client, Client

from config import SUPABASE_URL, SUPABASE_KEY

logger = logging.getLogger(__name__)


class SupabaseStore:
    """Base class holding a Supabase client for one table."""

    table_name: str = ""

    def __init__(self, client: Optional[Client] = None):
        """
        Initialize the store.

        Args:
            client: Existing Supabase client; created from SUPABASE_URL and
                SUPABASE_KEY when omitted

        Raises:
            ValueError: If no client is given and credentials are missing
        """
        if client is None:
            if not SUPABASE_URL or not SUPABASE_KEY:
                raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in environment variables")
            client = create_client(SUPABASE_URL, SUPABASE_KEY)

        self.client: Client = client
        logger.info(f"{type(self).__name__} initialized with table: {self.table_name}")

    def table(self):
        return self.client.table(self.table_name)

    @staticmethod
    def parse_timestamp(timestamp_str: Optional[str]) -> Optional[datetime]:
        """
        Parse timestamp string from Supabase, handling various formats.

        Supabase can return timestamps with varying microsecond precision,
        which Python's fromisoformat() can't always handle. This method
        normalizes the fraction to six digits.
        """
        if not timestamp_str:
            return None
        if isinstance(timestamp_str, datetime):
            return timestamp_str

        timestamp_str = timestamp_str.replace("Z", "+00:00")

        # Format: 2026-02-21T02:08:26.18976+00:00
        if "." in timestamp_str:
            head, tail = timestamp_str.split(".", 1)
            tz = ""
            for sign in ("+", "-"):
                if sign in tail:
                    tail, tz_rest = tail.split(sign, 1)
                    tz = sign + tz_rest
                    break
            fraction = tail[:6].ljust(6, "0")
            timestamp_str = f"{head}.{fraction}{tz}"

        return datetime.fromisoformat(timestamp_str)
