"""Supabase repository for the logs table (server side)."""

from dataclasses import dataclass

from supabase import Client, PostgrestAPIError

from neurostack.domain.entries import LogEntry, entry_from_row
from neurostack.services.logs import LogRepository

_INVALID_TEXT_REPRESENTATION = "22P02"


@dataclass
class SupabaseLogRepository(LogRepository):
    """Supabase implementation for log writes."""

    client: Client

    def insert_log(self, user_id: str, fields: dict[str, object]) -> LogEntry:
        """Insert a log row stamped with its owner and return it."""
        payload = dict(fields)
        payload["user_id"] = user_id
        response = self.client.table("logs").insert(payload).execute()
        if not response.data:
            raise RuntimeError("Failed to create log")
        return entry_from_row(response.data[0])

    def update_log(
        self, user_id: str, log_id: str, fields: dict[str, object]
    ) -> LogEntry | None:
        """Update a log row only when it belongs to ``user_id``."""
        try:
            response = (
                self.client.table("logs")
                .update(fields)
                .eq("id", log_id)
                .eq("user_id", user_id)
                .execute()
            )
        except PostgrestAPIError as exc:
            # A malformed id cannot match any row.
            if exc.code == _INVALID_TEXT_REPRESENTATION:
                return None
            raise
        if not response.data:
            return None
        return entry_from_row(response.data[0])
