"""Storage adapter contract shared by the local and Supabase backends."""

from dataclasses import dataclass
from typing import Protocol

from neurostack.domain.entries import LogDraft, LogEntry, SessionUser
from neurostack.domain.errors import AuthError

LOCAL_MODE = "local"
SUPABASE_MODE = "supabase"
STORAGE_MODES = (LOCAL_MODE, SUPABASE_MODE)

BACKUP_VERSION = "2.0.0"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a sign-up or sign-in attempt."""

    error: AuthError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class StorageAdapter(Protocol):
    """Capabilities every persistence backend exposes."""

    mode: str

    def is_available(self) -> bool:
        """Cheap synchronous check that the backend can be used."""

    async def sign_up(self, identifier: str, secret: str) -> AuthResult:
        """Create an account."""

    async def sign_in(self, identifier: str, secret: str) -> AuthResult:
        """Start a session."""

    async def sign_out(self) -> None:
        """End the current session."""

    async def get_user(self) -> SessionUser | None:
        """Return the signed-in user, if any."""

    async def create_log(self, draft: LogDraft) -> LogEntry:
        """Persist a new entry and return the stored record."""

    async def update_log(self, log_id: str, patch: dict[str, object]) -> LogEntry:
        """Merge a partial update into an entry and return the stored record."""

    async def get_logs(self, limit: int | None = None) -> list[LogEntry]:
        """Return entries, most recent occurred_at first."""

    async def get_last_log(self) -> LogEntry | None:
        """Return the most recent entry, if any."""

    async def delete_log(self, log_id: str) -> None:
        """Delete an entry."""

    async def export_data(self) -> dict[str, object]:
        """Return a backup bundle."""

    async def import_data(self, bundle: dict[str, object]) -> None:
        """Restore entries from a backup bundle."""

    async def close(self) -> None:
        """Release network resources held by the backend."""
