"""Supabase-backed storage adapter.

Authentication is delegated to Supabase auth. Creates and updates go
through the logs endpoint so the caller's identity is re-verified and
ownership is stamped server-side; listing and deletes go straight to the
``logs`` table scoped to the session's user.
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

import httpx
from supabase import AuthError as SupabaseAuthError
from supabase import Client, PostgrestAPIError

from neurostack.adapters.logs_api_client import LogsApiClient
from neurostack.domain.entries import (
    LogDraft,
    LogEntry,
    SessionUser,
    draft_from_entry,
    draft_to_row,
    entry_from_row,
    entry_to_row,
    patch_to_row,
)
from neurostack.domain.errors import (
    AuthError,
    LogNotFoundError,
    NeurostackError,
    StorageUnavailableError,
)
from neurostack.services.storage import (
    BACKUP_VERSION,
    SUPABASE_MODE,
    AuthResult,
    StorageAdapter,
)

DEFAULT_PAGE_SIZE = 20
EXPORT_PAGE_SIZE = 1000

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseStorageAdapter(StorageAdapter):
    """Storage adapter over a hosted Supabase project."""

    client: Client | None
    api: LogsApiClient
    mode: str = SUPABASE_MODE

    def is_available(self) -> bool:
        """True when a Supabase client was configured."""
        return self.client is not None

    async def sign_up(self, identifier: str, secret: str) -> AuthResult:
        try:
            self._require_client().auth.sign_up(
                {"email": identifier, "password": secret}
            )
        except SupabaseAuthError as exc:
            return AuthResult(error=AuthError(str(exc)))
        return AuthResult()

    async def sign_in(self, identifier: str, secret: str) -> AuthResult:
        try:
            self._require_client().auth.sign_in_with_password(
                {"email": identifier, "password": secret}
            )
        except SupabaseAuthError as exc:
            return AuthResult(error=AuthError(str(exc)))
        return AuthResult()

    async def sign_out(self) -> None:
        self._require_client().auth.sign_out()

    async def get_user(self) -> SessionUser | None:
        try:
            response = self._require_client().auth.get_user()
        except SupabaseAuthError:
            return None
        user = response.user if response is not None else None
        if user is None:
            return None
        return SessionUser(id=str(user.id), email=user.email)

    async def create_log(self, draft: LogDraft) -> LogEntry:
        token = self._access_token()
        try:
            row = await self.api.create_log(token, draft_to_row(draft))
        except httpx.HTTPStatusError as exc:
            _raise_for_endpoint_status(exc)
            raise
        return entry_from_row(row)

    async def update_log(self, log_id: str, patch: dict[str, object]) -> LogEntry:
        token = self._access_token()
        try:
            row = await self.api.update_log(token, log_id, patch_to_row(patch))
        except httpx.HTTPStatusError as exc:
            _raise_for_endpoint_status(exc)
            raise
        return entry_from_row(row)

    async def get_logs(self, limit: int | None = None) -> list[LogEntry]:
        """Return the user's logs, newest first, 20 by default."""
        user = await self.get_user()
        if user is None:
            return []
        page_size = DEFAULT_PAGE_SIZE if limit is None else limit
        try:
            response = (
                self._require_client()
                .table("logs")
                .select("*")
                .eq("user_id", user.id)
                .order("occurred_at", desc=True)
                .limit(page_size)
                .execute()
            )
        except PostgrestAPIError:
            _logger.exception("Error fetching logs")
            return []
        return [entry_from_row(row) for row in response.data or []]

    async def get_last_log(self) -> LogEntry | None:
        logs = await self.get_logs(1)
        return logs[0] if logs else None

    async def delete_log(self, log_id: str) -> None:
        user = await self.get_user()
        if user is None:
            raise AuthError("Not authenticated")
        try:
            (
                self._require_client()
                .table("logs")
                .delete()
                .eq("id", log_id)
                .eq("user_id", user.id)
                .execute()
            )
        except PostgrestAPIError as exc:
            raise RuntimeError("Failed to delete log") from exc

    async def export_data(self) -> dict[str, object]:
        """Export up to 1000 logs for backup."""
        user = await self.get_user()
        logs = await self.get_logs(EXPORT_PAGE_SIZE)
        return {
            "logs": [entry_to_row(entry) for entry in logs],
            "user": {"id": user.id, "email": user.email} if user else None,
            "exportedAt": datetime.now(tz=UTC).isoformat(),
            "version": BACKUP_VERSION,
            "source": SUPABASE_MODE,
        }

    async def import_data(self, bundle: dict[str, object]) -> None:
        """Re-create bundle logs one by one; failed rows are logged and skipped."""
        user = await self.get_user()
        if user is None:
            raise AuthError("Not authenticated")
        rows = bundle.get("logs")
        if not isinstance(rows, list):
            return
        imported = 0
        for row in rows:
            try:
                await self.create_log(_draft_from_row(row))
            except (NeurostackError, httpx.HTTPError, KeyError, TypeError, ValueError):
                _logger.exception("Failed to import log")
                continue
            imported += 1
        _logger.info("Imported %s of %s logs", imported, len(rows))

    def _require_client(self) -> Client:
        if self.client is None:
            raise StorageUnavailableError("Supabase is not configured")
        return self.client

    def _access_token(self) -> str:
        session = self._require_client().auth.get_session()
        if session is None or not session.access_token:
            raise AuthError("Not authenticated")
        return session.access_token

    async def close(self) -> None:
        await self.api.close()


def _draft_from_row(row: object) -> LogDraft:
    if not isinstance(row, dict):
        raise TypeError("Log row must be an object")
    return draft_from_entry(entry_from_row({**row, "id": str(row.get("id", ""))}))


def _raise_for_endpoint_status(exc: httpx.HTTPStatusError) -> None:
    status_code = exc.response.status_code
    if status_code == httpx.codes.UNAUTHORIZED:
        raise AuthError("Not authenticated") from exc
    if status_code == httpx.codes.NOT_FOUND:
        raise LogNotFoundError("Log not found") from exc
