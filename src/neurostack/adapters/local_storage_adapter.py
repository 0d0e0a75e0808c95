"""Device-local storage adapter.

Logs live as one JSON array under a single key; every read parses the
whole blob and every write rewrites it. That is fine for one person's
history (hundreds to a few thousand entries).

Authentication here is a convenience lock, not a security boundary: the
last four characters of the secret are kept as a PIN and compared
verbatim on sign-in. Nothing leaves the device and no secret is stored
server-side.
"""

import json
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import uuid4

from neurostack.adapters.file_store import KeyValueStore
from neurostack.domain.entries import (
    LogDraft,
    LogEntry,
    SessionUser,
    draft_to_row,
    entry_from_row,
    entry_to_row,
    merge_patch,
)
from neurostack.domain.errors import AuthError, LogNotFoundError
from neurostack.services.storage import (
    BACKUP_VERSION,
    LOCAL_MODE,
    AuthResult,
    StorageAdapter,
)

LOGS_KEY = "neurostack-logs"
USER_KEY = "neurostack-user"
PIN_KEY = "neurostack-pin"
_PROBE_KEY = "__storage_test__"
_PIN_LENGTH = 4

_logger = logging.getLogger(__name__)


@dataclass
class LocalStorageAdapter(StorageAdapter):
    """Storage adapter over on-device key-value storage."""

    store: KeyValueStore
    mode: str = LOCAL_MODE

    def is_available(self) -> bool:
        """Probe the store with a write and remove."""
        try:
            self.store.set_item(_PROBE_KEY, _PROBE_KEY)
            self.store.remove_item(_PROBE_KEY)
        except OSError:
            return False
        return True

    async def sign_up(self, identifier: str, secret: str) -> AuthResult:
        """Keep the secret's last four characters as the device PIN."""
        if not self.is_available():
            return AuthResult(error=AuthError("Local storage not available"))
        self.store.set_item(PIN_KEY, pin_from_secret(secret))
        user = {
            "id": f"local-{_now_ms()}",
            "email": identifier,
            "createdAt": datetime.now(tz=UTC).isoformat(),
        }
        self.store.set_item(USER_KEY, json.dumps(user))
        return AuthResult()

    async def sign_in(self, identifier: str, secret: str) -> AuthResult:
        """Compare the secret's last four characters with the stored PIN."""
        if not self.is_available():
            return AuthResult(error=AuthError("Local storage not available"))
        stored_pin = self.store.get_item(PIN_KEY)
        if not stored_pin:
            return AuthResult(
                error=AuthError("No account found. Please sign up first.")
            )
        if stored_pin != pin_from_secret(secret):
            return AuthResult(error=AuthError("Incorrect password"))
        return AuthResult()

    async def sign_out(self) -> None:
        """Nothing to clear: local data and the PIN stay on the device."""
        _logger.debug("Local sign out")

    async def get_user(self) -> SessionUser | None:
        if not self.is_available():
            return None
        raw = self.store.get_item(USER_KEY)
        if not raw:
            return None
        try:
            user = json.loads(raw)
        except json.JSONDecodeError:
            return None
        if not isinstance(user, dict) or not user.get("id"):
            return None
        email = user.get("email")
        return SessionUser(id=str(user["id"]), email=str(email) if email else None)

    async def create_log(self, draft: LogDraft) -> LogEntry:
        entries = self._read_logs()
        row = {"id": _new_log_id()}
        row.update(draft_to_row(draft))
        entry = entry_from_row(row)
        entries.append(entry)
        self._write_logs(entries)
        return entry

    async def update_log(self, log_id: str, patch: dict[str, object]) -> LogEntry:
        entries = self._read_logs()
        for index, entry in enumerate(entries):
            if entry.id == log_id:
                updated = merge_patch(entry, patch)
                entries[index] = updated
                self._write_logs(entries)
                return updated
        raise LogNotFoundError("Log not found")

    async def get_logs(self, limit: int | None = None) -> list[LogEntry]:
        entries = sorted(
            self._read_logs(), key=lambda entry: entry.occurred_at, reverse=True
        )
        if limit is not None:
            return entries[:limit]
        return entries

    async def get_last_log(self) -> LogEntry | None:
        logs = await self.get_logs(1)
        return logs[0] if logs else None

    async def delete_log(self, log_id: str) -> None:
        entries = self._read_logs()
        self._write_logs([entry for entry in entries if entry.id != log_id])

    async def export_data(self) -> dict[str, object]:
        user = await self.get_user()
        return {
            "logs": [entry_to_row(entry) for entry in self._read_logs()],
            "user": {"id": user.id, "email": user.email} if user else None,
            "exportedAt": datetime.now(tz=UTC).isoformat(),
            "version": BACKUP_VERSION,
        }

    async def import_data(self, bundle: dict[str, object]) -> None:
        """Replace stored logs with the bundle's logs."""
        rows = bundle.get("logs")
        if not isinstance(rows, list):
            return
        self._write_logs(_parse_rows(rows))

    async def close(self) -> None:
        pass

    def _read_logs(self) -> list[LogEntry]:
        if not self.is_available():
            return []
        raw = self.store.get_item(LOGS_KEY)
        if not raw:
            return []
        try:
            rows = json.loads(raw)
        except json.JSONDecodeError:
            _logger.warning("Stored logs are not valid JSON; treating as empty")
            return []
        if not isinstance(rows, list):
            return []
        return _parse_rows(rows)

    def _write_logs(self, entries: list[LogEntry]) -> None:
        if not self.is_available():
            return
        self.store.set_item(
            LOGS_KEY, json.dumps([entry_to_row(entry) for entry in entries])
        )


def pin_from_secret(secret: str) -> str:
    """Return the last four characters of a secret."""
    return secret[-_PIN_LENGTH:]


def _parse_rows(rows: list[object]) -> list[LogEntry]:
    entries: list[LogEntry] = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        try:
            entries.append(entry_from_row(row))
        except (KeyError, TypeError, ValueError):
            _logger.warning("Skipping malformed log row: %s", row.get("id"))
    return entries


def _new_log_id() -> str:
    return f"log-{_now_ms()}-{uuid4().hex[:9]}"


def _now_ms() -> int:
    return int(time.time() * 1000)
