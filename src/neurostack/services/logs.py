"""Server-side log writes scoped to a verified user."""

import logging
from dataclasses import dataclass
from typing import Protocol

from neurostack.domain.entries import (
    LogEntry,
    SessionUser,
    draft_to_row,
    patch_to_row,
)
from neurostack.domain.errors import LogNotFoundError
from neurostack.services.validation import parse_log_draft, parse_log_patch

_logger = logging.getLogger(__name__)


class LogRepository(Protocol):
    """Persistence interface for the logs table."""

    def insert_log(self, user_id: str, fields: dict[str, object]) -> LogEntry:
        """Insert a row owned by ``user_id`` and return it."""

    def update_log(
        self, user_id: str, log_id: str, fields: dict[str, object]
    ) -> LogEntry | None:
        """Update a row owned by ``user_id``; None when nothing matched."""


class IdentityVerifier(Protocol):
    """Resolves an access token to the user it belongs to."""

    def verify(self, access_token: str) -> SessionUser | None:
        """Return the token's user, or None for an invalid/expired token."""


@dataclass
class LogService:
    """Validates payloads and stamps ownership before touching storage."""

    repository: LogRepository

    def create_log(self, user: SessionUser, payload: dict[str, object]) -> LogEntry:
        """Insert a log for ``user``; any client-sent owner is ignored."""
        draft = parse_log_draft(_editable(payload))
        entry = self.repository.insert_log(user.id, draft_to_row(draft))
        _logger.info("Created log %s", entry.id)
        return entry

    def update_log(
        self, user: SessionUser, log_id: str, patch: dict[str, object]
    ) -> LogEntry:
        """Update a log owned by ``user``; foreign ids look missing."""
        fields = parse_log_patch(_editable(patch))
        entry = self.repository.update_log(user.id, log_id, patch_to_row(fields))
        if entry is None:
            raise LogNotFoundError("Log not found")
        return entry


def _editable(payload: dict[str, object]) -> dict[str, object]:
    return {
        key: value
        for key, value in payload.items()
        if key not in {"id", "user_id", "created_at"}
    }
