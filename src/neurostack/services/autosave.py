"""Debounced autosave for the open logging form."""

import asyncio
import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from neurostack.domain.entries import LogEntry, draft_from_entry, draft_to_row
from neurostack.services.storage import StorageAdapter
from neurostack.services.validation import (
    FieldError,
    parse_log_draft,
    validate_log_entry,
)

STATUS_IDLE = "idle"
STATUS_SAVING = "saving"
STATUS_SAVED = "saved"

_logger = logging.getLogger(__name__)


@dataclass
class LogAutosaver:
    """Saves form drafts after a quiet period, one request at a time.

    Every ``update`` restarts the debounce timer. When it fires, the draft
    goes into a single pending slot; saves run strictly one after another,
    and a draft that fires while a save is in flight replaces whatever was
    pending, so only the latest state is written once the in-flight save
    returns. The first save creates the entry, later ones update it.
    """

    adapter: StorageAdapter
    delay_seconds: float = 1.0
    on_saved: Callable[[LogEntry], None] | None = None
    log_id: str | None = None
    status: str = STATUS_IDLE
    errors: list[FieldError] = field(default_factory=list)
    last_saved: LogEntry | None = None
    _draft: dict[str, object] | None = None
    _pending: dict[str, object] | None = None
    _timer: asyncio.Task | None = None
    _worker: asyncio.Task | None = None

    def update(self, draft: dict[str, object]) -> None:
        """Record the latest form state and restart the debounce timer."""
        self._draft = dict(draft)
        self._cancel_timer()
        self._timer = asyncio.create_task(self._fire_after_delay())

    async def flush(self) -> LogEntry | None:
        """Save the current draft now instead of waiting for the timer."""
        self._cancel_timer()
        self._enqueue()
        await self.wait_idle()
        return self.last_saved

    async def wait_idle(self) -> None:
        """Wait until no timer is pending and no save is in flight."""
        while True:
            if self._timer is not None and not self._timer.done():
                with contextlib.suppress(asyncio.CancelledError):
                    await self._timer
            elif self._worker is not None and not self._worker.done():
                await self._worker
            else:
                return

    def close(self) -> None:
        """Drop a pending timer; an in-flight save still completes."""
        self._cancel_timer()

    async def _fire_after_delay(self) -> None:
        await asyncio.sleep(self.delay_seconds)
        self._enqueue()

    def _enqueue(self) -> None:
        if self._draft is None:
            return
        self._pending = self._draft
        if self._worker is None or self._worker.done():
            self._worker = asyncio.create_task(self._drain())

    async def _drain(self) -> None:
        while self._pending is not None:
            draft, self._pending = self._pending, None
            await self._save(draft)

    async def _save(self, draft: dict[str, object]) -> None:
        if not draft.get("compounds"):
            return
        self.errors = validate_log_entry(draft)
        if self.errors:
            return
        parsed = parse_log_draft(draft)
        self.status = STATUS_SAVING
        try:
            if self.log_id is None:
                entry = await self.adapter.create_log(parsed)
                self.log_id = entry.id
            else:
                entry = await self.adapter.update_log(
                    self.log_id, draft_to_row(parsed)
                )
        except Exception:
            _logger.exception("Error saving log")
            self.status = STATUS_IDLE
            return
        self.last_saved = entry
        self.status = STATUS_SAVED
        if self.on_saved is not None:
            self.on_saved(entry)

    def _cancel_timer(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()


async def copy_last_log(
    adapter: StorageAdapter, now: datetime | None = None
) -> dict[str, object] | None:
    """Prefill a draft from the most recent log, without its notes."""
    last = await adapter.get_last_log()
    if last is None:
        return None
    draft = draft_to_row(draft_from_entry(last))
    draft["notes"] = None
    draft["occurred_at"] = (now or datetime.now(tz=UTC)).isoformat()
    return draft
