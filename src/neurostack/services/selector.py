"""Chooses which storage backend the application uses."""

import logging
from dataclasses import dataclass

from neurostack.adapters.file_store import KeyValueStore
from neurostack.domain.errors import StorageNotReadyError
from neurostack.services.storage import (
    LOCAL_MODE,
    STORAGE_MODES,
    SUPABASE_MODE,
    StorageAdapter,
)

PREFERENCE_KEY = "storage-mode"

_logger = logging.getLogger(__name__)


@dataclass
class StorageSelector:
    """Picks a backend once and hands it to every consumer.

    Build one per application session and pass it explicitly to whatever
    composes the views. Consumers should check ``is_ready`` (or call
    ``initialize``) before touching ``adapter``.
    """

    local: StorageAdapter
    remote: StorageAdapter
    preferences: KeyValueStore
    _adapter: StorageAdapter | None = None
    _mode: str | None = None

    @property
    def is_ready(self) -> bool:
        return self._adapter is not None

    @property
    def adapter(self) -> StorageAdapter:
        if self._adapter is None:
            raise StorageNotReadyError("Storage backend has not been selected")
        return self._adapter

    @property
    def mode(self) -> str:
        if self._mode is None:
            raise StorageNotReadyError("Storage backend has not been selected")
        return self._mode

    def initialize(self) -> StorageAdapter:
        """Select the backend; later calls return the existing choice."""
        if self._adapter is not None:
            return self._adapter
        if self.remote.is_available() and self._preferred_mode() != LOCAL_MODE:
            self._select(SUPABASE_MODE)
        else:
            self._select(LOCAL_MODE)
        _logger.info("Storage mode selected: %s", self._mode)
        return self.adapter

    def switch_mode(self, mode: str) -> bool:
        """Switch backends if the target is available. Data is not migrated."""
        if mode not in STORAGE_MODES:
            raise ValueError(f"Unknown storage mode: {mode}")
        if not self._adapter_for(mode).is_available():
            _logger.warning("%s storage is not available, keeping current mode", mode)
            return False
        self._select(mode)
        try:
            self.preferences.set_item(PREFERENCE_KEY, mode)
        except OSError:
            _logger.warning("Could not persist storage mode preference")
        return True

    async def close(self) -> None:
        """Close both backends, whichever one is selected."""
        await self.local.close()
        await self.remote.close()

    def _select(self, mode: str) -> None:
        self._adapter = self._adapter_for(mode)
        self._mode = mode

    def _adapter_for(self, mode: str) -> StorageAdapter:
        return self.local if mode == LOCAL_MODE else self.remote

    def _preferred_mode(self) -> str | None:
        try:
            return self.preferences.get_item(PREFERENCE_KEY)
        except OSError:
            return None
