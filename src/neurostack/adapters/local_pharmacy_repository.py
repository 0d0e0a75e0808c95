"""Device-local persistence for the pharmacy state."""

import json
import logging
from dataclasses import dataclass

from neurostack.adapters.file_store import KeyValueStore
from neurostack.domain.pharmacy import (
    DEFAULT_SETTINGS,
    PharmacyState,
    state_from_dict,
    state_to_dict,
)
from neurostack.services.pharmacy import PharmacyRepository

STATE_KEY = "neurostack-storage"
_STATE_VERSION = 0

_logger = logging.getLogger(__name__)


@dataclass
class LocalPharmacyRepository(PharmacyRepository):
    """Keeps the whole pharmacy as one JSON blob in the key-value store."""

    store: KeyValueStore

    def load_state(self) -> PharmacyState:
        """Return the stored state, or an empty one with default settings."""
        raw = self.store.get_item(STATE_KEY)
        if not raw:
            return PharmacyState(settings=dict(DEFAULT_SETTINGS))
        try:
            envelope = json.loads(raw)
            state = state_from_dict(envelope.get("state") or {})
        except (json.JSONDecodeError, AttributeError, KeyError, TypeError, ValueError):
            _logger.warning("Stored pharmacy state is unreadable; starting empty")
            return PharmacyState(settings=dict(DEFAULT_SETTINGS))
        return state

    def save_state(self, state: PharmacyState) -> None:
        """Rewrite the whole blob."""
        envelope = {"state": state_to_dict(state), "version": _STATE_VERSION}
        self.store.set_item(STATE_KEY, json.dumps(envelope))
