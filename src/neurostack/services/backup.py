"""Backup file parsing and serialization."""

import json
from datetime import date

from neurostack.domain.errors import InvalidBackupError

_DATA_KEYS = ("logs", "compounds", "stackPresets", "logEntries")


def load_backup(text: str) -> dict[str, object]:
    """Parse a backup file produced by either storage mode or the pharmacy."""
    try:
        bundle = json.loads(text)
    except json.JSONDecodeError as exc:
        raise InvalidBackupError("Failed to parse backup file") from exc
    if not isinstance(bundle, dict) or not any(key in bundle for key in _DATA_KEYS):
        raise InvalidBackupError("Invalid backup file format")
    if "logs" in bundle and not isinstance(bundle["logs"], list):
        raise InvalidBackupError("Invalid backup file format")
    return bundle


def dump_backup(bundle: dict[str, object]) -> str:
    return json.dumps(bundle, indent=2, ensure_ascii=False)


def backup_filename(today: date) -> str:
    return f"neurostack_backup_{today.isoformat()}.json"
