"""On-device key-value storage backed by one file per key."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


class KeyValueStore(Protocol):
    """String key-value storage, the device-local persistence primitive."""

    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None when the key is absent."""

    def set_item(self, key: str, value: str) -> None:
        """Store a value under a key."""

    def remove_item(self, key: str) -> None:
        """Remove a key if present."""


@dataclass
class FileKeyValueStore(KeyValueStore):
    """Stores each key as a file under a data directory.

    Writes go through a temporary file and an atomic rename so a crash
    never leaves a half-written blob. Errors from the filesystem (missing
    permissions, read-only mounts) surface as ``OSError``.
    """

    root: Path

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp_path = path.with_name(f"{path.name}.tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def _path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key.startswith("."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.root / key
