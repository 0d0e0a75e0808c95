"""Error types shared across storage backends and services."""


class NeurostackError(Exception):
    """Base class for recoverable application errors."""


class EntryValidationError(NeurostackError):
    """A log entry failed schema validation."""

    def __init__(self, errors: list) -> None:
        self.errors = errors
        fields = ", ".join(error.field for error in errors) or "entry"
        super().__init__(f"Invalid log entry: {fields}")


class AuthError(NeurostackError):
    """Bad credentials or missing session."""


class StorageUnavailableError(NeurostackError):
    """The chosen storage backend cannot be used."""


class StorageNotReadyError(NeurostackError):
    """The storage selector has not picked a backend yet."""


class LogNotFoundError(NeurostackError):
    """The log does not exist or is not owned by the caller."""


class InvalidBackupError(NeurostackError):
    """A backup file could not be parsed or has no recognized data."""
