"""Domain-specific exceptions for the expense ledger."""

from typing import Dict


class ValidationError(ValueError):
    """Raised when provided data does not meet validation requirements."""


class StateError(RuntimeError):
    """Raised when an operation is not allowed in the current lifecycle state."""


class RecordNotFoundError(LookupError):
    """Raised when an entry cannot be located."""


class PersistenceError(IOError):
    """Raised when the persistence layer encounters unrecoverable issues."""


class StoreInitError(PersistenceError):
    """Raised when the storage root cannot be prepared."""


class CorruptStateError(PersistenceError):
    """Raised when a persisted entry file cannot be parsed."""


class FlushError(PersistenceError):
    """Raised after a flush in which one or more entries failed to sync."""

    def __init__(self, failures: Dict[int, Exception]) -> None:
        ids = ", ".join(str(entry_id) for entry_id in sorted(failures))
        super().__init__(f"Failed to sync entries: {ids}")
        self.failures = failures
