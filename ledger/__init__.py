"""Core ledger package: entries, JSON file persistence and the ledger itself."""

from .models import Entry
from .services import Ledger
from .storage import EntryStore
from .exceptions import (
    CorruptStateError,
    FlushError,
    PersistenceError,
    RecordNotFoundError,
    StateError,
    StoreInitError,
    ValidationError,
)

__all__ = [
    "Entry",
    "Ledger",
    "EntryStore",
    "CorruptStateError",
    "FlushError",
    "PersistenceError",
    "RecordNotFoundError",
    "StateError",
    "StoreInitError",
    "ValidationError",
]
