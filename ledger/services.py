"""The ledger: sole mutation and query surface over expense entries."""

from __future__ import annotations

import logging
import threading
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional, Tuple

from .exceptions import FlushError, PersistenceError, RecordNotFoundError, StateError
from .models import Entry
from .storage import EntryStore
from .validators import (
    ensure_current_year,
    parse_amount,
    validate_date,
    validate_month,
    validate_required_str,
)

logger = logging.getLogger(__name__)


class Ledger:
    """Holds entries keyed by id and mirrors them to an :class:`EntryStore`.

    Changes live in memory only; they reach the store when the ledger is
    flushed or closed. Anything created after the last flush is lost if the
    process dies before ``close()``.
    """

    def __init__(self, store: EntryStore, *, today: Callable[[], date] = date.today) -> None:
        self._store = store
        self._today = today
        self._entries: Dict[int, Entry] = {}
        self._lock = threading.RLock()
        self._closed = False
        self._next_id = 0
        self._load()  # Hydrate in-memory cache from persistence on construction.

    @classmethod
    def open(cls, base_path: Path, **kwargs) -> "Ledger":
        return cls(EntryStore(Path(base_path)), **kwargs)

    # Public API -----------------------------------------------------------
    def create(self, description: str, amount: object, date: Optional[date] = None) -> Entry:
        """Register a new entry dated today unless ``date`` is given."""
        description = validate_required_str(description, "description")
        value = parse_amount(amount)
        today = self._today()
        entry_date = today if date is None else validate_date(date)
        ensure_current_year(entry_date, today)

        with self._lock:
            if self._closed:
                raise StateError("Ledger is closed")
            entry = Entry(self._next_id, description, entry_date, value)
            self._next_id += 1
            self._entries[entry.id] = entry
        return entry

    def get(self, entry_id: int) -> Optional[Entry]:
        """Return the entry, deleted or not, or None when the id is unknown."""
        return self._entries.get(entry_id)

    def require(self, entry_id: int) -> Entry:
        entry = self.get(entry_id)
        if entry is None:
            raise RecordNotFoundError(f"No expense for id {entry_id}")
        return entry

    def get_all(self) -> Tuple[Entry, ...]:
        with self._lock:
            return tuple(entry for entry in self._entries.values() if not entry.deleted)

    def summary(self, month: Optional[int] = None) -> Decimal:
        """Sum the amounts of live entries, optionally only those dated in ``month``.

        The month filter ignores the year, so a ledger spanning a year
        boundary adds up e.g. every January it holds.
        """
        entries: Iterable[Entry] = self.get_all()
        if month is not None:
            month = validate_month(month)
            entries = (entry for entry in entries if entry.date.month == month)
        return sum((entry.amount for entry in entries), start=Decimal("0.00"))

    def _load(self) -> None:
        """Load existing entries from persistence; only called while constructing."""
        entries = self._store.load_all()
        with self._lock:
            self._entries = {entry.id: entry for entry in entries}
            # Seed past the highest persisted id so ids of removed entries are never handed out again.
            self._next_id = max(self._next_id, max(self._entries, default=-1) + 1)

    def flush(self) -> None:
        """Write every live entry to the store and remove the files of deleted ones.

        Every entry is attempted; failures are logged and reported together
        once the pass is complete.
        """
        failures: Dict[int, Exception] = {}
        with self._lock:
            entries = list(self._entries.values())
        for entry in entries:
            try:
                if entry.deleted:
                    self._store.delete(entry)
                else:
                    self._store.save(entry)
            except PersistenceError as exc:
                logger.error("Cannot sync entry %d: %s", entry.id, exc, exc_info=exc)
                failures[entry.id] = exc
        if failures:
            raise FlushError(failures)
        logger.debug("Flushed %d entries to %s", len(entries), self._store.root)

    def close(self) -> None:
        """Flush once; later calls do nothing."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self.flush()

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def store(self) -> EntryStore:
        return self._store

    def __enter__(self) -> "Ledger":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
