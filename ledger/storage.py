"""Persistence utilities mirroring each entry as one JSON file."""

from __future__ import annotations

import json
import logging
import re
from decimal import Decimal
from pathlib import Path
from typing import List, Set

from .exceptions import CorruptStateError, PersistenceError, StoreInitError, ValidationError
from .models import Entry

logger = logging.getLogger(__name__)

ROOT_DIRNAME = "expenses"
FILENAME_PATTERN = re.compile(r"^expense-(\d+)\.json$")


class EntryStore:
    """File-based storage writing ``expense-<id>.json`` under ``<base>/expenses``."""

    def __init__(self, base_path: Path) -> None:
        self._root = Path(base_path) / ROOT_DIRNAME
        self._files: Set[Path] = set()
        if self._root.exists() and not self._root.is_dir():
            raise StoreInitError(f"Root must be a directory: {self._root.resolve()}")
        try:
            self._root.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreInitError(
                f"Cannot create the root expenses directory: {self._root.resolve()}"
            ) from exc

    def load_all(self) -> List[Entry]:
        """Read every persisted entry, failing on the first file that cannot be parsed."""
        found = []
        for path in self._root.iterdir():
            match = FILENAME_PATTERN.fullmatch(path.name)
            if match is None or not path.is_file():
                continue
            found.append((int(match.group(1)), path))

        entries: List[Entry] = []
        for file_id, path in sorted(found):
            entries.append(self._read(path, file_id))
            self._files.add(path)
        logger.debug("Loaded %d entries from %s", len(entries), self._root)
        return entries

    def save(self, entry: Entry) -> None:
        path = self.path_for(entry.id)
        temp_path = path.with_suffix(path.suffix + ".tmp")
        try:
            with temp_path.open("w", encoding="utf-8") as handle:
                json.dump(entry.to_dict(), handle, ensure_ascii=False)
                handle.flush()
            # Use replace for atomic move on POSIX; a crash never leaves a half-written entry.
            temp_path.replace(path)
        except OSError as exc:
            raise PersistenceError(f"Unable to write to {path}") from exc
        self._files.add(path)
        logger.debug("Saved entry %d to %s", entry.id, path)

    def delete(self, entry: Entry) -> None:
        path = self.path_for(entry.id)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise PersistenceError(f"Unable to remove {path}") from exc
        self._files.discard(path)
        logger.debug("Removed entry %d (%s)", entry.id, path)

    def path_for(self, entry_id: int) -> Path:
        return self._root / f"expense-{entry_id}.json"

    def _read(self, path: Path, file_id: int) -> Entry:
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise CorruptStateError(f"Unable to read from {path}") from exc
        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CorruptStateError(f"{path.name} is not valid UTF-8: {raw!r}") from exc

        # expense-01.json would shadow expense-1.json; only the canonical name is accepted.
        if path.name != self.path_for(file_id).name:
            raise CorruptStateError(
                f"{path.name} is not the canonical name for entry {file_id}: {content!r}"
            )
        try:
            payload = json.loads(content, parse_float=Decimal)
            if not isinstance(payload, dict):
                raise ValidationError("expected a JSON object")
            entry = Entry.from_dict(payload)
        except (ValueError, KeyError, TypeError) as exc:
            # json.JSONDecodeError and ValidationError are both ValueErrors.
            raise CorruptStateError(
                f"Cannot deserialize {path.name}: {content!r}"
            ) from exc
        if entry.id != file_id:
            raise CorruptStateError(
                f"Entry id {entry.id} does not match file name {path.name}: {content!r}"
            )
        return entry

    @property
    def root(self) -> Path:
        return self._root

    @property
    def known_files(self) -> Set[Path]:
        return set(self._files)
