"""Data model for ledger entries."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict

from .exceptions import StateError
from .validators import (
    ensure_same_year,
    parse_amount,
    validate_date,
    validate_id,
    validate_str,
)

__all__ = ["Entry"]

TABLE_HEADER = "ID  DATE        DESCRIPTION   AMOUNT"


class Entry:
    """One recorded expense.

    The id is fixed at construction. Description, date and amount may change
    until the entry is deleted; deletion is a one-way transition and every
    later mutation raises :class:`StateError`.
    """

    __slots__ = ("_id", "_description", "_date", "_amount", "_deleted")

    def __init__(self, id: int, description: str, date: date, amount: object) -> None:
        self._id = validate_id(id)
        self._amount = parse_amount(amount)
        self._description = validate_str(description, "description")
        self._date = validate_date(date)
        self._deleted = False

    @property
    def id(self) -> int:
        return self._id

    @property
    def description(self) -> str:
        return self._description

    @property
    def date(self) -> date:
        return self._date

    @property
    def amount(self) -> Decimal:
        return self._amount

    @property
    def deleted(self) -> bool:
        return self._deleted

    def set_amount(self, amount: object) -> None:
        self._ensure_active()
        self._amount = parse_amount(amount)

    def set_description(self, description: str) -> None:
        # Blank descriptions are only rejected when the entry is created.
        self._ensure_active()
        self._description = validate_str(description, "description")

    def set_date(self, new_date: date) -> None:
        self._ensure_active()
        candidate = validate_date(new_date)
        ensure_same_year(candidate, self._date)
        self._date = candidate

    def delete(self) -> None:
        if self._deleted:
            raise StateError(f"Entry {self._id} is already deleted")
        self._deleted = True

    def _ensure_active(self) -> None:
        if self._deleted:
            raise StateError(f"Entry {self._id} does not exist anymore")

    def to_dict(self) -> Dict[str, Any]:
        """Serialise the entry to JSON-friendly natives."""
        return {
            "id": self._id,
            "date": self._date.isoformat(),
            "description": self._description,
            "amount": float(self._amount),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        """Hydrate an Entry from JSON-native data."""
        return cls(
            id=data["id"],
            description=data["description"],
            date=data["date"],
            amount=data["amount"],
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entry):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"Entry(id={self._id!r}, description={self._description!r}, "
            f"date={self._date.isoformat()!r}, amount={self._amount!r}, deleted={self._deleted!r})"
        )

    def __str__(self) -> str:
        row = f"{self._id:<3} {self._date.isoformat()}  {self._description:<13} ${self._amount:.2f}"
        return f"{TABLE_HEADER}\n{row}"
