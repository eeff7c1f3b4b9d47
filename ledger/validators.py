"""Validation helpers shared across the ledger and its entries."""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from .exceptions import ValidationError

# Fifteen significant digits: the largest two-place amount a JSON number carries exactly.
MAX_AMOUNT = Decimal("9999999999999.99")


def _quantize_two_decimals(amount: Decimal) -> Decimal:
    """Round the amount to two decimal places using HALF_UP rounding."""
    return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


def parse_amount(raw: object, field: str = "amount") -> Decimal:
    """Convert raw input to a non-negative Decimal with exactly two fraction digits."""
    if isinstance(raw, bool):
        raise ValidationError(f"{field} must be a numeric value")
    try:
        amount = Decimal(str(raw))
    except (InvalidOperation, TypeError) as exc:  # type: ignore[arg-type]
        raise ValidationError(f"{field} must be a numeric value") from exc

    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite value")
    if amount < 0:
        raise ValidationError(f"{field} cannot be negative: {raw}")
    if amount > MAX_AMOUNT:
        raise ValidationError(f"{field} cannot exceed {MAX_AMOUNT}: {raw}")

    return _quantize_two_decimals(amount)


def validate_id(value: object, field: str = "id") -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    if value < 0:
        raise ValidationError(f"Illegal {field} value: {value}")
    return value


def validate_str(value: object, field: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{field} must be a string")
    return value


def validate_required_str(value: object, field: str, max_length: Optional[int] = None) -> str:
    text = validate_str(value, field)
    if not text.strip():
        raise ValidationError(f"{field} cannot be blank")
    if max_length is not None and len(text) > max_length:
        raise ValidationError(f"{field} must be at most {max_length} characters")
    return text


def validate_date(value: object, field: str = "date") -> date:
    """Accept a date (not a datetime) or an ISO 8601 ``YYYY-MM-DD`` string."""
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValidationError(f"{field} must be an ISO 8601 date") from exc
    if isinstance(value, date):
        # datetime is a date subclass; keep only the calendar part.
        return date(value.year, value.month, value.day)
    raise ValidationError(f"{field} must be a date or ISO 8601 string")


def ensure_same_year(candidate: date, reference: date) -> None:
    if candidate.year != reference.year:
        raise ValidationError(
            f"Cannot move a date from {reference.year} to another year ({candidate.year})"
        )


def ensure_current_year(candidate: date, today: date) -> None:
    if candidate.year != today.year:
        raise ValidationError(
            f"Cannot use a date before or after the year {today.year}: {candidate.isoformat()}"
        )


def validate_month(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("month must be an integer")
    if not 1 <= value <= 12:
        raise ValidationError(f"month must be between 1 and 12: {value}")
    return value
