"""Console interface for the expense ledger."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List, Optional

from ledger.exceptions import (
    PersistenceError,
    RecordNotFoundError,
    StateError,
    ValidationError,
)
from ledger.services import Ledger

DATA_DIR_ENV = "EXPENSE_LEDGER_HOME"

# Tried in order; two-digit years are read as 20YY.
DATE_FORMATS = ("%Y-%m-%d", "%d-%m-%Y", "%d/%m/%Y", "%d-%m-%y")

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    text = value.strip()
    for fmt in DATE_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt).date()
        except ValueError:
            continue
        if fmt.endswith("%y"):
            parsed = parsed.replace(year=2000 + parsed.year % 100)
        return parsed
    raise argparse.ArgumentTypeError(
        f"Invalid date '{value}'. Expected YYYY-MM-DD, DD-MM-YYYY, DD/MM/YYYY or DD-MM-YY."
    )


def _parse_amount(value: str) -> Decimal:
    try:
        return Decimal(value)
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError("Amount must be a numeric value") from exc


def _parse_month(value: str) -> int:
    try:
        month = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("Month must be a number between 1 and 12") from exc
    if not 1 <= month <= 12:
        raise argparse.ArgumentTypeError("Month must be a number between 1 and 12")
    return month


def _default_data_dir() -> Path:
    return Path(os.getenv(DATA_DIR_ENV) or Path.cwd())


def handle_add(args: argparse.Namespace, ledger: Ledger) -> None:
    entry = ledger.create(args.description, args.amount, args.date)
    print(f"Added successfully (ID: {entry.id})")


def handle_edit(args: argparse.Namespace, ledger: Ledger) -> None:
    entry = ledger.require(args.id)
    if args.description is not None:
        entry.set_description(args.description)
    if args.amount is not None:
        entry.set_amount(args.amount)
    if args.date is not None:
        entry.set_date(args.date)
    print("Expense updated:\n" + str(entry))


def handle_delete(args: argparse.Namespace, ledger: Ledger) -> None:
    entry = ledger.require(args.id)
    entry.delete()
    print(f"Successfully deleted: {entry.id}")


def handle_list(args: argparse.Namespace, ledger: Ledger) -> None:
    entries = ledger.get_all()
    if not entries:
        print("No expenses found.")
        return
    for entry in entries:
        print(entry)


def handle_show(args: argparse.Namespace, ledger: Ledger) -> None:
    entry = ledger.require(args.id)
    print(entry)
    if entry.deleted:
        print("(deleted)")


def handle_summary(args: argparse.Namespace, ledger: Ledger) -> None:
    print(f"${ledger.summary(args.month):.2f}")


HANDLERS = {
    "add": handle_add,
    "edit": handle_edit,
    "delete": handle_delete,
    "list": handle_list,
    "show": handle_show,
    "summary": handle_summary,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Expense Ledger CLI")
    parser.add_argument(
        "--data-dir",
        default=None,
        type=Path,
        help=f"Directory holding the expenses/ folder (default: ${DATA_DIR_ENV} or ./)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    add = subparsers.add_parser("add", help="Record a new expense")
    add.add_argument("description")
    add.add_argument("amount", type=_parse_amount)
    add.add_argument("--date", type=_parse_date, help="Defaults to today")

    edit = subparsers.add_parser("edit", help="Edit an existing expense")
    edit.add_argument("id", type=int)
    edit.add_argument("--description")
    edit.add_argument("--amount", type=_parse_amount)
    edit.add_argument("--date", type=_parse_date)

    delete = subparsers.add_parser("delete", help="Delete an expense")
    delete.add_argument("id", type=int)

    subparsers.add_parser("list", help="List expenses")

    show = subparsers.add_parser("show", help="Show one expense, deleted or not")
    show.add_argument("id", type=int)

    summary = subparsers.add_parser("summary", help="Total of all expenses")
    summary.add_argument("--month", type=_parse_month, help="Restrict to a month (1-12), any year")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )
    data_dir = args.data_dir if args.data_dir is not None else _default_data_dir()

    try:
        ledger = Ledger.open(data_dir)
    except PersistenceError as exc:
        print(f"Storage error: {exc}", file=sys.stderr)
        return 1

    status = 0
    try:
        HANDLERS[args.command](args, ledger)
    except ValidationError as exc:
        print(f"Validation error: {exc}", file=sys.stderr)
        status = 1
    except (RecordNotFoundError, StateError) as exc:
        print(str(exc), file=sys.stderr)
        status = 1
    finally:
        try:
            ledger.close()
        except PersistenceError as exc:
            logger.error("Flush failed: %s", exc)
            print(f"Storage error: {exc}", file=sys.stderr)
            status = 1
    return status


if __name__ == "__main__":
    raise SystemExit(main())
