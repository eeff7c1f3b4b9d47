"""Tests for the JSON file store."""

import json
from datetime import date
from decimal import Decimal

import pytest

from ledger.exceptions import CorruptStateError, StoreInitError
from ledger.models import Entry
from ledger.storage import EntryStore


def test_creates_root_directory(tmp_path):
    store = EntryStore(tmp_path / "nested")
    assert store.root == tmp_path / "nested" / "expenses"
    assert store.root.is_dir()


def test_root_must_be_a_directory(tmp_path):
    (tmp_path / "expenses").write_text("not a directory", encoding="utf-8")
    with pytest.raises(StoreInitError):
        EntryStore(tmp_path)


def test_save_writes_one_json_object(store):
    entry = Entry(7, "Rent", date(2024, 6, 5), "1200.00")
    store.save(entry)

    path = store.root / "expense-7.json"
    assert json.loads(path.read_text(encoding="utf-8")) == {
        "id": 7,
        "date": "2024-06-05",
        "description": "Rent",
        "amount": 1200.0,
    }
    assert store.known_files == {path}
    assert not path.with_suffix(".json.tmp").exists()


def test_save_overwrites_previous_content(store):
    entry = Entry(1, "Coffee", date(2024, 6, 1), "3.50")
    store.save(entry)
    entry.set_amount("4.25")
    store.save(entry)

    reloaded = EntryStore(store.root.parent).load_all()
    assert [e.amount for e in reloaded] == [Decimal("4.25")]


def test_round_trip_preserves_fields(store):
    original = Entry(3, "Café au lait", date(2024, 3, 9), "2.75")
    store.save(original)

    (loaded,) = EntryStore(store.root.parent).load_all()
    assert loaded.id == original.id
    assert loaded.date == original.date
    assert loaded.description == original.description
    assert loaded.amount == original.amount


def test_delete_removes_file_and_tolerates_absence(store):
    entry = Entry(2, "Taxi", date(2024, 6, 2), 18)
    store.save(entry)
    store.delete(entry)
    assert not store.path_for(2).exists()
    assert store.known_files == set()

    store.delete(entry)


def test_load_ignores_unrelated_files(store):
    (store.root / "notes.txt").write_text("hello", encoding="utf-8")
    (store.root / "expense-x.json").write_text("{}", encoding="utf-8")
    (store.root / "expense-1.json.tmp").write_text("{", encoding="utf-8")
    store.save(Entry(1, "Coffee", date(2024, 6, 1), 3))

    assert [entry.id for entry in store.load_all()] == [1]


def test_load_returns_entries_sorted_by_id(store):
    for entry_id in (10, 2, 5):
        store.save(Entry(entry_id, "x", date(2024, 1, 1), 1))
    assert [entry.id for entry in store.load_all()] == [2, 5, 10]


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        "[]",
        '{"id": 1, "date": "2024-06-01", "description": "Coffee"}',
        '{"id": 1, "date": "yesterday", "description": "Coffee", "amount": 1}',
        '{"id": 1, "date": "2024-06-01", "description": "Coffee", "amount": -1}',
        '{"id": 2, "date": "2024-06-01", "description": "Coffee", "amount": 1}',
    ],
)
def test_corrupt_file_is_fatal(store, content):
    (store.root / "expense-1.json").write_text(content, encoding="utf-8")
    with pytest.raises(CorruptStateError) as excinfo:
        store.load_all()
    assert "expense-1.json" in str(excinfo.value)


def test_id_mismatch_error_quotes_content(store):
    content = '{"id": 2, "date": "2024-06-01", "description": "Coffee", "amount": 1}'
    (store.root / "expense-1.json").write_text(content, encoding="utf-8")
    with pytest.raises(CorruptStateError) as excinfo:
        store.load_all()
    assert "expense-1.json" in str(excinfo.value)
    assert '"description": "Coffee"' in str(excinfo.value)


def test_parse_error_quotes_content(store):
    (store.root / "expense-1.json").write_text('{"id": 1, "oops"', encoding="utf-8")
    with pytest.raises(CorruptStateError) as excinfo:
        store.load_all()
    assert '"oops"' in str(excinfo.value)


def test_invalid_utf8_is_fatal(store):
    (store.root / "expense-1.json").write_bytes(b'{"description": "\xff"}')
    with pytest.raises(CorruptStateError) as excinfo:
        store.load_all()
    assert "expense-1.json" in str(excinfo.value)
    assert "\\xff" in str(excinfo.value)


def test_non_canonical_name_is_fatal(store):
    store.save(Entry(1, "A", date(2024, 6, 1), 1))
    padded = '{"id": 1, "date": "2024-06-02", "description": "B", "amount": 2}'
    (store.root / "expense-01.json").write_text(padded, encoding="utf-8")
    with pytest.raises(CorruptStateError) as excinfo:
        store.load_all()
    assert "expense-01.json" in str(excinfo.value)
    assert '"description": "B"' in str(excinfo.value)


def test_oversized_amount_on_disk_is_fatal(store):
    content = '{"id": 1, "date": "2024-06-01", "description": "Big", "amount": 1e30}'
    (store.root / "expense-1.json").write_text(content, encoding="utf-8")
    with pytest.raises(CorruptStateError):
        store.load_all()


@pytest.mark.parametrize("amount", ["9999999999999.99", "1234567890123.45", "0.01", "0"])
def test_round_trip_preserves_amount_exactly(store, amount):
    store.save(Entry(1, "Edge", date(2024, 6, 1), amount))
    (loaded,) = EntryStore(store.root.parent).load_all()
    assert loaded.amount == Decimal(amount)
