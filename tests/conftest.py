from datetime import date

import pytest

from ledger.services import Ledger
from ledger.storage import EntryStore

TODAY = date(2024, 6, 1)


@pytest.fixture
def store(tmp_path):
    return EntryStore(tmp_path)


@pytest.fixture
def ledger(store):
    return Ledger(store, today=lambda: TODAY)


@pytest.fixture
def reopen(tmp_path):
    """Build a fresh ledger over the same directory, as a new process would."""

    def _reopen():
        return Ledger.open(tmp_path, today=lambda: TODAY)

    return _reopen
