"""Shared test fixtures."""

from __future__ import annotations

from datetime import date

import pytest

from options_journal.core.models import TradeRecord
from options_journal.service.journal import TradeJournal
from options_journal.storage.kv_store import KeyValueStore
from options_journal.storage.trade_store import SqliteTradeStore


@pytest.fixture
def make_trade():
    """Factory for valid trade records with overridable fields."""

    def _make(**overrides) -> TradeRecord:
        data = {
            "owner_id": "alice",
            "ticker": "AAPL",
            "account": "SAE",
            "option_type": "Call option",
            "contracts": 1,
            "cost": 2.5,
            "strike_price": 150.0,
            "trading_date": date(2025, 3, 3),
            "expiration_date": date(2025, 4, 17),
        }
        data.update(overrides)
        if data.get("status") == "closed" and "closed_date" not in data:
            data["closed_date"] = date(2025, 3, 20)
        return TradeRecord(**data)

    return _make


@pytest.fixture
def store(tmp_path):
    s = SqliteTradeStore(tmp_path / "journal.db")
    yield s
    s.close()


@pytest.fixture
def kv(tmp_path):
    return KeyValueStore(tmp_path / "kv")


@pytest.fixture
def journal(store, kv):
    return TradeJournal(store=store, owner_id="alice", kv=kv)
