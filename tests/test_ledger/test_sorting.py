"""Tests for type-aware stable sorting."""

from __future__ import annotations

from datetime import date

import pytest

from options_journal.core.enums import SortDirection
from options_journal.ledger.sorting import sort_trades


def ids(records):
    return [t.id for t in records]


def test_dates_sort_by_calendar_value(make_trade):
    trades = [
        make_trade(id="b", trading_date="2025-03-10"),
        make_trade(id="a", trading_date="2/9/2025"),
        make_trade(id="c", trading_date=date(2025, 12, 1)),
    ]
    assert ids(sort_trades(trades, "trading_date", "asc")) == ["a", "b", "c"]
    assert ids(sort_trades(trades, "trading_date", SortDirection.DESC)) == ["c", "b", "a"]


def test_equal_keys_keep_input_order(make_trade):
    trades = [
        make_trade(id="x", trading_date="2025-03-10"),
        make_trade(id="y", trading_date="03/10/2025"),
        make_trade(id="z", trading_date="2025-01-01"),
    ]
    assert ids(sort_trades(trades, "trading_date", "asc")) == ["z", "x", "y"]
    assert ids(sort_trades(trades, "trading_date", "desc")) == ["x", "y", "z"]


def test_text_is_case_insensitive(make_trade):
    trades = [
        make_trade(id="1", account="robinhood"),
        make_trade(id="2", account="SAE"),
        make_trade(id="3", account="Alpha"),
    ]
    assert ids(sort_trades(trades, "account", "asc")) == ["3", "1", "2"]


def test_numeric_missing_values_sort_as_zero(make_trade):
    trades = [
        make_trade(id="pos", realized_pl=10),
        make_trade(id="none", realized_pl=None),
        make_trade(id="neg", realized_pl=-5),
    ]
    assert ids(sort_trades(trades, "realized_pl", "asc")) == ["neg", "none", "pos"]


def test_missing_dates_sort_first_ascending(make_trade):
    trades = [
        make_trade(id="dated", expiration_date=date(2025, 1, 17)),
        make_trade(id="undated", expiration_date=None),
    ]
    assert ids(sort_trades(trades, "expiration_date", "asc")) == ["undated", "dated"]


def test_status_sorts_as_text(make_trade):
    trades = [make_trade(id="o"), make_trade(id="c", status="closed")]
    assert ids(sort_trades(trades, "status", "asc")) == ["c", "o"]
    assert ids(sort_trades(trades, "status", "desc")) == ["o", "c"]


def test_does_not_mutate_input(make_trade):
    trades = [make_trade(id="b", strike_price=2), make_trade(id="a", strike_price=1)]
    sort_trades(trades, "strike_price", "asc")
    assert ids(trades) == ["b", "a"]


def test_unknown_field_rejected(make_trade):
    with pytest.raises(ValueError):
        sort_trades([make_trade()], "colour", "asc")

