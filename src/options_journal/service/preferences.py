"""Saved account names and watchlist tickers, kept per owner."""

from __future__ import annotations

from typing import Iterable

from options_journal.core.errors import TradeValidationError
from options_journal.core.models import TradeRecord
from options_journal.storage.kv_store import KeyValueStore

ACCOUNTS_KEY = "saved_accounts"
WATCHLIST_KEY = "watchlist_tickers"


class SavedAccounts:
    def __init__(self, kv: KeyValueStore, owner_id: str):
        self.kv = kv
        self.owner_id = owner_id

    def list(self) -> list[str]:
        return list(self.kv.get(self.owner_id, ACCOUNTS_KEY, []))

    def add(self, name: str) -> bool:
        """Remember an account name. Returns False for blanks and duplicates."""
        name = (name or "").strip()
        accounts = self.list()
        if not name or name in accounts:
            return False
        accounts.append(name)
        self.kv.set(self.owner_id, ACCOUNTS_KEY, accounts)
        return True

    def remove(self, name: str) -> bool:
        accounts = self.list()
        if name not in accounts:
            return False
        accounts.remove(name)
        self.kv.set(self.owner_id, ACCOUNTS_KEY, accounts)
        return True


class Watchlist:
    def __init__(self, kv: KeyValueStore, owner_id: str):
        self.kv = kv
        self.owner_id = owner_id

    def list(self) -> list[str]:
        return list(self.kv.get(self.owner_id, WATCHLIST_KEY, []))

    def contains(self, ticker: str) -> bool:
        return ticker.strip().upper() in self.list()

    def add(self, ticker: str) -> str:
        symbol = (ticker or "").strip().upper()
        if not symbol:
            raise TradeValidationError("Ticker is required", ["ticker"])
        tickers = self.list()
        if symbol in tickers:
            raise TradeValidationError(f"{symbol} is already in the watch list", ["ticker"])
        tickers.append(symbol)
        self.kv.set(self.owner_id, WATCHLIST_KEY, tickers)
        return symbol

    def remove(self, ticker: str) -> bool:
        symbol = ticker.strip().upper()
        tickers = self.list()
        if symbol not in tickers:
            return False
        tickers.remove(symbol)
        self.kv.set(self.owner_id, WATCHLIST_KEY, tickers)
        return True

    def tickers(self, trades: Iterable[TradeRecord] = ()) -> list[str]:
        """Sorted union of traded tickers and manually added ones."""
        traded = [t.ticker.upper() for t in trades]
        return sorted(set(traded) | set(self.list()))
