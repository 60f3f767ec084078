"""Trade lifecycle orchestration for one owner.

``TradeJournal`` ties the pure ledger functions to the record store: it
computes derived fields on create and edit, enforces the open/closed
lifecycle, and publishes a ``TradesChanged`` event after every successful
write so subscribed views can refresh.
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import IO, Any, Sequence

from pydantic import BaseModel, ValidationError

from options_journal.core.enums import SortDirection, TradeStatus
from options_journal.core.errors import QuoteError, TradeValidationError
from options_journal.core.models import TradeDraft, TradeRecord, TradesChanged
from options_journal.ledger.aggregator import TradeSummary, TradingPace, summarize, trading_pace
from options_journal.ledger.calculator import derive_fields, recalculate, resolve_option_type
from options_journal.ledger.events import TradeEvents
from options_journal.ledger.filters import TradeFilter, apply_filters
from options_journal.ledger.grouping import (
    PREFERRED_ACCOUNTS,
    AccountGroup,
    default_display_order,
    group_by_account,
)
from options_journal.ledger.sorting import sort_trades
from options_journal.market.quotes import Quote, QuoteProvider, get_quotes
from options_journal.service.csv_io import read_trades_csv, write_trades_csv
from options_journal.service.preferences import SavedAccounts
from options_journal.service.social import DEFAULT_FEED_LIMIT, ShareFeed, SharedTrade
from options_journal.storage.kv_store import KeyValueStore
from options_journal.storage.trade_store import TradeStore

logger = logging.getLogger(__name__)

# Lifecycle fields change only through close()/reopen().
_LIFECYCLE_FIELDS = frozenset({"status", "closed_date"})
EDITABLE_FIELDS = frozenset(TradeRecord.model_fields) - {"id", "owner_id"} - _LIFECYCLE_FIELDS


class Dashboard(BaseModel):
    summary: TradeSummary
    pace: TradingPace


class TradeJournal:
    """Owner-scoped facade over the trade store and ledger engine."""

    def __init__(
        self,
        store: TradeStore,
        owner_id: str,
        events: TradeEvents | None = None,
        kv: KeyValueStore | None = None,
        quotes: QuoteProvider | None = None,
        preferred_accounts: Sequence[str] = PREFERRED_ACCOUNTS,
        feed_limit: int = DEFAULT_FEED_LIMIT,
    ):
        self.store = store
        self.owner_id = owner_id
        self.events = events or TradeEvents()
        self.kv = kv
        self.quotes = quotes
        self.preferred_accounts = tuple(preferred_accounts)
        self.feed_limit = feed_limit

    def _changed(self, action: str, trade_ids: list[str]) -> None:
        self.events.publish(TradesChanged(owner_id=self.owner_id, action=action, trade_ids=trade_ids))

    # ── Queries ──────────────────────────────────────────────────────────

    def get(self, trade_id: str) -> TradeRecord:
        return self.store.get(self.owner_id, trade_id)

    def trades(
        self,
        criteria: TradeFilter | None = None,
        sort_field: str | None = None,
        direction: SortDirection | str = SortDirection.DESC,
    ) -> list[TradeRecord]:
        """Filtered trades, sorted by ``sort_field`` or in default display order."""
        selected = apply_filters(self.store.list(self.owner_id), criteria)
        if sort_field:
            return sort_trades(selected, sort_field, direction)
        return default_display_order(selected)

    def grouped(
        self,
        criteria: TradeFilter | None = None,
        sort_field: str | None = None,
        direction: SortDirection | str = SortDirection.DESC,
    ) -> list[AccountGroup]:
        return group_by_account(
            self.trades(criteria, sort_field, direction), preferred=self.preferred_accounts
        )

    def dashboard(
        self,
        criteria: TradeFilter | None = None,
        start_trading_date: date | None = None,
        today: date | None = None,
    ) -> Dashboard:
        summary = summarize(apply_filters(self.store.list(self.owner_id), criteria))
        return Dashboard(summary=summary, pace=trading_pace(summary, start_trading_date, today))

    # ── Lifecycle ────────────────────────────────────────────────────────

    def add_trade(self, draft: TradeDraft, today: date | None = None) -> TradeRecord:
        """Log a new open trade dated ``today`` with derived fields filled in."""
        option_type = resolve_option_type(draft.option_type, draft.custom_option_type)
        try:
            record = TradeRecord(
                owner_id=self.owner_id,
                ticker=draft.ticker,
                account=draft.account,
                option_type=option_type,
                contracts=draft.contracts,
                cost=draft.cost or 0.0,
                strike_price=draft.strike_price,
                price_at_purchase=draft.price_at_purchase,
                trading_date=today or date.today(),
                expiration_date=draft.expiration_date,
                status=TradeStatus.OPEN,
                unrealized_pl=draft.unrealized_pl or 0.0,
            )
        except ValidationError as e:
            raise TradeValidationError.from_pydantic(e) from e

        record = record.model_copy(update=derive_fields(record))
        self.store.insert(record)
        if self.kv is not None and record.account:
            SavedAccounts(self.kv, self.owner_id).add(record.account)
        logger.info("Added %s %s trade %s", record.ticker, record.option_type, record.id)
        self._changed("created", [record.id])
        return record

    def edit(
        self,
        trade_id: str,
        field: str,
        value: Any,
        custom_option_type: str | None = None,
    ) -> TradeRecord:
        """Change one field and recompute whichever derived fields depend on it."""
        if field in _LIFECYCLE_FIELDS:
            raise TradeValidationError(
                f"'{field}' changes through close or reopen, not edit", [field]
            )
        if field not in EDITABLE_FIELDS:
            raise TradeValidationError(f"Unknown or read-only field: '{field}'", [field])

        current = self.get(trade_id)
        update = recalculate(current, field, value, custom_option_type)
        updated = self.store.update(self.owner_id, trade_id, update)
        self._changed("updated", [trade_id])
        return updated

    def close(self, trade_id: str, today: date | None = None) -> TradeRecord:
        updated = self.store.update(
            self.owner_id,
            trade_id,
            {"status": TradeStatus.CLOSED, "closed_date": today or date.today()},
        )
        self._changed("closed", [trade_id])
        return updated

    def reopen(self, trade_id: str) -> TradeRecord:
        updated = self.store.update(
            self.owner_id, trade_id, {"status": TradeStatus.OPEN, "closed_date": None}
        )
        self._changed("reopened", [trade_id])
        return updated

    def delete(self, trade_id: str) -> None:
        self.store.delete(self.owner_id, trade_id)
        self._changed("deleted", [trade_id])

    def clear(self) -> int:
        count = self.store.delete_all(self.owner_id)
        self._changed("cleared", [])
        return count

    # ── Bulk import / export ─────────────────────────────────────────────

    def import_csv(self, source: str | Path | IO[str]) -> list[TradeRecord]:
        """Validate the whole file, then insert every row in one transaction."""
        records = read_trades_csv(source, self.owner_id)
        self.store.insert_many(records)
        self._changed("imported", [r.id for r in records])
        return records

    def export_csv(
        self,
        dest: str | Path | IO[str] | None = None,
        criteria: TradeFilter | None = None,
        sort_field: str | None = None,
        direction: SortDirection | str = SortDirection.DESC,
    ) -> str | None:
        return write_trades_csv(self.trades(criteria, sort_field, direction), dest)

    # ── Quotes & sharing ─────────────────────────────────────────────────

    def current_prices(self, tickers: Sequence[str] | None = None) -> dict[str, Quote]:
        """Best-effort quotes for ``tickers`` (default: every traded ticker)."""
        if self.quotes is None:
            return {}
        if tickers is None:
            tickers = [t.ticker for t in self.store.list(self.owner_id)]
        return get_quotes(self.quotes, tickers)

    def share(self, trade_id: str) -> SharedTrade:
        if self.kv is None:
            raise TradeValidationError("Sharing needs a key-value store", ["kv"])
        trade = self.get(trade_id)
        price = None
        if self.quotes is not None:
            try:
                price = self.quotes.get_quote(trade.ticker).price
            except QuoteError as e:
                logger.warning("Sharing %s without a current price: %s", trade.ticker, e)
        return ShareFeed(self.kv, self.owner_id, limit=self.feed_limit).share(trade, current_price=price)
