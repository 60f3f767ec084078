"""Lightweight shared-trade feed."""

from __future__ import annotations

import logging
from datetime import date, datetime

from pydantic import BaseModel, Field

from options_journal.core.models import TradeRecord
from options_journal.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

FEED_KEY = "shared_trades"
DEFAULT_FEED_LIMIT = 50


class SharedTrade(BaseModel):
    """Snapshot of a trade at the moment it was shared."""

    id: str
    trade_id: str
    ticker: str
    account: str
    option_type: str
    contracts: int
    cost: float
    strike_price: float
    expiration_date: date | None = None
    trading_date: date
    status: str
    realized_pl: float | None = None
    unrealized_pl: float | None = None
    current_price: float | None = None
    shared_at: datetime = Field(default_factory=datetime.now)
    shared_by: str = "You"


class ShareFeed:
    """Newest-first feed of shared trades, capped at ``limit`` entries."""

    def __init__(self, kv: KeyValueStore, owner_id: str, limit: int = DEFAULT_FEED_LIMIT):
        self.kv = kv
        self.owner_id = owner_id
        self.limit = limit

    def entries(self) -> list[SharedTrade]:
        raw = self.kv.get(self.owner_id, FEED_KEY, [])
        return [SharedTrade.model_validate(e) for e in raw]

    def share(self, trade: TradeRecord, current_price: float | None = None, shared_by: str = "You") -> SharedTrade:
        now = datetime.now()
        entry = SharedTrade(
            id=f"share_{int(now.timestamp() * 1000)}",
            trade_id=trade.id,
            ticker=trade.ticker,
            account=trade.account,
            option_type=trade.option_type,
            contracts=trade.contracts,
            cost=trade.cost,
            strike_price=trade.strike_price,
            expiration_date=trade.expiration_date,
            trading_date=trade.trading_date,
            status=trade.status.value,
            realized_pl=trade.realized_pl,
            unrealized_pl=trade.unrealized_pl,
            current_price=current_price,
            shared_at=now,
            shared_by=shared_by,
        )
        feed = [entry] + self.entries()
        self.kv.set(
            self.owner_id,
            FEED_KEY,
            [e.model_dump(mode="json") for e in feed[: self.limit]],
        )
        logger.info("Shared trade %s as %s", trade.id, entry.id)
        return entry

    def clear(self) -> None:
        self.kv.delete(self.owner_id, FEED_KEY)
