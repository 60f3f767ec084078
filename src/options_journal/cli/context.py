"""Builds the journal service from configuration for CLI commands."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from options_journal.config import JournalConfig
from options_journal.market.quotes import YahooQuoteProvider
from options_journal.service.journal import TradeJournal
from options_journal.storage.kv_store import KeyValueStore
from options_journal.storage.trade_store import SqliteTradeStore


def load_config() -> JournalConfig:
    return JournalConfig()


def open_journal(config: JournalConfig | None = None, owner_id: str | None = None) -> TradeJournal:
    config = config or load_config()
    quotes = None if config.offline_mode else YahooQuoteProvider(period=config.quote_period)
    return TradeJournal(
        store=SqliteTradeStore(config.db_path),
        owner_id=owner_id or config.owner_id,
        kv=KeyValueStore(config.kv_dir),
        quotes=quotes,
        preferred_accounts=config.preferred_account_list,
        feed_limit=config.share_feed_limit,
    )


@contextmanager
def journal_session(owner_id: str | None = None) -> Iterator[TradeJournal]:
    """Open the configured journal and close its store afterwards."""
    journal = open_journal(owner_id=owner_id)
    try:
        yield journal
    finally:
        close = getattr(journal.store, "close", None)
        if close is not None:
            close()
