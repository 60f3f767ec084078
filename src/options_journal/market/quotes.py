"""Current price quotes for tickers via Yahoo Finance (yfinance)."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Protocol

import yfinance as yf
from pydantic import BaseModel, Field

from options_journal.core.errors import QuoteError

logger = logging.getLogger(__name__)


class Quote(BaseModel):
    symbol: str
    price: float
    change: float = 0.0
    change_percent: float = 0.0
    timestamp: datetime = Field(default_factory=datetime.now)
    source: str = "yahoo"


class QuoteProvider(Protocol):
    """Protocol for anything that can price a ticker."""

    def get_quote(self, ticker: str) -> Quote:
        """Return the latest quote or raise QuoteError."""
        ...


class YahooQuoteProvider:
    """Quote provider using the last two daily closes from Yahoo Finance."""

    def __init__(self, period: str = "5d"):
        self.period = period

    def get_quote(self, ticker: str) -> Quote:
        symbol = ticker.strip().upper()
        if not symbol:
            raise QuoteError("Ticker is required")

        try:
            history = yf.Ticker(symbol).history(period=self.period)
        except Exception as e:
            raise QuoteError(f"Quote lookup failed for {symbol}: {e}") from e

        if history is None or history.empty or "Close" not in history.columns:
            raise QuoteError(f"No price data returned for {symbol}")

        closes = history["Close"].dropna()
        if closes.empty:
            raise QuoteError(f"No price data returned for {symbol}")

        price = float(closes.iloc[-1])
        previous = float(closes.iloc[-2]) if len(closes) > 1 else price
        change = price - previous
        change_pct = (change / previous) * 100 if previous else 0.0
        return Quote(symbol=symbol, price=price, change=change, change_percent=change_pct)


def get_quotes(provider: QuoteProvider, tickers: Iterable[str]) -> dict[str, Quote]:
    """Best-effort lookup: a failing ticker is logged and left out."""
    quotes: dict[str, Quote] = {}
    for ticker in dict.fromkeys(t.strip().upper() for t in tickers if t and t.strip()):
        try:
            quotes[ticker] = provider.get_quote(ticker)
        except QuoteError as e:
            logger.warning("Skipping %s: %s", ticker, e)
    return quotes
