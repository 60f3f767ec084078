"""Summary statistics over a trade collection."""

from __future__ import annotations

import math
from datetime import date, timedelta
from typing import Any, Iterable

from pydantic import BaseModel

from options_journal.core.enums import NOTIONAL_TRADED_TYPES, PREMIUM_TRADED_TYPES, TradeStatus
from options_journal.core.models import TradeRecord


class TradeSummary(BaseModel):
    total_trades: int = 0
    open_trades: int = 0
    closed_trades: int = 0
    total_cost: float = 0.0
    total_realized_pl: float = 0.0
    total_unrealized_pl: float = 0.0
    overall_pl: float = 0.0
    total_dollars_traded: float = 0.0


class TradingPace(BaseModel):
    start_trading_date: date | None = None
    days_trading: int = 0
    dollars_per_day: float = 0.0


def _num(value: Any) -> float:
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def position_cost(trade: TradeRecord) -> float:
    """Premium outlay of a position: per-contract cost times contracts."""
    return _num(trade.cost) * _num(trade.contracts)


def dollars_traded(trade: TradeRecord) -> float:
    if trade.option_type in PREMIUM_TRADED_TYPES:
        return position_cost(trade)
    if trade.option_type in NOTIONAL_TRADED_TYPES:
        return _num(trade.strike_price) * 100 * _num(trade.contracts)
    return 0.0


def summarize(trades: Iterable[TradeRecord]) -> TradeSummary:
    """Reduce trades to dashboard totals. Missing numbers count as 0."""
    summary = TradeSummary()
    for trade in trades:
        summary.total_trades += 1
        if trade.status == TradeStatus.OPEN:
            summary.open_trades += 1
        elif trade.status == TradeStatus.CLOSED:
            summary.closed_trades += 1
        summary.total_cost += position_cost(trade)
        summary.total_realized_pl += _num(trade.realized_pl)
        summary.total_unrealized_pl += _num(trade.unrealized_pl)
        summary.total_dollars_traded += dollars_traded(trade)

    summary.overall_pl = summary.total_realized_pl + summary.total_unrealized_pl
    return summary


def business_days_between(start: date | None, end: date | None) -> int:
    """Count weekdays in ``[start, end)``; 0 when the range is empty."""
    if start is None or end is None or start >= end:
        return 0
    days = (end - start).days
    full_weeks, remainder = divmod(days, 7)
    count = full_weeks * 5
    for offset in range(remainder):
        if (start + timedelta(days=full_weeks * 7 + offset)).weekday() < 5:
            count += 1
    return count


def trading_pace(
    summary: TradeSummary,
    start_trading_date: date | None,
    today: date | None = None,
) -> TradingPace:
    """Overall P&L spread over the business days since trading started."""
    today = today or date.today()
    days = business_days_between(start_trading_date, today)
    per_day = summary.overall_pl / days if days > 0 else 0.0
    return TradingPace(
        start_trading_date=start_trading_date,
        days_trading=days,
        dollars_per_day=per_day,
    )
