"""Type-aware, stable ordering of trade collections."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from options_journal.core.dates import parse_date
from options_journal.core.enums import SortDirection
from options_journal.core.models import TradeRecord

DATE_FIELDS = frozenset({"trading_date", "expiration_date", "closed_date"})
TEXT_FIELDS = frozenset({"id", "owner_id", "ticker", "account", "option_type", "status"})
NUMERIC_FIELDS = frozenset(
    {
        "contracts",
        "cost",
        "strike_price",
        "price_at_purchase",
        "realized_pl",
        "unrealized_pl",
        "pmcc_calc",
        "expected_return",
        "audited",
        "exercised",
    }
)
SORTABLE_FIELDS = DATE_FIELDS | TEXT_FIELDS | NUMERIC_FIELDS


def _sort_key(field: str):
    if field in DATE_FIELDS:

        def key(trade: TradeRecord) -> int:
            value = getattr(trade, field)
            if isinstance(value, str):
                value = parse_date(value)
            # Missing dates order before every real one.
            return (value or date.min).toordinal()

    elif field in TEXT_FIELDS:

        def key(trade: TradeRecord) -> str:
            return str(getattr(trade, field) or "").lower()

    else:

        def key(trade: TradeRecord) -> float:
            return float(getattr(trade, field) or 0)

    return key


def sort_trades(
    trades: Iterable[TradeRecord],
    field: str = "trading_date",
    direction: SortDirection | str = SortDirection.DESC,
) -> list[TradeRecord]:
    """Return a new list ordered by ``field``; equal keys keep input order."""
    if field not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort by '{field}'. Sortable fields: {', '.join(sorted(SORTABLE_FIELDS))}")
    direction = SortDirection(direction)
    return sorted(trades, key=_sort_key(field), reverse=direction == SortDirection.DESC)
