"""Partitioning of trades by account and status for sectioned display."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from options_journal.core.enums import SortDirection, TradeStatus
from options_journal.core.models import TradeRecord
from options_journal.ledger.sorting import sort_trades

PREFERRED_ACCOUNTS: tuple[str, ...] = ("SAE", "ST", "ST Operating", "Robinhood")
UNKNOWN_ACCOUNT = "Unknown"

# Lifecycle order for display: open positions list ahead of closed ones.
STATUS_RANK = {TradeStatus.OPEN: 0, TradeStatus.CLOSED: 1}


@dataclass
class AccountGroup:
    account: str
    open: list[TradeRecord] = field(default_factory=list)
    closed: list[TradeRecord] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.open) + len(self.closed)


def default_display_order(trades: Iterable[TradeRecord]) -> list[TradeRecord]:
    """Open trades first, then closed; newest trading date first within each."""
    newest_first = sort_trades(trades, "trading_date", SortDirection.DESC)
    return sorted(newest_first, key=lambda t: STATUS_RANK.get(t.status, len(STATUS_RANK)))


def account_order(accounts: Iterable[str], preferred: Sequence[str] = PREFERRED_ACCOUNTS) -> list[str]:
    """Preferred accounts in their fixed sequence, then the rest as first seen."""
    seen = list(dict.fromkeys(accounts))
    head = [a for a in preferred if a in seen]
    tail = [a for a in seen if a not in preferred]
    return head + tail


def group_by_account(
    trades: Iterable[TradeRecord],
    preferred: Sequence[str] = PREFERRED_ACCOUNTS,
    display_order: bool = False,
) -> list[AccountGroup]:
    """Split trades into per-account open/closed buckets.

    Buckets keep the incoming order unless ``display_order`` is set, in
    which case the system-wide default ordering is applied first.
    """
    if display_order:
        trades = default_display_order(trades)

    groups: dict[str, AccountGroup] = {}
    for trade in trades:
        account = trade.account or UNKNOWN_ACCOUNT
        group = groups.setdefault(account, AccountGroup(account=account))
        if trade.status == TradeStatus.OPEN:
            group.open.append(trade)
        else:
            group.closed.append(trade)

    return [groups[name] for name in account_order(groups, preferred)]
