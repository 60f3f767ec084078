"""Multi-predicate filtering over a trade collection.

Every criterion is optional and they combine with AND. A criterion left at
None places no constraint, so an empty ``TradeFilter`` is the identity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from datetime import date
from typing import Any, Iterable

from options_journal.core.dates import parse_date
from options_journal.core.enums import TradeStatus
from options_journal.core.models import TradeRecord

logger = logging.getLogger(__name__)

ALL_SENTINEL = "all"

# Each entry counts once toward the active-filter badge.
_FILTER_GROUPS: tuple[tuple[str, ...], ...] = (
    ("status",),
    ("account",),
    ("ticker",),
    ("option_type",),
    ("trading_date_from", "trading_date_to"),
    ("expiration_date_from", "expiration_date_to"),
    ("strike_price_min", "strike_price_max"),
    ("cost_min", "cost_max"),
    ("realized_pl_min", "realized_pl_max"),
    ("unrealized_pl_min", "unrealized_pl_max"),
    ("audited",),
    ("exercised",),
    ("closed_date_from", "closed_date_to"),
)

_NUMERIC_RANGES = ("strike_price", "cost", "realized_pl", "unrealized_pl")
_DATE_RANGES = ("trading_date", "expiration_date", "closed_date")


@dataclass
class TradeFilter:
    """Optional criteria applied to a trade collection."""

    status: TradeStatus | None = None
    account: str | None = None
    ticker: str | None = None
    option_type: str | None = None
    audited: bool | None = None
    exercised: bool | None = None

    strike_price_min: float | None = None
    strike_price_max: float | None = None
    cost_min: float | None = None
    cost_max: float | None = None
    realized_pl_min: float | None = None
    realized_pl_max: float | None = None
    unrealized_pl_min: float | None = None
    unrealized_pl_max: float | None = None

    trading_date_from: date | None = None
    trading_date_to: date | None = None
    expiration_date_from: date | None = None
    expiration_date_to: date | None = None
    closed_date_from: date | None = None
    closed_date_to: date | None = None

    @classmethod
    def from_params(cls, **params: Any) -> TradeFilter:
        """Build a filter from raw form or CLI values.

        ``"all"``, empty strings and None mean "no constraint". Numbers that
        do not parse are ignored, as are dates that do not parse.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(params) - known
        if unknown:
            raise ValueError(f"Unknown filter criteria: {', '.join(sorted(unknown))}")

        values: dict[str, Any] = {}
        for name, raw in params.items():
            if raw is None:
                continue
            if isinstance(raw, str):
                raw = raw.strip()
                if not raw or raw.lower() == ALL_SENTINEL:
                    continue

            if name == "status":
                values[name] = TradeStatus(str(raw).lower())
            elif name in ("audited", "exercised"):
                values[name] = _parse_bool(raw)
            elif name.endswith(("_min", "_max")):
                number = _parse_float(raw)
                if number is None:
                    logger.debug("Ignoring non-numeric %s=%r", name, raw)
                    continue
                values[name] = number
            elif name.endswith(("_from", "_to")):
                try:
                    values[name] = parse_date(raw)
                except ValueError:
                    logger.debug("Ignoring unparseable %s=%r", name, raw)
                    continue
            else:
                values[name] = str(raw)
        return cls(**values)

    @property
    def active_count(self) -> int:
        """Number of active criteria; a range counts once whichever bound is set."""
        return sum(
            1 for group in _FILTER_GROUPS if any(getattr(self, name) is not None for name in group)
        )

    @property
    def is_empty(self) -> bool:
        return self.active_count == 0

    def matches(self, trade: TradeRecord) -> bool:
        if self.status is not None and trade.status != self.status:
            return False
        if self.account is not None and trade.account != self.account:
            return False
        if self.option_type is not None and trade.option_type != self.option_type:
            return False
        if self.ticker is not None and self.ticker.lower() not in trade.ticker.lower():
            return False
        if self.audited is not None and bool(trade.audited) != self.audited:
            return False
        if self.exercised is not None and bool(trade.exercised) != self.exercised:
            return False

        for name in _NUMERIC_RANGES:
            value = getattr(trade, name) or 0
            low = getattr(self, f"{name}_min")
            high = getattr(self, f"{name}_max")
            if low is not None and value < low:
                return False
            if high is not None and value > high:
                return False

        for name in _DATE_RANGES:
            low = getattr(self, f"{name}_from")
            high = getattr(self, f"{name}_to")
            if low is None and high is None:
                continue
            value = getattr(trade, name)
            if value is None:
                # An open-ended expiration satisfies an upper bound only.
                if name == "expiration_date" and low is None:
                    continue
                return False
            if low is not None and value < low:
                return False
            if high is not None and value > high:
                return False

        return True


def _parse_float(raw: Any) -> float | None:
    try:
        return float(raw)
    except (TypeError, ValueError):
        return None


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in ("true", "yes", "1")


def apply_filters(
    trades: Iterable[TradeRecord], criteria: TradeFilter | None = None
) -> list[TradeRecord]:
    """Return the trades matching every criterion, in input order."""
    trades = list(trades)
    if criteria is None or criteria.is_empty:
        return trades
    return [t for t in trades if criteria.matches(t)]
