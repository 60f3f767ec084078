"""Derived-field calculations for trade records.

Two values are derived from a trade's own fields:

* ``pmcc_calc`` - break-even of a long call: strike plus the premium
  amortized per share (``strike + cost / contracts / 100``).
* ``expected_return`` - realized plus unrealized P&L as a percentage of the
  secured notional (``strike * 100 * contracts``) for covered strategies.

Nothing here raises on missing numbers: absent P&L counts as zero and a
failed precondition yields None.
"""

from __future__ import annotations

import math
from typing import Any

from options_journal.core.enums import COVERED_RETURN_TYPES, LONG_CALL_TYPES
from options_journal.core.errors import TradeValidationError
from options_journal.core.models import TradeRecord, option_type_choice

PMCC_INPUTS = frozenset({"cost", "strike_price", "contracts", "option_type"})
RETURN_INPUTS = frozenset({"realized_pl", "unrealized_pl", "strike_price", "contracts", "option_type"})

INT_FIELDS = frozenset({"contracts"})
FLOAT_FIELDS = frozenset(
    {"cost", "strike_price", "price_at_purchase", "pmcc_calc", "realized_pl", "unrealized_pl", "expected_return"}
)
BOOL_FIELDS = frozenset({"audited", "exercised"})


def _num(value: Any) -> float:
    """Coerce to a finite float, treating None and garbage as 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    return result if math.isfinite(result) else 0.0


def resolve_option_type(option_type: str, custom_option_type: str | None = None) -> str:
    """Return the effective option type used by every formula."""
    try:
        return option_type_choice(option_type, custom_option_type).effective
    except ValueError as e:
        raise TradeValidationError(str(e), ["option_type"]) from e


def pmcc_break_even(
    option_type: str,
    strike_price: float | None,
    cost: float | None,
    contracts: int | None,
) -> float | None:
    contracts = _num(contracts)
    if option_type not in LONG_CALL_TYPES or contracts <= 0:
        return None
    return _num(strike_price) + (_num(cost) / contracts / 100)


def expected_return_pct(
    option_type: str,
    strike_price: float | None,
    contracts: int | None,
    realized_pl: float | None,
    unrealized_pl: float | None,
) -> float | None:
    if option_type not in COVERED_RETURN_TYPES:
        return None
    denominator = _num(strike_price) * 100 * _num(contracts)
    if denominator <= 0:
        return None
    return ((_num(realized_pl) + _num(unrealized_pl)) / denominator) * 100


def coerce_field_value(field: str, value: Any) -> Any:
    """Convert a raw edited value to the field's type.

    Numbers that fail to parse become 0, mirroring how the edit form treats
    a blank or malformed cell. Booleans accept ``true``/``false`` strings.
    """
    if field in INT_FIELDS:
        try:
            return int(float(value))
        except (TypeError, ValueError):
            return 0
    if field in FLOAT_FIELDS:
        return _num(value)
    if field in BOOL_FIELDS:
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return bool(value)
    return value


def recalculate(
    trade: TradeRecord,
    field: str,
    value: Any,
    custom_option_type: str | None = None,
) -> dict[str, Any]:
    """Build the update for a single-field edit, including derived fields.

    The returned dict holds the coerced edited value plus ``pmcc_calc``
    and/or ``expected_return`` when the edit touches one of their inputs.
    The caller merges it into the stored record.
    """
    value = coerce_field_value(field, value)
    if field == "option_type":
        value = resolve_option_type(value, custom_option_type)
    update: dict[str, Any] = {field: value}

    def current(name: str) -> Any:
        return value if name == field else getattr(trade, name)

    option_type = current("option_type")

    if field in PMCC_INPUTS:
        update["pmcc_calc"] = pmcc_break_even(
            option_type,
            current("strike_price"),
            current("cost"),
            current("contracts"),
        )

    if field in RETURN_INPUTS:
        expected = expected_return_pct(
            option_type,
            current("strike_price"),
            current("contracts"),
            current("realized_pl"),
            current("unrealized_pl"),
        )
        if expected is not None:
            update["expected_return"] = expected

    return update


def derive_fields(trade: TradeRecord) -> dict[str, float | None]:
    """Compute both derived fields for a complete record."""
    return {
        "pmcc_calc": pmcc_break_even(
            trade.option_type, trade.strike_price, trade.cost, trade.contracts
        ),
        "expected_return": expected_return_pct(
            trade.option_type,
            trade.strike_price,
            trade.contracts,
            trade.realized_pl,
            trade.unrealized_pl,
        ),
    }

