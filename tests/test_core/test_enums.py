"""Tests for journal enums and strategy sets."""

from options_journal.core.enums import (
    COVERED_RETURN_TYPES,
    LONG_CALL_TYPES,
    NOTIONAL_TRADED_TYPES,
    PREMIUM_TRADED_TYPES,
    OptionType,
    SortDirection,
    TradeStatus,
)


def test_option_type_values():
    assert OptionType.CALL == "Call option"
    assert OptionType.PMCC_COVERED_CALL == "PMCC covered call"
    assert len(OptionType) == 7


def test_status_and_direction_values():
    assert TradeStatus.OPEN == "open"
    assert TradeStatus.CLOSED == "closed"
    assert SortDirection("asc") is SortDirection.ASC


def test_sets_accept_plain_strings():
    assert "Call option" in LONG_CALL_TYPES
    assert "PMCC call option" in COVERED_RETURN_TYPES
    assert "PMCC covered call" not in COVERED_RETURN_TYPES
    assert "Put option" in PREMIUM_TRADED_TYPES
    assert "Cash secured put" in NOTIONAL_TRADED_TYPES
