"""Tests for derived-field calculations."""

from __future__ import annotations

import math

import pytest

from options_journal.core.errors import TradeValidationError
from options_journal.ledger.calculator import (
    coerce_field_value,
    derive_fields,
    expected_return_pct,
    pmcc_break_even,
    recalculate,
    resolve_option_type,
)


class TestPmccBreakEven:
    def test_call_option(self):
        assert pmcc_break_even("Call option", 150, 2.50, 1) == pytest.approx(150.025)

    def test_amortized_over_contracts(self):
        assert pmcc_break_even("Call option", 100, 500, 5) == pytest.approx(101.0)

    def test_pmcc_call_option_is_long_call(self):
        assert pmcc_break_even("PMCC call option", 50, 100, 1) == pytest.approx(51.0)

    @pytest.mark.parametrize(
        "option_type",
        ["Put option", "Covered call", "Cash secured put", "PMCC covered call", "Iron condor"],
    )
    def test_null_for_other_types(self, option_type):
        assert pmcc_break_even(option_type, 150, 2.5, 1) is None

    def test_null_for_zero_contracts(self):
        assert pmcc_break_even("Call option", 150, 2.5, 0) is None

    def test_missing_inputs_count_as_zero(self):
        assert pmcc_break_even("Call option", None, None, 2) == 0.0


class TestExpectedReturn:
    def test_cash_secured_put(self):
        assert expected_return_pct("Cash secured put", 100, 1, 50, 0) == pytest.approx(0.5)

    def test_combines_realized_and_unrealized(self):
        assert expected_return_pct("Covered call", 50, 2, 100, 100) == pytest.approx(2.0)

    def test_missing_pl_counts_as_zero(self):
        assert expected_return_pct("Covered call", 50, 1, None, 25) == pytest.approx(0.5)

    @pytest.mark.parametrize("strike, contracts", [(0, 1), (100, 0), (None, None)])
    def test_zero_denominator_skipped(self, strike, contracts):
        assert expected_return_pct("Cash secured put", strike, contracts, 50, 0) is None

    def test_not_covered_type(self):
        assert expected_return_pct("Call option", 100, 1, 50, 0) is None

    def test_garbage_inputs_never_nan(self):
        result = expected_return_pct("Covered call", 10, 1, float("nan"), "abc")
        assert result == 0.0
        assert not math.isnan(result)


class TestResolveOptionType:
    def test_known(self):
        assert resolve_option_type("Call option") == "Call option"

    def test_other_uses_custom(self):
        assert resolve_option_type("Other", "Strangle") == "Strangle"

    def test_other_without_custom_is_validation_error(self):
        with pytest.raises(TradeValidationError) as exc:
            resolve_option_type("Other")
        assert exc.value.fields == ["option_type"]


class TestCoerce:
    def test_contracts_int(self):
        assert coerce_field_value("contracts", "3") == 3
        assert coerce_field_value("contracts", "x") == 0

    def test_float_fields(self):
        assert coerce_field_value("cost", "2.75") == 2.75
        assert coerce_field_value("realized_pl", "") == 0.0

    def test_bool_fields(self):
        assert coerce_field_value("audited", "true") is True
        assert coerce_field_value("exercised", "false") is False

    def test_text_untouched(self):
        assert coerce_field_value("account", "ST") == "ST"


class TestRecalculate:
    def test_cost_edit_updates_pmcc(self, make_trade):
        trade = make_trade(cost=2.5, strike_price=150, contracts=1)
        update = recalculate(trade, "cost", "5")
        assert update["cost"] == 5.0
        assert update["pmcc_calc"] == pytest.approx(150.05)
        assert "expected_return" not in update

    def test_switching_away_from_call_clears_pmcc(self, make_trade):
        trade = make_trade(option_type="Call option", pmcc_calc=150.025)
        update = recalculate(trade, "option_type", "Put option")
        assert update == {"option_type": "Put option", "pmcc_calc": None}

    def test_other_resolves_before_formulas(self, make_trade):
        trade = make_trade(option_type="Put option")
        update = recalculate(trade, "option_type", "Other", custom_option_type="Call option")
        assert update["option_type"] == "Call option"
        assert update["pmcc_calc"] == pytest.approx(150.025)

    def test_other_custom_label_has_no_derived_values(self, make_trade):
        trade = make_trade(option_type="Call option")
        update = recalculate(trade, "option_type", "Other", custom_option_type="Butterfly")
        assert update == {"option_type": "Butterfly", "pmcc_calc": None}

    def test_realized_edit_on_covered_sets_expected_return(self, make_trade):
        trade = make_trade(option_type="Cash secured put", strike_price=100, contracts=1, unrealized_pl=None)
        update = recalculate(trade, "realized_pl", "50")
        assert update["realized_pl"] == 50.0
        assert update["expected_return"] == pytest.approx(0.5)
        assert "pmcc_calc" not in update

    def test_zero_strike_leaves_expected_return_unset(self, make_trade):
        trade = make_trade(option_type="Covered call", strike_price=100)
        update = recalculate(trade, "strike_price", "0")
        assert "expected_return" not in update

    def test_contracts_edit_touches_both(self, make_trade):
        trade = make_trade(option_type="PMCC call option", strike_price=100, cost=200, realized_pl=100)
        update = recalculate(trade, "contracts", 2)
        assert update["pmcc_calc"] == pytest.approx(101.0)
        assert update["expected_return"] == pytest.approx(0.5)

    def test_unrelated_field(self, make_trade):
        assert recalculate(make_trade(), "account", "ST") == {"account": "ST"}


def test_derive_fields(make_trade):
    trade = make_trade(option_type="Call option", strike_price=150, cost=2.5, contracts=1)
    assert derive_fields(trade) == {"pmcc_calc": pytest.approx(150.025), "expected_return": None}
