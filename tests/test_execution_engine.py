from __future__ import annotations

import math

import pytest

from kidvestor.domain.models import OrderSide
from kidvestor.errors import OrderRejectedError
from kidvestor.execution.engine import execute_buy, execute_sell
from kidvestor.portfolio.ledger import Ledger


def test_buy_debits_cash_and_opens_holding() -> None:
    ledger = Ledger(starting_cash=100_000.0)

    order = execute_buy(ledger, "AAPL", 50.0, 10, day=1)

    assert ledger.cash == 99_500.0
    assert ledger.holdings["AAPL"].quantity == 10
    assert ledger.holdings["AAPL"].average_cost == 50.0
    assert order.action is OrderSide.BUY
    assert order.signed_amount == -500.0
    assert ledger.orders == [order]


def test_second_buy_uses_quantity_weighted_average_cost() -> None:
    ledger = Ledger(starting_cash=100_000.0)

    execute_buy(ledger, "AAPL", 50.0, 10, day=1)
    execute_buy(ledger, "AAPL", 60.0, 30, day=2)

    holding = ledger.holdings["AAPL"]
    assert holding.quantity == 40
    assert holding.average_cost == pytest.approx((50.0 * 10 + 60.0 * 30) / 40)


def test_buy_sell_round_trip_example() -> None:
    ledger = Ledger(starting_cash=100_000.0)

    execute_buy(ledger, "AAPL", 50.0, 10, day=1)
    execute_buy(ledger, "AAPL", 60.0, 10, day=1)
    assert ledger.holdings["AAPL"].quantity == 20
    assert ledger.holdings["AAPL"].average_cost == 55.0

    order = execute_sell(ledger, "AAPL", 70.0, 20, day=2)

    assert ledger.cash == 100_300.0
    assert "AAPL" not in ledger.holdings
    assert order.action is OrderSide.SELL
    assert order.signed_amount == 1400.0
    assert [o.signed_amount for o in ledger.orders] == [-500.0, -600.0, 1400.0]


def test_buy_spending_exact_cash_is_allowed() -> None:
    ledger = Ledger(starting_cash=1000.0)

    execute_buy(ledger, "SPY", 100.0, 10, day=1)

    assert ledger.cash == 0.0


def test_buy_rejected_when_cost_exceeds_cash() -> None:
    ledger = Ledger(starting_cash=1000.0)

    with pytest.raises(OrderRejectedError, match="Not enough cash") as excinfo:
        execute_buy(ledger, "SPY", 100.0, 11, day=1)

    assert excinfo.value.reason == "insufficient_cash"
    assert ledger.cash == 1000.0
    assert ledger.holdings == {}
    assert ledger.orders == []


@pytest.mark.parametrize("quantity", [0, -3, 2.5, math.inf, math.nan, "10", None, True])
def test_buy_rejects_invalid_quantities(quantity: object) -> None:
    ledger = Ledger(starting_cash=1000.0)

    with pytest.raises(OrderRejectedError) as excinfo:
        execute_buy(ledger, "SPY", 10.0, quantity, day=1)

    assert excinfo.value.reason == "invalid_quantity"
    assert ledger.cash == 1000.0
    assert ledger.orders == []


def test_whole_float_quantity_is_accepted_as_int() -> None:
    ledger = Ledger(starting_cash=1000.0)

    order = execute_buy(ledger, "SPY", 10.0, 3.0, day=1)

    assert order.quantity == 3
    assert isinstance(ledger.holdings["SPY"].quantity, int)


def test_buy_rejects_non_positive_price() -> None:
    ledger = Ledger(starting_cash=1000.0)

    with pytest.raises(OrderRejectedError) as excinfo:
        execute_buy(ledger, "SPY", 0.0, 1, day=1)

    assert excinfo.value.reason == "invalid_price"


def test_partial_sell_keeps_average_cost() -> None:
    ledger = Ledger(starting_cash=10_000.0)
    execute_buy(ledger, "MSFT", 40.0, 10, day=1)

    execute_sell(ledger, "MSFT", 80.0, 4, day=3)

    assert ledger.holdings["MSFT"].quantity == 6
    assert ledger.holdings["MSFT"].average_cost == 40.0
    assert ledger.cash == 10_000.0 - 400.0 + 320.0


def test_sell_more_than_held_is_rejected_without_state_change() -> None:
    ledger = Ledger(starting_cash=10_000.0)
    execute_buy(ledger, "MSFT", 40.0, 5, day=1)
    cash_before = ledger.cash

    with pytest.raises(OrderRejectedError, match="Insufficient shares") as excinfo:
        execute_sell(ledger, "MSFT", 40.0, 6, day=1)

    assert excinfo.value.reason == "insufficient_shares"
    assert ledger.cash == cash_before
    assert ledger.holdings["MSFT"].quantity == 5
    assert len(ledger.orders) == 1


def test_sell_without_holding_is_rejected() -> None:
    ledger = Ledger(starting_cash=10_000.0)

    with pytest.raises(OrderRejectedError) as excinfo:
        execute_sell(ledger, "TSLA", 40.0, 1, day=1)

    assert excinfo.value.reason == "no_position"


def test_sell_rejects_zero_quantity() -> None:
    ledger = Ledger(starting_cash=10_000.0)
    execute_buy(ledger, "MSFT", 40.0, 5, day=1)

    with pytest.raises(OrderRejectedError) as excinfo:
        execute_sell(ledger, "MSFT", 40.0, 0, day=1)

    assert excinfo.value.reason == "invalid_quantity"


def test_cash_never_negative_across_buy_sequence() -> None:
    ledger = Ledger(starting_cash=1_000.0)
    for price, qty in [(99.0, 3), (120.0, 4), (250.0, 2), (10.0, 1)]:
        cash_before = ledger.cash
        try:
            execute_buy(ledger, "SPY", price, qty, day=1)
        except OrderRejectedError:
            assert ledger.cash == cash_before
        else:
            assert ledger.cash == pytest.approx(cash_before - price * qty)
        assert ledger.cash >= 0
