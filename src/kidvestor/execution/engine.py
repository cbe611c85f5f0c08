"""Buy and sell execution against a portfolio ledger."""

from __future__ import annotations

from dataclasses import replace

from kidvestor.domain.models import Holding, Order, OrderSide
from kidvestor.execution.risk import (
    check_buying_power,
    check_shares_available,
    validate_price,
    validate_quantity,
)
from kidvestor.portfolio.ledger import Ledger


def execute_buy(ledger: Ledger, symbol: str, price: float, quantity: object, day: int) -> Order:
    """Debit cash and grow the holding at a weighted-mean average cost.

    Raises:
        OrderRejectedError: quantity or price is invalid, or cash is short.
            The ledger is left untouched.
    """
    qty = validate_quantity(quantity)
    fill_price = validate_price(symbol, price)
    cost = fill_price * qty
    check_buying_power(ledger, cost)

    ledger.cash -= cost
    existing = ledger.get_holding(symbol)
    if existing is None:
        ledger.holdings[symbol] = Holding(symbol=symbol, quantity=qty, average_cost=fill_price)
    else:
        new_qty = existing.quantity + qty
        new_avg = (existing.average_cost * existing.quantity + cost) / new_qty
        ledger.holdings[symbol] = replace(existing, quantity=new_qty, average_cost=new_avg)

    order = Order(
        day=day,
        action=OrderSide.BUY,
        symbol=symbol,
        quantity=qty,
        price=fill_price,
        signed_amount=-cost,
    )
    ledger.orders.append(order)
    return order


def execute_sell(ledger: Ledger, symbol: str, price: float, quantity: object, day: int) -> Order:
    """Credit cash and shrink the holding; average cost is unchanged.

    Raises:
        OrderRejectedError: quantity or price is invalid, or not enough shares
            are held. The ledger is left untouched.
    """
    qty = validate_quantity(quantity)
    fill_price = validate_price(symbol, price)
    check_shares_available(ledger, symbol, qty)

    revenue = fill_price * qty
    ledger.cash += revenue
    existing = ledger.holdings[symbol]
    remaining = existing.quantity - qty
    if remaining == 0:
        ledger.holdings.pop(symbol)
    else:
        ledger.holdings[symbol] = replace(existing, quantity=remaining)

    order = Order(
        day=day,
        action=OrderSide.SELL,
        symbol=symbol,
        quantity=qty,
        price=fill_price,
        signed_amount=revenue,
    )
    ledger.orders.append(order)
    return order
