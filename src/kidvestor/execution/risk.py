"""Pre-trade checks for buy and sell requests."""

from __future__ import annotations

import math

from kidvestor.errors import OrderRejectedError
from kidvestor.portfolio.ledger import Ledger


def validate_quantity(quantity: object) -> int:
    """Return quantity as an int, rejecting anything but a positive finite integer."""
    if isinstance(quantity, bool) or not isinstance(quantity, (int, float)):
        raise OrderRejectedError("invalid_quantity", "Quantity must be a positive whole number.")
    if not math.isfinite(quantity) or quantity <= 0 or int(quantity) != quantity:
        raise OrderRejectedError("invalid_quantity", "Quantity must be a positive whole number.")
    return int(quantity)


def validate_price(symbol: str, price: float) -> float:
    """Reject prices that cannot produce a meaningful fill."""
    value = float(price)
    if not math.isfinite(value) or value <= 0:
        raise OrderRejectedError("invalid_price", f"No valid price available for {symbol}.")
    return value


def check_buying_power(ledger: Ledger, cost: float) -> None:
    if cost > ledger.cash:
        raise OrderRejectedError(
            "insufficient_cash", "Not enough cash to complete purchase."
        )


def check_shares_available(ledger: Ledger, symbol: str, quantity: int) -> None:
    holding = ledger.get_holding(symbol)
    if holding is None:
        raise OrderRejectedError("no_position", f"You do not hold any shares of {symbol}.")
    if holding.quantity < quantity:
        raise OrderRejectedError("insufficient_shares", "Insufficient shares to sell.")
