"""In-memory cash, holdings and order history for one session."""

from __future__ import annotations

from dataclasses import dataclass, field

from kidvestor.domain.models import Holding, Order


@dataclass
class Ledger:
    """Portfolio ledger mutated only by the execution engine."""

    starting_cash: float = 100_000.0
    holdings: dict[str, Holding] = field(default_factory=dict)
    orders: list[Order] = field(default_factory=list)
    cash: float = field(init=False)

    def __post_init__(self) -> None:
        self.cash = float(self.starting_cash)

    def get_holding(self, symbol: str) -> Holding | None:
        return self.holdings.get(symbol)

    def held_quantity(self, symbol: str) -> int:
        holding = self.holdings.get(symbol)
        return 0 if holding is None else holding.quantity

    def order_history(self) -> list[Order]:
        """Return a copy of executed orders in execution order."""
        return list(self.orders)
