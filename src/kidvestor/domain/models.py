"""Core simulation domain models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class OrderSide(StrEnum):
    """Supported order directions."""

    BUY = "BUY"
    SELL = "SELL"


@dataclass(frozen=True)
class Holding:
    """Open position for a symbol, valued at cost basis."""

    symbol: str
    quantity: int
    average_cost: float

    @property
    def cost_basis(self) -> float:
        return self.quantity * self.average_cost


@dataclass(frozen=True)
class WatchlistEntry:
    """Tracked symbol with its last known price."""

    symbol: str
    name: str
    last_price: float


@dataclass(frozen=True)
class Order:
    """Executed order record; cash outflows are negative."""

    day: int
    action: OrderSide
    symbol: str
    quantity: int
    price: float
    signed_amount: float


@dataclass(frozen=True)
class ValuationSnapshot:
    """Total portfolio worth at the start of a simulated day."""

    day: int
    total_value: float


@dataclass(frozen=True)
class SymbolMatch:
    """Symbol search candidate returned by a quote source."""

    symbol: str
    name: str


@dataclass(frozen=True)
class PerformanceReport:
    """End-of-run evaluation of a completed simulation."""

    initial_value: float
    final_value: float
    monthly_return: float
    annualized_return: float
    mean_daily_return: float
    volatility: float
    qualifies: bool

    @property
    def message(self) -> str:
        text = (
            f"Simulation complete! Annualized return: {self.annualized_return * 100:.1f}%. "
            f"Volatility: {self.volatility * 100:.2f}%."
        )
        if self.qualifies:
            return (
                f"{text} Congratulations! Your strategy is steady and profitable. "
                "You qualify for investor matchmaking!"
            )
        return (
            f"{text} Keep practicing to achieve consistent returns above 50% annually "
            "with low volatility."
        )
