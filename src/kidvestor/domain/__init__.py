"""Domain models and event types."""

from .events import SimulationEvent
from .models import (
    Holding,
    Order,
    OrderSide,
    PerformanceReport,
    SymbolMatch,
    ValuationSnapshot,
    WatchlistEntry,
)

__all__ = [
    "Holding",
    "Order",
    "OrderSide",
    "PerformanceReport",
    "SimulationEvent",
    "SymbolMatch",
    "ValuationSnapshot",
    "WatchlistEntry",
]
