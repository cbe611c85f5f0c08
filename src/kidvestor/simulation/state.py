"""Mutable state of one simulation run."""

from __future__ import annotations

from dataclasses import dataclass, field

from kidvestor.domain.models import PerformanceReport, ValuationSnapshot
from kidvestor.market.watchlist import Watchlist
from kidvestor.portfolio.ledger import Ledger

DEFAULT_MAX_DAYS = 30


@dataclass
class SimulationState:
    """Ledger, watchlist, day counter and value history for a session.

    Build with `SimulationState.start`, which seeds the day-0 snapshot from
    the starting cash.
    """

    ledger: Ledger
    watchlist: Watchlist = field(default_factory=Watchlist)
    max_days: int = DEFAULT_MAX_DAYS
    day: int = 1
    snapshots: list[ValuationSnapshot] = field(default_factory=list)
    daily_returns: list[float] = field(default_factory=list)
    report: PerformanceReport | None = None
    advancing: bool = False

    @classmethod
    def start(
        cls,
        starting_cash: float = 100_000.0,
        max_days: int = DEFAULT_MAX_DAYS,
    ) -> SimulationState:
        if max_days <= 0:
            raise ValueError("max_days must be positive")
        state = cls(ledger=Ledger(starting_cash=starting_cash), max_days=max_days)
        state.snapshots.append(ValuationSnapshot(day=0, total_value=state.ledger.cash))
        return state

    @property
    def finished(self) -> bool:
        return self.report is not None

    @property
    def days_remaining(self) -> int:
        if self.finished:
            return 0
        return self.max_days - self.day + 1
