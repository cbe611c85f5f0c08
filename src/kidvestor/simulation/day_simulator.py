"""Day-by-day advancement of a simulation run."""

from __future__ import annotations

from dataclasses import dataclass, field

from kidvestor.data.base import QuoteSource
from kidvestor.domain.models import PerformanceReport, ValuationSnapshot
from kidvestor.errors import SimulationError
from kidvestor.market.watchlist import RefreshOutcome
from kidvestor.portfolio.valuation import total_value
from kidvestor.simulation.evaluator import evaluate_performance, period_return
from kidvestor.simulation.state import SimulationState


@dataclass(frozen=True)
class DayResult:
    """What happened during one advance."""

    day: int
    snapshot: ValuationSnapshot
    daily_return: float | None
    refresh: RefreshOutcome = field(default_factory=RefreshOutcome)
    report: PerformanceReport | None = None

    @property
    def finished(self) -> bool:
        return self.report is not None


def record_valuation(state: SimulationState) -> tuple[ValuationSnapshot, float | None]:
    """Append today's snapshot and its return against the previous one."""
    snapshot = ValuationSnapshot(
        day=state.day,
        total_value=total_value(state.ledger, state.watchlist),
    )
    daily_return: float | None = None
    if state.snapshots:
        daily_return = period_return(state.snapshots[-1].total_value, snapshot.total_value)
        state.daily_returns.append(daily_return)
    state.snapshots.append(snapshot)
    return snapshot, daily_return


def advance_day(state: SimulationState, quote_source: QuoteSource) -> DayResult | None:
    """Close out the current day and move to the next.

    Before the last day this increments the counter and refreshes every
    watchlist price; refreshes settle before returning. On the last day the run
    is evaluated instead. Returns None once the run has finished.

    Raises:
        SimulationError: another advance on the same state is still running.
    """
    if state.finished:
        return None
    if state.advancing:
        raise SimulationError("Previous day is still being processed.")

    state.advancing = True
    try:
        day = state.day
        snapshot, daily_return = record_valuation(state)
        if day >= state.max_days:
            state.report = evaluate_performance(state.snapshots, state.daily_returns)
            return DayResult(
                day=day,
                snapshot=snapshot,
                daily_return=daily_return,
                report=state.report,
            )

        state.day += 1
        outcome = state.watchlist.refresh(quote_source)
        return DayResult(
            day=day,
            snapshot=snapshot,
            daily_return=daily_return,
            refresh=outcome,
        )
    finally:
        state.advancing = False
