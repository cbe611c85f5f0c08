from __future__ import annotations

import pytest

from kidvestor.domain.models import SymbolMatch
from kidvestor.errors import QuoteSourceError, SimulationError
from kidvestor.execution.engine import execute_buy
from kidvestor.simulation.day_simulator import advance_day
from kidvestor.simulation.state import SimulationState


class SequenceQuoteSource:
    """Serve a fixed price path per symbol, repeating the last price."""

    def __init__(self, paths: dict[str, list[float]]) -> None:
        self.paths = paths
        self.cursor: dict[str, int] = {}

    def search(self, keyword: str, limit: int = 5) -> list[SymbolMatch]:
        _ = (keyword, limit)
        return []

    def get_quote(self, symbol: str) -> float | None:
        path = self.paths[symbol]
        index = self.cursor.get(symbol, 0)
        self.cursor[symbol] = index + 1
        return path[min(index, len(path) - 1)]


class FailingQuoteSource:
    def search(self, keyword: str, limit: int = 5) -> list[SymbolMatch]:
        raise QuoteSourceError("offline")

    def get_quote(self, symbol: str) -> float | None:
        raise QuoteSourceError("offline")


def test_start_seeds_initial_snapshot() -> None:
    state = SimulationState.start(starting_cash=100_000.0)

    assert state.day == 1
    assert len(state.snapshots) == 1
    assert state.snapshots[0].total_value == 100_000.0
    assert state.daily_returns == []
    assert state.ledger.orders == []
    assert state.finished is False


def test_start_rejects_non_positive_max_days() -> None:
    with pytest.raises(ValueError, match="max_days"):
        SimulationState.start(max_days=0)


def test_tick_records_snapshot_return_and_refreshes_prices() -> None:
    state = SimulationState.start(starting_cash=1_000.0)
    state.watchlist.add("AAA", "A", 10.0)
    execute_buy(state.ledger, "AAA", 10.0, 50, day=state.day)
    source = SequenceQuoteSource({"AAA": [12.0]})

    result = advance_day(state, source)

    assert result is not None
    assert result.day == 1
    assert result.snapshot.total_value == 1_000.0
    assert result.daily_return == 0.0
    assert result.refresh.refreshed == ["AAA"]
    assert state.day == 2
    assert state.watchlist.price_of("AAA") == 12.0

    second = advance_day(state, source)

    assert second is not None
    assert second.snapshot.total_value == 500.0 + 50 * 12.0
    assert second.daily_return == pytest.approx(0.1)


def test_full_run_produces_max_days_plus_one_snapshots() -> None:
    state = SimulationState.start(starting_cash=100_000.0, max_days=30)
    source = SequenceQuoteSource({})

    results = [advance_day(state, source) for _ in range(30)]

    assert all(result is not None for result in results)
    assert len(state.snapshots) == 31
    assert len(state.daily_returns) == 30
    assert state.finished is True
    assert results[-1].finished is True
    assert results[-1].report is state.report
    assert state.day == 30
    assert [snapshot.day for snapshot in state.snapshots] == list(range(31))


def test_advance_after_finish_is_noop() -> None:
    state = SimulationState.start(max_days=2)
    source = SequenceQuoteSource({})
    advance_day(state, source)
    advance_day(state, source)
    report = state.report

    assert advance_day(state, source) is None
    assert len(state.snapshots) == 3
    assert len(state.daily_returns) == 2
    assert state.report is report


def test_final_day_does_not_refresh_prices() -> None:
    state = SimulationState.start(max_days=1)
    state.watchlist.add("AAA", "A", 10.0)
    source = SequenceQuoteSource({"AAA": [99.0]})

    result = advance_day(state, source)

    assert result is not None
    assert result.report is not None
    assert state.watchlist.price_of("AAA") == 10.0
    assert source.cursor == {}


def test_refresh_failures_do_not_abort_advance() -> None:
    state = SimulationState.start(max_days=5)
    state.watchlist.add("AAA", "A", 10.0)
    state.watchlist.add("BBB", "B", 20.0)

    result = advance_day(state, FailingQuoteSource())

    assert result is not None
    assert result.refresh.failed == ["AAA", "BBB"]
    assert state.day == 2
    assert state.watchlist.price_of("AAA") == 10.0


def test_overlapping_advance_is_rejected() -> None:
    state = SimulationState.start(max_days=5)
    state.watchlist.add("AAA", "A", 10.0)

    class ReentrantQuoteSource:
        def search(self, keyword: str, limit: int = 5) -> list[SymbolMatch]:
            return []

        def get_quote(self, symbol: str) -> float | None:
            with pytest.raises(SimulationError, match="still being processed"):
                advance_day(state, self)
            return 11.0

    result = advance_day(state, ReentrantQuoteSource())

    assert result is not None
    assert state.day == 2
    assert state.advancing is False
    assert len(state.snapshots) == 2


def test_flat_cash_run_evaluates_to_zero_return() -> None:
    state = SimulationState.start(starting_cash=50_000.0, max_days=3)
    source = SequenceQuoteSource({})
    for _ in range(3):
        advance_day(state, source)

    assert state.report is not None
    assert state.report.annualized_return == 0.0
    assert state.report.volatility == 0.0
    assert state.report.qualifies is False


def test_infinite_quote_does_not_leak_into_valuations() -> None:
    state = SimulationState.start(starting_cash=1_000.0, max_days=3)
    state.watchlist.add("AAA", "A", 10.0)
    execute_buy(state.ledger, "AAA", 10.0, 1, state.day)
    source = SequenceQuoteSource({"AAA": [float("inf"), 10.0]})

    while advance_day(state, source) is not None:
        pass

    assert [snapshot.total_value for snapshot in state.snapshots] == [1_000.0] * 4
    assert state.report is not None
    assert state.report.volatility == 0.0
    assert state.report.mean_daily_return == 0.0
