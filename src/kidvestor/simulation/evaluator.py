"""Return and volatility evaluation for a completed simulation."""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from kidvestor.domain.models import PerformanceReport, ValuationSnapshot

MIN_ANNUALIZED_RETURN = 0.5
MAX_VOLATILITY = 0.02
PERIODS_PER_YEAR = 12


def period_return(previous_value: float, current_value: float) -> float:
    """Simple return between two values; 0.0 when the base is zero."""
    if previous_value == 0:
        return 0.0
    return (current_value - previous_value) / previous_value


def daily_returns(values: Sequence[float]) -> list[float]:
    """Consecutive simple returns, one fewer than the input values."""
    return [period_return(prev, curr) for prev, curr in zip(values, values[1:])]


def qualifies(annualized_return: float, volatility: float) -> bool:
    """Fixed pass/fail rule for a steady, profitable strategy."""
    return annualized_return >= MIN_ANNUALIZED_RETURN and volatility <= MAX_VOLATILITY


def evaluate_performance(
    snapshots: Sequence[ValuationSnapshot],
    returns: Sequence[float],
) -> PerformanceReport:
    """Annualize the run's total return and measure daily-return volatility.

    The monthly return compounds over twelve periods. Volatility is the
    population standard deviation (divisor N) of the daily returns; an empty
    return series yields zero volatility.

    Raises:
        ValueError: no snapshots were recorded.
    """
    if not snapshots:
        raise ValueError("Cannot evaluate a simulation without valuation snapshots.")

    initial_value = snapshots[0].total_value
    final_value = snapshots[-1].total_value
    monthly_return = period_return(initial_value, final_value)
    annualized_return = (1 + monthly_return) ** PERIODS_PER_YEAR - 1

    series = pd.Series(list(returns), dtype="float64")
    if series.empty:
        mean_return = 0.0
        volatility = 0.0
    else:
        mean_return = float(series.mean())
        volatility = float(series.std(ddof=0))

    return PerformanceReport(
        initial_value=initial_value,
        final_value=final_value,
        monthly_return=monthly_return,
        annualized_return=annualized_return,
        mean_daily_return=mean_return,
        volatility=volatility,
        qualifies=qualifies(annualized_return, volatility),
    )
