"""Day simulation and performance evaluation."""

from .day_simulator import DayResult, advance_day, record_valuation
from .evaluator import daily_returns, evaluate_performance, qualifies
from .state import SimulationState

__all__ = [
    "DayResult",
    "SimulationState",
    "advance_day",
    "daily_returns",
    "evaluate_performance",
    "qualifies",
    "record_valuation",
]
