"""Order execution and pre-trade checks."""

from .engine import execute_buy, execute_sell

__all__ = ["execute_buy", "execute_sell"]
