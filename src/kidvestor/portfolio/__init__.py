"""Portfolio ledger and valuation."""

from .ledger import Ledger
from .valuation import current_price, holdings_value, total_value

__all__ = ["Ledger", "current_price", "holdings_value", "total_value"]
