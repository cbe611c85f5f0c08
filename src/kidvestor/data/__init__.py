"""Quote source implementations."""

from .alpha_vantage import AlphaVantageQuoteSource
from .base import QuoteSource
from .csv_data import CsvQuoteSource
from .yfinance_data import YFinanceQuoteSource

__all__ = [
    "QuoteSource",
    "AlphaVantageQuoteSource",
    "CsvQuoteSource",
    "YFinanceQuoteSource",
]
