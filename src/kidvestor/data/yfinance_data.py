"""Yahoo Finance quote source."""

from __future__ import annotations

import math
from typing import Any

import pandas as pd

from kidvestor.domain.models import SymbolMatch
from kidvestor.errors import QuoteSourceError


class YFinanceQuoteSource:
    """Search symbols and read latest daily closes via yfinance."""

    def __init__(self, period: str = "5d") -> None:
        self.period = period

    def search(self, keyword: str, limit: int = 5) -> list[SymbolMatch]:
        query = keyword.strip()
        if not query:
            return []
        yf = self._import_yfinance()
        try:
            quotes = yf.Search(query, max_results=limit, news_count=0).quotes
        except Exception as exc:
            raise QuoteSourceError(f"yfinance search failed for {query!r}: {exc}") from exc

        matches: list[SymbolMatch] = []
        for item in quotes or []:
            symbol = str(item.get("symbol", "")).strip()
            if not symbol:
                continue
            name = item.get("longname") or item.get("shortname") or symbol
            matches.append(SymbolMatch(symbol=symbol, name=str(name)))
            if len(matches) >= limit:
                break
        return matches

    def get_quote(self, symbol: str) -> float | None:
        yf = self._import_yfinance()
        ticker = symbol.strip().upper()
        try:
            history = yf.Ticker(ticker).history(
                period=self.period,
                interval="1d",
                auto_adjust=False,
                actions=False,
            )
        except Exception as exc:
            raise QuoteSourceError(f"yfinance request failed for {symbol}: {exc}") from exc
        return self._last_close(history)

    @staticmethod
    def _last_close(history: Any) -> float | None:
        if history is None:
            return None
        frame = pd.DataFrame(history)
        if frame.empty:
            return None
        close_column = next(
            (column for column in frame.columns if str(column).strip().lower() == "close"),
            None,
        )
        if close_column is None:
            return None
        closes = pd.to_numeric(frame[close_column], errors="coerce").dropna()
        if closes.empty:
            return None
        price = float(closes.iloc[-1])
        return price if math.isfinite(price) else None

    @staticmethod
    def _import_yfinance() -> Any:
        import yfinance as yf

        return yf
