"""CSV-backed quote source that replays local daily bars."""

from __future__ import annotations

import math
from pathlib import Path

import pandas as pd

from kidvestor.domain.models import SymbolMatch
from kidvestor.errors import QuoteSourceError


class CsvQuoteSource:
    """Serve quotes from `<data_dir>/<SYMBOL>.csv`, one bar per request.

    Each `get_quote` call for a symbol returns the close of the next bar, so
    the watchlist add and every daily refresh walk the file forward. The last
    bar is repeated once the history is exhausted.
    """

    date_column_candidates = ("date", "datetime", "timestamp")
    close_column_candidates = ("close", "adj close", "adj_close")

    def __init__(self, data_dir: str) -> None:
        self.data_dir = Path(data_dir)
        self._closes_cache: dict[str, pd.Series] = {}
        self._cursor_by_symbol: dict[str, int] = {}

    def search(self, keyword: str, limit: int = 5) -> list[SymbolMatch]:
        query = keyword.strip().upper()
        if not query:
            return []
        if not self.data_dir.is_dir():
            raise QuoteSourceError(f"Historical data directory not found: {self.data_dir}")
        symbols = sorted({path.stem.upper() for path in self.data_dir.glob("*.csv")})
        exact = [symbol for symbol in symbols if symbol == query]
        partial = [symbol for symbol in symbols if query in symbol and symbol != query]
        return [SymbolMatch(symbol=symbol, name=symbol) for symbol in [*exact, *partial][:limit]]

    def get_quote(self, symbol: str) -> float | None:
        closes = self._load_closes(symbol)
        if closes is None:
            return None
        cursor = self._cursor_by_symbol.get(symbol, 0)
        price = float(closes.iloc[min(cursor, len(closes) - 1)])
        self._cursor_by_symbol[symbol] = min(cursor + 1, len(closes) - 1)
        return price

    def _load_closes(self, symbol: str) -> pd.Series | None:
        cached = self._closes_cache.get(symbol)
        if cached is not None:
            return cached

        path = self._resolve_path(symbol)
        if path is None:
            return None
        try:
            frame = pd.read_csv(path)
        except (
            OSError,
            UnicodeDecodeError,
            pd.errors.ParserError,
            pd.errors.EmptyDataError,
        ) as exc:
            raise QuoteSourceError(f"Failed to read {path}: {exc}") from exc
        closes = self._normalize_csv(frame, symbol)
        self._closes_cache[symbol] = closes
        return closes

    def _resolve_path(self, symbol: str) -> Path | None:
        for candidate in (
            self.data_dir / f"{symbol.upper()}.csv",
            self.data_dir / f"{symbol.lower()}.csv",
        ):
            if candidate.exists():
                return candidate
        return None

    def _normalize_csv(self, frame: pd.DataFrame, symbol: str) -> pd.Series:
        lower_to_original = {str(column).strip().lower(): column for column in frame.columns}
        date_column = self._pick_column(lower_to_original, self.date_column_candidates, symbol)
        close_column = self._pick_column(lower_to_original, self.close_column_candidates, symbol)
        try:
            index = pd.to_datetime(frame[date_column], utc=False)
        except (ValueError, TypeError) as exc:
            raise QuoteSourceError(f"{symbol}: CSV has unparsable dates: {exc}") from exc
        closes = pd.Series(
            pd.to_numeric(frame[close_column], errors="coerce").to_numpy(),
            index=index,
        )
        closes = closes.sort_index().dropna()
        closes = closes[closes.map(math.isfinite) & (closes > 0)]
        if closes.empty:
            raise QuoteSourceError(f"{symbol}: CSV has no valid close prices")
        return closes

    @staticmethod
    def _pick_column(
        lower_to_original: dict[str, str],
        candidates: tuple[str, ...],
        symbol: str,
    ) -> str:
        for candidate in candidates:
            if candidate in lower_to_original:
                return lower_to_original[candidate]
        expected = ", ".join(candidates)
        raise QuoteSourceError(f"{symbol}: CSV missing column. Expected one of: {expected}")
