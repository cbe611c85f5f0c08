"""Watchlist of tracked symbols and their last known prices."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass, field, replace

from kidvestor.data.base import QuoteSource
from kidvestor.domain.models import WatchlistEntry
from kidvestor.errors import QuoteSourceError


@dataclass(frozen=True)
class RefreshOutcome:
    """Per-symbol result of one refresh pass."""

    refreshed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


class Watchlist:
    """Insertion-ordered set of watched symbols.

    Entries are never removed during a run; only their prices change.
    """

    def __init__(self) -> None:
        self._entries: dict[str, WatchlistEntry] = {}
        self.logger = logging.getLogger("kidvestor.market.watchlist")

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._entries

    def __iter__(self) -> Iterator[WatchlistEntry]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, symbol: str) -> WatchlistEntry | None:
        return self._entries.get(symbol)

    def symbols(self) -> list[str]:
        return list(self._entries)

    def price_of(self, symbol: str) -> float | None:
        entry = self._entries.get(symbol)
        return None if entry is None else entry.last_price

    def add(self, symbol: str, name: str, price: float) -> bool:
        """Track a symbol. Returns False when it is already watched."""
        if symbol in self._entries:
            return False
        self._entries[symbol] = WatchlistEntry(symbol=symbol, name=name, last_price=float(price))
        return True

    def apply_price(self, symbol: str, price: float) -> bool:
        """Update a watched symbol's price; unknown symbols are ignored."""
        entry = self._entries.get(symbol)
        if entry is None:
            return False
        self._entries[symbol] = replace(entry, last_price=float(price))
        return True

    def refresh(self, quote_source: QuoteSource) -> RefreshOutcome:
        """Refresh every entry in order, keeping stale prices on failure."""
        outcome = RefreshOutcome()
        for symbol in self.symbols():
            try:
                price = quote_source.get_quote(symbol)
            except QuoteSourceError as exc:
                self.logger.warning("Failed to update price for %s: %s", symbol, exc)
                outcome.failed.append(symbol)
                continue
            if price is None or not math.isfinite(price) or price <= 0:
                self.logger.warning(
                    "Price unavailable for %s (got %s); keeping %s",
                    symbol,
                    price,
                    self.price_of(symbol),
                )
                outcome.failed.append(symbol)
                continue
            self.apply_price(symbol, price)
            outcome.refreshed.append(symbol)
        return outcome
