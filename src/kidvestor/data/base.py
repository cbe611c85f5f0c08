"""Quote source contract."""

from __future__ import annotations

from typing import Protocol

from kidvestor.domain.models import SymbolMatch


class QuoteSource(Protocol):
    """Interface for symbol search and current-price lookups.

    Implementations raise `QuoteSourceError` on provider or network failure.
    """

    def search(self, keyword: str, limit: int = 5) -> list[SymbolMatch]:
        """Return up to `limit` candidates ordered by provider relevance."""

    def get_quote(self, symbol: str) -> float | None:
        """Return the current price, or None when the provider has no price."""
