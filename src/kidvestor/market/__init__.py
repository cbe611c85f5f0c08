"""Market watchlist."""

from .watchlist import RefreshOutcome, Watchlist

__all__ = ["RefreshOutcome", "Watchlist"]
