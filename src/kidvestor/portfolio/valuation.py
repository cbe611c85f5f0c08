"""Mark-to-market valuation of a ledger against a watchlist."""

from __future__ import annotations

from kidvestor.market.watchlist import Watchlist
from kidvestor.portfolio.ledger import Ledger


def current_price(symbol: str, ledger: Ledger, watchlist: Watchlist) -> float:
    """Return the watchlist price, falling back to average cost for unwatched symbols."""
    price = watchlist.price_of(symbol)
    if price is not None:
        return price
    holding = ledger.get_holding(symbol)
    return holding.average_cost if holding is not None else 0.0


def holdings_value(ledger: Ledger, watchlist: Watchlist) -> float:
    """Sum quantity times current price over all holdings."""
    market_value = 0.0
    for symbol, holding in ledger.holdings.items():
        market_value += holding.quantity * current_price(symbol, ledger, watchlist)
    return market_value


def total_value(ledger: Ledger, watchlist: Watchlist) -> float:
    """Cash plus marked holdings."""
    return ledger.cash + holdings_value(ledger, watchlist)
