"""Trading session: the context object front ends drive."""

from __future__ import annotations

import math
from typing import Any, Protocol
from uuid import uuid4

from kidvestor.data.base import QuoteSource
from kidvestor.domain.events import SimulationEvent
from kidvestor.domain.models import (
    Order,
    OrderSide,
    PerformanceReport,
    SymbolMatch,
    WatchlistEntry,
)
from kidvestor.errors import OrderRejectedError, QuoteSourceError
from kidvestor.execution.engine import execute_buy, execute_sell
from kidvestor.logging.event_sink import NullEventSink
from kidvestor.logging.logger import HumanLogger
from kidvestor.market.watchlist import Watchlist
from kidvestor.portfolio.ledger import Ledger
from kidvestor.portfolio.valuation import current_price, total_value
from kidvestor.simulation.day_simulator import DayResult, advance_day
from kidvestor.simulation.state import DEFAULT_MAX_DAYS, SimulationState


class EventSink(Protocol):
    def emit(self, event: SimulationEvent) -> None:
        """Record one event."""


class TradingSession:
    """One in-memory simulation run bound to a quote source.

    All mutation goes through this object: watchlist adds, orders and day
    advances. Several sessions can coexist; nothing is shared between them.
    """

    def __init__(
        self,
        quote_source: QuoteSource,
        starting_cash: float = 100_000.0,
        max_days: int = DEFAULT_MAX_DAYS,
        search_limit: int = 5,
        human_logger: HumanLogger | None = None,
        event_sink: EventSink | None = None,
        session_id: str | None = None,
    ) -> None:
        self.quote_source = quote_source
        self.search_limit = search_limit
        self.state = SimulationState.start(starting_cash=starting_cash, max_days=max_days)
        self.session_id = session_id or uuid4().hex
        self.human_logger = human_logger or HumanLogger()
        self.event_sink: EventSink = event_sink or NullEventSink()
        self.last_matches: list[SymbolMatch] = []

        self.human_logger.session_started(self.session_id, self.ledger.cash, max_days)
        self._emit(
            "session_started",
            {"starting_cash": self.ledger.cash, "max_days": max_days},
        )

    @property
    def ledger(self) -> Ledger:
        return self.state.ledger

    @property
    def watchlist(self) -> Watchlist:
        return self.state.watchlist

    @property
    def day(self) -> int:
        return self.state.day

    @property
    def finished(self) -> bool:
        return self.state.finished

    @property
    def report(self) -> PerformanceReport | None:
        return self.state.report

    def total_value(self) -> float:
        return total_value(self.ledger, self.watchlist)

    def current_price(self, symbol: str) -> float:
        return current_price(symbol, self.ledger, self.watchlist)

    def search(self, keyword: str) -> list[SymbolMatch]:
        """Look up candidate symbols, keeping the matches for `add #n` lookups.

        Raises:
            QuoteSourceError: the provider call failed. Previous matches are
                cleared.
        """
        self.last_matches = []
        if not keyword.strip():
            return []
        try:
            matches = self.quote_source.search(keyword, limit=self.search_limit)
        except QuoteSourceError as exc:
            self.human_logger.error(f"search {keyword!r} failed: {exc}")
            self._emit("search_failed", {"keyword": keyword, "message": str(exc)})
            raise
        self.last_matches = list(matches[: self.search_limit])
        self._emit(
            "search",
            {"keyword": keyword, "symbols": [match.symbol for match in self.last_matches]},
        )
        return list(self.last_matches)

    def add_to_watchlist(self, symbol: str, name: str | None = None) -> WatchlistEntry:
        """Quote a symbol and start tracking it; already-watched symbols are returned as is.

        Raises:
            QuoteSourceError: the quote failed or the provider has no price.
        """
        normalized = symbol.strip().upper()
        existing = self.watchlist.get(normalized)
        if existing is not None:
            return existing

        display_name = name or self._name_from_matches(normalized) or normalized
        try:
            price = self.quote_source.get_quote(normalized)
        except QuoteSourceError as exc:
            self.human_logger.error(f"quote {normalized} failed: {exc}")
            self._emit("quote_failed", {"symbol": normalized, "message": str(exc)})
            raise
        if price is None or not math.isfinite(price) or price <= 0:
            self._emit("quote_failed", {"symbol": normalized, "message": "price unavailable"})
            raise QuoteSourceError(f"Price unavailable for {normalized}")

        self.watchlist.add(normalized, display_name, price)
        self.human_logger.watch_added(normalized, display_name, price)
        self._emit("watch_added", {"symbol": normalized, "name": display_name, "price": price})
        return WatchlistEntry(symbol=normalized, name=display_name, last_price=float(price))

    def buy(self, symbol: str, quantity: object, price: float | None = None) -> Order:
        """Buy at the watchlist price unless `price` is given.

        Raises:
            OrderRejectedError: the order failed validation; nothing changed.
        """
        return self._execute(OrderSide.BUY, symbol, quantity, price)

    def sell(self, symbol: str, quantity: object, price: float | None = None) -> Order:
        """Sell at the watchlist price unless `price` is given.

        Raises:
            OrderRejectedError: the order failed validation; nothing changed.
        """
        return self._execute(OrderSide.SELL, symbol, quantity, price)

    def advance_day(self) -> DayResult | None:
        """Advance one day; returns None once the run has finished."""
        result = advance_day(self.state, self.quote_source)
        if result is None:
            return None

        self.human_logger.day_closed(result.snapshot, result.daily_return)
        self._emit(
            "day_closed",
            {
                "value": result.snapshot.total_value,
                "daily_return": result.daily_return,
                "refreshed": result.refresh.refreshed,
                "failed": result.refresh.failed,
            },
            day=result.day,
        )
        if result.refresh.failed:
            self.human_logger.refresh_failed(result.refresh.failed)
        if result.report is not None:
            self.human_logger.result(result.report)
            self._emit(
                "evaluated",
                {
                    "annualized_return": result.report.annualized_return,
                    "volatility": result.report.volatility,
                    "qualifies": result.report.qualifies,
                },
                day=result.day,
            )
        return result

    def _execute(
        self,
        side: OrderSide,
        symbol: str,
        quantity: object,
        price: float | None,
    ) -> Order:
        normalized = symbol.strip().upper()
        try:
            if self.finished:
                raise OrderRejectedError(
                    "simulation_finished", "The simulation is over; no more trading."
                )
            fill_price = price if price is not None else self._watch_price(normalized)
            if side is OrderSide.BUY:
                order = execute_buy(self.ledger, normalized, fill_price, quantity, self.day)
            else:
                order = execute_sell(self.ledger, normalized, fill_price, quantity, self.day)
        except OrderRejectedError as exc:
            self.human_logger.order_rejected(side.value, normalized, str(exc))
            self._emit(
                "order_rejected",
                {"side": side.value, "symbol": normalized, "reason": exc.reason},
            )
            raise

        self.human_logger.order_filled(order, self.ledger.cash)
        self._emit("order_filled", _order_payload(order))
        return order

    def _watch_price(self, symbol: str) -> float:
        price = self.watchlist.price_of(symbol)
        if price is None:
            raise OrderRejectedError("not_watched", f"{symbol} is not on your watchlist.")
        return price

    def _name_from_matches(self, symbol: str) -> str | None:
        for match in self.last_matches:
            if match.symbol.upper() == symbol:
                return match.name
        return None

    def _emit(self, event_type: str, payload: dict[str, Any], day: int | None = None) -> None:
        self.event_sink.emit(
            SimulationEvent(
                session_id=self.session_id,
                event_type=event_type,
                day=self.day if day is None else day,
                payload=payload,
            )
        )


def _order_payload(order: Order) -> dict[str, Any]:
    return {
        "action": order.action.value,
        "symbol": order.symbol,
        "quantity": order.quantity,
        "price": order.price,
        "signed_amount": order.signed_amount,
    }
