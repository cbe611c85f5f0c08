"""Runtime wiring and the interactive command shell."""

from __future__ import annotations

import shlex
import sys
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TextIO
from uuid import uuid4

from kidvestor.config import Settings
from kidvestor.data.alpha_vantage import AlphaVantageQuoteSource
from kidvestor.data.base import QuoteSource
from kidvestor.data.csv_data import CsvQuoteSource
from kidvestor.data.yfinance_data import YFinanceQuoteSource
from kidvestor.domain.models import SymbolMatch
from kidvestor.errors import KidVestorError, OrderRejectedError, QuoteSourceError
from kidvestor.logging.event_sink import JsonlEventSink, NullEventSink
from kidvestor.logging.logger import HumanLogger
from kidvestor.session import EventSink, TradingSession

HELP_TEXT = """Commands:
  search <keyword>        find symbols
  add <SYMBOL|#n> [name]  watch a symbol (or the n-th search result)
  buy <SYMBOL> <qty>      buy at the watchlist price
  sell <SYMBOL> <qty>     sell at the watchlist price
  next                    advance one day
  watchlist               show watched symbols
  portfolio               show holdings, cash and total value
  orders                  show order history
  history                 show daily portfolio values
  report                  show the final evaluation
  help                    show this help
  quit                    leave the simulator"""


def build_quote_source(settings: Settings) -> QuoteSource:
    """Select quote source implementation from settings."""
    if settings.quote_source == "csv":
        return CsvQuoteSource(data_dir=settings.historical_data_dir)
    if settings.quote_source == "yfinance":
        return YFinanceQuoteSource()
    return AlphaVantageQuoteSource(
        api_key=settings.alpha_vantage_key,
        timeout=settings.request_timeout_seconds,
        max_retries=settings.max_retries,
    )


def build_event_sink(settings: Settings, session_id: str) -> EventSink:
    """Journal to `<events_dir>/<session_id>/events.jsonl`, or nowhere."""
    if not settings.events_dir:
        return NullEventSink()
    return JsonlEventSink(str(Path(settings.events_dir) / session_id / "events.jsonl"))


def create_session(settings: Settings) -> TradingSession:
    """Wire a fresh session from settings."""
    session_id = uuid4().hex
    return TradingSession(
        quote_source=build_quote_source(settings),
        starting_cash=settings.starting_cash,
        max_days=settings.max_days,
        search_limit=settings.search_limit,
        human_logger=HumanLogger(level=settings.log_level, log_file=settings.log_file),
        event_sink=build_event_sink(settings, session_id),
        session_id=session_id,
    )


def run(settings: Settings, script: str | None = None) -> int:
    """Run the shell on stdin, or on the commands in `script`."""
    session = create_session(settings)
    if script is None:
        return run_shell(session, _prompt_lines(sys.stdin, sys.stdout), sys.stdout)
    with open(script, encoding="utf-8") as handle:
        return run_shell(session, handle, sys.stdout)


def run_shell(session: TradingSession, lines: Iterable[str], out: TextIO) -> int:
    """Execute shell commands until input ends or `quit` is read."""
    shell = CommandShell(session, out)
    for line in lines:
        if not shell.execute(line):
            break
    return 0


def _prompt_lines(stdin: TextIO, out: TextIO) -> Iterable[str]:
    while True:
        out.write("kidvestor> ")
        out.flush()
        line = stdin.readline()
        if not line:
            return
        yield line


class CommandShell:
    """Parse one command line at a time and print the outcome."""

    def __init__(self, session: TradingSession, out: TextIO) -> None:
        self.session = session
        self.out = out
        self._handlers: dict[str, Callable[[list[str]], None]] = {
            "search": self.search,
            "add": self.add,
            "buy": self.buy,
            "sell": self.sell,
            "next": self.advance,
            "advance": self.advance,
            "watchlist": self.show_watchlist,
            "portfolio": self.show_portfolio,
            "orders": self.show_orders,
            "history": self.show_history,
            "report": self.show_report,
            "help": self.show_help,
        }

    def execute(self, line: str) -> bool:
        """Run one command line. Returns False when the shell should stop."""
        try:
            parts = shlex.split(line)
        except ValueError as exc:
            self._print(f"Could not parse command: {exc}")
            return True
        if not parts:
            return True
        command, args = parts[0].lower(), parts[1:]
        if command in {"quit", "exit"}:
            return False
        handler = self._handlers.get(command)
        if handler is None:
            self._print(f"Unknown command '{command}'. Type 'help' for a list.")
            return True
        try:
            handler(args)
        except OrderRejectedError as exc:
            self._print(f"Order rejected: {exc}")
        except QuoteSourceError as exc:
            self._print(f"Market data error: {exc}")
        except KidVestorError as exc:
            self._print(str(exc))
        return True

    def search(self, args: list[str]) -> None:
        keyword = " ".join(args).strip()
        if not keyword:
            self._print("Usage: search <keyword>")
            return
        try:
            matches = self.session.search(keyword)
        except QuoteSourceError:
            self._print("Failed to fetch data.")
            return
        if not matches:
            self._print("No results found.")
            return
        for index, match in enumerate(matches, start=1):
            self._print(f"  #{index} {match.symbol} - {match.name}")

    def add(self, args: list[str]) -> None:
        if not args:
            self._print("Usage: add <SYMBOL|#n> [name]")
            return
        target = args[0]
        name = " ".join(args[1:]).strip() or None
        if target.startswith("#"):
            match = self._match_by_position(target)
            if match is None:
                self._print(f"No search result {target}. Run 'search' first.")
                return
            target, name = match.symbol, name or match.name
        entry = self.session.add_to_watchlist(target, name)
        self._print(f"Watching {entry.symbol} ({entry.name}) at {entry.last_price:.2f}")

    def buy(self, args: list[str]) -> None:
        symbol, quantity = self._order_args(args, "buy")
        if symbol is None:
            return
        order = self.session.buy(symbol, quantity)
        self._print(
            f"Bought {order.quantity} {order.symbol} @ {order.price:.2f}. "
            f"Cash: {self.session.ledger.cash:,.2f}"
        )

    def sell(self, args: list[str]) -> None:
        symbol, quantity = self._order_args(args, "sell")
        if symbol is None:
            return
        order = self.session.sell(symbol, quantity)
        self._print(
            f"Sold {order.quantity} {order.symbol} @ {order.price:.2f}. "
            f"Cash: {self.session.ledger.cash:,.2f}"
        )

    def advance(self, args: list[str]) -> None:
        _ = args
        result = self.session.advance_day()
        if result is None:
            self._print("The simulation is over. Type 'report' to see your results.")
            return
        self._print(f"Day {result.day} closed at {result.snapshot.total_value:,.2f}")
        if result.refresh.failed:
            self._print(f"Prices not updated for: {', '.join(result.refresh.failed)}")
        if result.report is not None:
            self._print(result.report.message)
        else:
            self._print(f"Day {self.session.day} of {self.session.state.max_days} begins.")

    def show_watchlist(self, args: list[str]) -> None:
        _ = args
        if not len(self.session.watchlist):
            self._print("Watchlist is empty. Use 'search' and 'add'.")
            return
        for entry in self.session.watchlist:
            self._print(f"  {entry.symbol:<10} {entry.last_price:>12.2f}  {entry.name}")

    def show_portfolio(self, args: list[str]) -> None:
        _ = args
        ledger = self.session.ledger
        self._print(f"  {'Symbol':<10} {'Qty':>8} {'Avg cost':>12} {'Price':>12} {'Value':>14}")
        for symbol, holding in ledger.holdings.items():
            price = self.session.current_price(symbol)
            self._print(
                f"  {symbol:<10} {holding.quantity:>8} {holding.average_cost:>12.2f} "
                f"{price:>12.2f} {holding.quantity * price:>14.2f}"
            )
        self._print(f"  {'Cash':<44} {ledger.cash:>14.2f}")
        self._print(f"  {'Total Portfolio Value':<44} {self.session.total_value():>14.2f}")

    def show_orders(self, args: list[str]) -> None:
        _ = args
        orders = self.session.ledger.order_history()
        if not orders:
            self._print("No orders yet.")
            return
        for order in orders:
            self._print(
                f"  day {order.day:>2} {order.action.value:<4} {order.symbol:<10} "
                f"{order.quantity:>6} @ {order.price:>10.2f} {order.signed_amount:>+14.2f}"
            )

    def show_history(self, args: list[str]) -> None:
        _ = args
        for snapshot in self.session.state.snapshots:
            label = "start" if snapshot.day == 0 else f"day {snapshot.day}"
            self._print(f"  {label:<8} {snapshot.total_value:>14.2f}")

    def show_report(self, args: list[str]) -> None:
        _ = args
        report = self.session.report
        if report is None:
            remaining = self.session.state.days_remaining
            self._print(f"Simulation still running: {remaining} day(s) left.")
            return
        self._print(report.message)

    def show_help(self, args: list[str]) -> None:
        _ = args
        self._print(HELP_TEXT)

    def _order_args(self, args: list[str], verb: str) -> tuple[str | None, object]:
        if len(args) != 2:
            self._print(f"Usage: {verb} <SYMBOL> <qty>")
            return None, None
        symbol, raw_qty = args
        try:
            quantity: object = int(raw_qty)
        except ValueError:
            raise OrderRejectedError(
                "invalid_quantity", "Quantity must be a positive whole number."
            ) from None
        return symbol, quantity

    def _match_by_position(self, token: str) -> SymbolMatch | None:
        try:
            position = int(token[1:])
        except ValueError:
            return None
        matches = self.session.last_matches
        if position < 1 or position > len(matches):
            return None
        return matches[position - 1]

    def _print(self, text: str) -> None:
        self.out.write(f"{text}\n")
