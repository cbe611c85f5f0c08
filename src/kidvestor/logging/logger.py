"""Concise human-readable session logger."""

from __future__ import annotations

import logging
import os

from kidvestor.domain.models import Order, PerformanceReport, ValuationSnapshot


class HumanLogger:
    """Console logger with fixed line types."""

    def __init__(self, level: str = "INFO", log_file: str | None = None) -> None:
        self._logger = logging.getLogger("kidvestor")
        self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        self._logger.propagate = False
        formatter = logging.Formatter("%(asctime)s | %(message)s", "%Y-%m-%d %H:%M:%S")
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)
        if log_file and not self._has_file_handler(log_file):
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            self._logger.addHandler(file_handler)

    def _has_file_handler(self, log_file: str) -> bool:
        target = os.path.abspath(log_file)
        return any(
            isinstance(handler, logging.FileHandler) and handler.baseFilename == target
            for handler in self._logger.handlers
        )

    def session_started(self, session_id: str, starting_cash: float, max_days: int) -> None:
        self._logger.info(
            "session | %s | cash $%s | days %s", session_id, f"{starting_cash:,.2f}", max_days
        )

    def watch_added(self, symbol: str, name: str, price: float) -> None:
        self._logger.info("watch | %s | %s | ref $%s", symbol, name, f"{price:,.3f}")

    def order_filled(self, order: Order, cash: float) -> None:
        self._logger.info(
            "order | day %s | %s %s x %s @ $%s | amount %s | cash $%s",
            order.day,
            order.action.value,
            order.symbol,
            order.quantity,
            f"{order.price:,.3f}",
            f"{order.signed_amount:+,.2f}",
            f"{cash:,.2f}",
        )

    def order_rejected(self, side: str, symbol: str, reason: str) -> None:
        self._logger.info("rejected | %s %s | %s", side, symbol, reason)

    def day_closed(self, snapshot: ValuationSnapshot, daily_return: float | None) -> None:
        ret_text = "n/a" if daily_return is None else f"{daily_return * 100:+.3f}%"
        self._logger.info(
            "day | %s | value $%s | ret %s",
            snapshot.day,
            f"{snapshot.total_value:,.2f}",
            ret_text,
        )

    def refresh_failed(self, symbols: list[str]) -> None:
        if not symbols:
            return None
        self._logger.warning("refresh | stale prices kept for %s", ", ".join(symbols))

    def result(self, report: PerformanceReport) -> None:
        self._logger.info(
            "result | annualized %s | volatility %s | %s",
            f"{report.annualized_return * 100:+.1f}%",
            f"{report.volatility * 100:.2f}%",
            "qualifies" if report.qualifies else "needs improvement",
        )

    def error(self, message: str) -> None:
        self._logger.error("error | %s", message)
