"""Alpha Vantage HTTP client for symbol search and global quotes."""

from __future__ import annotations

import logging
import math
import time
from typing import Any

import requests

from kidvestor.domain.models import SymbolMatch
from kidvestor.errors import QuoteSourceError


class AlphaVantageQuoteSource:
    """Minimal Alpha Vantage client with basic retry/rate-limit handling."""

    BASE_URL = "https://www.alphavantage.co/query"
    RATE_LIMIT_KEYS = ("Note", "Information")

    def __init__(
        self,
        api_key: str,
        timeout: int = 15,
        max_retries: int = 3,
        backoff_seconds: float = 2.0,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_seconds = backoff_seconds
        self.logger = logging.getLogger("kidvestor.data.alpha_vantage")
        if not api_key:
            self.logger.warning(
                "No Alpha Vantage API key provided. Quotes will not work until "
                "ALPHA_VANTAGE_KEY is set in your .env file."
            )

    def search(self, keyword: str, limit: int = 5) -> list[SymbolMatch]:
        query = keyword.strip()
        if not query:
            return []
        payload = self._request_with_retry(
            {"function": "SYMBOL_SEARCH", "keywords": query, "apikey": self.api_key}
        )
        matches: list[SymbolMatch] = []
        for item in payload.get("bestMatches") or []:
            symbol = str(item.get("1. symbol", "")).strip()
            if not symbol:
                continue
            matches.append(SymbolMatch(symbol=symbol, name=str(item.get("2. name", "")).strip()))
            if len(matches) >= limit:
                break
        return matches

    def get_quote(self, symbol: str) -> float | None:
        payload = self._request_with_retry(
            {"function": "GLOBAL_QUOTE", "symbol": symbol.upper(), "apikey": self.api_key}
        )
        quote = payload.get("Global Quote") or {}
        return self._parse_price(quote.get("05. price"))

    @staticmethod
    def _parse_price(value: Any) -> float | None:
        if value is None:
            return None
        try:
            price = float(str(value).strip())
        except ValueError:
            return None
        if not math.isfinite(price):
            return None
        return price

    def _request_with_retry(self, params: dict[str, str]) -> dict[str, Any]:
        """Perform GET request with simple backoff on rate-limit/transient failures."""
        for attempt in range(1, self.max_retries + 1):
            try:
                response = requests.get(self.BASE_URL, params=params, timeout=self.timeout)
                response.raise_for_status()
                payload: dict[str, Any] = response.json()
            except (requests.RequestException, ValueError) as exc:
                if attempt == self.max_retries:
                    raise QuoteSourceError(
                        f"Failed to fetch data from Alpha Vantage: {exc}"
                    ) from exc
                sleep_seconds = attempt * self.backoff_seconds
                self.logger.warning(
                    "Alpha Vantage request failed (attempt %s/%s). Retrying in %ss.",
                    attempt,
                    self.max_retries,
                    sleep_seconds,
                )
                time.sleep(sleep_seconds)
                continue

            if "Error Message" in payload:
                raise QuoteSourceError(
                    f"Alpha Vantage returned an error: {payload['Error Message']}"
                )

            if any(key in payload for key in self.RATE_LIMIT_KEYS):
                # Free tier rate-limit reached. Back off and retry.
                if attempt == self.max_retries:
                    raise QuoteSourceError(
                        "Alpha Vantage rate limit reached. Try again in a minute."
                    )
                sleep_seconds = attempt * self.backoff_seconds * 7.5
                self.logger.warning(
                    "Alpha Vantage rate limit hit (attempt %s/%s). Waiting %ss.",
                    attempt,
                    self.max_retries,
                    sleep_seconds,
                )
                time.sleep(sleep_seconds)
                continue

            return payload

        raise QuoteSourceError("Exhausted retries for Alpha Vantage request.")
