"""Environment and CLI runtime configuration."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, replace
from typing import Self

from dotenv import load_dotenv

from kidvestor.errors import ConfigError

QUOTE_SOURCES = ("alpha_vantage", "yfinance", "csv")


def normalize_quote_source(value: str | None, default: str = "alpha_vantage") -> str:
    """Normalize quote source selector values."""
    mapping = {
        "alpha_vantage": "alpha_vantage",
        "alphavantage": "alpha_vantage",
        "alpha-vantage": "alpha_vantage",
        "av": "alpha_vantage",
        "yfinance": "yfinance",
        "yahoo": "yfinance",
        "csv": "csv",
    }
    if value is None or not value.strip():
        return default
    candidate = value.strip().lower()
    return mapping.get(candidate, candidate)


def parse_float(value: str | None, default: float, *, field_name: str) -> float:
    """Parse a float env string, naming the field on failure."""
    if value is None or not value.strip():
        return default
    try:
        return float(value.strip())
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be a number") from exc


def parse_int(value: str | None, default: int, *, field_name: str) -> int:
    """Parse an integer env string, naming the field on failure."""
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ConfigError(f"{field_name} must be an integer") from exc


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""

    alpha_vantage_key: str = ""
    quote_source: str = "alpha_vantage"
    historical_data_dir: str = "historical_data"
    starting_cash: float = 100000.0
    max_days: int = 30
    search_limit: int = 5
    request_timeout_seconds: int = 15
    max_retries: int = 3
    events_dir: str = ""
    log_level: str = "INFO"
    log_file: str | None = None

    @classmethod
    def from_env(cls) -> Self:
        """Create settings from environment variables."""
        load_dotenv()
        raw = cls(
            alpha_vantage_key=str(os.getenv("ALPHA_VANTAGE_KEY", "")).strip(),
            quote_source=normalize_quote_source(os.getenv("QUOTE_SOURCE")),
            historical_data_dir=str(os.getenv("HISTORICAL_DATA_DIR", "historical_data")).strip(),
            starting_cash=parse_float(
                os.getenv("STARTING_CASH"), 100000.0, field_name="starting_cash"
            ),
            max_days=parse_int(os.getenv("MAX_DAYS"), 30, field_name="max_days"),
            search_limit=parse_int(os.getenv("SEARCH_LIMIT"), 5, field_name="search_limit"),
            request_timeout_seconds=parse_int(
                os.getenv("REQUEST_TIMEOUT_SECONDS"), 15, field_name="request_timeout_seconds"
            ),
            max_retries=parse_int(os.getenv("MAX_RETRIES"), 3, field_name="max_retries"),
            events_dir=str(os.getenv("EVENTS_DIR", "")).strip(),
            log_level=str(os.getenv("LOG_LEVEL", "INFO")).strip().upper(),
            log_file=str(os.getenv("LOG_FILE", "")).strip() or None,
        )
        return raw.validate()

    def with_overrides(self, **kwargs: object) -> Self:
        """Return a new settings object with updated values."""
        overrides = dict(kwargs)
        source_override = overrides.get("quote_source")
        if isinstance(source_override, str):
            overrides["quote_source"] = normalize_quote_source(
                source_override, default=self.quote_source
            )
        updated = replace(self, **overrides)
        return updated.validate()

    def validate(self) -> Self:
        """Validate settings fields."""
        if self.quote_source not in QUOTE_SOURCES:
            raise ConfigError(f"quote_source must be one of {', '.join(QUOTE_SOURCES)}")
        if not math.isfinite(self.starting_cash) or self.starting_cash <= 0:
            raise ConfigError("starting_cash must be a positive number")
        if self.max_days <= 0:
            raise ConfigError("max_days must be positive")
        if self.search_limit <= 0:
            raise ConfigError("search_limit must be positive")
        if self.request_timeout_seconds <= 0:
            raise ConfigError("request_timeout_seconds must be positive")
        if self.max_retries <= 0:
            raise ConfigError("max_retries must be positive")
        return self
