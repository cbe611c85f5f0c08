"""Custom exceptions for clearer error handling across the simulator."""


class KidVestorError(Exception):
    """Base exception for all simulator-specific errors."""


class ConfigError(KidVestorError, ValueError):
    """Raised when environment configuration is invalid or missing."""


class QuoteSourceError(KidVestorError):
    """Raised when symbol search or quote retrieval fails."""


class SimulationError(KidVestorError):
    """Raised when the day simulator is driven out of order."""


class OrderRejectedError(KidVestorError):
    """Raised when a buy or sell request fails validation.

    `reason` is a stable code (for example `insufficient_cash`) suitable for
    programmatic checks; the message is meant for the user.
    """

    def __init__(self, reason: str, message: str) -> None:
        super().__init__(message)
        self.reason = reason
