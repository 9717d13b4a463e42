"""
Custom exception classes for the dashboard widget engine.

This module defines specific exceptions that provide better error handling
and debugging information than generic Exception catching.
"""

from typing import Optional


class DashboardError(Exception):
    """Base exception for all dashboard errors."""
    pass


class DataProviderError(DashboardError):
    """Base exception for quote provider issues."""
    pass


class DataFetchError(DataProviderError):
    """Error occurred while fetching quote data."""

    def __init__(self, symbol: str, message: str, provider: str = "unknown"):
        self.symbol = symbol
        self.provider = provider
        super().__init__(f"Failed to fetch quote for {symbol} from {provider}: {message}")


class RateLimitError(DataProviderError):
    """API rate limit has been exceeded."""

    def __init__(self, provider: str, retry_after: Optional[int] = None):
        self.provider = provider
        self.retry_after = retry_after
        message = f"Rate limit exceeded for {provider}"
        if retry_after:
            message += f". Retry after {retry_after} seconds"
        super().__init__(message)


class ResolverUnavailable(DashboardError):
    """The quote provider could not be reached or answered with garbage."""

    def __init__(self, symbol: str, reason: str):
        self.symbol = symbol
        self.reason = reason
        super().__init__(f"Quote resolver unavailable for {symbol}: {reason}")


class PersistenceUnavailable(DashboardError):
    """The key-value storage boundary could not be read or written."""

    def __init__(self, key: str, operation: str, reason: str):
        self.key = key
        self.operation = operation
        self.reason = reason
        super().__init__(f"Storage {operation} failed for '{key}': {reason}")


class ValidationError(DashboardError):
    """Input validation failed."""

    def __init__(self, field: str, value: str, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Validation failed for {field}='{value}': {reason}")


class ConfigurationError(DashboardError):
    """Invalid configuration or setup error."""
    pass


# Convenience functions for common error scenarios

def raise_symbol_validation_error(symbol: str, reason: str) -> None:
    """Raise a validation error for an invalid ticker symbol."""
    raise ValidationError("symbol", symbol, reason)


def raise_layout_validation_error(entry: object, reason: str) -> None:
    """Raise a validation error for a malformed layout entry."""
    raise ValidationError("layout", repr(entry)[:80], reason)
