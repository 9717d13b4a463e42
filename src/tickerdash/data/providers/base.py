"""
Base quote provider interface for the dashboard.

This module defines the abstract interface every quote source implements,
so the resolver stays provider-agnostic and tests can swap in the mock.

A provider answers one question: "what is the quote record for SYMBOL?"
- a mapping in Yahoo field naming (symbol, name, regularMarketPrice, ...)
- None when the provider is reachable but knows no such symbol
- DataFetchError / RateLimitError when the provider cannot answer
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

# Fields the resolver reads from a provider record
QUOTE_RECORD_FIELDS = (
    "symbol",
    "name",
    "regularMarketPrice",
    "regularMarketDayHigh",
    "regularMarketDayLow",
    "fiftyTwoWeekHigh",
    "fiftyTwoWeekLow",
)

QuoteRecord = Dict[str, Any]


class QuoteProvider(ABC):
    """Abstract base class for all quote providers."""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def get_quote(self, symbol: str) -> Optional[QuoteRecord]:
        """
        Get the current quote record for a symbol.

        Args:
            symbol: Normalized (trimmed, uppercase) ticker symbol

        Returns:
            Quote record, or None if the symbol is unknown to the provider

        Raises:
            DataFetchError: If the provider cannot be reached or answers badly
            RateLimitError: If the rate limit is exceeded
        """
        pass

    @abstractmethod
    def test_connection(self) -> bool:
        """
        Test if the provider is accessible.

        Returns:
            True if provider is accessible, False otherwise
        """
        pass

    def supports_feature(self, feature: str) -> bool:
        """
        Check if provider supports a specific feature.

        Args:
            feature: Feature name (e.g., 'quote', 'historical_returns')

        Returns:
            True if feature is supported
        """
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
