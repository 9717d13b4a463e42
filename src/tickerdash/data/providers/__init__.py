"""
Quote provider system for the dashboard.

This package provides a common interface for fetching point-in-time quotes
from different sources (Yahoo Finance, a canned mock for tests).

Usage:
    from tickerdash.data.providers import create_provider

    provider = create_provider("yahoo")
    record = provider.get_quote("AAPL")  # mapping, or None for no match
"""

from .base import QUOTE_RECORD_FIELDS, QuoteProvider, QuoteRecord
from .yahoo_finance import YahooFinanceProvider, create_yahoo_finance_provider
from .mock_provider import MockQuoteProvider, create_mock_provider

from ...config.logging_config import get_logger
from ...exceptions import ConfigurationError

logger = get_logger(__name__)


def create_provider(name: str) -> QuoteProvider:
    """
    Create the quote provider named in the settings.

    Args:
        name: 'yahoo' or 'mock'
    """
    if name == "yahoo":
        provider: QuoteProvider = create_yahoo_finance_provider()
    elif name == "mock":
        provider = create_mock_provider()
    else:
        raise ConfigurationError(f"Unknown quote provider: {name}")

    logger.info(f"Using quote provider {provider.name}")
    return provider


__all__ = [
    'QUOTE_RECORD_FIELDS',
    'QuoteProvider',
    'QuoteRecord',
    'YahooFinanceProvider',
    'MockQuoteProvider',
    'create_provider',
    'create_yahoo_finance_provider',
    'create_mock_provider',
]
