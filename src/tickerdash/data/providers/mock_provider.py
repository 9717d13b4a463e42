"""
Mock quote provider for testing and development.

Returns fixed, realistic-looking quotes for a handful of symbols so the
dashboard can be exercised without hitting real APIs. Some special symbols
always fail, which is how tests simulate a provider outage.
"""

import random
from typing import Dict, Iterable, List, Optional

from .base import QuoteProvider, QuoteRecord
from ...exceptions import DataFetchError, RateLimitError
from ...config.logging_config import get_logger, log_quote_fetch

logger = get_logger(__name__)

DEFAULT_FAILING_SYMBOLS = ("FAILED", "TIMEOUT", "RATE_LIMITED")


class MockQuoteProvider(QuoteProvider):
    """Mock quote provider for testing."""

    def __init__(
        self,
        failure_rate: float = 0.0,
        failing_symbols: Iterable[str] = DEFAULT_FAILING_SYMBOLS,
        seed: Optional[int] = None,
    ):
        super().__init__("mock_provider")
        self.failure_rate = failure_rate
        self.failing_symbols = set(failing_symbols)
        self.request_count = 0
        self.requested_symbols: List[str] = []
        self._random = random.Random(seed)

        # Predefined quotes for common test tickers
        self.mock_quotes: Dict[str, QuoteRecord] = {
            'AAPL': {
                'symbol': 'AAPL',
                'name': 'Apple Inc.',
                'regularMarketPrice': 193.6,
                'regularMarketDayHigh': 195.1,
                'regularMarketDayLow': 191.8,
                'fiftyTwoWeekHigh': 199.6,
                'fiftyTwoWeekLow': 164.1,
            },
            'MSFT': {
                'symbol': 'MSFT',
                'name': 'Microsoft Corporation',
                'regularMarketPrice': 415.3,
                'regularMarketDayHigh': 418.0,
                'regularMarketDayLow': 411.2,
                'fiftyTwoWeekHigh': 430.8,
                'fiftyTwoWeekLow': 309.4,
            },
            'GOOG': {
                'symbol': 'GOOG',
                'name': 'Alphabet Inc.',
                'regularMarketPrice': 141.8,
                'regularMarketDayHigh': 143.0,
                'regularMarketDayLow': 140.5,
                'fiftyTwoWeekHigh': 153.8,
                'fiftyTwoWeekLow': 102.2,
            },
            'TSLA': {
                'symbol': 'TSLA',
                'name': 'Tesla, Inc.',
                'regularMarketPrice': 248.5,
                'regularMarketDayHigh': 252.7,
                'regularMarketDayLow': 244.1,
                'fiftyTwoWeekHigh': 299.3,
                'fiftyTwoWeekLow': 152.4,
            },
            # Sparse record: no name, no 52-week range
            'SPRS': {
                'symbol': 'SPRS',
                'regularMarketPrice': 12.5,
            },
        }

    def add_quote(self, record: QuoteRecord) -> None:
        """Register or overwrite a canned quote."""
        self.mock_quotes[record['symbol']] = dict(record)

    def get_quote(self, symbol: str) -> Optional[QuoteRecord]:
        """Get a mock quote record."""
        self.request_count += 1
        self.requested_symbols.append(symbol)

        if self._should_simulate_failure(symbol):
            log_quote_fetch(logger, symbol, "failed", provider=self.name)
            if symbol == 'RATE_LIMITED':
                raise RateLimitError(self.name, retry_after=60)
            raise DataFetchError(symbol, "Simulated failure", self.name)

        record = self.mock_quotes.get(symbol)
        if record is None:
            log_quote_fetch(logger, symbol, "unknown", provider=self.name)
            return None

        log_quote_fetch(logger, symbol, "resolved", provider=self.name)
        return dict(record)

    def test_connection(self) -> bool:
        """Mock connection test (always succeeds)."""
        return True

    def supports_feature(self, feature: str) -> bool:
        """Mock provider only serves quotes."""
        return feature == 'quote'

    def _should_simulate_failure(self, symbol: str) -> bool:
        """Check if we should simulate a failure for this request."""
        if symbol in self.failing_symbols:
            return True
        return self.failure_rate > 0 and self._random.random() < self.failure_rate


def create_mock_provider(failure_rate: float = 0.0, seed: Optional[int] = None) -> MockQuoteProvider:
    """Create a configured mock provider."""
    return MockQuoteProvider(failure_rate=failure_rate, seed=seed)
