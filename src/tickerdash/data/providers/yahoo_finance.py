"""
Yahoo Finance quote provider.

Implements the QuoteProvider interface on top of yfinance. Yahoo reports
an unknown symbol either with an empty info payload or with a 404; both
are mapped to "no match" (None). Everything else that goes wrong is a
DataFetchError or RateLimitError.
"""

from typing import Any, Dict, Optional

import yfinance as yf

from .base import QUOTE_RECORD_FIELDS, QuoteProvider, QuoteRecord
from ...exceptions import DataFetchError, RateLimitError
from ...config.logging_config import get_logger, log_quote_fetch

logger = get_logger(__name__)

# Yahoo keys that only appear when the symbol actually exists
_PRESENCE_KEYS = ("symbol", "regularMarketPrice", "shortName", "longName", "quoteType")


class YahooFinanceProvider(QuoteProvider):
    """Yahoo Finance quote provider implementation."""

    def __init__(self):
        super().__init__("yahoo_finance")
        self.base_url = "https://finance.yahoo.com"

    def get_quote(self, symbol: str) -> Optional[QuoteRecord]:
        """Get the quote record for symbol from Yahoo Finance."""
        try:
            info = yf.Ticker(symbol).info
        except Exception as e:
            message = str(e).lower()
            if "404" in message or "not found" in message:
                log_quote_fetch(logger, symbol, "unknown", provider=self.name)
                return None
            log_quote_fetch(logger, symbol, "failed", provider=self.name, error=str(e))
            if "rate limit" in message or "too many requests" in message:
                raise RateLimitError(self.name, retry_after=60) from e
            raise DataFetchError(symbol, str(e), self.name) from e

        if info is None:
            info = {}
        if not isinstance(info, dict):
            log_quote_fetch(logger, symbol, "failed", provider=self.name, error="non-mapping payload")
            raise DataFetchError(symbol, f"Unexpected payload type {type(info).__name__}", self.name)

        if not any(info.get(key) is not None for key in _PRESENCE_KEYS):
            log_quote_fetch(logger, symbol, "unknown", provider=self.name)
            return None

        log_quote_fetch(logger, symbol, "resolved", provider=self.name)
        return self._convert_yahoo_info(symbol, info)

    def test_connection(self) -> bool:
        """Test Yahoo Finance connectivity."""
        try:
            info = yf.Ticker("AAPL").info
            return bool(info and 'symbol' in info)
        except Exception as e:
            logger.warning(f"Yahoo Finance connection test failed: {e}")
            return False

    def supports_feature(self, feature: str) -> bool:
        """Check feature support."""
        supported_features = {
            'quote': True,
            'real_time': True,  # Delayed ~15-20 minutes
            'historical_returns': False,
        }
        return supported_features.get(feature, False)

    def _convert_yahoo_info(self, symbol: str, yahoo_info: Dict[str, Any]) -> QuoteRecord:
        """Keep only the fields the resolver reads."""
        record: QuoteRecord = {"symbol": yahoo_info.get("symbol") or symbol}
        name = yahoo_info.get("longName") or yahoo_info.get("shortName")
        if name:
            record["name"] = name

        # Yahoo sometimes only carries currentPrice for equities
        if yahoo_info.get("regularMarketPrice") is None and yahoo_info.get("currentPrice") is not None:
            record["regularMarketPrice"] = yahoo_info["currentPrice"]

        for key in QUOTE_RECORD_FIELDS:
            if key in ("symbol", "name") or key in record:
                continue
            value = yahoo_info.get(key)
            if value is not None:
                record[key] = value
        return record


# Convenience function to create and configure Yahoo Finance provider
def create_yahoo_finance_provider() -> YahooFinanceProvider:
    """Create a configured Yahoo Finance provider."""
    return YahooFinanceProvider()
