"""
Quote resolver: the async boundary between the dashboard and a provider.

resolve() never retries and never returns a partial failure:
- provider record   -> QuoteData with absent fields set to UNKNOWN
- provider no match -> the Unknown sentinel record
- provider failure  -> ResolverUnavailable
"""

import asyncio
from collections.abc import Mapping
from typing import Any

from .providers.base import QuoteProvider
from ..config.constants import QUOTE_DEFAULTS
from ..config.logging_config import get_logger
from ..exceptions import DataProviderError, ResolverUnavailable
from ..widgets.models import UNKNOWN, Number, QuoteData, normalize_symbol

logger = get_logger(__name__)

# QuoteData attribute -> provider record key
FIELD_MAP = {
    "price": "regularMarketPrice",
    "day_high": "regularMarketDayHigh",
    "day_low": "regularMarketDayLow",
    "year_high": "fiftyTwoWeekHigh",
    "year_low": "fiftyTwoWeekLow",
}


def unknown_quote(symbol: str) -> QuoteData:
    """Sentinel record for a symbol the provider does not know."""
    return QuoteData(name=QUOTE_DEFAULTS.UNKNOWN_NAME, symbol=normalize_symbol(symbol))


def _safe_number(value: Any) -> Number:
    if value is None or isinstance(value, bool):
        return UNKNOWN
    try:
        number = float(value)
    except (TypeError, ValueError):
        return UNKNOWN
    if number != number:  # NaN
        return UNKNOWN
    return number


def quote_from_record(symbol: str, record: Mapping) -> QuoteData:
    """Map a provider record onto QuoteData."""
    record_symbol = record.get("symbol")
    display_symbol = normalize_symbol(record_symbol) if record_symbol else normalize_symbol(symbol)
    name = record.get("name") or display_symbol
    values = {attr: _safe_number(record.get(key)) for attr, key in FIELD_MAP.items()}
    return QuoteData(name=str(name), symbol=display_symbol, **values)


class QuoteResolver:
    """Resolves symbols to QuoteData through a QuoteProvider."""

    def __init__(self, provider: QuoteProvider):
        self.provider = provider

    async def resolve(self, symbol: str) -> QuoteData:
        """
        Resolve a symbol to a quote.

        The provider call is blocking network I/O, so it runs in a worker
        thread and this coroutine suspends until it finishes.

        Raises:
            ResolverUnavailable: provider unreachable or malformed response
        """
        symbol = normalize_symbol(symbol)
        try:
            record = await asyncio.to_thread(self.provider.get_quote, symbol)
        except DataProviderError as e:
            raise ResolverUnavailable(symbol, str(e)) from e
        except Exception as e:
            logger.warning(f"Unexpected provider error for {symbol}: {e}")
            raise ResolverUnavailable(symbol, f"{type(e).__name__}: {e}") from e

        if record is None:
            return unknown_quote(symbol)

        if not isinstance(record, Mapping):
            raise ResolverUnavailable(symbol, f"malformed response of type {type(record).__name__}")

        return quote_from_record(symbol, record)
