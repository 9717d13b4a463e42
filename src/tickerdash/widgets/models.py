"""
Value types for the dashboard widget engine.

Layout entries, quote records and ticker widgets are frozen dataclasses.
Every "change" produces a new instance, which is what lets the registry
commit layout and tickers together and lets an open fullscreen view keep
the quote it was opened with.

Serialized forms:
- LayoutEntry  -> {"i", "x", "y", "w", "h"} (grid renderer convention)
- QuoteData    -> camelCase keys (dayHigh, yearLow, totalReturn, ...)
- TickerWidget -> {"id", "data", "compare"}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from ..config.constants import LAYOUT_DEFAULTS, QUOTE_DEFAULTS
from ..exceptions import ValidationError, raise_layout_validation_error

UNKNOWN = QUOTE_DEFAULTS.UNKNOWN
NOT_AVAILABLE = QUOTE_DEFAULTS.NOT_AVAILABLE
AUTO_BOTTOM = "auto-bottom"
MENU_WIDGET_ID = LAYOUT_DEFAULTS.MENU_WIDGET_ID

Number = Union[float, str]  # a float, or the UNKNOWN sentinel
Row = Union[int, str]  # an int, or the AUTO_BOTTOM sentinel


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class LayoutEntry:
    """Placement rectangle of one widget on the grid."""

    id: str
    x: int
    y: Row
    w: int
    h: int

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise_layout_validation_error(self, "widget id must be a non-empty string")
        if not _is_int(self.x) or self.x < 0:
            raise_layout_validation_error(self, "x must be an integer >= 0")
        if self.y != AUTO_BOTTOM and (not _is_int(self.y) or self.y < 0):
            raise_layout_validation_error(self, f"y must be an integer >= 0 or '{AUTO_BOTTOM}'")
        if not _is_int(self.w) or self.w < 1:
            raise_layout_validation_error(self, "w must be an integer >= 1")
        if not _is_int(self.h) or self.h < 1:
            raise_layout_validation_error(self, "h must be an integer >= 1")

    @property
    def auto_placed(self) -> bool:
        """True while the renderer still has to resolve the row."""
        return self.y == AUTO_BOTTOM

    def to_dict(self) -> Dict[str, Any]:
        return {"i": self.id, "x": self.x, "y": self.y, "w": self.w, "h": self.h}

    @classmethod
    def from_dict(cls, raw: Any) -> "LayoutEntry":
        """Parse a renderer entry. Accepts 'i' or 'id'; extra keys are ignored."""
        if isinstance(raw, LayoutEntry):
            return raw
        if not isinstance(raw, Mapping):
            raise_layout_validation_error(raw, "layout entry must be a mapping")
        widget_id = raw.get("i", raw.get("id"))
        missing = [key for key in ("x", "y", "w", "h") if key not in raw]
        if widget_id is None:
            missing.insert(0, "i")
        if missing:
            raise_layout_validation_error(raw, f"missing fields: {', '.join(missing)}")
        return cls(id=widget_id, x=raw["x"], y=raw["y"], w=raw["w"], h=raw["h"])


def normalize_symbol(symbol: str) -> str:
    """Trim and uppercase a user-entered symbol."""
    return str(symbol).strip().upper()


def menu_entry() -> LayoutEntry:
    """The fixed navigation menu placement."""
    return LayoutEntry(
        id=MENU_WIDGET_ID,
        x=LAYOUT_DEFAULTS.MENU_X,
        y=LAYOUT_DEFAULTS.MENU_Y,
        w=LAYOUT_DEFAULTS.MENU_WIDTH,
        h=LAYOUT_DEFAULTS.MENU_HEIGHT,
    )


# QuoteData field name -> serialized key
_QUOTE_KEYS: Tuple[Tuple[str, str], ...] = (
    ("name", "name"),
    ("symbol", "symbol"),
    ("price", "price"),
    ("day_high", "dayHigh"),
    ("day_low", "dayLow"),
    ("year_high", "yearHigh"),
    ("year_low", "yearLow"),
    ("total_return", "totalReturn"),
    ("price_return", "priceReturn"),
    ("nav", "nav"),
)

_KEY_BY_ATTR = dict(_QUOTE_KEYS)

PRICE_FIELDS = ("price", "day_high", "day_low", "year_high", "year_low")
RETURN_FIELDS = ("total_return", "price_return", "nav")


def _parse_number(value: Any, field_name: str) -> Number:
    if value == UNKNOWN:
        return UNKNOWN
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    raise ValidationError(field_name, repr(value), f"expected a number or '{UNKNOWN}'")


@dataclass(frozen=True)
class QuoteData:
    """Point-in-time quote for one symbol. Never refreshed after creation."""

    name: str
    symbol: str
    price: Number = UNKNOWN
    day_high: Number = UNKNOWN
    day_low: Number = UNKNOWN
    year_high: Number = UNKNOWN
    year_low: Number = UNKNOWN
    total_return: str = NOT_AVAILABLE
    price_return: str = NOT_AVAILABLE
    nav: str = NOT_AVAILABLE

    @property
    def is_unknown(self) -> bool:
        """True when no price field was resolved."""
        return all(getattr(self, name) == UNKNOWN for name in PRICE_FIELDS)

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, attr) for attr, key in _QUOTE_KEYS}

    @classmethod
    def from_dict(cls, raw: Any) -> "QuoteData":
        if not isinstance(raw, Mapping):
            raise ValidationError("data", repr(raw)[:80], "quote data must be a mapping")
        if not isinstance(raw.get("name"), str) or not isinstance(raw.get("symbol"), str):
            raise ValidationError("data", repr(raw)[:80], "name and symbol must be strings")
        values: Dict[str, Any] = {"name": raw["name"], "symbol": raw["symbol"]}
        for attr in PRICE_FIELDS:
            key = _KEY_BY_ATTR[attr]
            values[attr] = _parse_number(raw.get(key, UNKNOWN), key)
        # Return fields are placeholders in this version
        for attr in RETURN_FIELDS:
            values[attr] = NOT_AVAILABLE
        return cls(**values)


@dataclass(frozen=True)
class TickerWidget:
    """A quote card on the dashboard."""

    id: str
    data: QuoteData
    compare: bool = False

    @property
    def symbol(self) -> str:
        return self.data.symbol

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "data": self.data.to_dict(), "compare": self.compare}

    @classmethod
    def from_dict(cls, raw: Any) -> "TickerWidget":
        if not isinstance(raw, Mapping):
            raise ValidationError("ticker", repr(raw)[:80], "ticker widget must be a mapping")
        widget_id = raw.get("id")
        if not isinstance(widget_id, str) or not widget_id or widget_id == MENU_WIDGET_ID:
            raise ValidationError("ticker.id", repr(widget_id), "invalid widget id")
        compare = raw.get("compare", False)
        if not isinstance(compare, bool):
            raise ValidationError("ticker.compare", repr(compare), "compare must be a boolean")
        return cls(id=widget_id, data=QuoteData.from_dict(raw.get("data")), compare=compare)


@dataclass(frozen=True)
class DashboardSnapshot:
    """The persisted part of the dashboard: layout plus ticker widgets."""

    layout: Tuple[LayoutEntry, ...] = field(default_factory=lambda: (menu_entry(),))
    tickers: Tuple[TickerWidget, ...] = ()

    def layout_dicts(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.layout]

    def ticker_dicts(self) -> List[Dict[str, Any]]:
        return [ticker.to_dict() for ticker in self.tickers]


def parse_layout(raw_entries: Iterable[Any]) -> Tuple[LayoutEntry, ...]:
    """Parse a layout list and reject duplicate ids."""
    if isinstance(raw_entries, (str, bytes, Mapping)):
        raise ValidationError("layout", repr(raw_entries)[:80], "layout must be a list of entries")
    entries = tuple(LayoutEntry.from_dict(raw) for raw in raw_entries)
    seen = set()
    for entry in entries:
        if entry.id in seen:
            raise ValidationError("layout", entry.id, "duplicate widget id")
        seen.add(entry.id)
    return entries


def parse_tickers(raw_tickers: Iterable[Any]) -> Tuple[TickerWidget, ...]:
    """Parse a ticker list and reject duplicate ids."""
    if isinstance(raw_tickers, (str, bytes, Mapping)):
        raise ValidationError("tickers", repr(raw_tickers)[:80], "tickers must be a list")
    tickers = tuple(TickerWidget.from_dict(raw) for raw in raw_tickers)
    ids = [ticker.id for ticker in tickers]
    if len(set(ids)) != len(ids):
        raise ValidationError("tickers", ",".join(ids)[:80], "duplicate widget id")
    return tickers
