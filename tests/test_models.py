import pytest

from tickerdash.exceptions import ValidationError
from tickerdash.widgets.models import (
    AUTO_BOTTOM,
    NOT_AVAILABLE,
    UNKNOWN,
    DashboardSnapshot,
    LayoutEntry,
    QuoteData,
    TickerWidget,
    menu_entry,
    parse_layout,
    parse_tickers,
)


class TestLayoutEntry:
    """Test layout entry validation and renderer serialization."""

    def test_serializes_with_renderer_key(self):
        entry = LayoutEntry("AAPL-1", 0, 4, 3, 2)
        assert entry.to_dict() == {"i": "AAPL-1", "x": 0, "y": 4, "w": 3, "h": 2}

    def test_parses_i_or_id_and_ignores_extra_keys(self):
        from_renderer = LayoutEntry.from_dict({"i": "a", "x": 1, "y": 2, "w": 3, "h": 4, "moved": False, "static": False})
        from_id = LayoutEntry.from_dict({"id": "a", "x": 1, "y": 2, "w": 3, "h": 4})
        assert from_renderer == from_id == LayoutEntry("a", 1, 2, 3, 4)

    def test_auto_bottom_row_is_allowed(self):
        entry = LayoutEntry("a", 0, AUTO_BOTTOM, 3, 2)
        assert entry.auto_placed
        assert not LayoutEntry("b", 0, 0, 3, 2).auto_placed

    @pytest.mark.parametrize("kwargs", [
        {"x": -1},
        {"y": -3},
        {"y": "somewhere"},
        {"w": 0},
        {"h": 0},
        {"x": 1.5},
        {"w": True},
    ])
    def test_out_of_range_values_are_rejected(self, kwargs):
        values = {"id": "a", "x": 0, "y": 0, "w": 1, "h": 1, **kwargs}
        with pytest.raises(ValidationError):
            LayoutEntry(**values)

    def test_missing_fields_are_reported(self):
        with pytest.raises(ValidationError, match="missing fields: i, h"):
            LayoutEntry.from_dict({"x": 0, "y": 0, "w": 1})

    def test_non_mapping_is_rejected(self):
        with pytest.raises(ValidationError):
            LayoutEntry.from_dict(["menu", 0, 0, 2, 1])

    def test_menu_entry_geometry(self):
        assert menu_entry() == LayoutEntry("menu", 0, 0, 2, 1)


class TestQuoteData:
    """Test quote record defaults and camelCase serialization."""

    def test_defaults_are_sentinels(self):
        quote = QuoteData(name="Unknown", symbol="ZZZZ")
        assert quote.price == UNKNOWN
        assert quote.year_low == UNKNOWN
        assert quote.total_return == NOT_AVAILABLE
        assert quote.nav == NOT_AVAILABLE
        assert quote.is_unknown

    def test_camel_case_keys(self):
        quote = QuoteData(name="Apple Inc.", symbol="AAPL", price=193.6, day_high=195.1)
        data = quote.to_dict()
        assert list(data) == [
            "name", "symbol", "price", "dayHigh", "dayLow",
            "yearHigh", "yearLow", "totalReturn", "priceReturn", "nav",
        ]
        assert data["dayHigh"] == 195.1
        assert data["priceReturn"] == NOT_AVAILABLE
        assert not quote.is_unknown

    def test_from_dict_accepts_ints_and_unknown(self):
        quote = QuoteData.from_dict({"name": "X", "symbol": "X", "price": 10, "dayHigh": "unknown"})
        assert quote.price == 10.0
        assert quote.day_high == UNKNOWN
        assert quote.year_high == UNKNOWN

    def test_from_dict_rejects_bad_numbers(self):
        with pytest.raises(ValidationError):
            QuoteData.from_dict({"name": "X", "symbol": "X", "price": "cheap"})

    def test_is_immutable(self):
        quote = QuoteData(name="X", symbol="X")
        with pytest.raises(Exception):
            quote.price = 1.0


class TestTickerWidget:
    """Test ticker widget parsing."""

    def test_round_trip_dict(self):
        widget = TickerWidget("MSFT-1", QuoteData(name="Microsoft", symbol="MSFT", price=415.3), compare=True)
        assert TickerWidget.from_dict(widget.to_dict()) == widget

    def test_menu_id_is_reserved(self):
        with pytest.raises(ValidationError):
            TickerWidget.from_dict({"id": "menu", "data": {"name": "X", "symbol": "X"}, "compare": False})

    def test_compare_must_be_boolean(self):
        with pytest.raises(ValidationError):
            TickerWidget.from_dict({"id": "X-1", "data": {"name": "X", "symbol": "X"}, "compare": "yes"})


class TestParsing:
    """Test list-level parsing helpers."""

    def test_default_snapshot(self):
        snapshot = DashboardSnapshot()
        assert snapshot.layout == (menu_entry(),)
        assert snapshot.tickers == ()

    def test_duplicate_layout_ids_rejected(self):
        with pytest.raises(ValidationError, match="duplicate"):
            parse_layout([{"i": "a", "x": 0, "y": 0, "w": 1, "h": 1}, {"i": "a", "x": 1, "y": 0, "w": 1, "h": 1}])

    def test_layout_must_be_a_list(self):
        with pytest.raises(ValidationError):
            parse_layout({"i": "a", "x": 0, "y": 0, "w": 1, "h": 1})

    def test_duplicate_ticker_ids_rejected(self):
        raw = {"id": "X-1", "data": {"name": "X", "symbol": "X"}, "compare": False}
        with pytest.raises(ValidationError):
            parse_tickers([raw, raw])
