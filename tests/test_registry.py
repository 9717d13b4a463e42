import asyncio

import pytest

from tickerdash.exceptions import ResolverUnavailable, ValidationError
from tickerdash.widgets.models import AUTO_BOTTOM, DashboardSnapshot, LayoutEntry, QuoteData, menu_entry
from tickerdash.widgets.registry import WidgetRegistry

from .conftest import make_clock


def _add(registry, symbol, compare=False):
    return asyncio.run(registry.add_ticker(symbol, compare=compare))


class TestAddTicker:
    """Test adding ticker widgets through the resolver."""

    def test_adds_widget_and_layout_entry(self, registry):
        widget = _add(registry, " aapl ")

        assert widget.symbol == "AAPL"
        assert widget.data.name == "Apple Inc."
        assert widget.id == "AAPL-1700000000000"
        assert registry.tickers == (widget,)
        assert registry.layout[-1] == LayoutEntry(widget.id, 0, AUTO_BOTTOM, 3, 2)

    def test_duplicate_symbols_get_distinct_ids(self, registry):
        first = _add(registry, "AAPL")
        second = _add(registry, "AAPL")
        assert first.id != second.id
        assert len(registry.tickers) == 2

    def test_same_millisecond_gets_suffix(self, resolver):
        registry = WidgetRegistry(resolver, clock=lambda: 1_700_000_000.0)
        ids = [_add(registry, "MSFT").id for _ in range(3)]
        assert ids == ["MSFT-1700000000000", "MSFT-1700000000000-2", "MSFT-1700000000000-3"]

    def test_empty_symbol_rejected_before_resolving(self, registry, mock_provider):
        with pytest.raises(ValidationError):
            _add(registry, "   ")
        assert mock_provider.request_count == 0
        assert registry.tickers == ()

    def test_resolver_failure_leaves_state_alone(self, registry):
        _add(registry, "AAPL")
        before = registry.snapshot()

        with pytest.raises(ResolverUnavailable):
            _add(registry, "FAILED")

        assert registry.snapshot() == before

    def test_rejected_result_adds_nothing(self, registry, mock_provider):
        seen = []

        def reject(data):
            seen.append(data.symbol)
            return False

        widget = asyncio.run(registry.add_ticker(" msft ", accept=reject))

        assert widget is None
        assert seen == ["MSFT"]
        assert mock_provider.request_count == 1
        assert registry.tickers == ()
        assert registry.layout == (menu_entry(),)

    def test_accepted_result_is_added(self, registry):
        widget = asyncio.run(registry.add_ticker("AAPL", accept=lambda data: True))
        assert registry.tickers == (widget,)

    def test_unknown_symbol_still_adds_widget(self, registry):
        widget = _add(registry, "zzzz")
        assert widget.data.name == "Unknown"
        assert widget.symbol == "ZZZZ"
        assert widget.data.is_unknown

    def test_count_invariant_across_adds_and_removes(self, registry):
        ids = [_add(registry, s).id for s in ["AAPL", "MSFT", "GOOG", "AAPL"]]
        registry.remove_widget(ids[1])
        registry.remove_widget("missing")
        registry.remove_widget(ids[3])

        assert len(registry.layout) == len(registry.tickers) + 1
        assert registry.consistency().is_consistent

    def test_explicit_placement_and_custom_size(self, resolver):
        registry = WidgetRegistry(resolver, placement="explicit", ticker_width=4, ticker_height=3, clock=make_clock())
        first = _add(registry, "AAPL")
        second = _add(registry, "MSFT")
        assert registry.layout[1] == LayoutEntry(first.id, 0, 1, 4, 3)
        assert registry.layout[2] == LayoutEntry(second.id, 0, 4, 4, 3)


class TestRemoveAndCompare:
    """Test removal and compare flag changes."""

    def test_remove_unknown_and_menu_are_noops(self, registry):
        _add(registry, "AAPL")
        before = registry.snapshot()
        assert registry.remove_widget("nope") is False
        assert registry.remove_widget("menu") is False
        assert registry.snapshot() == before

    def test_toggle_twice_is_identity(self, registry):
        widget = _add(registry, "MSFT")
        assert registry.toggle_compare(widget.id).compare is True
        assert registry.toggle_compare(widget.id).compare is False
        assert registry.get(widget.id) == widget

    def test_toggle_unknown_returns_none(self, registry):
        assert registry.toggle_compare("nope") is None
        assert registry.set_compare("nope", True) is None

    def test_set_compare_same_value_returns_same_widget(self, registry):
        widget = _add(registry, "MSFT")
        assert registry.set_compare(widget.id, False) is widget

    def test_compare_set_keeps_insertion_order(self, registry):
        a = _add(registry, "AAPL", compare=True)
        _add(registry, "MSFT")
        g = _add(registry, "GOOG")
        registry.set_compare(g.id, True)
        assert [t.id for t in registry.compare_set()] == [a.id, g.id]


class TestReplaceLayout:
    """Test accepting renderer layouts."""

    def test_replace_and_report_consistency(self, registry):
        widget = _add(registry, "AAPL")
        discrepancy = registry.replace_layout([
            {"i": "menu", "x": 0, "y": 0, "w": 2, "h": 1},
            {"i": widget.id, "x": 6, "y": 2, "w": 3, "h": 2},
        ])
        assert discrepancy.is_consistent
        assert registry.layout[1] == LayoutEntry(widget.id, 6, 2, 3, 2)

    def test_mismatch_is_accepted_not_healed(self, registry):
        _add(registry, "AAPL")
        discrepancy = registry.replace_layout([{"i": "menu", "x": 0, "y": 0, "w": 2, "h": 1}])
        assert discrepancy.missing_entries
        assert len(registry.layout) == 1

    def test_malformed_layout_changes_nothing(self, registry):
        _add(registry, "AAPL")
        before = registry.layout
        with pytest.raises(ValidationError):
            registry.replace_layout([{"i": "menu", "x": 0, "y": 0, "w": 0, "h": 1}])
        assert registry.layout == before


class TestSnapshotSeeding:
    """Test starting from a stored snapshot."""

    def test_uses_snapshot_state(self, resolver):
        quote = QuoteData(name="Apple Inc.", symbol="AAPL", price=1.0)
        registry = WidgetRegistry(resolver, clock=make_clock())
        widget = registry.insert_resolved(quote, compare=True)

        restored = WidgetRegistry(resolver, snapshot=registry.snapshot())
        assert restored.tickers == (widget,)
        assert restored.layout == registry.layout

    def test_default_snapshot(self, resolver):
        registry = WidgetRegistry(resolver, snapshot=DashboardSnapshot())
        assert registry.layout == (menu_entry(),)
